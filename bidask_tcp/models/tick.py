"""
Bid/ask tick record codec.

Wire form, fields separated by a single space:

    A <exchange_id> <instrument_id> B<bid> A<ask> <volume> <tag><compact_timestamp>

Decoding is laxer than encoding: the ``B``/``A`` prefixes on bid and ask are
optional, and anything after the timestamp field is ignored.
"""

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from .errors import MissingFieldError, InvalidUtf8Error, InvalidNumberError
from .timestamp import BidAskTimestamp

BID_ASK_MARKER = ord('A')
BID_PREFIX = ord('B')
ASK_PREFIX = ord('A')
MESSAGE_SPLITTER = b" "

FIELD_NAMES = (
    "marker",
    "exchange_id",
    "instrument_id",
    "bid",
    "ask",
    "volume",
    "date_time",
)

# Separators cannot be escaped on the wire
_FORBIDDEN_TEXT_BYTES = (" ", "\r", "\n")

_FLOAT_RE = re.compile(
    r'[+-]?(?:\d+\.?\d*(?:e[+-]?\d+)?|\.\d+(?:e[+-]?\d+)?|inf|infinity|nan)',
    re.ASCII | re.IGNORECASE,
)


def format_float(value: float) -> str:
    """
    Render a float in positional notation with the shortest round-trip digits.

    Integral values lose the trailing ``.0`` and scientific notation is never
    used: 50000000.0 -> "50000000", 1e-07 -> "0.0000001".
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"

    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def parse_float(field_name: str, text: str) -> float:
    if _FLOAT_RE.fullmatch(text) is None:
        raise InvalidNumberError(field_name, text)
    return float(text)


@dataclass(frozen=True)
class BidAskTick:
    """A single bid/ask/volume quote for one instrument."""

    exchange_id: str
    instrument_id: str
    bid: float
    ask: float
    volume: float
    timestamp: BidAskTimestamp

    def validate(self) -> None:
        """Ensure text fields are non-empty and hold no separator bytes."""
        for name in ("exchange_id", "instrument_id"):
            value = getattr(self, name)
            if not value:
                raise ValueError(f"{name} must not be empty")
            for forbidden in _FORBIDDEN_TEXT_BYTES:
                if forbidden in value:
                    raise ValueError(f"{name} must not contain {forbidden!r}: {value!r}")

    def serialize(self, out) -> None:
        self.validate()

        out.write_byte(BID_ASK_MARKER)
        out.write_slice(MESSAGE_SPLITTER)
        out.write_slice(self.exchange_id.encode("utf-8"))
        out.write_slice(MESSAGE_SPLITTER)
        out.write_slice(self.instrument_id.encode("utf-8"))
        out.write_slice(MESSAGE_SPLITTER)
        out.write_byte(BID_PREFIX)
        out.write_slice(format_float(self.bid).encode("ascii"))
        out.write_slice(MESSAGE_SPLITTER)
        out.write_byte(ASK_PREFIX)
        out.write_slice(format_float(self.ask).encode("ascii"))
        out.write_slice(MESSAGE_SPLITTER)
        out.write_slice(format_float(self.volume).encode("ascii"))
        out.write_slice(MESSAGE_SPLITTER)
        self.timestamp.serialize(out)

    @classmethod
    def deserialize(cls, src: bytes) -> "BidAskTick":
        """
        Decode a delimiter-stripped tick line.

        No partial record is ever returned: the first bad field raises.

        Raises:
            MissingFieldError: fewer than seven fields
            InvalidUtf8Error: a text field is not UTF-8
            InvalidNumberError: bid, ask or volume is not a float
            SerializeError: timestamp failures, see BidAskTimestamp.deserialize
        """
        fields = bytes(src).split(MESSAGE_SPLITTER)

        exchange_id = _text_field(fields, 1)
        instrument_id = _text_field(fields, 2)
        bid = _prefixed_float_field(fields, 3, "B")
        ask = _prefixed_float_field(fields, 4, "A")
        volume = parse_float(FIELD_NAMES[5], _text_field(fields, 5))
        date_time = BidAskTimestamp.deserialize(_raw_field(fields, 6))

        return cls(
            exchange_id=exchange_id,
            instrument_id=instrument_id,
            bid=bid,
            ask=ask,
            volume=volume,
            timestamp=date_time,
        )


def _raw_field(fields: List[bytes], position: int) -> bytes:
    if position >= len(fields):
        raise MissingFieldError(FIELD_NAMES[position], position)
    return fields[position]


def _text_field(fields: List[bytes], position: int) -> str:
    raw = _raw_field(fields, position)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error(FIELD_NAMES[position], raw) from e


def _prefixed_float_field(fields: List[bytes], position: int, prefix: str) -> float:
    text = _text_field(fields, position)
    if text.startswith(prefix):
        text = text[len(prefix):]
    return parse_float(FIELD_NAMES[position], text)

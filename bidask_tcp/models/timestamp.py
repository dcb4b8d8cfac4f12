"""
Compact timestamp codec with provenance tags.

Wire form is one tag byte followed by digits only:

    S20230213142225.555   source time, millisecond fraction
    O20230213142225       our time, whole second

The instant is always UTC. Encoding formats each field explicitly as a
zero-padded integer, so the output is 14 digits or 14 digits plus ``.mmm``.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from .errors import (
    InvalidDateError,
    InvalidDateMarkerError,
    MissingDateMarkerError,
    DateSerializeError,
)

SOURCE_DATE_TIME = ord('S')
GENERATED_DATE_TIME = ord('G')
OUR_DATE_TIME = ord('O')

# YYYY MM DD HH MM SS, then an optional fraction of up to 3 digits
_COMPACT_DATE_RE = re.compile(
    r'(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})(?:\.?(\d{1,3}))?',
    re.ASCII,
)


class TimestampKind(Enum):
    """Timestamp provenance; the value is the wire tag byte."""
    SOURCE = SOURCE_DATE_TIME
    GENERATED = GENERATED_DATE_TIME
    OUR = OUR_DATE_TIME

    @property
    def marker(self) -> bytes:
        return bytes([self.value])


def to_utc(date: datetime) -> datetime:
    """Normalize to an aware UTC datetime; naive values are taken as UTC."""
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date.astimezone(timezone.utc)


def format_compact_date(date: datetime) -> str:
    """
    Format an instant as compact text.

    Sub-millisecond precision is truncated. The fraction is emitted
    whenever the instant has a sub-second component, so 999 microseconds
    still writes ``.000``.
    """
    date = to_utc(date)
    result = (
        f"{date.year:04d}{date.month:02d}{date.day:02d}"
        f"{date.hour:02d}{date.minute:02d}{date.second:02d}"
    )

    if date.microsecond:
        result += f".{date.microsecond // 1000:03d}"

    return result


def parse_compact_date(text: str) -> datetime:
    """Parse compact text into an aware UTC datetime."""
    match = _COMPACT_DATE_RE.fullmatch(text)
    if match is None:
        raise InvalidDateError(text, "expected YYYYMMDDHHMMSS with up to 3 fraction digits")

    year, month, day, hour, minute, second = (int(group) for group in match.groups()[:6])
    fraction = match.group(7) or ""
    millis = int(fraction.ljust(3, "0")) if fraction else 0

    try:
        return datetime(year, month, day, hour, minute, second, millis * 1000, tzinfo=timezone.utc)
    except ValueError as e:
        raise InvalidDateError(text, str(e)) from e


@dataclass(frozen=True)
class BidAskTimestamp:
    """A UTC instant tagged with where it came from."""

    kind: TimestampKind
    date: datetime

    def __post_init__(self):
        object.__setattr__(self, "date", to_utc(self.date))

    @classmethod
    def source(cls, date: datetime) -> "BidAskTimestamp":
        return cls(TimestampKind.SOURCE, date)

    @classmethod
    def generated(cls, date: datetime) -> "BidAskTimestamp":
        return cls(TimestampKind.GENERATED, date)

    @classmethod
    def our(cls, date: datetime) -> "BidAskTimestamp":
        return cls(TimestampKind.OUR, date)

    def serialize(self, out) -> None:
        out.write_byte(self.kind.value)
        out.write_slice(format_compact_date(self.date).encode("ascii"))

    @classmethod
    def deserialize(cls, date_data: bytes) -> "BidAskTimestamp":
        """
        Decode ``<tag><compact date>``.

        Raises:
            MissingDateMarkerError: empty input
            InvalidDateMarkerError: tag is not S, G or O
            DateSerializeError: date text is not UTF-8
            InvalidDateError: digits do not form a valid date/time
        """
        if not date_data:
            raise MissingDateMarkerError()

        marker = date_data[0]
        try:
            kind = TimestampKind(marker)
        except ValueError:
            raise InvalidDateMarkerError(marker) from None

        try:
            text = date_data[1:].decode("utf-8")
        except UnicodeDecodeError as e:
            raise DateSerializeError(bytes(date_data[1:])) from e

        return cls(kind, parse_compact_date(text))

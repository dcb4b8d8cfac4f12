"""
Bid/ask wire protocol message models.
"""

from .errors import (
    SerializeErrorKind,
    BidAskTcpError,
    SerializeError,
    MissingFieldError,
    InvalidUtf8Error,
    InvalidNumberError,
    InvalidDateMarkerError,
    MissingDateMarkerError,
    InvalidDateError,
    DateSerializeError,
    TransportError,
    MessageTooLargeError,
    ConnectionClosedError,
    BidAskConnectionError,
)
from .timestamp import (
    TimestampKind,
    BidAskTimestamp,
    format_compact_date,
    parse_compact_date,
    SOURCE_DATE_TIME,
    GENERATED_DATE_TIME,
    OUR_DATE_TIME,
)
from .tick import BidAskTick, format_float, MESSAGE_SPLITTER
from .message import BidAskMessage, MessageKind

__all__ = [
    'SerializeErrorKind',
    'BidAskTcpError',
    'SerializeError',
    'MissingFieldError',
    'InvalidUtf8Error',
    'InvalidNumberError',
    'InvalidDateMarkerError',
    'MissingDateMarkerError',
    'InvalidDateError',
    'DateSerializeError',
    'TransportError',
    'MessageTooLargeError',
    'ConnectionClosedError',
    'BidAskConnectionError',
    'TimestampKind',
    'BidAskTimestamp',
    'format_compact_date',
    'parse_compact_date',
    'SOURCE_DATE_TIME',
    'GENERATED_DATE_TIME',
    'OUR_DATE_TIME',
    'BidAskTick',
    'format_float',
    'MESSAGE_SPLITTER',
    'BidAskMessage',
    'MessageKind',
]

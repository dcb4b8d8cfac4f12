"""
Bid/ask TCP protocol exceptions

Every decode failure keeps its specific kind all the way to the caller.
Transport code decides whether to drop the message, close the connection,
or log and continue.
"""

from enum import Enum
from typing import Optional, Any, Dict


class SerializeErrorKind(str, Enum):
    """Kinds of message decode failures."""
    MISSING_FIELD = "MissingField"
    INVALID_UTF8 = "InvalidUtf8"
    INVALID_NUMBER = "InvalidNumber"
    INVALID_DATE_MARKER = "InvalidDateMarker"
    MISSING_DATE_MARKER = "MissingDateMarker"
    INVALID_DATE = "InvalidDate"
    DATE_SERIALIZE_ERROR = "DateSerializeError"


class BidAskTcpError(Exception):
    """Base exception for all bid/ask protocol errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 recovery_hint: Optional[str] = None):
        """
        Initialize error with detailed context.

        Args:
            message: Human-readable error description
            details: Additional context for debugging
            recovery_hint: Suggested recovery action
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        result = self.message

        if self.details:
            result += f" (details: {self.details})"

        if self.recovery_hint:
            result += f" [recovery: {self.recovery_hint}]"

        return result


class SerializeError(BidAskTcpError, ValueError):
    """
    Raised when a payload cannot be decoded into a message.

    ``payload`` is the rejected frame without its delimiter, filled in by
    the serializer that read it; None when decoding was called directly.
    """

    kind: SerializeErrorKind

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.payload: Optional[bytes] = None


class MissingFieldError(SerializeError):
    """Fewer than seven positional fields in a tick record."""

    kind = SerializeErrorKind.MISSING_FIELD

    def __init__(self, field_name: str, position: int):
        super().__init__(
            f"Missing field '{field_name}' at position {position}",
            {"field": field_name, "position": position},
        )
        self.field_name = field_name
        self.position = position


class InvalidUtf8Error(SerializeError):
    """A text field is not valid UTF-8."""

    kind = SerializeErrorKind.INVALID_UTF8

    def __init__(self, field_name: str, raw: bytes):
        super().__init__(
            f"Field '{field_name}' is not valid UTF-8",
            {"field": field_name, "raw": raw},
        )
        self.field_name = field_name
        self.raw = raw


class InvalidNumberError(SerializeError):
    """bid, ask or volume failed float parsing."""

    kind = SerializeErrorKind.INVALID_NUMBER

    def __init__(self, field_name: str, value: str):
        super().__init__(
            f"Field '{field_name}' is not a valid number: {value!r}",
            {"field": field_name, "value": value},
        )
        self.field_name = field_name
        self.value = value


class InvalidDateMarkerError(SerializeError):
    """Unrecognized timestamp provenance tag."""

    kind = SerializeErrorKind.INVALID_DATE_MARKER

    def __init__(self, marker: int):
        super().__init__(
            f"Invalid date marker: {bytes([marker])!r}",
            {"marker": marker},
        )
        self.marker = marker


class MissingDateMarkerError(SerializeError):
    """Timestamp field is empty."""

    kind = SerializeErrorKind.MISSING_DATE_MARKER

    def __init__(self):
        super().__init__("Missing date marker")


class InvalidDateError(SerializeError):
    """Compact timestamp digits do not form a valid date/time."""

    kind = SerializeErrorKind.INVALID_DATE

    def __init__(self, value: str, reason: Optional[str] = None):
        details = {"value": value}
        if reason:
            details["reason"] = reason
        super().__init__(f"Invalid date: {value!r}", details)
        self.value = value


class DateSerializeError(SerializeError):
    """Compact timestamp text is not valid UTF-8."""

    kind = SerializeErrorKind.DATE_SERIALIZE_ERROR

    def __init__(self, raw: bytes):
        super().__init__("Date is not valid UTF-8", {"raw": raw})
        self.raw = raw


class TransportError(BidAskTcpError):
    """Base class for stream-level failures."""


class MessageTooLargeError(TransportError):
    """Incoming message exceeded the read buffer capacity before a delimiter."""

    def __init__(self, capacity: int):
        super().__init__(
            f"Message exceeds read buffer capacity of {capacity} bytes",
            {"capacity": capacity},
            recovery_hint="Increase read_buffer_size or check the producer for a missing delimiter",
        )
        self.capacity = capacity


class ConnectionClosedError(TransportError):
    """Peer closed the stream before a complete message arrived."""

    def __init__(self, partial: bytes = b""):
        super().__init__(
            "Connection closed by peer",
            {"partial_bytes": len(partial)} if partial else None,
        )
        self.partial = partial


class BidAskConnectionError(TransportError):
    """Raised when a feed connection cannot be established."""

    def __init__(self, message: str, host: str, port: int,
                 underlying_error: Optional[Exception] = None):
        details = {
            "host": host,
            "port": port,
            "underlying_error": str(underlying_error) if underlying_error else None,
        }
        super().__init__(
            message,
            details,
            recovery_hint=f"Check that the feed is listening on {host}:{port}",
        )
        self.host = host
        self.port = port
        self.underlying_error = underlying_error

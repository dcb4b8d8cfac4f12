"""
bidask-tcp - Line-delimited bid/ask tick wire protocol

This package provides:
- The message codec (PING, PONG and bid/ask ticks) with typed decode errors
- Compact timestamp encoding with source/generated/our provenance tags
- A CR LF framing serializer owning a per-connection read buffer
- An asyncio client connection with keepalive handling
- Configuration, logging and CLI helpers
"""

from .models import (
    BidAskMessage,
    MessageKind,
    BidAskTick,
    BidAskTimestamp,
    TimestampKind,
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
    format_compact_date,
    parse_compact_date,
)
from .buffers import ByteWriteBuffer, ReadBuffer, read_until_end_marker
from .serializer import BidAskTcpSerializer, CL_CR
from .connection import BidAskTcpConnection, open_connection, connect_with_retry
from .config import BidAskTcpConfig, ParseErrorPolicy, load_config
from .error_handler import handle_parse_error, get_error_description, is_timestamp_error
from .logging_config import configure_logging, configure_service_logging, configure_cli_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    'BidAskMessage',
    'MessageKind',
    'BidAskTick',
    'BidAskTimestamp',
    'TimestampKind',
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
    'format_compact_date',
    'parse_compact_date',
    'ByteWriteBuffer',
    'ReadBuffer',
    'read_until_end_marker',
    'BidAskTcpSerializer',
    'CL_CR',
    'BidAskTcpConnection',
    'open_connection',
    'connect_with_retry',
    'BidAskTcpConfig',
    'ParseErrorPolicy',
    'load_config',
    'handle_parse_error',
    'get_error_description',
    'is_timestamp_error',
    'configure_logging',
    'configure_service_logging',
    'configure_cli_logging',
    'get_logger',
]

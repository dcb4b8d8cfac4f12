"""
Standardized handling of bid/ask decode errors

Codec functions only raise. This module holds the transport-side policy of
logging a failed message with its specific kind and reporting it to an
optional callback.
"""

import logging
from typing import Optional, Callable, Any

from .models.errors import SerializeError, SerializeErrorKind

TIMESTAMP_ERROR_KINDS = frozenset([
    SerializeErrorKind.INVALID_DATE_MARKER,
    SerializeErrorKind.MISSING_DATE_MARKER,
    SerializeErrorKind.INVALID_DATE,
    SerializeErrorKind.DATE_SERIALIZE_ERROR,
])

_ERROR_DESCRIPTIONS = {
    SerializeErrorKind.MISSING_FIELD: "Tick record has fewer than 7 fields",
    SerializeErrorKind.INVALID_UTF8: "Text field is not valid UTF-8",
    SerializeErrorKind.INVALID_NUMBER: "Bid, ask or volume is not a valid number",
    SerializeErrorKind.INVALID_DATE_MARKER: "Unknown timestamp provenance tag",
    SerializeErrorKind.MISSING_DATE_MARKER: "Timestamp field is empty",
    SerializeErrorKind.INVALID_DATE: "Timestamp digits are not a valid date/time",
    SerializeErrorKind.DATE_SERIALIZE_ERROR: "Timestamp text is not valid UTF-8",
}


def handle_parse_error(
    error: SerializeError,
    logger: logging.Logger,
    raw: Optional[bytes] = None,
    error_callback: Optional[Callable[[str, str], Any]] = None
) -> None:
    """
    Log a decode failure and report it

    Args:
        error: The decode failure
        logger: Logger instance to use
        raw: Offending payload, logged at debug level
        error_callback: Optional callback with (error_kind, error_message) signature
    """
    kind = error.kind
    error_msg = f"{kind.value}: {error.message}"

    if is_timestamp_error(kind):
        # Feed is usable, the producer clock or tagging is off
        logger.warning(error_msg)
    else:
        logger.error(error_msg)

    if raw is not None:
        logger.debug("Rejected payload: %r", raw)

    if error_callback:
        try:
            error_callback(kind.value, error_msg)
        except Exception as e:
            logger.error("Exception in parse error callback: %s", e)


def get_error_description(kind: SerializeErrorKind) -> str:
    """Human-readable description of a decode error kind"""
    return _ERROR_DESCRIPTIONS.get(kind, f"Unknown error kind {kind}")


def is_timestamp_error(kind: SerializeErrorKind) -> bool:
    """True when the failure is confined to the timestamp field"""
    return kind in TIMESTAMP_ERROR_KINDS

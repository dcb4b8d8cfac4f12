"""Tests for decode error handling policy."""

import logging
import pytest

from bidask_tcp.error_handler import handle_parse_error, get_error_description, is_timestamp_error
from bidask_tcp.models.errors import (
    SerializeErrorKind,
    InvalidNumberError,
    InvalidDateMarkerError,
    MissingFieldError,
)

logger = logging.getLogger("tests.error_handler")


class TestHandleParseError:
    """Test logging and callback reporting."""

    def test_callback_receives_specific_kind(self):
        calls = []
        error = InvalidNumberError("bid", "xx")

        handle_parse_error(error, logger, error_callback=lambda kind, msg: calls.append((kind, msg)))

        assert len(calls) == 1
        kind, message = calls[0]
        assert kind == "InvalidNumber"
        assert "bid" in message

    def test_field_errors_log_at_error(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="tests.error_handler"):
            handle_parse_error(MissingFieldError("volume", 5), logger, raw=b"A X Y B1 A2")

        levels = [record.levelno for record in caplog.records]
        assert logging.ERROR in levels
        assert any("A X Y B1 A2" in record.getMessage() for record in caplog.records)

    def test_timestamp_errors_log_at_warning(self, caplog):
        with caplog.at_level(logging.INFO, logger="tests.error_handler"):
            handle_parse_error(InvalidDateMarkerError(ord("X")), logger)

        assert [record.levelno for record in caplog.records] == [logging.WARNING]
        assert "InvalidDateMarker" in caplog.records[0].getMessage()

    def test_callback_failure_is_logged(self, caplog):
        def broken(kind, msg):
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="tests.error_handler"):
            handle_parse_error(InvalidNumberError("ask", "?"), logger, error_callback=broken)

        assert any("boom" in record.getMessage() for record in caplog.records)


class TestErrorClassification:
    """Test error kind helpers."""

    @pytest.mark.parametrize("kind", list(SerializeErrorKind))
    def test_every_kind_has_description(self, kind):
        assert not get_error_description(kind).startswith("Unknown")

    @pytest.mark.parametrize("kind,expected", [
        (SerializeErrorKind.INVALID_DATE_MARKER, True),
        (SerializeErrorKind.MISSING_DATE_MARKER, True),
        (SerializeErrorKind.INVALID_DATE, True),
        (SerializeErrorKind.DATE_SERIALIZE_ERROR, True),
        (SerializeErrorKind.MISSING_FIELD, False),
        (SerializeErrorKind.INVALID_UTF8, False),
        (SerializeErrorKind.INVALID_NUMBER, False),
    ])
    def test_is_timestamp_error(self, kind, expected):
        assert is_timestamp_error(kind) is expected

    def test_errors_are_value_errors(self):
        assert isinstance(InvalidNumberError("bid", "x"), ValueError)

    def test_str_includes_details(self):
        assert "position" in str(MissingFieldError("bid", 3))

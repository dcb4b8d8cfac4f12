"""Tests for the CR LF framing serializer."""

import asyncio
import pytest

from bidask_tcp.buffers import ByteWriteBuffer
from bidask_tcp.models.errors import (
    SerializeErrorKind,
    InvalidDateMarkerError,
    InvalidNumberError,
    MessageTooLargeError,
    ConnectionClosedError,
)
from bidask_tcp.models.message import BidAskMessage
from bidask_tcp.serializer import BidAskTcpSerializer, CL_CR


def make_reader(*chunks: bytes) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    for chunk in chunks:
        reader.feed_data(chunk)
    reader.feed_eof()
    return reader


class TestSerialize:
    """Test the write path."""

    def setup_method(self):
        """Setup for each test."""
        self.serializer = BidAskTcpSerializer()

    def test_delimiter(self):
        assert CL_CR == b"\r\n"

    def test_ping(self):
        assert self.serializer.to_bytes(BidAskMessage.PING) == b"PING\r\n"

    def test_tick(self, canonical_tick, canonical_payload):
        message = BidAskMessage.bid_ask(canonical_tick)
        assert self.serializer.to_bytes(message) == canonical_payload + b"\r\n"

    def test_appends_to_given_buffer(self):
        out = ByteWriteBuffer(b"PONG\r\n")
        result = self.serializer.serialize(BidAskMessage.PING, out)
        assert result is out
        assert out.getvalue() == b"PONG\r\nPING\r\n"

    def test_creates_buffer_when_omitted(self):
        out = self.serializer.serialize(BidAskMessage.PONG)
        assert out.getvalue() == b"PONG\r\n"

    def test_get_ping(self):
        assert self.serializer.get_ping() is BidAskMessage.PING

    def test_parse_frame(self, canonical_payload, canonical_tick):
        assert self.serializer.parse_frame(b"PING\r\n") is BidAskMessage.PING
        assert self.serializer.parse_frame(canonical_payload + b"\r\n").tick == canonical_tick

    def test_read_buffer_is_per_instance(self):
        other = BidAskTcpSerializer()
        assert other.read_buffer is not self.serializer.read_buffer
        assert self.serializer.read_buffer.capacity == 24 * 1024


class TestDeserialize:
    """Test the read path."""

    @pytest.mark.asyncio
    async def test_reads_messages_in_order(self, canonical_payload, canonical_tick):
        serializer = BidAskTcpSerializer()
        reader = make_reader(b"PING\r\n" + canonical_payload[:10], canonical_payload[10:] + b"\r\nPONG\r\n")

        assert (await serializer.deserialize(reader)).is_ping()
        assert (await serializer.deserialize(reader)).tick == canonical_tick
        assert (await serializer.deserialize(reader)).is_pong()

        with pytest.raises(ConnectionClosedError):
            await serializer.deserialize(reader)

    @pytest.mark.asyncio
    async def test_specific_error_kind_is_preserved(self):
        serializer = BidAskTcpSerializer()
        reader = make_reader(
            b"A BINANCE EURUSD B1 A2 3 X20230213142225\r\n"
            b"A BINANCE EURUSD Bxx A2 3 S20230213142225\r\n"
            b"PONG\r\n"
        )

        with pytest.raises(InvalidDateMarkerError) as exc_info:
            await serializer.deserialize(reader)
        assert exc_info.value.kind == SerializeErrorKind.INVALID_DATE_MARKER

        with pytest.raises(InvalidNumberError):
            await serializer.deserialize(reader)

        assert (await serializer.deserialize(reader)).is_pong()

    @pytest.mark.asyncio
    async def test_error_carries_rejected_frame(self):
        serializer = BidAskTcpSerializer()
        reader = make_reader(b"A BINANCE EURUSD Bxx A2 3 S20230213142225\r\n")

        with pytest.raises(InvalidNumberError) as exc_info:
            await serializer.deserialize(reader)
        assert exc_info.value.payload == b"A BINANCE EURUSD Bxx A2 3 S20230213142225"

    def test_direct_parse_error_has_no_payload(self):
        with pytest.raises(InvalidNumberError) as exc_info:
            BidAskTcpSerializer().parse_frame(b"A BINANCE EURUSD Bxx A2 3 S20230213142225\r\n")
        assert exc_info.value.payload is None

    @pytest.mark.asyncio
    async def test_four_byte_frame_with_delimiter(self):
        serializer = BidAskTcpSerializer()
        reader = make_reader(b"PONG\r\n")
        assert (await serializer.deserialize(reader)) is BidAskMessage.PONG

    @pytest.mark.asyncio
    async def test_oversized_message(self):
        serializer = BidAskTcpSerializer(read_buffer_size=32)
        reader = make_reader(b"A" * 64 + b"\r\n")

        with pytest.raises(MessageTooLargeError):
            await serializer.deserialize(reader)

    @pytest.mark.asyncio
    async def test_delimiter_not_counted_against_buffer_size(self):
        serializer = BidAskTcpSerializer(read_buffer_size=5)
        reader = make_reader(b"PING\r\n")
        assert (await serializer.deserialize(reader)) is BidAskMessage.PING

    @pytest.mark.asyncio
    async def test_message_exactly_buffer_size(self):
        serializer = BidAskTcpSerializer(read_buffer_size=4)
        reader = make_reader(b"PONG\r\nPING\r\n")
        assert (await serializer.deserialize(reader)) is BidAskMessage.PONG
        assert (await serializer.deserialize(reader)) is BidAskMessage.PING

"""Tests for read and write buffers."""

import asyncio
import pytest

from bidask_tcp.buffers import ByteWriteBuffer, ReadBuffer, read_until_end_marker
from bidask_tcp.models.errors import MessageTooLargeError, ConnectionClosedError


class TestByteWriteBuffer:
    """Test the in-memory write target."""

    def test_write(self):
        out = ByteWriteBuffer()
        out.write_byte(ord("A"))
        out.write_slice(b" BC")
        assert out.getvalue() == b"A BC"
        assert bytes(out) == b"A BC"
        assert len(out) == 4

    def test_initial_and_clear(self):
        out = ByteWriteBuffer(b"xy")
        out.write_slice(b"z")
        assert out.getvalue() == b"xyz"
        out.clear()
        assert out.getvalue() == b""


class TestReadBuffer:
    """Test the bounded scratch buffer."""

    def test_take_until(self):
        buffer = ReadBuffer(64)
        buffer.feed(b"PING\r\nPON")
        assert buffer.take_until(b"\r\n") == b"PING\r\n"
        assert buffer.take_until(b"\r\n") is None
        assert buffer.pending == 3
        buffer.feed(b"G\r\n")
        assert buffer.take_until(b"\r\n") == b"PONG\r\n"
        assert buffer.pending == 0

    def test_capacity(self):
        buffer = ReadBuffer(4)
        buffer.feed(b"abcd")
        assert buffer.free == 0
        with pytest.raises(MessageTooLargeError) as exc_info:
            buffer.feed(b"e")
        assert exc_info.value.capacity == 4

    def test_reserve_extends_scratch_not_capacity(self):
        buffer = ReadBuffer(4, reserve=2)
        assert buffer.capacity == 4
        assert buffer.limit == 6
        buffer.feed(b"PING\r\n")
        assert buffer.free == 0
        with pytest.raises(MessageTooLargeError) as exc_info:
            buffer.feed(b"x")
        assert exc_info.value.capacity == 4

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            ReadBuffer(0)
        with pytest.raises(ValueError):
            ReadBuffer(4, reserve=-1)

    def test_drain(self):
        buffer = ReadBuffer(16)
        buffer.feed(b"partial")
        assert buffer.drain() == b"partial"
        assert buffer.pending == 0


class TestReadUntilEndMarker:
    """Test framed reads from a stream."""

    @pytest.mark.asyncio
    async def test_reads_split_frames(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"PING\r\nPO")
        reader.feed_data(b"NG\r\n")
        reader.feed_eof()
        buffer = ReadBuffer(64)

        assert await read_until_end_marker(reader, buffer, b"\r\n") == b"PING\r\n"
        assert await read_until_end_marker(reader, buffer, b"\r\n") == b"PONG\r\n"

        with pytest.raises(ConnectionClosedError) as exc_info:
            await read_until_end_marker(reader, buffer, b"\r\n")
        assert exc_info.value.partial == b""

    @pytest.mark.asyncio
    async def test_partial_message_at_eof(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"A BINANCE")
        reader.feed_eof()

        with pytest.raises(ConnectionClosedError) as exc_info:
            await read_until_end_marker(reader, ReadBuffer(64), b"\r\n")
        assert exc_info.value.partial == b"A BINANCE"

    @pytest.mark.asyncio
    async def test_oversized_message(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"x" * 32)
        reader.feed_eof()

        with pytest.raises(MessageTooLargeError):
            await read_until_end_marker(reader, ReadBuffer(16), b"\r\n")

    @pytest.mark.asyncio
    async def test_message_filling_buffer_exactly(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"PING\r\n")
        reader.feed_eof()

        assert await read_until_end_marker(reader, ReadBuffer(6), b"\r\n") == b"PING\r\n"

    @pytest.mark.asyncio
    async def test_message_at_capacity_with_delimiter_reserve(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"PING\r\n")
        reader.feed_eof()

        buffer = ReadBuffer(4, reserve=2)
        assert await read_until_end_marker(reader, buffer, b"\r\n") == b"PING\r\n"

    @pytest.mark.asyncio
    async def test_message_below_capacity_with_delimiter_reserve(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"PING\r\n")
        reader.feed_eof()

        buffer = ReadBuffer(5, reserve=2)
        assert await read_until_end_marker(reader, buffer, b"\r\n") == b"PING\r\n"

    @pytest.mark.asyncio
    async def test_message_one_over_capacity_with_delimiter_reserve(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"PINGX\r\n")
        reader.feed_eof()

        with pytest.raises(MessageTooLargeError) as exc_info:
            await read_until_end_marker(reader, ReadBuffer(4, reserve=2), b"\r\n")
        assert exc_info.value.capacity == 4

    @pytest.mark.asyncio
    async def test_delimiter_split_across_reads_at_capacity(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"PING\r")
        reader.feed_data(b"\nPONG\r\n")
        reader.feed_eof()
        buffer = ReadBuffer(4, reserve=2)

        assert await read_until_end_marker(reader, buffer, b"\r\n") == b"PING\r\n"
        assert await read_until_end_marker(reader, buffer, b"\r\n") == b"PONG\r\n"

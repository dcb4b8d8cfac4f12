"""
Read and write buffers used by the bid/ask serializer.

The write side is anything exposing ``write_slice`` and ``write_byte``.
The read side is a bounded scratch buffer owned by exactly one connection;
it is reused across successive reads and never shared.
"""

import logging
from typing import Optional, Protocol

from .models.errors import MessageTooLargeError, ConnectionClosedError

logger = logging.getLogger(__name__)

DEFAULT_READ_BUFFER_SIZE = 1024 * 24


class WriteBuffer(Protocol):
    """Write target for message serialization."""

    def write_slice(self, data: bytes) -> None:
        ...

    def write_byte(self, value: int) -> None:
        ...


class SocketReader(Protocol):
    """Anything that can hand out raw bytes, e.g. ``asyncio.StreamReader``."""

    async def read(self, n: int = -1) -> bytes:
        ...


class ByteWriteBuffer:
    """Growable in-memory write buffer."""

    def __init__(self, initial: bytes = b""):
        self._data = bytearray(initial)

    def write_slice(self, data: bytes) -> None:
        self._data.extend(data)

    def write_byte(self, value: int) -> None:
        self._data.append(value)

    def clear(self) -> None:
        self._data.clear()

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return self.getvalue()


class ReadBuffer:
    """
    Bounded scratch buffer for delimiter-framed input.

    Bytes read past a delimiter are kept for the next call, so one instance
    must stay with one connection for its whole lifetime.

    ``capacity`` bounds the message itself. ``reserve`` extra bytes of
    scratch hold the delimiter, so a message of exactly ``capacity`` bytes
    still fits together with its terminator.
    """

    def __init__(self, capacity: int = DEFAULT_READ_BUFFER_SIZE, reserve: int = 0):
        if capacity <= 0:
            raise ValueError(f"Read buffer capacity must be positive, got: {capacity}")
        if reserve < 0:
            raise ValueError(f"Read buffer reserve cannot be negative, got: {reserve}")
        self.capacity = capacity
        self.reserve = reserve
        self._data = bytearray()

    @property
    def limit(self) -> int:
        """Total scratch size, message capacity plus delimiter reserve."""
        return self.capacity + self.reserve

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet handed out."""
        return len(self._data)

    @property
    def free(self) -> int:
        return self.limit - len(self._data)

    def feed(self, data: bytes) -> None:
        if len(self._data) + len(data) > self.limit:
            raise MessageTooLargeError(self.capacity)
        self._data.extend(data)

    def take_until(self, end_marker: bytes) -> Optional[bytes]:
        """
        Remove and return everything up to and including ``end_marker``.

        Returns None when no complete message is buffered yet.
        """
        index = self._data.find(end_marker)
        if index < 0:
            return None

        end = index + len(end_marker)
        chunk = bytes(self._data[:end])
        del self._data[:end]
        return chunk

    def drain(self) -> bytes:
        """Remove and return all pending bytes."""
        data = bytes(self._data)
        self._data.clear()
        return data

    def clear(self) -> None:
        self._data.clear()


async def read_until_end_marker(socket_reader: SocketReader, read_buffer: ReadBuffer,
                                end_marker: bytes) -> bytes:
    """
    Read from ``socket_reader`` until ``end_marker`` shows up in ``read_buffer``.

    Only the bytes before ``end_marker`` count against the buffer capacity
    when the buffer was built with ``reserve=len(end_marker)``.

    Args:
        socket_reader: Source of raw bytes
        read_buffer: Connection-owned scratch buffer
        end_marker: Frame delimiter

    Returns:
        One chunk including the trailing ``end_marker``

    Raises:
        MessageTooLargeError: buffer filled up without a delimiter
        ConnectionClosedError: reader hit EOF first
    """
    while True:
        chunk = read_buffer.take_until(end_marker)
        if chunk is not None:
            return chunk

        if read_buffer.free <= 0:
            logger.error("Read buffer full (%d bytes) without end marker", read_buffer.capacity)
            read_buffer.clear()
            raise MessageTooLargeError(read_buffer.capacity)

        data = await socket_reader.read(read_buffer.free)
        if not data:
            raise ConnectionClosedError(read_buffer.drain())

        read_buffer.feed(data)

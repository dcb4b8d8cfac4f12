"""
Framing layer for the bid/ask protocol.

Every message is terminated by CR LF. One serializer instance belongs to one
connection because it owns that connection's read buffer.
"""

import logging
from typing import Optional

from .buffers import (
    ByteWriteBuffer,
    ReadBuffer,
    SocketReader,
    WriteBuffer,
    DEFAULT_READ_BUFFER_SIZE,
    read_until_end_marker,
)
from .models.errors import SerializeError
from .models.message import BidAskMessage

logger = logging.getLogger(__name__)

CL_CR = b"\r\n"


class BidAskTcpSerializer:
    """Serialize outgoing messages and read framed incoming ones."""

    def __init__(self, read_buffer_size: int = DEFAULT_READ_BUFFER_SIZE):
        self.read_buffer = ReadBuffer(read_buffer_size, reserve=len(CL_CR))

    def serialize(self, contract: BidAskMessage, out: Optional[WriteBuffer] = None) -> WriteBuffer:
        """Append ``contract`` and the delimiter to ``out`` and return it."""
        if out is None:
            out = ByteWriteBuffer()
        contract.serialize(out)
        out.write_slice(CL_CR)
        return out

    def to_bytes(self, contract: BidAskMessage) -> bytes:
        out = ByteWriteBuffer()
        self.serialize(contract, out)
        return out.getvalue()

    def get_ping(self) -> BidAskMessage:
        return BidAskMessage.PING

    def parse_frame(self, frame: bytes) -> BidAskMessage:
        """Parse one chunk that still carries its trailing delimiter."""
        if frame.endswith(CL_CR):
            frame = frame[:-len(CL_CR)]
        return BidAskMessage.parse(frame)

    async def deserialize(self, socket_reader: SocketReader) -> BidAskMessage:
        """
        Read and parse the next message.

        Decode failures propagate with their specific SerializeError kind
        and the rejected frame attached as ``payload``; the read buffer
        stays positioned at the next message.
        """
        frame = await read_until_end_marker(socket_reader, self.read_buffer, CL_CR)
        logger.debug("Received frame of %d bytes", len(frame))
        try:
            return self.parse_frame(frame)
        except SerializeError as e:
            e.payload = frame[:-len(CL_CR)]
            raise

"""
Asyncio client connection for a bid/ask feed

Wraps an asyncio stream pair with a per-connection serializer, answers
PING with PONG, and optionally sends keepalive pings on a fixed interval.
"""

import asyncio
import logging
import time
from typing import AsyncIterator, Optional, Callable, Any

from .config import BidAskTcpConfig, ParseErrorPolicy
from .error_handler import handle_parse_error
from .models.errors import SerializeError, ConnectionClosedError, BidAskConnectionError
from .models.message import BidAskMessage
from .models.tick import BidAskTick
from .serializer import BidAskTcpSerializer

logger = logging.getLogger(__name__)


class BidAskTcpConnection:
    """
    One live feed connection

    The serializer (and its read buffer) belongs to this connection only.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        config: Optional[BidAskTcpConfig] = None,
        serializer: Optional[BidAskTcpSerializer] = None,
        error_callback: Optional[Callable[[str, str], Any]] = None
    ):
        self.config = config or BidAskTcpConfig()
        self.serializer = serializer or BidAskTcpSerializer(self.config.read_buffer_size)
        self.reader = reader
        self.writer = writer
        self.error_callback = error_callback
        self.connected = True
        self.last_received: Optional[float] = None
        self.messages_received = 0
        self.parse_errors = 0

    async def __aenter__(self) -> "BidAskTcpConnection":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def send(self, message: BidAskMessage) -> None:
        """Serialize and write one message"""
        self.writer.write(self.serializer.to_bytes(message))
        await self.writer.drain()

    async def send_ping(self) -> None:
        await self.send(self.serializer.get_ping())

    async def read_message(self) -> BidAskMessage:
        """
        Read the next message, replying PONG to an incoming PING

        Raises:
            SerializeError: the message could not be decoded
            ConnectionClosedError: peer closed the stream
            MessageTooLargeError: no delimiter within the read buffer capacity
            OSError: the PONG reply could not be written
        """
        try:
            message = await self.serializer.deserialize(self.reader)
        except ConnectionClosedError:
            self.connected = False
            raise

        self.last_received = time.monotonic()
        self.messages_received += 1

        if message.is_ping():
            try:
                await self.send(BidAskMessage.PONG)
            except (ConnectionError, OSError):
                self.connected = False
                raise

        return message

    async def messages(self) -> AsyncIterator[BidAskMessage]:
        """Iterate messages until the peer closes, applying the parse error policy"""
        while True:
            try:
                message = await self.read_message()
            except SerializeError as e:
                self.parse_errors += 1
                if self.config.parse_error_policy == ParseErrorPolicy.RAISE:
                    raise
                handle_parse_error(e, logger, raw=e.payload, error_callback=self.error_callback)
                continue
            except ConnectionClosedError as e:
                if e.partial:
                    logger.warning("Connection closed with %d unterminated bytes", len(e.partial))
                else:
                    logger.info("Connection closed by peer")
                return
            except (ConnectionError, OSError) as e:
                logger.warning(f"Connection lost: {e}")
                self.connected = False
                return

            yield message

    async def ticks(self) -> AsyncIterator[BidAskTick]:
        """Iterate only the bid/ask ticks"""
        async for message in self.messages():
            if message.is_bid_ask():
                yield message.tick

    async def keepalive(self) -> None:
        """Send PING every ping_interval seconds until the connection closes"""
        while self.connected:
            await asyncio.sleep(self.config.ping_interval)
            if not self.connected:
                break
            try:
                await self.send_ping()
            except (ConnectionError, OSError) as e:
                logger.warning(f"Keepalive ping failed: {e}")
                self.connected = False
                break

    async def close(self) -> None:
        if self.writer.is_closing():
            self.connected = False
            return

        self.connected = False
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error while closing connection: {e}")


async def open_connection(
    config: BidAskTcpConfig,
    error_callback: Optional[Callable[[str, str], Any]] = None
) -> BidAskTcpConnection:
    """
    Open a single feed connection

    Raises:
        BidAskConnectionError: connect failed or timed out
    """
    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(config.host, config.port),
            timeout=config.connection_timeout
        )
    except asyncio.TimeoutError as e:
        raise BidAskConnectionError(
            f"Timed out connecting after {config.connection_timeout}s", config.host, config.port, e
        ) from e
    except OSError as e:
        raise BidAskConnectionError("Could not connect to feed", config.host, config.port, e) from e

    logger.info(f"✓ Connected to bid/ask feed at {config.host}:{config.port}")
    return BidAskTcpConnection(reader, writer, config=config, error_callback=error_callback)


async def connect_with_retry(
    config: BidAskTcpConfig,
    error_callback: Optional[Callable[[str, str], Any]] = None
) -> BidAskTcpConnection:
    """
    Open a feed connection, retrying up to reconnect_attempts times

    Raises:
        BidAskConnectionError: from the last failed attempt
    """
    last_error: Optional[BidAskConnectionError] = None

    for attempt in range(config.reconnect_attempts):
        try:
            return await open_connection(config, error_callback=error_callback)
        except BidAskConnectionError as e:
            last_error = e
            logger.warning(f"Connection attempt {attempt + 1}/{config.reconnect_attempts} failed: {e.message}")
            if attempt < config.reconnect_attempts - 1:
                await asyncio.sleep(config.reconnect_delay)

    raise last_error

"""
Top-level protocol message: PING, PONG or a bid/ask tick.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .tick import BidAskTick

PING_PAYLOAD = b"PING"
PONG_PAYLOAD = b"PONG"
KEEPALIVE_PAYLOAD_LEN = 4


class MessageKind(str, Enum):
    PING = "ping"
    PONG = "pong"
    BID_ASK = "bid_ask"


@dataclass(frozen=True)
class BidAskMessage:
    """
    Closed set of protocol messages.

    Only ``BID_ASK`` messages carry a payload. Use ``BidAskMessage.PING`` and
    ``BidAskMessage.PONG`` for keepalives and ``BidAskMessage.bid_ask(tick)``
    for ticks.
    """

    kind: MessageKind
    tick: Optional[BidAskTick] = None

    def __post_init__(self):
        if self.kind == MessageKind.BID_ASK and self.tick is None:
            raise ValueError("bid_ask message requires a tick payload")
        if self.kind != MessageKind.BID_ASK and self.tick is not None:
            raise ValueError(f"{self.kind.value} message takes no tick payload")

    @classmethod
    def bid_ask(cls, tick: BidAskTick) -> "BidAskMessage":
        return cls(MessageKind.BID_ASK, tick)

    def is_ping(self) -> bool:
        return self.kind == MessageKind.PING

    def is_pong(self) -> bool:
        return self.kind == MessageKind.PONG

    def is_bid_ask(self) -> bool:
        return self.kind == MessageKind.BID_ASK

    @classmethod
    def parse(cls, src: bytes) -> "BidAskMessage":
        """
        Parse a delimiter-stripped payload.

        Keepalive literals are only recognised at exactly four bytes, so a
        tick payload never collides with them.
        """
        if len(src) == KEEPALIVE_PAYLOAD_LEN:
            if src == PING_PAYLOAD:
                return cls.PING
            if src == PONG_PAYLOAD:
                return cls.PONG

        return cls.bid_ask(BidAskTick.deserialize(src))

    def serialize(self, write_buffer) -> None:
        if self.kind == MessageKind.PING:
            write_buffer.write_slice(PING_PAYLOAD)
        elif self.kind == MessageKind.PONG:
            write_buffer.write_slice(PONG_PAYLOAD)
        else:
            self.tick.serialize(write_buffer)


BidAskMessage.PING = BidAskMessage(MessageKind.PING)
BidAskMessage.PONG = BidAskMessage(MessageKind.PONG)

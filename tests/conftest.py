"""
Pytest configuration and fixtures for bidask-tcp tests.
"""

from datetime import datetime, timezone

import pytest

from bidask_tcp.models import BidAskTick, BidAskTimestamp

CANONICAL_TICK = b"A BINANCE EURUSD B1.55555 A2.55555 50000000 S20230213142225.555"

CONFIG_ENV_VARS = [
    "BIDASK_TCP_HOST",
    "BIDASK_TCP_PORT",
    "BIDASK_TCP_READ_BUFFER_SIZE",
    "BIDASK_TCP_PING_INTERVAL",
    "BIDASK_TCP_CONNECTION_TIMEOUT",
    "BIDASK_TCP_RECONNECT_ATTEMPTS",
    "BIDASK_TCP_RECONNECT_DELAY",
    "BIDASK_TCP_LOG_LEVEL",
    "BIDASK_TCP_PARSE_ERROR_POLICY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep config env vars from leaking between tests, including ones set by load_dotenv"""
    for name in CONFIG_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield


@pytest.fixture
def canonical_payload():
    return CANONICAL_TICK


@pytest.fixture
def canonical_date():
    return datetime(2023, 2, 13, 14, 22, 25, 555000, tzinfo=timezone.utc)


@pytest.fixture
def canonical_tick(canonical_date):
    return BidAskTick(
        exchange_id="BINANCE",
        instrument_id="EURUSD",
        bid=1.55555,
        ask=2.55555,
        volume=50000000.0,
        timestamp=BidAskTimestamp.source(canonical_date),
    )

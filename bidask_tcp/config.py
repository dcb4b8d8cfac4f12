"""
Configuration for bid/ask feed connections.

Values come from (highest priority first) explicit overrides, an optional
YAML file, environment variables prefixed with ``BIDASK_TCP_`` (optionally
loaded from a .env file) and finally the defaults below.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any

import yaml
from dotenv import load_dotenv, find_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .buffers import DEFAULT_READ_BUFFER_SIZE

logger = logging.getLogger(__name__)


class ParseErrorPolicy(str, Enum):
    """What a connection does with a message that fails to decode."""
    SKIP = "skip"
    RAISE = "raise"


class BidAskTcpConfig(BaseSettings):
    """Bid/ask feed connection configuration."""

    host: str = Field(default="127.0.0.1", description="Feed host")
    port: int = Field(default=8124, description="Feed port")
    read_buffer_size: int = Field(default=DEFAULT_READ_BUFFER_SIZE, description="Per-connection read buffer capacity in bytes")
    ping_interval: float = Field(default=3.0, description="Seconds between keepalive pings")
    connection_timeout: float = Field(default=10.0, description="Connection timeout in seconds")
    reconnect_attempts: int = Field(default=5, description="Number of connection attempts")
    reconnect_delay: float = Field(default=2.0, description="Delay between connection attempts in seconds")
    log_level: str = Field(default="INFO", description="Logging level")
    parse_error_policy: ParseErrorPolicy = Field(default=ParseErrorPolicy.SKIP, description="skip or raise on undecodable messages")

    model_config = SettingsConfigDict(env_prefix="BIDASK_TCP_")

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        """Ensure port is valid."""
        if not (1 <= v <= 65535):
            raise ValueError(f"Invalid port: {v}")
        return v

    @field_validator('read_buffer_size', 'reconnect_attempts')
    @classmethod
    def validate_positive_int(cls, v):
        if v <= 0:
            raise ValueError(f"Must be positive, got: {v}")
        return v

    @field_validator('ping_interval', 'connection_timeout')
    @classmethod
    def validate_positive_seconds(cls, v):
        if v <= 0:
            raise ValueError(f"Must be a positive number of seconds, got: {v}")
        return v

    @field_validator('reconnect_delay')
    @classmethod
    def validate_delay(cls, v):
        if v < 0:
            raise ValueError(f"Delay cannot be negative, got: {v}")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    def to_env_dict(self) -> Dict[str, str]:
        """Convert configuration to environment variables dictionary."""
        return {
            "BIDASK_TCP_HOST": self.host,
            "BIDASK_TCP_PORT": str(self.port),
            "BIDASK_TCP_READ_BUFFER_SIZE": str(self.read_buffer_size),
            "BIDASK_TCP_PING_INTERVAL": str(self.ping_interval),
            "BIDASK_TCP_CONNECTION_TIMEOUT": str(self.connection_timeout),
            "BIDASK_TCP_RECONNECT_ATTEMPTS": str(self.reconnect_attempts),
            "BIDASK_TCP_RECONNECT_DELAY": str(self.reconnect_delay),
            "BIDASK_TCP_LOG_LEVEL": self.log_level,
            "BIDASK_TCP_PARSE_ERROR_POLICY": self.parse_error_policy.value,
        }


def load_yaml_config(config_file: str) -> Dict[str, Any]:
    """
    Read a YAML mapping of config values.

    A top-level ``bidask_tcp`` key is unwrapped if present.
    """
    path = Path(config_file)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    return data.get("bidask_tcp", data)


def load_config(
    env_file: Optional[str] = None,
    config_file: Optional[str] = None,
    **overrides: Any
) -> BidAskTcpConfig:
    """
    Load feed configuration.

    Args:
        env_file: .env file to load; None searches upward from the cwd
        config_file: Optional YAML file
        **overrides: Explicit values, None entries are ignored

    Returns:
        Validated BidAskTcpConfig
    """
    dotenv_path = env_file or find_dotenv(usecwd=True)
    if dotenv_path:
        logger.debug(f"Loading environment file: {dotenv_path}")
        load_dotenv(dotenv_path=dotenv_path, override=False)

    values: Dict[str, Any] = {}
    if config_file:
        values.update(load_yaml_config(config_file))
        logger.info(f"Loaded config file: {config_file}")

    values.update({key: value for key, value in overrides.items() if value is not None})

    return BidAskTcpConfig(**values)

"""
Standardized logging configuration for bid/ask feed tools
"""

import logging
import os
from typing import Optional


def configure_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    verbose: bool = False
) -> None:
    """
    Configure logging for bid/ask feed processes

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string, uses default if None
        verbose: If True, shows module names and line numbers
    """
    if isinstance(level, str):
        log_level = getattr(logging, level.upper(), logging.INFO)
    else:
        log_level = level

    if format_string is None:
        if verbose:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
        else:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=format_string,
        force=True  # Override any existing configuration
    )

    # asyncio debug chatter is rarely useful for feed work
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def configure_service_logging(service_name: str = "bidask-tcp", verbose: bool = False) -> logging.Logger:
    """
    Configure logging for a long-running feed consumer

    Level comes from BIDASK_TCP_LOG_LEVEL, defaulting to INFO.

    Returns:
        Logger instance for the service
    """
    configure_logging(
        level=os.getenv("BIDASK_TCP_LOG_LEVEL", "INFO"),
        verbose=verbose
    )
    return logging.getLogger(service_name)


def configure_cli_logging(verbose: bool = False) -> None:
    """
    Configure logging for CLI commands

    Args:
        verbose: If True, show INFO level; if False, only errors
    """
    if verbose:
        configure_logging(level="INFO", verbose=True)
    else:
        configure_logging(
            level="ERROR",
            format_string="%(asctime)s - %(levelname)s - %(message)s"
        )


def get_logger(name: str) -> logging.Logger:
    """Get a logger with consistent naming"""
    return logging.getLogger(name)

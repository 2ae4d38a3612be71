"""Structured logging for boottime."""

from boottime.core.logging.config import LogConfig
from boottime.core.logging.logger import bind, configure_logging, get_logger, log_context

__all__ = [
    "LogConfig",
    "bind",
    "configure_logging",
    "get_logger",
    "log_context",
]

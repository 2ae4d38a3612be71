"""Canonical error codes shared across boottime layers."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Stable identifiers surfaced in error payloads and log records."""

    GENERAL = "GENERAL_ERROR"
    NOT_FOUND = "NOT_FOUND"
    NOT_READY = "NOT_READY"
    MALFORMED_DATA = "MALFORMED_DATA"
    EMPTY_INPUT = "EMPTY_INPUT"
    CONNECTION = "CONNECTION_ERROR"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"
    COMMAND_FAILED = "COMMAND_FAILED"
    SOURCE_IO = "SOURCE_IO_ERROR"
    RECORD_LOG = "RECORD_LOG_ERROR"


__all__ = ["ErrorCode"]

"""Exception handling module."""

from boottime.core.exceptions.base import (
    BootTimeError,
    CommandError,
    EmptyInputError,
    InvariantViolationError,
    IPCConnectionError,
    MalformedDataError,
    NotFoundError,
    NotReadyError,
    RecordLogError,
    SourceError,
    SourceReadError,
)
from boottime.core.exceptions.codes import ErrorCode

__all__ = [
    "BootTimeError",
    "SourceError",
    "NotFoundError",
    "NotReadyError",
    "MalformedDataError",
    "EmptyInputError",
    "IPCConnectionError",
    "InvariantViolationError",
    "CommandError",
    "SourceReadError",
    "RecordLogError",
    "ErrorCode",
]

"""boottime core exception classes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from boottime.core.exceptions.codes import ErrorCode

if TYPE_CHECKING:
    from boottime.core.models.stages import RetrievalMethod


class BootTimeError(Exception):
    """Base exception for boottime."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL.value,
        details: dict[str, Any] | None = None,
    ):
        """Initialise the exception.

        Args:
            message: human readable error message
            error_code: stable error code
            details: extra structured context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serializable payload representing the error."""

        return {
            "code": self.error_code,
            "message": self.message,
            "details": dict(self.details),
        }


class SourceError(BootTimeError):
    """Failure raised by a boot time source reader."""

    def __init__(
        self,
        message: str,
        method: RetrievalMethod,
        error_code: str = ErrorCode.GENERAL.value,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details.setdefault("method", method.value)
        super().__init__(message, error_code, super_details)
        self.method = method


class NotFoundError(SourceError):
    """An expected artifact is absent on this host."""

    def __init__(
        self,
        message: str,
        method: RetrievalMethod,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if path is not None:
            super_details["path"] = path
        super().__init__(message, method, ErrorCode.NOT_FOUND.value, super_details)
        self.path = path


class NotReadyError(NotFoundError):
    """The boot sequence has not finished yet."""

    def __init__(self, message: str, method: RetrievalMethod, details: dict[str, Any] | None = None):
        super().__init__(message, method, details=details)
        self.error_code = ErrorCode.NOT_READY.value


class MalformedDataError(SourceError):
    """Input was present but could not be decoded."""

    def __init__(
        self,
        message: str,
        method: RetrievalMethod,
        details: dict[str, Any] | None = None,
        error_code: str = ErrorCode.MALFORMED_DATA.value,
    ):
        super().__init__(message, method, error_code, details)


class EmptyInputError(MalformedDataError):
    """The text to parse contained no lines."""

    def __init__(self, message: str, method: RetrievalMethod, details: dict[str, Any] | None = None):
        super().__init__(message, method, details, ErrorCode.EMPTY_INPUT.value)


class IPCConnectionError(SourceError):
    """The system bus could not be reached."""

    def __init__(
        self,
        message: str,
        method: RetrievalMethod,
        address: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if address:
            super_details["address"] = address
        super().__init__(message, method, ErrorCode.CONNECTION.value, super_details)


class InvariantViolationError(SourceError):
    """Decoded timestamps are inconsistent with each other."""

    def __init__(self, message: str, method: RetrievalMethod, details: dict[str, Any] | None = None):
        super().__init__(message, method, ErrorCode.INVARIANT_VIOLATION.value, details)


class CommandError(SourceError):
    """An external command exited unsuccessfully."""

    def __init__(
        self,
        message: str,
        method: RetrievalMethod,
        returncode: int | None = None,
        stderr: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if returncode is not None:
            super_details["returncode"] = returncode
        if stderr:
            super_details["stderr"] = stderr
        super().__init__(message, method, ErrorCode.COMMAND_FAILED.value, super_details)
        self.returncode = returncode
        self.stderr = stderr


class SourceReadError(SourceError):
    """An artifact exists but reading it failed at the OS level."""

    def __init__(
        self,
        message: str,
        method: RetrievalMethod,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if path is not None:
            super_details["path"] = path
        super().__init__(message, method, ErrorCode.SOURCE_IO.value, super_details)


class RecordLogError(BootTimeError):
    """The persisted record log could not be read or written."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        line_number: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if path is not None:
            super_details["path"] = path
        if line_number is not None:
            super_details["line"] = line_number
        super().__init__(message, ErrorCode.RECORD_LOG.value, super_details)
        self.path = path
        self.line_number = line_number

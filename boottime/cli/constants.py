"""Exit codes shared by CLI commands."""

SYSTEM_EXIT_CODE = 1
VALIDATION_EXIT_CODE = 2
SOURCE_EXIT_CODE = 10
RECORD_LOG_EXIT_CODE = 20

__all__ = ["RECORD_LOG_EXIT_CODE", "SOURCE_EXIT_CODE", "SYSTEM_EXIT_CODE", "VALIDATION_EXIT_CODE"]

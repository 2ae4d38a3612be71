"""Record persistence."""

from .record_log import RecordLog

__all__ = ["RecordLog"]

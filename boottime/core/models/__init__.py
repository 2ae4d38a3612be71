"""Data models for boottime."""

from .durations import ZERO, format_duration, to_microseconds, usec
from .record import OVERALL_COLUMN, TABLE_COLUMNS, BootTimeRecord, SourceRecord, StageValues
from .stages import BootTimeStage, RetrievalMethod

__all__ = [
    "BootTimeRecord",
    "BootTimeStage",
    "OVERALL_COLUMN",
    "RetrievalMethod",
    "SourceRecord",
    "StageValues",
    "TABLE_COLUMNS",
    "ZERO",
    "format_duration",
    "to_microseconds",
    "usec",
]

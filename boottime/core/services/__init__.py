"""Boot time services."""

from .accumulator import BootTimeAccumulator, average_records, summarize_log
from .analysis import BootTimeAnalysisService, analyze, default_sources, fold_source_records

__all__ = [
    "BootTimeAccumulator",
    "BootTimeAnalysisService",
    "analyze",
    "average_records",
    "default_sources",
    "fold_source_records",
    "summarize_log",
]

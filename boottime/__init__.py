"""boottime - measure how long a Linux machine took to boot.

Four independent telemetry sources (ACPI FPDT, systemd-boot EFI variables,
``systemd-analyze time`` and systemd's D-Bus properties) are queried
concurrently and reconciled into a stage x method record that is appended to
a JSON-lines log. The log can later be averaged across runs.

Examples:
    >>> import asyncio, boottime
    >>> record = asyncio.run(boottime.analyze())
    >>> summary = boottime.average()
"""

from __future__ import annotations

from boottime.core.config import BootTimeConfig, ConfigManager
from boottime.core.models import BootTimeRecord, BootTimeStage, RetrievalMethod
from boottime.core.services import BootTimeAccumulator, BootTimeAnalysisService, analyze, summarize_log
from boottime.core.storage import RecordLog

__version__ = "0.3.0"


def average(config: BootTimeConfig | None = None) -> BootTimeRecord:
    """Average every record in the configured record log."""
    config = config or BootTimeConfig()
    return summarize_log(RecordLog(config.storage.records_file))


__all__ = [
    "BootTimeAccumulator",
    "BootTimeAnalysisService",
    "BootTimeConfig",
    "BootTimeRecord",
    "BootTimeStage",
    "ConfigManager",
    "RecordLog",
    "RetrievalMethod",
    "__version__",
    "analyze",
    "average",
]

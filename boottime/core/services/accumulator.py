"""Cross-run averaging of boot time records."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta

from boottime.core.models import ZERO, BootTimeRecord, BootTimeStage, RetrievalMethod, StageValues
from boottime.core.storage import RecordLog


@dataclass
class _RunningCell:
    total: timedelta = ZERO
    count: int = 0


class BootTimeAccumulator:
    """Running (sum, count) per stage/method cell.

    Zero durations mean "not reported" and do not count towards the average,
    so a source that never reports a stage cannot drag its mean down.
    """

    def __init__(self) -> None:
        self._cells: dict[BootTimeStage, dict[RetrievalMethod, _RunningCell]] = {}

    def add(self, record: BootTimeRecord) -> None:
        for stage, method, duration in record.cells():
            cell = self._cells.setdefault(stage, {}).setdefault(method, _RunningCell())
            if duration > ZERO:
                cell.total += duration
                cell.count += 1

    def average(self) -> BootTimeRecord:
        values: StageValues = {}
        for stage, cells in self._cells.items():
            values[stage] = {
                method: cell.total / cell.count if cell.count > 0 else ZERO for method, cell in cells.items()
            }
        return BootTimeRecord(values=values)


def average_records(records: Iterable[BootTimeRecord]) -> BootTimeRecord:
    accumulator = BootTimeAccumulator()
    for record in records:
        accumulator.add(record)
    return accumulator.average()


def summarize_log(record_log: RecordLog) -> BootTimeRecord:
    """Replay the whole record log and average it."""
    return average_records(record_log.read_records())


__all__ = ["BootTimeAccumulator", "average_records", "summarize_log"]

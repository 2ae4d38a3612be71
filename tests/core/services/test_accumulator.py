"""Tests for cross-run averaging."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from boottime.core.exceptions import RecordLogError
from boottime.core.models import BootTimeRecord, BootTimeStage, RetrievalMethod
from boottime.core.services.accumulator import BootTimeAccumulator, average_records, summarize_log
from boottime.core.storage import RecordLog


FIRMWARE = BootTimeStage.FIRMWARE
EFI = RetrievalMethod.EFI_VAR
ACPI = RetrievalMethod.ACPI_FPDT


def seconds(value: int) -> timedelta:
    return timedelta(seconds=value)


def _firmware_record(efi: timedelta, acpi: timedelta | None = None) -> BootTimeRecord:
    cells = {EFI: efi}
    if acpi is not None:
        cells[ACPI] = acpi
    return BootTimeRecord(values={FIRMWARE: cells})


def test_average_of_two_runs() -> None:
    accumulator = BootTimeAccumulator()
    accumulator.add(_firmware_record(seconds(2)))
    accumulator.add(_firmware_record(seconds(4)))

    assert accumulator.average().get(FIRMWARE, EFI) == seconds(3)


def test_zero_durations_do_not_count() -> None:
    average = average_records(
        [
            _firmware_record(seconds(2)),
            _firmware_record(seconds(4)),
            _firmware_record(timedelta(0)),
        ]
    )

    assert average.get(FIRMWARE, EFI) == seconds(3)


def test_cell_only_ever_zero_stays_present_as_zero() -> None:
    average = average_records(
        [
            _firmware_record(seconds(1), acpi=timedelta(0)),
            _firmware_record(seconds(1), acpi=timedelta(0)),
        ]
    )

    assert average.values[FIRMWARE][ACPI] == timedelta(0)
    assert average.get(FIRMWARE, EFI) == seconds(1)


def test_average_of_nothing_is_empty() -> None:
    assert BootTimeAccumulator().average().values == {}


def test_average_of_a_single_record_is_that_record(sample_record: BootTimeRecord) -> None:
    assert average_records([sample_record]) == sample_record


def test_summarize_log_replays_every_record(tmp_path: Path) -> None:
    record_log = RecordLog(tmp_path / "records.jsonl")
    record_log.append(_firmware_record(seconds(2), acpi=seconds(1)))
    record_log.append(_firmware_record(seconds(4)))

    average = summarize_log(record_log)

    assert average.get(FIRMWARE, EFI) == seconds(3)
    assert average.get(FIRMWARE, ACPI) == seconds(1)


def test_summarize_missing_log_fails(tmp_path: Path) -> None:
    with pytest.raises(RecordLogError):
        summarize_log(RecordLog(tmp_path / "missing.jsonl"))

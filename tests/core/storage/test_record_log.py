"""Tests for the JSON-lines record log."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

import pytest

from boottime.core.exceptions import RecordLogError
from boottime.core.models import BootTimeRecord, BootTimeStage, RetrievalMethod
from boottime.core.storage import RecordLog


def test_append_then_read_keeps_order(tmp_path: Path, sample_record: BootTimeRecord) -> None:
    record_log = RecordLog(tmp_path / "nested" / "records.jsonl")
    second = BootTimeRecord(values={BootTimeStage.KERNEL: {RetrievalMethod.SYSTEMD_DBUS: timedelta(microseconds=17)}})

    record_log.append(sample_record)
    record_log.append(second)

    assert record_log.read_records() == [sample_record, second]


def test_each_record_is_one_json_line(tmp_path: Path, sample_record: BootTimeRecord) -> None:
    path = tmp_path / "records.jsonl"
    RecordLog(path).append(sample_record)

    lines = path.read_text(encoding="utf-8").splitlines()

    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["firmware"]["acpi_fpdt"] == 4_200_000
    assert payload["initrd"]["systemd_dbus"] == 0


def test_blank_lines_and_unknown_names_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "records.jsonl"
    path.write_text(
        '{"firmware": {"efi_var": 1500, "tpm_pcr": 9}, "shutdown": {"efi_var": 3}}\n\n',
        encoding="utf-8",
    )

    records = RecordLog(path).read_records()

    assert records == [BootTimeRecord(values={BootTimeStage.FIRMWARE: {RetrievalMethod.EFI_VAR: timedelta(microseconds=1500)}})]


@pytest.mark.parametrize(
    "line",
    [
        "{not json",
        "[1, 2, 3]",
        '{"firmware": {"efi_var": -1}}',
        '{"firmware": {"efi_var": "1.5s"}}',
        '{"firmware": 12}',
        '{"kernel": {"systemd_dbus": 1000000000000000000000000000000}}',
    ],
    ids=["syntax", "not-object", "negative", "string", "stage-not-object", "out-of-range"],
)
def test_corrupt_line_fails_the_whole_read(tmp_path: Path, sample_record: BootTimeRecord, line: str) -> None:
    path = tmp_path / "records.jsonl"
    record_log = RecordLog(path)
    record_log.append(sample_record)
    with open(path, "a", encoding="utf-8") as file:
        file.write(line + "\n")

    with pytest.raises(RecordLogError) as excinfo:
        record_log.read_records()

    assert excinfo.value.details["line"] == 2
    assert excinfo.value.error_code == "RECORD_LOG_ERROR"


def test_missing_log_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(RecordLogError, match="does not exist"):
        RecordLog(tmp_path / "records.jsonl").read_records()


def test_unwritable_location_is_an_error(tmp_path: Path, sample_record: BootTimeRecord) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(RecordLogError):
        RecordLog(blocker / "records.jsonl").append(sample_record)

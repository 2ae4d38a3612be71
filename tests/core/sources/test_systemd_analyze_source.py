"""Tests for the ``systemd-analyze time`` reader."""

from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path

import pytest

from boottime.core.exceptions import (
    CommandError,
    EmptyInputError,
    MalformedDataError,
    NotFoundError,
    SourceError,
    SourceReadError,
)
from boottime.core.sources.systemd_analyze import SystemdAnalyzeSource, parse_systemd_analyze_time

FULL_SUMMARY = "1.5s (firmware) + 2.5s (loader) + 0.1s (kernel) + 0s (initrd) + 3s (userspace) = 7.1s"

HOST_OUTPUT = (
    "Startup finished in 6.712s (firmware) + 1.204s (loader) + 2.115s (kernel) "
    "+ 3.870s (initrd) + 9.402s (userspace) = 23.305s\n"
    "graphical.target reached after 9.380s in userspace.\n"
)


def test_parse_full_summary() -> None:
    record = parse_systemd_analyze_time(FULL_SUMMARY)

    assert record.firmware == timedelta(milliseconds=1500)
    assert record.loader == timedelta(milliseconds=2500)
    assert record.kernel == timedelta(milliseconds=100)
    assert record.initrd == timedelta(0)
    assert record.userspace == timedelta(seconds=3)
    assert record.total == timedelta(milliseconds=7100)


def test_parse_uses_only_first_line() -> None:
    record = parse_systemd_analyze_time(HOST_OUTPUT)

    assert record.firmware == timedelta(milliseconds=6712)
    assert record.initrd == timedelta(milliseconds=3870)
    assert record.userspace == timedelta(milliseconds=9402)
    assert record.total == timedelta(milliseconds=23305)


def test_parse_without_stage_markers_is_all_zero() -> None:
    record = parse_systemd_analyze_time("Startup finished = 7.1s")

    assert record.firmware == timedelta(0)
    assert record.kernel == timedelta(0)
    assert record.userspace == timedelta(0)
    assert record.total == timedelta(milliseconds=7100)


def test_parse_virtual_machine_summary_leaves_missing_stages_zero() -> None:
    record = parse_systemd_analyze_time("Startup finished in 812ms (kernel) + 4.211s (userspace) = 5.023s")

    assert record.firmware == timedelta(0)
    assert record.loader == timedelta(0)
    assert record.kernel == timedelta(milliseconds=812)
    assert record.total == timedelta(milliseconds=5023)


def test_parse_empty_output() -> None:
    with pytest.raises(EmptyInputError) as excinfo:
        parse_systemd_analyze_time("")

    assert isinstance(excinfo.value, MalformedDataError)
    assert excinfo.value.error_code == "EMPTY_INPUT"


@pytest.mark.parametrize(
    "output",
    [
        "(firmware) + 2.5s (loader) = 3s",
        "1.5s (firmware) + 2.5s (loader) =",
        "abc (firmware) = 3s",
        "1.5s (firmware) = soon",
    ],
    ids=["marker-first", "total-last", "bad-stage-value", "bad-total-value"],
)
def test_parse_malformed_summary(output: str) -> None:
    with pytest.raises(MalformedDataError):
        parse_systemd_analyze_time(output)


def test_parse_out_of_range_duration_is_malformed() -> None:
    with pytest.raises(MalformedDataError):
        parse_systemd_analyze_time("Startup finished in 99999999999999h (firmware) = 1s")


@pytest.mark.asyncio
async def test_source_runs_command() -> None:
    source = SystemdAnalyzeSource([sys.executable, "-c", f"print({FULL_SUMMARY!r})"])

    record = await source.retrieve()

    assert record.total == timedelta(milliseconds=7100)


@pytest.mark.asyncio
async def test_source_failing_command_raises_command_error() -> None:
    source = SystemdAnalyzeSource(
        [sys.executable, "-c", "import sys; sys.stderr.write('Bootup is not yet finished'); sys.exit(1)"]
    )

    with pytest.raises(CommandError) as excinfo:
        await source.retrieve()

    assert excinfo.value.returncode == 1
    assert "not yet finished" in (excinfo.value.stderr or "")


@pytest.mark.asyncio
async def test_source_missing_executable_is_not_found() -> None:
    source = SystemdAnalyzeSource(["boottime-definitely-missing-systemd-analyze", "time"])

    with pytest.raises(NotFoundError):
        await source.retrieve()


@pytest.mark.asyncio
async def test_source_unrunnable_command_is_read_error(tmp_path: Path) -> None:
    source = SystemdAnalyzeSource([str(tmp_path), "time"])

    with pytest.raises(SourceReadError) as excinfo:
        await source.retrieve()

    assert isinstance(excinfo.value, SourceError)
    assert excinfo.value.error_code == "SOURCE_IO_ERROR"
    assert excinfo.value.details["path"] == str(tmp_path)

"""Pytest configuration for the boottime test suite."""

from __future__ import annotations

from datetime import timedelta

import pytest

from boottime.core.models import BootTimeRecord, BootTimeStage, RetrievalMethod


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--boottime-run-integration",
        action="store_true",
        default=False,
        help="Run boottime integration tests that read the real host.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker for boottime tests."""

    config.addinivalue_line(
        "markers",
        "integration: marks boottime tests reading live firmware, systemd or D-Bus state",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--boottime-run-integration"):
        return

    boottime_skip_integration = pytest.mark.skip(
        reason="integration tests require --boottime-run-integration",
    )
    for boottime_item in items:
        if "integration" in boottime_item.keywords:
            boottime_item.add_marker(boottime_skip_integration)


def seconds(value: float) -> timedelta:
    return timedelta(milliseconds=round(value * 1000))


@pytest.fixture
def sample_record() -> BootTimeRecord:
    return BootTimeRecord(
        values={
            BootTimeStage.FIRMWARE: {
                RetrievalMethod.ACPI_FPDT: seconds(4.2),
                RetrievalMethod.EFI_VAR: seconds(4.1),
                RetrievalMethod.SYSTEMD_ANALYZE: seconds(4.1),
                RetrievalMethod.SYSTEMD_DBUS: seconds(4.1),
            },
            BootTimeStage.LOADER: {
                RetrievalMethod.ACPI_FPDT: seconds(1.5),
                RetrievalMethod.EFI_VAR: seconds(1.4),
                RetrievalMethod.SYSTEMD_ANALYZE: seconds(1.4),
                RetrievalMethod.SYSTEMD_DBUS: seconds(1.4),
            },
            BootTimeStage.KERNEL: {
                RetrievalMethod.SYSTEMD_ANALYZE: seconds(2.0),
                RetrievalMethod.SYSTEMD_DBUS: seconds(2.0),
            },
            BootTimeStage.INITRD: {
                RetrievalMethod.SYSTEMD_ANALYZE: timedelta(0),
                RetrievalMethod.SYSTEMD_DBUS: timedelta(0),
            },
            BootTimeStage.USERSPACE: {
                RetrievalMethod.SYSTEMD_ANALYZE: seconds(6.5),
                RetrievalMethod.SYSTEMD_DBUS: seconds(6.5),
            },
            BootTimeStage.TOTAL: {
                RetrievalMethod.SYSTEMD_ANALYZE: seconds(14.0),
                RetrievalMethod.SYSTEMD_DBUS: seconds(14.0),
            },
        }
    )

"""Boot time source readers."""

from .acpi import ACPIFirmwareTableSource, FirmwareBootPerformance, parse_fbpt, parse_fpdt
from .base import ALL_STAGES, FIRMWARE_STAGES, BootTimeSource
from .durations import parse_duration
from .efi import EFIVariableSource, decode_loader_times, parse_efi_microseconds
from .systemd_analyze import SystemdAnalyzeSource, parse_systemd_analyze_time
from .systemd_dbus import SystemdDBusSource, compute_systemd_boot_times

__all__ = [
    "ACPIFirmwareTableSource",
    "ALL_STAGES",
    "BootTimeSource",
    "EFIVariableSource",
    "FIRMWARE_STAGES",
    "FirmwareBootPerformance",
    "SystemdAnalyzeSource",
    "SystemdDBusSource",
    "compute_systemd_boot_times",
    "decode_loader_times",
    "parse_duration",
    "parse_efi_microseconds",
    "parse_fbpt",
    "parse_fpdt",
    "parse_systemd_analyze_time",
]

"""Boot stage and retrieval method enums."""

from enum import Enum


class BootTimeStage(str, Enum):
    """Boot sequence phases, declared in boot order."""

    FIRMWARE = "firmware"
    LOADER = "loader"
    KERNEL = "kernel"
    INITRD = "initrd"
    USERSPACE = "userspace"
    TOTAL = "total"


class RetrievalMethod(str, Enum):
    """Telemetry sources a stage duration can be measured with."""

    ACPI_FPDT = "acpi_fpdt"  # ACPI firmware performance data table
    EFI_VAR = "efi_var"  # systemd-boot loader EFI variables
    SYSTEMD_ANALYZE = "systemd_analyze"  # `systemd-analyze time` summary line
    SYSTEMD_DBUS = "systemd_dbus"  # systemd manager monotonic timestamps

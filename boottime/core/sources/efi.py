"""Boot loader timings exposed as EFI variables.

systemd-boot (and compatible loaders) publish two variables under the
vendor GUID ``4a67b082-0a4c-41cf-b6c7-440b29bb8c4f``:

* ``LoaderTimeInitUSec`` - firmware time elapsed when the loader started
* ``LoaderTimeExecUSec`` - firmware time elapsed when the loader handed over
  to the kernel

efivarfs exposes each variable as a file whose first four bytes are the
variable attributes, followed by the value: a NUL terminated UTF-16LE string
of decimal microseconds.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

from boottime.core.exceptions import InvariantViolationError, MalformedDataError, NotFoundError, SourceReadError
from boottime.core.logging import bind
from boottime.core.models import RetrievalMethod, SourceRecord, usec

from .base import FIRMWARE_STAGES, BootTimeSource

EFIVARS_PATH = "/sys/firmware/efi/efivars"
LOADER_TIME_INIT_PREFIX = "LoaderTimeInitUSec-"
LOADER_TIME_EXEC_PREFIX = "LoaderTimeExecUSec-"
ATTRIBUTES_SIZE = 4
# values are signed 64-bit microsecond counts
MAX_MICROSECONDS = 2**63 - 1

_METHOD = RetrievalMethod.EFI_VAR
_DIGITS = re.compile(r"[0-9]+")


def strip_attributes(raw: bytes) -> bytes:
    """Drop the efivarfs attribute header from a raw variable."""
    if len(raw) < ATTRIBUTES_SIZE:
        raise MalformedDataError(
            "EFI variable too short",
            _METHOD,
            details={"length": len(raw)},
        )
    return raw[ATTRIBUTES_SIZE:]


def parse_efi_microseconds(payload: bytes) -> int:
    """Decode a NUL terminated UTF-16LE decimal string into microseconds."""
    if len(payload) % 2 != 0:
        raise MalformedDataError(
            "invalid UTF-16 length",
            _METHOD,
            details={"length": len(payload)},
        )

    units = []
    for i in range(0, len(payload), 2):
        unit = int.from_bytes(payload[i : i + 2], "little")
        if unit == 0:
            break
        units.append(unit)

    text = "".join(map(chr, units))
    if not _DIGITS.fullmatch(text):
        raise MalformedDataError(
            "EFI variable is not a decimal microsecond count",
            _METHOD,
            details={"value": text},
        )
    value = int(text)
    if value > MAX_MICROSECONDS:
        raise MalformedDataError(
            "EFI variable is out of range",
            _METHOD,
            details={"value": text},
        )
    return value


def decode_loader_times(init_raw: bytes, exec_raw: bytes) -> SourceRecord:
    """Turn the two raw loader variables into firmware and loader durations."""
    init_us = parse_efi_microseconds(strip_attributes(init_raw))
    exec_us = parse_efi_microseconds(strip_attributes(exec_raw))

    if exec_us < init_us:
        raise InvariantViolationError(
            "EFI loader exec time < init time",
            _METHOD,
            details={"init_usec": init_us, "exec_usec": exec_us},
        )

    return SourceRecord(firmware=usec(init_us), loader=usec(exec_us - init_us))


class EFIVariableSource(BootTimeSource):
    """Read systemd-boot loader timestamps from efivarfs."""

    method = _METHOD
    reported_stages = FIRMWARE_STAGES

    def __init__(self, efivars_dir: str | Path = EFIVARS_PATH) -> None:
        self.efivars_dir = Path(efivars_dir)

    async def retrieve(self) -> SourceRecord:
        return await asyncio.to_thread(self._retrieve_sync)

    def _retrieve_sync(self) -> SourceRecord:
        log = bind(method=self.method.value)
        init_path, exec_path = self._locate_variables()
        log.debug(f"Reading EFI loader variables {init_path.name}, {exec_path.name}")

        record = decode_loader_times(self._read(init_path), self._read(exec_path))
        log.debug(f"EFI firmware={record.firmware} loader={record.loader}")
        return record

    def _locate_variables(self) -> tuple[Path, Path]:
        try:
            names = sorted(entry.name for entry in self.efivars_dir.iterdir())
        except FileNotFoundError as exc:
            raise NotFoundError(
                f"EFI variable directory {self.efivars_dir} does not exist",
                self.method,
                path=str(self.efivars_dir),
            ) from exc
        except OSError as exc:
            raise SourceReadError(
                f"reading directory {self.efivars_dir}: {exc}",
                self.method,
                path=str(self.efivars_dir),
            ) from exc

        init_name = next((name for name in names if name.startswith(LOADER_TIME_INIT_PREFIX)), None)
        exec_name = next((name for name in names if name.startswith(LOADER_TIME_EXEC_PREFIX)), None)
        if init_name is None or exec_name is None:
            raise NotFoundError(
                "EFI loader timing variables not found",
                self.method,
                path=str(self.efivars_dir),
            )
        return self.efivars_dir / init_name, self.efivars_dir / exec_name

    def _read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError(f"EFI variable {path.name} disappeared", self.method, path=str(path)) from exc
        except OSError as exc:
            raise SourceReadError(f"reading file {path}: {exc}", self.method, path=str(path)) from exc


__all__ = [
    "EFIVARS_PATH",
    "EFIVariableSource",
    "LOADER_TIME_EXEC_PREFIX",
    "LOADER_TIME_INIT_PREFIX",
    "decode_loader_times",
    "parse_efi_microseconds",
    "strip_attributes",
]

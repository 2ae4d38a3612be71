"""Firmware Performance Data Table (FPDT) reader.

The FPDT published under ``/sys/firmware/acpi/tables`` only carries a pointer
record. The Firmware Basic Boot Performance Table (FBPT) it points at lives
in physical memory and is read through ``/dev/mem``. Its basic boot record
holds nanosecond timestamps for the firmware to OS loader handover.
"""

from __future__ import annotations

import asyncio
import struct
from dataclasses import dataclass
from pathlib import Path

from boottime.core.exceptions import InvariantViolationError, MalformedDataError, NotFoundError, SourceReadError
from boottime.core.logging import bind
from boottime.core.models import RetrievalMethod, SourceRecord, usec

from .base import FIRMWARE_STAGES, BootTimeSource

FPDT_TABLE_PATH = "/sys/firmware/acpi/tables/FPDT"
MEMORY_DEVICE_PATH = "/dev/mem"

ACPI_HEADER_SIZE = 36
FBPT_HEADER_SIZE = 8
RECORD_HEADER = struct.Struct("<HBB")
FBPT_POINTER_RECORD_TYPE = 0x0000
FBPT_POINTER_RECORD = struct.Struct("<HBBIQ")
BASIC_BOOT_RECORD_TYPE = 0x0002
BASIC_BOOT_RECORD = struct.Struct("<HBBIQQQQQ")

_METHOD = RetrievalMethod.ACPI_FPDT


@dataclass(frozen=True)
class FirmwareBootPerformance:
    """Timestamps of the FBPT basic boot record, in nanoseconds."""

    reset_end: int
    load_image_start: int
    start_image_start: int
    exit_boot_services_entry: int
    exit_boot_services_exit: int

    def to_source_record(self) -> SourceRecord:
        if self.start_image_start == 0:
            raise MalformedDataError("FBPT basic boot record has no loader start time", _METHOD)
        if self.exit_boot_services_exit < self.start_image_start:
            raise InvariantViolationError(
                "FBPT ExitBootServices exit < loader start",
                _METHOD,
                details={
                    "start_image_start_ns": self.start_image_start,
                    "exit_boot_services_exit_ns": self.exit_boot_services_exit,
                },
            )
        loader_start_us = self.start_image_start // 1000
        loader_exit_us = self.exit_boot_services_exit // 1000
        return SourceRecord(firmware=usec(loader_start_us), loader=usec(loader_exit_us - loader_start_us))


def _iter_records(table: bytes, offset: int, end: int, table_name: str):
    while offset + RECORD_HEADER.size <= end:
        record_type, length, _revision = RECORD_HEADER.unpack_from(table, offset)
        if length < RECORD_HEADER.size:
            raise MalformedDataError(
                f"{table_name} record length {length} is too small",
                _METHOD,
                details={"offset": offset},
            )
        if offset + length > end:
            raise MalformedDataError(
                f"{table_name} record overruns the table",
                _METHOD,
                details={"offset": offset, "length": length},
            )
        yield record_type, offset, length
        offset += length


def _table_end(table: bytes, header_size: int, signature: bytes) -> int:
    if len(table) < header_size:
        raise MalformedDataError(
            f"{signature.decode()} table truncated",
            _METHOD,
            details={"length": len(table)},
        )
    if table[:4] != signature:
        raise MalformedDataError(
            f"unexpected table signature {table[:4]!r}, expected {signature!r}",
            _METHOD,
        )
    (declared,) = struct.unpack_from("<I", table, 4)
    if declared < header_size or declared > len(table):
        raise MalformedDataError(
            f"{signature.decode()} declared length {declared} does not match {len(table)} bytes read",
            _METHOD,
        )
    return declared


def parse_fpdt(table: bytes) -> int:
    """Return the physical address of the FBPT referenced by an FPDT."""
    end = _table_end(table, ACPI_HEADER_SIZE, b"FPDT")
    for record_type, offset, length in _iter_records(table, ACPI_HEADER_SIZE, end, "FPDT"):
        if record_type == FBPT_POINTER_RECORD_TYPE and length >= FBPT_POINTER_RECORD.size:
            *_, address = FBPT_POINTER_RECORD.unpack_from(table, offset)
            return address
    raise NotFoundError("FPDT has no firmware basic boot performance pointer", _METHOD)


def parse_fbpt(table: bytes) -> FirmwareBootPerformance:
    """Extract the basic boot performance record from an FBPT."""
    end = _table_end(table, FBPT_HEADER_SIZE, b"FBPT")
    for record_type, offset, length in _iter_records(table, FBPT_HEADER_SIZE, end, "FBPT"):
        if record_type == BASIC_BOOT_RECORD_TYPE and length >= BASIC_BOOT_RECORD.size:
            _type, _length, _revision, _reserved, *timestamps = BASIC_BOOT_RECORD.unpack_from(table, offset)
            return FirmwareBootPerformance(*timestamps)
    raise NotFoundError("FBPT has no basic boot performance record", _METHOD)


class ACPIFirmwareTableSource(BootTimeSource):
    """Read firmware and loader durations from the ACPI FPDT."""

    method = _METHOD
    reported_stages = FIRMWARE_STAGES

    def __init__(
        self,
        table_path: str | Path = FPDT_TABLE_PATH,
        memory_path: str | Path = MEMORY_DEVICE_PATH,
    ) -> None:
        self.table_path = Path(table_path)
        self.memory_path = Path(memory_path)

    async def retrieve(self) -> SourceRecord:
        return await asyncio.to_thread(self._retrieve_sync)

    def _retrieve_sync(self) -> SourceRecord:
        log = bind(method=self.method.value)
        try:
            fpdt = self.table_path.read_bytes()
        except FileNotFoundError as exc:
            raise NotFoundError("ACPI FPDT table not present", self.method, path=str(self.table_path)) from exc
        except OSError as exc:
            raise SourceReadError(
                f"reading {self.table_path}: {exc}", self.method, path=str(self.table_path)
            ) from exc

        address = parse_fpdt(fpdt)
        log.debug(f"FBPT located at physical address {address:#x}")
        performance = parse_fbpt(self._read_fbpt(address))
        log.debug(f"FBPT basic boot record: {performance}")
        return performance.to_source_record()

    def _read_fbpt(self, address: int) -> bytes:
        try:
            with open(self.memory_path, "rb") as memory:
                memory.seek(address)
                header = memory.read(FBPT_HEADER_SIZE)
                if len(header) < FBPT_HEADER_SIZE:
                    raise MalformedDataError(
                        "FBPT header truncated",
                        self.method,
                        details={"address": address},
                    )
                (length,) = struct.unpack_from("<I", header, 4)
                if length < FBPT_HEADER_SIZE:
                    raise MalformedDataError(
                        f"FBPT declared length {length} is too small",
                        self.method,
                        details={"address": address},
                    )
                return header + memory.read(length - FBPT_HEADER_SIZE)
        except FileNotFoundError as exc:
            raise NotFoundError(
                f"memory device {self.memory_path} not present", self.method, path=str(self.memory_path)
            ) from exc
        except OSError as exc:
            raise SourceReadError(
                f"reading FBPT from {self.memory_path}: {exc}", self.method, path=str(self.memory_path)
            ) from exc


__all__ = [
    "ACPIFirmwareTableSource",
    "FPDT_TABLE_PATH",
    "FirmwareBootPerformance",
    "MEMORY_DEVICE_PATH",
    "parse_fbpt",
    "parse_fpdt",
]

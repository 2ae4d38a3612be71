"""Append-only JSON-lines log of boot time records."""

from __future__ import annotations

import json
from pathlib import Path

from boottime.core.exceptions import RecordLogError
from boottime.core.logging import get_logger
from boottime.core.models import BootTimeRecord

logger = get_logger(__name__)


class RecordLog:
    """One JSON object per line, each a full :class:`BootTimeRecord`."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def append(self, record: BootTimeRecord) -> None:
        line = json.dumps(record.to_payload())
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as file:
                file.write(line)
                file.write("\n")
        except OSError as exc:
            raise RecordLogError(f"writing record to {self.path}: {exc}", path=str(self.path)) from exc
        logger.debug(f"Appended boot time record to {self.path}")

    def read_records(self) -> list[BootTimeRecord]:
        """Read every record; a single corrupt line fails the whole read."""
        try:
            with open(self.path, encoding="utf-8") as file:
                lines = file.readlines()
        except FileNotFoundError as exc:
            raise RecordLogError(f"record log {self.path} does not exist", path=str(self.path)) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise RecordLogError(f"opening file {self.path}: {exc}", path=str(self.path)) from exc

        records: list[BootTimeRecord] = []
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                records.append(BootTimeRecord.from_payload(json.loads(line)))
            except ValueError as exc:
                # json.JSONDecodeError and pydantic's ValidationError are ValueErrors
                raise RecordLogError(
                    f"decoding record on line {line_number}: {exc}",
                    path=str(self.path),
                    line_number=line_number,
                ) from exc

        logger.debug(f"Read {len(records)} boot time records from {self.path}")
        return records


__all__ = ["RecordLog"]

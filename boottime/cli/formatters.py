"""Output formatter abstractions for CLI commands."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

from boottime.core.models import TABLE_COLUMNS, BootTimeRecord


class OutputFormatter:
    """Protocol-like base class for CLI output formatters."""

    name: str

    def render(self, record: BootTimeRecord, *, stream: TextIO) -> None:
        """Render the record to the target stream."""

        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Render a record as a Rich table: one row per stage, one column per method."""

    name: str = "table"
    no_color: bool = False

    def render(self, record: BootTimeRecord, *, stream: TextIO) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)

        table = self._create_table(TABLE_COLUMNS)
        for row in record.to_table():
            table.add_row(*(row.get(column, "-") for column in TABLE_COLUMNS))
        console.print(table)

    def _create_table(self, columns: Sequence[str]) -> Table:
        table = Table(box=SIMPLE, show_lines=False)
        header_style = "" if self.no_color else "bold"
        for column in columns:
            table.add_column(column, header_style=header_style, justify="left" if column == "stage" else "right")
        return table


@dataclass(slots=True)
class JSONFormatter(OutputFormatter):
    """Render a record as a single JSON object (stage -> method -> microseconds)."""

    name: str = "json"

    def render(self, record: BootTimeRecord, *, stream: TextIO) -> None:
        json.dump(record.to_payload(), stream, ensure_ascii=False)
        stream.write("\n")
        stream.flush()


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "json":
        return JSONFormatter()
    msg = f"Unsupported format '{name}'. Available formats: json, table."
    raise ValueError(msg)


__all__ = ["OutputFormatter", "TableFormatter", "JSONFormatter", "create_formatter"]

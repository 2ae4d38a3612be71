from __future__ import annotations

import sys

import typer

from boottime.core.exceptions import RecordLogError
from boottime.core.services import summarize_log
from boottime.core.storage import RecordLog

from .constants import RECORD_LOG_EXIT_CODE
from .utils import emit_error, get_config, prepare_formatter


def register(app: typer.Typer) -> None:
    """Register the average command on the provided application."""

    app.command("average")(average_command)


def average_command(ctx: typer.Context) -> None:
    """Average every record in the record log, cell by cell."""

    formatter = prepare_formatter(ctx)
    record_log = RecordLog(get_config(ctx).storage.records_file)

    try:
        record = summarize_log(record_log)
    except RecordLogError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=RECORD_LOG_EXIT_CODE) from error

    formatter.render(record, stream=sys.stdout)


__all__ = ["average_command", "register"]

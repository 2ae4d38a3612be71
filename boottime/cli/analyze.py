from __future__ import annotations

import asyncio
import sys

import typer

from boottime.core.config import BootTimeConfig
from boottime.core.exceptions import BootTimeError, RecordLogError, SourceError
from boottime.core.services import BootTimeAnalysisService, default_sources
from boottime.core.storage import RecordLog

from .constants import RECORD_LOG_EXIT_CODE, SOURCE_EXIT_CODE, SYSTEM_EXIT_CODE
from .utils import emit_error, get_config, prepare_formatter


def register(app: typer.Typer) -> None:
    """Register the analyze command on the provided application."""

    app.command("analyze")(analyze_command)


def get_analysis_service(config: BootTimeConfig) -> BootTimeAnalysisService:
    """Factory hook for obtaining an analysis service wired to the host sources."""

    return BootTimeAnalysisService(default_sources(config), RecordLog(config.storage.records_file))


def analyze_command(ctx: typer.Context) -> None:
    """Measure the current boot with every source and append it to the record log."""

    formatter = prepare_formatter(ctx)
    service = get_analysis_service(get_config(ctx))

    try:
        record = asyncio.run(service.run())
    except SourceError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=SOURCE_EXIT_CODE) from error
    except RecordLogError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=RECORD_LOG_EXIT_CODE) from error
    except BootTimeError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error

    formatter.render(record, stream=sys.stdout)


__all__ = ["analyze_command", "get_analysis_service", "register"]

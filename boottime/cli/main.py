"""Main entry point for the boottime command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from boottime.core.config import ConfigManager
from boottime.core.logging import configure_logging

from .analyze import register as register_analyze_commands
from .average import register as register_average_commands
from .constants import VALIDATION_EXIT_CODE
from .formatters import create_formatter
from .utils import emit_error


def create_app() -> typer.Typer:
    """Create a Typer application instance for boottime."""

    app = typer.Typer(add_completion=False, help="Measure and average machine boot times.")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "json",
            "--format",
            "-f",
            help="Output format (json or table).",
            show_default=True,
        ),
        records_file: Path | None = typer.Option(
            None,
            "--records-file",
            "-r",
            help="JSON-lines file boot time records are appended to and averaged from.",
        ),
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="TOML configuration file (defaults to ~/.boottime/config.toml).",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            help="Logging level; overrides the configuration file.",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            emit_error(str(exc), "INVALID_FORMAT", details={"option": "--format"})
            raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc

        manager = ConfigManager(config_path)
        if records_file is not None:
            manager.update_config(storage={"records_file": str(records_file.expanduser())})
        config = manager.get_config()

        level = (log_level or config.logging.level).upper()
        configure_logging(level, file_output=bool(config.logging.file), file_path=config.logging.file)

        ctx.obj.update(
            {
                "format": normalized_format,
                "no_color": no_color,
                "config": config,
            }
        )

    register_analyze_commands(app)
    register_average_commands(app)
    return app


app = create_app()

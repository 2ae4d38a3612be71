"""JSON-lines logging on top of loguru.

Every event is rendered as one JSON object carrying a ``trace_id``, the
retrieval ``method`` and ``error_code`` it concerns, and any other bound
fields under ``context``. Events emitted inside :func:`log_context` share its
trace id, so the log lines of one analysis run can be grouped together.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import IO, Any, Iterator
from uuid import uuid4

from loguru import logger
from loguru._logger import Logger as _LoguruLogger  # type: ignore[attr-defined]

from boottime.core.logging.config import LogConfig

PROMOTED_FIELDS = ("method", "error_code")

_active_trace: ContextVar[str | None] = ContextVar("boottime_trace_id", default=None)
_active_fields: ContextVar[dict[str, Any]] = ContextVar("boottime_log_fields", default={})


def _inject_context(record: dict[str, Any]) -> None:
    extra = record["extra"]
    if not extra.get("trace_id"):
        extra["trace_id"] = _active_trace.get() or uuid4().hex
    # explicitly bound values win over the surrounding context
    for key, value in _active_fields.get().items():
        if extra.get(key) is None:
            extra[key] = value
    for key in PROMOTED_FIELDS:
        extra.setdefault(key, None)


def render_event(record: dict[str, Any]) -> str:
    """Serialize a loguru record to a single JSON line (without newline)."""

    extra = record["extra"]
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "trace_id": extra.get("trace_id"),
    }
    for key in PROMOTED_FIELDS:
        payload[key] = extra.get(key)

    context = {key: value for key, value in extra.items() if key != "trace_id" and key not in PROMOTED_FIELDS}
    if context:
        payload["context"] = context
    if record["exception"] is not None:
        payload["exception"] = str(record["exception"].value)
    return json.dumps(payload, ensure_ascii=False, default=str)


class _StreamSink:
    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream

    def __call__(self, message: Any) -> None:
        self._stream.write(render_event(message.record) + "\n")
        self._stream.flush()


class _FileSink:
    def __init__(self, path: str) -> None:
        self._path = Path(path).expanduser()
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def __call__(self, message: Any) -> None:
        with open(self._path, "a", encoding="utf-8") as file:
            file.write(render_event(message.record) + "\n")


def configure_logging(level: str = "WARNING", **options: Any) -> LogConfig:
    """(Re)install the boottime sinks.

    ``options`` are :class:`LogConfig` fields. Console output goes to stderr
    unless ``console_stream`` is given, since stdout carries command output.
    """

    config = LogConfig(level=level, **options)
    level_name = config.level.upper()

    handlers: list[dict[str, Any]] = []
    if config.console_output:
        handlers.append({"sink": _StreamSink(config.console_stream or sys.stderr), "level": level_name})
    if config.file_output and config.file_path:
        handlers.append({"sink": _FileSink(config.file_path), "level": level_name})

    logger.configure(handlers=handlers, patcher=_inject_context, extra=dict(config.extra))
    return config


def get_logger(name: str | None = None) -> _LoguruLogger:
    """Return the shared logger, tagged with ``name`` when given."""

    return logger.bind(logger_name=name) if name else logger


def bind(**fields: Any) -> _LoguruLogger:
    return logger.bind(**fields)


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Attach a trace id and extra fields to every event logged inside the block."""

    active_trace = trace_id or uuid4().hex
    trace_token = _active_trace.set(active_trace)
    fields_token = _active_fields.set({**_active_fields.get(), **fields})
    try:
        yield active_trace
    finally:
        _active_fields.reset(fields_token)
        _active_trace.reset(trace_token)


configure_logging()


__all__ = ["PROMOTED_FIELDS", "bind", "configure_logging", "get_logger", "log_context", "render_event"]

"""Boot time summary printed by ``systemd-analyze time``."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import timedelta

from boottime.core.exceptions import (
    CommandError,
    EmptyInputError,
    MalformedDataError,
    NotFoundError,
    SourceReadError,
)
from boottime.core.logging import bind
from boottime.core.models import BootTimeStage, RetrievalMethod, SourceRecord

from .base import BootTimeSource
from .durations import parse_duration

ANALYZE_COMMAND = ("systemd-analyze", "time")
TOTAL_MARKER = "="

_METHOD = RetrievalMethod.SYSTEMD_ANALYZE
_STAGE_MARKERS = {
    "(firmware)": BootTimeStage.FIRMWARE,
    "(loader)": BootTimeStage.LOADER,
    "(kernel)": BootTimeStage.KERNEL,
    "(initrd)": BootTimeStage.INITRD,
    "(userspace)": BootTimeStage.USERSPACE,
}


def _duration_at(words: list[str], index: int, marker: str) -> timedelta:
    if index < 0 or index >= len(words):
        raise MalformedDataError(
            f"no duration next to {marker!r}",
            _METHOD,
            details={"words": words},
        )
    try:
        return parse_duration(words[index])
    except ValueError as exc:
        raise MalformedDataError(
            f"invalid duration {words[index]!r} for {marker!r}",
            _METHOD,
            details={"token": words[index]},
        ) from exc


def parse_systemd_analyze_time(output: str) -> SourceRecord:
    """Parse the first line of ``systemd-analyze time`` output.

    Example::

        Startup finished in 1.5s (firmware) + 2.5s (loader) + 0.1s (kernel) + 3s (userspace) = 7.1s

    Stages absent from the line stay at zero.
    """

    lines = output.splitlines()
    if not lines:
        raise EmptyInputError("empty output", _METHOD)

    words = lines[0].split()
    durations: dict[str, timedelta] = {}
    for idx, word in enumerate(words):
        stage = next((stage for marker, stage in _STAGE_MARKERS.items() if marker in word), None)
        if stage is not None:
            durations[stage.value] = _duration_at(words, idx - 1, word)
        elif TOTAL_MARKER in word:
            durations[BootTimeStage.TOTAL.value] = _duration_at(words, idx + 1, word)

    return SourceRecord(**durations)


class SystemdAnalyzeSource(BootTimeSource):
    """Run ``systemd-analyze time`` and parse its summary line."""

    method = _METHOD

    def __init__(self, command: Sequence[str] = ANALYZE_COMMAND) -> None:
        if not command:
            raise ValueError("command must not be empty")
        self.command = tuple(command)

    async def retrieve(self) -> SourceRecord:
        log = bind(method=self.method.value)
        log.debug(f"Running {' '.join(self.command)}")
        output = await self._run()
        record = parse_systemd_analyze_time(output)
        log.debug(f"systemd-analyze reported {record}")
        return record

    async def _run(self) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise NotFoundError(
                f"command {self.command[0]!r} not found",
                self.method,
                path=self.command[0],
            ) from exc
        except OSError as exc:
            raise SourceReadError(
                f"running command {self.command[0]!r}: {exc}",
                self.method,
                path=self.command[0],
            ) from exc

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise CommandError(
                f"command failed: {' '.join(self.command)}",
                self.method,
                returncode=process.returncode,
                stderr=stderr.decode(errors="replace").strip(),
            )
        return stdout.decode(errors="replace")


__all__ = ["ANALYZE_COMMAND", "SystemdAnalyzeSource", "parse_systemd_analyze_time"]

"""Concurrent retrieval and reconciliation of boot time sources."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from time import perf_counter

from boottime.core.config import BootTimeConfig
from boottime.core.exceptions import BootTimeError
from boottime.core.logging import bind, log_context
from boottime.core.models import BootTimeRecord, SourceRecord, StageValues
from boottime.core.sources import (
    ACPIFirmwareTableSource,
    BootTimeSource,
    EFIVariableSource,
    SystemdAnalyzeSource,
    SystemdDBusSource,
)
from boottime.core.storage import RecordLog


def default_sources(config: BootTimeConfig | None = None) -> list[BootTimeSource]:
    """Build the four host readers from configuration."""
    sources_config = (config or BootTimeConfig()).sources
    return [
        SystemdAnalyzeSource(sources_config.analyze_command),
        SystemdDBusSource(),
        EFIVariableSource(sources_config.efivars_dir),
        ACPIFirmwareTableSource(sources_config.fpdt_table_path, sources_config.memory_device_path),
    ]


def fold_source_records(results: Sequence[tuple[BootTimeSource, SourceRecord]]) -> BootTimeRecord:
    """Place each source's reported stages in its own method column.

    Sources are never corrected against each other; disagreement is kept.
    """

    values: StageValues = {}
    for source, record in results:
        for stage in source.reported_stages:
            values.setdefault(stage, {})[source.method] = record.get(stage)
    return BootTimeRecord(values=values)


class BootTimeAnalysisService:
    """Run every source concurrently and persist the combined record."""

    def __init__(self, sources: Sequence[BootTimeSource], record_log: RecordLog) -> None:
        if not sources:
            raise ValueError("at least one boot time source is required")
        methods = [source.method for source in sources]
        if len(set(methods)) != len(methods):
            raise ValueError("each retrieval method may only be used by one source")
        self._sources = list(sources)
        self._record_log = record_log

    @property
    def sources(self) -> list[BootTimeSource]:
        return list(self._sources)

    async def run(self) -> BootTimeRecord:
        """Retrieve, fold and append one boot time record.

        Every source runs to completion. If any failed, the earliest failure
        is raised and nothing is appended to the record log.
        """

        with log_context(component="BootTimeAnalysisService") as trace_id:
            logger = bind(trace_id=trace_id)
            logger.info(f"Starting boot time analysis with {len(self._sources)} sources")

            failures: list[BaseException] = []
            results = await asyncio.gather(
                *(self._retrieve(source, failures) for source in self._sources),
                return_exceptions=True,
            )

            if failures:
                logger.bind(error_code=getattr(failures[0], "error_code", None)).error(
                    f"Boot time analysis failed: {failures[0]}"
                )
                raise failures[0]

            record = fold_source_records(list(zip(self._sources, results, strict=True)))
            self._record_log.append(record)
            logger.info("Boot time analysis complete")
            return record

    async def _retrieve(self, source: BootTimeSource, failures: list[BaseException]) -> SourceRecord:
        logger = bind(method=source.method.value)
        started = perf_counter()
        try:
            record = await source.retrieve()
        except Exception as exc:
            # completion order decides which failure is reported
            failures.append(exc)
            error_code = exc.error_code if isinstance(exc, BootTimeError) else None
            logger.bind(error_code=error_code).warning(f"Source {source.name} failed: {exc}")
            raise
        logger.debug(f"Source {source.name} finished in {(perf_counter() - started) * 1000:.1f}ms")
        return record


async def analyze(config: BootTimeConfig | None = None) -> BootTimeRecord:
    """Run one analysis with the host sources and the configured record log."""
    config = config or BootTimeConfig()
    service = BootTimeAnalysisService(default_sources(config), RecordLog(config.storage.records_file))
    return await service.run()


__all__ = ["BootTimeAnalysisService", "analyze", "default_sources", "fold_source_records"]

"""Boot time record models."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import timedelta
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .durations import ZERO, format_duration, to_microseconds, usec
from .stages import BootTimeStage, RetrievalMethod

OVERALL_COLUMN = "overall"
TABLE_COLUMNS = ["stage", *(method.value for method in RetrievalMethod), OVERALL_COLUMN]

StageValues = dict[BootTimeStage, dict[RetrievalMethod, timedelta]]
StageCells = Mapping[BootTimeStage, Mapping[RetrievalMethod, timedelta]]


@dataclass(frozen=True)
class SourceRecord:
    """Per-source stage breakdown produced by a single reader."""

    firmware: timedelta = ZERO
    loader: timedelta = ZERO
    kernel: timedelta = ZERO
    initrd: timedelta = ZERO
    userspace: timedelta = ZERO
    total: timedelta = ZERO

    def get(self, stage: BootTimeStage) -> timedelta:
        return getattr(self, stage.value)


class BootTimeRecord(BaseModel):
    """Stage x method matrix of durations produced by one analysis run.

    A missing cell and a zero cell both mean the method did not report the
    stage. ``values`` is stored as read-only mappings; stages without cells
    are dropped.
    """

    model_config = ConfigDict(frozen=True)

    values: StageCells = Field(default_factory=dict, validate_default=True)

    @field_validator("values")
    @classmethod
    def freeze_values(cls, values: StageCells) -> StageCells:
        frozen: dict[BootTimeStage, Mapping[RetrievalMethod, timedelta]] = {}
        for stage, cells in values.items():
            for method, duration in cells.items():
                if duration < ZERO:
                    raise ValueError(f"negative duration for {stage.value}/{method.value}")
            if cells:
                frozen[stage] = MappingProxyType(dict(cells))
        return MappingProxyType(frozen)

    def get(self, stage: BootTimeStage, method: RetrievalMethod) -> timedelta:
        """Return the duration of a cell, zero when the cell is absent."""
        return self.values.get(stage, {}).get(method, ZERO)

    def cells(self) -> Iterator[tuple[BootTimeStage, RetrievalMethod, timedelta]]:
        """Iterate over present cells in stage then method declaration order."""
        for stage in BootTimeStage:
            stage_cells = self.values.get(stage)
            if not stage_cells:
                continue
            for method in RetrievalMethod:
                if method in stage_cells:
                    yield stage, method, stage_cells[method]

    def to_payload(self) -> dict[str, dict[str, int]]:
        """Serialize to the record log shape: stage -> method -> microseconds."""
        payload: dict[str, dict[str, int]] = {}
        for stage, method, duration in self.cells():
            payload.setdefault(stage.value, {})[method.value] = to_microseconds(duration)
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> BootTimeRecord:
        """Build a record from its log representation.

        Stage and method names this version does not know are ignored so
        logs written by newer releases stay readable.
        """

        if not isinstance(payload, Mapping):
            raise ValueError(f"record must be a JSON object, got {type(payload).__name__}")

        known_stages = {stage.value: stage for stage in BootTimeStage}
        known_methods = {method.value: method for method in RetrievalMethod}
        values: StageValues = {}
        for stage_name, cells in payload.items():
            stage = known_stages.get(stage_name)
            if stage is None:
                continue
            if not isinstance(cells, Mapping):
                raise ValueError(f"stage '{stage_name}' must map methods to durations")
            for method_name, raw in cells.items():
                method = known_methods.get(method_name)
                if method is None:
                    continue
                # bool is an int subclass; reject it explicitly
                if isinstance(raw, bool) or not isinstance(raw, int):
                    raise ValueError(f"duration for {stage_name}/{method_name} must be an integer, got {raw!r}")
                if raw < 0:
                    raise ValueError(f"duration for {stage_name}/{method_name} must not be negative")
                values.setdefault(stage, {})[method] = usec(raw)
        return cls(values=values)

    def overall(self, stage: BootTimeStage) -> timedelta:
        """Mean of the non-zero cells reported for ``stage``."""
        reported = [duration for duration in self.values.get(stage, {}).values() if duration > ZERO]
        if not reported:
            return ZERO
        return sum(reported, ZERO) / len(reported)

    def to_table(self) -> list[dict[str, str]]:
        """Render one row per stage with a column per method plus ``overall``."""
        rows: list[dict[str, str]] = []
        for stage in BootTimeStage:
            row = {"stage": stage.value}
            for method in RetrievalMethod:
                row[method.value] = format_duration(self.get(stage, method))
            row[OVERALL_COLUMN] = format_duration(self.overall(stage))
            rows.append(row)
        return rows


__all__ = ["BootTimeRecord", "OVERALL_COLUMN", "SourceRecord", "StageCells", "StageValues", "TABLE_COLUMNS"]

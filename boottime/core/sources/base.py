"""Abstract boot time source."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from boottime.core.models import BootTimeStage, RetrievalMethod, SourceRecord

FIRMWARE_STAGES = (BootTimeStage.FIRMWARE, BootTimeStage.LOADER)
ALL_STAGES = tuple(BootTimeStage)


class BootTimeSource(ABC):
    """A single telemetry source producing a best-effort stage breakdown.

    Subclasses declare which retrieval ``method`` they implement and which
    stages they report; stages outside ``reported_stages`` never become cells
    of the combined record.
    """

    method: ClassVar[RetrievalMethod]
    reported_stages: ClassVar[tuple[BootTimeStage, ...]] = ALL_STAGES

    @property
    def name(self) -> str:
        return self.method.value

    @abstractmethod
    async def retrieve(self) -> SourceRecord:
        """Read the source and return its stage durations.

        Raises:
            SourceError: the source is absent, unreadable or inconsistent.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(method={self.method.value!r})"


__all__ = ["ALL_STAGES", "BootTimeSource", "FIRMWARE_STAGES"]

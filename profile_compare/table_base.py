"""Base class and run detection for comparison table builders."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from .config import UnitLabels
from .formatting import format_hhmm
from .models import (
    HOURS_PER_DAY,
    SECONDS_PER_HOUR,
    ComparisonRow,
    ComparisonTable,
    TableKind,
    check_offset,
)
from .units import UnitContext

if TYPE_CHECKING:
    from .engine import Profile

Sample = tuple[float, ...]


def hour_offset(hour: int) -> int:
    """Seconds from midnight for an hour boundary."""

    if not 0 <= hour < HOURS_PER_DAY:
        raise ValueError(f"Hour {hour} outside [0, {HOURS_PER_DAY})")
    return check_offset(hour * SECONDS_PER_HOUR)


class RunTracker:
    """Reports when a sample starts a new run of equal values.

    The first sample always starts a run.
    """

    def __init__(self) -> None:
        self._previous: Optional[tuple[Sample, ...]] = None

    def changed(self, current: tuple[Sample, ...]) -> bool:
        starts_run = self._previous is None or current != self._previous
        self._previous = current
        return starts_run


class ComparisonTableBuilder(ABC):
    """Builds one comparison table from hourly samples of two profiles."""

    kind: Optional[TableKind] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.kind is None:
            raise ValueError(f"Table builder {cls.__name__} must define a kind")

    @abstractmethod
    def sample(self, profile: "Profile", offset: int, units: UnitContext) -> Sample:
        """Return the comparable values for one profile at ``offset``."""

    @abstractmethod
    def format_sample(self, values: Sample, units: UnitContext) -> str:
        """Render a sample for display."""

    @abstractmethod
    def unit_label(self, labels: UnitLabels, units: UnitContext) -> str:
        """Caption for the table's values."""

    def trailing_rows(self, profile1: "Profile", profile2: "Profile") -> list[ComparisonRow]:
        return []

    def build(
        self,
        profile1: "Profile",
        profile2: "Profile",
        name1: str,
        name2: str,
        units: UnitContext,
        labels: UnitLabels,
    ) -> ComparisonTable:
        """Sample every hour and emit one row per run of unchanged values."""

        tracker = RunTracker()
        rows: list[ComparisonRow] = []
        for hour in range(HOURS_PER_DAY):
            offset = hour_offset(hour)
            first = self.sample(profile1, offset, units)
            second = self.sample(profile2, offset, units)
            if tracker.changed((first, second)):
                rows.append(
                    ComparisonRow(
                        time_label=format_hhmm(offset),
                        value1=self.format_sample(first, units),
                        value2=self.format_sample(second, units),
                    )
                )
        rows.extend(self.trailing_rows(profile1, profile2))

        return ComparisonTable(
            kind=self.kind,
            rows=tuple(rows),
            name1=name1,
            name2=name2,
            unit_label=self.unit_label(labels, units),
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"<{self.__class__.__name__} kind={self.kind!r}>"

"""Core data models for profile comparison and time-window progress."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import pandas as pd

from .units import GlucoseUnit

SECONDS_PER_HOUR = 3600
SECONDS_PER_DAY = 86400
HOURS_PER_DAY = 24
TOTAL_LABEL = "Σ"


class ScheduleKind(str, Enum):
    """Hour-indexed values a profile exposes."""

    BASAL = "basal"
    IC = "ic"
    ISF = "isf"
    TARGET_LOW = "target_low"
    TARGET_HIGH = "target_high"


class TableKind(str, Enum):
    """Comparison tables produced for a profile pair."""

    BASAL = "basal"
    IC = "ic"
    ISF = "isf"
    TARGET = "target"


class WindowMode(str, Enum):
    """Categorical state of a time-bounded window."""

    NONE = "none"
    ACTIVE = "active"
    ADJUSTED = "adjusted"


@dataclass(frozen=True)
class ComparisonRow:
    """Single emitted line of a diff table."""

    time_label: str
    value1: str
    value2: str


@dataclass(frozen=True)
class ComparisonTable:
    """Ordered diff rows for one parameter kind."""

    kind: TableKind
    rows: tuple[ComparisonRow, ...]
    name1: str
    name2: str
    unit_label: str

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def hour_rows(self) -> tuple[ComparisonRow, ...]:
        """Rows excluding any trailing total row."""

        return tuple(row for row in self.rows if row.time_label != TOTAL_LABEL)

    def to_frame(self) -> pd.DataFrame:
        """Return the rows as a dataframe with one column per profile."""

        columns = ["time", self.name1 or "profile1", self.name2 or "profile2"]
        if columns[1] == columns[2]:
            columns[2] = f"{columns[2]} (2)"
        return pd.DataFrame(
            [(row.time_label, row.value1, row.value2) for row in self.rows],
            columns=columns,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "unit_label": self.unit_label,
            "rows": [
                {"time": row.time_label, "value1": row.value1, "value2": row.value2}
                for row in self.rows
            ],
        }


@dataclass(frozen=True)
class ProfileComparison:
    """All four comparison tables for a (profile1, profile2) pair."""

    basal: ComparisonTable
    insulin_to_carb: ComparisonTable
    sensitivity: ComparisonTable
    target: ComparisonTable
    name1: str
    name2: str
    units: GlucoseUnit

    @property
    def units_text(self) -> str:
        return self.units.as_text

    def tables(self) -> tuple[ComparisonTable, ...]:
        return (self.basal, self.insulin_to_carb, self.sensitivity, self.target)

    def table(self, kind: TableKind) -> ComparisonTable:
        for table in self.tables():
            if table.kind is kind:
                return table
        raise KeyError(kind)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name1": self.name1,
            "name2": self.name2,
            "units": self.units_text,
            "tables": [table.to_dict() for table in self.tables()],
        }


@dataclass(frozen=True)
class TimeWindowState:
    """Snapshot of a time-bounded state such as a temp target or profile switch."""

    start_timestamp: int
    duration_millis: int
    is_present: bool = True
    label: str = ""
    mode: WindowMode = WindowMode.ACTIVE

    @property
    def end_timestamp(self) -> int:
        return self.start_timestamp + self.duration_millis


@dataclass(frozen=True)
class ProgressSample:
    """Completion ratio of a window at one clock sample."""

    ratio: float = 0.0

    def __float__(self) -> float:
        return self.ratio


@dataclass(frozen=True)
class ProfileSwitchState:
    """Active profile as reported by the profile source."""

    profile_name: str
    is_loaded: bool = True
    is_modified: bool = False
    window: Optional[TimeWindowState] = None


@dataclass(frozen=True)
class OverviewState:
    """Derived overview values recomputed on every source update or tick."""

    temp_target_text: str = ""
    temp_target_mode: WindowMode = WindowMode.NONE
    temp_target_progress: float = 0.0
    is_profile_loaded: bool = False
    profile_name: str = ""
    is_profile_modified: bool = False
    profile_progress: float = 0.0
    # not part of equality, so ticks alone do not count as changes
    sampled_at: Optional[int] = field(default=None, compare=False)


def check_offset(seconds_from_midnight: int) -> int:
    """Fail fast on offsets outside a single day."""

    if not 0 <= seconds_from_midnight < SECONDS_PER_DAY:
        raise ValueError(
            f"Offset {seconds_from_midnight} outside [0, {SECONDS_PER_DAY}) seconds from midnight"
        )
    return seconds_from_midnight

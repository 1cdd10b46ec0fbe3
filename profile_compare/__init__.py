"""Dosing profile comparison and time-window progress library."""

from .engine import Profile, ScheduleDiffEngine, build_comparison
from .models import (
    ComparisonRow,
    ComparisonTable,
    OverviewState,
    ProfileComparison,
    ProfileSwitchState,
    ProgressSample,
    ScheduleKind,
    TableKind,
    TimeWindowState,
    WindowMode,
)
from .profiles import Schedule, ScheduleProfile
from .progress import compute_progress
from .registry import register_table, registry
from .table_base import ComparisonTableBuilder
from .units import GlucoseUnit, UnitContext

__all__ = [
    "ComparisonRow",
    "ComparisonTable",
    "ComparisonTableBuilder",
    "GlucoseUnit",
    "OverviewState",
    "Profile",
    "ProfileComparison",
    "ProfileSwitchState",
    "ProgressSample",
    "Schedule",
    "ScheduleDiffEngine",
    "ScheduleKind",
    "ScheduleProfile",
    "TableKind",
    "TimeWindowState",
    "UnitContext",
    "WindowMode",
    "build_comparison",
    "compute_progress",
    "register_table",
    "registry",
]

"""Target range table; precision follows the display unit."""
from __future__ import annotations

from ..config import UnitLabels
from ..formatting import format_range
from ..models import ScheduleKind, TableKind
from ..registry import register_table
from ..table_base import ComparisonTableBuilder, Sample
from ..units import UnitContext


@register_table
class TargetTable(ComparisonTableBuilder):
    kind = TableKind.TARGET

    def sample(self, profile, offset: int, units: UnitContext) -> Sample:
        low = units.convert(profile.value_at(ScheduleKind.TARGET_LOW, offset))
        high = units.convert(profile.value_at(ScheduleKind.TARGET_HIGH, offset))
        return (low, high)

    def format_sample(self, values: Sample, units: UnitContext) -> str:
        low, high = values
        return format_range(low, high, units.target_places)

    def unit_label(self, labels: UnitLabels, units: UnitContext) -> str:
        return labels.target(units.display_unit)

"""Insulin sensitivity factor table, shown in the display unit."""
from __future__ import annotations

from ..config import UnitLabels
from ..formatting import format_decimal
from ..models import ScheduleKind, TableKind
from ..registry import register_table
from ..table_base import ComparisonTableBuilder, Sample
from ..units import UnitContext


@register_table
class SensitivityTable(ComparisonTableBuilder):
    kind = TableKind.ISF

    def sample(self, profile, offset: int, units: UnitContext) -> Sample:
        # converted before the run comparison
        return (units.convert(profile.value_at(ScheduleKind.ISF, offset)),)

    def format_sample(self, values: Sample, units: UnitContext) -> str:
        return format_decimal(values[0], 1)

    def unit_label(self, labels: UnitLabels, units: UnitContext) -> str:
        return labels.sensitivity(units.display_unit)

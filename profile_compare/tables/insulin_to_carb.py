"""Insulin-to-carb ratio table."""
from __future__ import annotations

from ..config import UnitLabels
from ..formatting import format_decimal
from ..models import ScheduleKind, TableKind
from ..registry import register_table
from ..table_base import ComparisonTableBuilder, Sample
from ..units import UnitContext


@register_table
class InsulinToCarbTable(ComparisonTableBuilder):
    kind = TableKind.IC

    def sample(self, profile, offset: int, units: UnitContext) -> Sample:
        return (profile.value_at(ScheduleKind.IC, offset),)

    def format_sample(self, values: Sample, units: UnitContext) -> str:
        return format_decimal(values[0], 1)

    def unit_label(self, labels: UnitLabels, units: UnitContext) -> str:
        return labels.insulin_to_carb

"""Basal rate table with a trailing daily total."""
from __future__ import annotations

from ..config import UnitLabels
from ..formatting import format_decimal
from ..models import TOTAL_LABEL, ComparisonRow, ScheduleKind, TableKind
from ..registry import register_table
from ..table_base import ComparisonTableBuilder, Sample
from ..units import UnitContext

BASAL_PLACES = 2


@register_table
class BasalTable(ComparisonTableBuilder):
    kind = TableKind.BASAL

    def sample(self, profile, offset: int, units: UnitContext) -> Sample:
        return (profile.value_at(ScheduleKind.BASAL, offset),)

    def format_sample(self, values: Sample, units: UnitContext) -> str:
        return format_decimal(values[0], BASAL_PLACES)

    def unit_label(self, labels: UnitLabels, units: UnitContext) -> str:
        return labels.basal

    def trailing_rows(self, profile1, profile2) -> list[ComparisonRow]:
        return [
            ComparisonRow(
                time_label=TOTAL_LABEL,
                value1=format_decimal(profile1.percentage_basal_sum(), BASAL_PLACES),
                value2=format_decimal(profile2.percentage_basal_sum(), BASAL_PLACES),
            )
        ]

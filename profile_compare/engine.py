"""Schedule diff engine comparing two 24-hour dosing profiles."""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, Union

from . import tables  # noqa: F401 - ensure table registration side-effects
from .config import CompareSettings, UnitLabels
from .models import ComparisonTable, ProfileComparison, ScheduleKind, TableKind
from .profiles import ScheduleProfile, switch_name
from .registry import TableRegistry, registry
from .units import GlucoseUnit, UnitContext, convert_from_mgdl


class Profile(Protocol):
    """Read-only accessor contract for a dosing profile."""

    def value_at(self, kind: ScheduleKind, second_of_day: int) -> float:
        ...

    def percentage_basal_sum(self) -> float:
        ...

    def display_unit(self) -> GlucoseUnit:
        ...


UnitSelection = Union[UnitContext, GlucoseUnit, str, None]


class ScheduleDiffEngine:
    """Builds the basal, IC, ISF and target comparison tables for a profile pair.

    The engine holds no per-comparison state; every call samples both profiles
    from scratch.
    """

    def __init__(
        self,
        table_registry: TableRegistry | None = None,
        *,
        settings: CompareSettings | None = None,
        converter: Callable[[float, GlucoseUnit], float] = convert_from_mgdl,
    ) -> None:
        self._registry = table_registry or registry
        self._settings = settings or CompareSettings()
        self._converter = converter

    @property
    def labels(self) -> UnitLabels:
        return self._settings.labels

    def build_comparison(
        self,
        profile1: Profile,
        profile2: Profile,
        name1: str,
        name2: str,
        unit_context: UnitSelection = None,
    ) -> ProfileComparison:
        """Return all four tables; any conversion failure aborts the whole build."""

        units = self._resolve_units(profile1, unit_context)
        built: dict[TableKind, ComparisonTable] = {}
        for kind in TableKind:
            builder = self._registry.get(kind)
            built[kind] = builder.build(profile1, profile2, name1, name2, units, self.labels)

        logging.debug(
            f"Compared profiles {name1!r} and {name2!r} in {units.display_unit.as_text}: "
            + ", ".join(f"{kind.value}={len(table.rows)} rows" for kind, table in built.items())
        )
        return ProfileComparison(
            basal=built[TableKind.BASAL],
            insulin_to_carb=built[TableKind.IC],
            sensitivity=built[TableKind.ISF],
            target=built[TableKind.TARGET],
            name1=name1,
            name2=name2,
            units=units.display_unit,
        )

    def build_table(
        self,
        kind: TableKind,
        profile1: Profile,
        profile2: Profile,
        name1: str,
        name2: str,
        unit_context: UnitSelection = None,
    ) -> ComparisonTable:
        """Build a single table, e.g. when only one parameter is displayed."""

        units = self._resolve_units(profile1, unit_context)
        return self._registry.get(kind).build(profile1, profile2, name1, name2, units, self.labels)

    def build_effective_comparison(
        self,
        profile: ScheduleProfile,
        name: str,
        *,
        percentage: int = 100,
        timeshift_hours: int = 0,
        unit_context: UnitSelection = None,
    ) -> ProfileComparison:
        """Compare a base profile against its percentage/timeshift adjusted version."""

        effective = profile.with_switch(percentage=percentage, timeshift_hours=timeshift_hours)
        return self.build_comparison(
            profile,
            effective,
            name,
            switch_name(name, percentage, timeshift_hours),
            unit_context,
        )

    def _resolve_units(self, profile1: Profile, selection: UnitSelection) -> UnitContext:
        if isinstance(selection, UnitContext):
            return selection
        if selection is not None:
            unit = GlucoseUnit.parse(selection)
        elif self._settings.display_unit is not None:
            unit = self._settings.display_unit
        else:
            unit = GlucoseUnit.parse(profile1.display_unit())
        return UnitContext(display_unit=unit, converter=self._converter)


_default_engine: Optional[ScheduleDiffEngine] = None


def _get_engine() -> ScheduleDiffEngine:
    global _default_engine
    if _default_engine is None:
        _default_engine = ScheduleDiffEngine()
    return _default_engine


def build_comparison(
    profile1: Profile,
    profile2: Profile,
    name1: str,
    name2: str,
    unit_context: UnitSelection = None,
) -> ProfileComparison:
    return _get_engine().build_comparison(profile1, profile2, name1, name2, unit_context)

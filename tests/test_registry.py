import pytest

from profile_compare import tables
from profile_compare.config import UnitLabels
from profile_compare.models import ComparisonRow, ScheduleKind, TableKind
from profile_compare.profiles import ScheduleProfile
from profile_compare.registry import TableRegistry, registry
from profile_compare.table_base import ComparisonTableBuilder, RunTracker, hour_offset
from profile_compare.units import GlucoseUnit, UnitContext


class _StubTable(ComparisonTableBuilder):
    kind = TableKind.BASAL

    def sample(self, profile, offset, units):
        return (profile.value_at(ScheduleKind.BASAL, offset),)

    def format_sample(self, values, units):
        return str(values[0])

    def unit_label(self, labels, units):
        return "stub"


def test_builtin_tables_are_registered():
    for kind in TableKind:
        assert kind in registry
    assert sorted(tables.__all__) == ["basal", "insulin_to_carb", "sensitivity", "target"]


def test_registry_rejects_duplicate_kind():
    local = TableRegistry()
    local.register(_StubTable)

    with pytest.raises(ValueError):
        local.register(_StubTable)

    assert isinstance(local.get(TableKind.BASAL), _StubTable)


def test_registry_missing_kind_raises_key_error():
    local = TableRegistry()

    with pytest.raises(KeyError):
        local.get(TableKind.TARGET)

    assert TableKind.TARGET not in local


def test_builder_without_kind_is_rejected():
    with pytest.raises(ValueError):

        class _Nameless(ComparisonTableBuilder):  # noqa: F841
            def sample(self, profile, offset, units):  # pragma: no cover - never instantiated
                raise NotImplementedError

            def format_sample(self, values, units):  # pragma: no cover
                raise NotImplementedError

            def unit_label(self, labels, units):  # pragma: no cover
                raise NotImplementedError


def test_stub_builder_emits_rows_per_run():
    profile = ScheduleProfile.flat(basal=1.0, ic=10.0, isf_mgdl=50.0, target_low_mgdl=100.0, target_high_mgdl=120.0)

    table = _StubTable().build(profile, profile, "A", "B", UnitContext(GlucoseUnit.MGDL), UnitLabels())

    assert table.rows == (ComparisonRow("00:00", "1.0", "1.0"),)
    assert table.unit_label == "stub"


def test_run_tracker_and_hour_offset():
    tracker = RunTracker()

    assert tracker.changed(((1.0,), (1.0,))) is True
    assert tracker.changed(((1.0,), (1.0,))) is False
    assert tracker.changed(((1.0,), (2.0,))) is True
    assert hour_offset(23) == 23 * 3600
    with pytest.raises(ValueError):
        hour_offset(24)

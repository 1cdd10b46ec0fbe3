from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import numpy as np
import pytest

from models.profile_models import ProfileStoreEntry
from profile_compare.engine import ScheduleDiffEngine, build_comparison
from profile_compare.models import ComparisonRow, ScheduleKind, TableKind
from profile_compare.profiles import Schedule, ScheduleProfile
from profile_compare.sources import convert_profile_entry
from profile_compare.units import GlucoseUnit, UnitContext


def _profile(
    *,
    basal=1.0,
    ic=10.0,
    isf=45.0,
    target_low=100.0,
    target_high=120.0,
    units: GlucoseUnit = GlucoseUnit.MGDL,
) -> ScheduleProfile:
    def _schedule(value):
        if isinstance(value, (list, tuple)):
            return Schedule.from_hourly(value)
        return Schedule.constant(value)

    return ScheduleProfile(
        basal=_schedule(basal),
        ic=_schedule(ic),
        isf=_schedule(isf),
        target_low=_schedule(target_low),
        target_high=_schedule(target_high),
        units=units,
    )


class _RecordingProfile:
    """Hourly stub profile that remembers every offset it was asked for."""

    def __init__(self, hourly: dict, basal_sum: float = 0.0, unit: GlucoseUnit = GlucoseUnit.MGDL) -> None:
        self._hourly = hourly
        self._basal_sum = basal_sum
        self._unit = unit
        self.offsets: list[int] = []

    def value_at(self, kind, second_of_day):
        self.offsets.append(second_of_day)
        return self._hourly[kind][second_of_day // 3600]

    def percentage_basal_sum(self):
        return self._basal_sum

    def display_unit(self):
        return self._unit


def _flat_hourly(**overrides) -> dict:
    hourly = {
        ScheduleKind.BASAL: [1.0] * 24,
        ScheduleKind.IC: [10.0] * 24,
        ScheduleKind.ISF: [45.0] * 24,
        ScheduleKind.TARGET_LOW: [100.0] * 24,
        ScheduleKind.TARGET_HIGH: [120.0] * 24,
    }
    hourly.update(overrides)
    return hourly


def test_flat_basal_difference_emits_single_row_and_total():
    comparison = build_comparison(_profile(basal=1.0), _profile(basal=1.2), "A", "B")

    assert comparison.basal.rows == (
        ComparisonRow("00:00", "1.00", "1.20"),
        ComparisonRow("Σ", "24.00", "28.80"),
    )


def test_target_shift_in_coarse_units():
    low_b = [100.0] * 24
    high_b = [120.0] * 24
    for hour in range(6, 9):
        low_b[hour] = 90.0
        high_b[hour] = 110.0

    comparison = ScheduleDiffEngine().build_comparison(
        _profile(),
        _profile(target_low=low_b, target_high=high_b),
        "A",
        "B",
        GlucoseUnit.MGDL,
    )

    assert comparison.target.rows == (
        ComparisonRow("00:00", "100 - 120", "100 - 120"),
        ComparisonRow("06:00", "100 - 120", "90 - 110"),
        ComparisonRow("09:00", "100 - 120", "100 - 120"),
    )


def test_target_uses_one_decimal_in_mmol():
    comparison = build_comparison(_profile(target_low=99.0, target_high=108.0), _profile(), "A", "B", "mmol")

    assert comparison.target.rows == (ComparisonRow("00:00", "5.5 - 6.0", "5.6 - 6.7"),)
    assert comparison.target.unit_label == "mmol"


def test_sensitivity_is_converted_to_display_unit():
    comparison = build_comparison(_profile(isf=45.0), _profile(isf=54.0), "A", "B", GlucoseUnit.MMOL)

    assert comparison.sensitivity.rows == (ComparisonRow("00:00", "2.5", "3.0"),)
    assert comparison.sensitivity.unit_label == "mmol /U"


def test_insulin_to_carb_formats_one_decimal_and_has_no_total():
    ic_b = [10.0] * 12 + [8.0] * 12
    comparison = build_comparison(_profile(ic=10.0), _profile(ic=ic_b), "A", "B")

    assert comparison.insulin_to_carb.rows == (
        ComparisonRow("00:00", "10.0", "10.0"),
        ComparisonRow("12:00", "10.0", "8.0"),
    )


def test_identical_flat_profiles_emit_one_row_per_table():
    comparison = build_comparison(_profile(), _profile(), "A", "A")

    for table in comparison.tables():
        assert len(table.hour_rows) == 1
        row = table.hour_rows[0]
        assert row.time_label == "00:00"
        assert row.value1 == row.value2
    assert len(comparison.basal.rows) == 2


def test_difference_removed_by_conversion_does_not_emit_row():
    isf_b = [45.0] * 12 + [45.4] * 12
    rounding = UnitContext(GlucoseUnit.MMOL, converter=lambda value, unit: round(value / 18.0, 1))

    comparison = build_comparison(_profile(isf=45.0), _profile(isf=isf_b), "A", "B", rounding)

    assert comparison.sensitivity.rows == (ComparisonRow("00:00", "2.5", "2.5"),)


def test_equal_schedules_from_different_storage_units_compare_equal():
    def _entry(units, sens, low, high):
        block = lambda value: [{"time": "00:00", "value": value}]  # noqa: E731
        return ProfileStoreEntry(
            units=units,
            basal=block(1.0),
            carbratio=block(10.0),
            sens=block(sens),
            target_low=block(low),
            target_high=block(high),
        )

    mmol_profile = convert_profile_entry(_entry("mmol", 2.5, 5.0, 6.0))
    mgdl_profile = convert_profile_entry(_entry("mg/dl", 45.0, 90.0, 108.0))

    comparison = build_comparison(mmol_profile, mgdl_profile, "mmol", "mgdl", GlucoseUnit.MGDL)

    assert comparison.sensitivity.rows == (ComparisonRow("00:00", "45.0", "45.0"),)
    assert comparison.target.rows == (ComparisonRow("00:00", "90 - 108", "90 - 108"),)


def test_engine_samples_every_hour_boundary():
    profile1 = _RecordingProfile(_flat_hourly())
    profile2 = _RecordingProfile(_flat_hourly())

    ScheduleDiffEngine().build_table(TableKind.BASAL, profile1, profile2, "A", "B")

    assert profile1.offsets == [hour * 3600 for hour in range(24)]
    assert profile2.offsets == profile1.offsets


def test_build_comparison_is_idempotent():
    basal_b = [0.8] * 6 + [1.1] * 10 + [0.9] * 8
    profile1, profile2 = _profile(), _profile(basal=basal_b, isf=50.0)
    engine = ScheduleDiffEngine()

    first = engine.build_comparison(profile1, profile2, "A", "B")
    second = engine.build_comparison(profile1, profile2, "A", "B")

    assert first == second


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_rows_match_number_of_runs(seed):
    rng = np.random.default_rng(seed)
    basal_a = rng.choice([0.5, 0.8, 1.0], size=24).tolist()
    basal_b = rng.choice([0.5, 0.8, 1.0], size=24).tolist()
    expected_runs = 1 + sum(
        1
        for hour in range(1, 24)
        if (basal_a[hour], basal_b[hour]) != (basal_a[hour - 1], basal_b[hour - 1])
    )

    table = build_comparison(_profile(basal=basal_a), _profile(basal=basal_b), "A", "B").basal

    assert 1 <= len(table.hour_rows) <= 24
    assert len(table.hour_rows) == expected_runs
    assert table.rows[-1].time_label == "Σ"


def test_alternating_values_emit_a_row_every_hour():
    hourly = [1.0 if hour % 2 else 2.0 for hour in range(24)]

    table = build_comparison(_profile(basal=hourly), _profile(), "A", "B").basal

    assert len(table.hour_rows) == 24
    assert [row.time_label for row in table.hour_rows][:3] == ["00:00", "01:00", "02:00"]


def test_unknown_unit_fails_whole_comparison():
    with pytest.raises(ValueError):
        build_comparison(_profile(), _profile(), "A", "B", "furlongs")


def test_unconvertible_display_unit_fails_instead_of_emitting_rows():
    bogus = UnitContext(display_unit="bogus")  # type: ignore[arg-type]

    with pytest.raises(ValueError):
        build_comparison(_profile(), _profile(), "A", "B", bogus)


def test_units_default_to_first_profile():
    comparison = build_comparison(_profile(units=GlucoseUnit.MMOL), _profile(), "A", "B")

    assert comparison.units is GlucoseUnit.MMOL
    assert comparison.units_text == "mmol"


def test_effective_comparison_applies_percentage():
    engine = ScheduleDiffEngine()

    comparison = engine.build_effective_comparison(_profile(basal=1.0, ic=10.0), "Default", percentage=150)

    assert comparison.name2 == "Default (150%)"
    assert comparison.basal.rows == (
        ComparisonRow("00:00", "1.00", "1.50"),
        ComparisonRow("Σ", "24.00", "36.00"),
    )
    assert comparison.insulin_to_carb.rows == (ComparisonRow("00:00", "10.0", "6.7"),)
    assert comparison.target.rows == (ComparisonRow("00:00", "100 - 120", "100 - 120"),)


def test_comparison_table_to_frame():
    table = build_comparison(_profile(basal=1.0), _profile(basal=1.2), "Base", "New").basal

    frame = table.to_frame()

    assert list(frame.columns) == ["time", "Base", "New"]
    assert frame.iloc[0].tolist() == ["00:00", "1.00", "1.20"]
    assert frame.iloc[-1]["time"] == "Σ"

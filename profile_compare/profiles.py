"""In-memory dosing profiles built from block schedules."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Mapping

import numpy as np

from .models import SECONDS_PER_DAY, SECONDS_PER_HOUR, ScheduleKind, check_offset
from .units import GlucoseUnit


@dataclass(frozen=True)
class Schedule:
    """Step function over a day: each value holds from its start until the next start."""

    starts: tuple[int, ...]
    values: tuple[float, ...]

    def __post_init__(self) -> None:
        if not self.starts:
            raise ValueError("Schedule requires at least one block")
        if len(self.starts) != len(self.values):
            raise ValueError("Schedule starts and values must have the same length")
        if self.starts[0] != 0:
            raise ValueError(f"First schedule block must start at midnight, got {self.starts[0]}s")
        if any(b <= a for a, b in zip(self.starts, self.starts[1:])):
            raise ValueError("Schedule block starts must be strictly increasing")
        if self.starts[-1] >= SECONDS_PER_DAY:
            raise ValueError(f"Schedule block starts must be below {SECONDS_PER_DAY}s")

    @classmethod
    def constant(cls, value: float) -> "Schedule":
        return cls(starts=(0,), values=(float(value),))

    @classmethod
    def from_blocks(cls, blocks: Iterable[tuple[int, float]]) -> "Schedule":
        """Build from ``(start_seconds, value)`` pairs in any order."""

        ordered = sorted((int(start), float(value)) for start, value in blocks)
        return cls(
            starts=tuple(start for start, _ in ordered),
            values=tuple(value for _, value in ordered),
        )

    @classmethod
    def from_hourly(cls, values: Iterable[float]) -> "Schedule":
        """Build from 24 hourly values, merging equal neighbours."""

        hourly = [float(value) for value in values]
        if len(hourly) != 24:
            raise ValueError(f"Expected 24 hourly values, got {len(hourly)}")
        blocks = [(hour * SECONDS_PER_HOUR, value) for hour, value in enumerate(hourly)]
        merged = [blocks[0]] + [b for a, b in zip(blocks, blocks[1:]) if b[1] != a[1]]
        return cls.from_blocks(merged)

    def value_at(self, second_of_day: int) -> float:
        check_offset(second_of_day)
        index = int(np.searchsorted(np.asarray(self.starts), second_of_day, side="right")) - 1
        return self.values[index]

    def block_durations(self) -> np.ndarray:
        """Duration of each block in seconds."""

        bounds = np.append(np.asarray(self.starts, dtype=float), float(SECONDS_PER_DAY))
        return np.diff(bounds)

    def scaled(self, factor: float) -> "Schedule":
        return Schedule(starts=self.starts, values=tuple(value * factor for value in self.values))

    def daily_integral(self) -> float:
        """Sum of value x hours over the whole day."""

        hours = self.block_durations() / SECONDS_PER_HOUR
        return float(np.sum(np.asarray(self.values, dtype=float) * hours))


@dataclass(frozen=True)
class ScheduleProfile:
    """A 24-hour dosing profile; glucose values are stored in mg/dL.

    ``percentage`` and ``timeshift_hours`` describe a profile switch applied on
    top of the base schedules: basal scales with the percentage, IC and ISF
    scale inversely, targets are unchanged. A positive timeshift moves the
    schedule later in the day.
    """

    basal: Schedule
    ic: Schedule
    isf: Schedule
    target_low: Schedule
    target_high: Schedule
    units: GlucoseUnit = GlucoseUnit.MGDL
    percentage: int = 100
    timeshift_hours: int = 0

    def __post_init__(self) -> None:
        if self.percentage <= 0:
            raise ValueError(f"Profile percentage must be > 0, got {self.percentage}")
        if not -23 <= self.timeshift_hours <= 23:
            raise ValueError(f"Timeshift must be within +/-23 hours, got {self.timeshift_hours}")

    @property
    def _schedules(self) -> Mapping[ScheduleKind, Schedule]:
        return {
            ScheduleKind.BASAL: self.basal,
            ScheduleKind.IC: self.ic,
            ScheduleKind.ISF: self.isf,
            ScheduleKind.TARGET_LOW: self.target_low,
            ScheduleKind.TARGET_HIGH: self.target_high,
        }

    def value_at(self, kind: ScheduleKind, second_of_day: int) -> float:
        check_offset(second_of_day)
        shifted = (second_of_day - self.timeshift_hours * SECONDS_PER_HOUR) % SECONDS_PER_DAY
        raw = self._schedules[kind].value_at(shifted)
        factor = self.percentage / 100.0
        if kind is ScheduleKind.BASAL:
            return raw * factor
        if kind in (ScheduleKind.IC, ScheduleKind.ISF):
            return raw / factor
        return raw

    def base_basal_sum(self) -> float:
        return self.basal.daily_integral()

    def percentage_basal_sum(self) -> float:
        return self.base_basal_sum() * self.percentage / 100.0

    def display_unit(self) -> GlucoseUnit:
        return self.units

    def with_switch(self, *, percentage: int = 100, timeshift_hours: int = 0) -> "ScheduleProfile":
        """Return the effective profile for a switch applied to this profile."""

        return replace(self, percentage=percentage, timeshift_hours=timeshift_hours)

    @classmethod
    def flat(
        cls,
        *,
        basal: float,
        ic: float,
        isf_mgdl: float,
        target_low_mgdl: float,
        target_high_mgdl: float,
        units: GlucoseUnit = GlucoseUnit.MGDL,
    ) -> "ScheduleProfile":
        """Profile with a single block per schedule."""

        return cls(
            basal=Schedule.constant(basal),
            ic=Schedule.constant(ic),
            isf=Schedule.constant(isf_mgdl),
            target_low=Schedule.constant(target_low_mgdl),
            target_high=Schedule.constant(target_high_mgdl),
            units=units,
        )


def switch_name(name: str, percentage: int, timeshift_hours: int) -> str:
    """Display name of a profile switch, e.g. ``Default (150%,2h)``."""

    if percentage == 100 and timeshift_hours == 0:
        return name
    suffix = f"{percentage}%"
    if timeshift_hours != 0:
        suffix += f",{timeshift_hours}h"
    return f"{name} ({suffix})"

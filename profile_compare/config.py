"""Environment-driven settings for the comparison engine and overview ticker."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from .units import GlucoseUnit

PROFILE_COMPARE_GLUCOSE_UNIT = os.getenv("PROFILE_COMPARE_GLUCOSE_UNIT")
PROFILE_COMPARE_TICK_SECONDS = os.getenv("PROFILE_COMPARE_TICK_SECONDS", "30")
PROFILE_COMPARE_LOG_LEVEL = os.getenv("PROFILE_COMPARE_LOG_LEVEL", "WARNING")

DEFAULT_TICK_SECONDS = 30.0
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class UnitLabels:
    """Unit captions attached to each comparison table."""

    basal: str = "U/h"
    insulin_to_carb: str = "g/U"
    per_unit: str = "/U"

    def sensitivity(self, unit: GlucoseUnit) -> str:
        return f"{unit.as_text} {self.per_unit}"

    def target(self, unit: GlucoseUnit) -> str:
        return unit.as_text


@dataclass(frozen=True)
class CompareSettings:
    """Resolved runtime settings."""

    display_unit: Optional[GlucoseUnit] = None
    tick_interval_seconds: float = DEFAULT_TICK_SECONDS
    labels: UnitLabels = field(default_factory=UnitLabels)
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.tick_interval_seconds <= 0:
            raise ValueError("tick_interval_seconds must be > 0")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level!r}")


def load_settings(
    *,
    glucose_unit: Optional[str] = None,
    tick_seconds: Optional[str] = None,
    log_level: Optional[str] = None,
) -> CompareSettings:
    """Build settings from explicit values, falling back to the environment."""

    unit_value = glucose_unit if glucose_unit is not None else PROFILE_COMPARE_GLUCOSE_UNIT
    tick_value = tick_seconds if tick_seconds is not None else PROFILE_COMPARE_TICK_SECONDS
    try:
        tick_interval = float(tick_value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid tick interval: {tick_value!r}") from None

    return CompareSettings(
        display_unit=GlucoseUnit.parse(unit_value) if unit_value else None,
        tick_interval_seconds=tick_interval,
        log_level=(log_level or PROFILE_COMPARE_LOG_LEVEL).upper(),
    )

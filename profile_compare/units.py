"""Glucose unit variants, conversion and display precision."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Final, Mapping

MMOLL_TO_MGDL: Final[float] = 18.0
MGDL_TO_MMOLL: Final[float] = 1 / MMOLL_TO_MGDL


class GlucoseUnit(str, Enum):
    """Display unit for glucose-related values. mg/dL is the base unit."""

    MGDL = "mg/dl"
    MMOL = "mmol"

    @property
    def as_text(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "str | GlucoseUnit") -> "GlucoseUnit":
        """Accept the common spellings used in profile documents."""

        if isinstance(value, GlucoseUnit):
            return value
        key = str(value).strip().lower().replace(" ", "")
        if key in {"mg/dl", "mgdl", "mg"}:
            return cls.MGDL
        if key in {"mmol", "mmol/l", "mmoll"}:
            return cls.MMOL
        raise ValueError(f"Unknown glucose unit: {value!r}")


# Decimal places used for target bounds, keyed by display unit.
TARGET_PRECISION: Final[Mapping[GlucoseUnit, int]] = {
    GlucoseUnit.MGDL: 0,
    GlucoseUnit.MMOL: 1,
}


def target_precision(unit: GlucoseUnit) -> int:
    try:
        return TARGET_PRECISION[unit]
    except KeyError:
        raise ValueError(f"No target precision defined for unit {unit!r}") from None


def convert_from_mgdl(value: float, unit: GlucoseUnit) -> float:
    """Convert a base-unit (mg/dL) value into ``unit``."""

    if unit is GlucoseUnit.MGDL:
        return value
    if unit is GlucoseUnit.MMOL:
        return value * MGDL_TO_MMOLL
    raise ValueError(f"Cannot convert to unknown glucose unit {unit!r}")


def convert_to_mgdl(value: float, unit: GlucoseUnit) -> float:
    """Canonicalize a value stored in ``unit`` into mg/dL."""

    if unit is GlucoseUnit.MGDL:
        return value
    if unit is GlucoseUnit.MMOL:
        return value * MMOLL_TO_MGDL
    raise ValueError(f"Cannot convert from unknown glucose unit {unit!r}")


@dataclass(frozen=True)
class UnitContext:
    """Active display unit plus the conversion applied to base-unit readings."""

    display_unit: GlucoseUnit
    converter: Callable[[float, GlucoseUnit], float] = convert_from_mgdl

    def convert(self, value: float) -> float:
        return self.converter(value, self.display_unit)

    @property
    def target_places(self) -> int:
        return target_precision(self.display_unit)

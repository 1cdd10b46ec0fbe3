"""Loading dosing profiles from profile store JSON documents."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from models.profile_models import ProfileBlockModel, ProfileStoreDocument, ProfileStoreEntry

from .profiles import Schedule, ScheduleProfile
from .units import GlucoseUnit, convert_to_mgdl


def _parse_hhmm(value: str) -> int:
    try:
        hours_text, minutes_text = value.strip().split(":")[:2]
        hours, minutes = int(hours_text), int(minutes_text)
    except ValueError:
        raise ValueError(f"Invalid block time {value!r}; expected HH:MM") from None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid block time {value!r}; expected HH:MM")
    return hours * 3600 + minutes * 60


def _block_start(block: ProfileBlockModel) -> int:
    if block.timeAsSeconds is not None:
        return block.timeAsSeconds
    if block.time:
        return _parse_hhmm(block.time)
    raise ValueError("Profile block has neither time nor timeAsSeconds")


def _to_schedule(blocks: Sequence[ProfileBlockModel], *, units: Optional[GlucoseUnit] = None) -> Schedule:
    """Build a schedule, canonicalizing glucose values to mg/dL when ``units`` is given."""

    if not blocks:
        raise ValueError("Profile schedule is empty")
    pairs = []
    for block in blocks:
        value = convert_to_mgdl(block.value, units) if units is not None else block.value
        pairs.append((_block_start(block), value))
    return Schedule.from_blocks(pairs)


def convert_profile_entry(
    entry: ProfileStoreEntry,
    *,
    default_units: Optional[str] = None,
    percentage: int = 100,
    timeshift_hours: int = 0,
) -> ScheduleProfile:
    """Convert a validated store entry into a ``ScheduleProfile``."""

    units_text = entry.units or default_units
    if not units_text:
        raise ValueError("Profile does not declare its glucose units")
    units = GlucoseUnit.parse(units_text)

    return ScheduleProfile(
        basal=_to_schedule(entry.basal),
        ic=_to_schedule(entry.carbratio),
        isf=_to_schedule(entry.sens, units=units),
        target_low=_to_schedule(entry.target_low, units=units),
        target_high=_to_schedule(entry.target_high, units=units),
        units=units,
        percentage=percentage,
        timeshift_hours=timeshift_hours,
    )


def parse_profile_document(payload: Mapping[str, Any], fallback_name: str = "profile") -> ProfileStoreDocument:
    """Accept either a full profile store or a single bare profile entry."""

    if "store" in payload:
        return ProfileStoreDocument(**payload)
    entry = ProfileStoreEntry(**payload)
    return ProfileStoreDocument(defaultProfile=fallback_name, units=entry.units, store={fallback_name: entry})


class JsonProfileSource:
    """Reads named profiles from a profile store JSON file."""

    def __init__(self, path: Path) -> None:
        if not path.is_file():
            raise FileNotFoundError(f"Profile file not found: {path}")
        self._path = path
        self._document: Optional[ProfileStoreDocument] = None

    @property
    def path(self) -> Path:
        return self._path

    def document(self) -> ProfileStoreDocument:
        if self._document is None:
            with self._path.open(encoding="utf-8") as handle:
                payload = json.load(handle)
            if not isinstance(payload, dict):
                raise ValueError(f"Profile file {self._path} must contain a JSON object")
            self._document = parse_profile_document(payload, fallback_name=self._path.stem)
            logging.info(f"Loaded {len(self._document.store)} profile(s) from {self._path}")
        return self._document

    def names(self) -> list[str]:
        return sorted(self.document().store)

    def default_name(self) -> str:
        document = self.document()
        if document.defaultProfile and document.defaultProfile in document.store:
            return document.defaultProfile
        if len(document.store) == 1:
            return next(iter(document.store))
        raise ValueError(f"{self._path} has several profiles and no usable defaultProfile")

    def load(
        self,
        name: Optional[str] = None,
        *,
        percentage: int = 100,
        timeshift_hours: int = 0,
    ) -> tuple[str, ScheduleProfile]:
        """Return ``(name, profile)``; the default profile is used when ``name`` is None."""

        document = self.document()
        resolved = name or self.default_name()
        if resolved not in document.store:
            raise KeyError(f"Profile {resolved!r} not found in {self._path}; available: {self.names()}")
        profile = convert_profile_entry(
            document.store[resolved],
            default_units=document.units,
            percentage=percentage,
            timeshift_hours=timeshift_hours,
        )
        return resolved, profile

"""Latest-value cells and periodic recompute of the overview state."""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Generic, Iterator, Optional, TypeVar

from .config import DEFAULT_TICK_SECONDS
from .models import OverviewState, ProfileSwitchState, ProgressSample, TimeWindowState, WindowMode
from .progress import compute_progress, now_millis

T = TypeVar("T")

Listener = Callable[[OverviewState], None]
ProgressFn = Callable[[Optional[TimeWindowState], int], ProgressSample]


class LatestValue(Generic[T]):
    """Holds the most recent value published by one upstream source."""

    def __init__(self) -> None:
        self._value: Optional[T] = None
        self._has_value = False

    @property
    def has_value(self) -> bool:
        return self._has_value

    def set(self, value: T) -> None:
        self._value = value
        self._has_value = True

    def get(self) -> T:
        if not self._has_value:
            raise LookupError("No value has been published yet")
        return self._value  # type: ignore[return-value]


class OverviewStateAssembler:
    """Combines temp-target, profile and clock snapshots into an ``OverviewState``.

    Every update of any source recomputes the whole state from the latest
    values. Nothing is computed until each source has published at least once;
    ``None`` is a valid published value meaning "nothing active". Listeners hear
    about the first state and then only about changes to its displayed values.
    """

    def __init__(self, progress: ProgressFn = compute_progress) -> None:
        self._progress = progress
        self._temp_target: LatestValue[Optional[TimeWindowState]] = LatestValue()
        self._profile: LatestValue[Optional[ProfileSwitchState]] = LatestValue()
        self._clock: LatestValue[int] = LatestValue()
        self._state = OverviewState()
        self._published = False
        self._listeners: list[Listener] = []

    @property
    def state(self) -> OverviewState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._temp_target.has_value and self._profile.has_value and self._clock.has_value

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for state changes; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def update_temp_target(self, window: Optional[TimeWindowState]) -> Optional[OverviewState]:
        self._temp_target.set(window)
        return self.recompute()

    def update_profile(self, profile: Optional[ProfileSwitchState]) -> Optional[OverviewState]:
        self._profile.set(profile)
        return self.recompute()

    def tick(self, now: int) -> Optional[OverviewState]:
        self._clock.set(now)
        return self.recompute()

    def recompute(self) -> Optional[OverviewState]:
        """Derive the state from the current cell values; None until all sources published."""

        if not self.ready:
            return None

        now = self._clock.get()
        temp_target = self._temp_target.get()
        profile = self._profile.get()

        state = OverviewState(
            temp_target_text=temp_target.label if temp_target is not None else "",
            temp_target_mode=temp_target.mode if temp_target is not None else WindowMode.NONE,
            temp_target_progress=self._progress(temp_target, now).ratio,
            is_profile_loaded=profile.is_loaded if profile is not None else False,
            profile_name=profile.profile_name if profile is not None else "",
            is_profile_modified=profile.is_modified if profile is not None else False,
            profile_progress=self._progress(profile.window if profile is not None else None, now).ratio,
            sampled_at=now,
        )
        changed = not self._published or state != self._state
        self._state = state
        self._published = True
        if changed:
            for listener in list(self._listeners):
                listener(state)
        return state


def iter_ticks(
    clock: Callable[[], int] = now_millis,
    interval_seconds: float = DEFAULT_TICK_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[int]:
    """Yield the current time immediately, then again after every interval."""

    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be > 0")
    while True:
        yield clock()
        sleep(interval_seconds)


async def run_ticker(
    assembler: OverviewStateAssembler,
    *,
    clock: Callable[[], int] = now_millis,
    interval_seconds: float = DEFAULT_TICK_SECONDS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    max_ticks: Optional[int] = None,
) -> int:
    """Feed clock samples into ``assembler`` until cancelled or ``max_ticks`` is reached."""

    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be > 0")
    ticks = 0
    logging.info(f"Overview ticker started with {interval_seconds}s interval")
    try:
        while max_ticks is None or ticks < max_ticks:
            assembler.tick(clock())
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            await sleep(interval_seconds)
    finally:
        logging.info(f"Overview ticker stopped after {ticks} tick(s)")
    return ticks

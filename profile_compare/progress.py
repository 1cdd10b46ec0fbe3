"""Elapsed-time progress for temp targets and profile switches."""
from __future__ import annotations

import time
from typing import Optional

from .models import ProgressSample, TimeWindowState, WindowMode

NO_PROGRESS = ProgressSample(0.0)


def now_millis() -> int:
    """Current wall-clock time as epoch milliseconds."""

    return int(time.time() * 1000)


def has_window(window: Optional[TimeWindowState]) -> bool:
    """True when the snapshot describes an active window with a usable duration."""

    if window is None or not window.is_present:
        return False
    if window.mode is WindowMode.NONE:
        return False
    return window.duration_millis > 0


def compute_progress(window: Optional[TimeWindowState], now: int) -> ProgressSample:
    """Return the elapsed fraction of ``window`` at ``now``, clamped to [0, 1].

    Start, duration and ``now`` are all epoch milliseconds. The result depends
    only on the arguments, so samples may be taken at any cadence or order.
    """

    if not has_window(window):
        return NO_PROGRESS
    elapsed = now - window.start_timestamp
    ratio = float(elapsed) / float(window.duration_millis)
    return ProgressSample(min(1.0, max(0.0, ratio)))


def remaining_millis(window: Optional[TimeWindowState], now: int) -> int:
    """Milliseconds left in the window, never negative."""

    if not has_window(window):
        return 0
    return max(0, window.end_timestamp - now)

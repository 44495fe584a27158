"""tour/countdown.py — World-cycle driven region rotation.

Ties region changes to the in-world cycle instead of a wall clock.
Once per cycle, when ``cycle_timer / cycle_length`` first passes the
threshold, a random delay is drawn and a countdown starts.  When it
runs out, :meth:`CycleCountdown.update` returns ``True`` exactly once
and the scheduler rotates to a fresh region.

    countdown = CycleCountdown(threshold=0.85)
    if countdown.update(dt, timer, length, locked=room_locked):
        rotate()
"""

from __future__ import annotations
import random
from typing import Any

from components.tour_state import CountdownState


_EPS = 1e-6


class CycleCountdown:
    """Arms on a cycle-progress threshold, fires after a random delay."""

    def __init__(self, threshold: float = 0.85,
                 delay_min: float = 60.0, delay_max: float = 180.0,
                 rng: Any = None) -> None:
        self._rng = rng or random
        self.threshold = threshold
        self.delay_min = min(delay_min, delay_max)
        self.delay_max = max(delay_min, delay_max)
        self.state = CountdownState()
        self._last_progress: float | None = None

    # ── Per-tick ─────────────────────────────────────────────────────

    def update(self, dt: float, cycle_timer: float, cycle_length: float,
               locked: bool = False) -> bool:
        """Advance one tick.  Returns True on the tick the countdown ends."""
        progress = self.progress(cycle_timer, cycle_length)
        if progress is None:
            return False

        # Timer went backwards: a new cycle began.
        if self._last_progress is not None and progress < self._last_progress:
            self.state.triggered = False
        self._last_progress = progress

        s = self.state
        if not s.active and not s.triggered and progress >= self.threshold:
            self.arm()

        if not s.active or locked:
            return False

        s.elapsed += dt
        if s.elapsed + _EPS >= s.duration:
            s.active = False
            s.elapsed = s.duration
            print("[COUNTDOWN] elapsed — region rotation due")
            return True
        return False

    # ── Control ──────────────────────────────────────────────────────

    def arm(self) -> float:
        """Start the countdown with a freshly drawn delay."""
        s = self.state
        s.duration = self._rng.uniform(self.delay_min, self.delay_max)
        s.elapsed = 0.0
        s.active = True
        s.triggered = True
        print(f"[COUNTDOWN] armed: {s.duration:.0f}s until region change")
        return s.duration

    def reset(self) -> None:
        self.state.reset()
        self._last_progress = None

    def on_region_entered(self, cycle_timer: float,
                          cycle_length: float) -> bool:
        """Reset for a new region; arm at once if already past threshold."""
        self.reset()
        progress = self.progress(cycle_timer, cycle_length)
        if progress is None:
            return False
        self._last_progress = progress
        if progress >= self.threshold:
            self.arm()
            return True
        return False

    # ── Queries ──────────────────────────────────────────────────────

    @staticmethod
    def progress(cycle_timer: float, cycle_length: float) -> float | None:
        """Cycle progress ratio, or None when the cycle length is unknown."""
        if cycle_length <= 0:
            return None
        return cycle_timer / cycle_length

    @property
    def active(self) -> bool:
        return self.state.active

    @property
    def remaining(self) -> float | None:
        """Seconds until rotation, or None when no countdown is running."""
        if not self.state.active:
            return None
        return max(0.0, self.state.duration - self.state.elapsed)

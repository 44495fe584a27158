"""tour/selector.py — Room and camera-anchor selection.

Two decisions are made here every time the tour needs a destination:

1. **Which room.**  Gates are never destinations.  Rooms seen in the
   last ``HISTORY_SIZE`` picks are skipped; when that leaves nothing,
   the history is dropped and every non-gate room is eligible again.

2. **Which anchor inside the room**, governed by a :class:`CameraMode`:

   ====================  ==============================================
   FIRST_ONLY            always anchor 0
   SEQUENTIAL            0, 1, ..., K-1 in order, then change rooms
   RANDOM_EXPLORATION    random start, then a random number of further
                         distinct anchors (drawn up front), no repeats
   RANDOM                independent uniform pick every time
   ====================  ==============================================

``should_stay`` tells the scheduler whether the current mode wants
another anchor in the occupied room instead of a new room.
"""

from __future__ import annotations
import random
from enum import Enum
from typing import Any, Iterable

from components.tour_state import HISTORY_SIZE, RoomHistory, VantageState
from components.world import Room
from tour.errors import NoDestinationAvailable


class CameraMode(Enum):
    FIRST_ONLY = "first_only"
    SEQUENTIAL = "sequential"
    RANDOM_EXPLORATION = "random_exploration"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: "str | CameraMode | None",
              default: "CameraMode | None" = None) -> "CameraMode":
        """Accept ``"RandomExploration"``, ``"random-exploration"``, etc."""
        if isinstance(value, cls):
            return value
        key = "".join(ch for ch in str(value or "").lower() if ch.isalnum())
        for mode in cls:
            if mode.value.replace("_", "") == key:
                return mode
        if default is not None:
            return default
        raise ValueError(f"unknown camera mode: {value!r}")

    def next(self) -> "CameraMode":
        modes = list(CameraMode)
        return modes[(modes.index(self) + 1) % len(modes)]


class RoomSelector:
    """Picks destination rooms and anchors for the tour."""

    def __init__(self, mode: CameraMode = CameraMode.RANDOM_EXPLORATION,
                 history_size: int = HISTORY_SIZE,
                 rng: Any = None) -> None:
        self._rng = rng or random
        self.mode = mode
        self.history = RoomHistory(history_size)
        self.vantage = VantageState()

    # ── Rooms ────────────────────────────────────────────────────────

    def select_room(self, rooms: Iterable[Room], region: str = "",
                    exclude: str = "") -> Room:
        """Uniform pick among non-gate rooms not in recent history.

        *exclude* (the occupied room) is only eligible when it is the
        region's sole non-gate room.  Raises
        :class:`NoDestinationAvailable` when the region has no non-gate
        room at all.
        """
        candidates = [r for r in rooms if r is not None and not r.gate]
        others = [r for r in candidates if r.name != exclude]
        available = [r for r in others if r.name not in self.history]
        if not available:
            self.history.clear()
            available = others or candidates
        if not available:
            raise NoDestinationAvailable(region)
        return self._rng.choice(available)

    def record_room(self, name: str, current: str = "") -> bool:
        """Push *name* unless it is the occupied room or already recent."""
        if not name or name == current or name in self.history:
            return False
        self.history.push(name)
        return True

    # ── Anchors ──────────────────────────────────────────────────────

    def should_stay(self, anchor_count: int) -> bool:
        """True if the mode wants another anchor in the current room."""
        v = self.vantage
        if self.mode is CameraMode.SEQUENTIAL:
            return anchor_count > 1 and v.index < anchor_count - 1
        if self.mode is CameraMode.RANDOM_EXPLORATION:
            return v.remaining_jumps > 0 and bool(v.unvisited)
        return False

    def select_anchor(self, count: int, is_new_room: bool) -> int:
        """Index of the next anchor among *count* anchors."""
        if count <= 0:
            return 0
        v = self.vantage

        if self.mode is CameraMode.FIRST_ONLY:
            v.index = 0

        elif self.mode is CameraMode.SEQUENTIAL:
            v.index = 0 if is_new_room else (v.index + 1) % count

        elif self.mode is CameraMode.RANDOM_EXPLORATION:
            if is_new_room:
                v.unvisited = list(range(count))
                v.index = v.unvisited.pop(self._rng.randrange(len(v.unvisited)))
                # Decide now how many more distinct anchors to visit.
                v.remaining_jumps = self._rng.randint(0, len(v.unvisited))
            elif v.unvisited:
                v.index = v.unvisited.pop(self._rng.randrange(len(v.unvisited)))
                v.remaining_jumps -= 1

        else:
            v.index = self._rng.randrange(count)

        return v.index

    # ── Resets ───────────────────────────────────────────────────────

    def set_mode(self, mode: CameraMode) -> None:
        self.mode = CameraMode.parse(mode)
        self.vantage.reset()

    def reset(self) -> None:
        """Forget history and vantage state (region change)."""
        self.history.clear()
        self.vantage.reset()

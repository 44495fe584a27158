"""components.tour_state — Transient scheduler state.

Plain dataclasses, no behaviour beyond small resets.  Each instance is
owned by exactly one scheduler component:

    TransitionState   TourController
    VantageState      RoomSelector
    RoomHistory       RoomSelector
    CountdownState    CycleCountdown
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from components.world import Room, Vec2


HISTORY_SIZE = 10


class Phase(Enum):
    DWELLING = "dwelling"
    TRANSITIONING = "transitioning"


@dataclass
class TransitionState:
    """Dwell / transition timers plus the current interpolation leg."""
    phase: Phase = Phase.DWELLING
    dwell_elapsed: float = 0.0          # s
    progress: float = 0.0               # 0..1
    start: Vec2 = (0.0, 0.0)
    target: Vec2 = (0.0, 0.0)
    source_room: Room | None = None
    target_room: Room | None = None
    anchor_index: int = 0

    @property
    def transitioning(self) -> bool:
        return self.phase is Phase.TRANSITIONING


@dataclass
class VantageState:
    """Per-camera-mode bookkeeping for anchor selection within a room."""
    index: int = 0
    unvisited: list[int] = field(default_factory=list)
    remaining_jumps: int = 0

    def reset(self) -> None:
        self.index = 0
        self.unvisited.clear()
        self.remaining_jumps = 0


@dataclass
class CountdownState:
    active: bool = False
    elapsed: float = 0.0                # s
    duration: float = 0.0               # s, drawn per activation
    triggered: bool = False             # armed already this cycle

    def reset(self) -> None:
        self.active = False
        self.elapsed = 0.0
        self.duration = 0.0
        self.triggered = False


class RoomHistory:
    """Bounded FIFO of recently visited room names (oldest first)."""

    def __init__(self, size: int = HISTORY_SIZE) -> None:
        self._names: deque[str] = deque(maxlen=max(1, size))

    def push(self, name: str) -> None:
        self._names.append(name)

    def clear(self) -> None:
        self._names.clear()

    @property
    def size(self) -> int:
        return self._names.maxlen or 0

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self):
        return iter(self._names)

    def __repr__(self) -> str:
        return f"RoomHistory({list(self._names)!r})"

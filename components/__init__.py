"""components — Plain dataclasses shared by the tour scheduler.

Submodules
----------
world          Region, Room, Vec2
tour_state     Phase, TransitionState, VantageState, CountdownState, RoomHistory
resources      Camera, TourStatus
tour_log       TourLog

All public names are re-exported here so code can do
``from components import Room``.
"""

# ── World data ───────────────────────────────────────────────────────
from components.world import Region, Room, Vec2

# ── Scheduler state ──────────────────────────────────────────────────
from components.tour_state import (
    Phase, TransitionState, VantageState, CountdownState, RoomHistory,
    HISTORY_SIZE,
)

# ── Session resources ────────────────────────────────────────────────
from components.resources import Camera, TourStatus

# ── Logging ──────────────────────────────────────────────────────────
from components.tour_log import TourLog

__all__ = [
    # world
    "Region", "Room", "Vec2",
    # tour_state
    "Phase", "TransitionState", "VantageState", "CountdownState",
    "RoomHistory", "HISTORY_SIZE",
    # resources
    "Camera", "TourStatus",
    # logging
    "TourLog",
]

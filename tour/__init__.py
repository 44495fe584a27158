"""tour — Exploration & transition scheduler package.

Top-level modules
-----------------
controller   — dwell / transition state machine (TourController)
rotation     — shuffled region traversal with a visited set
selector     — room pick with history, camera anchor modes
countdown    — world-cycle driven region rotation
regions      — static region directory, start rooms, campaigns
settings     — user-tunable durations and modes (TourSettings)
world_model  — world adapter interface + in-memory RoomGraph
easing       — ease-in-out cubic, 2D lerp
errors       — TourError hierarchy
"""

from tour.controller import TourController
from tour.countdown import CycleCountdown
from tour.errors import (
    NoDestinationAvailable, StaleRoomReference, TourError, WorldNotReady,
)
from tour.rotation import RegionRotation
from tour.selector import CameraMode, RoomSelector
from tour.settings import TourSettings
from tour.world_model import RoomGraph, WorldModel

__all__ = [
    "TourController", "CycleCountdown", "RegionRotation", "RoomSelector",
    "CameraMode", "TourSettings", "RoomGraph", "WorldModel",
    "TourError", "NoDestinationAvailable", "StaleRoomReference",
    "WorldNotReady",
]

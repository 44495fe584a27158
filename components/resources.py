"""components.resources — Session-level singletons (not per-room)."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Camera:
    """The observing camera.  Owned by the world model."""
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0

    @property
    def pos(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass
class TourStatus:
    """Read-only snapshot of the scheduler for overlays and ambience.

    Built fresh by ``TourController.status()``; mutating it has no
    effect on the scheduler.
    """
    region: str = ""
    region_name: str = ""
    next_region: str = ""
    previous_region: str = ""
    current_room: str = ""
    next_room: str = ""
    previous_room: str = ""
    rooms_explored: int = 0
    regions_explored: int = 0
    total_regions: int = 0
    region_timer: float = 0.0           # s
    region_duration: float = 0.0        # s
    countdown_remaining: float | None = None
    transitioning: bool = False
    room_locked: bool = False
    awaiting_world: bool = False
    camera_mode: str = ""
    region_trigger: str = ""
    campaign: str = ""

"""components.world — Regions, rooms and camera anchors.

All positions are world-space metres.  Rooms are owned by the world
model; the scheduler only reads them (plus realize / abstractize
requests routed back through the world model).
"""

from __future__ import annotations
from dataclasses import dataclass, field


# A camera anchor is a fixed 2D viewpoint inside a room.
Vec2 = tuple[float, float]


@dataclass(frozen=True)
class Region:
    """A top-level zone of the world.

    ``content_set`` is ``"base"`` or ``"expansion"``.
    """
    code: str
    name: str
    content_set: str = "base"


@dataclass
class Room:
    """An addressable sub-area of a region.

    Attributes
    ----------
    name : str
        Unique room identifier, e.g. ``"SU_A01"``.
    region : str
        Parent region code.
    gate : bool
        Gates are transition corridors, never tour destinations.
    anchors : list[Vec2]
        Camera anchor positions (world space).  Only handed out once
        the room is realized.
    origin : Vec2
        Top-left corner of the room bounds (preview layout).
    size : Vec2
        Width / height of the room bounds.
    connections : list[str]
        Neighbouring room names.
    """
    name: str = ""
    region: str = ""
    gate: bool = False
    anchors: list[Vec2] = field(default_factory=list)
    origin: Vec2 = (0.0, 0.0)
    size: Vec2 = (48.0, 32.0)
    connections: list[str] = field(default_factory=list)

    @property
    def center(self) -> Vec2:
        return (self.origin[0] + self.size[0] * 0.5,
                self.origin[1] + self.size[1] * 0.5)

"""tour/world_model.py — World adapter consumed by the tour scheduler.

The scheduler never touches engine internals.  Everything it needs
from the world goes through the narrow :class:`WorldModel` interface:
room lists, realizing / abstractizing rooms, the world-cycle clock,
the camera, and region reloads.

:class:`RoomGraph` is the in-memory implementation used by the preview
host and the tests.  It can be built by hand, loaded from TOML, or
generated procedurally:

    world = RoomGraph.from_toml("data/world.toml")
    world.load_region("SU")
    world.advance(dt)            # cycle clock + pending reloads
"""

from __future__ import annotations
import random
from pathlib import Path
from typing import Any, Iterable

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli

from components.resources import Camera
from components.world import Room, Vec2
from tour.regions import normalize, start_room


class WorldModel:
    """Interface the scheduler talks to.  Subclasses override everything."""

    @property
    def region(self) -> str:
        """Code of the region currently loaded, or ``""``."""
        raise NotImplementedError

    def is_ready(self) -> bool:
        """True once the loaded region has rooms and a camera."""
        raise NotImplementedError

    def list_rooms(self, region: str) -> list[Room]:
        raise NotImplementedError

    def has_room(self, name: str) -> bool:
        raise NotImplementedError

    def realize_room(self, room: Room) -> list[Vec2]:
        """Materialise *room* and return its camera anchors.

        Calling it on an already realized room just returns the anchors.
        """
        raise NotImplementedError

    def is_realized(self, room: Room) -> bool:
        raise NotImplementedError

    def abstractize_room(self, room: Room) -> None:
        raise NotImplementedError

    def cycle_position(self) -> tuple[float, float]:
        """``(cycle_timer, cycle_length)``; length <= 0 means unknown."""
        raise NotImplementedError

    def camera_position(self) -> Vec2:
        raise NotImplementedError

    def set_camera_position(self, pos: Vec2) -> None:
        raise NotImplementedError

    def request_reload(self, region: str) -> None:
        """Ask the world loader to switch to *region* (asynchronous)."""
        raise NotImplementedError


class RoomGraph(WorldModel):
    """In-memory world: rooms per region, a cycle clock and a camera.

    Reloads complete after ``reload_delay`` seconds of :meth:`advance`
    (0 = on the next advance).  With ``autogenerate`` set, regions
    without room data get a procedurally generated layout the first
    time they are loaded.
    """

    def __init__(self, cycle_length: float = 600.0,
                 reload_delay: float = 0.0,
                 autogenerate: bool = False,
                 seed: int | None = None) -> None:
        self.rooms: dict[str, dict[str, Room]] = {}
        self.cycle_lengths: dict[str, float] = {}
        self.default_cycle_length = cycle_length
        self.reload_delay = reload_delay
        self.autogenerate = autogenerate
        self.camera = Camera()
        self.cycle_timer: float = 0.0
        self.realized: set[str] = set()
        self.reload_requests: list[str] = []
        self._seed = seed
        self._region: str = ""
        self._pending: str | None = None
        self._reload_left: float = 0.0

    # ── Construction ─────────────────────────────────────────────────

    def add_room(self, room: Room) -> Room:
        room.region = normalize(room.region)
        self.rooms.setdefault(room.region, {})[room.name] = room
        return room

    def add_region(self, region: str, rooms: Iterable[Room],
                   cycle_length: float | None = None) -> None:
        region = normalize(region)
        self.rooms.setdefault(region, {})
        for room in rooms:
            room.region = region
            self.add_room(room)
        if cycle_length is not None:
            self.cycle_lengths[region] = float(cycle_length)

    def generate_region(self, region: str, room_count: int = 12,
                        gates: int = 2, max_anchors: int = 4,
                        seed: int | None = None) -> list[Room]:
        """Lay out *room_count* rooms on a grid with random anchors.

        Room names follow ``<CODE>_A01``... and gates
        ``GATE_<CODE>_<n>``.  Deterministic for a given seed.
        """
        region = normalize(region)
        rng = random.Random(f"{seed if seed is not None else self._seed}:{region}")
        cols = 4
        cell_w, cell_h = 64.0, 44.0
        rooms: list[Room] = []
        total = room_count + gates
        for i in range(total):
            gate = i >= room_count
            name = (f"GATE_{region}_{i - room_count + 1}" if gate
                    else f"{region}_A{i + 1:02d}")
            w = rng.uniform(36.0, 56.0)
            h = rng.uniform(24.0, 36.0)
            ox = (i % cols) * cell_w
            oy = (i // cols) * cell_h
            n_anchors = 1 if gate else rng.randint(1, max_anchors)
            anchors = [(round(ox + rng.uniform(4.0, w - 4.0), 1),
                        round(oy + rng.uniform(4.0, h - 4.0), 1))
                       for _ in range(n_anchors)]
            rooms.append(Room(name=name, region=region, gate=gate,
                              anchors=anchors, origin=(ox, oy), size=(w, h)))
        # Chain neighbours so the preview can draw connectivity.
        for a, b in zip(rooms, rooms[1:]):
            a.connections.append(b.name)
            b.connections.append(a.name)
        self.add_region(region, rooms)
        return rooms

    @classmethod
    def generate(cls, regions: Iterable[str], room_count: int = 12,
                 seed: int | None = None, **kwargs: Any) -> "RoomGraph":
        graph = cls(seed=seed, **kwargs)
        for code in regions:
            graph.generate_region(code, room_count=room_count, seed=seed)
        return graph

    # ── Loading ──────────────────────────────────────────────────────

    def load_region(self, region: str) -> bool:
        """Switch to *region* immediately.  Returns True when it has rooms."""
        region = normalize(region)
        if region not in self.rooms and self.autogenerate:
            self.generate_region(region)
        self.realized.clear()
        self._region = region
        self._pending = None
        self.cycle_timer = 0.0
        rooms = self.rooms.get(region, {})
        entry = rooms.get(start_room(region)) or next(iter(rooms.values()), None)
        if entry is not None:
            self.camera.x, self.camera.y = entry.center
        print(f"[WORLD] loaded region {region} ({len(rooms)} rooms)")
        return bool(rooms)

    def request_reload(self, region: str) -> None:
        region = normalize(region)
        self.reload_requests.append(region)
        self._pending = region
        self._reload_left = self.reload_delay
        self._region = ""           # not ready until the reload lands
        print(f"[WORLD] reload requested: {region}")

    def advance(self, dt: float) -> None:
        """Advance the world clock and any pending reload."""
        if self._pending is not None:
            self._reload_left -= dt
            if self._reload_left <= 0.0:
                self.load_region(self._pending)
            return
        length = self.cycle_length
        if length > 0:
            self.cycle_timer += dt
            if self.cycle_timer >= length:
                self.cycle_timer -= length

    @property
    def reloading(self) -> bool:
        return self._pending is not None

    @property
    def cycle_length(self) -> float:
        return self.cycle_lengths.get(self._region, self.default_cycle_length)

    # ── WorldModel ───────────────────────────────────────────────────

    @property
    def region(self) -> str:
        return self._region

    def is_ready(self) -> bool:
        return (self._pending is None and bool(self._region)
                and bool(self.rooms.get(self._region)))

    def list_rooms(self, region: str) -> list[Room]:
        return list(self.rooms.get(normalize(region), {}).values())

    def get_room(self, name: str) -> Room | None:
        for rooms in self.rooms.values():
            if name in rooms:
                return rooms[name]
        return None

    def has_room(self, name: str) -> bool:
        return name in self.rooms.get(self._region, {})

    def realize_room(self, room: Room) -> list[Vec2]:
        self.realized.add(room.name)
        return list(room.anchors)

    def is_realized(self, room: Room) -> bool:
        return room.name in self.realized

    def abstractize_room(self, room: Room) -> None:
        self.realized.discard(room.name)

    def cycle_position(self) -> tuple[float, float]:
        if not self._region:
            return (0.0, 0.0)
        return (self.cycle_timer, self.cycle_length)

    def camera_position(self) -> Vec2:
        return self.camera.pos

    def set_camera_position(self, pos: Vec2) -> None:
        self.camera.x, self.camera.y = float(pos[0]), float(pos[1])

    # ── Serialization ────────────────────────────────────────────────

    @classmethod
    def from_toml(cls, filepath: str | Path, **kwargs: Any) -> "RoomGraph":
        """Load a world from a TOML definition file.

        Expected format (anchors are relative to the room origin):

            [regions.SU]
            cycle_length = 600.0

            [regions.SU.rooms.SU_A01]
            origin = [0, 0]
            size = [48, 32]
            anchors = [[12, 8], [36, 20]]
            connections = ["SU_A02"]

            [regions.SU.rooms.GATE_SU_HI]
            gate = true

        """
        graph = cls(**kwargs)
        filepath = Path(filepath)
        if not filepath.exists():
            print(f"[WORLD] world file not found: {filepath}")
            return graph

        with open(filepath, "rb") as f:
            data = tomllib.load(f)

        count = 0
        for code, rdata in data.get("regions", {}).items():
            if not isinstance(rdata, dict):
                continue
            rooms = []
            for name, room_data in rdata.get("rooms", {}).items():
                if not isinstance(room_data, dict):
                    continue
                rooms.append(_room_from_dict(name, code, room_data))
            graph.add_region(code, rooms, rdata.get("cycle_length"))
            count += len(rooms)

        print(f"[WORLD] loaded {count} rooms in {len(graph.rooms)} regions")
        return graph

    def to_dict(self) -> dict:
        """Serialize the graph to a dict in the ``from_toml`` layout."""
        out: dict = {"regions": {}}
        for code, rooms in self.rooms.items():
            region: dict = {"rooms": {}}
            if code in self.cycle_lengths:
                region["cycle_length"] = self.cycle_lengths[code]
            for name, room in rooms.items():
                ox, oy = room.origin
                region["rooms"][name] = {
                    "gate": room.gate,
                    "origin": list(room.origin),
                    "size": list(room.size),
                    "anchors": [[x - ox, y - oy] for x, y in room.anchors],
                    "connections": list(room.connections),
                }
            out["regions"][code] = region
        return out

    def __repr__(self) -> str:
        return (f"RoomGraph(region={self._region!r}, "
                f"regions={len(self.rooms)}, pending={self._pending!r})")


def _room_from_dict(name: str, region: str, data: dict) -> Room:
    origin_raw = data.get("origin", [0, 0])
    origin = (float(origin_raw[0]), float(origin_raw[1]))
    size_raw = data.get("size", [48, 32])
    size = (float(size_raw[0]), float(size_raw[1]))
    anchors = [(origin[0] + float(a[0]), origin[1] + float(a[1]))
               for a in data.get("anchors", [])
               if isinstance(a, (list, tuple)) and len(a) == 2]
    return Room(
        name=name,
        region=region,
        gate=bool(data.get("gate", False)),
        anchors=anchors,
        origin=origin,
        size=size,
        connections=[str(c) for c in data.get("connections", [])],
    )

"""tour/errors.py — Scheduler failure taxonomy.

Every error here is recoverable: the controller catches it inside the
tick, logs it, and retries on a later tick.  None may escape
``TourController.on_tick``.
"""

from __future__ import annotations


class TourError(Exception):
    """Base class for scheduler errors."""


class NoDestinationAvailable(TourError):
    """Room selection found zero eligible rooms, even after a history reset."""

    def __init__(self, region: str) -> None:
        super().__init__(f"no eligible destination rooms in region {region!r}")
        self.region = region


class WorldNotReady(TourError):
    """The world model has no rooms (or no camera) to work with yet."""


class StaleRoomReference(TourError):
    """A previously selected room vanished from the world snapshot."""

    def __init__(self, room: str) -> None:
        super().__init__(f"room {room!r} is no longer part of the world")
        self.room = room

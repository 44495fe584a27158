"""core/events.py — Tour events and a lightweight event bus.

The scheduler *signals* what it did; collaborators (ambient audio,
ambience population, overlays, the campaign switcher) *react*.  The
scheduler never calls them directly::

    bus = EventBus()
    bus.subscribe("RoomChanged", audio.on_room_changed)
    controller = TourController(world, settings, bus=bus)

The host drains once per frame, after the scheduler tick::

    controller.on_tick(dt)
    bus.drain()          # calls all handlers for pending events

Design rules:
  - Events are plain dataclasses — no behaviour.
  - ``emit()`` is O(1) (just appends).
  - ``drain()`` processes all queued events in FIFO order, so handlers
    see them in the order the scheduler finished its bookkeeping.
  - Handlers may emit new events; those are processed in the same drain.
"""

from __future__ import annotations
import traceback
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class RegionChanged:
    """The rotation moved to a new region."""
    region: str
    previous: str = ""


@dataclass
class RegionReloadRequested:
    """The new region is not loaded; the world loader must switch."""
    region: str


@dataclass
class WorldReady:
    """The scheduler (re)started against a ready world."""
    region: str


@dataclass
class TransitionStarted:
    """The camera started moving toward a new anchor."""
    room: str
    anchor_index: int = 0
    target: tuple[float, float] = (0.0, 0.0)
    stay: bool = False              # same room, next anchor


@dataclass
class TransitionCompleted:
    """The camera arrived at its anchor (every completion)."""
    room: str
    anchor_index: int = 0
    new_room: bool = False


@dataclass
class RoomChanged:
    """The tour entered a different room.  Bookkeeping is final."""
    room: str
    previous: str = ""
    region: str = ""


@dataclass
class CountdownArmed:
    """World-cycle threshold crossed; rotation in ``duration`` seconds."""
    region: str
    duration: float = 0.0


@dataclass
class CampaignSweepComplete:
    """Every region of the campaign has been visited."""
    campaign: str


@dataclass
class CampaignChanged:
    campaign: str
    previous: str = ""


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

class EventBus:
    """Fire-and-forget, queued event bus."""

    def __init__(self):
        self._queue: list[Any] = []
        self._subs: dict[str, list[Callable]] = defaultdict(list)
        self._stats: dict[str, int] = defaultdict(int)

    # ── Public API ───────────────────────────────────────────────────

    def emit(self, event) -> None:
        """Queue an event for processing on next ``drain()``."""
        self._queue.append(event)

    def subscribe(self, event_type: str | type, handler: Callable) -> None:
        """Register *handler* for *event_type* (class or class name)."""
        if isinstance(event_type, type):
            event_type = event_type.__name__
        self._subs[event_type].append(handler)

    def drain(self) -> int:
        """Process all queued events.  Returns number processed.

        A failing handler is reported and skipped; the remaining
        handlers and events still run.
        """
        processed = 0
        safety = 1000  # prevent infinite loops
        while self._queue and safety > 0:
            batch = self._queue[:]
            self._queue.clear()
            for event in batch:
                name = type(event).__name__
                self._stats[name] += 1
                for handler in self._subs.get(name, []):
                    try:
                        handler(event)
                    except Exception as exc:
                        print(f"[EVENT] handler error for {name}: {exc}")
                        traceback.print_exc()
            processed += len(batch)
            safety -= 1
        return processed

    def clear(self) -> None:
        """Discard all pending events."""
        self._queue.clear()

    def pending(self, event_type: str | type | None = None) -> list[Any]:
        """Queued events (optionally of one type), oldest first."""
        if isinstance(event_type, type):
            event_type = event_type.__name__
        return [e for e in self._queue
                if event_type is None or type(e).__name__ == event_type]

    def pending_count(self) -> int:
        return len(self._queue)

    def stats(self) -> dict[str, int]:
        """Return cumulative event counts by type."""
        return dict(self._stats)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"

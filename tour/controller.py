"""tour/controller.py — The tour's transition state machine.

``TourController`` ties the policies together into an unattended
presentation loop: pick a destination, ease the camera toward it,
dwell, repeat, and every so often rotate to a new region.

Usage from a host::

    controller = TourController(world, settings, bus=bus)

    # once per frame, after input handling:
    controller.on_tick(dt)
    bus.drain()

    # on session end:
    controller.on_shutdown()

Per-tick order:

    1. readiness gate        (awaiting a world reload → nothing else runs)
    2. region trigger        (fixed timer, or the world-cycle countdown)
    3. dwell / transition    (timers, camera interpolation)
    4. completion effects    (history → abstractize previous → events)

Every scheduler error is a :class:`TourError`; ``on_tick`` and the
mutators catch, log and retry on a later tick.
"""

from __future__ import annotations
from typing import Any

from components.resources import TourStatus
from components.tour_log import TourLog
from components.tour_state import Phase, TransitionState
from components.world import Room, Vec2
from core.events import (
    CampaignChanged, CampaignSweepComplete, CountdownArmed, EventBus,
    RegionChanged, RegionReloadRequested, RoomChanged, TransitionCompleted,
    TransitionStarted, WorldReady,
)
from tour.countdown import CycleCountdown
from tour.easing import ease_in_out_cubic, lerp2
from tour.errors import StaleRoomReference, TourError, WorldNotReady
from tour.regions import normalize, region_name
from tour.rotation import RegionRotation
from tour.selector import CameraMode, RoomSelector
from tour.settings import (
    REGION_DURATION_MAX, REGION_DURATION_MIN, TRIGGER_CYCLE, TRIGGER_TIMER,
    TourSettings,
)
from tour.world_model import WorldModel


# Absorbs float drift from accumulating many small dt steps.
_EPS = 1e-6


class TourController:
    """Drives the camera through regions and rooms without user input."""

    def __init__(self, world: WorldModel,
                 settings: TourSettings | None = None,
                 bus: EventBus | None = None,
                 log: TourLog | None = None,
                 rng: Any = None) -> None:
        self.world = world
        self.settings = settings or TourSettings()
        self.bus = bus if bus is not None else EventBus()
        self.log = log if log is not None else TourLog()

        s = self.settings
        self.dwell_duration = s.dwell_duration
        self.transition_duration = s.transition_duration
        self.region_duration = s.region_duration
        self.rooms_per_region = s.rooms_per_region
        self.region_trigger = s.region_trigger
        self.campaign = s.campaign

        self.rotation = RegionRotation(s.start_region, rng=rng,
                                       on_region_changed=self._on_region_changed)
        self.selector = RoomSelector(s.camera_mode, s.history_size, rng=rng)
        self.countdown = CycleCountdown(s.countdown_threshold,
                                        s.countdown_min, s.countdown_max,
                                        rng=rng)
        self.state = TransitionState()

        self.room_locked = False
        self.region_timer = 0.0
        self.clock = 0.0

        # Room tracking.  ``current_room`` is the room the camera is in
        # or heading to; the names follow what the overlay shows.
        self.current_room: Room | None = None
        self.previous_room: Room | None = None
        self.current_room_name = ""
        self.next_room_name = ""
        self.previous_room_name = ""
        self._anchors: list[Vec2] = []

        self._awaiting_world = True
        self._reload_pending = False
        self._running = True
        self._failing = False

        print(f"[TOUR] initialised (start region: {self.rotation.current}, "
              f"camera mode: {self.selector.mode.value}, "
              f"trigger: {self.region_trigger})")

    # ── Lifecycle ────────────────────────────────────────────────────

    def on_world_ready(self) -> bool:
        """(Re)start against the world snapshot.  False if it is not ready."""
        if not self._running or not self.world.is_ready():
            return False

        loaded = normalize(self.world.region)
        if loaded and loaded != self.rotation.current:
            # The world loaded something else; follow it.
            self.rotation.force_region(loaded, notify=False)
        self.rotation.mark_visited(self.rotation.current)

        self._awaiting_world = False
        self._reload_pending = False
        self._failing = False
        self.region_timer = 0.0
        self._reset_room_state()
        self.state = TransitionState(dwell_elapsed=self.dwell_duration)
        self._enter_region_countdown()

        self._record("region", f"world ready in {self.rotation.current}",
                     echo=True)
        self.bus.emit(WorldReady(self.rotation.current))
        return True

    def on_tick(self, dt: float) -> None:
        """Advance the scheduler by *dt* seconds.  Never raises TourError."""
        if not self._running:
            return
        self.clock += dt
        try:
            self._tick(dt)
        except TourError as exc:
            self._recover(exc)

    update = on_tick

    def on_shutdown(self) -> None:
        self._running = False
        self._awaiting_world = True
        self.state = TransitionState()
        self.selector.reset()
        self.countdown.reset()
        self._reset_room_state()
        self.region_timer = 0.0
        self._record("region", "shutdown complete", echo=True)

    # ── Mutators (overlay / input collaborators) ─────────────────────

    def force_immediate_change(self) -> bool:
        """Jump to a new location now, whatever the timers say."""
        if not self._running or self._awaiting_world:
            return False
        try:
            if self.state.transitioning:
                self._finish_now()
                return True
            if not self._begin_transition():
                return False
            self._finish_now()
            return True
        except TourError as exc:
            self._recover(exc)
            return False

    def force_room_change(self, name: str) -> bool:
        """Start a transition to the room called *name* (case-insensitive)."""
        key = (name or "").strip().lower()
        if not key or key == "random":
            return False
        if not self._running or self._awaiting_world:
            self._record("room", f"cannot change to {name}, world not ready",
                         echo=True)
            return False

        target = next((r for r in self.world.list_rooms(self.world.region)
                       if r.name.lower() == key), None)
        if target is None:
            self._record("room", f"room {name} not found in "
                         f"{self.rotation.current}", echo=True)
            return False

        try:
            if self.state.transitioning:
                self._finish_now()
            return self._begin_transition(target)
        except TourError as exc:
            self._recover(exc)
            return False

    def advance_region(self, step: int = 1) -> str:
        """Rotate one region forward (``step >= 0``) or backward."""
        if self._reload_pending:
            return self.rotation.current
        self.region_timer = 0.0
        if step >= 0:
            return self.rotation.advance_forward()
        return self.rotation.advance_backward()

    def force_region(self, code: str) -> str:
        """Jump to *code*; unknown codes join the rotation."""
        if self._reload_pending:
            return self.rotation.current
        self.region_timer = 0.0
        return self.rotation.force_region(code)

    def set_camera_mode(self, mode: CameraMode | str) -> CameraMode:
        try:
            parsed = CameraMode.parse(mode)
        except ValueError:
            self._record("room", f"unknown camera mode {mode!r}, keeping "
                         f"{self.selector.mode.value}", echo=True)
            return self.selector.mode
        self.selector.set_mode(parsed)
        self._record("room", f"camera mode {self.selector.mode.value}",
                     echo=True)
        return self.selector.mode

    def toggle_room_lock(self) -> bool:
        self.room_locked = not self.room_locked
        self._record("room", f"room lock {'ON' if self.room_locked else 'OFF'}",
                     echo=True)
        return self.room_locked

    def adjust_region_duration(self, delta: float) -> float:
        """Change the region timer duration, clamped to its allowed range."""
        new = max(REGION_DURATION_MIN,
                  min(REGION_DURATION_MAX, self.region_duration + delta))
        if abs(new - self.region_duration) > _EPS:
            self.region_duration = new
            self.region_timer = min(self.region_timer, new)
            self._record("region", f"region duration {new / 60.0:.1f} min",
                         echo=True)
        return self.region_duration

    def apply_settings(self, settings: TourSettings) -> None:
        """Adopt re-read settings without restarting the tour."""
        self.settings = settings
        self.dwell_duration = settings.dwell_duration
        self.transition_duration = settings.transition_duration
        self.region_duration = settings.region_duration
        self.rooms_per_region = settings.rooms_per_region
        self.region_timer = min(self.region_timer, self.region_duration)
        if settings.region_trigger != self.region_trigger:
            self.region_trigger = settings.region_trigger
            self._enter_region_countdown()
        c = self.countdown
        c.threshold = settings.countdown_threshold
        c.delay_min = settings.countdown_min
        c.delay_max = settings.countdown_max
        if settings.camera_mode is not self.selector.mode:
            self.selector.set_mode(settings.camera_mode)
        self._record("region", "settings applied", echo=True)

    def reset_campaign(self, campaign: str | None = None) -> None:
        """Switch campaign and start a fresh sweep of the rotation."""
        previous = self.campaign
        if campaign:
            self.campaign = campaign
        self.rotation.reset_campaign()
        self._record("region", f"campaign {self.campaign}", echo=True)
        self.bus.emit(CampaignChanged(self.campaign, previous))

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def region(self) -> str:
        return self.rotation.current

    @property
    def camera_mode(self) -> CameraMode:
        return self.selector.mode

    @property
    def transitioning(self) -> bool:
        return self.state.transitioning

    @property
    def awaiting_world(self) -> bool:
        return self._awaiting_world

    @property
    def rooms_explored(self) -> int:
        return self.rotation.rooms_explored

    @property
    def regions_explored(self) -> int:
        return self.rotation.regions_explored

    @property
    def countdown_remaining(self) -> float | None:
        return self.countdown.remaining

    def status(self) -> TourStatus:
        code = self.rotation.current
        return TourStatus(
            region=code,
            region_name=region_name(code),
            next_region=self.rotation.peek_next(),
            previous_region=self.rotation.peek_previous(),
            current_room=self.current_room_name,
            next_room=self.next_room_name,
            previous_room=self.previous_room_name,
            rooms_explored=self.rotation.rooms_explored,
            regions_explored=self.rotation.regions_explored,
            total_regions=self.rotation.total_regions,
            region_timer=self.region_timer,
            region_duration=self.region_duration,
            countdown_remaining=self.countdown.remaining,
            transitioning=self.state.transitioning,
            room_locked=self.room_locked,
            awaiting_world=self._awaiting_world,
            camera_mode=self.selector.mode.value,
            region_trigger=self.region_trigger,
            campaign=self.campaign,
        )

    # ── Tick ─────────────────────────────────────────────────────────

    def _tick(self, dt: float) -> None:
        if self._awaiting_world:
            if not self.on_world_ready():
                return
        elif not self.world.is_ready():
            # The world went away under us (external reload).
            self._prepare_for_reload()
            return

        if self._update_region_trigger(dt):
            return

        st = self.state
        if st.phase is Phase.TRANSITIONING:
            self._update_transition(dt)
            return

        st.dwell_elapsed += dt
        if self.room_locked:
            return
        if st.dwell_elapsed + _EPS >= self.dwell_duration:
            self._begin_transition()

    def _update_region_trigger(self, dt: float) -> bool:
        """Advance region timers.  True when a region reload took over."""
        self.region_timer += dt

        if self.region_trigger == TRIGGER_TIMER:
            if self.region_timer + _EPS >= self.region_duration:
                self.region_timer = 0.0
                self.rotation.advance_forward()
                return self._awaiting_world
            return False

        if self.region_trigger == TRIGGER_CYCLE:
            was_active = self.countdown.active
            timer, length = self.world.cycle_position()
            fired = self.countdown.update(dt, timer, length,
                                          locked=self.room_locked)
            if self.countdown.active and not was_active:
                self._on_countdown_armed()
            if fired:
                self._on_countdown_elapsed()
                return self._awaiting_world
        return False

    # ── Transitions ──────────────────────────────────────────────────

    def _begin_transition(self, target: Room | None = None) -> bool:
        if self._awaiting_world:
            return False
        region = self.rotation.current
        if not self.world.is_ready():
            raise WorldNotReady(f"world not ready for region {region}")
        rooms = self.world.list_rooms(self.world.region or region)
        if not rooms:
            raise WorldNotReady(f"region {region} has no rooms")

        current = self.current_room
        occupied = current.name if current is not None else ""
        if target is not None:
            room = target
            stay = room.name == occupied
        elif (current is not None and self.world.has_room(occupied)
              and self.selector.should_stay(len(self._anchors))):
            room = current
            stay = True
        else:
            room = self.selector.select_room(rooms, region, exclude=occupied)
            # A sole-room region comes back to the same room: new stay.
            stay = False

        # Idempotent for rooms that are already realized.
        anchors = self.world.realize_room(room)

        start = self.world.camera_position()
        if anchors:
            index = self.selector.select_anchor(len(anchors), not stay)
            goal = anchors[index]
        else:
            index = 0
            goal = start

        self.previous_room = current
        self.current_room = room
        self.next_room_name = room.name
        self._anchors = anchors
        self.state = TransitionState(
            phase=Phase.TRANSITIONING,
            progress=0.0,
            start=start,
            target=goal,
            source_room=current,
            target_room=room,
            anchor_index=index,
        )
        self._failing = False
        self._record("transition",
                     f"{'stay in' if stay else 'to'} {room.name}",
                     details={"anchor": index, "target": goal})
        self.bus.emit(TransitionStarted(room.name, index, goal,
                                        stay=stay))
        return True

    def _update_transition(self, dt: float) -> None:
        st = self.state
        if st.target_room is not None and not self.world.has_room(st.target_room.name):
            raise StaleRoomReference(st.target_room.name)

        st.progress = min(1.0, st.progress + dt / self.transition_duration)
        if st.progress + _EPS >= 1.0:
            st.progress = 1.0
        self.world.set_camera_position(
            lerp2(st.start, st.target, ease_in_out_cubic(st.progress)))
        if st.progress >= 1.0:
            self._complete_transition()

    def _finish_now(self) -> None:
        self.state.progress = 1.0
        self._complete_transition()

    def _complete_transition(self) -> None:
        st = self.state
        room = st.target_room
        self.world.set_camera_position(st.target)

        # 1. history and counters
        entered = bool(self.next_room_name) and \
            self.next_room_name != self.current_room_name
        left = self.current_room_name
        if entered:
            self.selector.record_room(self.next_room_name, left)
            self.previous_room_name = left
            self.current_room_name = self.next_room_name
            self.rotation.on_room_explored()
        self.next_room_name = ""

        # 2. release the room we came from
        prev = self.previous_room
        if (prev is not None and room is not None and prev.name != room.name
                and self.world.is_realized(prev)):
            self.world.abstractize_room(prev)

        st.phase = Phase.DWELLING
        st.dwell_elapsed = 0.0
        st.progress = 1.0

        # 3. notify collaborators
        name = room.name if room is not None else self.current_room_name
        if entered:
            self._record("room", f"enter {name}",
                         details={"anchor": st.anchor_index,
                                  "explored": self.rotation.rooms_explored})
        self.bus.emit(TransitionCompleted(name, st.anchor_index, entered))
        if entered:
            self.bus.emit(RoomChanged(name, left, self.rotation.current))

        # 4. room-count region trigger
        quota = self.rooms_per_region
        if entered and quota > 0 and self.rotation.rooms_explored >= quota:
            self._record("region",
                         f"{quota} rooms explored in {self.rotation.current}",
                         echo=True)
            self.advance_region(1)

    # ── Regions ──────────────────────────────────────────────────────

    def _on_region_changed(self, code: str) -> None:
        """Rotation callback: reset per-region state, reload if needed."""
        previous = normalize(self.world.region)
        self.region_timer = 0.0
        self.countdown.reset()
        self._reset_room_state()
        self.state = TransitionState(dwell_elapsed=self.dwell_duration)
        self._record("region", f"region changed to {code}", echo=True)
        self.bus.emit(RegionChanged(code, previous))

        if previous != code:
            self._prepare_for_reload()
            self._reload_pending = True
            self.world.request_reload(code)
            self.bus.emit(RegionReloadRequested(code))
        else:
            self.rotation.mark_visited(code)
            self._enter_region_countdown()

    def _prepare_for_reload(self) -> None:
        """Drop everything tied to the old world snapshot."""
        self._awaiting_world = True
        self.state = TransitionState()
        self.selector.reset()
        self._reset_room_state()

    def _enter_region_countdown(self) -> None:
        if self.region_trigger != TRIGGER_CYCLE:
            self.countdown.reset()
            return
        if self.countdown.on_region_entered(*self.world.cycle_position()):
            self._on_countdown_armed()

    def _on_countdown_armed(self) -> None:
        duration = self.countdown.state.duration
        self._record("countdown", f"armed for {duration:.0f}s",
                     details={"region": self.rotation.current})
        self.bus.emit(CountdownArmed(self.rotation.current, duration))

    def _on_countdown_elapsed(self) -> None:
        code = self.rotation.random_unvisited()
        if code is None:
            self._record("countdown",
                         f"all regions visited in campaign {self.campaign}",
                         echo=True)
            self.bus.emit(CampaignSweepComplete(self.campaign))
            return
        self._record("countdown", f"rotating to {code}")
        self.rotation.set_current_region(code)

    # ── Helpers ──────────────────────────────────────────────────────

    def _reset_room_state(self) -> None:
        self.selector.reset()
        self.current_room = None
        self.previous_room = None
        self.current_room_name = ""
        self.next_room_name = ""
        self.previous_room_name = ""
        self._anchors = []

    def _recover(self, exc: TourError) -> None:
        """Degrade a scheduler error into "try again next tick"."""
        self._record("error", str(exc), details={"type": type(exc).__name__})
        if isinstance(exc, StaleRoomReference):
            print(f"[TOUR] {exc} — discarding transition")
            self._reset_room_state()
            self.state = TransitionState(dwell_elapsed=self.dwell_duration)
            return
        if not self._failing:
            print(f"[TOUR] {exc} — retrying next tick")
            self._failing = True

    def _record(self, cat: str, msg: str, details: dict | None = None,
                echo: bool = False) -> None:
        self.log.record(cat, msg, t=self.clock, details=details)
        if echo:
            print(f"[TOUR] {msg}")

    def __repr__(self) -> str:
        return (f"TourController(region={self.rotation.current!r}, "
                f"room={self.current_room_name!r}, "
                f"phase={self.state.phase.value})")

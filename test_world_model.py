"""test_world_model.py — Room graph, settings, tuning and event plumbing.

Run:  python test_world_model.py
"""
from __future__ import annotations
import sys, traceback
from pathlib import Path

from components import Room, TourLog
from core import tuning
from core.events import EventBus, RoomChanged, WorldReady
from tour.regions import all_region_codes
from tour.selector import CameraMode
from tour.settings import TourSettings
from tour.world_model import RoomGraph


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")

def fail(label: str, detail: str = ""):
    global _failed
    _failed += 1
    msg = f"  [FAIL] {label}"
    if detail:
        msg += f" — {detail}"
    print(msg)

ROOT = Path(__file__).resolve().parent
DT = 1.0 / 60.0


# ═══════════════════════════════════════════════════════════════════════
#  1. Room graph
# ═══════════════════════════════════════════════════════════════════════

def test_from_toml():
    print("\n=== 1: World file ===")
    world = RoomGraph.from_toml(ROOT / "data" / "world.toml")
    assert {"SU", "HI", "SS"} <= set(world.rooms)
    a01 = world.get_room("SU_A01")
    assert a01.region == "SU" and not a01.gate
    assert a01.anchors[0] == (10.0, 16.0)
    ok("Regions and rooms loaded, anchors offset by the room origin")

    a03 = world.get_room("SU_A03")
    assert a03.anchors[1] == (112.0 + 40.0, 8.0)
    gate = world.get_room("GATE_SU_HI")
    assert gate.gate
    assert world.cycle_lengths["SU"] == 480.0
    ok("Gates flagged, per-region cycle length read")

    dumped = world.to_dict()["regions"]["SU"]["rooms"]["SU_A03"]
    assert dumped["anchors"][0] == [8.0, 8.0]
    ok("to_dict writes anchors back relative to the origin")

    missing = RoomGraph.from_toml(ROOT / "data" / "nope.toml")
    assert missing.rooms == {}
    ok("Missing world file → empty graph")


def test_generate():
    print("\n=== 2: Generated regions ===")
    a = RoomGraph.generate(["SU", "LF"], room_count=8, seed=3)
    b = RoomGraph.generate(["SU", "LF"], room_count=8, seed=3)
    assert [r.anchors for r in a.list_rooms("LF")] == \
        [r.anchors for r in b.list_rooms("LF")]
    ok("Same seed → same layout")

    rooms = a.list_rooms("SU")
    assert len([r for r in rooms if not r.gate]) == 8
    assert len([r for r in rooms if r.gate]) == 2
    assert rooms[0].name == "SU_A01"
    assert all(1 <= len(r.anchors) <= 4 for r in rooms)
    ok("8 rooms + 2 gates, 1..4 anchors each")

    for r in rooms:
        for x, y in r.anchors:
            assert r.origin[0] <= x <= r.origin[0] + r.size[0]
            assert r.origin[1] <= y <= r.origin[1] + r.size[1]
    ok("Anchors lie inside their room bounds")


def test_loading_and_cycle():
    print("\n=== 3: Loading, reloads and the cycle clock ===")
    world = RoomGraph(cycle_length=10.0, reload_delay=0.5, autogenerate=True)
    assert not world.is_ready() and world.cycle_position() == (0.0, 0.0)
    ok("Nothing loaded: not ready, cycle unknown")

    assert world.load_region("su")
    assert world.region == "SU" and world.is_ready()
    assert world.camera_position() == world.get_room("SU_A01").center
    ok("load_region autogenerates and parks the camera at the start room")

    for _ in range(11 * 60):
        world.advance(DT)
    timer, length = world.cycle_position()
    assert length == 10.0 and timer < 1.5
    ok("Cycle timer wraps at the cycle length")

    room = world.get_room("SU_A02")
    assert world.realize_room(room) == room.anchors
    assert world.realize_room(room) == room.anchors
    assert world.is_realized(room)
    world.abstractize_room(room)
    assert not world.is_realized(room)
    ok("realize_room is idempotent, abstractize releases")

    world.request_reload("HI")
    assert world.reloading and not world.is_ready() and world.region == ""
    world.advance(0.25)
    assert world.reloading
    world.advance(0.3)
    assert not world.reloading and world.region == "HI" and world.is_ready()
    assert not world.is_realized(room)
    ok("Reload lands after reload_delay")

    assert world.has_room("HI_A01") and not world.has_room("SU_A01")
    ok("has_room checks the loaded region only")


# ═══════════════════════════════════════════════════════════════════════
#  4. Settings and tuning
# ═══════════════════════════════════════════════════════════════════════

def test_settings():
    print("\n=== 4: Settings ===")
    s = TourSettings()
    assert (s.dwell_duration, s.transition_duration, s.region_duration) == \
        (15.0, 5.0, 300.0)
    assert s.camera_mode is CameraMode.RANDOM_EXPLORATION
    assert s.region_trigger == "timer" and s.start_region == "SU"
    ok("Defaults: 15 s dwell, 5 s transition, 300 s region")

    s = TourSettings(dwell_duration=1.0, transition_duration=99.0,
                     region_duration=5000.0, region_trigger="weekly",
                     camera_mode="Sequential", start_region=" hi ",
                     countdown_min=200.0, countdown_max=100.0)
    assert s.dwell_duration == 5.0 and s.transition_duration == 15.0
    assert s.region_duration == 1800.0
    assert s.region_trigger == "timer"
    assert s.camera_mode is CameraMode.SEQUENTIAL
    assert s.start_region == "HI"
    assert (s.countdown_min, s.countdown_max) == (100.0, 200.0)
    ok("Out-of-range values clamped, bad trigger falls back, mode parsed")

    s = TourSettings.from_tuning({
        "dwell_duration": 20, "camera_mode": "random",
        "region_trigger": "cycle", "bogus": 1,
        "countdown": {"threshold": 0.5, "min": 30, "max": 40},
    })
    assert s.dwell_duration == 20.0 and s.camera_mode is CameraMode.RANDOM
    assert s.region_trigger == "cycle"
    assert (s.countdown_threshold, s.countdown_min, s.countdown_max) == \
        (0.5, 30.0, 40.0)
    ok("from_tuning maps the [tour] and [tour.countdown] tables")

    assert TourSettings.from_tuning(None) == TourSettings()
    ok("from_tuning(None) → defaults")


def test_tuning_file():
    print("\n=== 5: Tuning file ===")
    data = tuning.load(ROOT / "data" / "tuning.toml")
    assert "tour" in data
    assert tuning.get("tour", "dwell_duration") == 15.0
    assert tuning.get("tour.countdown", "threshold") == 0.85
    assert tuning.get("tour", "missing", 7) == 7
    assert tuning.get("nope.deeper", "x", "d") == "d"
    ok("get() walks dotted sections with defaults")

    s = TourSettings.from_tuning(tuning.section("tour"))
    assert s.camera_mode is CameraMode.RANDOM_EXPLORATION
    assert s.countdown_max == 180.0
    ok("Shipped tuning builds valid settings")

    assert tuning.load(ROOT / "data" / "nope.toml") == {}
    assert tuning.section("tour") == {}
    tuning.load()
    assert tuning.loaded_path() == tuning.default_path()
    ok("Missing file → defaults; default path reloads")


# ═══════════════════════════════════════════════════════════════════════
#  6. Event bus and log
# ═══════════════════════════════════════════════════════════════════════

def test_bus_and_log():
    print("\n=== 6: Event bus and tour log ===")
    bus = EventBus()
    seen = []

    def broken(ev):
        raise RuntimeError("boom")

    bus.subscribe(RoomChanged, broken)
    bus.subscribe("RoomChanged", lambda ev: seen.append(ev.room))
    bus.subscribe(WorldReady, lambda ev: bus.emit(RoomChanged("SU_A01")))
    bus.emit(RoomChanged("SU_A02", "SU_A01", "SU"))
    bus.emit(WorldReady("SU"))
    assert bus.pending_count() == 2
    assert bus.drain() == 3
    assert seen == ["SU_A02", "SU_A01"]
    assert bus.stats() == {"RoomChanged": 2, "WorldReady": 1}
    ok("FIFO drain, handler errors isolated, chained emits processed")

    log = TourLog(max_entries=3)
    for i in range(5):
        log.record("room", f"enter {i}", t=float(i))
    log.record("error", "oops", t=5.0, details={"type": "WorldNotReady"})
    assert len(log.entries) == 3
    assert [e["msg"] for e in log.recent(2)] == ["enter 4", "oops"]
    assert log.count("error") == 1 and log.for_cat("room")[-1]["t"] == 4.0
    ok("TourLog is a bounded ring buffer")

    log.clear()
    assert log.recent() == [] and log.count("error") == 0
    ok("clear() empties the log")


if __name__ == "__main__":
    sections = [
        ("World file", test_from_toml),
        ("Generated regions", test_generate),
        ("Loading and cycle", test_loading_and_cycle),
        ("Settings", test_settings),
        ("Tuning file", test_tuning_file),
        ("Bus and log", test_bus_and_log),
    ]

    for name, fn in sections:
        try:
            fn()
        except Exception:
            fail(name, "unhandled exception")
            traceback.print_exc()

    print(f"\n{'=' * 60}")
    print(f"  World Model Tests: {_passed} passed, {_failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)

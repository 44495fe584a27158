"""test_selector.py — Room and camera-anchor selection tests.

Gate exclusion, recent-history avoidance (and its reset fallback),
the four camera modes and mode switching.  Seeded RNG throughout.

Run:  python test_selector.py
"""
from __future__ import annotations
import sys, random, traceback

from components import Room, RoomHistory
from tour.errors import NoDestinationAvailable, TourError
from tour.selector import CameraMode, RoomSelector


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


def _rooms(n: int, gates: int = 0, region: str = "SU") -> list[Room]:
    rooms = [Room(name=f"{region}_A{i + 1:02d}", region=region,
                  anchors=[(float(i), 0.0)]) for i in range(n)]
    rooms += [Room(name=f"GATE_{region}_{i + 1}", region=region, gate=True)
              for i in range(gates)]
    return rooms


def _visit(sel: RoomSelector, count: int) -> list[int]:
    """Anchors picked for one stay in a room with *count* anchors."""
    picks = [sel.select_anchor(count, is_new_room=True)]
    while sel.should_stay(count):
        picks.append(sel.select_anchor(count, is_new_room=False))
    return picks


# ═══════════════════════════════════════════════════════════════════════
#  1. Room selection
# ═══════════════════════════════════════════════════════════════════════

def test_room_selection():
    print("\n=== 1: Room selection ===")
    sel = RoomSelector(rng=random.Random(4))
    rooms = _rooms(5, gates=3)
    for _ in range(300):
        assert not sel.select_room(rooms).gate
    ok("Gates are never chosen (300 picks)")

    only_gates = _rooms(0, gates=2)
    try:
        sel.select_room(only_gates, "GW")
    except NoDestinationAvailable as exc:
        assert exc.region == "GW"
        assert isinstance(exc, TourError)
        ok("Gate-only region raises NoDestinationAvailable")
    else:
        raise AssertionError("expected NoDestinationAvailable")

    try:
        sel.select_room([], "GW")
    except NoDestinationAvailable:
        ok("Empty region raises NoDestinationAvailable")
    else:
        raise AssertionError("expected NoDestinationAvailable")


def test_history():
    print("\n=== 2: Recent history ===")
    sel = RoomSelector(history_size=10, rng=random.Random(9))
    rooms = _rooms(15, gates=1)
    current = ""
    window: list[str] = []
    for _ in range(200):
        room = sel.select_room(rooms)
        assert room.name not in window[-10:], (room.name, window[-10:])
        sel.record_room(room.name, current)
        current = room.name
        window.append(room.name)
    ok("With 15 rooms no pick repeats one of the last 10")

    hist = RoomHistory(3)
    for name in ("a", "b", "c", "d"):
        hist.push(name)
    assert list(hist) == ["b", "c", "d"] and len(hist) == hist.size == 3
    ok("History is a bounded FIFO (oldest evicted)")

    sel = RoomSelector(history_size=10, rng=random.Random(1))
    small = _rooms(3)
    for r in small:
        sel.record_room(r.name)
    assert len(sel.history) == 3
    pick = sel.select_room(small)
    assert pick in small and len(sel.history) == 0
    ok("All rooms in history → history cleared, any room eligible")

    assert sel.record_room("SU_A01", "SU_A01") is False
    assert len(sel.history) == 0
    assert sel.record_room("SU_A01", "SU_A02") is True
    ok("record_room skips the occupied room")

    assert sel.record_room("SU_A01", "SU_A03") is False
    assert list(sel.history) == ["SU_A01"]
    ok("record_room skips a name already in history")

    sel = RoomSelector(history_size=10, rng=random.Random(5))
    pair = _rooms(2)
    for _ in range(100):
        sel.record_room("SU_A01")
        sel.record_room("SU_A02")
        assert sel.select_room(pair, exclude="SU_A01").name == "SU_A02"
    ok("After a history reset the occupied room is still excluded")

    single = _rooms(1, gates=1)
    assert sel.select_room(single, exclude="SU_A01").name == "SU_A01"
    ok("Sole non-gate room is chosen even when occupied")


# ═══════════════════════════════════════════════════════════════════════
#  3. Camera modes
# ═══════════════════════════════════════════════════════════════════════

def test_camera_modes():
    print("\n=== 3: Camera modes ===")
    sel = RoomSelector(CameraMode.FIRST_ONLY, rng=random.Random(2))
    assert _visit(sel, 5) == [0]
    assert not sel.should_stay(5)
    ok("FIRST_ONLY: anchor 0, then a new room")

    sel = RoomSelector(CameraMode.SEQUENTIAL, rng=random.Random(2))
    assert _visit(sel, 4) == [0, 1, 2, 3]
    ok("SEQUENTIAL: 0, 1, ..., K-1 then a new room")
    assert _visit(sel, 1) == [0]
    ok("SEQUENTIAL with one anchor changes room after each dwell")

    rng = random.Random(7)
    sel = RoomSelector(CameraMode.RANDOM_EXPLORATION, rng=rng)
    lengths = set()
    for _ in range(300):
        picks = _visit(sel, 5)
        assert len(picks) == len(set(picks)), picks
        assert 1 <= len(picks) <= 5
        assert all(0 <= p < 5 for p in picks)
        lengths.add(len(picks))
    assert lengths == {1, 2, 3, 4, 5}, lengths
    ok("RANDOM_EXPLORATION: 1..K distinct anchors per room")

    sel = RoomSelector(CameraMode.RANDOM, rng=random.Random(3))
    seen = {sel.select_anchor(4, is_new_room=bool(i % 2)) for i in range(200)}
    assert seen == {0, 1, 2, 3}
    assert not sel.should_stay(4)
    ok("RANDOM: uniform pick, never stays")

    for mode in CameraMode:
        assert RoomSelector(mode).select_anchor(0, True) == 0
    ok("Zero anchors → index 0 in every mode")


def test_mode_switching():
    print("\n=== 4: Mode parsing and switching ===")
    assert CameraMode.parse("RandomExploration") is CameraMode.RANDOM_EXPLORATION
    assert CameraMode.parse("first-only") is CameraMode.FIRST_ONLY
    assert CameraMode.parse("bogus", default=CameraMode.RANDOM) is CameraMode.RANDOM
    try:
        CameraMode.parse("bogus")
    except ValueError:
        ok("parse accepts any spelling, rejects unknown names")
    else:
        raise AssertionError("expected ValueError")

    modes = list(CameraMode)
    m = modes[0]
    for _ in range(len(modes)):
        m = m.next()
    assert m is modes[0]
    ok("next() cycles through all modes")

    sel = RoomSelector(CameraMode.SEQUENTIAL, rng=random.Random(1))
    sel.select_anchor(4, True)
    sel.select_anchor(4, False)
    sel.set_mode(CameraMode.SEQUENTIAL)
    first = (sel.vantage.index, list(sel.vantage.unvisited),
             sel.vantage.remaining_jumps)
    sel.set_mode(CameraMode.SEQUENTIAL)
    second = (sel.vantage.index, list(sel.vantage.unvisited),
              sel.vantage.remaining_jumps)
    assert first == second == (0, [], 0)
    ok("set_mode resets vantage state and is idempotent")


if __name__ == "__main__":
    sections = [
        ("Room selection", test_room_selection),
        ("History", test_history),
        ("Camera modes", test_camera_modes),
        ("Mode switching", test_mode_switching),
    ]

    for name, fn in sections:
        try:
            fn()
        except Exception:
            fail(name, "unhandled exception")
            traceback.print_exc()

    print(f"\n{'=' * 60}")
    print(f"  Selector Tests: {_passed} passed, {_failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)

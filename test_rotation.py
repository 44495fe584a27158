"""test_rotation.py — Region rotation policy tests.

Cursor invariant, forward/back symmetry, random unvisited picks,
sweep completion, unknown codes and campaign resets.  Seeded RNG.

Run:  python test_rotation.py
"""
from __future__ import annotations
import sys, random, traceback

from tour.regions import (
    BASE_REGIONS, CAMPAIGNS, EXPANSION_REGIONS, all_region_codes,
    campaign_name, content_set, next_campaign, normalize, region_name,
    start_room,
)
from tour.rotation import RegionRotation


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


def _rotation(seed: int = 1, start: str = "SU", **kwargs) -> RegionRotation:
    return RegionRotation(start, rng=random.Random(seed), **kwargs)


# ═══════════════════════════════════════════════════════════════════════
#  1. Region directory
# ═══════════════════════════════════════════════════════════════════════

def test_region_directory():
    print("\n=== 1: Region directory ===")
    codes = all_region_codes()
    assert len(codes) == len(set(codes)) == 20
    assert len(BASE_REGIONS) == 12 and len(EXPANSION_REGIONS) == 8
    ok("20 unique region codes (12 base + 8 expansion)")

    assert region_name("su") == "Outskirts"
    assert region_name("SS") == "Five Pebbles"
    assert region_name("XX") == "XX"
    ok("Display names resolve, unknown codes echo back")

    assert content_set("SU") == "base"
    assert content_set(" lm ") == "expansion"
    assert content_set("XX") == ""
    assert all(content_set(r.code) == "expansion" for r in EXPANSION_REGIONS)
    ok("Content set per region, empty for unknown codes")

    assert normalize("  lf ") == "LF"
    assert start_room("HI") == "HI_A01"
    ok("Codes normalise; start rooms follow <CODE>_A01")

    assert campaign_name("Yellow") == "Monk"
    assert next_campaign(CAMPAIGNS[-1][0]) == CAMPAIGNS[0][0]
    assert next_campaign("nope") == CAMPAIGNS[0][0]
    ok("Campaign ids cycle and wrap")


# ═══════════════════════════════════════════════════════════════════════
#  2. Cursor invariant and navigation
# ═══════════════════════════════════════════════════════════════════════

def test_navigation():
    print("\n=== 2: Cursor invariant and navigation ===")
    rot = _rotation(seed=3, start="SU")
    assert rot.current == "SU" and rot.order[rot.index] == "SU"
    assert rot.visited == {"SU"}
    assert sorted(rot.order) == sorted(all_region_codes())
    ok("Initialised on start region, order is a permutation")

    for _ in range(50):
        rot.advance_forward()
        assert rot.current == rot.order[rot.index]
    for _ in range(50):
        rot.advance_backward()
        assert rot.current == rot.order[rot.index]
    ok("current == order[index] after 100 moves")

    before = rot.current
    rot.advance_forward()
    rot.advance_backward()
    assert rot.current == before
    ok("forward then backward returns to the same region")

    n = rot.total_regions
    start = rot.current
    for _ in range(n):
        rot.advance_forward()
    assert rot.current == start
    ok(f"{n} forward steps wrap around to the start")

    assert rot.peek_next() == rot.order[(rot.index + 1) % n]
    assert rot.peek_previous() == rot.order[(rot.index - 1) % n]
    ok("peek_next / peek_previous match the neighbours")

    rot.reshuffle()
    assert rot.current == start and rot.order[rot.index] == start
    ok("reshuffle keeps the current region under the cursor")


def test_callbacks():
    print("\n=== 3: Change notifications ===")
    seen: list[str] = []
    rot = _rotation(seed=5, on_region_changed=seen.append)
    assert seen == []
    ok("No callback during initialisation")

    rot.advance_forward()
    rot.force_region("SL")
    assert seen == [seen[0], "SL"] and rot.current == "SL"
    ok("advance and force_region fire the callback")

    rot.force_region("LF", notify=False)
    assert seen[-1] == "SL" and rot.current == "LF"
    ok("notify=False moves silently")

    rot.on_room_explored()
    rot.on_room_explored()
    assert rot.rooms_explored == 2
    rot.advance_forward()
    assert rot.rooms_explored == 0
    ok("rooms_explored resets on region change")


# ═══════════════════════════════════════════════════════════════════════
#  4. Random unvisited + sweep
# ═══════════════════════════════════════════════════════════════════════

def test_random_unvisited():
    print("\n=== 4: Random unvisited ===")
    rot = _rotation(seed=11)
    n = rot.total_regions
    picked = []
    for _ in range(n - 1):
        code = rot.random_unvisited()
        assert code is not None
        assert code not in rot.visited
        picked.append(code)
        rot.set_current_region(code)
    assert len(set(picked)) == n - 1
    ok(f"{n - 1} draws each return a distinct unvisited region")

    assert rot.sweep_complete
    assert rot.random_unvisited() is None
    assert rot.regions_explored == n
    ok("None once every region has been visited")

    rot.reset_campaign()
    assert rot.visited == {rot.current}
    assert rot.random_unvisited() is not None
    ok("reset_campaign keeps only the current region visited")


def test_unknown_and_empty():
    print("\n=== 5: Unknown codes and empty rotation ===")
    rot = _rotation(seed=2, regions=["SU", "HI", "CC"])
    assert rot.total_regions == 3
    rot.force_region("zz")
    assert rot.current == "ZZ" and rot.order[-1] == "ZZ"
    assert rot.total_regions == 4
    ok("Unknown region code is appended and becomes current")

    rot.force_region("")
    assert rot.current == "ZZ"
    ok("Blank code is ignored")

    rot2 = _rotation(regions=["HI", "CC"], start="SU")
    assert rot2.order[0] == "SU" and rot2.current == "SU"
    ok("Start region missing from the set is inserted at the front")

    empty = _rotation(regions=[])
    empty.order.clear()
    cur = empty.current
    assert empty.advance_forward() == cur
    assert empty.advance_backward() == cur
    assert empty.peek_next() == cur
    ok("Navigation on an empty order is a no-op")


if __name__ == "__main__":
    sections = [
        ("Region directory", test_region_directory),
        ("Navigation", test_navigation),
        ("Callbacks", test_callbacks),
        ("Random unvisited", test_random_unvisited),
        ("Unknown and empty", test_unknown_and_empty),
    ]

    for name, fn in sections:
        try:
            fn()
        except Exception:
            fail(name, "unhandled exception")
            traceback.print_exc()

    print(f"\n{'=' * 60}")
    print(f"  Rotation Tests: {_passed} passed, {_failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)

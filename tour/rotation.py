"""tour/rotation.py — Region rotation policy.

Owns a shuffled traversal order over the region directory, the set of
regions visited in the current campaign, and the cursor into the
order.  Every move that changes the active region fires the
``on_region_changed`` callback so the scheduler can reset its
per-region state.

    rotation = RegionRotation("SU", on_region_changed=ctrl.on_region_changed)
    rotation.advance_forward()         # next region in the shuffled order
    rotation.random_unvisited()        # None once the sweep is complete

Invariant: ``current == order[index]`` whenever ``order`` is non-empty.
"""

from __future__ import annotations
import random
from typing import Any, Callable, Iterable

from tour.regions import DEFAULT_START_REGION, all_region_codes, normalize


class RegionRotation:
    """Shuffled region traversal with a visited set."""

    def __init__(self, start_region: str = DEFAULT_START_REGION,
                 regions: Iterable[str] | None = None,
                 rng: Any = None,
                 on_region_changed: Callable[[str], None] | None = None
                 ) -> None:
        self._rng = rng or random
        self._source = [normalize(c) for c in
                        (all_region_codes() if regions is None else regions)]
        self.on_region_changed = on_region_changed
        self.order: list[str] = []
        self.visited: set[str] = set()
        self.index: int = 0
        self.current: str = normalize(start_region) or DEFAULT_START_REGION
        self.rooms_explored: int = 0
        self.initialize(self.current)

    # ── Setup ────────────────────────────────────────────────────────

    def initialize(self, start_region: str) -> None:
        """Shuffle the full region set and place the cursor on *start_region*."""
        start = normalize(start_region) or self.current
        order = list(dict.fromkeys(c for c in self._source if c))
        self._rng.shuffle(order)                # Fisher–Yates
        if start not in order:
            order.insert(0, start)
        self.order = order
        self.index = order.index(start)
        self.current = start
        self.visited = {start}
        self.rooms_explored = 0

    def reshuffle(self) -> None:
        """New traversal order; the current region stays under the cursor."""
        if not self.order:
            return
        self._rng.shuffle(self.order)
        self.index = self.order.index(self.current)

    # ── Navigation ───────────────────────────────────────────────────

    def advance_forward(self) -> str:
        return self._step(1)

    def advance_backward(self) -> str:
        return self._step(-1)

    def force_region(self, code: str, notify: bool = True) -> str:
        """Jump to *code*, appending it to the order when unknown.

        Unknown codes are accepted rather than rejected so overlays can
        reach regions the directory does not list.
        """
        code = normalize(code)
        if not code:
            return self.current
        if code not in self.order:
            print(f"[ROTATION] unknown region {code} appended to rotation")
            self.order.append(code)
        self._move_to(self.order.index(code), notify)
        return self.current

    def set_current_region(self, code: str, notify: bool = True) -> str:
        """Like :meth:`force_region`, and records *code* as visited."""
        code = normalize(code)
        if not code:
            return self.current
        self.mark_visited(code)
        return self.force_region(code, notify)

    def random_unvisited(self) -> str | None:
        """Uniformly random region not yet visited, or None when swept."""
        pool = [c for c in self.order
                if c not in self.visited and c != self.current]
        if not pool:
            return None
        return self._rng.choice(pool)

    # ── Bookkeeping ──────────────────────────────────────────────────

    def mark_visited(self, code: str) -> None:
        self.visited.add(normalize(code))

    def reset_campaign(self) -> None:
        """Forget visits (except the current region).  Order is kept."""
        self.visited = {self.current}

    def on_room_explored(self) -> int:
        self.rooms_explored += 1
        return self.rooms_explored

    def peek_next(self) -> str:
        if not self.order:
            return self.current
        return self.order[(self.index + 1) % len(self.order)]

    def peek_previous(self) -> str:
        if not self.order:
            return self.current
        return self.order[(self.index - 1) % len(self.order)]

    @property
    def regions_explored(self) -> int:
        return len(self.visited)

    @property
    def total_regions(self) -> int:
        return len(self.order)

    @property
    def sweep_complete(self) -> bool:
        return bool(self.order) and self.visited.issuperset(self.order)

    # ── Internals ────────────────────────────────────────────────────

    def _step(self, delta: int) -> str:
        if not self.order:
            return self.current
        self._move_to((self.index + delta) % len(self.order))
        return self.current

    def _move_to(self, index: int, notify: bool = True) -> None:
        self.index = index % len(self.order)
        self.current = self.order[self.index]
        self.rooms_explored = 0
        print(f"[ROTATION] now exploring {self.current} "
              f"({self.index + 1}/{len(self.order)})")
        if notify and self.on_region_changed is not None:
            self.on_region_changed(self.current)

    def __repr__(self) -> str:
        return (f"RegionRotation(current={self.current!r}, "
                f"index={self.index}, visited={len(self.visited)}/"
                f"{len(self.order)})")

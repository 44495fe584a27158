"""components.tour_log — Structured scheduler event log.

A ring-buffer that records timestamped scheduler decisions: region
rotations, room picks, transitions, countdown activity and recovered
errors.  Read by the preview overlay and by tests to see what the
tour did and why.

Usage:
    log = TourLog()
    log.record("room", "enter SU_A03", t=42.0, details={"anchor": 1})

Each entry is a dict:
    {"t": float, "cat": str, "msg": str, "details": dict | None}
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class TourLog:
    """Ring-buffer of scheduler events."""

    entries: list[dict] = field(default_factory=list)
    max_entries: int = 500

    def record(self, cat: str, msg: str, *, t: float = 0.0,
               details: dict | None = None) -> None:
        self.entries.append({
            "t": t,
            "cat": cat,
            "msg": msg,
            "details": details,
        })
        if len(self.entries) > self.max_entries:
            self.entries = self.entries[-self.max_entries:]

    def clear(self):
        self.entries.clear()

    def recent(self, n: int = 50) -> list[dict]:
        """Return the *n* most recent entries (newest last)."""
        return self.entries[-n:]

    def for_cat(self, cat: str, n: int = 50) -> list[dict]:
        """Return last *n* entries in a category."""
        return [e for e in self.entries if e["cat"] == cat][-n:]

    def count(self, cat: str) -> int:
        return sum(1 for e in self.entries if e["cat"] == cat)

"""core/tuning.py — Data-driven tour settings.

Durations, camera mode, region trigger and countdown numbers live in
``data/tuning.toml`` and are loaded once at startup.  Read a value
with::

    from core import tuning
    dwell = tuning.get("tour", "dwell_duration", 15.0)

or grab a whole table with ``tuning.section("tour.countdown")``.

Hot-reload: call ``reload()`` to re-read the file.  In the preview,
press F4.  The scheduler itself never reads this module; the host
builds a ``TourSettings`` from it and hands that over.
"""

from __future__ import annotations
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli


_data: dict = {}
_path: Path | None = None


def default_path() -> Path:
    """``data/tuning.toml`` relative to the project root."""
    return Path(__file__).resolve().parent.parent / "data" / "tuning.toml"


def load(path: str | Path | None = None) -> dict:
    """Load (or reload) tuning values from *path*.  Returns the raw tables."""
    global _data, _path

    path = default_path() if path is None else Path(path)
    _path = path

    if not path.exists():
        print(f"[TUNING] {path} not found — using defaults")
        _data = {}
        return _data

    try:
        with open(path, "rb") as f:
            _data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        print(f"[TUNING] {path} is not valid TOML ({exc}) — using defaults")
        _data = {}
        return _data

    print(f"[TUNING] Loaded {_count_leaves(_data)} values from {path}")
    return _data


def reload() -> dict:
    """Re-read the tuning file from disk (hot-reload)."""
    return load(_path)


def loaded_path() -> Path | None:
    return _path


def get(section: str, key: str, default=None):
    """Read a tuning value.

    *section* uses dot-notation to traverse nested tables, e.g.
    ``"tour.countdown"`` looks up ``[tour.countdown]``.

    >>> get("tour.countdown", "threshold", 0.85)
    0.85
    """
    node = _walk(section)
    if isinstance(node, dict):
        return node.get(key, default)
    return default


def section(section_path: str) -> dict:
    """Return an entire section dict (shallow copy), or empty dict."""
    node = _walk(section_path)
    return dict(node) if isinstance(node, dict) else {}


def _walk(section_path: str):
    node = _data
    for part in section_path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
        if node is None:
            return None
    return node


def _count_leaves(d: dict, _n: int = 0) -> int:
    for v in d.values():
        if isinstance(v, dict):
            _n = _count_leaves(v, _n)
        else:
            _n += 1
    return _n

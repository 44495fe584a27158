"""tour/easing.py — Interpolation curves for camera transitions."""

from __future__ import annotations

from components.world import Vec2


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out on [0, 1].

    ``ease(0) == 0``, ``ease(0.5) == 0.5``, ``ease(1) == 1`` and the
    curve is monotonically non-decreasing.  Inputs are clamped.
    """
    t = max(0.0, min(1.0, t))
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def lerp2(a: Vec2, b: Vec2, t: float) -> Vec2:
    """Linear interpolation between two points."""
    return (a[0] + (b[0] - a[0]) * t,
            a[1] + (b[1] - a[1]) * t)

"""tour/settings.py — User-tunable scheduler settings.

``TourSettings`` is the only configuration the scheduler sees.  The
host builds one from the ``[tour]`` table of ``data/tuning.toml``::

    from core import tuning
    tuning.load()
    settings = TourSettings.from_tuning(tuning.section("tour"))

Out-of-range durations are clamped (with a printed warning) to the
ranges the settings menu allows.
"""

from __future__ import annotations
from dataclasses import dataclass, fields

from components.tour_state import HISTORY_SIZE
from tour.regions import DEFAULT_CAMPAIGN, DEFAULT_START_REGION, normalize
from tour.selector import CameraMode


REGION_DURATION_MIN = 60.0
REGION_DURATION_MAX = 1800.0
REGION_DURATION_STEP = 60.0

DWELL_RANGE = (5.0, 60.0)
TRANSITION_RANGE = (1.0, 15.0)

TRIGGER_TIMER = "timer"
TRIGGER_CYCLE = "cycle"
TRIGGERS = (TRIGGER_TIMER, TRIGGER_CYCLE)


@dataclass
class TourSettings:
    dwell_duration: float = 15.0            # s at each anchor
    transition_duration: float = 5.0        # s per camera move
    region_duration: float = 300.0          # s per region (timer trigger)
    region_trigger: str = TRIGGER_TIMER     # "timer" | "cycle"
    rooms_per_region: int = 0               # rooms before rotating, 0 = off
    camera_mode: CameraMode = CameraMode.RANDOM_EXPLORATION
    start_region: str = DEFAULT_START_REGION
    campaign: str = DEFAULT_CAMPAIGN
    history_size: int = HISTORY_SIZE
    countdown_threshold: float = 0.85       # cycle progress ratio
    countdown_min: float = 60.0             # s
    countdown_max: float = 180.0            # s

    def __post_init__(self) -> None:
        self.dwell_duration = _clamp("dwell_duration", self.dwell_duration,
                                     *DWELL_RANGE)
        self.transition_duration = _clamp("transition_duration",
                                          self.transition_duration,
                                          *TRANSITION_RANGE)
        self.region_duration = _clamp("region_duration", self.region_duration,
                                      REGION_DURATION_MIN, REGION_DURATION_MAX)
        self.camera_mode = CameraMode.parse(
            self.camera_mode, default=CameraMode.RANDOM_EXPLORATION)
        self.region_trigger = str(self.region_trigger).lower()
        if self.region_trigger not in TRIGGERS:
            print(f"[TUNING] unknown region_trigger {self.region_trigger!r}"
                  f" — using {TRIGGER_TIMER!r}")
            self.region_trigger = TRIGGER_TIMER
        self.start_region = normalize(self.start_region) or DEFAULT_START_REGION
        self.history_size = max(1, int(self.history_size))
        self.rooms_per_region = max(0, int(self.rooms_per_region))
        self.countdown_threshold = _clamp("countdown_threshold",
                                          self.countdown_threshold, 0.0, 1.0)
        if self.countdown_min > self.countdown_max:
            self.countdown_min, self.countdown_max = (self.countdown_max,
                                                      self.countdown_min)

    @classmethod
    def from_tuning(cls, table: dict | None) -> "TourSettings":
        """Build from a ``[tour]`` table.  Unknown keys are ignored.

        A nested ``[tour.countdown]`` table may hold ``threshold``,
        ``min`` and ``max``.
        """
        table = dict(table or {})
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in table.items()
                  if k in known and not isinstance(v, dict)}
        countdown = table.get("countdown")
        if isinstance(countdown, dict):
            for src, dst in (("threshold", "countdown_threshold"),
                             ("min", "countdown_min"),
                             ("max", "countdown_max")):
                if src in countdown:
                    kwargs[dst] = countdown[src]
        for key in ("dwell_duration", "transition_duration", "region_duration",
                    "countdown_threshold", "countdown_min", "countdown_max"):
            if key in kwargs:
                kwargs[key] = float(kwargs[key])
        return cls(**kwargs)


def _clamp(name: str, value: float, lo: float, hi: float) -> float:
    value = float(value)
    clamped = max(lo, min(hi, value))
    if clamped != value:
        print(f"[TUNING] {name}={value:g} out of range [{lo:g}, {hi:g}]"
              f" — clamped to {clamped:g}")
    return clamped

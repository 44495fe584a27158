"""tour/regions.py — Region directory and campaign list.

Pure data.  Two disjoint content sets of regions ("base" and
"expansion") plus the campaigns a tour can be run under.  Everything
here is immutable; the rotation policy copies what it needs.

    from tour.regions import region_name, all_region_codes
    region_name("SU")          # "Outskirts"
    all_region_codes()[:3]     # ("SU", "HI", "CC")
"""

from __future__ import annotations
from types import MappingProxyType

from components.world import Region


BASE_REGIONS: tuple[Region, ...] = (
    Region("SU", "Outskirts"),
    Region("HI", "Industrial Complex"),
    Region("CC", "Chimney Canopy"),
    Region("GW", "Garbage Wastes"),
    Region("SH", "Shaded Citadel"),
    Region("DS", "Drainage System"),
    Region("SL", "Shoreline"),
    Region("SI", "Sky Islands"),
    Region("LF", "Farm Arrays"),
    Region("UW", "The Exterior"),
    Region("SS", "Five Pebbles"),
    Region("SB", "Subterranean"),
)

EXPANSION_REGIONS: tuple[Region, ...] = (
    Region("LM", "Looks to the Moon", "expansion"),
    Region("RM", "Pipeyard", "expansion"),
    Region("DM", "Metropolis", "expansion"),
    Region("LC", "Outer Expanse", "expansion"),
    Region("MS", "Waterfront Facility", "expansion"),
    Region("VS", "Undergrowth", "expansion"),
    Region("CL", "Silent Construct", "expansion"),
    Region("OE", "Rubicon", "expansion"),
)

REGIONS = MappingProxyType(
    {r.code: r for r in BASE_REGIONS + EXPANSION_REGIONS}
)

DEFAULT_START_REGION = "SU"

# Entry room per region.  Five Pebbles has no own entrance and is
# reached through the Outskirts.
START_ROOMS = MappingProxyType({
    **{code: f"{code}_A01" for code in REGIONS},
    "SS": "SU_A01",
})


# ── Campaigns ────────────────────────────────────────────────────────
# (id, display name) in the order a full sweep advances through them.

CAMPAIGNS: tuple[tuple[str, str], ...] = (
    ("White", "Survivor"),
    ("Yellow", "Monk"),
    ("Red", "Hunter"),
    ("Gourmand", "Gourmand"),
    ("Artificer", "Artificer"),
    ("Rivulet", "Rivulet"),
    ("Spearmaster", "Spearmaster"),
    ("Saint", "Saint"),
)

DEFAULT_CAMPAIGN = CAMPAIGNS[0][0]


def normalize(code: str | None) -> str:
    """Canonical form of a region code (upper case, trimmed)."""
    return (code or "").strip().upper()


def region_name(code: str) -> str:
    """Display name for *code*, or the code itself when unknown."""
    region = REGIONS.get(normalize(code))
    return region.name if region else code


def content_set(code: str) -> str:
    region = REGIONS.get(normalize(code))
    return region.content_set if region else ""


def all_region_codes() -> tuple[str, ...]:
    """Deduplicated union of both content sets, base regions first."""
    seen: dict[str, None] = {}
    for region in BASE_REGIONS + EXPANSION_REGIONS:
        seen.setdefault(region.code, None)
    return tuple(seen)


def start_room(code: str) -> str:
    code = normalize(code)
    return START_ROOMS.get(code, f"{code}_A01")


def campaign_name(campaign: str) -> str:
    for cid, name in CAMPAIGNS:
        if cid.lower() == (campaign or "").lower():
            return name
    return campaign


def next_campaign(campaign: str) -> str:
    """The campaign after *campaign* (wraps; unknown ids restart)."""
    ids = [cid for cid, _ in CAMPAIGNS]
    for i, cid in enumerate(ids):
        if cid.lower() == (campaign or "").lower():
            return ids[(i + 1) % len(ids)]
    return ids[0]

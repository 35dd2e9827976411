"""
modules/planning/timing.py
---------------------------
Visit-duration, pace-limit and travel-time helpers shared by the greedy
selector and the schedule builder.  All values are integer minutes.
"""

from __future__ import annotations
import math
from typing import Optional

from modules.tool_usage.geo_tool import GeoTool
from schemas.plan import Coordinate, Pace, Place

# ── Pace tables ───────────────────────────────────────────────────────────────
DEFAULT_VISIT_MINUTES: dict[Pace, int] = {Pace.relaxed: 90, Pace.standard: 60, Pace.active: 45}
MIN_VISIT_MINUTES:     dict[Pace, int] = {Pace.relaxed: 40, Pace.standard: 30, Pace.active: 20}
MAX_STOPS:             dict[Pace, int] = {Pace.relaxed: 6,  Pace.standard: 7,  Pace.active: 8}

_VISIT_FLOOR_MINUTES    = 20
_MINUTES_PER_STOP_CAP   = 40      # time cap on stop count: available / 40

# ── Travel constants ─────────────────────────────────────────────────────────
_SAME_SPOT_METERS        = 20.0
_NO_COORDINATE_TRAVEL    = 10         # destination without coordinates
_MIN_TRAVEL, _MAX_TRAVEL = 1, 60
UNLOCATED_DISTANCE_M     = 1_000_000.0


def round_half_up(value: float) -> int:
    """0.5 rounds up (52.5 -> 53); Python's round() would give 52."""
    return int(math.floor(value + 0.5))


def recommended_visit_minutes(place: Place, pace: Pace) -> int:
    """relaxed -> max bound, active -> min bound, standard -> rounded midpoint."""
    lower = place.visit_min_minutes if place.visit_min_minutes is not None else DEFAULT_VISIT_MINUTES[pace]
    min_visit = max(_VISIT_FLOOR_MINUTES, lower)
    upper = place.visit_max_minutes if place.visit_max_minutes is not None else min_visit
    max_visit = max(min_visit, upper)
    if pace is Pace.relaxed:
        return max_visit
    if pace is Pace.active:
        return min_visit
    return round_half_up((min_visit + max_visit) / 2.0)


def min_visit_minutes(pace: Pace) -> int:
    return MIN_VISIT_MINUTES[pace]


def max_stops(pace: Pace, available_minutes: int) -> int:
    return min(MAX_STOPS[pace], max(1, available_minutes // _MINUTES_PER_STOP_CAP))


def travel_minutes(origin: Optional[Coordinate], place: Place, geo: GeoTool) -> int:
    """
    Walking minutes from *origin* to *place*.
      no origin               -> 0
      place has no coordinate -> 10
      within 20 m             -> 0
      otherwise               -> region-aware walk estimate clamped to [1, 60]
    """
    if origin is None:
        return 0
    destination = place.coordinate
    if destination is None:
        return _NO_COORDINATE_TRAVEL

    meters = geo.distance_meters(origin, destination)
    if meters <= _SAME_SPOT_METERS:
        return 0
    region = place.region_id if place.region_id is not None else geo.detect_region(destination)
    return min(max(geo.estimate_walk_minutes(meters, region), _MIN_TRAVEL), _MAX_TRAVEL)


def linear_distance_meters(origin: Coordinate, place: Place, geo: GeoTool) -> float:
    """Straight-line metres; unlocated places sort last."""
    destination = place.coordinate
    if destination is None:
        return UNLOCATED_DISTANCE_M
    return geo.distance_meters(origin, destination)

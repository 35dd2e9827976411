"""
modules/tool_usage/geo_tool.py
-------------------------------
Geographic helpers: Haversine distance, bearing, region detection and a
walking-time estimate.  Pure maths, no external HTTP calls.

Region bounds cover Marrakech (medina, gueliz, kasbah).  Old-city regions
walk slower because of denser, winding lanes.

Config knobs (config.py):
  WALK_SPEED_MPS            -- base walking speed (default: 1.25 m/s)
  OLD_CITY_WALK_MULTIPLIER  -- speed multiplier inside the old city (default: 0.7)
  WALK_NAV_BUFFER           -- navigation/stop buffer on walk time (default: 1.1)
"""

from __future__ import annotations
import math

import config
from schemas.plan import Coordinate


# ---------------------------------------------------------------------------
# Pure maths
# ---------------------------------------------------------------------------

_EARTH_RADIUS_M = 6371000.0

_OLD_CITY_REGIONS = frozenset({"medina", "medina_core", "kasbah", "souks"})

# (min_lat, max_lat, min_lng, max_lng)
_MEDINA_BOUNDS = (31.615, 31.640, -8.00, -7.975)
_GUELIZ_BOUNDS = (31.630, 31.650, -8.020, -7.995)
_CITY_BOUNDS   = (31.55, 31.70, -8.10, -7.90)


def haversine_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two points (Haversine formula) in metres."""
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lam = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    h = min(max(h, 0.0), 1.0)
    return _EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bearing_degrees(a: Coordinate, b: Coordinate) -> float:
    """Initial bearing from a to b in degrees (0 = North, 90 = East), in [0, 360)."""
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    d_lam = math.radians(b.lng - a.lng)
    x = math.sin(d_lam) * math.cos(phi2)
    y = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lam)
    return (math.degrees(math.atan2(x, y)) + 360) % 360


def _in_box(coord: Coordinate, box: tuple[float, float, float, float]) -> bool:
    min_lat, max_lat, min_lng, max_lng = box
    return min_lat <= coord.lat <= max_lat and min_lng <= coord.lng <= max_lng


def detect_region(coord: Coordinate) -> str:
    """Return "medina" | "gueliz" | "kasbah" | "other" for a coordinate."""
    if _in_box(coord, _MEDINA_BOUNDS):
        return "medina"
    if _in_box(coord, _GUELIZ_BOUNDS):
        return "gueliz"
    if coord.lat < 31.620 and coord.lng < -7.980:
        return "kasbah"
    return "other"


def is_within_city_bounds(coord: Coordinate) -> bool:
    """Sanity check for GPS fixes: inside the metropolitan bounding box."""
    return _in_box(coord, _CITY_BOUNDS)


def format_distance(meters: float) -> str:
    """
    Human-readable distance.
      < 100 m   -> "42 m"
      < 1000 m  -> "350 m"  (nearest 10 m)
      otherwise -> "1.3 km"
    """
    m = max(meters, 0.0)
    if m < 100:
        return f"{math.floor(m + 0.5)} m"
    if m < 1000:
        return f"{math.floor(m / 10 + 0.5) * 10} m"
    km = math.floor(m / 100 + 0.5) / 10.0
    return f"{km:.1f} km"


# ---------------------------------------------------------------------------
# GeoTool
# ---------------------------------------------------------------------------


class GeoTool:
    """
    Walking-time estimates on top of the pure helpers above.
    Instances are stateless after construction and safe to share across threads.
    """

    def __init__(
        self,
        walk_speed_mps: float | None = None,
        old_city_multiplier: float | None = None,
        nav_buffer: float | None = None,
    ) -> None:
        self.walk_speed_mps = walk_speed_mps or config.WALK_SPEED_MPS
        self.old_city_multiplier = old_city_multiplier or config.OLD_CITY_WALK_MULTIPLIER
        self.nav_buffer = nav_buffer or config.WALK_NAV_BUFFER

    def distance_meters(self, a: Coordinate, b: Coordinate) -> float:
        return haversine_meters(a, b)

    def detect_region(self, coord: Coordinate) -> str:
        return detect_region(coord)

    def estimate_walk_minutes(self, meters: float, region: str) -> int:
        """Whole minutes to walk *meters* in *region*, rounded up after the nav buffer."""
        if meters <= 0:
            return 0
        multiplier = self.old_city_multiplier if region.lower() in _OLD_CITY_REGIONS else 1.0
        seconds = meters / (self.walk_speed_mps * multiplier)
        return math.ceil(seconds / 60.0 * self.nav_buffer)

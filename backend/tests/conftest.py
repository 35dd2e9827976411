"""
Shared pytest fixtures for the My Day planner.

All times are built in the planning zone; January 2026 dates are used so no
clock change falls inside a test window.
"""

import os
from datetime import datetime
from zoneinfo import ZoneInfo

# Event logs off unless a test opts in; must happen before `config` is imported.
os.environ.setdefault("PLAN_EVENT_LOG_ENABLED", "false")

import pytest

from modules.tool_usage.geo_tool import GeoTool
from modules.tool_usage.hours_tool import HoursTool
from schemas.plan import Coordinate, Place

ZONE = ZoneInfo("Africa/Casablanca")

# Jardin Majorelle-ish / Jemaa el-Fnaa-ish anchor points
GUELIZ = Coordinate(31.6410, -8.0030)
MEDINA = Coordinate(31.6258, -7.9891)


@pytest.fixture
def local():
    """local(hour, minute=0, day=15) -> aware datetime on 2026-01-<day> (15th is a Thursday)."""
    def _make(hour: int, minute: int = 0, day: int = 15) -> datetime:
        return datetime(2026, 1, day, hour, minute, tzinfo=ZONE)
    return _make


@pytest.fixture
def make_place():
    """Place factory with neutral defaults: a landmark with no hours, no coords."""
    def _make(place_id: str, **kwargs) -> Place:
        kwargs.setdefault("name", place_id.replace("-", " ").title())
        kwargs.setdefault("category", "landmark")
        for key in ("tags", "hours_weekly", "best_time_windows"):
            if key in kwargs:
                kwargs[key] = tuple(kwargs[key])
        return Place(id=place_id, **kwargs)
    return _make


@pytest.fixture
def geo() -> GeoTool:
    return GeoTool()


@pytest.fixture
def hours() -> HoursTool:
    return HoursTool(ZONE)

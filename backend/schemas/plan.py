"""
schemas/plan.py
---------------
Dataclass definitions for the My Day planner's inputs and outputs.

Requested interests, pace and budget tier are closed enumerations.
A place's category, tags and best-time windows stay open strings because the
content is curated outside this codebase.

All timestamps are timezone-aware datetimes.  Minutes are integers throughout.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


class Interest(str, Enum):
    history = "history"
    food = "food"
    shopping = "shopping"
    nature = "nature"
    culture = "culture"
    architecture = "architecture"
    relaxation = "relaxation"
    nightlife = "nightlife"
    general = "general"

    @classmethod
    def from_raw(cls, raw: str) -> Optional["Interest"]:
        """Case-insensitive lookup; unknown interests map to None."""
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class Pace(str, Enum):
    relaxed = "relaxed"
    standard = "standard"
    active = "active"

    @classmethod
    def from_raw(cls, raw: str) -> "Pace":
        return cls(raw.strip().lower())


class BudgetTier(str, Enum):
    budget = "budget"
    mid = "mid"
    splurge = "splurge"

    @classmethod
    def from_raw(cls, raw: str) -> "BudgetTier":
        return cls(raw.strip().lower())


@dataclass(frozen=True)
class Place:
    """
    A point of interest as the planner sees it.

    Opening-hours fields are opaque here; only the hours tool reads them.
    Visit bounds of None fall back to pace defaults.
    """
    id: str
    name: str
    category: Optional[str] = None
    tags: tuple[str, ...] = ()
    lat: Optional[float] = None
    lng: Optional[float] = None
    region_id: Optional[str] = None
    visit_min_minutes: Optional[int] = None
    visit_max_minutes: Optional[int] = None
    cost_min: Optional[int] = None
    cost_max: Optional[int] = None
    hours_text: Optional[str] = None
    hours_weekly: tuple[str, ...] = ()
    hours_verified_at: Optional[str] = None   # YYYY-MM-DD
    tourist_trap_level: Optional[str] = None  # low | mixed | high
    best_time_windows: tuple[str, ...] = ()   # morning | lunch | afternoon | evening | night

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.lat is None or self.lng is None:
            return None
        return Coordinate(self.lat, self.lng)

    @property
    def category_key(self) -> str:
        """Lowercase category, "" when absent."""
        return (self.category or "").lower()

    @property
    def tag_keys(self) -> frozenset[str]:
        return frozenset(t.lower() for t in self.tags)

    @property
    def window_keys(self) -> frozenset[str]:
        return frozenset(w.lower() for w in self.best_time_windows)


@dataclass(frozen=True)
class PlanInput:
    available_minutes: int
    current_time: datetime
    places: tuple[Place, ...] = ()
    start_point: Optional[Coordinate] = None
    interests: tuple[Interest, ...] = ()
    pace: Pace = Pace.standard
    budget_tier: BudgetTier = BudgetTier.mid
    recent_place_ids: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class PriceRange:
    min: int = 0
    max: int = 0


@dataclass(frozen=True)
class PlanStop:
    place_id: str
    arrival_time: datetime
    departure_time: datetime
    travel_minutes_from_previous: int
    visit_minutes: int


@dataclass(frozen=True)
class PlanOutput:
    stops: tuple[PlanStop, ...] = ()
    total_minutes: int = 0
    estimated_cost_range: PriceRange = field(default_factory=PriceRange)
    warnings: tuple[str, ...] = ()

    @property
    def place_ids(self) -> list[str]:
        return [s.place_id for s in self.stops]

"""
schemas/place_record.py
-----------------------
Pydantic model for curated place content as shipped in the city JSON files.

The content files use camelCase keys; PlaceRecord accepts either the
camelCase alias or the snake_case field name and converts to the immutable
planner-side `Place`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.plan import Place


class PlaceRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    region_id: Optional[str] = Field(None, alias="regionId")
    category: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    hours_text: Optional[str] = Field(None, alias="hoursText")
    hours_weekly: list[str] = Field(default_factory=list, alias="hoursWeekly")
    hours_verified_at: Optional[str] = Field(None, alias="hoursVerifiedAt")     # YYYY-MM-DD
    tourist_trap_level: Optional[str] = Field(None, alias="touristTrapLevel")   # low | mixed | high
    visit_min_minutes: Optional[int] = Field(None, alias="visitMinMinutes")
    visit_max_minutes: Optional[int] = Field(None, alias="visitMaxMinutes")
    expected_cost_min_mad: Optional[int] = Field(None, alias="expectedCostMinMad")
    expected_cost_max_mad: Optional[int] = Field(None, alias="expectedCostMaxMad")
    best_time_windows: list[str] = Field(default_factory=list, alias="bestTimeWindows")
    tags: list[str] = Field(default_factory=list)

    def to_place(self) -> Place:
        return Place(
            id=self.id,
            name=self.name,
            category=self.category,
            tags=tuple(self.tags),
            lat=self.lat,
            lng=self.lng,
            region_id=self.region_id,
            visit_min_minutes=self.visit_min_minutes,
            visit_max_minutes=self.visit_max_minutes,
            cost_min=self.expected_cost_min_mad,
            cost_max=self.expected_cost_max_mad,
            hours_text=self.hours_text,
            hours_weekly=tuple(self.hours_weekly),
            hours_verified_at=self.hours_verified_at,
            tourist_trap_level=self.tourist_trap_level,
            best_time_windows=tuple(self.best_time_windows),
        )

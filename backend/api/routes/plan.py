"""
api/routes/plan.py
------------------
POST /v1/plan/my-day

Thin adapter over modules.planning.day_planner.generate: parses the request,
validates curated place content and serialises the resulting plan.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

import config

from modules.planning.day_planner import generate
from modules.validation import validate_place
from schemas.place_record import PlaceRecord
from schemas.plan import BudgetTier, Coordinate, Interest, Pace, PlanInput, PlanOutput

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request schemas ────────────────────────────────────────────────────────────

class StartPoint(BaseModel):
    lat: float
    lng: float


class MyDayRequest(BaseModel):
    available_minutes: int = Field(..., description="Minutes the traveller has left today")
    current_time: datetime = Field(..., description="ISO-8601 timestamp; naive values are UTC")
    start_point: Optional[StartPoint] = None
    interests: list[str] = Field(default_factory=list)
    pace: str = Field("standard", description="relaxed | standard | active")
    budget_tier: str = Field("mid", description="budget | mid | splurge")
    places: list[PlaceRecord] = Field(default_factory=list)
    recent_place_ids: list[str] = Field(default_factory=list)


# ── Serialisers ────────────────────────────────────────────────────────────────

def _ser_dt(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def _ser_plan(output: PlanOutput) -> dict:
    return {
        "stops": [
            {
                "place_id":                     s.place_id,
                "arrival_time":                 _ser_dt(s.arrival_time),
                "departure_time":               _ser_dt(s.departure_time),
                "travel_minutes_from_previous": s.travel_minutes_from_previous,
                "visit_minutes":                s.visit_minutes,
            }
            for s in output.stops
        ],
        "total_minutes": output.total_minutes,
        "estimated_cost_range": {
            "min": output.estimated_cost_range.min,
            "max": output.estimated_cost_range.max,
            "currency": config.CURRENCY_UNIT,
        },
        "warnings": list(output.warnings),
    }


def _to_plan_input(req: MyDayRequest) -> PlanInput:
    try:
        pace = Pace.from_raw(req.pace)
        tier = BudgetTier.from_raw(req.budget_tier)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"Invalid pace or budget tier: {exc}") from exc

    places = [record.to_place() for record in req.places]
    rejected = {}
    for place in places:
        result = validate_place(place.__dict__)
        if not result.valid:
            rejected[place.id or "?"] = result.errors
    if rejected:
        logger.warning("Rejected %d invalid place record(s)", len(rejected))
        raise HTTPException(status_code=422, detail={"invalid_places": rejected})

    interests = tuple(i for i in (Interest.from_raw(raw) for raw in req.interests) if i is not None)
    start = Coordinate(req.start_point.lat, req.start_point.lng) if req.start_point else None

    return PlanInput(
        available_minutes=req.available_minutes,
        current_time=req.current_time,
        places=tuple(places),
        start_point=start,
        interests=interests,
        pace=pace,
        budget_tier=tier,
        recent_place_ids=frozenset(req.recent_place_ids),
    )


# ── Endpoint ───────────────────────────────────────────────────────────────────

@router.post("/my-day", summary="Generate a My Day plan")
def plan_my_day(req: MyDayRequest) -> dict:
    """
    Selects, orders and times stops for the rest of the day.

    Degenerate situations (no time, nothing matching, nothing feasible)
    come back as an empty plan with warnings, never as an error.
    """
    return _ser_plan(generate(_to_plan_input(req)))

"""
modules/planning/route_planner.py
-----------------------------------
Turns an ordered list of selected places into a concrete, time-stamped
schedule, and arbitrates between the selection order and a nearest-neighbour
reordering of it.

build_schedule()           — sequential, drops stops that overrun the budget
                             or arrive while the place is closed.
reorder_nearest_neighbor() — greedy NN tour from the start point
                             (ties: smallest place id).
preferred_schedule()       — (a) more required meal slots covered,
                             (b) more stops, (c) fewer total minutes,
                             (d) otherwise the direct schedule.

Constraints enforced:
  departure = arrival + visit
  arrival(i+1) ≥ departure(i)
  elapsed ≤ available_minutes
  no place id repeats
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence

from modules.planning.meal_slots import MealSlot, servable_meal_slots
from modules.planning.timing import linear_distance_meters, recommended_visit_minutes, travel_minutes
from modules.tool_usage.geo_tool import GeoTool
from modules.tool_usage.hours_tool import HoursTool
from schemas.plan import Coordinate, Pace, Place, PlanStop

logger = logging.getLogger(__name__)


def closed_at(hours: HoursTool, place: Place, at: datetime) -> bool:
    """
    True only when the evaluator reports CLOSED.  An evaluator failure is
    logged and treated as UNKNOWN so plan generation never raises.
    """
    try:
        return hours.is_open(place, at).is_closed
    except Exception:  # noqa: BLE001
        logger.warning("Opening-hours evaluation failed for %r; treating as unknown", place.id, exc_info=True)
        return False


@dataclass(frozen=True)
class Schedule:
    stops: tuple[PlanStop, ...] = ()
    places: tuple[Place, ...] = ()     # the subset of input places actually scheduled
    total_minutes: int = 0
    dropped_count: int = 0

    def meal_slots(self) -> set[MealSlot]:
        return servable_meal_slots(self.places)

    def covered_meal_slots(self, required: set[MealSlot]) -> int:
        if not required:
            return 0
        return len(self.meal_slots() & required)


class RoutePlanner:
    """
    Schedule construction and route reordering for a single day plan.
    Collaborators are injected so tests can stub the opening-hours evaluator.
    """

    def __init__(self, geo_tool: GeoTool | None = None, hours_tool: HoursTool | None = None) -> None:
        self.geo_tool = geo_tool or GeoTool()
        self.hours_tool = hours_tool or HoursTool()

    # ── Schedule builder ──────────────────────────────────────────────────────

    def build_schedule(
        self,
        places: Sequence[Place],
        start_time: datetime,
        start_point: Optional[Coordinate],
        available_minutes: int,
        pace: Pace,
    ) -> Schedule:
        stops: list[PlanStop] = []
        scheduled: list[Place] = []
        current = start_point
        elapsed = 0
        dropped = 0

        for place in places:
            travel = travel_minutes(current, place, self.geo_tool)
            visit = recommended_visit_minutes(place, pace)
            required = travel + visit

            if elapsed + required > available_minutes:
                dropped += 1
                logger.debug("schedule: drop %s (needs %d min, %d left)", place.id, required, available_minutes - elapsed)
                continue

            arrival = start_time + timedelta(minutes=elapsed + travel)
            if closed_at(self.hours_tool, place, arrival):
                dropped += 1
                logger.debug("schedule: drop %s (closed at %s)", place.id, arrival.isoformat())
                continue

            stops.append(PlanStop(
                place_id=place.id,
                arrival_time=arrival,
                departure_time=arrival + timedelta(minutes=visit),
                travel_minutes_from_previous=travel,
                visit_minutes=visit,
            ))
            scheduled.append(place)
            elapsed += required
            if place.coordinate is not None:
                current = place.coordinate

        return Schedule(
            stops=tuple(stops),
            places=tuple(scheduled),
            total_minutes=elapsed,
            dropped_count=dropped,
        )

    # ── Reordering ────────────────────────────────────────────────────────────

    def reorder_nearest_neighbor(
        self,
        places: Sequence[Place],
        start_point: Optional[Coordinate],
    ) -> list[Place]:
        if start_point is None or len(places) <= 1:
            return list(places)

        remaining = list(places)
        ordered: list[Place] = []
        current = start_point
        while remaining:
            here = current
            nxt = min(
                remaining,
                key=lambda p: (linear_distance_meters(here, p, self.geo_tool), p.id),
            )
            remaining.remove(nxt)
            ordered.append(nxt)
            if nxt.coordinate is not None:
                current = nxt.coordinate
        return ordered

    # ── Arbitration ───────────────────────────────────────────────────────────

    @staticmethod
    def preferred_schedule(
        primary: Schedule,
        alternative: Schedule,
        required_meal_slots: set[MealSlot],
    ) -> Schedule:
        primary_meals = primary.covered_meal_slots(required_meal_slots)
        alternative_meals = alternative.covered_meal_slots(required_meal_slots)
        if alternative_meals != primary_meals:
            return alternative if alternative_meals > primary_meals else primary

        if len(alternative.stops) != len(primary.stops):
            return alternative if len(alternative.stops) > len(primary.stops) else primary

        if alternative.total_minutes != primary.total_minutes:
            return alternative if alternative.total_minutes < primary.total_minutes else primary

        return primary

    def plan_route(
        self,
        selected: Sequence[Place],
        start_time: datetime,
        start_point: Optional[Coordinate],
        available_minutes: int,
        pace: Pace,
        required_meal_slots: set[MealSlot],
    ) -> Schedule:
        """Direct schedule, or the reordered one when it wins arbitration."""
        direct = self.build_schedule(selected, start_time, start_point, available_minutes, pace)
        reordered = self.reorder_nearest_neighbor(selected, start_point)
        if [p.id for p in reordered] == [p.id for p in selected]:
            return direct

        alternative = self.build_schedule(reordered, start_time, start_point, available_minutes, pace)
        chosen = self.preferred_schedule(direct, alternative, required_meal_slots)
        logger.debug(
            "route: direct=%d stops/%d min, reordered=%d stops/%d min -> %s",
            len(direct.stops), direct.total_minutes,
            len(alternative.stops), alternative.total_minutes,
            "reordered" if chosen is alternative else "direct",
        )
        return chosen

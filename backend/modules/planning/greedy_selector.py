"""
modules/planning/greedy_selector.py
------------------------------------
Greedy stop selection for the My Day plan.

State: remaining / elapsed minutes, current coordinate, selected ids,
covered meal slots.

Loop while remaining ≥ min_visit_minutes(pace) and stops < max_stops(pace, T):
  1. For each unselected candidate compute travel + visit.  Skip it when it
     does not fit the remaining time, or when the place is closed at the
     computed arrival (counted for the closed-places warning).  Score the rest.
  2. Commit the best candidate (score desc, travel+visit asc, id asc).
  3. Stop when nothing is feasible.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Sequence

from modules.planning.meal_slots import MealSlot, meal_slots_for_place
from modules.planning.place_scoring import CandidateScore, score_candidate
from modules.planning.route_planner import closed_at
from modules.planning.timing import max_stops, min_visit_minutes, recommended_visit_minutes, travel_minutes
from modules.tool_usage.geo_tool import GeoTool
from modules.tool_usage.hours_tool import HoursTool
from schemas.plan import Place, PlanInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionResult:
    places: tuple[Place, ...]
    closed_exclusion_count: int


class GreedySelector:

    def __init__(self, geo_tool: GeoTool | None = None, hours_tool: HoursTool | None = None) -> None:
        self.geo_tool = geo_tool or GeoTool()
        self.hours_tool = hours_tool or HoursTool()

    def select(
        self,
        candidates: Sequence[Place],
        plan_input: PlanInput,
        available_minutes: int,
        required_meal_slots: set[MealSlot],
    ) -> SelectionResult:
        pace = plan_input.pace
        remaining = available_minutes
        elapsed = 0
        current = plan_input.start_point
        selected: list[Place] = []
        selected_ids: set[str] = set()
        covered: set[MealSlot] = set()
        closed_exclusions = 0

        floor_minutes = min_visit_minutes(pace)
        stop_cap = max_stops(pace, available_minutes)

        while remaining >= floor_minutes and len(selected) < stop_cap:
            pending = required_meal_slots - covered
            evaluated: list[CandidateScore] = []

            for place in candidates:
                if place.id in selected_ids:
                    continue
                travel = travel_minutes(current, place, self.geo_tool)
                visit = recommended_visit_minutes(place, pace)
                if travel + visit > remaining:
                    continue

                arrival = plan_input.current_time + timedelta(minutes=elapsed + travel)
                if closed_at(self.hours_tool, place, arrival):
                    closed_exclusions += 1
                    continue

                evaluated.append(score_candidate(
                    place,
                    interests=plan_input.interests,
                    tier=plan_input.budget_tier,
                    arrival=arrival,
                    travel_minutes=travel,
                    visit_minutes=visit,
                    selected_categories=(p.category for p in selected),
                    pending_meal_slots=pending,
                ))

            if not evaluated:
                break

            best = min(evaluated, key=CandidateScore.sort_key)
            logger.debug(
                "select #%d: %s score=%.2f travel=%d visit=%d (%d feasible)",
                len(selected) + 1, best.place.id, best.total,
                best.travel_minutes, best.visit_minutes, len(evaluated),
            )

            selected.append(best.place)
            selected_ids.add(best.place.id)
            covered |= meal_slots_for_place(best.place)
            remaining -= best.required_minutes
            elapsed += best.required_minutes
            if best.place.coordinate is not None:
                current = best.place.coordinate

        return SelectionResult(places=tuple(selected), closed_exclusion_count=closed_exclusions)

"""
modules/planning/day_planner.py
--------------------------------
"My Day" plan generation: the single public entry point of the planner.

Pipeline (one pure, synchronous call; no state kept between calls):
  1. Clamp available minutes; stop early when there is no time.
  2. Filter candidates (recent visits, interests, budget policy).
  3. Required meal slots from the planning window; long food days also
     require every slot some candidate can serve.
  4. Greedy selection.
  5. Direct schedule vs nearest-neighbour schedule, arbitrated.
  6. Warnings, meal coverage and cost range.

Identical input always yields identical output.  Degenerate situations are
reported as warnings on an empty or partial plan, never raised.
"""

from __future__ import annotations
import hashlib
import logging
import time as _time_mod
from dataclasses import replace
from datetime import timezone

from modules.observability.logger import StructuredLogger
from modules.planning.budget_planner import estimate_cost_range
from modules.planning.candidate_filter import filter_candidates
from modules.planning.greedy_selector import GreedySelector
from modules.planning.meal_slots import MealSlot, format_meal_slots, required_meal_slots, servable_meal_slots
from modules.planning.route_planner import RoutePlanner
from modules.tool_usage.geo_tool import GeoTool
from modules.tool_usage.hours_tool import HoursTool
from schemas.plan import Interest, PlanInput, PlanOutput

logger = logging.getLogger(__name__)

_event_log = StructuredLogger()

# ── Warning texts (shared with the mobile clients) ───────────────────────────
WARN_NO_TIME       = "Available time is too short to generate a plan."
WARN_NO_MATCH      = "No places match your constraints right now."
WARN_NO_PLAN       = ("No plan could fit your time and constraints. "
                      "Try increasing available time or broadening interests.")
WARN_CLOSED        = "Some places were excluded because they are closed at the planned visit time."
WARN_DROPPED       = "Some candidate stops were dropped during schedule construction."
WARN_MISSING_MEALS = "Could not schedule meal stop(s): {slots}."

# Food-focused days at least this long must try to cover every servable meal.
_FULL_FOOD_DAY_MINUTES = 360


def meal_requirement(now, available_minutes: int, interests, candidates) -> set[MealSlot]:
    """
    Meal slots the plan must try to cover: windows overlapping the planning
    interval, plus every slot a candidate can serve on long food days.
    """
    required = required_meal_slots(now, available_minutes)
    if Interest.food in interests and available_minutes >= _FULL_FOOD_DAY_MINUTES:
        required |= servable_meal_slots(candidates)
    return required


def plan_fingerprint(output: PlanOutput) -> str:
    """Short stable digest of a plan; equal plans give equal digests."""
    return hashlib.sha256(repr(output).encode("utf-8")).hexdigest()[:16]


class DayPlanner:
    """
    Builds one day plan from a PlanInput.

    The geo and opening-hours collaborators are injectable; the planner
    itself holds no mutable state, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        geo_tool: GeoTool | None = None,
        hours_tool: HoursTool | None = None,
        event_log: StructuredLogger | None = None,
        session_id: str = "default",
    ) -> None:
        self.geo_tool = geo_tool or GeoTool()
        self.hours_tool = hours_tool or HoursTool()
        self.selector = GreedySelector(self.geo_tool, self.hours_tool)
        self.route_planner = RoutePlanner(self.geo_tool, self.hours_tool)
        self.event_log = event_log or _event_log
        self.session_id = session_id

    def generate(self, plan_input: PlanInput) -> PlanOutput:
        _t0 = _time_mod.perf_counter()
        output = self._generate(plan_input)

        try:
            self.event_log.log(self.session_id, "PLAN_GENERATED", {
                "candidates": len(plan_input.places),
                "stops": len(output.stops),
                "total_minutes": output.total_minutes,
                "warnings": list(output.warnings),
                "plan_hash": plan_fingerprint(output),
            })
            self.event_log.log(self.session_id, "PERFORMANCE", {
                "component": "DayPlanner.generate",
                "duration_ms": round((_time_mod.perf_counter() - _t0) * 1000, 2),
            })
        except OSError:
            logger.warning("Plan event log write failed for session %r", self.session_id, exc_info=True)
        return output

    # ── Pipeline ──────────────────────────────────────────────────────────────

    def _generate(self, plan_input: PlanInput) -> PlanOutput:
        available = max(plan_input.available_minutes, 0)
        if available <= 0:
            return PlanOutput(warnings=(WARN_NO_TIME,))

        # naive timestamps are UTC; schedules are built on the UTC timeline
        now = plan_input.current_time
        now = now.replace(tzinfo=timezone.utc) if now.tzinfo is None else now.astimezone(timezone.utc)
        plan_input = replace(plan_input, current_time=now)

        interests = tuple(plan_input.interests)
        candidates = filter_candidates(
            plan_input.places,
            interests,
            plan_input.budget_tier,
            plan_input.recent_place_ids,
        )

        required = meal_requirement(plan_input.current_time, available, interests, candidates)

        if not candidates:
            logger.info("No candidates left after filtering %d places", len(plan_input.places))
            return PlanOutput(warnings=(WARN_NO_MATCH,))

        warnings: list[str] = []
        selection = self.selector.select(candidates, plan_input, available, required)
        if selection.closed_exclusion_count > 0:
            warnings.append(WARN_CLOSED)

        if not selection.places:
            warnings.append(WARN_NO_PLAN)
            return PlanOutput(warnings=tuple(warnings))

        schedule = self.route_planner.plan_route(
            selection.places,
            plan_input.current_time,
            plan_input.start_point,
            available,
            plan_input.pace,
            required,
        )

        if schedule.dropped_count > 0:
            warnings.append(WARN_DROPPED)

        missing = required - schedule.meal_slots()
        if missing:
            warnings.append(WARN_MISSING_MEALS.format(slots=format_meal_slots(missing)))

        return PlanOutput(
            stops=schedule.stops,
            total_minutes=schedule.total_minutes,
            estimated_cost_range=estimate_cost_range(schedule.places, plan_input.budget_tier),
            warnings=tuple(warnings),
        )


_default_planner = DayPlanner()


def generate(plan_input: PlanInput) -> PlanOutput:
    """Generate a My Day plan with the default collaborators."""
    return _default_planner.generate(plan_input)

"""
modules/planning/place_scoring.py
----------------------------------
Desirability scoring for plan candidates.

  base  = 10 × interest matches
        + tourist-trap penalty   (high −5, mixed −2)
        + best-time bonus        (+5 if the arrival bucket is a best-time window)
        + budget-fit bonus       (budget: +2 budget/local, else −4 luxury/fine-dining;
                                  splurge: +3 luxury/fine-dining)

  total = base
        + diversity bonus        (+3 if no selected stop shares the category)
        + meal bonus             (+12 per still-uncovered required meal slot served)
        − 0.35 × travel minutes
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Sequence

from modules.planning.candidate_filter import interest_match_count, tags_contain
from modules.planning.meal_slots import MealSlot, meal_slots_for_place, time_of_day_bucket
from schemas.plan import BudgetTier, Interest, Place

INTEREST_WEIGHT      = 10.0
BEST_TIME_BONUS      = 5.0
DIVERSITY_BONUS      = 3.0
MEAL_BONUS_PER_SLOT  = 12.0
TRAVEL_PENALTY_PER_MIN = 0.35

_TRAP_PENALTY: dict[str, float] = {"high": -5.0, "mixed": -2.0}


def tourist_trap_penalty(place: Place) -> float:
    return _TRAP_PENALTY.get((place.tourist_trap_level or "").lower(), 0.0)


def best_time_bonus(place: Place, at: datetime) -> float:
    return BEST_TIME_BONUS if time_of_day_bucket(at) in place.window_keys else 0.0


def budget_fit_bonus(place: Place, tier: BudgetTier) -> float:
    if tier is BudgetTier.budget:
        if tags_contain(place, "budget", "local"):
            return 2.0
        if tags_contain(place, "luxury", "fine-dining"):
            return -4.0
        return 0.0
    if tier is BudgetTier.splurge:
        return 3.0 if tags_contain(place, "luxury", "fine-dining") else 0.0
    return 0.0


def base_score(
    place: Place,
    interests: Sequence[Interest],
    tier: BudgetTier,
    arrival: datetime,
) -> float:
    return (
        interest_match_count(place, interests) * INTEREST_WEIGHT
        + tourist_trap_penalty(place)
        + best_time_bonus(place, arrival)
        + budget_fit_bonus(place, tier)
    )


@dataclass(frozen=True)
class CandidateScore:
    """Score breakdown for one candidate at one selection step."""
    place: Place
    travel_minutes: int
    visit_minutes: int
    base: float
    diversity_bonus: float
    meal_bonus: float
    travel_penalty: float

    @property
    def total(self) -> float:
        return self.base + self.diversity_bonus + self.meal_bonus - self.travel_penalty

    @property
    def required_minutes(self) -> int:
        return self.travel_minutes + self.visit_minutes

    def sort_key(self) -> tuple[float, int, str]:
        """Best first: highest total, then shortest travel+visit, then smallest id."""
        return (-self.total, self.required_minutes, self.place.id)


def score_candidate(
    place: Place,
    *,
    interests: Sequence[Interest],
    tier: BudgetTier,
    arrival: datetime,
    travel_minutes: int,
    visit_minutes: int,
    selected_categories: Iterable[str | None],
    pending_meal_slots: set[MealSlot],
) -> CandidateScore:
    diversity = 0.0 if place.category in set(selected_categories) else DIVERSITY_BONUS
    meal_matches = len(meal_slots_for_place(place) & pending_meal_slots)
    return CandidateScore(
        place=place,
        travel_minutes=travel_minutes,
        visit_minutes=visit_minutes,
        base=base_score(place, interests, tier, arrival),
        diversity_bonus=diversity,
        meal_bonus=meal_matches * MEAL_BONUS_PER_SLOT,
        travel_penalty=travel_minutes * TRAVEL_PENALTY_PER_MIN,
    )

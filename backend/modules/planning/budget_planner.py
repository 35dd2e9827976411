"""
modules/planning/budget_planner.py
------------------------------------
Estimated spend for a day plan.

Each scheduled place contributes a fixed per-category base range; the summed
range is scaled by the budget-tier multiplier, rounded half up and floored at 0.

All amounts are in config.CURRENCY_UNIT (MAD).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from modules.planning.timing import round_half_up
from schemas.plan import BudgetTier, Place, PriceRange


# ── Per-category base cost (min, max) ────────────────────────────────────────
CATEGORY_COST_INDEX: Mapping[str, tuple[int, int]] = MappingProxyType({
    "restaurant":    (80, 180),
    "cafe":          (20, 60),
    "museum":        (70, 120),
    "historic_site": (40, 90),
    "garden":        (40, 100),
    "market":        (0, 40),
    "landmark":      (0, 30),
    "neighborhood":  (0, 30),
    "nature":        (0, 30),
})
_DEFAULT_COST: tuple[int, int] = (20, 80)

BUDGET_TIER_MULTIPLIER: Mapping[BudgetTier, float] = MappingProxyType({
    BudgetTier.budget:  0.80,
    BudgetTier.mid:     1.00,
    BudgetTier.splurge: 1.25,
})


def base_cost_range(category: Optional[str]) -> tuple[int, int]:
    """Category lookup is case-insensitive; unknown or missing → default range."""
    return CATEGORY_COST_INDEX.get((category or "").lower(), _DEFAULT_COST)


def estimate_cost_range(places: Iterable[Place], tier: BudgetTier) -> PriceRange:
    total_min = 0
    total_max = 0
    for place in places:
        low, high = base_cost_range(place.category)
        total_min += low
        total_max += high

    multiplier = BUDGET_TIER_MULTIPLIER[tier]
    return PriceRange(
        min=max(round_half_up(total_min * multiplier), 0),
        max=max(round_half_up(total_max * multiplier), 0),
    )

"""
modules/planning/candidate_filter.py
-------------------------------------
Narrows the place universe to plan candidates and computes interest matches.

Filter order:
  1. Drop recently visited place ids.
  2. If interests were requested, keep places with interest_match_count > 0.
  3. Budget policy on tags:
       budget  -> drop luxury / fine-dining / upscale
       mid     -> drop ultra-luxury
       splurge -> keep everything
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from schemas.plan import BudgetTier, Interest, Place


INTEREST_CATEGORIES: Mapping[Interest, frozenset[str]] = MappingProxyType({
    Interest.history:      frozenset({"museum", "historic_site", "landmark", "neighborhood"}),
    Interest.food:         frozenset({"restaurant", "cafe", "market"}),
    Interest.shopping:     frozenset({"market", "neighborhood"}),
    Interest.nature:       frozenset({"garden", "nature"}),
    Interest.culture:      frozenset({"museum", "historic_site", "landmark", "neighborhood"}),
    Interest.architecture: frozenset({"museum", "historic_site", "landmark"}),
    Interest.relaxation:   frozenset({"garden", "nature", "cafe"}),
    Interest.nightlife:    frozenset({"restaurant", "cafe", "market", "landmark"}),
})

INTEREST_TOKENS: Mapping[Interest, tuple[str, ...]] = MappingProxyType({
    Interest.history:      ("history", "heritage", "palace", "madrasa", "museum", "historic"),
    Interest.food:         ("food", "eat", "restaurant", "cafe", "snack"),
    Interest.shopping:     ("shop", "shopping", "souk", "market", "artisan"),
    Interest.nature:       ("garden", "park", "nature"),
    Interest.culture:      ("culture", "heritage", "tradition", "architecture"),
    Interest.architecture: ("architecture", "design", "mosaic", "riads"),
    Interest.relaxation:   ("relax", "calm", "garden", "spa"),
    Interest.nightlife:    ("night", "evening", "music", "rooftop"),
})


def tags_contain(place: Place, *fragments: str) -> bool:
    """True if any lowercase tag contains any of *fragments*."""
    return any(f in tag for tag in place.tag_keys for f in fragments)


def interest_match_count(place: Place, interests: Sequence[Interest]) -> int:
    """
    Number of requested interests the place satisfies (1 when none requested).
    "general" always matches; others match on category, tag or name tokens.
    """
    if not interests:
        return 1

    category = place.category_key
    name = place.name.lower()
    count = 0
    for interest in interests:
        if interest is Interest.general:
            count += 1
            continue
        tokens = INTEREST_TOKENS.get(interest, ())
        if (
            category in INTEREST_CATEGORIES.get(interest, frozenset())
            or tags_contain(place, *tokens)
            or any(token in name for token in tokens)
        ):
            count += 1
    return count


def budget_allows(place: Place, tier: BudgetTier) -> bool:
    if tier is BudgetTier.budget:
        return not tags_contain(place, "luxury", "fine-dining", "upscale")
    if tier is BudgetTier.mid:
        return not tags_contain(place, "ultra-luxury")
    return True


def filter_candidates(
    places: Iterable[Place],
    interests: Sequence[Interest],
    budget_tier: BudgetTier,
    recent_place_ids: Iterable[str] = (),
) -> list[Place]:
    """Eligible places, input order preserved."""
    recent = set(recent_place_ids)
    candidates = [p for p in places if p.id not in recent]
    if interests:
        candidates = [p for p in candidates if interest_match_count(p, interests) > 0]
    return [p for p in candidates if budget_allows(p, budget_tier)]

"""
modules/planning/meal_slots.py
-------------------------------
Meal-slot and time-of-day helpers.

Fixed local meal windows (planning zone):
  breakfast  07:00-11:00
  lunch      12:00-15:00
  dinner     19:00-22:00

A slot is "required" when its window overlaps [now, now + available_minutes]
on the local calendar day of *now*.  Only restaurants and cafes serve meals.
"""

from __future__ import annotations
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable
from zoneinfo import ZoneInfo

import config
from schemas.plan import Place

PLANNING_ZONE = ZoneInfo(config.PLANNING_TIMEZONE)


class MealSlot(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"


# slot: (start_hour, end_hour) local
MEAL_WINDOWS: dict[MealSlot, tuple[int, int]] = {
    MealSlot.breakfast: (7, 11),
    MealSlot.lunch:     (12, 15),
    MealSlot.dinner:    (19, 22),
}

_MEAL_CATEGORIES = frozenset({"restaurant", "cafe"})


def required_meal_slots(
    now: datetime,
    available_minutes: int,
    zone: ZoneInfo = PLANNING_ZONE,
) -> set[MealSlot]:
    """Meal slots whose local window overlaps the planning interval."""
    # compare on the UTC timeline; same-tzinfo comparisons ignore DST offsets
    start = now.astimezone(timezone.utc)
    end = start + timedelta(minutes=available_minutes)
    local = now.astimezone(zone)

    slots: set[MealSlot] = set()
    for slot, (hour_start, hour_end) in MEAL_WINDOWS.items():
        window_start = local.replace(hour=hour_start, minute=0, second=0, microsecond=0).astimezone(timezone.utc)
        window_end = local.replace(hour=hour_end, minute=0, second=0, microsecond=0).astimezone(timezone.utc)
        if max(window_start, start) < min(window_end, end):
            slots.add(slot)
    return slots


def meal_slots_for_place(place: Place) -> set[MealSlot]:
    """Meal slots a restaurant/cafe can serve, from its tags and best-time windows."""
    if place.category_key not in _MEAL_CATEGORIES:
        return set()

    tags = place.tag_keys
    windows = place.window_keys
    slots: set[MealSlot] = set()

    if any("breakfast" in t or "brunch" in t for t in tags) or "morning" in windows:
        slots.add(MealSlot.breakfast)
    if any("lunch" in t for t in tags) or "lunch" in windows or "afternoon" in windows:
        slots.add(MealSlot.lunch)
    if any("dinner" in t or "evening" in t for t in tags) or "evening" in windows:
        slots.add(MealSlot.dinner)
    return slots


def servable_meal_slots(places: Iterable[Place]) -> set[MealSlot]:
    """Union of meal slots served by any of *places*."""
    slots: set[MealSlot] = set()
    for place in places:
        slots |= meal_slots_for_place(place)
    return slots


def format_meal_slots(slots: Iterable[MealSlot]) -> str:
    """Comma-joined slot names sorted by name, e.g. "breakfast, dinner"."""
    return ", ".join(sorted(s.value for s in slots))


def time_of_day_bucket(at: datetime, zone: ZoneInfo = PLANNING_ZONE) -> str:
    """morning 06-10 | lunch 11-14 | afternoon 15-17 | evening 18-22 | night otherwise."""
    hour = at.astimezone(zone).hour
    if 6 <= hour < 11:
        return "morning"
    if 11 <= hour < 15:
        return "lunch"
    if 15 <= hour < 18:
        return "afternoon"
    if 18 <= hour < 23:
        return "evening"
    return "night"

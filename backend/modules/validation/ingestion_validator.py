"""
modules/validation/ingestion_validator.py
------------------------------------------
Data-quality guards applied to curated place content before it reaches the
planner (content bootstrap or the plan endpoint).

  Place:
    ✓ Non-empty id and name
    ✓ lat / lng both present or both absent
    ✓ Latitude in [-90, 90], longitude in [-180, 180]
    ✓ Coordinates are not both exactly 0.0 (likely missing)
    ✓ Visit bounds non-negative, min ≤ max
    ✓ Cost bounds non-negative, min ≤ max
    ✓ Tourist-trap level in {low, mixed, high} if present
    ✓ Best-time windows in {morning, lunch, afternoon, evening, night}

Usage:
    from modules.validation import validate_place, filter_valid

    result = validate_place(place.__dict__)
    if not result.valid:
        logger.warning(result.errors)

    clean_places = filter_valid(places, validate_place)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

TOURIST_TRAP_LEVELS = frozenset({"low", "mixed", "high"})
TIME_WINDOWS = frozenset({"morning", "lunch", "afternoon", "evening", "night"})


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The input record dict (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: dict = field(default_factory=dict, repr=False)

    def __bool__(self) -> bool:
        return self.valid


def _check_bounds(errors: list[str], label: str, low: Any, high: Any) -> None:
    values = {}
    for suffix, value in (("min", low), ("max", high)):
        if value is None:
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            errors.append(f"{label}_{suffix}={value!r} must be numeric")
            continue
        if number < 0:
            errors.append(f"{label}_{suffix}={value} must be >= 0")
        values[suffix] = number

    if "min" in values and "max" in values and values["min"] > values["max"]:
        errors.append(f"{label}_min={low} is greater than {label}_max={high}")


# ── Place validation ───────────────────────────────────────────────────────────

def validate_place(record: dict[str, Any]) -> ValidationResult:
    """
    Validate a place record (snake_case keys, as on `Place`) before planning.
    """
    errors: list[str] = []

    # ── Identity ───────────────────────────────────────────────────────────
    for key in ("id", "name"):
        value = record.get(key)
        if value is None or not str(value).strip():
            errors.append(f"{key} must not be empty or NULL")

    # ── Coordinates ────────────────────────────────────────────────────────
    lat = record.get("lat")
    lng = record.get("lng")

    if (lat is None) != (lng is None):
        errors.append(
            f"lat/lng must be both present or both absent "
            f"(got lat={lat!r}, lng={lng!r})"
        )
    elif lat is not None:
        try:
            lat = float(lat)
            lng = float(lng)
        except (TypeError, ValueError):
            errors.append(f"lat/lng must be numeric (got lat={lat!r}, lng={lng!r})")
            return ValidationResult(valid=False, errors=errors, record=record)

        if not (-90.0 <= lat <= 90.0):
            errors.append(f"lat={lat} is outside valid range [-90, 90]")

        if not (-180.0 <= lng <= 180.0):
            errors.append(f"lng={lng} is outside valid range [-180, 180]")

        if lat == 0.0 and lng == 0.0:
            errors.append("lat=0.0 and lng=0.0: likely a missing/default value")

    # ── Visit and cost bounds ──────────────────────────────────────────────
    _check_bounds(errors, "visit", record.get("visit_min_minutes"), record.get("visit_max_minutes"))
    _check_bounds(errors, "cost", record.get("cost_min"), record.get("cost_max"))

    # ── Curated labels ─────────────────────────────────────────────────────
    trap = record.get("tourist_trap_level")
    if trap is not None and str(trap).lower() not in TOURIST_TRAP_LEVELS:
        errors.append(f"tourist_trap_level={trap!r} must be one of low | mixed | high")

    for window in record.get("best_time_windows") or ():
        if str(window).lower() not in TIME_WINDOWS:
            errors.append(f"best_time_windows entry {window!r} is not a known time window")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Batch filter helper ────────────────────────────────────────────────────────

def filter_valid(
    items: list[T],
    validator: Callable[[dict], ValidationResult] = validate_place,
    to_dict: Callable[[T], dict] | None = None,
    log: bool = True,
) -> list[T]:
    """
    Apply a validator to every item in a list, return only the valid ones.

    Args:
        items:     List of items (dataclass instances or dicts).
        validator: Defaults to validate_place.
        to_dict:   Optional callable to convert each item to a dict.
                   If None, items are assumed to already be dicts or have __dict__.
        log:       If True, log a warning for every rejected record.
    """
    valid_items: list[T] = []
    rejected = 0

    for item in items:
        record_dict = (
            to_dict(item)
            if to_dict is not None
            else (item if isinstance(item, dict) else item.__dict__)
        )
        result = validator(record_dict)
        if result.valid:
            valid_items.append(item)
        else:
            rejected += 1
            if log:
                logger.warning(
                    "REJECTED %r: %s", record_dict.get("id", "?"), "; ".join(result.errors)
                )

    if log and rejected:
        logger.warning("%d/%d records rejected; %d passed.", rejected, len(items), len(valid_items))

    return valid_items

"""
End-to-end behaviour of DayPlanner.generate.
"""
from datetime import datetime, timezone

import pytest

from modules.observability.logger import StructuredLogger
from modules.planning.day_planner import (
    WARN_CLOSED,
    WARN_NO_MATCH,
    WARN_NO_PLAN,
    WARN_NO_TIME,
    DayPlanner,
    generate,
    meal_requirement,
    plan_fingerprint,
)
from modules.planning.meal_slots import MealSlot
from schemas.plan import BudgetTier, Interest, Pace, PlanInput, PriceRange

from conftest import GUELIZ, MEDINA


@pytest.fixture
def planner(geo, hours):
    return DayPlanner(geo, hours, event_log=StructuredLogger(enabled=False))


@pytest.fixture
def meal_places(make_place):
    return (
        make_place("breakfast-cafe", category="cafe", tags=["breakfast"], best_time_windows=["morning"],
                   visit_min_minutes=30, visit_max_minutes=30),
        make_place("lunch-house", category="restaurant", tags=["lunch"],
                   visit_min_minutes=30, visit_max_minutes=30),
        make_place("dinner-house", category="restaurant", tags=["dinner"],
                   visit_min_minutes=30, visit_max_minutes=30),
    )


@pytest.fixture
def mixed_places(make_place):
    """A small city sample with coordinates, hours and prices."""
    return (
        make_place("bahia-palace", category="historic_site", lat=31.6216, lng=-7.9831,
                   hours_weekly=["daily 09:00-17:00"], visit_min_minutes=45, visit_max_minutes=90,
                   tourist_trap_level="mixed", best_time_windows=["morning"]),
        make_place("jardin-majorelle", category="garden", lat=GUELIZ.lat, lng=GUELIZ.lng,
                   hours_weekly=["daily 08:00-18:00"], tags=["garden", "design"]),
        make_place("jemaa-el-fna", category="landmark", lat=MEDINA.lat, lng=MEDINA.lng,
                   hours_weekly=["open all day"], tourist_trap_level="high",
                   best_time_windows=["evening", "night"]),
        make_place("cafe-clock", category="cafe", lat=31.6180, lng=-7.9880,
                   tags=["lunch", "local"], hours_weekly=["daily 09:00-22:00"]),
        make_place("al-fassia", category="restaurant", lat=31.6380, lng=-8.0080,
                   tags=["dinner", "fine-dining"], hours_weekly=["Tue-Sun 12:00-23:00"]),
        make_place("souk-semmarine", category="market", lat=31.6300, lng=-7.9870,
                   tags=["souk", "artisan"], visit_min_minutes=60, visit_max_minutes=120),
        make_place("ben-youssef", category="museum", lat=31.6318, lng=-7.9861,
                   hours_weekly=["daily 09:00-18:00"], tags=["madrasa", "mosaic"]),
        make_place("unmapped-riad", category="historic_site", tags=["riads"]),
    )


def _input(places, now, minutes, **kwargs):
    return PlanInput(available_minutes=minutes, current_time=now, places=tuple(places), **kwargs)


# ── Degenerate inputs ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("minutes", [0, -15])
def test_no_time(planner, meal_places, local, minutes):
    output = planner.generate(_input(meal_places, local(9), minutes))
    assert output.stops == ()
    assert output.total_minutes == 0
    assert output.estimated_cost_range == PriceRange(0, 0)
    assert output.warnings == (WARN_NO_TIME,)


def test_no_match(planner, meal_places, local):
    output = planner.generate(_input(meal_places, local(9), 240, interests=(Interest.nature,)))
    assert output.stops == ()
    assert output.warnings == (WARN_NO_MATCH,)


def test_everything_recent_is_no_match(planner, meal_places, local):
    recent = frozenset(p.id for p in meal_places)
    output = planner.generate(_input(meal_places, local(9), 240, recent_place_ids=recent))
    assert output.warnings == (WARN_NO_MATCH,)


def test_too_short_for_any_visit(planner, make_place, local):
    output = planner.generate(_input([make_place("museum", category="museum")], local(16), 20))
    assert output.stops == ()
    assert output.warnings == (WARN_NO_PLAN,)


def test_only_closed_places(planner, make_place, local):
    places = [make_place("night-market", category="market", hours_weekly=["daily 19:00-23:00"])]
    output = planner.generate(_input(places, local(15), 120))
    assert output.stops == ()
    assert output.warnings == (WARN_CLOSED, WARN_NO_PLAN)


# ── Meal coverage ──────────────────────────────────────────────────────────────

def test_food_day_covers_every_meal(planner, meal_places, local):
    output = planner.generate(_input(meal_places, local(8), 600, interests=(Interest.food,)))

    assert output.place_ids == ["breakfast-cafe", "dinner-house", "lunch-house"]
    assert output.total_minutes == 90
    assert output.warnings == ()
    assert output.estimated_cost_range == PriceRange(180, 420)


def test_missing_meal_is_reported(planner, meal_places, make_place, local):
    closed_dinner = make_place("dinner-house", category="restaurant", tags=["dinner"],
                               hours_weekly=["daily 19:00-23:00"])
    places = (meal_places[0], meal_places[1], closed_dinner)
    output = planner.generate(_input(places, local(8), 600, interests=(Interest.food,)))

    assert output.place_ids == ["breakfast-cafe", "lunch-house"]
    assert output.warnings == (WARN_CLOSED, "Could not schedule meal stop(s): dinner.")


def test_missing_meals_without_restaurants(planner, make_place, local):
    output = planner.generate(_input([make_place("koutoubia")], local(8), 300))
    assert output.place_ids == ["koutoubia"]
    assert output.warnings == ("Could not schedule meal stop(s): breakfast, lunch.",)


@pytest.mark.parametrize("minutes, interests, expected", [
    (359, (Interest.food,), {MealSlot.breakfast, MealSlot.lunch}),
    (360, (Interest.food,), {MealSlot.breakfast, MealSlot.lunch, MealSlot.dinner}),
    (600, (), {MealSlot.breakfast, MealSlot.lunch}),
])
def test_food_day_threshold(meal_places, local, minutes, interests, expected):
    assert meal_requirement(local(8), minutes, interests, meal_places) == expected


def test_short_food_day_does_not_chase_dinner(planner, meal_places, make_place, local):
    closed_dinner = make_place("dinner-house", category="restaurant", tags=["dinner"],
                               hours_weekly=["daily 19:00-23:00"])
    places = (meal_places[0], meal_places[1], closed_dinner)

    short = planner.generate(_input(places, local(8), 359, interests=(Interest.food,)))
    assert not any("dinner" in w for w in short.warnings)

    full = planner.generate(_input(places, local(8), 360, interests=(Interest.food,)))
    assert full.warnings[-1] == "Could not schedule meal stop(s): dinner."


def test_dinner_not_required_without_food_interest(planner, meal_places, make_place, local):
    closed_dinner = make_place("dinner-house", category="restaurant", tags=["dinner"],
                               hours_weekly=["daily 19:00-23:00"])
    places = (meal_places[0], meal_places[1], closed_dinner)
    output = planner.generate(_input(places, local(8), 600))
    assert not any("dinner" in w for w in output.warnings)


# ── Ordering ───────────────────────────────────────────────────────────────────

def test_tie_break_on_identifier(planner, make_place, local):
    twins = [make_place("b-spot"), make_place("a-spot")]
    output = planner.generate(_input(twins, local(16), 60))
    assert output.place_ids == ["a-spot"]
    assert output.warnings == ()


def test_nearest_neighbour_order_saves_walking(planner, make_place, local):
    places = [
        make_place("dar-si-said", category="museum", lat=MEDINA.lat + 0.009, lng=MEDINA.lng),
        make_place("derb-quarter", category="neighborhood", lat=MEDINA.lat, lng=MEDINA.lng),
    ]
    output = planner.generate(_input(
        places, local(15), 230, start_point=MEDINA,
        interests=(Interest.history, Interest.architecture),
    ))

    assert output.place_ids == ["derb-quarter", "dar-si-said"]
    assert output.total_minutes == 141
    assert output.warnings == ()
    assert output.estimated_cost_range == PriceRange(70, 150)


# ── Cost ───────────────────────────────────────────────────────────────────────

def test_cost_scales_with_budget_tier(planner, make_place, local):
    places = [make_place("city-museum", category="museum"), make_place("grill-house", category="restaurant")]
    mid = planner.generate(_input(places, local(16), 180, budget_tier=BudgetTier.mid))
    splurge = planner.generate(_input(places, local(16), 180, budget_tier=BudgetTier.splurge))

    assert mid.place_ids == splurge.place_ids == ["city-museum", "grill-house"]
    assert mid.estimated_cost_range == PriceRange(150, 300)
    assert splurge.estimated_cost_range == PriceRange(188, 375)


# ── Properties ─────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("pace", list(Pace))
@pytest.mark.parametrize("minutes", [45, 120, 300, 600])
@pytest.mark.parametrize("hour", [8, 13, 19])
def test_plan_invariants(planner, mixed_places, local, pace, minutes, hour):
    plan_input = _input(mixed_places, local(hour), minutes, start_point=MEDINA, pace=pace,
                        interests=(Interest.history, Interest.food))
    output = planner.generate(plan_input)

    assert output.total_minutes <= minutes
    assert len(output.place_ids) == len(set(output.place_ids))
    for stop in output.stops:
        assert (stop.departure_time - stop.arrival_time).total_seconds() == stop.visit_minutes * 60
    for prev, nxt in zip(output.stops, output.stops[1:]):
        assert prev.departure_time <= nxt.arrival_time
    by_id = {p.id: p for p in mixed_places}
    for stop in output.stops:
        assert not planner.hours_tool.is_open(by_id[stop.place_id], stop.arrival_time).is_closed
    assert 0 <= output.estimated_cost_range.min <= output.estimated_cost_range.max
    again = planner.generate(plan_input)
    assert again == output
    assert plan_fingerprint(again) == plan_fingerprint(output)


def test_naive_time_is_utc(planner, make_place):
    output = planner.generate(_input([make_place("koutoubia")], datetime(2026, 1, 15, 15, 0), 60))
    assert output.stops[0].arrival_time == datetime(2026, 1, 15, 15, 0, tzinfo=timezone.utc)


def test_module_level_generate(make_place, local):
    output = generate(_input([make_place("koutoubia")], local(16), 60))
    assert output.place_ids == ["koutoubia"]


# ── Event log ──────────────────────────────────────────────────────────────────

def test_generate_writes_plan_events(geo, hours, make_place, local, tmp_path):
    event_log = StructuredLogger(tmp_path, enabled=True)
    planner = DayPlanner(geo, hours, event_log=event_log, session_id="plan_test")
    output = planner.generate(_input([make_place("koutoubia")], local(16), 60))
    event_log.close()

    records = event_log.read_events("plan_test")
    assert [r["event_type"] for r in records] == ["PLAN_GENERATED", "PERFORMANCE"]
    assert records[0]["payload"]["stops"] == 1
    assert records[0]["payload"]["plan_hash"] == plan_fingerprint(output)
    assert records[1]["payload"]["component"] == "DayPlanner.generate"


def test_event_log_failure_still_returns_plan(geo, hours, make_place, local, tmp_path, caplog):
    not_a_dir = tmp_path / "not-a-dir"
    not_a_dir.write_text("")
    planner = DayPlanner(geo, hours, event_log=StructuredLogger(not_a_dir, enabled=True))

    with caplog.at_level("WARNING", logger="modules.planning.day_planner"):
        output = planner.generate(_input([make_place("koutoubia")], local(16), 60))

    assert output.place_ids == ["koutoubia"]
    assert "Plan event log write failed" in caplog.text

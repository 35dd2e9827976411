"""
modules/tool_usage/hours_tool.py
---------------------------------
Deterministic opening-hours evaluator.

Weekly lines are free text as curated in the content pack, e.g.
  "Mon-Sat 09:00-18:00"       "daily 07:00-22:00"
  "Fri closed"                "open all day"
  "Sun & Tue 10:00-23:30"     "Thu to Sat 19:00-02:00"   (overnight)

Rules are evaluated in the planning zone (config.PLANNING_TIMEZONE) with this
precedence:
  1. Date-specific exception  ("date": "2026-01-14")
  2. Period exception         ("period": "ramadan")
  3. Weekly schedule

No rules at all -> UNKNOWN.  The planner only treats CLOSED as infeasible.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

import config
from schemas.plan import Place


# Weekday numbering used by the parser: Sunday=1 .. Saturday=7
_ALL_WEEKDAYS: tuple[int, ...] = (1, 2, 3, 4, 5, 6, 7)

_WEEKDAY_PREFIXES: tuple[tuple[str, int], ...] = (
    ("sun", 1), ("mon", 2), ("tue", 3), ("wed", 4),
    ("thu", 5), ("fri", 6), ("sat", 7),
)

_TIME_RANGE_RE = re.compile(r"([0-2]?\d:[0-5]\d)\s*-\s*([0-2]?\d:[0-5]\d)")

# Inclusive local-date ranges treated as the "ramadan" period.
RAMADAN_PERIODS: tuple[tuple[date, date], ...] = (
    (date(2026, 3, 1), date(2026, 3, 30)),
)

_STALE_AFTER_MONTHS = 6


class OpenState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class OpenStatus:
    """
    OPEN    -> change_at is the closing instant.
    CLOSED  -> change_at is the next opening instant, or None if none within a week.
    UNKNOWN -> change_at is None.
    """
    state: OpenState
    change_at: Optional[datetime] = None

    @property
    def is_closed(self) -> bool:
        return self.state is OpenState.CLOSED


UNKNOWN = OpenStatus(OpenState.UNKNOWN)


@dataclass(frozen=True)
class ExceptionRule:
    date: Optional[str] = None      # YYYY-MM-DD
    period: Optional[str] = None    # "ramadan"
    open: Optional[str] = None      # HH:MM
    close: Optional[str] = None     # HH:MM
    closed: bool = False


@dataclass(frozen=True)
class HoursChange:
    at: datetime
    opens: bool  # True = opens at `at`, False = closes at `at`


@dataclass(frozen=True)
class _DailyRule:
    weekday: int
    open_minutes: Optional[int]
    close_minutes: Optional[int]
    closed: bool

    @property
    def is_overnight(self) -> bool:
        return (
            self.open_minutes is not None
            and self.close_minutes is not None
            and self.close_minutes <= self.open_minutes
        )


# ── Parsing ──────────────────────────────────────────────────────────────────

def _normalize(value: str) -> str:
    return (
        value.lower()
        .replace("\u2013", "-")
        .replace("\u2014", "-")
        .replace("\u00a0", " ")
        .strip()
    )


def _parse_time(value: Optional[str]) -> Optional[int]:
    """ "HH:MM" -> minutes from midnight; None when malformed."""
    if not value or not value.strip():
        return None
    parts = value.strip().split(":")
    if len(parts) != 2:
        return None
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour * 60 + minute


def _weekday_from_token(raw: str) -> Optional[int]:
    token = _normalize(raw).split(" ", 1)[0].strip()
    for prefix, weekday in _WEEKDAY_PREFIXES:
        if token.startswith(prefix):
            return weekday
    return None


def _weekday_range(start: int, end: int) -> list[int]:
    if start <= end:
        return list(range(start, end + 1))
    return list(range(start, 8)) + list(range(1, end + 1))


def _parse_weekdays(raw: str) -> list[int]:
    text = _normalize(raw)
    if any(k in text for k in ("daily", "every day", "everyday", "all week")):
        return list(_ALL_WEEKDAYS)

    cleaned = (
        text.replace("to", "-")
        .replace("&", ",")
        .replace("/", ",")
        .replace(":", " ")
    )

    days: set[int] = set()
    for part in (p.strip() for p in cleaned.split(",")):
        if not part:
            continue
        if "-" in part:
            first, _, second = part.partition("-")
            start = _weekday_from_token(first.strip())
            end = _weekday_from_token(second.strip())
            if start is not None and end is not None:
                days.update(_weekday_range(start, end))
                continue
        single = _weekday_from_token(part)
        if single is not None:
            days.add(single)
    return sorted(days)


def _parse_weekly_line(raw_line: str) -> list[_DailyRule]:
    line = raw_line.strip()
    if not line:
        return []
    normalized = _normalize(line)

    if "open all day" in normalized:
        return [_DailyRule(d, 0, 23 * 60 + 59, False) for d in _ALL_WEEKDAYS]

    if "closed" in normalized:
        before_closed = normalized.split("closed", 1)[0]
        weekdays = _parse_weekdays(before_closed)
        if not weekdays and "daily" in normalized:
            weekdays = list(_ALL_WEEKDAYS)
        return [_DailyRule(d, None, None, True) for d in weekdays]

    match = _TIME_RANGE_RE.search(normalized)
    if match is None:
        return []
    open_m = _parse_time(match.group(1))
    close_m = _parse_time(match.group(2))
    if open_m is None or close_m is None:
        return []

    weekdays = _parse_weekdays(normalized[:match.start()])
    if not weekdays and "daily" in normalized:
        weekdays = list(_ALL_WEEKDAYS)
    return [_DailyRule(d, open_m, close_m, False) for d in weekdays]


def _parse_weekly_rules(weekly: Sequence[str], hours_text: Optional[str]) -> dict[int, _DailyRule]:
    """First rule per weekday wins."""
    parsed = [rule for line in weekly for rule in _parse_weekly_line(line)]
    if not parsed and hours_text and hours_text.strip():
        parsed = _parse_weekly_line(hours_text)

    rules: dict[int, _DailyRule] = {}
    for rule in parsed:
        rules.setdefault(rule.weekday, rule)
    return rules


# ── HoursTool ────────────────────────────────────────────────────────────────

class HoursTool:
    """
    Evaluates a place's opening hours at an instant.
    Stateless after construction; safe to share across threads.
    """

    def __init__(self, zone: ZoneInfo | None = None) -> None:
        self.zone = zone or ZoneInfo(config.PLANNING_TIMEZONE)

    # ── Public API (Place) ────────────────────────────────────────────────────

    def is_open(
        self,
        place: Place,
        at: datetime,
        exceptions: Sequence[ExceptionRule] = (),
    ) -> OpenStatus:
        return self.evaluate(place.hours_weekly, place.hours_text, at, exceptions)[0]

    def next_change(
        self,
        place: Place,
        after: datetime,
        exceptions: Sequence[ExceptionRule] = (),
    ) -> Optional[HoursChange]:
        return self.evaluate(place.hours_weekly, place.hours_text, after, exceptions)[1]

    def format_hours_for_display(
        self,
        place: Place,
        at: datetime,
        exceptions: Sequence[ExceptionRule] = (),
    ) -> str:
        status = self.is_open(place, at, exceptions)

        if status.state is OpenState.OPEN:
            text = f"Open now · Closes {self._fmt_time(status.change_at)}"
        elif status.state is OpenState.CLOSED:
            opens_at = status.change_at
            if opens_at is None:
                text = "Closed · Opening time unavailable"
            else:
                days_ahead = (self._local(opens_at).date() - self._local(at).date()).days
                if days_ahead == 0:
                    text = f"Closed · Opens today {self._fmt_time(opens_at)}"
                elif days_ahead == 1:
                    text = f"Closed · Opens tomorrow {self._fmt_time(opens_at)}"
                else:
                    text = f"Closed · Opens {self._local(opens_at).strftime('%a %H:%M')}"
        else:
            text = (place.hours_text or "").strip() or "Check hours locally"

        if self.is_hours_stale(place.hours_verified_at, at):
            text += " · Hours may be outdated"
        return text

    def is_hours_stale(self, verified_at: Optional[str], at: datetime) -> bool:
        """True when the verification date is more than six months before *at*."""
        if not verified_at or not verified_at.strip():
            return False
        try:
            verified = date.fromisoformat(verified_at.strip())
        except ValueError:
            return False
        today = self._local(at).date()
        year, month = today.year, today.month - _STALE_AFTER_MONTHS
        if month <= 0:
            year, month = year - 1, month + 12
        day = min(today.day, calendar.monthrange(year, month)[1])
        cutoff = date(year, month, day)
        return verified < cutoff

    # ── Evaluation ────────────────────────────────────────────────────────────

    def evaluate(
        self,
        weekly: Sequence[str],
        hours_text: Optional[str],
        at: datetime,
        exceptions: Sequence[ExceptionRule] = (),
    ) -> tuple[OpenStatus, Optional[HoursChange]]:
        rules = _parse_weekly_rules(weekly, hours_text)
        if not rules and not exceptions:
            return UNKNOWN, None

        now_local = self._local(at)
        today = now_local.date()
        current = now_local.hour * 60 + now_local.minute

        yesterday = today - timedelta(days=1)
        y_rule = self._resolve_rule(yesterday, rules, exceptions)
        if y_rule is not None and y_rule.is_overnight and current < y_rule.close_minutes:
            closes_at = self._to_instant(today, y_rule.close_minutes)
            return OpenStatus(OpenState.OPEN, closes_at), HoursChange(closes_at, opens=False)

        t_rule = self._resolve_rule(today, rules, exceptions)
        if t_rule is not None and not t_rule.closed and self._open_today(t_rule, current):
            close_date = today + timedelta(days=1) if t_rule.is_overnight else today
            closes_at = self._to_instant(close_date, t_rule.close_minutes)
            return OpenStatus(OpenState.OPEN, closes_at), HoursChange(closes_at, opens=False)

        opens_at = self._next_open(today, current, rules, exceptions)
        if opens_at is not None:
            return OpenStatus(OpenState.CLOSED, opens_at), HoursChange(opens_at, opens=True)
        return OpenStatus(OpenState.CLOSED), None

    @staticmethod
    def _open_today(rule: _DailyRule, current: int) -> bool:
        if rule.open_minutes is None or rule.close_minutes is None:
            return False
        if not rule.is_overnight:
            return rule.open_minutes <= current < rule.close_minutes
        # post-midnight part belongs to the previous day's rule
        return current >= rule.open_minutes

    def _next_open(
        self,
        today: date,
        current: int,
        rules: dict[int, _DailyRule],
        exceptions: Sequence[ExceptionRule],
    ) -> Optional[datetime]:
        for offset in range(0, 8):
            day = today + timedelta(days=offset)
            rule = self._resolve_rule(day, rules, exceptions)
            if rule is None or rule.closed or rule.open_minutes is None:
                continue
            if offset == 0 and current >= rule.open_minutes:
                continue
            return self._to_instant(day, rule.open_minutes)
        return None

    def _resolve_rule(
        self,
        day: date,
        rules: dict[int, _DailyRule],
        exceptions: Sequence[ExceptionRule],
    ) -> Optional[_DailyRule]:
        weekday = _calendar_weekday(day)
        exc = _resolve_exception(day, exceptions)
        if exc is not None:
            return _DailyRule(weekday, _parse_time(exc.open), _parse_time(exc.close), exc.closed)
        return rules.get(weekday)

    # ── Date helpers ──────────────────────────────────────────────────────────

    def _local(self, at: datetime) -> datetime:
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        return at.astimezone(self.zone)

    def _to_instant(self, day: date, minutes: int) -> datetime:
        return datetime.combine(day, time(minutes // 60, minutes % 60), tzinfo=self.zone)

    def _fmt_time(self, at: datetime) -> str:
        return self._local(at).strftime("%H:%M")


def _calendar_weekday(day: date) -> int:
    """ISO Monday=1..Sunday=7  ->  Sunday=1..Saturday=7."""
    iso = day.isoweekday()
    return 1 if iso == 7 else iso + 1


def _is_ramadan(day: date) -> bool:
    return any(start <= day <= end for start, end in RAMADAN_PERIODS)


def _resolve_exception(day: date, exceptions: Sequence[ExceptionRule]) -> Optional[ExceptionRule]:
    if not exceptions:
        return None
    key = day.isoformat()
    for exc in exceptions:
        if exc.date == key:
            return exc
    if _is_ramadan(day):
        for exc in exceptions:
            if (exc.period or "").lower() == "ramadan":
                return exc
    return None

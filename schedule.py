from __future__ import annotations
from datetime import date, datetime, time, timedelta
from typing import Dict, List
from dateutil.relativedelta import relativedelta
from models import DEFAULT_DUE_TIME


DAY_NAMES: List[str] = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
FREQUENCIES: List[str] = ["weekly", "biweekly", "monthly"]
PERIOD_DAYS: Dict[str, int] = {"weekly": 7, "biweekly": 14}


def parse_date(value: str | date) -> date:
    """
    Build a calendar date from a YYYY-MM-DD string.
    Components are read directly so the result never shifts across a day
    boundary the way a UTC timestamp parse can.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parts = value.strip().split("-")
    if len(parts) != 3:
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    year, month, day = (int(p) for p in parts)
    return date(year, month, day)


def parse_time(value: str | None) -> time:
    parts = (value or DEFAULT_DUE_TIME).strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    hour, minute = (int(p) for p in parts)
    return time(hour=hour, minute=minute)


def format_date(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def is_same_calendar_day(d1: date, d2: date) -> bool:
    # datetime is a subclass of date, so both kinds compare by calendar fields only
    return (d1.year, d1.month, d1.day) == (d2.year, d2.month, d2.day)


def due_datetime(due_date: date, due_time: str | None = None) -> datetime:
    return datetime.combine(due_date, parse_time(due_time))


def sunday_index(d: date) -> int:
    # Python counts Mon=0; schedules count Sun=0
    return (d.weekday() + 1) % 7


def advance_to_next_occurrence(
    original_due_date: date,
    frequency: str,
    now: datetime | None = None,
) -> date:
    """
    Return the first date of the schedule anchored on ``original_due_date``
    that falls strictly after ``now``'s calendar day.

    The base date itself counts when it is already in the future. Weekly and
    biweekly periods are jumped in closed form. Monthly periods step one
    calendar month at a time with relativedelta, so day 31 clamps to the
    last day of a shorter month and keeps that day afterwards.
    """
    today = (now or datetime.now()).date()
    base = parse_date(original_due_date)
    if base > today:
        return base

    if frequency in PERIOD_DAYS:
        period = PERIOD_DAYS[frequency]
        steps = (today - base).days // period + 1
        return base + timedelta(days=period * steps)

    if frequency == "monthly":
        # A day clamped to a short month stays clamped in later steps
        candidate = base
        while candidate <= today:
            candidate = candidate + relativedelta(months=1)
        return candidate

    raise ValueError(f"Unknown frequency: {frequency!r}")

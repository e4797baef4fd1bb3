from __future__ import annotations

from datetime import date, timedelta


def week_start(day: date) -> date:
    """Return the Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def current_week(today: date | None = None) -> str:
    return week_start(today or date.today()).isoformat()


def next_week(today: date | None = None) -> str:
    return (week_start(today or date.today()) + timedelta(weeks=1)).isoformat()


def normalize_week_of(value: str) -> str:
    """Parse an ISO date and snap it to the Monday starting its week."""
    try:
        day = date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid week identifier: {value!r}") from None
    return week_start(day).isoformat()

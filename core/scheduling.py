"""Date helpers for events and goals."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Tuple
from zoneinfo import ZoneInfo

from core.constants import UPCOMING_DAYS_DEFAULT


def today_in(tz_name: str = "UTC") -> date:
    return datetime.now(ZoneInfo(tz_name)).date()


def upcoming_window(today: date, days: int = UPCOMING_DAYS_DEFAULT) -> Tuple[date, date]:
    return today, today + timedelta(days=days)


def current_month(today: date) -> str:
    return today.strftime("%Y-%m")


def weekly_dates(start: date, weeks: int) -> List[date]:
    """``weeks`` dates exactly seven days apart, starting at ``start``."""
    weeks = max(1, int(weeks or 1))
    return [start + timedelta(days=7 * i) for i in range(weeks)]


def build_event_batch(
    fields: Mapping[str, Any],
    start: date,
    recurring: bool = False,
    weeks: int = 1,
) -> List[Dict[str, Any]]:
    """Rows for one submission of the new-event form.

    A recurring submission produces one row per week, identical except for
    the date.
    """
    dates = weekly_dates(start, weeks) if recurring else [start]
    rows = []
    for day in dates:
        row = dict(fields)
        row["date"] = day.isoformat()
        rows.append(row)
    return rows

"""Derived views for the dashboard, inventory and goals pages.

Everything here is a pure function of the rows a page already loaded:
empty input gives empty output and nothing raises.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from core.constants import UPCOMING_DAYS_DEFAULT
from core.models import Event, Goal, InventoryItem

MONTH_NAMES = [
    "", "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DateLike = Union[date, str]


def is_low(item: InventoryItem) -> bool:
    """Low stock: a positive reorder threshold that quantity has reached."""
    return item.reorder_threshold > 0 and item.quantity <= item.reorder_threshold


def low_stock_items(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    return [item for item in items if is_low(item)]


def sort_inventory(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    """Category, then name (case-insensitive)."""
    return sorted(items, key=lambda i: (i.category.casefold(), i.name.casefold()))


@dataclass
class EventCounts:
    total: int = 0
    market: int = 0
    popup: int = 0
    catering: int = 0
    booked: int = 0
    by_type: Dict[str, int] = field(default_factory=OrderedDict)


def _iso(value: DateLike) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)[:10]


def event_counts(
    events: Iterable[Event],
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
    today: Optional[date] = None,
) -> EventCounts:
    """Tally events whose date falls in ``start..end`` inclusive.

    The window defaults to today through today + 30 days.
    """
    today = today or date.today()
    start_iso = _iso(start if start is not None else today)
    end_iso = _iso(end if end is not None else today + timedelta(days=UPCOMING_DAYS_DEFAULT))

    counts = EventCounts()
    for event in events:
        if not (start_iso <= event.date[:10] <= end_iso):
            continue
        counts.total += 1
        kind = event.type or "other"
        counts.by_type[kind] = counts.by_type.get(kind, 0) + 1
        if kind == "market":
            counts.market += 1
        elif kind == "popup":
            counts.popup += 1
        elif kind == "catering":
            counts.catering += 1
        if event.status == "booked":
            counts.booked += 1
    return counts


def group_active_goals_by_month(goals: Iterable[Goal]) -> List[Tuple[str, List[Goal]]]:
    """Open goals bucketed by month; earliest month first.

    "YYYY-MM" strings sort chronologically, so a plain string sort is enough.
    """
    buckets: Dict[str, List[Goal]] = {}
    for goal in goals:
        if goal.is_done:
            continue
        buckets.setdefault(goal.month, []).append(goal)
    return sorted(buckets.items(), key=lambda entry: entry[0])


def completed_goals(goals: Iterable[Goal]) -> List[Goal]:
    return [g for g in goals if g.is_done]


def open_goals(goals: Iterable[Goal]) -> List[Goal]:
    return [g for g in goals if not g.is_done]


def format_month_label(month: str) -> str:
    """'2025-03' -> 'March 25'. Anything unparseable is returned unchanged."""
    parts = (month or "").split("-")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return month
    try:
        number = int(parts[1])
    except ValueError:
        return month
    if not 1 <= number <= 12:
        return month
    return f"{MONTH_NAMES[number]} {parts[0][2:]}"

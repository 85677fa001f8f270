from decimal import Decimal

import pandas as pd

from core.models import CashSession, Event, Goal, InventoryItem, from_frame, to_frame


def test_inventory_from_row_fills_defaults():
    item = InventoryItem.from_row({"id": 3, "name": "Lids", "quantity": float("nan"), "notes": "  "})
    assert item.category == "other"
    assert item.quantity == 0
    assert item.notes is None


def test_event_date_is_trimmed_to_day():
    event = Event.from_row({"id": 1, "title": "Expo", "date": "2025-04-05T00:00:00", "type": "popup"})
    assert event.date == "2025-04-05"
    assert event.status is None


def test_goal_bool_from_store_values():
    assert Goal.from_row({"id": 1, "title": "t", "month": "2025-01", "is_done": 1}).is_done
    assert Goal.from_row({"id": 1, "title": "t", "month": "2025-01", "is_done": "true"}).is_done
    assert not Goal.from_row({"id": 1, "title": "t", "month": "2025-01", "is_done": None}).is_done


def test_cash_session_money_from_floats():
    session = CashSession.from_row(
        {"id": 1, "date": "2025-01-01", "opening_total": 145.0, "closing_total": 200.1,
         "stall_fee": 30, "payouts": None}
    )
    assert session.closing_total == Decimal("200.10")
    assert session.payouts == Decimal("0.00")
    assert session.net_cash == Decimal("25.10")


def test_frame_conversion_keeps_order():
    df = pd.DataFrame([{"id": 2, "title": "b", "month": "2025-02"}, {"id": 1, "title": "a", "month": "2025-01"}])
    goals = from_frame(df, Goal)
    assert [g.id for g in goals] == [2, 1]
    assert from_frame(pd.DataFrame(), Goal) == []

    back = to_frame(goals)
    assert list(back.columns) == ["id", "title", "month", "is_done", "notes"]
    assert back["title"].tolist() == ["b", "a"]


def test_to_frame_empty_with_columns():
    assert list(to_frame([], ["id", "title"]).columns) == ["id", "title"]

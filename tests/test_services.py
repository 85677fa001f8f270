from decimal import Decimal

import pytest

from core.cash import reconcile
from core.services import (
    StoreError,
    add_cash_session,
    add_goal,
    add_inventory_item,
    adjust_quantity,
    create_events,
    delete_event,
    delete_goal,
    delete_inventory_item,
    delete_rows,
    get_cash_sessions,
    get_event,
    get_event_locations,
    get_events,
    get_goals,
    get_inventory_items,
    init_db,
    insert_rows,
    is_postgres,
    select_rows,
    set_goal_done,
    update_event,
    update_goal,
    update_inventory_item,
    update_rows,
)


def _event_row(title, day, **extra):
    row = {"title": title, "date": day, "type": "market", "status": "inquiry"}
    row.update(extra)
    return row


def test_sqlite_connection_is_not_postgres(conn):
    assert not is_postgres(conn)


def test_init_db_is_idempotent(conn):
    init_db(conn)
    assert select_rows(conn, "goals").empty


def test_select_keeps_projection_when_empty(conn):
    df = select_rows(conn, "inventory_items", ["name", "quantity"])
    assert list(df.columns) == ["name", "quantity"]
    assert df.empty


def test_unknown_table_or_column(conn):
    with pytest.raises(StoreError):
        select_rows(conn, "nope")
    with pytest.raises(StoreError, match="Unknown column"):
        select_rows(conn, "events", ["title", "password"])
    with pytest.raises(StoreError):
        select_rows(conn, "events", filters=[("bogus", "eq", 1)])


def test_unsupported_operator(conn):
    with pytest.raises(StoreError, match="operator"):
        select_rows(conn, "events", filters=[("title", "like", "%x%")])


def test_filters_order_and_limit(conn):
    insert_rows(
        conn,
        "events",
        [_event_row("A", "2025-01-10"), _event_row("B", "2025-01-05"), _event_row("C", "2025-02-01")],
    )
    df = select_rows(
        conn,
        "events",
        ["title"],
        filters=[("date", "gte", "2025-01-01"), ("date", "lt", "2025-02-01")],
        order_by=[("date", True)],
    )
    assert df["title"].tolist() == ["B", "A"]

    df = select_rows(conn, "events", ["title"], order_by=[("date", False)], limit=1)
    assert df["title"].tolist() == ["C"]


def test_insert_returns_rows_with_ids(conn):
    df = insert_rows(conn, "goals", [{"title": "x", "month": "2025-01"}], returning=["id", "title"])
    assert list(df.columns) == ["id", "title"]
    assert int(df.iloc[0]["id"]) > 0


def test_insert_nothing(conn):
    assert insert_rows(conn, "goals", [], returning=["id"]).empty


def test_failed_insert_rolls_back_whole_batch(conn):
    rows = [{"title": "ok", "month": "2025-01"}, {"title": None, "month": "2025-01"}]
    with pytest.raises(StoreError):
        insert_rows(conn, "goals", rows)
    assert select_rows(conn, "goals").empty


def test_update_and_delete_require_filter(conn):
    with pytest.raises(StoreError):
        update_rows(conn, "goals", {"title": "x"}, [])
    with pytest.raises(StoreError):
        delete_rows(conn, "goals", [])


def test_update_with_empty_patch_is_noop(conn):
    assert update_rows(conn, "goals", {}, [("id", "eq", 1)]) == 0


# -- events -------------------------------------------------------------------

def test_event_crud(conn):
    (created,) = create_events(conn, [_event_row("Farmers market", "2025-04-05", location="Main St")])
    assert created.id > 0
    assert created.location == "Main St"

    update_event(conn, created.id, {"status": "booked", "client_name": "Pat"})
    fetched = get_event(conn, created.id)
    assert fetched.status == "booked"
    assert fetched.client_name == "Pat"

    delete_event(conn, created.id)
    assert get_events(conn) == []
    with pytest.raises(StoreError):
        get_event(conn, created.id)


def test_update_missing_event(conn):
    with pytest.raises(StoreError, match="Event not found"):
        update_event(conn, 999, {"title": "x"})


def test_recurring_batch_inserts_together(conn):
    rows = [_event_row("Weekly", d) for d in ("2025-01-03", "2025-01-10", "2025-01-17")]
    created = create_events(conn, rows)
    assert [e.date for e in created] == ["2025-01-03", "2025-01-10", "2025-01-17"]
    assert len({e.id for e in created}) == 3


def test_get_events_window(conn):
    create_events(
        conn,
        [_event_row("a", "2025-03-01"), _event_row("b", "2025-03-31"), _event_row("c", "2025-04-01")],
    )
    titles = [e.title for e in get_events(conn, "2025-03-01", "2025-03-31")]
    assert titles == ["a", "b"]


def test_event_locations_are_distinct(conn):
    create_events(
        conn,
        [
            _event_row("a", "2025-03-01", location="Pier 39"),
            _event_row("b", "2025-03-02", location="pier 1"),
            _event_row("c", "2025-03-03", location="Pier 39"),
            _event_row("d", "2025-03-04"),
        ],
    )
    assert get_event_locations(conn) == ["pier 1", "Pier 39"]


# -- inventory ----------------------------------------------------------------

def test_inventory_crud_and_ordering(conn):
    add_inventory_item(conn, {"name": "Whole milk", "category": "milk", "unit": "gal", "quantity": 4})
    beans = add_inventory_item(
        conn, {"name": "House blend", "category": "beans", "unit": "bags", "reorder_threshold": 2}
    )
    add_inventory_item(conn, {"name": "Almond milk", "category": "milk", "unit": "carton"})

    assert [i.name for i in get_inventory_items(conn)] == ["House blend", "Almond milk", "Whole milk"]
    assert beans.quantity == 0
    assert beans.notes is None

    update_inventory_item(conn, beans.id, {"quantity": 7, "notes": "from Ritual"})
    beans = next(i for i in get_inventory_items(conn) if i.id == beans.id)
    assert beans.quantity == 7
    assert beans.notes == "from Ritual"

    delete_inventory_item(conn, beans.id)
    assert all(i.id != beans.id for i in get_inventory_items(conn))


def test_adjust_quantity_never_negative(conn):
    item = add_inventory_item(conn, {"name": "Cups", "category": "cups", "unit": "sleeves", "quantity": 1})
    assert adjust_quantity(conn, item, 1) == 2
    assert adjust_quantity(conn, item, -5) == 0
    (stored,) = get_inventory_items(conn)
    assert stored.quantity == 0


def test_update_missing_item(conn):
    with pytest.raises(StoreError):
        update_inventory_item(conn, 42, {"quantity": 1})


# -- goals --------------------------------------------------------------------

def test_goal_lifecycle(conn):
    goal = add_goal(conn, "Book 3 weddings", "2025-05", notes=None)
    assert not goal.is_done

    set_goal_done(conn, goal.id, True)
    (stored,) = get_goals(conn)
    assert stored.is_done

    update_goal(conn, goal.id, {"title": "Book 4 weddings"})
    assert get_goals(conn)[0].title == "Book 4 weddings"

    delete_goal(conn, goal.id)
    assert get_goals(conn) == []


def test_goals_ordered_by_month_then_newest(conn):
    insert_rows(
        conn,
        "goals",
        [
            {"title": "older", "month": "2025-02", "created_at": "2025-01-01T00:00:00+00:00"},
            {"title": "january", "month": "2025-01", "created_at": "2025-01-01T00:00:00+00:00"},
            {"title": "newer", "month": "2025-02", "created_at": "2025-01-05T00:00:00+00:00"},
        ],
    )
    assert [g.title for g in get_goals(conn)] == ["january", "newer", "older"]
    assert [g.title for g in get_goals(conn, "2025-02")] == ["newer", "older"]


# -- cash sessions --------------------------------------------------------------

def test_cash_session_round_trip(conn):
    summary = reconcile({20: 5, 10: 4, 5: 1}, {100: 1, 50: 2}, "30", "10")
    saved = add_cash_session(conn, "2025-06-07", summary, "Saturday market")
    assert saved.opening_total == Decimal("145.00")
    assert saved.net_cash == Decimal("15.00")

    (stored,) = get_cash_sessions(conn)
    assert stored.id == saved.id
    assert stored.net_cash == Decimal("15.00")
    assert stored.notes == "Saturday market"


def test_cash_sessions_newest_first_and_limited(conn):
    summary = reconcile({}, {1: 1})
    for day in ("2025-01-01", "2025-03-01", "2025-02-01"):
        add_cash_session(conn, day, summary)
    assert [s.date for s in get_cash_sessions(conn)] == ["2025-03-01", "2025-02-01", "2025-01-01"]
    assert len(get_cash_sessions(conn, limit=2)) == 2

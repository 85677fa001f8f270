# ---------- services.py ----------
"""Store access used by the Streamlit pages.

The store is a hosted PostgreSQL database (Supabase) reached with psycopg2;
local development and the test-suite use SQLite. Every call is a single
request: it either returns its result or raises StoreError with a message
that can be shown to the operator as-is.
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from core.cash import DrawerSummary
from core.models import CashSession, Event, Goal, InventoryItem, from_frame

try:
    import psycopg2
    import psycopg2.extensions
except ImportError:
    psycopg2 = None

logger = logging.getLogger(__name__)

# Type alias for database connections
DBConnection = Union[sqlite3.Connection, 'psycopg2.extensions.connection']

Filter = Tuple[str, str, Any]
Order = Tuple[str, bool]

# Columns each table exposes; identifiers are only ever taken from here.
SCHEMA: Dict[str, Tuple[str, ...]] = {
    "inventory_items": (
        "id", "name", "category", "unit", "quantity",
        "reorder_threshold", "notes", "created_at",
    ),
    "events": (
        "id", "title", "date", "location", "type", "client_name",
        "client_email", "client_phone", "status", "notes", "created_at",
    ),
    "goals": ("id", "title", "month", "is_done", "notes", "created_at"),
    "cash_sessions": (
        "id", "date", "opening_total", "closing_total", "stall_fee",
        "payouts", "notes", "created_at",
    ),
    "users": ("id", "email", "password_hash", "name", "is_active", "created_at"),
    "auth_sessions": ("id", "token", "user_email", "expires_at", "created_at"),
}

OPERATORS = {
    "eq": "=",
    "neq": "<>",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
}

INVENTORY_COLUMNS = ["id", "name", "category", "unit", "quantity", "reorder_threshold", "notes"]
EVENT_COLUMNS = [
    "id", "title", "date", "location", "type", "client_name",
    "client_email", "client_phone", "status", "notes",
]
GOAL_COLUMNS = ["id", "title", "month", "is_done", "notes"]
CASH_COLUMNS = ["id", "date", "opening_total", "closing_total", "stall_fee", "payouts", "notes"]


class StoreError(Exception):
    """A store request failed. ``str(err)`` is safe to show to the user."""


def is_postgres(conn: DBConnection) -> bool:
    """Check if connection is PostgreSQL."""
    return psycopg2 is not None and isinstance(conn, psycopg2.extensions.connection)


def _placeholder(conn: DBConnection) -> str:
    return "%s" if is_postgres(conn) else "?"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def init_db(conn: DBConnection) -> None:
    """Create tables for a new database (safe to run on existing DB)."""
    is_pg = is_postgres(conn)

    # Use SERIAL for PostgreSQL, INTEGER PRIMARY KEY AUTOINCREMENT for SQLite
    id_type = "SERIAL PRIMARY KEY" if is_pg else "INTEGER PRIMARY KEY AUTOINCREMENT"
    # Use NUMERIC for PostgreSQL, REAL for SQLite
    money_type = "NUMERIC(10,2)" if is_pg else "REAL"
    bool_type = "BOOLEAN" if is_pg else "INTEGER"
    false = "FALSE" if is_pg else "0"
    true = "TRUE" if is_pg else "1"

    cur = conn.cursor()
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS inventory_items (
            id {id_type},
            name TEXT NOT NULL,
            category TEXT NOT NULL DEFAULT 'other',
            unit TEXT NOT NULL DEFAULT '',
            quantity INTEGER NOT NULL DEFAULT 0,
            reorder_threshold INTEGER NOT NULL DEFAULT 0,
            notes TEXT,
            created_at TEXT
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS events (
            id {id_type},
            title TEXT NOT NULL,
            date TEXT NOT NULL,
            location TEXT,
            type TEXT,
            client_name TEXT,
            client_email TEXT,
            client_phone TEXT,
            status TEXT,
            notes TEXT,
            created_at TEXT
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS goals (
            id {id_type},
            title TEXT NOT NULL,
            month TEXT NOT NULL,
            is_done {bool_type} NOT NULL DEFAULT {false},
            notes TEXT,
            created_at TEXT
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS cash_sessions (
            id {id_type},
            date TEXT NOT NULL,
            opening_total {money_type} NOT NULL DEFAULT 0,
            closing_total {money_type} NOT NULL DEFAULT 0,
            stall_fee {money_type} NOT NULL DEFAULT 0,
            payouts {money_type} NOT NULL DEFAULT 0,
            notes TEXT,
            created_at TEXT
        )
        """
    )

    # Login accounts and issued session tokens
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS users (
            id {id_type},
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            name TEXT NOT NULL,
            is_active {bool_type} NOT NULL DEFAULT {true},
            created_at TEXT
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS auth_sessions (
            id {id_type},
            token TEXT UNIQUE NOT NULL,
            user_email TEXT NOT NULL,
            expires_at TEXT NOT NULL,
            created_at TEXT
        )
        """
    )
    conn.commit()


# ============================================================================
# Generic table operations
# ============================================================================

def _check_table(table: str) -> Tuple[str, ...]:
    columns = SCHEMA.get(table)
    if columns is None:
        raise StoreError(f"Unknown table: {table}")
    return columns


def _check_columns(table: str, names: Iterable[str]) -> List[str]:
    known = _check_table(table)
    names = list(names)
    unknown = [n for n in names if n not in known]
    if unknown:
        raise StoreError(f"Unknown column(s) on {table}: {', '.join(unknown)}")
    return names


def _where(conn: DBConnection, table: str, filters: Sequence[Filter]) -> Tuple[str, List[Any]]:
    if not filters:
        return "", []
    placeholder = _placeholder(conn)
    clauses = []
    params: List[Any] = []
    for column, op, value in filters:
        _check_columns(table, [column])
        sql_op = OPERATORS.get(op)
        if sql_op is None:
            raise StoreError(f"Unsupported filter operator: {op}")
        if value is None and op in ("eq", "neq"):
            clauses.append(f"{column} IS {'NOT ' if op == 'neq' else ''}NULL")
            continue
        clauses.append(f"{column} {sql_op} {placeholder}")
        params.append(value)
    return " WHERE " + " AND ".join(clauses), params


def _fail(conn: DBConnection, action: str, table: str, exc: Exception) -> StoreError:
    try:
        conn.rollback()
    except Exception:
        logger.exception("Rollback failed after %s on %s", action, table)
    logger.exception("Failed to %s %s: %s", action, table, exc)
    message = str(exc).strip() or exc.__class__.__name__
    return StoreError(message)


def select_rows(
    conn: DBConnection,
    table: str,
    columns: Optional[Sequence[str]] = None,
    filters: Sequence[Filter] = (),
    order_by: Sequence[Order] = (),
    limit: Optional[int] = None,
) -> pd.DataFrame:
    """Read rows from one table as a DataFrame.

    ``filters`` are ``(column, op, value)`` triples joined with AND, where op
    is one of eq/neq/gt/gte/lt/lte. ``order_by`` is a list of
    ``(column, ascending)`` pairs applied in order.
    """
    columns = _check_columns(table, columns or _check_table(table))
    where, params = _where(conn, table, filters)
    query = f"SELECT {', '.join(columns)} FROM {table}{where}"
    if order_by:
        _check_columns(table, [c for c, _ in order_by])
        query += " ORDER BY " + ", ".join(
            f"{column} {'ASC' if ascending else 'DESC'}" for column, ascending in order_by
        )
    if limit is not None:
        query += f" LIMIT {int(limit)}"
    try:
        df = pd.read_sql(query, conn, params=params or None)
    except Exception as e:
        raise _fail(conn, "read", table, e) from e
    # Keep the requested projection even for an empty result
    return df.reindex(columns=columns)


def select_one(
    conn: DBConnection,
    table: str,
    columns: Sequence[str],
    filters: Sequence[Filter],
) -> Dict[str, Any]:
    """Read exactly one row; StoreError when nothing matches."""
    df = select_rows(conn, table, columns, filters=filters, limit=1)
    if df.empty:
        raise StoreError(f"No matching row in {table}")
    return df.iloc[0].to_dict()


def insert_rows(
    conn: DBConnection,
    table: str,
    rows: Sequence[Mapping[str, Any]],
    returning: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Insert one or more rows in a single transaction and return them."""
    known = _check_table(table)
    returning = _check_columns(table, returning or known)
    if not rows:
        return pd.DataFrame(columns=returning)

    placeholder = _placeholder(conn)
    inserted: List[Tuple[Any, ...]] = []
    cur = conn.cursor()
    try:
        for row in rows:
            values = dict(row)
            if "created_at" in known and not values.get("created_at"):
                values["created_at"] = _now_iso()
            names = _check_columns(table, values.keys())
            cur.execute(
                f"INSERT INTO {table} ({', '.join(names)}) "
                f"VALUES ({', '.join([placeholder] * len(names))}) "
                f"RETURNING {', '.join(returning)}",
                tuple(values[n] for n in names),
            )
            inserted.append(tuple(cur.fetchone()))
        conn.commit()
    except StoreError:
        conn.rollback()
        raise
    except Exception as e:
        raise _fail(conn, "insert into", table, e) from e
    return pd.DataFrame(inserted, columns=returning)


def update_rows(
    conn: DBConnection,
    table: str,
    patch: Mapping[str, Any],
    filters: Sequence[Filter],
) -> int:
    """Apply a partial-field patch to every row matching ``filters``."""
    names = _check_columns(table, patch.keys())
    if not names:
        return 0
    if not filters:
        raise StoreError("Refusing to update without a filter")
    placeholder = _placeholder(conn)
    where, params = _where(conn, table, filters)
    assignments = ", ".join(f"{n}={placeholder}" for n in names)
    cur = conn.cursor()
    try:
        cur.execute(
            f"UPDATE {table} SET {assignments}{where}",
            tuple(patch[n] for n in names) + tuple(params),
        )
        count = cur.rowcount
        conn.commit()
    except Exception as e:
        raise _fail(conn, "update", table, e) from e
    return count


def delete_rows(conn: DBConnection, table: str, filters: Sequence[Filter]) -> int:
    """Delete every row matching ``filters``."""
    _check_table(table)
    if not filters:
        raise StoreError("Refusing to delete without a filter")
    where, params = _where(conn, table, filters)
    cur = conn.cursor()
    try:
        cur.execute(f"DELETE FROM {table}{where}", tuple(params))
        count = cur.rowcount
        conn.commit()
    except Exception as e:
        raise _fail(conn, "delete from", table, e) from e
    return count


# ============================================================================
# Events
# ============================================================================

def get_events(
    conn: DBConnection,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> List[Event]:
    """Events ordered by date, optionally limited to ``start..end`` inclusive."""
    filters: List[Filter] = []
    if start:
        filters.append(("date", "gte", str(start)))
    if end:
        filters.append(("date", "lte", str(end)))
    df = select_rows(conn, "events", EVENT_COLUMNS, filters=filters, order_by=[("date", True)])
    return from_frame(df, Event)


def get_event(conn: DBConnection, event_id: int) -> Event:
    return Event.from_row(select_one(conn, "events", EVENT_COLUMNS, [("id", "eq", int(event_id))]))


def create_events(conn: DBConnection, rows: Sequence[Mapping[str, Any]]) -> List[Event]:
    """Insert a single event or a recurring batch in one submission."""
    df = insert_rows(conn, "events", rows, returning=EVENT_COLUMNS)
    return from_frame(df, Event)


def update_event(conn: DBConnection, event_id: int, patch: Mapping[str, Any]) -> None:
    if update_rows(conn, "events", patch, [("id", "eq", int(event_id))]) == 0:
        raise StoreError("Event not found")


def delete_event(conn: DBConnection, event_id: int) -> None:
    delete_rows(conn, "events", [("id", "eq", int(event_id))])


def get_event_locations(conn: DBConnection) -> List[str]:
    """Distinct previous locations, for the location picker."""
    df = select_rows(conn, "events", ["location"], filters=[("location", "neq", None)])
    if df.empty:
        return []
    values = df["location"].dropna().astype(str).str.strip()
    return sorted({v for v in values if v}, key=str.casefold)


# ============================================================================
# Inventory
# ============================================================================

def get_inventory_items(conn: DBConnection) -> List[InventoryItem]:
    df = select_rows(
        conn,
        "inventory_items",
        INVENTORY_COLUMNS,
        order_by=[("category", True), ("name", True)],
    )
    return from_frame(df, InventoryItem)


def add_inventory_item(conn: DBConnection, values: Mapping[str, Any]) -> InventoryItem:
    df = insert_rows(conn, "inventory_items", [values], returning=INVENTORY_COLUMNS)
    return InventoryItem.from_row(df.iloc[0].to_dict())


def update_inventory_item(conn: DBConnection, item_id: int, patch: Mapping[str, Any]) -> None:
    if update_rows(conn, "inventory_items", patch, [("id", "eq", int(item_id))]) == 0:
        raise StoreError("Inventory item not found")


def adjust_quantity(conn: DBConnection, item: InventoryItem, delta: int) -> int:
    """Quick +/- adjustment; quantity never goes below zero. Returns new quantity."""
    new_qty = max(0, int(item.quantity) + int(delta))
    update_inventory_item(conn, item.id, {"quantity": new_qty})
    return new_qty


def delete_inventory_item(conn: DBConnection, item_id: int) -> None:
    delete_rows(conn, "inventory_items", [("id", "eq", int(item_id))])


# ============================================================================
# Goals
# ============================================================================

def get_goals(conn: DBConnection, month: Optional[str] = None) -> List[Goal]:
    """Goals by month ascending, newest first within a month."""
    filters: List[Filter] = [("month", "eq", month)] if month else []
    df = select_rows(
        conn,
        "goals",
        GOAL_COLUMNS,
        filters=filters,
        order_by=[("month", True), ("created_at", False)],
    )
    return from_frame(df, Goal)


def add_goal(conn: DBConnection, title: str, month: str, notes: Optional[str] = None) -> Goal:
    row = {"title": title, "month": month, "notes": notes, "is_done": False}
    df = insert_rows(conn, "goals", [row], returning=GOAL_COLUMNS)
    return Goal.from_row(df.iloc[0].to_dict())


def update_goal(conn: DBConnection, goal_id: int, patch: Mapping[str, Any]) -> None:
    if update_rows(conn, "goals", patch, [("id", "eq", int(goal_id))]) == 0:
        raise StoreError("Goal not found")


def set_goal_done(conn: DBConnection, goal_id: int, done: bool) -> None:
    update_goal(conn, goal_id, {"is_done": bool(done)})


def delete_goal(conn: DBConnection, goal_id: int) -> None:
    delete_rows(conn, "goals", [("id", "eq", int(goal_id))])


# ============================================================================
# Cash sessions
# ============================================================================

def get_cash_sessions(conn: DBConnection, limit: Optional[int] = 20) -> List[CashSession]:
    df = select_rows(
        conn,
        "cash_sessions",
        CASH_COLUMNS,
        order_by=[("date", False), ("created_at", False)],
        limit=limit,
    )
    return from_frame(df, CashSession)


def add_cash_session(
    conn: DBConnection,
    date: str,
    summary: DrawerSummary,
    notes: Optional[str] = None,
) -> CashSession:
    """Persist the drawer totals; net cash is re-derived on read."""
    row = {
        "date": str(date),
        # psycopg2 adapts Decimal natively; sqlite3 needs a plain number
        "opening_total": _money_param(conn, summary.opening_total),
        "closing_total": _money_param(conn, summary.closing_total),
        "stall_fee": _money_param(conn, summary.stall_fee),
        "payouts": _money_param(conn, summary.payouts),
        "notes": notes,
    }
    df = insert_rows(conn, "cash_sessions", [row], returning=CASH_COLUMNS)
    return CashSession.from_row(df.iloc[0].to_dict())


def _money_param(conn: DBConnection, amount):
    return amount if is_postgres(conn) else float(amount)

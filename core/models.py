"""Row types for the four business tables.

The store owns every record; these are the transient copies a page holds
while it is on screen.
"""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import pandas as pd

T = TypeVar("T")

CENT = Decimal("0.01")


def _text(value: Any, default: str = "") -> str:
    if _is_missing(value):
        return default
    return str(value)


def _optional_text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def _int(value: Any) -> int:
    if _is_missing(value):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _money(value: Any) -> Decimal:
    """Store value -> Decimal cents. REAL columns come back as floats."""
    if _is_missing(value):
        return Decimal("0.00")
    try:
        return Decimal(str(value)).quantize(CENT)
    except (InvalidOperation, ValueError):
        return Decimal("0.00")


def _bool(value: Any) -> bool:
    if _is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "t", "yes")
    return bool(value)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


@dataclass(frozen=True)
class InventoryItem:
    id: int
    name: str
    category: str
    unit: str = ""
    quantity: int = 0
    reorder_threshold: int = 0
    notes: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "InventoryItem":
        return cls(
            id=_int(row.get("id")),
            name=_text(row.get("name")),
            category=_text(row.get("category"), "other"),
            unit=_text(row.get("unit")),
            quantity=max(0, _int(row.get("quantity"))),
            reorder_threshold=max(0, _int(row.get("reorder_threshold"))),
            notes=_optional_text(row.get("notes")),
        )


@dataclass(frozen=True)
class Event:
    id: int
    title: str
    date: str  # YYYY-MM-DD
    type: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Event":
        return cls(
            id=_int(row.get("id")),
            title=_text(row.get("title")),
            date=_text(row.get("date"))[:10],
            type=_optional_text(row.get("type")),
            status=_optional_text(row.get("status")),
            location=_optional_text(row.get("location")),
            client_name=_optional_text(row.get("client_name")),
            client_email=_optional_text(row.get("client_email")),
            client_phone=_optional_text(row.get("client_phone")),
            notes=_optional_text(row.get("notes")),
        )


@dataclass(frozen=True)
class Goal:
    id: int
    title: str
    month: str  # YYYY-MM
    is_done: bool = False
    notes: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Goal":
        return cls(
            id=_int(row.get("id")),
            title=_text(row.get("title")),
            month=_text(row.get("month"))[:7],
            is_done=_bool(row.get("is_done")),
            notes=_optional_text(row.get("notes")),
        )


@dataclass(frozen=True)
class CashSession:
    id: int
    date: str
    opening_total: Decimal
    closing_total: Decimal
    stall_fee: Decimal = Decimal("0.00")
    payouts: Decimal = Decimal("0.00")
    notes: Optional[str] = None

    @property
    def net_cash(self) -> Decimal:
        """Re-derived from the stored components; never stored itself."""
        return self.closing_total - self.opening_total - self.stall_fee - self.payouts

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CashSession":
        return cls(
            id=_int(row.get("id")),
            date=_text(row.get("date"))[:10],
            opening_total=_money(row.get("opening_total")),
            closing_total=_money(row.get("closing_total")),
            stall_fee=_money(row.get("stall_fee")),
            payouts=_money(row.get("payouts")),
            notes=_optional_text(row.get("notes")),
        )


def from_frame(df: pd.DataFrame, model: Type[T]) -> List[T]:
    """Convert a store result set into model instances, keeping row order."""
    if df is None or df.empty:
        return []
    return [model.from_row(row) for row in df.to_dict("records")]


def to_frame(rows: List[Any], columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Model instances -> DataFrame for st.dataframe / exports."""
    records: List[Dict[str, Any]] = [asdict(r) for r in rows]
    if columns is None and rows:
        columns = [f.name for f in fields(rows[0])]
    return pd.DataFrame(records, columns=columns)

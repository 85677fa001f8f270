"""In-memory view model for the list pages.

A page loads its rows once, then keeps them in sync by merging the result
of each successful store call instead of re-fetching. Instances live in
``st.session_state`` so they survive Streamlit reruns.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Browsing:
    pass


@dataclass(frozen=True)
class Editing:
    row_id: Any


ViewMode = Union[Browsing, Editing]


class TableView(Generic[T]):
    """Rows of one table plus the page's UI state for them."""

    def __init__(self, rows: Optional[Iterable[T]] = None):
        self.rows: List[T] = list(rows or [])
        self.loaded = rows is not None
        self.error: Optional[str] = None
        self.mode: ViewMode = Browsing()
        self.pending_delete: Optional[Any] = None

    # -- rows ---------------------------------------------------------------

    def load(self, rows: Iterable[T]) -> None:
        self.rows = list(rows)
        self.loaded = True
        self.error = None

    def get(self, row_id: Any) -> Optional[T]:
        return next((r for r in self.rows if r.id == row_id), None)

    def append(self, *rows: T) -> None:
        self.rows.extend(rows)

    def prepend(self, *rows: T) -> None:
        self.rows[:0] = rows

    def merge(self, row_id: Any, **changes: Any) -> None:
        """Apply a successful patch to the local copy of one row."""
        self.rows = [
            dataclasses.replace(r, **changes) if r.id == row_id else r
            for r in self.rows
        ]

    def remove(self, row_id: Any) -> None:
        self.rows = [r for r in self.rows if r.id != row_id]
        if self.is_editing(row_id):
            self.cancel_edit()
        if self.pending_delete == row_id:
            self.pending_delete = None

    # -- inline editing -----------------------------------------------------

    def start_edit(self, row_id: Any) -> None:
        self.mode = Editing(row_id)

    def cancel_edit(self) -> None:
        self.mode = Browsing()

    def is_editing(self, row_id: Any) -> bool:
        return isinstance(self.mode, Editing) and self.mode.row_id == row_id

    # -- delete confirmation ------------------------------------------------

    def ask_delete(self, row_id: Any) -> None:
        self.pending_delete = row_id

    def clear_delete(self) -> None:
        self.pending_delete = None


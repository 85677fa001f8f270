"""Reusable UI components."""
import logging
from typing import Callable, Iterable, Optional

import streamlit as st

from core.cash import format_currency
from core.local_state import TableView
from core.services import StoreError

logger = logging.getLogger(__name__)


def navigate(path: str, **state) -> None:
    """Switch page. Extra keyword arguments are stashed for the next page."""
    st.session_state["path"] = path
    for key, value in state.items():
        st.session_state[key] = value
    st.query_params["path"] = path
    st.rerun()


def table_view(key: str, loader: Callable[[], Iterable]) -> TableView:
    """Page-scoped rows, loaded from the store on first use.

    A failed load leaves the view empty with ``view.error`` set so the page
    can show the message; the next rerun tries again.
    """
    view = st.session_state.get(key)
    if view is None:
        view = TableView()
        st.session_state[key] = view
    if not view.loaded:
        try:
            view.load(loader())
        except StoreError as e:
            logger.warning("Could not load %s: %s", key, e)
            view.error = str(e)
    return view


def flash(message: str, icon: str = "✅") -> None:
    """Queue a toast that survives the rerun triggered by a save."""
    st.session_state["flash"] = (message, icon)


def show_flash() -> None:
    pending = st.session_state.pop("flash", None)
    if pending:
        st.toast(pending[0], icon=pending[1])


def money(amount) -> str:
    return format_currency(amount)


def signed_money_html(amount) -> str:
    css = "net-positive" if amount >= 0 else "net-negative"
    return f"<span class='{css}'>{format_currency(amount)}</span>"


def confirm_delete(view: TableView, row_id, prompt: str, key: str) -> bool:
    """Two-step delete: the first click asks, the second confirms.

    Returns True only on the run where the user confirmed.
    """
    if view.pending_delete != row_id:
        if st.button("\U0001F5D1\ufe0f Delete", key=f"{key}_del_{row_id}"):
            view.ask_delete(row_id)
            st.rerun()
        return False

    st.warning(prompt)
    yes, no = st.columns(2)
    if yes.button("Yes, delete", key=f"{key}_yes_{row_id}", type="primary"):
        view.clear_delete()
        return True
    if no.button("Cancel", key=f"{key}_no_{row_id}"):
        view.clear_delete()
        st.rerun()
    return False


def run_store_call(action: Callable, error_prefix: Optional[str] = None):
    """Run one store call, showing its error inline. Returns (ok, result)."""
    try:
        return True, action()
    except StoreError as e:
        st.error(f"{error_prefix}: {e}" if error_prefix else str(e))
        return False, None

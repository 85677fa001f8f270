"""Monthly goals page."""
from datetime import date

import streamlit as st

from core.aggregation import completed_goals, format_month_label, group_active_goals_by_month
from core.forms import clean_optional, missing_required
from core.scheduling import current_month
from core.services import StoreError, add_goal, delete_goal, get_goals, set_goal_done, update_goal
from ui.components import confirm_delete, run_store_call, show_flash, table_view

VIEW_KEY = "view_goals"
ERROR_KEY = "goal_toggle_error"
REQUIRED = {"title": "Title", "month": "Month"}


def _month_input(label: str, value: str, key: str) -> str:
    """Month picker backed by a date input (day is ignored)."""
    try:
        default = date.fromisoformat(f"{value}-01")
    except ValueError:
        default = date.today().replace(day=1)
    picked = st.date_input(label, value=default, key=key, format="YYYY/MM/DD")
    return current_month(picked) if picked else ""


def _render_add_form(conn, view, today):
    # Month stays selected after adding, to enter several goals for one month
    if "goal_new_month" not in st.session_state:
        st.session_state.goal_new_month = current_month(today)

    with st.form("add_goal_form", clear_on_submit=True):
        c1, c2 = st.columns([3, 1])
        title = c1.text_input("Goal *", placeholder="e.g. Land two corporate bookings")
        with c2:
            month = _month_input("Month *", st.session_state.goal_new_month, key="goal_month_picker")
        notes = st.text_input("Notes")
        submitted = st.form_submit_button("✅ Add goal")

    if not submitted:
        return
    missing = missing_required({"title": title, "month": month}, REQUIRED)
    if missing:
        st.warning(f"Please fill in: {', '.join(missing)}")
        return
    ok, goal = run_store_call(
        lambda: add_goal(conn, title.strip(), month, clean_optional(notes)),
        "Error adding goal",
    )
    if ok:
        st.session_state.goal_new_month = month
        view.append(goal)
        st.rerun()


def _render_edit(conn, view, goal):
    with st.form(f"edit_goal_{goal.id}"):
        title = st.text_input("Goal *", value=goal.title)
        month = _month_input("Month *", goal.month, key=f"goal_edit_month_{goal.id}")
        notes = st.text_input("Notes", value=goal.notes or "")
        c1, c2 = st.columns(2)
        save = c1.form_submit_button("\U0001F4BE Save")
        cancel = c2.form_submit_button("Cancel")

    if cancel:
        view.cancel_edit()
        st.rerun()
    if not save:
        return
    missing = missing_required({"title": title, "month": month}, REQUIRED)
    if missing:
        st.warning(f"Please fill in: {', '.join(missing)}")
        return
    patch = {"title": title.strip(), "month": month, "notes": clean_optional(notes)}
    ok, _ = run_store_call(lambda: update_goal(conn, goal.id, patch), "Error saving goal")
    if ok:
        view.merge(goal.id, **patch)
        view.cancel_edit()
        st.rerun()


def _done_key(goal_id) -> str:
    return f"goal_done_{goal_id}"


def toggle_done(conn, view, goal, state=None) -> bool:
    """Checkbox callback: one store call per click.

    On failure the checkbox is put back and the error is queued for the page.
    """
    state = st.session_state if state is None else state
    key = _done_key(goal.id)
    done = bool(state.get(key, goal.is_done))
    try:
        set_goal_done(conn, goal.id, done)
    except StoreError as e:
        state[key] = goal.is_done
        state[ERROR_KEY] = f"Error updating goal: {e}"
        return False
    view.merge(goal.id, is_done=done)
    return True


def _render_goal(conn, view, goal):
    if view.is_editing(goal.id):
        _render_edit(conn, view, goal)
        return
    cols = st.columns([1, 6, 1, 2])
    key = _done_key(goal.id)
    if key not in st.session_state:
        st.session_state[key] = goal.is_done
    cols[0].checkbox(
        "Done",
        key=key,
        label_visibility="collapsed",
        on_change=toggle_done,
        args=(conn, view, goal),
    )
    text = f"~~{goal.title}~~" if goal.is_done else goal.title
    cols[1].markdown(text)
    if goal.notes:
        cols[1].caption(goal.notes)
    if cols[2].button("✏️", key=f"goal_edit_{goal.id}", help="Edit"):
        view.start_edit(goal.id)
        st.rerun()
    with cols[3]:
        if confirm_delete(view, goal.id, "Delete this goal?", key="goal"):
            ok, _ = run_store_call(lambda: delete_goal(conn, goal.id), "Error deleting goal")
            if ok:
                view.remove(goal.id)
                st.rerun()


def render(conn, ctx, today):
    """Render the goals page."""
    st.header("\U0001F3AF Goals")
    st.caption("Monthly goals, earliest month first.")
    show_flash()
    view = table_view(VIEW_KEY, lambda: get_goals(conn))
    toggle_error = st.session_state.pop(ERROR_KEY, None)
    if toggle_error:
        st.error(toggle_error)
    if view.error:
        st.error(view.error)

    _render_add_form(conn, view, today)

    active = group_active_goals_by_month(view.rows)
    done = completed_goals(view.rows)

    if not active:
        st.info("No open goals. Add one above.")
    for month, goals in active:
        st.subheader(format_month_label(month))
        for goal in goals:
            _render_goal(conn, view, goal)

    if done:
        with st.expander(f"✅ Completed ({len(done)})"):
            for goal in done:
                _render_goal(conn, view, goal)

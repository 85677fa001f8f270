"""Events list page."""
import streamlit as st

from core.constants import EVENT_TYPE_LABELS, STATUS_LABELS
from core.routes import event_edit_path
from core.services import delete_event, get_events
from ui.components import confirm_delete, navigate, run_store_call, show_flash, table_view

VIEW_KEY = "view_events"


def render(conn, ctx):
    """Render the events list with edit and delete actions."""
    st.header("\U0001F4C5 Events")
    show_flash()
    view = table_view(VIEW_KEY, lambda: get_events(conn))

    if st.button("➕ New Event", type="primary"):
        navigate("/events/new")

    if view.error:
        st.error(f"Error loading events: {view.error}")
        return
    if not view.rows:
        st.info("No events yet.")
        return

    header = st.columns([3, 2, 2, 2, 2, 2, 2])
    for col, label in zip(header, ["Title", "Type", "Date", "Client", "Status", "Location", ""]):
        col.markdown(f"**{label}**")

    for event in view.rows:
        cols = st.columns([3, 2, 2, 2, 2, 2, 2])
        cols[0].write(event.title)
        cols[1].write(EVENT_TYPE_LABELS.get(event.type, event.type or "—"))
        cols[2].write(event.date)
        cols[3].write(event.client_name or "—")
        cols[4].write(STATUS_LABELS.get(event.status, event.status or "—"))
        cols[5].write(event.location or "")
        with cols[6]:
            if st.button("✏️ Edit", key=f"event_edit_{event.id}"):
                navigate(event_edit_path(event.id))
            if confirm_delete(view, event.id, "Delete this event?", key="event"):
                ok, _ = run_store_call(lambda: delete_event(conn, event.id), "Error deleting event")
                if ok:
                    view.remove(event.id)
                    st.rerun()

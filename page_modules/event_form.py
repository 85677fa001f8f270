"""Create / edit event page."""
import logging
from datetime import date as date_type

import streamlit as st
from streamlit_free_text_select import st_free_text_select

from core.constants import (
    DEFAULT_EVENT_STATUS,
    DEFAULT_EVENT_TYPE,
    EVENT_STATUSES,
    EVENT_TYPES,
    RECURRING_WEEKS_DEFAULT,
)
from core.forms import clean_optional, missing_required
from core.scheduling import build_event_batch
from core.services import StoreError, create_events, get_event, get_event_locations, update_event
from ui.components import flash, navigate

logger = logging.getLogger(__name__)

TYPE_VALUES = [value for value, _ in EVENT_TYPES]
STATUS_VALUES = [value for value, _ in EVENT_STATUSES]
TYPE_LABELS = dict(EVENT_TYPES)
STATUS_LABELS = dict(EVENT_STATUSES)

REQUIRED = {"title": "Title", "date": "Date"}


def _index(values, value, default):
    return values.index(value) if value in values else values.index(default)


def previous_locations(conn) -> list:
    """Locations for the picker; an empty list when the lookup fails."""
    try:
        return get_event_locations(conn)
    except StoreError as e:
        logger.warning("Could not load previous event locations: %s", e)
        return []


def _location_input(conn, current: str, key_suffix) -> str:
    """Pick a previous location or type a new one."""
    existing = previous_locations(conn)
    if current and current not in existing:
        existing = [current] + existing
    location = st_free_text_select(
        "Location",
        existing,
        index=existing.index(current) if current in existing else None,
        key=f"event_location_{key_suffix}",
        placeholder="Type to search or add",
    )
    return (location or "").strip()


def render(conn, ctx, today, event_id=None):
    """Render the new-event form, or the edit form when ``event_id`` is set."""
    editing = event_id is not None
    event = None
    if editing:
        st.header("✏️ Edit Event")
        try:
            event = get_event(conn, int(event_id))
        except ValueError:
            st.error("Invalid event ID")
        except StoreError as e:
            st.error(f"Error loading event: {e}")
        if event is None:
            if st.button("Back to events"):
                navigate("/events")
            return
    else:
        st.header("➕ Create New Event")

    location = _location_input(conn, (event.location or "") if event else "", event_id or "new")

    with st.form("event_form", clear_on_submit=False):
        title = st.text_input("Title *", value=event.title if event else "")
        default_date = date_type.fromisoformat(event.date) if event and event.date else today
        event_date = st.date_input("Date *", value=default_date)
        col1, col2 = st.columns(2)
        event_type = col1.selectbox(
            "Event type",
            TYPE_VALUES,
            index=_index(TYPE_VALUES, event.type if event else None, DEFAULT_EVENT_TYPE),
            format_func=TYPE_LABELS.get,
        )
        status = col2.selectbox(
            "Status",
            STATUS_VALUES,
            index=_index(STATUS_VALUES, event.status if event else None, DEFAULT_EVENT_STATUS),
            format_func=STATUS_LABELS.get,
        )

        st.markdown("**Client**")
        c1, c2, c3 = st.columns(3)
        client_name = c1.text_input("Name", value=(event.client_name or "") if event else "")
        client_email = c2.text_input("Email", value=(event.client_email or "") if event else "")
        client_phone = c3.text_input("Phone", value=(event.client_phone or "") if event else "")
        notes = st.text_area("Notes", value=(event.notes or "") if event else "", height=90)

        recurring, weeks = False, 1
        if not editing:
            recurring = st.checkbox("Repeat weekly")
            weeks = st.number_input(
                "Number of weeks",
                min_value=1,
                max_value=52,
                value=RECURRING_WEEKS_DEFAULT,
                help="Creates one event per week on the same weekday.",
            )

        submitted = st.form_submit_button(
            "\U0001F4BE Save changes" if editing else "✅ Create event"
        )

    if st.button("Cancel"):
        navigate("/events")

    if not submitted:
        return

    values = {"title": title.strip(), "date": event_date}
    missing = missing_required(values, REQUIRED)
    if missing:
        st.warning(f"Please fill in: {', '.join(missing)}")
        return

    fields = {
        "title": values["title"],
        "location": location or None,
        "type": event_type,
        "client_name": clean_optional(client_name),
        "client_email": clean_optional(client_email),
        "client_phone": clean_optional(client_phone),
        "status": status,
        "notes": clean_optional(notes),
    }

    try:
        if editing:
            update_event(conn, event.id, dict(fields, date=event_date.isoformat()))
            flash("Event updated.")
        else:
            rows = build_event_batch(fields, event_date, recurring=recurring, weeks=int(weeks))
            created = create_events(conn, rows)
            flash(f"Created {len(created)} event{'s' if len(created) != 1 else ''}.")
    except StoreError as e:
        st.error(str(e))
        return
    navigate("/events")

"""Dashboard page: upcoming events, low stock and this month's goals."""
import pandas as pd
import plotly.express as px
import streamlit as st

from core.aggregation import event_counts, format_month_label, low_stock_items, open_goals, sort_inventory
from core.constants import (
    CATEGORY_LABELS,
    DASHBOARD_EVENTS_SHOWN,
    DASHBOARD_GOALS_SHOWN,
    DASHBOARD_LOW_ITEMS_SHOWN,
    EVENT_TYPE_LABELS,
    STATUS_LABELS,
)
from core.scheduling import current_month, upcoming_window
from core.services import StoreError, get_events, get_goals, get_inventory_items


def render(conn, ctx, today):
    """Render the dashboard page."""
    st.header("\U0001F4C8 Dashboard")
    st.caption("Quick view of upcoming events, inventory, and goals.")

    start, end = upcoming_window(today)
    month = current_month(today)
    try:
        events = get_events(conn, start.isoformat(), end.isoformat())
        items = get_inventory_items(conn)
        goals = get_goals(conn, month=month)
    except StoreError as e:
        st.error(f"Error loading data: {e}")
        return

    counts = event_counts(events, start, end, today=today)
    low_items = sort_inventory(low_stock_items(items))
    active_goals = open_goals(goals)
    month_label = format_month_label(goals[0].month if goals else month)

    # Row 1: Core metrics
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Events (next 30 days)", counts.total, f"{counts.booked} booked", delta_color="off")
    col2.metric("Markets / Pop-ups", f"{counts.market} / {counts.popup}")
    col3.metric(
        "Low stock items",
        len(low_items),
        "Time to reorder" if low_items else "All good",
        delta_color="inverse" if low_items else "off",
    )
    col4.metric(f"Open goals ({month_label})", len(active_goals), f"{len(goals)} total", delta_color="off")

    st.markdown("---")
    left, right = st.columns([3, 2])

    with left:
        st.subheader("\U0001F4C5 Upcoming events")
        if not events:
            st.info("No events in the next 30 days.")
        else:
            upcoming = pd.DataFrame(
                [
                    {
                        "Date": e.date,
                        "Title": e.title,
                        "Type": EVENT_TYPE_LABELS.get(e.type, e.type or "—"),
                        "Status": STATUS_LABELS.get(e.status, e.status or "—"),
                        "Location": e.location or "",
                    }
                    for e in events[:DASHBOARD_EVENTS_SHOWN]
                ]
            )
            st.dataframe(upcoming, width="stretch", hide_index=True)

        if counts.by_type:
            type_df = pd.DataFrame(
                {
                    "type": [EVENT_TYPE_LABELS.get(t, t) for t in counts.by_type],
                    "count": list(counts.by_type.values()),
                }
            )
            fig = px.pie(
                type_df,
                values="count",
                names="type",
                title="Events by type (next 30 days)",
                color_discrete_sequence=px.colors.qualitative.Set2,
            )
            st.plotly_chart(fig, width="stretch")

    with right:
        st.subheader(f"\U0001F3AF Goals – {month_label}")
        if not active_goals:
            st.info("No open goals this month.")
        else:
            for goal in active_goals[:DASHBOARD_GOALS_SHOWN]:
                st.markdown(f"- {goal.title}")

        st.subheader("\U0001F6A8 Low stock")
        if not low_items:
            st.success("Nothing is below its reorder threshold.")
        else:
            low_df = pd.DataFrame(
                [
                    {
                        "Item": i.name,
                        "Category": CATEGORY_LABELS.get(i.category, i.category),
                        "Qty": f"{i.quantity} {i.unit}".strip(),
                        "Reorder at": i.reorder_threshold,
                    }
                    for i in low_items[:DASHBOARD_LOW_ITEMS_SHOWN]
                ]
            )
            st.dataframe(low_df, width="stretch", hide_index=True)

"""Cash drawer page: count the drawer before and after a market."""
import streamlit as st

from core.cash import DENOMINATION_LABELS, reconcile, subtotal
from core.constants import DENOMINATIONS, RECENT_CASH_SESSIONS
from core.exports import cash_sessions_export_frame, to_excel_bytes
from core.forms import clean_optional
from core.services import add_cash_session, get_cash_sessions
from ui.components import money, run_store_call, signed_money_html, table_view

VIEW_KEY = "view_cash_sessions"
FORM_KEYS = ("cash_fee", "cash_payouts", "cash_notes")


def _count_table(which: str, title: str) -> dict:
    """Denomination inputs with live subtotals. Returns raw counts by value."""
    st.markdown(f"**{title}**")
    counts = {}
    for value in DENOMINATIONS:
        c1, c2, c3 = st.columns([1, 2, 2])
        c1.write(DENOMINATION_LABELS[value])
        counts[value] = c2.number_input(
            f"{title} {DENOMINATION_LABELS[value]}",
            min_value=0,
            step=1,
            value=None,
            key=f"cash_{which}_{value}",
            label_visibility="collapsed",
        )
        line = subtotal(value, counts[value])
        c3.write(money(line) if line > 0 else "—")
    return counts


def _reset_after_save():
    # Counts stay; fee, payouts and notes are cleared
    for key in FORM_KEYS:
        st.session_state.pop(key, None)


def render(conn, ctx, today):
    """Render the cash drawer page."""
    st.header("\U0001F4B5 Cash Drawer")
    st.caption("Count the drawer before/after markets and track stall fee + payouts.")

    if st.session_state.pop("cash_saved", False):
        _reset_after_save()
        st.toast("Cash session saved", icon="\U0001F4BE")

    session_date = st.date_input("Date", value=today, key="cash_date")

    left, right = st.columns(2)
    with left:
        opening_counts = _count_table("opening", "Starting drawer")
    with right:
        closing_counts = _count_table("closing", "Ending drawer")

    c1, c2 = st.columns([3, 2])
    with c1:
        fee = st.number_input("Stall fee", min_value=0.0, step=1.0, value=None, format="%.2f", key="cash_fee")
        payouts = st.number_input(
            "Payouts to helpers", min_value=0.0, step=1.0, value=None, format="%.2f", key="cash_payouts"
        )
        notes = st.text_area(
            "Notes (optional)",
            key="cash_notes",
            placeholder="ex: Westside market, slow morning, busy 11-1.",
            height=80,
        )

    summary = reconcile(opening_counts, closing_counts, fee, payouts)
    with c2:
        st.markdown("**Summary**")
        st.markdown(
            f"""
            <table style="width:100%">
              <tr><td>Starting cash</td><td style="text-align:right">{money(summary.opening_total)}</td></tr>
              <tr><td>Ending cash</td><td style="text-align:right">{money(summary.closing_total)}</td></tr>
              <tr><td>Stall fee</td><td style="text-align:right">- {money(summary.stall_fee)}</td></tr>
              <tr><td>Payouts</td><td style="text-align:right">- {money(summary.payouts)}</td></tr>
              <tr><td><b>Net cash for day</b></td>
                  <td style="text-align:right">{signed_money_html(summary.net_cash)}</td></tr>
            </table>
            """,
            unsafe_allow_html=True,
        )

    view = table_view(VIEW_KEY, lambda: get_cash_sessions(conn, limit=RECENT_CASH_SESSIONS))

    if st.button("\U0001F4BE Save session", type="primary"):
        ok, saved = run_store_call(
            lambda: add_cash_session(conn, session_date.isoformat(), summary, clean_optional(notes)),
            "Error saving cash session",
        )
        if ok:
            view.prepend(saved)
            st.session_state.cash_saved = True
            st.rerun()

    st.markdown("---")
    st.subheader("Recent cash sessions")
    if view.error:
        st.error(view.error)
    elif not view.rows:
        st.caption("Nothing saved yet. After a market, count your drawer and save it here.")
    else:
        export_df = cash_sessions_export_frame(view.rows)
        display_df = export_df.copy()
        for col in ["Opening", "Closing", "Stall Fee", "Payouts", "Net"]:
            display_df[col] = [money(s) for s in _column(view.rows, col)]
        st.dataframe(display_df, width="stretch", hide_index=True)
        st.download_button(
            "Export to Excel",
            data=to_excel_bytes(export_df, "cash_sessions", "CashSessions"),
            file_name="cash_sessions.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )


def _column(sessions, label):
    attr = {
        "Opening": "opening_total",
        "Closing": "closing_total",
        "Stall Fee": "stall_fee",
        "Payouts": "payouts",
    }
    if label == "Net":
        return [s.net_cash for s in sessions]
    return [getattr(s, attr[label]) for s in sessions]

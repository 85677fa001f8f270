"""Sidebar navigation and sign-out."""
import streamlit as st

from core.auth import AuthContext, AuthService
from core.constants import APP_TITLE
from core.routes import LOGIN_PATH, NAV_ITEMS, nav_label_for
from ui.components import navigate


def render_sidebar_menu(path: str) -> None:
    """Render the navigation menu; selecting an entry switches page.

    On sub-pages (new/edit event) nothing is selected, so every entry,
    including the parent list, can be picked.
    """
    st.sidebar.title(APP_TITLE)
    labels = [label for label, _ in NAV_ITEMS]
    current = nav_label_for(path)
    selected = st.sidebar.radio(
        "Go to",
        labels,
        index=labels.index(current) if current else None,
        key=f"nav_{path}",
    )
    if selected is not None and selected != current:
        navigate(dict(NAV_ITEMS)[selected])


def render_account(auth: AuthService, ctx: AuthContext) -> None:
    """Signed-in user and the sign-out button."""
    if not ctx.authenticated:
        return
    st.sidebar.markdown("---")
    st.sidebar.caption(f"Signed in as {ctx.session.name or ctx.session.email}")
    if st.sidebar.button("\U0001F6AA Sign out", key="sidebar_sign_out"):
        auth.sign_out(ctx.session.token)
        st.session_state.pop("auth_token", None)
        for key in [k for k in st.session_state.keys() if str(k).startswith("view_")]:
            del st.session_state[key]
        st.toast("Signed out.", icon="\U0001F512")
        navigate(LOGIN_PATH)

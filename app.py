"""Foolhardy Admin - Main Application Entry Point.

Run with: streamlit run app.py
"""
import logging

import streamlit as st

from core.auth import AuthProvider, AuthService
from core.constants import APP_TITLE
from core.config import ConfigError, Settings, load_settings
from core.db_init import init_db
from core.mobile_styles import apply_mobile_styles
from core.routes import HOME_PATH, resolve
from core.scheduling import today_in
from core.services import StoreError
from ui.sidebar import render_account, render_sidebar_menu

# Import page render functions
from page_modules import cash_drawer, dashboard, event_form, events, goals, inventory, login

# Page configuration
st.set_page_config(
    page_title=APP_TITLE,
    page_icon="☕",
    layout="wide",
)

# Apply mobile-friendly styles
apply_mobile_styles()

try:
    settings = load_settings()
except ConfigError as e:
    st.error(f"⚠️ {e}")
    st.info("Set STORE_URL and STORE_KEY in .env, the environment, or .streamlit/secrets.toml")
    st.stop()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


# Initialize database connection (cached to avoid reconnecting on every interaction)
@st.cache_resource
def get_db_connection(_settings: Settings):
    return init_db(_settings)


try:
    conn = get_db_connection(settings)
except StoreError as e:
    st.error(f"⚠️ {e}")
    st.warning("\U0001F4DD Check: 1) Supabase project is ACTIVE (not paused), 2) STORE_URL / STORE_KEY are correct")
    st.stop()

# Initialize session state
if "path" not in st.session_state:
    st.session_state.path = st.query_params.get("path", HOME_PATH)

today = today_in(settings.timezone)

# One auth service (and so one listener set) per script run
auth = AuthService(conn, settings.session_days)

try:
    with AuthProvider(auth, st.session_state.get("auth_token")) as provider:
        ctx = provider.context
        if provider.token is None:
            st.session_state.pop("auth_token", None)

        resolution = resolve(st.session_state.path, ctx.authenticated)
        if resolution.redirect:
            if resolution.from_path:
                st.session_state.login_from = resolution.from_path
            st.session_state.path = resolution.redirect
            st.query_params["path"] = resolution.redirect
            st.rerun()

        # Leaving a page drops its loaded rows, so the next visit reloads them
        if st.session_state.get("current_page") != resolution.page:
            for key in [k for k in st.session_state.keys() if str(k).startswith("view_")]:
                del st.session_state[key]
            st.session_state.current_page = resolution.page

        if resolution.page != "login":
            render_sidebar_menu(st.session_state.path)
            render_account(auth, ctx)

        # Page routing
        pages = {
            "login": lambda: login.render(auth, ctx),
            "dashboard": lambda: dashboard.render(conn, ctx, today),
            "events": lambda: events.render(conn, ctx),
            "event_new": lambda: event_form.render(conn, ctx, today),
            "event_edit": lambda: event_form.render(conn, ctx, today, event_id=resolution.params.get("id")),
            "inventory": lambda: inventory.render(conn, ctx),
            "goals": lambda: goals.render(conn, ctx, today),
            "cash": lambda: cash_drawer.render(conn, ctx, today),
        }
        pages[resolution.page]()
except StoreError as e:
    st.error(f"⚠️ {e}")
    st.stop()

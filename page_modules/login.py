"""Login page."""
import streamlit as st

from core.auth import AuthContext, AuthError, AuthService
from core.constants import APP_TITLE
from core.routes import after_login_path
from core.services import StoreError
from ui.components import navigate


def render(auth: AuthService, ctx: AuthContext):
    """Display the sign-in form."""
    st.markdown(f"## ☕ {APP_TITLE}")
    st.markdown("### \U0001F510 Sign in")
    with st.form("login_form", clear_on_submit=False):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submit = st.form_submit_button("Sign in", width="stretch")

    if not submit:
        return
    if not email or not password:
        st.warning("⚠️ Please enter both email and password")
        return
    try:
        session = auth.sign_in_with_password(email, password)
    except (AuthError, StoreError) as e:
        st.error(f"❌ {e}")
        return

    st.session_state.auth_token = session.token
    navigate(after_login_path(st.session_state.pop("login_from", None)))

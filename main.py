"""OneExhib Admin - Login Page"""
import logging

import streamlit as st

from api import ApiError
from core.ui import PAGES, build_session_context, handle_login_result, landing_page_for
from ui.components import configure_logging, flash, get_client, set_context, show_flash

st.set_page_config(
    page_title="OneExhib - Login",
    page_icon="🎪",
    layout="centered"
)

configure_logging()
logger = logging.getLogger(__name__)


def main():
    """Login page; routes to the dashboard matching the user's role."""
    st.title("🎪 OneExhib")
    st.markdown("Manage exhibitions, exhibiting companies and their products.")

    show_flash()

    with st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        remember_me = st.checkbox("Remember me")
        submitted = st.form_submit_button("Login", type="primary", use_container_width=True)

    if submitted:
        if not email.strip() or not password:
            st.error("Email and password are required.")
            return

        try:
            response = get_client().login(email.strip(), password, remember_me)
        except ApiError as e:
            logger.error(f"Login request failed: {e.message}")
            st.error(f"Login failed: {e.message}")
            return

        context = build_session_context(response)
        set_context(context)
        page = landing_page_for(response)
        logger.info(f"Login {'succeeded' if context['authenticated'] else 'failed'}, routing to {page}")
        flash(handle_login_result(page, context['role'], failed=not context['authenticated']))
        st.switch_page(page)

    st.markdown("---")
    if st.button("📝 New here? Create an organiser account", use_container_width=True):
        st.switch_page(PAGES['signup'])


if __name__ == "__main__":
    main()

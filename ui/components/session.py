"""Streamlit session helpers shared by every page."""
import logging
from typing import Any, Callable, Dict, List

import streamlit as st

from api import ApiClient, ApiError
from config import get_api_config, get_logging_config
from core.ui import (
    PAGES,
    anonymous_context,
    handle_loading_error,
    is_admin,
    replace_collection,
)

logger = logging.getLogger(__name__)

CONTEXT_KEY = "session_context"


def configure_logging():
    """Apply the configured logging level once per process."""
    logging_config = get_logging_config()
    logging.basicConfig(
        level=getattr(logging, str(logging_config['level']).upper(), logging.INFO),
        format=logging_config['format'],
    )


@st.cache_resource
def get_client() -> ApiClient:
    """One API client (and HTTP connection pool) per server process."""
    return ApiClient.from_config(get_api_config())


def current_context() -> Dict[str, Any]:
    return st.session_state.get(CONTEXT_KEY, anonymous_context())


def set_context(context: Dict[str, Any]):
    st.session_state[CONTEXT_KEY] = context


def logout():
    st.session_state.clear()
    st.switch_page(PAGES['login'])


def require_login(admin: bool = False) -> Dict[str, Any]:
    """Stop rendering unless someone is logged in (and is an admin, if asked)."""
    context = current_context()
    if not context.get('authenticated'):
        st.error("You are not logged in. Please log in first.")
        if st.button("🔑 Go to Login"):
            st.switch_page(PAGES['login'])
        st.stop()
    if admin and not is_admin(context):
        st.error("This page is only available to administrators.")
        if st.button("🏠 Go to Dashboard"):
            st.switch_page(PAGES['dashboard'])
        st.stop()
    return context


def page_state(page: str) -> Dict[str, Any]:
    """State owned by one page; nothing in it is shared with other pages."""
    key = f"page:{page}"
    if key not in st.session_state:
        st.session_state[key] = {}
    return st.session_state[key]


def load_collection(page: str, key: str, fetch: Callable[[], List[Dict[str, Any]]],
                    label: str, refresh: bool = False) -> List[Dict[str, Any]]:
    """
    Fetch a collection once per page visit, or again when `refresh` is set.

    A refetch replaces the held collection wholesale. A failed fetch keeps
    whatever was held before and shows an error instead.
    """
    state = page_state(page)
    if key in state and not refresh and not state.get(f"{key}:stale"):
        return state[key]

    try:
        records = fetch()
    except ApiError as e:
        logger.error(f"Failed to load {label}: {e.message}")
        notify(handle_loading_error(label, e.message))
        return state.get(key, [])

    new_state = replace_collection(state, key, records)
    new_state[f"{key}:stale"] = False
    st.session_state[f"page:{page}"] = new_state
    logger.debug(f"Loaded {len(records)} {label}")
    return new_state[key]


def mark_stale(page: str, key: str):
    """Ask for a refetch of `key` on the next run of `page`."""
    page_state(page)[f"{key}:stale"] = True


def notify(notification: Dict[str, Any]):
    """Render a notification dict from core.ui.response_handlers."""
    if notification['type'] == 'success':
        st.toast(notification['message'], icon="✅")
        return

    st.error(notification['message'])
    if notification.get('details'):
        st.caption(notification['details'])
    for suggestion in notification.get('suggestions', []):
        st.caption(f"• {suggestion}")


def flash(notification: Dict[str, Any]):
    """Queue a notification for the next run (dialogs close by rerunning)."""
    st.session_state.setdefault("flash", []).append(notification)


def show_flash():
    for notification in st.session_state.pop("flash", []):
        notify(notification)


def sidebar_navigation(context: Dict[str, Any]):
    with st.sidebar:
        st.markdown("### Navigation")
        user = context.get('user') or {}
        if user.get('email'):
            st.caption(f"Signed in as {user['email']}")

        if is_admin(context):
            if st.button("🔐 Admin Dashboard", use_container_width=True):
                st.switch_page(PAGES['admin'])
        if st.button("🏠 Dashboard", use_container_width=True):
            st.switch_page(PAGES['dashboard'])
        if st.button("🧰 Services", use_container_width=True):
            st.switch_page(PAGES['services'])
        if st.button("🚪 Logout", use_container_width=True):
            logout()

"""
UI state management functions using functional programming approach.
All functions are pure - return new state data without side effects.
"""

from typing import Dict, Any, List, Optional
import logging

from api.client import LOGIN_FAILED

logger = logging.getLogger(__name__)

ADMIN_ROLE = "ADMIN"

PAGES = {
    'login': "main.py",
    'dashboard': "pages/1_🏠_Dashboard.py",
    'exhibition': "pages/2_🎪_Exhibition.py",
    'company': "pages/3_🏢_Company.py",
    'services': "pages/4_🧰_Services.py",
    'signup': "pages/5_📝_Signup.py",
    'admin': "pages/6_🔐_Admin.py",
}


def anonymous_context() -> Dict[str, Any]:
    """Session context before anyone has logged in."""
    return {'authenticated': False, 'role': None, 'user': None}


def build_session_context(login_response: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the session context from a login response.
    Pure function - the context is passed explicitly to whoever needs the role.

    Args:
        login_response: Body returned by POST /api/login

    Returns:
        Dictionary with 'authenticated', 'role' and 'user'
    """
    if not login_response or login_response.get('message') == LOGIN_FAILED:
        return anonymous_context()

    user = login_response.get('user') or {}
    return {
        'authenticated': True,
        'role': user.get('role'),
        'user': user,
    }


def is_admin(context: Dict[str, Any]) -> bool:
    return bool(context.get('authenticated')) and context.get('role') == ADMIN_ROLE


def landing_page_for(login_response: Dict[str, Any]) -> str:
    """
    Page to open after a login attempt.

    'login failed' goes back to signup, the ADMIN role to the admin
    dashboard and every other role to the organiser dashboard.
    """
    if not login_response or login_response.get('message') == LOGIN_FAILED:
        return PAGES['signup']
    role = (login_response.get('user') or {}).get('role')
    if role == ADMIN_ROLE:
        return PAGES['admin']
    return PAGES['dashboard']


def replace_collection(current_state: Dict[str, Any], key: str, records: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Replace a screen's fetched collection after a refetch.

    The previous collection is dropped entirely; fresh and stale records
    are never merged.
    """
    new_state = current_state.copy()
    new_state[key] = list(records)
    return new_state


def initial_bulk_delete_state() -> Dict[str, Any]:
    return {'pending': None}


def request_bulk_delete(state: Dict[str, Any], entity: str) -> Dict[str, Any]:
    """Ask for confirmation before deleting every record of an entity."""
    new_state = state.copy()
    new_state['pending'] = entity
    return new_state


def cancel_bulk_delete(state: Dict[str, Any]) -> Dict[str, Any]:
    new_state = state.copy()
    new_state['pending'] = None
    return new_state


def confirm_bulk_delete(state: Dict[str, Any], entity: str) -> bool:
    """
    Whether the destructive call for `entity` may be issued now.

    Only true when a confirmation for that same entity is pending.
    """
    return state.get('pending') == entity


def bulk_delete_prompt(entity: str) -> str:
    return f"This action will permanently delete all {entity}. This cannot be undone."


def prepare_dashboard_counts(
    organisers: Optional[List[Dict[str, Any]]],
    exhibitions: Optional[List[Dict[str, Any]]],
    companies: Optional[List[Dict[str, Any]]],
    products: Optional[List[Dict[str, Any]]]
) -> Dict[str, int]:
    """
    Summary card values for the admin dashboard.
    Pure function - returns counts without side effects.
    """
    return {
        'Organiser': len(organisers or []),
        'Exhibition': len(exhibitions or []),
        'Company': len(companies or []),
        'Product': len(products or []),
    }


def prepare_product_summary(products: List[Dict[str, Any]], filtered_count: int) -> Dict[str, int]:
    """Summary cards shown above a company's product list."""
    categories = {product.get('category') or "Uncategorized" for product in products}
    return {
        'Products': len(products),
        'Categories': len(categories),
        'Search Results': filtered_count,
    }

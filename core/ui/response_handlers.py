"""
UI response handler functions using functional programming approach.
All functions are pure - return notification data without side effects.
"""

from typing import Dict, List, Any, Optional
import logging

logger = logging.getLogger(__name__)


def handle_creation_success(entity: str, name: Optional[str] = None) -> Dict[str, Any]:
    """
    Prepare the notification shown after a record was created.

    Args:
        entity: Entity label, e.g. 'Exhibition'
        name: Display name of the new record

    Returns:
        Dictionary containing notification data
    """
    subject = f"{entity} '{name}'" if name else entity
    return {
        'type': 'success',
        'title': f'{entity} Saved',
        'message': f"{subject} saved successfully!",
        'close_popup': True,
        'refresh_list': True,
    }


def handle_creation_error(
    entity: str,
    error_message: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Prepare the notification for a failed create or update call.
    The popup stays open so the user can correct and resubmit.

    Args:
        entity: Entity label
        error_message: Message returned by the server, if any
        suggestions: Hints shown under the message

    Returns:
        Dictionary containing notification data
    """
    if suggestions is None:
        suggestions = [
            "Check your connection to the server",
            "Review the highlighted fields and try again",
        ]

    return {
        'type': 'error',
        'title': f'Failed to save {entity.lower()}',
        'message': error_message or f"Failed to save {entity.lower()}.",
        'suggestions': suggestions,
        'close_popup': False,
        'refresh_list': False,
    }


def handle_validation_error(errors: Dict[str, str]) -> Dict[str, Any]:
    """Notification for a submit attempt blocked by invalid fields."""
    return {
        'type': 'error',
        'title': 'Invalid form',
        'message': "Please fix the highlighted errors.",
        'fields': sorted(errors),
        'close_popup': False,
        'refresh_list': False,
    }


def handle_loading_error(entity: str, error_message: str) -> Dict[str, Any]:
    """
    Prepare the notification for a list or detail fetch that failed.

    Args:
        entity: Plural entity label, e.g. 'products'
        error_message: Error message

    Returns:
        Dictionary containing notification data
    """
    return {
        'type': 'error',
        'title': f'Failed to load {entity}',
        'message': f"Failed to load {entity}. Please try again.",
        'details': error_message,
    }


def handle_deletion_success(entity: str, bulk: bool = False) -> Dict[str, Any]:
    """Notification after a single or bulk delete."""
    return {
        'type': 'success',
        'title': 'Deleted',
        'message': f"All {entity} deleted" if bulk else f"{entity} deleted",
        'refresh_list': True,
    }


def handle_deletion_error(entity: str, error_message: str, bulk: bool = False) -> Dict[str, Any]:
    return {
        'type': 'error',
        'title': 'Delete failed',
        'message': f"Failed to delete {'all ' if bulk else ''}{entity}",
        'details': error_message,
        'refresh_list': False,
    }


def handle_login_result(landing_page: str, role: Optional[str], failed: bool) -> Dict[str, Any]:
    """Notification after a login attempt."""
    if failed:
        return {'type': 'error', 'message': "Login failed!", 'switch_to': landing_page}
    if role == "ADMIN":
        return {'type': 'success', 'message': "Admin Login successful!", 'switch_to': landing_page}
    return {'type': 'success', 'message': "Login successful!", 'switch_to': landing_page}

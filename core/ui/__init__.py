"""
UI service layer using functional programming approach.
Handles session context, navigation decisions and notification payloads.
"""

from .state_management import (
    PAGES,
    anonymous_context,
    build_session_context,
    is_admin,
    landing_page_for,
    replace_collection,
    initial_bulk_delete_state,
    request_bulk_delete,
    cancel_bulk_delete,
    confirm_bulk_delete,
    bulk_delete_prompt,
    prepare_dashboard_counts,
    prepare_product_summary,
)

from .response_handlers import (
    handle_creation_success,
    handle_creation_error,
    handle_validation_error,
    handle_loading_error,
    handle_deletion_success,
    handle_deletion_error,
    handle_login_result,
)

__all__ = [
    'PAGES',
    'anonymous_context',
    'build_session_context',
    'is_admin',
    'landing_page_for',
    'replace_collection',
    'initial_bulk_delete_state',
    'request_bulk_delete',
    'cancel_bulk_delete',
    'confirm_bulk_delete',
    'bulk_delete_prompt',
    'prepare_dashboard_counts',
    'prepare_product_summary',
    'handle_creation_success',
    'handle_creation_error',
    'handle_validation_error',
    'handle_loading_error',
    'handle_deletion_success',
    'handle_deletion_error',
    'handle_login_result',
]

"""UI components module."""

# Session, navigation and notification helpers
from .session import (
    configure_logging,
    get_client,
    current_context,
    set_context,
    require_login,
    page_state,
    load_collection,
    mark_stale,
    notify,
    flash,
    show_flash,
    sidebar_navigation,
)

# Tables
from .tables import (
    render_record_table,
    render_summary_cards,
    record_details,
)

# Dialogs and forms
from .forms import (
    exhibition_dialog,
    exhibition_edit_dialog,
    company_dialog,
    company_edit_dialog,
    product_dialog,
    product_edit_dialog,
    service_dialog,
    organiser_dialog,
    render_signup_form,
    delete_all_dialog,
    delete_record,
    open_dialog,
    reset_popup,
    close_dialogs,
)

__all__ = [
    'configure_logging',
    'get_client',
    'current_context',
    'set_context',
    'require_login',
    'page_state',
    'load_collection',
    'mark_stale',
    'notify',
    'flash',
    'show_flash',
    'sidebar_navigation',
    'render_record_table',
    'render_summary_cards',
    'record_details',
    'exhibition_dialog',
    'exhibition_edit_dialog',
    'company_dialog',
    'company_edit_dialog',
    'product_dialog',
    'product_edit_dialog',
    'service_dialog',
    'organiser_dialog',
    'render_signup_form',
    'delete_all_dialog',
    'delete_record',
    'open_dialog',
    'reset_popup',
    'close_dialogs',
]

"""
UI Package for OneExhib

This package provides the Streamlit components used by the admin pages.
- components: session helpers, record tables and create/edit dialogs
"""

from . import components

__all__ = ['components']

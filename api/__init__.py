"""
REST client for the exhibition-management backend.

The client covers organisers, exhibitions, companies, products, services
and login. Every failure is raised as ApiError with a user-facing message.
"""

from .client import ApiClient, LOGIN_FAILED
from .exceptions import ApiError

__all__ = [
    'ApiClient',
    'ApiError',
    'LOGIN_FAILED',
]

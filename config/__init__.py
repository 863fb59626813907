"""
OneExhib Configuration Module.

This module provides a clean API for loading and accessing configuration data.
It handles loading config.yaml from the project root and provides default values
for missing or incomplete configuration.

Usage:
    from config import config, get_api_config, get_upload_config

    # Access full configuration
    listing = config['listing']

    # Access specific sections
    api_config = get_api_config()
    brochure = get_upload_config('documents')
"""

import logging
from typing import Dict, Any

from .loader import (
    ConfigurationError,
    load_config,
    get_config_section,
    validate_config,
)
from .defaults import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

# Load configuration on module import
_config = load_config()

# Validate configuration
if not validate_config(_config):
    logger.warning("Configuration validation failed, some features may not work properly")

# Make configuration available as module-level variable
config = _config


def get_config() -> Dict[str, Any]:
    """
    Get the complete configuration dictionary.

    Returns:
        Complete configuration dictionary with defaults applied.
    """
    return config


def get_api_config() -> Dict[str, Any]:
    """Get the backend API configuration section."""
    return get_config_section(config, 'api')


def get_listing_config() -> Dict[str, Any]:
    """Get the list screen configuration section."""
    return get_config_section(config, 'listing')


def get_logging_config() -> Dict[str, Any]:
    """Get the logging configuration section."""
    return get_config_section(config, 'logging')


def get_upload_config(kind: str) -> Dict[str, Any]:
    """
    Get the upload limits for one kind of file input.

    Args:
        kind: Upload kind (e.g. 'documents', 'images', 'company_image')

    Returns:
        Dictionary with 'max_bytes' and 'allowed_types'.

    Raises:
        ConfigurationError: If the upload kind is not configured
    """
    uploads = get_config_section(config, 'uploads')
    if kind not in uploads:
        raise ConfigurationError(f"'uploads.{kind}' section missing from config.yaml")
    return uploads[kind]


def get_page_size(admin: bool = False) -> int:
    """Get the page size for organiser or admin list screens."""
    listing = get_listing_config()
    key = 'admin_page_size' if admin else 'page_size'
    return int(listing.get(key, DEFAULT_CONFIG['listing'][key]))


__all__ = [
    'config',
    'ConfigurationError',
    'DEFAULT_CONFIG',
    'get_config',
    'get_api_config',
    'get_listing_config',
    'get_logging_config',
    'get_upload_config',
    'get_page_size',
    'load_config',
    'validate_config',
]

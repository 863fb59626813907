"""
Configuration loader for the OneExhib admin client.

This module handles loading and parsing the config.yaml file with proper
error handling and fallback to default values.
"""

import os
import yaml
import logging
from typing import Dict, Any, Optional
from pathlib import Path

from .defaults import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

API_URL_ENV = "ONEXHIB_API_URL"


class ConfigurationError(Exception):
    """Raised when a configuration section is missing or unusable."""
    pass


def get_config_path() -> Path:
    """Get the path to the config.yaml file in the project root."""
    current_dir = Path(__file__).parent
    project_root = current_dir.parent
    return project_root / "config.yaml"


def load_yaml_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Optional path to config file. If None, uses default location.

    Returns:
        Dictionary containing configuration data, or empty dict if file not found.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        logger.warning(f"Config file not found at {config_path}, using defaults")
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)
            if config_data is None:
                logger.warning(f"Config file {config_path} is empty, using defaults")
                return {}
            if not isinstance(config_data, dict):
                logger.error(f"Config file {config_path} must contain a mapping, using defaults")
                return {}
            return config_data
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML config file {config_path}: {e}")
        return {}
    except OSError as e:
        logger.error(f"Error reading config file {config_path}: {e}")
        return {}


def merge_config(default_config: Dict[str, Any], user_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge user configuration with default configuration.

    Args:
        default_config: Default configuration dictionary
        user_config: User configuration dictionary

    Returns:
        Merged configuration dictionary
    """
    merged = default_config.copy()

    for key, value in user_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_environment(config: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Apply the backend URL override from the environment.

    Args:
        config: Merged configuration dictionary
        environ: Environment mapping, defaults to os.environ

    Returns:
        New configuration dictionary with the override applied.
    """
    if environ is None:
        environ = os.environ

    api_url = environ.get(API_URL_ENV, "").strip()
    if not api_url:
        return config

    updated = config.copy()
    updated['api'] = {**config.get('api', {}), 'base_url': api_url}
    return updated


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load and merge configuration from YAML file with defaults.

    Args:
        config_path: Optional path to config file. If None, uses default location.

    Returns:
        Complete configuration dictionary with defaults applied.
    """
    user_config = load_yaml_config(config_path)
    return apply_environment(merge_config(DEFAULT_CONFIG, user_config))


def get_config_section(config: Dict[str, Any], section: str) -> Dict[str, Any]:
    """
    Get a specific configuration section.

    Args:
        config: Full configuration dictionary
        section: Section name to retrieve

    Returns:
        Configuration section dictionary, or empty dict if not found.
    """
    return config.get(section, {})


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise.
    """
    required_sections = ['api', 'listing', 'uploads', 'logging']

    for section in required_sections:
        if section not in config:
            logger.error(f"Missing required configuration section: {section}")
            return False

    api = config.get('api', {})
    if not api.get('base_url'):
        logger.error("Missing 'base_url' in api configuration")
        return False

    listing = config.get('listing', {})
    for key in ('page_size', 'admin_page_size'):
        value = listing.get(key)
        if not isinstance(value, int) or value < 1:
            logger.error(f"'listing.{key}' must be a positive integer, got {value!r}")
            return False

    uploads = config.get('uploads', {})
    for name, upload in uploads.items():
        if 'max_bytes' not in upload or 'allowed_types' not in upload:
            logger.error(f"Upload configuration '{name}' needs max_bytes and allowed_types")
            return False

    return True

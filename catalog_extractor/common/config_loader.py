"""
Configuration Loader

Loads YAML configuration for fetching, per-platform pagination,
export layout and the relay endpoint.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

SETTINGS_FILE = 'settings.yaml'

# Bounds for the per-request wait, in seconds
MIN_TIMEOUT = 15
MAX_TIMEOUT = 25
DEFAULT_TIMEOUT = 20


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'settings.yaml')

    Returns:
        Parsed YAML content as dictionary (empty if the file is empty)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_settings() -> Dict[str, Any]:
    """Load the main settings file."""
    return load_config(SETTINGS_FILE)


def get_platform_settings(settings: Optional[Dict[str, Any]], platform: str) -> Dict[str, Any]:
    """
    Get the settings block for one platform.

    Args:
        settings: Full settings dict (if None, loads from config)
        platform: Registry key (e.g., 'shopify-admin')

    Returns:
        Platform settings, empty dict if the platform has none
    """
    if settings is None:
        settings = load_settings()
    return (settings.get('platforms') or {}).get(platform) or {}


def get_fetch_timeout(settings: Optional[Dict[str, Any]] = None) -> float:
    """
    Get the per-request timeout, clamped to the supported range.

    Missing or non-numeric values fall back to DEFAULT_TIMEOUT.

    Example:
        >>> get_fetch_timeout({'fetch': {'timeout': 60}})
        25
    """
    if settings is None:
        settings = load_settings()
    raw = (settings.get('fetch') or {}).get('timeout')
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        timeout = DEFAULT_TIMEOUT
    return max(MIN_TIMEOUT, min(MAX_TIMEOUT, timeout))

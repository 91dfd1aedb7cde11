"""Configuration management for Settle Calc.

Configuration lives in a single directory:

1. settings.json - Machine-specific settings
   - rules_year: default tax rules year used when a command gets none

2. tax_rules/{year}.yaml - Optional overrides of the bundled tax rules.
   Bracket tables change by calendar year and jurisdiction, so an override
   file fully replaces the bundled file for that year.

Config directory resolution:
1. SETTLE_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/settle-calc/ (XDG_CONFIG_HOME fallback)
"""

import json
import os
from pathlib import Path
from typing import Any


APP_NAME = "settle-calc"
SETTINGS_FILENAME = "settings.json"
RULES_DIRNAME = "tax_rules"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. SETTLE_CALC_CONFIG_PATH environment variable
    2. ~/.config/settle-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get("SETTLE_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def get_rules_override_dir() -> Path:
    """Get the directory holding user tax rules overrides (may not exist)."""
    return get_config_dir() / RULES_DIRNAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Args:
        settings: Settings dictionary to save

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json.

    Args:
        key: Setting key (e.g., "rules_year")
        default: Default value if key not found

    Returns:
        Setting value or default
    """
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Returns:
        Path to the saved settings file
    """
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)

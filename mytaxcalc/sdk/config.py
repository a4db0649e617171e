"""Configuration management for My Tax Calc.

Configuration lives in a single file:

settings.json - Machine-specific preferences
   - year: default tax year used when --year is not given
   - format: default output format for the CLI ("text" or "json")

Config directory resolution:
1. MY_TAX_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/my-tax-calc/ (XDG_CONFIG_HOME fallback)

Claimed amounts (income, reliefs, rebates) are never written here; they are
supplied on every calculation.
"""

import json
import os
from pathlib import Path
from typing import Any


APP_NAME = "my-tax-calc"
SETTINGS_FILENAME = "settings.json"

DEFAULT_YEAR = "2024"
OUTPUT_FORMATS = ("text", "json")


class SettingsError(Exception):
    """Raised when settings.json holds an unusable value."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. MY_TAX_CALC_CONFIG_PATH environment variable
    2. ~/.config/my-tax-calc/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    # 1. Check environment variable
    env_path = os.environ.get("MY_TAX_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    # 2. Fall back to XDG config path
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)

    Raises:
        SettingsError: If the file exists but is not a JSON object
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        try:
            settings = json.load(f)
        except json.JSONDecodeError as e:
            raise SettingsError(f"Invalid JSON in {settings_file}: {e}") from e

    if not isinstance(settings, dict):
        raise SettingsError(f"Expected a JSON object in {settings_file}")
    return settings


def save_settings(settings: dict) -> Path:
    """Save settings to settings.json.

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
    """Get a setting value from settings.json."""
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


def clear_setting(key: str) -> bool:
    """Remove a setting from settings.json.

    Returns:
        True if the key was present and removed
    """
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def get_default_year() -> str:
    """Tax year to use when none is given explicitly."""
    return str(get_setting("year", DEFAULT_YEAR))


def get_default_format() -> str:
    """Output format to use when none is given explicitly."""
    fmt = get_setting("format", "text")
    if fmt not in OUTPUT_FORMATS:
        raise SettingsError(
            f"Invalid format '{fmt}' in {get_settings_path()}. "
            f"Must be one of: {', '.join(OUTPUT_FORMATS)}"
        )
    return fmt

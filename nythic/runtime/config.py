"""Configuration loading."""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = Path("config/default.yaml")

# Environment variable -> (section, key)
_ENV_OVERRIDES = {
    "NYTHIC_TIMEOUT_MS": ("inactivity", "total_timeout_ms"),
    "NYTHIC_WARNING_MS": ("inactivity", "warning_lead_ms"),
}


def default_config() -> dict[str, Any]:
    """Built-in configuration used when no file is found."""
    return {
        "inactivity": {
            "total_timeout_ms": 30 * 60 * 1000,
            "warning_lead_ms": 2 * 60 * 1000,
        },
        "logout": {
            "max_retries": 3,
            "retry_delay_ms": 1000,
            "notice": "You have been logged out due to inactivity",
        },
    }


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML, then apply environment overrides.

    Args:
        config_path: Path to config file (defaults to config/default.yaml).

    Returns:
        Configuration dictionary.
    """
    load_dotenv()

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config = default_config()
    if config_path.exists():
        with open(config_path) as f:
            loaded: dict[str, Any] = yaml.safe_load(f) or {}
        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config.setdefault(section, {})[key] = int(value)

    return config

"""Configuration file handling for vimstat."""

from pathlib import Path
from typing import Any

import yaml


FETCHERS = ('http', 'command')

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "fetcher": "http",
    "timeout": 30,
    "user_agent": None,
    "scrape_title": True,
}

# Example config file content
DEFAULT_CONFIG_YAML = """\
# vimstat configuration
# Location: ~/.vimstat.yml
#
# Built-in defaults are noted in [brackets] for each setting.

# How pages are fetched: http (built-in client) or command (wget | grep | sed)
fetcher: http          # [http]
timeout: 30            # Seconds per page fetch [30]
# user_agent:          # HTTP User-Agent header [vimstat/<version>]

# Scrape the video title; records without a title are rejected
scrape_title: true     # [true]
"""


def get_config_path() -> Path:
    """Return the default config file path (~/.vimstat.yml)."""
    return Path.home() / ".vimstat.yml"


def init_config(path: Path | None = None) -> Path:
    """Write the example config file. Returns the path to the created file."""
    config_path = path or get_config_path()
    if config_path.exists():
        raise FileExistsError(f"Config file already exists: {config_path}")
    config_path.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
    return config_path


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from file, falling back to defaults.

    A missing file is not an error; the built-in defaults are used.

    Args:
        path: Optional path to config file. Uses ~/.vimstat.yml if not specified.

    Returns:
        Config dict with file values merged over defaults.

    Raises:
        ValueError: If the file is not valid YAML or holds invalid values.
    """
    config_path = path or get_config_path()
    config = DEFAULT_CONFIG.copy()

    if not config_path.exists():
        return config

    try:
        with open(config_path, encoding="utf-8") as f:
            file_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file {config_path}: {e}") from e

    if not isinstance(file_config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")

    config = _merge_dicts(config, file_config)
    validate_config(config, config_path)
    return config


def validate_config(config: dict[str, Any], source: Path | str = "config") -> None:
    """Check config values, raising ValueError on the first bad one."""
    if config.get("fetcher") not in FETCHERS:
        raise ValueError(
            f"{source}: fetcher must be one of {', '.join(FETCHERS)}, "
            f"got {config.get('fetcher')!r}"
        )

    timeout = config.get("timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError(f"{source}: timeout must be a positive number, got {timeout!r}")

    if not isinstance(config.get("scrape_title"), bool):
        raise ValueError(
            f"{source}: scrape_title must be true or false, "
            f"got {config.get('scrape_title')!r}"
        )


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries. Override values take precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_dicts(result[key], value)
        else:
            result[key] = value
    return result

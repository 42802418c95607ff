"""Configuration management for ynab-sync."""

import json
import os
from pathlib import Path
from typing import Any

from ynab_sync.errors import ArgumentError
from ynab_sync.models import N26Credentials

# Default config filename
CONFIG_FILENAME = "config.json"


def get_config_dir() -> Path:
    """Get the config directory path (XDG compliant)."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / "ynab-sync"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / CONFIG_FILENAME


def find_config_file() -> Path | None:
    """Find the config file in standard locations.

    Searches for config in the following order:
    1. config.json in current directory
    2. XDG config: ~/.config/ynab-sync/config.json
    """
    for path in [Path(CONFIG_FILENAME), get_config_path()]:
        if path.exists():
            return path

    return None


def load_json_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file.

    Raises:
        ArgumentError: If the file cannot be read or is not a JSON object
    """
    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as err:
        raise ArgumentError(f"Can not load config file {config_path}: {err}") from err

    if not isinstance(data, dict):
        raise ArgumentError(f"Config file {config_path} must contain a JSON object")
    return data


def load_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load configuration from config file.

    Args:
        config_path: Explicit path to config.json file

    Returns:
        Loaded config dict or None if not found
    """
    if config_path:
        return load_json_config(config_path)

    config_file = find_config_file()
    if config_file:
        return load_json_config(config_file)

    return None


def _section(config: dict[str, Any] | None, name: str) -> dict[str, Any]:
    if not config:
        return {}
    section = config.get(name) or {}
    return section if isinstance(section, dict) else {}


def resolve_value(
    override: str | None,
    env_var: str | None,
    config: dict[str, Any] | None,
    section: str,
    key: str,
) -> str | None:
    """Pick a setting from, in order: override, environment, config file."""
    if override:
        return override

    if env_var and (value := os.getenv(env_var)):
        return value

    value = _section(config, section).get(key)
    return str(value) if value else None


def require(value: str | None, description: str, flag: str) -> str:
    """Return ``value`` or raise ArgumentError naming the missing option."""
    if not value:
        raise ArgumentError(f"{description} required. Use {flag} or configure it in config.json")
    return value


def get_ynab_token(
    config: dict[str, Any] | None = None,
    override: str | None = None,
) -> str | None:
    """Get the YNAB personal access token."""
    return resolve_value(override, "YNAB_TOKEN", config, "ynab", "token")


def get_ynab_budget_id(
    config: dict[str, Any] | None = None,
    override: str | None = None,
) -> str | None:
    """Get the YNAB budget id."""
    return resolve_value(override, "YNAB_BUDGET_ID", config, "ynab", "budget_id")


def get_ynab_account_id(
    config: dict[str, Any] | None = None,
    override: str | None = None,
) -> str | None:
    """Get the YNAB account id."""
    return resolve_value(override, "YNAB_ACCOUNT_ID", config, "ynab", "account_id")


def get_n26_credentials(
    config: dict[str, Any] | None = None,
    username: str | None = None,
    password: str | None = None,
) -> N26Credentials:
    """Get N26 login credentials.

    Raises:
        ArgumentError: If username or password is not configured
    """
    return N26Credentials(
        username=require(
            resolve_value(username, "N26_USERNAME", config, "n26", "username"),
            "N26 username",
            "--n26-username",
        ),
        password=require(
            resolve_value(password, "N26_PASSWORD", config, "n26", "password"),
            "N26 password",
            "--n26-password",
        ),
    )


def get_category_mapping_path(
    config: dict[str, Any] | None = None,
    override: str | None = None,
) -> Path | None:
    """Get the category mapping file path."""
    if override:
        return Path(override)
    if config and config.get("category_mapping"):
        return Path(str(config["category_mapping"])).expanduser()
    return None

"""
Configuration loader for trac_digest.

The tool reads an optional JSON configuration file named
``.tracdigest_config.json`` located in the ``~/.tracdigest/`` directory
in the user's home directory. Settings found there are layered over the
built-in defaults; command line options in turn take precedence over
the file.

If the configuration file exists but is unreadable, malformed, or holds
values of the wrong type, a :class:`ConfigError` is raised.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from trac_digest.trac.client import DEFAULT_BASE_URL, DEFAULT_LIMIT, DEFAULT_USER_AGENT


logger = logging.getLogger(__name__)
# Attach a null handler to avoid "No handler" warnings in environments
# where the root logger is not configured. The CLI configures logging
# explicitly when it runs.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


CONFIG_FILENAME = ".tracdigest_config.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "base_url": DEFAULT_BASE_URL,
    "request_timeout": 30,
    "limit": DEFAULT_LIMIT,
    "max_workers": None,
    "user_agent": DEFAULT_USER_AGENT,
}


class ConfigError(Exception):
    """Raised when the trac_digest configuration file is invalid."""

    pass


def _get_config_directory() -> Path:
    """Return the directory holding the configuration file (``~/.tracdigest/``)."""
    return Path.home() / ".tracdigest"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _validate(data: Dict[str, Any]) -> None:
    if "base_url" in data and not isinstance(data["base_url"], str):
        raise ConfigError("'base_url' must be a string")
    if "user_agent" in data and not isinstance(data["user_agent"], str):
        raise ConfigError("'user_agent' must be a string")
    if "request_timeout" in data and not (_is_number(data["request_timeout"]) and data["request_timeout"] > 0):
        raise ConfigError("'request_timeout' must be a positive number")
    if "limit" in data and not _is_positive_int(data["limit"]):
        raise ConfigError("'limit' must be a positive integer")
    if "max_workers" in data and data["max_workers"] is not None and not _is_positive_int(data["max_workers"]):
        raise ConfigError("'max_workers' must be a positive integer or null")


def load_config() -> Dict[str, Any]:
    """Load the configuration, falling back to defaults.

    Returns:
        A dictionary with the keys:
        - base_url (str): Root URL of the Trac environment
        - request_timeout (int|float): HTTP timeout in seconds
        - limit (int): Maximum number of revisions to request
        - max_workers (int|None): Bound on concurrent ticket lookups
        - user_agent (str): User-Agent header for requests

    Raises:
        ConfigError: If the configuration file is malformed or invalid.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = _get_config_directory() / CONFIG_FILENAME

    if not config_path.exists():
        logger.debug("No configuration file at %s; using defaults", config_path)
        return config

    try:
        content = config_path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to read or parse configuration file: %s", exc)
        raise ConfigError(f"Invalid JSON in {config_path.name}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a JSON object")

    _validate(data)

    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        logger.debug("Ignoring unknown configuration keys: %s", unknown)
    config.update({key: value for key, value in data.items() if key in DEFAULT_CONFIG})

    logger.debug("Loaded configuration from: %s", config_path)
    return config

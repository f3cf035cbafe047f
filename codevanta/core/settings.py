# -*- coding: utf-8 -*-
"""
CodeVanta Settings Module
Persist settings in a small JSON parameter file under the user config dir.

Credentials are read once at startup by the service container; nothing in
the sync engine re-reads them afterwards.
"""

import json
import os
from pathlib import Path

from codevanta.core import log

CONFIG_DIR_ENV = "CODEVANTA_CONFIG_DIR"
GITHUB_TOKEN_ENV = "CODEVANTA_GITHUB_TOKEN"
ASSISTANT_KEY_ENV = "CODEVANTA_ASSISTANT_KEY"
SETTINGS_FILENAME = "settings.json"


def get_settings_path():
    """
    Get the path of the settings file

    Returns:
        Path to settings.json (the file may not exist yet)
    """
    base = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if base:
        return Path(base) / SETTINGS_FILENAME
    return Path.home() / ".config" / "codevanta" / SETTINGS_FILENAME


def _read_all():
    path = get_settings_path()
    if not path.is_file():
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("settings file does not contain an object")
    return data


def _write_all(data):
    path = get_settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")


def save_setting(key, value):
    """
    Save a generic string setting

    Args:
        key: Setting key name
        value: Setting value (string)
    """
    try:
        data = _read_all()
        data[key] = str(value)
        _write_all(data)
        log.debug(f"Saved setting {key}")
    except Exception as e:
        log.error(f"Failed to save setting {key}: {e}")


def load_setting(key, default=""):
    """
    Load a generic string setting

    Args:
        key: Setting key name
        default: Default value if not found

    Returns:
        Setting value string
    """
    try:
        value = _read_all().get(key, default)
        return str(value) if value is not None else default
    except Exception as e:
        log.error(f"Failed to load setting {key}: {e}")
        return default


def remove_setting(key):
    """Remove a setting if present."""
    try:
        data = _read_all()
        if key in data:
            del data[key]
            _write_all(data)
    except Exception as e:
        log.error(f"Failed to remove setting {key}: {e}")


# --- GitHub connection ---


def save_github_host(host):
    """
    Save GitHub API host (supports GitHub Enterprise).

    Args:
        host: str GitHub API host (e.g., "api.github.com")
    """
    save_setting("GitHubHost", host or "api.github.com")


def load_github_host():
    """
    Load GitHub API host.

    Returns:
        str: GitHub API host (default "api.github.com")
    """
    return load_setting("GitHubHost", "api.github.com")


def save_github_token(token):
    """Persist the GitHub access token."""
    save_setting("GitHubToken", token or "")


def load_github_token():
    """
    Load the GitHub access token.

    The environment variable wins over the settings file.

    Returns:
        str | None: token if configured
    """
    token = os.environ.get(GITHUB_TOKEN_ENV, "").strip()
    if token:
        return token
    token = load_setting("GitHubToken", "")
    return token if token else None


# --- Assistant ---


def save_assistant_key(key):
    """Persist the assistant API key (consumed outside the sync engine)."""
    save_setting("AssistantKey", key or "")


def load_assistant_key():
    """
    Load the assistant API key.

    Returns:
        str | None: key if configured
    """
    key = os.environ.get(ASSISTANT_KEY_ENV, "").strip()
    if key:
        return key
    key = load_setting("AssistantKey", "")
    return key if key else None


def credentials_configured():
    """
    Both credentials must be present before the surrounding app proceeds.

    Returns:
        bool
    """
    return bool(load_github_token()) and bool(load_assistant_key())


def clear_credentials():
    """Forget stored credentials (logout)."""
    remove_setting("GitHubToken")
    remove_setting("AssistantKey")
    log.info("Cleared stored credentials")


# --- HTTP ---


def save_user_agent(user_agent):
    """Save the User-Agent sent with API requests."""
    save_setting("UserAgent", user_agent or "")


def load_user_agent():
    """Load the User-Agent sent with API requests."""
    return load_setting("UserAgent", "CodeVanta/1.0") or "CodeVanta/1.0"

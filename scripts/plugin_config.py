"""
Shared config file for the plugins in this repo.

Both plugins read one JSON object from ${PLUGIN_ROOT}/.config/config.json
(SOUND_CONFIG_PATH points it elsewhere). Each plugin owns its own keys and
its own defaults: the sound notifications use "sounds_dir", "player" and
"events", the read guard uses "protection".

The file is hand-edited, so readers check value types. A value of the
wrong type is logged and the caller's default is used instead.
"""
import copy
import json
import logging
import os
from pathlib import Path

_PLUGIN_ROOT = Path(__file__).parent.parent
_CONFIG_DIR = _PLUGIN_ROOT / ".config"

log = logging.getLogger(__name__)


def get_config_dir() -> Path:
    return _CONFIG_DIR


def get_config_path() -> Path:
    """Config file path. Override with SOUND_CONFIG_PATH env var."""
    env_path = os.environ.get("SOUND_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    return _CONFIG_DIR / "config.json"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base, returning new dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(defaults: dict | None = None) -> dict:
    """Load the config file merged over ``defaults``.

    A missing, unreadable or non-object file yields a copy of the defaults.
    """
    defaults = defaults or {}
    config_path = get_config_path()
    if not config_path.exists():
        return copy.deepcopy(defaults)

    try:
        with open(config_path) as f:
            file_config = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        log.warning(f"Ignoring unreadable config {config_path}: {e}")
        return copy.deepcopy(defaults)

    if not isinstance(file_config, dict):
        log.warning(f"Ignoring config {config_path}: top level is not an object")
        return copy.deepcopy(defaults)
    return _deep_merge(defaults, file_config)


def save_config(config: dict) -> None:
    """Save configuration to file, creating directory if needed."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)


def get_section(config: dict, key: str) -> dict:
    """config[key] when it is an object, else {}."""
    if key not in config:
        return {}
    value = config[key]
    if not isinstance(value, dict):
        log.warning(f"Ignoring config {key!r}: expected an object, got {value!r}")
        return {}
    return value


def get_string_list(section: dict, key: str) -> list[str] | None:
    """section[key] as a list of non-empty strings.

    Returns None when the key is absent or holds anything else (a bare
    string included, so "read" is not taken as ['r', 'e', 'a', 'd']).
    """
    if key not in section:
        return None
    value = section[key]
    if isinstance(value, list) and all(isinstance(item, str) and item for item in value):
        return list(value)
    log.warning(f"Ignoring config {key!r}: expected a list of strings, got {value!r}")
    return None

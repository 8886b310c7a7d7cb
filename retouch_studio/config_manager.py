import json
import logging
import os

logger = logging.getLogger(__name__)

# We define the file name here
CONFIG_FILE = "config.json"
OVERRIDE_ENV = "RETOUCH_STUDIO_CONFIG"


def _merge(base, override):
    """Recursively merge ``override`` into ``base`` (in place)."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def _read_json(path):
    with open(path, 'r', encoding='utf-8') as file:
        return json.load(file)


def load_config(override_path=None):
    """
    Load the packaged config.json, then merge a user override on top.

    The override comes from ``override_path`` or the RETOUCH_STUDIO_CONFIG
    environment variable. A broken override is logged and ignored; a broken
    packaged file is a packaging bug and raises.
    """
    base_path = os.path.dirname(os.path.abspath(__file__))
    config = _read_json(os.path.join(base_path, CONFIG_FILE))

    override_path = override_path or os.environ.get(OVERRIDE_ENV)
    if not override_path:
        return config

    try:
        override = _read_json(override_path)
    except FileNotFoundError:
        logger.error("Config override not found: %s", override_path)
        return config
    except json.JSONDecodeError as e:
        logger.error("Config override is not valid JSON (%s): %s", override_path, e)
        return config

    if not isinstance(override, dict):
        logger.error("Config override must be a JSON object: %s", override_path)
        return config

    return _merge(config, override)


CONFIG = load_config()

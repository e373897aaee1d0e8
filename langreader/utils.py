import json
import logging
import os
from functools import lru_cache

from dotenv import load_dotenv, find_dotenv

logger = logging.getLogger(__name__)


def _load_environment() -> None:
    explicit_path = os.environ.get("LANGREADER_ENV_FILE")
    if explicit_path:
        load_dotenv(explicit_path, override=False)
        return
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path, override=False)


_load_environment()


def ensure_directory(path):
    resolved = os.path.abspath(os.path.expanduser(str(path)))
    os.makedirs(resolved, exist_ok=True)
    return resolved


@lru_cache(maxsize=1)
def get_user_settings_dir():
    override = os.environ.get("LANGREADER_SETTINGS_DIR")
    if override:
        return ensure_directory(override)

    data_root = os.environ.get("LANGREADER_DATA") or os.environ.get("LANGREADER_DATA_DIR")
    if data_root:
        try:
            return ensure_directory(os.path.join(data_root, "settings"))
        except OSError as exc:
            logger.debug("Cannot use data directory %s for settings: %s", data_root, exc)

    from platformdirs import user_config_dir

    config_dir = user_config_dir("langreader", appauthor=False, roaming=True, ensure_exists=True)
    return ensure_directory(config_dir)


def get_user_config_path():
    return os.path.join(get_user_settings_dir(), "config.json")


def load_config():
    try:
        with open(get_user_config_path(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("Ignoring unreadable reader config: %s", exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config):
    try:
        with open(get_user_config_path(), "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
    except OSError as exc:
        logger.warning("Unable to save reader config: %s", exc)

"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores user preferences that must be known before opening the DB (db_folder,
log_level). Config lives in ~/.moneymanager/config.json and is edited by
hand; the app only reads it.
"""
import json
import logging
from pathlib import Path

CONFIG_DIR = Path.home() / ".moneymanager"
CONFIG_FILE = CONFIG_DIR / "config.json"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DEFAULT_LOG_LEVEL = "INFO"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return {}


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def get_log_level() -> str:
    level = str(load_config().get("log_level", DEFAULT_LOG_LEVEL)).upper()
    return level if level in logging.getLevelNamesMapping() else DEFAULT_LOG_LEVEL


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or get_log_level(), format=LOG_FORMAT)

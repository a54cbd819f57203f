"""
Runtime settings stored in the server_settings table.

The table is seeded from DEFAULT_SETTINGS on startup and re-read periodically,
so feature flags such as REGISTER_ENDPOINT_ENABLED can be switched without a
restart. Request handlers read the parsed values through get_setting.
"""
import logging
from typing import Any, Dict, Union

from sqlalchemy.orm import Session

from ..models.db_server_setting import ServerSetting
from .settings import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

SettingValue = Union[bool, int, str]

# Replaced as a whole on every load, never mutated in place
db_settings_cache: Dict[str, SettingValue] = {}


def _kind(default: str) -> str:
    """The type a setting takes, judged from its default."""
    if default.lower() in ("true", "false"):
        return "boolean"
    if default.isdigit():
        return "integer"
    return "string"


def _parse(raw: str, default: str) -> SettingValue:
    kind = _kind(default)
    if kind == "boolean":
        return raw.strip().lower() == "true"
    if kind == "integer":
        return int(raw)
    return raw


def load_settings_from_db(db: Session) -> Dict[str, SettingValue]:
    """
    Reads every known setting, falling back to its default when the row is
    missing. A value that does not parse is kept as the raw string.
    Logs each setting whose value differs from the previous load.
    """
    global db_settings_cache
    stored = {str(row.name): str(row.value) for row in db.query(ServerSetting).all()}

    loaded: Dict[str, SettingValue] = {}
    for name, default in DEFAULT_SETTINGS.items():
        raw = stored.get(name, default)
        try:
            loaded[name] = _parse(raw, default)
        except ValueError as e:
            logger.warning("Setting '%s' value '%s' is not a valid %s: %s. Using the raw string.",
                           name, raw, _kind(default), e)
            loaded[name] = raw

    if db_settings_cache:
        for name, value in loaded.items():
            previous = db_settings_cache.get(name)
            if previous != value:
                logger.info("Setting '%s' changed from %r to %r.", name, previous, value)

    db_settings_cache = loaded
    return db_settings_cache


def get_setting(name: str) -> Any:
    """
    Raises RuntimeError before the first load and KeyError for a name that is
    not in DEFAULT_SETTINGS.
    """
    if not db_settings_cache:
        raise RuntimeError("Settings not loaded from DB. Application might not have initialized correctly.")
    try:
        return db_settings_cache[name]
    except KeyError as exc:
        raise KeyError(f"Setting '{name}' not found. Ensure it is defined in DEFAULT_SETTINGS.") from exc


def describe_settings() -> str:
    """One-line summary of the loaded settings, for the startup log."""
    return ", ".join(f"{name}={value}" for name, value in sorted(db_settings_cache.items()))


def initialize_db_with_default_settings(db: Session) -> None:
    """Inserts a row for every setting that has none yet. Existing rows are left alone."""
    existing = {name for (name,) in db.query(ServerSetting.name).all()}
    for name, default in DEFAULT_SETTINGS.items():
        if name in existing:
            continue
        db.add(ServerSetting(
            name=name,
            value=default,
            description=f"Default value for {name}. Inferred type: {_kind(default)}.",
        ))
        logger.info("Seeded setting '%s' with default '%s'.", name, default)
    db.commit()

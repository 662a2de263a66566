"""Settings cache: typed configuration values with bounded staleness."""
from datetime import datetime
from typing import Dict, List, Mapping, Optional
from clinic_access import schemas
from clinic_access.core.enums import ValueType, WriteResult
from clinic_access.core.exceptions import MalformedValue
from clinic_access.core.logging_config import logger
from clinic_access.services.cache import SnapshotCache
from clinic_access.services.defaults import DEFAULT_SETTINGS, default_for
from clinic_access.services.store import SettingsStore

_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off"}


def parse_int(key: str, raw: str) -> int:
    try:
        return int(raw.strip())
    except (AttributeError, ValueError) as e:
        raise MalformedValue(key, raw, "integer") from e


def parse_bool(key: str, raw: str) -> bool:
    word = raw.strip().lower() if isinstance(raw, str) else None
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise MalformedValue(key, raw, "boolean")


def parse_datetime(key: str, raw: str) -> datetime:
    try:
        return datetime.fromisoformat(raw.strip())
    except (AttributeError, ValueError) as e:
        raise MalformedValue(key, raw, "datetime") from e


def _as_string(key: str, raw: str) -> str:
    return raw


def format_value(value) -> Optional[str]:
    """Textual form a typed value is stored as; None stays None."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def user_setting_key(user_id, key: str) -> str:
    return f"{user_setting_category(user_id)}.{key}"


def user_setting_category(user_id) -> str:
    return f"User_{user_id}"


class SettingsCache(SnapshotCache):
    """Key/value settings served from a snapshot of the ``system_settings`` table.

    Reads never raise: a missing key, a malformed value or an unreachable
    store all yield the caller's default. Writes go straight to the store,
    raise ``StoreUnavailable`` on failure, and invalidate the snapshot.

    A change written by another process becomes visible here within one
    TTL (5 minutes).
    """

    name = "settings cache"

    def __init__(self, store: SettingsStore, **kwargs):
        super().__init__(**kwargs)
        self.store = store

    def _load(self) -> Mapping[str, schemas.SettingEntry]:
        return {entry.setting_key: entry for entry in self.store.load_all_settings()}

    # --- Reads ---
    def get_entry(self, key: str) -> Optional[schemas.SettingEntry]:
        return self.snapshot().get(key)

    def _raw(self, key: str) -> Optional[str]:
        entry = self.get_entry(key)
        if entry is None:
            return None
        return entry.setting_value

    def _fallback(self, key: str, parser, default, empty):
        """The caller's default, else the registered default of ``key``, else ``empty``."""
        if default is not None:
            return default
        registered = default_for(key)
        if registered is None:
            return empty
        try:
            return parser(key, registered[0])
        except MalformedValue:
            # Registered under another type, e.g. get_int on a string setting.
            return empty

    def _get_parsed(self, key: str, parser, default, empty):
        raw = self._raw(key)
        if raw is None:
            return self._fallback(key, parser, default, empty)
        try:
            return parser(key, raw)
        except MalformedValue as e:
            fallback = self._fallback(key, parser, default, empty)
            logger.warning(f"{e}; using default {fallback!r}")
            return fallback

    def get_string(self, key: str, default: Optional[str] = None) -> str:
        return self._get_parsed(key, _as_string, default, "")

    def get_int(self, key: str, default: Optional[int] = None) -> int:
        return self._get_parsed(key, parse_int, default, 0)

    def get_bool(self, key: str, default: Optional[bool] = None) -> bool:
        return self._get_parsed(key, parse_bool, default, False)

    def get_datetime(self, key: str, default: Optional[datetime] = None) -> Optional[datetime]:
        return self._get_parsed(key, parse_datetime, default, None)

    def get(self, key: str, default=None):
        """Return the value of ``key`` coerced to the type of ``default``.

        Without a default, the declared type of the registered default decides,
        and unregistered keys are read as strings.
        """
        if default is None:
            registered = default_for(key)
            value_type = registered[1] if registered else ValueType.STRING
            return self._getters[value_type](self, key)
        # bool before int: bool is a subclass of int
        if isinstance(default, bool):
            return self.get_bool(key, default)
        if isinstance(default, int):
            return self.get_int(key, default)
        if isinstance(default, datetime):
            return self.get_datetime(key, default)
        return self.get_string(key, default)

    _getters = {
        ValueType.STRING: get_string,
        ValueType.INT: get_int,
        ValueType.BOOL: get_bool,
        ValueType.DATETIME: get_datetime,
    }

    def get_all(self) -> List[schemas.SettingEntry]:
        return self.store.load_all_settings()

    def get_by_category(self, category: str) -> List[schemas.SettingEntry]:
        return self.store.load_settings_by_category(category)

    def get_last_modified(self) -> Optional[datetime]:
        return self.store.last_settings_change()

    # --- Writes ---
    def set(
        self,
        key: str,
        value,
        modified_by: Optional[str] = None,
        category: Optional[str] = None,
        value_type: Optional[ValueType] = None,
    ) -> WriteResult:
        """Upsert ``key`` in the store, then invalidate the snapshot."""
        result = self.store.upsert_setting(key, format_value(value), modified_by, category, value_type)
        self.invalidate()
        logger.info(f"Setting {key} {result.value} by {modified_by or 'system'}")
        return result

    def set_int(self, key: str, value: int, modified_by: Optional[str] = None) -> WriteResult:
        return self.set(key, int(value), modified_by)

    def set_bool(self, key: str, value: bool, modified_by: Optional[str] = None) -> WriteResult:
        return self.set(key, bool(value), modified_by)

    def set_datetime(self, key: str, value: datetime, modified_by: Optional[str] = None) -> WriteResult:
        return self.set(key, value, modified_by)

    def set_multiple(self, values: Mapping[str, object], modified_by: Optional[str] = None) -> Dict[str, WriteResult]:
        """Upsert several keys in one transaction followed by one invalidation."""
        return self._write_many(
            {key: (format_value(value), None, None) for key, value in values.items()},
            modified_by,
        )

    def reset_category_to_defaults(self, category: str, modified_by: Optional[str] = None) -> Dict[str, WriteResult]:
        """Overwrite every well-known key of ``category`` with its default."""
        defaults = DEFAULT_SETTINGS.get(category)
        if not defaults:
            logger.warning(f"No defaults defined for settings category '{category}'")
            return {}
        logger.info(f"Resetting settings category {category} to defaults")
        return self._write_many(
            {key: (value, category, value_type) for key, (value, value_type) in defaults.items()},
            modified_by,
        )

    def _write_many(self, values, modified_by) -> Dict[str, WriteResult]:
        if not values:
            return {}
        results = self.store.upsert_settings(values, modified_by)
        self.invalidate()
        logger.info(f"{len(results)} settings written by {modified_by or 'system'}")
        return results

    # --- Per-user settings ---
    def get_user_setting(self, user_id, key: str, default: str = "") -> str:
        return self.get_string(user_setting_key(user_id, key), default)

    def save_user_setting(self, user_id, key: str, value, modified_by: Optional[str] = None) -> WriteResult:
        return self.set(
            user_setting_key(user_id, key),
            value,
            modified_by,
            category=user_setting_category(user_id),
        )

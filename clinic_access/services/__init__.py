"""Access and configuration caches."""
from clinic_access.services.cache import CACHE_TTL_SECONDS, ReloadOutcome, SnapshotCache
from clinic_access.services.permission_cache import PermissionCache
from clinic_access.services.settings_cache import SettingsCache
from clinic_access.services.store import PermissionStore, SettingsStore, SqlAlchemyStore

__all__ = [
    "CACHE_TTL_SECONDS",
    "ReloadOutcome",
    "SnapshotCache",
    "PermissionCache",
    "SettingsCache",
    "PermissionStore",
    "SettingsStore",
    "SqlAlchemyStore",
]

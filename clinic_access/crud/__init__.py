"""Database CRUD operations."""
from clinic_access.crud.crud import (
    get_all_settings,
    get_settings_by_category,
    get_setting_by_key,
    get_last_settings_change,
    upsert_setting,
    get_all_permissions,
    get_permissions_by_role,
    get_permission,
    get_accessible_modules,
    upsert_permission
)

__all__ = [
    "get_all_settings",
    "get_settings_by_category",
    "get_setting_by_key",
    "get_last_settings_change",
    "upsert_setting",
    "get_all_permissions",
    "get_permissions_by_role",
    "get_permission",
    "get_accessible_modules",
    "upsert_permission"
]

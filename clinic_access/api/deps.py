"""API dependencies."""
from fastapi import Request
from clinic_access.core.database import get_db
from clinic_access.services.permission_cache import PermissionCache
from clinic_access.services.settings_cache import SettingsCache


def get_settings_cache(request: Request) -> SettingsCache:
    """The process-wide settings cache built at startup."""
    return request.app.state.settings_cache


def get_permission_cache(request: Request) -> PermissionCache:
    """The process-wide permission cache built at startup."""
    return request.app.state.permission_cache


__all__ = ["get_db", "get_settings_cache", "get_permission_cache"]

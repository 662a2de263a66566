"""Pydantic schemas."""
from clinic_access.schemas.schemas import (
    PermissionFlags, PermissionEntry, PermissionUpdate, AccessLevelUpdate, ResetRequest,
    SettingEntry, SettingValueUpdate, SettingsBulkUpdate,
    WriteResponse, BulkWriteResponse,
    AccessRequest, AccessResponse, AccessibleModulesResponse,
    CacheStatus
)

__all__ = [
    "PermissionFlags", "PermissionEntry", "PermissionUpdate", "AccessLevelUpdate", "ResetRequest",
    "SettingEntry", "SettingValueUpdate", "SettingsBulkUpdate",
    "WriteResponse", "BulkWriteResponse",
    "AccessRequest", "AccessResponse", "AccessibleModulesResponse",
    "CacheStatus"
]

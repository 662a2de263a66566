"""Pydantic schemas for cached entries and request/response validation."""
from pydantic import BaseModel, Field, computed_field
from typing import Dict, List, Optional
from datetime import datetime
from clinic_access.core.enums import (
    AccessLevel, Capability, ReloadStatus, WriteResult, module_display_name
)


# --- Permission Schemas ---
class PermissionFlags(BaseModel):
    """The five capability flags of one (role, module) entry."""
    view: bool = False
    create: bool = False
    edit: bool = False
    delete: bool = False
    export: bool = False

    class Config:
        frozen = True

    def allows(self, capability: Capability) -> bool:
        return getattr(self, capability.value)


class PermissionEntry(BaseModel):
    role_name: str
    module: str
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False
    can_export: bool = False
    last_modified: Optional[datetime] = None
    modified_by: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True

    @property
    def flags(self) -> PermissionFlags:
        return PermissionFlags(
            view=self.can_view,
            create=self.can_create,
            edit=self.can_edit,
            delete=self.can_delete,
            export=self.can_export,
        )

    def allows(self, capability: Capability) -> bool:
        return self.flags.allows(capability)

    @computed_field
    @property
    def permission_level(self) -> str:
        """The named preset these flags most closely describe."""
        if self.can_view and self.can_create and self.can_edit and self.can_delete and self.can_export:
            return AccessLevel.FULL_ACCESS.value
        if self.can_view and self.can_create and self.can_edit:
            return AccessLevel.READ_WRITE.value
        if self.can_view and self.can_create:
            return AccessLevel.VIEW_CREATE.value
        if self.can_view:
            return AccessLevel.VIEW_ONLY.value
        return AccessLevel.NO_ACCESS.value

    @computed_field
    @property
    def module_display_name(self) -> str:
        return module_display_name(self.module)


class PermissionUpdate(PermissionFlags):
    modified_by: Optional[str] = None

    class Config:
        frozen = False

    def to_flags(self) -> PermissionFlags:
        return PermissionFlags(**self.model_dump(exclude={"modified_by"}))


class AccessLevelUpdate(BaseModel):
    level: str  # Unrecognized names map to "No Access"
    modified_by: Optional[str] = None


class ResetRequest(BaseModel):
    modified_by: Optional[str] = None


# --- Setting Schemas ---
class SettingEntry(BaseModel):
    setting_key: str
    setting_value: Optional[str] = None
    setting_type: str = "String"
    category: str = "General"
    description: Optional[str] = None
    last_modified: Optional[datetime] = None
    modified_by: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True


class SettingValueUpdate(BaseModel):
    value: str
    modified_by: Optional[str] = None


class SettingsBulkUpdate(BaseModel):
    values: Dict[str, str] = Field(default_factory=dict)
    modified_by: Optional[str] = None


# --- Write outcome Schemas ---
class WriteResponse(BaseModel):
    result: WriteResult


class BulkWriteResponse(BaseModel):
    results: Dict[str, WriteResult]


# --- Access check Schemas ---
class AccessRequest(BaseModel):
    # Plain strings: names outside the enumerations are denied, not rejected.
    role: str
    module: str
    capability: str


class AccessResponse(BaseModel):
    decision: bool
    reason: str


class AccessibleModulesResponse(BaseModel):
    role: str
    modules: List[str]


# --- Cache status ---
class CacheStatus(BaseModel):
    status: ReloadStatus
    error: Optional[str] = None
    stale: bool
    entries: int

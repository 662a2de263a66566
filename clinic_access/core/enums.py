"""Closed enumerations shared by the caches, the store and the API.

The string values are persisted verbatim in the ``role_permissions`` and
``system_settings`` tables, so they must never be renamed.
"""
from enum import Enum
from typing import Optional


class _ValuesMixin:
    """Mixin that adds lookup helpers to str Enums."""

    @classmethod
    def values(cls) -> list:
        """Return all valid values as strings."""
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value) -> Optional["Enum"]:
        """Return the member for ``value`` or None when it is not in the set."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class Role(_ValuesMixin, str, Enum):
    ADMINISTRATOR = "Administrator"
    DOCTOR = "Doctor"
    RECEPTIONIST = "Receptionist"


class Module(_ValuesMixin, str, Enum):
    """Functional areas of the clinic application used as the unit of access control."""

    DASHBOARD = "Dashboard"
    PATIENT_MANAGEMENT = "PatientManagement"
    APPOINTMENTS = "Appointments"
    MEDICINE_INVENTORY = "MedicineInventory"
    PRESCRIPTIONS = "Prescriptions"
    USER_MANAGEMENT = "UserManagement"
    REPORTS = "Reports"
    SYSTEM_SETTINGS = "SystemSettings"


class Capability(_ValuesMixin, str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    EXPORT = "export"

    @classmethod
    def parse(cls, value):
        # Capability names are matched case-insensitively.
        if isinstance(value, str) and not isinstance(value, cls):
            value = value.strip().lower()
        return super().parse(value)


class AccessLevel(_ValuesMixin, str, Enum):
    """Named permission presets offered to administrators."""

    FULL_ACCESS = "Full Access"
    READ_WRITE = "Read & Write"
    VIEW_CREATE = "View & Create"
    VIEW_ONLY = "View Only"
    NO_ACCESS = "No Access"


class ValueType(_ValuesMixin, str, Enum):
    """Declared type of a stored setting value."""

    STRING = "String"
    INT = "Int"
    BOOL = "Bool"
    DATETIME = "DateTime"


class WriteResult(_ValuesMixin, str, Enum):
    """Outcome of an upsert, so a no-op is distinguishable from a failure."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class ReloadStatus(_ValuesMixin, str, Enum):
    NEVER = "never"
    LOADED = "loaded"
    FAILED = "failed"


_MODULE_DISPLAY_NAMES = {
    Module.PATIENT_MANAGEMENT: "Patient Management",
    Module.MEDICINE_INVENTORY: "Medicine Inventory",
    Module.USER_MANAGEMENT: "User Management",
    Module.REPORTS: "Reports & Analytics",
    Module.SYSTEM_SETTINGS: "System Settings",
}


def module_display_name(module: str) -> str:
    """Human-readable label for a module; unknown names are returned as-is."""
    parsed = Module.parse(module)
    if parsed is None:
        return module
    return _MODULE_DISPLAY_NAMES.get(parsed, parsed.value)

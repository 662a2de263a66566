"""Database CRUD operations.

Every function works on a caller-owned session. Upserts look the row up by
its natural key and mutate it in place, or insert a new row; the caller
commits.
"""
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import desc
from clinic_access.models import SystemSetting, RolePermission
from clinic_access.core.enums import ValueType, WriteResult
from clinic_access import schemas

DEFAULT_CATEGORY = "General"


def _now():
    return datetime.now(timezone.utc)


# --- Settings ---
def get_all_settings(db: Session):
    """Get every setting ordered by category, then key."""
    return db.query(SystemSetting).order_by(SystemSetting.category, SystemSetting.setting_key).all()


def get_settings_by_category(db: Session, category: str):
    """Get the settings of a single category."""
    return db.query(SystemSetting)\
        .filter(SystemSetting.category == category)\
        .order_by(SystemSetting.setting_key)\
        .all()


def get_setting_by_key(db: Session, key: str):
    """Get a setting by its key (case-sensitive exact match)."""
    return db.query(SystemSetting).filter(SystemSetting.setting_key == key).first()


def get_last_settings_change(db: Session) -> Optional[datetime]:
    """Most recent last_modified across all settings, or None for an empty table."""
    row = db.query(SystemSetting.last_modified).order_by(desc(SystemSetting.last_modified)).first()
    return row[0] if row else None


def upsert_setting(
    db: Session,
    key: str,
    value: Optional[str],
    modified_by: Optional[str] = None,
    category: Optional[str] = None,
    value_type: Optional[ValueType] = None,
) -> WriteResult:
    """Create the setting if the key is unknown, otherwise update its value.

    ``category`` and ``value_type`` are applied when given; a new row
    defaults to the "General" category and the String type.
    """
    setting = get_setting_by_key(db, key)
    if setting is None:
        setting = SystemSetting(
            setting_key=key,
            setting_value=value,
            setting_type=(value_type or ValueType.STRING).value,
            category=category or DEFAULT_CATEGORY,
            last_modified=_now(),
            modified_by=modified_by,
        )
        db.add(setting)
        db.flush()
        return WriteResult.CREATED

    result = WriteResult.UNCHANGED if setting.setting_value == value else WriteResult.UPDATED
    setting.setting_value = value
    if category:
        setting.category = category
    if value_type:
        setting.setting_type = value_type.value
    setting.last_modified = _now()
    setting.modified_by = modified_by
    db.flush()
    return result


# --- Permissions ---
def get_all_permissions(db: Session):
    """Get every permission entry ordered by role, then module."""
    return db.query(RolePermission).order_by(RolePermission.role_name, RolePermission.module).all()


def get_permissions_by_role(db: Session, role_name: str):
    """Get the permission entries of one role."""
    return db.query(RolePermission)\
        .filter(RolePermission.role_name == role_name)\
        .order_by(RolePermission.module)\
        .all()


def get_permission(db: Session, role_name: str, module: str):
    """Get the entry for a (role, module) pair."""
    return db.query(RolePermission)\
        .filter(RolePermission.role_name == role_name, RolePermission.module == module)\
        .first()


def get_accessible_modules(db: Session, role_name: str):
    """Modules the role can view."""
    rows = db.query(RolePermission.module)\
        .filter(RolePermission.role_name == role_name, RolePermission.can_view == True)\
        .order_by(RolePermission.module)\
        .all()
    return [row[0] for row in rows]


def upsert_permission(
    db: Session,
    role_name: str,
    module: str,
    flags: schemas.PermissionFlags,
    modified_by: Optional[str] = None,
) -> WriteResult:
    """Create or overwrite the flags of a (role, module) pair."""
    values = {
        "can_view": flags.view,
        "can_create": flags.create,
        "can_edit": flags.edit,
        "can_delete": flags.delete,
        "can_export": flags.export,
    }
    permission = get_permission(db, role_name, module)
    if permission is None:
        permission = RolePermission(
            role_name=role_name,
            module=module,
            last_modified=_now(),
            modified_by=modified_by,
            **values,
        )
        db.add(permission)
        db.flush()
        return WriteResult.CREATED

    changed = any(getattr(permission, column) != value for column, value in values.items())
    for column, value in values.items():
        setattr(permission, column, value)
    permission.last_modified = _now()
    permission.modified_by = modified_by
    db.flush()
    return WriteResult.UPDATED if changed else WriteResult.UNCHANGED

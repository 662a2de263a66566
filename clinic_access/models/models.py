"""SQLAlchemy database models."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, UniqueConstraint
from sqlalchemy.sql import func
from clinic_access.core.database import Base


# Key/value configuration store.
# Fields:
# 1. setting_key: natural key, unique, case-sensitive exact match
# 2. setting_value: raw textual form, parsed on read according to setting_type
# 3. setting_type: String | Int | Bool | DateTime
# 4. category: grouping used by "reset category to defaults"
class SystemSetting(Base):
    __tablename__ = "system_settings"
    id = Column(Integer, primary_key=True, index=True)
    setting_key = Column(String(100), unique=True, index=True, nullable=False)
    setting_value = Column(Text, nullable=True)
    setting_type = Column(String(50), nullable=False, default="String")
    category = Column(String(50), nullable=False, default="General", index=True)
    description = Column(String(500), nullable=True)
    last_modified = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    modified_by = Column(String(200), nullable=True)


# One row per (role, module) pair holding the five capability flags.
class RolePermission(Base):
    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role_name", "module", name="uq_role_permissions_role_module"),
    )
    id = Column(Integer, primary_key=True, index=True)
    role_name = Column(String(50), nullable=False, index=True)
    module = Column(String(100), nullable=False)
    can_view = Column(Boolean, nullable=False, default=False)
    can_create = Column(Boolean, nullable=False, default=False)
    can_edit = Column(Boolean, nullable=False, default=False)
    can_delete = Column(Boolean, nullable=False, default=False)
    can_export = Column(Boolean, nullable=False, default=False)
    last_modified = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    modified_by = Column(String(200), nullable=True)

"""SQLAlchemy models."""
from clinic_access.models.models import SystemSetting, RolePermission
from clinic_access.core.database import Base

__all__ = ["SystemSetting", "RolePermission", "Base"]

"""Repository interface the caches consume, and its SQLAlchemy implementation.

The caches never see a session: they call a store, which opens a short-lived
session per operation, commits on success and rolls back on failure. Any
database error surfaces as ``StoreUnavailable``.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Protocol
from sqlalchemy.exc import SQLAlchemyError
from clinic_access import crud
from clinic_access import schemas
from clinic_access.core.enums import ValueType, WriteResult
from clinic_access.core.exceptions import StoreUnavailable
from clinic_access.core.logging_config import logger


class SettingsStore(Protocol):
    """Settings persistence. Implementations raise ``StoreUnavailable`` for any
    failure to read or write, including rows that cannot be decoded."""

    def load_all_settings(self) -> List[schemas.SettingEntry]:
        ...

    def load_settings_by_category(self, category: str) -> List[schemas.SettingEntry]:
        ...

    def last_settings_change(self) -> Optional[datetime]:
        ...

    def upsert_setting(
        self,
        key: str,
        value: Optional[str],
        modified_by: Optional[str] = None,
        category: Optional[str] = None,
        value_type: Optional[ValueType] = None,
    ) -> WriteResult:
        ...

    def upsert_settings(
        self, values: Mapping[str, tuple], modified_by: Optional[str] = None
    ) -> Dict[str, WriteResult]:
        """Upsert ``key -> (value, category, value_type)`` in one transaction."""
        ...


class PermissionStore(Protocol):
    """Permission persistence. Implementations raise ``StoreUnavailable`` for any
    failure to read or write, including rows that cannot be decoded."""

    def load_all_permissions(self) -> List[schemas.PermissionEntry]:
        ...

    def load_permissions_by_role(self, role_name: str) -> List[schemas.PermissionEntry]:
        ...

    def load_accessible_modules(self, role_name: str) -> List[str]:
        ...

    def upsert_permission(
        self,
        role_name: str,
        module: str,
        flags: schemas.PermissionFlags,
        modified_by: Optional[str] = None,
    ) -> WriteResult:
        ...

    def upsert_permissions(
        self,
        entries: Mapping[tuple, schemas.PermissionFlags],
        modified_by: Optional[str] = None,
    ) -> Dict[tuple, WriteResult]:
        """Upsert ``(role, module) -> flags`` in one transaction."""
        ...


class SqlAlchemyStore:
    """Settings and permission store backed by a SQLAlchemy session factory."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @contextmanager
    def _session(self, operation: str, write: bool = False):
        db = self.session_factory()
        try:
            yield db
            if write:
                db.commit()
        # ValueError covers column values the driver or pydantic cannot decode.
        except (SQLAlchemyError, ValueError) as e:
            db.rollback()
            logger.error(f"Store operation '{operation}' failed: {e}")
            raise StoreUnavailable(operation, e) from e
        finally:
            db.close()

    # --- Settings ---
    def load_all_settings(self) -> List[schemas.SettingEntry]:
        with self._session("load_all_settings") as db:
            return [schemas.SettingEntry.model_validate(row) for row in crud.get_all_settings(db)]

    def load_settings_by_category(self, category: str) -> List[schemas.SettingEntry]:
        with self._session("load_settings_by_category") as db:
            rows = crud.get_settings_by_category(db, category)
            return [schemas.SettingEntry.model_validate(row) for row in rows]

    def last_settings_change(self) -> Optional[datetime]:
        with self._session("last_settings_change") as db:
            return crud.get_last_settings_change(db)

    def upsert_setting(self, key, value, modified_by=None, category=None, value_type=None) -> WriteResult:
        with self._session("upsert_setting", write=True) as db:
            return crud.upsert_setting(db, key, value, modified_by, category, value_type)

    def upsert_settings(self, values, modified_by=None) -> Dict[str, WriteResult]:
        with self._session("upsert_settings", write=True) as db:
            return {
                key: crud.upsert_setting(db, key, value, modified_by, category, value_type)
                for key, (value, category, value_type) in values.items()
            }

    # --- Permissions ---
    def load_all_permissions(self) -> List[schemas.PermissionEntry]:
        with self._session("load_all_permissions") as db:
            return [schemas.PermissionEntry.model_validate(row) for row in crud.get_all_permissions(db)]

    def load_permissions_by_role(self, role_name: str) -> List[schemas.PermissionEntry]:
        with self._session("load_permissions_by_role") as db:
            rows = crud.get_permissions_by_role(db, role_name)
            return [schemas.PermissionEntry.model_validate(row) for row in rows]

    def load_accessible_modules(self, role_name: str) -> List[str]:
        with self._session("load_accessible_modules") as db:
            return crud.get_accessible_modules(db, role_name)

    def upsert_permission(self, role_name, module, flags, modified_by=None) -> WriteResult:
        with self._session("upsert_permission", write=True) as db:
            return crud.upsert_permission(db, role_name, module, flags, modified_by)

    def upsert_permissions(self, entries, modified_by=None) -> Dict[tuple, WriteResult]:
        with self._session("upsert_permissions", write=True) as db:
            return {
                (role_name, module): crud.upsert_permission(db, role_name, module, flags, modified_by)
                for (role_name, module), flags in entries.items()
            }

"""Permission cache and role-based access evaluation."""
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional
from clinic_access import schemas
from clinic_access.core.enums import Capability, Module, Role, WriteResult
from clinic_access.core.exceptions import UnknownAccessName
from clinic_access.core.logging_config import logger
from clinic_access.services.cache import SnapshotCache
from clinic_access.services.defaults import DEFAULT_ROLE_TEMPLATES, flags_for_access_level
from clinic_access.services.store import PermissionStore


def _require(enum_cls, value, what: str):
    parsed = enum_cls.parse(value)
    if parsed is None:
        raise UnknownAccessName(what, value, enum_cls.values())
    return parsed


_ROLE_ORDER = {role.value: index for index, role in enumerate(Role)}
_MODULE_ORDER = {module.value: index for index, module in enumerate(Module)}


def _in_module_order(modules):
    return sorted(modules, key=lambda module: _MODULE_ORDER.get(module, len(_MODULE_ORDER)))


class PermissionCache(SnapshotCache):
    """Answers "can role R do C on module M?" from a snapshot of ``role_permissions``.

    Evaluation is fail-closed: a (role, module) pair with no stored entry, or
    any role, module or capability name outside the fixed enumerations,
    grants nothing.

    A permission revoked by another process may still be honored here for up
    to one TTL (5 minutes).
    """

    name = "permission cache"

    def __init__(self, store: PermissionStore, **kwargs):
        super().__init__(**kwargs)
        self.store = store

    def _load(self) -> Mapping[str, Mapping[str, schemas.PermissionEntry]]:
        matrix: Dict[str, Dict[str, schemas.PermissionEntry]] = {}
        for entry in self.store.load_all_permissions():
            matrix.setdefault(entry.role_name, {})[entry.module] = entry
        return {role: MappingProxyType(modules) for role, modules in matrix.items()}

    # --- Evaluation ---
    def get_permission(self, role, module) -> Optional[schemas.PermissionEntry]:
        parsed_role, parsed_module = Role.parse(role), Module.parse(module)
        if parsed_role is None or parsed_module is None:
            return None
        return self.snapshot().get(parsed_role.value, {}).get(parsed_module.value)

    def has_permission(self, role, module, capability) -> bool:
        parsed_capability = Capability.parse(capability)
        if parsed_capability is None:
            return False
        entry = self.get_permission(role, module)
        if entry is None:
            return False
        return entry.allows(parsed_capability)

    def can_view(self, role, module) -> bool:
        return self.has_permission(role, module, Capability.VIEW)

    def can_create(self, role, module) -> bool:
        return self.has_permission(role, module, Capability.CREATE)

    def can_edit(self, role, module) -> bool:
        return self.has_permission(role, module, Capability.EDIT)

    def can_delete(self, role, module) -> bool:
        return self.has_permission(role, module, Capability.DELETE)

    def can_export(self, role, module) -> bool:
        return self.has_permission(role, module, Capability.EXPORT)

    def get_permission_matrix(self) -> Mapping[str, Mapping[str, schemas.PermissionEntry]]:
        return self.snapshot()

    def get_accessible_modules(self, role) -> List[str]:
        """Modules the role can view, read directly from the store."""
        parsed_role = Role.parse(role)
        if parsed_role is None:
            return []
        return _in_module_order(
            module for module in self.store.load_accessible_modules(parsed_role.value)
            if Module.parse(module) is not None
        )

    def get_all(self) -> List[schemas.PermissionEntry]:
        entries = self.store.load_all_permissions()
        return sorted(entries, key=lambda e: (
            _ROLE_ORDER.get(e.role_name, len(_ROLE_ORDER)), _MODULE_ORDER.get(e.module, len(_MODULE_ORDER))
        ))

    def get_by_role(self, role) -> List[schemas.PermissionEntry]:
        parsed_role = Role.parse(role)
        if parsed_role is None:
            return []
        entries = self.store.load_permissions_by_role(parsed_role.value)
        return sorted(entries, key=lambda e: _MODULE_ORDER.get(e.module, len(_MODULE_ORDER)))

    # --- Writes ---
    def update_permission(
        self,
        role,
        module,
        flags: schemas.PermissionFlags,
        modified_by: Optional[str] = None,
    ) -> WriteResult:
        """Upsert the flags of (role, module), then invalidate the snapshot."""
        parsed_role = _require(Role, role, "role")
        parsed_module = _require(Module, module, "module")
        result = self.store.upsert_permission(parsed_role.value, parsed_module.value, flags, modified_by)
        self.invalidate()
        logger.info(
            f"Permission {parsed_role.value}/{parsed_module.value} {result.value} "
            f"by {modified_by or 'system'}"
        )
        return result

    def set_access_level(self, role, module, level, modified_by: Optional[str] = None) -> WriteResult:
        """Apply a named preset; unrecognized names mean "No Access"."""
        return self.update_permission(role, module, flags_for_access_level(level), modified_by)

    def update_role_permissions(
        self,
        role,
        permissions: Mapping[object, schemas.PermissionFlags],
        modified_by: Optional[str] = None,
    ) -> Dict[str, WriteResult]:
        """Upsert several modules of one role in a single transaction."""
        parsed_role = _require(Role, role, "role")
        entries = {
            (parsed_role.value, _require(Module, module, "module").value): flags
            for module, flags in permissions.items()
        }
        if not entries:
            return {}
        results = self.store.upsert_permissions(entries, modified_by)
        self.invalidate()
        logger.info(f"{len(results)} permissions of {parsed_role.value} written by {modified_by or 'system'}")
        return {module: result for (_, module), result in results.items()}

    def reset_role_to_default(self, role, modified_by: Optional[str] = None) -> Dict[str, WriteResult]:
        """Overwrite every module of ``role`` with its default template."""
        parsed_role = _require(Role, role, "role")
        logger.info(f"Resetting permissions of {parsed_role.value} to defaults")
        return self.update_role_permissions(parsed_role, DEFAULT_ROLE_TEMPLATES[parsed_role], modified_by)

    def reset_all_to_defaults(self, modified_by: Optional[str] = None) -> Dict[str, Dict[str, WriteResult]]:
        return {role.value: self.reset_role_to_default(role, modified_by) for role in Role}

"""Role permission management API endpoints. All require the Admin API Key."""
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends
from clinic_access import schemas
from clinic_access.api.deps import get_permission_cache
from clinic_access.core.enums import Module, Role
from clinic_access.core.security import verify_admin_key
from clinic_access.services.permission_cache import PermissionCache

router = APIRouter(prefix="/permissions", dependencies=[Depends(verify_admin_key)])


@router.get("", response_model=List[schemas.PermissionEntry])
def list_permissions_api(
    role: Optional[Role] = None,
    permissions: PermissionCache = Depends(get_permission_cache)
):
    """Lists all permission entries, or those of one role."""
    if role:
        return permissions.get_by_role(role)
    return permissions.get_all()


@router.get("/matrix", response_model=Dict[str, Dict[str, schemas.PermissionEntry]])
def permission_matrix_api(permissions: PermissionCache = Depends(get_permission_cache)):
    """The cached role -> module -> entry matrix."""
    return {role: dict(modules) for role, modules in permissions.get_permission_matrix().items()}


@router.post("/reset", response_model=Dict[str, Dict[str, str]])
def reset_all_api(
    reset: schemas.ResetRequest,
    permissions: PermissionCache = Depends(get_permission_cache)
):
    """Restores every role to its default template."""
    return permissions.reset_all_to_defaults(reset.modified_by)


@router.post("/{role}/reset", response_model=schemas.BulkWriteResponse)
def reset_role_api(
    role: Role,
    reset: schemas.ResetRequest,
    permissions: PermissionCache = Depends(get_permission_cache)
):
    """Restores one role to its default template."""
    return schemas.BulkWriteResponse(results=permissions.reset_role_to_default(role, reset.modified_by))


@router.put("/{role}/{module}", response_model=schemas.WriteResponse)
def update_permission_api(
    role: Role,
    module: Module,
    update: schemas.PermissionUpdate,
    permissions: PermissionCache = Depends(get_permission_cache)
):
    """Sets the five capability flags of a (role, module) pair."""
    result = permissions.update_permission(role, module, update.to_flags(), update.modified_by)
    return schemas.WriteResponse(result=result)


@router.put("/{role}/{module}/level", response_model=schemas.WriteResponse)
def set_access_level_api(
    role: Role,
    module: Module,
    update: schemas.AccessLevelUpdate,
    permissions: PermissionCache = Depends(get_permission_cache)
):
    """Applies a named access-level preset to a (role, module) pair."""
    result = permissions.set_access_level(role, module, update.level, update.modified_by)
    return schemas.WriteResponse(result=result)

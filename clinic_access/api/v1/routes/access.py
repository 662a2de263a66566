"""Access check API endpoints."""
from typing import List
from fastapi import APIRouter, Depends
from clinic_access import schemas
from clinic_access.api.deps import get_permission_cache
from clinic_access.services.authorization import authorize_request
from clinic_access.services.permission_cache import PermissionCache

router = APIRouter()


@router.post("/access", response_model=schemas.AccessResponse)
def authorize(
    request: schemas.AccessRequest,
    permissions: PermissionCache = Depends(get_permission_cache)
):
    """Can this role perform this capability on this module?"""
    return authorize_request(request, permissions)


@router.post("/access/batch", response_model=List[schemas.AccessResponse])
def authorize_batch(
    requests: List[schemas.AccessRequest],
    permissions: PermissionCache = Depends(get_permission_cache)
):
    """Evaluates several access requests in order."""
    return [authorize_request(req, permissions) for req in requests]


@router.get("/roles/{role}/modules", response_model=schemas.AccessibleModulesResponse)
def accessible_modules(
    role: str,
    permissions: PermissionCache = Depends(get_permission_cache)
):
    """Modules the role is allowed to view."""
    return schemas.AccessibleModulesResponse(role=role, modules=permissions.get_accessible_modules(role))

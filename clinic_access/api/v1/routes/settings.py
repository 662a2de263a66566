"""Settings management API endpoints. All require the Admin API Key."""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from clinic_access import schemas
from clinic_access.api.deps import get_settings_cache
from clinic_access.core.security import verify_admin_key
from clinic_access.services.settings_cache import SettingsCache

router = APIRouter(prefix="/settings", dependencies=[Depends(verify_admin_key)])


@router.get("", response_model=List[schemas.SettingEntry])
def list_settings_api(
    category: Optional[str] = None,
    settings: SettingsCache = Depends(get_settings_cache)
):
    """Lists all settings, or those of one category."""
    if category:
        return settings.get_by_category(category)
    return settings.get_all()


@router.put("", response_model=schemas.BulkWriteResponse)
def update_settings_api(
    update: schemas.SettingsBulkUpdate,
    settings: SettingsCache = Depends(get_settings_cache)
):
    """Writes several settings in one transaction."""
    return schemas.BulkWriteResponse(results=settings.set_multiple(update.values, update.modified_by))


@router.post("/categories/{category}/reset", response_model=schemas.BulkWriteResponse)
def reset_category_api(
    category: str,
    reset: schemas.ResetRequest,
    settings: SettingsCache = Depends(get_settings_cache)
):
    """Restores every well-known key of a category to its default."""
    results = settings.reset_category_to_defaults(category, reset.modified_by)
    if not results:
        raise HTTPException(status_code=404, detail=f"No defaults defined for category '{category}'")
    return schemas.BulkWriteResponse(results=results)


@router.get("/{key}", response_model=schemas.SettingEntry)
def get_setting_api(
    key: str,
    settings: SettingsCache = Depends(get_settings_cache)
):
    """Returns one setting as currently cached."""
    entry = settings.get_entry(key)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Setting '{key}' not found")
    return entry


@router.put("/{key}", response_model=schemas.WriteResponse)
def set_setting_api(
    key: str,
    update: schemas.SettingValueUpdate,
    settings: SettingsCache = Depends(get_settings_cache)
):
    """Creates or updates one setting."""
    return schemas.WriteResponse(result=settings.set(key, update.value, update.modified_by))

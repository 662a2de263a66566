"""Main API router that includes all v1 routes."""
from fastapi import APIRouter
from clinic_access.api.v1.routes import access, permissions, settings

api_router = APIRouter()

api_router.include_router(access.router, tags=["access"])
api_router.include_router(settings.router, tags=["settings"])
api_router.include_router(permissions.router, tags=["permissions"])

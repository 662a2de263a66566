"""FastAPI application entry point."""
from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from clinic_access.core.database import engine, Base, SessionLocal, get_db
from clinic_access.core.exceptions import StoreUnavailable, UnknownAccessName
from clinic_access.core.logging_config import logger
from clinic_access.api.v1.router import api_router
from clinic_access.api.deps import get_permission_cache, get_settings_cache
from clinic_access.core.enums import ReloadStatus
from clinic_access.services import PermissionCache, SettingsCache, SqlAlchemyStore
from clinic_access import schemas

# Initialize logging
logger.info("Starting Clinic Access & Configuration Service")

# Create database tables
try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized successfully")
except Exception as e:
    logger.error(f"Failed to initialize database tables: {e}")
    raise

# Initialize FastAPI app
app = FastAPI(
    title="Clinic Access & Configuration Service",
    description="Cached system settings and role permissions for the clinic application",
    version="1.0.0"
)

# One cache of each kind per process, shared by every request
store = SqlAlchemyStore(SessionLocal)
app.state.settings_cache = SettingsCache(store)
app.state.permission_cache = PermissionCache(store)

app.include_router(api_router)
logger.info("API routes registered successfully")


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    """Write failures must reach the caller, never look like a no-op."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)}
    )


@app.exception_handler(UnknownAccessName)
async def unknown_access_name_handler(request: Request, exc: UnknownAccessName):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.get("/", tags=["Health"])
def read_root():
    """Basic health check endpoint."""
    return {"status": "Clinic Access Service is Operational", "docs": "/docs"}


def _cache_status(cache) -> dict:
    snapshot = cache.snapshot()
    return schemas.CacheStatus(
        status=cache.last_reload.status,
        error=cache.last_reload.error,
        stale=cache.is_stale,
        entries=len(snapshot),
    ).model_dump(mode="json")


@app.get("/health", tags=["Health"], status_code=status.HTTP_200_OK)
def health_check(
    db: Session = Depends(get_db),
    settings: SettingsCache = Depends(get_settings_cache),
    permissions: PermissionCache = Depends(get_permission_cache)
):
    """Detailed health check endpoint with system status."""
    health_status = {
        "status": "healthy",
        "service": "Clinic Access & Configuration Service",
        "version": "1.0.0",
        "checks": {}
    }

    # Database connectivity check
    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except Exception as e:
        health_status["status"] = "degraded"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}"
        }
        logger.error(f"Database health check failed: {e}")

    # Cache status checks
    for name, cache in (("settings_cache", settings), ("permission_cache", permissions)):
        health_status["checks"][name] = _cache_status(cache)
        if cache.last_reload.status == ReloadStatus.FAILED:
            health_status["status"] = "degraded"

    # Return appropriate status code
    status_code = status.HTTP_200_OK
    if health_status["status"] == "degraded":
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(content=health_status, status_code=status_code)

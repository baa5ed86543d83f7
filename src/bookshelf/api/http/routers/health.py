"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.core.storage import RedisSessionStorage

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is running."""
    return {"status": "healthy", "service": "api"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe covering the database and the session store.

    Returns 200 if both are usable, 503 otherwise.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = app_deps.config

    checks: dict[str, dict[str, Any]] = {}

    db_healthy = app_deps.database_service.health_check()
    checks["database"] = {
        "status": "healthy" if db_healthy else "unhealthy",
        "type": "postgresql" if config.database.is_postgresql else "sqlite",
    }

    storage = app_deps.session_storage
    if isinstance(storage, RedisSessionStorage):
        store_healthy = await storage.ping()
        store_type = "redis"
    else:
        store_healthy = storage.is_available()
        store_type = "in-memory"
    checks["session_store"] = {
        "status": "healthy" if store_healthy else "unhealthy",
        "type": store_type,
    }

    all_healthy = db_healthy and store_healthy
    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }

    if not all_healthy:
        return JSONResponse(status_code=503, content=response)
    return response

"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.api.http.routers import auth, books, favorites, health, users
from src.bookshelf.api.utils.app_startup import configure_logging
from src.bookshelf.core.errors import ApiError
from src.bookshelf.core.services import (
    DbSessionService,
    RedisService,
    SessionAuthenticator,
)
from src.bookshelf.core.storage import create_session_storage
from src.bookshelf.runtime.config.config_data import DEFAULT_SESSION_SECRET, ConfigData
from src.bookshelf.runtime.context import get_config

__all__ = ["create_app", "build_dependencies"]


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, hsts: bool = False):
        super().__init__(app)
        self._hsts = hsts

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        if self._hsts:
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


def validate_startup_config(config: ConfigData) -> None:
    """Fail fast on settings that must never reach production."""
    if config.app.environment != "production":
        return
    if not config.app.session_secret or config.app.session_secret == DEFAULT_SESSION_SECRET:
        raise RuntimeError("SESSION_SECRET must be set to a non-default value in production")
    if "*" in config.app.cors.origins and config.app.cors.allow_credentials:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )


async def build_dependencies(config: ConfigData) -> ApplicationDependencies:
    """Construct the process-wide connection objects."""
    database_service = DbSessionService(config)
    redis_service = RedisService(config)
    session_storage = await create_session_storage(config, redis_service)
    session_authenticator = SessionAuthenticator(
        session_storage,
        ttl_seconds=config.app.session_max_age,
        key_prefix=config.security.session_key_prefix,
        treat_store_errors_as_anonymous=(
            config.security.session_store_failure == "anonymous"
        ),
    )
    return ApplicationDependencies(
        config=config,
        database_service=database_service,
        redis_service=redis_service,
        session_storage=session_storage,
        session_authenticator=session_authenticator,
    )


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or "-"


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("{}: {}", type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content={**exc.to_payload(), "request_id": _request_id(request)},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        logger.info("Validation error", errors=errors)
        return JSONResponse(
            status_code=400,
            content={
                "message": "Validation error",
                "errors": errors,
                "request_id": _request_id(request),
            },
        )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail, "request_id": _request_id(request)},
            headers=getattr(exc, "headers", None),
        )


def create_app(dependencies: ApplicationDependencies | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        dependencies: Prebuilt connection objects. When omitted they are
            constructed from the active configuration at startup and torn down
            at shutdown.
    """
    config = dependencies.config if dependencies is not None else get_config()
    validate_startup_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_dependencies = dependencies is None
        if owns_dependencies:
            configure_logging()
        app_deps = dependencies or await build_dependencies(config)
        app.state.app_dependencies = app_deps
        logger.info("Starting up application in {} environment", config.app.environment)
        try:
            yield
        finally:
            logger.info("Shutting down application")
            purged = await app_deps.session_storage.cleanup_expired()
            if purged:
                logger.info("Purged {} expired sessions", purged)
            if owns_dependencies:
                await app_deps.redis_service.close()
                app_deps.database_service.dispose()

    is_production = config.app.environment == "production"
    app = FastAPI(
        title="Bookshelf API",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    if dependencies is not None:
        # Available before the lifespan runs, e.g. for clients without startup
        app.state.app_dependencies = dependencies

    app.add_middleware(SecurityHeadersMiddleware, hsts=is_production)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )

    # --- Request logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        xff = request.headers.get("x-forwarded-for")
        client_ip = (
            xff.split(",")[0].strip()
            if xff
            else request.client.host
            if request.client
            else "unknown"
        )

        base_ctx = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": client_ip,
        }

        start = time.perf_counter()

        # Everything that logs within this block inherits base_ctx
        with logger.contextualize(**base_ctx):
            try:
                logger.info("request.start")
                response = await call_next(request)

                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 1),
                ).info("request.end")

                response.headers.setdefault("X-Request-ID", request_id)
                return response

            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content={"message": "Internal Server Error", "request_id": request_id},
                    headers={"X-Request-ID": request_id},
                )

    _register_exception_handlers(app)

    # --- Router registration ---
    app.include_router(health.router)
    app.include_router(auth.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(books.router, prefix="/api")
    app.include_router(favorites.router, prefix="/api")

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return "Endpoints available under /api."

    return app


if __name__ == "__main__":
    import uvicorn

    cfg = get_config()
    uvicorn.run(
        "src.bookshelf.api.http.app:create_app",
        factory=True,
        host=cfg.app.host,
        port=cfg.app.port,
        access_log=False,  # We handle access logging in middleware
    )

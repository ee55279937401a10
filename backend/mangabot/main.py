"""
MangaBot Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Served by uvicorn (uvicorn mangabot.main:app), built fresh by tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────┐ ┌─────────┐  │
    │  │  Req ID  │→│  Logging    │→│ GZip │→│  CORS   │  │
    │  └──────────┘ └─────────────┘ └──────┘ └─────────┘  │
    │                                                     │
    │  Routes (bearer guard on /api/v1):                  │
    │  ┌────────────────┐ ┌──────────────────┐ ┌────────┐ │
    │  │ /api/v1/manga  │ │ /api/v1/prestamo │ │/health │ │
    │  └────────────────┘ └──────────────────┘ └────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Auth→401 │ NotFound→404 │ 500 │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, check configuration, log readiness
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from mangabot import __version__
from mangabot.config import settings
from mangabot.database import dispose_engine
from mangabot.exceptions import AuthenticationError, DatabaseError, MangaBotError
from mangabot.middleware.logging import RequestLoggingMiddleware
from mangabot.middleware.request_id import RequestIDMiddleware, request_id_var
from mangabot.routes import health, manga, prestamo
from mangabot.security import get_current_user

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Third-party loggers that log every operation are raised to WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("MangaBot Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: development setups run with the default key
        logger.warning("Configuration warning: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("MangaBot Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: dict | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    content = {
        "success": False,
        "message": message,
        "error": error,
        "request_id": _request_id(request),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the `{success: false, ...}` envelope.

    Handler hierarchy:
        RequestValidationError  → 400 (malformed body, path or query)
        AuthenticationError     → 401 + WWW-Authenticate: Bearer
        DatabaseError           → 500, operation message only, context logged
        MangaBotError (base)    → exc.status_code (400 / 404 / ...)
        Exception (fallback)    → 500, generic message, stack trace logged

    Exception text never reaches the client; the request ID in every error
    body ties it to the server log entry.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", _request_id(request), errors)
        return _error_response(
            request,
            400,
            "validation_error",
            "Los datos de la solicitud no son válidos",
            details={"errors": errors},
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication(request: Request, exc: AuthenticationError):
        return _error_response(
            request,
            exc.status_code,
            exc.error_code,
            exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
        )
        return _error_response(request, exc.status_code, exc.error_code, exc.message)

    @app.exception_handler(MangaBotError)
    async def handle_app_error(request: Request, exc: MangaBotError):
        if exc.status_code >= 500:
            logger.error("[%s] %s | Context: %s", _request_id(request), exc.message, exc.context)
        else:
            logger.info("[%s] %s", _request_id(request), exc.message)
        details = {k: v for k, v in exc.context.items() if k == "field"} or None
        return _error_response(
            request, exc.status_code, exc.error_code, exc.message, details=details
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=exc,
        )
        return _error_response(
            request, 500, "internal_server_error", "Error interno del servidor"
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    The bearer-token guard is attached to both resource routers here, at
    mount time, so every manga and préstamo endpoint is protected the same
    way while /health and the docs stay public.
    """
    app = FastAPI(
        title="MangaBot API",
        description="Manga catalog and loan (préstamo) tracking API.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Location"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    authenticated = [Depends(get_current_user)]
    app.include_router(manga.router, dependencies=authenticated)
    app.include_router(prestamo.router, dependencies=authenticated)
    app.include_router(health.router)

    return app


# uvicorn expects `mangabot.main:app` to be importable
app = create_app()

"""
Blog List Backend — FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn bloglist.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware Chain:                                   │
    │  ┌──────────┐ ┌────────────┐ ┌─────────┐            │
    │  │  Req ID  │→│ Rate Limit │→│ Logging │→ GZip → CORS│
    │  └──────────┘ └────────────┘ └─────────┘            │
    │                                                      │
    │  Routes:                                             │
    │  /api/blogs   /api/users   /api/login   /health      │
    │                                                      │
    │  Exception Handlers:                                 │
    │  Validation→400 │ Auth→401 │ Owner→403 │ Missing→404 │
    │  Database→500   │ anything else→500                  │
    └──────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from bloglist import __version__
from bloglist.config import settings
from bloglist.database import dispose_engine
from bloglist.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BlogListError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from bloglist.middleware.logging import RequestLoggingMiddleware
from bloglist.middleware.rate_limit import RateLimitMiddleware
from bloglist.middleware.request_id import RequestIDMiddleware, request_id_var
from bloglist.routes import blogs, health, login, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  logging, configuration check.
    Shutdown: dispose the database engine.
    """
    setup_logging()
    logger.info("Blog List backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Don't exit: development setups run on the default secret
        logger.error("Configuration error: %s", str(e))

    if settings.token_expire_minutes is None:
        logger.info("Bearer tokens do not expire (TOKEN_EXPIRE_MINUTES unset)")
    else:
        logger.info("Bearer tokens expire after %d minutes", settings.token_expire_minutes)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Blog List backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "details": details or {},
            "request_id": request_id_var.get(""),
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and one error body format.

    Handler hierarchy:
        RequestValidationError → 400 (FastAPI's 422 folded into 400)
        ValidationError        → 400 Bad Request
        AuthenticationError    → 401 Unauthorized
        AuthorizationError     → 403 Forbidden
        NotFoundError          → 404 Not Found
        DatabaseError          → 500 (generic message, details logged)
        BlogListError (base)   → 500
        Exception (fallback)   → 500 (stack trace logged)
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body/path failed its schema; reported exactly like ValidationError."""
        # Echoing `input` back could leak a submitted password
        errors = jsonable_encoder([
            {key: err[key] for key in ("type", "loc", "msg") if key in err}
            for err in exc.errors()
        ])
        fields = [".".join(str(p) for p in err.get("loc", ())[1:]) for err in errors]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), fields)
        summary = "; ".join(
            f"{field or 'body'}: {err.get('msg', 'invalid')}"
            for field, err in zip(fields, errors)
        )
        return _error_response(400, "validation_error", summary, {"errors": errors})

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(
            401,
            "authentication_error",
            exc.message,
            exc.context,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        return _error_response(403, "authorization_error", exc.message, exc.context)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message, exc.context)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        """Generic message to the client; context stays in the server log."""
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(
            500,
            "server_error",
            "An internal error occurred. Please try again later.",
        )

    @app.exception_handler(BlogListError)
    async def handle_app_error(request: Request, exc: BlogListError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Every call builds a fresh instance (fresh rate-limiter state), which the
    test suite relies on.
    """
    app = FastAPI(
        title="Blog List API",
        description=(
            "Shared blog list with token-based authorization. "
            "Anyone can read; registered users create blogs and delete their own."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After", "WWW-Authenticate"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(blogs.router)
    app.include_router(users.router)
    app.include_router(login.router)
    app.include_router(health.router)

    return app


# uvicorn expects `bloglist.main:app` to be importable
app = create_app()

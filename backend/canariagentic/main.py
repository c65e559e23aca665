"""
CanarIAgentic Web - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn canariagentic.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  POST /api/contact   POST /api/newsletter           │
    │  POST /api/cookie-consent   GET /api/health   GET / │
    │  /static/* (page script)                            │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ bad body→400 │ other→500     │
    └─────────────────────────────────────────────────────┘

Every error body has the shape {success: false, message, error, request_id}.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from canariagentic import __version__
from canariagentic.config import settings
from canariagentic.exceptions import ValidationError
from canariagentic.middleware.logging import RequestLoggingMiddleware
from canariagentic.middleware.request_id import RequestIDMiddleware, request_id_var
from canariagentic.routes import contact, cookie_consent, health, newsletter, pages
from canariagentic.schemas.submissions import ErrorResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor. Inténtalo de nuevo."
INVALID_BODY_MESSAGE = "Datos inválidos"

# Routes whose 500 message differs from the generic one
ROUTE_ERROR_MESSAGES = {
    "/api/newsletter": "Error al suscribirse",
}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Fallback records are logged by the submission service as JSON strings,
    so they stay greppable in the platform's log viewer.
    """
    log_format = (
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  configure logging, report the Supabase configuration.
    Shutdown: nothing to release; no connection outlives a request.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("%s %s starting up...", settings.service_name, __version__)

    # Missing credentials are not fatal: every submission falls back to the log
    try:
        settings.validate_store_credentials()
        logger.info("Supabase store: %s", settings.supabase_url)
    except ValueError as e:
        logger.warning("%s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error=error,
        request_id=request_id_var.get("") or None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 (missing fields, bad email, bad decision)
        RequestValidationError  → 400 (malformed JSON, wrong field types)
        Exception (fallback)    → 500 (fixed message, traceback logged only)

    Supabase errors never get here: the submission service recovers them.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error on %s: %s", rid, request.url.path, exc.message)
        return _error_response(400, "validation_error", exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body was not JSON, or a field had the wrong type."""
        rid = request_id_var.get("")
        logger.warning("[%s] Invalid request body on %s: %s", rid, request.url.path, exc.errors())
        return _error_response(400, "validation_error", INVALID_BODY_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error on %s: %s",
            rid,
            request.url.path,
            str(exc),
            exc_info=True,
        )
        message = ROUTE_ERROR_MESSAGES.get(request.url.path, INTERNAL_ERROR_MESSAGE)
        return _error_response(500, "internal_server_error", message)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Middleware executes in REVERSE order of addition, so RequestID (added
    last) runs first and the access log sees the request ID.
    """
    app = FastAPI(
        title="CanarIAgentic Web API",
        description=(
            "Landing page and form endpoints for the CanarIAgentic AI agency. "
            "Submissions are stored in Supabase, or logged when it is unavailable."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Compresses the landing page and script; JSON replies stay below the threshold
    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(contact.router)
    app.include_router(newsletter.router)
    app.include_router(cookie_consent.router)
    app.include_router(health.router)
    app.include_router(pages.router)
    app.mount("/static", StaticFiles(directory=str(pages.STATIC_DIR)), name="static")

    return app


# uvicorn expects `canariagentic.main:app` to be importable
app = create_app()

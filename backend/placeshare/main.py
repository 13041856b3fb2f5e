"""
PlaceShare Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes logging setup, middleware registration, error rendering,
       route mounting, and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn placeshare.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes:                                            │
    │    /api/places/...   /api/users/...   /health       │
    │                                                     │
    │  Exception Handlers:                                │
    │    PlaceShareError        → its own status code     │
    │    RequestValidationError → 422                     │
    │    Exception              → 500                     │
    └─────────────────────────────────────────────────────┘
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

from placeshare import __version__
from placeshare.config import settings
from placeshare.database import dispose_engine
from placeshare.exceptions import PlaceShareError, ValidationError
from placeshare.middleware.logging import RequestLoggingMiddleware
from placeshare.middleware.request_id import RequestIDMiddleware, request_id_var
from placeshare.routes import health, places, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When: Called once during app startup (before any other initialization).
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: set up logging, validate configuration.
    Shutdown: dispose the database engine (close all pooled connections).
    """
    setup_logging()
    logger.info("PlaceShare Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("PlaceShare Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details=None, request_id: str = None) -> dict:
    body = {
        "error": error,
        "message": message,
        "request_id": request_id or request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        PlaceShareError (any subclass) → exc.status_code
        RequestValidationError         → 422 Unprocessable Entity
        Exception (fallback)           → 500 Internal Server Error

    Security: 5xx responses carry a generic message only. The failure
    detail (exc.context, stack trace) is logged server-side.
    """

    @app.exception_handler(PlaceShareError)
    async def handle_app_error(request: Request, exc: PlaceShareError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s on %s %s: %s | Context: %s",
                rid, type(exc).__name__, request.method, request.url.path,
                exc.message, exc.context,
            )
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)

        details = exc.context if exc.expose_context else None
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message, details),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Body or path failed schema validation; list the offending fields."""
        rid = request_id_var.get("")
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        logger.info("[%s] Request validation failed: %s", rid, errors)
        # Rendered through the same error type services raise, so both
        # kinds of bad input share one status, code and message
        invalid = ValidationError(context={"errors": errors})
        return JSONResponse(
            status_code=invalid.status_code,
            content=_error_body(invalid.error_code, invalid.message, invalid.context),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: generic 500 with a request ID for support tickets."""
        rid = request_id_var.get("") or request.headers.get("X-Request-ID", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        # Starlette runs this handler outside the user middleware stack,
        # so RequestIDMiddleware never sees this response
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unknown error occurred! Please try again or contact support.",
                request_id=rid,
            ),
            headers={"X-Request-ID": rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="PlaceShare API",
        description="Share places you have visited: create, browse, update and delete places.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(places.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app


# uvicorn expects `placeshare.main:app` to be importable
app = create_app()

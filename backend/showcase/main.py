"""
Showcase API: FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the shared Store, FileIntake and
       Mailer, registers middleware, mounts one CRUD router per collection,
       the contact and health routes, and the static /uploads directory.
Who:   Called by uvicorn (uvicorn showcase.main:app) or `showcase-api`.
When:  Once at server startup; the returned app handles all requests.

Application Layout:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Req ID → Logging → GZip → CORS        │
    │                                                     │
    │  Routes:                                            │
    │    /api/subsidiaries   /api/proprietor              │
    │    /api/certifications /api/clients  /api/gallery   │
    │    /api/contact        /uploads/*                   │
    │    /health             /                            │
    │                                                     │
    │  app.state: store, file_intake, mailer              │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Check configuration (logged, never fatal)
    3. Connect the store (failure logged; CRUD then fails fast)

    Shutdown:
    1. Close the store client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from showcase import __version__
from showcase.config import Settings, settings as default_settings
from showcase.database import Store
from showcase.middleware.logging import RequestLoggingMiddleware
from showcase.middleware.request_id import RequestIDMiddleware, request_id_var
from showcase.routes import contact, health
from showcase.routes.crud import COLLECTIONS, create_crud_router
from showcase.schemas.envelope import Failure
from showcase.services.file_service import UPLOADS_URL_PREFIX, FileIntake
from showcase.services.mail_service import Mailer

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker / the process supervisor)
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("aiosmtplib").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the store on startup and close it on shutdown.

    A store that cannot be reached does not stop the server: the error is
    logged and CRUD requests answer with a failure envelope until restart.
    """
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Showcase API starting up...")

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    logger.info("Uploads directory: %s", app.state.file_intake.upload_dir)

    store: Store = app.state.store
    if not await store.connect():
        logger.error("Store unavailable: record endpoints will fail until restart")

    logger.info("Server ready at http://%s:%d", app_settings.host, app_settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Showcase API shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Keep the failure envelope for errors raised before a handler body runs.

    Route handlers catch their own errors. The one error they never see is
    request validation (e.g. a contact body that is not a JSON object),
    which FastAPI raises while resolving parameters; it gets the same
    HTTP 200 {"success": false, "error": ...} answer.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = exc.errors()
        message = "; ".join(str(err.get("msg", "")) for err in errors) or "Invalid request"
        logger.warning("[%s] Request validation error on %s: %s", rid, request.url.path, message)
        return JSONResponse(
            status_code=200,
            content=Failure(error=message).model_dump(),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build from. Defaults to the process-wide
                      settings loaded from the environment.

    Returns:
        Fully configured FastAPI instance. The store is created here but only
        connected by the lifespan handler.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Showcase API",
        description=(
            "CRUD over the showcase site's collections with image uploads, "
            "plus the contact-form mailer."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # ── Shared Resources ──────────────────────────────────────────────────
    app.state.settings = app_settings
    app.state.store = Store.from_settings(app_settings)
    app.state.file_intake = FileIntake(app_settings.upload_dir)
    app.state.mailer = Mailer.from_settings(app_settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(contact.router)
    for collection_name in COLLECTIONS:
        app.include_router(create_crud_router(collection_name))
    app.include_router(health.router)

    app.mount(
        UPLOADS_URL_PREFIX,
        StaticFiles(directory=str(app.state.file_intake.upload_dir)),
        name="uploads",
    )

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def root() -> str:
        return "<h2>Showcase API running: CRUD, file upload and mail active</h2>"

    return app


# Module-level instance for `uvicorn showcase.main:app`
app = create_app()


def run() -> None:
    """Console entry point: serve `app` on HOST:PORT."""
    uvicorn.run(
        "showcase.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

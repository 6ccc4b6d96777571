"""Verity Vendor API — FastAPI application factory."""


import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.core.config import Settings, settings as default_settings
from app.core.crypto import AccountNumberCipher
from app.core.exceptions import register_exception_handlers
from app.db.base import Database
from app.middleware.request_logging import RequestLoggingMiddleware
from app.schemas.common import HealthResponse

# v1 routers
from app.routers.v1.vendors import router as vendors_v1_router

API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def _configure_logging(settings: Settings) -> None:
    """Set up structured logging for the application."""
    level = logging.DEBUG if settings.is_development else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the app. Tests pass their own settings/database handle."""
    settings = settings or default_settings
    _configure_logging(settings)

    db = database or Database(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s (%s)", settings.app_name, settings.app_env)
        if settings.is_development and settings.database_url.startswith("sqlite"):
            # local SQLite only; real databases are migrated with Alembic
            await db.create_all()
        yield
        await db.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=API_VERSION,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # --- Settings, store handle + account number cipher (explicit, per app) ---
    app.state.settings = settings
    app.state.db = db
    app.state.account_cipher = AccountNumberCipher.from_settings(settings)

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    # --- Request logging ---
    app.add_middleware(RequestLoggingMiddleware)

    # --- Global exception handlers ---
    register_exception_handlers(app, settings)

    # --- v1 API routes (/api/v1/*) ---
    app.include_router(vendors_v1_router, prefix="/api/v1")

    # --- Health check ---
    @app.get(
        "/health",
        response_model=HealthResponse,
        responses={503: {"model": HealthResponse}},
        tags=["Health"],
    )
    async def health(request: Request):
        database_status = "ok"
        try:
            async with request.app.state.db.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Health check: database unavailable")
            database_status = "unavailable"
        body = HealthResponse(
            status="ok" if database_status == "ok" else "degraded",
            app=settings.app_name,
            env=settings.app_env,
            version=API_VERSION,
            database=database_status,
        )
        if database_status != "ok":
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump()
            )
        return body

    return app


app = create_app()

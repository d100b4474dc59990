"""
MagicMenu API — FastAPI application entry point.
Lifespan: create DB tables → verify connectivity → open the local record
store and media storage.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from magicmenu.config import settings
from magicmenu.database import AsyncSessionLocal, check_db_connectivity, engine
from magicmenu.models import Base
from magicmenu.routers import admin, auth, dishes, health, places, restaurants, reviews
from magicmenu.services.storage import build_storage
from magicmenu.store.hosted import BackendError, HostedBackend
from magicmenu.store.local import build_local_store

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.
    1. Create all tables (idempotent) unless running in demo mode.
    2. Verify DB connectivity.
    3. Open the local record store and media storage.
    """
    logger.info("Starting MagicMenu API (env=%s, data_mode=%s)", settings.app_env, settings.data_mode)

    if settings.data_mode != "demo":
        # Step 1: create tables
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified.")

        # Step 2: connectivity check
        ok = await check_db_connectivity()
        if not ok:
            logger.error("Database connectivity check FAILED at startup.")
        else:
            logger.info("Database connectivity verified.")

    # Step 3: stores
    app.state.data_mode = settings.data_mode
    app.state.local_store = build_local_store(settings.local_store_backend, settings.local_store_path)
    app.state.hosted = HostedBackend(AsyncSessionLocal)
    app.state.logo_storage = build_storage(settings, settings.logo_container)
    app.state.qr_storage = build_storage(settings, settings.qr_container)
    logger.info("Local record store ready (%s).", settings.local_store_backend)

    yield

    logger.info("Shutting down MagicMenu API.")
    await engine.dispose()


app = FastAPI(
    title="MagicMenu API",
    description="Restaurant registration, QR menus and public menu pages.",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────────────────────

app.include_router(health.router)
app.include_router(restaurants.router)
app.include_router(dishes.router)
app.include_router(reviews.router)
app.include_router(places.router)
app.include_router(auth.router)
app.include_router(admin.router)

# Uploaded logos/QR codes are served from here when storage is local
if settings.storage_backend == "local":
    Path(settings.media_root).mkdir(parents=True, exist_ok=True)
    app.mount("/media", StaticFiles(directory=settings.media_root), name="media")


# ── Exception handlers ───────────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query strings are plain 400s with the first problem named."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"detail": f"{field}: {message}" if field else message, "code": "VALIDATION_ERROR"},
    )


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    """Hosted-backend write failures in live mode."""
    logger.error("Backend error on %s %s: %s", request.method, request.url, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "The menu database is unavailable", "code": "BACKEND_UNAVAILABLE"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a machine-readable error for any unhandled exception."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "INTERNAL_ERROR"},
    )

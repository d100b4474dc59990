"""Health check endpoints — used by load balancers and uptime monitoring."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Liveness probe — returns 200 if the process is running."""
    return {"status": "ok", "version": "1.0.0"}


@router.get("/ready")
async def ready(request: Request) -> JSONResponse:
    """
    Readiness probe — checks the hosted database, reports the local store size.
    Returns 200 with {"db": "ok", "data_mode": ..., "local_restaurants": ...} when
    ready, or 503 with the failing component marked "error".

    In demo mode the hosted database is not consulted and reported as "skipped".
    """
    state = request.app.state
    status: dict[str, str] = {"data_mode": state.data_mode}
    all_ok = True

    if state.data_mode == "demo":
        status["db"] = "skipped"
    else:
        db_ok = await state.hosted.ping()
        status["db"] = "ok" if db_ok else "error"
        if not db_ok:
            logger.warning("Readiness check failed: hosted database unreachable")
            all_ok = False

    # read() never raises; an unreadable store just looks empty
    status["local_restaurants"] = str(len(state.local_store.read("restaurants")))

    http_status = 200 if all_ok else 503
    return JSONResponse(content=status, status_code=http_status)

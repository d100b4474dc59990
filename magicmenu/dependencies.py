"""
FastAPI dependencies shared by the routers.

The stores live on app.state (built in the lifespan handler); every request
gets its own resolver/mirror pair sharing one notices list, so anything
either of them reports ends up in that request's response.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from fastapi import Depends, HTTPException, Request, status

from magicmenu.config import settings
from magicmenu.services.auth import AuthError, decode_token
from magicmenu.services.authz import authorize
from magicmenu.services.mirror import MutationMirror
from magicmenu.services.resolver import FallbackResolver
from magicmenu.services.storage import MediaStorage

logger = logging.getLogger(__name__)


def get_notices(request: Request) -> list[str]:
    """Per-request notice ("toast") list."""
    if not hasattr(request.state, "notices"):
        request.state.notices = []
    return request.state.notices


def get_resolver(request: Request, notices: list[str] = Depends(get_notices)) -> FallbackResolver:
    state = request.app.state
    return FallbackResolver(state.local_store, state.hosted, state.data_mode, notices)


def get_mirror(request: Request, notices: list[str] = Depends(get_notices)) -> MutationMirror:
    state = request.app.state
    return MutationMirror(
        state.local_store,
        state.hosted,
        state.data_mode,
        notices,
        public_url=settings.app_public_url,
    )


def get_logo_storage(request: Request) -> MediaStorage:
    return request.app.state.logo_storage


def get_qr_storage(request: Request) -> MediaStorage:
    return request.app.state.qr_storage


async def current_user(
    request: Request,
    resolver: FallbackResolver = Depends(get_resolver),
) -> Optional[dict[str, Any]]:
    """The signed-in user's raw record, or None. Never raises for bad cookies."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return None
    try:
        claims = decode_token(token, settings.session_secret, purpose="session")
    except AuthError as exc:
        logger.info("Ignoring session cookie: %s", exc)
        return None
    return await resolver.find_one("users", {"id": claims["sub"]}, normalized=False)


async def require_user(user: Optional[dict[str, Any]] = Depends(current_user)) -> dict[str, Any]:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in required",
            headers={"X-Error-Code": "AUTH_REQUIRED"},
        )
    return user


def require_capability(capability: str) -> Callable[..., Any]:
    """Dependency factory for capabilities that don't depend on a resource."""

    async def _check(user: dict[str, Any] = Depends(require_user)) -> dict[str, Any]:
        if not authorize(user, capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
                headers={"X-Error-Code": "FORBIDDEN"},
            )
        return user

    return _check

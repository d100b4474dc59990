"""
Password auth endpoints.

Sessions are signed JWTs in an HTTP-only cookie. Password reset tokens are
only ever written to the application log; delivering them (e-mail etc.) is
left to whoever operates the deployment.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from magicmenu.config import settings
from magicmenu.dependencies import get_mirror, get_resolver, require_user
from magicmenu.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    UserRead,
)
from magicmenu.services.auth import (
    AuthError,
    check_reset_token,
    create_reset_token,
    create_session_token,
    decode_token,
    hash_password,
    verify_password,
)
from magicmenu.services.mirror import MutationMirror
from magicmenu.services.resolver import FallbackResolver, normalize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


# ── Helpers ──────────────────────────────────────────────────────────────────


def _public(user: dict[str, Any]) -> UserRead:
    return UserRead(**normalize("users", user))


async def _find_by_email(resolver: FallbackResolver, email: str) -> dict[str, Any] | None:
    return await resolver.find_one("users", {"email": email.strip().lower()}, normalized=False)


def _set_session_cookie(response: Response, user_id: str) -> None:
    token = create_session_token(user_id, settings.session_secret, settings.session_ttl_hours)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.app_env == "production",
    )


# ── Endpoints ────────────────────────────────────────────────────────────────


@router.post("/signup", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def signup(
    body: SignupRequest,
    response: Response,
    resolver: FallbackResolver = Depends(get_resolver),
    mirror: MutationMirror = Depends(get_mirror),
) -> UserRead:
    """Create an account and sign it in."""
    email = body.email.strip().lower()
    if await _find_by_email(resolver, email) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="An account with this email already exists",
            headers={"X-Error-Code": "EMAIL_TAKEN"},
        )

    user = await mirror.create_entity("users", {
        "email": email,
        "password_hash": hash_password(body.password),
        "last_sign_in_at": datetime.now(timezone.utc).isoformat(),
        "user_metadata": {
            "first_name": body.first_name.strip(),
            "last_name": body.last_name.strip(),
            "user_type": body.user_type,
        },
    })
    logger.info("New %s account %s", body.user_type, user["id"])
    _set_session_cookie(response, user["id"])
    return _public(user)


@router.post("/login", response_model=UserRead)
async def login(
    body: LoginRequest,
    response: Response,
    resolver: FallbackResolver = Depends(get_resolver),
    mirror: MutationMirror = Depends(get_mirror),
) -> UserRead:
    user = await _find_by_email(resolver, body.email)
    if user is None or not verify_password(body.password, user.get("password_hash")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"X-Error-Code": "INVALID_CREDENTIALS"},
        )

    now = datetime.now(timezone.utc).isoformat()
    updated = await mirror.update_entity("users", user["id"], {"last_sign_in_at": now})
    _set_session_cookie(response, user["id"])
    return _public(updated or {**user, "last_sign_in_at": now})


@router.post("/logout")
async def logout(response: Response) -> dict:
    response.delete_cookie(settings.session_cookie_name)
    return {"signed_out": True}


@router.get("/me", response_model=UserRead)
async def me(user: dict[str, Any] = Depends(require_user)) -> UserRead:
    return _public(user)


@router.post("/forgot-password")
async def forgot_password(
    body: ForgotPasswordRequest,
    resolver: FallbackResolver = Depends(get_resolver),
) -> dict:
    """Always answers the same way so the endpoint can't be used to probe accounts."""
    user = await _find_by_email(resolver, body.email)
    if user is not None:
        token = create_reset_token(user, settings.session_secret)
        if settings.app_env == "development":
            logger.info(
                "Password reset link for %s: %s/reset-password?token=%s",
                user["email"], settings.app_public_url.rstrip("/"), token,
            )
        else:
            logger.info("Password reset token issued for user %s", user["id"])
    return {"sent": True}


@router.post("/reset-password")
async def reset_password(
    body: ResetPasswordRequest,
    resolver: FallbackResolver = Depends(get_resolver),
    mirror: MutationMirror = Depends(get_mirror),
) -> dict:
    try:
        claims = decode_token(body.token, settings.session_secret, purpose="reset")
        user = await resolver.find_one("users", {"id": claims["sub"]}, normalized=False)
        if user is None:
            raise AuthError("Unknown account")
        check_reset_token(claims, user)
    except AuthError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
            headers={"X-Error-Code": "RESET_TOKEN_INVALID"},
        ) from exc

    await mirror.update_entity("users", user["id"], {"password_hash": hash_password(body.password)})
    logger.info("Password reset for user %s", user["id"])
    return {"updated": True}

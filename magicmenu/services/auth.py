"""
Password auth — hashing plus signed session and reset tokens.

Sessions are HS256 JWTs carried in an HTTP-only cookie:
  {"sub": user_id, "purpose": "session", "iat", "exp"}
Reset tokens use the same signer with purpose="reset" and a 1 h lifetime;
they embed a fingerprint of the current password hash so a token stops
working once the password has changed.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

logger = logging.getLogger(__name__)

JWT_ALGO = "HS256"
PASSWORD_METHOD = "pbkdf2:sha256:260000"
RESET_TOKEN_TTL = timedelta(hours=1)


class AuthError(Exception):
    """Invalid credentials or an unusable token."""


def hash_password(password: str) -> str:
    """Return a salted werkzeug hash, e.g. 'pbkdf2:sha256:260000$<salt>$<hex>'."""
    return generate_password_hash(password, method=PASSWORD_METHOD)


def verify_password(password: str, encoded: str | None) -> bool:
    if not encoded:
        return False
    try:
        return check_password_hash(encoded, password)
    except ValueError:
        # unknown hash method
        return False


def _fingerprint(password_hash: str | None) -> str:
    return hashlib.sha256((password_hash or "").encode()).hexdigest()[:16]


def create_session_token(user_id: str, secret: str, ttl_hours: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "purpose": "session",
        "iat": now,
        "exp": now + timedelta(hours=ttl_hours),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGO)


def create_reset_token(user: dict[str, Any], secret: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user["id"],
        "purpose": "reset",
        "fp": _fingerprint(user.get("password_hash")),
        "iat": now,
        "exp": now + RESET_TOKEN_TTL,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGO)


def decode_token(token: str, secret: str, purpose: str) -> dict[str, Any]:
    """Return the claims of a valid token for purpose, else raise AuthError."""
    try:
        claims = jwt.decode(token, secret, algorithms=[JWT_ALGO])
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError("Invalid token") from exc
    if claims.get("purpose") != purpose or not claims.get("sub"):
        raise AuthError("Invalid token")
    return claims


def check_reset_token(claims: dict[str, Any], user: dict[str, Any]) -> None:
    """A reset token is single-use: it dies once the password hash changes."""
    if claims.get("fp") != _fingerprint(user.get("password_hash")):
        logger.info("Rejected stale reset token for user %s", user.get("id"))
        raise AuthError("Reset link has already been used")

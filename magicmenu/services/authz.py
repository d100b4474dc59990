"""
Authorization — the only place that decides what a user may do.

Roles come exclusively from user_metadata.user_type. Ownership-scoped
capabilities additionally require resource["owner_user_id"] == user id.
"""

from __future__ import annotations

from typing import Any, Optional

ROLES = ("customer", "owner", "admin")

# role → capabilities granted regardless of ownership
_GLOBAL: dict[str, set[str]] = {
    "customer": {"review:write"},
    "owner": {"review:write"},
    "admin": {"*"},
}

# role → capabilities granted only on resources the user owns
_OWNED: dict[str, set[str]] = {
    "customer": set(),
    "owner": {"restaurant:manage", "dish:edit"},
    "admin": set(),
}


def role_of(user: Optional[dict[str, Any]]) -> Optional[str]:
    if not user:
        return None
    role = (user.get("user_metadata") or {}).get("user_type", "customer")
    return role if role in ROLES else "customer"


def authorize(
    user: Optional[dict[str, Any]],
    capability: str,
    resource: Optional[dict[str, Any]] = None,
) -> bool:
    """Return True if user holds capability (on resource, when one is given)."""
    role = role_of(user)
    if role is None:
        return False
    granted = _GLOBAL[role]
    if "*" in granted or capability in granted:
        return True
    if capability in _OWNED[role] and resource is not None:
        owner = resource.get("owner_user_id")
        return owner is not None and owner == user.get("id")
    return False

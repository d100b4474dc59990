"""Pydantic schemas for accounts and auth endpoints."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

UserType = Literal["customer", "owner", "admin"]


class UserMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_name: str = ""
    last_name: str = ""
    user_type: UserType = "customer"


class UserRead(BaseModel):
    """Public view of an account. password_hash is never part of it."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    created_at: Optional[str] = None
    last_sign_in_at: Optional[str] = None
    user_metadata: UserMetadata = Field(default_factory=UserMetadata)


class SignupRequest(BaseModel):
    """Body for POST /api/auth/signup. Admin accounts cannot self-register."""

    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = ""
    last_name: str = ""
    user_type: Literal["customer", "owner"] = "customer"


class LoginRequest(BaseModel):
    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    password: str = Field(..., min_length=8, max_length=128)


class RolePatch(BaseModel):
    """Body for PATCH /api/admin/users/{id}/role."""

    user_type: UserType


class UserStats(BaseModel):
    total: int
    active: int
    owners: int
    customers: int
    admins: int


class UserList(BaseModel):
    users: list[UserRead]
    stats: UserStats
    notices: list[str] = Field(default_factory=list)

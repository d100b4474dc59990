"""Pydantic schemas for reviews."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReviewRead(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    restaurant_id: str
    user_id: Optional[str] = None
    rating: int
    comment: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ReviewCreate(BaseModel):
    """Body for POST /api/restaurants/{id}/reviews."""

    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(default="", max_length=2000)


class ReviewPatch(BaseModel):
    """Body for PATCH /api/admin/reviews/{id}."""

    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)


class ReviewList(BaseModel):
    reviews: list[ReviewRead]
    notices: list[str] = Field(default_factory=list)

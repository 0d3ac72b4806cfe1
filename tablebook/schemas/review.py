"""
Review Pydantic schemas for API request/response models.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    restaurant_id: UUID
    rating: int = Field(ge=1, le=5)
    title: Optional[str] = None
    content: Optional[str] = None


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = None
    content: Optional[str] = None


class ReviewUserInfo(BaseModel):
    id: UUID
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewRestaurantInfo(BaseModel):
    id: UUID
    name: str
    cuisine: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewResponse(BaseModel):
    id: UUID
    user_id: UUID
    restaurant_id: UUID
    rating: int
    title: Optional[str] = None
    content: Optional[str] = None
    is_verified: bool
    is_approved: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[ReviewUserInfo] = None
    restaurant: Optional[ReviewRestaurantInfo] = None

    model_config = ConfigDict(from_attributes=True)

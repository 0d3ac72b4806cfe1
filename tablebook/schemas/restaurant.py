"""
Restaurant Pydantic schemas for API request/response models.
"""
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from tablebook.schemas.auth import PHONE_PATTERN
from tablebook.schemas.common import validate_hhmm

PriceRangeLiteral = Literal["LOW", "MEDIUM", "HIGH", "PREMIUM"]


class RestaurantBase(BaseModel):
    description: Optional[str] = None
    cuisine: Optional[str] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(None, pattern=r"^https?://\S+$")


class RestaurantCreate(RestaurantBase):
    """Request model for creating a restaurant."""
    name: str = Field(min_length=1)
    address: str = Field(min_length=1)
    opening_time: str
    closing_time: str
    max_capacity: int = Field(ge=1)
    price_range: PriceRangeLiteral = "MEDIUM"

    @field_validator("opening_time", "closing_time")
    @classmethod
    def normalize_times(cls, v):
        return validate_hhmm(v)

    @model_validator(mode="after")
    def hours_within_one_day(self):
        if self.opening_time >= self.closing_time:
            raise ValueError("opening_time must be before closing_time")
        return self


class RestaurantUpdate(RestaurantBase):
    """Request model for updating a restaurant. All fields optional."""
    name: Optional[str] = Field(None, min_length=1)
    address: Optional[str] = Field(None, min_length=1)
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    max_capacity: Optional[int] = Field(None, ge=1)
    price_range: Optional[PriceRangeLiteral] = None
    is_active: Optional[bool] = None

    @field_validator("opening_time", "closing_time")
    @classmethod
    def normalize_times(cls, v):
        return validate_hhmm(v)


class RestaurantResponse(BaseModel):
    """Response model for a single restaurant."""
    id: UUID
    name: str
    description: Optional[str] = None
    cuisine: Optional[str] = None
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    opening_time: str
    closing_time: str
    max_capacity: int
    price_range: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RestaurantListItem(RestaurantResponse):
    """Restaurant with aggregate rating and counts."""
    average_rating: float = 0.0
    review_count: int = 0
    table_count: int = 0


class RestaurantTableInfo(BaseModel):
    id: UUID
    table_number: str
    capacity: int
    min_capacity: Optional[int] = None
    has_window: bool
    has_outdoor: bool
    is_private: bool

    model_config = ConfigDict(from_attributes=True)


class RestaurantReviewInfo(BaseModel):
    id: UUID
    user_id: UUID
    user_name: Optional[str] = None
    rating: int
    title: Optional[str] = None
    content: Optional[str] = None
    created_at: Optional[datetime] = None


class RestaurantDetail(RestaurantListItem):
    """Restaurant with its in-service tables and most recent reviews."""
    tables: List[RestaurantTableInfo] = []
    reviews: List[RestaurantReviewInfo] = []

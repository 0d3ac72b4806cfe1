"""
Table Pydantic schemas for API request/response models.
"""
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TableCreate(BaseModel):
    """Request model for adding a table to a restaurant."""
    restaurant_id: UUID
    table_number: str = Field(min_length=1, max_length=20)
    capacity: int = Field(ge=1)
    min_capacity: Optional[int] = Field(None, ge=1)
    is_available: bool = True
    has_window: bool = False
    has_outdoor: bool = False
    is_private: bool = False

    @model_validator(mode="after")
    def min_within_capacity(self):
        if self.min_capacity is not None and self.min_capacity > self.capacity:
            raise ValueError("min_capacity cannot exceed capacity")
        return self


class TableUpdate(BaseModel):
    """Request model for updating a table. All fields optional."""
    restaurant_id: Optional[UUID] = None
    table_number: Optional[str] = Field(None, min_length=1, max_length=20)
    capacity: Optional[int] = Field(None, ge=1)
    min_capacity: Optional[int] = Field(None, ge=1)
    is_available: Optional[bool] = None
    has_window: Optional[bool] = None
    has_outdoor: Optional[bool] = None
    is_private: Optional[bool] = None


class RestaurantRef(BaseModel):
    id: UUID
    name: str

    model_config = ConfigDict(from_attributes=True)


class TableResponse(BaseModel):
    """Response model for a single table."""
    id: UUID
    restaurant_id: UUID
    table_number: str
    capacity: int
    min_capacity: Optional[int] = None
    is_available: bool
    has_window: bool
    has_outdoor: bool
    is_private: bool
    restaurant: Optional[RestaurantRef] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TableReservationInfo(BaseModel):
    id: UUID
    user_id: UUID
    reservation_date: date
    reservation_time: str
    party_size: int
    status: str

    model_config = ConfigDict(from_attributes=True)


class TableDetail(TableResponse):
    """Table with its most recent reservations."""
    reservation_count: int = 0
    reservations: List[TableReservationInfo] = []

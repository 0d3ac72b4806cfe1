"""
Reservation Pydantic schemas for API request/response models.
"""
from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tablebook.schemas.common import validate_hhmm

StatusLiteral = Literal["PENDING", "CONFIRMED", "CANCELLED", "COMPLETED", "NO_SHOW"]


class ReservationCreate(BaseModel):
    """Request model for booking a table."""
    restaurant_id: UUID
    table_id: UUID
    reservation_date: date
    reservation_time: str
    party_size: int = Field(ge=1)
    special_requests: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("reservation_time")
    @classmethod
    def normalize_time(cls, v):
        return validate_hhmm(v)


class ReservationUpdate(BaseModel):
    """Request model for editing a reservation."""
    status: Optional[StatusLiteral] = None
    special_requests: Optional[str] = None
    notes: Optional[str] = None


class ReservationUserInfo(BaseModel):
    id: UUID
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReservationRestaurantInfo(BaseModel):
    id: UUID
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ReservationTableInfo(BaseModel):
    id: UUID
    table_number: str
    capacity: int

    model_config = ConfigDict(from_attributes=True)


class ReservationResponse(BaseModel):
    """Reservation with denormalized user, restaurant and table summaries."""
    id: UUID
    user_id: UUID
    restaurant_id: UUID
    table_id: UUID
    reservation_date: date
    reservation_time: str
    party_size: int
    status: str
    special_requests: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[ReservationUserInfo] = None
    restaurant: Optional[ReservationRestaurantInfo] = None
    table: Optional[ReservationTableInfo] = None

    model_config = ConfigDict(from_attributes=True)

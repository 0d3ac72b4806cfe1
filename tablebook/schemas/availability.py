"""
Availability query response schemas.
"""
from datetime import date
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AvailableTable(BaseModel):
    id: UUID
    table_number: str
    capacity: int

    model_config = ConfigDict(from_attributes=True)


class SlotResponse(BaseModel):
    time: str
    available: bool
    tables: List[AvailableTable]

    model_config = ConfigDict(from_attributes=True)


class AvailabilityRestaurant(BaseModel):
    id: UUID
    name: str
    opening_time: str
    closing_time: str

    model_config = ConfigDict(from_attributes=True)


class AvailabilityResponse(BaseModel):
    restaurant: AvailabilityRestaurant
    date: date
    party_size: int
    availability: List[SlotResponse]

    model_config = ConfigDict(from_attributes=True)

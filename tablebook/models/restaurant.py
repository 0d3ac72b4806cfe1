import uuid
from enum import Enum

from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, Uuid, func
from sqlalchemy.orm import relationship

from tablebook.db.base import Base


class PriceRange(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    PREMIUM = "PREMIUM"


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    cuisine = Column(String(100))
    address = Column(String(500), nullable=False)
    phone = Column(String(50))
    email = Column(String(255))
    website = Column(String(500))
    opening_time = Column(String(5), nullable=False)  # "HH:MM"
    closing_time = Column(String(5), nullable=False)  # "HH:MM", same day as opening
    max_capacity = Column(Integer, nullable=False)
    price_range = Column(String(20), nullable=False, default=PriceRange.MEDIUM.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    tables = relationship("Table", back_populates="restaurant", cascade="all, delete-orphan")
    reservations = relationship("Reservation", back_populates="restaurant")
    reviews = relationship("Review", back_populates="restaurant", cascade="all, delete-orphan")

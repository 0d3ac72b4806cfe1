"""
Dining table model.

A table belongs to exactly one restaurant. `is_available` takes a table out
of service without deleting it; the feature flags are informational only.
"""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Uuid, UniqueConstraint, func
from sqlalchemy.orm import relationship

from tablebook.db.base import Base


class Table(Base):
    __tablename__ = "restaurant_tables"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_id = Column(Uuid(as_uuid=True), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True)
    table_number = Column(String(20), nullable=False)
    capacity = Column(Integer, nullable=False)
    min_capacity = Column(Integer, nullable=True)  # Null = no lower bound
    is_available = Column(Boolean, nullable=False, default=True)
    has_window = Column(Boolean, nullable=False, default=False)
    has_outdoor = Column(Boolean, nullable=False, default=False)
    is_private = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    restaurant = relationship("Restaurant", back_populates="tables")
    # Only terminal reservations can remain when a table is deleted
    reservations = relationship("Reservation", back_populates="table", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("restaurant_id", "table_number", name="uq_table_restaurant_number"),
    )

"""
Reservation model and status lifecycle.

PENDING and CONFIRMED reservations are active: they occupy their table and
take part in conflict detection. CANCELLED, COMPLETED and NO_SHOW are
terminal and release the table.
"""
import uuid
from enum import Enum

from sqlalchemy import Column, String, Text, Integer, Date, DateTime, ForeignKey, Index, Uuid, func, text
from sqlalchemy.orm import relationship

from tablebook.db.base import Base


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"


ACTIVE_STATUSES = (ReservationStatus.PENDING.value, ReservationStatus.CONFIRMED.value)
TERMINAL_STATUSES = (
    ReservationStatus.CANCELLED.value,
    ReservationStatus.COMPLETED.value,
    ReservationStatus.NO_SHOW.value,
)

_active_predicate = text("status IN ('PENDING', 'CONFIRMED')")


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    restaurant_id = Column(Uuid(as_uuid=True), ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False)
    table_id = Column(Uuid(as_uuid=True), ForeignKey("restaurant_tables.id", ondelete="CASCADE"), nullable=False)
    reservation_date = Column(Date, nullable=False)
    reservation_time = Column(String(5), nullable=False)  # "HH:MM", start of seating
    party_size = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=ReservationStatus.PENDING.value)
    special_requests = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="reservations")
    restaurant = relationship("Restaurant", back_populates="reservations")
    table = relationship("Table", back_populates="reservations")

    __table_args__ = (
        Index("idx_reservations_restaurant_date", "restaurant_id", "reservation_date"),
        # One active booking per exact table/date/start
        Index(
            "uq_reservations_active_slot",
            "table_id", "reservation_date", "reservation_time",
            unique=True,
            postgresql_where=_active_predicate,
            sqlite_where=_active_predicate,
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

"""
Persistence boundary for the availability engine.

The engine functions in `availability` and `reservations` take a
`ReservationStore` explicitly instead of reaching for a session, so the same
rules run against PostgreSQL in production and an in-memory fake in tests.
"""
from datetime import date
from typing import List, Optional, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tablebook.core.errors import ConflictError
from tablebook.models.reservation import Reservation, ACTIVE_STATUSES
from tablebook.models.restaurant import Restaurant
from tablebook.models.table import Table


class ReservationStore(Protocol):
    """Reads the restaurant/table catalog and reads/writes reservations."""

    def get_active_restaurant(self, restaurant_id: UUID) -> Optional[Restaurant]:
        ...

    def get_bookable_table(self, table_id: UUID, restaurant_id: UUID, lock: bool = False) -> Optional[Table]:
        """Table by id that belongs to the restaurant and is in service."""
        ...

    def list_candidate_tables(self, restaurant_id: UUID, party_size: int) -> List[Table]:
        """In-service tables that can seat the party, smallest capacity first."""
        ...

    def list_active_reservations(self, restaurant_id: UUID, reservation_date: date) -> List[Reservation]:
        ...

    def list_table_reservations(self, table_id: UUID, reservation_date: date) -> List[Reservation]:
        """Active reservations on one table for the day, whichever restaurant recorded them."""
        ...

    def get_reservation(self, reservation_id: UUID) -> Optional[Reservation]:
        ...

    def add_reservation(self, reservation: Reservation) -> Reservation:
        """Stage a new reservation inside the open transaction."""
        ...

    def commit_reservation(self, reservation: Reservation) -> Reservation:
        ...

    def save_reservation(self, reservation: Reservation) -> Reservation:
        ...

    def rollback(self) -> None:
        ...


class SqlAlchemyReservationStore:
    """`ReservationStore` backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def get_active_restaurant(self, restaurant_id: UUID) -> Optional[Restaurant]:
        return self.db.query(Restaurant).filter(
            Restaurant.id == restaurant_id,
            Restaurant.is_active == True,
        ).first()

    def get_bookable_table(self, table_id: UUID, restaurant_id: UUID, lock: bool = False) -> Optional[Table]:
        stmt = select(Table).where(
            Table.id == table_id,
            Table.restaurant_id == restaurant_id,
            Table.is_available == True,
        )
        if lock:
            # Serializes concurrent bookings of the same table until commit
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalars().first()

    def list_candidate_tables(self, restaurant_id: UUID, party_size: int) -> List[Table]:
        stmt = (
            select(Table)
            .where(
                Table.restaurant_id == restaurant_id,
                Table.is_available == True,
                Table.capacity >= party_size,
                (Table.min_capacity.is_(None)) | (Table.min_capacity <= party_size),
            )
            .order_by(Table.capacity.asc(), Table.table_number.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_active_reservations(self, restaurant_id: UUID, reservation_date: date) -> List[Reservation]:
        stmt = select(Reservation).where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.reservation_date == reservation_date,
            Reservation.status.in_(ACTIVE_STATUSES),
        ).order_by(Reservation.reservation_time.asc())
        return list(self.db.execute(stmt).scalars().all())

    def list_table_reservations(self, table_id: UUID, reservation_date: date) -> List[Reservation]:
        stmt = select(Reservation).where(
            Reservation.table_id == table_id,
            Reservation.reservation_date == reservation_date,
            Reservation.status.in_(ACTIVE_STATUSES),
        ).order_by(Reservation.reservation_time.asc())
        return list(self.db.execute(stmt).scalars().all())

    def get_reservation(self, reservation_id: UUID) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(Reservation.id == reservation_id).first()

    def add_reservation(self, reservation: Reservation) -> Reservation:
        self.db.add(reservation)
        try:
            # The INSERT takes the write lock on SQLite, so concurrent bookers queue here
            self.db.flush()
        except IntegrityError:
            # Lost a race against a concurrent booking of the same start
            self.db.rollback()
            raise ConflictError("Table is already reserved for this time slot")
        return reservation

    def commit_reservation(self, reservation: Reservation) -> Reservation:
        self.db.commit()
        self.db.refresh(reservation)
        return reservation

    def save_reservation(self, reservation: Reservation) -> Reservation:
        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)
        return reservation

    def rollback(self) -> None:
        self.db.rollback()

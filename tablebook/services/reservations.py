"""
Reservation lifecycle: creation guard, cancellation and status updates.

Creation validates everything before writing: restaurant, table, party size
against the table's bounds, then conflicts with active reservations on the
same table and date. The table row is locked for the check and the insert so
two concurrent requests cannot both pass the conflict check.
"""
from datetime import date
from typing import Any, Optional
from uuid import UUID
import logging

from tablebook.core.errors import (
    BusinessRuleError,
    CannotCancelError,
    ConflictError,
    NotFoundError,
    PartySizeTooLargeError,
    PartySizeTooSmallError,
    AccessDeniedError,
)
from tablebook.core.permissions import ensure_can_access, is_admin
from tablebook.models.reservation import Reservation, ReservationStatus, ACTIVE_STATUSES
from tablebook.services.availability import find_conflicts
from tablebook.services.store import ReservationStore

logger = logging.getLogger(__name__)


class ReservationService:
    """Business rules for creating and mutating reservations."""

    def __init__(self, store: ReservationStore):
        self.store = store

    def create_reservation(
        self,
        user_id: UUID,
        restaurant_id: UUID,
        table_id: UUID,
        reservation_date: date,
        reservation_time: str,
        party_size: int,
        special_requests: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Reservation:
        """
        Book a table. The new reservation starts out PENDING.

        Raises:
            NotFoundError: Restaurant missing/inactive, or table missing,
                out of service or owned by another restaurant
            PartySizeTooLargeError: party_size above the table's capacity
            PartySizeTooSmallError: party_size below the table's minimum
            ConflictError: An active reservation on the table starts less
                than two hours away
        """
        try:
            restaurant = self.store.get_active_restaurant(restaurant_id)
            if restaurant is None:
                raise NotFoundError("Restaurant not found", code="RESTAURANT_NOT_FOUND")

            table = self.store.get_bookable_table(table_id, restaurant.id, lock=True)
            if table is None:
                raise NotFoundError("Table not found or unavailable", code="TABLE_NOT_FOUND")

            if party_size > table.capacity:
                raise PartySizeTooLargeError(context={"capacity": table.capacity, "party_size": party_size})

            if table.min_capacity and party_size < table.min_capacity:
                raise PartySizeTooSmallError(context={"min_capacity": table.min_capacity, "party_size": party_size})

            existing = self.store.list_table_reservations(table.id, reservation_date)
            self._ensure_no_conflicts(table, reservation_date, reservation_time, existing)

            reservation = Reservation(
                user_id=user_id,
                restaurant_id=restaurant.id,
                table_id=table.id,
                reservation_date=reservation_date,
                reservation_time=reservation_time,
                party_size=party_size,
                status=ReservationStatus.PENDING.value,
                special_requests=special_requests,
                notes=notes,
            )
            self.store.add_reservation(reservation)

            # Re-read with the new row in place: a booking committed after the
            # check above is visible now
            existing = [
                r for r in self.store.list_table_reservations(table.id, reservation_date)
                if r.id != reservation.id
            ]
            self._ensure_no_conflicts(table, reservation_date, reservation_time, existing)

            reservation = self.store.commit_reservation(reservation)
        except Exception:
            # Releases the table lock and discards the staged row
            self.store.rollback()
            raise

        logger.info(
            "Reservation %s created: table %s on %s at %s for %d",
            reservation.id, table.id, reservation_date, reservation_time, party_size,
        )
        return reservation

    def _ensure_no_conflicts(self, table, reservation_date: date, reservation_time: str, existing) -> None:
        conflicts = find_conflicts(reservation_time, existing)
        if conflicts:
            logger.warning(
                "Rejected booking of table %s on %s at %s: conflicts with %s",
                table.id, reservation_date, reservation_time,
                ", ".join(r.reservation_time for r in conflicts),
            )
            raise ConflictError("Table is already reserved for this time slot")

    def get_reservation(self, reservation_id: UUID, actor: Any) -> Reservation:
        """Reservation visible to its owner or an administrator."""
        reservation = self.store.get_reservation(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation not found", code="RESERVATION_NOT_FOUND")
        ensure_can_access(actor, reservation.user_id)
        return reservation

    def cancel_reservation(self, reservation_id: UUID, actor: Any) -> Reservation:
        """
        Cancel an active reservation on behalf of its owner or an admin.

        Raises:
            NotFoundError: Unknown reservation
            AccessDeniedError: Actor is neither owner nor admin
            CannotCancelError: Reservation is already terminal
        """
        reservation = self.get_reservation(reservation_id, actor)
        return self._cancel(reservation, actor)

    def update_reservation(
        self,
        reservation_id: UUID,
        actor: Any,
        status: Optional[str] = None,
        special_requests: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Reservation:
        """
        Edit a reservation.

        Owners may change free-text fields and cancel; only administrators
        may confirm, complete or mark a no-show. Terminal reservations are
        immutable.
        """
        reservation = self.get_reservation(reservation_id, actor)

        if not reservation.is_active:
            raise BusinessRuleError(
                f"Reservation is {reservation.status} and can no longer be changed",
                code="INVALID_STATUS_TRANSITION",
            )

        if status == ReservationStatus.CANCELLED.value:
            self._apply_text_fields(reservation, special_requests, notes)
            return self._cancel(reservation, actor)

        if status is not None and status != reservation.status:
            if not is_admin(actor):
                raise AccessDeniedError("Only administrators can change reservation status")
            reservation.status = status

        self._apply_text_fields(reservation, special_requests, notes)
        reservation = self.store.save_reservation(reservation)
        logger.info("Reservation %s updated (status=%s)", reservation.id, reservation.status)
        return reservation

    def _cancel(self, reservation: Reservation, actor: Any) -> Reservation:
        if reservation.status not in ACTIVE_STATUSES:
            raise CannotCancelError()

        reservation.status = ReservationStatus.CANCELLED.value
        reservation = self.store.save_reservation(reservation)
        logger.info("Reservation %s cancelled by user %s", reservation.id, actor.id)
        return reservation

    @staticmethod
    def _apply_text_fields(reservation: Reservation, special_requests: Optional[str], notes: Optional[str]) -> None:
        if special_requests is not None:
            reservation.special_requests = special_requests
        if notes is not None:
            reservation.notes = notes

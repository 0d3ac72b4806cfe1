"""
Reservations router.

Creation and cancellation go through `ReservationService`, which owns the
double-booking and party-size rules. The full listing is admin-only; users
see their own bookings under /api/users/me/reservations.
"""
from datetime import date
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from tablebook.core.deps import PageParams, get_current_admin, get_current_user
from tablebook.db.session import get_db
from tablebook.models.reservation import Reservation
from tablebook.models.user import User
from tablebook.routers.users import filter_reservations, sort_reservations
from tablebook.schemas.common import Page
from tablebook.schemas.reservation import (
    ReservationCreate,
    ReservationResponse,
    ReservationUpdate,
    StatusLiteral,
)
from tablebook.services.reservations import ReservationService
from tablebook.services.store import SqlAlchemyReservationStore

router = APIRouter(prefix="/reservations", tags=["reservations"])


def get_reservation_service(db: Session = Depends(get_db)) -> ReservationService:
    return ReservationService(SqlAlchemyReservationStore(db))


@router.get("", response_model=Page[ReservationResponse])
def list_reservations(
    paging: PageParams = Depends(),
    status: Optional[StatusLiteral] = Query(None),
    restaurant_id: Optional[UUID] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    sort_by: Literal["created_at", "reservation_date", "reservation_time"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    current_user: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """All reservations across restaurants (admin only)."""
    query = filter_reservations(db.query(Reservation), status, restaurant_id, date_from, date_to)

    total = query.count()
    reservations = (
        sort_reservations(query, sort_by, sort_order)
        .options(
            joinedload(Reservation.user),
            joinedload(Reservation.restaurant),
            joinedload(Reservation.table),
        )
        .offset(paging.offset)
        .limit(paging.limit)
        .all()
    )

    return Page.build(
        [ReservationResponse.model_validate(r) for r in reservations],
        total, paging.page, paging.limit,
    )


@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
    reservation_data: ReservationCreate,
    current_user: User = Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """
    Book a table for the current user.

    Rejected with 409 when an active reservation on the same table starts
    less than two hours before or after the requested time.
    """
    return service.create_reservation(
        user_id=current_user.id,
        restaurant_id=reservation_data.restaurant_id,
        table_id=reservation_data.table_id,
        reservation_date=reservation_data.reservation_date,
        reservation_time=reservation_data.reservation_time,
        party_size=reservation_data.party_size,
        special_requests=reservation_data.special_requests,
        notes=reservation_data.notes,
    )


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
    reservation_id: UUID,
    current_user: User = Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    return service.get_reservation(reservation_id, current_user)


@router.put("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: UUID,
    update: ReservationUpdate,
    current_user: User = Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Edit notes and requests, cancel, or (admins) change status."""
    return service.update_reservation(
        reservation_id,
        current_user,
        status=update.status,
        special_requests=update.special_requests,
        notes=update.notes,
    )


@router.delete("/{reservation_id}", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: UUID,
    current_user: User = Depends(get_current_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Cancel a pending or confirmed reservation. The record is kept."""
    return service.cancel_reservation(reservation_id, current_user)

"""
Current-user profile and booking history, plus role management for super admins.
"""
from datetime import date
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from tablebook.core.deps import PageParams, get_current_super_admin, get_current_user
from tablebook.core.errors import BusinessRuleError, NotFoundError
from tablebook.db.session import get_db
from tablebook.models.reservation import Reservation
from tablebook.models.user import User
from tablebook.schemas.auth import ProfileUpdate, RoleUpdate, UserResponse
from tablebook.schemas.common import Page
from tablebook.schemas.reservation import ReservationResponse, StatusLiteral

router = APIRouter(prefix="/users", tags=["users"])

RESERVATION_SORT_COLUMNS = {
    "created_at": Reservation.created_at,
    "reservation_date": Reservation.reservation_date,
    "reservation_time": Reservation.reservation_time,
}


def filter_reservations(
    query,
    status: Optional[str],
    restaurant_id: Optional[UUID],
    date_from: Optional[date],
    date_to: Optional[date],
):
    """Apply the common reservation list filters to a query."""
    if status:
        query = query.filter(Reservation.status == status)
    if restaurant_id:
        query = query.filter(Reservation.restaurant_id == restaurant_id)
    if date_from:
        query = query.filter(Reservation.reservation_date >= date_from)
    if date_to:
        query = query.filter(Reservation.reservation_date <= date_to)
    return query


def sort_reservations(query, sort_by: str, sort_order: str):
    column = RESERVATION_SORT_COLUMNS[sort_by]
    return query.order_by(column.desc() if sort_order == "desc" else column.asc())


@router.get("/me", response_model=UserResponse)
def get_profile(current_user: User = Depends(get_current_user)) -> User:
    return current_user


@router.put("/me", response_model=UserResponse)
def update_profile(
    update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """Update name and/or phone of the current user."""
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)
    db.commit()
    db.refresh(current_user)
    return current_user


@router.get("/me/reservations", response_model=Page[ReservationResponse])
def list_my_reservations(
    paging: PageParams = Depends(),
    status: Optional[StatusLiteral] = Query(None),
    restaurant_id: Optional[UUID] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    sort_by: Literal["created_at", "reservation_date", "reservation_time"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    The current user's reservations, newest first by default.
    """
    query = db.query(Reservation).filter(Reservation.user_id == current_user.id)
    query = filter_reservations(query, status, restaurant_id, date_from, date_to)

    total = query.count()
    reservations = (
        sort_reservations(query, sort_by, sort_order)
        .options(joinedload(Reservation.restaurant), joinedload(Reservation.table))
        .offset(paging.offset)
        .limit(paging.limit)
        .all()
    )

    return Page.build(
        [ReservationResponse.model_validate(r) for r in reservations],
        total, paging.page, paging.limit,
    )


@router.put("/{user_id}/role", response_model=UserResponse)
def change_role(
    user_id: UUID,
    update: RoleUpdate,
    current_user: User = Depends(get_current_super_admin),
    db: Session = Depends(get_db),
) -> User:
    """Grant or revoke administrative roles. Super admins only."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")

    if user.id == current_user.id:
        raise BusinessRuleError("You cannot change your own role", code="INVALID_ROLE_CHANGE")

    user.role = update.role
    db.commit()
    db.refresh(user)
    return user

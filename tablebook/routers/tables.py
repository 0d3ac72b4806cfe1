"""
Restaurant tables router.
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from tablebook.core.deps import get_current_admin
from tablebook.core.errors import BusinessRuleError, ConflictError, InvalidRequestError, NotFoundError
from tablebook.db.session import get_db
from tablebook.models.reservation import Reservation, ACTIVE_STATUSES
from tablebook.models.restaurant import Restaurant
from tablebook.models.table import Table
from tablebook.models.user import User
from tablebook.schemas.common import MessageResponse
from tablebook.schemas.table import (
    TableCreate,
    TableDetail,
    TableReservationInfo,
    TableResponse,
    TableUpdate,
)

router = APIRouter(prefix="/tables", tags=["tables"])

RECENT_RESERVATIONS_LIMIT = 10


def get_table_or_404(db: Session, table_id: UUID) -> Table:
    table = db.query(Table).options(joinedload(Table.restaurant)).filter(Table.id == table_id).first()
    if not table:
        raise NotFoundError.for_resource("Table", code="TABLE_NOT_FOUND")
    return table


def ensure_unique_number(db: Session, restaurant_id: UUID, table_number: str, exclude_id: Optional[UUID] = None) -> None:
    """Table numbers are unique within a restaurant."""
    query = db.query(Table).filter(
        Table.restaurant_id == restaurant_id,
        Table.table_number == table_number,
    )
    if exclude_id is not None:
        query = query.filter(Table.id != exclude_id)
    if query.first():
        raise ConflictError(
            f"Table {table_number} already exists in this restaurant",
            code="DUPLICATE_TABLE",
        )


def count_active_reservations(db: Session, table_id: UUID) -> int:
    return db.query(Reservation).filter(
        Reservation.table_id == table_id,
        Reservation.status.in_(ACTIVE_STATUSES),
    ).count()


@router.get("", response_model=List[TableResponse])
def list_tables(
    restaurant_id: Optional[UUID] = Query(None),
    is_available: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
):
    """List tables, optionally for one restaurant, ordered by table number."""
    query = db.query(Table).options(joinedload(Table.restaurant))
    if restaurant_id:
        query = query.filter(Table.restaurant_id == restaurant_id)
    if is_available is not None:
        query = query.filter(Table.is_available == is_available)
    return query.order_by(Table.table_number.asc()).all()


@router.get("/{table_id}", response_model=TableDetail)
def get_table(table_id: UUID, db: Session = Depends(get_db)):
    """
    Table detail with its total reservation count and the most recent
    reservations.
    """
    table = get_table_or_404(db, table_id)

    reservation_count = db.query(Reservation).filter(Reservation.table_id == table.id).count()
    recent = db.query(Reservation).filter(
        Reservation.table_id == table.id,
    ).order_by(
        Reservation.reservation_date.desc(),
        Reservation.reservation_time.desc(),
    ).limit(RECENT_RESERVATIONS_LIMIT).all()

    return TableDetail(
        **TableResponse.model_validate(table).model_dump(),
        reservation_count=reservation_count,
        reservations=[TableReservationInfo.model_validate(r) for r in recent],
    )


@router.post("", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
def create_table(
    table_data: TableCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Add a table to a restaurant (admin only)."""
    restaurant = db.query(Restaurant).filter(Restaurant.id == table_data.restaurant_id).first()
    if not restaurant:
        raise NotFoundError("Restaurant not found", code="RESTAURANT_NOT_FOUND")

    ensure_unique_number(db, restaurant.id, table_data.table_number)

    table = Table(**table_data.model_dump())
    db.add(table)
    db.commit()
    db.refresh(table)
    return table


@router.put("/{table_id}", response_model=TableResponse)
def update_table(
    table_id: UUID,
    update: TableUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Update a table (admin only)."""
    table = get_table_or_404(db, table_id)
    changes = update.model_dump(exclude_unset=True, exclude_none=True)

    restaurant_id = changes.get("restaurant_id", table.restaurant_id)
    if "restaurant_id" in changes:
        exists = db.query(Restaurant.id).filter(Restaurant.id == restaurant_id).first()
        if not exists:
            raise NotFoundError("Restaurant not found", code="RESTAURANT_NOT_FOUND")
        if restaurant_id != table.restaurant_id and count_active_reservations(db, table.id):
            raise BusinessRuleError(
                "Cannot move a table with active reservations to another restaurant",
                code="HAS_RESERVATIONS",
            )

    table_number = changes.get("table_number", table.table_number)
    if table_number != table.table_number or restaurant_id != table.restaurant_id:
        ensure_unique_number(db, restaurant_id, table_number, exclude_id=table.id)

    capacity = changes.get("capacity", table.capacity)
    min_capacity = changes.get("min_capacity", table.min_capacity)
    if min_capacity is not None and min_capacity > capacity:
        raise InvalidRequestError("min_capacity cannot exceed capacity")

    for field, value in changes.items():
        setattr(table, field, value)

    db.commit()
    db.refresh(table)
    return table


@router.delete("/{table_id}", response_model=MessageResponse)
def delete_table(
    table_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Delete a table (admin only).

    Refused while the table still has pending or confirmed reservations;
    its finished reservation history is removed with it.
    """
    table = get_table_or_404(db, table_id)

    if count_active_reservations(db, table.id):
        raise BusinessRuleError(
            "Cannot delete a table with active reservations",
            code="HAS_RESERVATIONS",
        )

    db.delete(table)
    db.commit()
    return MessageResponse(message="Table deleted successfully")

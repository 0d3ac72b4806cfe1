"""
Restaurant catalog router.

Browsing is public; create, update and delete are restricted to
administrators. Delete is a soft delete (is_active = False), which also
hides the restaurant from availability checks and new bookings.
"""
from typing import Dict, List, Literal, Optional, Tuple
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from tablebook.core.deps import PageParams, get_current_admin
from tablebook.core.errors import InvalidRequestError, NotFoundError
from tablebook.db.session import get_db
from tablebook.models.restaurant import Restaurant
from tablebook.models.review import Review
from tablebook.models.table import Table
from tablebook.models.user import User
from tablebook.schemas.common import MessageResponse, Page
from tablebook.schemas.restaurant import (
    PriceRangeLiteral,
    RestaurantCreate,
    RestaurantDetail,
    RestaurantListItem,
    RestaurantResponse,
    RestaurantReviewInfo,
    RestaurantTableInfo,
    RestaurantUpdate,
)

router = APIRouter(prefix="/restaurants", tags=["restaurants"])

RECENT_REVIEWS_LIMIT = 10

SORT_COLUMNS = {
    "name": Restaurant.name,
    "created_at": Restaurant.created_at,
    "price_range": Restaurant.price_range,
}


# ============ Helper Functions ============

def get_active_restaurant(db: Session, restaurant_id: UUID) -> Restaurant:
    """Get an active restaurant, raise 404 if missing or soft-deleted."""
    restaurant = db.query(Restaurant).filter(
        Restaurant.id == restaurant_id,
        Restaurant.is_active == True,
    ).first()
    if not restaurant:
        raise NotFoundError("Restaurant not found", code="RESTAURANT_NOT_FOUND")
    return restaurant


def rating_stats(db: Session, restaurant_ids: List[UUID]) -> Dict[UUID, Tuple[float, int]]:
    """Average rating (1 decimal) and count of approved reviews per restaurant."""
    if not restaurant_ids:
        return {}
    rows = db.query(
        Review.restaurant_id,
        func.avg(Review.rating),
        func.count(Review.id),
    ).filter(
        Review.restaurant_id.in_(restaurant_ids),
        Review.is_approved == True,
    ).group_by(Review.restaurant_id).all()
    return {rid: (round(float(avg or 0), 1), count) for rid, avg, count in rows}


def table_counts(db: Session, restaurant_ids: List[UUID]) -> Dict[UUID, int]:
    if not restaurant_ids:
        return {}
    rows = db.query(Table.restaurant_id, func.count(Table.id)).filter(
        Table.restaurant_id.in_(restaurant_ids)
    ).group_by(Table.restaurant_id).all()
    return dict(rows)


def to_list_item(restaurant: Restaurant, ratings: Dict, tables: Dict) -> RestaurantListItem:
    average, review_count = ratings.get(restaurant.id, (0.0, 0))
    item = RestaurantListItem.model_validate(restaurant)
    item.average_rating = average
    item.review_count = review_count
    item.table_count = tables.get(restaurant.id, 0)
    return item


# ============ Endpoints ============

@router.get("", response_model=Page[RestaurantListItem])
def list_restaurants(
    paging: PageParams = Depends(),
    cuisine: Optional[str] = Query(None, description="Case-insensitive cuisine match"),
    price_range: Optional[PriceRangeLiteral] = Query(None),
    search: Optional[str] = Query(None, description="Search name, description and cuisine"),
    sort_by: Literal["name", "created_at", "price_range"] = Query("name"),
    sort_order: Literal["asc", "desc"] = Query("asc"),
    db: Session = Depends(get_db),
):
    """
    List active restaurants with filtering, sorting and pagination.

    Each item carries its average rating, review count and table count.
    """
    query = db.query(Restaurant).filter(Restaurant.is_active == True)

    if cuisine:
        query = query.filter(Restaurant.cuisine.ilike(f"%{cuisine}%"))
    if price_range:
        query = query.filter(Restaurant.price_range == price_range)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Restaurant.name.ilike(pattern),
            Restaurant.description.ilike(pattern),
            Restaurant.cuisine.ilike(pattern),
        ))

    total = query.count()

    column = SORT_COLUMNS[sort_by]
    restaurants = (
        query.order_by(column.desc() if sort_order == "desc" else column.asc())
        .offset(paging.offset)
        .limit(paging.limit)
        .all()
    )

    ids = [r.id for r in restaurants]
    ratings = rating_stats(db, ids)
    tables = table_counts(db, ids)

    return Page.build(
        [to_list_item(r, ratings, tables) for r in restaurants],
        total, paging.page, paging.limit,
    )


@router.get("/{restaurant_id}", response_model=RestaurantDetail)
def get_restaurant(restaurant_id: UUID, db: Session = Depends(get_db)):
    """
    Restaurant detail with in-service tables and the most recent reviews.
    """
    restaurant = get_active_restaurant(db, restaurant_id)

    tables = db.query(Table).filter(
        Table.restaurant_id == restaurant.id,
        Table.is_available == True,
    ).order_by(Table.table_number.asc()).all()

    reviews = db.query(Review).options(joinedload(Review.user)).filter(
        Review.restaurant_id == restaurant.id,
        Review.is_approved == True,
    ).order_by(Review.created_at.desc()).limit(RECENT_REVIEWS_LIMIT).all()

    item = to_list_item(
        restaurant,
        rating_stats(db, [restaurant.id]),
        table_counts(db, [restaurant.id]),
    )

    return RestaurantDetail(
        **item.model_dump(),
        tables=[RestaurantTableInfo.model_validate(t) for t in tables],
        reviews=[
            RestaurantReviewInfo(
                id=r.id,
                user_id=r.user_id,
                user_name=r.user.name if r.user else None,
                rating=r.rating,
                title=r.title,
                content=r.content,
                created_at=r.created_at,
            )
            for r in reviews
        ],
    )


@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
def create_restaurant(
    restaurant_data: RestaurantCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Create a restaurant (admin only)."""
    restaurant = Restaurant(**restaurant_data.model_dump())
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


@router.put("/{restaurant_id}", response_model=RestaurantResponse)
def update_restaurant(
    restaurant_id: UUID,
    update: RestaurantUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Update a restaurant (admin only).

    Soft-deleted restaurants can be restored by sending `is_active: true`.
    """
    restaurant = db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
    if not restaurant:
        raise NotFoundError("Restaurant not found", code="RESTAURANT_NOT_FOUND")

    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    opening = changes.get("opening_time", restaurant.opening_time)
    closing = changes.get("closing_time", restaurant.closing_time)
    if opening >= closing:
        raise InvalidRequestError("opening_time must be before closing_time")

    for field, value in changes.items():
        setattr(restaurant, field, value)

    db.commit()
    db.refresh(restaurant)
    return restaurant


@router.delete("/{restaurant_id}", response_model=MessageResponse)
def delete_restaurant(
    restaurant_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Soft-delete a restaurant (admin only)."""
    restaurant = db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
    if not restaurant:
        raise NotFoundError("Restaurant not found", code="RESTAURANT_NOT_FOUND")

    restaurant.is_active = False
    db.commit()
    return MessageResponse(message="Restaurant deleted successfully")

"""
Restaurant reviews router.

A user may review a restaurant once, and only after a completed visit.
"""
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from tablebook.core.deps import PageParams, get_current_user
from tablebook.core.errors import AccessDeniedError, BusinessRuleError, ConflictError, NotFoundError
from tablebook.core.permissions import can_access, ensure_can_access
from tablebook.db.session import get_db
from tablebook.models.reservation import Reservation, ReservationStatus
from tablebook.models.review import Review
from tablebook.models.user import User
from tablebook.routers.restaurants import get_active_restaurant
from tablebook.schemas.common import MessageResponse, Page
from tablebook.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate

router = APIRouter(prefix="/reviews", tags=["reviews"])

SORT_COLUMNS = {
    "created_at": Review.created_at,
    "rating": Review.rating,
}


def get_review_or_404(db: Session, review_id: UUID) -> Review:
    review = db.query(Review).options(
        joinedload(Review.user),
        joinedload(Review.restaurant),
    ).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError.for_resource("Review", code="REVIEW_NOT_FOUND")
    return review


@router.get("", response_model=Page[ReviewResponse])
def list_reviews(
    paging: PageParams = Depends(),
    restaurant_id: Optional[UUID] = Query(None),
    rating: Optional[int] = Query(None, ge=1, le=5),
    sort_by: Literal["created_at", "rating"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    db: Session = Depends(get_db),
):
    """Approved reviews, newest first by default."""
    query = db.query(Review).filter(Review.is_approved == True)
    if restaurant_id:
        query = query.filter(Review.restaurant_id == restaurant_id)
    if rating:
        query = query.filter(Review.rating == rating)

    total = query.count()

    column = SORT_COLUMNS[sort_by]
    reviews = (
        query.order_by(column.desc() if sort_order == "desc" else column.asc())
        .options(joinedload(Review.user), joinedload(Review.restaurant))
        .offset(paging.offset)
        .limit(paging.limit)
        .all()
    )

    return Page.build(
        [ReviewResponse.model_validate(r) for r in reviews],
        total, paging.page, paging.limit,
    )


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Review a restaurant the current user has visited.

    Requires a COMPLETED reservation at the restaurant; the review is marked
    verified.
    """
    restaurant = get_active_restaurant(db, review_data.restaurant_id)

    existing = db.query(Review).filter(
        Review.user_id == current_user.id,
        Review.restaurant_id == restaurant.id,
    ).first()
    if existing:
        raise ConflictError("You have already reviewed this restaurant", code="ALREADY_REVIEWED")

    visited = db.query(Reservation.id).filter(
        Reservation.user_id == current_user.id,
        Reservation.restaurant_id == restaurant.id,
        Reservation.status == ReservationStatus.COMPLETED.value,
    ).first()
    if not visited:
        raise BusinessRuleError(
            "You can only review restaurants after a completed reservation",
            code="NO_RESERVATION",
        )

    review = Review(
        user_id=current_user.id,
        restaurant_id=restaurant.id,
        rating=review_data.rating,
        title=review_data.title,
        content=review_data.content,
        is_verified=True,
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


@router.get("/{review_id}", response_model=ReviewResponse)
def get_review(
    review_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Unapproved reviews are only visible to their author and admins."""
    review = get_review_or_404(db, review_id)
    if not review.is_approved and not can_access(current_user, review.user_id):
        raise AccessDeniedError("Review is not approved", code="NOT_APPROVED")
    return review


@router.put("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: UUID,
    update: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = get_review_or_404(db, review_id)
    ensure_can_access(current_user, review.user_id)

    for field, value in update.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(review, field, value)

    db.commit()
    db.refresh(review)
    return review


@router.delete("/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    review = get_review_or_404(db, review_id)
    ensure_can_access(current_user, review.user_id)

    db.delete(review)
    db.commit()
    return MessageResponse(message="Review deleted successfully")

"""
Table availability router.

GET /api/availability?restaurant_id=&date=YYYY-MM-DD&party_size=&time_from=&time_to=
"""
from dataclasses import asdict
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tablebook.core.errors import InvalidRequestError, MissingParamsError
from tablebook.core.time_of_day import normalize_hhmm
from tablebook.db.session import get_db
from tablebook.schemas.availability import AvailabilityResponse
from tablebook.services.availability import DEFAULT_PARTY_SIZE, AvailabilityService
from tablebook.services.store import SqlAlchemyReservationStore

router = APIRouter(prefix="/availability", tags=["availability"])


def _parse_time(name: str, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return normalize_hhmm(value)
    except ValueError:
        raise InvalidRequestError(f"{name} must be in HH:MM format")


@router.get("", response_model=AvailabilityResponse)
def check_availability(
    restaurant_id: Optional[str] = Query(None, description="Restaurant UUID"),
    date_str: Optional[str] = Query(None, alias="date", description="YYYY-MM-DD"),
    party_size: int = Query(DEFAULT_PARTY_SIZE, ge=1),
    time_from: Optional[str] = Query(None, description="Earliest slot, HH:MM"),
    time_to: Optional[str] = Query(None, description="Latest slot, HH:MM"),
    db: Session = Depends(get_db),
):
    """
    Free tables for every 30-minute slot of the restaurant's opening hours.

    A slot is available when at least one in-service table that fits the
    party has no active reservation starting within two hours of it.
    """
    if not restaurant_id or not date_str:
        raise MissingParamsError("restaurant_id and date are required")

    try:
        restaurant_uuid = UUID(restaurant_id)
    except ValueError:
        raise InvalidRequestError("restaurant_id must be a valid UUID")

    try:
        on_date = date.fromisoformat(date_str)
    except ValueError:
        raise InvalidRequestError("date must be in YYYY-MM-DD format")

    service = AvailabilityService(SqlAlchemyReservationStore(db))
    result = service.check_availability(
        restaurant_uuid,
        on_date,
        party_size=party_size,
        time_from=_parse_time("time_from", time_from),
        time_to=_parse_time("time_to", time_to),
    )
    return AvailabilityResponse.model_validate(asdict(result))

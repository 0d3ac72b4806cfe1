"""
Table availability engine.

Slots are generated every 30 minutes from opening time up to (but excluding)
closing time. Every reservation occupies its table for a fixed two-hour
window derived from its start time; a slot conflicts with a reservation when
their starts are less than 120 minutes apart.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional
from uuid import UUID
import logging

from tablebook.core.errors import NotFoundError
from tablebook.core.time_of_day import from_minutes, to_minutes
from tablebook.models.reservation import Reservation
from tablebook.models.table import Table
from tablebook.services.store import ReservationStore

logger = logging.getLogger(__name__)

SLOT_INTERVAL_MINUTES = 30
OCCUPANCY_WINDOW_MINUTES = 120
DEFAULT_PARTY_SIZE = 2


def generate_time_slots(opening_time: str, closing_time: str) -> List[str]:
    """
    Bookable start times for one day, in order.

    Examples:
        >>> generate_time_slots("11:00", "13:00")
        ['11:00', '11:30', '12:00', '12:30']
        >>> generate_time_slots("22:00", "02:00")
        []
    """
    start = to_minutes(opening_time)
    end = to_minutes(closing_time)
    return [from_minutes(m) for m in range(start, end, SLOT_INTERVAL_MINUTES)]


def filter_slots(slots: Iterable[str], time_from: Optional[str] = None, time_to: Optional[str] = None) -> List[str]:
    """Keep slots inside [time_from, time_to]; both bounds inclusive and optional."""
    return [
        slot for slot in slots
        if (time_from is None or slot >= time_from) and (time_to is None or slot <= time_to)
    ]


def times_conflict(start_a: str, start_b: str) -> bool:
    """
    Whether two bookings on the same table would overlap.

    Compares start times only: anything strictly under 120 minutes apart
    conflicts, exactly 120 minutes apart does not.
    """
    return abs(to_minutes(start_a) - to_minutes(start_b)) < OCCUPANCY_WINDOW_MINUTES


def find_conflicts(start_time: str, reservations: Iterable[Reservation]) -> List[Reservation]:
    """Active reservations whose window overlaps a booking starting at `start_time`."""
    return [
        r for r in reservations
        if r.is_active and times_conflict(start_time, r.reservation_time)
    ]


@dataclass
class TableSummary:
    id: UUID
    table_number: str
    capacity: int

    @classmethod
    def from_table(cls, table: Table) -> "TableSummary":
        return cls(id=table.id, table_number=table.table_number, capacity=table.capacity)


@dataclass
class SlotAvailability:
    time: str
    available: bool
    tables: List[TableSummary] = field(default_factory=list)


@dataclass
class RestaurantSummary:
    id: UUID
    name: str
    opening_time: str
    closing_time: str


@dataclass
class AvailabilityResult:
    restaurant: RestaurantSummary
    date: date
    party_size: int
    availability: List[SlotAvailability]


class AvailabilityService:
    """
    Computes per-slot table availability for a restaurant and date.

    Read-only: every call recomputes from the store's current state.
    """

    def __init__(self, store: ReservationStore):
        self.store = store

    def check_availability(
        self,
        restaurant_id: UUID,
        on_date: date,
        party_size: int = DEFAULT_PARTY_SIZE,
        time_from: Optional[str] = None,
        time_to: Optional[str] = None,
    ) -> AvailabilityResult:
        """
        Args:
            restaurant_id: Restaurant to check
            on_date: Calendar date of the visit
            party_size: Number of guests
            time_from: Earliest slot to return (HH:MM, inclusive)
            time_to: Latest slot to return (HH:MM, inclusive)

        Raises:
            NotFoundError: If the restaurant does not exist or is inactive
        """
        restaurant = self.store.get_active_restaurant(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found", code="RESTAURANT_NOT_FOUND")

        tables = self.store.list_candidate_tables(restaurant.id, party_size)
        reservations = self.store.list_active_reservations(restaurant.id, on_date)

        by_table = {}
        for reservation in reservations:
            by_table.setdefault(reservation.table_id, []).append(reservation)

        slots = filter_slots(
            generate_time_slots(restaurant.opening_time, restaurant.closing_time),
            time_from,
            time_to,
        )

        availability = []
        for slot in slots:
            free = [
                TableSummary.from_table(table)
                for table in tables
                if not find_conflicts(slot, by_table.get(table.id, []))
            ]
            availability.append(SlotAvailability(time=slot, available=bool(free), tables=free))

        logger.debug(
            "Availability for restaurant %s on %s (party of %d): %d slots, %d candidate tables",
            restaurant.id, on_date, party_size, len(slots), len(tables),
        )

        return AvailabilityResult(
            restaurant=RestaurantSummary(
                id=restaurant.id,
                name=restaurant.name,
                opening_time=restaurant.opening_time,
                closing_time=restaurant.closing_time,
            ),
            date=on_date,
            party_size=party_size,
            availability=availability,
        )

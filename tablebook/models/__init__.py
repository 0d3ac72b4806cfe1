"""
SQLAlchemy models for TableBook.
"""
# Accounts
from tablebook.models.user import User, UserRole

# Catalog
from tablebook.models.restaurant import Restaurant, PriceRange
from tablebook.models.table import Table

# Bookings
from tablebook.models.reservation import (
    Reservation,
    ReservationStatus,
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
)

# Reviews
from tablebook.models.review import Review

# Token Blacklist
from tablebook.models.token_blacklist import TokenBlacklist


__all__ = [
    # Accounts
    "User",
    "UserRole",
    # Catalog
    "Restaurant",
    "PriceRange",
    "Table",
    # Bookings
    "Reservation",
    "ReservationStatus",
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    # Reviews
    "Review",
    # Token Blacklist
    "TokenBlacklist",
]

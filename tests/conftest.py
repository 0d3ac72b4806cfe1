"""
Test configuration and fixtures.

Every test gets a fresh in-memory SQLite database; the app's `get_db`
dependency is overridden to hand out the test session.
"""
import os
import uuid
from datetime import date
from typing import Dict, Generator, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Set test configuration before importing app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-that-is-at-least-32-characters"

from tablebook.main import app
from tablebook.db.base import Base
from tablebook.db.session import get_db
from tablebook.core.errors import ConflictError
from tablebook.core.security import hash_password
from tablebook.models import Reservation, Restaurant, Table, User, UserRole

TEST_PASSWORD = "Password123!"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh schema and a database session for the test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


def make_user(db: Session, email: str, role: str = UserRole.USER.value, name: Optional[str] = None) -> User:
    user = User(
        email=email,
        hashed_password=hash_password(TEST_PASSWORD),
        name=name,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(client: TestClient, email: str) -> Dict[str, str]:
    response = client.post("/api/auth/login", json={"email": email, "password": TEST_PASSWORD})
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_user(db: Session) -> User:
    return make_user(db, "testuser@example.com", name="Test User")


@pytest.fixture
def other_user(db: Session) -> User:
    return make_user(db, "otheruser@example.com", name="Other User")


@pytest.fixture
def admin_user(db: Session) -> User:
    return make_user(db, "admin@example.com", role=UserRole.ADMIN.value, name="Admin")


@pytest.fixture
def super_admin(db: Session) -> User:
    return make_user(db, "root@example.com", role=UserRole.SUPER_ADMIN.value, name="Root")


@pytest.fixture
def auth_headers(client: TestClient, test_user: User) -> dict:
    """Get auth headers for test user."""
    return login(client, test_user.email)


@pytest.fixture
def other_headers(client: TestClient, other_user: User) -> dict:
    return login(client, other_user.email)


@pytest.fixture
def admin_headers(client: TestClient, admin_user: User) -> dict:
    return login(client, admin_user.email)


@pytest.fixture
def super_admin_headers(client: TestClient, super_admin: User) -> dict:
    return login(client, super_admin.email)


@pytest.fixture
def restaurant(db: Session) -> Restaurant:
    """Open 11:00-23:00."""
    restaurant = Restaurant(
        name="Test Bistro",
        cuisine="Italian",
        address="1 Test Street",
        opening_time="11:00",
        closing_time="23:00",
        max_capacity=40,
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


@pytest.fixture
def tables(db: Session, restaurant: Restaurant) -> Dict[str, Table]:
    """
    Three tables keyed by number:
    "1" seats 2, "2" seats 4, "3" seats 5-8.
    """
    rows = [
        Table(restaurant_id=restaurant.id, table_number="1", capacity=2),
        Table(restaurant_id=restaurant.id, table_number="2", capacity=4),
        Table(restaurant_id=restaurant.id, table_number="3", capacity=8, min_capacity=5),
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return {row.table_number: row for row in rows}


@pytest.fixture
def booking_date() -> date:
    return date(2030, 6, 15)


# ============ In-memory store ============

class InMemoryReservationStore:
    """
    ReservationStore over plain lists, for exercising the engine without a
    database. Model instances are used transiently and never flushed.
    """

    def __init__(self):
        self.restaurants: List[Restaurant] = []
        self.tables: List[Table] = []
        self.reservations: List[Reservation] = []
        self.staged: List[Reservation] = []
        self.rollbacks = 0

    def add_restaurant(self, opening_time="11:00", closing_time="23:00", is_active=True, name="Fake Bistro") -> Restaurant:
        restaurant = Restaurant(
            id=uuid.uuid4(),
            name=name,
            address="Nowhere",
            opening_time=opening_time,
            closing_time=closing_time,
            max_capacity=20,
            is_active=is_active,
        )
        self.restaurants.append(restaurant)
        return restaurant

    def add_table(self, restaurant: Restaurant, table_number: str, capacity: int,
                  min_capacity: Optional[int] = None, is_available: bool = True) -> Table:
        table = Table(
            id=uuid.uuid4(),
            restaurant_id=restaurant.id,
            table_number=table_number,
            capacity=capacity,
            min_capacity=min_capacity,
            is_available=is_available,
        )
        self.tables.append(table)
        return table

    # ReservationStore

    def get_active_restaurant(self, restaurant_id):
        for restaurant in self.restaurants:
            if restaurant.id == restaurant_id and restaurant.is_active:
                return restaurant
        return None

    def get_bookable_table(self, table_id, restaurant_id, lock=False):
        for table in self.tables:
            if table.id == table_id and table.restaurant_id == restaurant_id and table.is_available:
                return table
        return None

    def list_candidate_tables(self, restaurant_id, party_size):
        candidates = [
            t for t in self.tables
            if t.restaurant_id == restaurant_id
            and t.is_available
            and t.capacity >= party_size
            and (t.min_capacity is None or t.min_capacity <= party_size)
        ]
        return sorted(candidates, key=lambda t: (t.capacity, t.table_number))

    def list_active_reservations(self, restaurant_id, reservation_date):
        return sorted(
            (
                r for r in self.reservations
                if r.restaurant_id == restaurant_id
                and r.reservation_date == reservation_date
                and r.is_active
            ),
            key=lambda r: r.reservation_time,
        )

    def list_table_reservations(self, table_id, reservation_date):
        return sorted(
            (
                r for r in self.reservations + self.staged
                if r.table_id == table_id
                and r.reservation_date == reservation_date
                and r.is_active
            ),
            key=lambda r: r.reservation_time,
        )

    def get_reservation(self, reservation_id):
        for reservation in self.reservations:
            if reservation.id == reservation_id:
                return reservation
        return None

    def add_reservation(self, reservation):
        for existing in self.reservations + self.staged:
            if (existing.is_active and existing.table_id == reservation.table_id
                    and existing.reservation_date == reservation.reservation_date
                    and existing.reservation_time == reservation.reservation_time):
                raise ConflictError("Table is already reserved for this time slot")
        reservation.id = uuid.uuid4()
        self.staged.append(reservation)
        return reservation

    def commit_reservation(self, reservation):
        self.staged.remove(reservation)
        self.reservations.append(reservation)
        return reservation

    def save_reservation(self, reservation):
        return reservation

    def rollback(self):
        self.staged.clear()
        self.rollbacks += 1


@pytest.fixture
def store() -> InMemoryReservationStore:
    return InMemoryReservationStore()

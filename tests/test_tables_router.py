"""
Integration tests for the tables API router.
"""
import uuid

import pytest

from tablebook.models.reservation import Reservation
from tablebook.models.restaurant import Restaurant
from tablebook.models.table import Table


def add_reservation(db, user, table, booking_date, time_str="19:00", status="PENDING"):
    reservation = Reservation(
        user_id=user.id,
        restaurant_id=table.restaurant_id,
        table_id=table.id,
        reservation_date=booking_date,
        reservation_time=time_str,
        party_size=2,
        status=status,
    )
    db.add(reservation)
    db.commit()
    return reservation


@pytest.fixture
def second_restaurant(db):
    restaurant = Restaurant(
        name="Second Bistro",
        address="2 Test Street",
        opening_time="11:00",
        closing_time="23:00",
        max_capacity=20,
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


class TestListTables:
    """Tests for GET /api/tables."""

    def test_list_for_restaurant(self, client, restaurant, tables):
        response = client.get("/api/tables", params={"restaurant_id": str(restaurant.id)})

        assert response.status_code == 200
        data = response.json()
        assert [t["table_number"] for t in data] == ["1", "2", "3"]
        assert data[0]["restaurant"]["name"] == "Test Bistro"
        assert data[2]["min_capacity"] == 5

    def test_filter_available(self, client, db, restaurant, tables):
        tables["1"].is_available = False
        db.commit()

        response = client.get("/api/tables", params={"is_available": "false"})

        assert [t["table_number"] for t in response.json()] == ["1"]


class TestGetTable:
    def test_detail_with_reservations(self, client, db, test_user, tables, booking_date):
        add_reservation(db, test_user, tables["2"], booking_date, "12:00", status="COMPLETED")
        add_reservation(db, test_user, tables["2"], booking_date, "19:00")

        response = client.get(f"/api/tables/{tables['2'].id}")

        assert response.status_code == 200
        data = response.json()
        assert data["reservation_count"] == 2
        assert [r["reservation_time"] for r in data["reservations"]] == ["19:00", "12:00"]

    def test_not_found(self, client):
        response = client.get(f"/api/tables/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "TABLE_NOT_FOUND"


class TestTableAdmin:
    """Tests for admin table management."""

    def test_create(self, client, admin_headers, restaurant):
        response = client.post(
            "/api/tables",
            headers=admin_headers,
            json={"restaurant_id": str(restaurant.id), "table_number": "10", "capacity": 6, "has_window": True},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["capacity"] == 6
        assert data["has_window"] is True
        assert data["is_available"] is True

    def test_create_requires_admin(self, client, auth_headers, restaurant):
        response = client.post(
            "/api/tables",
            headers=auth_headers,
            json={"restaurant_id": str(restaurant.id), "table_number": "10", "capacity": 6},
        )

        assert response.status_code == 403

    def test_create_duplicate_number(self, client, admin_headers, restaurant, tables):
        response = client.post(
            "/api/tables",
            headers=admin_headers,
            json={"restaurant_id": str(restaurant.id), "table_number": "1", "capacity": 2},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "DUPLICATE_TABLE"

    def test_create_for_unknown_restaurant(self, client, admin_headers):
        response = client.post(
            "/api/tables",
            headers=admin_headers,
            json={"restaurant_id": str(uuid.uuid4()), "table_number": "1", "capacity": 2},
        )

        assert response.status_code == 404

    def test_create_min_above_capacity(self, client, admin_headers, restaurant):
        response = client.post(
            "/api/tables",
            headers=admin_headers,
            json={"restaurant_id": str(restaurant.id), "table_number": "11", "capacity": 2, "min_capacity": 4},
        )

        assert response.status_code == 400

    def test_update(self, client, admin_headers, tables):
        response = client.put(
            f"/api/tables/{tables['1'].id}",
            headers=admin_headers,
            json={"capacity": 3, "is_available": False},
        )

        assert response.status_code == 200
        assert response.json()["capacity"] == 3
        assert response.json()["is_available"] is False

    def test_update_to_duplicate_number(self, client, admin_headers, tables):
        response = client.put(
            f"/api/tables/{tables['1'].id}",
            headers=admin_headers,
            json={"table_number": "2"},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "DUPLICATE_TABLE"

    def test_update_capacity_below_minimum(self, client, admin_headers, tables):
        response = client.put(
            f"/api/tables/{tables['3'].id}",
            headers=admin_headers,
            json={"capacity": 4},
        )

        assert response.status_code == 400

    def test_move_blocked_by_active_reservation(
        self, client, db, admin_headers, test_user, tables, second_restaurant, booking_date
    ):
        add_reservation(db, test_user, tables["2"], booking_date)

        response = client.put(
            f"/api/tables/{tables['2'].id}",
            headers=admin_headers,
            json={"restaurant_id": str(second_restaurant.id)},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "HAS_RESERVATIONS"
        db.expire_all()
        assert db.get(Table, tables["2"].id).restaurant_id != second_restaurant.id

    def test_move_with_only_past_reservations(
        self, client, db, admin_headers, test_user, tables, second_restaurant, booking_date
    ):
        add_reservation(db, test_user, tables["2"], booking_date, status="COMPLETED")

        response = client.put(
            f"/api/tables/{tables['2'].id}",
            headers=admin_headers,
            json={"restaurant_id": str(second_restaurant.id)},
        )

        assert response.status_code == 200
        assert response.json()["restaurant_id"] == str(second_restaurant.id)

    def test_delete(self, client, db, admin_headers, tables):
        response = client.delete(f"/api/tables/{tables['1'].id}", headers=admin_headers)

        assert response.status_code == 200
        db.expire_all()
        assert db.query(Table).count() == 2

    def test_delete_blocked_by_active_reservation(self, client, db, admin_headers, test_user, tables, booking_date):
        add_reservation(db, test_user, tables["2"], booking_date)

        response = client.delete(f"/api/tables/{tables['2'].id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "HAS_RESERVATIONS"

    def test_delete_with_only_past_reservations(self, client, db, admin_headers, test_user, tables, booking_date):
        add_reservation(db, test_user, tables["2"], booking_date, status="COMPLETED")
        add_reservation(db, test_user, tables["2"], booking_date, "21:00", status="CANCELLED")

        response = client.delete(f"/api/tables/{tables['2'].id}", headers=admin_headers)

        assert response.status_code == 200
        db.expire_all()
        assert db.query(Reservation).count() == 0

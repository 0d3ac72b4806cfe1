"""
Integration tests for the restaurants API router.
"""
import uuid

import pytest

from tablebook.models.restaurant import Restaurant
from tablebook.models.review import Review


def restaurant_payload(**overrides) -> dict:
    body = {
        "name": "New Place",
        "address": "2 Market Square",
        "cuisine": "Thai",
        "opening_time": "12:00",
        "closing_time": "22:00",
        "max_capacity": 30,
        "price_range": "HIGH",
    }
    body.update(overrides)
    return body


@pytest.fixture
def catalog(db):
    """Three restaurants, one of them soft-deleted."""
    rows = [
        Restaurant(name="Alpha Sushi", cuisine="Japanese", address="A", opening_time="11:00",
                   closing_time="22:00", max_capacity=10, price_range="HIGH"),
        Restaurant(name="Bravo Pizza", cuisine="Italian", address="B", opening_time="12:00",
                   closing_time="23:00", max_capacity=20, price_range="LOW",
                   description="Wood-fired sushi-free zone"),
        Restaurant(name="Closed Diner", cuisine="American", address="C", opening_time="08:00",
                   closing_time="15:00", max_capacity=15, is_active=False),
    ]
    db.add_all(rows)
    db.commit()
    return rows


class TestListRestaurants:
    """Tests for GET /api/restaurants."""

    def test_lists_active_only(self, client, catalog):
        response = client.get("/api/restaurants")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [r["name"] for r in data["items"]] == ["Alpha Sushi", "Bravo Pizza"]
        assert data["page"] == 1
        assert data["total_pages"] == 1

    def test_cuisine_filter_is_case_insensitive(self, client, catalog):
        response = client.get("/api/restaurants", params={"cuisine": "japan"})

        assert [r["name"] for r in response.json()["items"]] == ["Alpha Sushi"]

    def test_search_covers_description(self, client, catalog):
        response = client.get("/api/restaurants", params={"search": "sushi"})

        assert {r["name"] for r in response.json()["items"]} == {"Alpha Sushi", "Bravo Pizza"}

    def test_price_range_filter(self, client, catalog):
        response = client.get("/api/restaurants", params={"price_range": "LOW"})

        assert [r["name"] for r in response.json()["items"]] == ["Bravo Pizza"]

    def test_sort_desc_and_paginate(self, client, catalog):
        response = client.get("/api/restaurants", params={"sort_order": "desc", "limit": 1})

        data = response.json()
        assert [r["name"] for r in data["items"]] == ["Bravo Pizza"]
        assert data["total_pages"] == 2

    def test_limit_is_capped(self, client, catalog):
        response = client.get("/api/restaurants", params={"limit": 1000})

        assert response.status_code == 400

    def test_rating_aggregates(self, client, db, restaurant, tables, test_user, other_user):
        db.add_all([
            Review(user_id=test_user.id, restaurant_id=restaurant.id, rating=5),
            Review(user_id=other_user.id, restaurant_id=restaurant.id, rating=4),
        ])
        db.commit()

        item = client.get("/api/restaurants").json()["items"][0]

        assert item["average_rating"] == 4.5
        assert item["review_count"] == 2
        assert item["table_count"] == 3

    def test_unapproved_reviews_not_counted(self, client, db, restaurant, test_user, other_user):
        db.add_all([
            Review(user_id=test_user.id, restaurant_id=restaurant.id, rating=5),
            Review(user_id=other_user.id, restaurant_id=restaurant.id, rating=1, is_approved=False),
        ])
        db.commit()

        item = client.get("/api/restaurants").json()["items"][0]

        assert item["average_rating"] == 5.0
        assert item["review_count"] == 1


class TestGetRestaurant:
    def test_detail(self, client, db, restaurant, tables):
        tables["3"].is_available = False
        db.commit()

        response = client.get(f"/api/restaurants/{restaurant.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["opening_time"] == "11:00"
        assert [t["table_number"] for t in data["tables"]] == ["1", "2"]
        assert data["table_count"] == 3
        assert data["reviews"] == []

    def test_not_found(self, client):
        response = client.get(f"/api/restaurants/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "RESTAURANT_NOT_FOUND"


class TestRestaurantAdmin:
    """Create, update and soft delete require an admin."""

    def test_create(self, client, admin_headers):
        response = client.post("/api/restaurants", headers=admin_headers, json=restaurant_payload(opening_time="9:00"))

        assert response.status_code == 201
        data = response.json()
        assert data["opening_time"] == "09:00"
        assert data["is_active"] is True

    def test_create_requires_admin(self, client, auth_headers):
        response = client.post("/api/restaurants", headers=auth_headers, json=restaurant_payload())

        assert response.status_code == 403

    def test_create_rejects_overnight_hours(self, client, admin_headers):
        response = client.post(
            "/api/restaurants",
            headers=admin_headers,
            json=restaurant_payload(opening_time="18:00", closing_time="02:00"),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_update(self, client, admin_headers, restaurant):
        response = client.put(
            f"/api/restaurants/{restaurant.id}",
            headers=admin_headers,
            json={"closing_time": "22:00", "cuisine": "Fusion"},
        )

        assert response.status_code == 200
        assert response.json()["closing_time"] == "22:00"
        assert response.json()["cuisine"] == "Fusion"

    def test_update_rejects_closing_before_opening(self, client, admin_headers, restaurant):
        response = client.put(
            f"/api/restaurants/{restaurant.id}",
            headers=admin_headers,
            json={"closing_time": "10:00"},
        )

        assert response.status_code == 400

    def test_soft_delete_hides_restaurant(self, client, db, admin_headers, restaurant):
        response = client.delete(f"/api/restaurants/{restaurant.id}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"/api/restaurants/{restaurant.id}").status_code == 404
        db.expire_all()
        assert db.query(Restaurant).filter(Restaurant.id == restaurant.id).first() is not None

    def test_restore_after_soft_delete(self, client, admin_headers, restaurant):
        client.delete(f"/api/restaurants/{restaurant.id}", headers=admin_headers)

        response = client.put(f"/api/restaurants/{restaurant.id}", headers=admin_headers, json={"is_active": True})

        assert response.json()["is_active"] is True
        assert client.get(f"/api/restaurants/{restaurant.id}").status_code == 200

"""
Integration tests for the reviews API router.
"""
import pytest

from tablebook.models.reservation import Reservation
from tablebook.models.review import Review


@pytest.fixture
def completed_visit(db, test_user, restaurant, tables, booking_date):
    reservation = Reservation(
        user_id=test_user.id,
        restaurant_id=restaurant.id,
        table_id=tables["1"].id,
        reservation_date=booking_date,
        reservation_time="19:00",
        party_size=2,
        status="COMPLETED",
    )
    db.add(reservation)
    db.commit()
    return reservation


@pytest.fixture
def review(client, auth_headers, restaurant, completed_visit) -> dict:
    response = client.post(
        "/api/reviews",
        headers=auth_headers,
        json={"restaurant_id": str(restaurant.id), "rating": 4, "title": "Lovely", "content": "Great pasta"},
    )
    assert response.status_code == 201
    return response.json()


class TestCreateReview:
    """Tests for POST /api/reviews."""

    def test_create_after_completed_visit(self, review):
        assert review["rating"] == 4
        assert review["is_verified"] is True
        assert review["is_approved"] is True

    def test_second_review_conflicts(self, client, auth_headers, restaurant, review):
        response = client.post(
            "/api/reviews",
            headers=auth_headers,
            json={"restaurant_id": str(restaurant.id), "rating": 5},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "ALREADY_REVIEWED"

    def test_requires_completed_reservation(self, client, other_headers, restaurant):
        response = client.post(
            "/api/reviews",
            headers=other_headers,
            json={"restaurant_id": str(restaurant.id), "rating": 3},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "NO_RESERVATION"

    def test_rating_out_of_range(self, client, auth_headers, restaurant, completed_visit):
        response = client.post(
            "/api/reviews",
            headers=auth_headers,
            json={"restaurant_id": str(restaurant.id), "rating": 6},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_inactive_restaurant(self, client, db, auth_headers, restaurant, completed_visit):
        restaurant.is_active = False
        db.commit()

        response = client.post(
            "/api/reviews",
            headers=auth_headers,
            json={"restaurant_id": str(restaurant.id), "rating": 3},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "RESTAURANT_NOT_FOUND"


class TestListReviews:
    def test_public_list(self, client, review):
        response = client.get("/api/reviews")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["user"]["name"] == "Test User"
        assert data["items"][0]["restaurant"]["name"] == "Test Bistro"

    def test_hides_unapproved(self, client, db, review):
        db.query(Review).update({Review.is_approved: False})
        db.commit()

        response = client.get("/api/reviews")

        assert response.json()["total"] == 0

    def test_filter_by_rating(self, client, review):
        assert client.get("/api/reviews", params={"rating": 4}).json()["total"] == 1
        assert client.get("/api/reviews", params={"rating": 5}).json()["total"] == 0


class TestGetReview:
    def test_get(self, client, other_headers, review):
        response = client.get(f"/api/reviews/{review['id']}", headers=other_headers)

        assert response.status_code == 200
        assert response.json()["title"] == "Lovely"

    def test_unapproved_hidden_from_others(self, client, db, other_headers, review):
        db.query(Review).update({Review.is_approved: False})
        db.commit()

        response = client.get(f"/api/reviews/{review['id']}", headers=other_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "NOT_APPROVED"

    def test_unapproved_visible_to_author(self, client, db, auth_headers, review):
        db.query(Review).update({Review.is_approved: False})
        db.commit()

        response = client.get(f"/api/reviews/{review['id']}", headers=auth_headers)

        assert response.status_code == 200


class TestModifyReview:
    def test_author_updates(self, client, auth_headers, review):
        response = client.put(f"/api/reviews/{review['id']}", headers=auth_headers, json={"rating": 5})

        assert response.status_code == 200
        assert response.json()["rating"] == 5
        assert response.json()["title"] == "Lovely"

    def test_other_user_cannot_update(self, client, other_headers, review):
        response = client.put(f"/api/reviews/{review['id']}", headers=other_headers, json={"rating": 1})

        assert response.status_code == 403

    def test_admin_deletes(self, client, admin_headers, review):
        response = client.delete(f"/api/reviews/{review['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get("/api/reviews").json()["total"] == 0

    def test_other_user_cannot_delete(self, client, other_headers, review):
        response = client.delete(f"/api/reviews/{review['id']}", headers=other_headers)

        assert response.status_code == 403

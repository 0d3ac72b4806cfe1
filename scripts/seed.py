"""
Seed script for the TableBook development database.

Creates an admin and a regular user, a few restaurants with tables, one
completed visit (so the user can post a review) and one upcoming booking.

Usage:
    python scripts/seed.py
"""
from datetime import date, timedelta

from tablebook.core.security import hash_password
from tablebook.db.base import Base
from tablebook.db.session import SessionLocal, engine
from tablebook.models import Reservation, ReservationStatus, Restaurant, Table, User, UserRole

DEMO_PASSWORD = "Password123!"

RESTAURANTS = [
    {
        "name": "La Boqueria Bites",
        "cuisine": "Tapas",
        "address": "La Rambla 91, Barcelona",
        "opening_time": "12:00",
        "closing_time": "23:00",
        "max_capacity": 40,
        "price_range": "MEDIUM",
        "tables": [("1", 2, None), ("2", 2, None), ("3", 4, 2), ("4", 6, 3), ("5", 8, 4)],
    },
    {
        "name": "Eixample Elegance",
        "cuisine": "Mediterranean",
        "address": "Passeig de Gracia 43, Barcelona",
        "opening_time": "13:00",
        "closing_time": "22:30",
        "max_capacity": 30,
        "price_range": "PREMIUM",
        "tables": [("A1", 2, None), ("A2", 4, None), ("B1", 4, 2), ("P1", 10, 6)],
    },
    {
        "name": "Gracia Noodle Bar",
        "cuisine": "Japanese",
        "address": "Carrer de Verdi 12, Barcelona",
        "opening_time": "11:00",
        "closing_time": "16:00",
        "max_capacity": 20,
        "price_range": "LOW",
        "tables": [("1", 2, None), ("2", 2, None), ("3", 4, None)],
    },
]


def seed_database():
    """Seed the database with demo data. Does nothing if users already exist."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    try:
        if session.query(User).count() > 0:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        admin = User(
            email="admin@tablebook.dev",
            hashed_password=hash_password(DEMO_PASSWORD),
            name="Demo Admin",
            role=UserRole.SUPER_ADMIN.value,
        )
        guest = User(
            email="guest@tablebook.dev",
            hashed_password=hash_password(DEMO_PASSWORD),
            name="Demo Guest",
            phone="+34600000000",
        )
        session.add_all([admin, guest])
        session.flush()
        print(f"Created users: {admin.email}, {guest.email}")

        first_table = None
        for data in RESTAURANTS:
            tables = data.pop("tables")
            restaurant = Restaurant(**data)
            session.add(restaurant)
            session.flush()
            for number, capacity, min_capacity in tables:
                table = Table(
                    restaurant_id=restaurant.id,
                    table_number=number,
                    capacity=capacity,
                    min_capacity=min_capacity,
                )
                session.add(table)
                session.flush()
                if first_table is None:
                    first_table = table
            print(f"Created restaurant {restaurant.name} with {len(tables)} tables")

        session.add_all([
            Reservation(
                user_id=guest.id,
                restaurant_id=first_table.restaurant_id,
                table_id=first_table.id,
                reservation_date=date.today() - timedelta(days=7),
                reservation_time="20:00",
                party_size=2,
                status=ReservationStatus.COMPLETED.value,
            ),
            Reservation(
                user_id=guest.id,
                restaurant_id=first_table.restaurant_id,
                table_id=first_table.id,
                reservation_date=date.today() + timedelta(days=3),
                reservation_time="19:30",
                party_size=2,
                status=ReservationStatus.CONFIRMED.value,
            ),
        ])

        session.commit()
        print("\n✅ Database seeded successfully!")
        print("\nDemo credentials:")
        print(f"  Email: {admin.email} | Password: {DEMO_PASSWORD}")
        print(f"  Email: {guest.email} | Password: {DEMO_PASSWORD}")

    except Exception as e:
        session.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    seed_database()

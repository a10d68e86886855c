#!/usr/bin/env python3
"""
Seed Data Script

Creates roles, an admin account, locations and a sample catalog of tours,
lodges and transports for the Travel Booking System.

Usage:
    python seed_data.py
"""

from datetime import date, timedelta
from decimal import Decimal

from travel.auth.utils import get_password_hash
from travel.database import Base, SessionLocal, engine
from travel.models import (
    Booking, Location, Lodge, Payment, Role, Tour, Transport, User, UserHasRole
)

def create_seed_data():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        print("🚀 Creating seed data for Travel Booking System...")

        # Clear existing data (in reverse dependency order)
        print("Clearing existing data...")
        db.query(Payment).delete()
        db.query(Booking).delete()
        db.query(Tour).delete()
        db.query(Lodge).delete()
        db.query(Transport).delete()
        db.query(Location).delete()
        db.query(UserHasRole).delete()
        db.query(User).delete()
        db.query(Role).delete()

        # 1. Create Roles
        print("Creating roles...")
        roles = [
            Role(name="super_admin"),
            Role(name="admin"),
            Role(name="user")
        ]
        db.add_all(roles)
        db.flush()

        # 2. Create Admin User
        print("Creating admin user...")
        admin = User(
            name="System Administrator",
            email="admin@travel.local",
            password=get_password_hash("Admin123!")
        )
        db.add(admin)
        db.flush()
        db.add(UserHasRole(user_id=admin.id, role_id=roles[0].id))

        # 3. Create Locations
        print("Creating locations...")
        locations = [
            Location(name="Kathmandu Valley", city="Kathmandu", country="Nepal",
                     description="Capital valley with seven UNESCO heritage sites"),
            Location(name="Pokhara Lakeside", city="Pokhara", country="Nepal",
                     description="Gateway to the Annapurna range"),
            Location(name="Chitwan National Park", city="Sauraha", country="Nepal",
                     description="Subtropical lowland jungle"),
            Location(name="Paro Valley", city="Paro", country="Bhutan"),
        ]
        db.add_all(locations)
        db.flush()
        kathmandu, pokhara, chitwan, paro = locations

        # 4. Create Tours
        print("Creating tours...")
        today = date.today()
        tours = [
            Tour(name="Annapurna Base Camp Trek", location_id=pokhara.id, price=Decimal("1200.00"),
                 duration_days=12, start_date=today + timedelta(days=30), end_date=today + timedelta(days=42),
                 guide="Pemba Sherpa", capacity=12, available=12),
            Tour(name="Kathmandu Heritage Walk", location_id=kathmandu.id, price=Decimal("45.00"),
                 duration_days=1, start_date=today + timedelta(days=3), end_date=today + timedelta(days=3),
                 guide="Sita Shrestha", capacity=20, available=20),
            Tour(name="Jungle Safari", location_id=chitwan.id, price=Decimal("180.00"),
                 duration_days=3, start_date=today + timedelta(days=14), end_date=today + timedelta(days=17),
                 capacity=8, available=8),
            Tour(name="Tiger's Nest Hike", location_id=paro.id, price=Decimal("250.00"),
                 duration_days=1, start_date=today + timedelta(days=60), end_date=today + timedelta(days=60),
                 capacity=15, available=15),
        ]
        db.add_all(tours)

        # 5. Create Lodges
        print("Creating lodges...")
        lodges = [
            Lodge(name="Himalayan Guest House", type="GUESTHOUSE", address="Thamel, Kathmandu",
                  contact_number="+977-1-4700000", location_id=kathmandu.id,
                  price_per_night=Decimal("35.00"), amenities="WiFi, Breakfast",
                  rating=Decimal("4.30"), capacity=14, available=14),
            Lodge(name="Fewa Lake Resort", type="RESORT", address="Lakeside Road, Pokhara",
                  location_id=pokhara.id, price_per_night=Decimal("120.00"),
                  amenities="Pool, Spa, Lake view", rating=Decimal("4.70"), capacity=30, available=30),
            Lodge(name="Jungle Lodge", type="LODGE", address="Sauraha, Chitwan",
                  location_id=chitwan.id, price_per_night=Decimal("60.00"),
                  rating=Decimal("3.90"), capacity=10, available=10),
        ]
        db.add_all(lodges)

        # 6. Create Transports
        print("Creating transports...")
        transports = [
            Transport(name="Tourist Bus", type="BUS", provider="Greenline", vehicle_number="BA-1-KHA-2045",
                      from_location_id=kathmandu.id, to_location_id=pokhara.id,
                      price_per_ticket=Decimal("25.00"), capacity=35, available=35),
            Transport(name="Mountain Flight", type="FLIGHT", provider="Buddha Air", vehicle_number="9N-AKA",
                      from_location_id=kathmandu.id, to_location_id=pokhara.id,
                      price_per_ticket=Decimal("110.00"), capacity=18, available=18),
            Transport(name="Chitwan Shuttle", type="BUS", provider="Greenline",
                      from_location_id=pokhara.id, to_location_id=chitwan.id,
                      price_per_ticket=Decimal("20.00"), capacity=35, available=35),
        ]
        db.add_all(transports)

        # Commit all changes
        db.commit()
        print("✅ Successfully created seed data for Travel Booking System!")
        print(f"Created:")
        print(f"  - {len(roles)} user roles")
        print(f"  - 1 admin user (admin@travel.local / Admin123!)")
        print(f"  - {len(locations)} locations")
        print(f"  - {len(tours)} tours")
        print(f"  - {len(lodges)} lodges")
        print(f"  - {len(transports)} transports")

    except Exception as e:
        print(f"❌ Error creating seed data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    create_seed_data()

"""
Shared fixtures: a fresh SQLite database per test, seeded users and
resources, and a TestClient wired to the same database.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from travel.auth.schemas import UserCreate
from travel.auth.service import UserService
from travel.auth.utils import create_access_token
from travel.database import Base, create_db_engine, get_db
from travel.main import app
from travel.models import Location, Lodge, Tour, Transport


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'travel_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return UserService.create_user(
        db, UserCreate(name="Alice Traveller", email="alice@example.com", password="secret123")
    )


@pytest.fixture
def other_user(db):
    return UserService.create_user(
        db, UserCreate(name="Bob Traveller", email="bob@example.com", password="secret123")
    )


@pytest.fixture
def admin(db):
    admin = UserService.create_user(
        db, UserCreate(name="Admin", email="admin@example.com", password="admin123")
    )
    UserService.assign_role(db, admin.id, "admin")
    return admin


@pytest.fixture
def location(db):
    location = Location(name="Kathmandu Valley", city="Kathmandu", country="Nepal")
    db.add(location)
    db.commit()
    return location


@pytest.fixture
def other_location(db):
    location = Location(name="Pokhara Lakeside", city="Pokhara", country="Nepal")
    db.add(location)
    db.commit()
    return location


@pytest.fixture
def tour(db, location):
    tour = Tour(
        name="Annapurna Base Camp Trek",
        location_id=location.id,
        price=Decimal("100.00"),
        duration_days=10,
        start_date=date.today() + timedelta(days=30),
        end_date=date.today() + timedelta(days=40),
        guide="Pemba",
        capacity=10,
        available=10
    )
    db.add(tour)
    db.commit()
    return tour


@pytest.fixture
def lodge(db, location):
    lodge = Lodge(
        name="Himalayan Guest House",
        type="GUESTHOUSE",
        address="Thamel, Kathmandu",
        location_id=location.id,
        price_per_night=Decimal("40.00"),
        rating=Decimal("4.50"),
        capacity=5,
        available=5
    )
    db.add(lodge)
    db.commit()
    return lodge


@pytest.fixture
def transport(db, location, other_location):
    transport = Transport(
        name="Tourist Bus",
        type="BUS",
        provider="Greenline",
        from_location_id=location.id,
        to_location_id=other_location.id,
        price_per_ticket=Decimal("25.00"),
        capacity=30,
        available=30
    )
    db.add(transport)
    db.commit()
    return transport


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def other_headers(other_user):
    return auth_headers(other_user)

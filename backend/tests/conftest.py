"""Pytest configuration: in-memory SQLite database and API client."""

import os
from decimal import Decimal

# Must be set before catalog.core.database creates the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from catalog.core.database import Base, SessionLocal, engine, get_db
from catalog.models import City, Destination, DestinationImage, DestinationTag, DestinationType


@pytest.fixture
def db():
    """Fresh tables and a session for every test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    from catalog.main import app

    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_city(db):
    def _make_city(**overrides) -> City:
        values = {
            "name": "Chefchaouen",
            "region": "Tanger-Tetouan-Al Hoceima",
            "latitude": 35.1681,
            "longitude": -5.2636,
        }
        values.update(overrides)
        city = City(**values)
        db.add(city)
        db.commit()
        db.refresh(city)
        return city

    return _make_city


@pytest.fixture
def make_destination(db):
    def _make_destination(city: City, tags=(), images=(), **overrides) -> Destination:
        values = {
            "name": "Blue Pearl Medina",
            "type": DestinationType.HISTORICAL,
            "latitude": city.latitude,
            "longitude": city.longitude,
            "price": None,
            "active": True,
        }
        values.update(overrides)
        if values["price"] is not None:
            values["price"] = Decimal(str(values["price"]))
        destination = Destination(city=city, **values)
        destination.tags = [DestinationTag(name=name) for name in tags]
        destination.images = [
            DestinationImage(image_url=url, display_order=order) for order, url in enumerate(images)
        ]
        db.add(destination)
        db.commit()
        db.refresh(destination)
        return destination

    return _make_destination

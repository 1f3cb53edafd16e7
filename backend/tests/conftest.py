"""Shared fixtures: SQLite database per test, one venue with a table, a room and a seat."""
import os

# Point settings at SQLite before app.db.session builds its engine.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.models import Room, Seat, Table, Venue
from app.services.reservations import GuestInfo, ReservationRequest

FIXED_NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


def at(day: int, hour: int, minute: int = 0) -> datetime:
    """UTC instant in November 2026."""
    return datetime(2026, 11, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def engine(tmp_path):
    eng = create_engine(
        f"sqlite:///{tmp_path / 'bookings.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


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
def clock():
    return lambda: FIXED_NOW


def seed_venue(db) -> SimpleNamespace:
    """Venue with table #1 (capacity 4, 30.00), room #101 (no capacity set, 320.00), seat #7 (15.00)."""
    v = Venue(name="Dar El Jeld", type="RESTAURANT", city="Tunis", address="5 Rue Dar El Jeld", description="")
    other = Venue(name="Café des Nattes", type="CAFE", city="Sidi Bou Said", address="Rue Habib Thameur", description="")
    db.add_all([v, other])
    db.flush()
    table = Table(venue_id=v.id, unit_number=1, capacity=4, price=Decimal("30.00"), location_label="Terrasse", is_vip=False)
    room = Room(venue_id=v.id, unit_number=101, capacity=None, price=Decimal("320.00"), room_type="Double")
    seat = Seat(venue_id=v.id, unit_number=7, price=Decimal("15.00"), zone="Standard")
    other_table = Table(venue_id=other.id, unit_number=1, capacity=2, price=Decimal("20.00"), location_label="Salle")
    db.add_all([table, room, seat, other_table])
    db.commit()
    return SimpleNamespace(
        id=v.id,
        other_id=other.id,
        table_id=table.id,
        room_id=room.id,
        seat_id=seat.id,
        other_table_id=other_table.id,
    )


@pytest.fixture
def venue(db):
    return seed_venue(db)


@pytest.fixture
def make_request(venue):
    """Build a ReservationRequest against the seeded venue; override any field by keyword."""

    def _make(**overrides) -> ReservationRequest:
        fields = {
            "venue_id": venue.id,
            "unit_kind": "TABLE",
            "unit_id": venue.table_id,
            "start_at": at(1, 10),
            "end_at": at(1, 12),
            "guest": GuestInfo("Amira", "Ben Salah", "+216 22 345 678"),
            "party_size": 2,
            "price_override": None,
            "user_id": "user-1",
        }
        fields.update(overrides)
        return ReservationRequest(**fields)

    return _make

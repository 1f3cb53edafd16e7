"""
Bookable unit: the smallest reservable thing within a venue.

One table, one discriminator (kind). Table/Room/Seat are single-table-inheritance
variants so the engine handles capacity and overlap once and only dispatches on
kind where the defaults differ.
  - Table: per-table price, capacity (default 4), location label, VIP flag.
  - Room: per-night price, capacity (default 4), room type.
  - Seat: per-seat price, capacity always 1, zone.
"""
from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.constants import (
    DEFAULT_UNIT_CAPACITY,
    KIND_ROOM,
    KIND_SEAT,
    KIND_TABLE,
    SEAT_CAPACITY,
    UNIT_KINDS,
)
from app.db.base import Base, sql_in_list


class BookableUnit(Base):
    __tablename__ = "bookable_units"

    id = Column(Integer, primary_key=True, autoincrement=True)
    venue_id = Column(Integer, ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True)
    kind = Column(String(8), nullable=False)
    unit_number = Column(Integer, nullable=False)
    capacity = Column(Integer, nullable=True)  # null = DEFAULT_UNIT_CAPACITY; ignored for seats
    price = Column(Numeric(10, 2), nullable=False)
    # Kind-specific columns (null for the other kinds)
    location_label = Column(String(128), nullable=True)
    is_vip = Column(Boolean, nullable=True)
    room_type = Column(String(64), nullable=True)
    zone = Column(String(64), nullable=True)

    venue = relationship("Venue", back_populates="units")

    __table_args__ = (
        UniqueConstraint("venue_id", "kind", "unit_number", name="uq_bookable_units_venue_kind_number"),
        CheckConstraint(f"kind IN {sql_in_list(UNIT_KINDS)}", name="ck_bookable_units_kind"),
        CheckConstraint("capacity IS NULL OR capacity >= 1", name="ck_bookable_units_capacity"),
    )
    __mapper_args__ = {"polymorphic_on": kind}

    @property
    def effective_capacity(self) -> int:
        return self.capacity if self.capacity is not None else DEFAULT_UNIT_CAPACITY


class Table(BookableUnit):
    __mapper_args__ = {"polymorphic_identity": KIND_TABLE}


class Room(BookableUnit):
    __mapper_args__ = {"polymorphic_identity": KIND_ROOM}


class Seat(BookableUnit):
    __mapper_args__ = {"polymorphic_identity": KIND_SEAT}

    @property
    def effective_capacity(self) -> int:
        return SEAT_CAPACITY


UNIT_CLASSES: dict[str, type[BookableUnit]] = {
    KIND_TABLE: Table,
    KIND_ROOM: Room,
    KIND_SEAT: Seat,
}

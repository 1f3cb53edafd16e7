"""
Reservation of one bookable unit for a half-open interval [start_at, end_at).

booking_kind selects which of table_id / room_id / seat_id is set (exactly one).
status: CONFIRMED at creation, CANCELLED is terminal. Rows are never deleted.
On PostgreSQL the ex_reservations_unit_no_overlap exclusion constraint (migration 002,
mirrored below on the table metadata) keeps two non-cancelled rows on the same unit from
overlapping. Other dialects skip it.
"""
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
    literal_column,
    text,
)
from sqlalchemy.dialects.postgresql import ExcludeConstraint
from sqlalchemy.orm import relationship

from app.core.constants import (
    KIND_ROOM,
    KIND_SEAT,
    KIND_TABLE,
    RESERVATION_STATUSES,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
)
from app.db.base import Base, sql_in_list


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=True, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False)
    booking_kind = Column(String(8), nullable=False)
    table_id = Column(Integer, ForeignKey("bookable_units.id"), nullable=True)
    room_id = Column(Integer, ForeignKey("bookable_units.id"), nullable=True)
    seat_id = Column(Integer, ForeignKey("bookable_units.id"), nullable=True)
    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(16), nullable=False, default=STATUS_CONFIRMED)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
    guest_first_name = Column(String(128), nullable=False)
    guest_last_name = Column(String(128), nullable=False)
    guest_phone = Column(String(32), nullable=False)
    party_size = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    venue = relationship("Venue")
    table = relationship("BookableUnit", foreign_keys=[table_id])
    room = relationship("BookableUnit", foreign_keys=[room_id])
    seat = relationship("BookableUnit", foreign_keys=[seat_id])

    __table_args__ = (
        CheckConstraint("start_at < end_at", name="ck_reservations_interval"),
        CheckConstraint("party_size BETWEEN 1 AND 20", name="ck_reservations_party_size"),
        CheckConstraint("total_price >= 0", name="ck_reservations_total_price"),
        CheckConstraint(f"status IN {sql_in_list(RESERVATION_STATUSES)}", name="ck_reservations_status"),
        CheckConstraint(
            "(booking_kind = 'TABLE' AND table_id IS NOT NULL AND room_id IS NULL AND seat_id IS NULL)"
            " OR (booking_kind = 'ROOM' AND room_id IS NOT NULL AND table_id IS NULL AND seat_id IS NULL)"
            " OR (booking_kind = 'SEAT' AND seat_id IS NOT NULL AND table_id IS NULL AND room_id IS NULL)",
            name="ck_reservations_one_unit",
        ),
        Index("ix_reservations_table_interval", "table_id", "start_at", "end_at"),
        Index("ix_reservations_room_interval", "room_id", "start_at", "end_at"),
        Index("ix_reservations_seat_interval", "seat_id", "start_at", "end_at"),
        Index("ix_reservations_venue_kind_start", "venue_id", "booking_kind", "start_at"),
    )

    @property
    def unit_id(self) -> int | None:
        return self.table_id or self.room_id or self.seat_id

    @property
    def unit(self):
        return {KIND_TABLE: self.table, KIND_ROOM: self.room, KIND_SEAT: self.seat}.get(self.booking_kind)

    @staticmethod
    def unit_ref_column(kind: str):
        """Column holding the unit reference for a booking kind."""
        return {
            KIND_TABLE: Reservation.table_id,
            KIND_ROOM: Reservation.room_id,
            KIND_SEAT: Reservation.seat_id,
        }[kind]


_t = Reservation.__table__
# Half-open ranges ('[)'): touching reservations do not conflict. Needs the btree_gist extension.
_t.append_constraint(
    ExcludeConstraint(
        (func.coalesce(_t.c.table_id, _t.c.room_id, _t.c.seat_id), "="),
        (func.tstzrange(_t.c.start_at, _t.c.end_at, literal_column("'[)'")), "&&"),
        name="ex_reservations_unit_no_overlap",
        using="gist",
        where=text(f"status <> '{STATUS_CANCELLED}'"),
    ).ddl_if(dialect="postgresql")
)

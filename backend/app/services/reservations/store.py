"""
Storage operations the availability engine needs:
  - unit lookup by (venue, unit, kind), optionally row-locked
  - non-cancelled reservations on a unit overlapping an interval
  - insert of a new reservation
  - status update by id
Callers own the transaction (commit/rollback).
"""
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.constants import ACTIVE_STATUSES
from app.models.bookable_unit import UNIT_CLASSES, BookableUnit
from app.models.reservation import Reservation
from app.services.reservations.types import Interval


def get_unit(db: Session, venue_id: int, unit_id: int, kind: str, *, lock: bool = False) -> BookableUnit | None:
    """Unit of the given kind belonging to venue_id. lock=True takes SELECT ... FOR UPDATE on the row."""
    q = db.query(UNIT_CLASSES[kind]).filter(BookableUnit.id == unit_id, BookableUnit.venue_id == venue_id)
    if lock:
        q = q.with_for_update()
    return q.first()


def find_overlapping(db: Session, kind: str, unit_id: int, interval: Interval) -> list[Reservation]:
    """Non-cancelled reservations on the unit with start < interval.end and end > interval.start."""
    return (
        db.query(Reservation)
        .filter(
            Reservation.unit_ref_column(kind) == unit_id,
            Reservation.status.in_(ACTIVE_STATUSES),
            Reservation.start_at < interval.end,
            Reservation.end_at > interval.start,
        )
        .all()
    )


def find_reserved_unit_ids(db: Session, unit_ids: list[int], interval: Interval) -> set[int]:
    """Subset of unit_ids with at least one non-cancelled reservation overlapping interval."""
    if not unit_ids:
        return set()
    rows = (
        db.query(Reservation.table_id, Reservation.room_id, Reservation.seat_id)
        .filter(
            or_(
                Reservation.table_id.in_(unit_ids),
                Reservation.room_id.in_(unit_ids),
                Reservation.seat_id.in_(unit_ids),
            ),
            Reservation.status.in_(ACTIVE_STATUSES),
            Reservation.start_at < interval.end,
            Reservation.end_at > interval.start,
        )
        .all()
    )
    return {table_id or room_id or seat_id for table_id, room_id, seat_id in rows}


def insert_reservation(db: Session, row: Reservation) -> Reservation:
    """Add and flush so the id is assigned and constraints are checked before commit."""
    db.add(row)
    db.flush()
    return row


def get_reservation(db: Session, reservation_id: int, *, lock: bool = False) -> Reservation | None:
    q = db.query(Reservation).filter(Reservation.id == reservation_id)
    if lock:
        q = q.with_for_update()
    return q.first()


def update_status(db: Session, row: Reservation, status: str, at: datetime) -> Reservation:
    row.status = status
    row.updated_at = at
    db.flush()
    return row


def list_units_for_venue(db: Session, venue_id: int) -> list[BookableUnit]:
    return (
        db.query(BookableUnit)
        .filter(BookableUnit.venue_id == venue_id)
        .order_by(BookableUnit.kind, BookableUnit.unit_number)
        .all()
    )

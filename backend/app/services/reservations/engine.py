"""
Availability engine: admission, cancellation and availability status for bookable units.

Admission for one unit is serialized end to end (lookup -> overlap check -> insert -> commit):
  1. per-unit in-process lock (unit_locks), so same-process requests queue per unit;
  2. SELECT ... FOR UPDATE on the unit row, so admissions queue across processes on PostgreSQL;
  3. the reservations exclusion constraint; an IntegrityError on insert becomes a conflict.
Different units never wait on each other. A failed admission rolls back and writes nothing.
"""
import logging
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import Clock, system_clock
from app.core.constants import (
    KIND_ROOM,
    KIND_SEAT,
    KIND_TABLE,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    UNIT_AVAILABLE,
    UNIT_RESERVED,
)
from app.core.errors import (
    ReservationConflictError,
    ReservationError,
    ReservationInternalError,
    ReservationNotFoundError,
    ReservationValidationError,
)
from app.models.bookable_unit import BookableUnit
from app.models.reservation import Reservation
from app.services.reservations import store
from app.services.reservations.locks import UnitLockRegistry, unit_locks
from app.services.reservations.types import Interval, ReservationRequest
from app.services.reservations.validation import (
    check_unit_capacity,
    normalize_unit_kind,
    validate_guest,
    validate_interval,
    validate_party_size,
    validate_price_override,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_MESSAGES = {
    KIND_TABLE: "Table not found",
    KIND_ROOM: "Room not found",
    KIND_SEAT: "Seat not found",
}
_CONFLICT_MESSAGES = {
    KIND_TABLE: "This table is already reserved for the selected time.",
    KIND_ROOM: "This room is already reserved for the selected nights.",
    KIND_SEAT: "This seat is already reserved.",
}
_UNIT_ID_FIELDS = {KIND_TABLE: "table_id", KIND_ROOM: "room_id", KIND_SEAT: "seat_id"}


def effective_price(unit: BookableUnit, price_override: Decimal | None) -> Decimal:
    """Nonzero override wins; otherwise the unit's base price (per table / per night / per seat)."""
    if price_override:
        return price_override
    return Decimal(unit.price)


def check_and_reserve(
    db: Session,
    request: ReservationRequest,
    *,
    clock: Clock = system_clock,
    locks: UnitLockRegistry = unit_locks,
) -> Reservation:
    """
    Admit and persist a CONFIRMED reservation, or raise:
      ReservationValidationError: bad guest info, party size, interval or price; over capacity.
      ReservationNotFoundError: unit does not exist in this venue.
      ReservationConflictError: a non-cancelled reservation on the unit overlaps the interval.
      ReservationInternalError: storage failure.
    """
    guest = validate_guest(request.guest)
    party = validate_party_size(request.party_size)
    interval = validate_interval(Interval.utc(request.start_at, request.end_at))
    kind = normalize_unit_kind(request.unit_kind)
    if not request.unit_id:
        raise ReservationValidationError(
            f"{_UNIT_ID_FIELDS[kind]} required for {kind.lower()} booking", field=_UNIT_ID_FIELDS[kind]
        )
    price_override = validate_price_override(request.price_override)

    with locks.hold(request.unit_id):
        try:
            unit = store.get_unit(db, request.venue_id, request.unit_id, kind, lock=True)
            if unit is None:
                raise ReservationNotFoundError(_NOT_FOUND_MESSAGES[kind])
            check_unit_capacity(kind, party, unit.effective_capacity)
            total = effective_price(unit, price_override)

            if store.find_overlapping(db, kind, unit.id, interval):
                raise ReservationConflictError(_CONFLICT_MESSAGES[kind])

            now = clock()
            row = Reservation(
                user_id=request.user_id,
                venue_id=request.venue_id,
                booking_kind=kind,
                start_at=interval.start,
                end_at=interval.end,
                status=STATUS_CONFIRMED,
                total_price=total,
                guest_first_name=guest.first_name,
                guest_last_name=guest.last_name,
                guest_phone=guest.phone,
                party_size=party,
                created_at=now,
                updated_at=now,
            )
            setattr(row, _UNIT_ID_FIELDS[kind], unit.id)
            store.insert_reservation(db, row)
            db.commit()
        except ReservationError as e:
            db.rollback()
            logger.info("Reservation rejected kind=%s unit=%s: %s", kind, request.unit_id, e.message)
            raise
        except IntegrityError as e:
            # Exclusion constraint: another writer committed an overlapping reservation first
            db.rollback()
            logger.warning("Reservation insert rejected by store kind=%s unit=%s: %s", kind, request.unit_id, e.orig)
            raise ReservationConflictError(_CONFLICT_MESSAGES[kind]) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Reservation admission failed kind=%s unit=%s", kind, request.unit_id)
            raise ReservationInternalError("Failed to create reservation") from e

    db.refresh(row)
    logger.info(
        "Reservation %s confirmed kind=%s unit=%s %s..%s party=%s",
        row.id, kind, row.unit_id, interval.start.isoformat(), interval.end.isoformat(), party,
    )
    return row


def cancel(
    db: Session,
    reservation_id: int,
    requesting_user_id: str | None,
    *,
    is_admin: bool = False,
    clock: Clock = system_clock,
) -> Reservation:
    """
    CONFIRMED/PENDING -> CANCELLED. Only the owner may cancel unless is_admin.
    Raises ReservationNotFoundError (missing or not owned) or ReservationConflictError (already cancelled).
    """
    try:
        row = store.get_reservation(db, reservation_id, lock=True)
        if row is None or (not is_admin and (requesting_user_id is None or row.user_id != requesting_user_id)):
            raise ReservationNotFoundError("Reservation not found")
        if row.status == STATUS_CANCELLED:
            raise ReservationConflictError("Reservation already cancelled")
        store.update_status(db, row, STATUS_CANCELLED, clock())
        db.commit()
    except ReservationError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Cancelling reservation %s failed", reservation_id)
        raise ReservationInternalError("Failed to cancel reservation") from e

    db.refresh(row)
    logger.info("Reservation %s cancelled by %s", reservation_id, "admin" if is_admin else requesting_user_id)
    return row


def compute_availability(db: Session, unit_ids: list[int], interval: Interval | None = None) -> dict[int, str]:
    """
    unit_id -> "available" | "reserved". A unit is reserved iff a non-cancelled reservation
    on it overlaps interval. Without an interval every unit is available.
    """
    if interval is None or not unit_ids:
        return {uid: UNIT_AVAILABLE for uid in unit_ids}
    interval = Interval.utc(interval.start, interval.end)
    try:
        reserved = store.find_reserved_unit_ids(db, list(unit_ids), interval)
    except SQLAlchemyError as e:
        logger.exception("Availability query failed for %s units", len(unit_ids))
        raise ReservationInternalError("Failed to compute availability") from e
    return {uid: UNIT_RESERVED if uid in reserved else UNIT_AVAILABLE for uid in unit_ids}

"""Tests for admission and cancellation in the availability engine."""
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.clock import as_utc
from app.core.constants import STATUS_CANCELLED, STATUS_CONFIRMED
from app.core.errors import (
    ReservationConflictError,
    ReservationNotFoundError,
    ReservationValidationError,
)
from app.models import Reservation
from app.services.reservations import GuestInfo, cancel, check_and_reserve, store
from tests.conftest import FIXED_NOW, at


class TestCheckAndReserve:
    """Admission: pricing, persistence and conflict detection."""

    def test_admits_confirmed_reservation(self, db, make_request, venue, clock):
        row = check_and_reserve(db, make_request(), clock=clock)

        assert row.id is not None
        assert row.status == STATUS_CONFIRMED
        assert row.booking_kind == "TABLE"
        assert row.table_id == venue.table_id
        assert row.room_id is None and row.seat_id is None
        assert as_utc(row.start_at) == at(1, 10)
        assert as_utc(row.end_at) == at(1, 12)
        assert row.guest_first_name == "Amira"
        assert row.guest_phone == "+21622345678"
        assert row.party_size == 2
        assert row.user_id == "user-1"
        assert as_utc(row.created_at) == FIXED_NOW
        assert as_utc(row.updated_at) == FIXED_NOW

    def test_price_falls_back_to_unit_price(self, db, make_request):
        row = check_and_reserve(db, make_request())
        assert row.total_price == Decimal("30.00")

    def test_zero_override_uses_unit_price(self, db, make_request):
        row = check_and_reserve(db, make_request(price_override=Decimal("0")))
        assert row.total_price == Decimal("30.00")

    def test_nonzero_override_is_stored(self, db, make_request):
        row = check_and_reserve(db, make_request(price_override=Decimal("42.50")))
        assert row.total_price == Decimal("42.50")

    def test_room_uses_price_per_night(self, db, make_request, venue):
        row = check_and_reserve(db, make_request(unit_kind="ROOM", unit_id=venue.room_id, end_at=at(3, 10)))
        assert row.booking_kind == "ROOM"
        assert row.room_id == venue.room_id
        assert row.total_price == Decimal("320.00")

    def test_overlap_is_rejected(self, db, make_request):
        check_and_reserve(db, make_request())

        with pytest.raises(ReservationConflictError, match="already reserved"):
            check_and_reserve(db, make_request(start_at=at(1, 11), end_at=at(1, 13), user_id="user-2"))

        assert db.query(Reservation).count() == 1

    def test_contained_interval_is_rejected(self, db, make_request):
        check_and_reserve(db, make_request(start_at=at(1, 9), end_at=at(1, 18)))
        with pytest.raises(ReservationConflictError):
            check_and_reserve(db, make_request(start_at=at(1, 10), end_at=at(1, 11)))

    def test_touching_intervals_are_admitted(self, db, make_request):
        first = check_and_reserve(db, make_request(start_at=at(1, 10), end_at=at(1, 12)))
        second = check_and_reserve(db, make_request(start_at=at(1, 12), end_at=at(1, 14)))
        earlier = check_and_reserve(db, make_request(start_at=at(1, 8), end_at=at(1, 10)))

        assert {first.id, second.id, earlier.id} == {r.id for r in db.query(Reservation).all()}

    def test_other_units_do_not_conflict(self, db, make_request, venue):
        check_and_reserve(db, make_request())
        room = check_and_reserve(db, make_request(unit_kind="ROOM", unit_id=venue.room_id))
        seat = check_and_reserve(db, make_request(unit_kind="SEAT", unit_id=venue.seat_id, party_size=1))

        assert room.status == STATUS_CONFIRMED
        assert seat.status == STATUS_CONFIRMED

    def test_seat_conflict_message(self, db, make_request, venue):
        check_and_reserve(db, make_request(unit_kind="SEAT", unit_id=venue.seat_id, party_size=1))
        with pytest.raises(ReservationConflictError, match="This seat is already reserved"):
            check_and_reserve(db, make_request(unit_kind="SEAT", unit_id=venue.seat_id, party_size=1))

    def test_unknown_kind_defaults_to_table(self, db, make_request, venue):
        row = check_and_reserve(db, make_request(unit_kind="BOOTH"))
        assert row.booking_kind == "TABLE"
        assert row.table_id == venue.table_id

    def test_kind_is_case_insensitive(self, db, make_request, venue):
        row = check_and_reserve(db, make_request(unit_kind="seat", unit_id=venue.seat_id, party_size=1))
        assert row.booking_kind == "SEAT"

    def test_store_rejection_becomes_conflict(self, db, make_request, monkeypatch):
        """An exclusion-constraint violation on insert is reported as a conflict and writes nothing."""

        def reject(db_, row):
            raise IntegrityError("INSERT INTO reservations", {}, Exception("ex_reservations_unit_no_overlap"))

        monkeypatch.setattr(store, "insert_reservation", reject)

        with pytest.raises(ReservationConflictError):
            check_and_reserve(db, make_request())
        assert db.query(Reservation).count() == 0


class TestAdmissionValidation:
    """Input rules checked before any write."""

    def test_party_over_capacity(self, db, make_request):
        with pytest.raises(ReservationValidationError) as exc_info:
            check_and_reserve(db, make_request(party_size=5))

        assert exc_info.value.max_capacity == 4
        assert "4" in exc_info.value.message
        assert db.query(Reservation).count() == 0

    def test_party_at_capacity_is_admitted(self, db, make_request):
        assert check_and_reserve(db, make_request(party_size=4)).party_size == 4

    def test_room_without_capacity_defaults_to_four(self, db, make_request, venue):
        with pytest.raises(ReservationValidationError) as exc_info:
            check_and_reserve(db, make_request(unit_kind="ROOM", unit_id=venue.room_id, party_size=5))
        assert exc_info.value.max_capacity == 4

    def test_seat_holds_one_guest(self, db, make_request, venue):
        with pytest.raises(ReservationValidationError, match="1 guest per seat"):
            check_and_reserve(db, make_request(unit_kind="SEAT", unit_id=venue.seat_id, party_size=2))

    @pytest.mark.parametrize("party_size", [21, -1])
    def test_party_size_out_of_range(self, db, make_request, party_size):
        with pytest.raises(ReservationValidationError, match="between 1 and 20"):
            check_and_reserve(db, make_request(party_size=party_size))

    @pytest.mark.parametrize("party_size", [None, 0])
    def test_missing_party_size_means_one(self, db, make_request, party_size):
        assert check_and_reserve(db, make_request(party_size=party_size)).party_size == 1

    def test_start_must_precede_end(self, db, make_request):
        with pytest.raises(ReservationValidationError, match="before"):
            check_and_reserve(db, make_request(start_at=at(1, 12), end_at=at(1, 12)))
        with pytest.raises(ReservationValidationError):
            check_and_reserve(db, make_request(start_at=at(1, 13), end_at=at(1, 12)))

    @pytest.mark.parametrize(
        "guest, message",
        [
            (GuestInfo("  ", "Ben Salah", "22345678"), "First name"),
            (GuestInfo("Amira", "", "22345678"), "Last name"),
            (GuestInfo("Amira", "Ben Salah", " "), "Phone is required"),
            (GuestInfo("Amira", "Ben Salah", "1234567"), "Invalid phone"),
            (GuestInfo("Amira", "Ben Salah", "+33612345678"), "Invalid phone"),
            (GuestInfo("Amira", "Ben Salah", "2234567a"), "Invalid phone"),
        ],
    )
    def test_guest_info_rules(self, db, make_request, guest, message):
        with pytest.raises(ReservationValidationError, match=message):
            check_and_reserve(db, make_request(guest=guest))

    @pytest.mark.parametrize("phone, stored", [("22345678", "22345678"), ("216 22 345 678", "21622345678")])
    def test_phone_is_normalized(self, db, make_request, phone, stored):
        row = check_and_reserve(db, make_request(guest=GuestInfo(" Amira ", " Ben Salah ", phone)))
        assert row.guest_phone == stored
        assert row.guest_first_name == "Amira"
        assert row.guest_last_name == "Ben Salah"

    def test_missing_unit_id(self, db, make_request):
        with pytest.raises(ReservationValidationError, match="seat_id required"):
            check_and_reserve(db, make_request(unit_kind="SEAT", unit_id=None))

    @pytest.mark.parametrize(
        "price, message",
        [
            (Decimal("-1"), "cannot be negative"),
            (Decimal("NaN"), "finite"),
            (Decimal("Infinity"), "finite"),
            (Decimal("100000000"), "cannot exceed"),
            (Decimal("1e12"), "cannot exceed"),
        ],
    )
    def test_bad_price_override(self, db, make_request, price, message):
        with pytest.raises(ReservationValidationError, match=message) as exc_info:
            check_and_reserve(db, make_request(price_override=price))

        assert exc_info.value.field == "total_price"
        assert db.query(Reservation).count() == 0

    def test_largest_price_override_is_admitted(self, db, make_request):
        row = check_and_reserve(db, make_request(price_override=Decimal("99999999.99")))
        assert row.total_price == Decimal("99999999.99")


class TestUnitLookup:
    """The unit must exist, belong to the venue and match the kind."""

    def test_unknown_unit(self, db, make_request):
        with pytest.raises(ReservationNotFoundError, match="Table not found"):
            check_and_reserve(db, make_request(unit_id=9999))

    def test_unit_from_another_venue(self, db, make_request, venue):
        with pytest.raises(ReservationNotFoundError):
            check_and_reserve(db, make_request(unit_id=venue.other_table_id))

    def test_kind_mismatch(self, db, make_request, venue):
        with pytest.raises(ReservationNotFoundError, match="Seat not found"):
            check_and_reserve(db, make_request(unit_kind="SEAT", unit_id=venue.table_id, party_size=1))


class TestCancel:
    """Cancellation: ownership, one-way transition, freed capacity."""

    def test_owner_cancels(self, db, make_request, clock):
        row = check_and_reserve(db, make_request())

        cancelled = cancel(db, row.id, "user-1", clock=clock)

        assert cancelled.status == STATUS_CANCELLED
        assert cancelled.total_price == Decimal("30.00")
        assert cancelled.party_size == 2
        assert as_utc(cancelled.updated_at) == FIXED_NOW

    def test_cancelling_frees_the_interval(self, db, make_request):
        row = check_and_reserve(db, make_request(start_at=at(1, 10), end_at=at(1, 14)))
        cancel(db, row.id, "user-1")

        again = check_and_reserve(db, make_request(start_at=at(1, 11), end_at=at(1, 13), user_id="user-2"))

        assert again.status == STATUS_CONFIRMED

    def test_second_cancel_is_conflict(self, db, make_request):
        row = check_and_reserve(db, make_request())
        cancel(db, row.id, "user-1")

        with pytest.raises(ReservationConflictError, match="already cancelled"):
            cancel(db, row.id, "user-1")

        db.expire_all()
        assert db.get(Reservation, row.id).status == STATUS_CANCELLED

    def test_other_user_cannot_cancel(self, db, make_request):
        row = check_and_reserve(db, make_request())

        with pytest.raises(ReservationNotFoundError):
            cancel(db, row.id, "user-2")
        with pytest.raises(ReservationNotFoundError):
            cancel(db, row.id, None)

        db.expire_all()
        assert db.get(Reservation, row.id).status == STATUS_CONFIRMED

    def test_admin_can_cancel_any(self, db, make_request):
        row = check_and_reserve(db, make_request())
        assert cancel(db, row.id, "admin-7", is_admin=True).status == STATUS_CANCELLED

    def test_unknown_reservation(self, db):
        with pytest.raises(ReservationNotFoundError):
            cancel(db, 12345, "user-1")

"""
Centralized booking constants (Encapsulate What Changes).

Change party-size bounds, capacity defaults or the phone format here instead of
scattering literals across the engine and routes.
"""
import re
from decimal import Decimal

# Reservation status values (stored as strings)
STATUS_PENDING = "PENDING"
STATUS_CONFIRMED = "CONFIRMED"
STATUS_CANCELLED = "CANCELLED"
RESERVATION_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_CANCELLED)
# Only these statuses hold a unit; cancelled reservations never block admission
ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)

# Bookable unit kinds (discriminator on bookable_units.kind and reservations.booking_kind)
KIND_TABLE = "TABLE"
KIND_ROOM = "ROOM"
KIND_SEAT = "SEAT"
UNIT_KINDS = (KIND_TABLE, KIND_ROOM, KIND_SEAT)
DEFAULT_UNIT_KIND = KIND_TABLE

VENUE_TYPES = ("CAFE", "RESTAURANT", "HOTEL", "CINEMA")

MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 20
# Tables and rooms without a stored capacity seat this many guests
DEFAULT_UNIT_CAPACITY = 4
SEAT_CAPACITY = 1

# Largest total_price a reservations.total_price NUMERIC(10, 2) column holds
MAX_TOTAL_PRICE = Decimal("99999999.99")

# 8-digit local number, optional +216 / 216 country prefix (whitespace removed first)
GUEST_PHONE_PATTERN = re.compile(r"^(\+216|216)?[0-9]{8}$")

# Availability labels returned by compute_availability
UNIT_AVAILABLE = "available"
UNIT_RESERVED = "reserved"

# Headers carrying caller identity from the auth gateway
USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"
ADMIN_ROLE = "admin"

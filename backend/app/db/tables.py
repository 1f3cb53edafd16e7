"""
Single source of truth for database tables that exist after migrations.

alembic/env.py asserts the ORM metadata matches this list; scripts/check_backend.py
checks the live database has every one of them.
"""
ALL_TABLE_NAMES = (
    "venues",
    "bookable_units",
    "reservations",
)

"""Venues, bookable units (table/room/seat in one table) and reservations

Revision ID: 001
Revises:
Create Date: (run alembic upgrade head)

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "venues",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("city", sa.String(128), nullable=False),
        sa.Column("address", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("rating", sa.Numeric(2, 1), nullable=False, server_default="0"),
        sa.Column("starting_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("type IN ('CAFE', 'RESTAURANT', 'HOTEL', 'CINEMA')", name="ck_venues_type"),
        sa.CheckConstraint("rating >= 0 AND rating <= 5", name="ck_venues_rating"),
    )
    op.create_index("ix_venues_city_type", "venues", ["city", "type"])

    op.create_table(
        "bookable_units",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("venue_id", sa.Integer(), sa.ForeignKey("venues.id", ondelete="CASCADE"), nullable=False),
        sa.Column("kind", sa.String(8), nullable=False),
        sa.Column("unit_number", sa.Integer(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("location_label", sa.String(128), nullable=True),
        sa.Column("is_vip", sa.Boolean(), nullable=True),
        sa.Column("room_type", sa.String(64), nullable=True),
        sa.Column("zone", sa.String(64), nullable=True),
        sa.UniqueConstraint("venue_id", "kind", "unit_number", name="uq_bookable_units_venue_kind_number"),
        sa.CheckConstraint("kind IN ('TABLE', 'ROOM', 'SEAT')", name="ck_bookable_units_kind"),
        sa.CheckConstraint("capacity IS NULL OR capacity >= 1", name="ck_bookable_units_capacity"),
    )
    op.create_index("ix_bookable_units_venue_id", "bookable_units", ["venue_id"])

    op.create_table(
        "reservations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column("venue_id", sa.Integer(), sa.ForeignKey("venues.id"), nullable=False),
        sa.Column("booking_kind", sa.String(8), nullable=False),
        sa.Column("table_id", sa.Integer(), sa.ForeignKey("bookable_units.id"), nullable=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("bookable_units.id"), nullable=True),
        sa.Column("seat_id", sa.Integer(), sa.ForeignKey("bookable_units.id"), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="CONFIRMED"),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("guest_first_name", sa.String(128), nullable=False),
        sa.Column("guest_last_name", sa.String(128), nullable=False),
        sa.Column("guest_phone", sa.String(32), nullable=False),
        sa.Column("party_size", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("start_at < end_at", name="ck_reservations_interval"),
        sa.CheckConstraint("party_size BETWEEN 1 AND 20", name="ck_reservations_party_size"),
        sa.CheckConstraint("total_price >= 0", name="ck_reservations_total_price"),
        sa.CheckConstraint("status IN ('PENDING', 'CONFIRMED', 'CANCELLED')", name="ck_reservations_status"),
        sa.CheckConstraint(
            "(booking_kind = 'TABLE' AND table_id IS NOT NULL AND room_id IS NULL AND seat_id IS NULL)"
            " OR (booking_kind = 'ROOM' AND room_id IS NOT NULL AND table_id IS NULL AND seat_id IS NULL)"
            " OR (booking_kind = 'SEAT' AND seat_id IS NOT NULL AND table_id IS NULL AND room_id IS NULL)",
            name="ck_reservations_one_unit",
        ),
    )
    op.create_index("ix_reservations_user_id", "reservations", ["user_id"])
    op.create_index("ix_reservations_table_interval", "reservations", ["table_id", "start_at", "end_at"])
    op.create_index("ix_reservations_room_interval", "reservations", ["room_id", "start_at", "end_at"])
    op.create_index("ix_reservations_seat_interval", "reservations", ["seat_id", "start_at", "end_at"])
    op.create_index("ix_reservations_venue_kind_start", "reservations", ["venue_id", "booking_kind", "start_at"])


def downgrade() -> None:
    op.drop_index("ix_reservations_venue_kind_start", table_name="reservations")
    op.drop_index("ix_reservations_seat_interval", table_name="reservations")
    op.drop_index("ix_reservations_room_interval", table_name="reservations")
    op.drop_index("ix_reservations_table_interval", table_name="reservations")
    op.drop_index("ix_reservations_user_id", table_name="reservations")
    op.drop_table("reservations")
    op.drop_index("ix_bookable_units_venue_id", table_name="bookable_units")
    op.drop_table("bookable_units")
    op.drop_index("ix_venues_city_type", table_name="venues")
    op.drop_table("venues")

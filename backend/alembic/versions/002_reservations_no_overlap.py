"""reservations: exclusion constraint so non-cancelled reservations on one unit never overlap."""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # btree_gist gives GiST an equality operator for the integer unit id.
    op.execute(sa.text("CREATE EXTENSION IF NOT EXISTS btree_gist"))
    # Half-open ranges ('[)'): touching reservations do not conflict. Cancelled rows are ignored.
    op.execute(
        sa.text(
            "ALTER TABLE reservations ADD CONSTRAINT ex_reservations_unit_no_overlap "
            "EXCLUDE USING gist ("
            "(COALESCE(table_id, room_id, seat_id)) WITH =, "
            "tstzrange(start_at, end_at, '[)') WITH &&"
            ") WHERE (status <> 'CANCELLED')"
        )
    )


def downgrade() -> None:
    op.execute(sa.text("ALTER TABLE reservations DROP CONSTRAINT IF EXISTS ex_reservations_unit_no_overlap"))

"""Initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:30:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


booking_status_enum = sa.Enum(
    "pending",
    "confirmed",
    "cancelled",
    "completed",
    name="booking_status_enum",
    native_enum=False,
)
payment_status_enum = sa.Enum("pending", "paid", "refunded", name="payment_status_enum", native_enum=False)

ACTIVE_STATUS_SQL = "status IN ('pending', 'confirmed')"


def _id_col() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _updated_col() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    op.create_table(
        "trainer_availability",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("trainer_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("weekly_hours", postgresql.JSONB(), nullable=False),
        sa.UniqueConstraint("trainer_id", name="uq_trainer_availability_trainer_id"),
    )

    op.create_table(
        "bookings",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("trainer_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("scheduled_time", sa.Time(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", booking_status_enum, nullable=False),
        sa.Column("payment_status", payment_status_enum, nullable=False),
        sa.Column("cancellation_fee", sa.Numeric(10, 2), nullable=True),
        sa.Column("refund_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("duration_minutes > 0", name="ck_bookings_duration_positive"),
        sa.CheckConstraint("price >= 0", name="ck_bookings_price_non_negative"),
    )
    op.create_index("ix_bookings_client_id", "bookings", ["client_id"], unique=False)
    op.create_index("ix_bookings_status", "bookings", ["status"], unique=False)
    op.create_index(
        "ix_bookings_trainer_id_scheduled_date",
        "bookings",
        ["trainer_id", "scheduled_date"],
        unique=False,
    )
    op.create_index(
        "uq_bookings_active_slot",
        "bookings",
        ["trainer_id", "scheduled_date", "scheduled_time"],
        unique=True,
        postgresql_where=sa.text(ACTIVE_STATUS_SQL),
    )
    op.execute(
        f"""
        ALTER TABLE bookings ADD CONSTRAINT ex_bookings_active_overlap
        EXCLUDE USING gist (
            trainer_id WITH =,
            tsrange(
                scheduled_date + scheduled_time,
                scheduled_date + scheduled_time + duration_minutes * interval '1 minute',
                '[)'
            ) WITH &&
        ) WHERE ({ACTIVE_STATUS_SQL})
        """,
    )


def downgrade() -> None:
    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS ex_bookings_active_overlap")
    op.drop_index("uq_bookings_active_slot", table_name="bookings")
    op.drop_index("ix_bookings_trainer_id_scheduled_date", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_client_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_table("trainer_availability")

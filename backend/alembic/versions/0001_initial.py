"""initial schema: trainers, schedules, vacations, slots, bookings

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

LIVE_STATUS_WHERE = sa.text("status IN ('pending', 'confirmed')")


def upgrade():
    op.create_table(
        "trainers",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("specialty", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("image", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("rating", sa.Float(), nullable=False, server_default=sa.text("5.0")),
        sa.Column("phone", sa.Text()),
    )

    op.create_table(
        "trainer_schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("trainer_id", sa.Text(), sa.ForeignKey("trainers.id"), nullable=False),
        sa.Column("weekday", sa.Integer(), nullable=False),
        sa.Column("time", sa.Text(), nullable=False),
        sa.CheckConstraint("weekday >= 0 AND weekday <= 6", name="ck_trainer_schedules_weekday"),
        sa.UniqueConstraint("trainer_id", "weekday", "time", name="uq_trainer_schedules_slot"),
    )

    op.create_table(
        "trainer_vacations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("trainer_id", sa.Text(), sa.ForeignKey("trainers.id"), nullable=False),
        sa.Column("start_date", sa.Text(), nullable=False),
        sa.Column("end_date", sa.Text(), nullable=False),
        sa.Column("note", sa.Text()),
        sa.CheckConstraint("start_date <= end_date", name="ck_trainer_vacations_range"),
    )

    op.create_table(
        "time_slots",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("trainer_id", sa.Text(), sa.ForeignKey("trainers.id"), nullable=False),
        sa.Column("date", sa.Text(), nullable=False),
        sa.Column("time", sa.Text(), nullable=False),
        sa.Column("is_booked", sa.Integer(), nullable=False, server_default=sa.text("0")),
    )
    op.create_index("idx_time_slots_trainer_date", "time_slots", ["trainer_id", "date"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("trainer_id", sa.Text(), sa.ForeignKey("trainers.id"), nullable=False),
        sa.Column("trainer_name", sa.Text(), nullable=False),
        sa.Column("slot_id", sa.Text(), sa.ForeignKey("time_slots.id"), nullable=False),
        sa.Column("date", sa.Text(), nullable=False),
        sa.Column("time", sa.Text(), nullable=False),
        sa.Column("client_name", sa.Text(), nullable=False),
        sa.Column("client_email", sa.Text(), nullable=False),
        sa.Column("client_phone", sa.Text(), nullable=False),
        sa.Column("booked_at", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "confirmed", "rejected", name="booking_status"),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
    )
    op.create_index(
        "uq_bookings_live_slot",
        "bookings",
        ["slot_id"],
        unique=True,
        sqlite_where=LIVE_STATUS_WHERE,
        postgresql_where=LIVE_STATUS_WHERE,
    )


def downgrade():
    op.drop_index("uq_bookings_live_slot", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("idx_time_slots_trainer_date", table_name="time_slots")
    op.drop_table("time_slots")
    op.drop_table("trainer_vacations")
    op.drop_table("trainer_schedules")
    op.drop_table("trainers")
    sa.Enum(name="booking_status").drop(op.get_bind(), checkfirst=True)

"""Experiences, slot inventory, promo codes and bookings.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "experiences",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("duration", sa.String(length=64), nullable=False),
        sa.Column("image_url", sa.String(length=1024)),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("rating", sa.Numeric(3, 2), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("price > 0", name="ck_experiences_price_positive"),
    )

    op.create_table(
        "slots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "experience_id",
            sa.Integer(),
            sa.ForeignKey("experiences.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time_slot", sa.Time(), nullable=False),
        sa.Column("total_capacity", sa.Integer(), nullable=False),
        sa.Column("available_capacity", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("available", "sold_out", name="slotstatus"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint(
            "experience_id", "date", "time_slot", name="uq_slot_experience_date_time"
        ),
        sa.CheckConstraint(
            "total_capacity >= 0", name="ck_slots_total_capacity_non_negative"
        ),
        sa.CheckConstraint(
            "available_capacity >= 0 AND available_capacity <= total_capacity",
            name="ck_slots_available_capacity_bounds",
        ),
    )
    op.create_index("ix_slots_experience_date", "slots", ["experience_id", "date"])

    op.create_table(
        "promo_codes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(length=64), nullable=False, unique=True),
        sa.Column("description", sa.String(length=255)),
        sa.Column(
            "discount_type",
            sa.Enum("percentage", "fixed", name="discounttype"),
            nullable=False,
        ),
        sa.Column("discount_value", sa.Numeric(10, 2), nullable=False),
        sa.Column("max_discount_amount", sa.Numeric(10, 2)),
        sa.Column("min_order_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=False),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=False),
        sa.Column("usage_limit", sa.Integer()),
        sa.Column("used_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint(
            "used_count >= 0", name="ck_promo_codes_used_count_non_negative"
        ),
        sa.CheckConstraint(
            "usage_limit IS NULL OR used_count <= usage_limit",
            name="ck_promo_codes_used_count_within_limit",
        ),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "experience_id",
            sa.Integer(),
            sa.ForeignKey("experiences.id"),
            nullable=False,
        ),
        sa.Column("slot_id", sa.Integer(), sa.ForeignKey("slots.id"), nullable=False),
        sa.Column("user_name", sa.String(length=255), nullable=False),
        sa.Column("user_email", sa.String(length=320), nullable=False),
        sa.Column("user_phone", sa.String(length=32)),
        sa.Column("number_of_people", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("promo_code", sa.String(length=64)),
        sa.Column("discount_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("final_price", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint(
            "number_of_people >= 1", name="ck_bookings_number_of_people_positive"
        ),
        sa.CheckConstraint(
            "discount_amount >= 0", name="ck_bookings_discount_non_negative"
        ),
    )
    op.create_index("ix_bookings_user_email", "bookings", ["user_email"])


def downgrade() -> None:
    op.drop_index("ix_bookings_user_email", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("promo_codes")
    op.drop_index("ix_slots_experience_date", table_name="slots")
    op.drop_table("slots")
    op.drop_table("experiences")
    sa.Enum(name="discounttype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="slotstatus").drop(op.get_bind(), checkfirst=True)

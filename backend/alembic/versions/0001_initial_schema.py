"""Initial ledger schema.

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
    user_role_enum = sa.Enum("ADMIN", "RECEPTIONIST", name="userrole")
    room_type_enum = sa.Enum(
        "STANDARD",
        "COMFORT",
        "SUITE",
        "FAMILY",
        "DELUXE",
        "JUNIOR_SUITE",
        "PRESIDENTIAL_SUITE",
        name="roomtype",
    )
    room_state_enum = sa.Enum(
        "AVAILABLE", "OCCUPIED", "MAINTENANCE", "OUT_OF_SERVICE", name="roomstate"
    )
    reservation_status_enum = sa.Enum(
        "PENDING",
        "CONFIRMED",
        "IN_PROGRESS",
        "COMPLETED",
        "CANCELLED",
        name="reservationstatus",
    )
    payment_method_enum = sa.Enum(
        "CASH", "CARD", "CHECK", "TRANSFER", "PAYPAL", "ONLINE", name="paymentmethod"
    )
    payment_type_enum = sa.Enum("DEPOSIT", "BALANCE", "REFUND", "FEE", name="paymenttype")

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=180), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=120), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "rooms",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("number", sa.String(length=10), nullable=False),
        sa.Column("room_type", room_type_enum, nullable=False),
        sa.Column("state", room_state_enum, nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("price", sa.BigInteger(), nullable=False),
        sa.Column("description", sa.String(length=1000)),
        sa.Column("lock_version", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("number", name="uq_rooms_number"),
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column("phone_number", sa.String(length=16), nullable=False),
        sa.Column("billing_address", sa.String(length=255)),
        *_timestamps(),
        sa.UniqueConstraint("phone_number", name="uq_customers_phone_number"),
    )

    op.create_table(
        "service_items",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=80), nullable=False),
        sa.Column("name_key", sa.String(length=80), nullable=False),
        sa.Column("price", sa.BigInteger(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("name_key", name="uq_service_items_name_key"),
    )

    op.create_table(
        "reservations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "room_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey(
                "rooms.id", ondelete="RESTRICT", name="fk_reservations_room_id_rooms"
            ),
            nullable=False,
        ),
        sa.Column(
            "customer_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey(
                "customers.id",
                ondelete="RESTRICT",
                name="fk_reservations_customer_id_customers",
            ),
            nullable=False,
        ),
        sa.Column(
            "created_by_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey(
                "users.id",
                ondelete="RESTRICT",
                name="fk_reservations_created_by_id_users",
            ),
            nullable=False,
        ),
        sa.Column("status", reservation_status_enum, nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("base_amount", sa.BigInteger(), nullable=False),
        sa.Column("total_amount", sa.BigInteger(), nullable=False),
        sa.Column("notes", sa.String(length=1024)),
        sa.Column("lock_version", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("end_date > start_date", name="ck_reservations_date_range"),
    )
    op.create_index(
        "ix_reservations_room_dates",
        "reservations",
        ["room_id", "start_date", "end_date"],
    )

    op.create_table(
        "reservation_service_lines",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "reservation_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey(
                "reservations.id",
                ondelete="CASCADE",
                name="fk_reservation_service_lines_reservation_id_reservations",
            ),
            nullable=False,
        ),
        sa.Column(
            "service_item_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey(
                "service_items.id",
                ondelete="RESTRICT",
                name="fk_reservation_service_lines_service_item_id_service_items",
            ),
            nullable=False,
        ),
        sa.Column("unit_price", sa.BigInteger(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("added_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint(
            "reservation_id",
            "service_item_id",
            name="uq_reservation_service_lines_reservation_item",
        ),
        sa.CheckConstraint(
            "quantity >= 1", name="ck_reservation_service_lines_quantity_positive"
        ),
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "reservation_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey(
                "reservations.id",
                ondelete="RESTRICT",
                name="fk_payments_reservation_id_reservations",
            ),
            nullable=False,
        ),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("method", payment_method_enum, nullable=False),
        sa.Column("payment_type", payment_type_enum, nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("transaction_ref", sa.String(length=100)),
        sa.Column("comment", sa.String(length=500)),
        sa.Column(
            "recorded_by_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey(
                "users.id", ondelete="SET NULL", name="fk_payments_recorded_by_id_users"
            ),
        ),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )
    op.create_index("ix_payments_reservation_id", "payments", ["reservation_id"])

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey(
                "users.id", ondelete="SET NULL", name="fk_audit_events_user_id_users"
            ),
        ),
        sa.Column("event_type", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=1024)),
        sa.Column("payload", sa.JSON()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_audit_events_user_id", "audit_events", ["user_id"])
    op.create_index("ix_audit_events_event_type", "audit_events", ["event_type"])


def downgrade() -> None:
    op.drop_index("ix_audit_events_event_type", table_name="audit_events")
    op.drop_index("ix_audit_events_user_id", table_name="audit_events")
    op.drop_table("audit_events")

    op.drop_index("ix_payments_reservation_id", table_name="payments")
    op.drop_table("payments")
    sa.Enum(name="paymenttype").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="paymentmethod").drop(op.get_bind(), checkfirst=True)

    op.drop_table("reservation_service_lines")

    op.drop_index("ix_reservations_room_dates", table_name="reservations")
    op.drop_table("reservations")
    sa.Enum(name="reservationstatus").drop(op.get_bind(), checkfirst=True)

    op.drop_table("service_items")
    op.drop_table("customers")

    op.drop_table("rooms")
    sa.Enum(name="roomstate").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="roomtype").drop(op.get_bind(), checkfirst=True)

    op.drop_table("users")
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)

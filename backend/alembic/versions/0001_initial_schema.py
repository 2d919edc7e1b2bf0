"""Initial booking, catalog and plan schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

# Enum types are shared between tables, so they are created once up front.
size_category = postgresql.ENUM(
    "SMALL", "MEDIUM", "LARGE", name="sizecategory", create_type=False
)
coat_type = postgresql.ENUM(
    "SHORT", "MEDIUM", "LONG", name="coattype", create_type=False
)
grooming_service_type = postgresql.ENUM(
    "BATH", "BATH_GROOMING", name="groomingservicetype", create_type=False
)
plan_service_type = postgresql.ENUM(
    "GROOMING", "DAYCARE", name="planservicetype", create_type=False
)
logistics_choice = postgresql.ENUM(
    "OWNER_OWNER",
    "OWNER_COMPANY",
    "COMPANY_OWNER",
    "COMPANY_COMPANY",
    name="logisticschoice",
    create_type=False,
)
grooming_style = postgresql.ENUM(
    "BABY",
    "HYGIENIC",
    "BREED_STANDARD",
    "SCISSORS",
    "MACHINE",
    name="groomingstyle",
    create_type=False,
)
grooming_status = postgresql.ENUM(
    "SCHEDULED",
    "IN_SERVICE",
    "READY",
    "COMPLETED",
    "CANCELLED",
    name="groomingappointmentstatus",
    create_type=False,
)
workflow_stage = postgresql.ENUM(
    "WAITING",
    "BATHING",
    "DRYING",
    "GROOMING",
    "DONE",
    name="workflowstage",
    create_type=False,
)
stay_status = postgresql.ENUM(
    "RESERVED",
    "CHECKED_IN",
    "STAYING",
    "CHECKED_OUT",
    "CANCELLED",
    name="staystatus",
    create_type=False,
)
payment_status = postgresql.ENUM(
    "PENDING", "PAID", "PAID_EARLY", "EXEMPT", name="paymentstatus", create_type=False
)
payment_method = postgresql.ENUM(
    "CASH", "PIX", "CREDIT", "DEBIT", name="paymentmethod", create_type=False
)

_ENUMS = (
    size_category,
    coat_type,
    grooming_service_type,
    plan_service_type,
    logistics_choice,
    grooming_style,
    grooming_status,
    workflow_stage,
    stay_status,
    payment_status,
    payment_method,
)

json_type = postgresql.JSONB().with_variant(sa.JSON(), "sqlite")


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


def _booking_payment_columns() -> list[sa.Column]:
    return [
        sa.Column("payment_status", payment_status, nullable=False),
        sa.Column("payment_method", payment_method),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("is_plan_usage", sa.Boolean(), nullable=False),
        sa.Column(
            "client_plan_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey(
                "client_plans.id",
                ondelete="SET NULL",
            ),
        ),
        sa.Column("units_redeemed", sa.Integer(), nullable=False),
        sa.Column("charge_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.String(length=1024)),
        sa.Column("external_event_id", sa.String(length=255)),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in _ENUMS:
        sa.Enum(*enum_type.enums, name=enum_type.name).create(bind, checkfirst=True)

    op.create_table(
        "clients",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("last_purchase_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )

    op.create_table(
        "pets",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "client_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("species", sa.String(length=64), nullable=False),
        sa.Column("breed", sa.String(length=120)),
        sa.Column("size", size_category),
        sa.Column("coat_type", coat_type),
        *_timestamps(),
    )
    op.create_index("ix_pets_client_id", "pets", ["client_id"])

    op.create_table(
        "price_rules",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("service_type", grooming_service_type, nullable=False),
        sa.Column("breed", sa.String(length=120)),
        sa.Column("size", size_category),
        sa.Column("coat_type", coat_type),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_price_rules_service_type", "price_rules", ["service_type"])

    op.create_table(
        "service_addons",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "logistics_fees",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("logistics_choice", logistics_choice, nullable=False),
        sa.Column(
            "addon_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("service_addons.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("logistics_choice", name="uq_logistics_fees_choice"),
    )

    op.create_table(
        "boarding_rates",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("size", size_category, nullable=False),
        sa.Column("daily_rate", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("size", name="uq_boarding_rates_size"),
    )

    op.create_table(
        "plan_definitions",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("service_type", plan_service_type, nullable=False),
        sa.Column("total_units", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("validity_days", sa.Integer(), nullable=False, server_default="90"),
        sa.Column("included_addons", json_type, nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "client_plans",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "client_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "pet_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("pets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "plan_definition_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("plan_definitions.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("service_type", plan_service_type, nullable=False),
        sa.Column("total_units", sa.Integer(), nullable=False),
        sa.Column("used_units", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("price_paid", sa.Numeric(10, 2), nullable=False),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint(
            "used_units >= 0 AND used_units <= total_units",
            name="ck_client_plans_used_units_within_total",
        ),
    )
    op.create_index(
        "ix_client_plans_pet_service", "client_plans", ["pet_id", "service_type"]
    )

    op.create_table(
        "grooming_appointments",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "client_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "pet_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("pets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("service_type", grooming_service_type, nullable=False),
        sa.Column("grooming_style", grooming_style),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("addon_ids", json_type, nullable=False),
        sa.Column("logistics_choice", logistics_choice, nullable=False),
        sa.Column("status", grooming_status, nullable=False),
        sa.Column("workflow_stage", workflow_stage, nullable=False),
        sa.Column("awaiting_payment", sa.Boolean(), nullable=False),
        *_booking_payment_columns(),
        *_timestamps(),
    )
    op.create_index(
        "ix_grooming_appointments_start_at", "grooming_appointments", ["start_at"]
    )
    op.create_index(
        "ix_grooming_appointments_charge_date",
        "grooming_appointments",
        ["charge_date"],
    )
    op.create_index(
        "ix_grooming_appointments_client_plan",
        "grooming_appointments",
        ["client_plan_id"],
    )

    op.create_table(
        "stays",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "client_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "pet_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("pets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("check_in", sa.DateTime(timezone=True), nullable=False),
        sa.Column("check_out", sa.DateTime(timezone=True), nullable=False),
        sa.Column("daily_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("is_daycare", sa.Boolean(), nullable=False),
        sa.Column("status", stay_status, nullable=False),
        *_booking_payment_columns(),
        *_timestamps(),
    )
    op.create_index("ix_stays_check_in", "stays", ["check_in"])
    op.create_index("ix_stays_charge_date", "stays", ["charge_date"])
    op.create_index("ix_stays_client_plan", "stays", ["client_plan_id"])


def downgrade() -> None:
    op.drop_index("ix_stays_client_plan", table_name="stays")
    op.drop_index("ix_stays_charge_date", table_name="stays")
    op.drop_index("ix_stays_check_in", table_name="stays")
    op.drop_table("stays")
    op.drop_index(
        "ix_grooming_appointments_client_plan", table_name="grooming_appointments"
    )
    op.drop_index(
        "ix_grooming_appointments_charge_date", table_name="grooming_appointments"
    )
    op.drop_index("ix_grooming_appointments_start_at", table_name="grooming_appointments")
    op.drop_table("grooming_appointments")
    op.drop_index("ix_client_plans_pet_service", table_name="client_plans")
    op.drop_table("client_plans")
    op.drop_table("plan_definitions")
    op.drop_table("boarding_rates")
    op.drop_table("logistics_fees")
    op.drop_table("service_addons")
    op.drop_index("ix_price_rules_service_type", table_name="price_rules")
    op.drop_table("price_rules")
    op.drop_index("ix_pets_client_id", table_name="pets")
    op.drop_table("pets")
    op.drop_table("clients")

    bind = op.get_bind()
    for enum_type in reversed(_ENUMS):
        sa.Enum(*enum_type.enums, name=enum_type.name).drop(bind, checkfirst=True)

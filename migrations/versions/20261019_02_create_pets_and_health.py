"""create pets and health tracking tables

Revision ID: 20261019_02
Revises: 20261019_01
Create Date: 2026-10-19 09:20:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_02"
down_revision: Union[str, None] = "20261019_01"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    ]


def _owner_columns() -> list:
    return [
        sa.Column("pet_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["pet_id"], ["pets.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    ]


def upgrade() -> None:
    op.create_table(
        "pets",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("species", sa.String(length=60), nullable=False),
        sa.Column("breed", sa.String(length=120), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("gender", sa.String(length=10), nullable=True),
        sa.Column("photo_url", sa.String(length=500), nullable=True),
        sa.Column("microchip_id", sa.String(length=64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_pets_id", "pets", ["id"], unique=False)
    op.create_index("ix_pets_user_id", "pets", ["user_id"], unique=False)

    op.create_table(
        "health_records",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        *_owner_columns(),
        sa.Column("record_type", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=True),
        sa.Column("date_scheduled", sa.Date(), nullable=True),
        sa.Column("date_completed", sa.Date(), nullable=True),
        sa.Column("veterinarian_name", sa.String(length=120), nullable=True),
        sa.Column("clinic_name", sa.String(length=120), nullable=True),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column("cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("recurrence_interval_days", sa.Integer(), nullable=True),
        sa.Column("next_due_date", sa.Date(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_health_records_id", "health_records", ["id"], unique=False)
    op.create_index("ix_health_records_pet_id", "health_records", ["pet_id"], unique=False)
    op.create_index("ix_health_records_user_id", "health_records", ["user_id"], unique=False)
    op.create_index("ix_health_records_next_due_date", "health_records", ["next_due_date"], unique=False)

    op.create_table(
        "vaccinations",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        *_owner_columns(),
        sa.Column("vaccine_name", sa.String(length=120), nullable=False),
        sa.Column("date_administered", sa.Date(), nullable=True),
        sa.Column("next_due_date", sa.Date(), nullable=True),
        sa.Column("veterinarian_name", sa.String(length=120), nullable=True),
        sa.Column("clinic_name", sa.String(length=120), nullable=True),
        sa.Column("batch_number", sa.String(length=64), nullable=True),
        sa.Column("notes", sa.String(length=1000), nullable=True),
        sa.Column("is_core_vaccine", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
    )
    op.create_index("ix_vaccinations_id", "vaccinations", ["id"], unique=False)
    op.create_index("ix_vaccinations_pet_id", "vaccinations", ["pet_id"], unique=False)
    op.create_index("ix_vaccinations_user_id", "vaccinations", ["user_id"], unique=False)
    op.create_index("ix_vaccinations_next_due_date", "vaccinations", ["next_due_date"], unique=False)

    op.create_table(
        "diet_plans",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        *_owner_columns(),
        sa.Column("food_brand", sa.String(length=120), nullable=True),
        sa.Column("food_type", sa.String(length=120), nullable=True),
        sa.Column("daily_amount", sa.String(length=120), nullable=True),
        sa.Column("feeding_times", sa.JSON(), nullable=True),
        sa.Column("special_instructions", sa.String(length=1000), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_diet_plans_id", "diet_plans", ["id"], unique=False)
    op.create_index("ix_diet_plans_pet_id", "diet_plans", ["pet_id"], unique=False)
    op.create_index("ix_diet_plans_user_id", "diet_plans", ["user_id"], unique=False)


def downgrade() -> None:
    for table in ("diet_plans", "vaccinations", "health_records"):
        op.drop_table(table)
    op.drop_index("ix_pets_user_id", table_name="pets")
    op.drop_index("ix_pets_id", table_name="pets")
    op.drop_table("pets")

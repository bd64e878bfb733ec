"""Init DB

Revision ID: 3b9d2e41a7c0
Revises:
Create Date: 2026-10-19 10:12:44.381027

"""

import uuid
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b9d2e41a7c0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SEED_REGIONS = ["Central", "Eastern", "Northern", "Southern", "Western"]


def upgrade() -> None:
    """Upgrade schema."""
    regions = op.create_table(
        "regions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.VARCHAR(), nullable=False),
        sa.Column("is_active", sa.BOOLEAN(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "ministries",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.VARCHAR(), nullable=False),
        sa.Column("is_active", sa.BOOLEAN(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    form_field_type = sa.Enum(
        "text",
        "email",
        "number",
        "select",
        "checkbox",
        "textarea",
        "date",
        name="form_field_type",
    )
    op.create_table(
        "form_fields",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("label", sa.VARCHAR(), nullable=False),
        sa.Column("name", sa.VARCHAR(), nullable=False),
        sa.Column("type", form_field_type, nullable=False),
        sa.Column("required", sa.BOOLEAN(), nullable=False, server_default=sa.false()),
        sa.Column("options", sa.JSON(), nullable=True),
        sa.Column("field_order", sa.INTEGER(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.BOOLEAN(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_form_fields_name", "form_fields", ["name"])

    op.create_table(
        "registrations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("referrer_email", sa.VARCHAR(), nullable=False),
        sa.Column("attendee_name", sa.VARCHAR(), nullable=False),
        sa.Column("attendee_email", sa.VARCHAR(), nullable=False),
        sa.Column("attendee_phone", sa.VARCHAR(), nullable=False),
        sa.Column("gender", sa.VARCHAR(), nullable=False),
        sa.Column("age_group_ministry", sa.VARCHAR(), nullable=False),
        sa.Column("region_id", sa.Uuid(), nullable=True),
        sa.Column("ministry_id", sa.Uuid(), nullable=False),
        sa.Column("extra_data", sa.JSON(), nullable=True),
        sa.ForeignKeyConstraint(["region_id"], ["regions.id"]),
        sa.ForeignKeyConstraint(["ministry_id"], ["ministries.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_registrations_created_at", "registrations", ["created_at"])
    op.create_index(
        "ix_registrations_referrer_email", "registrations", ["referrer_email"]
    )

    # Seed regions offered on the public form
    op.bulk_insert(
        regions,
        [{"id": uuid.uuid4(), "name": name, "is_active": True} for name in SEED_REGIONS],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_registrations_referrer_email", table_name="registrations")
    op.drop_index("ix_registrations_created_at", table_name="registrations")
    op.drop_table("registrations")
    op.drop_index("ix_form_fields_name", table_name="form_fields")
    op.drop_table("form_fields")
    sa.Enum(name="form_field_type").drop(op.get_bind(), checkfirst=True)
    op.drop_table("ministries")
    op.drop_table("regions")

"""Contacts, users, activity history, and merge audit.

Revision ID: 0001
Revises:
Create Date: 2026-03-02 09:14:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from contactmerge.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_ACTIVITY_TYPES = ("PAGE_VISIT", "LOGIN", "FORM_SUBMISSION", "CUSTOM")
_MERGE_REASONS = ("ANONYMOUS_LOGIN", "MANUAL")


def upgrade() -> None:
    op.create_table(
        "contact",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("is_anonymous", sa.Boolean(), nullable=False),
        sa.Column("created_at", UTCDateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("merged_into_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(
            ["merged_into_id"],
            ["contact.id"],
            name="fk_contact_contact_merged_into_id_contact",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_contact"),
    )
    op.create_index("ix_contact_email", "contact", ["email"])

    op.create_table(
        "web_user",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("created_at", UTCDateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_web_user"),
        sa.UniqueConstraint("user_name", name="uq_web_user_web_user_user_name"),
    )

    op.create_table(
        "contact_user",
        sa.Column("contact_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(
            ["contact_id"],
            ["contact.id"],
            name="fk_contact_user_contact_user_contact_id_contact",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["web_user.id"],
            name="fk_contact_user_contact_user_user_id_web_user",
        ),
        sa.PrimaryKeyConstraint("contact_id", "user_id", name="pk_contact_user"),
    )

    op.create_table(
        "contact_activity",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("contact_id", sa.Uuid(), nullable=False),
        sa.Column(
            "activity_type",
            sa.Enum(*_ACTIVITY_TYPES, name="activitytype", native_enum=False),
            nullable=False,
        ),
        sa.Column("url", sa.String(), nullable=True),
        sa.Column("site_name", sa.String(), nullable=True),
        sa.Column("occurred_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["contact_id"],
            ["contact.id"],
            name="fk_contact_activity_contact_activity_contact_id_contact",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_contact_activity"),
    )
    op.create_index(
        "ix_contact_activity_contact_id", "contact_activity", ["contact_id"]
    )

    op.create_table(
        "contact_merge",
        sa.Column("source_id", sa.Uuid(), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=False),
        sa.Column(
            "reason",
            sa.Enum(*_MERGE_REASONS, name="mergereason", native_enum=False),
            nullable=False,
        ),
        sa.Column("created_at", UTCDateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("source_id", "target_id", name="pk_contact_merge"),
    )


def downgrade() -> None:
    op.drop_table("contact_merge")
    op.drop_index("ix_contact_activity_contact_id", table_name="contact_activity")
    op.drop_table("contact_activity")
    op.drop_table("contact_user")
    op.drop_table("web_user")
    op.drop_index("ix_contact_email", table_name="contact")
    op.drop_table("contact")

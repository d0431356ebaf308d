"""create rsvp_submissions and guest_messages

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-12 09:00:00

"""
from collections.abc import Sequence

import sqlalchemy as sa
import sqlalchemy_utils
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a7b9d10"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "rsvp_submissions",
        sa.Column("id", sqlalchemy_utils.UUIDType(binary=False), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("attending", sa.Boolean, nullable=False),
        sa.Column("guests", sa.Integer, nullable=False, server_default="1"),
        sa.Column("dietary_restrictions", sa.Text, nullable=True),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.CheckConstraint("guests >= 1 AND guests <= 10", name="rsvp_submissions_guests_range"),
        sa.CheckConstraint("length(name) >= 1", name="rsvp_submissions_name_not_empty"),
    )
    op.create_index("ix_rsvp_submissions_email", "rsvp_submissions", ["email"])
    op.create_index("ix_rsvp_submissions_created_at", "rsvp_submissions", ["created_at"])

    op.create_table(
        "guest_messages",
        sa.Column("id", sqlalchemy_utils.UUIDType(binary=False), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("message", sa.String(500), nullable=False),
        sa.Column("approved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.CheckConstraint("length(name) >= 1", name="guest_messages_name_not_empty"),
        sa.CheckConstraint("length(message) >= 1", name="guest_messages_message_not_empty"),
    )
    op.create_index("ix_guest_messages_approved", "guest_messages", ["approved"])
    op.create_index("ix_guest_messages_created_at", "guest_messages", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_guest_messages_created_at", table_name="guest_messages")
    op.drop_index("ix_guest_messages_approved", table_name="guest_messages")
    op.drop_table("guest_messages")
    op.drop_index("ix_rsvp_submissions_created_at", table_name="rsvp_submissions")
    op.drop_index("ix_rsvp_submissions_email", table_name="rsvp_submissions")
    op.drop_table("rsvp_submissions")

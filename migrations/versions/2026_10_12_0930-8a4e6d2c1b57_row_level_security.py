"""row level security for public access

Anyone may insert RSVPs and unapproved guest messages; only approved guest
messages are readable. The table owner bypasses these policies; the next
revision adds the non-owner role that public reads run as.

Revision ID: 8a4e6d2c1b57
Revises: 3f1c2a7b9d10
Create Date: 2026-10-12 09:30:00

"""
from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8a4e6d2c1b57"
down_revision: str | None = "3f1c2a7b9d10"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

POLICIES = {
    "rsvp_submissions": [
        "CREATE POLICY rsvp_submissions_insert_anyone ON rsvp_submissions "
        "FOR INSERT TO PUBLIC WITH CHECK (true)",
    ],
    "guest_messages": [
        "CREATE POLICY guest_messages_insert_unapproved ON guest_messages "
        "FOR INSERT TO PUBLIC WITH CHECK (approved = false)",
        "CREATE POLICY guest_messages_select_approved ON guest_messages "
        "FOR SELECT TO PUBLIC USING (approved = true)",
    ],
}


def _is_postgres() -> bool:
    return op.get_bind().dialect.name == "postgresql"


def upgrade() -> None:
    if not _is_postgres():
        return
    for table, statements in POLICIES.items():
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        for statement in statements:
            op.execute(statement)


def downgrade() -> None:
    if not _is_postgres():
        return
    for table, statements in POLICIES.items():
        for statement in statements:
            policy_name = statement.split()[2]
            op.execute(f"DROP POLICY IF EXISTS {policy_name} ON {table}")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")

"""public role for row level security

The API's own role owns both tables and so bypasses their policies. Public
reads switch to this role for the length of their transaction, which makes
the ``approved = true`` policy apply to them whatever filter the query has.
Creating the role needs CREATEROLE on the migrating role.

Revision ID: c4d8e1f2a3b6
Revises: 8a4e6d2c1b57
Create Date: 2026-10-19 10:00:00

"""
from collections.abc import Sequence

from alembic import op

from src.config.table_names import DatabaseRoles, TableNames

# revision identifiers, used by Alembic.
revision: str = "c4d8e1f2a3b6"
down_revision: str | None = "8a4e6d2c1b57"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ROLE = DatabaseRoles.PUBLIC.value

GRANTS = {
    TableNames.GUEST_MESSAGES.value: "SELECT, INSERT",
    TableNames.RSVP_SUBMISSIONS.value: "INSERT",
}


def _is_postgres() -> bool:
    return op.get_bind().dialect.name == "postgresql"


def upgrade() -> None:
    if not _is_postgres():
        return
    op.execute(
        f"""
        DO $$
        BEGIN
            IF NOT EXISTS (SELECT FROM pg_roles WHERE rolname = '{ROLE}') THEN
                CREATE ROLE {ROLE} NOLOGIN;
            END IF;
        END
        $$
        """
    )
    # Lets the API's role SET ROLE to it
    op.execute(f"GRANT {ROLE} TO CURRENT_USER")
    op.execute(f"GRANT USAGE ON SCHEMA public TO {ROLE}")
    for table, privileges in GRANTS.items():
        op.execute(f"GRANT {privileges} ON {table} TO {ROLE}")


def downgrade() -> None:
    if not _is_postgres():
        return
    for table, privileges in GRANTS.items():
        op.execute(f"REVOKE {privileges} ON {table} FROM {ROLE}")
    op.execute(f"REVOKE USAGE ON SCHEMA public FROM {ROLE}")
    op.execute(f"REVOKE {ROLE} FROM CURRENT_USER")
    op.execute(f"DROP ROLE IF EXISTS {ROLE}")

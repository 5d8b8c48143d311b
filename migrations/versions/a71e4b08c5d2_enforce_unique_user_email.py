"""enforce_unique_user_email

Make email a case-insensitive unique key on users. Provisioning and invite
acceptance both look users up by email, so duplicates would make either
pick an arbitrary row.

Existing duplicates are not merged automatically: the upgrade aborts and
lists them so an operator can decide which row keeps its grants.

Revision ID: a71e4b08c5d2
Revises: 3f1c9a2d7b40
Create Date: 2026-10-02 16:40:09.551873

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a71e4b08c5d2"
down_revision: Union[str, Sequence[str], None] = "3f1c9a2d7b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    conn = op.get_bind()
    duplicates = conn.execute(
        sa.text("""
            SELECT lower(email) AS email, count(*) AS n
            FROM users
            GROUP BY lower(email)
            HAVING count(*) > 1
            ORDER BY lower(email)
        """)
    ).all()
    if duplicates:
        listing = ", ".join(f"{row.email} ({row.n} rows)" for row in duplicates)
        raise RuntimeError(
            "Cannot enforce unique user emails, merge these users first: " + listing
        )

    op.execute("UPDATE users SET email = lower(email) WHERE email <> lower(email)")
    op.execute("DROP INDEX IF EXISTS idx_users_email_lower")
    op.execute("CREATE UNIQUE INDEX uq_users_email_lower ON users (lower(email))")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP INDEX IF EXISTS uq_users_email_lower")
    op.execute("CREATE INDEX idx_users_email_lower ON users (lower(email))")

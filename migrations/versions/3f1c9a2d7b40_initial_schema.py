"""initial_schema

Create the access schema:
- Users (internal users, linked to identity layer principals)
- Workspaces (tenants, plus the platform workspace)
- Admin grants (platform-wide when workspace_id is NULL)
- Staff grants (one per user)
- Invites (pending -> accepted | revoked, expiry derived at read time)

Revision ID: 3f1c9a2d7b40
Revises:
Create Date: 2026-09-28 10:12:44.318205

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from warden.config import Settings


# revision identifiers, used by Alembic.
revision: str = "3f1c9a2d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLE = postgresql.ENUM(
    "platform_operator",
    "workspace_admin",
    "staff",
    name="access_role",
    create_type=False,
)


def _timestamp(name: str, nullable: bool = False, default: bool = True) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        nullable=nullable,
        server_default=sa.text("NOW()") if default else None,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE access_role AS ENUM ('platform_operator', 'workspace_admin', 'staff');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE invite_status AS ENUM ('pending', 'accepted', 'revoked');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("principal_id", sa.String(255), nullable=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("direct_role", ROLE, nullable=True),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("principal_id", name="uq_users_principal_id"),
        # Only the platform operator role is ever stamped directly on a user
        sa.CheckConstraint(
            "direct_role IS NULL OR direct_role = 'platform_operator'",
            name="ck_users_direct_role",
        ),
    )
    op.execute("CREATE INDEX idx_users_email_lower ON users (lower(email))")

    # ========================================================================
    # WORKSPACES table
    # ========================================================================
    op.create_table(
        "workspaces",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("owner_id", sa.UUID(), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    # ========================================================================
    # ADMIN_GRANTS table (NULL workspace = platform scope)
    # ========================================================================
    op.create_table(
        "admin_grants",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("workspace_id", sa.UUID(), nullable=True),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "uq_admin_grants_platform_user",
        "admin_grants",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("workspace_id IS NULL"),
    )
    op.create_index(
        "uq_admin_grants_workspace_user",
        "admin_grants",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("workspace_id IS NOT NULL"),
    )
    op.create_index("idx_admin_grants_workspace_id", "admin_grants", ["workspace_id"])

    # ========================================================================
    # STAFF_GRANTS table
    # ========================================================================
    op.create_table(
        "staff_grants",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("workspace_id", sa.UUID(), nullable=False),
        _timestamp("created_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", name="uq_staff_grants_user_id"),
    )
    op.create_index("idx_staff_grants_workspace_id", "staff_grants", ["workspace_id"])

    # ========================================================================
    # INVITES table (NULL workspace = platform scope)
    # ========================================================================
    op.create_table(
        "invites",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("role", ROLE, nullable=False),
        sa.Column("workspace_id", sa.UUID(), nullable=True),
        sa.Column("inviter_id", sa.UUID(), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(
                "pending", "accepted", "revoked", name="invite_status", create_type=False
            ),
            nullable=False,
            server_default="pending",
        ),
        _timestamp("created_at"),
        _timestamp("expires_at", default=False),
        _timestamp("accepted_at", nullable=True, default=False),
        sa.Column("accepted_by_user_id", sa.UUID(), nullable=True),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["inviter_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["accepted_by_user_id"], ["users.id"], ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token", name="uq_invites_token"),
        sa.CheckConstraint("expires_at > created_at", name="ck_invites_expiry"),
        sa.CheckConstraint(
            "(status = 'accepted') = (accepted_at IS NOT NULL)",
            name="ck_invites_accepted_at",
        ),
    )
    op.create_index(
        "idx_invites_workspace_status", "invites", ["workspace_id", "status"]
    )
    op.execute("CREATE INDEX idx_invites_email ON invites (lower(email))")

    # ========================================================================
    # Admin/staff mutual exclusion
    # ========================================================================
    # Locks the user row so concurrent grant inserts for one user serialize,
    # then reports a clash as a unique violation like the indexes do.
    op.execute("""
        CREATE OR REPLACE FUNCTION enforce_grant_exclusion()
        RETURNS TRIGGER AS $$
        BEGIN
            PERFORM 1 FROM users WHERE id = NEW.user_id FOR UPDATE;
            IF TG_TABLE_NAME = 'admin_grants' THEN
                IF EXISTS (SELECT 1 FROM staff_grants WHERE user_id = NEW.user_id) THEN
                    RAISE EXCEPTION 'user % already holds a staff grant', NEW.user_id
                        USING ERRCODE = 'unique_violation';
                END IF;
            ELSE
                IF EXISTS (SELECT 1 FROM admin_grants WHERE user_id = NEW.user_id) THEN
                    RAISE EXCEPTION 'user % already holds an admin grant', NEW.user_id
                        USING ERRCODE = 'unique_violation';
                END IF;
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER admin_grants_exclusion
        BEFORE INSERT OR UPDATE OF user_id ON admin_grants
        FOR EACH ROW EXECUTE FUNCTION enforce_grant_exclusion();
    """)
    op.execute("""
        CREATE TRIGGER staff_grants_exclusion
        BEFORE INSERT OR UPDATE OF user_id ON staff_grants
        FOR EACH ROW EXECUTE FUNCTION enforce_grant_exclusion();
    """)

    # ========================================================================
    # Platform workspace
    # ========================================================================
    platform = Settings().platform
    op.execute(
        sa.text(
            "INSERT INTO workspaces (id, name) VALUES (:id, :name) "
            "ON CONFLICT (id) DO NOTHING"
        ).bindparams(id=platform.workspace_id, name=platform.name)
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TRIGGER IF EXISTS staff_grants_exclusion ON staff_grants")
    op.execute("DROP TRIGGER IF EXISTS admin_grants_exclusion ON admin_grants")
    op.execute("DROP FUNCTION IF EXISTS enforce_grant_exclusion()")

    op.drop_table("invites")
    op.drop_table("staff_grants")
    op.drop_table("admin_grants")
    op.drop_table("workspaces")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS invite_status")
    op.execute("DROP TYPE IF EXISTS access_role")

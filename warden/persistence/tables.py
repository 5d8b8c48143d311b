"""SQLAlchemy table definitions.

These definitions match the schema created by the Alembic migrations.
"""

from sqlalchemy import (
    Column,
    Enum,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    func,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

metadata = MetaData()

ROLE_ENUM = Enum(
    "platform_operator",
    "workspace_admin",
    "staff",
    name="access_role",
    create_type=False,
)

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("principal_id", String(255), nullable=True, unique=True),
    Column("email", String(320), nullable=False),  # Stored lowercase
    Column("direct_role", ROLE_ENUM, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# Email is the natural key across provisioning
Index("uq_users_email_lower", func.lower(users_table.c.email), unique=True)

# ============================================================================
# WORKSPACES TABLE
# ============================================================================
workspaces_table = Table(
    "workspaces",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("name", String(255), nullable=False),
    Column(
        "owner_id", UUID, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# ADMIN GRANTS TABLE (null workspace = platform scope)
# ============================================================================
admin_grants_table = Table(
    "admin_grants",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "workspace_id",
        UUID,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# One platform-wide and one workspace-scoped grant per user
Index(
    "uq_admin_grants_platform_user",
    admin_grants_table.c.user_id,
    unique=True,
    postgresql_where=admin_grants_table.c.workspace_id.is_(None),
)
Index(
    "uq_admin_grants_workspace_user",
    admin_grants_table.c.user_id,
    unique=True,
    postgresql_where=admin_grants_table.c.workspace_id.is_not(None),
)
Index("idx_admin_grants_workspace_id", admin_grants_table.c.workspace_id)

# ============================================================================
# STAFF GRANTS TABLE (one per user, ever)
# ============================================================================
staff_grants_table = Table(
    "staff_grants",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "user_id",
        UUID,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column(
        "workspace_id",
        UUID,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_staff_grants_workspace_id", staff_grants_table.c.workspace_id)

# ============================================================================
# INVITES TABLE (null workspace = platform scope)
# ============================================================================
invites_table = Table(
    "invites",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("token", String(255), nullable=False, unique=True),
    Column("email", String(320), nullable=False),
    Column("role", ROLE_ENUM, nullable=False),
    Column(
        "workspace_id",
        UUID,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column(
        "inviter_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    ),
    # 'expired' is derived at read time and never stored
    Column(
        "status",
        Enum("pending", "accepted", "revoked", name="invite_status", create_type=False),
        nullable=False,
        server_default="pending",
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("accepted_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "accepted_by_user_id",
        UUID,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    ),
)

Index("idx_invites_workspace_status", invites_table.c.workspace_id, invites_table.c.status)
Index("idx_invites_email", func.lower(invites_table.c.email))

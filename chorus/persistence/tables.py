"""SQLAlchemy table definitions for Chorus.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("gen_random_uuid()")),
    Column("nickname", String(255), nullable=False),
    Column("text", Text, nullable=False),
    # No foreign key: replies may outlive or precede their parent row
    Column("parent_id", UUID, nullable=True),
    Column("edited", Boolean, nullable=False, server_default=text("false")),
    Column("likes", Integer, nullable=False, server_default=text("0")),
    Column(
        "created_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
    CheckConstraint("likes >= 0", name="likes_non_negative"),
)

Index("idx_comments_parent_id", comments_table.c.parent_id)
Index("idx_comments_created_at", comments_table.c.created_at)

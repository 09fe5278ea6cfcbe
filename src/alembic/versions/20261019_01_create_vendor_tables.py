"""Create vendors and vendor_embeddings with a pgvector cosine index

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from pgvector.sqlalchemy import Vector
from sqlalchemy.dialects import postgresql

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "20261019_01"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the vendor store and its embedding index."""
    try:
        op.execute("CREATE EXTENSION IF NOT EXISTS vector")
    except sa.exc.DBAPIError as e:
        # Managed Postgres may only allow extensions enabled out of band
        if 'extension "vector" is not allow-listed' not in str(e):
            raise

    op.create_table(
        "vendors",
        sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "specialties",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::text[]"),
        ),
        sa.Column("style", sa.Text(), nullable=True),
        sa.Column("price_range", sa.String(10), nullable=False, server_default=""),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("contact", sa.String(255), nullable=True),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column(
            "highlights",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'::text[]"),
        ),
        sa.Column("team_info", sa.Text(), nullable=True),
        sa.Column("personal_details", postgresql.JSONB(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_vendors_id", "vendors", ["id"])
    op.create_index("ix_vendors_name", "vendors", ["name"])

    op.create_table(
        "vendor_embeddings",
        sa.Column(
            "vendor_id",
            sa.UUID(as_uuid=True),
            sa.ForeignKey("vendors.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("embedding", Vector(768), nullable=False),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("category", sa.String(100), nullable=False, server_default=""),
        sa.Column("price_range", sa.String(10), nullable=False, server_default=""),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # HNSW index for vector similarity (m=16, ef_construction=64 are good defaults)
    op.execute("""
        CREATE INDEX idx_vendor_embeddings_embedding
        ON vendor_embeddings
        USING hnsw (embedding vector_cosine_ops)
        WITH (m = 16, ef_construction = 64)
    """)


def downgrade() -> None:
    op.drop_index("idx_vendor_embeddings_embedding", table_name="vendor_embeddings")
    op.drop_table("vendor_embeddings")
    op.drop_index("ix_vendors_name", table_name="vendors")
    op.drop_index("ix_vendors_id", table_name="vendors")
    op.drop_table("vendors")

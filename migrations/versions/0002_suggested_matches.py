"""suggested matches

Revision ID: 0002_suggested_matches
Revises: 0001_initial_workflow_schema
Create Date: 2026-10-19 15:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0002_suggested_matches"
down_revision: Union[str, Sequence[str], None] = "0001_initial_workflow_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "suggested_matches",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("opening_id", sa.Uuid(), nullable=False),
        sa.Column("founder_id", sa.Uuid(), nullable=False),
        sa.Column("builder_id", sa.Uuid(), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("tier", sa.String(length=16), nullable=False),
        sa.Column("breakdown", sa.JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("opening_id", "builder_id", name="uq_suggested_matches_opening_builder"),
    )
    op.create_index("ix_suggested_matches_founder_id", "suggested_matches", ["founder_id"], unique=False)
    op.create_index(
        "idx_suggested_matches_opening_score", "suggested_matches", ["opening_id", "score"], unique=False
    )
    op.create_index(
        "idx_suggested_matches_builder_score", "suggested_matches", ["builder_id", "score"], unique=False
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_suggested_matches_builder_score", table_name="suggested_matches")
    op.drop_index("idx_suggested_matches_opening_score", table_name="suggested_matches")
    op.drop_index("ix_suggested_matches_founder_id", table_name="suggested_matches")
    op.drop_table("suggested_matches")

"""initial workflow schema

Revision ID: 0001_initial_workflow_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial_workflow_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LIVE_TRIAL_PREDICATE = "status IN ('proposed', 'active')"


def _json(none_as_null: bool = False) -> sa.JSON:
    return sa.JSON(none_as_null=none_as_null).with_variant(
        postgresql.JSONB(none_as_null=none_as_null), "postgresql"
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "user_accounts",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("avatar_url", sa.String(length=500), nullable=True),
        sa.Column("subscription_tier", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_accounts_role", "user_accounts", ["role"], unique=False)

    op.create_table(
        "builder_profiles",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("skills", _json(), nullable=False),
        sa.Column("risk_appetite", sa.String(length=16), nullable=True),
        sa.Column("compensation_openness", _json(), nullable=False),
        sa.Column("expected_cash_min", sa.Float(), nullable=True),
        sa.Column("expected_cash_max", sa.Float(), nullable=True),
        sa.Column("hours_per_week", sa.Integer(), nullable=True),
        sa.Column("roles_interested", _json(), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("remote_preference", sa.String(length=16), nullable=True),
        sa.Column("scenario_responses", _json(), nullable=False),
        sa.Column("is_complete", sa.Boolean(), nullable=False),
        sa.Column("is_visible", sa.Boolean(), nullable=False),
        sa.Column("is_open_to_opportunities", sa.Boolean(), nullable=False),
        sa.Column("interest_sent_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("shortlist_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("match_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["user_id"], ["user_accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_index("ix_builder_profiles_is_complete", "builder_profiles", ["is_complete"], unique=False)

    op.create_table(
        "founder_profiles",
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("startup_name", sa.String(length=100), nullable=True),
        sa.Column("startup_stage", sa.String(length=32), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("scenario_responses", _json(), nullable=False),
        sa.Column("is_complete", sa.Boolean(), nullable=False),
        sa.Column("match_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["user_id"], ["user_accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id"),
    )

    op.create_table(
        "openings",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("founder_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("role_type", sa.String(length=32), nullable=False),
        sa.Column("hours_per_week", sa.Integer(), nullable=False),
        sa.Column("skills_required", _json(), nullable=False),
        sa.Column("skills_preferred", _json(), nullable=False),
        sa.Column("equity_min", sa.Float(), nullable=True),
        sa.Column("equity_max", sa.Float(), nullable=True),
        sa.Column("cash_min", sa.Float(), nullable=True),
        sa.Column("cash_max", sa.Float(), nullable=True),
        sa.Column("remote_preference", sa.String(length=16), nullable=False),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("interest_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("shortlist_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("filled_by", sa.Uuid(), nullable=True),
        sa.Column("filled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_openings_founder_id", "openings", ["founder_id"], unique=False)
    op.create_index("ix_openings_status", "openings", ["status"], unique=False)
    op.create_index("idx_openings_status_created", "openings", ["status", "created_at"], unique=False)

    op.create_table(
        "interests",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("builder_id", sa.Uuid(), nullable=False),
        sa.Column("opening_id", sa.Uuid(), nullable=False),
        sa.Column("founder_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("is_mutual_match", sa.Boolean(), nullable=False),
        sa.Column("builder_note", sa.String(length=500), nullable=True),
        sa.Column("conversation_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("shortlisted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("passed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("withdrawn_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("matched_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("builder_id", "opening_id", name="uq_interests_builder_opening"),
    )
    op.create_index("ix_interests_opening_id", "interests", ["opening_id"], unique=False)
    op.create_index("ix_interests_status", "interests", ["status"], unique=False)
    op.create_index("idx_interests_builder_created", "interests", ["builder_id", "created_at"], unique=False)
    op.create_index("idx_interests_founder_status", "interests", ["founder_id", "status"], unique=False)
    op.create_index(
        "idx_interests_mutual_pair", "interests", ["founder_id", "builder_id", "is_mutual_match"], unique=False
    )

    op.create_table(
        "conversations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("interest_id", sa.Uuid(), nullable=False),
        sa.Column("opening_id", sa.Uuid(), nullable=False),
        sa.Column("founder_id", sa.Uuid(), nullable=False),
        sa.Column("builder_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("last_message_preview", sa.String(length=100), nullable=True),
        sa.Column("last_message_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("message_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("trial_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("interest_id"),
    )
    op.create_index("idx_conversations_founder_status", "conversations", ["founder_id", "status"], unique=False)
    op.create_index("idx_conversations_builder_status", "conversations", ["builder_id", "status"], unique=False)

    op.create_table(
        "messages",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("conversation_id", sa.Uuid(), nullable=False),
        sa.Column("sender_id", sa.Uuid(), nullable=True),
        sa.Column("message_type", sa.String(length=32), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("extra_metadata", _json(), nullable=False),
        sa.ForeignKeyConstraint(["conversation_id"], ["conversations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_messages_conversation_created", "messages", ["conversation_id", "created_at"], unique=False
    )
    op.create_index(
        "idx_messages_unread", "messages", ["conversation_id", "sender_id", "read_at"], unique=False
    )

    op.create_table(
        "trials",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("conversation_id", sa.Uuid(), nullable=False),
        sa.Column("interest_id", sa.Uuid(), nullable=False),
        sa.Column("founder_id", sa.Uuid(), nullable=False),
        sa.Column("builder_id", sa.Uuid(), nullable=False),
        sa.Column("proposed_by", sa.Uuid(), nullable=False),
        sa.Column("duration_days", sa.Integer(), nullable=False),
        sa.Column("goal", sa.String(length=500), nullable=False),
        sa.Column("checkin_frequency", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("proposed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_by", sa.Uuid(), nullable=True),
        sa.Column("cancellation_reason", sa.String(length=500), nullable=True),
        sa.Column("declined", sa.Boolean(), nullable=False),
        sa.Column("founder_feedback", _json(none_as_null=True), nullable=True),
        sa.Column("builder_feedback", _json(none_as_null=True), nullable=True),
        sa.Column("outcome", sa.String(length=16), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_trials_conversation_id", "trials", ["conversation_id"], unique=False)
    op.create_index("idx_trials_status_ends_at", "trials", ["status", "ends_at"], unique=False)
    op.create_index("idx_trials_founder_status", "trials", ["founder_id", "status"], unique=False)
    op.create_index("idx_trials_builder_status", "trials", ["builder_id", "status"], unique=False)
    op.create_index(
        "uq_trials_live_per_conversation",
        "trials",
        ["conversation_id"],
        unique=True,
        postgresql_where=sa.text(LIVE_TRIAL_PREDICATE),
        sqlite_where=sa.text(LIVE_TRIAL_PREDICATE),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("uq_trials_live_per_conversation", table_name="trials")
    op.drop_index("idx_trials_builder_status", table_name="trials")
    op.drop_index("idx_trials_founder_status", table_name="trials")
    op.drop_index("idx_trials_status_ends_at", table_name="trials")
    op.drop_index("ix_trials_conversation_id", table_name="trials")
    op.drop_table("trials")

    op.drop_index("idx_messages_unread", table_name="messages")
    op.drop_index("idx_messages_conversation_created", table_name="messages")
    op.drop_table("messages")

    op.drop_index("idx_conversations_builder_status", table_name="conversations")
    op.drop_index("idx_conversations_founder_status", table_name="conversations")
    op.drop_table("conversations")

    op.drop_index("idx_interests_mutual_pair", table_name="interests")
    op.drop_index("idx_interests_founder_status", table_name="interests")
    op.drop_index("idx_interests_builder_created", table_name="interests")
    op.drop_index("ix_interests_status", table_name="interests")
    op.drop_index("ix_interests_opening_id", table_name="interests")
    op.drop_table("interests")

    op.drop_index("idx_openings_status_created", table_name="openings")
    op.drop_index("ix_openings_status", table_name="openings")
    op.drop_index("ix_openings_founder_id", table_name="openings")
    op.drop_table("openings")

    op.drop_table("founder_profiles")
    op.drop_index("ix_builder_profiles_is_complete", table_name="builder_profiles")
    op.drop_table("builder_profiles")
    op.drop_index("ix_user_accounts_role", table_name="user_accounts")
    op.drop_table("user_accounts")

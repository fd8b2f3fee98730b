"""Add behavior, learning and recommendation audit tables.

Creates:
- user_behavior_signals: append-only engagement signals with listing snapshots
- user_interactions: legacy loose-schema interaction events
- learned_preferences: reinforced feature affinities and style preferences
- recommendation_history: what was shown, plus later feedback

Revision ID: 002
Revises: 001
Create Date: 2026-10-05
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1. user_behavior_signals
    op.create_table(
        "user_behavior_signals",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("property_id", UUID(as_uuid=True), nullable=False),
        sa.Column("signal_type", sa.String(20), nullable=False),
        sa.Column("signal_strength", sa.Float, nullable=False),
        sa.Column("time_spent_seconds", sa.Integer),
        sa.Column("scroll_depth", sa.Float),
        sa.Column("photos_viewed", sa.Integer),
        sa.Column("sections_expanded", JSONB),
        sa.Column("property_snapshot", JSONB),
        sa.Column("session_id", sa.String(100)),
        sa.Column("device_type", sa.String(20)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_signals_user_created", "user_behavior_signals", ["user_id", "created_at"])
    op.create_index("idx_signals_property", "user_behavior_signals", ["property_id"])

    # 2. user_interactions
    op.create_table(
        "user_interactions",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("property_id", UUID(as_uuid=True)),
        sa.Column("interaction_type", sa.String(30), nullable=False),
        sa.Column("interaction_data", JSONB, server_default=sa.text("'{}'::jsonb")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_interactions_user_created", "user_interactions", ["user_id", "created_at"])

    # 3. learned_preferences
    op.create_table(
        "learned_preferences",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("pattern_type", sa.String(30), nullable=False),
        sa.Column("pattern_key", sa.String(100), nullable=False),
        sa.Column("pattern_value", JSONB, nullable=False),
        sa.Column("confidence_score", sa.Float, server_default=sa.text("0.5"), nullable=False),
        sa.Column("sample_count", sa.Integer, server_default=sa.text("1"), nullable=False),
        sa.Column("last_reinforced_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "pattern_type", "pattern_key", name="uq_learned_pref_user_pattern"),
    )
    op.create_index("idx_learned_preferences_user", "learned_preferences", ["user_id"])

    # 4. recommendation_history
    op.create_table(
        "recommendation_history",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), nullable=False),
        sa.Column("property_id", UUID(as_uuid=True), nullable=False),
        sa.Column("overall_score", sa.Float, nullable=False),
        sa.Column("preference_score", sa.Float, nullable=False),
        sa.Column("discovery_score", sa.Float, nullable=False),
        sa.Column("match_reasons", JSONB),
        sa.Column("discovery_reasons", JSONB),
        sa.Column("recommendation_context", sa.String(50)),
        sa.Column("position_shown", sa.Integer),
        sa.Column("user_feedback", sa.String(50)),
        sa.Column("feedback_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_rec_history_user", "recommendation_history", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_table("recommendation_history")
    op.drop_table("learned_preferences")
    op.drop_table("user_interactions")
    op.drop_table("user_behavior_signals")

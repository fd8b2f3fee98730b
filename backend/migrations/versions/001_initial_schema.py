"""Initial schema — properties, user_preference_profiles.

Revision ID: 001
Revises:
Create Date: 2026-10-05
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Property catalog
    op.create_table(
        "properties",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("price", sa.Float),
        sa.Column("location", sa.String(255)),
        sa.Column("city", sa.String(100), index=True),
        sa.Column("state", sa.String(100)),
        sa.Column("property_type", sa.String(50), index=True),
        sa.Column("bedrooms", sa.Integer),
        sa.Column("bathrooms", sa.Integer),
        sa.Column("area_sqm", sa.Float),
        sa.Column("property_features", postgresql.JSONB, server_default=sa.text("'{}'::jsonb")),
        sa.Column("status", sa.String(20), nullable=False, server_default="active", index=True),
        sa.Column("approval_status", sa.String(20), nullable=False, server_default="pending", index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_properties_listing", "properties", ["status", "approval_status", "created_at"])

    # Explicit preferences
    op.create_table(
        "user_preference_profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), unique=True, nullable=False, index=True),
        sa.Column("min_budget", sa.Float),
        sa.Column("max_budget", sa.Float),
        sa.Column("min_bedrooms", sa.Integer),
        sa.Column("max_bedrooms", sa.Integer),
        sa.Column("preferred_locations", postgresql.JSONB, server_default=sa.text("'[]'::jsonb")),
        sa.Column("preferred_property_types", postgresql.JSONB, server_default=sa.text("'[]'::jsonb")),
        sa.Column("must_have_features", postgresql.JSONB, server_default=sa.text("'[]'::jsonb")),
        sa.Column("deal_breakers", postgresql.JSONB, server_default=sa.text("'[]'::jsonb")),
        sa.Column("location_weight", sa.Float),
        sa.Column("price_weight", sa.Float),
        sa.Column("size_weight", sa.Float),
        sa.Column("features_weight", sa.Float),
        sa.Column("type_weight", sa.Float),
        sa.Column("discovery_openness", sa.Float),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("user_preference_profiles")
    op.drop_index("idx_properties_listing", table_name="properties")
    op.drop_table("properties")

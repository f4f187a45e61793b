"""Initial migration — city property tables and slug redirects.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18
"""
from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _property_columns() -> List[sa.Column]:
    """Columns every city table carries."""
    return [
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("seo_slug", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("price", sa.BigInteger, nullable=True),
        sa.Column("price_display", sa.String(100), nullable=True),
        sa.Column("bedrooms", sa.Integer, nullable=True),
        sa.Column("bathrooms", sa.Integer, nullable=True),
        sa.Column("area_sqft", sa.Float, nullable=True),
        sa.Column("amenities", JSONB, nullable=True, server_default="[]"),
        sa.Column("main_image_url", sa.String(2048), nullable=True),
        sa.Column("is_featured", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def _property_indexes(table: str) -> None:
    op.create_index(f"ix_{table}_seo_slug", table, ["seo_slug"])
    op.create_index(f"ix_{table}_status", table, ["status"])
    op.create_index(f"ix_{table}_status_featured", table, ["status", "is_featured", "created_at"])


def upgrade() -> None:
    # ── hyderabad_properties ──
    op.create_table(
        "hyderabad_properties",
        *_property_columns(),
        sa.Column("slug", sa.String(255), nullable=True),
        sa.Column("property_type", sa.String(50), nullable=True),
        sa.Column("bhk_config", sa.String(20), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("micro_market", sa.String(100), nullable=True),
        sa.Column("project_name", sa.String(255), nullable=True),
        sa.Column("possession_status", sa.String(50), nullable=True),
        sa.Column("landowner_share", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("investor_share", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_resale", sa.Boolean, nullable=False, server_default="false"),
    )
    _property_indexes("hyderabad_properties")
    op.create_index("ix_hyderabad_properties_slug", "hyderabad_properties", ["slug"])
    op.create_index("ix_hyderabad_properties_micro_market", "hyderabad_properties", ["micro_market"])

    # ── goa_holiday_properties (no legacy slug column) ──
    op.create_table(
        "goa_holiday_properties",
        *_property_columns(),
        sa.Column("type", sa.String(50), nullable=True),
        sa.Column("bhk_config", sa.String(20), nullable=True),
        sa.Column("district", sa.String(50), nullable=True),
        sa.Column("location_area", sa.String(255), nullable=True),
        sa.Column("listing_type", sa.String(20), nullable=True),
        sa.Column("project_name", sa.String(255), nullable=True),
        sa.Column("developer_name", sa.String(255), nullable=True),
        sa.Column("possession_status", sa.String(50), nullable=True),
        sa.Column("seo_title", sa.String(500), nullable=True),
        sa.Column("meta_description", sa.Text, nullable=True),
    )
    _property_indexes("goa_holiday_properties")
    # Fuzzy title lookups use ILIKE '%...%'
    op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm;")
    op.execute("""
        CREATE INDEX ix_goa_holiday_properties_title_trgm
        ON goa_holiday_properties USING GIN (title gin_trgm_ops);
    """)

    # ── dubai_properties ──
    op.create_table(
        "dubai_properties",
        *_property_columns(),
        sa.Column("slug", sa.String(255), nullable=True),
        sa.Column("property_type", sa.String(50), nullable=True),
        sa.Column("emirate", sa.String(50), nullable=True),
        sa.Column("community", sa.String(255), nullable=True),
        sa.Column("developer", sa.String(255), nullable=True),
        sa.Column("building_name", sa.String(255), nullable=True),
    )
    _property_indexes("dubai_properties")
    op.create_index("ix_dubai_properties_slug", "dubai_properties", ["slug"])

    # ── property_slug_redirects ──
    op.create_table(
        "property_slug_redirects",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("old_slug", sa.String(255), nullable=False),
        sa.Column("new_slug", sa.String(255), nullable=False),
        sa.Column("location", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("old_slug", "location", name="uq_property_slug_redirects_old_slug_location"),
    )
    op.create_index("ix_property_slug_redirects_old_slug", "property_slug_redirects", ["old_slug"])


def downgrade() -> None:
    op.drop_table("property_slug_redirects")
    op.drop_table("dubai_properties")
    op.execute("DROP INDEX IF EXISTS ix_goa_holiday_properties_title_trgm;")
    op.drop_table("goa_holiday_properties")
    op.drop_table("hyderabad_properties")

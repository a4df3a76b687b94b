"""create campaigns, campaign_tiers, point_entries and point_entry_history

Revision ID: 4d1e7a2b9c30
Revises:
Create Date: 2026-10-19 10:12:31.418220

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4d1e7a2b9c30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if not inspector.has_table("campaigns"):
        op.create_table(
            "campaigns",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("rules", sa.Text(), nullable=True),
            sa.Column("regulation", sa.Text(), nullable=True),
            sa.Column("banner", sa.String(length=255), nullable=True),
            sa.Column("start_date", sa.Date(), nullable=False),
            sa.Column("end_date", sa.Date(), nullable=True),
            sa.Column("status", sa.String(length=20), server_default="ACTIVE", nullable=False),
            sa.Column("target_points", sa.Integer(), nullable=True),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index("ix_campaigns_status_period", "campaigns", ["status", "start_date", "end_date"])

    if not inspector.has_table("campaign_tiers"):
        op.create_table(
            "campaign_tiers",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
            sa.Column(
                "campaign_id",
                sa.Integer(),
                sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column("min_points", sa.Integer(), nullable=False),
            sa.Column("max_points", sa.Integer(), nullable=True),
            sa.Column("companion_allowed", sa.Boolean(), server_default=sa.false(), nullable=False),
            sa.Column("description", sa.String(length=255), nullable=True),
            sa.Column("prize_value", sa.Numeric(12, 2), nullable=True),
            sa.CheckConstraint("min_points >= 0", name="ck_campaign_tiers_min_points_non_negative"),
            sa.CheckConstraint(
                "max_points IS NULL OR max_points >= min_points",
                name="ck_campaign_tiers_max_gte_min",
            ),
        )
        op.create_index("ix_campaign_tiers_campaign_min", "campaign_tiers", ["campaign_id", "min_points"])

    if not inspector.has_table("point_entries"):
        op.create_table(
            "point_entries",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
            sa.Column("professional_id", sa.Integer(), nullable=False),
            sa.Column("store_id", sa.Integer(), nullable=True),
            sa.Column("registrant_id", sa.Integer(), nullable=False),
            sa.Column("client_id", sa.Integer(), nullable=True),
            sa.Column("value", sa.Numeric(12, 2), nullable=False),
            sa.Column("quote", sa.String(length=255), nullable=True),
            sa.Column("reference_date", sa.Date(), nullable=False),
            sa.Column("status", sa.String(length=20), server_default="ACTIVE", nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
            sa.Column("updated_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )
        op.create_index(
            "ix_point_entries_professional_reference",
            "point_entries",
            ["professional_id", "reference_date"],
        )

    if not inspector.has_table("point_entry_history"):
        op.create_table(
            "point_entry_history",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
            sa.Column("point_entry_id", sa.Integer(), sa.ForeignKey("point_entries.id"), nullable=False),
            sa.Column("changed_by", sa.Integer(), nullable=False),
            sa.Column("previous_value", sa.Numeric(12, 2), nullable=True),
            sa.Column("new_value", sa.Numeric(12, 2), nullable=True),
            sa.Column("previous_reference_date", sa.Date(), nullable=True),
            sa.Column("new_reference_date", sa.Date(), nullable=True),
            sa.Column("changed_at", sa.TIMESTAMP(), server_default=sa.text("now()"), nullable=True),
        )


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    if inspector.has_table("point_entry_history"):
        op.drop_table("point_entry_history")

    if inspector.has_table("point_entries"):
        existing_indexes = {ix["name"] for ix in inspector.get_indexes("point_entries")}
        if "ix_point_entries_professional_reference" in existing_indexes:
            op.drop_index("ix_point_entries_professional_reference", table_name="point_entries")
        op.drop_table("point_entries")

    if inspector.has_table("campaign_tiers"):
        existing_indexes = {ix["name"] for ix in inspector.get_indexes("campaign_tiers")}
        if "ix_campaign_tiers_campaign_min" in existing_indexes:
            op.drop_index("ix_campaign_tiers_campaign_min", table_name="campaign_tiers")
        op.drop_table("campaign_tiers")

    if inspector.has_table("campaigns"):
        existing_indexes = {ix["name"] for ix in inspector.get_indexes("campaigns")}
        if "ix_campaigns_status_period" in existing_indexes:
            op.drop_index("ix_campaigns_status_period", table_name="campaigns")
        op.drop_table("campaigns")

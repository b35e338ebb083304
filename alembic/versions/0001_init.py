"""init users, prefs, wear events

Revision ID: 0001_init
Revises:
Create Date: 2026-10-05
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("email", sa.Text(), nullable=True, unique=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    )

    op.create_table(
        "prefs",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("no_repeat_days", sa.Integer(), nullable=False, server_default=sa.text("7")),
        sa.Column("no_repeat_mode", sa.Text(), nullable=False, server_default=sa.text("'item'")),
        sa.Column("colour_prefs", postgresql.ARRAY(sa.Text()), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("exclusions", postgresql.ARRAY(sa.Text()), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("comfort_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("no_repeat_days >= 0 AND no_repeat_days <= 180", name="ck_prefs_no_repeat_days_range"),
        sa.CheckConstraint("no_repeat_mode IN ('item', 'outfit')", name="ck_prefs_no_repeat_mode"),
    )

    # Wear events: outfit_id has no FK, outfits may be ephemeral AI suggestions
    op.create_table(
        "wear_events",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("occurred_on", sa.Date(), nullable=False),
        sa.Column("outfit_id", sa.Text(), nullable=True),
        sa.Column("source", sa.Text(), nullable=False),
        sa.Column("item_ids", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("context", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("worn_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "source IN ('ai_recommendation', 'saved_outfit', 'manual_outfit', 'imported')",
            name="ck_wear_events_source",
        ),
        sa.CheckConstraint("cardinality(item_ids) > 0", name="ck_wear_events_item_ids_not_empty"),
        sa.UniqueConstraint("user_id", "outfit_id", "occurred_on", name="uq_wear_events_user_outfit_date"),
    )
    op.create_index(
        "ix_wear_events_user_occurred_on",
        "wear_events",
        ["user_id", sa.text("occurred_on DESC")],
    )


def downgrade() -> None:
    op.drop_index("ix_wear_events_user_occurred_on", table_name="wear_events")
    op.drop_table("wear_events")
    op.drop_table("prefs")
    op.drop_table("user")

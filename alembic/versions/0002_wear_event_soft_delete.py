"""wear event soft delete

Revision ID: 0002_wear_event_soft_delete
Revises: 0001_init
Create Date: 2026-10-12
"""
from alembic import op
import sqlalchemy as sa

revision = "0002_wear_event_soft_delete"
down_revision = "0001_init"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("wear_events", sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True))

    # Retracted logs must not block re-logging the same outfit that day
    op.drop_constraint("uq_wear_events_user_outfit_date", "wear_events", type_="unique")
    op.create_index(
        "ix_wear_events_user_outfit_date_active",
        "wear_events",
        ["user_id", "outfit_id", "occurred_on"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL AND outfit_id IS NOT NULL"),
    )


def downgrade() -> None:
    op.drop_index("ix_wear_events_user_outfit_date_active", table_name="wear_events")
    op.create_unique_constraint(
        "uq_wear_events_user_outfit_date",
        "wear_events",
        ["user_id", "outfit_id", "occurred_on"],
    )
    op.drop_column("wear_events", "deleted_at")

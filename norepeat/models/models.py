from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, ForeignKey, DateTime, Text, CheckConstraint, Index
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.sql import func
import uuid
from datetime import datetime, date
from norepeat.core.db import Base
import sqlalchemy as sa


class User(Base):
    __tablename__ = "user"
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email: Mapped[str | None] = mapped_column(Text, unique=True, nullable=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class Prefs(Base):
    __tablename__ = "prefs"
    __table_args__ = (
        CheckConstraint("no_repeat_days >= 0 AND no_repeat_days <= 180", name="ck_prefs_no_repeat_days_range"),
        CheckConstraint("no_repeat_mode IN ('item', 'outfit')", name="ck_prefs_no_repeat_mode"),
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True
    )
    no_repeat_days: Mapped[int] = mapped_column(Integer, nullable=False, default=7, server_default=sa.text("7"))
    no_repeat_mode: Mapped[str] = mapped_column(Text, nullable=False, default="item", server_default=sa.text("'item'"))
    colour_prefs: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list, server_default=sa.text("'{}'"))
    exclusions: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list, server_default=sa.text("'{}'"))
    comfort_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class WearEventRecord(Base):
    __tablename__ = "wear_events"
    __table_args__ = (
        CheckConstraint(
            "source IN ('ai_recommendation', 'saved_outfit', 'manual_outfit', 'imported')",
            name="ck_wear_events_source",
        ),
        CheckConstraint("cardinality(item_ids) > 0", name="ck_wear_events_item_ids_not_empty"),
        Index("ix_wear_events_user_occurred_on", "user_id", sa.text("occurred_on DESC")),
        Index(
            "ix_wear_events_user_outfit_date_active",
            "user_id",
            "outfit_id",
            "occurred_on",
            unique=True,
            postgresql_where=sa.text("deleted_at IS NULL AND outfit_id IS NOT NULL"),
        ),
    )
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    occurred_on: Mapped[date] = mapped_column(sa.Date(), nullable=False)
    outfit_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    source: Mapped[str] = mapped_column(Text, nullable=False)
    # Snapshot of the items worn; decoupled from any later outfit edits.
    item_ids: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False)
    context: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    worn_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

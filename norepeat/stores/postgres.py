import uuid
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from norepeat.core.errors import InvalidReference
from norepeat.models.models import Prefs, User, WearEventRecord
from norepeat.rules.types import Preference, WearEvent


def _as_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _to_event(row: WearEventRecord) -> WearEvent:
    return WearEvent(
        id=str(row.id),
        user_id=str(row.user_id),
        occurred_on=row.occurred_on,
        item_ids=tuple(row.item_ids or ()),
        outfit_id=row.outfit_id,
        source=row.source,
        context=row.context,
        notes=row.notes,
        worn_at=row.worn_at,
        deleted_at=row.deleted_at,
    )


class PostgresPreferenceStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def canonical_user_id(self, user_id: str) -> str:
        uid = _as_uuid(user_id)
        return str(uid) if uid is not None else str(user_id)

    async def user_exists(self, user_id: str) -> bool:
        uid = _as_uuid(user_id)
        if uid is None:
            return False
        return (await self.session.get(User, uid)) is not None

    async def get_preference(self, user_id: str) -> Optional[Preference]:
        uid = _as_uuid(user_id)
        if uid is None:
            return None
        res = await self.session.execute(
            select(Prefs.no_repeat_days, Prefs.no_repeat_mode).where(Prefs.user_id == uid)
        )
        row = res.one_or_none()
        if row is None:
            return None
        # raw values; the resolver normalizes them
        return Preference(user_id=str(uid), no_repeat_days=row.no_repeat_days, no_repeat_mode=row.no_repeat_mode)

    async def save_preference(self, preference: Preference) -> Preference:
        uid = _as_uuid(preference.user_id)
        if uid is None:
            raise InvalidReference("user", preference.user_id)
        mode = getattr(preference.no_repeat_mode, "value", preference.no_repeat_mode)
        stmt = (
            pg_insert(Prefs)
            .values(user_id=uid, no_repeat_days=preference.no_repeat_days, no_repeat_mode=mode)
            .on_conflict_do_update(
                index_elements=[Prefs.user_id],
                set_={
                    "no_repeat_days": preference.no_repeat_days,
                    "no_repeat_mode": mode,
                    "updated_at": func.now(),
                },
            )
        )
        try:
            await self.session.execute(stmt)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise InvalidReference("user", preference.user_id) from e
        return replace(preference, is_default=False)


class PostgresWearHistoryStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_wear_events(self, user_id: str, since: date) -> List[WearEvent]:
        uid = _as_uuid(user_id)
        if uid is None:
            return []
        res = await self.session.execute(
            select(WearEventRecord)
            .where(
                WearEventRecord.user_id == uid,
                WearEventRecord.deleted_at.is_(None),
                WearEventRecord.occurred_on >= since,
            )
            .order_by(WearEventRecord.occurred_on.desc())
        )
        return [_to_event(r) for r in res.scalars().all()]

    async def list_recent(self, user_id: str, limit: int) -> List[WearEvent]:
        uid = _as_uuid(user_id)
        if uid is None:
            return []
        res = await self.session.execute(
            select(WearEventRecord)
            .where(WearEventRecord.user_id == uid, WearEventRecord.deleted_at.is_(None))
            .order_by(WearEventRecord.occurred_on.desc(), WearEventRecord.worn_at.desc())
            .limit(limit)
        )
        return [_to_event(r) for r in res.scalars().all()]

    async def _existing(self, uid: uuid.UUID, outfit_id: str, occurred_on: date) -> Optional[WearEventRecord]:
        res = await self.session.execute(
            select(WearEventRecord).where(
                WearEventRecord.user_id == uid,
                WearEventRecord.outfit_id == outfit_id,
                WearEventRecord.occurred_on == occurred_on,
                WearEventRecord.deleted_at.is_(None),
            )
        )
        return res.scalar_one_or_none()

    async def append(self, event: WearEvent) -> WearEvent:
        uid = _as_uuid(event.user_id)
        if uid is None:
            raise InvalidReference("user", event.user_id)
        # idempotent per outfit per day
        if event.outfit_id:
            existing = await self._existing(uid, event.outfit_id, event.occurred_on)
            if existing:
                return _to_event(existing)
        row = WearEventRecord(
            id=_as_uuid(event.id) or uuid.uuid4(),
            user_id=uid,
            occurred_on=event.occurred_on,
            outfit_id=event.outfit_id,
            source=event.source.value,
            item_ids=list(event.item_ids),
            context=event.context,
            notes=event.notes,
            worn_at=event.worn_at or datetime.now(timezone.utc),
            deleted_at=None,
        )
        self.session.add(row)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            # race: another device logged the same outfit today
            if event.outfit_id:
                existing = await self._existing(uid, event.outfit_id, event.occurred_on)
                if existing:
                    return _to_event(existing)
            raise
        await self.session.commit()
        return _to_event(row)

    async def retract(self, user_id: str, event_id: str) -> WearEvent:
        uid = _as_uuid(user_id)
        eid = _as_uuid(event_id)
        if uid is None or eid is None:
            raise InvalidReference("wear_event", event_id)
        res = await self.session.execute(
            select(WearEventRecord).where(WearEventRecord.id == eid, WearEventRecord.user_id == uid)
        )
        row = res.scalar_one_or_none()
        if row is None:
            raise InvalidReference("wear_event", event_id)
        if row.deleted_at is None:
            row.deleted_at = datetime.now(timezone.utc)
            await self.session.commit()
        return _to_event(row)

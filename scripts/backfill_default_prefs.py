from __future__ import annotations

import asyncio

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from norepeat.core.config import settings
from norepeat.models.models import Prefs, User


async def _run() -> None:
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    Session = async_sessionmaker(engine, expire_on_commit=False)
    async with Session() as session:
        res = await session.execute(
            select(User.id).where(~select(Prefs.user_id).where(Prefs.user_id == User.id).exists())
        )
        user_ids = [row[0] for row in res.all()]
        for uid in user_ids:
            await session.execute(
                pg_insert(Prefs)
                .values(
                    user_id=uid,
                    no_repeat_days=settings.NO_REPEAT_DEFAULT_DAYS,
                    no_repeat_mode=settings.NO_REPEAT_DEFAULT_MODE,
                )
                .on_conflict_do_nothing(index_elements=[Prefs.user_id])
            )
        await session.commit()
        print(f"Backfilled default prefs: {len(user_ids)}")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(_run())

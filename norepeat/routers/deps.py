from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from norepeat.core.db import get_session
from norepeat.services.norepeat import NoRepeatService
from norepeat.stores import PostgresPreferenceStore, PostgresWearHistoryStore


def get_no_repeat_service(session: AsyncSession = Depends(get_session)) -> NoRepeatService:
    return NoRepeatService(PostgresPreferenceStore(session), PostgresWearHistoryStore(session))


def parse_date_param(value: Optional[str], detail: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=detail) from e

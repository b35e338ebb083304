import logging
from typing import Optional

from norepeat.core.config import settings
from norepeat.core.errors import InvalidReference
from norepeat.rules.policy import coerce_preference, validate_days, validate_mode
from norepeat.rules.types import NoRepeatMode, Preference
from norepeat.stores.base import PreferenceStore

logger = logging.getLogger("norepeat.prefs")


def default_preference(user_id: str) -> Preference:
    return Preference(
        user_id=user_id,
        no_repeat_days=settings.NO_REPEAT_DEFAULT_DAYS,
        no_repeat_mode=NoRepeatMode(settings.NO_REPEAT_DEFAULT_MODE),
        is_default=True,
    )


class PreferenceResolver:
    """Resolves a user's no-repeat policy; a missing row yields the defaults."""

    def __init__(self, store: PreferenceStore):
        self.store = store

    async def resolve(self, user_id: str) -> Preference:
        # the preference carries the id history rows are keyed by
        user_id = self.store.canonical_user_id(user_id)
        stored = await self.store.get_preference(user_id)
        if stored is None:
            if not await self.store.user_exists(user_id):
                raise InvalidReference("user", user_id)
            logger.debug("norepeat: no prefs row, using defaults user_id=%s", user_id)
            return default_preference(user_id)
        return coerce_preference(stored)

    async def update(
        self,
        user_id: str,
        *,
        days: Optional[int] = None,
        mode: Optional[str] = None,
    ) -> Preference:
        new_days = validate_days(days) if days is not None else None
        new_mode = validate_mode(mode) if mode is not None else None
        current = await self.resolve(user_id)
        updated = Preference(
            user_id=current.user_id,
            no_repeat_days=current.no_repeat_days if new_days is None else new_days,
            no_repeat_mode=current.no_repeat_mode if new_mode is None else new_mode,
        )
        return await self.store.save_preference(updated)

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple
from zoneinfo import ZoneInfo

from norepeat.core.config import settings
from norepeat.core.errors import InvalidReference, InvalidWearEvent
from norepeat.rules import EligibilityEngine, filter_candidates
from norepeat.rules.types import (
    CandidateOutfit,
    EligibilityReport,
    FilterResult,
    Preference,
    WearEvent,
    WearSource,
)
from norepeat.stores.base import PreferenceStore, WearHistoryStore
from .prefs import PreferenceResolver

logger = logging.getLogger("norepeat.service")


def today_local() -> date:
    return datetime.now(ZoneInfo(settings.NO_REPEAT_TIMEZONE)).date()


class NoRepeatService:
    """
    Async entry point: resolves the policy, fetches the bounded history window
    and hands both to the pure rules.

    Reads are best-effort: a wear logged concurrently on another device may
    be missing from the snapshot a query sees. No locking is attempted.
    """

    def __init__(self, prefs_store: PreferenceStore, history_store: WearHistoryStore) -> None:
        self.prefs_store = prefs_store
        self.history_store = history_store
        self.resolver = PreferenceResolver(prefs_store)

    def _user(self, user_id: str) -> str:
        return self.prefs_store.canonical_user_id(user_id)

    async def _snapshot(self, user_id: str, today: date) -> Tuple[Preference, List[WearEvent]]:
        pref = await self.resolver.resolve(user_id)
        if not pref.enabled:
            return pref, []
        # first day inside (cutoff, today]
        since = today - timedelta(days=pref.no_repeat_days - 1)
        events = await self.history_store.list_wear_events(pref.user_id, since)
        return pref, events

    async def get_preference(self, user_id: str) -> Preference:
        return await self.resolver.resolve(user_id)

    async def update_preference(
        self, user_id: str, *, days: Optional[int] = None, mode: Optional[str] = None
    ) -> Preference:
        pref = await self.resolver.update(user_id, days=days, mode=mode)
        logger.info(
            "norepeat: prefs updated user_id=%s days=%s mode=%s",
            user_id, pref.no_repeat_days, pref.no_repeat_mode.value,
        )
        return pref

    async def is_eligible(self, user_id: str, candidate: str, today: Optional[date] = None) -> bool:
        today = today or today_local()
        pref, events = await self._snapshot(user_id, today)
        return EligibilityEngine(pref, events).is_eligible(candidate, today)

    async def ineligible(
        self, user_id: str, candidates: Iterable[str], today: Optional[date] = None
    ) -> EligibilityReport:
        today = today or today_local()
        pref, events = await self._snapshot(user_id, today)
        engine = EligibilityEngine(pref, events)
        ordered = list(dict.fromkeys(str(c) for c in candidates))
        blocked = engine.compute_ineligible_set(ordered, today)
        return EligibilityReport(
            preference=pref,
            today=today,
            cutoff=engine.cutoff(today),
            eligible=[c for c in ordered if c not in blocked],
            ineligible=[c for c in ordered if c in blocked],
        )

    async def filter(
        self,
        user_id: str,
        candidates: Sequence[CandidateOutfit],
        today: Optional[date] = None,
        strict_min_count: Optional[int] = None,
    ) -> FilterResult:
        today = today or today_local()
        pref, events = await self._snapshot(user_id, today)
        result = filter_candidates(candidates, pref, events, today, strict_min_count=strict_min_count)
        logger.info(
            "norepeat: filter user_id=%s mode=%s days=%s candidates=%d eligible=%d excluded=%d fallbacks=%d",
            user_id, pref.no_repeat_mode.value, pref.no_repeat_days,
            len(candidates), len(result.eligible), len(result.excluded), len(result.fallbacks),
        )
        return result

    async def log_wear(
        self,
        user_id: str,
        item_ids: Sequence[str],
        *,
        occurred_on: Optional[date] = None,
        outfit_id: Optional[str] = None,
        source: WearSource = WearSource.MANUAL_OUTFIT,
        context: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> WearEvent:
        user_id = self._user(user_id)
        if not await self.prefs_store.user_exists(user_id):
            raise InvalidReference("user", user_id)
        occurred_on = occurred_on or today_local()
        try:
            event = WearEvent(
                id="",
                user_id=user_id,
                occurred_on=occurred_on,
                item_ids=tuple(item_ids),
                outfit_id=outfit_id,
                source=source,
                context=context,
                notes=notes,
            )
        except ValueError as e:
            raise InvalidWearEvent(str(e)) from e
        stored = await self.history_store.append(event)
        logger.info(
            "norepeat: wear logged user_id=%s event_id=%s occurred_on=%s items=%d source=%s",
            user_id, stored.id, stored.occurred_on, len(stored.item_ids), stored.source.value,
        )
        return stored

    async def retract_wear(self, user_id: str, event_id: str) -> WearEvent:
        user_id = self._user(user_id)
        event = await self.history_store.retract(user_id, event_id)
        logger.info("norepeat: wear retracted user_id=%s event_id=%s", user_id, event_id)
        return event

    async def history(self, user_id: str, limit: Optional[int] = None) -> List[WearEvent]:
        user_id = self._user(user_id)
        if not await self.prefs_store.user_exists(user_id):
            raise InvalidReference("user", user_id)
        limit = min(limit or settings.WEAR_HISTORY_LIMIT_DEFAULT, settings.WEAR_HISTORY_LIMIT_MAX)
        return await self.history_store.list_recent(user_id, limit)

from datetime import date, timedelta
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .policy import coerce_preference
from .types import NoRepeatMode, Preference, WearEvent


def _item_keys(event: WearEvent) -> Tuple[str, ...]:
    return event.item_ids


def _outfit_keys(event: WearEvent) -> Tuple[str, ...]:
    return (event.outfit_id,) if event.outfit_id else ()


class EligibilityEngine:
    """
    Pure no-repeat verdicts over a resolved preference and a history snapshot.

    For a query on ``today`` with ``no_repeat_days = N`` the cooldown window is
    ``(today - N, today]``: a wear dated exactly ``today - N`` no longer blocks,
    a wear dated ``today - N + 1`` through ``today`` does.

    - item mode: the unit of cooldown is a single item id
    - outfit mode: the unit is the outfit id; items are never blocked

    History may be passed in any order. Retracted events, events owned by
    another user and events dated after ``today`` (planned wears) are ignored.
    Impossible policy values are clamped to the nearest valid bound and
    logged rather than raised.
    """

    def __init__(self, preference: Preference, history: Iterable[WearEvent]):
        self.preference = coerce_preference(preference)
        self.mode = self.preference.no_repeat_mode
        self.history: List[WearEvent] = [
            ev for ev in history
            if not ev.is_retracted and ev.user_id == self.preference.user_id
        ]

    @property
    def days(self) -> int:
        return self.preference.no_repeat_days

    def cutoff(self, today: date) -> date:
        return today - timedelta(days=self.days)

    def _window(self, today: date) -> Iterator[WearEvent]:
        cutoff = self.cutoff(today)
        for ev in self.history:
            if cutoff < ev.occurred_on <= today:
                yield ev

    def _keys(self) -> Callable[[WearEvent], Tuple[str, ...]]:
        return _item_keys if self.mode == NoRepeatMode.ITEM else _outfit_keys

    def _last_worn_by(self, today: date, keys: Callable[[WearEvent], Tuple[str, ...]]) -> Dict[str, WearEvent]:
        last: Dict[str, WearEvent] = {}
        if not self.preference.enabled:
            return last
        for ev in self._window(today):
            for key in keys(ev):
                prev = last.get(key)
                if prev is None or ev.occurred_on > prev.occurred_on:
                    last[key] = ev
        return last

    def is_eligible(self, candidate: str, today: date) -> bool:
        if not self.preference.enabled:
            return True
        candidate = str(candidate)
        keys = self._keys()
        return not any(candidate in keys(ev) for ev in self._window(today))

    def blocked(self, today: date) -> Dict[str, WearEvent]:
        """Every cooling-down id (item or outfit, per mode) mapped to its most recent blocking wear."""
        return self._last_worn_by(today, self._keys())

    def compute_ineligible_set(self, candidates: Iterable[str], today: date) -> Set[str]:
        wanted = {str(c) for c in candidates}
        if not wanted or not self.preference.enabled:
            return set()
        return wanted & self.blocked(today).keys()

    def last_worn(self, candidate: str, today: date) -> Optional[WearEvent]:
        return self.blocked(today).get(str(candidate))

    def recent_items(self, today: date) -> Dict[str, WearEvent]:
        # Item-level view regardless of mode; only informs fallback ranking.
        return self._last_worn_by(today, _item_keys)

import uuid
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional

from norepeat.core.errors import InvalidReference
from norepeat.rules.types import Preference, WearEvent


class InMemoryPreferenceStore:
    def __init__(self, users: Iterable[str] = ()) -> None:
        self._users = {str(u) for u in users}
        self._prefs: Dict[str, Preference] = {}

    def add_user(self, user_id: str) -> None:
        self._users.add(str(user_id))

    def canonical_user_id(self, user_id: str) -> str:
        return str(user_id)

    async def user_exists(self, user_id: str) -> bool:
        return str(user_id) in self._users

    async def get_preference(self, user_id: str) -> Optional[Preference]:
        return self._prefs.get(str(user_id))

    async def save_preference(self, preference: Preference) -> Preference:
        if preference.user_id not in self._users:
            raise InvalidReference("user", preference.user_id)
        stored = replace(preference, is_default=False)
        self._prefs[preference.user_id] = stored
        return stored


class InMemoryWearHistoryStore:
    def __init__(self, events: Iterable[WearEvent] = ()) -> None:
        self._events: Dict[str, WearEvent] = {ev.id: ev for ev in events}

    def _active(self, user_id: str) -> List[WearEvent]:
        return [ev for ev in self._events.values() if ev.user_id == user_id and not ev.is_retracted]

    async def list_wear_events(self, user_id: str, since: date) -> List[WearEvent]:
        return [ev for ev in self._active(str(user_id)) if ev.occurred_on >= since]

    async def list_recent(self, user_id: str, limit: int) -> List[WearEvent]:
        events = sorted(
            self._active(str(user_id)),
            key=lambda ev: (ev.occurred_on, ev.worn_at or datetime.min.replace(tzinfo=timezone.utc)),
            reverse=True,
        )
        return events[:limit]

    async def append(self, event: WearEvent) -> WearEvent:
        # idempotent per outfit per day
        if event.outfit_id:
            for ev in self._active(event.user_id):
                if ev.outfit_id == event.outfit_id and ev.occurred_on == event.occurred_on:
                    return ev
        stored = replace(
            event,
            id=event.id or str(uuid.uuid4()),
            worn_at=event.worn_at or datetime.now(timezone.utc),
        )
        self._events[stored.id] = stored
        return stored

    async def retract(self, user_id: str, event_id: str) -> WearEvent:
        ev = self._events.get(str(event_id))
        if ev is None or ev.user_id != str(user_id):
            raise InvalidReference("wear_event", event_id)
        if ev.is_retracted:
            return ev
        ev = replace(ev, deleted_at=datetime.now(timezone.utc))
        self._events[ev.id] = ev
        return ev

from datetime import date
from typing import List, Optional, Protocol

from norepeat.rules.types import Preference, WearEvent


class PreferenceStore(Protocol):
    def canonical_user_id(self, user_id: str) -> str:
        """The form of ``user_id`` that wear events and preferences are stored under."""
        ...

    async def user_exists(self, user_id: str) -> bool:
        ...

    async def get_preference(self, user_id: str) -> Optional[Preference]:
        ...

    async def save_preference(self, preference: Preference) -> Preference:
        ...


class WearHistoryStore(Protocol):
    async def list_wear_events(self, user_id: str, since: date) -> List[WearEvent]:
        """Non-retracted events with ``occurred_on >= since``, any order."""
        ...

    async def list_recent(self, user_id: str, limit: int) -> List[WearEvent]:
        ...

    async def append(self, event: WearEvent) -> WearEvent:
        ...

    async def retract(self, user_id: str, event_id: str) -> WearEvent:
        ...

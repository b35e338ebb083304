from norepeat.stores.base import PreferenceStore, WearHistoryStore
from norepeat.stores.in_memory import InMemoryPreferenceStore, InMemoryWearHistoryStore
from norepeat.stores.postgres import PostgresPreferenceStore, PostgresWearHistoryStore

__all__ = [
    "PreferenceStore",
    "WearHistoryStore",
    "InMemoryPreferenceStore",
    "InMemoryWearHistoryStore",
    "PostgresPreferenceStore",
    "PostgresWearHistoryStore",
]

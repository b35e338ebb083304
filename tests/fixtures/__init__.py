from .wear_fixtures import (
    USER_ID,
    OTHER_USER_ID,
    TODAY,
    days_ago,
    wear,
    pref,
)

__all__ = [
    "USER_ID",
    "OTHER_USER_ID",
    "TODAY",
    "days_ago",
    "wear",
    "pref",
]

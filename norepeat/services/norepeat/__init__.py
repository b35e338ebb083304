from norepeat.rules.policy import coerce_preference
from .prefs import PreferenceResolver, default_preference
from .service import NoRepeatService, today_local

__all__ = [
    "NoRepeatService",
    "PreferenceResolver",
    "coerce_preference",
    "default_preference",
    "today_local",
]

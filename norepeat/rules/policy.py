import logging
from dataclasses import replace
from typing import Any

from norepeat.core.config import settings
from norepeat.core.errors import InvalidConfiguration
from .types import NoRepeatMode, Preference

logger = logging.getLogger("norepeat.policy")


def validate_days(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration("no_repeat_days", value, "must be an integer")
    if not settings.NO_REPEAT_MIN_DAYS <= value <= settings.NO_REPEAT_MAX_DAYS:
        raise InvalidConfiguration(
            "no_repeat_days", value, f"must be between {settings.NO_REPEAT_MIN_DAYS} and {settings.NO_REPEAT_MAX_DAYS}"
        )
    return value


def validate_mode(value: Any) -> NoRepeatMode:
    try:
        return NoRepeatMode(value)
    except (ValueError, TypeError):
        raise InvalidConfiguration("no_repeat_mode", value, "must be 'item' or 'outfit'") from None


def coerce_preference(pref: Preference) -> Preference:
    """
    Normalize a preference before it drives any verdict.

    Values the schema should have rejected are clamped to the nearest valid
    bound (or the default when there is none) and logged, so a bad row
    degrades a recommendation instead of failing it. A valid preference is
    returned unchanged.
    """
    days: Any = pref.no_repeat_days
    try:
        days = validate_days(days)
    except InvalidConfiguration as e:
        if isinstance(days, int) and not isinstance(days, bool):
            fixed = max(settings.NO_REPEAT_MIN_DAYS, min(settings.NO_REPEAT_MAX_DAYS, days))
        else:
            fixed = settings.NO_REPEAT_DEFAULT_DAYS
        logger.warning("norepeat: clamped %s to %s user_id=%s", e, fixed, pref.user_id)
        days = fixed

    try:
        mode = validate_mode(pref.no_repeat_mode)
    except InvalidConfiguration as e:
        mode = NoRepeatMode(settings.NO_REPEAT_DEFAULT_MODE)
        logger.warning("norepeat: clamped %s to %s user_id=%s", e, mode.value, pref.user_id)

    if days == pref.no_repeat_days and mode is pref.no_repeat_mode:
        return pref
    return replace(pref, no_repeat_days=days, no_repeat_mode=mode)

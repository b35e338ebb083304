from .adapter import filter_candidates
from .engine import EligibilityEngine
from .policy import coerce_preference, validate_days, validate_mode
from .types import (
    CandidateOutfit,
    EligibilityReport,
    Exclusion,
    FallbackCandidate,
    FilterResult,
    NoRepeatMode,
    Preference,
    WearEvent,
    WearSource,
)

__all__ = [
    "EligibilityEngine",
    "filter_candidates",
    "coerce_preference",
    "validate_days",
    "validate_mode",
    "CandidateOutfit",
    "EligibilityReport",
    "Exclusion",
    "FallbackCandidate",
    "FilterResult",
    "NoRepeatMode",
    "Preference",
    "WearEvent",
    "WearSource",
]

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


class NoRepeatMode(str, Enum):
    ITEM = "item"
    OUTFIT = "outfit"


class WearSource(str, Enum):
    AI_RECOMMENDATION = "ai_recommendation"
    SAVED_OUTFIT = "saved_outfit"
    MANUAL_OUTFIT = "manual_outfit"
    IMPORTED = "imported"


def _dedupe(ids: Iterable[Any]) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for raw in ids:
        if raw is None:
            continue
        val = str(raw).strip()
        if val:
            seen.setdefault(val, None)
    return tuple(seen)


@dataclass(frozen=True)
class WearEvent:
    """A confirmed wear of a set of items, optionally as a named outfit.

    ``item_ids`` is the unit of wear and is never empty. ``deleted_at`` marks a
    retracted log; retracted events never count towards a cooldown.
    """
    id: str
    user_id: str
    occurred_on: date
    item_ids: Tuple[str, ...]
    outfit_id: Optional[str] = None
    source: WearSource = WearSource.MANUAL_OUTFIT
    context: Optional[str] = None
    notes: Optional[str] = None
    worn_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    def __post_init__(self):
        items = _dedupe(self.item_ids)
        if not items:
            raise ValueError("wear event requires at least one item")
        object.__setattr__(self, "item_ids", items)
        object.__setattr__(self, "source", WearSource(self.source))
        if self.outfit_id is not None:
            object.__setattr__(self, "outfit_id", str(self.outfit_id).strip() or None)

    @property
    def is_retracted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class Preference:
    user_id: str
    no_repeat_days: int = 7
    no_repeat_mode: NoRepeatMode = NoRepeatMode.ITEM
    is_default: bool = False  # synthesized, no stored row

    @property
    def enabled(self) -> bool:
        return self.no_repeat_days > 0


@dataclass(frozen=True)
class CandidateOutfit:
    """An outfit proposed by the recommender. ``outfit_id`` is absent for freshly assembled outfits."""
    item_ids: Tuple[str, ...]
    outfit_id: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        object.__setattr__(self, "item_ids", _dedupe(self.item_ids))


@dataclass(frozen=True)
class Exclusion:
    candidate: CandidateOutfit
    reason: str
    blocked_ids: Tuple[str, ...]  # item ids in item mode, the outfit id in outfit mode
    last_worn_on: date


@dataclass(frozen=True)
class FallbackCandidate:
    candidate: CandidateOutfit
    repeated_item_ids: Tuple[str, ...]


@dataclass
class FilterResult:
    preference: Preference
    today: date
    cutoff: date
    eligible: List[CandidateOutfit] = field(default_factory=list)
    excluded: List[Exclusion] = field(default_factory=list)
    fallbacks: List[FallbackCandidate] = field(default_factory=list)


@dataclass
class EligibilityReport:
    preference: Preference
    today: date
    cutoff: date
    eligible: List[str] = field(default_factory=list)
    ineligible: List[str] = field(default_factory=list)

from datetime import date
from typing import Dict, Iterable, Optional, Sequence, Tuple

from norepeat.core.config import settings
from .engine import EligibilityEngine
from .types import (
    CandidateOutfit,
    Exclusion,
    FallbackCandidate,
    FilterResult,
    NoRepeatMode,
    Preference,
    WearEvent,
)


def _plural_days(days: int) -> str:
    return "1 day" if days == 1 else f"{days} days"


def exclusion_reason(mode: NoRepeatMode, hits: Sequence[str], blocked: Dict[str, WearEvent], days: int) -> str:
    kind = "item" if mode == NoRepeatMode.ITEM else "outfit"
    worn = ", ".join(f"{kind} {h} worn on {blocked[h].occurred_on.isoformat()}" for h in hits)
    return f"{worn}, cooldown {_plural_days(days)}"


def _blocking_ids(candidate: CandidateOutfit, mode: NoRepeatMode, blocked: Dict[str, WearEvent]) -> Tuple[str, ...]:
    if mode == NoRepeatMode.ITEM:
        # One recently worn item taints the whole outfit.
        return tuple(i for i in candidate.item_ids if i in blocked)
    if candidate.outfit_id and candidate.outfit_id in blocked:
        return (candidate.outfit_id,)
    return ()


def filter_candidates(
    candidates: Iterable[CandidateOutfit],
    preference: Preference,
    history: Iterable[WearEvent],
    today: date,
    strict_min_count: Optional[int] = None,
) -> FilterResult:
    """
    Partition candidate outfits into eligible and excluded under the no-repeat policy.

    Exclusions carry a readable reason. When fewer than ``strict_min_count``
    candidates survive, every excluded candidate is also returned as a
    fallback, ranked by how many of its items were worn inside the window
    (fewest first, then outfit id). History and preference are never mutated.
    """
    engine = EligibilityEngine(preference, history)
    candidates = list(candidates)
    result = FilterResult(preference=engine.preference, today=today, cutoff=engine.cutoff(today))

    if not engine.preference.enabled:
        result.eligible = candidates
        return result

    blocked = engine.blocked(today)
    for cand in candidates:
        hits = _blocking_ids(cand, engine.mode, blocked)
        if not hits:
            result.eligible.append(cand)
            continue
        result.excluded.append(
            Exclusion(
                candidate=cand,
                reason=exclusion_reason(engine.mode, hits, blocked, engine.days),
                blocked_ids=hits,
                last_worn_on=max(blocked[h].occurred_on for h in hits),
            )
        )

    min_count = settings.NO_REPEAT_STRICT_MIN_COUNT if strict_min_count is None else strict_min_count
    if result.excluded and len(result.eligible) < min_count:
        recent = blocked if engine.mode == NoRepeatMode.ITEM else engine.recent_items(today)
        fallbacks = [
            FallbackCandidate(
                candidate=ex.candidate,
                repeated_item_ids=tuple(i for i in ex.candidate.item_ids if i in recent),
            )
            for ex in result.excluded
        ]
        fallbacks.sort(key=lambda f: (len(f.repeated_item_ids), f.candidate.outfit_id or ""))
        result.fallbacks = fallbacks
    return result

from fastapi import APIRouter, Depends, HTTPException

from norepeat.auth.deps import get_current_user_id
from norepeat.core.errors import InvalidReference
from norepeat.routers.deps import get_no_repeat_service, parse_date_param
from norepeat.rules.types import CandidateOutfit
from norepeat.schemas.recs import (
    CandidateIn,
    EligibilityIn,
    EligibilityOut,
    ExcludedOut,
    FallbackOut,
    FilterIn,
    FilterOut,
)
from norepeat.services.norepeat import NoRepeatService

router = APIRouter(tags=["recommendations"])


def _candidate_out(c: CandidateOutfit) -> CandidateIn:
    return CandidateIn(item_ids=list(c.item_ids), outfit_id=c.outfit_id, payload=c.payload)


@router.post("/no-repeat/eligibility", response_model=EligibilityOut)
async def eligibility(
    payload: EligibilityIn,
    service: NoRepeatService = Depends(get_no_repeat_service),
    user_id: str = Depends(get_current_user_id),
):
    today = parse_date_param(payload.date, "invalid_date")
    try:
        report = await service.ineligible(user_id, payload.candidates, today)
    except InvalidReference as e:
        raise HTTPException(status_code=404, detail="user_not_found") from e
    return EligibilityOut(
        mode=report.preference.no_repeat_mode.value,
        days=report.preference.no_repeat_days,
        today=report.today.isoformat(),
        cutoff=report.cutoff.isoformat(),
        eligible=report.eligible,
        ineligible=report.ineligible,
    )


@router.post("/recommendations/filter", response_model=FilterOut)
async def filter_recommendations(
    payload: FilterIn,
    service: NoRepeatService = Depends(get_no_repeat_service),
    user_id: str = Depends(get_current_user_id),
):
    today = parse_date_param(payload.date, "invalid_date")
    candidates = [
        CandidateOutfit(item_ids=tuple(c.item_ids), outfit_id=c.outfit_id, payload=c.payload)
        for c in payload.candidates
    ]
    try:
        result = await service.filter(user_id, candidates, today, strict_min_count=payload.strict_min_count)
    except InvalidReference as e:
        raise HTTPException(status_code=404, detail="user_not_found") from e
    return FilterOut(
        mode=result.preference.no_repeat_mode.value,
        days=result.preference.no_repeat_days,
        today=result.today.isoformat(),
        cutoff=result.cutoff.isoformat(),
        eligible=[_candidate_out(c) for c in result.eligible],
        excluded=[
            ExcludedOut(
                candidate=_candidate_out(ex.candidate),
                reason=ex.reason,
                blocked_ids=list(ex.blocked_ids),
                last_worn_on=ex.last_worn_on.isoformat(),
            )
            for ex in result.excluded
        ],
        fallbacks=[
            FallbackOut(candidate=_candidate_out(f.candidate), repeated_item_ids=list(f.repeated_item_ids))
            for f in result.fallbacks
        ],
    )

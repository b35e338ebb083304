from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from norepeat.auth.deps import get_current_user_id
from norepeat.core.errors import InvalidReference, InvalidWearEvent
from norepeat.routers.deps import get_no_repeat_service, parse_date_param
from norepeat.rules.types import WearEvent, WearSource
from norepeat.schemas.wear import WearEventDeleteIn, WearEventIn, WearEventOut
from norepeat.services.norepeat import NoRepeatService

router = APIRouter(prefix="/wear", tags=["wear"])


def _event_out(ev: WearEvent) -> WearEventOut:
    return WearEventOut(
        id=ev.id,
        occurred_on=ev.occurred_on.isoformat(),
        item_ids=list(ev.item_ids),
        outfit_id=ev.outfit_id,
        source=ev.source.value,
        context=ev.context,
        notes=ev.notes,
        worn_at=str(ev.worn_at) if ev.worn_at else None,
    )


@router.post("", response_model=WearEventOut)
async def log_wear(
    payload: WearEventIn,
    service: NoRepeatService = Depends(get_no_repeat_service),
    user_id: str = Depends(get_current_user_id),
):
    """
    Log a wear. Idempotent per outfit per day: logging the same outfit twice on one date returns the existing event.
    """
    occurred_on = parse_date_param(payload.occurred_on, "invalid_occurred_on")
    try:
        ev = await service.log_wear(
            user_id,
            payload.item_ids,
            occurred_on=occurred_on,
            outfit_id=payload.outfit_id,
            source=WearSource(payload.source),
            context=payload.context,
            notes=payload.notes,
        )
    except InvalidWearEvent as e:
        # item ids that were all blank
        raise HTTPException(status_code=422, detail="item_ids_required") from e
    except InvalidReference as e:
        raise HTTPException(status_code=404, detail="user_not_found") from e
    return _event_out(ev)


@router.patch("/{event_id}", status_code=204)
async def retract_wear(
    event_id: str,
    payload: WearEventDeleteIn,
    service: NoRepeatService = Depends(get_no_repeat_service),
    user_id: str = Depends(get_current_user_id),
):
    if payload.deleted is not True:
        raise HTTPException(status_code=400, detail="invalid_delete_request")
    try:
        await service.retract_wear(user_id, event_id)
    except InvalidReference as e:
        raise HTTPException(status_code=404, detail="wear_event_not_found") from e
    return None


@router.get("/history", response_model=List[WearEventOut])
async def wear_history(
    limit: Optional[int] = Query(None, ge=1),
    service: NoRepeatService = Depends(get_no_repeat_service),
    user_id: str = Depends(get_current_user_id),
):
    try:
        events = await service.history(user_id, limit)
    except InvalidReference as e:
        raise HTTPException(status_code=404, detail="user_not_found") from e
    return [_event_out(ev) for ev in events]

import logging

from fastapi import APIRouter, Depends, HTTPException

from norepeat.auth.deps import get_current_user_id
from norepeat.core.errors import InvalidConfiguration, InvalidReference
from norepeat.routers.deps import get_no_repeat_service
from norepeat.rules.types import Preference
from norepeat.schemas.prefs import NoRepeatPrefsOut, NoRepeatPrefsUpdateIn
from norepeat.services.norepeat import NoRepeatService

router = APIRouter(prefix="/prefs", tags=["prefs"])
logger = logging.getLogger("uvicorn.error")


def _prefs_out(pref: Preference) -> NoRepeatPrefsOut:
    return NoRepeatPrefsOut(
        no_repeat_days=pref.no_repeat_days,
        no_repeat_mode=pref.no_repeat_mode.value,
        is_default=pref.is_default,
    )


@router.get("/no-repeat", response_model=NoRepeatPrefsOut)
async def get_no_repeat_prefs(
    service: NoRepeatService = Depends(get_no_repeat_service),
    user_id: str = Depends(get_current_user_id),
):
    try:
        pref = await service.get_preference(user_id)
    except InvalidReference as e:
        raise HTTPException(status_code=404, detail="user_not_found") from e
    return _prefs_out(pref)


@router.put("/no-repeat", response_model=NoRepeatPrefsOut)
async def update_no_repeat_prefs(
    payload: NoRepeatPrefsUpdateIn,
    service: NoRepeatService = Depends(get_no_repeat_service),
    user_id: str = Depends(get_current_user_id),
):
    data = payload.model_dump(exclude_unset=True)
    for field in ("no_repeat_days", "no_repeat_mode"):
        if field in data and data[field] is None:
            raise HTTPException(status_code=400, detail=f"invalid_{field}")
    try:
        pref = await service.update_preference(
            user_id,
            days=data.get("no_repeat_days"),
            mode=data.get("no_repeat_mode"),
        )
    except InvalidConfiguration as e:
        logger.warning("prefs: rejected update user_id=%s reason=%s", user_id, e)
        raise HTTPException(status_code=400, detail=f"invalid_{e.field}") from e
    except InvalidReference as e:
        raise HTTPException(status_code=404, detail="user_not_found") from e
    return _prefs_out(pref)

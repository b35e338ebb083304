from pydantic import BaseModel
from typing import Any, Optional


class NoRepeatPrefsOut(BaseModel):
    no_repeat_days: int
    no_repeat_mode: str
    is_default: bool = False


class NoRepeatPrefsUpdateIn(BaseModel):
    # Kept loose so out-of-range values reach the domain validation (400, not 422).
    no_repeat_days: Optional[Any] = None
    no_repeat_mode: Optional[Any] = None

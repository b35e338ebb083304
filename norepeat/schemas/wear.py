from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class WearEventIn(BaseModel):
    item_ids: List[str] = Field(min_length=1)
    occurred_on: Optional[str] = None
    outfit_id: Optional[str] = None
    source: Literal["ai_recommendation", "saved_outfit", "manual_outfit", "imported"] = "manual_outfit"
    context: Optional[str] = None
    notes: Optional[str] = None


class WearEventOut(BaseModel):
    id: str
    occurred_on: str
    item_ids: List[str]
    outfit_id: Optional[str] = None
    source: str
    context: Optional[str] = None
    notes: Optional[str] = None
    worn_at: Optional[str] = None


class WearEventDeleteIn(BaseModel):
    deleted: Optional[bool] = None

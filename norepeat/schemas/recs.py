from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class EligibilityIn(BaseModel):
    candidates: List[str] = Field(default_factory=list)
    date: Optional[str] = None


class EligibilityOut(BaseModel):
    mode: str
    days: int
    today: str
    cutoff: str
    eligible: List[str]
    ineligible: List[str]


class CandidateIn(BaseModel):
    item_ids: List[str] = Field(default_factory=list)
    outfit_id: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None


class FilterIn(BaseModel):
    candidates: List[CandidateIn]
    date: Optional[str] = None
    strict_min_count: Optional[int] = Field(default=None, ge=0)


class ExcludedOut(BaseModel):
    candidate: CandidateIn
    reason: str
    blocked_ids: List[str]
    last_worn_on: str


class FallbackOut(BaseModel):
    candidate: CandidateIn
    repeated_item_ids: List[str]


class FilterOut(BaseModel):
    mode: str
    days: int
    today: str
    cutoff: str
    eligible: List[CandidateIn]
    excluded: List[ExcludedOut]
    fallbacks: List[FallbackOut]

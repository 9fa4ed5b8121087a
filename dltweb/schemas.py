from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from dltsync.prizes import validate_combination


class BacktestRequest(BaseModel):
    front: List[int] = Field(..., description="5 distinct front numbers, 1-35.")
    back: List[int] = Field(..., description="2 distinct back numbers, 1-12.")
    all_tiers: bool = Field(False, description="Include tiers with zero hits.")

    @model_validator(mode="after")
    def validate_numbers(self) -> "BacktestRequest":
        validate_combination(self.front, self.back)
        return self


class PrizeTierSchema(BaseModel):
    tier: int
    name: str
    count: int


class BacktestResponse(BaseModel):
    front: List[int]
    back: List[int]
    draws_checked: int
    results: List[PrizeTierSchema]


class DrawRecordSchema(BaseModel):
    id: str
    date: str
    front: List[int]
    back: List[int]


class RecommendationResponse(BaseModel):
    front: List[int]
    back: List[int]
    explanation: str
    predicted_sum: int
    low: int
    high: int
    fallback: bool
    results: List[PrizeTierSchema]


class TrendResponse(BaseModel):
    predicted_sum: int
    low: int
    high: int
    window: int


class SyncResponse(BaseModel):
    status: str
    fetched: Optional[int] = None
    added: Optional[int] = None
    total: Optional[int] = None
    error: Optional[str] = None

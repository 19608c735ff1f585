from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ViabilityAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=95)
    is_viable: bool
    message: str
    recommendations: List[str] = Field(default_factory=list)
    expected_months_to_target: Optional[int] = None
    max_realistic_monthly_income: float = 0.0

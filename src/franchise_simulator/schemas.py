from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .models.common import OperatingProfile, Scenario
from .models.results import SimulationResult
from .models.viability import ViabilityAnalysis
from .services.event_log import SimulationHistoryEntry, StoredEvent


class SimulationRequest(BaseModel):
    desired_monthly_profit: float
    initial_investment: float
    operating_profile: OperatingProfile = OperatingProfile.MANAGED
    horizon_months: Optional[int] = Field(default=None, description="Defaults to the configured horizon")
    scenario: Scenario = Scenario.AVERAGE
    start_date: Optional[date] = None
    url: str = ""
    utm_params: Dict[str, str] = Field(default_factory=dict)


class SimulationResponse(BaseModel):
    simulation_id: str
    result: SimulationResult
    has_edits: bool = False


class StoreEditRequest(BaseModel):
    month: int


class CanAddStoreResponse(BaseModel):
    month: int
    can_add: bool


class ViabilityRequest(BaseModel):
    investment: float
    desired_profit: float
    operating_profile: OperatingProfile = OperatingProfile.MANAGED
    scenario: Scenario = Scenario.AVERAGE


class ViabilityResponse(BaseModel):
    analysis: ViabilityAnalysis


class FormValidationRequest(BaseModel):
    desired_monthly_profit: float
    initial_investment: float


class FormValidationResponse(BaseModel):
    valid: bool


class EventListResponse(BaseModel):
    events: List[StoredEvent]


class HistoryResponse(BaseModel):
    history: List[SimulationHistoryEntry]

from __future__ import annotations

from datetime import date
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .common import OperatingProfile, Scenario


class MonthlyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1)
    stores: int
    stores_in_implementation: int = Field(0, ge=0, description="Stores counted this month that do not sell yet")
    revenue_per_store: float
    total_revenue: float
    tax: float
    net_revenue: float
    cogs: float
    losses: float
    gross_profit: float
    resupply: float
    royalties: float
    other_repasses: float
    card_fee: float
    marketing: float
    system_fee: float
    accounting: float
    fixed_costs: float
    operating_profit: float
    net_profit: float
    capital_expenditure: float = Field(0.0, description="One-time payments booked this month")
    cash_flow: float
    cumulative_cash: float
    period_start: Optional[date] = None


class SimulationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_results: Tuple[MonthlyResult, ...]
    total_investment: float
    payback_period: int = Field(..., description="First month with non-negative cumulative cash, 0 if never reached")
    roi: float
    final_cash: float
    operating_profile: OperatingProfile
    scenario: Scenario
    annual_rentability: float = Field(0.0, description="Compound annual growth of the investment, % per year")
    fixed_income_benchmark: float = Field(0.0, description="Investment compounded at the fixed-income rate over the horizon")

    @property
    def horizon(self) -> int:
        return len(self.monthly_results)

    def month(self, month: int) -> MonthlyResult:
        return self.monthly_results[month - 1]

    def store_timeline(self) -> List[int]:
        return [m.stores for m in self.monthly_results]

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ParameterSet(BaseModel):
    """Business rates and fees of the franchise offer.

    Rates are fractions of gross revenue. Fees are monetary amounts.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False, extra="forbid")

    tax_rate: float = Field(..., ge=0, description="Simples Nacional rate on gross revenue")
    cogs_rate: float = Field(..., ge=0, description="Cost of goods sold")
    loss_rate: float = Field(..., ge=0, description="Shrinkage and spoilage")
    resupply_rate: float = Field(..., ge=0)
    royalty_rate: float = Field(..., ge=0)
    other_repasses_rate: float = Field(..., ge=0, description="Other pass-throughs to the franchisor")
    card_fee_rate: float = Field(..., ge=0)
    marketing_rate: float = Field(..., ge=0)
    system_fee_per_store: float = Field(..., ge=0, description="Monthly software fee per active store")
    accounting_fee: float = Field(..., ge=0, description="Monthly accounting fee")
    franchise_fee: float = Field(..., ge=0, description="One-time fee paid in the setup month")
    capex_per_store: float = Field(..., gt=0, description="One-time implementation cost of a store")
    revenue_per_store: float = Field(..., ge=0, description="Base monthly revenue of one store")
    growth_factor: float = Field(..., gt=0, description="Monthly revenue growth multiplier")
    flat_profit_per_store: float = Field(
        1500.0,
        ge=0,
        description="Conservative monthly income estimate per store used before a full simulation",
    )

    @property
    def minimum_investment(self) -> float:
        return self.franchise_fee + self.capex_per_store

    def additional_stores(self, investment: float) -> int:
        """Whole stores the investment buys beyond the first one, never negative."""
        available = investment - self.franchise_fee - self.capex_per_store
        return max(0, int(available // self.capex_per_store))

    def total_stores(self, investment: float) -> int:
        return 1 + self.additional_stores(investment)

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..errors import StoreAddRejected, StoreRemoveRejected
from ..models.common import OperatingProfile
from ..models.results import MonthlyResult, SimulationResult
from .simulator import ADDITIONAL_STORE_START_MONTH
from .summary import accumulate_cash, summarize

logger = logging.getLogger(__name__)

# Stores added by hand are funded from accumulated profit at this fixed cost.
STORE_CAPEX = 20000.0


@dataclass(frozen=True)
class EditRates:
    tax: float
    cogs: float
    losses: float
    resupply: float
    resupply_on_gross_profit: bool
    royalties: float
    other_repasses: float
    card_fee: float
    marketing: float
    system_fee_per_store: float
    accounting: float


# Recalculation tables for edited projections, separate from the ParameterSet.
ADD_STORE_RATES = EditRates(
    tax=0.06,
    cogs=0.60,
    losses=0.04,
    resupply=0.10,
    resupply_on_gross_profit=True,
    royalties=0.05,
    other_repasses=0.035,
    card_fee=0.025,
    marketing=0.02,
    system_fee_per_store=150.0,
    accounting=500.0,
)

REMOVE_STORE_RATES = EditRates(
    tax=0.06,
    cogs=0.61,
    losses=0.04,
    resupply=0.02,
    resupply_on_gross_profit=False,
    royalties=0.05,
    other_repasses=0.035,
    card_fee=0.02,
    marketing=0.02,
    system_fee_per_store=150.0,
    accounting=500.0,
)


def can_add_store(monthly_results: Sequence[MonthlyResult], month: int, total_investment: float) -> bool:
    """A store can be added from month 4 on once profit covers its capex."""
    if month < ADDITIONAL_STORE_START_MONTH or month > len(monthly_results):
        return False
    minimum_cumulative_cash = -(total_investment - STORE_CAPEX)
    return monthly_results[month - 1].cumulative_cash >= minimum_cumulative_cash


def _add_rejection_reason(monthly_results: Sequence[MonthlyResult], month: int) -> str:
    if month < ADDITIONAL_STORE_START_MONTH:
        return f"Stores can only be added from month {ADDITIONAL_STORE_START_MONTH}; months 1-3 are the setup period"
    if month > len(monthly_results):
        return f"Month {month} is beyond the {len(monthly_results)}-month horizon"
    return f"Not enough accumulated profit in month {month} to fund a new store"


def _recompute_month(
    current: MonthlyResult,
    stores: int,
    total_revenue: float,
    capital_expenditure: float,
    rates: EditRates,
    profile: OperatingProfile,
    stores_in_implementation: int = 0,
) -> MonthlyResult:
    tax = total_revenue * rates.tax
    net_revenue = total_revenue - tax
    cogs = total_revenue * rates.cogs
    losses = total_revenue * rates.losses
    gross_profit = net_revenue - cogs - losses

    resupply_base = gross_profit if rates.resupply_on_gross_profit else total_revenue
    resupply = resupply_base * rates.resupply
    royalties = total_revenue * rates.royalties
    other_repasses = total_revenue * rates.other_repasses
    card_fee = total_revenue * rates.card_fee
    marketing = total_revenue * rates.marketing
    system_fee = stores * rates.system_fee_per_store
    fixed_costs = (rates.accounting + system_fee) * profile.fixed_cost_multiplier

    operating_profit = gross_profit - resupply - royalties - other_repasses - card_fee - marketing - fixed_costs
    net_profit = operating_profit

    return current.model_copy(
        update={
            "stores": stores,
            "stores_in_implementation": stores_in_implementation,
            "revenue_per_store": total_revenue / stores if stores else 0.0,
            "total_revenue": total_revenue,
            "tax": tax,
            "net_revenue": net_revenue,
            "cogs": cogs,
            "losses": losses,
            "gross_profit": gross_profit,
            "resupply": resupply,
            "royalties": royalties,
            "other_repasses": other_repasses,
            "card_fee": card_fee,
            "marketing": marketing,
            "system_fee": system_fee,
            "accounting": rates.accounting,
            "fixed_costs": fixed_costs,
            "operating_profit": operating_profit,
            "net_profit": net_profit,
            "capital_expenditure": capital_expenditure,
            "cash_flow": net_profit - capital_expenditure,
        }
    )


def _rebuild(result: SimulationResult, month: int, recalculated: List[MonthlyResult]) -> SimulationResult:
    untouched = list(result.monthly_results[: month - 1])
    opening_cash = untouched[-1].cumulative_cash if untouched else 0.0
    months = untouched + list(accumulate_cash(recalculated, opening_cash))
    return summarize(months, result.total_investment, result.operating_profile, result.scenario)


def add_store(result: SimulationResult, month: int) -> SimulationResult:
    """Return a new projection with one more store from ``month`` to the end.

    The new store spends ``month`` in implementation and sells from the
    following month at the per-store average of the existing stores.
    """
    if not can_add_store(result.monthly_results, month, result.total_investment):
        reason = _add_rejection_reason(result.monthly_results, month)
        logger.info("Store addition rejected for month %d: %s", month, reason)
        raise StoreAddRejected(month, reason)

    recalculated: List[MonthlyResult] = []
    for current in result.monthly_results[month - 1:]:
        existing_stores = current.stores
        selling_stores = existing_stores - current.stores_in_implementation
        total_revenue = current.total_revenue
        if current.month > month and selling_stores > 0:
            total_revenue += current.total_revenue / selling_stores
        capital_expenditure = current.capital_expenditure
        stores_in_implementation = current.stores_in_implementation
        if current.month == month:
            capital_expenditure += STORE_CAPEX
            stores_in_implementation += 1
        recalculated.append(
            _recompute_month(
                current,
                existing_stores + 1,
                total_revenue,
                capital_expenditure,
                ADD_STORE_RATES,
                result.operating_profile,
                stores_in_implementation,
            )
        )

    logger.info("Added a store from month %d", month)
    return _rebuild(result, month, recalculated)


def remove_store(result: SimulationResult, month: int) -> SimulationResult:
    """Return a new projection with one store less from ``month`` to the end."""
    months = result.monthly_results
    if month < ADDITIONAL_STORE_START_MONTH:
        raise StoreRemoveRejected(month, "Stores cannot be removed from the first 3 months")
    if month > len(months):
        raise StoreRemoveRejected(month, f"Month {month} is beyond the {len(months)}-month horizon")
    if months[month - 1].stores <= 1:
        raise StoreRemoveRejected(month, f"There is no additional store to remove in month {month}")

    previous_stores = months[month - 2].stores
    recalculated: List[MonthlyResult] = []
    for current in months[month - 1:]:
        existing_stores = current.stores
        new_stores = max(1, existing_stores - 1)
        stores_in_implementation = current.stores_in_implementation
        selling_stores = existing_stores - stores_in_implementation
        total_revenue = current.total_revenue
        capital_expenditure = current.capital_expenditure
        if stores_in_implementation and (current.month == month or selling_stores <= 1):
            # a store that does not sell yet goes first, taking no revenue with it
            stores_in_implementation -= 1
            if current.month == month:
                capital_expenditure = max(0.0, capital_expenditure - STORE_CAPEX)
        else:
            new_selling = max(1, selling_stores - 1)
            total_revenue = current.total_revenue / selling_stores * new_selling
            if current.month == month and existing_stores > previous_stores:
                # the removed store was the one opening this month
                capital_expenditure = 0.0
        recalculated.append(
            _recompute_month(
                current,
                new_stores,
                total_revenue,
                capital_expenditure,
                REMOVE_STORE_RATES,
                result.operating_profile,
                stores_in_implementation,
            )
        )

    logger.info("Removed a store from month %d", month)
    return _rebuild(result, month, recalculated)


class StoreEditSession:
    """What-if edits over a projection that can always be discarded."""

    def __init__(self, original: SimulationResult) -> None:
        self.original = original
        self.current = original
        self.edits: List[Tuple[str, int]] = []

    @property
    def has_edits(self) -> bool:
        return bool(self.edits)

    def can_add_store(self, month: int) -> bool:
        return can_add_store(self.current.monthly_results, month, self.current.total_investment)

    def add_store(self, month: int) -> SimulationResult:
        self.current = add_store(self.current, month)
        self.edits.append(("add", month))
        return self.current

    def remove_store(self, month: int) -> SimulationResult:
        self.current = remove_store(self.current, month)
        self.edits.append(("remove", month))
        return self.current

    def revert(self) -> SimulationResult:
        self.current = self.original
        self.edits.clear()
        return self.original

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from ..models.common import OperatingProfile, Scenario
from ..models.results import MonthlyResult, SimulationResult

FIXED_INCOME_ANNUAL_RATE = 0.15  # SELIC, effective per year


def accumulate_cash(months: Iterable[MonthlyResult], opening_cash: float = 0.0) -> Tuple[MonthlyResult, ...]:
    """Rebuild cumulative cash as a running sum of cash flow starting at ``opening_cash``."""
    folded: List[MonthlyResult] = []
    cumulative_cash = opening_cash
    for month in months:
        cumulative_cash += month.cash_flow
        folded.append(month.model_copy(update={"cumulative_cash": cumulative_cash}))
    return tuple(folded)


def payback_period(months: Sequence[MonthlyResult]) -> int:
    return next((m.month for m in months if m.cumulative_cash >= 0), 0)


def return_on_investment(final_cash: float, total_investment: float) -> float:
    return ((final_cash + total_investment) / total_investment - 1) * 100


def annual_rentability(final_cash: float, total_investment: float, horizon_months: int) -> float:
    final_value = total_investment + final_cash
    if final_value <= 0:
        return -100.0
    years = horizon_months / 12
    return ((final_value / total_investment) ** (1 / years) - 1) * 100


def fixed_income_benchmark(total_investment: float, horizon_months: int) -> float:
    return total_investment * (1 + FIXED_INCOME_ANNUAL_RATE / 12) ** horizon_months


def summarize(
    months: Sequence[MonthlyResult],
    total_investment: float,
    operating_profile: OperatingProfile,
    scenario: Scenario,
) -> SimulationResult:
    final_cash = months[-1].cumulative_cash if months else 0.0
    horizon = len(months)
    return SimulationResult(
        monthly_results=tuple(months),
        total_investment=total_investment,
        payback_period=payback_period(months),
        roi=return_on_investment(final_cash, total_investment),
        final_cash=final_cash,
        operating_profile=operating_profile,
        scenario=scenario,
        annual_rentability=annual_rentability(final_cash, total_investment, horizon) if horizon else 0.0,
        fixed_income_benchmark=fixed_income_benchmark(total_investment, horizon),
    )

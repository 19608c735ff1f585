from __future__ import annotations

import logging
import math
from datetime import date
from typing import List, Optional, Set

from dateutil.relativedelta import relativedelta

from ..errors import InvalidHorizon, InvalidParameter
from ..models.common import OperatingProfile, Scenario
from ..models.parameters import ParameterSet
from ..models.results import MonthlyResult, SimulationResult
from .summary import summarize

logger = logging.getLogger(__name__)

SETUP_MONTH = 1
IMPLEMENTATION_MONTH = 2
REVENUE_START_MONTH = 3
ADDITIONAL_STORE_START_MONTH = 4

# Investments below the ceiling buy no extra store up front; one is bought
# out of accumulated profit at the start of the second year instead.
EARLY_EXPANSION_CEILING = 70000.0
EARLY_EXPANSION_MONTH = 13

MIN_DESIRED_PROFIT = 1000.0
MAX_DESIRED_PROFIT = 15000.0
MAX_INVESTMENT = 500000.0
VALIDATION_HORIZON_MONTHS = 24


def coerce_profile(value: OperatingProfile | str) -> OperatingProfile:
    try:
        return OperatingProfile(value)
    except ValueError as exc:
        raise InvalidParameter(f"Unknown operating profile: {value!r}") from exc


def coerce_scenario(value: Scenario | str) -> Scenario:
    try:
        return Scenario(value)
    except ValueError as exc:
        raise InvalidParameter(f"Unknown scenario: {value!r}") from exc


def validate_amounts(desired_monthly_profit: float, initial_investment: float) -> None:
    if not math.isfinite(initial_investment) or initial_investment <= 0:
        raise InvalidParameter(f"Initial investment must be positive, got {initial_investment}")
    if not math.isfinite(desired_monthly_profit) or desired_monthly_profit < 0:
        raise InvalidParameter(f"Desired monthly profit cannot be negative, got {desired_monthly_profit}")


class SimulationEngine:
    def __init__(self, params: ParameterSet) -> None:
        self.params = params

    def simulate(
        self,
        desired_monthly_profit: float,
        initial_investment: float,
        operating_profile: OperatingProfile | str = OperatingProfile.MANAGED,
        horizon_months: int = 60,
        scenario: Scenario | str = Scenario.AVERAGE,
        start_date: Optional[date] = None,
    ) -> SimulationResult:
        profile = coerce_profile(operating_profile)
        scenario = coerce_scenario(scenario)
        self._validate(desired_monthly_profit, initial_investment, horizon_months)

        additional_stores = self.params.additional_stores(initial_investment)
        activation_months: Set[int] = {
            ADDITIONAL_STORE_START_MONTH + offset for offset in range(additional_stores)
        }
        early_expansion = additional_stores == 0 and initial_investment < EARLY_EXPANSION_CEILING
        logger.debug(
            "Simulating %s months: investment=%.2f additional_stores=%d early_expansion=%s",
            horizon_months,
            initial_investment,
            additional_stores,
            early_expansion,
        )

        monthly_results: List[MonthlyResult] = []
        cumulative_cash = 0.0
        stores = 0
        for month in range(1, horizon_months + 1):
            capital_expenditure = 0.0
            if month == SETUP_MONTH:
                capital_expenditure += self.params.franchise_fee
            elif month == IMPLEMENTATION_MONTH:
                stores = 1
                capital_expenditure += self.params.capex_per_store
            if month in activation_months:
                stores += 1
                capital_expenditure += self.params.capex_per_store
                logger.debug("Store %d activates in month %d", stores, month)

            period_start = start_date + relativedelta(months=month - 1) if start_date else None
            result = self._build_month(
                month, stores, capital_expenditure, cumulative_cash, profile, scenario, period_start
            )

            if early_expansion and month == EARLY_EXPANSION_MONTH:
                expanded = self._build_month(
                    month,
                    stores + 1,
                    capital_expenditure + self.params.capex_per_store,
                    cumulative_cash,
                    profile,
                    scenario,
                    period_start,
                )
                if expanded.cumulative_cash >= -initial_investment:
                    stores += 1
                    result = expanded
                    logger.debug("Early expansion store activates in month %d", month)

            monthly_results.append(result)
            cumulative_cash = result.cumulative_cash

        return summarize(monthly_results, initial_investment, profile, scenario)

    def revenue_per_store(self, month: int, scenario: Scenario) -> float:
        if month < REVENUE_START_MONTH:
            return 0.0
        growth = self.params.growth_factor ** (month - REVENUE_START_MONTH)
        return self.params.revenue_per_store * growth * scenario.revenue_multiplier

    def _validate(self, desired_monthly_profit: float, initial_investment: float, horizon_months: int) -> None:
        if horizon_months <= 0:
            raise InvalidHorizon(f"Horizon must be a positive number of months, got {horizon_months}")
        if not self.params.growth_factor > 0:
            raise InvalidParameter(f"Growth factor must be positive, got {self.params.growth_factor}")
        validate_amounts(desired_monthly_profit, initial_investment)

    def _build_month(
        self,
        month: int,
        stores: int,
        capital_expenditure: float,
        cumulative_before: float,
        profile: OperatingProfile,
        scenario: Scenario,
        period_start: Optional[date],
    ) -> MonthlyResult:
        params = self.params
        revenue_per_store = self.revenue_per_store(month, scenario)
        total_revenue = revenue_per_store * stores

        tax = total_revenue * params.tax_rate
        net_revenue = total_revenue - tax
        cogs = total_revenue * params.cogs_rate
        losses = total_revenue * params.loss_rate
        gross_profit = net_revenue - cogs - losses

        resupply = total_revenue * params.resupply_rate
        royalties = total_revenue * params.royalty_rate
        other_repasses = total_revenue * params.other_repasses_rate
        card_fee = total_revenue * params.card_fee_rate
        marketing = total_revenue * params.marketing_rate
        system_fee = stores * params.system_fee_per_store
        accounting = params.accounting_fee
        fixed_costs = (accounting + system_fee) * profile.fixed_cost_multiplier

        operating_profit = gross_profit - resupply - royalties - other_repasses - card_fee - marketing - fixed_costs
        net_profit = operating_profit

        cash_flow = net_profit - capital_expenditure
        if month <= IMPLEMENTATION_MONTH:
            # bills are still paid while no store sells
            cash_flow -= fixed_costs

        return MonthlyResult(
            month=month,
            stores=stores,
            revenue_per_store=revenue_per_store,
            total_revenue=total_revenue,
            tax=tax,
            net_revenue=net_revenue,
            cogs=cogs,
            losses=losses,
            gross_profit=gross_profit,
            resupply=resupply,
            royalties=royalties,
            other_repasses=other_repasses,
            card_fee=card_fee,
            marketing=marketing,
            system_fee=system_fee,
            accounting=accounting,
            fixed_costs=fixed_costs,
            operating_profit=operating_profit,
            net_profit=net_profit,
            capital_expenditure=capital_expenditure,
            cash_flow=cash_flow,
            cumulative_cash=cumulative_before + cash_flow,
            period_start=period_start,
        )


def validate_form_data(params: ParameterSet, desired_monthly_profit: float, initial_investment: float) -> bool:
    """Quick gate run by the form before the full projection is shown."""
    if not MIN_DESIRED_PROFIT <= desired_monthly_profit <= MAX_DESIRED_PROFIT:
        return False
    if not params.minimum_investment <= initial_investment <= MAX_INVESTMENT:
        return False

    result = SimulationEngine(params).simulate(
        desired_monthly_profit,
        initial_investment,
        OperatingProfile.MANAGED,
        VALIDATION_HORIZON_MONTHS,
        Scenario.AVERAGE,
    )
    reaches_desired_income = any(m.net_profit >= desired_monthly_profit for m in result.monthly_results)
    lowest_cash = min(m.cumulative_cash for m in result.monthly_results)
    return reaches_desired_income and abs(lowest_cash) <= initial_investment

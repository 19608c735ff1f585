from __future__ import annotations

import math
from typing import List, Optional, Sequence

from ..errors import InvalidParameter
from ..models.common import OperatingProfile, Scenario
from ..models.parameters import ParameterSet
from ..models.results import MonthlyResult
from ..models.viability import ViabilityAnalysis
from .formatting import format_amount, format_percentage
from .simulator import coerce_profile, coerce_scenario, validate_amounts

MAX_SCORE = 95
IMPLEMENTATION_DELAY_MONTHS = 2
LOW_ANNUAL_ROI = 0.10
HIGH_ANNUAL_ROI = 0.30


def _clamp(score: int) -> int:
    return max(0, min(score, MAX_SCORE))


def _score_band(score: int) -> str:
    if score >= 80:
        return "Highly viable investment!"
    if score >= 60:
        return "Viable investment with caveats."
    if score >= 40:
        return "High-risk investment."
    return "Investment not recommended."


def _profile_adjustment(profile: OperatingProfile, recommendations: List[str]) -> int:
    if profile is OperatingProfile.OUTSOURCED:
        recommendations.append("Outsourced operation raises fixed costs and trims margins")
        return -5
    if profile is OperatingProfile.LOW_EFFORT:
        recommendations.append("A lean operation keeps fixed costs low")
        return 5
    return 0


class ViabilityAnalyzer:
    def __init__(self, params: ParameterSet) -> None:
        self.params = params

    def _insufficient(self) -> ViabilityAnalysis:
        minimum = self.params.minimum_investment
        return ViabilityAnalysis(
            score=0,
            is_viable=False,
            message=(
                f"Insufficient investment. Minimum required: R$ {format_amount(minimum)} "
                "(franchise fee + first store)."
            ),
            recommendations=[f"Raise the investment to at least R$ {format_amount(minimum)}"],
        )

    def analyze(
        self,
        investment: float,
        desired_profit: float,
        operating_profile: OperatingProfile | str = OperatingProfile.MANAGED,
        scenario: Scenario | str = Scenario.AVERAGE,
    ) -> ViabilityAnalysis:
        """Fast first pass based on a flat per-store income estimate."""
        profile = coerce_profile(operating_profile)
        scenario = coerce_scenario(scenario)
        validate_amounts(desired_profit, investment)
        if investment < self.params.minimum_investment:
            return self._insufficient()

        recommendations: List[str] = []
        score = 100
        is_viable = True
        total_stores = self.params.total_stores(investment)
        estimate = total_stores * self.params.flat_profit_per_store

        if desired_profit > estimate * 1.5:
            score -= 40
            is_viable = False
            message = "Monthly profit target is too high for this investment."
            recommendations.append(
                f"With R$ {format_amount(investment)}, a realistic monthly profit is up to "
                f"R$ {format_amount(estimate * 1.2)}"
            )
            recommendations.append("Consider raising the investment or lowering the monthly profit target")
        elif desired_profit > estimate:
            score -= 20
            message = "Monthly profit target is high, but reachable with future expansion."
            recommendations.append("You will need to add more stores to reach this target")
            stores_needed = math.ceil((desired_profit - estimate) / self.params.flat_profit_per_store)
            investment_needed = stores_needed * self.params.capex_per_store
            recommendations.append(
                f"Additional investment needed: R$ {format_amount(investment_needed)} for {stores_needed} stores"
            )
        else:
            message = "Monthly profit target is realistic and achievable!"
            recommendations.append(f"With {total_stores} store(s) you can reach your target")

        score += _profile_adjustment(profile, recommendations)
        if scenario is Scenario.OPTIMISTIC:
            score += 10
        elif scenario is Scenario.PESSIMISTIC:
            score -= 10

        return ViabilityAnalysis(
            score=_clamp(score),
            is_viable=is_viable,
            message=message,
            recommendations=recommendations,
            max_realistic_monthly_income=estimate,
        )

    def analyze_with_results(
        self,
        investment: float,
        desired_profit: float,
        operating_profile: OperatingProfile | str,
        monthly_results: Sequence[MonthlyResult],
    ) -> ViabilityAnalysis:
        """Score the target against the average net profit of a full projection."""
        profile = coerce_profile(operating_profile)
        if not monthly_results:
            raise InvalidParameter("Viability analysis needs at least one simulated month")
        validate_amounts(desired_profit, investment)
        if investment < self.params.minimum_investment:
            return self._insufficient()

        recommendations: List[str] = []
        score = 100
        is_viable = True
        expected_months_to_target: Optional[int] = None
        total_stores = self.params.total_stores(investment)

        total_net_profit = sum(m.net_profit for m in monthly_results)
        store_months = sum(m.stores for m in monthly_results)
        average_profit = total_net_profit / len(monthly_results)
        average_profit_per_store = total_net_profit / store_months if store_months else 0.0

        if desired_profit > average_profit * 1.5:
            score -= 40
            is_viable = False
            message = "Monthly profit target is too high for this investment."
            recommendations.append(
                f"With R$ {format_amount(investment)}, a realistic monthly profit is up to "
                f"R$ {format_amount(average_profit * 1.2)}"
            )
            recommendations.append("Consider raising the investment or lowering the monthly profit target")
        elif desired_profit > average_profit:
            score -= 20
            message = "Monthly profit target is high, but reachable with future expansion."
            recommendations.append("You will need to add more stores to reach this target")
            stores_needed = math.ceil((desired_profit - average_profit) / average_profit_per_store)
            investment_needed = stores_needed * self.params.capex_per_store
            recommendations.append(
                f"Needed: {stores_needed} additional stores (R$ {format_amount(investment_needed)})"
            )
            expected_months_to_target = math.ceil(investment_needed / average_profit) + IMPLEMENTATION_DELAY_MONTHS
            recommendations.append(f"Estimated time to reach the target: {expected_months_to_target} months")
        elif desired_profit >= average_profit * 0.7:
            score += 10
            message = "Monthly profit target is realistic and achievable."
            recommendations.append("Your target is in line with the potential of the investment")
            recommendations.append(
                f"With {total_stores} store(s) you can earn up to R$ {format_amount(average_profit)} a month"
            )
            expected_months_to_target = 1
        else:
            score -= 40
            message = "Monthly profit target is far too low for this investment."
            recommendations.append("Your target is well below the potential of the investment")
            recommendations.append(f"With {total_stores} store(s) you can earn a much higher monthly income")
            recommendations.append("Consider a more ambitious target to justify the investment")
            expected_months_to_target = 1

        score += _profile_adjustment(profile, recommendations)

        desired_roi = desired_profit * 12 / investment
        realistic_roi = average_profit * 12 / investment
        if desired_roi <= realistic_roi * 1.5:
            if desired_roi > HIGH_ANNUAL_ROI:
                score += 10
                recommendations.append(f"Excellent ROI potential: {format_percentage(desired_roi * 100)} per year")
            elif desired_roi >= LOW_ANNUAL_ROI:
                recommendations.append(f"Good ROI potential: {format_percentage(desired_roi * 100)} per year")
            else:
                score -= 30
                recommendations.append(f"Very low ROI: {format_percentage(desired_roi * 100)} per year")
                recommendations.append("This investment is not recommended with this profit target")
                recommendations.append("Consider a more ambitious target or a smaller investment")
        else:
            score -= 30

        return ViabilityAnalysis(
            score=_clamp(score),
            is_viable=is_viable,
            message=f"{_score_band(score)} {message}",
            recommendations=recommendations,
            expected_months_to_target=expected_months_to_target,
            max_realistic_monthly_income=average_profit,
        )

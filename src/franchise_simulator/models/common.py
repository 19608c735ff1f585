from __future__ import annotations

from enum import Enum


class OperatingProfile(str, Enum):
    LOW_EFFORT = "low_effort"
    MANAGED = "managed"
    OUTSOURCED = "outsourced"

    @property
    def fixed_cost_multiplier(self) -> float:
        return _FIXED_COST_MULTIPLIERS[self]


class Scenario(str, Enum):
    PESSIMISTIC = "pessimistic"
    AVERAGE = "average"
    OPTIMISTIC = "optimistic"

    @property
    def revenue_multiplier(self) -> float:
        return _REVENUE_MULTIPLIERS[self]


_FIXED_COST_MULTIPLIERS = {
    OperatingProfile.LOW_EFFORT: 0.7,
    OperatingProfile.MANAGED: 1.0,
    OperatingProfile.OUTSOURCED: 1.5,
}

_REVENUE_MULTIPLIERS = {
    Scenario.PESSIMISTIC: 0.85,
    Scenario.AVERAGE: 1.0,
    Scenario.OPTIMISTIC: 1.15,
}

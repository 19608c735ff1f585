from __future__ import annotations

import pytest

from franchise_simulator.models.common import OperatingProfile, Scenario
from franchise_simulator.sample_data import build_default_parameters
from franchise_simulator.services.simulator import SimulationEngine


@pytest.fixture
def params():
    return build_default_parameters()


@pytest.fixture
def engine(params):
    return SimulationEngine(params)


@pytest.fixture
def result_55k(engine):
    return engine.simulate(2000, 55000, OperatingProfile.MANAGED, 60, Scenario.AVERAGE)

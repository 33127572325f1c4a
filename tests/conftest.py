"""Shared test fixtures."""

import pytest

from reactor_safety_sim.config.schema import ControllerConfig, PlantParameters, SafetyConfig
from reactor_safety_sim.plant.thermal_model import PlantState
from reactor_safety_sim.safety.monitor import SafetyState
from reactor_safety_sim.sensors.sensor import Sensor


@pytest.fixture
def plant_params():
    return PlantParameters()


@pytest.fixture
def plant_state():
    return PlantState()


@pytest.fixture
def safety_config():
    return SafetyConfig()


@pytest.fixture
def safety_state():
    return SafetyState()


@pytest.fixture
def controller_config():
    return ControllerConfig()


@pytest.fixture
def quiet_sensor():
    """Noise-free sensor, readings equal the fault-adjusted truth."""
    return Sensor(seed=1, noise_std=0.0)

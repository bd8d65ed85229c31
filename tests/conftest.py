"""Shared fixtures."""

import os

os.environ.setdefault("APP_ENV", "test")

import numpy as np
import pytest

from terradata.core.grid import ZoneGrid
from terradata.core.models import FieldConditions, Zone
from terradata.core.profiles import get_crop
from terradata.core.simulation import Simulation
from terradata.core.weather import neutral_season
from terradata.data_sources.satellite import UniformSatelliteProvider
from terradata.utils.config import Settings, SimulationConfig


def make_settings(**simulation) -> Settings:
    params = {"max_weeks": 20, "grid_size": 10, "water_budget": 1000, "fertilizer_budget": 500, "start_in_tutorial": False}
    params.update(simulation)
    return Settings(simulation=SimulationConfig(**params))


def make_simulation(ndvi=0.5, moisture=0.4, weather=None, seed=1, **simulation) -> Simulation:
    config = make_settings(**simulation)
    weeks = config.simulation.max_weeks
    return Simulation(
        config=config,
        seed=seed,
        weather=weather if weather is not None else neutral_season(weeks),
        provider=UniformSatelliteProvider(ndvi=ndvi, soil_moisture=moisture),
    )


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def corn():
    return get_crop("corn")


@pytest.fixture
def field():
    return FieldConditions()


@pytest.fixture
def zone():
    return Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=0.5)


@pytest.fixture
def small_grid():
    return ZoneGrid([
        Zone(zone_id=(0, 0), vegetation_index=0.5, soil_moisture=0.4),
        Zone(zone_id=(0, 1), vegetation_index=0.3, soil_moisture=0.2),
        Zone(zone_id=(1, 0), vegetation_index=0.7, soil_moisture=0.6),
        Zone(zone_id=(1, 1), vegetation_index=0.8, soil_moisture=0.1),
    ])


@pytest.fixture
def neutral_sim():
    return make_simulation()


@pytest.fixture
def sim_factory():
    return make_simulation


@pytest.fixture
def settings_factory():
    return make_settings

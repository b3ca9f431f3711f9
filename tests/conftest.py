import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from stable_smoke.core.config import SimulationConfig
from stable_smoke.physics.simulation import Simulation


@pytest.fixture
def sim():
    return Simulation(SimulationConfig())


@pytest.fixture
def rng():
    return np.random.default_rng(1234)

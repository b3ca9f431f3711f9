"""SimulationConfig defaults and JSON persistence."""

import pytest

from stable_smoke.core.config import SimulationConfig
from stable_smoke.physics.simulation import Simulation


def test_defaults_match_classic_demo():
    config = SimulationConfig()
    assert config.grid_size == 50
    assert config.dt == 0.04
    assert config.viscosity == 0.001
    assert config.force_decay == 0.85
    assert config.density_decay == 0.995
    assert config.injected_density == 10.0
    assert config.check_finite is False


def test_from_dict_keeps_missing_defaults():
    config = SimulationConfig.from_dict({'grid_size': 16, 'viscosity': 0.01})
    assert config.grid_size == 16
    assert config.viscosity == 0.01
    assert config.dt == 0.04


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ValueError, match="visc"):
        SimulationConfig.from_dict({'visc': 0.1})


def test_save_and_load(tmp_path):
    path = tmp_path / "config.json"
    config = SimulationConfig(grid_size=24, dt=0.02, check_finite=True)
    config.save(str(path))
    assert SimulationConfig.load(str(path)) == config


def test_config_feeds_simulation():
    config = SimulationConfig(grid_size=12, dt=0.1, viscosity=0.5,
                              force_decay=0.5, density_decay=0.9, injected_density=2.0)
    sim = Simulation(config)
    assert sim.n == 12
    assert sim.dt == 0.1
    assert sim.viscosity == 0.5

    sim.inject_force(3, 3, 1.0, 0.0)
    sim.inject_density(6, 6)
    assert sim.density_at(6, 6) == 2.0

    sim.advance()
    assert sim.force_at(3, 3)[0] == pytest.approx(0.5)


def test_live_tunables_do_not_touch_config():
    config = SimulationConfig()
    sim = Simulation(config)
    sim.dt = 0.5
    sim.viscosity = 2.0
    assert config.dt == 0.04
    assert config.viscosity == 0.001

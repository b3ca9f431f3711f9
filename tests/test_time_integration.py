"""Headless driver loop."""

import numpy as np
import pytest

from stable_smoke.core.config import SimulationConfig
from stable_smoke.numerics.time_integration import SimulationDriver
from stable_smoke.physics.simulation import Simulation


def test_integrate_collects_snapshots():
    sim = Simulation(SimulationConfig(grid_size=16))
    sim.inject_force(8, 8, 0.5, 0.0)
    driver = SimulationDriver(sim)

    snapshots = driver.integrate(25, output_every=10)

    assert [s.step for s in snapshots] == [0, 10, 20, 25]
    assert snapshots[-1].time == pytest.approx(25 * 0.04)
    assert sim.step_count == 25
    assert not np.any(snapshots[0].vx)
    assert np.any(snapshots[1].vx)


def test_snapshots_are_copies():
    sim = Simulation(SimulationConfig(grid_size=8))
    sim.inject_density(2, 2)
    snapshots = SimulationDriver(sim).integrate(1)
    sim.inject_density(2, 2, amount=99.0)
    assert snapshots[-1].rho[2, 2] != 99.0
    assert snapshots[-1].rho.flags.writeable


def test_callback_runs_every_step():
    sim = Simulation(SimulationConfig(grid_size=8))
    seen = []
    SimulationDriver(sim).integrate(4, callback=lambda s: seen.append(s.step_count))
    assert seen == [1, 2, 3, 4]


def test_stop_on_irregular():
    sim = Simulation(SimulationConfig(grid_size=8))
    sim.set_density(np.full((8, 8), np.inf))
    snapshots = SimulationDriver(sim, stop_on_irregular=True).integrate(10)
    assert sim.step_count == 1
    assert snapshots[-1].step == 1


def test_output_every_must_be_positive():
    sim = Simulation(SimulationConfig(grid_size=8))
    with pytest.raises(ValueError):
        SimulationDriver(sim).integrate(3, output_every=0)

"""
Fixed-step driver loop for the smoke simulation
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """Copy of the observable fields at one step"""
    step: int
    time: float
    vx: np.ndarray
    vy: np.ndarray
    rho: np.ndarray


class SimulationDriver:
    """
    External loop that calls Simulation.advance() at a fixed time step

    Stands in for an idle/render-loop callback when running headless.
    """

    def __init__(self, simulation: 'Simulation', stop_on_irregular: bool = False):
        """
        Initialize driver

        Args:
            simulation: Simulation to drive
            stop_on_irregular: Stop integrating once NaN/Inf appear
        """
        self.simulation = simulation
        self.stop_on_irregular = stop_on_irregular

    def snapshot(self) -> Snapshot:
        sim = self.simulation
        return Snapshot(sim.step_count, sim.time,
                        np.array(sim.vx), np.array(sim.vy), np.array(sim.rho))

    def integrate(self, n_steps: int,
                  output_every: int = 10,
                  callback: Optional[Callable] = None) -> List[Snapshot]:
        """
        Advance the simulation n_steps times

        Args:
            n_steps: Number of ticks
            output_every: Save a snapshot every this many ticks (the initial
                          and final states are always saved)
            callback: Function called with the simulation after each tick

        Returns:
            List of snapshots
        """
        if output_every < 1:
            raise ValueError(f"output_every must be positive, got {output_every}")

        snapshots = [self.snapshot()]

        for step in range(1, n_steps + 1):
            self.simulation.advance()

            if self.stop_on_irregular and not self.simulation.is_regular():
                logger.warning("Stopping at step %d: non-finite values in fields", step)
                snapshots.append(self.snapshot())
                break

            if step % output_every == 0 or step == n_steps:
                snapshots.append(self.snapshot())

            if callback is not None:
                callback(self.simulation)

        return snapshots

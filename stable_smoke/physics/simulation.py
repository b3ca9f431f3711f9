"""
Simulation object: owns the grid, the solver and the tunable parameters
"""

import logging
import numpy as np
from typing import Optional, Tuple
from ..core.config import SimulationConfig
from ..core.errors import SimulationNotInitializedError
from ..core.grid import GridStorage
from .stable_fluid_2d import ForcingPolicy, StableFluidSolver2D, transport_density

logger = logging.getLogger(__name__)


def _read_only(field: np.ndarray) -> np.ndarray:
    view = field.view()
    view.flags.writeable = False
    return view


class Simulation:
    """
    Smoke simulation on a periodic N x N grid

    The host calls advance() once per iteration of its own loop and may
    inject forces and density between calls. Not thread safe: serialize
    advance() and inject_*() calls when used from several threads.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        """
        Initialize simulation and allocate all fields

        Args:
            config: Simulation parameters (defaults to SimulationConfig())
        """
        self.config = config if config is not None else SimulationConfig()

        # Live tunables
        self.dt = self.config.dt
        self.viscosity = self.config.viscosity
        self.frozen = False

        self.forcing = ForcingPolicy(self.config.force_decay,
                                     self.config.density_decay)
        self.grid: Optional[GridStorage] = None
        self.solver: Optional[StableFluidSolver2D] = None
        self.step_count = 0
        self.time = 0.0

        self.initialize(self.config.grid_size)

    @property
    def n(self) -> int:
        return self._require_grid().n

    def initialize(self, n: int):
        """
        Allocate and zero every field and build the transform for grid size n

        Calling it again resizes the simulation; all state is discarded.
        A failed resize leaves the previous fields in place.

        Raises:
            AllocationError: If a field buffer cannot be allocated
            TransformSetupError: If the transform cannot be set up for n
        """
        # Plan first: a bad n should fail before any buffer is allocated.
        # The current fields stay live until both succeed.
        solver = StableFluidSolver2D(n)
        grid = GridStorage(n)

        if self.grid is not None:
            self.teardown()

        self.grid = grid
        self.solver = solver
        self.config.grid_size = solver.n
        self.step_count = 0
        self.time = 0.0

        logger.debug("Simulation initialized with n=%d, dt=%g, viscosity=%g",
                     n, self.dt, self.viscosity)

    def teardown(self):
        """Release all field buffers and the transform"""
        self.grid = None
        self.solver = None
        logger.debug("Simulation torn down")

    def _require_grid(self) -> GridStorage:
        if self.grid is None:
            raise SimulationNotInitializedError(
                "Simulation has no allocated fields; call initialize(n) first"
            )
        return self.grid

    def advance(self):
        """
        Run one tick: forcing policy, velocity solve, density transport

        Does nothing while `frozen` is set; pending forces stay in fx/fy and
        are applied by the first tick after unfreezing.
        """
        grid = self._require_grid()
        if self.frozen:
            return

        self.forcing.apply(grid)
        self.solver.solve(grid, self.dt, self.viscosity)
        transport_density(grid, self.dt)

        self.step_count += 1
        self.time += self.dt

        if self.config.check_finite and not self.is_regular():
            logger.warning("Non-finite values in simulation fields at step %d (t=%.4f)",
                           self.step_count, self.time)

    def _clamp_cell(self, x: int, y: int) -> Tuple[int, int]:
        n = self.n
        return min(max(int(x), 0), n - 1), min(max(int(y), 0), n - 1)

    def inject_force(self, x: int, y: int, dfx: float, dfy: float):
        """
        Add a force at a cell; coordinates are clamped to [0, N-1]
        """
        grid = self._require_grid()
        i, j = self._clamp_cell(x, y)
        grid.fx[j, i] += dfx
        grid.fy[j, i] += dfy

    def inject_density(self, x: int, y: int, amount: Optional[float] = None):
        """
        Set (not add) the density at a cell; coordinates are clamped

        Args:
            x, y: Cell coordinates
            amount: Density value (defaults to config.injected_density)
        """
        grid = self._require_grid()
        i, j = self._clamp_cell(x, y)
        grid.rho[j, i] = self.config.injected_density if amount is None else amount

    # Read-only access for rendering

    @property
    def vx(self) -> np.ndarray:
        return _read_only(self._require_grid().vx)

    @property
    def vy(self) -> np.ndarray:
        return _read_only(self._require_grid().vy)

    @property
    def fx(self) -> np.ndarray:
        return _read_only(self._require_grid().fx)

    @property
    def fy(self) -> np.ndarray:
        return _read_only(self._require_grid().fy)

    @property
    def rho(self) -> np.ndarray:
        return _read_only(self._require_grid().rho)

    def velocity_at(self, i: int, j: int) -> Tuple[float, float]:
        grid = self._require_grid()
        return grid.get('vx', i, j), grid.get('vy', i, j)

    def force_at(self, i: int, j: int) -> Tuple[float, float]:
        grid = self._require_grid()
        return grid.get('fx', i, j), grid.get('fy', i, j)

    def density_at(self, i: int, j: int) -> float:
        return self._require_grid().get('rho', i, j)

    # Seeding

    def set_velocity(self, vx: np.ndarray, vy: np.ndarray):
        """
        Overwrite the velocity field

        Args:
            vx: x velocity, shape (N, N) indexed [j, i]
            vy: y velocity, same shape
        """
        grid = self._require_grid()
        grid.vx[...] = vx
        grid.vy[...] = vy

    def set_density(self, rho: np.ndarray):
        """Overwrite the density field"""
        self._require_grid().rho[...] = rho

    def reset(self):
        """Zero all fields without reallocating"""
        self._require_grid().reset()
        self.step_count = 0
        self.time = 0.0

    # Diagnostics

    def is_regular(self) -> bool:
        """
        Check that velocity and density are finite

        Returns True if no NaN or Inf is present
        """
        grid = self._require_grid()
        for field in (grid.vx, grid.vy, grid.rho):
            if not np.all(np.isfinite(field)):
                return False
        return True

    def kinetic_energy(self) -> float:
        """Mean kinetic energy per cell, 0.5 * <|v|^2>"""
        grid = self._require_grid()
        return float(0.5 * np.mean(grid.vx**2 + grid.vy**2))

    def total_density(self) -> float:
        return float(np.sum(self._require_grid().rho))

    def max_divergence(self) -> float:
        """Largest spectral divergence magnitude of the current velocity"""
        grid = self._require_grid()
        div = self.solver.transform.spectral_divergence(grid.vx, grid.vy)
        return float(np.max(np.abs(div)))

"""
Stable fluids solver for the periodic 2D grid

One tick is: forcing policy -> velocity solve -> density transport.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional
from ..core.grid import GridStorage
from ..numerics.advection import advect
from ..numerics.spectral_methods_2d import SpectralTransform2D


@dataclass
class ForcingPolicy:
    """
    Per-tick decay of accumulated forces and density

    Without new injection both fields shrink geometrically, which keeps the
    simulation bounded under continuous user input.
    """
    force_decay: float = 0.85
    density_decay: float = 0.995

    def apply(self, grid: GridStorage):
        """
        Decay forces and density, then hand the forces to the solver

        rho0 <- density_decay * rho
        f    <- force_decay * f
        (vx0, vy0) <- (fx, fy) in spatial layout
        """
        np.multiply(grid.rho, self.density_decay, out=grid.rho0)
        grid.fx *= self.force_decay
        grid.fy *= self.force_decay

        # Scratch returns to spatial layout; its previous spectrum is discarded
        for scratch, force in ((grid.vx0, grid.fx), (grid.vy0, grid.fy)):
            scratch.clear()
            scratch.spatial[...] = force


class StableFluidSolver2D:
    """
    Velocity integration with semi-Lagrangian advection and spectral
    viscosity/projection (Stam's "stable fluids" on a torus).

    Stages of one step:
        1. v += dt * f, and the result becomes the advection source
        2. v <- source traced back along itself by dt
        3. pack v into the padded scratch and forward transform
        4. exponential viscous decay and divergence projection per wavevector
        5. inverse transform and 1/(n*n) normalization into v

    NaN or overflow from extreme dt/viscosity is not detected here.
    """

    def __init__(self, n: int, workers: Optional[int] = None):
        """
        Initialize solver

        Args:
            n: Grid dimension
            workers: FFT worker threads
        """
        self.n = n
        self.transform = SpectralTransform2D(n, workers=workers)

    def solve(self, grid: GridStorage, dt: float, viscosity: float):
        """
        Advance the velocity field of `grid` by one step

        On entry the spatial scratch buffers hold the decayed forces.
        """
        self._integrate_forces(grid, dt)
        self._advect_velocity(grid, dt)
        self._to_frequency(grid)
        self.transform.damp_and_project(grid.vx0.spectrum, grid.vy0.spectrum,
                                        dt, viscosity)
        self._to_spatial(grid)

    def _integrate_forces(self, grid: GridStorage, dt: float):
        for v, scratch in ((grid.vx, grid.vx0), (grid.vy, grid.vy0)):
            v += dt * scratch.spatial
            scratch.spatial[...] = v

    def _advect_velocity(self, grid: GridStorage, dt: float):
        u0 = grid.vx0.spatial
        v0 = grid.vy0.spatial
        advect(u0, u0, v0, dt, out=grid.vx)
        advect(v0, u0, v0, dt, out=grid.vy)

    def _to_frequency(self, grid: GridStorage):
        for v, scratch in ((grid.vx, grid.vx0), (grid.vy, grid.vy0)):
            scratch.spatial[...] = v
            self.transform.forward(scratch)

    def _to_spatial(self, grid: GridStorage):
        scale = 1.0 / (self.n * self.n)
        for v, scratch in ((grid.vx, grid.vx0), (grid.vy, grid.vy0)):
            self.transform.inverse(scratch)
            np.multiply(scratch.spatial, scale, out=v)


def transport_density(grid: GridStorage, dt: float):
    """
    Carry rho0 through the already-updated velocity into rho

    Advection only; no diffusion term is applied to the density.
    """
    advect(grid.rho0, grid.vx, grid.vy, dt, out=grid.rho)

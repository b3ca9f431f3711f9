"""
Spectral methods on the periodic 2D grid
"""

import numpy as np
from scipy.fft import rfft2, irfft2, rfftfreq
from typing import Optional
from ..core.errors import TransformSetupError
from ..core.grid import SpectralBuffer


class SpectralTransform2D:
    """
    In-place real 2D Fourier transform on padded scratch buffers.

    The forward transform leaves n//2+1 complex coefficients per row (the
    Hermitian half of the spectrum) in the buffer's own memory. The inverse
    is unnormalized: inverse(forward(f)) == n*n*f.
    """

    def __init__(self, n: int, workers: Optional[int] = None):
        """
        Build the transform "plan" for one grid size

        Args:
            n: Grid dimension
            workers: Worker threads passed to scipy.fft (None = library default)

        Raises:
            TransformSetupError: If the transform cannot be set up for n
        """
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise TransformSetupError(f"Grid size must be an integer, got {n!r}")
        if n < 2:
            raise TransformSetupError(f"Grid size must be at least 2, got {n}")

        self.n = int(n)
        self.n_freq = self.n // 2 + 1
        self.workers = workers

        # Wavenumbers of the half spectrum: x along rows (0..n/2),
        # y folded so that rows above n/2 are negative frequencies
        self.k_x = rfftfreq(self.n, d=1.0 / self.n)
        j = np.arange(self.n)
        self.k_y = np.where(j <= self.n // 2, j, j - self.n).astype(float)

        self.k_x_grid, self.k_y_grid = np.meshgrid(self.k_x, self.k_y)
        self.k_squared = self.k_x_grid**2 + self.k_y_grid**2

        # Avoid division by zero for the mean-flow mode
        k_squared_safe = self.k_squared.copy()
        k_squared_safe[0, 0] = 1.0

        # Projection onto the plane orthogonal to each wavevector.
        # The zero mode keeps the identity so the mean flow passes unchanged.
        self.p_xx = 1.0 - self.k_x_grid**2 / k_squared_safe
        self.p_xy = -self.k_x_grid * self.k_y_grid / k_squared_safe
        self.p_yy = 1.0 - self.k_y_grid**2 / k_squared_safe
        self.p_xx[0, 0] = 1.0
        self.p_xy[0, 0] = 0.0
        self.p_yy[0, 0] = 1.0

        # Nyquist modes have no well-defined derivative of a real field
        self.derivative_mask = np.ones_like(self.k_squared, dtype=bool)
        if self.n % 2 == 0:
            self.derivative_mask[:, -1] = False
            self.derivative_mask[self.n // 2, :] = False

        # Probe the FFT backend once so a broken setup fails here,
        # not on the first simulation step
        try:
            probe = rfft2(np.zeros((self.n, self.n)), workers=self.workers)
            irfft2(probe, s=(self.n, self.n), norm='forward', workers=self.workers)
        except Exception as e:
            raise TransformSetupError(
                f"Failed to set up spectral transform for n={self.n}: {e}"
            ) from e

    def forward(self, buffer: SpectralBuffer):
        """
        Real-to-complex transform in place

        Args:
            buffer: Scratch buffer holding spatial samples; holds the half
                    spectrum on return
        """
        spectrum = rfft2(buffer.spatial, workers=self.workers)
        buffer.set_representation(SpectralBuffer.FREQUENCY)
        buffer.spectrum[...] = spectrum

    def inverse(self, buffer: SpectralBuffer):
        """
        Complex-to-real transform in place, without the 1/(n*n) factor

        Args:
            buffer: Scratch buffer holding a half spectrum; holds unnormalized
                    spatial samples on return
        """
        field = irfft2(buffer.spectrum, s=(self.n, self.n),
                       norm='forward', workers=self.workers)
        buffer.set_representation(SpectralBuffer.SPATIAL)
        buffer.data[:, self.n:] = 0.0
        buffer.spatial[...] = field

    def damp_and_project(self, u_hat: np.ndarray, v_hat: np.ndarray,
                         dt: float, viscosity: float):
        """
        Viscous decay and incompressibility projection in frequency space

        For every wavevector (x, y) except the zero mode:
            f   = exp(-(x^2 + y^2) * dt * viscosity)
            U' = f * ((1 - x^2/r) U - (xy/r) V)
            V' = f * (-(xy/r) U + (1 - y^2/r) V)

        Args:
            u_hat: Half spectrum of the x velocity, modified in place
            v_hat: Half spectrum of the y velocity, modified in place
            dt: Time step
            viscosity: Kinematic viscosity
        """
        f = np.exp(-self.k_squared * dt * viscosity)

        u = u_hat.copy()
        v = v_hat.copy()

        u_hat[...] = f * (self.p_xx * u + self.p_xy * v)
        v_hat[...] = f * (self.p_xy * u + self.p_yy * v)

    def spectral_divergence(self, vx: np.ndarray, vy: np.ndarray) -> np.ndarray:
        """
        Divergence of a velocity field on the unit periodic square.

        Uses the same integer wavenumbers as the projection, so a field that
        went through damp_and_project has zero divergence up to round-off.
        Nyquist modes are excluded.
        """
        u_hat = rfft2(vx, workers=self.workers)
        v_hat = rfft2(vy, workers=self.workers)

        div_hat = 2j * np.pi * (self.k_x_grid * u_hat + self.k_y_grid * v_hat)
        div_hat[~self.derivative_mask] = 0.0

        return irfft2(div_hat, s=(self.n, self.n), workers=self.workers)

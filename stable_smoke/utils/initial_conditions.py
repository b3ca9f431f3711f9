"""
Initial conditions for smoke simulations

All functions return fields on the unit periodic square sampled at cell
centres, as (n, n) arrays indexed [j, i].
"""

import numpy as np
from typing import Optional, Tuple
from scipy.fft import ifft2
from ..numerics.advection import cell_centers


def taylor_green_vortex(n: int, amplitude: float = 1.0,
                        modes: int = 1) -> Tuple[np.ndarray, np.ndarray]:
    """
    Taylor-Green vortex

    Args:
        n: Grid dimension
        amplitude: Velocity amplitude
        modes: Number of vortex cells per side

    Returns:
        (vx, vy) velocity components
    """
    x, y = cell_centers(n)
    k = 2 * np.pi * modes

    vx = amplitude * np.sin(k * x) * np.cos(k * y)
    vy = -amplitude * np.cos(k * x) * np.sin(k * y)

    return vx, vy


def random_turbulence(n: int,
                      energy_level: float = 1e-4,
                      n_modes: int = 6,
                      rng: Optional[np.random.Generator] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Random divergence-free velocity with an E(k) ~ k^-2 spectrum

    Args:
        n: Grid dimension
        energy_level: Target mean of vx^2 + vy^2
        n_modes: Largest wavenumber magnitude excited
        rng: Random generator (a fresh default generator if None)

    Returns:
        (vx, vy) velocity components
    """
    if rng is None:
        rng = np.random.default_rng()

    # Initialize in Fourier space, indexed [k_y, k_x]
    u_hat = np.zeros((n, n), dtype=complex)
    v_hat = np.zeros((n, n), dtype=complex)

    for k_x in range(-n_modes, n_modes + 1):
        for k_y in range(-n_modes, n_modes + 1):
            if k_x == 0 and k_y == 0:
                continue

            k = np.sqrt(k_x**2 + k_y**2)
            if k > n_modes:
                continue

            amplitude = rng.standard_normal() / (k**2 + 1)
            phase = rng.random() * 2 * np.pi

            # Velocity perpendicular to the wavevector
            theta = np.arctan2(k_y, k_x)

            u_hat[k_y % n, k_x % n] = amplitude * np.exp(1j * phase) * (-np.sin(theta))
            v_hat[k_y % n, k_x % n] = amplitude * np.exp(1j * phase) * np.cos(theta)

    vx = np.real(ifft2(u_hat))
    vy = np.real(ifft2(v_hat))

    # Normalize to desired energy
    current_energy = np.mean(vx**2 + vy**2)
    scale = np.sqrt(energy_level / (current_energy + 1e-30))

    return vx * scale, vy * scale


def shear_flow(n: int, shear_rate: float = 0.01,
               perturbation: float = 0.001,
               rng: Optional[np.random.Generator] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sinusoidal shear layer with a small random perturbation

    Args:
        n: Grid dimension
        shear_rate: Amplitude of the base flow
        perturbation: Perturbation amplitude
        rng: Random generator

    Returns:
        (vx, vy) velocity components
    """
    if rng is None:
        rng = np.random.default_rng()

    x, y = cell_centers(n)

    vx = shear_rate * np.sin(2 * np.pi * y)
    vy = np.zeros_like(x)

    vx += perturbation * rng.standard_normal(x.shape)
    vy += perturbation * rng.standard_normal(x.shape)

    return vx, vy


def vortex_pair(n: int, separation: float = 0.5,
                strength: float = 0.001) -> Tuple[np.ndarray, np.ndarray]:
    """
    Counter-rotating vortex pair centred in the domain

    Args:
        n: Grid dimension
        separation: Distance between the vortex centres (unit square)
        strength: Vortex strength

    Returns:
        (vx, vy) velocity components
    """
    x, y = cell_centers(n)

    centers = [(1, (0.5 - separation / 2, 0.5)),
               (-1, (0.5 + separation / 2, 0.5))]

    vx = np.zeros_like(x)
    vy = np.zeros_like(y)

    for sign, (x0, y0) in centers:
        # Periodic minimum-image distance
        dx = (x - x0 + 0.5) % 1.0 - 0.5
        dy = (y - y0 + 0.5) % 1.0 - 0.5

        r_squared = dx**2 + dy**2 + 0.01  # Regularization

        vx += sign * strength * dy / r_squared
        vy -= sign * strength * dx / r_squared

    return vx, vy


def gaussian_puff(n: int, center: Tuple[float, float] = (0.5, 0.5),
                  radius: float = 0.1, amplitude: float = 10.0) -> np.ndarray:
    """
    Gaussian blob of smoke density

    Args:
        n: Grid dimension
        center: Blob centre in the unit square
        radius: Standard deviation
        amplitude: Peak density

    Returns:
        Density field
    """
    x, y = cell_centers(n)

    dx = (x - center[0] + 0.5) % 1.0 - 0.5
    dy = (y - center[1] + 0.5) % 1.0 - 0.5

    return amplitude * np.exp(-(dx**2 + dy**2) / (2 * radius**2))

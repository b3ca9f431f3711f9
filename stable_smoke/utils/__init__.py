"""Utility functions for smoke simulations"""

from .initial_conditions import (
    taylor_green_vortex,
    random_turbulence,
    shear_flow,
    vortex_pair,
    gaussian_puff
)

__all__ = [
    'taylor_green_vortex',
    'random_turbulence',
    'shear_flow',
    'vortex_pair',
    'gaussian_puff'
]

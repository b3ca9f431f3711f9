"""Numerical methods for the stable fluids solver"""

from .spectral_methods_2d import SpectralTransform2D
from .advection import advect, backtrace, sample_bilinear
from .time_integration import SimulationDriver

__all__ = [
    'SpectralTransform2D',
    'advect',
    'backtrace',
    'sample_bilinear',
    'SimulationDriver'
]

"""
Stable Fluids Smoke Simulation

Incompressible 2D flow on a periodic grid with semi-Lagrangian advection
and FFT-based viscosity and projection, carrying a passive smoke density.
"""

__version__ = "0.1.0"

from .core import SimulationConfig
from .physics import Simulation

__all__ = [
    'SimulationConfig',
    'Simulation'
]

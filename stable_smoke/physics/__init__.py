"""Physics implementations for the stable fluids smoke simulation"""

from .stable_fluid_2d import ForcingPolicy, StableFluidSolver2D, transport_density
from .simulation import Simulation

__all__ = [
    'ForcingPolicy',
    'StableFluidSolver2D',
    'transport_density',
    'Simulation'
]

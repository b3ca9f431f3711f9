"""Core data structures: grid storage, configuration and errors"""

from .config import SimulationConfig
from .errors import (
    SimulationError,
    AllocationError,
    TransformSetupError,
    RepresentationError,
    SimulationNotInitializedError
)
from .grid import GridStorage, SpectralBuffer, clamp, wrap, padded_row_length

__all__ = [
    'SimulationConfig',
    'SimulationError',
    'AllocationError',
    'TransformSetupError',
    'RepresentationError',
    'SimulationNotInitializedError',
    'GridStorage',
    'SpectralBuffer',
    'clamp',
    'wrap',
    'padded_row_length'
]

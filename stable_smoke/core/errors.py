"""
Error classes for the smoke simulation
"""


class SimulationError(Exception):
    """Base class for all simulation errors"""


class AllocationError(SimulationError, MemoryError):
    """
    A field buffer could not be allocated.

    Raised by grid initialization; the simulation cannot be constructed.
    """

    def __init__(self, buffer_name: str, shape: tuple, cause: BaseException = None):
        self.buffer_name = buffer_name
        self.shape = shape
        message = f"Failed to allocate buffer '{buffer_name}' with shape {shape}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class TransformSetupError(SimulationError, ValueError):
    """The spectral transform could not be set up for the requested grid size"""


class RepresentationError(SimulationError):
    """A scratch buffer was read as spatial data while holding frequencies, or vice versa"""


class SimulationNotInitializedError(SimulationError):
    """An operation was attempted on a simulation without allocated fields"""

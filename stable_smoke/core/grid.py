"""
Field storage on the periodic N x N grid

All fields are 2D numpy arrays indexed [j, i] so that the row-major flat
index of cell (i, j) is i + N*j. The two velocity scratch buffers carry the
extra padding needed by the in-place real-to-complex transform.
"""

import logging
import numpy as np
from typing import Dict, Tuple, Union

from .errors import AllocationError, RepresentationError

logger = logging.getLogger(__name__)

FIELD_NAMES = ('vx', 'vy', 'fx', 'fy', 'rho', 'rho0')


def wrap(k: Union[int, np.ndarray], n: int) -> Union[int, np.ndarray]:
    """
    Map an index onto [0, n) with periodic wrapping

    Args:
        k: Index or integer array, possibly negative or >= n
        n: Grid dimension

    Returns:
        Wrapped index
    """
    return (n + (k % n)) % n


def clamp(x: Union[float, np.ndarray]) -> Union[int, np.ndarray]:
    """
    Floor-equivalent integer conversion

    Plain truncation sends -0.3 to 0 instead of -1, which picks the wrong
    source cell on the negative side of the periodic seam.

    Args:
        x: Real value or array

    Returns:
        floor(x) as int, or as an integer array for array input
    """
    if np.ndim(x) == 0:
        return int(np.floor(x))
    return np.floor(x).astype(np.intp)


def padded_row_length(n: int) -> int:
    """Row stride of a buffer holding n//2+1 interleaved complex values per row"""
    return 2 * (n // 2 + 1)


def _allocate(name: str, shape: Tuple[int, int]) -> np.ndarray:
    try:
        return np.zeros(shape, dtype=np.float64)
    except (MemoryError, ValueError) as e:
        raise AllocationError(name, shape, e) from e


class SpectralBuffer:
    """
    Padded scratch buffer that holds either spatial samples or a half spectrum

    The same memory is read as an (n, n) real block (spatial) or as an
    (n, n//2+1) complex block (frequency). The current meaning is tracked in
    `representation` and the views refuse access in the wrong state.
    """

    SPATIAL = 'spatial'
    FREQUENCY = 'frequency'

    def __init__(self, n: int, name: str = 'scratch'):
        """
        Allocate a zeroed padded buffer

        Args:
            n: Grid dimension
            name: Buffer name used in error messages
        """
        self.n = n
        self.name = name
        self.data = _allocate(name, (n, padded_row_length(n)))
        self.representation = self.SPATIAL

    @property
    def spatial(self) -> np.ndarray:
        """Writable (n, n) view of the spatial samples"""
        if self.representation != self.SPATIAL:
            raise RepresentationError(
                f"Buffer '{self.name}' holds frequency data; inverse-transform it first"
            )
        return self.data[:, :self.n]

    @property
    def spectrum(self) -> np.ndarray:
        """Writable (n, n//2+1) complex view of the half spectrum"""
        if self.representation != self.FREQUENCY:
            raise RepresentationError(
                f"Buffer '{self.name}' holds spatial data; forward-transform it first"
            )
        return self.data.view(np.complex128)

    def set_representation(self, representation: str):
        """Retag the buffer after its contents were transformed in place"""
        if representation not in (self.SPATIAL, self.FREQUENCY):
            raise ValueError(f"Unknown representation: {representation}")
        self.representation = representation

    def clear(self):
        """Zero the buffer and return it to the spatial representation"""
        self.data.fill(0.0)
        self.representation = self.SPATIAL


class GridStorage:
    """
    Owns every field buffer of the simulation for one grid size

    Fields:
        vx, vy:   current velocity
        vx0, vy0: padded scratch buffers (previous velocity / spectrum)
        fx, fy:   accumulated external forces
        rho:      current smoke density
        rho0:     decayed density, source of the density advection
    """

    def __init__(self, n: int):
        """
        Allocate and zero all fields

        Args:
            n: Grid dimension

        Raises:
            AllocationError: If any buffer cannot be allocated
        """
        self.n = n

        self.vx = _allocate('vx', (n, n))
        self.vy = _allocate('vy', (n, n))
        self.vx0 = SpectralBuffer(n, 'vx0')
        self.vy0 = SpectralBuffer(n, 'vy0')
        self.fx = _allocate('fx', (n, n))
        self.fy = _allocate('fy', (n, n))
        self.rho = _allocate('rho', (n, n))
        self.rho0 = _allocate('rho0', (n, n))

        logger.debug("Allocated %dx%d grid (scratch row stride %d)",
                     n, n, padded_row_length(n))

    def fields(self) -> Dict[str, np.ndarray]:
        """The unpadded fields by name"""
        return {name: getattr(self, name) for name in FIELD_NAMES}

    def get(self, name: str, i: int, j: int) -> float:
        """Value of field `name` at cell (i, j), coordinates wrapped"""
        return float(self.fields()[name][wrap(j, self.n), wrap(i, self.n)])

    def set(self, name: str, i: int, j: int, value: float):
        """Write field `name` at cell (i, j), coordinates wrapped"""
        self.fields()[name][wrap(j, self.n), wrap(i, self.n)] = value

    def get_linear(self, name: str, k: int) -> float:
        """Value of field `name` at row-major index k = i + N*j"""
        return float(self.fields()[name].reshape(-1)[k])

    def set_linear(self, name: str, k: int, value: float):
        """Write field `name` at row-major index k = i + N*j"""
        self.fields()[name].reshape(-1)[k] = value

    def reset(self):
        """Zero every field in place"""
        for field in self.fields().values():
            field.fill(0.0)
        self.vx0.clear()
        self.vy0.clear()

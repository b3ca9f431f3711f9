"""
Semi-Lagrangian advection on the periodic grid
"""

import numpy as np
from typing import Optional, Tuple
from ..core.grid import clamp, wrap


def cell_centers(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Continuous cell-centre coordinates in the unit square

    Returns:
        (x, y) arrays of shape (n, n), indexed [j, i]
    """
    c = (np.arange(n) + 0.5) / n
    return np.meshgrid(c, c)


def sample_bilinear(field: np.ndarray, px: np.ndarray, py: np.ndarray) -> np.ndarray:
    """
    Bilinear interpolation of a periodic field at grid coordinates

    Args:
        field: (n, n) array indexed [j, i]
        px: Continuous x (column) coordinates in cell units, any shape
        py: Continuous y (row) coordinates in cell units, same shape as px

    Returns:
        Interpolated values with the shape of px
    """
    n = field.shape[0]

    i0 = clamp(px)
    j0 = clamp(py)
    s = px - i0
    t = py - j0

    i0 = wrap(i0, n)
    j0 = wrap(j0, n)
    i1 = (i0 + 1) % n
    j1 = (j0 + 1) % n

    return ((1 - s) * ((1 - t) * field[j0, i0] + t * field[j1, i0]) +
            s * ((1 - t) * field[j0, i1] + t * field[j1, i1]))


def backtrace(u: np.ndarray, v: np.ndarray, dt: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Departure points of the backward trace from every cell centre

    Args:
        u: x velocity, (n, n)
        v: y velocity, (n, n)
        dt: Time step

    Returns:
        (x0, y0) departure coordinates in cell units
    """
    n = u.shape[0]
    x, y = cell_centers(n)

    x0 = n * (x - dt * u) - 0.5
    y0 = n * (y - dt * v) - 0.5

    return x0, y0


def advect(source: np.ndarray, u: np.ndarray, v: np.ndarray, dt: float,
           out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Value of `source` one step back along the flow, for every cell

    Reads only from `source` and writes only to `out`; the two must not
    be the same array.

    Args:
        source: Field to transport, (n, n)
        u: x velocity used for the trace
        v: y velocity used for the trace
        dt: Time step
        out: Optional destination array

    Returns:
        Advected field (`out` when given)
    """
    if out is not None and np.shares_memory(out, source):
        raise ValueError("advect() cannot write into its own source field")

    x0, y0 = backtrace(u, v, dt)
    result = sample_bilinear(source, x0, y0)

    if out is None:
        return result
    out[...] = result
    return out

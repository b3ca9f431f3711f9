"""
Colour maps for smoke density and velocity glyphs

Every function is vectorised and returns RGB values in [0, 1] with a
trailing axis of length 3.
"""

import numpy as np
from matplotlib.colors import hsv_to_rgb

COLOR_BLACKWHITE = 0
COLOR_RAINBOW = 1
COLOR_BANDS = 2
N_SCALAR_COLORMAPS = 3

N_BANDS = 7

GLYPH_WHITE = 0
GLYPH_DIRECTION = 1
GLYPH_DENSITY = 2
GLYPH_RED = 3
N_GLYPH_COLORINGS = 4


def black_white(value: np.ndarray) -> np.ndarray:
    """Grey level equal to the clipped value"""
    v = np.clip(np.asarray(value, dtype=float), 0.0, 1.0)
    return np.stack([v, v, v], axis=-1)


def rainbow(value: np.ndarray) -> np.ndarray:
    """
    Rainbow palette: blue for 0 through green to red for 1

    Args:
        value: Scalars, clipped to [0, 1]

    Returns:
        RGB array
    """
    dx = 0.8
    v = np.clip(np.asarray(value, dtype=float), 0.0, 1.0)
    v = (6 - 2 * dx) * v + dx

    r = np.maximum(0.0, (3 - np.abs(v - 4) - np.abs(v - 5)) / 2)
    g = np.maximum(0.0, (4 - np.abs(v - 2) - np.abs(v - 4)) / 2)
    b = np.maximum(0.0, (3 - np.abs(v - 1) - np.abs(v - 2)) / 2)

    return np.stack([r, g, b], axis=-1)


def banded(value: np.ndarray, n_levels: int = N_BANDS) -> np.ndarray:
    """Rainbow palette quantized to n_levels bands"""
    v = np.asarray(value, dtype=float) * n_levels
    v = np.trunc(v) / n_levels
    return rainbow(v)


def scalar_colormap(value: np.ndarray, method: int) -> np.ndarray:
    """
    Map scalars to colours with one of the scalar colour maps

    Args:
        value: Scalars, expected in [0, 1]
        method: COLOR_BLACKWHITE, COLOR_RAINBOW or COLOR_BANDS
    """
    if method == COLOR_BLACKWHITE:
        return black_white(value)
    elif method == COLOR_RAINBOW:
        return rainbow(value)
    elif method == COLOR_BANDS:
        return banded(value)
    else:
        raise ValueError(f"Unknown colormap: {method}")


def direction_color(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Colour encoding the angle of a vector (x, y)

    The three channels are triangle waves of the angle, offset by a third
    of a turn each.
    """
    f = np.arctan2(y, x) / np.pi + 1

    def _triangle(c):
        c = np.where(c > 2, c - 2, c)
        return np.where(c > 1, 2 - c, c)

    r = _triangle(f)
    g = _triangle(f + 2.0 / 3.0)
    b = _triangle(f + 4.0 / 3.0)

    return np.stack([r, g, b], axis=-1)


def glyph_colors(x: np.ndarray, y: np.ndarray, density: np.ndarray,
                 method: int) -> np.ndarray:
    """
    Colours for velocity glyphs

    Args:
        x, y: Vector components at the glyph positions
        density: Smoke density at the glyph positions, used as hue
        method: GLYPH_WHITE, GLYPH_DIRECTION, GLYPH_DENSITY or GLYPH_RED
    """
    x = np.asarray(x, dtype=float)
    shape = x.shape + (3,)

    if method == GLYPH_WHITE:
        return np.ones(shape)
    elif method == GLYPH_DIRECTION:
        return direction_color(x, y)
    elif method == GLYPH_DENSITY:
        hue = np.clip(np.asarray(density, dtype=float), 0.0, 1.0)
        hsv = np.stack([hue, np.ones_like(hue), np.ones_like(hue)], axis=-1)
        return hsv_to_rgb(hsv)
    elif method == GLYPH_RED:
        rgb = np.zeros(shape)
        rgb[..., 0] = 1.0
        return rgb
    else:
        raise ValueError(f"Unknown glyph coloring: {method}")

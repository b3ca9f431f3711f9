"""
Smoke and velocity glyph visualization with matplotlib
"""

import logging
import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from typing import Optional, Tuple
from ..numerics.advection import sample_bilinear
from .colormaps import (
    COLOR_BLACKWHITE,
    GLYPH_WHITE,
    N_GLYPH_COLORINGS,
    N_SCALAR_COLORMAPS,
    glyph_colors,
    scalar_colormap
)

logger = logging.getLogger(__name__)

VECTOR_VELOCITY = 0
VECTOR_FORCE = 1

DRAG_FORCE = 0.1

KEY_HELP = """\
Click and drag the mouse to steer the flow!
T/t:   increase/decrease simulation timestep
S/s:   increase/decrease hedgehog scaling
c:     cycle through glyph color options
V/v:   increase/decrease fluid viscosity
x:     toggle drawing matter on/off
y:     toggle drawing hedgehogs on/off
m:     toggle thru scalar coloring
a:     toggle the animation on/off
G:     cycle between velocity and force glyphs
o/O:   increase/decrease glyph grid dimension x
p/P:   increase/decrease glyph grid dimension y
q:     quit"""

_BOUND_KEYS = set('tTSscVvxymaGoOpPq')


def free_keymaps() -> dict:
    """rcParams overrides that drop the viewer keys from matplotlib's navigation bindings"""
    return {
        param: [k for k in plt.rcParams[param] if k not in _BOUND_KEYS]
        for param in plt.rcParams if param.startswith('keymap.')
    }


def drag_to_cell(x: float, y: float, n: int) -> Tuple[int, int]:
    """
    Grid cell under a cursor position given in cell units, clamped to the grid
    """
    i = int(np.floor(x))
    j = int(np.floor(y))
    return min(max(i, 0), n - 1), min(max(j, 0), n - 1)


def drag_force(x: float, y: float, last_x: float, last_y: float,
               magnitude: float = DRAG_FORCE) -> Tuple[float, float]:
    """
    Force along the drag direction with a fixed magnitude

    Returns (0, 0) when the cursor did not move.
    """
    dx = x - last_x
    dy = y - last_y
    length = np.hypot(dx, dy)
    if length == 0.0:
        return 0.0, 0.0
    return dx * magnitude / length, dy * magnitude / length


class FlowVisualizer:
    """
    Draw smoke density and hedgehog glyphs of a Simulation

    Rendering options mirror the keyboard controls of the interactive viewer.
    """

    def __init__(self, simulation: 'Simulation', figsize: Tuple[int, int] = (8, 8)):
        """
        Initialize flow visualizer

        Args:
            simulation: Simulation whose fields are drawn
            figsize: Figure size
        """
        self.simulation = simulation
        self.figsize = figsize

        self.draw_smoke = False
        self.draw_vecs = True
        self.scalar_col = COLOR_BLACKWHITE
        self.glyph_coloring = GLYPH_WHITE
        self.vector_type = VECTOR_VELOCITY
        self.vec_scale = 1000.0
        self.vector_dim_x = simulation.n
        self.vector_dim_y = simulation.n

        self._last_mouse: Optional[Tuple[float, float]] = None

    def density_image(self) -> np.ndarray:
        """RGB image of the smoke density, indexed [j, i]"""
        return scalar_colormap(self.simulation.rho, self.scalar_col)

    def sample_vectors(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """
        Resample the selected vector field on the glyph grid

        Returns:
            (px, py, u, v): glyph positions in cell units and vector components
        """
        sim = self.simulation
        n = sim.n

        if self.vector_type == VECTOR_VELOCITY:
            fx, fy = sim.vx, sim.vy
        else:
            fx, fy = sim.fx, sim.fy

        step_x = n / self.vector_dim_x
        step_y = n / self.vector_dim_y
        px, py = np.meshgrid(step_x * np.arange(self.vector_dim_x),
                             step_y * np.arange(self.vector_dim_y))

        u = sample_bilinear(fx, px, py)
        v = sample_bilinear(fy, px, py)

        return px, py, u, v

    def render(self, ax: Optional[plt.Axes] = None) -> plt.Axes:
        """
        Draw the current frame

        Args:
            ax: Axes to draw into (a new figure if None)

        Returns:
            The axes
        """
        if ax is None:
            _, ax = plt.subplots(figsize=self.figsize)

        sim = self.simulation
        n = sim.n

        ax.clear()
        ax.set_facecolor('black')

        if self.draw_smoke:
            ax.imshow(self.density_image(), origin='lower',
                      extent=(0, n, 0, n), interpolation='bilinear')

        if self.draw_vecs:
            px, py, u, v = self.sample_vectors()
            rho = sample_bilinear(sim.rho, px, py)
            colors = glyph_colors(u, v, rho, self.glyph_coloring).reshape(-1, 3)
            ax.quiver(px + 0.5, py + 0.5, u * self.vec_scale, v * self.vec_scale,
                      color=colors, angles='xy', scale_units='xy', scale=1.0)

        ax.set_xlim(0, n)
        ax.set_ylim(0, n)
        ax.set_title(f'step {sim.step_count}  dt={sim.dt:.3f}  visc={sim.viscosity:.2e}'
                     + ('  [frozen]' if sim.frozen else ''))
        return ax

    def handle_key(self, key: str) -> bool:
        """
        Apply a keyboard command

        Returns:
            False when the key asks to quit, True otherwise
        """
        sim = self.simulation

        if key == 't':
            sim.dt -= 0.001
        elif key == 'T':
            sim.dt += 0.001
        elif key == 'c':
            self.glyph_coloring = (self.glyph_coloring + 1) % N_GLYPH_COLORINGS
        elif key == 'S':
            self.vec_scale *= 1.2
        elif key == 's':
            self.vec_scale *= 0.8
        elif key == 'V':
            sim.viscosity *= 5
        elif key == 'v':
            sim.viscosity *= 0.2
        elif key == 'x':
            self.draw_smoke = not self.draw_smoke
            if not self.draw_smoke:
                self.draw_vecs = True
        elif key == 'y':
            self.draw_vecs = not self.draw_vecs
            if not self.draw_vecs:
                self.draw_smoke = True
        elif key == 'm':
            self.scalar_col = (self.scalar_col + 1) % N_SCALAR_COLORMAPS
        elif key == 'a':
            sim.frozen = not sim.frozen
        elif key == 'G':
            self.vector_type = 1 - self.vector_type
        elif key == 'o':
            self.vector_dim_x += 1
        elif key == 'O':
            self.vector_dim_x = max(1, self.vector_dim_x - 1)
        elif key == 'p':
            self.vector_dim_y += 1
        elif key == 'P':
            self.vector_dim_y = max(1, self.vector_dim_y - 1)
        elif key == 'q':
            return False

        return True

    def handle_drag(self, x: float, y: float):
        """
        Inject force along the drag direction and smoke under the cursor

        Args:
            x, y: Cursor position in cell units
        """
        sim = self.simulation
        i, j = drag_to_cell(x, y, sim.n)

        if self._last_mouse is not None:
            dfx, dfy = drag_force(x, y, *self._last_mouse)
            sim.inject_force(i, j, dfx, dfy)
        sim.inject_density(i, j)

        self._last_mouse = (x, y)

    def release_drag(self):
        self._last_mouse = None

    def run(self, interval: int = 30) -> animation.FuncAnimation:
        """
        Open an interactive window that advances and redraws the simulation

        Args:
            interval: Milliseconds between frames

        Returns:
            Animation object
        """
        print(KEY_HELP)
        with plt.rc_context(free_keymaps()):
            return self._run(interval)

    def _run(self, interval: int) -> animation.FuncAnimation:
        fig, ax = plt.subplots(figsize=self.figsize)

        def on_key(event):
            if event.key is None:
                return
            if not self.handle_key(event.key):
                plt.close(fig)

        def on_motion(event):
            if event.inaxes is ax and event.button is not None and event.xdata is not None:
                self.handle_drag(event.xdata, event.ydata)

        def on_release(event):
            self.release_drag()

        fig.canvas.mpl_connect('key_press_event', on_key)
        fig.canvas.mpl_connect('motion_notify_event', on_motion)
        fig.canvas.mpl_connect('button_release_event', on_release)

        def update(frame):
            self.simulation.advance()
            self.render(ax)
            return []

        anim = animation.FuncAnimation(fig, update, interval=interval,
                                       blit=False, cache_frame_data=False)
        logger.debug("Interactive viewer started")
        plt.show()

        return anim

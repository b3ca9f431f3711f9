"""Visualization tools for smoke simulations"""

from .flow_viz import FlowVisualizer, drag_force, drag_to_cell
from .diagnostics import DiagnosticPlotter

__all__ = [
    'FlowVisualizer',
    'DiagnosticPlotter',
    'drag_force',
    'drag_to_cell'
]

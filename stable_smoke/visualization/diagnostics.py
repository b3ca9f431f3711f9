"""
Diagnostic plotting for smoke simulations
"""

import json
import numpy as np
import matplotlib.pyplot as plt
from typing import List, Dict, Optional
from ..core.config import SimulationConfig


class DiagnosticPlotter:
    """
    Record and plot diagnostic quantities of a simulation run
    """

    def __init__(self):
        """Initialize diagnostic plotter"""
        self.history: Dict[str, List[float]] = {
            'time': [],
            'energy': [],
            'max_velocity': [],
            'total_density': [],
            'max_force': [],
            'max_divergence': []
        }

    def update(self, simulation: 'Simulation'):
        """
        Update diagnostic history with the current simulation state

        Args:
            simulation: Simulation to sample
        """
        self.history['time'].append(simulation.time)
        self.history['energy'].append(simulation.kinetic_energy())

        vel_mag = np.hypot(simulation.vx, simulation.vy)
        self.history['max_velocity'].append(float(np.max(vel_mag)))

        self.history['total_density'].append(simulation.total_density())

        force_mag = np.hypot(simulation.fx, simulation.fy)
        self.history['max_force'].append(float(np.max(force_mag)))

        self.history['max_divergence'].append(simulation.max_divergence())

    def plot_time_series(self) -> plt.Figure:
        """
        Plot time series of diagnostic quantities

        Returns:
            Figure object
        """
        fig, axes = plt.subplots(3, 2, figsize=(12, 10))
        axes = axes.flatten()

        t = np.array(self.history['time'])

        panels = [
            ('energy', 'Energy', 'Kinetic Energy', 'b-', False),
            ('max_velocity', 'Max |v|', 'Maximum Velocity', 'g-', False),
            ('total_density', 'Density', 'Total Smoke Density', 'm-', False),
            ('max_force', 'Max |f|', 'Maximum Pending Force', 'r-', False),
            ('max_divergence', 'Max |div v|', 'Maximum Divergence', 'c-', True),
        ]

        for ax, (key, ylabel, title, style, log) in zip(axes, panels):
            values = np.array(self.history[key])
            if log and np.any(values > 0):
                ax.semilogy(t, values, style, linewidth=2)
            else:
                ax.plot(t, values, style, linewidth=2)
            ax.set_xlabel('Time')
            ax.set_ylabel(ylabel)
            ax.set_title(title)
            ax.grid(True, alpha=0.3)

        axes[-1].axis('off')

        plt.tight_layout()
        return fig

    def plot_decay_check(self, density_decay: Optional[float] = None) -> plt.Figure:
        """
        Compare per-step density and energy ratios against the density decay

        Args:
            density_decay: Reference ratio per sample (defaults to
                           SimulationConfig.density_decay)

        Returns:
            Figure object
        """
        if density_decay is None:
            density_decay = SimulationConfig.density_decay

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 8))

        t = np.array(self.history['time'])
        density = np.array(self.history['total_density'])
        energy = np.array(self.history['energy'])

        if len(t) > 1:
            with np.errstate(divide='ignore', invalid='ignore'):
                density_ratio = density[1:] / density[:-1]
                energy_ratio = energy[1:] / energy[:-1]

            ax1.plot(t[1:], density_ratio, 'm-', linewidth=2)
            ax1.axhline(density_decay, color='gray', linestyle='--', alpha=0.5)
            ax1.set_xlabel('Time')
            ax1.set_ylabel('rho(t+1) / rho(t)')
            ax1.set_title('Density Decay per Sample')
            ax1.grid(True, alpha=0.3)

            ax2.plot(t[1:], energy_ratio, 'b-', linewidth=2)
            ax2.set_xlabel('Time')
            ax2.set_ylabel('E(t+1) / E(t)')
            ax2.set_title('Energy Ratio per Sample')
            ax2.grid(True, alpha=0.3)

        plt.tight_layout()
        return fig

    def save_diagnostics(self, filename: str):
        """
        Save diagnostic data to file

        Args:
            filename: Output filename
        """
        data = {}
        for key, values in self.history.items():
            data[key] = [float(v) for v in values]

        with open(filename, 'w') as f:
            json.dump(data, f, indent=2)

    def load_diagnostics(self, filename: str):
        """
        Load diagnostic data from file

        Args:
            filename: Input filename
        """
        with open(filename, 'r') as f:
            data = json.load(f)

        self.history = data

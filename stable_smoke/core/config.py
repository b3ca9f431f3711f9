"""
Simulation parameters
"""

import json
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict


@dataclass
class SimulationConfig:
    """
    Tunable parameters of the smoke simulation

    Defaults reproduce the classic interactive smoke demo on a 50x50 grid.
    Values are not range checked: a large dt or viscosity may make the
    solver unstable.
    """
    grid_size: int = 50             # N, cells per side
    dt: float = 0.04                # Integration step
    viscosity: float = 0.001        # Spectral damping strength
    force_decay: float = 0.85       # Per-tick decay of accumulated forces
    density_decay: float = 0.995    # Per-tick decay of smoke density
    injected_density: float = 10.0  # Value written by inject_density
    check_finite: bool = False      # Log a warning when NaN/Inf appear

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """
        Build a configuration from a dictionary

        Args:
            data: Mapping of field names to values; missing fields keep defaults

        Returns:
            New configuration

        Raises:
            ValueError: If the mapping contains unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)

    def save(self, filename: str):
        """
        Save configuration to a JSON file

        Args:
            filename: Output filename
        """
        with open(filename, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filename: str) -> 'SimulationConfig':
        """
        Load configuration from a JSON file

        Args:
            filename: Input filename
        """
        with open(filename, 'r') as f:
            data = json.load(f)

        return cls.from_dict(data)

"""
Simulation defaults and tunable parameters.

The user-facing ranges are what a control panel should offer; the config
itself accepts anything the validators allow (for example theta = 0 for
exact summation).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .spatial.quadtree import MIN_GIZMO_NODE_SIZE
from .spatial.region import Region
from .validation import validate_config

DEFAULT_G = 100.0
DEFAULT_THETA = 0.5
DEFAULT_DT = 1.0 / 60.0
DEFAULT_TIME_SCALE = 1.0
SOFTENING = 5.0

DEFAULT_BOUNDS_SIZE = 2000.0

G_RANGE = (10.0, 500.0)
THETA_RANGE = (0.1, 1.0)
TIME_SCALE_RANGE = (0.1, 5.0)


def clamp_time_scale(value: float) -> float:
    """Clamp a time-scale multiplier into TIME_SCALE_RANGE."""
    low, high = TIME_SCALE_RANGE
    return max(low, min(high, float(value)))


@dataclass
class SimConfig:
    """
    Physical parameters used by the force evaluator and integrator.

    Attributes:
        g: Gravitational constant
        theta: Barnes-Hut acceptance threshold (0 = exact)
        dt: Base timestep, scaled by SimSettings.time_scale each tick
        softening: Softening length added to squared distances
    """

    g: float = DEFAULT_G
    theta: float = DEFAULT_THETA
    dt: float = DEFAULT_DT
    softening: float = SOFTENING

    def __post_init__(self) -> None:
        self.g = float(self.g)
        self.theta = float(self.theta)
        self.dt = float(self.dt)
        self.softening = float(self.softening)
        validate_config(self)


@dataclass
class SimSettings:
    """User-adjustable run settings."""

    time_scale: float = DEFAULT_TIME_SCALE

    def __post_init__(self) -> None:
        self.time_scale = clamp_time_scale(self.time_scale)


def default_bounds() -> Region:
    """Region used before the first rebuild and after a reset."""
    return Region(0.0, 0.0, DEFAULT_BOUNDS_SIZE, DEFAULT_BOUNDS_SIZE)


@dataclass
class SimulationBounds:
    """Root region of the most recent rebuild."""

    root: Region = field(default_factory=default_bounds)


__all__ = [
    "DEFAULT_G",
    "DEFAULT_THETA",
    "DEFAULT_DT",
    "DEFAULT_TIME_SCALE",
    "SOFTENING",
    "DEFAULT_BOUNDS_SIZE",
    "MIN_GIZMO_NODE_SIZE",
    "G_RANGE",
    "THETA_RANGE",
    "TIME_SCALE_RANGE",
    "SimConfig",
    "SimSettings",
    "SimulationBounds",
    "clamp_time_scale",
    "default_bounds",
]

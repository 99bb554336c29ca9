"""
nbody-quadtree: Barnes-Hut gravity simulation in Python.

This package approximates gravitational interaction among many 2D point
masses with a quadtree, trading exactness for O(n log n) force evaluation.

Available components:
- spatial: Region and arena-backed QuadTree (index + force evaluator)
- simulation: BarnesHutSimulation step driver and DirectSimulation reference
- gravity: Softened point-mass kernel and direct pairwise summation
- metrics: Energy, momentum and force-error diagnostics
"""

__version__ = "0.1.0"

# Base class for building simulation drivers
from .base import BaseSimulation

# Configuration
from .config import (
    DEFAULT_DT,
    DEFAULT_G,
    DEFAULT_THETA,
    DEFAULT_TIME_SCALE,
    G_RANGE,
    SOFTENING,
    THETA_RANGE,
    TIME_SCALE_RANGE,
    SimConfig,
    SimSettings,
    SimulationBounds,
    default_bounds,
)

# Gravity kernel
from .gravity import direct_force, direct_forces, point_mass_force

# Diagnostics
from .metrics import (
    center_of_mass,
    kinetic_energy,
    linear_momentum,
    relative_force_error,
    simulation_summary,
    total_mass,
)

# Simulation drivers
from .simulation import BarnesHutSimulation, DirectSimulation

# Spatial data structures
from .spatial import NodeKind, QuadTree, QuadTreeNode, Region

# Shared types
from .types import Body, BodyLike, Event, EventType

# Validation utilities
from .validation import (
    CoincidentBodyWarning,
    InvalidBodyError,
    InvalidConfigError,
    InvalidRegionError,
    PerformanceWarning,
    ValidationError,
)

__all__ = [
    # Version
    "__version__",
    # Shared types
    "Body",
    "BodyLike",
    "Event",
    "EventType",
    # Configuration
    "DEFAULT_G",
    "DEFAULT_THETA",
    "DEFAULT_DT",
    "DEFAULT_TIME_SCALE",
    "SOFTENING",
    "G_RANGE",
    "THETA_RANGE",
    "TIME_SCALE_RANGE",
    "SimConfig",
    "SimSettings",
    "SimulationBounds",
    "default_bounds",
    # Spatial data structures
    "Region",
    "NodeKind",
    "QuadTree",
    "QuadTreeNode",
    # Gravity
    "point_mass_force",
    "direct_force",
    "direct_forces",
    # Simulation drivers
    "BaseSimulation",
    "BarnesHutSimulation",
    "DirectSimulation",
    # Metrics
    "total_mass",
    "center_of_mass",
    "kinetic_energy",
    "linear_momentum",
    "relative_force_error",
    "simulation_summary",
    # Validation
    "ValidationError",
    "InvalidBodyError",
    "InvalidConfigError",
    "InvalidRegionError",
    "CoincidentBodyWarning",
    "PerformanceWarning",
]

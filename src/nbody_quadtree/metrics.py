"""
Simulation diagnostics.

Provides quantitative measures over a body set or a force field:
- Total mass and center of mass
- Kinetic energy and linear momentum
- Relative error of an approximate force field against an exact one

All metrics work with the current body state of any simulation driver.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Optional, Sequence, Tuple

import numpy as np

from .types import Body

if TYPE_CHECKING:
    from .base import BaseSimulation


def total_mass(bodies: Sequence[Body]) -> float:
    """Sum of all body masses."""
    return float(sum(b.mass for b in bodies))


def center_of_mass(bodies: Sequence[Body]) -> Optional[Tuple[float, float]]:
    """
    Mass-weighted mean position of the bodies.

    Returns:
        (x, y), or None if there is no mass
    """
    mass = total_mass(bodies)
    if mass <= 0:
        return None
    x = sum(b.x * b.mass for b in bodies) / mass
    y = sum(b.y * b.mass for b in bodies) / mass
    return x, y


def kinetic_energy(bodies: Sequence[Body]) -> float:
    """Total kinetic energy, sum of m * |v|^2 / 2."""
    return float(sum(0.5 * b.mass * (b.vx * b.vx + b.vy * b.vy) for b in bodies))


def linear_momentum(bodies: Sequence[Body]) -> Tuple[float, float]:
    """Total linear momentum (px, py)."""
    px = sum(b.mass * b.vx for b in bodies)
    py = sum(b.mass * b.vy for b in bodies)
    return float(px), float(py)


def relative_force_error(approx: np.ndarray, exact: np.ndarray) -> float:
    """
    RMS error of a force field relative to the RMS exact magnitude.

    Args:
        approx: Approximate forces, shape (n, 2)
        exact: Reference forces, shape (n, 2)

    Returns:
        sqrt(sum |approx - exact|^2 / sum |exact|^2), or 0.0 when the
        reference field is identically zero

    Raises:
        ValueError: If the arrays have different shapes
    """
    approx = np.asarray(approx, dtype=np.float64)
    exact = np.asarray(exact, dtype=np.float64)
    if approx.shape != exact.shape:
        raise ValueError(f"Shape mismatch: {approx.shape} vs {exact.shape}")

    denom = float(np.sum(exact * exact))
    if denom == 0.0:
        return 0.0
    diff = approx - exact
    return math.sqrt(float(np.sum(diff * diff)) / denom)


def simulation_summary(sim: BaseSimulation) -> dict[str, Any]:
    """
    Collect the main diagnostics of a simulation in one dict.

    Args:
        sim: Any simulation driver

    Returns:
        Dictionary with body count, step count, elapsed time, total mass,
        center of mass, kinetic energy and linear momentum
    """
    bodies = sim.bodies
    return {
        "bodies": len(bodies),
        "steps": sim.step_count,
        "time": sim.elapsed,
        "total_mass": total_mass(bodies),
        "center_of_mass": center_of_mass(bodies),
        "kinetic_energy": kinetic_energy(bodies),
        "linear_momentum": linear_momentum(bodies),
    }


__all__ = [
    "center_of_mass",
    "kinetic_energy",
    "linear_momentum",
    "relative_force_error",
    "simulation_summary",
    "total_mass",
]

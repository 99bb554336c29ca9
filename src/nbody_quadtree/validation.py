"""
Input validation utilities for the n-body simulation.

Provides centralized validation functions for bodies, regions and
simulation parameters. Raises descriptive exceptions on invalid input.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Hashable, Iterable, Optional

if TYPE_CHECKING:
    from .config import SimConfig


class ValidationError(ValueError):
    """Base exception for simulation validation errors."""

    pass


class InvalidBodyError(ValidationError):
    """Raised when a body has an unusable mass or position."""

    pass


class InvalidConfigError(ValidationError):
    """Raised when a simulation parameter is out of range."""

    pass


class InvalidRegionError(ValidationError):
    """Raised when region dimensions are invalid."""

    pass


class CoincidentBodyWarning(UserWarning):
    """Bodies closer than the merge distance were folded into one leaf."""

    pass


class PerformanceWarning(UserWarning):
    """Warning about performance-related issues."""

    pass


def validate_mass(mass: float, index: Optional[int] = None) -> float:
    """
    Validate a body mass.

    Args:
        mass: Body mass
        index: Body index, used in the error message

    Returns:
        Validated mass as float

    Raises:
        InvalidBodyError: If mass is not a positive finite number
    """
    mass = float(mass)
    if not math.isfinite(mass) or mass <= 0:
        raise InvalidBodyError(f"Body {index}: mass must be positive, got {mass}")
    return mass


def validate_position(x: float, y: float, index: Optional[int] = None) -> tuple[float, float]:
    """
    Validate a body position.

    Raises:
        InvalidBodyError: If either coordinate is NaN or infinite
    """
    x, y = float(x), float(y)
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidBodyError(f"Body {index}: position must be finite, got ({x}, {y})")
    return x, y


def validate_unique_ids(ids: Iterable[Hashable]) -> None:
    """
    Validate that body identifiers do not repeat.

    The force evaluator skips the leaf carrying the target's id, so two
    bodies sharing an id would ignore each other.

    Raises:
        InvalidBodyError: On the first repeated id
    """
    seen: set[Hashable] = set()
    for body_id in ids:
        if body_id in seen:
            raise InvalidBodyError(f"Duplicate body index {body_id!r}")
        seen.add(body_id)


def validate_gravity(g: float) -> float:
    """
    Validate the gravitational constant.

    Raises:
        InvalidConfigError: If g <= 0
    """
    g = float(g)
    if not math.isfinite(g) or g <= 0:
        raise InvalidConfigError(f"g must be positive, got {g}")
    return g


def validate_theta(theta: float) -> float:
    """
    Validate the Barnes-Hut acceptance threshold.

    Zero is allowed and disables approximation entirely.

    Raises:
        InvalidConfigError: If theta < 0
    """
    theta = float(theta)
    if math.isnan(theta) or theta < 0:
        raise InvalidConfigError(f"theta must be >= 0, got {theta}")
    return theta


def validate_timestep(dt: float) -> float:
    """
    Validate the base timestep.

    Raises:
        InvalidConfigError: If dt <= 0
    """
    dt = float(dt)
    if not math.isfinite(dt) or dt <= 0:
        raise InvalidConfigError(f"dt must be positive, got {dt}")
    return dt


def validate_softening(softening: float) -> float:
    """
    Validate the softening length.

    Raises:
        InvalidConfigError: If softening < 0
    """
    softening = float(softening)
    if not math.isfinite(softening) or softening < 0:
        raise InvalidConfigError(f"softening must be >= 0, got {softening}")
    return softening


def validate_workers(workers: Optional[int]) -> Optional[int]:
    """
    Validate the force-evaluation worker count.

    Raises:
        InvalidConfigError: If workers < 1
    """
    if workers is None:
        return None
    if int(workers) < 1:
        raise InvalidConfigError(f"workers must be >= 1, got {workers}")
    return int(workers)


def validate_region_size(width: float, height: float) -> tuple[float, float]:
    """
    Validate region dimensions.

    Raises:
        InvalidRegionError: If width or height is not positive
    """
    width, height = float(width), float(height)
    if not width > 0:
        raise InvalidRegionError(f"Region width must be positive, got {width}")
    if not height > 0:
        raise InvalidRegionError(f"Region height must be positive, got {height}")
    return width, height


def validate_config(config: SimConfig) -> SimConfig:
    """
    Validate every field of a simulation config.

    Returns:
        The same config, for chaining

    Raises:
        InvalidConfigError: On the first invalid field
    """
    validate_gravity(config.g)
    validate_theta(config.theta)
    validate_timestep(config.dt)
    validate_softening(config.softening)
    return config


__all__ = [
    "ValidationError",
    "InvalidBodyError",
    "InvalidConfigError",
    "InvalidRegionError",
    "CoincidentBodyWarning",
    "PerformanceWarning",
    "validate_mass",
    "validate_position",
    "validate_unique_ids",
    "validate_gravity",
    "validate_theta",
    "validate_timestep",
    "validate_softening",
    "validate_workers",
    "validate_region_size",
    "validate_config",
]

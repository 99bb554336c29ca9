"""
Common types for the n-body simulation.

This module provides the fundamental types shared by the spatial index and
the simulation drivers:
- Body: Point mass with position, velocity and acceleration
- EventType: Simulation lifecycle events
- Event: Event payload for callbacks
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Optional, TypedDict, Union


class EventType(IntEnum):
    """
    Simulation lifecycle events.

    - start: Simulation run has begun
    - tick: Fired once per simulation step
    - end: Run has finished or was stopped
    """

    start = 0
    tick = 1
    end = 2


class Event(TypedDict, total=False):
    """Event payload passed to event listeners."""

    type: EventType
    step: int
    time: float
    dt: float


class Body:
    """
    Point mass taking part in the simulation.

    Attributes:
        index: Stable identifier (set by the simulation if missing)
        x, y: Position
        vx, vy: Velocity
        ax, ay: Acceleration from the last force evaluation
        mass: Mass (must be positive)
    """

    def __init__(self, **kwargs: Any) -> None:
        """Initialize body with optional properties."""
        self.index: Optional[int] = kwargs.get("index")
        self.x: float = float(kwargs.get("x", 0.0))
        self.y: float = float(kwargs.get("y", 0.0))
        self.vx: float = float(kwargs.get("vx", 0.0))
        self.vy: float = float(kwargs.get("vy", 0.0))
        self.ax: float = float(kwargs.get("ax", 0.0))
        self.ay: float = float(kwargs.get("ay", 0.0))
        self.mass: float = float(kwargs.get("mass", 1.0))

        # Copy any additional custom properties (color, radius, ...)
        for key, value in kwargs.items():
            if not hasattr(self, key):
                setattr(self, key, value)

    def __repr__(self) -> str:
        return f"Body(index={self.index}, x={self.x:.2f}, y={self.y:.2f}, mass={self.mass:.2f})"


# Body input accepted by simulations: Body objects, dicts, or attribute objects
BodyLike = Union[Body, dict[str, Any], Any]


__all__ = [
    "Body",
    "BodyLike",
    "Event",
    "EventType",
]

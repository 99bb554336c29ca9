"""
Base class for n-body simulation drivers.

This module provides the abstract base class that defines the common
interface and shared functionality of every driver:

- BaseSimulation: Event system, body management, parameter properties,
  tick loop and semi-implicit Euler integration
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import TYPE_CHECKING, Callable, Optional, Sequence

import numpy as np

if TYPE_CHECKING:
    from typing_extensions import Self

from .config import (
    DEFAULT_DT,
    DEFAULT_G,
    DEFAULT_THETA,
    DEFAULT_TIME_SCALE,
    SOFTENING,
    SimConfig,
    SimSettings,
    SimulationBounds,
    clamp_time_scale,
)
from .types import Body, BodyLike, Event, EventType
from .validation import (
    validate_gravity,
    validate_mass,
    validate_position,
    validate_softening,
    validate_theta,
    validate_timestep,
    validate_unique_ids,
)


class BaseSimulation(ABC):
    """
    Abstract base class for n-body simulation drivers.

    Provides shared infrastructure:
    - Event system (start/tick/end events)
    - Body management via properties
    - Physical parameters (g, theta, dt, softening, time_scale)
    - Tick loop and integration

    Subclasses only decide how accelerations are computed.

    Example:
        sim = SomeSimulation(
            bodies=[{"x": 0, "y": 0, "mass": 1000}, {"x": 100, "y": 0, "vy": 30}],
            g=100.0,
            steps=600,
        )
        sim.run()

        for body in sim.bodies:
            print(f"Body {body.index}: ({body.x}, {body.y})")
    """

    def __init__(
        self,
        *,
        bodies: Optional[Sequence[BodyLike]] = None,
        g: float = DEFAULT_G,
        theta: float = DEFAULT_THETA,
        dt: float = DEFAULT_DT,
        softening: float = SOFTENING,
        time_scale: float = DEFAULT_TIME_SCALE,
        steps: int = 1,
        on_start: Optional[Callable[[Optional[Event]], None]] = None,
        on_tick: Optional[Callable[[Optional[Event]], None]] = None,
        on_end: Optional[Callable[[Optional[Event]], None]] = None,
    ) -> None:
        """
        Initialize simulation with configuration.

        Args:
            bodies: List of bodies (Body objects, dicts, or objects with attributes)
            g: Gravitational constant
            theta: Barnes-Hut acceptance threshold (0 = exact)
            dt: Base timestep
            softening: Softening length
            time_scale: Multiplier applied to dt each tick (clamped to 0.1-5.0)
            steps: Number of ticks performed by run()
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
        """
        self._bodies: list[Body] = []
        self._config = SimConfig(g=g, theta=theta, dt=dt, softening=softening)
        self._settings = SimSettings(time_scale=time_scale)
        self._bounds = SimulationBounds()
        self._events: dict[EventType, Callable[[Optional[Event]], None]] = {}
        self._steps: int = max(1, int(steps))
        self._step: int = 0
        self._elapsed: float = 0.0
        self._running: bool = False
        self._accelerations: np.ndarray = np.zeros((0, 2), dtype=np.float64)

        if bodies is not None:
            self.bodies = bodies

        # Register event callbacks
        if on_start:
            self._events[EventType.start] = on_start
        if on_tick:
            self._events[EventType.tick] = on_tick
        if on_end:
            self._events[EventType.end] = on_end

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def bodies(self) -> list[Body]:
        """Get the list of bodies."""
        return self._bodies

    @bodies.setter
    def bodies(self, value: Sequence[BodyLike]) -> None:
        """
        Set bodies from a sequence of Body objects, dicts, or objects.

        Raises:
            InvalidBodyError: If a body has a non-positive mass, a
                non-finite position, or an index used by another body.
        """
        bodies: list[Body] = []
        for body_data in value:
            if isinstance(body_data, Body):
                body = body_data
            elif isinstance(body_data, dict):
                body = Body(**body_data)
            else:
                # Generic object - copy attributes
                body = Body()
                for attr in ["index", "x", "y", "vx", "vy", "mass"]:
                    if hasattr(body_data, attr):
                        setattr(body, attr, getattr(body_data, attr))
            body.mass = validate_mass(body.mass, body.index)
            body.x, body.y = validate_position(body.x, body.y, body.index)
            bodies.append(body)

        # Ids as _initialize_indices() will assign them
        validate_unique_ids(b.index if b.index is not None else i for i, b in enumerate(bodies))

        self._bodies = bodies
        self._initialize_indices()
        self._accelerations = np.zeros((len(bodies), 2), dtype=np.float64)

    @property
    def config(self) -> SimConfig:
        """Get the physical parameters as a SimConfig."""
        return self._config

    @property
    def settings(self) -> SimSettings:
        """Get the user-adjustable run settings."""
        return self._settings

    @property
    def g(self) -> float:
        """Get gravitational constant."""
        return self._config.g

    @g.setter
    def g(self, value: float) -> None:
        """Set gravitational constant (must be positive)."""
        self._config = replace(self._config, g=validate_gravity(value))

    @property
    def theta(self) -> float:
        """Get Barnes-Hut theta parameter (accuracy)."""
        return self._config.theta

    @theta.setter
    def theta(self, value: float) -> None:
        """Set Barnes-Hut theta parameter (must be >= 0)."""
        self._config = replace(self._config, theta=validate_theta(value))

    @property
    def dt(self) -> float:
        """Get base timestep."""
        return self._config.dt

    @dt.setter
    def dt(self, value: float) -> None:
        """Set base timestep (must be positive)."""
        self._config = replace(self._config, dt=validate_timestep(value))

    @property
    def softening(self) -> float:
        """Get softening length."""
        return self._config.softening

    @softening.setter
    def softening(self, value: float) -> None:
        """Set softening length (must be >= 0)."""
        self._config = replace(self._config, softening=validate_softening(value))

    @property
    def time_scale(self) -> float:
        """Get time-scale multiplier."""
        return self._settings.time_scale

    @time_scale.setter
    def time_scale(self, value: float) -> None:
        """Set time-scale multiplier, clamped to TIME_SCALE_RANGE."""
        self._settings.time_scale = clamp_time_scale(value)

    @property
    def effective_dt(self) -> float:
        """Timestep actually integrated each tick (dt * time_scale)."""
        return self._config.dt * self._settings.time_scale

    @property
    def steps(self) -> int:
        """Get number of ticks performed by run()."""
        return self._steps

    @steps.setter
    def steps(self, value: int) -> None:
        """Set number of ticks performed by run() (minimum 1)."""
        self._steps = max(1, int(value))

    @property
    def step_count(self) -> int:
        """Number of ticks completed since construction or reset()."""
        return self._step

    @property
    def elapsed(self) -> float:
        """Simulated time since construction or reset()."""
        return self._elapsed

    @property
    def accelerations(self) -> np.ndarray:
        """Accelerations from the most recent force evaluation, shape (n, 2)."""
        return self._accelerations.copy()

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: Callable[[Optional[Event]], None]) -> Self:
        """
        Subscribe to a simulation event.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events[event] = callback
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callback.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is not None and event_type in self._events:
            self._events[event_type](event)

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    def run(self, steps: Optional[int] = None) -> Self:
        """
        Run the simulation for a number of ticks.

        Args:
            steps: Ticks to perform. Defaults to the ``steps`` property.

        Returns:
            self (for chaining)
        """
        if steps is not None:
            self.steps = steps
        self._running = True
        self.trigger({"type": EventType.start, "step": self._step, "time": self._elapsed})

        self.kick()

        self._running = False
        self.trigger({"type": EventType.end, "step": self._step, "time": self._elapsed})
        return self

    def kick(self) -> None:
        """Run tick() repeatedly until stopped or ``steps`` ticks are done."""
        for _ in range(self._steps):
            if self.tick():
                break

    def tick(self) -> bool:
        """
        Perform one simulation step.

        Computes accelerations for every body against the positions as they
        stand, then integrates all bodies.

        Returns:
            True if the simulation has been stopped, False otherwise.
        """
        acc = self.compute_accelerations()
        dt = self.effective_dt
        self._integrate(acc, dt)

        self._step += 1
        self._elapsed += dt
        self.trigger(
            {"type": EventType.tick, "step": self._step, "time": self._elapsed, "dt": dt}
        )
        return not self._running

    def stop(self) -> Self:
        """Stop the simulation after the current tick."""
        self._running = False
        return self

    def reset(self, bodies: Optional[Sequence[BodyLike]] = None) -> Self:
        """
        Restore default parameters and clear the step counter.

        Args:
            bodies: Replacement bodies. Current bodies are kept if None.

        Returns:
            self (for chaining)
        """
        self._config = SimConfig()
        self._settings = SimSettings()
        self._bounds = SimulationBounds()
        self._step = 0
        self._elapsed = 0.0
        self._running = False
        if bodies is not None:
            self.bodies = bodies
        else:
            self._accelerations = np.zeros((len(self._bodies), 2), dtype=np.float64)
        return self

    @abstractmethod
    def compute_accelerations(self) -> np.ndarray:
        """
        Compute the acceleration of every body.

        Implementations must store the result on each body (ax, ay) and in
        ``self._accelerations``.

        Returns:
            Array of shape (n, 2)
        """
        pass

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _initialize_indices(self) -> None:
        """Assign indices to bodies that don't have them."""
        for i, body in enumerate(self._bodies):
            if body.index is None:
                body.index = i

    def _positions(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Snapshot positions and masses into arrays."""
        n = len(self._bodies)
        xs = np.fromiter((b.x for b in self._bodies), dtype=np.float64, count=n)
        ys = np.fromiter((b.y for b in self._bodies), dtype=np.float64, count=n)
        masses = np.fromiter((b.mass for b in self._bodies), dtype=np.float64, count=n)
        return xs, ys, masses

    def _store_accelerations(self, acc: np.ndarray) -> np.ndarray:
        """Record accelerations on the bodies and in the output buffer."""
        for i, body in enumerate(self._bodies):
            body.ax = float(acc[i, 0])
            body.ay = float(acc[i, 1])
        self._accelerations = acc
        return acc

    def _integrate(self, acc: np.ndarray, dt: float) -> None:
        """
        Semi-implicit Euler step, then clear accelerations.

        v += a * dt; p += v * dt
        """
        n = len(self._bodies)
        if n == 0:
            return

        vel = np.empty((n, 2), dtype=np.float64)
        pos = np.empty((n, 2), dtype=np.float64)
        for i, body in enumerate(self._bodies):
            vel[i] = (body.vx, body.vy)
            pos[i] = (body.x, body.y)

        vel += acc * dt
        pos += vel * dt

        # Sync arrays back to bodies
        for i, body in enumerate(self._bodies):
            body.vx = float(vel[i, 0])
            body.vy = float(vel[i, 1])
            body.x = float(pos[i, 0])
            body.y = float(pos[i, 1])
            body.ax = 0.0
            body.ay = 0.0


__all__ = ["BaseSimulation"]

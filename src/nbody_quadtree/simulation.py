"""
Simulation drivers.

- BarnesHutSimulation: rebuilds a quadtree every tick and evaluates forces
  with the Barnes-Hut approximation, optionally fanned out over threads
- DirectSimulation: exact O(n^2) pairwise summation, for small systems and
  for checking the approximation
"""

from __future__ import annotations

import inspect
import os
import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

import numpy as np

from .base import BaseSimulation
from .config import (
    DEFAULT_DT,
    DEFAULT_G,
    DEFAULT_THETA,
    DEFAULT_TIME_SCALE,
    SOFTENING,
)
from .gravity import direct_forces
from .spatial.quadtree import QuadTree
from .spatial.region import Region
from .types import BodyLike, Event
from .validation import (
    CoincidentBodyWarning,
    PerformanceWarning,
    validate_workers,
)

# Bodies above which DirectSimulation warns about quadratic cost
DIRECT_WARN_THRESHOLD = 5000

# Relative padding of the rebuilt root region
BOUNDS_PADDING = 0.1

# Directory of this package, for pointing warnings at user code
_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__)) + os.sep


def _caller_stacklevel() -> int:
    """
    warnings.warn stacklevel of the first frame outside this package.

    Must be called directly from the function that emits the warning.
    """
    frame = inspect.currentframe()
    # Start at the function emitting the warning (stacklevel 1)
    frame = frame.f_back if frame is not None else None
    level = 1
    while frame is not None and os.path.abspath(frame.f_code.co_filename).startswith(_PACKAGE_DIR):
        frame = frame.f_back
        level += 1
    return level


class BarnesHutSimulation(BaseSimulation):
    """
    Gravity simulation using a Barnes-Hut quadtree.

    Each tick runs four phases in order:
    1. Bounding box of all positions
    2. Rebuild of the quadtree over the padded square region
    3. Force evaluation for every body against the finished tree
    4. Semi-implicit Euler integration

    The tree is written only in phase 2 and read only in phase 3, so the
    per-body queries need no locking and may run on worker threads.

    Example:
        sim = BarnesHutSimulation(
            bodies=[{"x": 0, "y": 0, "mass": 10000}, {"x": 200, "y": 0, "vy": 70}],
            theta=0.5,
            workers=4,
        )
        sim.run(steps=600)

        for region in sim.quadtree.internal_regions():
            draw_rect(region)
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
        # BarnesHutSimulation-specific parameters
        workers: Optional[int] = None,
        chunk_size: int = 256,
    ) -> None:
        """
        Initialize Barnes-Hut simulation.

        Args:
            bodies: List of bodies
            g: Gravitational constant
            theta: Barnes-Hut accuracy (0 = exact, 0.5 = balanced)
            dt: Base timestep
            softening: Softening length
            time_scale: Multiplier applied to dt each tick
            steps: Number of ticks performed by run()
            on_start: Callback for start event
            on_tick: Callback for tick event
            on_end: Callback for end event
            workers: Threads used for force evaluation. None or 1 evaluates
                serially.
            chunk_size: Bodies per force-evaluation task when workers > 1
        """
        super().__init__(
            bodies=bodies,
            g=g,
            theta=theta,
            dt=dt,
            softening=softening,
            time_scale=time_scale,
            steps=steps,
            on_start=on_start,
            on_tick=on_tick,
            on_end=on_end,
        )
        self._workers: Optional[int] = validate_workers(workers)
        self._chunk_size: int = max(1, int(chunk_size))
        self._quadtree = QuadTree(self._bounds.root)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def workers(self) -> Optional[int]:
        """Get number of force-evaluation threads."""
        return self._workers

    @workers.setter
    def workers(self, value: Optional[int]) -> None:
        """Set number of force-evaluation threads (None = serial)."""
        self._workers = validate_workers(value)

    @property
    def chunk_size(self) -> int:
        """Get bodies per force-evaluation task."""
        return self._chunk_size

    @chunk_size.setter
    def chunk_size(self, value: int) -> None:
        """Set bodies per force-evaluation task (minimum 1)."""
        self._chunk_size = max(1, int(value))

    @property
    def quadtree(self) -> QuadTree:
        """The tree built by the most recent rebuild (read-only use)."""
        return self._quadtree

    @property
    def bounds(self) -> Region:
        """Root region of the most recent rebuild."""
        return self._bounds.root

    # -------------------------------------------------------------------------
    # Simulation Implementation
    # -------------------------------------------------------------------------

    def rebuild(self) -> QuadTree:
        """
        Rebuild the quadtree from the current body positions.

        With no bodies the previous bounds are reused for an empty root.

        Returns:
            The rebuilt tree
        """
        if not self._bodies:
            self._quadtree.reset(self._bounds.root)
            return self._quadtree

        xs, ys, masses = self._positions()
        root = Region.enclosing(
            float(xs.min()),
            float(ys.min()),
            float(xs.max()),
            float(ys.max()),
            padding=BOUNDS_PADDING,
        )
        self._bounds.root = root
        self._quadtree.reset(root)

        for body, x, y, mass in zip(self._bodies, xs, ys, masses):
            self._quadtree.insert(body.index, float(x), float(y), float(mass))

        if self._quadtree.merge_count:
            warnings.warn(
                "Coincident bodies were merged into a single quadtree leaf. "
                "Merged bodies act as one point mass for this step.",
                CoincidentBodyWarning,
                stacklevel=_caller_stacklevel(),
            )
        return self._quadtree

    def compute_accelerations(self) -> np.ndarray:
        """
        Rebuild the tree and evaluate the acceleration of every body.

        Returns:
            Array of shape (n, 2)
        """
        self.rebuild()

        n = len(self._bodies)
        acc = np.zeros((n, 2), dtype=np.float64)
        if n == 0:
            return self._store_accelerations(acc)

        if self._workers is None or self._workers == 1 or n <= self._chunk_size:
            self._evaluate_range(acc, 0, n)
        else:
            with ThreadPoolExecutor(max_workers=self._workers) as executor:
                futures = [
                    executor.submit(self._evaluate_range, acc, start, min(start + self._chunk_size, n))
                    for start in range(0, n, self._chunk_size)
                ]
                # Barrier: every body must be evaluated before integration
                for future in futures:
                    future.result()

        return self._store_accelerations(acc)

    def _evaluate_range(self, acc: np.ndarray, start: int, end: int) -> None:
        """Fill acc[start:end] from the tree; touches no other rows."""
        tree = self._quadtree
        config = self._config
        for i in range(start, end):
            body = self._bodies[i]
            fx, fy = tree.calculate_force(body.index, body.x, body.y, config)
            acc[i, 0] = fx / body.mass
            acc[i, 1] = fy / body.mass

    def reset(self, bodies: Optional[Sequence[BodyLike]] = None) -> BarnesHutSimulation:
        """Restore defaults and reset the tree to the default bounds."""
        super().reset(bodies)
        self._quadtree.reset(self._bounds.root)
        return self


class DirectSimulation(BaseSimulation):
    """
    Gravity simulation using exact pairwise summation.

    Uses the same softened kernel as the Barnes-Hut tree, so with theta = 0
    both drivers produce the same trajectories up to rounding. theta is
    accepted but ignored.
    """

    def compute_accelerations(self) -> np.ndarray:
        """
        Evaluate the acceleration of every body against every other.

        Returns:
            Array of shape (n, 2)
        """
        n = len(self._bodies)
        if n > DIRECT_WARN_THRESHOLD:
            warnings.warn(
                f"Direct summation over {n} bodies is O(n^2) in time and memory. "
                "Consider BarnesHutSimulation for large systems.",
                PerformanceWarning,
                stacklevel=_caller_stacklevel(),
            )

        xs, ys, masses = self._positions()
        forces = direct_forces(xs, ys, masses, self._config)
        if n:
            forces /= masses[:, np.newaxis]
        return self._store_accelerations(forces)


__all__ = [
    "BOUNDS_PADDING",
    "DIRECT_WARN_THRESHOLD",
    "BarnesHutSimulation",
    "DirectSimulation",
]

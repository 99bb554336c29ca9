#!/usr/bin/env python3
"""
Benchmark Barnes-Hut force evaluation against direct summation.

Usage:
    python scripts/benchmark_barnes_hut.py [--sizes N,...] [--thetas T,...] [--workers W]

Examples:
    python scripts/benchmark_barnes_hut.py
    python scripts/benchmark_barnes_hut.py --sizes 500,2000 --thetas 0.3,0.5,1.0
    python scripts/benchmark_barnes_hut.py --sizes 10000 --workers 4 --no-direct
"""

from __future__ import annotations

import argparse
import json
import time
import warnings
from typing import Any, Optional

import numpy as np

from nbody_quadtree import (
    BarnesHutSimulation,
    DirectSimulation,
    PerformanceWarning,
    relative_force_error,
)


def generate_disk(n: int, radius: float = 1000.0, seed: int = 42) -> list[dict]:
    """Bodies spread uniformly over a disk, with small random masses."""
    rng = np.random.default_rng(seed)
    r = radius * np.sqrt(rng.uniform(0.0, 1.0, n))
    phi = rng.uniform(0.0, 2.0 * np.pi, n)
    masses = rng.uniform(1.0, 10.0, n)
    return [
        {"x": float(x), "y": float(y), "mass": float(m)}
        for x, y, m in zip(r * np.cos(phi), r * np.sin(phi), masses)
    ]


def time_forces(sim: Any, repeats: int) -> tuple[float, np.ndarray]:
    """Best-of-N wall time for one force evaluation."""
    best = float("inf")
    acc = np.zeros((0, 2))
    for _ in range(repeats):
        start = time.perf_counter()
        acc = sim.compute_accelerations()
        best = min(best, time.perf_counter() - start)
    return best, acc


def run_benchmarks(
    sizes: list[int],
    thetas: list[float],
    workers: Optional[int] = None,
    repeats: int = 3,
    include_direct: bool = True,
) -> list[dict]:
    """Run benchmarks for every size/theta combination."""
    results = []

    print(f"\nBenchmarking {len(sizes)} sizes x {len(thetas)} theta values")
    print(f"Workers: {workers or 1}, Repeats: {repeats}")
    print("=" * 72)

    for n in sizes:
        bodies = generate_disk(n)
        print(f"\n{n} bodies")
        print("-" * 60)

        exact: Optional[np.ndarray] = None
        if include_direct:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", PerformanceWarning)
                direct_time, exact = time_forces(DirectSimulation(bodies=[dict(b) for b in bodies]), repeats)
            print(f"  {'direct':12s}: {direct_time:.4f}s")
            results.append({"bodies": n, "method": "direct", "theta": None, "time_seconds": direct_time})

        for theta in thetas:
            sim = BarnesHutSimulation(bodies=[dict(b) for b in bodies], theta=theta, workers=workers)
            elapsed, approx = time_forces(sim, repeats)

            result: dict[str, Any] = {
                "bodies": n,
                "method": "barnes_hut",
                "theta": theta,
                "time_seconds": elapsed,
                "tree_nodes": len(sim.quadtree),
            }
            line = f"  {'theta=' + format(theta, 'g'):12s}: {elapsed:.4f}s  nodes={len(sim.quadtree)}"
            if exact is not None:
                error = relative_force_error(approx, exact)
                result["relative_error"] = error
                line += f"  error={error:.2e}"
            print(line)
            results.append(result)

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Barnes-Hut against direct summation")
    parser.add_argument("--sizes", default="100,500,2000", help="Comma-separated body counts")
    parser.add_argument("--thetas", default="0.3,0.5,1.0", help="Comma-separated theta values")
    parser.add_argument("--workers", type=int, help="Force-evaluation threads for Barnes-Hut")
    parser.add_argument("--repeats", type=int, default=3, help="Timing repeats (best is reported)")
    parser.add_argument("--no-direct", action="store_true", help="Skip direct summation and error")
    parser.add_argument("--output", help="Output JSON file for results")

    args = parser.parse_args()

    results = run_benchmarks(
        sizes=[int(s) for s in args.sizes.split(",")],
        thetas=[float(t) for t in args.thetas.split(",")],
        workers=args.workers,
        repeats=max(1, args.repeats),
        include_direct=not args.no_direct,
    )

    if args.output and results:
        with open(args.output, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()

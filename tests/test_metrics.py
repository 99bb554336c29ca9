"""
Tests for simulation diagnostics.
"""

import numpy as np
import pytest

from nbody_quadtree.metrics import (
    center_of_mass,
    kinetic_energy,
    linear_momentum,
    relative_force_error,
    simulation_summary,
    total_mass,
)
from nbody_quadtree.simulation import BarnesHutSimulation, DirectSimulation
from nbody_quadtree.types import Body


def create_bodies():
    return [
        Body(x=0.0, y=0.0, vx=1.0, vy=0.0, mass=1.0),
        Body(x=4.0, y=2.0, vx=0.0, vy=-2.0, mass=3.0),
    ]


class TestBodyMetrics:
    """Tests for mass, momentum and energy."""

    def test_total_mass(self):
        """Masses are summed."""
        assert total_mass(create_bodies()) == 4.0
        assert total_mass([]) == 0.0

    def test_center_of_mass(self):
        """Mass-weighted mean position."""
        x, y = center_of_mass(create_bodies())
        assert x == pytest.approx(3.0)
        assert y == pytest.approx(1.5)

    def test_center_of_mass_empty(self):
        """No bodies, no center of mass."""
        assert center_of_mass([]) is None

    def test_kinetic_energy(self):
        """Sum of m v^2 / 2."""
        assert kinetic_energy(create_bodies()) == pytest.approx(0.5 + 6.0)

    def test_linear_momentum(self):
        """Sum of m v."""
        assert linear_momentum(create_bodies()) == (1.0, -6.0)


class TestForceError:
    """Tests for relative_force_error."""

    def test_identical_fields(self):
        """Identical fields have zero error."""
        field = np.array([[1.0, 2.0], [-3.0, 0.5]])
        assert relative_force_error(field, field) == 0.0

    def test_known_error(self):
        """Error is the RMS difference over the RMS magnitude."""
        exact = np.array([[3.0, 4.0]])
        approx = np.array([[3.0, 4.5]])
        assert relative_force_error(approx, exact) == pytest.approx(0.1)

    def test_zero_reference(self):
        """A zero reference field gives zero error."""
        assert relative_force_error(np.ones((2, 2)), np.zeros((2, 2))) == 0.0

    def test_shape_mismatch(self):
        """Arrays of different shapes are rejected."""
        with pytest.raises(ValueError, match="Shape mismatch"):
            relative_force_error(np.zeros((2, 2)), np.zeros((3, 2)))

    def test_barnes_hut_close_to_direct(self):
        """Default theta stays within a few percent of direct summation."""
        rng = np.random.default_rng(3)
        bodies = [
            {"x": float(x), "y": float(y), "mass": float(m)}
            for x, y, m in zip(
                rng.uniform(-300, 300, 150),
                rng.uniform(-300, 300, 150),
                rng.uniform(1, 10, 150),
            )
        ]
        tree = BarnesHutSimulation(bodies=[dict(b) for b in bodies])
        direct = DirectSimulation(bodies=[dict(b) for b in bodies])

        error = relative_force_error(tree.compute_accelerations(), direct.compute_accelerations())
        assert error < 0.05


class TestSimulationSummary:
    """Tests for simulation_summary."""

    def test_keys_and_values(self):
        """The summary reports counters and body diagnostics."""
        sim = DirectSimulation(bodies=create_bodies())
        summary = simulation_summary(sim)

        assert set(summary) == {
            "bodies",
            "steps",
            "time",
            "total_mass",
            "center_of_mass",
            "kinetic_energy",
            "linear_momentum",
        }
        assert summary["bodies"] == 2
        assert summary["steps"] == 0
        assert summary["total_mass"] == 4.0

    def test_unequal_masses_pull_by_attractor_mass(self):
        """Each body is pulled by the other's mass, so m^2 * a cancels, not m * a."""
        bodies = create_bodies()
        sim = DirectSimulation(bodies=bodies, softening=1.0)
        acc = sim.compute_accelerations()

        m0, m1 = bodies[0].mass, bodies[1].mass
        assert acc[0] * m0 * m0 == pytest.approx(-acc[1] * m1 * m1)
        assert not np.allclose(acc[0] * m0, -acc[1] * m1)

    def test_momentum_conserved_for_equal_masses(self):
        """Equal masses pull each other equally hard, so momentum is conserved."""
        bodies = [
            Body(x=0.0, y=0.0, vx=1.0, vy=0.0, mass=2.0),
            Body(x=4.0, y=2.0, vx=0.0, vy=-2.0, mass=2.0),
        ]
        sim = DirectSimulation(bodies=bodies, softening=1.0)
        before = simulation_summary(sim)["linear_momentum"]
        sim.run(steps=20)
        after = simulation_summary(sim)

        assert after["steps"] == 20
        assert after["time"] == pytest.approx(20 * sim.effective_dt)
        assert after["linear_momentum"][0] == pytest.approx(before[0], abs=1e-9)
        assert after["linear_momentum"][1] == pytest.approx(before[1], abs=1e-9)

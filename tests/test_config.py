"""Tests for simulation defaults and parameter containers."""

import pytest

from nbody_quadtree.config import (
    DEFAULT_BOUNDS_SIZE,
    DEFAULT_DT,
    DEFAULT_G,
    DEFAULT_THETA,
    MIN_GIZMO_NODE_SIZE,
    SOFTENING,
    TIME_SCALE_RANGE,
    SimConfig,
    SimSettings,
    SimulationBounds,
    clamp_time_scale,
    default_bounds,
)
from nbody_quadtree.spatial.region import Region
from nbody_quadtree.validation import InvalidConfigError


class TestDefaults:
    """Tests for the default constants."""

    def test_values(self):
        """Defaults match the documented simulation setup."""
        assert DEFAULT_G == 100.0
        assert DEFAULT_THETA == 0.5
        assert DEFAULT_DT == pytest.approx(1.0 / 60.0)
        assert SOFTENING == 5.0
        assert MIN_GIZMO_NODE_SIZE == 2.0

    def test_default_bounds(self):
        """The initial root region is a square centered on the origin."""
        bounds = default_bounds()
        assert bounds == Region(0.0, 0.0, DEFAULT_BOUNDS_SIZE, DEFAULT_BOUNDS_SIZE)
        assert SimulationBounds().root == bounds

    def test_default_bounds_are_fresh(self):
        """Each SimulationBounds gets its own default region."""
        first = SimulationBounds()
        first.root = Region(1.0, 1.0, 2.0, 2.0)
        assert SimulationBounds().root == default_bounds()


class TestSimConfig:
    """Tests for SimConfig."""

    def test_coerces_to_float(self):
        """Integer arguments are stored as floats."""
        config = SimConfig(g=200, theta=1, dt=1, softening=0)
        assert isinstance(config.g, float)
        assert config.softening == 0.0

    @pytest.mark.parametrize(
        "kwargs",
        [{"g": 0.0}, {"theta": -1.0}, {"dt": 0.0}, {"softening": -5.0}],
    )
    def test_rejects_invalid(self, kwargs):
        """Invalid fields raise InvalidConfigError."""
        with pytest.raises(InvalidConfigError):
            SimConfig(**kwargs)


class TestTimeScale:
    """Tests for time-scale clamping."""

    def test_clamp(self):
        """Values are clamped into the allowed range."""
        low, high = TIME_SCALE_RANGE
        assert clamp_time_scale(10.0) == high
        assert clamp_time_scale(0.0) == low
        assert clamp_time_scale(2.5) == 2.5

    def test_settings_clamp_on_init(self):
        """SimSettings clamps its time scale."""
        assert SimSettings(time_scale=100.0).time_scale == 5.0
        assert SimSettings().time_scale == 1.0

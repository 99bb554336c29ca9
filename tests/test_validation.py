"""
Tests for input validation.
"""

import math

import pytest

from nbody_quadtree.config import SimConfig
from nbody_quadtree.validation import (
    CoincidentBodyWarning,
    InvalidBodyError,
    InvalidConfigError,
    InvalidRegionError,
    PerformanceWarning,
    ValidationError,
    validate_config,
    validate_gravity,
    validate_mass,
    validate_position,
    validate_region_size,
    validate_softening,
    validate_theta,
    validate_timestep,
    validate_unique_ids,
    validate_workers,
)


class TestExceptionHierarchy:
    """Tests for the exception and warning classes."""

    def test_errors_are_validation_errors(self):
        """All specific errors derive from ValidationError and ValueError."""
        for cls in (InvalidBodyError, InvalidConfigError, InvalidRegionError):
            assert issubclass(cls, ValidationError)
            assert issubclass(cls, ValueError)

    def test_warnings_are_user_warnings(self):
        """Warnings can be filtered as UserWarning."""
        assert issubclass(CoincidentBodyWarning, UserWarning)
        assert issubclass(PerformanceWarning, UserWarning)


class TestBodyValidation:
    """Tests for validate_mass and validate_position."""

    def test_valid_mass(self):
        """Positive masses are returned as float."""
        assert validate_mass(3) == 3.0
        assert isinstance(validate_mass(3), float)

    @pytest.mark.parametrize("mass", [0, -2.5, float("nan"), float("inf")])
    def test_invalid_mass(self, mass):
        """Zero, negative and non-finite masses are rejected."""
        with pytest.raises(InvalidBodyError, match="mass must be positive"):
            validate_mass(mass)

    def test_mass_error_names_body(self):
        """The error message includes the body index."""
        with pytest.raises(InvalidBodyError, match="Body 7"):
            validate_mass(-1.0, 7)

    def test_valid_position(self):
        """Finite coordinates are returned as floats."""
        assert validate_position(1, -2) == (1.0, -2.0)

    @pytest.mark.parametrize("x, y", [(math.nan, 0.0), (0.0, math.inf), (-math.inf, 1.0)])
    def test_invalid_position(self, x, y):
        """Non-finite coordinates are rejected."""
        with pytest.raises(InvalidBodyError, match="position must be finite"):
            validate_position(x, y)


class TestParameterValidation:
    """Tests for the simulation parameter validators."""

    def test_gravity(self):
        """g must be strictly positive."""
        assert validate_gravity(100) == 100.0
        with pytest.raises(InvalidConfigError, match="g must be positive"):
            validate_gravity(0.0)

    def test_theta_allows_zero(self):
        """theta = 0 is exact summation and is allowed."""
        assert validate_theta(0) == 0.0
        assert validate_theta(1.5) == 1.5

    def test_theta_rejects_negative(self):
        """Negative theta is rejected."""
        with pytest.raises(InvalidConfigError, match="theta must be >= 0"):
            validate_theta(-0.1)
        with pytest.raises(InvalidConfigError):
            validate_theta(float("nan"))

    def test_timestep(self):
        """dt must be strictly positive."""
        assert validate_timestep(0.01) == 0.01
        with pytest.raises(InvalidConfigError, match="dt must be positive"):
            validate_timestep(-0.01)

    def test_softening(self):
        """Zero softening is allowed, negative is not."""
        assert validate_softening(0) == 0.0
        with pytest.raises(InvalidConfigError, match="softening must be >= 0"):
            validate_softening(-1.0)

    def test_workers(self):
        """None means serial; otherwise at least one worker."""
        assert validate_workers(None) is None
        assert validate_workers(4) == 4
        with pytest.raises(InvalidConfigError, match="workers must be >= 1"):
            validate_workers(0)

    def test_config(self):
        """validate_config returns a valid config unchanged."""
        config = SimConfig()
        assert validate_config(config) is config


class TestRegionValidation:
    """Tests for validate_region_size."""

    def test_valid(self):
        """Positive sizes pass."""
        assert validate_region_size(2, 3) == (2.0, 3.0)

    def test_invalid_width(self):
        """Non-positive width is rejected."""
        with pytest.raises(InvalidRegionError, match="width must be positive"):
            validate_region_size(0.0, 1.0)

    def test_invalid_height(self):
        """Non-positive height is rejected."""
        with pytest.raises(InvalidRegionError, match="height must be positive"):
            validate_region_size(1.0, -1.0)


class TestUniqueIds:
    """Tests for validate_unique_ids."""

    def test_distinct_ids(self):
        """Distinct ids of any hashable type pass."""
        validate_unique_ids([0, 1, 5])
        validate_unique_ids(["sun", "earth"])
        validate_unique_ids([])

    def test_duplicate_id(self):
        """A repeated id is rejected and named."""
        with pytest.raises(InvalidBodyError, match="Duplicate body index 3"):
            validate_unique_ids([3, 1, 3])

"""
Growth Parameter Validation

Tests strict construction-time validation, clamped live edits and
per-step snapshots of GrowthParams.
"""

import pytest
from src.core.errors import CrystalConfigError
from src.core.growth_params import (
    GrowthParams, ALPHA_RANGE, BETA_RANGE, GAMMA_RANGE, clamp
)


class TestDefaults:
    """Test default parameter values."""

    def test_defaults_are_valid(self):
        """Default parameters pass validation."""
        params = GrowthParams()
        assert params.validate() is params
        assert params.alpha == 1.0
        assert params.beta == 0.5
        assert params.gamma == 0.01
        assert params.growth_probability == 0.35
        assert params.seed is None

    def test_zero_gamma_allowed(self):
        """gamma = 0 is a supported setting (growth stalls)."""
        GrowthParams(gamma=0.0).validate()


class TestStrictValidation:
    """Test CrystalConfigError on out-of-range construction."""

    @pytest.mark.parametrize("field,value", [
        ("alpha", 0.1),
        ("alpha", 5.0),
        ("beta", 0.0),
        ("beta", 1.0),
        ("gamma", -0.01),
        ("gamma", 0.5),
        ("growth_probability", 1.5),
        ("growth_probability", -0.1),
    ])
    def test_out_of_range_rejected(self, field, value):
        """Each parameter outside its range raises, naming the field."""
        params = GrowthParams(**{field: value})
        with pytest.raises(CrystalConfigError, match=field):
            params.validate()

    def test_config_error_is_value_error(self):
        """Configuration errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            GrowthParams(alpha=100.0).validate()

    def test_negative_seed_rejected(self):
        """Seeds must be non-negative."""
        with pytest.raises(CrystalConfigError, match="Seed"):
            GrowthParams(seed=-1).validate()


class TestClampedSetters:
    """Test permissive live edits."""

    def test_clamp_helper(self):
        """clamp pins values to the closed interval."""
        assert clamp(-1.0, (0.0, 1.0)) == 0.0
        assert clamp(2.0, (0.0, 1.0)) == 1.0
        assert clamp(0.25, (0.0, 1.0)) == 0.25

    def test_alpha_clamped(self):
        """alpha writes are clamped to ALPHA_RANGE."""
        params = GrowthParams()
        assert params.set_alpha(100.0) == ALPHA_RANGE[1]
        assert params.alpha == ALPHA_RANGE[1]
        assert params.set_alpha(0.0) == ALPHA_RANGE[0]

    def test_beta_clamped(self):
        """beta writes are clamped to BETA_RANGE."""
        params = GrowthParams()
        assert params.set_beta(0.0) == BETA_RANGE[0]
        assert params.set_beta(2.0) == BETA_RANGE[1]

    def test_gamma_clamped(self):
        """gamma writes are clamped to GAMMA_RANGE."""
        params = GrowthParams()
        assert params.set_gamma(-5.0) == GAMMA_RANGE[0]
        assert params.set_gamma(1.0) == GAMMA_RANGE[1]
        assert params.set_gamma(0.05) == 0.05

    def test_probability_clamped(self):
        """growth_probability writes are clamped to [0, 1]."""
        params = GrowthParams()
        assert params.set_growth_probability(3.0) == 1.0
        assert params.set_growth_probability(-3.0) == 0.0

    def test_clamped_params_stay_valid(self):
        """Whatever is written through setters still validates."""
        params = GrowthParams()
        params.set_alpha(-10)
        params.set_beta(10)
        params.set_gamma(10)
        params.validate()


class TestSnapshot:
    """Test per-step parameter snapshots."""

    def test_snapshot_is_independent(self):
        """Editing the live params does not change an earlier snapshot."""
        params = GrowthParams(alpha=1.0)
        snapshot = params.snapshot()

        params.set_alpha(1.5)

        assert snapshot.alpha == 1.0
        assert snapshot is not params

    def test_to_dict(self):
        """to_dict exposes every field."""
        data = GrowthParams(seed=3).to_dict()
        assert data == {
            'alpha': 1.0, 'beta': 0.5, 'gamma': 0.01,
            'growth_probability': 0.35, 'seed': 3,
        }

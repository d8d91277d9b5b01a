"""
Tests for tanh-sinh quadrature and the quadrature engine.

[T1] Tanh-sinh converges geometrically for analytic integrands, including
those with integrable endpoint singularities, and handles semi-infinite
and infinite intervals through variable maps.
"""

import math

import numpy as np
import pytest

from quant_numerics.errors import ConstructionError, ConvergenceWarning
from quant_numerics.quadrature import (
    QuadratureEngine,
    QuadratureRule,
    TanhSinhCache,
    integrate,
)
from quant_numerics.quadrature.tanh_sinh import HALF_PI, build_level

# =============================================================================
# Node Tables
# =============================================================================


class TestTanhSinhNodes:
    """Node and weight generation per refinement level."""

    @pytest.mark.unit
    def test_level_zero_carries_center(self) -> None:
        nodes = build_level(0, 1e-150)
        assert nodes.has_center
        assert nodes.step == 1.0
        np.testing.assert_allclose(nodes.abscissas, np.arange(1, nodes.size + 1))

    @pytest.mark.unit
    def test_refinement_levels_add_odd_multiples_only(self) -> None:
        nodes = build_level(2, 1e-150)
        multiples = nodes.abscissas / nodes.step
        assert not nodes.has_center
        np.testing.assert_allclose(multiples % 2, 1.0)

    @pytest.mark.unit
    def test_complements_and_weights(self) -> None:
        """[T1] δ = 1 - tanh(π/2 sinh t), w = π/2 cosh t sech²(π/2 sinh t)."""
        nodes = build_level(3, 1e-150)
        t = nodes.abscissas

        expected_complement = 1.0 - np.tanh(HALF_PI * np.sinh(t))
        small = expected_complement > 1e-4
        np.testing.assert_allclose(nodes.complements[small], expected_complement[small], rtol=1e-10)

        expected_weight = HALF_PI * np.cosh(t) / np.cosh(HALF_PI * np.sinh(t)) ** 2
        finite = np.isfinite(expected_weight) & (expected_weight > 0)
        np.testing.assert_allclose(nodes.weights[finite], expected_weight[finite], rtol=1e-10)

    @pytest.mark.unit
    def test_complements_respect_floor(self) -> None:
        nodes = build_level(4, 1e-150)
        assert np.all(nodes.complements >= 1e-150)
        assert np.all(nodes.complements < 1.0)
        assert np.all(nodes.weights > 0)

    @pytest.mark.unit
    def test_cache_builds_lazily(self) -> None:
        cache = TanhSinhCache()
        assert len(cache) == 0

        first = cache.level(3)
        assert 3 in cache
        assert 2 not in cache
        assert cache.level(3) is first

        cache.clear()
        assert len(cache) == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("min_complement", [0.0, 1.0, -1e-10])
    def test_cache_rejects_invalid_floor(self, min_complement) -> None:
        with pytest.raises(ValueError, match="min_complement"):
            TanhSinhCache(min_complement=min_complement)


# =============================================================================
# Integration
# =============================================================================


class TestTanhSinhIntegration:
    """Known integrals on finite and infinite domains."""

    @pytest.mark.unit
    def test_polynomial_on_unit_interval(self) -> None:
        result = integrate(lambda x: x**2, 0.0, 1.0)
        assert result.converged
        assert result.method == "tanh_sinh"
        assert result.value == pytest.approx(1.0 / 3.0, abs=1e-10)

    @pytest.mark.unit
    def test_exponential_decay_on_half_line(self) -> None:
        """∫_0^∞ e^(-x) dx = 1."""
        result = integrate(lambda x: np.exp(-x), 0.0, np.inf)
        assert result.converged
        assert result.value == pytest.approx(1.0, abs=1e-10)

    @pytest.mark.unit
    def test_shifted_half_line(self) -> None:
        """∫_2^∞ e^(-x) dx = e^(-2)."""
        result = integrate(lambda x: np.exp(-x), 2.0, np.inf)
        assert result.value == pytest.approx(math.exp(-2.0), rel=1e-10)

    @pytest.mark.unit
    def test_lower_half_line_by_reflection(self) -> None:
        """∫_(-∞)^0 e^x dx = 1."""
        result = integrate(np.exp, -np.inf, 0.0)
        assert result.converged
        assert result.value == pytest.approx(1.0, abs=1e-10)

    @pytest.mark.unit
    def test_gaussian_over_real_line(self) -> None:
        """∫ e^(-x²) dx = √π."""
        result = integrate(lambda x: np.exp(-x * x), -np.inf, np.inf)
        assert result.converged
        assert result.value == pytest.approx(math.sqrt(math.pi), abs=1e-10)

    @pytest.mark.unit
    def test_vectorized_gaussian(self) -> None:
        rule = QuadratureRule.tanh_sinh(vectorized=True)
        result = integrate(lambda x: np.exp(-x * x), -np.inf, np.inf, rule=rule)
        assert result.value == pytest.approx(math.sqrt(math.pi), abs=1e-10)

    @pytest.mark.unit
    def test_inverse_sqrt_endpoint_singularity(self) -> None:
        """∫_0^1 x^(-1/2) dx = 2."""
        result = integrate(lambda x: 1.0 / np.sqrt(x), 0.0, 1.0)
        assert result.converged
        assert result.value == pytest.approx(2.0, abs=1e-8)

    @pytest.mark.unit
    def test_log_endpoint_singularity(self) -> None:
        """∫_0^1 ln x dx = -1."""
        result = integrate(np.log, 0.0, 1.0)
        assert result.value == pytest.approx(-1.0, abs=1e-8)

    @pytest.mark.unit
    def test_odd_integrand_converges_on_absolute_floor(self) -> None:
        result = integrate(lambda x: x, -1.0, 1.0)
        assert result.converged
        assert abs(result.value) < 1e-14

    @pytest.mark.unit
    def test_complex_integrand_on_half_line(self) -> None:
        """∫_0^∞ e^(-(1 - i)x) dx = 1 / (1 - i) = (1 + i) / 2."""
        result = integrate(lambda x: np.exp(-(1.0 - 1.0j) * x), 0.0, np.inf)
        assert result.value.real == pytest.approx(0.5, abs=1e-9)
        assert result.value.imag == pytest.approx(0.5, abs=1e-9)

    @pytest.mark.unit
    def test_level_cap_warns_and_returns_estimate(self) -> None:
        rule = QuadratureRule.tanh_sinh(tolerance=1e-14, max_level=2)
        with pytest.warns(ConvergenceWarning, match="tanh_sinh did not converge"):
            result = integrate(np.sin, 0.0, 100.0, rule=rule)

        assert not result.converged
        assert np.isfinite(result.value)
        assert result.error_estimate > 0


# =============================================================================
# Engine
# =============================================================================


class TestQuadratureEngine:
    """Bound handling, validation and cache ownership."""

    @pytest.mark.unit
    def test_equal_bounds_give_zero_without_evaluations(self) -> None:
        calls = []
        result = integrate(lambda x: calls.append(x) or 1.0, 1.5, 1.5)

        assert result.value == 0.0
        assert result.evaluations == 0
        assert result.converged
        assert calls == []

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "rule",
        [QuadratureRule.tanh_sinh(), QuadratureRule.simpson38(panels=20)],
        ids=["tanh_sinh", "simpson_38"],
    )
    def test_reversed_bounds_negate(self, rule) -> None:
        forward = integrate(np.exp, 0.0, 1.0, rule=rule)
        backward = integrate(np.exp, 1.0, 0.0, rule=rule)
        assert backward.value == pytest.approx(-forward.value, abs=1e-15)

    @pytest.mark.unit
    def test_reversed_infinite_bounds(self) -> None:
        result = integrate(lambda x: np.exp(-x), np.inf, 0.0)
        assert result.value == pytest.approx(-1.0, abs=1e-10)

    @pytest.mark.unit
    @pytest.mark.parametrize("bounds", [(np.nan, 1.0), (0.0, np.nan)])
    def test_nan_bounds_raise(self, bounds) -> None:
        with pytest.raises(ConstructionError, match="NaN"):
            integrate(np.exp, *bounds)

    @pytest.mark.unit
    def test_non_callable_integrand_raises(self) -> None:
        with pytest.raises(ConstructionError, match="callable"):
            integrate(3.0, 0.0, 1.0)

    @pytest.mark.unit
    def test_rule_type_checked(self) -> None:
        with pytest.raises(ConstructionError, match="QuadratureRule"):
            integrate(np.exp, 0.0, 1.0, rule="tanh_sinh")

    @pytest.mark.unit
    def test_engine_default_rule_and_override(self) -> None:
        engine = QuadratureEngine(QuadratureRule.midpoint(panels=4))
        assert engine.integrate(np.exp, 0.0, 1.0).method == "midpoint"
        assert engine.integrate(np.exp, 0.0, 1.0, rule=QuadratureRule.tanh_sinh()).method == "tanh_sinh"

    @pytest.mark.unit
    def test_engine_reuses_its_cache(self, quadrature_engine) -> None:
        quadrature_engine.integrate(lambda x: np.exp(-x), 0.0, np.inf)
        levels_built = len(quadrature_engine.cache)
        assert levels_built > 0

        quadrature_engine.integrate(lambda x: np.exp(-2.0 * x), 0.0, np.inf)
        assert len(quadrature_engine.cache) >= levels_built

    @pytest.mark.unit
    def test_engines_do_not_share_caches(self) -> None:
        first = QuadratureEngine()
        second = QuadratureEngine()
        first.integrate(np.exp, 0.0, 1.0)

        assert first.cache is not second.cache
        assert len(second.cache) == 0

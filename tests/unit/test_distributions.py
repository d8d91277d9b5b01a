"""
Tests for probability distributions - distributions/.

Densities and cumulative distributions are checked against scipy.stats,
characteristic functions against their closed forms and moments.
"""

import math

import numpy as np
import pytest
from scipy import stats

from quant_numerics.distributions import (
    DISTRIBUTION_FAMILIES,
    Bernoulli,
    Binomial,
    ChiSquared,
    Distribution,
    Exponential,
    Gamma,
    Gaussian,
    Poisson,
    Uniform,
    characteristic_function,
    cumulative,
    density,
)
from quant_numerics.errors import ConstructionError

ALL_DISTRIBUTIONS = [
    Gaussian(0.5, 2.0),
    Uniform(-1.0, 3.0),
    ChiSquared(4.0),
    Gamma(2.5, 0.8),
    Exponential(1.5),
    Bernoulli(0.3),
    Binomial(10, 0.4),
    Poisson(3.0),
]


def _ids(spec: Distribution) -> str:
    return type(spec).__name__


# =============================================================================
# Densities and Cumulative Distributions
# =============================================================================


class TestDensities:
    """Density and cumulative values against scipy.stats."""

    @pytest.mark.unit
    def test_standard_normal_density_at_zero(self) -> None:
        """[T1] φ(0) = 1/√(2π)."""
        assert density(0.0, Gaussian()) == pytest.approx(1.0 / math.sqrt(2.0 * math.pi))

    @pytest.mark.unit
    def test_gaussian_matches_scipy(self) -> None:
        x = np.linspace(-5.0, 5.0, 21)
        spec = Gaussian(mean=1.0, std=2.0)
        np.testing.assert_allclose(density(x, spec), stats.norm.pdf(x, 1.0, 2.0))
        np.testing.assert_allclose(cumulative(x, spec), stats.norm.cdf(x, 1.0, 2.0))

    @pytest.mark.unit
    def test_uniform_density_outside_support_is_zero(self) -> None:
        spec = Uniform(0.0, 2.0)
        assert density(-0.1, spec) == 0.0
        assert density(2.1, spec) == 0.0
        assert density(1.0, spec) == pytest.approx(0.5)
        assert cumulative(1.5, spec) == pytest.approx(0.75)

    @pytest.mark.unit
    def test_exponential_cumulative(self) -> None:
        """[T1] F(x) = 1 - e^(-λx)."""
        assert cumulative(2.0, Exponential(0.5)) == pytest.approx(1.0 - math.exp(-1.0))

    @pytest.mark.unit
    def test_chi_squared_matches_scipy(self) -> None:
        x = np.array([0.5, 1.0, 3.0, 7.5])
        np.testing.assert_allclose(density(x, ChiSquared(3.0)), stats.chi2.pdf(x, 3.0))

    @pytest.mark.unit
    def test_gamma_matches_scipy(self) -> None:
        x = np.array([0.1, 1.0, 4.0])
        np.testing.assert_allclose(
            cumulative(x, Gamma(2.0, 3.0)), stats.gamma.cdf(x, 2.0, scale=3.0)
        )

    @pytest.mark.unit
    def test_binomial_pmf(self) -> None:
        """[T1] P(X = k) = C(n, k) p^k (1 - p)^(n - k)."""
        expected = math.comb(10, 3) * 0.4**3 * 0.6**7
        assert density(3, Binomial(10, 0.4)) == pytest.approx(expected)

    @pytest.mark.unit
    def test_discrete_pmf_zero_off_lattice(self) -> None:
        assert density(1.5, Poisson(2.0)) == 0.0
        assert density(-1.0, Bernoulli(0.5)) == 0.0

    @pytest.mark.unit
    def test_poisson_cumulative(self) -> None:
        rate = 3.0
        expected = sum(math.exp(-rate) * rate**k / math.factorial(k) for k in range(3))
        assert cumulative(2.0, Poisson(rate)) == pytest.approx(expected)

    @pytest.mark.unit
    def test_scalar_in_scalar_out(self) -> None:
        value = density(0.3, Gamma(2.0))
        assert isinstance(value, float)
        cf = characteristic_function(0.3, Gamma(2.0))
        assert isinstance(cf, complex)

    @pytest.mark.unit
    def test_array_in_array_out(self) -> None:
        values = cumulative([0.1, 0.2], Exponential())
        assert isinstance(values, np.ndarray)
        assert values.shape == (2,)

        cf = characteristic_function(np.array([0.0, 1.0]), Exponential())
        assert np.iscomplexobj(cf)

    @pytest.mark.unit
    def test_non_distribution_spec_raises(self) -> None:
        with pytest.raises(TypeError, match="Distribution"):
            density(0.0, "gaussian")


# =============================================================================
# Characteristic Functions
# =============================================================================


class TestCharacteristicFunctions:
    """[T1] Closed-form characteristic functions."""

    @pytest.mark.unit
    @pytest.mark.parametrize("spec", ALL_DISTRIBUTIONS, ids=_ids)
    def test_unity_at_zero(self, spec) -> None:
        assert characteristic_function(0.0, spec) == pytest.approx(1.0 + 0.0j, abs=1e-15)

    @pytest.mark.unit
    @pytest.mark.parametrize("spec", ALL_DISTRIBUTIONS, ids=_ids)
    def test_derivative_at_zero_gives_mean(self, spec) -> None:
        """[T1] φ'(0) = i E[X]."""
        h = 1e-4
        derivative = (characteristic_function(h, spec) - characteristic_function(-h, spec)) / (2 * h)
        assert derivative.imag == pytest.approx(spec.mean, rel=1e-6, abs=1e-8)

    @pytest.mark.unit
    @pytest.mark.parametrize("spec", ALL_DISTRIBUTIONS, ids=_ids)
    def test_second_derivative_gives_second_moment(self, spec) -> None:
        """[T1] φ''(0) = -E[X²] = -(Var + mean²)."""
        h = 1e-3
        phi = lambda t: characteristic_function(t, spec)  # noqa: E731
        second = (phi(h) - 2.0 * phi(0.0) + phi(-h)) / h**2
        expected = spec.variance + spec.mean**2
        assert -second.real == pytest.approx(expected, rel=1e-4)

    @pytest.mark.unit
    def test_gaussian_closed_form(self) -> None:
        spec = Gaussian(1.0, 0.5)
        t = 2.0
        expected = np.exp(1j * 1.0 * t - 0.5 * 0.25 * t**2)
        assert characteristic_function(t, spec) == pytest.approx(expected)

    @pytest.mark.unit
    def test_poisson_closed_form(self) -> None:
        spec = Poisson(2.0)
        t = 0.7
        expected = np.exp(2.0 * (np.exp(1j * t) - 1.0))
        assert characteristic_function(t, spec) == pytest.approx(expected)

    @pytest.mark.unit
    def test_uniform_is_sinc_when_symmetric(self) -> None:
        """[T1] U(-a, a): φ(t) = sin(at) / (at)."""
        spec = Uniform(-2.0, 2.0)
        t = 0.9
        value = characteristic_function(t, spec)
        assert value.real == pytest.approx(math.sin(1.8) / 1.8, abs=1e-14)
        assert value.imag == pytest.approx(0.0, abs=1e-14)

    @pytest.mark.unit
    def test_chi_squared_is_gamma_special_case(self) -> None:
        """[T1] χ²(k) = Gamma(k/2, 2)."""
        t = np.linspace(-3.0, 3.0, 13)
        np.testing.assert_allclose(
            characteristic_function(t, ChiSquared(5.0)),
            characteristic_function(t, Gamma(2.5, 2.0)),
            rtol=1e-13,
        )

    @pytest.mark.unit
    def test_binomial_is_bernoulli_power(self) -> None:
        t = np.array([0.3, 1.1, 2.5])
        np.testing.assert_allclose(
            characteristic_function(t, Binomial(6, 0.35)),
            characteristic_function(t, Bernoulli(0.35)) ** 6,
            rtol=1e-13,
        )


# =============================================================================
# Moments and Validation
# =============================================================================


class TestMomentsAndValidation:
    """Moments and construction errors."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "spec,mean,variance",
        [
            (Gaussian(1.0, 3.0), 1.0, 9.0),
            (Uniform(0.0, 6.0), 3.0, 3.0),
            (ChiSquared(4.0), 4.0, 8.0),
            (Gamma(2.0, 3.0), 6.0, 18.0),
            (Exponential(2.0), 0.5, 0.25),
            (Bernoulli(0.25), 0.25, 0.1875),
            (Binomial(8, 0.5), 4.0, 2.0),
            (Poisson(2.5), 2.5, 2.5),
        ],
    )
    def test_mean_and_variance(self, spec, mean, variance) -> None:
        assert spec.mean == pytest.approx(mean)
        assert spec.variance == pytest.approx(variance)
        assert spec.std == pytest.approx(math.sqrt(variance))

    @pytest.mark.unit
    def test_families_registry(self) -> None:
        assert len(DISTRIBUTION_FAMILIES) == 8
        assert all(issubclass(family, Distribution) for family in DISTRIBUTION_FAMILIES)

    @pytest.mark.unit
    def test_discrete_flag(self) -> None:
        assert Poisson(1.0).is_discrete
        assert not Gaussian().is_discrete

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "factory",
        [
            lambda: Gaussian(0.0, 0.0),
            lambda: Gaussian(np.nan, 1.0),
            lambda: Uniform(1.0, 1.0),
            lambda: ChiSquared(-1.0),
            lambda: Gamma(0.0),
            lambda: Gamma(1.0, -2.0),
            lambda: Exponential(0.0),
            lambda: Bernoulli(1.2),
            lambda: Binomial(0, 0.5),
            lambda: Binomial(3.5, 0.5),
            lambda: Binomial(True, 0.5),
            lambda: Poisson(-1.0),
        ],
    )
    def test_invalid_parameters_raise(self, factory) -> None:
        with pytest.raises(ConstructionError, match="CRITICAL"):
            factory()

    @pytest.mark.unit
    def test_distributions_are_immutable(self) -> None:
        spec = Gaussian()
        with pytest.raises(AttributeError):
            spec.mean = 2.0

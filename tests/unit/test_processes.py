"""
Tests for stochastic process models - stochastics/processes.py.

Short-rate drifts are checked on noise-free paths: with zero shocks the
fitted θ(t) must carry the short rate along its analytic median/mean path.

[T1] Noise-free paths started at r(0) = f(0, 0):
  Ho-Lee:      r(t) = f(0,t) + σ²t²/2
  Hull-White:  r(t) = f(0,t) + σ²/(2a²) (1 - e^(-at))²
  Extended Vasicek, BDT:  r(t) = f(0,t)
"""

import numpy as np
import pytest

from quant_numerics.config.tolerances import mc_tolerance
from quant_numerics.curves import VolatilityCurve, YieldCurve
from quant_numerics.errors import ConstructionError, NumericalDomainError
from quant_numerics.stochastics import (
    PROCESS_MODELS,
    ArithmeticBrownianMotion,
    BlackDermanToy,
    CoxIngersollRoss,
    ExtendedVasicek,
    FractionalBrownianMotion,
    FractionalCoxIngersollRoss,
    FractionalOrnsteinUhlenbeck,
    GeometricBrownianMotion,
    HoLee,
    HullWhite,
    OrnsteinUhlenbeck,
    simulate,
    simulate_paths,
    uniform_time_grid,
)
from quant_numerics.stochastics.processes import brownian_motion, fractional_brownian_motion


class ZeroShocks:
    """Random source returning zero shocks (noise-free paths)."""

    def standard_normal(self, size):
        return np.zeros(size)


class ConstantShocks:
    """Random source returning the same shock at every step."""

    def __init__(self, shock: float) -> None:
        self.shock = shock

    def standard_normal(self, size):
        return np.full(size, self.shock)


# =============================================================================
# Parameter Validation
# =============================================================================


class TestModelValidation:
    """Construction errors for every model."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "factory",
        [
            lambda: ArithmeticBrownianMotion(mu=np.nan, sigma=0.1),
            lambda: ArithmeticBrownianMotion(mu=0.0, sigma=-0.1),
            lambda: GeometricBrownianMotion(mu=0.05, sigma=-0.2),
            lambda: OrnsteinUhlenbeck(mean_reversion=0.0, long_run_mean=0.0, sigma=0.1),
            lambda: CoxIngersollRoss(mean_reversion=1.0, long_run_mean=-0.01, sigma=0.1),
            lambda: HoLee(sigma=-0.01, term_structure=YieldCurve.flat(0.03)),
            lambda: HoLee(sigma=0.01, term_structure=0.03),
            lambda: HullWhite(mean_reversion=0.0, sigma=0.01, term_structure=YieldCurve.flat(0.03)),
            lambda: BlackDermanToy(volatility_curve=0.2, term_structure=YieldCurve.flat(0.03)),
            lambda: ExtendedVasicek(
                mean_reversion=0.1, sigma=0.01, term_structure=YieldCurve.flat(0.03)
            ),
            lambda: ExtendedVasicek(
                mean_reversion=VolatilityCurve.constant(0.1), sigma=-0.01,
                term_structure=YieldCurve.flat(0.03),
            ),
            lambda: FractionalBrownianMotion(hurst=0.0),
            lambda: FractionalBrownianMotion(hurst=1.0),
            lambda: FractionalBrownianMotion(hurst=np.nan),
            lambda: FractionalOrnsteinUhlenbeck(
                mean_reversion=1.0, long_run_mean=0.0, sigma=0.1, hurst=1.5
            ),
            lambda: FractionalCoxIngersollRoss(
                mean_reversion=1.0, long_run_mean=-0.01, sigma=0.1, hurst=0.7
            ),
        ],
    )
    def test_invalid_parameters_raise(self, factory) -> None:
        with pytest.raises(ConstructionError, match="CRITICAL"):
            factory()

    @pytest.mark.unit
    def test_registry_lists_every_model(self) -> None:
        assert len(PROCESS_MODELS) == 11
        assert HullWhite in PROCESS_MODELS
        assert ExtendedVasicek in PROCESS_MODELS
        assert BlackDermanToy in PROCESS_MODELS
        assert FractionalCoxIngersollRoss in PROCESS_MODELS

    @pytest.mark.unit
    def test_cir_feller_condition(self) -> None:
        """[T1] 2κμ >= σ²."""
        assert CoxIngersollRoss(2.0, 0.04, 0.3).satisfies_feller()
        assert not CoxIngersollRoss(0.5, 0.01, 0.5).satisfies_feller()

    @pytest.mark.unit
    def test_models_are_immutable(self) -> None:
        model = OrnsteinUhlenbeck(1.0, 0.0, 0.1)
        with pytest.raises(AttributeError):
            model.sigma = 0.2


# =============================================================================
# Brownian Motion Helper
# =============================================================================


class TestBrownianMotion:
    """Brownian paths built from shocks on a non-uniform grid."""

    @pytest.mark.unit
    def test_starts_at_zero_and_scales_by_step(self) -> None:
        times = np.array([0.0, 0.25, 1.0])
        shocks = np.array([[1.0, 2.0]])
        paths = brownian_motion(times, shocks)

        np.testing.assert_allclose(paths, [[0.0, 0.5, 0.5 + np.sqrt(0.75) * 2.0]])

    @pytest.mark.unit
    def test_standard_model_is_plain_brownian_motion(self) -> None:
        model = ArithmeticBrownianMotion.standard()
        times = np.array([0.0, 0.25, 1.0])
        shocks = np.array([[1.0, 2.0], [-0.5, 0.3]])

        assert (model.mu, model.sigma) == (0.0, 1.0)
        np.testing.assert_allclose(
            model.evolve(0.0, times, shocks), brownian_motion(times, shocks), atol=1e-15
        )


# =============================================================================
# Diffusions
# =============================================================================


class TestDiffusions:
    """Moments of the simulated diffusions."""

    @pytest.mark.unit
    def test_abm_without_noise_is_linear(self) -> None:
        grid = np.array([0.0, 0.1, 0.5, 2.0])
        path = simulate(ArithmeticBrownianMotion(mu=-0.3, sigma=0.0), 1.0, grid, ZeroShocks())
        np.testing.assert_allclose(path.values, 1.0 - 0.3 * grid, atol=1e-15)

    @pytest.mark.unit
    def test_abm_moments(self, reproducible_rng) -> None:
        model = ArithmeticBrownianMotion(mu=0.5, sigma=2.0)
        paths = simulate_paths(model, 1.0, uniform_time_grid(1.0, 10), 20_000, reproducible_rng)
        terminal = paths.terminal_values

        tol = mc_tolerance(20_000, sigma=2.0, confidence=4.0)
        assert terminal.mean() == pytest.approx(model.expected_value(1.0, 1.0), abs=tol)
        assert terminal.var() == pytest.approx(model.variance(1.0), rel=0.05)

    @pytest.mark.unit
    def test_gbm_expected_value(self, reproducible_rng) -> None:
        """[T1] E[S(T)] = S(0) e^(μT)."""
        model = GeometricBrownianMotion(mu=0.05, sigma=0.2)
        paths = simulate_paths(model, 100.0, [0.0, 1.0], 10_000, reproducible_rng)
        expected = model.expected_value(1.0, 100.0)

        relative_error = abs(paths.terminal_values.mean() / expected - 1.0)
        assert relative_error < mc_tolerance(10_000, sigma=0.2, confidence=4.0), (
            f"GBM mean {paths.terminal_values.mean():.4f} vs expected {expected:.4f}"
        )

    @pytest.mark.unit
    def test_gbm_paths_stay_positive(self, reproducible_rng) -> None:
        model = GeometricBrownianMotion(mu=-0.5, sigma=1.5)
        paths = simulate_paths(model, 1.0, uniform_time_grid(2.0, 50), 1_000, reproducible_rng)
        assert np.all(paths.values > 0)

    @pytest.mark.unit
    def test_ou_moments(self, reproducible_rng) -> None:
        model = OrnsteinUhlenbeck(mean_reversion=2.0, long_run_mean=0.05, sigma=0.1)
        paths = simulate_paths(model, 0.0, uniform_time_grid(1.0, 100), 10_000, reproducible_rng)
        terminal = paths.terminal_values

        std = float(np.sqrt(model.variance(1.0)))
        # Euler bias on the mean is ~1e-4 at 100 steps
        tol = mc_tolerance(10_000, sigma=std, confidence=4.0) + 2e-4
        assert terminal.mean() == pytest.approx(model.expected_value(1.0, 0.0), abs=tol)
        assert terminal.var() == pytest.approx(model.variance(1.0), rel=0.08)

    @pytest.mark.unit
    def test_cir_mean_and_non_negativity(self, reproducible_rng) -> None:
        model = CoxIngersollRoss(mean_reversion=1.5, long_run_mean=0.04, sigma=0.1)
        paths = simulate_paths(model, 0.03, uniform_time_grid(1.0, 250), 10_000, reproducible_rng)

        assert np.all(paths.values >= 0)
        tol = mc_tolerance(10_000, sigma=0.0115, confidence=4.0) + 1e-4
        assert paths.terminal_values.mean() == pytest.approx(
            model.expected_value(1.0, 0.03), abs=tol
        )

    @pytest.mark.unit
    def test_cir_full_truncation_without_feller(self, reproducible_rng) -> None:
        model = CoxIngersollRoss(mean_reversion=0.5, long_run_mean=0.01, sigma=0.5)
        assert not model.satisfies_feller()

        paths = simulate_paths(model, 0.01, uniform_time_grid(1.0, 100), 2_000, reproducible_rng)
        assert np.all(paths.values >= 0)
        assert np.all(np.isfinite(paths.values))


# =============================================================================
# Fractional Processes
# =============================================================================


class TestFractionalProcesses:
    """[T1] Cov[B_H(s), B_H(t)] = (s^(2H) + t^(2H) - |t - s|^(2H)) / 2."""

    @pytest.mark.unit
    def test_half_hurst_is_brownian_motion(self, reproducible_rng) -> None:
        times = np.array([0.0, 0.1, 0.35, 1.0, 1.2])
        shocks = reproducible_rng.standard_normal((5, 4))

        np.testing.assert_allclose(
            fractional_brownian_motion(times, shocks, 0.5),
            brownian_motion(times, shocks),
            rtol=1e-10,
            atol=1e-14,
        )

    @pytest.mark.unit
    def test_fbm_starts_at_initial_value(self, reproducible_rng) -> None:
        paths = simulate_paths(
            FractionalBrownianMotion(hurst=0.3), 2.0, uniform_time_grid(1.0, 10), 50, reproducible_rng
        )
        assert np.all(paths.values[:, 0] == 2.0)

    @pytest.mark.unit
    @pytest.mark.parametrize("hurst", [0.25, 0.7])
    def test_fbm_variance(self, hurst, reproducible_rng) -> None:
        """[T1] Var[B_H(t)] = t^(2H)."""
        model = FractionalBrownianMotion(hurst=hurst)
        paths = simulate_paths(model, 0.0, uniform_time_grid(1.0, 20), 20_000, reproducible_rng)

        for index, t in ((10, 0.5), (20, 1.0)):
            # Sample variance has relative standard error sqrt(2/n) ≈ 1%
            assert paths.values[:, index].var() == pytest.approx(model.variance(t), rel=0.05)

    @pytest.mark.unit
    @pytest.mark.parametrize("hurst", [0.3, 0.75])
    def test_fbm_increment_correlation(self, hurst, reproducible_rng) -> None:
        """Persistent for H > 1/2, anti-persistent for H < 1/2."""
        model = FractionalBrownianMotion(hurst=hurst)
        paths = simulate_paths(model, 0.0, uniform_time_grid(1.0, 10), 20_000, reproducible_rng)
        increments = np.diff(paths.values, axis=1)

        sample = np.corrcoef(increments[:, 3], increments[:, 4])[0, 1]
        assert sample == pytest.approx(model.increment_correlation(), abs=0.03)
        assert np.sign(sample) == np.sign(hurst - 0.5)

    @pytest.mark.unit
    def test_fou_half_hurst_matches_ou(self) -> None:
        grid = uniform_time_grid(1.0, 50)
        fractional = FractionalOrnsteinUhlenbeck(
            mean_reversion=1.5, long_run_mean=0.05, sigma=0.1, hurst=0.5
        )
        classical = OrnsteinUhlenbeck(mean_reversion=1.5, long_run_mean=0.05, sigma=0.1)

        fou = simulate_paths(fractional, 0.0, grid, 100, np.random.default_rng(11))
        ou = simulate_paths(classical, 0.0, grid, 100, np.random.default_rng(11))
        np.testing.assert_allclose(fou.values, ou.values, rtol=1e-10, atol=1e-12)

    @pytest.mark.unit
    def test_fou_noise_free_path_is_mean(self) -> None:
        model = FractionalOrnsteinUhlenbeck(
            mean_reversion=1.5, long_run_mean=0.0, sigma=0.2, hurst=0.7
        )
        grid = uniform_time_grid(1.0, 1000)
        path = simulate(model, 1.0, grid, ZeroShocks())

        np.testing.assert_allclose(path.values, model.expected_value(grid, 1.0), atol=5e-4)

    @pytest.mark.unit
    def test_fcir_stays_non_negative(self, reproducible_rng) -> None:
        model = FractionalCoxIngersollRoss(
            mean_reversion=0.5, long_run_mean=0.01, sigma=0.5, hurst=0.3
        )
        paths = simulate_paths(model, 0.01, uniform_time_grid(1.0, 100), 2_000, reproducible_rng)

        assert np.all(paths.values >= 0)
        assert np.all(np.isfinite(paths.values))

    @pytest.mark.unit
    def test_fcir_rejects_negative_start(self, reproducible_rng) -> None:
        model = FractionalCoxIngersollRoss(
            mean_reversion=1.0, long_run_mean=0.04, sigma=0.1, hurst=0.6
        )
        with pytest.raises(ConstructionError, match="initial value"):
            simulate(model, -0.01, [0.0, 0.5, 1.0], reproducible_rng)


# =============================================================================
# Short-Rate Models
# =============================================================================


class TestShortRateModels:
    """[T1] Drifts fitted to the initial forward curve."""

    GRID = uniform_time_grid(1.0, 2000)

    @pytest.mark.unit
    def test_ho_lee_theta(self, upward_curve) -> None:
        """[T1] θ(t) = ∂f(0,t)/∂t + σ²t."""
        model = HoLee(sigma=0.02, term_structure=upward_curve)
        t = 1.5
        assert model.theta(t) == pytest.approx(upward_curve.forward_slope(t) + 0.0004 * t)

    @pytest.mark.unit
    def test_ho_lee_noise_free_path(self, nelson_siegel_curve) -> None:
        sigma = 0.05
        model = HoLee(sigma=sigma, term_structure=nelson_siegel_curve)
        r0 = nelson_siegel_curve.instantaneous_forward(0.0)
        path = simulate(model, r0, self.GRID, ZeroShocks())

        expected = nelson_siegel_curve.instantaneous_forward(self.GRID) + 0.5 * sigma**2 * self.GRID**2
        np.testing.assert_allclose(path.values, expected, atol=2e-5)

    @pytest.mark.unit
    def test_hull_white_noise_free_path(self, nelson_siegel_curve) -> None:
        a, sigma = 0.1, 0.05
        model = HullWhite(mean_reversion=a, sigma=sigma, term_structure=nelson_siegel_curve)
        r0 = nelson_siegel_curve.instantaneous_forward(0.0)
        path = simulate(model, r0, self.GRID, ZeroShocks())

        convexity = sigma**2 / (2 * a**2) * (1 - np.exp(-a * self.GRID)) ** 2
        expected = nelson_siegel_curve.instantaneous_forward(self.GRID) + convexity
        np.testing.assert_allclose(path.values, expected, atol=2e-5)

    @pytest.mark.unit
    def test_hull_white_flat_curve_mean(self, reproducible_rng) -> None:
        """[T1] Flat curve: E[r(t)] = f + σ²/(2a²) (1 - e^(-at))²."""
        a, sigma, rate = 0.5, 0.01, 0.03
        model = HullWhite(mean_reversion=a, sigma=sigma, term_structure=YieldCurve.flat(rate))
        paths = simulate_paths(model, rate, uniform_time_grid(2.0, 200), 10_000, reproducible_rng)

        expected = rate + sigma**2 / (2 * a**2) * (1 - np.exp(-a * 2.0)) ** 2
        std = sigma * np.sqrt((1 - np.exp(-2 * a * 2.0)) / (2 * a))
        tol = mc_tolerance(10_000, sigma=std, confidence=4.0) + 1e-5
        assert paths.terminal_values.mean() == pytest.approx(expected, abs=tol)

    @pytest.mark.unit
    def test_bdt_noise_free_path_follows_forwards(self, nelson_siegel_curve, humped_vol_curve) -> None:
        model = BlackDermanToy(volatility_curve=humped_vol_curve, term_structure=nelson_siegel_curve)
        r0 = nelson_siegel_curve.instantaneous_forward(0.0)
        path = simulate(model, r0, self.GRID, ZeroShocks())

        expected = nelson_siegel_curve.instantaneous_forward(self.GRID)
        np.testing.assert_allclose(path.values, expected, rtol=1e-3)

    @pytest.mark.unit
    def test_bdt_constant_vol_has_no_mean_reversion(self, nelson_siegel_curve) -> None:
        model = BlackDermanToy(
            volatility_curve=VolatilityCurve.constant(0.2), term_structure=nelson_siegel_curve
        )
        t = 2.0
        forward = nelson_siegel_curve.instantaneous_forward(t)
        assert model.theta(t) == pytest.approx(nelson_siegel_curve.forward_slope(t) / forward)
        assert model.drift(t, np.array([np.log(0.5)]))[0] == pytest.approx(model.theta(t))

    @pytest.mark.unit
    def test_bdt_rates_positive(self, reproducible_rng, upward_curve, humped_vol_curve) -> None:
        model = BlackDermanToy(volatility_curve=humped_vol_curve, term_structure=upward_curve)
        paths = simulate_paths(model, 0.02, uniform_time_grid(5.0, 100), 1_000, reproducible_rng)
        assert np.all(paths.values > 0)

    @pytest.mark.unit
    def test_bdt_underflow_raises_numerical_domain_error(self) -> None:
        model = BlackDermanToy(
            volatility_curve=VolatilityCurve.constant(0.2), term_structure=YieldCurve.flat(0.03)
        )
        # σ√Δ z ≈ -1400 in one step: exp() of the log rate underflows to 0.0
        with pytest.raises(NumericalDomainError, match="underflowed to zero at step 1") as excinfo:
            simulate(model, 0.03, [0.0, 0.5, 1.0], ConstantShocks(-1e4))

        assert excinfo.value.point == pytest.approx(0.5)
        assert excinfo.value.value < -700

    @pytest.mark.unit
    def test_extended_vasicek_noise_free_path_follows_forwards(self, nelson_siegel_curve) -> None:
        speed = VolatilityCurve(
            maturities=np.array([0.0, 0.5, 1.0]), vols=np.array([0.05, 0.4, 0.2])
        )
        model = ExtendedVasicek(mean_reversion=speed, sigma=0.02, term_structure=nelson_siegel_curve)
        r0 = nelson_siegel_curve.instantaneous_forward(0.0)
        path = simulate(model, r0, self.GRID, ZeroShocks())

        expected = nelson_siegel_curve.instantaneous_forward(self.GRID)
        np.testing.assert_allclose(path.values, expected, atol=2e-5)

    @pytest.mark.unit
    def test_extended_vasicek_constant_speed_is_hull_white_drift(self, upward_curve) -> None:
        """Without the σ² convexity term both drifts are f' + a f - a r."""
        a = 0.3
        extended = ExtendedVasicek(
            mean_reversion=VolatilityCurve.constant(a), sigma=0.01, term_structure=upward_curve
        )
        hull_white = HullWhite(mean_reversion=a, sigma=0.0, term_structure=upward_curve)
        rates = np.array([0.0, 0.02, 0.05])

        for t in (0.25, 1.5, 4.0):
            np.testing.assert_allclose(extended.drift(t, rates), hull_white.drift(t, rates))

"""
Stochastic process models.

Each model is a frozen dataclass holding its parameters and knows how to
advance a block of paths across a time grid given standard normal shocks.
Step sizes are taken from the grid, so non-uniform grids are supported.

[T1] Euler-Maruyama: X(t+Δ) = X(t) + μ(t, X)Δ + σ(t, X)√Δ Z

Models:
  ArithmeticBrownianMotion  dX = μ dt + σ dW                (standard(): dX = dW)
  GeometricBrownianMotion   dS = μS dt + σS dW              (exact log step)
  OrnsteinUhlenbeck         dX = κ(μ - X) dt + σ dW
  CoxIngersollRoss          dX = κ(μ - X) dt + σ√X dW        (full truncation)
  HoLee                     dr = θ(t) dt + σ dW
  HullWhite                 dr = (θ(t) - a r) dt + σ dW
  ExtendedVasicek           dr = (θ(t) - α(t) r) dt + σ dW
  BlackDermanToy            d ln r = [θ(t) + σ'(t)/σ(t) ln r] dt + σ(t) dW

Fractional models replace dW by increments of fractional Brownian motion
B_H with Hurst exponent H in (0, 1), sampled exactly on the grid:
  FractionalBrownianMotion        dX = dB_H
  FractionalOrnsteinUhlenbeck     dX = κ(μ - X) dt + σ dB_H
  FractionalCoxIngersollRoss      dX = κ(μ - X) dt + σ√X dB_H  (full truncation)

Short-rate drifts θ(t) are fitted to the initial instantaneous forward
curve f(0, t) of the supplied term structure.

References
----------
[T1] Glasserman, P. (2003). Monte Carlo Methods in Financial Engineering, Ch. 3.
[T1] Brigo, D., & Mercurio, F. (2006). Interest Rate Models - Theory and
     Practice (2nd ed.), Ch. 3.
[T1] Lord, R., Koekkoek, R., & van Dijk, D. (2010). A comparison of biased
     simulation schemes for stochastic volatility models. Quant. Finance, 10(2).
[T1] Mandelbrot, B. B., & Van Ness, J. W. (1968). Fractional Brownian motions,
     fractional noises and applications. SIAM Review, 10(4).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
from scipy import linalg

from quant_numerics.curves.volatility_curve import VolatilityCurve
from quant_numerics.curves.yield_curve import TermStructure
from quant_numerics.errors import ConstructionError, NumericalDomainError


def _require_finite(name: str, value: float) -> None:
    if not np.isfinite(value):
        raise ConstructionError(f"CRITICAL: {name} must be finite, got {value}")


def _require_non_negative(name: str, value: float) -> None:
    _require_finite(name, value)
    if value < 0:
        raise ConstructionError(f"CRITICAL: {name} must be >= 0, got {value}")


def _require_positive(name: str, value: float) -> None:
    _require_finite(name, value)
    if value <= 0:
        raise ConstructionError(f"CRITICAL: {name} must be > 0, got {value}")


def _require_term_structure(term_structure) -> None:
    if not isinstance(term_structure, TermStructure):
        raise ConstructionError(
            f"CRITICAL: term_structure must be a TermStructure, got {type(term_structure).__name__}"
        )


def _require_curve(name: str, curve) -> None:
    if not isinstance(curve, VolatilityCurve):
        raise ConstructionError(
            f"CRITICAL: {name} must be a VolatilityCurve, got {type(curve).__name__}"
        )


def _require_hurst(hurst: float) -> None:
    _require_finite("hurst", hurst)
    if not 0 < hurst < 1:
        raise ConstructionError(f"CRITICAL: hurst must be in (0, 1), got {hurst}")


def brownian_motion(times: np.ndarray, shocks: np.ndarray) -> np.ndarray:
    """
    Brownian paths W(t) on a time grid from standard normal shocks.

    Parameters
    ----------
    times : ndarray
        Time grid, shape (n_steps + 1,), starting at 0
    shocks : ndarray
        Standard normals, shape (n_paths, n_steps)

    Returns
    -------
    ndarray
        W, shape (n_paths, n_steps + 1), with W[:, 0] = 0
    """
    increments = np.sqrt(np.diff(times)) * shocks
    brownian = np.zeros((shocks.shape[0], len(times)))
    brownian[:, 1:] = np.cumsum(increments, axis=1)
    return brownian


def fractional_brownian_motion(times: np.ndarray, shocks: np.ndarray, hurst: float) -> np.ndarray:
    """
    Fractional Brownian paths B_H(t) on a time grid from standard normal shocks.

    Sampled exactly: the covariance of B_H at the grid points after 0 is
    factored as L Lᵀ (Cholesky) and each path is L z. For H = 1/2 the
    factor is the cumulative √Δt matrix, so the paths equal
    brownian_motion() for the same shocks.

    [T1] Cov[B_H(s), B_H(t)] = (s^(2H) + t^(2H) - |t - s|^(2H)) / 2

    Parameters
    ----------
    times : ndarray
        Time grid, shape (n_steps + 1,), starting at 0
    shocks : ndarray
        Standard normals, shape (n_paths, n_steps)
    hurst : float
        Hurst exponent H in (0, 1)

    Returns
    -------
    ndarray
        B_H, shape (n_paths, n_steps + 1), with B_H[:, 0] = 0

    Raises
    ------
    NumericalDomainError
        If the covariance is numerically singular on this grid (H close
        to 1 with very fine steps)
    """
    grid = times[1:]
    two_h = 2.0 * hurst
    covariance = 0.5 * (
        grid[:, None] ** two_h
        + grid[None, :] ** two_h
        - np.abs(grid[:, None] - grid[None, :]) ** two_h
    )
    try:
        factor = linalg.cholesky(covariance, lower=True)
    except linalg.LinAlgError as e:
        raise NumericalDomainError(
            f"fractional Brownian covariance is not positive definite for H={hurst} "
            f"on {len(grid)} steps",
            point=hurst,
        ) from e

    paths = np.zeros((shocks.shape[0], len(times)))
    paths[:, 1:] = shocks @ factor.T
    return paths


class ProcessModel(ABC):
    """
    Abstract diffusion model.

    Subclasses supply drift and diffusion coefficients; evolve() applies the
    Euler scheme unless a subclass has a better discretisation.
    """

    @abstractmethod
    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        """Drift coefficient μ(t, x)."""

    @abstractmethod
    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        """Diffusion coefficient σ(t, x)."""

    def validate_start(self, initial_value: float, times: np.ndarray) -> None:
        """Reject initial values (or grids) the model cannot start from."""

    def step(self, t: float, dt: float, x: np.ndarray, z: np.ndarray) -> np.ndarray:
        """One Euler step of size dt from time t."""
        return x + self.drift(t, x) * dt + self.diffusion(t, x) * np.sqrt(dt) * z

    def evolve(self, initial_value: float, times: np.ndarray, shocks: np.ndarray) -> np.ndarray:
        """
        Advance a block of paths across the grid.

        Parameters
        ----------
        initial_value : float
            X(0), shared by all paths
        times : ndarray
            Validated time grid, shape (n_steps + 1,)
        shocks : ndarray
            Standard normals, shape (n_paths, n_steps)

        Returns
        -------
        ndarray
            Paths, shape (n_paths, n_steps + 1)
        """
        n_paths, n_steps = shocks.shape
        values = np.empty((n_paths, n_steps + 1))
        values[:, 0] = initial_value
        dts = np.diff(times)
        for k in range(n_steps):
            values[:, k + 1] = self.step(times[k], dts[k], values[:, k], shocks[:, k])
        return values


# =============================================================================
# Diffusions
# =============================================================================


@dataclass(frozen=True)
class ArithmeticBrownianMotion(ProcessModel):
    """
    Arithmetic Brownian motion dX = μ dt + σ dW.

    Attributes
    ----------
    mu : float
        Constant drift
    sigma : float
        Constant volatility, >= 0
    """

    mu: float
    sigma: float

    def __post_init__(self) -> None:
        _require_finite("mu", self.mu)
        _require_non_negative("sigma", self.sigma)

    @classmethod
    def standard(cls) -> "ArithmeticBrownianMotion":
        """Standard Brownian motion dX = dW."""
        return cls(mu=0.0, sigma=1.0)

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.mu, dtype=float)

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.sigma, dtype=float)

    def evolve(self, initial_value: float, times: np.ndarray, shocks: np.ndarray) -> np.ndarray:
        # Summed Euler increments: X(t) = X(0) + μt + σW(t)
        brownian = brownian_motion(times, shocks)
        return initial_value + self.mu * times + self.sigma * brownian

    def expected_value(self, t: np.ndarray, initial_value: float) -> np.ndarray:
        """[T1] E[X(t)] = X(0) + μt"""
        return initial_value + self.mu * np.asarray(t, dtype=float)

    def variance(self, t: np.ndarray) -> np.ndarray:
        """[T1] Var[X(t)] = σ²t"""
        return self.sigma**2 * np.asarray(t, dtype=float)


@dataclass(frozen=True)
class GeometricBrownianMotion(ProcessModel):
    """
    Geometric Brownian motion dS = μS dt + σS dW.

    Attributes
    ----------
    mu : float
        Drift rate
    sigma : float
        Volatility, >= 0
    """

    mu: float
    sigma: float

    def __post_init__(self) -> None:
        _require_finite("mu", self.mu)
        _require_non_negative("sigma", self.sigma)

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.mu * x

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.sigma * x

    def validate_start(self, initial_value: float, times: np.ndarray) -> None:
        if initial_value <= 0:
            raise ConstructionError(
                f"CRITICAL: GBM initial value must be > 0, got {initial_value}"
            )

    def evolve(self, initial_value: float, times: np.ndarray, shocks: np.ndarray) -> np.ndarray:
        # Exact solution: S(t) = S(0) exp((μ - σ²/2)t + σW(t))
        brownian = brownian_motion(times, shocks)
        log_paths = (self.mu - 0.5 * self.sigma**2) * times + self.sigma * brownian
        return initial_value * np.exp(log_paths)

    def expected_value(self, t: np.ndarray, initial_value: float) -> np.ndarray:
        """[T1] E[S(t)] = S(0) e^(μt)"""
        return initial_value * np.exp(self.mu * np.asarray(t, dtype=float))


@dataclass(frozen=True)
class OrnsteinUhlenbeck(ProcessModel):
    """
    Ornstein-Uhlenbeck process dX = κ(μ - X) dt + σ dW.

    Attributes
    ----------
    mean_reversion : float
        Speed κ > 0
    long_run_mean : float
        Level μ
    sigma : float
        Volatility, >= 0
    """

    mean_reversion: float
    long_run_mean: float
    sigma: float

    def __post_init__(self) -> None:
        _require_positive("mean_reversion", self.mean_reversion)
        _require_finite("long_run_mean", self.long_run_mean)
        _require_non_negative("sigma", self.sigma)

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.mean_reversion * (self.long_run_mean - x)

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.sigma, dtype=float)

    def expected_value(self, t: np.ndarray, initial_value: float) -> np.ndarray:
        """[T1] E[X(t)] = μ + (X(0) - μ) e^(-κt)"""
        decay = np.exp(-self.mean_reversion * np.asarray(t, dtype=float))
        return self.long_run_mean + (initial_value - self.long_run_mean) * decay

    def variance(self, t: np.ndarray) -> np.ndarray:
        """[T1] Var[X(t)] = σ²/(2κ) (1 - e^(-2κt))"""
        kappa = self.mean_reversion
        return self.sigma**2 / (2 * kappa) * (1 - np.exp(-2 * kappa * np.asarray(t, dtype=float)))


@dataclass(frozen=True)
class CoxIngersollRoss(ProcessModel):
    """
    Cox-Ingersoll-Ross process dX = κ(μ - X) dt + σ√X dW.

    Simulated with full truncation: the drift and diffusion see max(X, 0)
    and the reported path is max(X, 0).

    Attributes
    ----------
    mean_reversion : float
        Speed κ > 0
    long_run_mean : float
        Level μ >= 0
    sigma : float
        Volatility, >= 0
    """

    mean_reversion: float
    long_run_mean: float
    sigma: float

    def __post_init__(self) -> None:
        _require_positive("mean_reversion", self.mean_reversion)
        _require_non_negative("long_run_mean", self.long_run_mean)
        _require_non_negative("sigma", self.sigma)

    def satisfies_feller(self) -> bool:
        """[T1] 2κμ >= σ² keeps the exact process away from zero."""
        return 2 * self.mean_reversion * self.long_run_mean >= self.sigma**2

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.mean_reversion * (self.long_run_mean - np.maximum(x, 0.0))

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.sigma * np.sqrt(np.maximum(x, 0.0))

    def validate_start(self, initial_value: float, times: np.ndarray) -> None:
        if initial_value < 0:
            raise ConstructionError(
                f"CRITICAL: CIR initial value must be >= 0, got {initial_value}"
            )

    def evolve(self, initial_value: float, times: np.ndarray, shocks: np.ndarray) -> np.ndarray:
        return np.maximum(super().evolve(initial_value, times, shocks), 0.0)

    def expected_value(self, t: np.ndarray, initial_value: float) -> np.ndarray:
        """[T1] E[X(t)] = μ + (X(0) - μ) e^(-κt)"""
        decay = np.exp(-self.mean_reversion * np.asarray(t, dtype=float))
        return self.long_run_mean + (initial_value - self.long_run_mean) * decay


# =============================================================================
# Short-Rate Models
# =============================================================================


@dataclass(frozen=True)
class HoLee(ProcessModel):
    """
    Ho-Lee short-rate model dr = θ(t) dt + σ dW.

    [T1] θ(t) = ∂f(0,t)/∂t + σ²t

    Attributes
    ----------
    sigma : float
        Short-rate volatility, >= 0
    term_structure : TermStructure
        Initial curve supplying f(0, t)
    """

    sigma: float
    term_structure: TermStructure

    def __post_init__(self) -> None:
        _require_non_negative("sigma", self.sigma)
        _require_term_structure(self.term_structure)

    def theta(self, t):
        """Drift fitted to the initial forward curve."""
        return self.term_structure.forward_slope(t) + self.sigma**2 * t

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.theta(t), dtype=float)

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.sigma, dtype=float)


@dataclass(frozen=True)
class HullWhite(ProcessModel):
    """
    Hull-White (extended Vasicek) short-rate model dr = (θ(t) - a r) dt + σ dW.

    [T1] θ(t) = ∂f(0,t)/∂t + a f(0,t) + σ²/(2a) (1 - e^(-2at))

    Attributes
    ----------
    mean_reversion : float
        Speed a > 0
    sigma : float
        Short-rate volatility, >= 0
    term_structure : TermStructure
        Initial curve supplying f(0, t)
    """

    mean_reversion: float
    sigma: float
    term_structure: TermStructure

    def __post_init__(self) -> None:
        _require_positive("mean_reversion", self.mean_reversion)
        _require_non_negative("sigma", self.sigma)
        _require_term_structure(self.term_structure)

    def theta(self, t):
        """Drift fitted to the initial forward curve."""
        a = self.mean_reversion
        curve = self.term_structure
        return (
            curve.forward_slope(t)
            + a * curve.instantaneous_forward(t)
            + self.sigma**2 / (2 * a) * (1 - np.exp(-2 * a * t))
        )

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.theta(t) - self.mean_reversion * x

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.sigma, dtype=float)


@dataclass(frozen=True)
class ExtendedVasicek(ProcessModel):
    """
    Extended Vasicek short-rate model dr = (θ(t) - α(t) r) dt + σ dW.

    Hull-White with a time-dependent mean-reversion speed. θ is fitted so
    that the noise-free path started at f(0, 0) is r(t) = f(0, t).

    [T1] θ(t) = ∂f(0,t)/∂t + α(t) f(0,t)

    Attributes
    ----------
    mean_reversion : VolatilityCurve
        Speed α(t) > 0, interpolated like a volatility term structure
    sigma : float
        Short-rate volatility, >= 0
    term_structure : TermStructure
        Initial curve supplying f(0, t)
    """

    mean_reversion: VolatilityCurve
    sigma: float
    term_structure: TermStructure

    def __post_init__(self) -> None:
        _require_curve("mean_reversion", self.mean_reversion)
        _require_non_negative("sigma", self.sigma)
        _require_term_structure(self.term_structure)

    def theta(self, t):
        """Drift fitted to the initial forward curve."""
        curve = self.term_structure
        return curve.forward_slope(t) + self.mean_reversion.value(t) * curve.instantaneous_forward(t)

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.theta(t) - self.mean_reversion.value(t) * x

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.sigma, dtype=float)


@dataclass(frozen=True)
class BlackDermanToy(ProcessModel):
    """
    Black-Derman-Toy short-rate model, lognormal in r.

    [T1] d ln r = [θ(t) + σ'(t)/σ(t) ln r] dt + σ(t) dW
    [T1] θ(t) = f'(0,t)/f(0,t) - σ'(t)/σ(t) ln f(0,t)
    With this θ the noise-free path is r(t) = f(0, t), so the median short
    rate follows the initial forward curve. Stepped in log space, hence
    simulated rates stay strictly positive.

    Attributes
    ----------
    volatility_curve : VolatilityCurve
        Log-rate volatility σ(t)
    term_structure : TermStructure
        Initial curve supplying f(0, t); forwards must be positive
    """

    volatility_curve: VolatilityCurve
    term_structure: TermStructure

    def __post_init__(self) -> None:
        _require_curve("volatility_curve", self.volatility_curve)
        _require_term_structure(self.term_structure)

    def theta(self, t):
        """Log-space drift fitted to the initial forward curve."""
        forward = self.term_structure.instantaneous_forward(t)
        vol_ratio = self.volatility_curve.slope(t) / self.volatility_curve.value(t)
        return self.term_structure.forward_slope(t) / forward - vol_ratio * np.log(forward)

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        """Drift of ln r."""
        vol_ratio = self.volatility_curve.slope(t) / self.volatility_curve.value(t)
        return self.theta(t) + vol_ratio * x

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        """Diffusion of ln r."""
        return np.full_like(x, self.volatility_curve.value(t), dtype=float)

    def validate_start(self, initial_value: float, times: np.ndarray) -> None:
        if initial_value <= 0:
            raise ConstructionError(
                f"CRITICAL: BDT initial short rate must be > 0, got {initial_value}"
            )
        forwards = np.asarray(self.term_structure.instantaneous_forward(times))
        if np.any(forwards <= 0):
            t_bad = float(times[np.argmax(forwards <= 0)])
            raise ConstructionError(
                f"CRITICAL: BDT requires positive forward rates, f(0, {t_bad}) <= 0"
            )

    def evolve(self, initial_value: float, times: np.ndarray, shocks: np.ndarray) -> np.ndarray:
        log_rates = super().evolve(np.log(initial_value), times, shocks)
        rates = np.exp(log_rates)

        # exp() of a very negative log rate underflows to exactly zero
        underflow = rates <= 0.0
        if np.any(underflow):
            step = int(np.argmax(underflow.any(axis=0)))
            raise NumericalDomainError(
                f"BlackDermanToy short rate underflowed to zero at step {step} (t={times[step]})",
                point=float(times[step]),
                value=float(log_rates[underflow][0]),
            )
        return rates


# =============================================================================
# Fractional Processes
# =============================================================================


class FractionalProcess(ProcessModel):
    """
    Diffusion driven by fractional Brownian motion B_H.

    [T1] X(t+Δ) = X(t) + μ(t, X)Δ + σ(t, X) ΔB_H

    The increments ΔB_H of a path are drawn jointly over the whole grid,
    so they are correlated across steps unless H = 1/2. Subclasses carry a
    ``hurst`` field.
    """

    def evolve(self, initial_value: float, times: np.ndarray, shocks: np.ndarray) -> np.ndarray:
        increments = np.diff(fractional_brownian_motion(times, shocks, self.hurst), axis=1)
        n_paths, n_steps = shocks.shape
        values = np.empty((n_paths, n_steps + 1))
        values[:, 0] = initial_value
        dts = np.diff(times)
        for k in range(n_steps):
            x = values[:, k]
            values[:, k + 1] = (
                x + self.drift(times[k], x) * dts[k] + self.diffusion(times[k], x) * increments[:, k]
            )
        return values


@dataclass(frozen=True)
class FractionalBrownianMotion(FractionalProcess):
    """
    Fractional Brownian motion dX = dB_H.

    H > 1/2 gives positively correlated (persistent) increments, H < 1/2
    anti-persistent ones.

    Attributes
    ----------
    hurst : float
        Hurst exponent H in (0, 1)
    """

    hurst: float

    def __post_init__(self) -> None:
        _require_hurst(self.hurst)

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.zeros_like(x, dtype=float)

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.ones_like(x, dtype=float)

    def evolve(self, initial_value: float, times: np.ndarray, shocks: np.ndarray) -> np.ndarray:
        return initial_value + fractional_brownian_motion(times, shocks, self.hurst)

    def variance(self, t: np.ndarray) -> np.ndarray:
        """[T1] Var[B_H(t)] = t^(2H)"""
        return np.asarray(t, dtype=float) ** (2 * self.hurst)

    def increment_correlation(self) -> float:
        """[T1] Corr[ΔB_H(k), ΔB_H(k+1)] = 2^(2H-1) - 1 on a uniform grid."""
        return 2.0 ** (2 * self.hurst - 1) - 1.0


@dataclass(frozen=True)
class FractionalOrnsteinUhlenbeck(FractionalProcess):
    """
    Fractional Ornstein-Uhlenbeck process dX = κ(μ - X) dt + σ dB_H.

    Attributes
    ----------
    mean_reversion : float
        Speed κ > 0
    long_run_mean : float
        Level μ
    sigma : float
        Volatility, >= 0
    hurst : float
        Hurst exponent H in (0, 1)
    """

    mean_reversion: float
    long_run_mean: float
    sigma: float
    hurst: float

    def __post_init__(self) -> None:
        _require_positive("mean_reversion", self.mean_reversion)
        _require_finite("long_run_mean", self.long_run_mean)
        _require_non_negative("sigma", self.sigma)
        _require_hurst(self.hurst)

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.mean_reversion * (self.long_run_mean - x)

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return np.full_like(x, self.sigma, dtype=float)

    def expected_value(self, t: np.ndarray, initial_value: float) -> np.ndarray:
        """[T1] E[X(t)] = μ + (X(0) - μ) e^(-κt), as B_H has zero mean."""
        decay = np.exp(-self.mean_reversion * np.asarray(t, dtype=float))
        return self.long_run_mean + (initial_value - self.long_run_mean) * decay


@dataclass(frozen=True)
class FractionalCoxIngersollRoss(FractionalProcess):
    """
    Fractional Cox-Ingersoll-Ross process dX = κ(μ - X) dt + σ√X dB_H.

    Full truncation as for CoxIngersollRoss: coefficients see max(X, 0)
    and the reported path is max(X, 0).

    Attributes
    ----------
    mean_reversion : float
        Speed κ > 0
    long_run_mean : float
        Level μ >= 0
    sigma : float
        Volatility, >= 0
    hurst : float
        Hurst exponent H in (0, 1)
    """

    mean_reversion: float
    long_run_mean: float
    sigma: float
    hurst: float

    def __post_init__(self) -> None:
        _require_positive("mean_reversion", self.mean_reversion)
        _require_non_negative("long_run_mean", self.long_run_mean)
        _require_non_negative("sigma", self.sigma)
        _require_hurst(self.hurst)

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.mean_reversion * (self.long_run_mean - np.maximum(x, 0.0))

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        return self.sigma * np.sqrt(np.maximum(x, 0.0))

    def validate_start(self, initial_value: float, times: np.ndarray) -> None:
        if initial_value < 0:
            raise ConstructionError(
                f"CRITICAL: CIR initial value must be >= 0, got {initial_value}"
            )

    def evolve(self, initial_value: float, times: np.ndarray, shocks: np.ndarray) -> np.ndarray:
        return np.maximum(super().evolve(initial_value, times, shocks), 0.0)


#: Closed set of models accepted by simulate()
PROCESS_MODELS = (
    ArithmeticBrownianMotion,
    GeometricBrownianMotion,
    OrnsteinUhlenbeck,
    CoxIngersollRoss,
    HoLee,
    HullWhite,
    ExtendedVasicek,
    BlackDermanToy,
    FractionalBrownianMotion,
    FractionalOrnsteinUhlenbeck,
    FractionalCoxIngersollRoss,
)

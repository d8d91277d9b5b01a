"""
Yield curves: interpolated zero curves and the Nelson-Siegel family.

Short-rate models consume the instantaneous forward curve f(0, t) and its
slope; both are available in closed form for every interpolation method.

Theory
------
[T1] Discount factor: P(t) = e^(-r(t) × t)
[T1] Forward rate: f(t₁,t₂) = (r(t₂)t₂ - r(t₁)t₁)/(t₂ - t₁)
[T1] Instantaneous forward: f(0,t) = d/dt [r(t) t] = r(t) + t r'(t)
[T1] Nelson-Siegel forward: f(τ) = β₀ + β₁e^(-τ/λ) + β₂(τ/λ)e^(-τ/λ)
[T1] Nelson-Siegel zero: y(τ) = β₀ + β₁(1-e^(-τ/λ))/(τ/λ) + β₂((1-e^(-τ/λ))/(τ/λ) - e^(-τ/λ))

References
----------
[T1] Nelson, C. R., & Siegel, A. F. (1987). Parsimonious modeling of yield
     curves. Journal of Business, 60(4), 473-489.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np
import pandas as pd
from scipy.interpolate import CubicSpline

from quant_numerics.errors import ConstructionError

logger = logging.getLogger(__name__)

ArrayOrScalar = Union[float, np.ndarray]


class InterpolationMethod(Enum):
    """Interpolation method for yield curve."""

    LINEAR = "linear"
    LOG_LINEAR = "log_linear"
    CUBIC = "cubic"


def _as_times(t: ArrayOrScalar) -> np.ndarray:
    times = np.asarray(t, dtype=float)
    if np.any(times < 0) or np.any(np.isnan(times)):
        raise ConstructionError(f"CRITICAL: maturity must be >= 0, got {t}")
    return times


def _as_output(t, values: np.ndarray) -> ArrayOrScalar:
    if np.ndim(t) == 0:
        return float(values)
    return values


class TermStructure(ABC):
    """
    Interest rate term structure (continuous compounding).

    Subclasses provide zero rates and the instantaneous forward curve;
    discounting and simple forward rates are derived here.
    """

    @abstractmethod
    def get_rate(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """Zero rate r(t)."""

    @abstractmethod
    def instantaneous_forward(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """Instantaneous forward rate f(0, t)."""

    @abstractmethod
    def forward_slope(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """Slope of the forward curve, df(0, t)/dt."""

    def discount_factor(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """
        Calculate discount factor at maturity t.

        [T1] P(t) = e^(-r(t) × t)

        Examples
        --------
        >>> curve = YieldCurve.flat(0.04)
        >>> round(curve.discount_factor(5.0), 4)  # e^(-0.04 * 5)
        0.8187
        """
        times = _as_times(t)
        rates = np.asarray(self.get_rate(times), dtype=float)
        return _as_output(t, np.exp(-rates * times))

    def discount_factors(self, maturities: np.ndarray) -> np.ndarray:
        """Discount factors for an array of maturities."""
        return np.asarray(self.discount_factor(np.asarray(maturities, dtype=float)))

    def forward_rate(self, t1: float, t2: float) -> float:
        """
        Calculate forward rate between t1 and t2.

        [T1] f(t₁,t₂) = (r(t₂)t₂ - r(t₁)t₁)/(t₂ - t₁)

        Examples
        --------
        >>> curve = YieldCurve(
        ...     maturities=np.array([1, 2]),
        ...     rates=np.array([0.03, 0.04]),
        ... )
        >>> round(curve.forward_rate(1.0, 2.0), 10)  # 1-year forward 1 year from now
        0.05
        """
        if t2 <= t1:
            raise ConstructionError(f"CRITICAL: t2 ({t2}) must be greater than t1 ({t1})")

        if t1 <= 0:
            # Spot rate to t2
            return float(self.get_rate(t2))

        r1 = self.get_rate(t1)
        r2 = self.get_rate(t2)

        return float((r2 * t2 - r1 * t1) / (t2 - t1))


@dataclass(frozen=True)
class YieldCurve(TermStructure):
    """
    Zero-coupon yield curve with interpolation.

    Rates are extrapolated flat beyond the first and last maturity, so the
    forward curve equals the end rate there and its slope is zero.

    Attributes
    ----------
    maturities : ndarray
        Maturities in years, strictly increasing and > 0
    rates : ndarray
        Zero rates at each maturity (continuous compounding)
    interpolation : InterpolationMethod
        Interpolation method for intermediate maturities
    curve_type : str
        Curve construction label
    """

    maturities: np.ndarray
    rates: np.ndarray
    interpolation: InterpolationMethod = InterpolationMethod.LINEAR
    curve_type: str = "custom"

    def __post_init__(self) -> None:
        """Validate curve data."""
        maturities = np.array(self.maturities, dtype=float)
        rates = np.array(self.rates, dtype=float)
        if maturities.ndim != 1 or maturities.shape != rates.shape:
            raise ConstructionError(
                f"CRITICAL: Maturities ({maturities.shape}) and rates ({rates.shape}) "
                "must be 1-D with the same length"
            )
        if len(maturities) == 0:
            raise ConstructionError("CRITICAL: Curve must have at least one point")
        if not np.all(np.isfinite(maturities)) or not np.all(np.isfinite(rates)):
            raise ConstructionError("CRITICAL: Maturities and rates must be finite")
        if maturities[0] <= 0:
            raise ConstructionError(f"CRITICAL: Maturities must be > 0, got {maturities[0]}")
        if not np.all(np.diff(maturities) > 0):
            raise ConstructionError("CRITICAL: Maturities must be strictly increasing")
        if not isinstance(self.interpolation, InterpolationMethod):
            raise ConstructionError(
                f"CRITICAL: interpolation must be an InterpolationMethod, got {self.interpolation!r}"
            )

        maturities.setflags(write=False)
        rates.setflags(write=False)
        object.__setattr__(self, "maturities", maturities)
        object.__setattr__(self, "rates", rates)

        spline = None
        if self.interpolation == InterpolationMethod.CUBIC and len(maturities) > 1:
            spline = CubicSpline(maturities, rates, bc_type="natural")
        object.__setattr__(self, "_spline", spline)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def flat(cls, rate: float) -> "YieldCurve":
        """
        Create flat yield curve.

        Examples
        --------
        >>> YieldCurve.flat(0.04).get_rate(10.0)
        0.04
        """
        maturities = np.array([0.25, 1, 5, 10, 30], dtype=float)
        rates = np.full_like(maturities, rate)
        return cls(maturities=maturities, rates=rates, curve_type="flat")

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        maturity_column: str = "maturity",
        rate_column: str = "rate",
        interpolation: InterpolationMethod = InterpolationMethod.LINEAR,
    ) -> "YieldCurve":
        """
        Create curve from a table of (maturity, zero rate) points.

        Parameters
        ----------
        frame : DataFrame
            One row per curve point; rows are sorted by maturity
        maturity_column : str
            Column holding maturities in years
        rate_column : str
            Column holding zero rates (decimal, continuous compounding)
        interpolation : InterpolationMethod
            Interpolation method

        Returns
        -------
        YieldCurve
        """
        missing = [c for c in (maturity_column, rate_column) if c not in frame.columns]
        if missing:
            raise ConstructionError(f"CRITICAL: curve frame is missing columns {missing}")

        points = frame[[maturity_column, rate_column]].dropna().sort_values(maturity_column)
        if len(points) < len(frame):
            logger.debug(f"from_frame: dropped {len(frame) - len(points)} incomplete rows")

        return cls(
            maturities=points[maturity_column].to_numpy(dtype=float),
            rates=points[rate_column].to_numpy(dtype=float),
            interpolation=interpolation,
            curve_type="frame",
        )

    # -------------------------------------------------------------------------
    # Interpolation
    # -------------------------------------------------------------------------

    def _segments(self, times: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Segment index of each time and mask of times strictly inside the knots."""
        inside = (times > self.maturities[0]) & (times < self.maturities[-1])
        idx = np.searchsorted(self.maturities, times, side="right") - 1
        idx = np.clip(idx, 0, max(len(self.maturities) - 2, 0))
        return idx, inside

    def get_rate(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """
        Get interpolated zero rate at maturity t.

        [T1] Uses configured interpolation method.

        Examples
        --------
        >>> curve = YieldCurve(
        ...     maturities=np.array([1, 2, 5, 10]),
        ...     rates=np.array([0.03, 0.035, 0.04, 0.045]),
        ... )
        >>> round(curve.get_rate(3.0), 10)  # Interpolated
        0.0366666667
        """
        times = _as_times(t)
        # Extrapolation: flat at ends
        clipped = np.clip(times, self.maturities[0], self.maturities[-1])

        if self.interpolation == InterpolationMethod.LOG_LINEAR:
            # Linear in -log P(t) = r(t) t
            log_df = self.maturities * self.rates
            rates = np.interp(clipped, self.maturities, log_df) / clipped
        elif self._spline is not None:
            rates = self._spline(clipped)
        else:
            rates = np.interp(clipped, self.maturities, self.rates)

        return _as_output(t, np.asarray(rates, dtype=float))

    def instantaneous_forward(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """
        Instantaneous forward rate f(0, t).

        [T1] f(0,t) = r(t) + t r'(t). With flat extrapolation f equals the
        end rate outside [maturities[0], maturities[-1]].
        """
        times = _as_times(t)
        rates = np.asarray(self.get_rate(times), dtype=float)
        if len(self.maturities) == 1:
            return _as_output(t, rates)

        idx, inside = self._segments(times)
        dm = np.diff(self.maturities)[idx]

        if self.interpolation == InterpolationMethod.LOG_LINEAR:
            log_df = self.maturities * self.rates
            inner = (log_df[idx + 1] - log_df[idx]) / dm
        elif self._spline is not None:
            inner = rates + times * self._spline(times, 1)
        else:
            slope = (self.rates[idx + 1] - self.rates[idx]) / dm
            inner = rates + times * slope

        return _as_output(t, np.where(inside, inner, rates))

    def forward_slope(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """
        Slope of the instantaneous forward curve, df(0, t)/dt.

        [T1] f'(t) = 2 r'(t) + t r''(t); zero in the flat extrapolation region
        and for log-linear interpolation (piecewise-constant forwards).
        """
        times = _as_times(t)
        if len(self.maturities) == 1 or self.interpolation == InterpolationMethod.LOG_LINEAR:
            return _as_output(t, np.zeros_like(times))

        idx, inside = self._segments(times)
        if self._spline is not None:
            inner = 2.0 * self._spline(times, 1) + times * self._spline(times, 2)
        else:
            dm = np.diff(self.maturities)[idx]
            inner = 2.0 * (self.rates[idx + 1] - self.rates[idx]) / dm

        return _as_output(t, np.where(inside, inner, 0.0))


@dataclass(frozen=True)
class NelsonSiegelCurve(TermStructure):
    """
    Nelson-Siegel term structure.

    [T1] y(τ) = β₀ + β₁(1-e^(-τ/λ))/(τ/λ) + β₂((1-e^(-τ/λ))/(τ/λ) - e^(-τ/λ))

    Attributes
    ----------
    beta0 : float
        Long-term level (asymptotic rate)
    beta1 : float
        Short-term component (slope); r(0) = beta0 + beta1
    beta2 : float
        Medium-term component (curvature)
    tau : float
        Decay parameter (λ), > 0

    Examples
    --------
    >>> curve = NelsonSiegelCurve(beta0=0.04, beta1=-0.02, beta2=0.01, tau=2.0)
    >>> round(curve.instantaneous_forward(0.0), 10)
    0.02
    """

    beta0: float
    beta1: float
    beta2: float
    tau: float

    def __post_init__(self) -> None:
        if not self.tau > 0:
            raise ConstructionError(f"CRITICAL: Tau must be positive, got {self.tau}")
        for name in ("beta0", "beta1", "beta2"):
            if not np.isfinite(getattr(self, name)):
                raise ConstructionError(f"CRITICAL: {name} must be finite")

    def get_rate(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """Zero rate at maturity t (beta0 + beta1 at t = 0)."""
        times = _as_times(t)
        x = times / self.tau
        safe_x = np.where(x > 0, x, 1.0)
        exp_term = np.exp(-x)
        term1 = np.where(x > 0, -np.expm1(-safe_x) / safe_x, 1.0)
        term2 = term1 - exp_term
        return _as_output(t, self.beta0 + self.beta1 * term1 + self.beta2 * term2)

    def instantaneous_forward(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """[T1] f(τ) = β₀ + β₁e^(-τ/λ) + β₂(τ/λ)e^(-τ/λ)"""
        x = _as_times(t) / self.tau
        exp_term = np.exp(-x)
        return _as_output(t, self.beta0 + self.beta1 * exp_term + self.beta2 * x * exp_term)

    def forward_slope(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """[T1] f'(τ) = e^(-τ/λ) [β₂(1 - τ/λ) - β₁] / λ"""
        x = _as_times(t) / self.tau
        exp_term = np.exp(-x)
        return _as_output(t, exp_term * (self.beta2 * (1.0 - x) - self.beta1) / self.tau)

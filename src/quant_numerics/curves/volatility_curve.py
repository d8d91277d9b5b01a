"""
Volatility term structure sigma(t) for short-rate models.

[T1] Shape-preserving piecewise cubic Hermite interpolation (PCHIP): the
interpolant is monotone wherever the data are, so it never overshoots
into negative volatilities between positive knots.

References
----------
[T1] Fritsch, F. N., & Carlson, R. E. (1980). Monotone piecewise cubic
     interpolation. SIAM J. Numer. Anal., 17(2), 238-246.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np
from scipy.interpolate import PchipInterpolator

from quant_numerics.errors import ConstructionError

ArrayOrScalar = Union[float, np.ndarray]


@dataclass(frozen=True)
class VolatilityCurve:
    """
    Deterministic volatility term structure.

    Values are extrapolated flat outside [maturities[0], maturities[-1]],
    where the slope is zero.

    Attributes
    ----------
    maturities : ndarray
        Knot times in years, strictly increasing and >= 0
    vols : ndarray
        Volatilities at the knots, all > 0

    Examples
    --------
    >>> curve = VolatilityCurve.constant(0.2)
    >>> curve.value(3.0)
    0.2
    >>> curve.slope(3.0)
    0.0
    """

    maturities: np.ndarray
    vols: np.ndarray

    def __post_init__(self) -> None:
        """Validate curve data."""
        maturities = np.array(self.maturities, dtype=float)
        vols = np.array(self.vols, dtype=float)
        if maturities.ndim != 1 or maturities.shape != vols.shape or len(maturities) == 0:
            raise ConstructionError(
                f"CRITICAL: maturities ({maturities.shape}) and vols ({vols.shape}) "
                "must be non-empty 1-D arrays of the same length"
            )
        if not np.all(np.isfinite(maturities)) or maturities[0] < 0:
            raise ConstructionError("CRITICAL: maturities must be finite and >= 0")
        if not np.all(np.diff(maturities) > 0):
            raise ConstructionError("CRITICAL: maturities must be strictly increasing")
        if not np.all(np.isfinite(vols)) or np.any(vols <= 0):
            raise ConstructionError(f"CRITICAL: vols must be finite and > 0, got {vols}")

        maturities.setflags(write=False)
        vols.setflags(write=False)
        object.__setattr__(self, "maturities", maturities)
        object.__setattr__(self, "vols", vols)

        interpolator = PchipInterpolator(maturities, vols) if len(maturities) > 1 else None
        object.__setattr__(self, "_interpolator", interpolator)

    @classmethod
    def constant(cls, vol: float) -> "VolatilityCurve":
        """Flat volatility curve."""
        return cls(maturities=np.array([0.0]), vols=np.array([vol]))

    def _clip(self, t: ArrayOrScalar) -> tuple[np.ndarray, np.ndarray]:
        times = np.asarray(t, dtype=float)
        if np.any(times < 0) or np.any(np.isnan(times)):
            raise ConstructionError(f"CRITICAL: time must be >= 0, got {t}")
        inside = (times > self.maturities[0]) & (times < self.maturities[-1])
        return np.clip(times, self.maturities[0], self.maturities[-1]), inside

    def value(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """Volatility sigma(t)."""
        clipped, _ = self._clip(t)
        if self._interpolator is None:
            values = np.full_like(clipped, self.vols[0])
        else:
            values = self._interpolator(clipped)
        return float(values) if np.ndim(t) == 0 else np.asarray(values)

    def slope(self, t: ArrayOrScalar) -> ArrayOrScalar:
        """Derivative d sigma(t) / dt (zero in the flat extrapolation region)."""
        clipped, inside = self._clip(t)
        if self._interpolator is None:
            slopes = np.zeros_like(clipped)
        else:
            slopes = np.where(inside, self._interpolator(clipped, 1), 0.0)
        return float(slopes) if np.ndim(t) == 0 else np.asarray(slopes)

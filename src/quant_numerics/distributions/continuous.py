"""
Continuous distributions: Gaussian, Uniform, Chi-squared, Gamma, Exponential.

Densities and cumulative distributions come from scipy.stats; characteristic
functions are the closed forms, arranged so that phi(0) evaluates to exactly 1.

[T1] Characteristic functions:
  Gaussian(mu, sigma):   exp(i mu t - sigma^2 t^2 / 2)
  Uniform(a, b):         exp(i t (a + b)/2) sin(t (b - a)/2) / (t (b - a)/2)
  ChiSquared(k):         (1 - 2 i t)^(-k/2)
  Gamma(alpha, theta):   (1 - i theta t)^(-alpha)
  Exponential(lambda):   lambda / (lambda - i t)

References
----------
[T1] Lukacs, E. (1970). Characteristic Functions (2nd ed.). Griffin.
"""

from dataclasses import dataclass

import numpy as np
from scipy import stats

from quant_numerics.distributions.base import (
    Distribution,
    _require_finite,
    _require_positive,
)
from quant_numerics.errors import ConstructionError


@dataclass(frozen=True)
class Gaussian(Distribution):
    """
    Normal distribution N(mean, std^2).

    Attributes
    ----------
    mean : float
        Location mu
    std : float
        Standard deviation sigma > 0
    """

    mean: float = 0.0
    std: float = 1.0

    def __post_init__(self) -> None:
        _require_finite("mean", self.mean)
        _require_positive("std", self.std)

    @property
    def variance(self) -> float:
        return self.std**2

    def _density(self, x: np.ndarray) -> np.ndarray:
        return stats.norm.pdf(x, loc=self.mean, scale=self.std)

    def _cumulative(self, x: np.ndarray) -> np.ndarray:
        return stats.norm.cdf(x, loc=self.mean, scale=self.std)

    def _characteristic_function(self, t: np.ndarray) -> np.ndarray:
        return np.exp(1j * self.mean * t - 0.5 * self.variance * t**2)


@dataclass(frozen=True)
class Uniform(Distribution):
    """
    Continuous uniform distribution on [lower, upper].

    Attributes
    ----------
    lower : float
        Left end of the support
    upper : float
        Right end of the support, > lower
    """

    lower: float = 0.0
    upper: float = 1.0

    def __post_init__(self) -> None:
        _require_finite("lower", self.lower)
        _require_finite("upper", self.upper)
        if not self.lower < self.upper:
            raise ConstructionError(
                f"CRITICAL: lower must be < upper, got lower={self.lower}, upper={self.upper}"
            )

    @property
    def width(self) -> float:
        return self.upper - self.lower

    @property
    def mean(self) -> float:
        return 0.5 * (self.lower + self.upper)

    @property
    def variance(self) -> float:
        return self.width**2 / 12.0

    def _density(self, x: np.ndarray) -> np.ndarray:
        return stats.uniform.pdf(x, loc=self.lower, scale=self.width)

    def _cumulative(self, x: np.ndarray) -> np.ndarray:
        return stats.uniform.cdf(x, loc=self.lower, scale=self.width)

    def _characteristic_function(self, t: np.ndarray) -> np.ndarray:
        # e^(i t mid) sin(t w / 2) / (t w / 2); np.sinc(x) = sin(pi x) / (pi x), 1 at x = 0
        return np.exp(1j * self.mean * t) * np.sinc(t * self.width / (2.0 * np.pi))


@dataclass(frozen=True)
class ChiSquared(Distribution):
    """
    Chi-squared distribution with `dof` degrees of freedom.

    Attributes
    ----------
    dof : float
        Degrees of freedom k > 0
    """

    dof: float

    def __post_init__(self) -> None:
        _require_positive("dof", self.dof)

    @property
    def mean(self) -> float:
        return float(self.dof)

    @property
    def variance(self) -> float:
        return 2.0 * self.dof

    def _density(self, x: np.ndarray) -> np.ndarray:
        return stats.chi2.pdf(x, self.dof)

    def _cumulative(self, x: np.ndarray) -> np.ndarray:
        return stats.chi2.cdf(x, self.dof)

    def _characteristic_function(self, t: np.ndarray) -> np.ndarray:
        # Principal branch: Re(1 - 2it) = 1 > 0
        return np.exp(-0.5 * self.dof * np.log(1.0 - 2.0j * t))


@dataclass(frozen=True)
class Gamma(Distribution):
    """
    Gamma distribution with shape alpha and scale theta.

    Attributes
    ----------
    shape : float
        Shape alpha > 0
    scale : float
        Scale theta > 0 (mean = alpha * theta)
    """

    shape: float
    scale: float = 1.0

    def __post_init__(self) -> None:
        _require_positive("shape", self.shape)
        _require_positive("scale", self.scale)

    @property
    def mean(self) -> float:
        return self.shape * self.scale

    @property
    def variance(self) -> float:
        return self.shape * self.scale**2

    def _density(self, x: np.ndarray) -> np.ndarray:
        return stats.gamma.pdf(x, self.shape, scale=self.scale)

    def _cumulative(self, x: np.ndarray) -> np.ndarray:
        return stats.gamma.cdf(x, self.shape, scale=self.scale)

    def _characteristic_function(self, t: np.ndarray) -> np.ndarray:
        return np.exp(-self.shape * np.log(1.0 - 1j * self.scale * t))


@dataclass(frozen=True)
class Exponential(Distribution):
    """
    Exponential distribution with rate lambda.

    Attributes
    ----------
    rate : float
        Rate lambda > 0 (mean = 1 / lambda)
    """

    rate: float = 1.0

    def __post_init__(self) -> None:
        _require_positive("rate", self.rate)

    @property
    def mean(self) -> float:
        return 1.0 / self.rate

    @property
    def variance(self) -> float:
        return 1.0 / self.rate**2

    def _density(self, x: np.ndarray) -> np.ndarray:
        return stats.expon.pdf(x, scale=1.0 / self.rate)

    def _cumulative(self, x: np.ndarray) -> np.ndarray:
        return stats.expon.cdf(x, scale=1.0 / self.rate)

    def _characteristic_function(self, t: np.ndarray) -> np.ndarray:
        return self.rate / (self.rate - 1j * t)

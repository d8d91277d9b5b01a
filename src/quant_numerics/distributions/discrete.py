"""
Discrete distributions: Bernoulli, Binomial, Poisson.

density() returns the probability mass function; it is 0 at non-integer
points and outside the support.

[T1] Characteristic functions:
  Bernoulli(p):    1 + p (exp(i t) - 1)
  Binomial(n, p):  (1 + p (exp(i t) - 1))^n
  Poisson(lambda): exp(lambda (exp(i t) - 1))
"""

from dataclasses import dataclass

import numpy as np
from scipy import stats

from quant_numerics.distributions.base import (
    Distribution,
    _require_positive,
    _require_probability,
)
from quant_numerics.errors import ConstructionError


@dataclass(frozen=True)
class Bernoulli(Distribution):
    """
    Bernoulli distribution on {0, 1}.

    Attributes
    ----------
    p : float
        Success probability in [0, 1]
    """

    p: float

    is_discrete = True

    def __post_init__(self) -> None:
        _require_probability("p", self.p)

    @property
    def mean(self) -> float:
        return float(self.p)

    @property
    def variance(self) -> float:
        return self.p * (1.0 - self.p)

    def _density(self, x: np.ndarray) -> np.ndarray:
        return stats.bernoulli.pmf(x, self.p)

    def _cumulative(self, x: np.ndarray) -> np.ndarray:
        return stats.bernoulli.cdf(x, self.p)

    def _characteristic_function(self, t: np.ndarray) -> np.ndarray:
        return 1.0 + self.p * (np.exp(1j * t) - 1.0)


@dataclass(frozen=True)
class Binomial(Distribution):
    """
    Binomial distribution: successes in n Bernoulli(p) trials.

    Attributes
    ----------
    n : int
        Number of trials, positive integer
    p : float
        Success probability in [0, 1]
    """

    n: int
    p: float

    is_discrete = True

    def __post_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, (int, np.integer)) or self.n < 1:
            raise ConstructionError(f"CRITICAL: n must be a positive integer, got {self.n!r}")
        _require_probability("p", self.p)

    @property
    def mean(self) -> float:
        return self.n * self.p

    @property
    def variance(self) -> float:
        return self.n * self.p * (1.0 - self.p)

    def _density(self, x: np.ndarray) -> np.ndarray:
        return stats.binom.pmf(x, self.n, self.p)

    def _cumulative(self, x: np.ndarray) -> np.ndarray:
        return stats.binom.cdf(x, self.n, self.p)

    def _characteristic_function(self, t: np.ndarray) -> np.ndarray:
        return (1.0 + self.p * (np.exp(1j * t) - 1.0)) ** int(self.n)


@dataclass(frozen=True)
class Poisson(Distribution):
    """
    Poisson distribution.

    Attributes
    ----------
    rate : float
        Intensity lambda > 0 (mean and variance)
    """

    rate: float

    is_discrete = True

    def __post_init__(self) -> None:
        _require_positive("rate", self.rate)

    @property
    def mean(self) -> float:
        return float(self.rate)

    @property
    def variance(self) -> float:
        return float(self.rate)

    def _density(self, x: np.ndarray) -> np.ndarray:
        return stats.poisson.pmf(x, self.rate)

    def _cumulative(self, x: np.ndarray) -> np.ndarray:
        return stats.poisson.cdf(x, self.rate)

    def _characteristic_function(self, t: np.ndarray) -> np.ndarray:
        return np.exp(self.rate * (np.exp(1j * t) - 1.0))

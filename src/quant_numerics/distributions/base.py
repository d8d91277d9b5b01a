"""
Base class and module-level entry points for probability distributions.

Every family exposes density (pmf for discrete families), cumulative and
characteristic function. Scalars in give Python scalars out; arrays in
give numpy arrays out.

[T1] Characteristic function: phi(t) = E[exp(i t X)], phi(0) = 1, |phi(t)| <= 1,
     phi(-t) = conj(phi(t)).
"""

from abc import ABC, abstractmethod
from typing import Union

import numpy as np

from quant_numerics.errors import ConstructionError

ArrayOrScalar = Union[float, np.ndarray]
ComplexOrArray = Union[complex, np.ndarray]


def _as_output(x, values: np.ndarray):
    """Return a Python scalar for scalar input, an ndarray otherwise."""
    if np.ndim(x) == 0:
        return np.asarray(values).item()
    return np.asarray(values)


def _require_finite(name: str, value: float) -> None:
    if not np.isfinite(value):
        raise ConstructionError(f"CRITICAL: {name} must be finite, got {value}")


def _require_positive(name: str, value: float) -> None:
    _require_finite(name, value)
    if value <= 0:
        raise ConstructionError(f"CRITICAL: {name} must be > 0, got {value}")


def _require_probability(name: str, value: float) -> None:
    _require_finite(name, value)
    if not 0.0 <= value <= 1.0:
        raise ConstructionError(f"CRITICAL: {name} must be in [0, 1], got {value}")


class Distribution(ABC):
    """
    Abstract probability distribution.

    Subclasses are frozen dataclasses holding the family parameters and
    implement the _density/_cumulative/_characteristic_function array kernels.
    """

    is_discrete: bool = False

    @abstractmethod
    def _density(self, x: np.ndarray) -> np.ndarray:
        """Density (or pmf) on a float array."""

    @abstractmethod
    def _cumulative(self, x: np.ndarray) -> np.ndarray:
        """Cumulative distribution on a float array."""

    @abstractmethod
    def _characteristic_function(self, t: np.ndarray) -> np.ndarray:
        """Characteristic function on a float array (complex result)."""

    @property
    @abstractmethod
    def mean(self) -> float:
        """E[X]."""

    @property
    @abstractmethod
    def variance(self) -> float:
        """Var[X]."""

    def density(self, x: ArrayOrScalar) -> ArrayOrScalar:
        """Probability density (pmf for discrete families); 0 outside the support."""
        return _as_output(x, self._density(np.asarray(x, dtype=float)))

    def cumulative(self, x: ArrayOrScalar) -> ArrayOrScalar:
        """P(X <= x)."""
        return _as_output(x, self._cumulative(np.asarray(x, dtype=float)))

    def characteristic_function(self, t: ArrayOrScalar) -> ComplexOrArray:
        """E[exp(i t X)] as a complex number (or complex array)."""
        values = self._characteristic_function(np.asarray(t, dtype=float))
        return _as_output(t, np.asarray(values, dtype=complex))

    @property
    def std(self) -> float:
        """Standard deviation sqrt(Var[X])."""
        return float(np.sqrt(self.variance))


def _check_spec(spec) -> Distribution:
    if not isinstance(spec, Distribution):
        raise TypeError(f"Expected a Distribution, got {type(spec).__name__}")
    return spec


def density(x: ArrayOrScalar, spec: Distribution) -> ArrayOrScalar:
    """
    Density (pmf for discrete families) of a distribution.

    Examples
    --------
    >>> from quant_numerics.distributions import Gaussian
    >>> round(density(0.0, Gaussian(0.0, 1.0)), 6)
    0.398942
    """
    return _check_spec(spec).density(x)


def cumulative(x: ArrayOrScalar, spec: Distribution) -> ArrayOrScalar:
    """Cumulative distribution function of a distribution."""
    return _check_spec(spec).cumulative(x)


def characteristic_function(t: ArrayOrScalar, spec: Distribution) -> ComplexOrArray:
    """
    Characteristic function E[exp(i t X)] of a distribution.

    Examples
    --------
    >>> from quant_numerics.distributions import Poisson
    >>> characteristic_function(0.0, Poisson(3.0))
    (1+0j)
    """
    return _check_spec(spec).characteristic_function(t)

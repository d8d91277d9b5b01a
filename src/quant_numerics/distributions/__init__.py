"""
Probability distributions and characteristic functions.

Provides:
- Continuous families: Gaussian, Uniform, ChiSquared, Gamma, Exponential
- Discrete families: Bernoulli, Binomial, Poisson
- Module-level density(), cumulative(), characteristic_function()
"""

from quant_numerics.distributions.base import (
    Distribution,
    characteristic_function,
    cumulative,
    density,
)
from quant_numerics.distributions.continuous import (
    ChiSquared,
    Exponential,
    Gamma,
    Gaussian,
    Uniform,
)
from quant_numerics.distributions.discrete import Bernoulli, Binomial, Poisson

#: Closed set of supported distribution families
DISTRIBUTION_FAMILIES = (
    Gaussian,
    Uniform,
    ChiSquared,
    Gamma,
    Exponential,
    Bernoulli,
    Binomial,
    Poisson,
)

__all__ = [
    "Distribution",
    "DISTRIBUTION_FAMILIES",
    # Functions
    "characteristic_function",
    "cumulative",
    "density",
    # Continuous
    "ChiSquared",
    "Exponential",
    "Gamma",
    "Gaussian",
    "Uniform",
    # Discrete
    "Bernoulli",
    "Binomial",
    "Poisson",
]

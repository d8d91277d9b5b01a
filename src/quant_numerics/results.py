"""
Immutable result type shared by the quadrature engine and the pricers.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class PriceResult:
    """
    Computed value with its convergence diagnostics.

    Attributes
    ----------
    value : float or complex
        Price or integral value (complex only for complex integrands)
    error_estimate : float
        Estimated absolute error (0.0 for closed-form results)
    converged : bool
        False when an iterative method hit its refinement cap
    evaluations : int
        Number of integrand evaluations (0 for closed-form results)
    method : str
        Name of the method that produced the value
    """

    value: float | complex
    error_estimate: float = 0.0
    converged: bool = True
    evaluations: int = 0
    method: str = "closed_form"

    @property
    def price(self) -> float | complex:
        """Alias of value for pricing call sites."""
        return self.value

    @property
    def is_finite(self) -> bool:
        """True when the value is finite."""
        return bool(np.isfinite(self.value))

    def __float__(self) -> float:
        return float(np.real(self.value))

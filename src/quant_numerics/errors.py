"""
Error taxonomy for quant-numerics.

Three failure classes with different propagation rules:

- ConstructionError: invalid parameters. Raised immediately where the
  object or argument is built, never deferred into a pricing call.
- ConvergenceWarning: an iterative method stopped at its refinement cap.
  Non-fatal; the best estimate and its residual are returned in the result.
- NumericalDomainError: a formula produced a non-finite value (e.g. a
  characteristic function evaluated across a branch cut). Fatal for the
  single call; carries the evaluation point that triggered it.
"""

from typing import Any


class ConstructionError(ValueError):
    """Invalid model, contract or configuration parameters."""


class ConvergenceWarning(UserWarning):
    """Iterative refinement reached its cap without meeting tolerance."""


class NumericalDomainError(ArithmeticError):
    """
    Non-finite value produced inside a numerical formula.

    Attributes
    ----------
    point : Any
        Evaluation point (argument) that produced the non-finite value
    value : Any
        The offending value
    """

    def __init__(self, message: str, point: Any = None, value: Any = None) -> None:
        super().__init__(message)
        self.point = point
        self.value = value

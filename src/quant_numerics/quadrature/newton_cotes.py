"""
Composite Newton-Cotes rules: midpoint, trapezoid, Simpson 3/8.

Fixed-grid rules on a finite interval split into N equal panels, with an
optional Richardson error estimate between N and 2N panels.

[T1] Richardson extrapolation: for a rule with error c*h^p + O(h^(p+2)),
  I ~ I_2N + (I_2N - I_N) / (2^p - 1)
  error(I_2N) ~ |I_2N - I_N| / (2^p - 1)
Trapezoid + Richardson is Simpson's 1/3 rule, so it is exact on cubics.

References
----------
[T1] Press, W. H. et al. (2007). Numerical Recipes (3rd ed.), Ch. 4.
[T1] Burden, R. L., & Faires, J. D. (2010). Numerical Analysis, Ch. 4.
"""

import logging
from typing import Callable

import numpy as np

from quant_numerics.quadrature.rules import QuadratureKind, QuadratureRule
from quant_numerics.results import PriceResult

logger = logging.getLogger(__name__)


def evaluate_integrand(
    integrand: Callable,
    nodes: np.ndarray,
    vectorized: bool = False,
) -> np.ndarray:
    """
    Evaluate an integrand on an array of nodes.

    Parameters
    ----------
    integrand : callable
        Scalar function, or array function when vectorized=True
    nodes : ndarray
        Evaluation points
    vectorized : bool, default False
        Call the integrand once on the whole array

    Returns
    -------
    ndarray
        Integrand values, same shape as nodes (real or complex dtype)
    """
    if vectorized:
        values = np.asarray(integrand(nodes))
        if values.shape != nodes.shape:
            values = np.broadcast_to(values, nodes.shape)
        return values
    return np.array([integrand(x) for x in nodes])


def midpoint_sum(
    integrand: Callable,
    lower: float,
    upper: float,
    panels: int,
    vectorized: bool = False,
) -> float | complex:
    """
    Composite midpoint rule.

    [T1] M_N = h * sum_{i=0}^{N-1} f(a + (i + 1/2) h),  h = (b - a) / N
    """
    h = (upper - lower) / panels
    nodes = lower + (np.arange(panels) + 0.5) * h
    values = evaluate_integrand(integrand, nodes, vectorized)
    return h * np.sum(values)


def trapezoid_sum(
    integrand: Callable,
    lower: float,
    upper: float,
    panels: int,
    vectorized: bool = False,
) -> float | complex:
    """
    Composite trapezoid rule.

    [T1] T_N = h * [f0/2 + f1 + ... + f(N-1) + fN/2],  h = (b - a) / N
    """
    h = (upper - lower) / panels
    nodes = np.linspace(lower, upper, panels + 1)
    weights = np.ones(panels + 1)
    weights[0] = 0.5
    weights[-1] = 0.5
    values = evaluate_integrand(integrand, nodes, vectorized)
    return h * np.sum(weights * values)


def simpson38_sum(
    integrand: Callable,
    lower: float,
    upper: float,
    panels: int,
    vectorized: bool = False,
) -> float | complex:
    """
    Composite Simpson 3/8 rule.

    [T1] Each panel spans three sub-intervals of width h:
         3h/8 * [f0 + 3f1 + 3f2 + f3]
    Interior panel boundaries are shared and carry weight 2.
    """
    intervals = 3 * panels
    h = (upper - lower) / intervals
    nodes = np.linspace(lower, upper, intervals + 1)
    weights = np.full(intervals + 1, 3.0)
    weights[0] = 1.0
    weights[-1] = 1.0
    weights[3:intervals:3] = 2.0
    values = evaluate_integrand(integrand, nodes, vectorized)
    return 3.0 * h / 8.0 * np.sum(weights * values)


_RULE_SUMS = {
    QuadratureKind.MIDPOINT: midpoint_sum,
    QuadratureKind.TRAPEZOID: trapezoid_sum,
    QuadratureKind.SIMPSON_38: simpson38_sum,
}


def _evaluations(kind: QuadratureKind, panels: int) -> int:
    """Number of integrand evaluations of one composite sum."""
    if kind is QuadratureKind.MIDPOINT:
        return panels
    if kind is QuadratureKind.TRAPEZOID:
        return panels + 1
    return 3 * panels + 1


def as_scalar(value) -> float | complex:
    """Convert a numpy scalar to float, or complex when it has an imaginary part."""
    if np.iscomplexobj(value):
        return complex(value)
    return float(value)


def integrate_newton_cotes(
    integrand: Callable,
    lower: float,
    upper: float,
    rule: QuadratureRule,
) -> PriceResult:
    """
    Integrate over a finite interval with a composite Newton-Cotes rule.

    Parameters
    ----------
    integrand : callable
        Function to integrate
    lower, upper : float
        Finite bounds with lower < upper
    rule : QuadratureRule
        Midpoint, trapezoid or Simpson 3/8 rule

    Returns
    -------
    PriceResult
        Integral value. Without richardson/tolerance the error is not
        estimated (error_estimate is NaN).
    """
    rule_sum = _RULE_SUMS[rule.kind]
    panels = rule.panels
    method = rule.kind.value

    coarse = rule_sum(integrand, lower, upper, panels, rule.vectorized)
    evaluations = _evaluations(rule.kind, panels)

    if not rule.richardson and rule.tolerance is None:
        return PriceResult(
            value=as_scalar(coarse),
            error_estimate=float("nan"),
            converged=True,
            evaluations=evaluations,
            method=method,
        )

    factor = 2.0 ** rule.kind.order - 1.0
    converged = rule.tolerance is None
    for _ in range(rule.max_refinements + 1):
        panels *= 2
        fine = rule_sum(integrand, lower, upper, panels, rule.vectorized)
        evaluations += _evaluations(rule.kind, panels)

        correction = (fine - coarse) / factor
        error = float(abs(correction))
        logger.debug(f"{method}: panels={panels} estimate={fine!r} error={error:.3e}")

        if rule.tolerance is None:
            break
        if error <= rule.tolerance:
            converged = True
            break
        coarse = fine

    value = fine + correction if rule.richardson else fine

    return PriceResult(
        value=as_scalar(value),
        error_estimate=error,
        converged=converged,
        evaluations=evaluations,
        method=f"{method}+richardson" if rule.richardson else method,
    )

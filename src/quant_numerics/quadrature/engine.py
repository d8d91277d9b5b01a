"""
Quadrature engine: bound handling and rule dispatch.

Usage:
    >>> import numpy as np
    >>> from quant_numerics.quadrature import integrate
    >>> result = integrate(lambda x: np.exp(-x), 0.0, np.inf)
    >>> abs(result.value - 1.0) < 1e-10
    True
"""

import logging
import math
import warnings
from dataclasses import replace
from typing import Callable, Optional

from quant_numerics.errors import ConstructionError, ConvergenceWarning
from quant_numerics.quadrature.newton_cotes import integrate_newton_cotes
from quant_numerics.quadrature.rules import DEFAULT_RULE, QuadratureRule
from quant_numerics.quadrature.tanh_sinh import TanhSinhCache, integrate_tanh_sinh
from quant_numerics.results import PriceResult

logger = logging.getLogger(__name__)


class QuadratureEngine:
    """
    Numerical integration with a default rule and a private node cache.

    Parameters
    ----------
    rule : QuadratureRule, optional
        Rule used when integrate() is called without one (default: tanh-sinh)
    cache : TanhSinhCache, optional
        Tanh-sinh node tables; a new cache is created if omitted

    Examples
    --------
    >>> engine = QuadratureEngine(QuadratureRule.simpson38(panels=10))
    >>> round(engine.integrate(lambda x: x**3, 0.0, 2.0).value, 10)
    4.0
    """

    def __init__(
        self,
        rule: Optional[QuadratureRule] = None,
        cache: Optional[TanhSinhCache] = None,
    ) -> None:
        self.rule = rule if rule is not None else DEFAULT_RULE
        self.cache = cache if cache is not None else TanhSinhCache()

    def integrate(
        self,
        integrand: Callable,
        lower_bound: float,
        upper_bound: float,
        rule: Optional[QuadratureRule] = None,
    ) -> PriceResult:
        """
        Integrate a function between two bounds.

        Parameters
        ----------
        integrand : callable
            Real or complex valued function of one real variable
        lower_bound, upper_bound : float
            Integration bounds. Infinite bounds require the tanh-sinh rule.
        rule : QuadratureRule, optional
            Overrides the engine's default rule for this call

        Returns
        -------
        PriceResult
            Integral value with error estimate and evaluation count.
            Reversed bounds negate the value; equal bounds give 0.

        Raises
        ------
        ConstructionError
            If the integrand is not callable, a bound is NaN, or a
            Newton-Cotes rule is given an infinite bound
        """
        rule = rule if rule is not None else self.rule
        lower, upper = self._validate(integrand, lower_bound, upper_bound, rule)

        if lower == upper:
            return PriceResult(
                value=0.0,
                error_estimate=0.0,
                converged=True,
                evaluations=0,
                method=rule.kind.value,
            )

        sign = 1.0
        if lower > upper:
            lower, upper = upper, lower
            sign = -1.0

        if rule.kind.is_newton_cotes:
            result = integrate_newton_cotes(integrand, lower, upper, rule)
        else:
            result = integrate_tanh_sinh(integrand, lower, upper, rule, self.cache)

        if not result.converged:
            message = (
                f"{result.method} did not converge on [{lower}, {upper}] after "
                f"{result.evaluations} evaluations; error estimate {result.error_estimate:.3e}"
            )
            logger.warning(message)
            warnings.warn(message, ConvergenceWarning, stacklevel=2)

        if sign < 0:
            result = replace(result, value=-result.value)
        return result

    @staticmethod
    def _validate(
        integrand: Callable,
        lower_bound: float,
        upper_bound: float,
        rule: QuadratureRule,
    ) -> tuple[float, float]:
        """Validate integrand and bounds, returning the bounds as floats."""
        if not callable(integrand):
            raise ConstructionError(f"CRITICAL: integrand must be callable, got {integrand!r}")
        if not isinstance(rule, QuadratureRule):
            raise ConstructionError(f"CRITICAL: rule must be a QuadratureRule, got {rule!r}")

        lower = float(lower_bound)
        upper = float(upper_bound)
        if math.isnan(lower) or math.isnan(upper):
            raise ConstructionError(
                f"CRITICAL: integration bounds must not be NaN, got [{lower}, {upper}]"
            )
        if rule.kind.is_newton_cotes and (math.isinf(lower) or math.isinf(upper)):
            raise ConstructionError(
                f"CRITICAL: {rule.kind.value} requires finite bounds, got [{lower}, {upper}]. "
                f"Use QuadratureRule.tanh_sinh() for infinite domains."
            )
        return lower, upper


def integrate(
    integrand: Callable,
    lower_bound: float,
    upper_bound: float,
    rule: Optional[QuadratureRule] = None,
    engine: Optional[QuadratureEngine] = None,
) -> PriceResult:
    """
    Integrate a function between two bounds.

    Convenience wrapper around QuadratureEngine.integrate(). Without an
    engine a private one is built for this call, so node tables are not
    reused; pass an engine to share them across calls.

    Parameters
    ----------
    integrand : callable
        Real or complex valued function of one real variable
    lower_bound, upper_bound : float
        Integration bounds; may be infinite for tanh-sinh
    rule : QuadratureRule, optional
        Quadrature rule (default: tanh-sinh with settings tolerances)
    engine : QuadratureEngine, optional
        Engine whose cache is reused

    Returns
    -------
    PriceResult
    """
    if engine is None:
        engine = QuadratureEngine()
    return engine.integrate(integrand, lower_bound, upper_bound, rule=rule)

"""
Numerical quadrature.

Provides:
- Composite midpoint, trapezoid and Simpson 3/8 rules with optional
  Richardson extrapolation (finite intervals)
- Tanh-sinh double exponential quadrature (finite, semi-infinite and
  infinite intervals, endpoint singularities)
- QuadratureEngine owning a reusable tanh-sinh node cache
"""

from quant_numerics.quadrature.engine import QuadratureEngine, integrate
from quant_numerics.quadrature.newton_cotes import (
    integrate_newton_cotes,
    midpoint_sum,
    simpson38_sum,
    trapezoid_sum,
)
from quant_numerics.quadrature.rules import DEFAULT_RULE, QuadratureKind, QuadratureRule
from quant_numerics.quadrature.tanh_sinh import (
    TanhSinhCache,
    TanhSinhLevel,
    integrate_tanh_sinh,
)

__all__ = [
    # Engine
    "QuadratureEngine",
    "integrate",
    # Rules
    "DEFAULT_RULE",
    "QuadratureKind",
    "QuadratureRule",
    # Newton-Cotes
    "integrate_newton_cotes",
    "midpoint_sum",
    "simpson38_sum",
    "trapezoid_sum",
    # Tanh-sinh
    "TanhSinhCache",
    "TanhSinhLevel",
    "integrate_tanh_sinh",
]

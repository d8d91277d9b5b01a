"""
Term structures consumed by the short-rate process generators.

Provides:
- YieldCurve: interpolated zero curve (linear, log-linear, cubic)
- NelsonSiegelCurve: parametric zero / forward curve
- VolatilityCurve: PCHIP-interpolated volatility term structure
"""

from quant_numerics.curves.volatility_curve import VolatilityCurve
from quant_numerics.curves.yield_curve import (
    InterpolationMethod,
    NelsonSiegelCurve,
    TermStructure,
    YieldCurve,
)

__all__ = [
    "InterpolationMethod",
    "NelsonSiegelCurve",
    "TermStructure",
    "VolatilityCurve",
    "YieldCurve",
]

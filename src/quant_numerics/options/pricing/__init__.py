"""
Option pricing implementations.

Provides:
- Black-Scholes-Merton analytical pricing with first and higher-order Greeks
- Heston stochastic volatility by Fourier inversion (tanh-sinh quadrature)
- Closed-form exotics: geometric Asian, forward-start, gap, binaries
"""

from quant_numerics.options.pricing.black_scholes import (
    BSHigherGreeks,
    BSResult,
    black_scholes_call,
    black_scholes_greeks,
    black_scholes_higher_greeks,
    black_scholes_price,
    black_scholes_put,
    calculate_d1_d2,
    put_call_parity_check,
)
from quant_numerics.options.pricing.exotics import (
    asian_geometric_price,
    asset_or_nothing_price,
    cash_or_nothing_price,
    forward_start_price,
    gap_price,
)
from quant_numerics.options.pricing.heston import (
    HestonParams,
    heston_characteristic_function,
    heston_price,
    heston_price_call,
    heston_price_put,
)

__all__ = [
    # Black-Scholes
    "BSHigherGreeks",
    "BSResult",
    "black_scholes_call",
    "black_scholes_greeks",
    "black_scholes_higher_greeks",
    "black_scholes_price",
    "black_scholes_put",
    "calculate_d1_d2",
    "put_call_parity_check",
    # Exotics
    "asian_geometric_price",
    "asset_or_nothing_price",
    "cash_or_nothing_price",
    "forward_start_price",
    "gap_price",
    # Heston
    "HestonParams",
    "heston_characteristic_function",
    "heston_price",
    "heston_price_call",
    "heston_price_put",
]

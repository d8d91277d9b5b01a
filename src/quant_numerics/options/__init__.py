"""
Option pricer suite.

Provides:
- OptionContract / OptionType / PayoffKind contract description
- price(): dispatch on model (lognormal or Heston) and payoff
- pricing subpackage: Black-Scholes, exotics, Heston
"""

from quant_numerics.options.contracts import OptionContract
from quant_numerics.options.payoffs import OptionType, PayoffKind
from quant_numerics.options.pricer import price
from quant_numerics.options.pricing import (
    BSHigherGreeks,
    BSResult,
    HestonParams,
    black_scholes_greeks,
    black_scholes_higher_greeks,
    black_scholes_price,
    heston_price,
    put_call_parity_check,
)

__all__ = [
    "OptionContract",
    "OptionType",
    "PayoffKind",
    "price",
    "BSHigherGreeks",
    "BSResult",
    "HestonParams",
    "black_scholes_greeks",
    "black_scholes_higher_greeks",
    "black_scholes_price",
    "heston_price",
    "put_call_parity_check",
]

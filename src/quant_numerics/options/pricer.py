"""
Unified option pricing entry point.

price() dispatches an OptionContract on its model (Heston or lognormal)
and payoff kind. Closed-form payoffs return a PriceResult with zero error
and no evaluations; Heston results carry the quadrature diagnostics.
"""

import logging
from typing import Optional

from quant_numerics.errors import ConstructionError
from quant_numerics.options.contracts import OptionContract
from quant_numerics.options.payoffs import PayoffKind
from quant_numerics.options.pricing.black_scholes import black_scholes_price
from quant_numerics.options.pricing.exotics import (
    asian_geometric_price,
    asset_or_nothing_price,
    cash_or_nothing_price,
    forward_start_price,
    gap_price,
)
from quant_numerics.options.pricing.heston import heston_price
from quant_numerics.quadrature import QuadratureEngine, QuadratureRule
from quant_numerics.results import PriceResult

logger = logging.getLogger(__name__)


def _closed_form(contract: OptionContract) -> float:
    """Lognormal price of any supported payoff."""
    c = contract
    if c.payoff is PayoffKind.VANILLA:
        return black_scholes_price(
            c.spot, c.strike, c.rate, c.dividend, c.volatility, c.maturity, c.option_type
        )
    if c.payoff is PayoffKind.ASIAN_GEOMETRIC:
        return asian_geometric_price(
            c.spot, c.strike, c.rate, c.dividend, c.volatility, c.maturity, c.option_type
        )
    if c.payoff is PayoffKind.FORWARD_START:
        return forward_start_price(
            c.spot,
            c.strike_ratio,
            c.start_time,
            c.rate,
            c.dividend,
            c.volatility,
            c.maturity,
            c.option_type,
        )
    if c.payoff is PayoffKind.GAP:
        return gap_price(
            c.spot,
            c.strike,
            c.payoff_strike,
            c.rate,
            c.dividend,
            c.volatility,
            c.maturity,
            c.option_type,
        )
    if c.payoff is PayoffKind.CASH_OR_NOTHING:
        return cash_or_nothing_price(
            c.spot,
            c.strike,
            c.cash_amount,
            c.rate,
            c.dividend,
            c.volatility,
            c.maturity,
            c.option_type,
        )
    if c.payoff is PayoffKind.ASSET_OR_NOTHING:
        return asset_or_nothing_price(
            c.spot, c.strike, c.rate, c.dividend, c.volatility, c.maturity, c.option_type
        )
    raise ConstructionError(f"CRITICAL: unsupported payoff {c.payoff!r}")


def price(
    contract: OptionContract,
    quadrature_rule: Optional[QuadratureRule] = None,
    engine: Optional[QuadratureEngine] = None,
) -> PriceResult:
    """
    Price an option contract.

    Parameters
    ----------
    contract : OptionContract
        Validated contract
    quadrature_rule : QuadratureRule, optional
        Rule for the Heston Fourier integral (ignored for closed forms)
    engine : QuadratureEngine, optional
        Engine whose node cache is reused across Heston prices

    Returns
    -------
    PriceResult

    Examples
    --------
    >>> contract = OptionContract(spot=100, strike=100, maturity=1.0, rate=0.05,
    ...                           dividend=0.02, volatility=0.2)
    >>> round(price(contract).price, 2)
    9.23
    """
    if not isinstance(contract, OptionContract):
        raise TypeError(f"Expected an OptionContract, got {type(contract).__name__}")

    if contract.is_heston:
        return heston_price(
            contract.spot,
            contract.strike,
            contract.rate,
            contract.dividend,
            contract.maturity,
            contract.heston,
            contract.option_type,
            rule=quadrature_rule,
            engine=engine,
        )

    value = _closed_form(contract)
    logger.debug(f"price: {contract.payoff.value} {contract.option_type.value} -> {value:.10f}")
    return PriceResult(value=value, method=contract.payoff.value)

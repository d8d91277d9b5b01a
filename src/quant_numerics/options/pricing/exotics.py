"""
Closed-form exotic options under Black-Scholes-Merton dynamics.

All formulas are written with a continuous dividend yield q; Haug's
cost-of-carry b corresponds to b = r - q.

References
----------
[T1] Haug, E. G. (2007). The Complete Guide to Option Pricing Formulas (2nd ed.).
     McGraw-Hill. Ch. 4.
[T1] Kemna, A. G. Z., & Vorst, A. C. F. (1990). A pricing method for options
     based on average asset values. Journal of Banking & Finance, 14(1), 113-129.
[T1] Rubinstein, M. (1990). Pay now, choose later. Risk, 4, 13.
[T1] Reiner, E., & Rubinstein, M. (1991). Unscrambling the binary code. Risk, 4(9), 75-83.
"""

import numpy as np
from scipy import stats

from quant_numerics.errors import ConstructionError
from quant_numerics.options.payoffs import OptionType
from quant_numerics.options.pricing.black_scholes import (
    black_scholes_price,
    calculate_d1_d2,
    validate_inputs,
)


def asian_geometric_adjustments(
    rate: float, dividend: float, volatility: float
) -> tuple[float, float]:
    """
    Volatility and dividend yield of the continuous geometric average.

    [T1] σ_A = σ / √3
    [T1] b_A = ½(r - q - σ²/6), so q_A = r - b_A

    Returns
    -------
    tuple[float, float]
        (adjusted_dividend, adjusted_volatility)
    """
    adjusted_volatility = volatility / np.sqrt(3.0)
    carry = 0.5 * (rate - dividend - volatility**2 / 6.0)
    return rate - carry, adjusted_volatility


def asian_geometric_price(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """
    Continuously monitored geometric average-price option.

    [T1] Black-Scholes with σ_A = σ/√3 and carry b_A = ½(r - q - σ²/6).

    Examples
    --------
    >>> round(asian_geometric_price(80, 85, 0.05, -0.03, 0.2, 0.25, OptionType.PUT), 4)
    4.6922
    """
    validate_inputs(spot, strike, rate, dividend, volatility, time_to_expiry)
    adjusted_dividend, adjusted_volatility = asian_geometric_adjustments(
        rate, dividend, volatility
    )
    return black_scholes_price(
        spot, strike, rate, adjusted_dividend, adjusted_volatility, time_to_expiry, option_type
    )


def forward_start_price(
    spot: float,
    strike_ratio: float,
    start_time: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """
    Forward-start option: strike set to α·S(t1) at start_time t1.

    [T1] V = S e^(-q t1) · BS(S=1, K=α, τ = T - t1)

    Parameters
    ----------
    spot : float
        Current spot price
    strike_ratio : float
        α > 0; α = 1 starts at the money
    start_time : float
        Strike fixing time t1, 0 <= t1 < T
    rate, dividend, volatility : float
        Market parameters (decimal)
    time_to_expiry : float
        Final maturity T (years)
    option_type : OptionType
        Call or put

    Returns
    -------
    float
        Option price
    """
    validate_inputs(spot, strike_ratio, rate, dividend, volatility, time_to_expiry)
    if not 0 <= start_time < time_to_expiry:
        raise ConstructionError(
            f"CRITICAL: start_time must be in [0, T), got start_time={start_time}, "
            f"T={time_to_expiry}"
        )

    remaining = time_to_expiry - start_time
    unit_price = black_scholes_price(
        1.0, strike_ratio, rate, dividend, volatility, remaining, option_type
    )
    return float(spot * np.exp(-dividend * start_time) * unit_price)


def gap_price(
    spot: float,
    strike: float,
    payoff_strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """
    Gap option: pays S - payoff_strike (call) when S > strike at expiry.

    [T1] c = S e^(-qT) N(d1) - X2 e^(-rT) N(d2)
    [T1] p = X2 e^(-rT) N(-d2) - S e^(-qT) N(-d1)
    with d1, d2 computed from the trigger strike and X2 the payoff strike.
    The price can be negative.

    Examples
    --------
    >>> round(gap_price(50, 50, 57, 0.09, 0.0, 0.2, 0.5, OptionType.CALL), 3)
    -0.005
    """
    validate_inputs(spot, strike, rate, dividend, volatility, time_to_expiry)
    if not payoff_strike > 0:
        raise ConstructionError(f"CRITICAL: payoff_strike must be > 0, got {payoff_strike}")

    d1, d2 = calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)
    asset = spot * np.exp(-dividend * time_to_expiry)
    cash = payoff_strike * np.exp(-rate * time_to_expiry)

    if option_type == OptionType.CALL:
        price = asset * stats.norm.cdf(d1) - cash * stats.norm.cdf(d2)
    else:
        price = cash * stats.norm.cdf(-d2) - asset * stats.norm.cdf(-d1)
    return float(price)


def cash_or_nothing_price(
    spot: float,
    strike: float,
    cash_amount: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """
    Cash-or-nothing binary: pays cash_amount if S_T ends beyond the strike.

    [T1] c = K_cash e^(-rT) N(d2),  p = K_cash e^(-rT) N(-d2)

    Examples
    --------
    >>> round(cash_or_nothing_price(100, 80, 10, 0.06, 0.06, 0.35, 0.75, OptionType.PUT), 4)
    2.671
    """
    validate_inputs(spot, strike, rate, dividend, volatility, time_to_expiry)
    if not np.isfinite(cash_amount):
        raise ConstructionError(f"CRITICAL: cash_amount must be finite, got {cash_amount}")

    _, d2 = calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)
    probability = stats.norm.cdf(option_type.sign * d2)
    return float(cash_amount * np.exp(-rate * time_to_expiry) * probability)


def asset_or_nothing_price(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """
    Asset-or-nothing binary: pays S_T if it ends beyond the strike.

    [T1] c = S e^(-qT) N(d1),  p = S e^(-qT) N(-d1)
    """
    validate_inputs(spot, strike, rate, dividend, volatility, time_to_expiry)

    d1, _ = calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)
    probability = stats.norm.cdf(option_type.sign * d1)
    return float(spot * np.exp(-dividend * time_to_expiry) * probability)

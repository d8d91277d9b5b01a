"""
Black-Scholes-Merton option pricing with Greeks.

European options on an asset paying a continuous dividend yield q. Calls
and puts share one kernel written with the payoff sign ω (+1 call, -1 put):

[T1] V = ω [S e^(-qT) N(ω d1) - K e^(-rT) N(ω d2)]

Zero volatility is priced as the deterministic limit, the discounted
intrinsic value of the forward.

References
----------
[T1] Black, F., & Scholes, M. (1973). The pricing of options and corporate liabilities.
[T1] Merton, R. C. (1973). Theory of rational option pricing.
[T1] Hull, J. C. (2018). Options, Futures, and Other Derivatives (10th ed.).
"""

from dataclasses import dataclass

import numpy as np
from scipy import stats

from quant_numerics.config.tolerances import PUT_CALL_PARITY_TOLERANCE
from quant_numerics.errors import ConstructionError
from quant_numerics.options.payoffs import OptionType

#: Greeks are quoted per 1% move in vol and rate, theta per calendar day
PERCENT = 0.01
DAYS_PER_YEAR = 365.0


@dataclass(frozen=True)
class BSResult:
    """
    Immutable Black-Scholes pricing result.

    Attributes
    ----------
    price : float
        Option price
    delta : float
        dV/dS
    gamma : float
        d²V/dS²
    vega : float
        dV/dσ per 1% vol change
    theta : float
        dV/dt per calendar day
    rho : float
        dV/dr per 1% rate change
    d1, d2 : float
        Standardized moneyness terms used for the price
    """

    price: float
    delta: float
    gamma: float
    vega: float
    theta: float
    rho: float
    d1: float
    d2: float


@dataclass(frozen=True)
class BSHigherGreeks:
    """
    Second and third order Black-Scholes sensitivities.

    Raw partial derivatives per unit of spot, volatility and year; unlike
    BSResult nothing is rescaled. Time derivatives are taken with calendar
    time moving forward (the sign convention of theta).

    Attributes
    ----------
    vanna : float
        d²V/dSdσ
    charm : float
        -d²V/dSdT, delta decay
    elasticity : float
        Lambda, (dV/dS) S / V
    speed : float
        d³V/dS³
    zomma : float
        d³V/dS²dσ
    color : float
        -d³V/dS²dT, gamma decay
    vomma : float
        d²V/dσ²
    ultima : float
        d³V/dσ³
    """

    vanna: float
    charm: float
    elasticity: float
    speed: float
    zomma: float
    color: float
    vomma: float
    ultima: float


def _discounted_legs(
    spot: float, strike: float, rate: float, dividend: float, time_to_expiry: float
) -> tuple[float, float]:
    """(S e^(-qT), K e^(-rT)): present values of the asset and cash legs."""
    return (
        float(spot * np.exp(-dividend * time_to_expiry)),
        float(strike * np.exp(-rate * time_to_expiry)),
    )


def calculate_d1_d2(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> tuple[float, float]:
    """
    Standardized moneyness terms of the Black-Scholes formula.

    [T1] d1 = (ln(F/K) + σ²T/2) / (σ√T),  F = S e^((r - q)T)
    [T1] d2 = d1 - σ√T

    When σ√T = 0 both collapse to ±inf on the side of ln(F/K), or to 0
    when the forward sits exactly on the strike.

    Returns
    -------
    tuple[float, float]
        (d1, d2)
    """
    total_vol = volatility * np.sqrt(time_to_expiry)
    log_moneyness = np.log(spot / strike) + (rate - dividend) * time_to_expiry

    if total_vol == 0:
        limit = 0.0 if log_moneyness == 0 else float(np.copysign(np.inf, log_moneyness))
        return limit, limit

    d1 = log_moneyness / total_vol + 0.5 * total_vol
    return float(d1), float(d1 - total_vol)


def black_scholes_price(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> float:
    """
    Price a European option.

    Parameters
    ----------
    spot : float
        Current spot price, > 0
    strike : float
        Strike price, > 0
    rate : float
        Continuously compounded risk-free rate (decimal, may be negative)
    dividend : float
        Continuous dividend yield (decimal)
    volatility : float
        Volatility (decimal), >= 0
    time_to_expiry : float
        Time to expiry (years), >= 0; 0 returns the intrinsic value
    option_type : OptionType
        Call or put

    Returns
    -------
    float
        Option price

    Raises
    ------
    ConstructionError
        If any input is out of range
    """
    validate_inputs(spot, strike, rate, dividend, volatility, time_to_expiry)
    omega = option_type.sign

    if time_to_expiry == 0:
        return max(omega * (spot - strike), 0.0)

    asset, cash = _discounted_legs(spot, strike, rate, dividend, time_to_expiry)
    d1, d2 = calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)
    value = omega * (asset * stats.norm.cdf(omega * d1) - cash * stats.norm.cdf(omega * d2))
    return float(value)


def black_scholes_call(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> float:
    """
    European call: C = S e^(-qT) N(d1) - K e^(-rT) N(d2).

    Examples
    --------
    >>> round(black_scholes_call(100, 100, 0.05, 0.02, 0.20, 1.0), 2)
    9.23
    """
    return black_scholes_price(
        spot, strike, rate, dividend, volatility, time_to_expiry, OptionType.CALL
    )


def black_scholes_put(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> float:
    """
    European put: P = K e^(-rT) N(-d2) - S e^(-qT) N(-d1).

    Examples
    --------
    >>> round(black_scholes_put(100, 100, 0.05, 0.02, 0.20, 1.0), 2)
    6.33
    """
    return black_scholes_price(
        spot, strike, rate, dividend, volatility, time_to_expiry, OptionType.PUT
    )


def black_scholes_greeks(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> BSResult:
    """
    Price and first-order sensitivities in one pass.

    With ω = +1 for calls and -1 for puts, n the standard normal density:

    [T1] Delta = ω e^(-qT) N(ω d1)
    [T1] Gamma = e^(-qT) n(d1) / (S σ √T)
    [T1] Vega  = S e^(-qT) n(d1) √T
    [T1] Theta = -S e^(-qT) n(d1) σ / (2√T) - ω r K e^(-rT) N(ω d2) + ω q S e^(-qT) N(ω d1)
    [T1] Rho   = ω K T e^(-rT) N(ω d2)

    Vega and rho are scaled to a 1% move, theta to one calendar day. At
    expiry the price is intrinsic and every Greek but delta is zero.

    Raises
    ------
    ConstructionError
        If inputs are invalid or volatility is 0 (Greeks are undefined in
        the deterministic limit)
    """
    validate_inputs(spot, strike, rate, dividend, volatility, time_to_expiry)
    if volatility == 0:
        raise ConstructionError("CRITICAL: Greeks require volatility > 0")
    omega = option_type.sign

    if time_to_expiry == 0:
        in_the_money = omega * (spot - strike) > 0
        side = np.inf if spot > strike else -np.inf
        return BSResult(
            price=max(omega * (spot - strike), 0.0),
            delta=float(omega) if in_the_money else 0.0,
            gamma=0.0,
            vega=0.0,
            theta=0.0,
            rho=0.0,
            d1=side,
            d2=side,
        )

    asset, cash = _discounted_legs(spot, strike, rate, dividend, time_to_expiry)
    d1, d2 = calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)
    sqrt_t = np.sqrt(time_to_expiry)

    density_d1 = stats.norm.pdf(d1)
    asset_prob = stats.norm.cdf(omega * d1)
    cash_prob = stats.norm.cdf(omega * d2)

    time_decay = (
        -asset * density_d1 * volatility / (2.0 * sqrt_t)
        - omega * rate * cash * cash_prob
        + omega * dividend * asset * asset_prob
    )

    return BSResult(
        price=float(omega * (asset * asset_prob - cash * cash_prob)),
        delta=float(omega * np.exp(-dividend * time_to_expiry) * asset_prob),
        gamma=float(asset * density_d1 / (spot * spot * volatility * sqrt_t)),
        vega=float(asset * density_d1 * sqrt_t * PERCENT),
        theta=float(time_decay / DAYS_PER_YEAR),
        rho=float(omega * cash * time_to_expiry * cash_prob * PERCENT),
        d1=d1,
        d2=d2,
    )


def black_scholes_higher_greeks(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
    option_type: OptionType,
) -> BSHigherGreeks:
    """
    Higher-order sensitivities in closed form.

    With ω = +1 for calls and -1 for puts, n the standard normal density,
    Γ the gamma and ν = S e^(-qT) n(d1) √T the unscaled vega:

    [T1] Vanna  = -e^(-qT) n(d1) d2 / σ
    [T1] Charm  = ω q e^(-qT) N(ω d1) - e^(-qT) n(d1) [(r - q)/(σ√T) - d2/(2T)]
    [T1] Lambda = Δ S / V
    [T1] Speed  = -Γ/S (d1/(σ√T) + 1)
    [T1] Zomma  = Γ (d1 d2 - 1) / σ
    [T1] Color  = Γ [q + 1/(2T) + d1 ((r - q)/(σ√T) - d2/(2T))]
    [T1] Vomma  = ν d1 d2 / σ
    [T1] Ultima = -ν/σ² [d1 d2 (1 - d1 d2) + d1² + d2²]

    Every term but charm and lambda is the same for calls and puts.
    Lambda is NaN when the price underflows to zero.

    Raises
    ------
    ConstructionError
        If inputs are invalid, volatility is 0 or the option has expired
    """
    validate_inputs(spot, strike, rate, dividend, volatility, time_to_expiry)
    if volatility == 0 or time_to_expiry == 0:
        raise ConstructionError(
            "CRITICAL: higher-order Greeks require volatility > 0 and time_to_expiry > 0"
        )
    omega = option_type.sign

    asset, cash = _discounted_legs(spot, strike, rate, dividend, time_to_expiry)
    d1, d2 = calculate_d1_d2(spot, strike, rate, dividend, volatility, time_to_expiry)
    sqrt_t = np.sqrt(time_to_expiry)
    total_vol = volatility * sqrt_t

    carry = np.exp(-dividend * time_to_expiry)
    density_d1 = stats.norm.pdf(d1)
    asset_prob = stats.norm.cdf(omega * d1)
    value = omega * (asset * asset_prob - cash * stats.norm.cdf(omega * d2))

    delta = omega * carry * asset_prob
    gamma = carry * density_d1 / (spot * total_vol)
    vega = asset * density_d1 * sqrt_t
    # ∂d1/∂T
    d1_drift = (rate - dividend) / total_vol - d2 / (2.0 * time_to_expiry)

    return BSHigherGreeks(
        vanna=float(-carry * density_d1 * d2 / volatility),
        charm=float(omega * dividend * carry * asset_prob - carry * density_d1 * d1_drift),
        elasticity=float(delta * spot / value) if value > 0 else float("nan"),
        speed=float(-gamma / spot * (d1 / total_vol + 1.0)),
        zomma=float(gamma * (d1 * d2 - 1.0) / volatility),
        color=float(gamma * (dividend + 0.5 / time_to_expiry + d1 * d1_drift)),
        vomma=float(vega * d1 * d2 / volatility),
        ultima=float(-vega / volatility**2 * (d1 * d2 * (1.0 - d1 * d2) + d1**2 + d2**2)),
    )


def put_call_parity_check(
    call_price: float,
    put_price: float,
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    time_to_expiry: float,
    tolerance: float = PUT_CALL_PARITY_TOLERANCE,
) -> tuple[bool, float]:
    """
    Verify C - P = S e^(-qT) - K e^(-rT).

    Returns
    -------
    tuple[bool, float]
        (parity_holds, absolute error)
    """
    asset, cash = _discounted_legs(spot, strike, rate, dividend, time_to_expiry)
    error = float(abs((call_price - put_price) - (asset - cash)))
    return error < tolerance, error


def validate_inputs(
    spot: float,
    strike: float,
    rate: float,
    dividend: float,
    volatility: float,
    time_to_expiry: float,
) -> None:
    """Reject inputs outside the Black-Scholes domain (NaN fails every check)."""
    checks = (
        ("spot", spot, spot > 0, "> 0"),
        ("strike", strike, strike > 0, "> 0"),
        ("volatility", volatility, volatility >= 0, ">= 0"),
        ("time_to_expiry", time_to_expiry, time_to_expiry >= 0, ">= 0"),
    )
    for name, value, ok, bound in checks:
        if not ok:
            raise ConstructionError(f"CRITICAL: {name} must be {bound}, got {value}")
    if not (np.isfinite(rate) and np.isfinite(dividend)):
        raise ConstructionError(
            f"CRITICAL: rate and dividend must be finite, got rate={rate}, dividend={dividend}"
        )

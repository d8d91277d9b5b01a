"""
Option contract specification.

An OptionContract bundles market inputs, the pricing model (lognormal
volatility or Heston parameters) and the payoff with its extra fields.
All validation happens at construction.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from quant_numerics.errors import ConstructionError
from quant_numerics.options.payoffs import OptionType, PayoffKind
from quant_numerics.options.pricing.heston import HestonParams


@dataclass(frozen=True)
class OptionContract:
    """
    European option contract.

    Attributes
    ----------
    spot : float
        Current spot price, > 0
    strike : float
        Strike (trigger strike for GAP, ignored for FORWARD_START), > 0
    maturity : float
        Time to expiry in years, > 0
    rate : float
        Risk-free rate (decimal, continuous compounding)
    dividend : float
        Dividend yield (decimal)
    volatility : float, optional
        Lognormal volatility, >= 0. Exactly one of volatility / heston.
    heston : HestonParams, optional
        Heston parameters (VANILLA payoff only)
    option_type : OptionType
        Call or put
    payoff : PayoffKind
        Payoff family
    payoff_strike : float, optional
        GAP: strike paid against when the trigger is hit
    cash_amount : float, optional
        CASH_OR_NOTHING: fixed payout
    start_time : float, optional
        FORWARD_START: strike fixing time, 0 <= start_time < maturity
    strike_ratio : float, optional
        FORWARD_START: strike as a fraction of S(start_time), > 0

    Examples
    --------
    >>> vanilla = OptionContract(spot=100, strike=100, maturity=1.0, rate=0.05, volatility=0.2)
    >>> gap = OptionContract(
    ...     spot=50, strike=50, maturity=0.5, rate=0.09, volatility=0.2,
    ...     payoff=PayoffKind.GAP, payoff_strike=57,
    ... )
    """

    spot: float
    strike: float
    maturity: float
    rate: float
    dividend: float = 0.0
    volatility: Optional[float] = None
    heston: Optional[HestonParams] = None
    option_type: OptionType = OptionType.CALL
    payoff: PayoffKind = PayoffKind.VANILLA
    payoff_strike: Optional[float] = None
    cash_amount: Optional[float] = None
    start_time: Optional[float] = None
    strike_ratio: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate contract."""
        if not self.spot > 0 or not np.isfinite(self.spot):
            raise ConstructionError(f"CRITICAL: spot must be > 0, got {self.spot}")
        if not self.strike > 0 or not np.isfinite(self.strike):
            raise ConstructionError(f"CRITICAL: strike must be > 0, got {self.strike}")
        if not self.maturity > 0 or not np.isfinite(self.maturity):
            raise ConstructionError(f"CRITICAL: maturity must be > 0, got {self.maturity}")
        if not (np.isfinite(self.rate) and np.isfinite(self.dividend)):
            raise ConstructionError(
                f"CRITICAL: rate and dividend must be finite, got rate={self.rate}, "
                f"dividend={self.dividend}"
            )
        if not isinstance(self.option_type, OptionType):
            raise ConstructionError(
                f"CRITICAL: option_type must be an OptionType, got {self.option_type!r}"
            )
        if not isinstance(self.payoff, PayoffKind):
            raise ConstructionError(f"CRITICAL: payoff must be a PayoffKind, got {self.payoff!r}")

        self._validate_model()
        self._validate_payoff_fields()

    def _validate_model(self) -> None:
        if (self.volatility is None) == (self.heston is None):
            raise ConstructionError(
                "CRITICAL: exactly one of volatility or heston must be given. "
                f"Got volatility={self.volatility}, heston={self.heston}"
            )
        if self.volatility is not None:
            if not self.volatility >= 0 or not np.isfinite(self.volatility):
                raise ConstructionError(
                    f"CRITICAL: volatility must be >= 0, got {self.volatility}"
                )
            return
        if not isinstance(self.heston, HestonParams):
            raise ConstructionError(
                f"CRITICAL: heston must be HestonParams, got {type(self.heston).__name__}"
            )
        if self.payoff is not PayoffKind.VANILLA:
            raise ConstructionError(
                f"CRITICAL: Heston pricing supports VANILLA payoffs only, got {self.payoff.value}"
            )

    def _validate_payoff_fields(self) -> None:
        if self.payoff is PayoffKind.GAP:
            if self.payoff_strike is None or not self.payoff_strike > 0:
                raise ConstructionError(
                    f"CRITICAL: GAP requires payoff_strike > 0, got {self.payoff_strike}"
                )
        elif self.payoff is PayoffKind.CASH_OR_NOTHING:
            if self.cash_amount is None or not np.isfinite(self.cash_amount):
                raise ConstructionError(
                    f"CRITICAL: CASH_OR_NOTHING requires a finite cash_amount, "
                    f"got {self.cash_amount}"
                )
        elif self.payoff is PayoffKind.FORWARD_START:
            if self.strike_ratio is None or not self.strike_ratio > 0:
                raise ConstructionError(
                    f"CRITICAL: FORWARD_START requires strike_ratio > 0, got {self.strike_ratio}"
                )
            if self.start_time is None or not 0 <= self.start_time < self.maturity:
                raise ConstructionError(
                    f"CRITICAL: FORWARD_START requires 0 <= start_time < maturity, "
                    f"got start_time={self.start_time}, maturity={self.maturity}"
                )

    @property
    def is_heston(self) -> bool:
        """True when priced under Heston dynamics."""
        return self.heston is not None

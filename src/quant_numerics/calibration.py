"""
Calibration loss functions.

The optimizer is external: these objects only map a parameter vector to
a scalar loss. Parameter vectors that do not describe a valid model map to
inf so that bounded and unbounded optimizers alike can step over them.

[T1] Loss = Σ_i (model_price_i - market_price_i)²
"""

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from quant_numerics.errors import ConstructionError, NumericalDomainError
from quant_numerics.options.payoffs import OptionType
from quant_numerics.options.pricing.heston import HestonParams, heston_price
from quant_numerics.quadrature import QuadratureEngine, QuadratureRule

logger = logging.getLogger(__name__)

#: Order of the Heston parameter vector
HESTON_PARAMETER_NAMES = ("v0", "kappa", "theta", "sigma", "rho")

REQUIRED_QUOTE_COLUMNS = ("strike", "maturity", "price")


def sum_squared_errors(model: Sequence[float], market: Sequence[float]) -> float:
    """
    Sum of squared differences between model and market values.

    Examples
    --------
    >>> sum_squared_errors([1.0, 2.0], [1.5, 2.0])
    0.25
    """
    model_arr = np.asarray(model, dtype=float)
    market_arr = np.asarray(market, dtype=float)
    if model_arr.shape != market_arr.shape:
        raise ConstructionError(
            f"CRITICAL: model and market must have the same shape. "
            f"Got: model={model_arr.shape}, market={market_arr.shape}"
        )
    return float(np.sum((model_arr - market_arr) ** 2))


def _parse_option_type(label) -> OptionType:
    """Case-insensitive 'call'/'put' quote label."""
    try:
        return OptionType(str(label).lower())
    except ValueError as e:
        raise ConstructionError(
            f"CRITICAL: option_type must be 'call' or 'put', got {label!r}"
        ) from e


class HestonCalibrationObjective:
    """
    Squared pricing error of Heston parameters against option quotes.

    Parameters
    ----------
    quotes : DataFrame
        Columns `strike`, `maturity`, `price` and optionally `option_type`
        ("call" / "put", default call)
    spot : float
        Current spot price
    rate : float
        Risk-free rate (decimal)
    dividend : float, default 0.0
        Dividend yield (decimal)
    rule : QuadratureRule, optional
        Quadrature rule for the Fourier integrals

    Examples
    --------
    >>> quotes = pd.DataFrame({"strike": [90, 100, 110], "maturity": [1.0] * 3,
    ...                        "price": [15.1, 8.9, 4.6]})
    >>> objective = HestonCalibrationObjective(quotes, spot=100.0, rate=0.02)
    >>> loss = objective([0.04, 1.5, 0.04, 0.3, -0.6])
    >>> objective([-0.04, 1.5, 0.04, 0.3, -0.6])
    inf
    """

    def __init__(
        self,
        quotes: pd.DataFrame,
        spot: float,
        rate: float,
        dividend: float = 0.0,
        rule: Optional[QuadratureRule] = None,
    ) -> None:
        missing = [c for c in REQUIRED_QUOTE_COLUMNS if c not in quotes.columns]
        if missing:
            raise ConstructionError(f"CRITICAL: quotes are missing columns {missing}")
        if len(quotes) == 0:
            raise ConstructionError("CRITICAL: quotes must contain at least one row")
        if not spot > 0:
            raise ConstructionError(f"CRITICAL: spot must be > 0, got {spot}")

        self.strikes = quotes["strike"].to_numpy(dtype=float)
        self.maturities = quotes["maturity"].to_numpy(dtype=float)
        self.market_prices = quotes["price"].to_numpy(dtype=float)
        if np.any(self.strikes <= 0) or np.any(self.maturities <= 0):
            raise ConstructionError("CRITICAL: quote strikes and maturities must be > 0")
        if not np.all(np.isfinite(self.market_prices)):
            raise ConstructionError("CRITICAL: quote prices must be finite")

        if "option_type" in quotes.columns:
            self.option_types = [_parse_option_type(v) for v in quotes["option_type"]]
        else:
            self.option_types = [OptionType.CALL] * len(quotes)

        self.spot = spot
        self.rate = rate
        self.dividend = dividend
        self.rule = rule
        self.engine = QuadratureEngine()

    def __len__(self) -> int:
        return len(self.market_prices)

    @staticmethod
    def to_params(vector: Sequence[float]) -> HestonParams:
        """Build HestonParams from [v0, kappa, theta, sigma, rho]."""
        values = np.asarray(vector, dtype=float)
        if values.shape != (len(HESTON_PARAMETER_NAMES),):
            raise ConstructionError(
                f"CRITICAL: expected parameter vector {HESTON_PARAMETER_NAMES}, got shape {values.shape}"
            )
        return HestonParams(*(float(v) for v in values))

    def model_prices(self, params: HestonParams) -> np.ndarray:
        """Heston prices of every quote."""
        return np.array(
            [
                heston_price(
                    self.spot,
                    strike,
                    self.rate,
                    self.dividend,
                    maturity,
                    params,
                    option_type,
                    rule=self.rule,
                    engine=self.engine,
                ).price
                for strike, maturity, option_type in zip(
                    self.strikes, self.maturities, self.option_types
                )
            ]
        )

    def __call__(self, vector: Sequence[float]) -> float:
        """Sum of squared pricing errors; inf for invalid parameter vectors."""
        try:
            params = self.to_params(vector)
            prices = self.model_prices(params)
        except (ConstructionError, NumericalDomainError) as e:
            logger.debug(f"calibration: rejected parameters {list(vector)}: {e}")
            return float("inf")
        return sum_squared_errors(prices, self.market_prices)

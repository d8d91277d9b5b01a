"""
quant-numerics: Quadrature, distributions, stochastic processes and option pricing.

Quick Start
-----------
>>> import numpy as np
>>> from quant_numerics import OptionContract, HestonParams, integrate, price
>>> integrate(lambda x: np.exp(-x), 0.0, np.inf).converged
True
>>> contract = OptionContract(
...     spot=100.0, strike=100.0, maturity=1.0, rate=0.05,
...     heston=HestonParams(v0=0.04, kappa=2.0, theta=0.04, sigma=0.3, rho=-0.7),
... )
>>> result = price(contract)

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Errors and Results
# =============================================================================
from quant_numerics.errors import ConstructionError, ConvergenceWarning, NumericalDomainError
from quant_numerics.results import PriceResult

# =============================================================================
# Quadrature
# =============================================================================
from quant_numerics.quadrature import (
    QuadratureEngine,
    QuadratureKind,
    QuadratureRule,
    TanhSinhCache,
    integrate,
)

# =============================================================================
# Distributions
# =============================================================================
from quant_numerics.distributions import (
    Bernoulli,
    Binomial,
    ChiSquared,
    Exponential,
    Gamma,
    Gaussian,
    Poisson,
    Uniform,
    characteristic_function,
    cumulative,
    density,
)

# =============================================================================
# Term Structures
# =============================================================================
from quant_numerics.curves import (
    InterpolationMethod,
    NelsonSiegelCurve,
    VolatilityCurve,
    YieldCurve,
)

# =============================================================================
# Stochastic Processes
# =============================================================================
from quant_numerics.stochastics import (
    PROCESS_MODELS,
    ArithmeticBrownianMotion,
    BlackDermanToy,
    CoxIngersollRoss,
    ExtendedVasicek,
    FractionalBrownianMotion,
    FractionalCoxIngersollRoss,
    FractionalOrnsteinUhlenbeck,
    GeometricBrownianMotion,
    HoLee,
    HullWhite,
    OrnsteinUhlenbeck,
    PathEnsemble,
    SamplePath,
    make_random_source,
    simulate,
    simulate_paths,
    uniform_time_grid,
)

# =============================================================================
# Options
# =============================================================================
from quant_numerics.options import (
    HestonParams,
    OptionContract,
    OptionType,
    PayoffKind,
    price,
)

# =============================================================================
# Calibration
# =============================================================================
from quant_numerics.calibration import HestonCalibrationObjective, sum_squared_errors

__all__ = [
    "__version__",
    # Errors and results
    "ConstructionError",
    "ConvergenceWarning",
    "NumericalDomainError",
    "PriceResult",
    # Quadrature
    "QuadratureEngine",
    "QuadratureKind",
    "QuadratureRule",
    "TanhSinhCache",
    "integrate",
    # Distributions
    "Bernoulli",
    "Binomial",
    "ChiSquared",
    "Exponential",
    "Gamma",
    "Gaussian",
    "Poisson",
    "Uniform",
    "characteristic_function",
    "cumulative",
    "density",
    # Term structures
    "InterpolationMethod",
    "NelsonSiegelCurve",
    "VolatilityCurve",
    "YieldCurve",
    # Stochastic processes
    "PROCESS_MODELS",
    "ArithmeticBrownianMotion",
    "BlackDermanToy",
    "CoxIngersollRoss",
    "ExtendedVasicek",
    "FractionalBrownianMotion",
    "FractionalCoxIngersollRoss",
    "FractionalOrnsteinUhlenbeck",
    "GeometricBrownianMotion",
    "HoLee",
    "HullWhite",
    "OrnsteinUhlenbeck",
    "PathEnsemble",
    "SamplePath",
    "make_random_source",
    "simulate",
    "simulate_paths",
    "uniform_time_grid",
    # Options
    "HestonParams",
    "OptionContract",
    "OptionType",
    "PayoffKind",
    "price",
    # Calibration
    "HestonCalibrationObjective",
    "sum_squared_errors",
]

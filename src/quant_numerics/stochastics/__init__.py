"""
Stochastic process generators.

Provides:
- Process models: ABM, GBM, Ornstein-Uhlenbeck, CIR, Ho-Lee, Hull-White,
  Extended Vasicek, Black-Derman-Toy
- Fractional Brownian motion and its Ornstein-Uhlenbeck and CIR variants
- simulate() / simulate_paths() with explicit random sources
- SamplePath / PathEnsemble containers with DataFrame export
"""

from quant_numerics.stochastics.processes import (
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
    ProcessModel,
    brownian_motion,
    fractional_brownian_motion,
)
from quant_numerics.stochastics.simulation import (
    PathEnsemble,
    SamplePath,
    make_random_source,
    simulate,
    simulate_paths,
    uniform_time_grid,
    validate_time_grid,
)

__all__ = [
    # Models
    "PROCESS_MODELS",
    "ProcessModel",
    "ArithmeticBrownianMotion",
    "GeometricBrownianMotion",
    "OrnsteinUhlenbeck",
    "CoxIngersollRoss",
    "HoLee",
    "HullWhite",
    "ExtendedVasicek",
    "BlackDermanToy",
    "FractionalBrownianMotion",
    "FractionalOrnsteinUhlenbeck",
    "FractionalCoxIngersollRoss",
    "brownian_motion",
    "fractional_brownian_motion",
    # Simulation
    "PathEnsemble",
    "SamplePath",
    "make_random_source",
    "simulate",
    "simulate_paths",
    "uniform_time_grid",
    "validate_time_grid",
]

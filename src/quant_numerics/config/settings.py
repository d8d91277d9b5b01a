"""
Frozen configuration settings for the numerics toolkit.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Tolerance values live in config/tolerances.py and are referenced here as
defaults.
"""

import os
from dataclasses import dataclass, field

from quant_numerics.config.tolerances import (
    TANH_SINH_ABS_TOLERANCE,
    TANH_SINH_TOLERANCE,
)

# =============================================================================
# Environment Overrides
# =============================================================================

#: Environment variable overriding the tanh-sinh refinement cap
MAX_LEVEL_ENV_VAR = "QUANT_NUMERICS_MAX_LEVEL"

_DEFAULT_MAX_LEVEL = 10


def _resolve_max_level() -> int:
    """
    Resolve the tanh-sinh maximum level with environment variable override.

    Priority:
    1. QUANT_NUMERICS_MAX_LEVEL environment variable (if set)
    2. Default: 10 (step 2^-10, ~11k nodes on [0, inf))

    Returns
    -------
    int
        Maximum refinement level
    """
    env_value = os.environ.get(MAX_LEVEL_ENV_VAR)
    if not env_value:
        return _DEFAULT_MAX_LEVEL
    try:
        level = int(env_value)
    except ValueError:
        raise ValueError(
            f"CRITICAL: {MAX_LEVEL_ENV_VAR} must be an integer, got {env_value!r}"
        ) from None
    if level < 1:
        raise ValueError(f"CRITICAL: {MAX_LEVEL_ENV_VAR} must be >= 1, got {level}")
    return level


# =============================================================================
# Quadrature Configuration
# =============================================================================

@dataclass(frozen=True)
class QuadratureConfig:
    """
    Immutable quadrature configuration.

    Attributes
    ----------
    default_panels : int
        Panel count for midpoint / trapezoid / Simpson 3/8 rules
    max_refinements : int
        Cap on panel doublings when a Newton-Cotes tolerance is requested
    tanh_sinh_tolerance : float
        Relative tolerance between successive tanh-sinh levels
    tanh_sinh_abs_tolerance : float
        Absolute floor of the tanh-sinh stopping test
    max_level : int
        Maximum tanh-sinh level (step h = 2^-level). Override with
        QUANT_NUMERICS_MAX_LEVEL.
    min_level : int
        First level at which the stopping test is applied
    min_complement : float
        Smallest endpoint distance 1 - |x| at which nodes are generated
    """

    default_panels: int = 1000
    max_refinements: int = 12
    tanh_sinh_tolerance: float = TANH_SINH_TOLERANCE
    tanh_sinh_abs_tolerance: float = TANH_SINH_ABS_TOLERANCE
    max_level: int = field(default_factory=_resolve_max_level)
    min_level: int = 2
    min_complement: float = 1e-150


# =============================================================================
# Simulation Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable path simulation configuration.

    Attributes
    ----------
    default_seed : int
        Seed used by make_random_source() when none is given
    trading_days_per_year : int
        Steps per year used by uniform_time_grid() when n_steps is not given
    """

    default_seed: int = 42  # Reproducibility
    trading_days_per_year: int = 252  # [T1]


# =============================================================================
# Pricing Configuration
# =============================================================================

@dataclass(frozen=True)
class PricingConfig:
    """
    Immutable option pricing configuration.

    Attributes
    ----------
    heston_tolerance : float
        Relative tolerance of the Heston Fourier integral
    heston_max_level : int
        Refinement cap of the Heston Fourier integral
    """

    heston_tolerance: float = TANH_SINH_TOLERANCE
    heston_max_level: int = field(default_factory=_resolve_max_level)


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from quant_numerics.config.settings import SETTINGS
    >>> SETTINGS.quadrature.default_panels
    1000
    """

    quadrature: QuadratureConfig = field(default_factory=QuadratureConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)


# Singleton instance - import this
SETTINGS = Settings()

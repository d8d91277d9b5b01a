"""
Configuration: frozen settings and the tiered tolerance framework.
"""

from quant_numerics.config.settings import (
    SETTINGS,
    PricingConfig,
    QuadratureConfig,
    Settings,
    SimulationConfig,
)
from quant_numerics.config.tolerances import TOLERANCE_REGISTRY, get_tolerance, mc_tolerance

__all__ = [
    "SETTINGS",
    "Settings",
    "QuadratureConfig",
    "SimulationConfig",
    "PricingConfig",
    "TOLERANCE_REGISTRY",
    "get_tolerance",
    "mc_tolerance",
]

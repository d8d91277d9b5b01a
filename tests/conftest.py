"""
Centralized pytest fixtures for the quant-numerics test suite.

This module provides shared fixtures used across all test categories:
- anti_patterns/
- properties/
- unit/
- validation/

Fixture Categories:
1. Tolerances - Tiered tolerances from config/tolerances.py
2. Textbook Examples - Haug reference values
3. Models - Heston parameters, term structures, random sources
"""

from dataclasses import dataclass

import numpy as np
import pytest

from quant_numerics.config.tolerances import get_tolerance
from quant_numerics.curves import NelsonSiegelCurve, VolatilityCurve, YieldCurve
from quant_numerics.options import HestonParams, OptionType
from quant_numerics.quadrature import QuadratureEngine

# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Values are read from the tolerance registry so tests and library share
    one source.
    """

    anti_pattern: float = get_tolerance("anti_pattern")
    put_call_parity: float = get_tolerance("put_call_parity")
    closed_form_identity: float = get_tolerance("closed_form_identity")
    exact_rule: float = get_tolerance("exact_rule")
    tanh_sinh: float = get_tolerance("tanh_sinh")
    heston_bs_limit: float = get_tolerance("heston_bs_limit")
    cf_quadrature: float = get_tolerance("cf_quadrature")
    haug_example: float = get_tolerance("haug_example")
    hull_example: float = get_tolerance("hull_example")


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# TEXTBOOK EXAMPLES
# =============================================================================

@dataclass(frozen=True)
class HaugExample:
    """A worked example from Haug (2007) The Complete Guide to Option Pricing Formulas."""

    name: str
    spot: float
    strike: float
    rate: float
    dividend: float
    volatility: float
    time_to_expiry: float
    option_type: OptionType
    expected: float


# Haug (2007) Ch. 4: continuous geometric average-rate put, b = r - q = 0.08
HAUG_ASIAN_GEOMETRIC = HaugExample(
    name="Haug geometric Asian",
    spot=80.0,
    strike=85.0,
    rate=0.05,
    dividend=-0.03,
    volatility=0.20,
    time_to_expiry=0.25,
    option_type=OptionType.PUT,
    expected=4.6922,
)

# Haug (2007) Ch. 4: cash-or-nothing put paying 10, b = 0
HAUG_CASH_OR_NOTHING = HaugExample(
    name="Haug cash-or-nothing",
    spot=100.0,
    strike=80.0,
    rate=0.06,
    dividend=0.06,
    volatility=0.35,
    time_to_expiry=0.75,
    option_type=OptionType.PUT,
    expected=2.6710,
)

# Haug (2007) Ch. 4: asset-or-nothing put, b = 0.02
HAUG_ASSET_OR_NOTHING = HaugExample(
    name="Haug asset-or-nothing",
    spot=70.0,
    strike=65.0,
    rate=0.07,
    dividend=0.05,
    volatility=0.27,
    time_to_expiry=0.5,
    option_type=OptionType.PUT,
    expected=20.2069,
)


@pytest.fixture
def haug_asian_geometric() -> HaugExample:
    return HAUG_ASIAN_GEOMETRIC


@pytest.fixture
def haug_cash_or_nothing() -> HaugExample:
    return HAUG_CASH_OR_NOTHING


@pytest.fixture
def haug_asset_or_nothing() -> HaugExample:
    return HAUG_ASSET_OR_NOTHING


# =============================================================================
# MODELS
# =============================================================================

@pytest.fixture
def heston_params() -> HestonParams:
    """Typical equity Heston parameters (Feller satisfied)."""
    return HestonParams(v0=0.04, kappa=2.0, theta=0.04, sigma=0.3, rho=-0.7)


@pytest.fixture
def quadrature_engine() -> QuadratureEngine:
    """Fresh engine with an empty node cache."""
    return QuadratureEngine()


@pytest.fixture
def upward_curve() -> YieldCurve:
    """Upward sloping zero curve."""
    return YieldCurve(
        maturities=np.array([0.5, 1.0, 2.0, 5.0, 10.0]),
        rates=np.array([0.02, 0.025, 0.03, 0.035, 0.04]),
    )


@pytest.fixture
def nelson_siegel_curve() -> NelsonSiegelCurve:
    """Nelson-Siegel curve rising from 2% to 4%."""
    return NelsonSiegelCurve(beta0=0.04, beta1=-0.02, beta2=0.01, tau=2.0)


@pytest.fixture
def humped_vol_curve() -> VolatilityCurve:
    """BDT log-rate volatility term structure."""
    return VolatilityCurve(
        maturities=np.array([0.0, 1.0, 3.0, 10.0]),
        vols=np.array([0.20, 0.22, 0.18, 0.15]),
    )


@pytest.fixture
def reproducible_rng() -> np.random.Generator:
    """Seeded random generator for reproducible simulations."""
    return np.random.default_rng(42)

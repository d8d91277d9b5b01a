"""
Centralized tolerance framework for the numerics toolkit.

All tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Machine-precision achievable, closed-form results
    Tier 2 (Quadrature): Iterative integration, bounded by refinement tolerance
    Tier 3 (Stochastic): CLT-derived, path simulation
    Tier 4 (Textbook): Published reference values quoted to 4 decimals

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Takahasi & Mori (1974) - Double exponential quadrature
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
    [T1] Haug (2007) "The Complete Guide to Option Pricing Formulas"
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================
# For closed-form solutions where machine precision is achievable.
# Derived from: machine_epsilon (~2.2e-16) × safety_factor

#: No-arbitrage bounds: option price in [0, S] or [0, K*exp(-rT)]
ANTI_PATTERN_TOLERANCE: Final[float] = 1e-10

#: Put-call parity: C - P = S*exp(-qT) - K*exp(-rT)
PUT_CALL_PARITY_TOLERANCE: Final[float] = 1e-8

#: Closed-form identities between pricers (e.g. Asian vs adjusted BS)
CLOSED_FORM_IDENTITY_TOLERANCE: Final[float] = 1e-12

#: Polynomial exactness of Newton-Cotes rules (relative)
#: Summation over ~1e3 panels accumulates ~1e3 ulps
EXACT_RULE_TOLERANCE: Final[float] = 1e-12


# =============================================================================
# Tier 2: Quadrature Tolerances
# =============================================================================

#: Default relative tolerance between successive tanh-sinh levels
TANH_SINH_TOLERANCE: Final[float] = 1e-10

#: Absolute floor for integrals whose exact value is zero
TANH_SINH_ABS_TOLERANCE: Final[float] = 1e-14

#: Heston Fourier inversion vs Black-Scholes in the constant-vol limit
#: Vol-of-vol of 1e-3 perturbs the price at O(sigma^2), well below this
HESTON_BS_LIMIT_TOLERANCE: Final[float] = 1e-4

#: Characteristic function recovered by numerically integrating the density
CF_QUADRATURE_TOLERANCE: Final[float] = 1e-8


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_paths: int, sigma: float = 0.20, confidence: float = 3.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of MC estimate is σ/√N.
    3σ gives 99.7% confidence interval.

    Parameters
    ----------
    n_paths : int
        Number of simulated paths
    sigma : float
        Standard deviation of the simulated quantity (default 0.20)
    confidence : float
        Number of standard deviations (default 3 for 99.7% CI)

    Returns
    -------
    float
        Tolerance for sample moment vs theoretical moment comparison

    Examples
    --------
    >>> round(mc_tolerance(10_000), 6)
    0.006
    """
    if n_paths <= 0:
        raise ValueError(f"CRITICAL: n_paths must be > 0, got {n_paths}")
    return confidence * sigma / np.sqrt(n_paths)


#: MC tolerance for 10,000 paths: 3 * 0.20 / sqrt(10000) = 0.006
MC_10K_TOLERANCE: Final[float] = 0.006

#: MC tolerance for 100,000 paths (conservative)
MC_100K_TOLERANCE: Final[float] = 0.01


# =============================================================================
# Tier 4: Textbook Tolerances
# =============================================================================

#: Haug (2007) examples are quoted to 4 decimal places
HAUG_EXAMPLE_TOLERANCE: Final[float] = 1e-3

#: Hull examples quoted to 2 decimal places; allow 0.02 absolute
HULL_EXAMPLE_TOLERANCE: Final[float] = 0.02


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    # Tier 1: Analytical
    "anti_pattern": ANTI_PATTERN_TOLERANCE,
    "put_call_parity": PUT_CALL_PARITY_TOLERANCE,
    "closed_form_identity": CLOSED_FORM_IDENTITY_TOLERANCE,
    "exact_rule": EXACT_RULE_TOLERANCE,
    # Tier 2: Quadrature
    "tanh_sinh": TANH_SINH_TOLERANCE,
    "tanh_sinh_abs": TANH_SINH_ABS_TOLERANCE,
    "heston_bs_limit": HESTON_BS_LIMIT_TOLERANCE,
    "cf_quadrature": CF_QUADRATURE_TOLERANCE,
    # Tier 3: Stochastic
    "mc_10k": MC_10K_TOLERANCE,
    "mc_100k": MC_100K_TOLERANCE,
    # Tier 4: Textbook
    "haug_example": HAUG_EXAMPLE_TOLERANCE,
    "hull_example": HULL_EXAMPLE_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Look up a tolerance tier by registry key, e.g. ``get_tolerance("tanh_sinh")``.

    Raises
    ------
    KeyError
        For an unknown key; the message lists every registered name
    """
    try:
        return TOLERANCE_REGISTRY[name]
    except KeyError:
        available = ", ".join(sorted(TOLERANCE_REGISTRY))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}") from None

"""
Quadrature rule definitions.

A rule is a variant tag (QuadratureKind) plus the configuration that
variant understands. Rules are immutable and validated at construction.

[T1] Composite Newton-Cotes rules on N panels of width h:
  Midpoint:     h * sum f(a + (i + 1/2)h)                  error O(h^2)
  Trapezoid:    h * [f0/2 + f1 + ... + f(N-1) + fN/2]     error O(h^2)
  Simpson 3/8:  3h'/8 * [f0 + 3f1 + 3f2 + f3] per panel    error O(h^4)
                (h' = h/3, three sub-intervals per panel)
[T1] Tanh-sinh (Takahasi & Mori 1974): x = tanh(pi/2 * sinh t).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from quant_numerics.config.settings import SETTINGS
from quant_numerics.errors import ConstructionError


class QuadratureKind(Enum):
    """Quadrature rule enumeration."""

    MIDPOINT = "midpoint"
    TRAPEZOID = "trapezoid"
    SIMPSON_38 = "simpson_38"
    TANH_SINH = "tanh_sinh"

    @property
    def is_newton_cotes(self) -> bool:
        """True for the fixed-grid (finite-domain) rules."""
        return self is not QuadratureKind.TANH_SINH

    @property
    def order(self) -> int:
        """Leading error order p (error ~ h^p) used for Richardson extrapolation."""
        if self is QuadratureKind.SIMPSON_38:
            return 4
        return 2


@dataclass(frozen=True)
class QuadratureRule:
    """
    Quadrature rule and its configuration.

    Attributes
    ----------
    kind : QuadratureKind
        Rule variant
    panels : int
        Newton-Cotes panel count N
    richardson : bool
        Newton-Cotes only: also evaluate 2N panels and return the
        Richardson-extrapolated value with its error estimate
    tolerance : float, optional
        Newton-Cotes: double panels until the Richardson error is below this.
        Tanh-sinh: relative tolerance between successive levels.
    abs_tolerance : float
        Tanh-sinh absolute floor of the stopping test
    max_refinements : int
        Newton-Cotes doubling cap when tolerance is set
    max_level : int
        Tanh-sinh maximum level
    min_level : int
        Tanh-sinh first level at which convergence may be declared
    vectorized : bool
        The integrand accepts and returns numpy arrays

    Examples
    --------
    >>> rule = QuadratureRule.simpson38(panels=30)
    >>> rule = QuadratureRule.tanh_sinh(tolerance=1e-12, max_level=8)
    """

    kind: QuadratureKind
    panels: int = SETTINGS.quadrature.default_panels
    richardson: bool = False
    tolerance: Optional[float] = None
    abs_tolerance: float = SETTINGS.quadrature.tanh_sinh_abs_tolerance
    max_refinements: int = SETTINGS.quadrature.max_refinements
    max_level: int = SETTINGS.quadrature.max_level
    min_level: int = SETTINGS.quadrature.min_level
    vectorized: bool = False

    def __post_init__(self) -> None:
        """Validate rule configuration."""
        if not isinstance(self.kind, QuadratureKind):
            raise ConstructionError(
                f"CRITICAL: kind must be a QuadratureKind, got {self.kind!r}"
            )
        if isinstance(self.panels, bool) or not isinstance(self.panels, int) or self.panels < 1:
            raise ConstructionError(f"CRITICAL: panels must be an integer >= 1, got {self.panels!r}")
        if self.tolerance is not None and not self.tolerance > 0:
            raise ConstructionError(f"CRITICAL: tolerance must be > 0, got {self.tolerance}")
        if self.abs_tolerance < 0:
            raise ConstructionError(
                f"CRITICAL: abs_tolerance must be >= 0, got {self.abs_tolerance}"
            )
        if self.max_refinements < 0:
            raise ConstructionError(
                f"CRITICAL: max_refinements must be >= 0, got {self.max_refinements}"
            )
        if self.min_level < 1:
            raise ConstructionError(f"CRITICAL: min_level must be >= 1, got {self.min_level}")
        if self.max_level < self.min_level:
            raise ConstructionError(
                f"CRITICAL: max_level must be >= min_level. "
                f"Got max_level={self.max_level}, min_level={self.min_level}"
            )
        if self.kind is QuadratureKind.TANH_SINH and self.tolerance is None:
            # Frozen dataclass: fill the documented default
            object.__setattr__(self, "tolerance", SETTINGS.quadrature.tanh_sinh_tolerance)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def midpoint(cls, panels: int = SETTINGS.quadrature.default_panels, **kwargs) -> "QuadratureRule":
        """Composite midpoint rule on `panels` panels."""
        return cls(QuadratureKind.MIDPOINT, panels=panels, **kwargs)

    @classmethod
    def trapezoid(cls, panels: int = SETTINGS.quadrature.default_panels, **kwargs) -> "QuadratureRule":
        """Composite trapezoid rule on `panels` panels."""
        return cls(QuadratureKind.TRAPEZOID, panels=panels, **kwargs)

    @classmethod
    def simpson38(cls, panels: int = SETTINGS.quadrature.default_panels, **kwargs) -> "QuadratureRule":
        """Composite Simpson 3/8 rule on `panels` panels (3 sub-intervals each)."""
        return cls(QuadratureKind.SIMPSON_38, panels=panels, **kwargs)

    @classmethod
    def tanh_sinh(
        cls,
        tolerance: float = SETTINGS.quadrature.tanh_sinh_tolerance,
        max_level: int = SETTINGS.quadrature.max_level,
        **kwargs,
    ) -> "QuadratureRule":
        """Tanh-sinh (double exponential) rule."""
        return cls(QuadratureKind.TANH_SINH, tolerance=tolerance, max_level=max_level, **kwargs)


#: Rule used when integrate() is called without one
DEFAULT_RULE = QuadratureRule.tanh_sinh()

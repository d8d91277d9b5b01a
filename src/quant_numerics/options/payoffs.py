"""
Option type and payoff enumerations.
"""

from enum import Enum


class OptionType(Enum):
    """Option type enumeration."""

    CALL = "call"
    PUT = "put"

    @property
    def sign(self) -> int:
        """+1 for calls, -1 for puts (payoff max(sign * (S - K), 0))."""
        return 1 if self is OptionType.CALL else -1


class PayoffKind(Enum):
    """European payoff enumeration."""

    VANILLA = "vanilla"
    ASIAN_GEOMETRIC = "asian_geometric"  # Continuous geometric average price
    FORWARD_START = "forward_start"  # Strike fixed at start_time
    GAP = "gap"  # Trigger strike differs from payoff strike
    CASH_OR_NOTHING = "cash_or_nothing"
    ASSET_OR_NOTHING = "asset_or_nothing"

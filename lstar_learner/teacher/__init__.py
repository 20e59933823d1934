"""Teacher components for L*."""

from .membership import (
    SUL, CachedOracle, CounterOracle, FunctionOracle, MappedOracle,
    MembershipOracle, SimulatorOracle, SULOracle,
)
from .teacher import Teacher

__all__ = [
    "MembershipOracle", "SimulatorOracle", "FunctionOracle", "SUL", "SULOracle",
    "MappedOracle", "CounterOracle", "CachedOracle", "Teacher",
]

"""Equivalence oracle implementations for L* learning."""

from .base_oracle import EquivalenceOracle
from .w_method_oracle import WMethodOracle
from .bfs_oracle import BFSOracle
from .random_wp_oracle import RandomWpOracle

__all__ = [
    'EquivalenceOracle',
    'WMethodOracle',
    'BFSOracle',
    'RandomWpOracle'
]

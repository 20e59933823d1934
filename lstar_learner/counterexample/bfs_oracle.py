"""
BFS (Breadth-First Search) Equivalence Oracle

Systematically explores words in breadth-first order to find counterexamples.
This provides a simple baseline. Without breadth truncation the first
counterexample found is a shortest one.
"""

from collections import deque
from typing import Any, Dict, Iterator, Optional

from .base_oracle import EquivalenceOracle
from ..core.automaton import DeterministicAutomaton
from ..core.errors import MalformedConfiguration
from ..core.refinement import Counterexample
from ..core.word import Alphabet, Word


class BFSOracle(EquivalenceOracle):
    """
    BFS equivalence oracle for systematic exploration.

    Explores words in order of increasing length. When no level is cut
    by breadth_limit, the first counterexample found is a shortest one;
    truncated levels may hide shorter counterexamples.
    """

    def __init__(self, membership_oracle, alphabet: Alphabet,
                 max_depth: int = 8,
                 breadth_limit: int = 10000,
                 **kwargs):
        """
        Initialize BFS oracle.

        Args:
            membership_oracle: Oracle for the target
            alphabet: Input alphabet
            max_depth: Maximum word length to explore
            breadth_limit: Maximum words to check at each depth
        """
        super().__init__(membership_oracle, alphabet, **kwargs)
        if max_depth < 0 or breadth_limit < 1:
            raise MalformedConfiguration(
                f"invalid BFS bounds: max_depth={max_depth}, breadth_limit={breadth_limit}"
            )
        self.max_depth = max_depth
        self.breadth_limit = breadth_limit

        # BFS-specific statistics
        self.max_depth_reached = 0

    def find_counterexample(self, hypothesis: DeterministicAutomaton,
                            iteration: int) -> Optional[Counterexample]:
        """
        Find counterexample using breadth-first search.

        Args:
            hypothesis: Current hypothesis
            iteration: L* iteration number

        Returns:
            Counterexample or None
        """
        if self.verbose:
            print(f"\nBFS Equivalence Query (iteration {iteration})")
            print(f"  Max depth: {self.max_depth}")
            print(f"  Breadth limit: {self.breadth_limit}")

        return self._search(hypothesis, self._words())

    def _words(self) -> Iterator[Word]:
        """Words by increasing length, at most ``breadth_limit`` per level."""
        yield Word.epsilon()

        level = deque([Word.epsilon()])
        for depth in range(1, self.max_depth + 1):
            next_level = deque()
            for current in level:
                for symbol in self.alphabet:
                    if len(next_level) >= self.breadth_limit:
                        break
                    next_level.append(current.append(symbol))
            self.max_depth_reached = max(self.max_depth_reached, depth)
            yield from next_level
            level = next_level

    def get_statistics(self) -> Dict[str, Any]:
        """Return oracle statistics."""
        stats = super().get_statistics()
        stats.update({
            'max_depth': self.max_depth,
            'max_depth_reached': self.max_depth_reached,
            'breadth_limit': self.breadth_limit,
        })
        return stats

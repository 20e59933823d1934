"""
Abstract base class for equivalence oracles in L* learning.

An equivalence oracle approximates the question "is the hypothesis equal to
the target?" by testing: it runs test words through both the hypothesis and
the membership oracle and reports the first disagreement. Strategies differ
in how they pick test words:
- W-method (exhaustive up to an exploration depth)
- BFS (every word up to a length)
- Random W_p (seeded random sampling)
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from ..core.automaton import DeterministicAutomaton
from ..core.refinement import Counterexample
from ..core.word import Alphabet, Word


class EquivalenceOracle(ABC):
    """
    Abstract base class for equivalence oracles.

    All equivalence oracles must implement the find_counterexample method
    and can optionally provide statistics about their performance.
    """

    def __init__(self, membership_oracle, alphabet: Alphabet, verbose: bool = True):
        """
        Initialize the equivalence oracle.

        Args:
            membership_oracle: Oracle answering test queries on the target
            alphabet: Input alphabet
            verbose: Print progress for every query
        """
        self.membership_oracle = membership_oracle
        self.alphabet = alphabet if isinstance(alphabet, Alphabet) else Alphabet(alphabet)
        self.verbose = verbose

        # Statistics tracking
        self.total_queries = 0
        self.total_test_words = 0
        self.counterexamples_found = 0
        self.total_time = 0.0

    @abstractmethod
    def find_counterexample(self, hypothesis: DeterministicAutomaton,
                            iteration: int) -> Optional[Counterexample]:
        """
        Find a word on which the hypothesis and the target disagree.

        Args:
            hypothesis: Current hypothesis from L*
            iteration: Current L* iteration number

        Returns:
            Counterexample with the target's output, or None if none was found
        """
        pass

    def _check(self, hypothesis: DeterministicAutomaton, word: Word) -> Optional[Counterexample]:
        """Run one test word; returns a counterexample on disagreement."""
        self.total_test_words += 1
        expected = self.membership_oracle.answer(word)
        if hypothesis.compute_output(word) != expected:
            return Counterexample(word, expected)
        return None

    def _search(self, hypothesis: DeterministicAutomaton,
                test_words: Iterable[Word]) -> Optional[Counterexample]:
        """Check test words in order and stop at the first counterexample."""
        start_time = time.time()
        self.total_queries += 1

        checked = 0
        for word in test_words:
            checked += 1
            counterexample = self._check(hypothesis, word)
            if counterexample is not None:
                self.counterexamples_found += 1
                self.total_time += time.time() - start_time
                if self.verbose:
                    print(f"  Counterexample found: '{word}' (length {len(word)})")
                    print(f"  Words checked: {checked}")
                return counterexample

        self.total_time += time.time() - start_time
        if self.verbose:
            print(f"  No counterexample found after checking {checked} words")
        return None

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get performance statistics for the oracle.

        Returns:
            Dictionary of statistics
        """
        return {
            'type': self.__class__.__name__,
            'total_queries': self.total_queries,
            'total_test_words': self.total_test_words,
            'counterexamples_found': self.counterexamples_found,
            'total_time': self.total_time,
            'avg_words_per_query': self.total_test_words / max(1, self.total_queries)
        }

    def reset_statistics(self):
        """Reset statistics counters."""
        self.total_queries = 0
        self.total_test_words = 0
        self.counterexamples_found = 0
        self.total_time = 0.0

    def __str__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(alphabet_size={len(self.alphabet)})"

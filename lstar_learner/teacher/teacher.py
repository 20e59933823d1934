"""
Teacher implementation for L*.

This orchestrates the membership oracle of the system under learning and an
equivalence oracle to provide a complete teacher for L*.
"""

import time
from typing import Any, Dict, List, Optional

import numpy as np

from .membership import CachedOracle, CounterOracle, MembershipOracle, SimulatorOracle
from ..core.automaton import DeterministicAutomaton
from ..core.conversion import moore_to_mealy
from ..core.errors import LStarError, MalformedConfiguration, OracleFailure
from ..core.moore import MooreMachine
from ..core.refinement import Counterexample
from ..core.word import Alphabet
from ..counterexample.bfs_oracle import BFSOracle
from ..counterexample.random_wp_oracle import RandomWpOracle
from ..counterexample.w_method_oracle import WMethodOracle


class Teacher:
    """
    Answers membership and equivalence queries for one system under learning.

    The learner and the equivalence oracle query the same system through two
    separate counters, so their query costs are reported apart.
    """

    def __init__(self, membership_oracle: MembershipOracle, alphabet,
                 oracle_type: str = "w_method",
                 oracle_params: Optional[Dict] = None,
                 use_cache: bool = False,
                 verbose: bool = True):
        """
        Initialize teacher.

        Args:
            membership_oracle: Oracle answering queries on the system under learning
            alphabet: Input alphabet
            oracle_type: "w_method", "bfs" or "random_wp"
            oracle_params: Oracle-specific parameters
            use_cache: Whether to cache membership answers
            verbose: Print progress of equivalence queries
        """
        self.alphabet = alphabet if isinstance(alphabet, Alphabet) else Alphabet(alphabet)
        self.oracle_type = getattr(oracle_type, "value", oracle_type)
        self.verbose = verbose

        self.sul_oracle = membership_oracle
        self.cache = CachedOracle(membership_oracle) if use_cache else None
        base = self.cache if self.cache is not None else membership_oracle

        self.membership_oracle = CounterOracle(base, "Membership Queries")
        self.eq_membership_oracle = CounterOracle(base, "Membership Queries during EQ testing")

        # Equivalence oracle tests through its own counter
        self.equivalence_oracle = self._create_equivalence_oracle(
            self.oracle_type, oracle_params or {}
        )

        # Statistics
        self.hypotheses_proposed = []
        self.counterexamples = []
        self.iteration = 0

    @classmethod
    def for_target(cls, target: DeterministicAutomaton, **kwargs) -> "Teacher":
        """
        Teacher answering queries from a known automaton.

        Moore targets are converted once to their Mealy encoding, which is
        what the Moore learner queries.
        """
        if isinstance(target, MooreMachine):
            target = moore_to_mealy(target)
        return cls(SimulatorOracle(target), target.alphabet, **kwargs)

    def membership_queries(self, words) -> List[Any]:
        """Batch membership queries."""
        return self.membership_oracle.membership_queries(words)

    def classify_word(self, word) -> Any:
        """Single membership query."""
        return self.membership_oracle.answer(word)

    def equivalence_query(self, hypothesis: DeterministicAutomaton,
                          iteration: Optional[int] = None) -> Optional[Counterexample]:
        """
        Equivalence query delegated to the configured oracle.

        Args:
            hypothesis: L* proposed automaton
            iteration: Current L* iteration

        Returns:
            Counterexample or None if equivalent

        Raises:
            OracleFailure: If the equivalence oracle cannot complete the query
        """
        self.iteration = iteration or self.iteration + 1
        self.hypotheses_proposed.append(hypothesis)

        if self.verbose:
            print(f"\nEquivalence query (iteration {self.iteration})")
            print(f"  Oracle type: {self.oracle_type}")
            print(f"  {hypothesis.kind} states: {hypothesis.size()}")

        start_time = time.time()
        try:
            counterexample = self.equivalence_oracle.find_counterexample(
                hypothesis, self.iteration
            )
        except LStarError:
            raise
        except Exception as e:
            raise OracleFailure(f"equivalence query {self.iteration} failed: {e}") from e

        ce_time = time.time() - start_time
        if counterexample is not None:
            self.counterexamples.append((counterexample, ce_time))
        elif self.verbose:
            print(f"  No counterexample found (time: {ce_time:.2f}s)")
        return counterexample

    def get_statistics(self) -> Dict:
        """Get teacher statistics."""
        stats = {
            'iterations': self.iteration,
            'counterexamples': len(self.counterexamples),
            'oracle_type': self.oracle_type,
            'membership_queries': self.membership_oracle.query_count,
            'membership_symbols': self.membership_oracle.symbol_count,
            'eq_membership_queries': self.eq_membership_oracle.query_count,
            'eq_membership_symbols': self.eq_membership_oracle.symbol_count,
        }

        if self.cache is not None:
            stats['cache'] = self.cache.get_statistics()

        oracle_stats = self.equivalence_oracle.get_statistics()
        stats['equivalence_queries'] = oracle_stats.get('total_queries', 0)
        stats['oracle_specific'] = oracle_stats

        if self.counterexamples:
            ce_lengths = [len(ce.word) for ce, _ in self.counterexamples]
            ce_times = [t for _, t in self.counterexamples]
            stats['avg_ce_length'] = float(np.mean(ce_lengths))
            stats['avg_ce_time'] = float(np.mean(ce_times))
            stats['min_ce_length'] = min(ce_lengths)
            stats['max_ce_length'] = max(ce_lengths)

        return stats

    def print_summary(self):
        """Print the query counters, one line each."""
        print(self.membership_oracle.get_summary())
        print(self.eq_membership_oracle.get_summary())

    def _create_equivalence_oracle(self, oracle_type: str, params: Dict):
        """
        Factory method for creating equivalence oracles.

        Args:
            oracle_type: Type of oracle to create
            params: Oracle-specific parameters

        Returns:
            Initialized equivalence oracle

        Raises:
            MalformedConfiguration: If oracle_type is unknown
        """
        oracle_constructors = {
            "w_method": self._create_w_method_oracle,
            "bfs": self._create_bfs_oracle,
            "random_wp": self._create_random_wp_oracle
        }

        if oracle_type not in oracle_constructors:
            raise MalformedConfiguration(
                f"Unknown oracle type: {oracle_type}. "
                f"Available types: {list(oracle_constructors.keys())}"
            )

        return oracle_constructors[oracle_type](params)

    def _create_w_method_oracle(self, params: Dict):
        """W-method oracle; complete for targets within the exploration depth."""
        return WMethodOracle(
            self.eq_membership_oracle,
            self.alphabet,
            max_depth=params.get('max_depth', 4),
            max_target_states=params.get('max_target_states'),
            verbose=self.verbose
        )

    def _create_bfs_oracle(self, params: Dict):
        """BFS oracle testing every word up to a length."""
        return BFSOracle(
            self.eq_membership_oracle,
            self.alphabet,
            max_depth=params.get('max_depth', 8),
            breadth_limit=params.get('breadth_limit', 10000),
            verbose=self.verbose
        )

    def _create_random_wp_oracle(self, params: Dict):
        """Random W_p oracle with a seeded generator."""
        return RandomWpOracle(
            self.eq_membership_oracle,
            self.alphabet,
            min_length=params.get('min_length', 3),
            expected_length=params.get('expected_length', 11),
            num_tests=params.get('num_tests', 10000),
            max_total_length=params.get('max_total_length', 50),
            seed=params.get('seed', 0),
            verbose=self.verbose
        )

"""
Random W_p Method Equivalence Oracle.

Implements the Random W_p Method as described in "Complementing Model
Learning with Mutation-Based Fuzzing" by Rick Smetsers et al.

The key idea is to randomly sample test sequences instead of exhaustively
testing all possibilities
"""

from typing import Any, Dict, Iterator, List, Optional

import numpy as np

from .base_oracle import EquivalenceOracle
from ..core.automaton import DeterministicAutomaton
from ..core.errors import MalformedConfiguration
from ..core.refinement import Counterexample
from ..core.word import Alphabet, Word


class RandomWpOracle(EquivalenceOracle):
    """
    Random W_p Method oracle for probabilistic equivalence testing.

    Instead of exhaustive testing like the standard W_p method, this approach
    randomly samples test sequences, making it more scalable for larger systems
    while still providing good coverage. Sampling uses a seeded numpy
    generator, so runs are reproducible.
    """

    def __init__(self, membership_oracle, alphabet: Alphabet,
                 min_length: int = 3,
                 expected_length: int = 11,
                 num_tests: int = 10000,
                 max_total_length: int = 50,
                 seed: Optional[int] = 0,
                 **kwargs):
        """
        Initialize Random W_p oracle.

        Args:
            membership_oracle: Oracle for the target
            alphabet: Input alphabet
            min_length: Minimum length of the middle part (infix)
            expected_length: Expected length of the middle part (geometric distribution)
            num_tests: Number of random tests to perform per equivalence query
            max_total_length: Maximum total word length to test
            seed: Seed of the random generator
        """
        super().__init__(membership_oracle, alphabet, **kwargs)
        if min_length < 0 or expected_length < min_length:
            raise MalformedConfiguration(
                f"need 0 <= min_length <= expected_length, got {min_length} and {expected_length}"
            )
        if num_tests < 1:
            raise MalformedConfiguration(f"num_tests must be positive, got {num_tests}")
        self.min_length = min_length
        self.expected_length = expected_length
        self.num_tests = num_tests
        self.max_total_length = max_total_length
        self.seed = seed
        self.rng = np.random.RandomState(seed)
        self.skipped_tests = 0

    def find_counterexample(self, hypothesis: DeterministicAutomaton,
                            iteration: int) -> Optional[Counterexample]:
        """
        Find counterexample using random sampling of test sequences.

        For each test:
        1. Sample a state and take its access sequence as prefix
        2. Draw an infix length from a geometric distribution
        3. Draw a uniformly random infix of that length
        4. Sample a suffix from the discriminators of the state reached

        Args:
            hypothesis: Current hypothesis
            iteration: Current iteration number

        Returns:
            Counterexample or None
        """
        if self.verbose:
            print(f"\nRandom W_p Equivalence Query (iteration {iteration})")
            print(f"  Number of tests: {self.num_tests}")
            print(f"  Min infix length: {self.min_length}")
            print(f"  Expected infix length: {self.expected_length}")
            print(f"  Max total length: {self.max_total_length}")

        return self._search(hypothesis, self._sample_words(hypothesis))

    def _sample_words(self, hypothesis: DeterministicAutomaton) -> Iterator[Word]:
        access = hypothesis.state_cover()
        states = sorted(access)
        discriminators = self._compute_state_discriminators(hypothesis)
        symbols = self.alphabet.symbols
        # Geometric number of extra symbols with the requested mean
        stop_probability = 1.0 / (self.expected_length - self.min_length + 1)

        for _ in range(self.num_tests):
            prefix = access[states[self.rng.randint(len(states))]]

            infix_length = self.min_length + self.rng.geometric(stop_probability) - 1
            infix = Word(tuple(symbols[i] for i in self.rng.randint(len(symbols), size=infix_length)))

            reached = hypothesis.get_state(prefix.concat(infix))
            candidates = discriminators.get(reached) or [Word.epsilon()]
            suffix = candidates[self.rng.randint(len(candidates))]

            word = prefix.concat(infix, suffix)
            if len(word) > self.max_total_length:
                self.skipped_tests += 1
                continue
            yield word

    def _compute_state_discriminators(self, hypothesis: DeterministicAutomaton) -> Dict[int, List[Word]]:
        """
        Compute state-specific discriminators.

        For each state, the words separating it from every other state.
        """
        discriminators = {}
        for state in hypothesis.states:
            words = []
            for other in hypothesis.states:
                if other == state:
                    continue
                word = hypothesis.separating_word(state, other)
                if word is not None and word not in words:
                    words.append(word)
            discriminators[state] = words
        return discriminators

    def get_statistics(self) -> Dict[str, Any]:
        """Get oracle statistics."""
        stats = super().get_statistics()
        stats['skipped_tests'] = self.skipped_tests
        stats['min_length'] = self.min_length
        stats['expected_length'] = self.expected_length
        stats['num_tests'] = self.num_tests
        stats['max_total_length'] = self.max_total_length
        stats['seed'] = self.seed
        return stats

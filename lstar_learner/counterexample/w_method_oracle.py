"""
W-method Equivalence Oracle

Implements Chow's W-method for equivalence testing, which systematically
tests the hypothesis against the target using a characterization set.
"""

import itertools
from typing import Any, Dict, List, Optional

from .base_oracle import EquivalenceOracle
from ..core.automaton import DeterministicAutomaton
from ..core.errors import MalformedConfiguration
from ..core.refinement import Counterexample
from ..core.word import Alphabet, Word


class WMethodOracle(EquivalenceOracle):
    """
    W-method equivalence oracle for systematic testing.

    Test words are P · Σ^[0..depth] · (W ∪ {ε}) where P is the transition
    cover and W the characterization set of the hypothesis. The result is
    exact for targets with at most ``|hypothesis| + depth`` states.
    """

    def __init__(self, membership_oracle, alphabet: Alphabet,
                 max_depth: int = 4,
                 max_target_states: Optional[int] = None,
                 **kwargs):
        """
        Initialize W-method oracle.

        Args:
            membership_oracle: Oracle for the target
            alphabet: Input alphabet
            max_depth: Exploration depth (length of the middle part)
            max_target_states: If set, derive the depth from this upper
                bound on the target's states instead
        """
        super().__init__(membership_oracle, alphabet, **kwargs)
        if max_depth < 0:
            raise MalformedConfiguration(f"max_depth must be non-negative, got {max_depth}")
        self.max_depth = max_depth
        self.max_target_states = max_target_states

    def test_depth(self, hypothesis: DeterministicAutomaton) -> int:
        if self.max_target_states is None:
            return self.max_depth
        return max(0, self.max_target_states + 1 - hypothesis.size())

    def find_counterexample(self, hypothesis: DeterministicAutomaton,
                            iteration: int) -> Optional[Counterexample]:
        """
        Find counterexample using W-method.

        Args:
            hypothesis: Current hypothesis
            iteration: L* iteration number

        Returns:
            Counterexample or None
        """
        depth = self.test_depth(hypothesis)

        # Covers every transition of the hypothesis at least once
        transition_cover = hypothesis.transition_cover()
        # W distinguishes between all pairs of states
        W = hypothesis.characterization_set()
        test_words = self.generate_test_set(transition_cover, W, depth)

        if self.verbose:
            print(f"\nW-Method Equivalence Query (iteration {iteration})")
            print(f"  Hypothesis states: {hypothesis.size()}")
            print(f"  Test depth: {depth}")
            print(f"  Transition cover size: {len(set(transition_cover))}")
            print(f"  Characterization set size: {len(W)}")
            print(f"  Test set size: {len(test_words)}")

        return self._search(hypothesis, test_words)

    def generate_test_set(self, P: List[Word], W: List[Word], depth: int) -> List[Word]:
        """
        Generate the W-method test set.

        Test set = P · Σ^[0..depth] · (W ∪ {ε}), shortest words first.
        """
        middles = [Word(combo) for length in range(depth + 1)
                   for combo in itertools.product(self.alphabet.symbols, repeat=length)]
        suffixes = [Word.epsilon()] + [w for w in W if not w.is_empty()]

        test_set = set()
        for p in P:
            for middle in middles:
                for w in suffixes:
                    test_set.add(p.concat(middle, w))

        return sorted(test_set, key=self.alphabet.sort_key)

    def get_statistics(self) -> Dict[str, Any]:
        """Return oracle statistics."""
        stats = super().get_statistics()
        stats.update({
            'max_depth': self.max_depth,
            'max_target_states': self.max_target_states,
        })
        return stats

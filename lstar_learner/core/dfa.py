"""
Deterministic Finite Automaton (DFA) implementation.

A DFA is formally a 5-tuple (Q, Σ, δ, q₀, F) where Q is the state set,
Σ is the alphabet, δ: Q × Σ → Q is the transition function,
q₀ is the initial state, and F is the set of accepting states.
"""

from typing import Dict, Hashable, Iterable, Optional, Set

from .automaton import DeterministicAutomaton, build_state_index
from .word import Alphabet, Symbol, Word


class DFA(DeterministicAutomaton):
    """Deterministic Finite Automaton (acceptor)."""

    kind = "DFA"

    def __init__(self, alphabet: Alphabet):
        super().__init__(alphabet)
        self.F: Set[int] = set()

    @classmethod
    def from_transitions(cls, alphabet: Alphabet,
                         transitions: Dict[Hashable, Dict[Symbol, Hashable]],
                         initial_state: Hashable,
                         final_states: Iterable[Hashable]) -> "DFA":
        """
        Build a DFA from named states.

        Args:
            alphabet: Input alphabet
            transitions: Nested dict mapping state × symbol → state
            initial_state: Starting state name
            final_states: Accepting state names

        Returns:
            DFA whose integer states follow the first-seen order of the names
        """
        names = [initial_state] + list(transitions)
        for targets in transitions.values():
            names.extend(targets.values())
        index, ordered = build_state_index(names)

        final_states = set(final_states)
        dfa = cls(alphabet)
        for name in ordered:
            dfa.add_state(name in final_states)
        for name, targets in transitions.items():
            for symbol, target in targets.items():
                dfa.set_transition(index[name], symbol, index[target])
        dfa.set_initial(index[initial_state])
        return dfa

    def add_state(self, accepting: bool = False) -> int:
        state = self._new_state()
        if accepting:
            self.F.add(state)
        return state

    def set_accepting(self, state: int, accepting: bool):
        if accepting:
            self.F.add(state)
        else:
            self.F.discard(state)

    def is_accepting(self, state: int) -> bool:
        return state in self.F

    def set_transition(self, state: int, symbol: Symbol, target: int):
        self.delta[state][symbol] = target

    def accepts(self, word: Iterable[Symbol]) -> bool:
        """
        Determine if DFA accepts given word.

        Time Complexity: O(|word|)
        """
        current = self.q0
        for symbol in word:
            if current is None:
                return False
            current = self.delta[current].get(symbol)
        return current is not None and current in self.F

    def classify_word(self, word: str) -> bool:
        """Classify a string of single-character symbols."""
        return self.accepts(list(word))

    def compute_output(self, word: Word) -> bool:
        return self.accepts(word)

    def local_witness(self, state1: int, state2: int) -> Optional[Word]:
        if (state1 in self.F) != (state2 in self.F):
            return Word.epsilon()
        return None

    def state_signature(self, state: int) -> bool:
        return state in self.F

    def _empty_copy(self) -> "DFA":
        return DFA(self.alphabet)

    def _copy_state(self, other: "DFA", state: int) -> int:
        return other.add_state(state in self.F)

    def _copy_transition(self, other: "DFA", new_state: int, state: int,
                         symbol: Symbol, new_target: int):
        other.set_transition(new_state, symbol, new_target)

    def _node_attributes(self, state: int) -> str:
        return ", shape=doublecircle" if state in self.F else ""

    def __str__(self) -> str:
        return (f"DFA(|Q|={len(self.states)}, |Σ|={len(self.alphabet)}, "
                f"q0={self.q0}, |F|={len(self.F)})")

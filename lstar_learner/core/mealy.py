"""
Mealy machine implementation.

A Mealy machine (Q, Σ, Ω, δ, λ, q₀) emits one output symbol λ(q, a) ∈ Ω on
every transition, so the output on an input word is a word of equal length.
"""

from typing import Any, Dict, Hashable, Optional, Tuple

from .automaton import DeterministicAutomaton, build_state_index
from .word import Alphabet, Symbol, Word


class MealyMachine(DeterministicAutomaton):
    """Deterministic Mealy machine (transducer)."""

    kind = "Mealy"

    def __init__(self, alphabet: Alphabet):
        super().__init__(alphabet)
        self.outputs: Dict[int, Dict[Symbol, Any]] = {}

    @classmethod
    def from_transitions(cls, alphabet: Alphabet,
                         transitions: Dict[Hashable, Dict[Symbol, Tuple[Hashable, Any]]],
                         initial_state: Hashable) -> "MealyMachine":
        """
        Build a Mealy machine from named states.

        Args:
            alphabet: Input alphabet
            transitions: state → symbol → (target state, output)
            initial_state: Starting state name
        """
        names = [initial_state] + list(transitions)
        for targets in transitions.values():
            names.extend(target for target, _ in targets.values())
        index, ordered = build_state_index(names)

        mealy = cls(alphabet)
        for _ in ordered:
            mealy.add_state()
        for name, targets in transitions.items():
            for symbol, (target, output) in targets.items():
                mealy.set_transition(index[name], symbol, index[target], output)
        mealy.set_initial(index[initial_state])
        return mealy

    def add_state(self) -> int:
        state = self._new_state()
        self.outputs[state] = {}
        return state

    def set_transition(self, state: int, symbol: Symbol, target: int, output: Any):
        self.delta[state][symbol] = target
        self.outputs[state][symbol] = output

    def transition_output(self, state: int, symbol: Symbol) -> Any:
        return self.outputs[state][symbol]

    def compute_output(self, word: Word) -> Word:
        """
        Output word for ``word``.

        Raises:
            KeyError: If a transition on the run is undefined
        """
        current = self.q0
        outputs = []
        for symbol in word:
            outputs.append(self.outputs[current][symbol])
            current = self.delta[current][symbol]
        return Word(tuple(outputs))

    def local_witness(self, state1: int, state2: int) -> Optional[Word]:
        for symbol in self.alphabet:
            if symbol in self.outputs[state1] and symbol in self.outputs[state2]:
                if self.outputs[state1][symbol] != self.outputs[state2][symbol]:
                    return Word.from_symbols(symbol)
        return None

    def state_signature(self, state: int) -> Tuple[Any, ...]:
        return tuple(self.outputs[state].get(a) for a in self.alphabet)

    def _empty_copy(self) -> "MealyMachine":
        return MealyMachine(self.alphabet)

    def _copy_state(self, other: "MealyMachine", state: int) -> int:
        return other.add_state()

    def _copy_transition(self, other: "MealyMachine", new_state: int, state: int,
                         symbol: Symbol, new_target: int):
        other.set_transition(new_state, symbol, new_target, self.outputs[state][symbol])

    def _edge_label(self, state: int, symbol: Symbol) -> str:
        return f"{symbol} / {self.outputs[state][symbol]}"

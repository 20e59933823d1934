"""
Moore machine implementation.

A Moore machine attaches its output to states instead of transitions. The
output on an input word lists the outputs of every state on the run, the
initial state included, so it is one symbol longer than the input.
"""

from typing import Any, Dict, Hashable, Optional

from .automaton import DeterministicAutomaton, build_state_index
from .word import Alphabet, Symbol, Word


class MooreMachine(DeterministicAutomaton):
    """Deterministic Moore machine."""

    kind = "Moore"

    def __init__(self, alphabet: Alphabet):
        super().__init__(alphabet)
        self.state_outputs: Dict[int, Any] = {}

    @classmethod
    def from_transitions(cls, alphabet: Alphabet,
                         transitions: Dict[Hashable, Dict[Symbol, Hashable]],
                         initial_state: Hashable,
                         state_outputs: Dict[Hashable, Any]) -> "MooreMachine":
        """
        Build a Moore machine from named states.

        Args:
            alphabet: Input alphabet
            transitions: state → symbol → target state
            initial_state: Starting state name
            state_outputs: Output of every state
        """
        names = [initial_state] + list(transitions)
        for targets in transitions.values():
            names.extend(targets.values())
        index, ordered = build_state_index(names)

        moore = cls(alphabet)
        for name in ordered:
            moore.add_state(state_outputs[name])
        for name, targets in transitions.items():
            for symbol, target in targets.items():
                moore.set_transition(index[name], symbol, index[target])
        moore.set_initial(index[initial_state])
        return moore

    def add_state(self, output: Any) -> int:
        state = self._new_state()
        self.state_outputs[state] = output
        return state

    def set_transition(self, state: int, symbol: Symbol, target: int):
        self.delta[state][symbol] = target

    def state_output(self, state: int) -> Any:
        return self.state_outputs[state]

    def compute_output(self, word: Word) -> Word:
        current = self.q0
        outputs = [self.state_outputs[current]]
        for symbol in word:
            current = self.delta[current][symbol]
            outputs.append(self.state_outputs[current])
        return Word(tuple(outputs))

    def local_witness(self, state1: int, state2: int) -> Optional[Word]:
        if self.state_outputs[state1] != self.state_outputs[state2]:
            return Word.epsilon()
        return None

    def state_signature(self, state: int) -> Any:
        return self.state_outputs[state]

    def _empty_copy(self) -> "MooreMachine":
        return MooreMachine(self.alphabet)

    def _copy_state(self, other: "MooreMachine", state: int) -> int:
        return other.add_state(self.state_outputs[state])

    def _copy_transition(self, other: "MooreMachine", new_state: int, state: int,
                         symbol: Symbol, new_target: int):
        other.set_transition(new_state, symbol, new_target)

    def _state_label(self, state: int) -> str:
        return f"q{state} / {self.state_outputs[state]}"

"""
Common structure of the deterministic automata produced by the learner.

States are consecutive integers. The transition function δ: Q × Σ → Q is a
nested dict; subclasses attach outputs (acceptance, transition outputs or
state outputs) and define ``compute_output``.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Dict, Hashable, List, Optional, Tuple

from .word import Alphabet, Symbol, Word


class DeterministicAutomaton(ABC):
    """Deterministic automaton over a fixed input alphabet."""

    kind = "automaton"

    def __init__(self, alphabet: Alphabet):
        self.alphabet = alphabet
        self.states: List[int] = []
        self.delta: Dict[int, Dict[Symbol, int]] = {}
        self.q0: Optional[int] = None

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def _new_state(self) -> int:
        state = len(self.states)
        self.states.append(state)
        self.delta[state] = {}
        return state

    def set_initial(self, state: int):
        self.q0 = state

    def successor(self, state: int, symbol: Symbol) -> Optional[int]:
        return self.delta[state].get(symbol)

    def has_transition(self, state: int, symbol: Symbol) -> bool:
        return symbol in self.delta[state]

    def get_state(self, word: Word) -> Optional[int]:
        """
        State reached after processing ``word``.

        Returns:
            State identifier or None if a transition is undefined
        """
        current = self.q0
        for symbol in word:
            if current is None:
                return None
            current = self.delta[current].get(symbol)
        return current

    def is_total(self) -> bool:
        """True if every state has exactly one transition per symbol."""
        if self.q0 is None:
            return False
        return all(
            set(self.delta[state]) == set(self.alphabet) for state in self.states
        )

    def size(self) -> int:
        return len(self.states)

    def __len__(self) -> int:
        return len(self.states)

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @abstractmethod
    def compute_output(self, word: Word) -> Any:
        """Output of the automaton on ``word``."""
        pass

    @abstractmethod
    def local_witness(self, state1: int, state2: int) -> Optional[Word]:
        """
        Word of length <= 1 on which the two states produce different output.

        Returns None when the states cannot be told apart without moving.
        """
        pass

    @abstractmethod
    def state_signature(self, state: int) -> Hashable:
        """Outputs observable at ``state`` without leaving it."""
        pass

    # ------------------------------------------------------------------
    # Covers and separating words
    # ------------------------------------------------------------------

    def state_cover(self) -> Dict[int, Word]:
        """
        Compute shortest access sequences for all reachable states.

        BFS in alphabet order, so the result is deterministic.
        """
        access = {self.q0: Word.epsilon()}
        queue = deque([self.q0])
        while queue:
            state = queue.popleft()
            for symbol in self.alphabet:
                target = self.delta[state].get(symbol)
                if target is not None and target not in access:
                    access[target] = access[state].append(symbol)
                    queue.append(target)
        return access

    def transition_cover(self) -> List[Word]:
        """State cover plus every access sequence extended by one symbol."""
        cover = []
        for access in self.state_cover().values():
            cover.append(access)
            for symbol in self.alphabet:
                cover.append(access.append(symbol))
        return cover

    def separating_word(self, state1: int, state2: int) -> Optional[Word]:
        """
        Find a shortest word distinguishing two states.

        Returns:
            Separating word or None if the states are equivalent
        """
        witness = self.local_witness(state1, state2)
        if witness is not None:
            return witness

        queue = deque([(Word.epsilon(), state1, state2)])
        visited = {(state1, state2)}
        while queue:
            path, s1, s2 = queue.popleft()
            for symbol in self.alphabet:
                next_s1 = self.delta[s1].get(symbol)
                next_s2 = self.delta[s2].get(symbol)
                if next_s1 is None or next_s2 is None:
                    continue
                next_path = path.append(symbol)
                witness = self.local_witness(next_s1, next_s2)
                if witness is not None:
                    return next_path.concat(witness)
                if (next_s1, next_s2) not in visited:
                    visited.add((next_s1, next_s2))
                    queue.append((next_path, next_s1, next_s2))
        return None

    def characterization_set(self) -> List[Word]:
        """Words separating every pair of inequivalent states."""
        words = []
        for i, state1 in enumerate(self.states):
            for state2 in self.states[i + 1:]:
                word = self.separating_word(state1, state2)
                if word is not None and word not in words:
                    words.append(word)
        return words

    # ------------------------------------------------------------------
    # Minimization
    # ------------------------------------------------------------------

    def minimize(self) -> "DeterministicAutomaton":
        """
        Return a minimal equivalent automaton by partition refinement.

        Unreachable states are dropped first; blocks are then split by the
        block of each successor until the partition is stable.
        """
        reachable = sorted(self.state_cover())
        block_of = {}
        signatures = {}
        for state in reachable:
            sig = self.state_signature(state)
            block_of[state] = signatures.setdefault(sig, len(signatures))

        while True:
            refined = {}
            new_block_of = {}
            for state in reachable:
                key = (block_of[state],) + tuple(
                    block_of.get(self.delta[state].get(a), -1) for a in self.alphabet
                )
                new_block_of[state] = refined.setdefault(key, len(refined))
            stable = len(refined) == len(set(block_of.values()))
            block_of = new_block_of
            if stable:
                break

        return self._quotient(reachable, block_of)

    def _quotient(self, reachable: List[int], block_of: Dict[int, int]):
        result = self._empty_copy()
        representatives: Dict[int, int] = {}
        # Number blocks by their lowest reachable state
        for state in reachable:
            block = block_of[state]
            if block not in representatives:
                representatives[block] = state
        new_id = {}
        for block, state in sorted(representatives.items(), key=lambda kv: kv[1]):
            new_id[block] = self._copy_state(result, state)
        for block, state in representatives.items():
            for symbol in self.alphabet:
                target = self.delta[state].get(symbol)
                if target is not None:
                    self._copy_transition(result, new_id[block], state, symbol,
                                          new_id[block_of[target]])
        result.set_initial(new_id[block_of[self.q0]])
        return result

    @abstractmethod
    def _empty_copy(self) -> "DeterministicAutomaton":
        pass

    @abstractmethod
    def _copy_state(self, other: "DeterministicAutomaton", state: int) -> int:
        pass

    @abstractmethod
    def _copy_transition(self, other: "DeterministicAutomaton", new_state: int,
                         state: int, symbol: Symbol, new_target: int):
        pass

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _state_label(self, state: int) -> str:
        return f"q{state}"

    def _edge_label(self, state: int, symbol: Symbol) -> str:
        return str(symbol)

    def _node_attributes(self, state: int) -> str:
        return ""

    def to_dot(self) -> str:
        """
        Generate Graphviz DOT representation.

        Returns:
            DOT format string for visualization
        """
        lines = [f"digraph {self.kind} {{", "    rankdir=LR;", "    node [shape=circle];"]

        for state in self.states:
            attributes = self._node_attributes(state)
            label = self._state_label(state)
            lines.append(f'    "{state}" [label="{label}"{attributes}];')

        lines.append('    __start__ [shape=none, label=""];')
        if self.q0 is not None:
            lines.append(f'    __start__ -> "{self.q0}";')

        for state in self.states:
            # Group transitions by target
            groups: Dict[int, List[str]] = {}
            for symbol in self.alphabet:
                target = self.delta[state].get(symbol)
                if target is not None:
                    groups.setdefault(target, []).append(self._edge_label(state, symbol))
            for target, labels in groups.items():
                lines.append(f'    "{state}" -> "{target}" [label="{",".join(labels)}"];')

        lines.append("}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return (f"{self.__class__.__name__}(|Q|={len(self.states)}, "
                f"|Σ|={len(self.alphabet)}, q0={self.q0})")


def build_state_index(names: List[Hashable]) -> Tuple[Dict[Hashable, int], List[Hashable]]:
    """Map arbitrary state names to consecutive integers, in first-seen order."""
    index: Dict[Hashable, int] = {}
    for name in names:
        if name not in index:
            index[name] = len(index)
    return index, list(index)

"""
Hypothesis construction from a closed and consistent observation table.

States correspond to distinct content ids among the short rows, numbered in
first-seen order; transitions follow the successor rows. The access word of
every state is kept alongside the automaton for counterexample analysis.
"""

from dataclasses import dataclass
from typing import Dict, Generic, List, Optional, Tuple, TypeVar

from .automaton import DeterministicAutomaton
from .dfa import DFA
from .errors import InvariantViolation
from .mealy import MealyMachine
from .moore import MooreMachine
from .observation_table import ObservationTable, Row
from .word import Word

A = TypeVar("A", bound=DeterministicAutomaton)


@dataclass
class Hypothesis(Generic[A]):
    """A hypothesis automaton plus the access word of each of its states."""

    automaton: A
    state_prefixes: List[Word]

    def access_word(self, state: int) -> Word:
        return self.state_prefixes[state]

    def access_word_after(self, word: Word) -> Word:
        """Access word of the state the hypothesis reaches on ``word``."""
        state = self.automaton.get_state(word)
        if state is None:
            raise InvariantViolation(f"hypothesis has no run on '{word}'")
        return self.state_prefixes[state]

    @property
    def num_states(self) -> int:
        return len(self.state_prefixes)


def _state_map(table: ObservationTable) -> Tuple[Dict[int, int], List[Row]]:
    """Content id → state, plus the representative row of each state."""
    state_of: Dict[int, int] = {}
    representatives: List[Row] = []
    for row in table.short_prefix_rows:
        if row.content_id not in state_of:
            state_of[row.content_id] = len(representatives)
            representatives.append(row)
    return state_of, representatives


def _column(table: ObservationTable, suffix: Word) -> int:
    index = table.suffix_index(suffix)
    if index < 0:
        raise InvariantViolation(f"observation table has no column for '{suffix}'")
    return index


def _wire_transitions(table: ObservationTable, automaton: DeterministicAutomaton,
                      state_of: Dict[int, int], add_transition) -> None:
    """
    Add one transition per (state, symbol), first writer wins.

    Rows sharing a content id agree on their successors when the table is
    consistent, so skipping later duplicates loses nothing.
    """
    initial: Optional[int] = None
    for row in table.short_prefix_rows:
        state = state_of[row.content_id]
        if row.label.is_empty():
            initial = state

        for index, symbol in enumerate(table.alphabet):
            successor = row.successor(index)
            target = state_of.get(successor.content_id)
            if target is None:
                raise InvariantViolation(
                    f"successor '{successor.label}' matches no short row; table is not closed"
                )
            if not automaton.has_transition(state, symbol):
                add_transition(row, state, index, symbol, target)

    if initial is None:
        raise InvariantViolation("observation table has no row for the empty word")
    automaton.set_initial(initial)


def extract_dfa(table: ObservationTable) -> Hypothesis[DFA]:
    """
    Construct DFA from closed and consistent observation table.

    Acceptance of a state is the epsilon-column cell of its row.
    """
    epsilon_column = _column(table, Word.epsilon())
    state_of, representatives = _state_map(table)

    dfa = DFA(table.alphabet)
    for row in representatives:
        dfa.add_state(bool(table.cell_contents(row, epsilon_column)))

    def add_transition(row, state, index, symbol, target):
        dfa.set_transition(state, symbol, target)

    _wire_transitions(table, dfa, state_of, add_transition)
    return Hypothesis(dfa, [row.label for row in representatives])


def extract_mealy(table: ObservationTable) -> Hypothesis[MealyMachine]:
    """
    Construct Mealy machine from closed and consistent observation table.

    The output of transition (q, a) is read from the source row's cell in
    the column of the single-symbol word ``a``.
    """
    columns = [_column(table, w) for w in table.alphabet.singletons()]
    state_of, representatives = _state_map(table)

    mealy = MealyMachine(table.alphabet)
    for _ in representatives:
        mealy.add_state()

    def add_transition(row, state, index, symbol, target):
        output = table.cell_contents(row, columns[index])
        mealy.set_transition(state, symbol, target, output.first_symbol)

    _wire_transitions(table, mealy, state_of, add_transition)
    return Hypothesis(mealy, [row.label for row in representatives])


def extract_moore(table: ObservationTable) -> Hypothesis[MooreMachine]:
    """
    Construct the Moore view of a table learned with Moore-encoded Mealy queries.

    Every transition leaving a Moore state carries that state's output, so
    the output is read from the column of the first input symbol.
    """
    first_column = _column(table, Word.from_symbols(table.alphabet.symbol(0)))
    state_of, representatives = _state_map(table)

    moore = MooreMachine(table.alphabet)
    for row in representatives:
        moore.add_state(table.cell_contents(row, first_column).first_symbol)

    def add_transition(row, state, index, symbol, target):
        moore.set_transition(state, symbol, target)

    _wire_transitions(table, moore, state_of, add_transition)
    return Hypothesis(moore, [row.label for row in representatives])

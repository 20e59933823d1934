"""
Example systems under learning.

Classic small automata used to exercise the learners: Angluin's DFA from the
original L* paper, three-symbol Mealy and Moore machines, modular counters
and a concrete integer system learned through an abstraction mapper.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from ..config import Semantics
from ..core.automaton import DeterministicAutomaton
from ..core.conversion import moore_to_mealy
from ..core.dfa import DFA
from ..core.errors import MalformedConfiguration
from ..core.mealy import MealyMachine
from ..core.moore import MooreMachine
from ..core.word import Alphabet
from ..teacher.membership import (
    SUL, MappedOracle, MembershipOracle, SimulatorOracle, SULOracle,
)
from ..teacher.teacher import Teacher


def angluin_dfa() -> DFA:
    """
    DFA from Angluin's seminal paper.

    Accepts words over {a, b} with an even number of a's and an even number of b's.
    """
    return DFA.from_transitions(
        Alphabet.characters('a', 'b'),
        {
            "q0": {'a': "q1", 'b': "q2"},
            "q1": {'a': "q0", 'b': "q3"},
            "q2": {'a': "q3", 'b': "q0"},
            "q3": {'a': "q2", 'b': "q1"},
        },
        initial_state="q0",
        final_states={"q0"},
    )


def even_a_ends_with_b_dfa() -> DFA:
    """
    Words over {a, b} with an even number of a's that end in b.

    Built from the product of a's parity and "last symbol was b", which is
    not minimal: the two odd-parity states are equivalent.
    """
    transitions = {}
    for parity in ("even", "odd"):
        for ends_b in (False, True):
            flipped = "odd" if parity == "even" else "even"
            transitions[(parity, ends_b)] = {'a': (flipped, False), 'b': (parity, True)}
    return DFA.from_transitions(
        Alphabet.characters('a', 'b'),
        transitions,
        initial_state=("even", False),
        final_states={("even", True)},
    )


def abc_mealy() -> MealyMachine:
    """Four-state Mealy machine over {a, b, c} with outputs {x, y, z}."""
    return MealyMachine.from_transitions(
        Alphabet.characters('a', 'c'),
        {
            "q0": {'a': ("q1", 'x'), 'b': ("q2", 'x'), 'c': ("q0", 'x')},
            "q1": {'a': ("q1", 'y'), 'b': ("q2", 'y'), 'c': ("q0", 'y')},
            "q2": {'a': ("q0", 'z'), 'b': ("q1", 'z'), 'c': ("q3", 'z')},
            "q3": {'a': ("q0", 'x'), 'b': ("q1", 'x'), 'c': ("q2", 'x')},
        },
        initial_state="q0",
    )


def abc_moore() -> MooreMachine:
    """
    Four-state Moore machine over {a, b, c} with outputs {x, y, z}.

    q0 and q3 share output x but differ on their successors.
    """
    return MooreMachine.from_transitions(
        Alphabet.characters('a', 'c'),
        {
            "q0": {'a': "q1", 'b': "q2", 'c': "q0"},
            "q1": {'a': "q1", 'b': "q2", 'c': "q0"},
            "q2": {'a': "q0", 'b': "q1", 'c': "q3"},
            "q3": {'a': "q0", 'b': "q1", 'c': "q2"},
        },
        initial_state="q0",
        state_outputs={"q0": 'x', "q1": 'y', "q2": 'z', "q3": 'x'},
    )


def mod_counter_mealy(n: int, inputs: Iterable = (0, 1),
                      output: Callable = None) -> MealyMachine:
    """
    Counter modulo ``n``: δ(q, i) = (q + i) mod n, λ(q, i) = q + i.

    Args:
        n: Number of states
        inputs: Integer input symbols
        output: Optional transform applied to every output
    """
    if n < 1:
        raise MalformedConfiguration(f"counter needs at least one state, got n={n}")
    alphabet = inputs if isinstance(inputs, Alphabet) else Alphabet(inputs)
    output = output or (lambda value: value)

    mealy = MealyMachine(alphabet)
    for _ in range(n):
        mealy.add_state()
    for state in mealy.states:
        for symbol in alphabet:
            mealy.set_transition(state, symbol, (state + symbol) % n, output(state + symbol))
    mealy.set_initial(0)
    return mealy


class ParitySUL(SUL):
    """Reactive system answering whether each integer input is even."""

    def __init__(self):
        self.is_even = False

    def pre(self):
        self.is_even = False

    def post(self):
        self.is_even = False

    def step(self, symbol: int) -> bool:
        self.is_even = symbol % 2 == 0
        return self.is_even


def abstract_counter_oracle(n: int = 4, concrete_range: int = 1000) -> MembershipOracle:
    """
    Integer counter queried through string inputs and outputs.

    The concrete counter accepts integers 1..``concrete_range``; the
    learner sees the decimal strings of its inputs and outputs.
    """
    concrete = mod_counter_mealy(n, range(1, concrete_range + 1))
    return MappedOracle(SimulatorOracle(concrete), map_input=int, map_output=str)


def abstract_counter_mealy(n: int = 4) -> MealyMachine:
    """Reference model of ``abstract_counter_oracle`` over inputs "1", "2", "3"."""
    model = MealyMachine(Alphabet(["1", "2", "3"]))
    for _ in range(n):
        model.add_state()
    for state in model.states:
        for symbol in model.alphabet:
            value = int(symbol)
            model.set_transition(state, symbol, (state + value) % n, str(state + value))
    model.set_initial(0)
    return model


def parity_oracle() -> MembershipOracle:
    """``ParitySUL`` queried through string inputs and "even"/"odd" outputs."""
    return MappedOracle(
        SULOracle(ParitySUL()),
        map_input=int,
        map_output=lambda even: "even" if even else "odd",
    )


def parity_mealy() -> MealyMachine:
    """Reference model of ``parity_oracle``: one state over inputs "1".."4"."""
    alphabet = Alphabet(["1", "2", "3", "4"])
    return MealyMachine.from_transitions(
        alphabet,
        {"q0": {s: ("q0", "even" if int(s) % 2 == 0 else "odd") for s in alphabet}},
        initial_state="q0",
    )


@dataclass
class Target:
    """A named system under learning with its reference model."""

    name: str
    description: str
    semantics: Semantics
    model: DeterministicAutomaton
    oracle_factory: Optional[Callable[[], MembershipOracle]] = None

    @property
    def alphabet(self) -> Alphabet:
        return self.model.alphabet

    def membership_oracle(self) -> MembershipOracle:
        """
        Fresh membership oracle for the target.

        Moore models answer through their Mealy encoding.
        """
        if self.oracle_factory is not None:
            return self.oracle_factory()
        model = self.model
        if isinstance(model, MooreMachine):
            model = moore_to_mealy(model)
        return SimulatorOracle(model)

    def make_teacher(self, **kwargs) -> Teacher:
        return Teacher(self.membership_oracle(), self.alphabet, **kwargs)


# Dictionary of all example targets
TARGETS: Dict[str, Target] = {
    target.name: target for target in [
        Target("angluin", "Angluin's DFA: even a's and even b's",
               Semantics.DFA, angluin_dfa()),
        Target("even_a_ends_b", "even number of a's, ending in b",
               Semantics.DFA, even_a_ends_with_b_dfa()),
        Target("mealy_abc", "4-state Mealy machine over {a, b, c}",
               Semantics.MEALY, abc_mealy()),
        Target("moore_abc", "4-state Moore machine over {a, b, c}",
               Semantics.MOORE, abc_moore()),
        Target("counter_mod2", "Mealy counter modulo 2, output = state + input",
               Semantics.MEALY, mod_counter_mealy(2)),
        Target("abstract_counter", "integer counter modulo 4 behind a string mapper",
               Semantics.MEALY, abstract_counter_mealy(4), abstract_counter_oracle),
        Target("parity", "integer parity system behind a string mapper",
               Semantics.MEALY, parity_mealy(), parity_oracle),
    ]
}


def get_target(name: str) -> Target:
    """
    Get an example target by name.

    Raises:
        MalformedConfiguration: If no target has that name
    """
    if name not in TARGETS:
        raise MalformedConfiguration(
            f"Unknown target: {name}. Available targets: {list(TARGETS)}"
        )
    return TARGETS[name]

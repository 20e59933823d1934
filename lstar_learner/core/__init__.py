"""Core components for L* algorithm."""

from .word import Alphabet, Word
from .errors import InvariantViolation, LStarError, MalformedConfiguration, OracleFailure
from .output_domain import ACCEPTOR, TRANSDUCER, OutputDomain
from .automaton import DeterministicAutomaton
from .dfa import DFA
from .mealy import MealyMachine
from .moore import MooreMachine
from .conversion import mealy_to_moore, moore_to_mealy
from .observation_table import Inconsistency, ObservationTable, Row, TableSnapshot
from .hypothesis import Hypothesis, extract_dfa, extract_mealy, extract_moore
from .refinement import (
    Counterexample, CounterexampleStrategy, RefinementStrategy,
    find_boundary, find_distinguishing_suffix, refine_with_counterexample,
)
from .lstar import LEARNERS, DFALStar, LStarAlgorithm, MealyLStar, MooreLStar, run_lstar

__all__ = [
    "Alphabet", "Word",
    "LStarError", "OracleFailure", "InvariantViolation", "MalformedConfiguration",
    "OutputDomain", "ACCEPTOR", "TRANSDUCER",
    "DeterministicAutomaton", "DFA", "MealyMachine", "MooreMachine",
    "moore_to_mealy", "mealy_to_moore",
    "ObservationTable", "Row", "Inconsistency", "TableSnapshot",
    "Hypothesis", "extract_dfa", "extract_mealy", "extract_moore",
    "Counterexample", "CounterexampleStrategy", "RefinementStrategy",
    "find_boundary", "find_distinguishing_suffix", "refine_with_counterexample",
    "LStarAlgorithm", "DFALStar", "MealyLStar", "MooreLStar", "LEARNERS", "run_lstar",
]

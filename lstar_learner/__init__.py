"""
L* Active Automata Learning

Observation-table L* for DFA, Mealy and Moore machines with Rivest–Schapire
counterexample processing, pluggable equivalence oracles and a benchmark
harness over example targets.
"""

from .core.lstar import LEARNERS, DFALStar, LStarAlgorithm, MealyLStar, MooreLStar, run_lstar
from .core.word import Alphabet, Word
from .teacher.teacher import Teacher

__version__ = "0.1.0"
__all__ = [
    "LStarAlgorithm", "DFALStar", "MealyLStar", "MooreLStar", "LEARNERS", "run_lstar",
    "Teacher", "Alphabet", "Word",
]

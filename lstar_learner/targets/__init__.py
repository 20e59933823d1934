"""Example systems under learning."""

from .examples import (
    TARGETS, ParitySUL, Target, abc_mealy, abc_moore, angluin_dfa,
    even_a_ends_with_b_dfa, get_target, mod_counter_mealy,
)

__all__ = [
    "TARGETS", "Target", "get_target", "ParitySUL",
    "angluin_dfa", "even_a_ends_with_b_dfa", "abc_mealy", "abc_moore", "mod_counter_mealy",
]

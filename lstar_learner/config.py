"""
Configuration for L* learning runs.

This module provides plain dataclass configurations for the learner and the
equivalence oracle, plus named presets used by the benchmark runner and CLI.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .core.errors import MalformedConfiguration
from .core.refinement import CounterexampleStrategy


class Semantics(Enum):
    """Kind of automaton to learn."""
    DFA = "dfa"
    MEALY = "mealy"
    MOORE = "moore"


class OracleType(Enum):
    """Available equivalence oracle types."""
    W_METHOD = "w_method"
    BFS = "bfs"
    RANDOM_WP = "random_wp"


def _enum(enum_cls, value, what: str):
    try:
        return enum_cls(value)
    except ValueError as e:
        choices = [m.value for m in enum_cls]
        raise MalformedConfiguration(f"unknown {what}: {value!r} (choose from {choices})") from e


@dataclass
class OracleConfig:
    """Configuration for a specific equivalence oracle."""

    oracle_type: OracleType = OracleType.W_METHOD

    # W-method oracle parameters
    exploration_depth: int = 4
    max_target_states: Optional[int] = None  # Overrides exploration_depth when set

    # BFS oracle parameters
    max_depth: int = 8
    breadth_limit: int = 10000  # Max words per level

    # Random W_p oracle parameters
    min_length: int = 3        # Minimum infix length
    expected_length: int = 11  # Expected infix length (geometric distribution)
    num_tests: int = 10000     # Number of random tests per equivalence query
    max_total_length: int = 50  # Maximum total word length
    seed: int = 0

    def __post_init__(self):
        self.oracle_type = _enum(OracleType, self.oracle_type, "oracle type")

    def validate(self):
        """
        Check parameter ranges for the selected oracle.

        Raises:
            MalformedConfiguration: On out-of-range parameters
        """
        if self.oracle_type == OracleType.W_METHOD:
            if self.exploration_depth < 0:
                raise MalformedConfiguration("exploration_depth must be non-negative")
            if self.max_target_states is not None and self.max_target_states < 1:
                raise MalformedConfiguration("max_target_states must be positive")
        elif self.oracle_type == OracleType.BFS:
            if self.max_depth < 0 or self.breadth_limit < 1:
                raise MalformedConfiguration("BFS needs max_depth >= 0 and breadth_limit >= 1")
        elif self.oracle_type == OracleType.RANDOM_WP:
            if not 0 <= self.min_length <= self.expected_length:
                raise MalformedConfiguration("need 0 <= min_length <= expected_length")
            if self.num_tests < 1 or self.max_total_length < 0:
                raise MalformedConfiguration("num_tests must be positive")
        return self

    def oracle_params(self) -> Dict[str, Any]:
        """Keyword parameters for the teacher's oracle factory."""
        if self.oracle_type == OracleType.W_METHOD:
            return {
                'max_depth': self.exploration_depth,
                'max_target_states': self.max_target_states,
            }
        if self.oracle_type == OracleType.BFS:
            return {
                'max_depth': self.max_depth,
                'breadth_limit': self.breadth_limit,
            }
        return {
            'min_length': self.min_length,
            'expected_length': self.expected_length,
            'num_tests': self.num_tests,
            'max_total_length': self.max_total_length,
            'seed': self.seed,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        result = {'oracle_type': self.oracle_type.value}
        result.update(self.oracle_params())
        if self.oracle_type == OracleType.W_METHOD:
            result['exploration_depth'] = result.pop('max_depth')
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OracleConfig":
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise MalformedConfiguration(f"unknown oracle settings: {sorted(unknown)}")
        return cls(**data)


@dataclass
class LearnerConfig:
    """Configuration for one learning run."""

    semantics: Semantics = Semantics.DFA
    counterexample_strategy: CounterexampleStrategy = CounterexampleStrategy.RIVEST_SCHAPIRE
    use_cache: bool = False
    verbose: bool = True
    oracle: OracleConfig = field(default_factory=OracleConfig)

    def __post_init__(self):
        self.semantics = _enum(Semantics, self.semantics, "semantics")
        self.counterexample_strategy = _enum(
            CounterexampleStrategy, self.counterexample_strategy, "counterexample strategy"
        )
        if isinstance(self.oracle, dict):
            self.oracle = OracleConfig.from_dict(self.oracle)

    def validate(self):
        if not isinstance(self.oracle, OracleConfig):
            raise MalformedConfiguration(f"oracle must be an OracleConfig, got {self.oracle!r}")
        self.oracle.validate()
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            'semantics': self.semantics.value,
            'counterexample_strategy': self.counterexample_strategy.value,
            'use_cache': self.use_cache,
            'verbose': self.verbose,
            'oracle': self.oracle.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LearnerConfig":
        data = dict(data)
        oracle = data.pop('oracle', {})
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise MalformedConfiguration(f"unknown learner settings: {sorted(unknown)}")
        return cls(oracle=OracleConfig.from_dict(oracle), **data)


def get_default_configs() -> Dict[str, OracleConfig]:
    """Get default configurations for each oracle type."""
    return {
        "w_method": OracleConfig(
            oracle_type=OracleType.W_METHOD,
            exploration_depth=4,
        ),
        "bfs": OracleConfig(
            oracle_type=OracleType.BFS,
            max_depth=8,
            breadth_limit=10000,
        ),
        "random_wp": OracleConfig(
            oracle_type=OracleType.RANDOM_WP,
            min_length=3,
            expected_length=5,
            num_tests=10000,
            max_total_length=20,
            seed=0,
        ),
    }

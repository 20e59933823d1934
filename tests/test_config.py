"""
Tests for learner and oracle configuration
"""

import pytest

from lstar_learner.config import (
    LearnerConfig, OracleConfig, OracleType, Semantics, get_default_configs,
)
from lstar_learner.core.errors import MalformedConfiguration
from lstar_learner.core.refinement import CounterexampleStrategy


class TestOracleConfig:
    def test_defaults(self):
        config = OracleConfig()
        assert config.oracle_type is OracleType.W_METHOD
        assert config.exploration_depth == 4
        assert config.max_target_states is None

    def test_oracle_type_from_string(self):
        assert OracleConfig(oracle_type="bfs").oracle_type is OracleType.BFS

    def test_unknown_oracle_type(self):
        with pytest.raises(MalformedConfiguration):
            OracleConfig(oracle_type="exhaustive")

    def test_malformed_configuration_is_value_error(self):
        with pytest.raises(ValueError):
            OracleConfig(oracle_type="exhaustive")

    def test_validate_ranges(self):
        assert OracleConfig().validate().exploration_depth == 4
        with pytest.raises(MalformedConfiguration):
            OracleConfig(exploration_depth=-1).validate()
        with pytest.raises(MalformedConfiguration):
            OracleConfig(max_target_states=0).validate()
        with pytest.raises(MalformedConfiguration):
            OracleConfig(oracle_type="bfs", breadth_limit=0).validate()
        with pytest.raises(MalformedConfiguration):
            OracleConfig(oracle_type="random_wp", min_length=4, expected_length=2).validate()
        with pytest.raises(MalformedConfiguration):
            OracleConfig(oracle_type="random_wp", num_tests=0).validate()

    def test_settings_of_other_oracles_are_not_checked(self):
        OracleConfig(oracle_type="bfs", exploration_depth=-1).validate()

    def test_oracle_params(self):
        assert OracleConfig(exploration_depth=2).oracle_params() == {
            'max_depth': 2, 'max_target_states': None,
        }
        assert OracleConfig(oracle_type="bfs", max_depth=5).oracle_params() == {
            'max_depth': 5, 'breadth_limit': 10000,
        }
        params = OracleConfig(oracle_type="random_wp", seed=9).oracle_params()
        assert params['seed'] == 9
        assert set(params) == {
            'min_length', 'expected_length', 'num_tests', 'max_total_length', 'seed',
        }

    def test_to_dict(self):
        assert OracleConfig(exploration_depth=3).to_dict() == {
            'oracle_type': 'w_method', 'exploration_depth': 3, 'max_target_states': None,
        }

    def test_dict_round_trip(self):
        for config in get_default_configs().values():
            assert OracleConfig.from_dict(config.to_dict()) == config

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(MalformedConfiguration):
            OracleConfig.from_dict({'oracle_type': 'bfs', 'depth': 3})


class TestLearnerConfig:
    def test_defaults(self):
        config = LearnerConfig()
        assert config.semantics is Semantics.DFA
        assert config.counterexample_strategy is CounterexampleStrategy.RIVEST_SCHAPIRE
        assert not config.use_cache
        assert isinstance(config.oracle, OracleConfig)

    def test_coercion(self):
        config = LearnerConfig(semantics="moore", counterexample_strategy="all_prefixes",
                               oracle={'oracle_type': 'bfs', 'max_depth': 3})
        assert config.semantics is Semantics.MOORE
        assert config.counterexample_strategy is CounterexampleStrategy.ALL_PREFIXES
        assert config.oracle.oracle_type is OracleType.BFS
        assert config.oracle.max_depth == 3

    def test_unknown_semantics(self):
        with pytest.raises(MalformedConfiguration):
            LearnerConfig(semantics="pushdown")

    def test_unknown_strategy(self):
        with pytest.raises(MalformedConfiguration):
            LearnerConfig(counterexample_strategy="binary_search")

    def test_validate_checks_oracle(self):
        with pytest.raises(MalformedConfiguration):
            LearnerConfig(oracle=OracleConfig(exploration_depth=-2)).validate()
        with pytest.raises(MalformedConfiguration):
            LearnerConfig(oracle=5).validate()

    def test_dict_round_trip(self):
        config = LearnerConfig(semantics="mealy", use_cache=True, verbose=False,
                               oracle=OracleConfig(oracle_type="random_wp", seed=4))
        data = config.to_dict()
        assert data['semantics'] == 'mealy'
        assert data['oracle']['seed'] == 4
        assert LearnerConfig.from_dict(data) == config

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(MalformedConfiguration):
            LearnerConfig.from_dict({'semantics': 'dfa', 'alphabet': 'ab'})


def test_default_configs():
    configs = get_default_configs()
    assert list(configs) == ["w_method", "bfs", "random_wp"]
    assert configs["w_method"].exploration_depth == 4
    assert configs["bfs"].max_depth == 8
    assert configs["random_wp"].seed == 0
    for config in configs.values():
        config.validate()


def test_default_configs_are_fresh_objects():
    get_default_configs()["w_method"].exploration_depth = 9
    assert get_default_configs()["w_method"].exploration_depth == 4

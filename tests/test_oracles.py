"""
Tests for membership oracles, equivalence oracles and the teacher
"""

import pytest

from lstar_learner.core.dfa import DFA
from lstar_learner.core.errors import MalformedConfiguration, OracleFailure
from lstar_learner.core.mealy import MealyMachine
from lstar_learner.core.refinement import Counterexample
from lstar_learner.core.word import Alphabet, Word
from lstar_learner.counterexample import BFSOracle, RandomWpOracle, WMethodOracle
from lstar_learner.targets.examples import (
    ParitySUL, abc_mealy, abc_moore, angluin_dfa, mod_counter_mealy,
)
from lstar_learner.teacher.membership import (
    CachedOracle, CounterOracle, FunctionOracle, MappedOracle, SimulatorOracle, SULOracle,
)
from lstar_learner.teacher.teacher import Teacher


def w(text):
    return Word.from_string(text)


def accept_all(alphabet):
    dfa = DFA(alphabet)
    q = dfa.add_state(accepting=True)
    for symbol in alphabet:
        dfa.set_transition(q, symbol, q)
    dfa.set_initial(q)
    return dfa


class TestMembershipOracles:
    def test_simulator(self):
        oracle = SimulatorOracle(angluin_dfa())
        assert oracle.answer(w("aa")) is True
        assert oracle.classify_word(w("a")) is False
        assert oracle.membership_queries([w(""), w("b")]) == [True, False]

    def test_function_oracle(self):
        oracle = FunctionOracle(lambda word: len(word) > 1, name="long")
        assert oracle.answer(w("ab"))
        assert str(oracle) == "FunctionOracle(long)"

    def test_sul_oracle_resets_between_queries(self):
        sul = ParitySUL()
        oracle = SULOracle(sul)
        assert oracle.answer(Word((2, 3))) == Word((True, False))
        assert not sul.is_even
        assert oracle.answer(Word.epsilon()) == Word.epsilon()

    def test_mapped_oracle(self):
        concrete = SimulatorOracle(mod_counter_mealy(3, range(1, 10)))
        oracle = MappedOracle(concrete, map_input=int, map_output=str)
        assert oracle.answer(Word(("2", "2"))) == Word(("2", "4"))

    def test_counter_oracle(self):
        oracle = CounterOracle(SimulatorOracle(angluin_dfa()), "MQ")
        oracle.answer(w("ab"))
        oracle.answer(w("aba"))
        assert oracle.query_count == 2
        assert oracle.symbol_count == 5
        assert oracle.get_summary() == "MQ [#queries: 2, #symbols: 5]"
        oracle.reset_statistics()
        assert oracle.get_statistics()['total_queries'] == 0

    def test_cached_oracle(self):
        inner = CounterOracle(SimulatorOracle(angluin_dfa()))
        cache = CachedOracle(inner)
        for _ in range(3):
            assert cache.answer(w("bb")) is True
        assert inner.query_count == 1
        stats = cache.get_statistics()
        assert stats['total_queries'] == 3
        assert stats['cache_hits'] == 2
        assert stats['cache_hit_rate'] == pytest.approx(2 / 3)

    def test_cached_oracle_lru_eviction(self):
        inner = CounterOracle(SimulatorOracle(angluin_dfa()))
        cache = CachedOracle(inner, cache_size=2)
        cache.answer(w("a"))
        cache.answer(w("b"))
        cache.answer(w("a"))
        cache.answer(w("aa"))  # evicts b
        assert w("b") not in cache.cache
        assert w("a") in cache.cache
        cache.clear_cache()
        assert cache.get_statistics()['cache_size'] == 0


class TestWMethodOracle:
    def test_finds_counterexample(self):
        target = angluin_dfa()
        oracle = WMethodOracle(SimulatorOracle(target), target.alphabet, verbose=False)
        ce = oracle.find_counterexample(accept_all(target.alphabet), 1)

        assert isinstance(ce, Counterexample)
        assert ce.output is False
        assert target.compute_output(ce.word) is False
        # shortest words are tested first
        assert ce.word == w("a")

    def test_equivalent_hypothesis(self):
        target = angluin_dfa()
        oracle = WMethodOracle(SimulatorOracle(target), target.alphabet,
                               max_depth=2, verbose=False)
        assert oracle.find_counterexample(target.minimize(), 1) is None
        stats = oracle.get_statistics()
        assert stats['total_queries'] == 1
        assert stats['counterexamples_found'] == 0
        assert stats['total_test_words'] > 0

    def test_generate_test_set(self):
        alphabet = Alphabet(['a', 'b'])
        oracle = WMethodOracle(FunctionOracle(lambda word: True), alphabet, verbose=False)
        tests = oracle.generate_test_set([Word.epsilon()], [w("a")], 1)
        assert tests == [Word.epsilon(), w("a"), w("b"), w("aa"), w("ba")]

    def test_depth_from_target_bound(self):
        alphabet = Alphabet(['a', 'b'])
        oracle = WMethodOracle(FunctionOracle(lambda word: True), alphabet,
                               max_target_states=5, verbose=False)
        assert oracle.test_depth(accept_all(alphabet)) == 5
        assert oracle.test_depth(angluin_dfa()) == 2

    def test_negative_depth(self):
        with pytest.raises(MalformedConfiguration):
            WMethodOracle(FunctionOracle(lambda word: True), ['a'], max_depth=-1)

    def test_mealy_counterexample_carries_output_word(self):
        target = abc_mealy()
        oracle = WMethodOracle(SimulatorOracle(target), target.alphabet, verbose=False)
        ce = oracle.find_counterexample(constant_x_mealy(), 1)
        assert ce is not None
        assert ce.output == target.compute_output(ce.word)
        assert len(ce.output) == len(ce.word)


def constant_x_mealy():
    """One-state Mealy machine over {a, b, c} answering x everywhere."""
    alphabet = Alphabet.characters('a', 'c')
    return MealyMachine.from_transitions(
        alphabet, {"q": {s: ("q", 'x') for s in alphabet}}, initial_state="q"
    )


class TestBFSOracle:
    def test_finds_shortest_counterexample(self):
        target = angluin_dfa()
        oracle = BFSOracle(SimulatorOracle(target), target.alphabet, verbose=False)
        ce = oracle.find_counterexample(accept_all(target.alphabet), 1)
        assert ce.word == w("a")

    def test_breadth_limit(self):
        target = angluin_dfa()
        oracle = BFSOracle(SimulatorOracle(target), target.alphabet,
                           max_depth=3, breadth_limit=3, verbose=False)
        assert oracle.find_counterexample(target, 1) is None
        # ε, then at most 3 words on each of 3 levels
        assert oracle.total_test_words == 1 + 2 + 3 + 3
        assert oracle.get_statistics()['max_depth_reached'] == 3

    def test_breadth_limit_can_hide_counterexample(self):
        alphabet = Alphabet(['a', 'b'])
        target = FunctionOracle(lambda word: word != w("b"))

        full = BFSOracle(target, alphabet, max_depth=3, verbose=False)
        assert full.find_counterexample(accept_all(alphabet), 1).word == w("b")

        # only the first word of every level is kept: a, aa, aaa
        truncated = BFSOracle(target, alphabet, max_depth=3, breadth_limit=1, verbose=False)
        assert truncated.find_counterexample(accept_all(alphabet), 1) is None
        assert truncated.total_test_words == 4

    def test_invalid_bounds(self):
        with pytest.raises(MalformedConfiguration):
            BFSOracle(FunctionOracle(lambda word: True), ['a'], breadth_limit=0)


class TestRandomWpOracle:
    def test_finds_counterexample(self):
        target = angluin_dfa()
        oracle = RandomWpOracle(SimulatorOracle(target), target.alphabet,
                                num_tests=500, seed=1, verbose=False)
        ce = oracle.find_counterexample(accept_all(target.alphabet), 1)
        assert ce is not None
        assert target.compute_output(ce.word) is False

    def test_same_seed_same_test_words(self):
        target = abc_mealy()

        def first_counterexample(seed):
            oracle = RandomWpOracle(SimulatorOracle(target), target.alphabet,
                                    num_tests=200, seed=seed, verbose=False)
            return oracle.find_counterexample(constant_x_mealy(), 1)

        assert first_counterexample(7).word == first_counterexample(7).word

    def test_respects_max_total_length(self):
        target = angluin_dfa()
        oracle = RandomWpOracle(SimulatorOracle(target), target.alphabet,
                                min_length=0, expected_length=4, num_tests=300,
                                max_total_length=3, verbose=False)
        assert oracle.find_counterexample(target, 1) is None
        stats = oracle.get_statistics()
        assert stats['skipped_tests'] + stats['total_test_words'] == 300

    def test_invalid_lengths(self):
        with pytest.raises(MalformedConfiguration):
            RandomWpOracle(FunctionOracle(lambda word: True), ['a'],
                           min_length=5, expected_length=2)
        with pytest.raises(MalformedConfiguration):
            RandomWpOracle(FunctionOracle(lambda word: True), ['a'], num_tests=0)


class TestTeacher:
    def test_separate_query_counters(self):
        teacher = Teacher.for_target(angluin_dfa(), verbose=False)
        teacher.classify_word(w("ab"))
        teacher.membership_queries([w("a"), w("b")])
        teacher.equivalence_query(accept_all(Alphabet(['a', 'b'])))

        stats = teacher.get_statistics()
        assert stats['membership_queries'] == 3
        assert stats['membership_symbols'] == 4
        assert stats['eq_membership_queries'] >= 1
        assert stats['equivalence_queries'] == 1
        assert stats['counterexamples'] == 1
        assert stats['avg_ce_length'] == 1.0

    def test_moore_target_answers_with_encoding(self):
        teacher = Teacher.for_target(abc_moore(), verbose=False)
        assert teacher.classify_word(w("abc")) == Word(('x', 'y', 'z'))

    @pytest.mark.parametrize("oracle_type", ["w_method", "bfs", "random_wp"])
    def test_oracle_factory(self, oracle_type):
        teacher = Teacher.for_target(angluin_dfa(), oracle_type=oracle_type,
                                     oracle_params={'num_tests': 50}, verbose=False)
        assert teacher.equivalence_query(angluin_dfa()) is None

    def test_unknown_oracle_type(self):
        with pytest.raises(MalformedConfiguration):
            Teacher.for_target(angluin_dfa(), oracle_type="oracle_of_delphi", verbose=False)

    def test_cache(self):
        teacher = Teacher.for_target(angluin_dfa(), use_cache=True, verbose=False)
        teacher.classify_word(w("ab"))
        teacher.classify_word(w("ab"))
        assert teacher.get_statistics()['cache']['cache_hits'] == 1

    def test_oracle_errors_become_oracle_failures(self):
        def flaky(word):
            if len(word) > 1:
                raise ConnectionError("system under learning went away")
            return True

        teacher = Teacher(FunctionOracle(flaky), ['a', 'b'], verbose=False)
        with pytest.raises(OracleFailure):
            teacher.equivalence_query(accept_all(Alphabet(['a', 'b'])))

    def test_print_summary(self, capsys):
        teacher = Teacher.for_target(angluin_dfa(), verbose=False)
        teacher.classify_word(w("ab"))
        teacher.print_summary()
        out = capsys.readouterr().out
        assert "Membership Queries [#queries: 1, #symbols: 2]" in out
        assert "Membership Queries during EQ testing [#queries: 0, #symbols: 0]" in out

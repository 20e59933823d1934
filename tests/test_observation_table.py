"""
Tests for the observation table and hypothesis extraction
"""

import numpy as np
import pytest

from lstar_learner.core.errors import InvariantViolation, MalformedConfiguration, OracleFailure
from lstar_learner.core.hypothesis import extract_dfa, extract_mealy, extract_moore
from lstar_learner.core.observation_table import ObservationTable
from lstar_learner.core.output_domain import ACCEPTOR, TRANSDUCER
from lstar_learner.core.word import Alphabet, Word
from lstar_learner.targets.examples import abc_mealy, abc_moore, angluin_dfa
from lstar_learner.core.conversion import moore_to_mealy
from lstar_learner.teacher.membership import CounterOracle, FunctionOracle, SimulatorOracle

EPS = Word.epsilon()


def w(text):
    return Word.from_string(text)


def finite_language_oracle(words):
    accepted = {w(text) for text in words}
    return FunctionOracle(lambda word: word in accepted, "finite")


@pytest.fixture
def ab():
    return Alphabet(['a', 'b'])


class TestInitialization:
    def test_rows_and_columns(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))

        assert table.is_initialized
        assert table.size() == (1, 2, 1)
        assert [r.label for r in table.short_prefix_rows] == [EPS]
        assert [r.label for r in table.long_prefix_rows] == [w("a"), w("b")]
        assert table.suffixes == [EPS]
        assert table.query_count == 3

    def test_cells_filled_from_oracle(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS, w("a")], SimulatorOracle(angluin_dfa()))

        assert table.row_contents(table.row(EPS)) == (True, False)
        assert table.row_contents(table.row(w("a"))) == (False, True)
        assert table.cell_contents(table.row(w("b")), 0) is False

    def test_requires_empty_prefix(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        with pytest.raises(MalformedConfiguration):
            table.initialize([w("a")], [EPS], SimulatorOracle(angluin_dfa()))

    def test_requires_seeds(self, ab):
        with pytest.raises(MalformedConfiguration):
            ObservationTable(ab).initialize([EPS], [], SimulatorOracle(angluin_dfa()))
        with pytest.raises(MalformedConfiguration):
            ObservationTable(ab).initialize([], [EPS], SimulatorOracle(angluin_dfa()))

    def test_initialize_twice(self, ab):
        table = ObservationTable(ab)
        table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))
        with pytest.raises(InvariantViolation):
            table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))

    def test_mutation_before_initialize(self, ab):
        with pytest.raises(InvariantViolation):
            ObservationTable(ab).add_suffixes([w("a")], SimulatorOracle(angluin_dfa()))

    def test_failing_oracle_leaves_table_empty(self, ab):
        def broken(word):
            raise RuntimeError("connection lost")

        table = ObservationTable(ab, ACCEPTOR)
        with pytest.raises(OracleFailure):
            table.initialize([EPS], [EPS], FunctionOracle(broken))
        assert not table.is_initialized
        assert table.number_of_rows() == 0

    def test_none_answer_is_oracle_failure(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        with pytest.raises(OracleFailure):
            table.initialize([EPS], [EPS], FunctionOracle(lambda word: None))

    def test_output_word_is_not_an_acceptor_answer(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        with pytest.raises(OracleFailure):
            table.initialize([EPS], [EPS], FunctionOracle(lambda word: Word(tuple(word))))
        assert table.number_of_rows() == 0

    def test_truthy_answer_is_not_an_acceptor_answer(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        with pytest.raises(OracleFailure):
            table.initialize([EPS], [EPS], FunctionOracle(lambda word: len(word)))

    def test_numpy_bool_answer(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS], FunctionOracle(lambda word: np.bool_(len(word) == 1)))
        assert table.row_contents(table.row(w("a"))) == (True,)
        assert type(table.cell_contents(table.row(EPS), 0)) is bool


class TestContentIds:
    def test_equal_rows_share_content_id(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))
        a_row, b_row = table.row(w("a")), table.row(w("b"))
        assert a_row.content_id == b_row.content_id
        assert a_row.content_id != table.row(EPS).content_id
        assert table.number_of_distinct_rows() == 2

    def test_new_column_splits_rows(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        oracle = SimulatorOracle(angluin_dfa())
        table.initialize([EPS], [EPS], oracle)

        added = table.add_suffixes([w("a"), EPS], oracle)
        assert added == [w("a")]
        assert table.row(w("a")).content_id != table.row(w("b")).content_id

    def test_existing_suffixes_are_ignored(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        oracle = CounterOracle(SimulatorOracle(angluin_dfa()))
        table.initialize([EPS], [EPS], oracle)
        before = oracle.query_count
        assert table.add_suffixes([EPS], oracle) == []
        assert oracle.query_count == before


class TestClosedness:
    def test_unclosed_row_found_in_order(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))

        assert not table.is_closed()
        assert table.find_unclosed_row().label == w("a")

    def test_promotion_closes_table(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        oracle = SimulatorOracle(angluin_dfa())
        table.initialize([EPS], [EPS], oracle)

        promoted = table.add_short_prefixes([w("a")], oracle)
        assert [r.label for r in promoted] == [w("a")]
        assert table.row(w("a")).short
        assert table.row(w("aa")) is not None
        assert table.is_closed()

    def test_promoting_short_row_is_noop(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        oracle = SimulatorOracle(angluin_dfa())
        table.initialize([EPS], [EPS], oracle)
        assert table.add_short_prefixes([EPS], oracle) == []

    def test_new_prefix_gets_row_and_successors(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        oracle = SimulatorOracle(angluin_dfa())
        table.initialize([EPS], [EPS], oracle)

        table.add_short_prefixes([w("ab")], oracle)
        assert table.row(w("ab")).short
        assert table.row(w("aba")) is not None
        assert table.row(w("abb")) is not None

    def test_long_row_has_no_successors(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))
        with pytest.raises(InvariantViolation):
            table.row(w("a")).successor(0)


class TestConsistency:
    def test_inconsistency_and_distinguishing_suffix(self, ab):
        # Accepts exactly ε, bb and a
        oracle = finite_language_oracle(["", "bb", "a"])
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS, w("bb")], [EPS, w("b")], oracle)

        assert table.row_contents(table.row(EPS)) == (True, False)
        assert table.row_contents(table.row(w("bb"))) == (True, False)

        inconsistency = table.find_inconsistency()
        assert inconsistency is not None
        assert inconsistency.first_row.label == EPS
        assert inconsistency.second_row.label == w("bb")
        assert inconsistency.symbol == 'a'
        assert not table.is_consistent()

    def test_consistent_table(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))
        assert table.is_consistent()
        assert table.find_inconsistency() is None


class TestTransducerTable:
    def test_cells_hold_suffix_outputs(self):
        mealy = abc_mealy()
        table = ObservationTable(mealy.alphabet, TRANSDUCER)
        table.initialize([EPS], mealy.alphabet.singletons(), SimulatorOracle(mealy))

        # q1 answers y on every input
        assert table.row_contents(table.row(w("a"))) == (Word(('y',)),) * 3
        assert table.row_contents(table.row(EPS)) == (Word(('x',)),) * 3

    def test_wrong_output_length(self):
        table = ObservationTable(Alphabet(['a']), TRANSDUCER)
        oracle = FunctionOracle(lambda word: Word(('x',)))
        with pytest.raises(OracleFailure):
            table.initialize([EPS], [w("a")], oracle)

    def test_non_word_answer(self):
        table = ObservationTable(Alphabet(['a']), TRANSDUCER)
        with pytest.raises(OracleFailure):
            table.initialize([EPS], [w("a")], FunctionOracle(lambda word: 3))

    def test_sequence_answer_converted(self):
        table = ObservationTable(Alphabet(['a']), TRANSDUCER)
        table.initialize([EPS], [w("a")], FunctionOracle(lambda word: ['o'] * len(word)))
        assert table.cell_contents(table.row(EPS), 0) == Word(('o',))


class TestReporting:
    def test_statistics(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))
        stats = table.get_statistics()
        assert stats['short_rows'] == 1
        assert stats['long_rows'] == 2
        assert stats['suffixes'] == 1
        assert stats['cells'] == 3
        assert stats['total_queries'] == 3

    def test_snapshot_is_detached(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        oracle = SimulatorOracle(angluin_dfa())
        table.initialize([EPS], [EPS], oracle)
        snapshot = table.snapshot()
        table.add_suffixes([w("a")], oracle)

        assert snapshot.suffixes == (EPS,)
        assert snapshot.num_rows == 3
        assert snapshot.short_rows == ((EPS, (True,)),)

    def test_str_rendering(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))
        text = str(table)
        assert "|S| = 1" in text
        assert "ε" in text


class TestExtraction:
    def _closed_table(self, model, domain, suffixes):
        oracle = SimulatorOracle(model)
        table = ObservationTable(model.alphabet, domain)
        table.initialize([EPS], suffixes, oracle)
        while not table.is_closed():
            table.add_short_prefixes([table.find_unclosed_row().label], oracle)
        return table

    def test_extract_dfa(self, ab):
        dfa = angluin_dfa()
        table = self._closed_table(dfa, ACCEPTOR, [EPS, w("a"), w("b")])
        hypothesis = extract_dfa(table)

        assert hypothesis.num_states == 4
        assert hypothesis.access_word(0) == EPS
        assert hypothesis.automaton.q0 == 0
        assert hypothesis.automaton.is_total()
        for word in ab.words(5):
            assert hypothesis.automaton.compute_output(word) == dfa.compute_output(word)

    def test_access_word_after(self, ab):
        table = self._closed_table(angluin_dfa(), ACCEPTOR, [EPS, w("a"), w("b")])
        hypothesis = extract_dfa(table)
        assert hypothesis.access_word_after(w("aa")) == EPS

    def test_extract_dfa_needs_epsilon_column(self, ab):
        table = self._closed_table(angluin_dfa(), ACCEPTOR, [w("a")])
        with pytest.raises(InvariantViolation):
            extract_dfa(table)

    def test_extract_from_unclosed_table(self, ab):
        table = ObservationTable(ab, ACCEPTOR)
        table.initialize([EPS], [EPS], SimulatorOracle(angluin_dfa()))
        with pytest.raises(InvariantViolation):
            extract_dfa(table)

    def test_extract_mealy_uses_source_row_outputs(self):
        mealy = abc_mealy()
        table = self._closed_table(mealy, TRANSDUCER, mealy.alphabet.singletons())
        hypothesis = extract_mealy(table)
        automaton = hypothesis.automaton
        assert automaton.is_total()
        assert automaton.transition_output(automaton.q0, 'a') == 'x'
        assert automaton.compute_output(w("ab")) == Word(('x', 'y'))

    def test_extract_moore(self):
        moore = abc_moore()
        encoded = moore_to_mealy(moore)
        table = self._closed_table(encoded, TRANSDUCER, encoded.alphabet.singletons())
        hypothesis = extract_moore(table)
        assert hypothesis.automaton.is_total()
        assert hypothesis.automaton.state_output(hypothesis.automaton.q0) == 'x'
        assert hypothesis.automaton.compute_output(w("a")) == Word(('x', 'y'))

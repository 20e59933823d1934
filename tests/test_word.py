"""
Tests for words and alphabets
"""

import pytest

from lstar_learner.core.errors import MalformedConfiguration
from lstar_learner.core.word import Alphabet, Word


class TestWord:
    def test_epsilon(self):
        eps = Word.epsilon()
        assert len(eps) == 0
        assert eps.is_empty()
        assert eps == Word()
        assert str(eps) == "ε"

    def test_from_string(self):
        w = Word.from_string("abb")
        assert w.symbols == ('a', 'b', 'b')
        assert str(w) == "abb"
        assert w.length == 3

    def test_multi_character_symbols(self):
        w = Word.from_symbols("12", "3")
        assert str(w) == "12 3"

    def test_concat_and_identity(self):
        a = Word.from_string("ab")
        b = Word.from_string("ba")
        assert a.concat(b) == Word.from_string("abba")
        assert a + Word.epsilon() == a
        assert Word.epsilon().concat(a, b) == Word.from_string("abba")

    def test_prepend_append(self):
        w = Word.from_string("b")
        assert w.prepend('a') == Word.from_string("ab")
        assert w.append('a') == Word.from_string("ba")

    def test_prefixes_shortest_first(self):
        w = Word.from_string("abc")
        assert w.prefixes() == [
            Word.epsilon(), Word.from_string("a"), Word.from_string("ab"), w
        ]
        assert w.prefixes(include_full=False)[-1] == Word.from_string("ab")

    def test_suffixes_shortest_first(self):
        w = Word.from_string("abc")
        assert w.suffixes() == [
            Word.epsilon(), Word.from_string("c"), Word.from_string("bc"), w
        ]

    def test_prefix_out_of_range(self):
        with pytest.raises(ValueError):
            Word.from_string("ab").prefix(3)
        with pytest.raises(ValueError):
            Word.from_string("ab").suffix_of_length(-1)

    def test_first_last_symbol(self):
        w = Word.from_string("xyz")
        assert w.first_symbol == 'x'
        assert w.last_symbol == 'z'

    def test_empty_has_no_symbols(self):
        with pytest.raises(ValueError):
            Word.epsilon().first_symbol
        with pytest.raises(ValueError):
            Word.epsilon().last_symbol

    def test_slicing_returns_words(self):
        w = Word.from_string("abcd")
        assert w[1:3] == Word.from_string("bc")
        assert w[0] == 'a'

    def test_hashable_by_value(self):
        seen = {Word.from_string("ab"), Word(('a', 'b'))}
        assert len(seen) == 1

    def test_list_is_converted_to_tuple(self):
        assert Word(['a']) == Word.from_string("a")


class TestAlphabet:
    def test_characters(self):
        alphabet = Alphabet.characters('a', 'c')
        assert alphabet.symbols == ('a', 'b', 'c')
        assert len(alphabet) == 3
        assert 'b' in alphabet
        assert 'd' not in alphabet

    def test_index_lookup(self):
        alphabet = Alphabet(["x", "y"])
        assert alphabet.index("y") == 1
        assert alphabet.symbol(0) == "x"
        assert alphabet[1] == "y"

    def test_missing_symbol(self):
        with pytest.raises(ValueError):
            Alphabet(["x"]).index("z")

    def test_empty_alphabet_rejected(self):
        with pytest.raises(MalformedConfiguration):
            Alphabet([])

    def test_duplicate_symbol_rejected(self):
        with pytest.raises(MalformedConfiguration):
            Alphabet(['a', 'b', 'a'])

    def test_singletons(self):
        assert Alphabet(['a', 'b']).singletons() == [Word(('a',)), Word(('b',))]

    def test_words_enumeration(self):
        words = list(Alphabet(['a', 'b']).words(2))
        assert len(words) == 1 + 2 + 4
        assert words[0] == Word.epsilon()
        assert words[1:3] == [Word.from_string("a"), Word.from_string("b")]

    def test_sort_key_orders_by_length_then_index(self):
        alphabet = Alphabet(['b', 'a'])
        words = [Word.from_string("a"), Word.from_string("bb"), Word.from_string("b")]
        assert sorted(words, key=alphabet.sort_key) == [
            Word.from_string("b"), Word.from_string("a"), Word.from_string("bb")
        ]


def test_alphabet_equality():
    assert Alphabet(['a', 'b']) == Alphabet.characters('a', 'b')
    assert Alphabet(['a', 'b']) != Alphabet(['b', 'a'])

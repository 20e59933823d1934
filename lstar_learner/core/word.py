"""
Words and alphabets for active automata learning.

A word is an immutable finite sequence of symbols, compared and hashed by
value. An alphabet is the ordered, duplicate-free set of input symbols a
learning session runs over; symbols are addressed both by value and by index.
"""

from dataclasses import dataclass
from itertools import product
from typing import Dict, Hashable, Iterable, Iterator, List, Tuple, Union

from .errors import MalformedConfiguration

Symbol = Hashable

EPSILON_LABEL = "ε"


@dataclass(frozen=True, order=True)
class Word:
    """Finite sequence of symbols; the empty word is the identity for concat."""

    symbols: Tuple[Symbol, ...] = ()

    def __post_init__(self):
        if not isinstance(self.symbols, tuple):
            object.__setattr__(self, "symbols", tuple(self.symbols))

    @classmethod
    def epsilon(cls) -> "Word":
        return _EPSILON

    @classmethod
    def from_symbols(cls, *symbols: Symbol) -> "Word":
        return cls(tuple(symbols))

    @classmethod
    def from_string(cls, text: str) -> "Word":
        """Build a word with one symbol per character of ``text``."""
        return cls(tuple(text))

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols)

    def __getitem__(self, item: Union[int, slice]):
        if isinstance(item, slice):
            return Word(self.symbols[item])
        return self.symbols[item]

    def __add__(self, other: "Word") -> "Word":
        return self.concat(other)

    @property
    def length(self) -> int:
        return len(self.symbols)

    def is_empty(self) -> bool:
        return not self.symbols

    def concat(self, *others: "Word") -> "Word":
        symbols = self.symbols
        for other in others:
            symbols = symbols + other.symbols
        return Word(symbols)

    def prepend(self, symbol: Symbol) -> "Word":
        return Word((symbol,) + self.symbols)

    def append(self, symbol: Symbol) -> "Word":
        return Word(self.symbols + (symbol,))

    def prefix(self, length: int) -> "Word":
        """Return the first ``length`` symbols."""
        if length < 0 or length > len(self):
            raise ValueError(f"prefix length {length} out of range for {self}")
        return Word(self.symbols[:length])

    def suffix_of_length(self, length: int) -> "Word":
        """Return the last ``length`` symbols."""
        if length < 0 or length > len(self):
            raise ValueError(f"suffix length {length} out of range for {self}")
        return Word(self.symbols[len(self.symbols) - length:])

    def prefixes(self, include_full: bool = True) -> List["Word"]:
        """
        All prefixes, shortest first.

        The empty word is always included; ``include_full=False`` omits the
        word itself.
        """
        end = len(self) + 1 if include_full else len(self)
        return [Word(self.symbols[:i]) for i in range(end)]

    def suffixes(self, include_full: bool = True) -> List["Word"]:
        """All suffixes, shortest (the empty word) first."""
        end = len(self) + 1 if include_full else len(self)
        return [self.suffix_of_length(i) for i in range(end)]

    @property
    def first_symbol(self) -> Symbol:
        if not self.symbols:
            raise ValueError("the empty word has no first symbol")
        return self.symbols[0]

    @property
    def last_symbol(self) -> Symbol:
        if not self.symbols:
            raise ValueError("the empty word has no last symbol")
        return self.symbols[-1]

    def __str__(self) -> str:
        if not self.symbols:
            return EPSILON_LABEL
        if all(isinstance(s, str) and len(s) == 1 for s in self.symbols):
            return "".join(self.symbols)
        return " ".join(str(s) for s in self.symbols)

    def __repr__(self) -> str:
        return f"Word({str(self)!r})"


_EPSILON = Word(())


class Alphabet:
    """Ordered sequence of unique symbols with index lookup in both directions."""

    def __init__(self, symbols: Iterable[Symbol]):
        self._symbols = tuple(symbols)
        if not self._symbols:
            raise MalformedConfiguration("alphabet must contain at least one symbol")

        self._index: Dict[Symbol, int] = {}
        for i, symbol in enumerate(self._symbols):
            if symbol in self._index:
                raise MalformedConfiguration(f"duplicate symbol {symbol!r} in alphabet")
            self._index[symbol] = i

    @classmethod
    def characters(cls, first: str, last: str) -> "Alphabet":
        """Alphabet of the characters ``first``..``last`` (inclusive)."""
        return cls(chr(c) for c in range(ord(first), ord(last) + 1))

    @property
    def symbols(self) -> Tuple[Symbol, ...]:
        return self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    @property
    def size(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols)

    def __contains__(self, symbol: Symbol) -> bool:
        return symbol in self._index

    def __getitem__(self, index: int) -> Symbol:
        return self._symbols[index]

    def symbol(self, index: int) -> Symbol:
        return self._symbols[index]

    def index(self, symbol: Symbol) -> int:
        try:
            return self._index[symbol]
        except KeyError:
            raise ValueError(f"symbol {symbol!r} is not in the alphabet") from None

    def singletons(self) -> List[Word]:
        """One single-symbol word per symbol, in alphabet order."""
        return [Word.from_symbols(s) for s in self._symbols]

    def words(self, max_length: int) -> Iterator[Word]:
        """Enumerate all words up to ``max_length``, shortest first."""
        for length in range(max_length + 1):
            for combo in product(self._symbols, repeat=length):
                yield Word(combo)

    def sort_key(self, word: Word) -> Tuple[int, Tuple[int, ...]]:
        """Order words by length, then by symbol index."""
        return len(word), tuple(self._index[s] for s in word)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._symbols == other._symbols

    def __hash__(self) -> int:
        return hash(self._symbols)

    def __repr__(self) -> str:
        return f"Alphabet({list(self._symbols)!r})"

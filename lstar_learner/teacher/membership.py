"""
Membership oracles for L* learning.

A membership oracle answers a single query: the output of the system under
learning on an input word. Acceptors answer with a boolean, transducers with
one output symbol per input symbol. The wrappers here add counting, caching
and alphabet mapping on top of any oracle without changing its answers.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..core.automaton import DeterministicAutomaton
from ..core.word import Symbol, Word


class MembershipOracle(ABC):
    """Answers membership (output) queries on input words."""

    @abstractmethod
    def answer(self, word: Word) -> Any:
        """Output of the system under learning on ``word``."""
        pass

    def membership_queries(self, words: Iterable[Word]) -> List[Any]:
        """Batch membership queries."""
        return [self.answer(word) for word in words]

    def classify_word(self, word: Word) -> Any:
        """Single membership query (for compatibility)."""
        return self.answer(word)

    def get_statistics(self) -> Dict[str, Any]:
        return {'type': self.__class__.__name__}


class SimulatorOracle(MembershipOracle):
    """Answers queries by running a known automaton."""

    def __init__(self, automaton: DeterministicAutomaton):
        self.automaton = automaton

    def answer(self, word: Word) -> Any:
        return self.automaton.compute_output(word)

    def __str__(self) -> str:
        return f"SimulatorOracle({self.automaton.kind}, states={self.automaton.size()})"


class FunctionOracle(MembershipOracle):
    """Wraps a plain callable ``word -> output``."""

    def __init__(self, function: Callable[[Word], Any], name: Optional[str] = None):
        self.function = function
        self.name = name or getattr(function, "__name__", "function")

    def answer(self, word: Word) -> Any:
        return self.function(word)

    def __str__(self) -> str:
        return f"FunctionOracle({self.name})"


class SUL(ABC):
    """
    Reactive system under learning.

    Queries are answered by resetting the system with ``pre``, feeding the
    input symbols one at a time through ``step`` and cleaning up with ``post``.
    """

    def pre(self):
        pass

    def post(self):
        pass

    @abstractmethod
    def step(self, symbol: Symbol) -> Any:
        pass


class SULOracle(MembershipOracle):
    """Transducer oracle answering queries by stepping a ``SUL``."""

    def __init__(self, sul: SUL):
        self.sul = sul

    def answer(self, word: Word) -> Word:
        self.sul.pre()
        try:
            outputs = [self.sul.step(symbol) for symbol in word]
        finally:
            self.sul.post()
        return Word(tuple(outputs))


class MappedOracle(MembershipOracle):
    """
    Learn over an abstract alphabet while querying a concrete system.

    Every abstract input is mapped to a concrete one before the query and
    every concrete output is mapped back afterwards.
    """

    def __init__(self, oracle: MembershipOracle,
                 map_input: Callable[[Symbol], Symbol],
                 map_output: Callable[[Any], Any]):
        self.oracle = oracle
        self.map_input = map_input
        self.map_output = map_output

    def answer(self, word: Word) -> Word:
        concrete = Word(tuple(self.map_input(symbol) for symbol in word))
        outputs = self.oracle.answer(concrete)
        return Word(tuple(self.map_output(output) for output in outputs))


class CounterOracle(MembershipOracle):
    """Counts the queries and symbols passed to an oracle."""

    def __init__(self, oracle: MembershipOracle, name: str = "Membership Queries"):
        self.oracle = oracle
        self.name = name
        self.query_count = 0
        self.symbol_count = 0

    def answer(self, word: Word) -> Any:
        self.query_count += 1
        self.symbol_count += len(word)
        return self.oracle.answer(word)

    def reset_statistics(self):
        self.query_count = 0
        self.symbol_count = 0

    def get_summary(self) -> str:
        return f"{self.name} [#queries: {self.query_count}, #symbols: {self.symbol_count}]"

    def get_statistics(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'total_queries': self.query_count,
            'total_symbols': self.symbol_count,
        }

    def __str__(self) -> str:
        return self.get_summary()


class CachedOracle(MembershipOracle):
    """
    Caches answers of an underlying oracle.

    Uses LRU eviction when ``cache_size`` is set; unbounded otherwise.
    """

    def __init__(self, oracle: MembershipOracle, cache_size: Optional[int] = None):
        self.oracle = oracle
        self.cache_size = cache_size
        self.cache: "OrderedDict[Word, Any]" = OrderedDict()

        # Statistics
        self.query_count = 0
        self.cache_hits = 0

    def answer(self, word: Word) -> Any:
        self.query_count += 1
        if word in self.cache:
            self.cache_hits += 1
            # Move to end for LRU
            self.cache.move_to_end(word)
            return self.cache[word]

        result = self.oracle.answer(word)
        self.cache[word] = result
        if self.cache_size is not None and len(self.cache) > self.cache_size:
            self.cache.popitem(last=False)
        return result

    def clear_cache(self):
        self.cache.clear()

    def get_statistics(self) -> Dict[str, Any]:
        """Return cache statistics."""
        return {
            'total_queries': self.query_count,
            'cache_hits': self.cache_hits,
            'cache_hit_rate': self.cache_hits / max(1, self.query_count),
            'cache_size': len(self.cache),
        }

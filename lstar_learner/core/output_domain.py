"""
Output semantics shared by the observation table, the refiner and the learners.

L* runs the same algorithm for acceptors (every query is answered with a
boolean) and transducers (every query is answered with one output symbol per
input symbol). The difference is confined to three things, modelled here as a
strategy object instead of type inspection:

- how a raw oracle answer is validated,
- which part of the answer is stored in a table cell, and
- what the "trailing output" of an answer is during counterexample analysis.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import numpy as np

from .errors import LStarError, OracleFailure
from .word import Word


class OutputDomain(ABC):
    """Strategy describing one kind of query output."""

    name = "abstract"

    def query(self, oracle, word: Word) -> Any:
        """
        Ask ``oracle`` for the output on ``word`` and validate it.

        Any error raised by the oracle is surfaced as ``OracleFailure``.
        """
        try:
            answer = oracle.answer(word)
        except LStarError:
            raise
        except Exception as e:
            raise OracleFailure(f"membership query for '{word}' failed: {e}") from e
        return self.validate(word, answer)

    @abstractmethod
    def validate(self, word: Word, answer: Any) -> Any:
        """Check that ``answer`` is a well-formed output for ``word``."""
        pass

    @abstractmethod
    def cell(self, prefix: Word, suffix: Word, answer: Any) -> Any:
        """Table cell content for row ``prefix`` and column ``suffix``."""
        pass

    @abstractmethod
    def last_output(self, answer: Any) -> Any:
        """Trailing output used when walking a counterexample."""
        pass

    def shortest_counterexample(self, hypothesis, word: Word, output: Any):
        """
        Shorten a counterexample to the prefix where the disagreement shows.

        Acceptor outputs cannot be shortened, so the default returns the input.
        """
        return word, output

    def format(self, value: Any) -> str:
        return str(value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class AcceptorDomain(OutputDomain):
    """Boolean outputs: the word is accepted or rejected."""

    name = "acceptor"

    def validate(self, word: Word, answer: Any) -> bool:
        if answer is None:
            raise OracleFailure(f"oracle returned no answer for '{word}'")
        if not isinstance(answer, (bool, np.bool_)):
            raise OracleFailure(
                f"oracle answered {answer!r} for '{word}', expected a boolean"
            )
        return bool(answer)

    def cell(self, prefix: Word, suffix: Word, answer: bool) -> bool:
        return answer

    def last_output(self, answer: bool) -> bool:
        return answer

    def format(self, value: bool) -> str:
        return "1" if value else "0"


class TransducerDomain(OutputDomain):
    """Word outputs with one output symbol per input symbol (Mealy semantics)."""

    name = "transducer"

    def validate(self, word: Word, answer: Any) -> Word:
        if not isinstance(answer, Word):
            try:
                answer = Word(tuple(answer))
            except TypeError:
                raise OracleFailure(
                    f"oracle answered {answer!r} for '{word}', expected an output word"
                ) from None
        if len(answer) != len(word):
            raise OracleFailure(
                f"oracle answered {len(answer)} output symbols for '{word}' "
                f"({len(word)} inputs)"
            )
        return answer

    def cell(self, prefix: Word, suffix: Word, answer: Word) -> Word:
        # Only the outputs produced while reading the suffix belong to the cell;
        # the prefix part is shared by every column of the row.
        return answer.suffix_of_length(len(suffix))

    def last_output(self, answer: Word) -> Optional[Any]:
        return answer.last_symbol if len(answer) else None

    def shortest_counterexample(self, hypothesis, word: Word, output: Word):
        predicted = hypothesis.compute_output(word)
        for i, (expected, actual) in enumerate(zip(output, predicted)):
            if expected != actual:
                return word.prefix(i + 1), output.prefix(i + 1)
        return word, output


ACCEPTOR = AcceptorDomain()
TRANSDUCER = TransducerDomain()

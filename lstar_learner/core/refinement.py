"""
Table refinement: inconsistency resolution and counterexample processing.

Counterexamples are analysed Rivest–Schapire style. The counterexample is
split at every position into a prefix, which is replaced by the access word
of the hypothesis state it reaches, and the remaining suffix. The trailing
output of each such query is compared with the true trailing output; the
first position where they disagree yields a suffix that distinguishes two
rows the hypothesis merged. When no such position exists, every prefix of
the counterexample is added as a short row instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from .errors import InvariantViolation
from .hypothesis import Hypothesis
from .observation_table import Inconsistency, ObservationTable, Row
from .output_domain import OutputDomain
from .word import Word


class CounterexampleStrategy(Enum):
    """How the learner processes counterexamples."""
    RIVEST_SCHAPIRE = "rivest_schapire"
    ALL_PREFIXES = "all_prefixes"


class RefinementStrategy(Enum):
    """How a counterexample was turned into table growth."""
    COLUMNS = "columns"
    SHORT_PREFIXES = "short_prefixes"


@dataclass(frozen=True)
class Counterexample:
    """A word on which the hypothesis is wrong, with the target's true output."""

    word: Word
    output: Any

    def __str__(self) -> str:
        return f"{self.word} / {self.output}"


@dataclass(frozen=True)
class BoundarySearchResult:
    """
    Outcome of the counterexample walk.

    ``index`` is the prefix length at which the trailing output flipped, or the
    full counterexample length when it never did.
    """

    suffix: Word
    index: int
    queries: int

    @property
    def found(self) -> bool:
        return len(self.suffix) > 0

    @property
    def strategy(self) -> RefinementStrategy:
        return RefinementStrategy.COLUMNS if self.found else RefinementStrategy.SHORT_PREFIXES


def suffix_closure(suffix: Word) -> List[Word]:
    """All non-empty suffixes of ``suffix``, shortest first."""
    return suffix.suffixes(include_full=True)[1:]


def find_distinguishing_suffix(table: ObservationTable, inconsistency: Inconsistency) -> Word:
    """
    Find the column that resolves an inconsistency.

    Scans existing columns in order; the first one on which the two successor
    rows differ gives ``e``, and ``symbol·e`` separates the two short rows.

    Raises:
        InvariantViolation: If the successors agree on every column
    """
    index = table.alphabet.index(inconsistency.symbol)
    first = inconsistency.first_row.successor(index)
    second = inconsistency.second_row.successor(index)

    for i, suffix in enumerate(table.suffixes):
        if table.cell_contents(first, i) != table.cell_contents(second, i):
            return suffix.prepend(inconsistency.symbol)

    raise InvariantViolation(
        f"bogus inconsistency: '{first.label}' and '{second.label}' agree on every column"
    )


def find_boundary(hypothesis: Hypothesis, counterexample: Counterexample,
                  oracle, domain: OutputDomain) -> BoundarySearchResult:
    """
    Walk the counterexample's prefixes, shortest first, looking for the flip.

    Args:
        hypothesis: Current hypothesis with its state access words
        counterexample: Word and true output from the equivalence oracle
        oracle: Membership oracle
        domain: Output semantics of the table

    Returns:
        BoundarySearchResult; an empty suffix means no flip was found
    """
    word = counterexample.word
    true_last = domain.last_output(counterexample.output)

    queries = 0
    for prefix in word.prefixes(include_full=True):
        suffix = word.suffix_of_length(len(word) - len(prefix))
        query = hypothesis.access_word_after(prefix).concat(suffix)
        answer = domain.query(oracle, query)
        queries += 1
        if domain.last_output(answer) != true_last:
            return BoundarySearchResult(suffix, len(prefix), queries)

    return BoundarySearchResult(Word.epsilon(), len(word), queries)


def refine_columns(table: ObservationTable, suffix: Word, oracle) -> List[Word]:
    """Add ``suffix`` and all of its non-empty suffixes as columns."""
    return table.add_suffixes(suffix_closure(suffix), oracle)


def refine_short_prefixes(table: ObservationTable, word: Word, oracle) -> List[Row]:
    """Add every prefix of ``word`` as a short row."""
    return table.add_short_prefixes(word.prefixes(include_full=True), oracle)


def refine_with_counterexample(table: ObservationTable, hypothesis: Hypothesis,
                               counterexample: Counterexample, oracle) -> RefinementStrategy:
    """
    Refine the table with a counterexample.

    Transducer counterexamples are first cut back to the shortest prefix on
    which hypothesis and target disagree, so that the disagreement sits in
    the trailing output symbol the walk compares.

    Returns:
        The strategy that was applied
    """
    domain = table.domain
    word, output = domain.shortest_counterexample(
        hypothesis.automaton, counterexample.word, counterexample.output
    )
    result = find_boundary(hypothesis, Counterexample(word, output), oracle, domain)

    if result.strategy is RefinementStrategy.COLUMNS:
        refine_columns(table, result.suffix, oracle)
    else:
        refine_short_prefixes(table, counterexample.word, oracle)
    return result.strategy

"""
Observation Table implementation for L* algorithm.

Maintains short prefix rows S (hypothesis states), long prefix rows S·Σ
(observed successors) and append-only suffix columns E, with a cell
T(row, e) per row and column filled by membership queries.

Rows are interned by their observed content: two rows share a content id
exactly when their content vectors are equal, and content ids are what the
closedness and consistency checks compare.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from .errors import InvariantViolation, MalformedConfiguration
from .output_domain import ACCEPTOR, OutputDomain
from .word import Alphabet, Symbol, Word

D = TypeVar("D")


class Row(Generic[D]):
    """A labelled row of the observation table."""

    def __init__(self, label: Word, row_id: int):
        self.label = label
        self.row_id = row_id  # creation order
        self.short = False
        self.content_id = -1
        self.successors: List["Row[D]"] = []

    def successor(self, index: int) -> "Row[D]":
        """Row labelled ``label + symbol(index)``; defined for short rows only."""
        if not self.short:
            raise InvariantViolation(f"long row '{self.label}' has no successors")
        return self.successors[index]

    def __repr__(self) -> str:
        kind = "short" if self.short else "long"
        return f"Row('{self.label}', {kind}, content={self.content_id})"


@dataclass(frozen=True)
class Inconsistency:
    """Two row-equivalent short rows whose successors differ on ``symbol``."""

    first_row: Row
    second_row: Row
    symbol: Symbol


@dataclass(frozen=True)
class TableSnapshot:
    """Read-only copy of the table contents for reporting sinks."""

    suffixes: Tuple[Word, ...]
    short_rows: Tuple[Tuple[Word, Tuple[Any, ...]], ...]
    long_rows: Tuple[Tuple[Word, Tuple[Any, ...]], ...]

    @property
    def num_rows(self) -> int:
        return len(self.short_rows) + len(self.long_rows)


class ObservationTable(Generic[D]):
    """Observation table for L* learning, generic over the cell output type."""

    def __init__(self, alphabet: Alphabet, domain: OutputDomain = ACCEPTOR):
        """
        Initialize an empty observation table.

        Args:
            alphabet: Input alphabet Σ
            domain: Output semantics (``ACCEPTOR`` or ``TRANSDUCER``)
        """
        self.alphabet = alphabet
        self.domain = domain

        self._suffixes: List[Word] = []
        self._suffix_index: Dict[Word, int] = {}

        self._rows: List[Row[D]] = []
        self._rows_by_label: Dict[Word, Row[D]] = {}
        self._contents: Dict[int, List[D]] = {}

        # Content vector -> content id (hash-consing)
        self._content_ids: Dict[Tuple[D, ...], int] = {}

        self._initialized = False

        # Statistics
        self.query_count = 0

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def initialize(self, prefixes: Iterable[Word], suffixes: Iterable[Word], oracle) -> None:
        """
        Seed the table and fill every cell with membership queries.

        Each given prefix becomes a short row; each prefix·a not already
        present becomes a long row.

        Args:
            prefixes: Initial short prefixes; must contain the empty word
            suffixes: Initial suffix columns
            oracle: Membership oracle

        Raises:
            MalformedConfiguration: On empty seeds or a missing empty prefix
            OracleFailure: If a membership query fails
        """
        if self._initialized:
            raise InvariantViolation("observation table is already initialized")

        prefixes = _unique(prefixes)
        suffixes = _unique(suffixes)
        if not prefixes:
            raise MalformedConfiguration("at least one initial prefix is required")
        if not suffixes:
            raise MalformedConfiguration("at least one initial suffix is required")
        if Word.epsilon() not in prefixes:
            raise MalformedConfiguration("initial prefixes must contain the empty word")

        labels = list(prefixes)
        for prefix in prefixes:
            for symbol in self.alphabet:
                label = prefix.append(symbol)
                if label not in labels:
                    labels.append(label)

        # Query everything first so a failing oracle leaves the table empty
        contents = {label: self._query_row(label, suffixes, oracle) for label in labels}

        for suffix in suffixes:
            self._append_suffix(suffix)
        for label in labels:
            self._add_row(label, contents[label])
        for prefix in prefixes:
            self._make_short(self._rows_by_label[prefix])

        self._initialized = True

    def add_suffixes(self, new_suffixes: Iterable[Word], oracle) -> List[Word]:
        """
        Append suffix columns and query them for every existing row.

        Suffixes already present are ignored.

        Returns:
            The suffixes actually added, in column order
        """
        self._assert_initialized()
        added = [s for s in _unique(new_suffixes) if s not in self._suffix_index]
        if not added:
            return []

        new_cells = {
            row.row_id: self._query_row(row.label, added, oracle) for row in self._rows
        }

        for suffix in added:
            self._append_suffix(suffix)
        for row in self._rows:
            self._contents[row.row_id].extend(new_cells[row.row_id])
        self._reintern()
        return added

    def add_short_prefixes(self, prefixes: Iterable[Word], oracle) -> List[Row[D]]:
        """
        Promote words to short rows.

        Unseen words get a new row; long rows are promoted in place. Every
        promoted row receives a successor for each symbol, creating long rows
        as needed. Only newly created rows are queried.

        Returns:
            The rows that were made short, in promotion order
        """
        self._assert_initialized()

        to_promote = []
        for word in _unique(prefixes):
            row = self._rows_by_label.get(word)
            if row is None or not row.short:
                to_promote.append(word)
        if not to_promote:
            return []

        new_labels: List[Word] = []
        for word in to_promote:
            for label in [word] + [word.append(a) for a in self.alphabet]:
                if label not in self._rows_by_label and label not in new_labels:
                    new_labels.append(label)

        contents = {
            label: self._query_row(label, self._suffixes, oracle) for label in new_labels
        }

        promoted = []
        for word in to_promote:
            row = self._rows_by_label.get(word)
            if row is None:
                row = self._add_row(word, contents[word])
            self._make_short(row, contents)
            promoted.append(row)
        return promoted

    # ------------------------------------------------------------------
    # Closedness and consistency
    # ------------------------------------------------------------------

    def is_closed(self) -> bool:
        """Check if every successor of a short row matches some short row."""
        return self.find_unclosed_row() is None

    def find_unclosed_row(self) -> Optional[Row[D]]:
        """
        Find the first successor row that matches no short row.

        Short rows are scanned in creation order and their successors in
        alphabet order, so the result is deterministic.

        Returns:
            The row whose label must be promoted, or None if closed
        """
        short_rows = self.short_prefix_rows
        short_ids = {row.content_id for row in short_rows}
        for row in short_rows:
            for successor in row.successors:
                if successor.content_id not in short_ids:
                    return successor
        return None

    def is_consistent(self) -> bool:
        """Check if equivalent short rows have equivalent successors."""
        return self.find_inconsistency() is None

    def find_inconsistency(self) -> Optional[Inconsistency]:
        """
        Find the first pair of row-equivalent short rows with a differing successor.

        Returns:
            Inconsistency(first_row, second_row, symbol) or None if consistent
        """
        short_rows = self.short_prefix_rows
        for i, first in enumerate(short_rows):
            for second in short_rows[i + 1:]:
                if first.content_id != second.content_id:
                    continue
                for index, symbol in enumerate(self.alphabet):
                    if first.successor(index).content_id != second.successor(index).content_id:
                        return Inconsistency(first, second, symbol)
        return None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def suffixes(self) -> List[Word]:
        return list(self._suffixes)

    @property
    def all_rows(self) -> List[Row[D]]:
        return list(self._rows)

    @property
    def short_prefix_rows(self) -> List[Row[D]]:
        return [row for row in self._rows if row.short]

    @property
    def long_prefix_rows(self) -> List[Row[D]]:
        return [row for row in self._rows if not row.short]

    def row(self, label: Word) -> Optional[Row[D]]:
        return self._rows_by_label.get(label)

    def suffix_index(self, suffix: Word) -> int:
        """Column index of ``suffix``, or -1 if it is not a column."""
        return self._suffix_index.get(suffix, -1)

    def cell_contents(self, row: Row[D], suffix_index: int) -> D:
        return self._contents[row.row_id][suffix_index]

    def row_contents(self, row: Row[D]) -> Tuple[D, ...]:
        return tuple(self._contents[row.row_id])

    def number_of_rows(self) -> int:
        return len(self._rows)

    def number_of_suffixes(self) -> int:
        return len(self._suffixes)

    def number_of_distinct_rows(self) -> int:
        return len(self._content_ids)

    def size(self) -> Tuple[int, int, int]:
        """(short rows, long rows, columns)."""
        num_short = len(self.short_prefix_rows)
        return num_short, len(self._rows) - num_short, len(self._suffixes)

    def snapshot(self) -> TableSnapshot:
        return TableSnapshot(
            suffixes=tuple(self._suffixes),
            short_rows=tuple((r.label, self.row_contents(r)) for r in self.short_prefix_rows),
            long_rows=tuple((r.label, self.row_contents(r)) for r in self.long_prefix_rows),
        )

    def get_statistics(self) -> Dict[str, int]:
        """Return table statistics."""
        num_short, num_long, num_suffixes = self.size()
        return {
            "short_rows": num_short,
            "long_rows": num_long,
            "suffixes": num_suffixes,
            "distinct_rows": self.number_of_distinct_rows(),
            "cells": len(self._rows) * num_suffixes,
            "total_queries": self.query_count,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _assert_initialized(self):
        if not self._initialized:
            raise InvariantViolation("observation table has not been initialized")

    def _query_row(self, label: Word, suffixes: List[Word], oracle) -> List[D]:
        cells = []
        for suffix in suffixes:
            answer = self.domain.query(oracle, label.concat(suffix))
            self.query_count += 1
            cells.append(self.domain.cell(label, suffix, answer))
        return cells

    def _append_suffix(self, suffix: Word):
        self._suffix_index[suffix] = len(self._suffixes)
        self._suffixes.append(suffix)

    def _add_row(self, label: Word, contents: List[D]) -> Row[D]:
        row = Row(label, len(self._rows))
        self._rows.append(row)
        self._rows_by_label[label] = row
        self._contents[row.row_id] = list(contents)
        row.content_id = self._intern(self._contents[row.row_id])
        return row

    def _make_short(self, row: Row[D], contents: Optional[Dict[Word, List[D]]] = None):
        row.short = True
        row.successors = []
        for symbol in self.alphabet:
            label = row.label.append(symbol)
            successor = self._rows_by_label.get(label)
            if successor is None:
                successor = self._add_row(label, contents[label])
            row.successors.append(successor)

    def _intern(self, contents: List[D]) -> int:
        key = tuple(contents)
        content_id = self._content_ids.get(key)
        if content_id is None:
            content_id = len(self._content_ids)
            self._content_ids[key] = content_id
        return content_id

    def _reintern(self):
        """Recompute content ids after columns were added."""
        self._content_ids = {}
        for row in self._rows:
            row.content_id = self._intern(self._contents[row.row_id])

    def __str__(self) -> str:
        """ASCII rendering: one line per row, short rows first."""
        headers = [str(s) for s in self._suffixes]
        short_rows = self.short_prefix_rows
        long_rows = self.long_prefix_rows
        labels = [str(r.label) for r in short_rows + long_rows]
        label_width = max([len(l) for l in labels] + [1])

        lines = ["Observation Table:"]
        num_short, num_long, num_suffixes = self.size()
        lines.append(f"  |S| = {num_short}, |S·Σ| = {num_long}, |E| = {num_suffixes}")

        cells = {
            r.row_id: [self.domain.format(v) for v in self._contents[r.row_id]]
            for r in self._rows
        }
        widths = []
        for i, header in enumerate(headers):
            column = [cells[r.row_id][i] for r in self._rows]
            widths.append(max([len(header)] + [len(c) for c in column]))

        def render(label, values):
            parts = [f"{v:>{w}}" for v, w in zip(values, widths)]
            return f"  {label:<{label_width}} | " + " | ".join(parts)

        lines.append(render("", headers))
        lines.append("  " + "-" * (label_width + 3 + sum(widths) + 3 * max(0, len(widths) - 1)))
        for r in short_rows:
            lines.append(render(str(r.label), cells[r.row_id]))
        lines.append("  " + "=" * (label_width + 3 + sum(widths) + 3 * max(0, len(widths) - 1)))
        for r in long_rows:
            lines.append(render(str(r.label), cells[r.row_id]))
        return "\n".join(lines)


def _unique(words: Iterable[Word]) -> List[Word]:
    seen = set()
    result = []
    for word in words:
        if word not in seen:
            seen.add(word)
            result.append(word)
    return result

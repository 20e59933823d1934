"""
L* Algorithm implementation based on Angluin (1987).

The learner keeps an observation table closed and consistent, extracts a
hypothesis from it and asks the teacher for a counterexample. Each
counterexample grows the table, so the loop ends after at most n rounds for
a target with n states. DFA, Mealy and Moore learners share the loop and
differ only in their output semantics and hypothesis construction.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional
import time

from .automaton import DeterministicAutomaton
from .errors import InvariantViolation, MalformedConfiguration
from .hypothesis import Hypothesis, extract_dfa, extract_mealy, extract_moore
from .observation_table import ObservationTable
from .output_domain import ACCEPTOR, TRANSDUCER, OutputDomain
from .refinement import (
    Counterexample, CounterexampleStrategy, RefinementStrategy,
    find_distinguishing_suffix, refine_short_prefixes, refine_with_counterexample,
    suffix_closure,
)
from .word import Alphabet, Word


class LStarAlgorithm:
    """L* learning algorithm implementation."""

    name = "L*"
    domain: OutputDomain = ACCEPTOR

    def __init__(self, teacher, alphabet: Optional[Alphabet] = None,
                 initial_prefixes: Optional[Iterable[Word]] = None,
                 initial_suffixes: Optional[Iterable[Word]] = None,
                 counterexample_strategy=CounterexampleStrategy.RIVEST_SCHAPIRE,
                 verbose: bool = True,
                 on_round: Optional[Callable[[Dict[str, Any]], None]] = None):
        """
        Initialize L* learner.

        Args:
            teacher: Oracle providing membership/equivalence queries
            alphabet: Input alphabet; defaults to the teacher's
            initial_prefixes: Seed short prefixes (must contain the empty word)
            initial_suffixes: Seed suffixes; defaults depend on the semantics
            counterexample_strategy: ``rivest_schapire`` or ``all_prefixes``
            verbose: Print progress for every round
            on_round: Called with each round record after it is appended
        """
        self.teacher = teacher
        alphabet = alphabet if alphabet is not None else teacher.alphabet
        self.alphabet = alphabet if isinstance(alphabet, Alphabet) else Alphabet(alphabet)
        self.oracle = teacher.membership_oracle
        try:
            self.counterexample_strategy = CounterexampleStrategy(counterexample_strategy)
        except ValueError as e:
            raise MalformedConfiguration(
                f"unknown counterexample strategy: {counterexample_strategy!r}"
            ) from e
        self.verbose = verbose
        self.on_round = on_round

        self.initial_prefixes = (list(initial_prefixes) if initial_prefixes is not None
                                 else [Word.epsilon()])
        self.initial_suffixes = (list(initial_suffixes) if initial_suffixes is not None
                                 else self.default_suffixes())

        self.table = ObservationTable(self.alphabet, self.domain)
        self.hypothesis: Optional[Hypothesis] = None
        self.start_time = time.time()
        self.hypotheses_history: List[Dict[str, Any]] = []

        # Statistics
        self.iterations = 0
        self.counterexamples: List[Counterexample] = []
        self.closing_steps = 0
        self.consistency_steps = 0
        self.strategy_counts = {s.value: 0 for s in RefinementStrategy}
        self.refinement_times: List[float] = []
        self.equivalence_times: List[float] = []

    def default_suffixes(self) -> List[Word]:
        return [Word.epsilon()]

    def initialize(self):
        """Fill the table for the seed prefixes and suffixes."""
        self.table.initialize(self.initial_prefixes, self.initial_suffixes, self.oracle)
        if self.verbose:
            short, long, columns = self.table.size()
            print(f"Initialized {self.name} table: {short} short rows, "
                  f"{long} long rows, {columns} suffixes")

    def close_table(self) -> int:
        """
        Promote unclosed rows until the table is closed.

        Returns:
            Number of promotions

        Raises:
            InvariantViolation: If a promotion does not add a short row
        """
        promotions = 0
        while True:
            row = self.table.find_unclosed_row()
            if row is None:
                break
            promoted = self.table.add_short_prefixes(row.label.prefixes(), self.oracle)
            if not promoted:
                raise InvariantViolation(f"row '{row.label}' cannot be closed")
            promotions += 1
        self.closing_steps += promotions
        return promotions

    def make_consistent(self) -> int:
        """
        Add distinguishing suffixes until the table is consistent.

        Returns:
            Number of resolved inconsistencies

        Raises:
            InvariantViolation: If a distinguishing suffix is already a column
        """
        resolved = 0
        while True:
            inconsistency = self.table.find_inconsistency()
            if inconsistency is None:
                break
            suffix = find_distinguishing_suffix(self.table, inconsistency)
            added = self.table.add_suffixes(suffix_closure(suffix), self.oracle)
            if not added:
                raise InvariantViolation(f"suffix '{suffix}' did not resolve an inconsistency")
            resolved += 1
        self.consistency_steps += resolved
        return resolved

    def _refine_table(self):
        """
        Make observation table closed and consistent.

        Consistency is restored before every closing pass, so the loop ends
        with a table that is both.
        """
        while True:
            self.make_consistent()
            if self.table.is_closed():
                return
            self.close_table()

    def _extract(self, table: ObservationTable) -> Hypothesis:
        raise NotImplementedError

    def extract_hypothesis(self) -> Hypothesis:
        """Build the hypothesis of the current (closed and consistent) table."""
        self.hypothesis = self._extract(self.table)
        return self.hypothesis

    def equivalence_model(self) -> DeterministicAutomaton:
        """Automaton handed to the equivalence oracle."""
        return self.hypothesis.automaton

    def result(self) -> DeterministicAutomaton:
        """Automaton returned to the caller."""
        return self.hypothesis.automaton

    def process_counterexample(self, counterexample: Counterexample) -> RefinementStrategy:
        """
        Grow the table with a counterexample to the current hypothesis.

        Returns:
            The refinement strategy that was applied

        Raises:
            InvariantViolation: If the table did not grow
        """
        if self.hypothesis is None:
            raise InvariantViolation("no hypothesis to refine")

        word = counterexample.word
        output = self.domain.validate(word, counterexample.output)
        counterexample = Counterexample(word, output)

        before = self.table.size()
        if self.counterexample_strategy is CounterexampleStrategy.ALL_PREFIXES:
            refine_short_prefixes(self.table, word, self.oracle)
            applied = RefinementStrategy.SHORT_PREFIXES
        else:
            applied = refine_with_counterexample(
                self.table, self.hypothesis, counterexample, self.oracle
            )

        if self.table.size() == before:
            raise InvariantViolation(f"counterexample '{word}' did not refine the table")
        self.strategy_counts[applied.value] += 1
        return applied

    def run(self) -> DeterministicAutomaton:
        """
        Execute L* learning algorithm.

        Returns:
            Learned automaton, equivalent to the target when the equivalence
            oracle is exact

        Raises:
            OracleFailure: If an oracle cannot answer
            InvariantViolation: If the table reaches an unresolvable state
        """
        if not self.table.is_initialized:
            self.initialize()

        while True:
            self.iterations += 1
            refinement_start = time.time()

            # Phase 1: Make table closed and consistent
            self._refine_table()

            refinement_time = time.time() - refinement_start
            self.refinement_times.append(refinement_time)

            # Phase 2: Construct hypothesis
            hypothesis = self.extract_hypothesis()
            model = self.result()

            if self.verbose:
                print(f"Iteration {self.iterations}: "
                      f"Constructed {model.kind} with {hypothesis.num_states} states "
                      f"(refinement: {refinement_time:.2f}s)")

            self._record_round(model)

            # Phase 3: Equivalence query
            equiv_start = time.time()
            counterexample = self.teacher.equivalence_query(
                self.equivalence_model(), iteration=self.iterations
            )
            equiv_time = time.time() - equiv_start
            self.equivalence_times.append(equiv_time)

            if counterexample is None:
                if self.verbose:
                    print(f"Exact {model.kind} learned in {self.iterations} iterations")
                return model

            # Phase 4: Process counterexample
            if self.verbose:
                print(f"  Counterexample found: '{counterexample.word}' "
                      f"(length {len(counterexample.word)}, search: {equiv_time:.2f}s)")

            self.counterexamples.append(counterexample)
            strategy = self.process_counterexample(counterexample)

            self.hypotheses_history[-1]['counterexample'] = {
                'word': counterexample.word,
                'length': len(counterexample.word),
                'target_output': counterexample.output,
                'hypothesis_output': self.equivalence_model().compute_output(counterexample.word),
                'strategy': strategy.value,
            }

    def _record_round(self, model: DeterministicAutomaton):
        record = {
            'iteration': self.iterations,
            'time': time.time() - self.start_time,
            'states': model.size(),
            'table': self.table.snapshot(),
            'hypothesis': model,
            'counterexample': None  # Filled in if this hypothesis is rejected
        }
        self.hypotheses_history.append(record)
        if self.on_round is not None:
            self.on_round(record)

    def get_statistics(self) -> Dict[str, Any]:
        """
        Return learning statistics.

        Returns:
            Dictionary with performance metrics
        """
        total_time = time.time() - self.start_time

        stats = {
            "learner": self.name,
            "iterations": self.iterations,
            "total_time": total_time,
            "final_states": self.hypothesis.num_states if self.hypothesis else 0,
            "hypotheses_tested": len(self.hypotheses_history),
            "counterexamples": len(self.counterexamples),
            "avg_ce_length": (sum(len(ce.word) for ce in self.counterexamples)
                              / max(1, len(self.counterexamples))),
            "closing_steps": self.closing_steps,
            "consistency_steps": self.consistency_steps,
            "strategy_counts": dict(self.strategy_counts),
            "membership_queries": getattr(self.oracle, "query_count", self.table.query_count),
            "table_stats": self.table.get_statistics(),
        }

        if self.refinement_times:
            stats["avg_refinement_time"] = sum(self.refinement_times) / len(self.refinement_times)

        if self.equivalence_times:
            stats["avg_equivalence_time"] = sum(self.equivalence_times) / len(self.equivalence_times)

        refinement_total = sum(self.refinement_times)
        equivalence_total = sum(self.equivalence_times)
        stats["time_breakdown"] = {
            "refinement": refinement_total,
            "equivalence": equivalence_total,
            "other": total_time - refinement_total - equivalence_total
        }

        return stats

    def print_summary(self):
        """Print learning summary."""
        stats = self.get_statistics()
        total = max(stats['total_time'], 1e-9)

        print("\n" + "="*50)
        print(f"{self.name} Learning Summary")
        print("="*50)

        print(f"Iterations: {stats['iterations']}")
        print(f"Total time: {stats['total_time']:.2f}s")
        print(f"Final states: {stats['final_states']}")

        print(f"\nCounterexamples: {stats['counterexamples']}")
        print(f"Average CE length: {stats['avg_ce_length']:.1f}")
        counts = stats['strategy_counts']
        print(f"  Column refinements: {counts['columns']}")
        print(f"  Prefix refinements: {counts['short_prefixes']}")

        print(f"\nTime breakdown:")
        breakdown = stats['time_breakdown']
        print(f"  Refinement: {breakdown['refinement']:.2f}s "
              f"({breakdown['refinement']/total*100:.1f}%)")
        print(f"  Equivalence: {breakdown['equivalence']:.2f}s "
              f"({breakdown['equivalence']/total*100:.1f}%)")

        print(f"\nTable statistics:")
        table_stats = stats['table_stats']
        print(f"  Short rows (|S|): {table_stats['short_rows']}")
        print(f"  Long rows (|S·Σ|): {table_stats['long_rows']}")
        print(f"  Suffixes (|E|): {table_stats['suffixes']}")
        print(f"  Distinct rows: {table_stats['distinct_rows']}")
        print(f"  Membership queries: {stats['membership_queries']}")

        print("="*50)


class DFALStar(LStarAlgorithm):
    """L* for deterministic finite acceptors."""

    name = "DFA L*"
    domain = ACCEPTOR

    def _extract(self, table: ObservationTable) -> Hypothesis:
        return extract_dfa(table)


class MealyLStar(LStarAlgorithm):
    """L* for Mealy machines; every single-symbol word starts as a column."""

    name = "Mealy L*"
    domain = TRANSDUCER

    def default_suffixes(self) -> List[Word]:
        return self.alphabet.singletons()

    def _extract(self, table: ObservationTable) -> Hypothesis:
        return extract_mealy(table)


class MooreLStar(MealyLStar):
    """
    L* for Moore machines.

    The target is queried through its Mealy encoding, so the table and the
    equivalence queries work on Mealy hypotheses; the Moore view is built
    from the same table for the caller.
    """

    name = "Moore L*"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.moore_hypothesis: Optional[Hypothesis] = None

    def extract_hypothesis(self) -> Hypothesis:
        hypothesis = super().extract_hypothesis()
        self.moore_hypothesis = extract_moore(self.table)
        return hypothesis

    def result(self) -> DeterministicAutomaton:
        return self.moore_hypothesis.automaton


LEARNERS = {
    "dfa": DFALStar,
    "mealy": MealyLStar,
    "moore": MooreLStar,
}


def run_lstar(teacher, semantics="dfa", print_summary: bool = False,
              **kwargs) -> DeterministicAutomaton:
    """
    Convenience function: build a learner for ``semantics`` and run it.

    Args:
        teacher: Oracle providing queries
        semantics: ``dfa``, ``mealy`` or ``moore`` (or a ``Semantics`` member)
        print_summary: Print the statistics block after learning
        **kwargs: Passed on to the learner

    Returns:
        Learned automaton, with the round records attached as ``learning_history``
    """
    key = getattr(semantics, "value", semantics)
    if key not in LEARNERS:
        raise MalformedConfiguration(f"unknown semantics: {semantics!r}")

    learner = LEARNERS[key](teacher, **kwargs)
    automaton = learner.run()
    if print_summary:
        learner.print_summary()

    automaton.learning_history = learner.hypotheses_history
    return automaton

"""
Metrics collection and storage for benchmarking L* learning runs.

This module provides metrics tracking for comparing equivalence oracles and
counterexample strategies across example targets.
"""

import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd


@dataclass
class LearningMetrics:
    """Metrics collected during a single learning run.

    Key accuracy metrics:
    - accuracy: Agreement between hypothesis and target on all words up to
      the validation length
    - minimal: Whether the hypothesis has as many states as the minimal target
    """

    # Timing metrics
    total_time: float = 0.0
    refinement_time: float = 0.0
    equivalence_query_time: float = 0.0

    # Query counts
    membership_queries: int = 0
    membership_symbols: int = 0
    eq_membership_queries: int = 0
    equivalence_queries: int = 0
    counterexamples_found: int = 0

    # Counterexample statistics
    counterexample_lengths: List[int] = field(default_factory=list)
    column_refinements: int = 0
    prefix_refinements: int = 0

    # Hypothesis properties
    num_states: int = 0
    target_states: int = 0

    # Validation against the target
    accuracy: float = 0.0
    validation_words: int = 0

    # Method-specific metrics
    oracle_specific: Dict[str, Any] = field(default_factory=dict)

    # Learning success
    learning_successful: bool = False
    failure_reason: Optional[str] = None

    # L* algorithm metrics
    iterations: int = 0
    observation_table_size: Tuple[int, int, int] = (0, 0, 0)  # (|S|, |S·Σ|, |E|)

    @property
    def avg_counterexample_length(self) -> float:
        """Mean counterexample length over the run."""
        if not self.counterexample_lengths:
            return 0.0
        return sum(self.counterexample_lengths) / len(self.counterexample_lengths)

    @property
    def queries_per_state(self) -> float:
        """Average number of membership queries per hypothesis state."""
        if self.num_states == 0:
            return 0.0
        return self.membership_queries / self.num_states

    @property
    def minimal(self) -> bool:
        return self.learning_successful and self.num_states == self.target_states

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['observation_table_size'] = list(self.observation_table_size)
        return result


class MetricsCollector:
    """Collects metrics during a learning run."""

    def __init__(self):
        self.metrics = LearningMetrics()
        self._start_time = None

    def start_learning(self):
        """Start timing the learning run."""
        self._start_time = time.time()
        self.metrics = LearningMetrics()

    def end_learning(self, successful: bool = True, failure_reason: str = None):
        """End the learning run and record final time."""
        if self._start_time:
            self.metrics.total_time = time.time() - self._start_time
        self.metrics.learning_successful = successful
        self.metrics.failure_reason = failure_reason

    def record_learner(self, learner_stats: Dict[str, Any]):
        """Record statistics reported by the learner."""
        self.metrics.iterations = learner_stats['iterations']
        self.metrics.num_states = learner_stats['final_states']
        self.metrics.refinement_time = learner_stats['time_breakdown']['refinement']
        self.metrics.equivalence_query_time = learner_stats['time_breakdown']['equivalence']
        self.metrics.column_refinements = learner_stats['strategy_counts']['columns']
        self.metrics.prefix_refinements = learner_stats['strategy_counts']['short_prefixes']
        table = learner_stats['table_stats']
        self.metrics.observation_table_size = (
            table['short_rows'], table['long_rows'], table['suffixes']
        )

    def record_teacher(self, teacher_stats: Dict[str, Any]):
        """Record query counts reported by the teacher."""
        self.metrics.membership_queries = teacher_stats['membership_queries']
        self.metrics.membership_symbols = teacher_stats['membership_symbols']
        self.metrics.eq_membership_queries = teacher_stats['eq_membership_queries']
        self.metrics.equivalence_queries = teacher_stats['equivalence_queries']
        for k, v in teacher_stats.get('oracle_specific', {}).items():
            if isinstance(v, (int, float, str, bool)) or v is None:
                self.metrics.oracle_specific[k] = v

    def record_counterexample(self, word):
        """Record the length of one counterexample."""
        self.metrics.counterexamples_found += 1
        self.metrics.counterexample_lengths.append(len(word))

    def record_validation(self, accuracy: float, num_words: int, target_states: int):
        self.metrics.accuracy = accuracy
        self.metrics.validation_words = num_words
        self.metrics.target_states = target_states

    def get_metrics(self) -> LearningMetrics:
        """Get the collected metrics."""
        return self.metrics


@dataclass
class BenchmarkResults:
    """Metrics of every run, keyed by target and oracle name."""

    results: Dict[str, Dict[str, List[LearningMetrics]]] = field(default_factory=dict)

    def add_result(self, target: str, oracle_name: str, metrics: LearningMetrics):
        """Append the metrics of one run."""
        self.results.setdefault(target, {}).setdefault(oracle_name, []).append(metrics)

    def to_dataframe(self) -> pd.DataFrame:
        """One DataFrame row per run, oracle-specific values prefixed with ``oracle_``."""
        data = []
        for target, oracle_results in self.results.items():
            for oracle_name, metrics_list in oracle_results.items():
                for i, metrics in enumerate(metrics_list):
                    row = {
                        'target': target,
                        'oracle': oracle_name,
                        'run': i,
                        'total_time': metrics.total_time,
                        'membership_queries': metrics.membership_queries,
                        'membership_symbols': metrics.membership_symbols,
                        'eq_membership_queries': metrics.eq_membership_queries,
                        'equivalence_queries': metrics.equivalence_queries,
                        'counterexamples': metrics.counterexamples_found,
                        'column_refinements': metrics.column_refinements,
                        'prefix_refinements': metrics.prefix_refinements,
                        'num_states': metrics.num_states,
                        'target_states': metrics.target_states,
                        'minimal': metrics.minimal,
                        'accuracy': metrics.accuracy,
                        'learning_successful': metrics.learning_successful,
                        'avg_counterexample_length': metrics.avg_counterexample_length,
                        'queries_per_state': metrics.queries_per_state,
                        'iterations': metrics.iterations,
                        'obs_table_s': metrics.observation_table_size[0],
                        'obs_table_long': metrics.observation_table_size[1],
                        'obs_table_e': metrics.observation_table_size[2],
                    }

                    # Add oracle-specific metrics
                    for k, v in metrics.oracle_specific.items():
                        row[f'oracle_{k}'] = v

                    data.append(row)

        return pd.DataFrame(data)

    def export_to_csv(self, path: Path):
        """Export results to CSV file."""
        df = self.to_dataframe()
        df.to_csv(path, index=False)

    def save_to_json(self, path: Path):
        """Save raw results to JSON file."""
        serializable_results = {
            target: {
                oracle_name: [m.to_dict() for m in metrics_list]
                for oracle_name, metrics_list in oracle_results.items()
            }
            for target, oracle_results in self.results.items()
        }

        with open(path, 'w') as f:
            json.dump(serializable_results, f, indent=2, default=str)

    def print_summary(self):
        """Print per-target means grouped by oracle."""
        df = self.to_dataframe()

        print("\n" + "="*80)
        print("BENCHMARK RESULTS SUMMARY")
        print("="*80)

        if df.empty:
            print("No results recorded")
            print("="*80)
            return

        for target in df['target'].unique():
            print(f"\nTarget: {target}")
            print("-" * 60)

            target_df = df[df['target'] == target]

            summary = target_df.groupby('oracle').agg({
                'total_time': 'mean',
                'accuracy': 'mean',
                'membership_queries': 'mean',
                'eq_membership_queries': 'mean',
                'num_states': 'mean',
                'learning_successful': 'mean'
            }).round(3)

            # Display names
            summary.columns = [
                'Avg Time (s)',
                'Accuracy',
                'Avg MQs',
                'Avg EQ MQs',
                'Avg States',
                'Success Rate'
            ]

            print(summary.to_string())

        print("\n" + "="*80)

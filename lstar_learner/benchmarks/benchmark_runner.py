"""
Benchmark runner for comparing equivalence oracles and counterexample strategies.

This module orchestrates the benchmarking process, running L* on example
targets with different equivalence oracles and collecting metrics.
"""

import dataclasses
import traceback
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .metrics import BenchmarkResults, LearningMetrics, MetricsCollector
from ..config import LearnerConfig, OracleConfig, OracleType, get_default_configs
from ..core.automaton import DeterministicAutomaton
from ..core.lstar import LEARNERS
from ..core.refinement import CounterexampleStrategy
from ..targets.examples import TARGETS, Target, get_target

# Oracles whose test words do not depend on a seed
DETERMINISTIC_ORACLES = {OracleType.W_METHOD, OracleType.BFS}


def validate_hypothesis(hypothesis: DeterministicAutomaton, target: Target,
                        max_length: int) -> Tuple[float, int]:
    """
    Compare hypothesis and reference model on every word up to ``max_length``.

    Returns:
        (accuracy, number of words compared)
    """
    total = 0
    agree = 0
    for word in target.alphabet.words(max_length):
        total += 1
        if hypothesis.compute_output(word) == target.model.compute_output(word):
            agree += 1
    return agree / max(1, total), total


def run_single_learning(target: Target, config: LearnerConfig,
                        validation_length: int = 6) -> Tuple[LearningMetrics, Optional[DeterministicAutomaton]]:
    """Learn one target with one configuration and collect its metrics."""
    collector = MetricsCollector()
    collector.start_learning()

    teacher = target.make_teacher(
        oracle_type=config.oracle.oracle_type.value,
        oracle_params=config.oracle.oracle_params(),
        use_cache=config.use_cache,
        verbose=config.verbose,
    )
    learner = LEARNERS[config.semantics.value](
        teacher,
        counterexample_strategy=config.counterexample_strategy,
        verbose=config.verbose,
    )

    try:
        hypothesis = learner.run()
    except Exception as e:
        collector.end_learning(successful=False, failure_reason=f"{type(e).__name__}: {e}")
        return collector.get_metrics(), None
    collector.end_learning(successful=True)

    collector.record_learner(learner.get_statistics())
    collector.record_teacher(teacher.get_statistics())
    for counterexample in learner.counterexamples:
        collector.record_counterexample(counterexample.word)

    accuracy, num_words = validate_hypothesis(hypothesis, target, validation_length)
    collector.record_validation(accuracy, num_words, target.model.minimize().size())
    return collector.get_metrics(), hypothesis


def _run_task(args):
    """Execute a single learning task (picklable for process pools)."""
    target_name, oracle_name, config, run_num, validation_length = args
    try:
        metrics, hypothesis = run_single_learning(get_target(target_name), config, validation_length)
        dot = hypothesis.to_dot() if hypothesis is not None else None
    except Exception as e:
        metrics = LearningMetrics(failure_reason=str(e) + "\n" + traceback.format_exc())
        dot = None
    return target_name, oracle_name, run_num, metrics, dot


class BenchmarkRunner:
    """Orchestrates benchmark execution across different configurations."""

    def __init__(self, output_dir: Optional[str] = "benchmark_results",
                 validation_length: int = 6,
                 num_workers: int = 1,
                 save_dot: bool = False):
        """
        Initialize benchmark runner.

        Args:
            output_dir: Directory to save results (None to keep results in memory)
            validation_length: Maximum word length for validation against the target
            num_workers: Number of parallel worker processes (1 for sequential)
            save_dot: Write every learned hypothesis as a DOT file
        """
        self.output_dir = Path(output_dir) if output_dir else None
        self.validation_length = validation_length
        self.num_workers = max(1, num_workers)
        self.save_dot = save_dot
        self.results = BenchmarkResults()
        self.hypotheses: Dict[Tuple[str, str, int], str] = {}

    def run_default_benchmark(self):
        """Run every example target with every default oracle."""
        return self.run_benchmark(list(TARGETS), get_default_configs())

    def run_benchmark(self,
                      targets: List[str],
                      oracle_configs: Dict[str, OracleConfig],
                      num_runs: int = 3,
                      counterexample_strategy=CounterexampleStrategy.RIVEST_SCHAPIRE,
                      use_cache: bool = False,
                      verbose: bool = False) -> BenchmarkResults:
        """
        Run benchmark.

        Args:
            targets: Names of example targets to learn
            oracle_configs: Dictionary of oracle configurations
            num_runs: Number of runs per randomized configuration
            counterexample_strategy: Counterexample processing for every run
            use_cache: Cache membership answers
            verbose: Let learner and oracles print their progress

        Returns:
            BenchmarkResults object with all metrics
        """
        print("=" * 80)
        print("Starting L* Benchmark")
        print(f"Workers: {self.num_workers} {'(parallel)' if self.num_workers > 1 else '(sequential)'}")
        print(f"Targets: {targets}")
        print(f"Oracles: {list(oracle_configs.keys())}")
        print(f"Runs per randomized config: {num_runs}")
        print(f"Validation: all words up to length {self.validation_length}")
        print("=" * 80)

        tasks = []
        for target_name in targets:
            target = get_target(target_name)
            for oracle_name, oracle_config in oracle_configs.items():
                oracle_config.validate()
                runs = 1 if oracle_config.oracle_type in DETERMINISTIC_ORACLES else num_runs
                for run in range(runs):
                    oracle = dataclasses.replace(oracle_config, seed=oracle_config.seed + run)
                    config = LearnerConfig(
                        semantics=target.semantics,
                        counterexample_strategy=counterexample_strategy,
                        use_cache=use_cache,
                        verbose=verbose,
                        oracle=oracle,
                    ).validate()
                    tasks.append((target_name, oracle_name, config, run, self.validation_length))

        total = len(tasks)
        print(f"\nTotal experiments: {total}")

        if self.num_workers > 1:
            with ProcessPoolExecutor(max_workers=self.num_workers) as executor:
                futures = [executor.submit(_run_task, task) for task in tasks]
                for completed, future in enumerate(as_completed(futures), 1):
                    self._record(completed, total, *future.result())
        else:
            for completed, task in enumerate(tasks, 1):
                self._record(completed, total, *_run_task(task))

        self._save_final_results()
        return self.results

    def _record(self, completed: int, total: int, target: str, oracle: str,
                run: int, metrics: LearningMetrics, dot: Optional[str]):
        self.results.add_result(target, oracle, metrics)
        if dot is not None:
            self.hypotheses[(target, oracle, run)] = dot

        if metrics.learning_successful:
            print(f"[{completed}/{total}] ✅ {target}/{oracle}/run_{run+1} "
                  f"({metrics.num_states} states, accuracy {metrics.accuracy:.3f}, "
                  f"{metrics.total_time:.2f}s)")
        else:
            reason = (metrics.failure_reason or "").splitlines()[:1]
            print(f"[{completed}/{total}] ❌ {target}/{oracle}/run_{run+1} "
                  f"(FAILED: {reason[0] if reason else 'unknown'})")

    def _save_final_results(self):
        """Write CSV, JSON and optional DOT files to the output directory."""
        if self.output_dir is None:
            return
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.results.export_to_csv(self.output_dir / "results.csv")
        self.results.save_to_json(self.output_dir / "results.json")

        if self.save_dot and self.hypotheses:
            dot_dir = self.output_dir / "hypotheses"
            dot_dir.mkdir(exist_ok=True)
            for (target, oracle, run), dot in self.hypotheses.items():
                (dot_dir / f"{target}_{oracle}_run{run+1}.dot").write_text(dot)

        print(f"\nResults saved to {self.output_dir}")

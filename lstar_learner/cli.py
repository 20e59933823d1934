"""
Command-line entry point for learning the example targets.

Usage:
    lstar-learn [options]
    lstar-learn --targets angluin mealy_abc --oracles w_method
    lstar-learn --targets moore_abc --dot --verbose
"""

import argparse
import sys
import time
from typing import Dict, List, Optional

from .benchmarks.benchmark_runner import BenchmarkRunner
from .config import OracleConfig, OracleType, get_default_configs
from .core.errors import LStarError
from .core.refinement import CounterexampleStrategy
from .targets.examples import TARGETS


def print_header():
    """Print the run header."""
    print("=" * 70)
    print("L* Active Automata Learning")
    print("=" * 70)


def parse_oracle_configs(oracle_names: Optional[List[str]],
                         depth: Optional[int] = None,
                         seed: Optional[int] = None) -> Dict[str, OracleConfig]:
    """Select oracle configurations and apply command-line overrides."""
    all_configs = get_default_configs()
    names = oracle_names or ["w_method"]
    configs = {name: all_configs[name] for name in names}

    for config in configs.values():
        if depth is not None:
            if config.oracle_type == OracleType.W_METHOD:
                config.exploration_depth = depth
            elif config.oracle_type == OracleType.BFS:
                config.max_depth = depth
        if seed is not None:
            config.seed = seed
    return configs


def print_results_summary(results, targets: List[str], oracle_names: List[str]):
    """Print one line per target with the states and accuracy per oracle."""
    print("\n" + "=" * 70)
    print("LEARNING RESULTS SUMMARY")
    print("=" * 70)

    print(f"{'Target':<18}", end="")
    for oracle in oracle_names:
        print(f"{oracle:<20}", end="")
    print()
    print("-" * (18 + 20 * len(oracle_names)))

    for target in targets:
        print(f"{target:<18}", end="")
        target_results = results.results.get(target, {})
        for oracle in oracle_names:
            runs = target_results.get(oracle, [])
            if not runs:
                print(f"{'- N/A':<20}", end="")
                continue
            metrics = runs[0]
            if not metrics.learning_successful:
                print(f"{'❌ FAIL':<20}", end="")
                continue
            symbol = "✅" if metrics.minimal and metrics.accuracy == 1.0 else "⚠️"
            cell = f"{symbol} {metrics.num_states:>2}s {metrics.accuracy:>6.1%}"
            print(f"{cell:<20}", end="")
        print()

    print("\nLegend:")
    print("  ✅ = Minimal and equivalent on all validated words")
    print("  ⚠️  = Different number of states or disagreement")
    print("  ❌ = Learning failed")
    print("  Format: [symbol] [states]s [accuracy]")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lstar-learn",
        description="Learn example DFA, Mealy and Moore targets with L*",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Learn every example target with the W-method oracle
  lstar-learn

  # Compare oracles on specific targets
  lstar-learn --targets angluin even_a_ends_b --oracles w_method bfs random_wp

  # Classic Angluin counterexample handling, deeper W-method exploration
  lstar-learn --strategy all_prefixes --depth 5

  # Print the learned Moore machine as DOT
  lstar-learn --targets moore_abc --dot
        """
    )

    parser.add_argument(
        '--targets',
        nargs='+',
        choices=sorted(TARGETS),
        default=None,
        help='Targets to learn. Default: all example targets'
    )
    parser.add_argument(
        '--oracles',
        nargs='+',
        choices=['w_method', 'bfs', 'random_wp'],
        default=None,
        help='Equivalence oracles to use. Default: w_method'
    )
    parser.add_argument(
        '--depth',
        type=int,
        default=None,
        help='W-method exploration depth or BFS maximum depth'
    )
    parser.add_argument(
        '--strategy',
        choices=[s.value for s in CounterexampleStrategy],
        default=CounterexampleStrategy.RIVEST_SCHAPIRE.value,
        help='Counterexample processing (default: rivest_schapire)'
    )
    parser.add_argument(
        '--runs',
        type=int,
        default=1,
        help='Number of runs per randomized oracle (default: 1)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Seed for the random W_p oracle'
    )
    parser.add_argument(
        '--validation-length',
        type=int,
        default=6,
        help='Validate against the target on all words up to this length (default: 6)'
    )
    parser.add_argument(
        '--cache',
        action='store_true',
        help='Cache membership query answers'
    )
    parser.add_argument(
        '--output-dir',
        type=str,
        default=None,
        help='Write results.csv and results.json to this directory'
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=1,
        help='Number of parallel worker processes (default: 1)'
    )
    parser.add_argument(
        '--dot',
        action='store_true',
        help='Print every learned hypothesis in DOT format'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print learner and oracle progress'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with command line interface."""
    args = build_parser().parse_args(argv)

    targets = args.targets or list(TARGETS)
    try:
        oracle_configs = parse_oracle_configs(args.oracles, args.depth, args.seed)
        for config in oracle_configs.values():
            config.validate()
    except LStarError as e:
        print(f"Error: {e}")
        return 2

    print_header()
    print(f"\nConfiguration:")
    print(f"  Targets: {', '.join(targets)}")
    print(f"  Oracles: {', '.join(oracle_configs.keys())}")
    print(f"  Counterexample strategy: {args.strategy}")
    print()

    runner = BenchmarkRunner(
        output_dir=args.output_dir,
        validation_length=args.validation_length,
        num_workers=args.workers,
        save_dot=args.dot,
    )

    start_time = time.time()
    try:
        results = runner.run_benchmark(
            targets=targets,
            oracle_configs=oracle_configs,
            num_runs=args.runs,
            counterexample_strategy=args.strategy,
            use_cache=args.cache,
            verbose=args.verbose,
        )
    except KeyboardInterrupt:
        print("\n\nLearning interrupted by user.")
        return 1
    except LStarError as e:
        print(f"\n\nError during learning: {e}")
        return 1

    print_results_summary(results, targets, list(oracle_configs.keys()))

    if args.dot:
        for (target, oracle, run), dot in runner.hypotheses.items():
            print(f"\n// {target} / {oracle} / run {run + 1}")
            print(dot)

    print(f"\nTotal time: {time.time() - start_time:.2f} seconds")
    failed = any(
        not m.learning_successful
        for oracle_results in results.results.values()
        for runs in oracle_results.values()
        for m in runs
    )
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())

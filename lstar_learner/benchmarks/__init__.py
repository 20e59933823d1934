"""
Benchmarking framework for comparing equivalence oracles and counterexample
strategies in L* learning.
"""

from .benchmark_runner import BenchmarkRunner, run_single_learning, validate_hypothesis
from .metrics import BenchmarkResults, LearningMetrics, MetricsCollector

__all__ = [
    "BenchmarkRunner",
    "run_single_learning",
    "validate_hypothesis",
    "MetricsCollector",
    "LearningMetrics",
    "BenchmarkResults"
]

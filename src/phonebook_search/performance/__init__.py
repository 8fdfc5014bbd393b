"""
performance - Running and reporting the search strategies.

    runner      - Strategy runner state machine with timeout fallback,
                  plus the hash-table specialisation
    benchmarks  - Fixed strategy list, sequential driver, CSV / plot /
                  Markdown output
"""

from phonebook_search.performance.benchmarks import BenchmarkDriver, build_strategies
from phonebook_search.performance.runner import (
    HashTableRunner,
    RunResult,
    RunState,
    StrategyRunner,
)

__all__ = [
    "BenchmarkDriver",
    "build_strategies",
    "StrategyRunner",
    "HashTableRunner",
    "RunResult",
    "RunState",
]

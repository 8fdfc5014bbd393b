"""
===============================================================================
PHONE BOOK BENCHMARK - Driver Tests
===============================================================================
End-to-end runs of the fixed strategy list: run order, console report,
empty query sets, abort on a missing fallback, and the CSV / plot / Markdown
outputs.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pandas as pd
import pytest

from phonebook_search.core.entry import Entry
from phonebook_search.core.errors import MissingFallbackError, PreparationTimedOut
from phonebook_search.performance.benchmarks import (
    RESULT_COLUMNS, BenchmarkDriver, build_strategies,
)
from phonebook_search.performance.runner import HashTableRunner, StrategyRunner
from phonebook_search.preparation.preparators import Preparator
from phonebook_search.search.algorithms import JUMP_SEARCH, LINEAR_SEARCH


def _always_times_out(entries, budget):
    raise PreparationTimedOut(1.0, 0.0)


STUBBORN_SORT = Preparator("stubborn sort", "Sorting", _always_times_out)


@pytest.fixture
def scenario():
    return (Entry("1", "Bob"), Entry("2", "Al"), Entry("3", "Cy"))


@pytest.fixture
def lines():
    return []


@pytest.fixture
def degraded_driver(scenario, lines):
    baseline = StrategyRunner(LINEAR_SEARCH)
    strategies = [baseline, StrategyRunner(JUMP_SEARCH, STUBBORN_SORT, fallback=baseline)]
    return BenchmarkDriver(scenario, ["Al", "ob"], strategies=strategies, echo=lines.append)


# =============================================================================
# Strategy list
# =============================================================================

class TestBuildStrategies:

    def test_fixed_order(self):
        strategies = build_strategies()
        assert [s.configured_name for s in strategies] == [
            "linear search",
            "bubble sort + jump search",
            "quick sort + binary search",
            "hash table",
        ]

    def test_only_bubble_sort_has_fallback(self):
        baseline, bubble, quick, hashed = build_strategies()
        assert bubble.fallback is baseline
        assert baseline.fallback is None
        assert quick.fallback is None
        assert isinstance(hashed, HashTableRunner)
        assert hashed.fallback is None

    def test_fresh_runners_each_call(self):
        assert build_strategies()[0] is not build_strategies()[0]


# =============================================================================
# Running
# =============================================================================

class TestRunAll:

    def test_scenario(self, scenario, lines):
        driver = BenchmarkDriver(scenario, ["Al"], echo=lines.append)
        results = driver.run_all()
        assert len(results) == 4
        assert all((r.found, r.total) == (1, 1) for r in results)
        assert [r.configured_name for r in results] == [
            "linear search",
            "bubble sort + jump search",
            "quick sort + binary search",
            "hash table",
        ]

    def test_report_layout(self, scenario, lines):
        BenchmarkDriver(scenario, ["Al"], echo=lines.append).run_all()
        assert lines[0] == "Start searching (linear search)..."
        assert lines[1].startswith("Found 1 / 1 entries. Time taken: ")
        assert lines[2] == ""
        assert lines[3] == "Start searching (bubble sort + jump search)..."
        assert lines[5].startswith("Sorting time: ")
        assert lines[6].startswith("Searching time: ")
        assert "Start searching (hash table)..." in lines
        assert any(line.startswith("Creating time: ") for line in lines)

    def test_empty_query_set(self, scenario, lines):
        results = BenchmarkDriver(scenario, [], echo=lines.append).run_all()
        assert all((r.found, r.total) == (0, 0) for r in results)
        assert sum(line.startswith("Found 0 / 0 entries.") for line in lines) == 4

    def test_empty_directory(self, lines):
        results = BenchmarkDriver((), ["Al"], echo=lines.append).run_all()
        assert all(r.found == 0 for r in results)

    def test_degraded_run_reported(self, degraded_driver, lines):
        results = degraded_driver.run_all()
        assert results[1].name == "stubborn sort + linear search"
        assert results[1].found == 2
        assert any(line.endswith("STOPPED, moved to linear search") for line in lines)

    def test_missing_fallback_ends_benchmark(self, scenario, lines):
        strategies = [
            StrategyRunner(LINEAR_SEARCH),
            StrategyRunner(JUMP_SEARCH, STUBBORN_SORT),
            HashTableRunner(),
        ]
        driver = BenchmarkDriver(scenario, ["Al"], strategies=strategies, echo=lines.append)
        with pytest.raises(MissingFallbackError):
            driver.run_all()
        assert len(driver.results) == 1
        assert "Start searching (hash table)..." not in lines


# =============================================================================
# Output files
# =============================================================================

class TestOutputs:

    def test_dataframe(self, degraded_driver):
        degraded_driver.run_all()
        df = degraded_driver.to_dataframe()
        assert list(df.columns) == RESULT_COLUMNS
        assert len(df) == 2
        assert df.loc[1, "interrupted"]
        assert df.loc[1, "fallback"] == "linear search"
        assert df.loc[0, "duration_s"] == pytest.approx(
            df.loc[0, "preparation_s"] + df.loc[0, "search_s"]
        )

    def test_dataframe_before_running_is_empty(self, scenario):
        df = BenchmarkDriver(scenario, ["Al"], echo=lambda line: None).to_dataframe()
        assert df.empty
        assert list(df.columns) == RESULT_COLUMNS

    def test_save_results(self, degraded_driver, tmp_path):
        degraded_driver.run_all()
        degraded_driver.save_results(str(tmp_path))
        assert (tmp_path / "results.csv").exists()
        assert (tmp_path / "durations_bar.png").exists()
        saved = pd.read_csv(tmp_path / "results.csv")
        assert list(saved["strategy"]) == ["linear search", "stubborn sort + linear search"]

    def test_generate_report(self, degraded_driver, tmp_path):
        degraded_driver.run_all()
        degraded_driver.save_results(str(tmp_path))
        report = BenchmarkDriver.generate_report(str(tmp_path))
        assert report.startswith("# Phone Book Search Benchmark Report")
        assert "| linear search | 2 / 2 |" in report
        assert "stopped, moved to linear search" in report
        assert (tmp_path / "report.md").read_text() == report

    def test_generate_report_requires_results(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            BenchmarkDriver.generate_report(str(tmp_path))

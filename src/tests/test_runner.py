"""
===============================================================================
PHONE BOOK BENCHMARK - Strategy Runner Tests
===============================================================================
The preparation / search state machine: the normal path, the fallback
substitution after a timeout, the fatal missing-fallback case, naming and
timing of degraded runs, and the hash-table specialisation.

Budget-driven timeouts use a clock that ticks one second per reading, so the
number of bubble-sort passes before the budget trips is exact.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from phonebook_search.core.entry import Entry
from phonebook_search.core.errors import MissingFallbackError, PreparationTimedOut
from phonebook_search.performance.runner import (
    HashTableRunner, RunState, StrategyRunner,
)
from phonebook_search.preparation.preparators import BUBBLE_SORT, QUICK_SORT, Preparator
from phonebook_search.search.algorithms import BINARY_SEARCH, JUMP_SEARCH, LINEAR_SEARCH


class TickingClock:
    """Returns 0, 1, 2, ... on successive readings."""

    def __init__(self):
        self.now = -1.0

    def __call__(self):
        self.now += 1.0
        return self.now


def _always_times_out(entries, budget):
    raise PreparationTimedOut(1.0, 0.0)


STUBBORN_SORT = Preparator("stubborn sort", "Sorting", _always_times_out)


@pytest.fixture
def scenario():
    return (Entry("1", "Bob"), Entry("2", "Al"), Entry("3", "Cy"))


@pytest.fixture
def unsorted_entries():
    return (Entry("1", "Zed"), Entry("2", "Al"), Entry("3", "Bob"))


def completed_baseline(entries, queries, clock=None):
    baseline = StrategyRunner(LINEAR_SEARCH) if clock is None else StrategyRunner(LINEAR_SEARCH, clock=clock)
    baseline.run(entries, queries)
    return baseline


# =============================================================================
# Normal path
# =============================================================================

class TestNormalPath:

    def test_baseline(self, scenario):
        runner = StrategyRunner(LINEAR_SEARCH)
        assert runner.state is RunState.IDLE
        result = runner.run(scenario, ["Al"])
        assert runner.state is RunState.DONE
        assert (result.found, result.total) == (1, 1)
        assert result.name == "linear search"
        assert result.operation is None
        assert not result.interrupted
        assert len(result.report_lines()) == 1

    @pytest.mark.parametrize("search, preparator, name", [
        (JUMP_SEARCH, BUBBLE_SORT, "bubble sort + jump search"),
        (BINARY_SEARCH, QUICK_SORT, "quick sort + binary search"),
    ])
    def test_sorted_strategies_find_scenario_key(self, scenario, search, preparator, name):
        runner = StrategyRunner(search, preparator)
        result = runner.run(scenario, ["Al", "Cy", "Bob", "Dan"])
        assert result.found == 3
        assert result.name == name
        assert result.operation == "Sorting"
        assert runner.active_search is search

    def test_state_is_preparing_during_preparation(self, scenario):
        seen = []

        def spy(entries, budget):
            seen.append(runner.state)
            return tuple(sorted(entries))

        runner = StrategyRunner(BINARY_SEARCH, Preparator("spy sort", "Sorting", spy))
        runner.run(scenario, ["Al"])
        assert seen == [RunState.PREPARING]
        assert runner.state is RunState.DONE

    def test_duration_is_preparation_plus_search(self, scenario):
        runner = StrategyRunner(JUMP_SEARCH, BUBBLE_SORT, clock=TickingClock())
        result = runner.run(scenario, ["Al"])
        # start/stop each read the clock once
        assert result.preparation_duration == 1.0
        assert result.search_duration == 1.0
        assert result.duration == 2.0

    def test_no_budget_without_fallback(self, scenario):
        budgets = []

        def spy(entries, budget):
            budgets.append(budget)
            return entries

        StrategyRunner(LINEAR_SEARCH, Preparator("spy", "Sorting", spy)).run(scenario, [])
        assert budgets == [None]

    def test_empty_query_set(self, scenario):
        result = StrategyRunner(JUMP_SEARCH, BUBBLE_SORT).run(scenario, [])
        assert (result.found, result.total) == (0, 0)
        assert result.report_lines()[0].startswith("Found 0 / 0 entries.")


# =============================================================================
# Fallback on timeout
# =============================================================================

class TestFallback:

    def test_degraded_run_equals_direct_fallback_run(self, unsorted_entries):
        queries = ["Al", "ob", "Zed", "Nobody"]
        baseline = completed_baseline(unsorted_entries, queries)

        runner = StrategyRunner(JUMP_SEARCH, STUBBORN_SORT, fallback=baseline)
        result = runner.run(unsorted_entries, queries)

        direct = StrategyRunner(LINEAR_SEARCH).run(unsorted_entries, queries)
        assert result.found == direct.found == 3
        assert result.name == "stubborn sort + linear search"
        assert result.configured_name == "stubborn sort + jump search"
        assert result.interrupted
        assert result.fallback_name == "linear search"
        assert runner.active_search is LINEAR_SEARCH
        assert runner.state is RunState.DONE

    def test_report_annotates_substitution(self, unsorted_entries):
        baseline = completed_baseline(unsorted_entries, ["Al"])
        result = StrategyRunner(JUMP_SEARCH, STUBBORN_SORT, fallback=baseline).run(unsorted_entries, ["Al"])
        lines = result.report_lines()
        assert len(lines) == 3
        assert lines[1].startswith("Sorting time: ")
        assert lines[1].endswith(" - STOPPED, moved to linear search")
        assert lines[2].startswith("Searching time: ")

    def test_name_before_and_after_substitution(self, unsorted_entries):
        baseline = completed_baseline(unsorted_entries, ["Al"])
        runner = StrategyRunner(JUMP_SEARCH, STUBBORN_SORT, fallback=baseline)
        assert runner.name == "stubborn sort + jump search"
        runner.run(unsorted_entries, ["Al"])
        assert runner.name == "stubborn sort + linear search"

    def test_logs_substitution_warning(self, unsorted_entries, caplog):
        baseline = completed_baseline(unsorted_entries, ["Al"])
        with caplog.at_level("WARNING"):
            StrategyRunner(JUMP_SEARCH, STUBBORN_SORT, fallback=baseline).run(unsorted_entries, ["Al"])
        assert "moved to linear search" in caplog.text

    def test_bubble_sort_times_out_against_baseline_budget(self):
        clock = TickingClock()
        entries = tuple(Entry(str(i), f"n{30 - i:02d}") for i in range(30))
        queries = ["n05", "n17"]
        baseline = completed_baseline(entries, queries, clock)
        # Baseline: 1 s preparation + 1 s search -> budget 20 s.
        assert baseline.result.duration == 2.0

        runner = StrategyRunner(JUMP_SEARCH, BUBBLE_SORT, fallback=baseline, clock=clock)
        result = runner.run(entries, queries)
        # 29 passes, one clock reading per check: trips on the 21st check.
        assert result.interrupted
        assert result.preparation_duration == 22.0
        assert result.name == "bubble sort + linear search"
        assert result.found == 2

    def test_bubble_sort_within_budget_keeps_jump_search(self):
        clock = TickingClock()
        entries = tuple(Entry(str(i), f"n{10 - i:02d}") for i in range(10))
        baseline = completed_baseline(entries, ["n05"], clock)

        runner = StrategyRunner(JUMP_SEARCH, BUBBLE_SORT, fallback=baseline, clock=clock)
        result = runner.run(entries, ["n05"])
        assert not result.interrupted
        assert result.name == "bubble sort + jump search"
        assert result.found == 1

    def test_budget_is_ten_times_baseline_total(self, unsorted_entries):
        budgets = []

        def spy(entries, budget):
            budgets.append(budget)
            return tuple(sorted(entries))

        baseline = completed_baseline(unsorted_entries, ["Al"], TickingClock())
        StrategyRunner(JUMP_SEARCH, Preparator("spy", "Sorting", spy), fallback=baseline).run(unsorted_entries, ["Al"])
        assert budgets[0].allowed_duration == 10 * baseline.result.duration


# =============================================================================
# Error paths
# =============================================================================

class TestErrors:

    def test_timeout_without_fallback_is_fatal(self, scenario):
        runner = StrategyRunner(JUMP_SEARCH, STUBBORN_SORT)
        with pytest.raises(MissingFallbackError):
            runner.run(scenario, ["Al"])
        assert runner.result is None
        assert runner.state is RunState.TIMED_OUT
        assert runner.interrupted

    def test_fallback_must_run_first(self, scenario):
        baseline = StrategyRunner(LINEAR_SEARCH)
        runner = StrategyRunner(JUMP_SEARCH, BUBBLE_SORT, fallback=baseline)
        with pytest.raises(RuntimeError, match="must run first"):
            runner.run(scenario, ["Al"])
        assert runner.state is RunState.IDLE

        baseline.run(scenario, ["Al"])
        assert runner.run(scenario, ["Al"]).found == 1

    def test_failing_preparation_stops_timer(self, scenario):
        def broken(entries, budget):
            raise ValueError("corrupt directory")

        runner = StrategyRunner(BINARY_SEARCH, Preparator("broken sort", "Sorting", broken), clock=TickingClock())
        with pytest.raises(ValueError, match="corrupt directory"):
            runner.run(scenario, ["Al"])
        assert not runner.preparation_timer.running
        assert runner.preparation_timer.duration == 1.0
        assert not runner.interrupted
        assert runner.result is None

    def test_runs_only_once(self, scenario):
        runner = StrategyRunner(LINEAR_SEARCH)
        runner.run(scenario, ["Al"])
        with pytest.raises(RuntimeError, match="already used"):
            runner.run(scenario, ["Al"])


# =============================================================================
# Hash table strategy
# =============================================================================

class TestHashTableRunner:

    def test_finds_through_buckets(self):
        entries = (Entry("1", "Bob"), Entry("2", "Al"), Entry("3", "Cy"), Entry("4", "BM"))
        runner = HashTableRunner()
        result = runner.run(entries, ["Al", "BM", "Cy", "Dan"])
        assert result.found == 3
        assert result.name == "hash table"
        assert result.operation == "Creating"
        assert result.report_lines()[1].startswith("Creating time: ")

    def test_substring_outside_bucket_not_found(self, scenario):
        # Linear search alone would match "ob" inside "Bob"; the bucket of
        # "ob" does not contain it.
        result = HashTableRunner().run(scenario, ["ob"])
        assert result.found == 0

    def test_empty_query_set(self, scenario):
        result = HashTableRunner().run(scenario, [])
        assert (result.found, result.total) == (0, 0)

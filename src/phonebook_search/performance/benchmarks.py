"""
benchmarks.py - Benchmark driver for the phone book search strategies

Runs the fixed strategy list over one directory and one query set, strictly
in order, and reports each run before starting the next:

    1. linear search                 -- baseline, identity preparation
    2. bubble sort + jump search     -- falls back to (1) on timeout
    3. quick sort + binary search    -- no fallback
    4. hash table                    -- bucket-restricted linear search

The baseline must run first: its total duration sets the budget that lets
bubble sort give up and hand over to linear search.

Besides the console report, results are collected into a pandas DataFrame
that can be written out as CSV, a stacked bar chart of preparation vs search
time, and a Markdown report.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional, Sequence

import numpy as np
import pandas as pd
import matplotlib

matplotlib.use("Agg")  # Non-interactive backend for server / CI environments
import matplotlib.pyplot as plt

from phonebook_search.core.entry import Entry
from phonebook_search.core.timing import format_duration
from phonebook_search.preparation.preparators import BUBBLE_SORT, QUICK_SORT
from phonebook_search.performance.runner import HashTableRunner, RunResult, StrategyRunner
from phonebook_search.search.algorithms import BINARY_SEARCH, JUMP_SEARCH, LINEAR_SEARCH

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    "strategy", "found", "total", "duration_s", "preparation_s",
    "search_s", "operation", "interrupted", "fallback",
]


def build_strategies() -> List[StrategyRunner]:
    """The four benchmark runs, baseline first."""
    baseline = StrategyRunner(LINEAR_SEARCH)
    return [
        baseline,
        StrategyRunner(JUMP_SEARCH, BUBBLE_SORT, fallback=baseline),
        StrategyRunner(BINARY_SEARCH, QUICK_SORT),
        HashTableRunner(),
    ]


class BenchmarkDriver:
    """
    Runs every strategy sequentially over the same entries and queries.

    Parameters
    ----------
    entries : sequence of Entry
        The directory; shared read-only by every run.
    queries : sequence of str
        Lookup strings; shared read-only by every run.
    strategies : list of StrategyRunner, optional
        Defaults to :func:`build_strategies`.  Order matters: a runner's
        fallback must appear before it.
    echo : callable
        Sink for report lines, ``print`` by default.
    """

    def __init__(
        self,
        entries: Sequence[Entry],
        queries: Sequence[str],
        strategies: Optional[List[StrategyRunner]] = None,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.entries = tuple(entries)
        self.queries = tuple(queries)
        self.strategies = strategies if strategies is not None else build_strategies()
        self._echo = echo
        self.results: List[RunResult] = []

    def run_all(self) -> List[RunResult]:
        """
        Run and report every strategy in order.

        A :class:`MissingFallbackError` from any run propagates and ends the
        benchmark; results of the runs before it stay in ``self.results``.
        """
        logger.info(
            "Benchmarking %d strategies over %d entries and %d queries",
            len(self.strategies), len(self.entries), len(self.queries),
        )
        for runner in self.strategies:
            self._echo(f"Start searching ({runner.configured_name})...")
            result = runner.run(self.entries, self.queries)
            self.results.append(result)
            for line in result.report_lines():
                self._echo(line)
            self._echo("")
        return self.results

    def to_dataframe(self) -> pd.DataFrame:
        rows = [result.to_row() for result in self.results]
        return pd.DataFrame(rows, columns=RESULT_COLUMNS)

    # ---- Output files ----------------------------------------------------

    def save_results(self, output_dir: str) -> pd.DataFrame:
        """
        Write ``results.csv`` and ``durations_bar.png`` to *output_dir*.

        Returns
        -------
        pd.DataFrame
            The table that was written.
        """
        os.makedirs(output_dir, exist_ok=True)
        df = self.to_dataframe()
        csv_path = os.path.join(output_dir, "results.csv")
        df.to_csv(csv_path, index=False)
        logger.info("Results saved to %s", csv_path)

        # --- Stacked preparation / search bar chart -------------------------
        fig, ax = plt.subplots(figsize=(10, 5))
        x = np.arange(len(df))
        ax.bar(x, df["preparation_s"], label="Preparation", color="salmon", edgecolor="black")
        ax.bar(x, df["search_s"], bottom=df["preparation_s"], label="Search",
               color="mediumseagreen", edgecolor="black")
        ax.set_xticks(x)
        ax.set_xticklabels(df["strategy"], rotation=20, ha="right")
        ax.set_ylabel("Time (s)")
        ax.set_title("Preparation vs Search Time by Strategy")
        ax.legend()
        plt.tight_layout()
        fig.savefig(os.path.join(output_dir, "durations_bar.png"), dpi=150)
        plt.close(fig)
        return df

    @staticmethod
    def generate_report(output_dir: str) -> str:
        """
        Generate a Markdown report from the ``results.csv`` written by
        :meth:`save_results`.

        Returns
        -------
        str
            The Markdown text (also written to ``output_dir/report.md``).
        """
        results_path = os.path.join(output_dir, "results.csv")
        if not os.path.exists(results_path):
            raise FileNotFoundError(
                f"{results_path} not found -- run save_results first."
            )

        results = pd.read_csv(results_path)

        lines = [
            "# Phone Book Search Benchmark Report",
            "",
            "## Results",
            "",
            "| Strategy | Found | Total time | Preparation | Search | Note |",
            "|----------|------:|-----------:|------------:|-------:|------|",
        ]
        for _, row in results.iterrows():
            note = ""
            if bool(row["interrupted"]):
                note = f"stopped, moved to {row['fallback']}"
            lines.append(
                f"| {row['strategy']} | {row['found']} / {row['total']} | "
                f"{format_duration(row['duration_s'])} | "
                f"{format_duration(row['preparation_s'])} | "
                f"{format_duration(row['search_s'])} | {note} |"
            )

        lines += [
            "",
            "## Timing Breakdown",
            "",
            "![Durations](durations_bar.png)",
            "",
            "---",
            "*Report generated by benchmarks.py*",
        ]

        report = "\n".join(lines)
        report_path = os.path.join(output_dir, "report.md")
        with open(report_path, "w") as fh:
            fh.write(report)
        logger.info("Report written to %s", report_path)
        return report

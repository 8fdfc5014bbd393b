"""
runner.py - Strategy runner: one preparation + one search, with fallback

A :class:`StrategyRunner` composes a :class:`Preparator` with a
:class:`SearchAlgorithm` and optionally a *fallback* runner (the linear
search baseline).  Its life is an explicit state machine:

    IDLE -> PREPARING -> PREPARED  -> SEARCHING -> DONE
                      \\-> TIMED_OUT -/

When a fallback is configured the preparation gets a :class:`Budget` of
``TIMEOUT_MULTIPLIER`` times the fallback's recorded total duration.  If the
preparation raises :class:`PreparationTimedOut`, the runner switches for good
to the fallback's search algorithm and searches the original, unprepared
entries.  Without a fallback the timeout is a configuration defect and
:class:`MissingFallbackError` is raised.

The time spent in an aborted preparation still counts toward the total.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from phonebook_search.core.entry import Entry
from phonebook_search.core.errors import MissingFallbackError, PreparationTimedOut
from phonebook_search.core.timing import TIMEOUT_MULTIPLIER, Budget, Timer, format_duration
from phonebook_search.preparation.preparators import HASH_TABLE, IDENTITY, HashTable, Preparator
from phonebook_search.search.algorithms import LINEAR_SEARCH, Preprocessor, SearchAlgorithm

logger = logging.getLogger(__name__)

HASH_TABLE_SEARCH = LINEAR_SEARCH.renamed("hash table")


class RunState(Enum):
    """Lifecycle of a single strategy run."""
    IDLE = auto()
    PREPARING = auto()
    PREPARED = auto()
    TIMED_OUT = auto()
    SEARCHING = auto()
    DONE = auto()


@dataclass(frozen=True)
class RunResult:
    """Metrics of one completed strategy run.

    Attributes
    ----------
    name : str
        Reported name; names the fallback search if one was substituted.
    configured_name : str
        Name the run was configured with, before any substitution.
    found, total : int
        Matched queries out of all queries.
    preparation_duration, search_duration : float
        Phase durations in seconds.
    operation : str or None
        Report verb of the preparation ("Sorting", "Creating"), ``None`` for
        runs without a reported preparation phase.
    interrupted : bool
        The preparation hit its budget and was abandoned.
    fallback_name : str or None
        Search algorithm switched to after an interruption.
    """
    name: str
    configured_name: str
    found: int
    total: int
    preparation_duration: float
    search_duration: float
    operation: Optional[str] = None
    interrupted: bool = False
    fallback_name: Optional[str] = None

    @property
    def duration(self) -> float:
        return self.preparation_duration + self.search_duration

    def report_lines(self) -> List[str]:
        lines = [
            f"Found {self.found} / {self.total} entries. "
            f"Time taken: {format_duration(self.duration)}"
        ]
        if self.operation is not None:
            preparation = f"{self.operation} time: {format_duration(self.preparation_duration)}"
            if self.interrupted:
                preparation += f" - STOPPED, moved to {self.fallback_name}"
            lines.append(preparation)
            lines.append(f"Searching time: {format_duration(self.search_duration)}")
        return lines

    def to_row(self) -> Dict[str, Any]:
        return {
            "strategy": self.name,
            "found": self.found,
            "total": self.total,
            "duration_s": self.duration,
            "preparation_s": self.preparation_duration,
            "search_s": self.search_duration,
            "operation": self.operation,
            "interrupted": self.interrupted,
            "fallback": self.fallback_name,
        }


class StrategyRunner:
    """
    Runs one preparation + search strategy over a query set.

    Parameters
    ----------
    search : SearchAlgorithm
        Primary search algorithm.
    preparator : Preparator
        Preparation step; ``IDENTITY`` for the unprepared baseline.
    fallback : StrategyRunner, optional
        Completed baseline runner.  Its total duration sets the preparation
        budget and its search algorithm replaces *search* on timeout.
    clock : callable
        Clock for both phase timers.
    """

    def __init__(
        self,
        search: SearchAlgorithm,
        preparator: Preparator = IDENTITY,
        fallback: Optional[StrategyRunner] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.search = search
        self.preparator = preparator
        self.fallback = fallback
        self._active_search = search
        self._state = RunState.IDLE
        self._interrupted = False
        self._result: Optional[RunResult] = None
        self.preparation_timer = Timer(clock)
        self.search_timer = Timer(clock)

    # -- introspection -----------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def active_search(self) -> SearchAlgorithm:
        return self._active_search

    @property
    def interrupted(self) -> bool:
        return self._interrupted

    @property
    def result(self) -> Optional[RunResult]:
        return self._result

    @property
    def name(self) -> str:
        return self._compose_name(self._active_search)

    @property
    def configured_name(self) -> str:
        return self._compose_name(self.search)

    def _compose_name(self, search: SearchAlgorithm) -> str:
        if self.preparator.operation is None:
            return search.name
        return f"{self.preparator.name} + {search.name}"

    # -- run ---------------------------------------------------------------

    def run(self, entries: Sequence[Entry], queries: Iterable[str]) -> RunResult:
        """
        Prepare, search every query, and return the run's metrics.

        Raises
        ------
        MissingFallbackError
            The preparation timed out and no fallback was configured.
        RuntimeError
            The runner was already used, or its fallback has not run yet.
        """
        if self._state is not RunState.IDLE:
            raise RuntimeError(f"{self.configured_name}: runner already used (state {self._state.name})")
        queries = tuple(queries)

        prepared = self._prepare(entries)
        search_entries, preprocess = self._search_plan(entries, prepared)

        self._state = RunState.SEARCHING
        logger.info("%s: searching %d queries", self.name, len(queries))
        self.search_timer.start()
        found = self._active_search.count(search_entries, queries, preprocess)
        self.search_timer.stop()
        self._state = RunState.DONE

        self._result = RunResult(
            name=self.name,
            configured_name=self.configured_name,
            found=found,
            total=len(queries),
            preparation_duration=self.preparation_timer.duration,
            search_duration=self.search_timer.duration,
            operation=self.preparator.operation,
            interrupted=self._interrupted,
            fallback_name=self._active_search.name if self._interrupted else None,
        )
        logger.info("%s: found %d / %d in %.3f s", self.name, found, len(queries), self._result.duration)
        return self._result

    def _budget(self) -> Optional[Budget]:
        if self.fallback is None:
            return None
        baseline = self.fallback.result
        if baseline is None:
            raise RuntimeError(
                f"{self.configured_name}: fallback '{self.fallback.configured_name}' must run first"
            )
        return Budget(self.preparation_timer, baseline.duration, TIMEOUT_MULTIPLIER)

    def _prepare(self, entries: Sequence[Entry]):
        budget = self._budget()
        if budget is not None:
            logger.debug("%s: preparation budget %.3f s", self.configured_name, budget.allowed_duration)
        self._state = RunState.PREPARING
        self.preparation_timer.start()
        try:
            try:
                prepared = self.preparator.prepare(entries, budget)
            finally:
                self.preparation_timer.stop()
        except PreparationTimedOut as exc:
            self._interrupted = True
            self._state = RunState.TIMED_OUT
            if self.fallback is None:
                raise MissingFallbackError(
                    f"{self.configured_name}: preparation timed out with no fallback configured"
                ) from exc
            self._active_search = self.fallback.search
            logger.warning(
                "%s: %s stopped after %.3f s, moved to %s",
                self.configured_name, self.preparator.name, exc.elapsed, self._active_search.name,
            )
            return entries
        self._state = RunState.PREPARED
        return prepared

    def _search_plan(self, entries: Sequence[Entry], prepared) -> Tuple[Sequence[Entry], Optional[Preprocessor]]:
        """Collection to search and the per-query preprocessing hook."""
        return prepared, None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, state={self._state.name})"


class HashTableRunner(StrategyRunner):
    """Linear search restricted per query to the bucket of the query's hash."""

    def __init__(
        self,
        search: SearchAlgorithm = HASH_TABLE_SEARCH,
        preparator: Preparator = HASH_TABLE,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        super().__init__(search, preparator, fallback=None, clock=clock)

    def _compose_name(self, search: SearchAlgorithm) -> str:
        return search.name

    def _search_plan(self, entries: Sequence[Entry], prepared: HashTable) -> Tuple[Sequence[Entry], Optional[Preprocessor]]:
        return entries, prepared.bucket

"""
timing.py - Elapsed-time measurement and preparation budgets

Timer
    Start / stop stopwatch over a monotonic clock.  ``elapsed()`` can be read
    while the timer runs, which is what lets a long preparation poll its own
    budget between units of work.

Budget
    Deadline derived from a baseline duration: a preparation may take at most
    ``TIMEOUT_MULTIPLIER`` times as long as the baseline run took in total.

All durations are float seconds.
"""

from __future__ import annotations

import time
from typing import Callable

from phonebook_search.core.errors import PreparationTimedOut

TIMEOUT_MULTIPLIER = 10


class Timer:
    """
    Stopwatch with a frozen duration after ``stop()``.

    Parameters
    ----------
    clock : callable, optional
        Zero-argument function returning the current instant in seconds.
        Defaults to :func:`time.perf_counter`; tests inject a fake clock.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._start: float = 0.0
        self._duration: float = 0.0
        self._running = False

    def start(self) -> None:
        """Record the current instant and reset the accumulated duration."""
        self._start = self._clock()
        self._duration = 0.0
        self._running = True

    def stop(self) -> float:
        """Freeze the duration as (now - start) and return it."""
        self._duration = self.elapsed()
        self._running = False
        return self._duration

    def elapsed(self) -> float:
        """Time since ``start()`` while running, else the frozen duration."""
        if self._running:
            return self._clock() - self._start
        return self._duration

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def running(self) -> bool:
        return self._running

    def __repr__(self) -> str:
        state = "running" if self._running else "stopped"
        return f"Timer({state}, elapsed={self.elapsed():.6f}s)"


class Budget:
    """
    Allowed duration for a preparation, measured on a reference timer.

    ``allowed_duration = baseline * multiplier``.  The budget never mutates;
    it only reads the reference timer.

    Parameters
    ----------
    timer : Timer
        The preparation timer being watched.
    baseline : float
        Reference duration in seconds (the baseline run's total time).
    multiplier : int
        Scale applied to the baseline, fixed at ``TIMEOUT_MULTIPLIER``.
    """

    def __init__(self, timer: Timer, baseline: float, multiplier: int = TIMEOUT_MULTIPLIER) -> None:
        self._timer = timer
        self._allowed = baseline * multiplier

    @property
    def allowed_duration(self) -> float:
        return self._allowed

    def check(self) -> None:
        """Raise :class:`PreparationTimedOut` once the timer is over budget."""
        elapsed = self._timer.elapsed()
        if elapsed > self._allowed:
            raise PreparationTimedOut(elapsed, self._allowed)

    def __repr__(self) -> str:
        return f"Budget(allowed={self._allowed:.6f}s)"


def format_duration(seconds: float) -> str:
    """Render seconds as ``"<m> min. <s> sec. <ms> ms."``; minutes wrap at 60."""
    total_ms = int(seconds * 1000)
    millis = total_ms % 1000
    secs = (total_ms // 1000) % 60
    minutes = (total_ms // 60_000) % 60
    return f"{minutes} min. {secs} sec. {millis} ms."

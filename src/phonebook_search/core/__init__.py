"""
core - Shared primitives for the phone book benchmark.

    entry   - Immutable directory record ordered by its value
    timing  - Elapsed-time Timer, preparation Budget, duration formatting
    errors  - Timeout and missing-fallback exceptions
"""

from phonebook_search.core.entry import Entry
from phonebook_search.core.errors import MissingFallbackError, PreparationTimedOut
from phonebook_search.core.timing import TIMEOUT_MULTIPLIER, Budget, Timer, format_duration

__all__ = [
    "Entry",
    "Timer",
    "Budget",
    "TIMEOUT_MULTIPLIER",
    "format_duration",
    "PreparationTimedOut",
    "MissingFallbackError",
]

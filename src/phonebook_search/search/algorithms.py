"""
Search algorithms over a directory of :class:`Entry` records.

Each algorithm is a :class:`SearchAlgorithm` value: a display name plus a
``find_entry(candidates, key) -> bool`` function.  The strategy runner holds
references to these values and swaps one for another on fallback; there is
no class hierarchy to extend.

Algorithms
----------
LINEAR_SEARCH  -- O(n) scan, substring match on ``Entry.value``.
JUMP_SEARCH    -- O(sqrt n) block hops over sorted input, exact match.
BINARY_SEARCH  -- O(log n) recursive halving over sorted input, exact match.

Preprocessing hook
------------------
``SearchAlgorithm.find`` accepts an optional ``preprocess(key)`` callable
returning the candidate subset to search.  The hash-table strategy uses it
to restrict a linear scan to one bucket; without it the whole collection is
searched.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from phonebook_search.core.entry import Entry

Preprocessor = Callable[[str], Sequence[Entry]]
FindEntry = Callable[[Sequence[Entry], str], bool]


@dataclass(frozen=True)
class SearchAlgorithm:
    """Named search function.

    Attributes
    ----------
    name : str
        Label used in reports ("linear search", "jump search", ...).
    find_entry : callable
        ``find_entry(candidates, key) -> bool``.
    """
    name: str
    find_entry: FindEntry

    def find(
        self,
        entries: Sequence[Entry],
        key: str,
        preprocess: Optional[Preprocessor] = None,
    ) -> bool:
        candidates = preprocess(key) if preprocess is not None else entries
        return self.find_entry(candidates, key)

    def count(
        self,
        entries: Sequence[Entry],
        queries: Iterable[str],
        preprocess: Optional[Preprocessor] = None,
    ) -> int:
        """Number of *queries* found in *entries*."""
        found = 0
        for key in queries:
            if self.find(entries, key, preprocess):
                found += 1
        return found

    def renamed(self, name: str) -> SearchAlgorithm:
        return SearchAlgorithm(name, self.find_entry)


# ---------------------------------------------------------------------------
# Linear search
# ---------------------------------------------------------------------------

def linear_search(entries: Sequence[Entry], key: str) -> bool:
    """True if *key* occurs as a substring of any entry's value."""
    for entry in entries:
        if key in entry.value:
            return True
    return False


# ---------------------------------------------------------------------------
# Jump search
# ---------------------------------------------------------------------------

def jump_search(entries: Sequence[Entry], key: str) -> bool:
    """
    Block-hopping search over entries sorted ascending by value.

    Hops ``floor(sqrt(n))`` positions at a time while the entry at the hop
    point is smaller than *key*; the final hop clamps to the last index.
    After overshooting, scans backward through the block just jumped over.
    The backward scan is clamped at index 0.
    """
    n = len(entries)
    if n == 0:
        return False
    block = max(1, math.isqrt(n))
    last = n - 1

    current = 0
    while True:
        value = entries[current].value
        if value == key:
            return True
        if value < key:
            if current == last:
                return False
            current = min(current + block, last)
            continue

        # Overshoot: the key, if present, lies inside the block just skipped.
        if current == 0:
            return False
        block_start = max(0, current - block + 1)
        for i in range(current - 1, block_start - 1, -1):
            if entries[i].value == key:
                return True
        return False


# ---------------------------------------------------------------------------
# Binary search
# ---------------------------------------------------------------------------

def _binary_search_step(entries: Sequence[Entry], key: str, left: int, right: int) -> bool:
    middle = (left + right) // 2
    current = entries[middle].value
    if current == key:
        return True
    if left == middle:
        # Interval is down to [left] or [left, right].
        return right != middle and entries[right].value == key
    if current > key:
        return _binary_search_step(entries, key, left, middle)
    return _binary_search_step(entries, key, middle, right)


def binary_search(entries: Sequence[Entry], key: str) -> bool:
    """Recursive halving over entries sorted ascending by value; exact match."""
    if not entries:
        return False
    return _binary_search_step(entries, key, 0, len(entries) - 1)


LINEAR_SEARCH = SearchAlgorithm("linear search", linear_search)
JUMP_SEARCH = SearchAlgorithm("jump search", jump_search)
BINARY_SEARCH = SearchAlgorithm("binary search", binary_search)

"""
Preparation strategies: turn the raw directory into a searchable form.

Every preparator is a :class:`Preparator` value wrapping a function
``prepare_cb(entries, budget) -> prepared``.  The input collection is never
modified; each preparator returns a new object.

    IDENTITY      returns the collection unchanged (baseline run)
    BUBBLE_SORT   O(n^2), polls the budget before every outer pass
    QUICK_SORT    O(n log n) expected, collapses equal-value entries
    HASH_TABLE    groups entries into buckets keyed by a string hash

Only bubble sort observes the budget; the others are assumed to finish well
inside it.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from phonebook_search.core.entry import Entry
from phonebook_search.core.timing import Budget

logger = logging.getLogger(__name__)

HashFunction = Callable[[str], int]


# ---------------------------------------------------------------------------
# Hash table
# ---------------------------------------------------------------------------

def string_hash(text: str) -> int:
    """32-bit signed polynomial hash, ``h = 31*h + ord(c)`` over the string.

    Deterministic across processes, unlike the builtin :func:`hash` for str.
    """
    h = 0
    for ch in text:
        h = (31 * h + ord(ch)) & 0xFFFFFFFF
    return h - 0x100000000 if h >= 0x80000000 else h


class HashTable:
    """
    Buckets of entries keyed by the hash of their value.

    ``bucket(key)`` is used as the search preprocessing hook: it narrows a
    query to the entries sharing the query's hash, or to nothing at all.

    Parameters
    ----------
    buckets : dict
        Mapping of hash value to a tuple of entries, in input order.
    hash_function : callable
        The function the buckets were built with.
    """

    def __init__(self, buckets: Dict[int, Tuple[Entry, ...]], hash_function: HashFunction = string_hash) -> None:
        self._buckets = buckets
        self._hash = hash_function

    def bucket(self, key: str) -> Tuple[Entry, ...]:
        return self._buckets.get(self._hash(key), ())

    @property
    def num_buckets(self) -> int:
        return len(self._buckets)

    def __len__(self) -> int:
        return sum(len(b) for b in self._buckets.values())

    def __repr__(self) -> str:
        return f"HashTable(entries={len(self)}, buckets={self.num_buckets})"


def build_hash_table(
    entries: Sequence[Entry],
    budget: Optional[Budget] = None,
    hash_function: HashFunction = string_hash,
) -> HashTable:
    """Group *entries* by ``hash_function(entry.value)``; the budget is ignored."""
    groups: Dict[int, List[Entry]] = defaultdict(list)
    for entry in entries:
        groups[hash_function(entry.value)].append(entry)
    buckets = {h: tuple(group) for h, group in groups.items()}
    logger.debug("Hash table built: %d entries in %d buckets", len(entries), len(buckets))
    return HashTable(buckets, hash_function)


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def identity(entries: Sequence[Entry], budget: Optional[Budget] = None) -> Sequence[Entry]:
    return entries


def bubble_sort(entries: Sequence[Entry], budget: Optional[Budget] = None) -> Tuple[Entry, ...]:
    """
    Classic adjacent-swap sort, ascending by value.

    The budget is checked before each outer pass, so a pass that has started
    always runs to the end before :class:`PreparationTimedOut` is raised.
    Swaps happen only on strict ``>``, so equal entries keep their order and
    the output is an exact permutation of the input.
    """
    prepared = list(entries)
    length = len(prepared)
    for iteration in range(length - 1):
        if budget is not None:
            budget.check()
        last = length - iteration - 1
        for i in range(last):
            current = prepared[i]
            following = prepared[i + 1]
            if current > following:
                prepared[i] = following
                prepared[i + 1] = current
    return tuple(prepared)


def quick_sort(entries: Sequence[Entry], budget: Optional[Budget] = None) -> Tuple[Entry, ...]:
    """
    Partitioning sort using the last element of each sub-list as pivot.

    Entries strictly smaller than the pivot go left, strictly greater go
    right; every entry whose value equals the pivot's is dropped and the
    pivot itself is put back once between the two halves.  The output thus
    holds exactly one entry per distinct value.

    The recursion ``sort(smaller) + [pivot] + sort(greater)`` is unrolled
    onto an explicit stack so sorted input cannot exhaust the interpreter's
    recursion limit.
    """
    result: List[Entry] = []
    stack: List[Union[Entry, List[Entry]]] = [list(entries)]
    while stack:
        item = stack.pop()
        if isinstance(item, Entry):
            result.append(item)
            continue
        if len(item) < 2:
            result.extend(item)
            continue
        pivot = item[-1]
        smaller = [e for e in item if e.value < pivot.value]
        greater = [e for e in item if e.value > pivot.value]
        # LIFO: smaller is emitted first, then the pivot, then greater.
        stack.append(greater)
        stack.append(pivot)
        stack.append(smaller)
    return tuple(result)


# ---------------------------------------------------------------------------
# Preparator values
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Preparator:
    """Named preparation step.

    Attributes
    ----------
    name : str
        Label used in run names ("bubble sort", "quick sort", ...).
    operation : str or None
        Verb for the timing line of the report ("Sorting", "Creating").
        ``None`` marks a preparation that is not reported separately.
    prepare_cb : callable
        ``prepare_cb(entries, budget) -> prepared``.
    """
    name: str
    operation: Optional[str]
    prepare_cb: Callable[[Sequence[Entry], Optional[Budget]], object]

    def prepare(self, entries: Sequence[Entry], budget: Optional[Budget] = None):
        return self.prepare_cb(entries, budget)


IDENTITY = Preparator("identity", None, identity)
BUBBLE_SORT = Preparator("bubble sort", "Sorting", bubble_sort)
QUICK_SORT = Preparator("quick sort", "Sorting", quick_sort)
HASH_TABLE = Preparator("hash table", "Creating", build_hash_table)

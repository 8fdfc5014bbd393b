"""
generator.py - Synthetic phone book data

Builds a random directory and query set so the benchmark can run without the
real directory files.  Names are assembled from syllables; a configurable
share of the queries are names drawn from the directory (hits) and the rest
are generated names checked to be absent (misses).

Everything is driven by a seeded :class:`numpy.random.Generator`, so the same
seed gives the same directory and queries.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Set, Tuple, Union

import numpy as np

from phonebook_search.core.entry import Entry

SYLLABLES = (
    "al", "an", "be", "bo", "ca", "da", "el", "fi", "ga", "ha", "in", "jo",
    "ka", "li", "ma", "ne", "or", "pa", "ri", "sa", "ta", "ul", "va", "wi",
    "xe", "yo", "za",
)


def _random_word(rng: np.random.Generator, min_syllables: int = 2, max_syllables: int = 4) -> str:
    count = int(rng.integers(min_syllables, max_syllables + 1))
    parts = rng.choice(SYLLABLES, size=count)
    return "".join(parts).capitalize()


def random_name(rng: np.random.Generator) -> str:
    """First and last name, e.g. ``"Kaliro Dazaul"``."""
    return f"{_random_word(rng)} {_random_word(rng)}"


def generate_directory(n_entries: int, seed: int = 42) -> Tuple[Entry, ...]:
    """*n_entries* entries with random 7-10 digit numbers and random names."""
    if n_entries <= 0:
        raise ValueError("n_entries must be positive.")
    rng = np.random.default_rng(seed)
    numbers = rng.integers(1_000_000, 10_000_000_000, size=n_entries)
    return tuple(Entry(str(int(number)), random_name(rng)) for number in numbers)


def generate_queries(
    entries: Tuple[Entry, ...],
    n_queries: int,
    hit_ratio: float = 1.0,
    seed: int = 42,
) -> Tuple[str, ...]:
    """
    Query names: ``round(n_queries * hit_ratio)`` hits sampled from *entries*,
    the rest misses, then shuffled.
    """
    if n_queries <= 0:
        raise ValueError("n_queries must be positive.")
    if not 0.0 <= hit_ratio <= 1.0:
        raise ValueError(f"hit_ratio must lie in [0, 1], got {hit_ratio}.")
    if not entries and hit_ratio > 0.0:
        raise ValueError("Cannot sample hits from an empty directory.")

    rng = np.random.default_rng(seed + 1)
    n_hits = int(round(n_queries * hit_ratio))
    queries: List[str] = []
    if n_hits:
        picks = rng.integers(0, len(entries), size=n_hits)
        queries.extend(entries[int(i)].value for i in picks)

    known: Set[str] = {entry.value for entry in entries}
    while len(queries) < n_queries:
        candidate = random_name(rng)
        # Linear search matches substrings, so a miss must not occur in any value.
        if not any(candidate in value for value in known):
            queries.append(candidate)

    order = rng.permutation(len(queries))
    return tuple(queries[int(i)] for i in order)


def write_dataset(
    entries: Tuple[Entry, ...],
    queries: Tuple[str, ...],
    directory_path: Union[str, Path],
    find_path: Union[str, Path],
) -> None:
    """Write entries and queries in the input file formats."""
    directory_path = Path(directory_path)
    find_path = Path(find_path)
    directory_path.parent.mkdir(parents=True, exist_ok=True)
    find_path.parent.mkdir(parents=True, exist_ok=True)
    directory_path.write_text("".join(f"{e.key} {e.value}\n" for e in entries), encoding="utf-8")
    find_path.write_text("".join(f"{q}\n" for q in queries), encoding="utf-8")

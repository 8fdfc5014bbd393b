"""
Reading the directory and query files.

Directory file: one ``<key> <value>`` pair per line, split at the first
space so values may contain spaces ("8224 John Smith").  Query file: one
lookup string per line.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

from phonebook_search.core.entry import Entry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_lines(path: PathLike):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            yield line.rstrip("\r\n")


def parse_entry(line: str) -> Optional[Entry]:
    """Split *line* at its first space; ``None`` when there is no space."""
    key, sep, value = line.partition(" ")
    if not sep:
        return None
    return Entry(key, value)


def load_directory(path: PathLike, limit: Optional[int] = None) -> Tuple[Entry, ...]:
    """
    Load the directory file as a tuple of entries.

    Parameters
    ----------
    path : str or Path
        Directory file.
    limit : int, optional
        Keep only the first *limit* entries (useful to let bubble sort
        finish on large directories). Zero gives an empty directory.

    Raises
    ------
    ValueError
        *limit* is negative.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}.")
    entries = []
    skipped = 0
    for lineno, line in enumerate(_read_lines(path), start=1):
        if limit is not None and len(entries) >= limit:
            break
        if not line.strip():
            continue
        entry = parse_entry(line)
        if entry is None:
            skipped += 1
            logger.warning("%s:%d: no separator, line skipped", path, lineno)
            continue
        entries.append(entry)
    logger.info("Loaded %d directory entries from %s (%d skipped)", len(entries), path, skipped)
    return tuple(entries)


def load_queries(path: PathLike) -> Tuple[str, ...]:
    queries = tuple(line for line in _read_lines(path) if line.strip())
    logger.info("Loaded %d queries from %s", len(queries), path)
    return queries

"""
search - Search algorithms as named function values.
"""

from phonebook_search.search.algorithms import (
    BINARY_SEARCH,
    JUMP_SEARCH,
    LINEAR_SEARCH,
    SearchAlgorithm,
    binary_search,
    jump_search,
    linear_search,
)

__all__ = [
    "SearchAlgorithm",
    "LINEAR_SEARCH",
    "JUMP_SEARCH",
    "BINARY_SEARCH",
    "linear_search",
    "jump_search",
    "binary_search",
]

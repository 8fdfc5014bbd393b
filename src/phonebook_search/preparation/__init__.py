"""
preparation - Sorting and indexing steps run before a search.
"""

from phonebook_search.preparation.preparators import (
    BUBBLE_SORT,
    HASH_TABLE,
    IDENTITY,
    QUICK_SORT,
    HashTable,
    Preparator,
    bubble_sort,
    build_hash_table,
    identity,
    quick_sort,
    string_hash,
)

__all__ = [
    "Preparator",
    "HashTable",
    "IDENTITY",
    "BUBBLE_SORT",
    "QUICK_SORT",
    "HASH_TABLE",
    "identity",
    "bubble_sort",
    "quick_sort",
    "build_hash_table",
    "string_hash",
]

"""
data - Input files and synthetic datasets.
"""

from phonebook_search.data.generator import generate_directory, generate_queries, write_dataset
from phonebook_search.data.loader import load_directory, load_queries, parse_entry

__all__ = [
    "load_directory",
    "load_queries",
    "parse_entry",
    "generate_directory",
    "generate_queries",
    "write_dataset",
]

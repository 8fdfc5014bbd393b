"""
phonebook_search - Search Strategy Benchmark for a Phone Book Directory

Compares ways of locating records in a large in-memory directory by pairing
a preparation step (no-op, bubble sort, quicksort, hash-bucket build) with a
search algorithm (linear, jump, binary). Preparation and search are timed
separately; a preparation that runs past its budget is abandoned and the run
falls back to the previously measured linear-search baseline.

    core         - Entry record, Timer / Budget primitives, error types
    search       - Linear, jump and binary search as named function values
    preparation  - Identity, bubble sort, quicksort and hash-table builders
    performance  - Strategy runner state machine and benchmark driver
    data         - Directory / query file loading and synthetic data
"""

__version__ = "1.0.0"

"""
Directory record for the phone book benchmark.

An :class:`Entry` pairs an identifier (the phone number) with the lookup
string every search runs against (the subscriber name).  Entries order by
``value`` alone so sorting algorithms can use the plain comparison
operators, while equality still compares both fields.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Entry:
    """A single directory line.

    Ordering and equality differ: two entries with the same
    ``value`` but different ``key`` satisfy ``a <= b and a >= b`` while
    ``a != b``.  ``sorted()`` therefore treats them as ties and keeps their
    input order, but ``==`` and hashing tell them apart.

    Attributes
    ----------
    key : str
        Identifier of the record (the phone number in a phone book).
    value : str
        Lookup string; all ordering and matching is done on this field.
    """
    key: str
    value: str

    # -- ordering by value only --------------------------------------------

    def __lt__(self, other: Entry) -> bool:
        return self.value < other.value

    def __le__(self, other: Entry) -> bool:
        return self.value <= other.value

    def __gt__(self, other: Entry) -> bool:
        return self.value > other.value

    def __ge__(self, other: Entry) -> bool:
        return self.value >= other.value

    def __str__(self) -> str:
        return f"{self.key} {self.value}"

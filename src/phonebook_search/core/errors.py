"""Exceptions raised while preparing or running a search strategy."""


class PreparationTimedOut(Exception):
    """A budget-aware preparation ran past its allowed duration.

    Recoverable: the strategy runner catches it and switches to its
    fallback search.
    """

    def __init__(self, elapsed: float, allowed: float) -> None:
        self.elapsed = elapsed
        self.allowed = allowed
        super().__init__(
            f"Preparation exceeded its budget ({elapsed:.3f} s > {allowed:.3f} s)"
        )


class MissingFallbackError(RuntimeError):
    """A preparation timed out but the strategy has no fallback to switch to."""

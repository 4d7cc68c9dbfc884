"""Exceptions raised by the bright engine.

Only contract violations originate here.  Exceptions raised by user
supplied transitions, selectors and compute functions are never
wrapped; they propagate to the caller unchanged.
"""

from __future__ import annotations


class BrightError(Exception):
    """Base class for errors raised by the engine itself."""
    pass


class StructuralConsistencyError(BrightError):
    """Raised when the number of lazy steps changed between two cycles.

    Slot position is the only identity a selector value has, so a cycle
    that executes a different number of lazy steps than the previous one
    cannot be compared against it.  This is a programming error: lazy
    steps must be declared unconditionally, in the same count and order,
    on every cycle.
    """

    def __init__(self, expected: int, actual: int, cycle_id: int | None = None):
        self.expected = expected
        self.actual = actual
        self.cycle_id = cycle_id
        where = f" in cycle {cycle_id}" if cycle_id is not None else ""
        super().__init__(
            f"[bright] {actual} lazy step(s) ran{where} but the previous cycle "
            f"committed {expected}. Lazy steps (lazy_compute / lazy_schedule) "
            "must be invariant in count and order across cycles; do not "
            "declare them conditionally."
        )


class CycleStateError(BrightError):
    """Raised when a step or boundary is used outside of its cycle phase."""

    def __init__(self, message: str):
        super().__init__(f"[bright] {message}")

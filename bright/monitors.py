"""Monitoring utilities for bright sessions.

These consume events from an attached ``SimpleEventBus`` and record
simple diagnostics.  Tests use them to assert which lazy steps actually
recomputed in which cycle without instrumenting user functions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from .event_bus import SimpleEventBus
from .types import CYCLE_COMMIT, STEP_COMPUTED, STEP_SKIPPED, CommitEvent, StepEvent


@dataclass
class RecomputeMonitor:
    """Track, per cycle, which lazy slots recomputed and which were skipped."""

    computed: Dict[int, List[int]] = field(default_factory=dict)
    skipped: Dict[int, List[int]] = field(default_factory=dict)
    commits: List[CommitEvent] = field(default_factory=list)

    def attach(self, event_bus: SimpleEventBus) -> "RecomputeMonitor":
        event_bus.on(STEP_COMPUTED, self.on_computed)
        event_bus.on(STEP_SKIPPED, self.on_skipped)
        event_bus.on(CYCLE_COMMIT, self.on_commit)
        return self

    def on_computed(self, event: StepEvent) -> None:
        self.computed.setdefault(event.cycle_id, []).append(event.slot)

    def on_skipped(self, event: StepEvent) -> None:
        self.skipped.setdefault(event.cycle_id, []).append(event.slot)

    def on_commit(self, event: CommitEvent) -> None:
        self.commits.append(event)

    def recompute_count(self, slot: int | None = None) -> int:
        """Number of recomputes across all cycles, optionally for one slot."""
        return sum(
            1
            for slots in self.computed.values()
            for s in slots
            if slot is None or s == slot
        )

    def slot_counts_stable(self) -> bool:
        """True if every commit after the first non-empty one has its slot count."""
        baseline = None
        for commit in self.commits:
            if baseline is None:
                if commit.slot_count:
                    baseline = commit.slot_count
            elif commit.slot_count != baseline:
                return False
        return True

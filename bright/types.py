"""Type definitions for the bright engine's instrumentation events.

These dataclasses are the payloads the session emits on an attached
event bus.  They are plain records; nothing in the engine depends on
them being consumed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

STEP_COMPUTED = "STEP_COMPUTED"
STEP_SKIPPED = "STEP_SKIPPED"
CYCLE_COMMIT = "CYCLE_COMMIT"


class StepKind(Enum):
    """Which kind of lazy step occupied a slot."""

    COMPUTE = "compute"
    SCHEDULE = "schedule"


class StepReason(Enum):
    """Why a lazy step ran or was skipped.

    BOOTSTRAP means there was no previous value at this slot position,
    so the step ran unconditionally.  CHANGED and UNCHANGED are the
    outcome of comparing the selector value against the previous cycle.
    """

    BOOTSTRAP = "BOOTSTRAP"
    CHANGED = "CHANGED"
    UNCHANGED = "UNCHANGED"


@dataclass(frozen=True)
class StepEvent:
    """Emitted for every lazy step, whether it ran or not."""

    cycle_id: int
    slot: int
    kind: StepKind
    reason: StepReason

    @property
    def computed(self) -> bool:
        return self.reason is not StepReason.UNCHANGED


@dataclass(frozen=True)
class CommitEvent:
    """Emitted once per cycle when the slot sequence is committed."""

    cycle_id: int
    slot_count: int
    effect_count: int

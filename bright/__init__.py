"""Incremental derived state for message-driven update loops.

A ``Session`` holds an application's raw state and the state derived
from it.  Each message runs one cycle: a transition produces the new
raw state, then a fixed sequence of steps recomputes derived data and
schedules effects.  Lazy steps declare their dependency through a
selector and only rerun when the selector's value differs from the one
recorded in the previous cycle.

The engine returns effects as inert ``Effect`` values; executing them
is the host's job (see ``bright.runtime`` for a minimal host loop).
"""

from .compose import compose
from .config import EngineConfig, load_config
from .effects import Effect, EffectSink
from .equality import are_dependencies_equal, structurally_equal
from .errors import BrightError, CycleStateError, StructuralConsistencyError
from .event_bus import SimpleEventBus
from .monitors import RecomputeMonitor
from .runtime import Runtime
from .session import Session, init, start
from .types import CommitEvent, StepEvent, StepKind, StepReason

__all__ = [
    "BrightError",
    "CommitEvent",
    "CycleStateError",
    "Effect",
    "EffectSink",
    "EngineConfig",
    "RecomputeMonitor",
    "Runtime",
    "Session",
    "SimpleEventBus",
    "StepEvent",
    "StepKind",
    "StepReason",
    "StructuralConsistencyError",
    "are_dependencies_equal",
    "compose",
    "init",
    "load_config",
    "start",
    "structurally_equal",
]

"""Cycle sessions: raw state, derived state and positional memoization.

A ``Session`` is an immutable value holding the raw state owned by the
application, the derived state computed from it, and the selector
values recorded by the lazy steps of the last committed cycle.  One
cycle looks like::

    session, effect = bright.start(
        session,
        lambda raw: (raw.increment(), Effect.none()),
        lambda s: (
            s.compute(project_view)
            .lazy_compute(lambda raw: raw.counter // 10, recompute_memo)
            .lazy_schedule(lambda raw: raw.user_id, fetch_profile)
        ),
    )

Each step returns a new session.  At the boundary the selector values
produced by the lazy steps of this cycle are committed and become the
reference the next cycle compares against.

Memoization is positional: the Nth lazy step of a cycle is compared
with the Nth selector value of the previous cycle, and with nothing
else.  Lazy steps must therefore run unconditionally, in the same
number and order, every cycle.  Adding, removing or reordering lazy
steps changes which values are compared and is a breaking change for
any code that relies on steps being skipped.  A cycle whose lazy step
count differs from the previous one raises
``StructuralConsistencyError`` and commits nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Tuple

from .config import EngineConfig
from .effects import Effect, EffectSink
from .equality import are_dependencies_equal
from .errors import CycleStateError, StructuralConsistencyError
from .event_bus import SimpleEventBus
from .types import (
    CYCLE_COMMIT,
    STEP_COMPUTED,
    STEP_SKIPPED,
    CommitEvent,
    StepEvent,
    StepKind,
    StepReason,
)

logger = logging.getLogger(__name__)

Transition = Callable[[Any], Tuple[Any, Any]]
Selector = Callable[[Any], Any]


@dataclass(frozen=True, eq=False)
class Session:
    """One independent derivation pipeline.

    Construct with ``bright.init``; the fields are private.  Outside a
    cycle only the read accessors (``raw``, ``derived``, ``unwrap``) and
    the boundary operations (``start``, ``begin``) are meaningful.
    """

    _raw: Any
    _derived: Any
    _previous_slots: tuple = ()
    _current_slots: tuple = ()
    # None between cycles; a sink while a cycle is open
    _sink: Optional[EffectSink] = None
    _cycle_id: int = 0
    # step events held back until the cycle commits
    _step_events: tuple = ()
    _config: EngineConfig = field(default_factory=EngineConfig, repr=False)
    _event_bus: Optional[SimpleEventBus] = field(default=None, repr=False)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def raw(self) -> Any:
        return self._raw

    @property
    def derived(self) -> Any:
        return self._derived

    def unwrap(self) -> Tuple[Any, Any]:
        """Return ``(raw, derived)`` for rendering."""
        return self._raw, self._derived

    @property
    def in_cycle(self) -> bool:
        return self._sink is not None

    @property
    def cycle_id(self) -> int:
        """Number of cycles opened on this session lineage so far."""
        return self._cycle_id

    @property
    def slot_count(self) -> int:
        """Number of selector values committed by the last cycle."""
        return len(self._previous_slots)

    # ------------------------------------------------------------------
    # Boundary
    # ------------------------------------------------------------------

    def begin(self, transition: Transition) -> "Session":
        """Open a cycle: apply ``transition`` to the raw state.

        ``transition(raw)`` must return ``(new_raw, effect)``.  The effect
        is the first one of the cycle.
        """
        if self.in_cycle:
            raise CycleStateError(
                f"cycle {self._cycle_id} is still open; call end() before starting another cycle"
            )
        new_raw, effect = transition(self._raw)
        return replace(
            self,
            _raw=new_raw,
            _current_slots=(),
            _sink=EffectSink().append(effect),
            _cycle_id=self._cycle_id + 1,
            _step_events=(),
        )

    def end(self) -> Tuple["Session", Effect]:
        """Close the cycle: check slot consistency and commit.

        Returns the committed session and every effect of the cycle, in
        the order it was produced.
        """
        self._require_cycle("end")
        expected = len(self._previous_slots)
        actual = len(self._current_slots)
        if expected != 0 and expected != actual:
            logger.error(
                "Lazy step count changed in cycle %d: previous cycle committed %d slot(s), this cycle produced %d",
                self._cycle_id,
                expected,
                actual,
            )
            raise StructuralConsistencyError(expected, actual, self._cycle_id)

        effect = self._sink.merged()
        committed = replace(
            self,
            _previous_slots=self._current_slots,
            _current_slots=(),
            _sink=None,
            _step_events=(),
        )
        logger.debug(
            "Committed cycle %d: %d slot(s), %d effect descriptor(s)",
            self._cycle_id,
            actual,
            len(effect),
        )
        for event in self._step_events:
            name = STEP_COMPUTED if event.computed else STEP_SKIPPED
            self._emit(name, lambda: event)
        self._emit(CYCLE_COMMIT, lambda: CommitEvent(
            cycle_id=self._cycle_id,
            slot_count=actual,
            effect_count=len(effect),
        ))
        return committed, effect

    def start(
        self,
        transition: Transition,
        body: Callable[["Session"], "Session"],
    ) -> Tuple["Session", Effect]:
        """Run one whole cycle: ``begin``, then ``body``, then ``end``.

        ``body`` receives the session produced by the transition and must
        return the session produced by its last step.
        """
        opened = self.begin(transition)
        result = body(opened)
        if not isinstance(result, Session):
            raise CycleStateError(
                f"cycle body must return the session produced by its last step, got {type(result).__name__}"
            )
        return result.end()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def compute(self, fn: Callable[[Any, Any], Any]) -> "Session":
        """Replace the derived state with ``fn(raw, derived)``, every cycle."""
        self._require_cycle("compute")
        return replace(self, _derived=fn(self._raw, self._derived))

    def schedule(self, fn: Callable[[Any, Any], Any]) -> "Session":
        """Append ``fn(raw, derived)`` to the cycle's effects, every cycle."""
        self._require_cycle("schedule")
        effect = fn(self._raw, self._derived)
        return replace(self, _sink=self._sink.append(effect))

    def lazy_compute(
        self,
        selector: Selector,
        fn: Callable[[Any, Any, Any], Any],
    ) -> "Session":
        """Replace the derived state with ``fn(raw, derived, key)`` when ``key`` changed.

        ``key`` is ``selector(raw)``.  It is compared with the value the
        lazy step at the same position produced in the previous cycle.
        On the first cycle there is nothing to compare with and ``fn``
        always runs.
        """
        self._require_cycle("lazy_compute")
        key, reason, slotted = self._take_slot(selector)
        if reason is StepReason.UNCHANGED:
            result = slotted
        else:
            result = replace(slotted, _derived=fn(self._raw, self._derived, key))
        return result._record_step(StepKind.COMPUTE, reason)

    def lazy_schedule(
        self,
        selector: Selector,
        fn: Callable[[Any, Any, Any], Any],
    ) -> "Session":
        """Append ``fn(raw, derived, key)`` to the effects when ``key`` changed.

        Same gating as ``lazy_compute``; when the key is unchanged no
        effect is appended at all.
        """
        self._require_cycle("lazy_schedule")
        key, reason, slotted = self._take_slot(selector)
        if reason is StepReason.UNCHANGED:
            result = slotted
        else:
            effect = fn(self._raw, self._derived, key)
            result = replace(slotted, _sink=slotted._sink.append(effect))
        return result._record_step(StepKind.SCHEDULE, reason)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_cycle(self, operation: str) -> None:
        if not self.in_cycle:
            raise CycleStateError(
                f"{operation}() called outside a cycle; use start() or begin() first"
            )

    def _take_slot(self, selector: Selector) -> Tuple[Any, StepReason, "Session"]:
        position = len(self._current_slots)
        key = selector(self._raw)
        if position >= len(self._previous_slots):
            reason = StepReason.BOOTSTRAP
        elif are_dependencies_equal(
            self._previous_slots[position],
            key,
            identity_fast_path=self._config.identity_fast_path,
        ):
            reason = StepReason.UNCHANGED
        else:
            reason = StepReason.CHANGED
        return key, reason, replace(self, _current_slots=self._current_slots + (key,))

    def _record_step(self, kind: StepKind, reason: StepReason) -> "Session":
        slot = len(self._current_slots) - 1
        if reason is StepReason.UNCHANGED:
            logger.debug("Cycle %d slot %d (%s): unchanged, skipped", self._cycle_id, slot, kind.value)
        else:
            logger.debug("Cycle %d slot %d (%s): %s, recomputed", self._cycle_id, slot, kind.value, reason.value)
        if not self._emitting():
            return self
        event = StepEvent(cycle_id=self._cycle_id, slot=slot, kind=kind, reason=reason)
        return replace(self, _step_events=self._step_events + (event,))

    def _emitting(self) -> bool:
        return self._event_bus is not None and self._config.emit_events

    def _emit(self, event_name: str, build: Callable[[], Any]) -> None:
        if self._emitting() and self._event_bus.has_subscribers(event_name):
            self._event_bus.emit(event_name, build())


def init(
    raw: Any,
    derived: Any = None,
    *,
    config: Optional[EngineConfig] = None,
    event_bus: Optional[SimpleEventBus] = None,
) -> Session:
    """Create a session with no cycle history.

    Args:
        raw: Initial raw state, owned by the application.
        derived: Initial derived state.
        config: Engine settings; defaults to ``EngineConfig()``.
        event_bus: Optional bus receiving step and commit events.
    """
    return Session(
        _raw=raw,
        _derived=derived,
        _config=config if config is not None else EngineConfig(),
        _event_bus=event_bus,
    )


def start(
    session: Session,
    transition: Transition,
    body: Callable[[Session], Session],
) -> Tuple[Session, Effect]:
    """Run one cycle on ``session``.  See ``Session.start``."""
    return session.start(transition, body)

"""A small host loop that feeds messages through an update function.

The engine itself never runs effects.  ``Runtime`` plays the host's
part for scripts, tests and the demo CLI: it keeps the current model,
runs ``update(model, msg)`` once per message and hands each resulting
effect descriptor to an executor.  Messages dispatched while an update
is in progress (typically by an executor) are queued and processed in
order afterwards, so updates never nest.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Callable, Deque, Generic, List, Optional, Tuple, TypeVar

from .effects import Effect, as_effect

logger = logging.getLogger(__name__)

Model = TypeVar("Model")
Dispatch = Callable[[Any], None]
Executor = Callable[[Any, Dispatch], None]


class Runtime(Generic[Model]):
    """Drive an application one message at a time."""

    def __init__(
        self,
        model: Model,
        update: Callable[[Model, Any], Tuple[Model, Any]],
        executor: Optional[Executor] = None,
    ) -> None:
        self._model = model
        self._update = update
        self._executor = executor
        self._queue: Deque[Any] = deque()
        self._running = False
        self.outbox: List[Any] = []
        self.cycles_run: int = 0

    @property
    def model(self) -> Model:
        return self._model

    def dispatch(self, msg: Any) -> None:
        """Queue ``msg`` and process the queue unless already processing it."""
        self._queue.append(msg)
        if self._running:
            return
        self._running = True
        try:
            while self._queue:
                self._step(self._queue.popleft())
        finally:
            self._running = False
            # anything left was queued by a failing cycle; drop it with the failure
            self._queue.clear()

    def run_effect(self, effect: Any) -> None:
        """Execute an effect outside of an update, e.g. the initial one."""
        for descriptor in as_effect(effect):
            self._execute(descriptor)

    def drain_outbox(self) -> List[Any]:
        """Return and clear the descriptors collected without an executor."""
        drained, self.outbox = self.outbox, []
        return drained

    def _step(self, msg: Any) -> None:
        self._model, effect = self._update(self._model, msg)
        self.cycles_run += 1
        effect = as_effect(effect)
        logger.debug("Update %d produced %d effect descriptor(s)", self.cycles_run, len(effect))
        for descriptor in effect:
            self._execute(descriptor)

    def _execute(self, descriptor: Any) -> None:
        if self._executor is None:
            self.outbox.append(descriptor)
        else:
            self._executor(descriptor, self.dispatch)


def run_messages(
    model: Model,
    update: Callable[[Model, Any], Tuple[Model, Any]],
    messages: List[Any],
) -> Tuple[Model, Effect]:
    """Apply ``messages`` in order and return the final model and all effects."""
    runtime: Runtime[Model] = Runtime(model, update)
    for msg in messages:
        runtime.dispatch(msg)
    return runtime.model, Effect(tuple(runtime.drain_outbox()))

"""A minimal synchronous publish/subscribe bus for engine instrumentation.

A session with a bus attached reports every lazy step decision
(``STEP_COMPUTED`` / ``STEP_SKIPPED``) and every committed cycle
(``CYCLE_COMMIT``).  Callbacks run in registration order on the calling
thread, inside the cycle that produced the event, and any exception
they raise propagates to the caller of the cycle.

The bus is an observer only: it cannot change a session's results and
it is not a channel for effects.
"""

from typing import Any, Callable, Dict, List


class SimpleEventBus:
    """A simple synchronous event bus.

    Subscribers register callbacks on a named channel via ``on()``.
    The engine publishes via ``emit()``.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callable[[Any], None]]] = {}

    def on(self, event_name: str, callback: Callable[[Any], None]) -> None:
        """Register ``callback`` for ``event_name``.

        The same callback may be registered more than once; it is then
        invoked once per registration.
        """
        self._subscribers.setdefault(event_name, []).append(callback)

    def off(self, event_name: str, callback: Callable[[Any], None]) -> None:
        """Remove one registration of ``callback``; unknown callbacks are ignored."""
        callbacks = self._subscribers.get(event_name)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def has_subscribers(self, event_name: str) -> bool:
        return bool(self._subscribers.get(event_name))

    def emit(self, event_name: str, payload: Any) -> None:
        """Invoke every callback registered for ``event_name`` with ``payload``."""
        for callback in list(self._subscribers.get(event_name, [])):
            callback(payload)

"""Run several sessions under one enclosing update.

Each session keeps its own slot history; ``compose`` only threads the
committed session of one cycle into the code that builds the next
piece of the model, and concatenates the effects in order::

    def update(model, msg):
        return bright.compose(
            bright.start(model.sidebar, sidebar_transition(msg), sidebar_steps),
            lambda sidebar: bright.compose(
                bright.start(model.page, page_transition(msg), page_steps),
                lambda page: (Model(sidebar=sidebar, page=page), Effect.none()),
            ),
        )

The sidebar's effects precede the page's, which precede the final
continuation's.
"""

from __future__ import annotations

from typing import Any, Callable, Tuple, TypeVar

from .effects import Effect, as_effect
from .session import Session

Model = TypeVar("Model")


def compose(
    result: Tuple[Session, Any],
    continuation: Callable[[Session], Tuple[Model, Any]],
) -> Tuple[Model, Effect]:
    """Feed a cycle result into ``continuation`` and merge the effects.

    Args:
        result: ``(session, effect)`` as returned by ``bright.start``.
        continuation: Receives the committed session and returns
            ``(model, effect)``.

    Returns:
        ``(model, effect)`` where the effect is ``result``'s effect
        followed by the continuation's.
    """
    session, effect = result
    model, next_effect = continuation(session)
    return model, as_effect(effect) + as_effect(next_effect)

"""Shared state types and step helpers for the bright tests."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from bright import Effect


@dataclass(frozen=True)
class CounterState:
    counter: int = 0
    label: str = ""


@dataclass(frozen=True)
class CounterDerived:
    memo: Optional[int] = None
    doubled: int = 0


def set_counter(value: int, effect: Any = None) -> Callable[[CounterState], Any]:
    """Transition that sets the counter to ``value``."""
    def transition(raw: CounterState):
        return replace(raw, counter=value), effect if effect is not None else Effect.none()
    return transition


def keep(effect: Any = None) -> Callable[[Any], Any]:
    """Transition that leaves the raw state alone."""
    def transition(raw):
        return raw, effect if effect is not None else Effect.none()
    return transition


class CallCounter:
    """Wrap a step function and count how often it runs."""

    def __init__(self, fn: Callable[..., Any]) -> None:
        self.fn = fn
        self.calls = 0
        self.args: list = []

    def __call__(self, *args: Any) -> Any:
        self.calls += 1
        self.args.append(args)
        return self.fn(*args)


def memo_thousand(raw: CounterState, derived: CounterDerived, key: Any) -> CounterDerived:
    return replace(derived, memo=raw.counter * 1000)

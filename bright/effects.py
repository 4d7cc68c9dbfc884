"""Effect descriptors and the per-cycle effect sink.

An ``Effect`` is an inert, ordered batch of opaque descriptors.  The
engine never looks inside a descriptor and never executes one; it only
collects them in the order they were produced and hands the merged
batch back to the caller at the end of a cycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List


@dataclass(frozen=True)
class Effect:
    """An immutable, ordered batch of effect descriptors.

    Effects compose by concatenation: ``a + b`` runs everything in ``a``
    before everything in ``b``.  Nothing is ever deduplicated.
    """

    descriptors: tuple = ()

    @classmethod
    def none(cls) -> "Effect":
        """The empty effect."""
        return _NONE

    @classmethod
    def from_descriptor(cls, descriptor: Any) -> "Effect":
        """Wrap a single descriptor."""
        return cls((descriptor,))

    @classmethod
    def batch(cls, items: Iterable[Any]) -> "Effect":
        """Flatten effects and bare descriptors into one effect, in order."""
        out: List[Any] = []
        for item in items:
            out.extend(as_effect(item).descriptors)
        return cls(tuple(out))

    def __add__(self, other: "Effect") -> "Effect":
        if not isinstance(other, Effect):
            return NotImplemented
        if not other.descriptors:
            return self
        if not self.descriptors:
            return other
        return Effect(self.descriptors + other.descriptors)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.descriptors)

    def __len__(self) -> int:
        return len(self.descriptors)

    def __bool__(self) -> bool:
        return bool(self.descriptors)


_NONE = Effect()


def as_effect(value: Any) -> Effect:
    """Coerce a step's return value into an ``Effect``.

    ``None`` is the empty effect, an ``Effect`` is returned as is and
    anything else is treated as a single descriptor.
    """
    if value is None:
        return _NONE
    if isinstance(value, Effect):
        return value
    return Effect.from_descriptor(value)


@dataclass(frozen=True)
class EffectSink:
    """Append-only collector for the effects gathered during one cycle.

    The sink is a value: ``append`` returns a new sink and leaves the
    receiver untouched, so a session snapshot never observes effects
    appended by a later step.
    """

    effects: tuple = field(default_factory=tuple)

    def append(self, effect: Any) -> "EffectSink":
        return EffectSink(self.effects + (as_effect(effect),))

    def merged(self) -> Effect:
        """All collected effects as one batch, in append order."""
        return Effect.batch(self.effects)

    def __len__(self) -> int:
        return len(self.effects)

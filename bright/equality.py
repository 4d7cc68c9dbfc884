"""Equality oracle used to decide whether a selector value changed.

``are_dependencies_equal`` first tries two identity shortcuts that are
cheap in CPython:

* the two values are the same object, or
* both are tuples of the same exact type and length whose members
  are pairwise the same objects (the "several dependencies at once"
  case, e.g. a selector returning ``(state.items, state.filter)``).

When neither shortcut applies it falls back to ``structurally_equal``,
a recursive comparison over tuples, lists, mappings, sets and
dataclasses.  ``structurally_equal`` is reflexive (``nan`` equals
``nan``), so turning the shortcut off never changes an outcome, only
its cost.
"""

from __future__ import annotations

import math
from dataclasses import fields, is_dataclass
from typing import Any, Mapping


def structurally_equal(a: Any, b: Any) -> bool:
    """Compare two values by content, recursing into containers.

    Sequences, mappings and records are compared element by element and
    must be of exactly the same type: ``(1, 2)`` is not equal to
    ``[1, 2]``, a namedtuple is not equal to a plain tuple, and ``dict``
    is not equal to ``OrderedDict`` or a ``list`` to a ``list`` subclass,
    even where Python's ``==`` says otherwise.  A false "changed" only
    costs a recompute.  Only ``int``/``float``/``bool`` mixes follow
    ``==``.

    Anything that is not a recognised container is compared with ``==``,
    which must produce a single truth value.  Array-like values whose
    ``==`` is element-wise raise ``TypeError``; select a hashable or
    scalar projection of them instead.
    """
    if a is b:
        return True
    if isinstance(a, float) and isinstance(b, float):
        if math.isnan(a) and math.isnan(b):
            return True
        return a == b
    if type(a) is not type(b):
        # int/float/bool mixes keep Python's numeric semantics
        if isinstance(a, (int, float)) and isinstance(b, (int, float)):
            return a == b
        return False
    if isinstance(a, (tuple, list)):
        if len(a) != len(b):
            return False
        return all(structurally_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, Mapping):
        if len(a) != len(b):
            return False
        for key, value in a.items():
            if key not in b:
                return False
            if not structurally_equal(value, b[key]):
                return False
        return True
    if isinstance(a, (set, frozenset)):
        return a == b
    if is_dataclass(a) and not isinstance(a, type):
        return all(
            structurally_equal(getattr(a, f.name), getattr(b, f.name))
            for f in fields(a)
            if f.compare
        )
    result = a == b
    try:
        return bool(result)
    except (TypeError, ValueError) as e:
        raise TypeError(
            f"cannot compare selector values of type {type(a).__name__}: "
            f"== returned {type(result).__name__}, which has no single truth value. "
            "Return a scalar, tuple or other plainly comparable value from the selector."
        ) from e


def _tuple_members_identical(a: Any, b: Any) -> bool:
    # same exact type, as structurally_equal requires
    if not isinstance(a, tuple) or type(a) is not type(b):
        return False
    if len(a) != len(b):
        return False
    for x, y in zip(a, b):
        if x is not y:
            return False
    return True


def are_dependencies_equal(a: Any, b: Any, *, identity_fast_path: bool = True) -> bool:
    """Return True when selector value ``b`` is no meaningful change from ``a``.

    Args:
        a: Selector value recorded in the previous cycle.
        b: Selector value produced in the current cycle.
        identity_fast_path: Try the identity shortcuts before the
            structural comparison.  The result is the same either way.
    """
    if identity_fast_path:
        if a is b:
            return True
        if _tuple_members_identical(a, b):
            return True
    return structurally_equal(a, b)

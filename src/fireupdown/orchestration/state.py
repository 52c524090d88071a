"""
Accumulated state helpers.

The accumulator is a plain ``dict`` that is never mutated once built. Each
level produces a fresh one from the previous value and that level's
contributions; actions only ever see a read-only view of it.

Example:
    >>> base = {"router": "r"}
    >>> merge(base, {"ui": "c"})
    {'router': 'r', 'ui': 'c'}
    >>> base
    {'router': 'r'}
    >>> ref("db")("conn")
    {'db': 'conn'}
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any

State = dict[str, Any]


def merge(base: Mapping[str, Any], update: Mapping[str, Any] | None = None) -> State:
    """Shallow-merge ``update`` over ``base`` into a new dict."""
    merged = dict(base)
    if update:
        merged.update(update)
    return merged


def merge_all(contributions: Iterable[Mapping[str, Any]]) -> State:
    """Combine contributions in order; later keys overwrite earlier ones."""
    combined: State = {}
    for contribution in contributions:
        combined.update(contribution)
    return combined


def frozen_view(state: Mapping[str, Any]) -> Mapping[str, Any]:
    """Read-only view of ``state`` handed to actions."""
    return MappingProxyType(state)


def ref(name: str) -> Callable[[Any], State]:
    """Build a one-key partial state factory.

    Handy for actions that resolve to a single value::

        async def start_db(config, state):
            return ref("db")(await connect(config.dsn))
    """

    def _ref(value: Any) -> State:
        return {name: value}

    return _ref


__all__ = ["State", "merge", "merge_all", "frozen_view", "ref"]

"""
System descriptors and RC grouping.

A *system* is anything that exposes up to three fields: ``rc`` (run-level,
defaults to 0), ``up`` and ``down`` (actions). Mappings, plain objects and
:class:`System` records are all accepted; the engine only reads.

Grouping turns an ordered list of systems into ordered *levels*::

    systems                         up levels            down levels
    ───────────────────────         ──────────────       ──────────────
    {rc: 2, up: f0}                 rc 0: [f1]           rc 5: [g2, g3]
    {up: f1}                 ──►    rc 2: [f0]           rc 2: [...]
    {rc: 5, up: f2, down: g2}       rc 5: [f2, f3]       rc 0: [...]
    {rc: 5, up: f3, down: g3}

RC keys sort numerically. Within a level, definition order is kept.
Systems lacking the selected action contribute nothing to their level, so
a level may end up empty.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fireupdown.core.errors import InvalidSystemError

Action = Callable[..., Any]


class Direction(str, Enum):
    """Which way a lifecycle runs."""

    UP = "up"
    DOWN = "down"

    @property
    def field(self) -> str:
        """Descriptor field holding this direction's action."""
        return self.value

    @property
    def descending(self) -> bool:
        return self is Direction.DOWN


@dataclass(frozen=True)
class System:
    """
    A validated system descriptor.

    Attributes:
        up: Bring-up action, called as ``up(*args, state)``
        down: Tear-down action, called as ``down(*args, state)``
        rc: Run-level; lower starts first and stops last
        name: Optional label for logs and plans
    """

    up: Action | None = None
    down: Action | None = None
    rc: int = 0
    name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.rc, bool) or not isinstance(self.rc, int):
            raise InvalidSystemError(
                f"rc must be an int, got {type(self.rc).__name__}"
            ).with_context(system=self.name, rc=repr(self.rc))
        for attr in ("up", "down"):
            action = getattr(self, attr)
            if action is not None and not callable(action):
                raise InvalidSystemError(
                    f"{attr} must be callable, got {type(action).__name__}"
                ).with_context(system=self.name, field=attr)


@dataclass(frozen=True)
class Level:
    """One RC level of a plan: the actions to run together, in order."""

    rc: int
    actions: tuple[Action, ...] = ()
    labels: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.actions)

    def to_dict(self) -> dict[str, Any]:
        return {"rc": self.rc, "actions": list(self.labels)}


# =============================================================================
# Field access
# =============================================================================


def _read(system: Any, name: str) -> Any:
    if isinstance(system, Mapping):
        return system.get(name)
    return getattr(system, name, None)


def rc_of(system: Any) -> int:
    """Run-level of ``system``; missing or ``None`` means 0."""
    rc = _read(system, "rc")
    return rc if rc is not None else 0


def action_of(system: Any, field_name: str) -> Action | None:
    """The ``field_name`` action of ``system``, or None when it has none."""
    action = _read(system, field_name)
    return action if callable(action) else None


def describe_action(action: Action, system: Any = None) -> str:
    """Human label for an action: the system's name, else the callable's."""
    name = _read(system, "name") if system is not None else None
    if name:
        return str(name)
    return getattr(action, "__qualname__", None) or repr(action)


# =============================================================================
# Grouping
# =============================================================================


def collect_by_rc(systems: Iterable[Any]) -> dict[int, list[Any]]:
    """Bucket systems by run-level, keeping definition order in each bucket."""
    buckets: dict[int, list[Any]] = {}
    for system in systems:
        buckets.setdefault(rc_of(system), []).append(system)
    return buckets


def _select(
    systems: Iterable[Any], descending: bool, field_name: str
) -> list[tuple[int, list[tuple[Action, Any]]]]:
    buckets = collect_by_rc(systems)
    selected = []
    for rc in sorted(buckets, reverse=descending):
        pairs = []
        for system in buckets[rc]:
            action = action_of(system, field_name)
            if action is not None:
                pairs.append((action, system))
        selected.append((rc, pairs))
    return selected


def plan(systems: Iterable[Any], direction: Direction | str = Direction.UP) -> list[Level]:
    """Ordered levels for ``direction``, with RC and labels attached."""
    direction = Direction(direction)
    return [
        Level(
            rc=rc,
            actions=tuple(action for action, _ in pairs),
            labels=tuple(describe_action(action, system) for action, system in pairs),
        )
        for rc, pairs in _select(systems, direction.descending, direction.field)
    ]


def group_levels(
    systems: Iterable[Any],
    *,
    descending: bool = False,
    field: str = "up",
) -> list[list[Action]]:
    """Ordered levels of bare actions, as consumed by ``apply_serially``.

    Args:
        systems: Descriptors in definition order
        descending: Sort RC keys high-to-low (tear-down) instead of low-to-high
        field: Which action to select from each descriptor
    """
    return [
        [action for action, _ in selected]
        for _, selected in _select(systems, descending, field)
    ]


__all__ = [
    "Action",
    "Direction",
    "System",
    "Level",
    "rc_of",
    "action_of",
    "describe_action",
    "collect_by_rc",
    "plan",
    "group_levels",
]

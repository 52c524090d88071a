"""
Bring systems up and down.

``up`` runs each system's ``up`` action from the lowest RC to the highest;
``down`` runs ``down`` actions from the highest RC to the lowest. Both hand
every action the caller's arguments followed by the state accumulated so
far, and resolve with the final state.

Example::

    from fireupdown import down, ref, up

    async def start_router(config, state):
        return ref("router")(await Router.start(config))

    async def start_ui(config, state):
        return {"component": await UI.mount(state["router"])}

    systems = [
        {"rc": 0, "up": start_router, "down": stop_router},
        {"rc": 1, "up": start_ui, "down": stop_ui},
    ]

    state = await up(systems)({"starting_url": "/"})
    # => {"router": ..., "component": ...}
    await down(systems)({"starting_url": "/"}, state=state)

For callers that prefer an object, :class:`Lifecycle` collects
:class:`~fireupdown.orchestration.systems.System` records fluently.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from fireupdown.core.errors import InvalidSystemError
from fireupdown.orchestration.executor import apply_serially
from fireupdown.orchestration.state import State
from fireupdown.orchestration.systems import Action, Direction, Level, System, group_levels, plan

Runner = Callable[..., Awaitable[State]]


def _as_system(system: Any) -> System:
    if isinstance(system, System):
        return system
    if isinstance(system, Mapping):
        return System(
            up=system.get("up"),
            down=system.get("down"),
            rc=system.get("rc") or 0,
            name=system.get("name"),
        )
    raise InvalidSystemError(
        f"expected a System or mapping, got {type(system).__name__}"
    )


def _runner(systems: Iterable[Any], direction: Direction) -> Runner:
    snapshot = tuple(systems)

    async def run(*args: Any, state: Mapping[str, Any] | None = None) -> State:
        levels = group_levels(
            snapshot,
            descending=direction.descending,
            field=direction.field,
        )
        return await apply_serially(levels, args, state)

    run.__qualname__ = f"{direction.value}_runner"
    return run


def up(systems: Iterable[Any]) -> Runner:
    """Bring all systems up starting from the lowest defined RC level.

    Returns:
        ``async (*args, state=None) -> dict``; ``state`` seeds the accumulator.
    """
    return _runner(systems, Direction.UP)


def down(systems: Iterable[Any]) -> Runner:
    """Bring all systems down starting from the highest defined RC level.

    This is the inverse routine of :func:`up`; parameters and return values
    are identical.
    """
    return _runner(systems, Direction.DOWN)


class Lifecycle:
    """Fluent collection of systems with ``up``/``down`` entry points.

    Example::

        lifecycle = (
            Lifecycle()
            .add(start_db, stop_db, name="db")
            .add(start_api, stop_api, rc=1, name="api")
        )
        state = await lifecycle.up(config)
        await lifecycle.down(config, state=state)
    """

    def __init__(self, systems: Iterable[System | Mapping[str, Any]] | None = None) -> None:
        self._systems: list[System] = []
        self.extend(systems or ())

    # ── Building ─────────────────────────────────────────────────────

    def add(
        self,
        up: Action | None = None,
        down: Action | None = None,
        *,
        rc: int = 0,
        name: str | None = None,
    ) -> Lifecycle:
        """Register a system. Returns ``self`` for chaining."""
        self._systems.append(System(up=up, down=down, rc=rc, name=name))
        return self

    def extend(self, systems: Iterable[System | Mapping[str, Any]]) -> Lifecycle:
        """Register already-built systems; mappings are validated into :class:`System`."""
        self._systems.extend(_as_system(system) for system in systems)
        return self

    # ── Inspection ───────────────────────────────────────────────────

    @property
    def systems(self) -> list[System]:
        return list(self._systems)

    def plan(self, direction: Direction | str = Direction.UP) -> list[Level]:
        """Levels that :meth:`up` or :meth:`down` would run, in order."""
        return plan(self._systems, direction)

    # ── Execution ────────────────────────────────────────────────────

    async def up(self, *args: Any, state: Mapping[str, Any] | None = None) -> State:
        return await up(self._systems)(*args, state=state)

    async def down(self, *args: Any, state: Mapping[str, Any] | None = None) -> State:
        return await down(self._systems)(*args, state=state)

    def __len__(self) -> int:
        return len(self._systems)

    def __repr__(self) -> str:
        return f"Lifecycle(systems={len(self._systems)})"


__all__ = ["Runner", "up", "down", "Lifecycle"]

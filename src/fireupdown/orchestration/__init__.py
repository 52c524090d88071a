"""
Lifecycle orchestration: RC grouping, the staged executor, and the
``up``/``down`` entry points.

Modules::

    systems.py     System / Direction / Level + RC grouping and plans
    state.py       immutable accumulator helpers + ref()
    executor.py    apply_serially(): serial levels, concurrent actions
    lifecycle.py   up() / down() runners + Lifecycle builder
    loader.py      "package.module:attribute" -> systems (CLI)
"""

from fireupdown.orchestration.executor import (
    Empty,
    Failure,
    Outcome,
    PartialState,
    apply_serially,
    as_awaitable,
    coerce_result,
    run_level,
)
from fireupdown.orchestration.lifecycle import Lifecycle, Runner, down, up
from fireupdown.orchestration.loader import load_systems
from fireupdown.orchestration.state import State, frozen_view, merge, merge_all, ref
from fireupdown.orchestration.systems import (
    Action,
    Direction,
    Level,
    System,
    action_of,
    collect_by_rc,
    describe_action,
    group_levels,
    plan,
    rc_of,
)

__all__ = [
    # Systems
    "Action",
    "Direction",
    "System",
    "Level",
    "rc_of",
    "action_of",
    "describe_action",
    "collect_by_rc",
    "group_levels",
    "plan",
    # State
    "State",
    "merge",
    "merge_all",
    "frozen_view",
    "ref",
    # Executor
    "Empty",
    "PartialState",
    "Failure",
    "Outcome",
    "coerce_result",
    "as_awaitable",
    "run_level",
    "apply_serially",
    # Lifecycle
    "Runner",
    "up",
    "down",
    "Lifecycle",
    "load_systems",
]

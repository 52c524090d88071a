"""Staged executor: serial across levels, concurrent within a level.

ARCHITECTURE
────────────
::

    apply_serially(levels, args, state)
      │
      ├── level 0 ── asyncio.gather(one task per action)   (definition order)
      │               ├── action(*args, view)  ─► value / awaitable / raise
      │               └── settle               ─► Empty | PartialState | Failure
      │             gather returns             ─► barrier: all settled
      │             any Failure?  ─► raise first failure (definition order)
      │             merge_all(merge(pre_state, partial) for each action)
      │
      ├── level 1 ── sees the accumulator produced by level 0 only
      ⋮
      └── final accumulator

Outcomes are a small sum type (:class:`Empty`, :class:`PartialState`,
:class:`Failure`). Every settle step converts exceptions into a
``Failure`` so a failing action never cancels its siblings; they run to
completion and their results are dropped. Cancellation of the run itself
is not an action failure and propagates untouched.

Example::

    state = await apply_serially(
        [[start_db], [start_cache, start_queue]],
        args=(config,),
    )
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from collections.abc import Awaitable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from fireupdown.core.logging import get_logger
from fireupdown.orchestration.state import State, frozen_view, merge, merge_all
from fireupdown.orchestration.systems import Action, describe_action

logger = get_logger(__name__)


# =============================================================================
# Outcomes
# =============================================================================


@dataclass(frozen=True)
class Empty:
    """The action produced nothing state-shaped."""


@dataclass(frozen=True)
class PartialState:
    """The action produced keys to merge into the accumulator."""

    values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Failure:
    """The action raised, or its awaitable failed. ``error`` is untouched."""

    error: BaseException


Outcome = Empty | PartialState | Failure


def coerce_result(value: Any) -> Empty | PartialState:
    """Normalize an action's produced value; non-mappings count as empty."""
    if isinstance(value, Mapping):
        return PartialState(value)
    return Empty()


async def _resolved(value: Any) -> Any:
    return value


def as_awaitable(value: Any) -> Awaitable[Any]:
    """Return ``value`` if it is awaitable, else an awaitable resolving to it."""
    if inspect.isawaitable(value):
        return value
    return _resolved(value)


async def _invoke(action: Action, args: Sequence[Any], view: Mapping[str, Any]) -> Outcome:
    try:
        return coerce_result(await as_awaitable(action(*args, view)))
    except Exception as exc:
        return Failure(exc)


# =============================================================================
# Execution
# =============================================================================


async def run_level(
    actions: Sequence[Action],
    args: Sequence[Any],
    state: Mapping[str, Any],
) -> list[Outcome]:
    """Start every action, wait for all of them, and return their outcomes.

    Each action is invoked inside its own task; tasks are created in
    definition order, so an async action's body starts before a later sync
    sibling runs. Outcomes are returned in definition order regardless of
    completion order.
    """
    view = frozen_view(state)
    return list(await asyncio.gather(*(_invoke(action, args, view) for action in actions)))


async def apply_serially(
    levels: Iterable[Sequence[Action]],
    args: Sequence[Any] = (),
    state: Mapping[str, Any] | None = None,
) -> State:
    """Run ``levels`` one after another, threading the accumulated state.

    Args:
        levels: Ordered levels, each an ordered sequence of actions
        args: Caller arguments passed first to every action
        state: Seed accumulator (copied, never mutated)

    Returns:
        The accumulator after the last level.

    Raises:
        The first failing action's exception, unchanged, once its level has
        fully settled. Later levels never start.
    """
    run_id = str(uuid.uuid4())
    log = logger.bind(run_id=run_id)
    levels = [list(level) for level in levels]
    args = tuple(args)
    accumulator: State = dict(state or {})

    log.debug("lifecycle.start", levels=len(levels), actions=sum(map(len, levels)))

    for index, actions in enumerate(levels):
        if not actions:
            log.debug("lifecycle.level_skipped", level=index)
            continue

        log.debug("lifecycle.level_start", level=index, actions=len(actions))
        outcomes = await run_level(actions, args, accumulator)

        failures = [
            (action, outcome)
            for action, outcome in zip(actions, outcomes)
            if isinstance(outcome, Failure)
        ]
        for action, failure in failures:
            log.warning(
                "lifecycle.action_failed",
                level=index,
                action=describe_action(action),
                error=repr(failure.error),
            )
        if failures:
            log.error("lifecycle.failed", level=index, failures=len(failures))
            raise failures[0][1].error

        accumulator = merge_all(
            merge(accumulator, outcome.values if isinstance(outcome, PartialState) else None)
            for outcome in outcomes
        )
        log.debug("lifecycle.level_complete", level=index, keys=list(accumulator))

    log.debug("lifecycle.complete", levels=len(levels), keys=len(accumulator))
    return accumulator


__all__ = [
    "Empty",
    "PartialState",
    "Failure",
    "Outcome",
    "coerce_result",
    "as_awaitable",
    "run_level",
    "apply_serially",
]

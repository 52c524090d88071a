"""
Resolve a ``package.module:attribute`` target into a list of systems.

The attribute may be:

- a list or tuple of descriptors
- a :class:`~fireupdown.orchestration.lifecycle.Lifecycle`
- a zero-argument callable returning either of the above

Used by the CLI so an application can expose its systems without writing
any glue::

    # app/boot.py
    systems = [{"rc": 0, "up": start_db}, {"rc": 1, "up": start_api}]

    $ fireupdown plan app.boot:systems
"""

from __future__ import annotations

import importlib
from typing import Any

from fireupdown.core.errors import InvalidSystemError, TargetNotFoundError
from fireupdown.core.logging import get_logger
from fireupdown.orchestration.lifecycle import Lifecycle

logger = get_logger(__name__)


def _split(target: str) -> tuple[str, str]:
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise TargetNotFoundError(
            target, f"Target must look like 'package.module:attribute', got {target!r}"
        )
    return module_name, attribute


def load_systems(target: str) -> list[Any]:
    """
    Import ``target`` and return its systems in definition order.

    Raises:
        TargetNotFoundError: If the module or attribute cannot be found
        InvalidSystemError: If the attribute is not a collection of systems
    """
    module_name, attribute = _split(target)

    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        raise TargetNotFoundError(
            target, f"Cannot import module {module_name!r}", cause=exc
        ) from exc

    obj: Any = module
    for part in attribute.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise TargetNotFoundError(
                target, f"Module {module_name!r} has no attribute {attribute!r}", cause=exc
            ) from exc

    if callable(obj) and not isinstance(obj, Lifecycle):
        obj = obj()

    if isinstance(obj, Lifecycle):
        systems = obj.systems
    elif isinstance(obj, (list, tuple)):
        systems = list(obj)
    else:
        raise InvalidSystemError(
            f"{target} resolved to {type(obj).__name__}, expected a list of systems or a Lifecycle"
        ).with_context(target=target)

    logger.debug("loader.systems_loaded", target=target, systems=len(systems))
    return systems


__all__ = ["load_systems"]

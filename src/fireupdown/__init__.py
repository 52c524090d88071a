"""
fireupdown - bring systems up and down in run-level order.

Systems sharing an RC level start (or stop) concurrently; levels run one
after another, each seeing the state produced by the levels before it.

    >>> from fireupdown import up, down, ref
"""

__version__ = "0.1.0"

from fireupdown.core.errors import (
    ConfigError,
    FireupdownError,
    InvalidSystemError,
    TargetNotFoundError,
)
from fireupdown.orchestration import (
    Direction,
    Level,
    Lifecycle,
    System,
    apply_serially,
    as_awaitable,
    collect_by_rc,
    down,
    group_levels,
    plan,
    ref,
    up,
)

__all__ = [
    "__version__",
    "up",
    "down",
    "ref",
    "apply_serially",
    "as_awaitable",
    "collect_by_rc",
    "group_levels",
    "plan",
    "Direction",
    "Level",
    "Lifecycle",
    "System",
    "FireupdownError",
    "ConfigError",
    "InvalidSystemError",
    "TargetNotFoundError",
]

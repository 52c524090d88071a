"""
Shared pytest fixtures and configuration for fireupdown tests.

This module provides:
- A call tracker recording start/finish order of actions
- Settings cache cleanup for test isolation
- Auto-marking of tests by location
"""

import asyncio
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, Generator

import pytest

# Ensure fireupdown package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fireupdown.core.settings import clear_settings_cache
from fireupdown.orchestration import as_awaitable


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark CLI tests as integration, everything else as unit."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if test_path.parts[0] == "cli":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings_cache() -> Generator[None, None, None]:
    """Never let one test's environment leak into another's settings."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Call tracking
# =============================================================================


class CallTracker:
    """
    Wraps actions to record when their bodies start and when they finish.

        track = CallTracker()
        action = track("db", start_db)
        ...
        assert track.calls == ["db", "db:DONE"]

    The wrapped action is a coroutine function: the start marker is written
    when the task runs its body, and the finish marker after one extra
    scheduling step, so siblings started in the same level record their
    starts first.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.call_args: list[tuple[Any, ...]] = []

    def __call__(self, name: str, f: Callable[..., Any]) -> Callable[..., Any]:
        async def tracked(*args: Any) -> Any:
            self.calls.append(name)
            self.call_args.append(args)
            value = await as_awaitable(f(*args))
            await asyncio.sleep(0)
            self.calls.append(f"{name}:DONE")
            return value

        tracked.__qualname__ = name
        return tracked


@pytest.fixture
def track() -> CallTracker:
    return CallTracker()

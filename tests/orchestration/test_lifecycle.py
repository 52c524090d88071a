"""Tests for the up/down runners and the Lifecycle builder."""

from __future__ import annotations

import asyncio

import pytest

from fireupdown import Lifecycle, System, down, ref, up
from fireupdown.core.errors import InvalidSystemError


def _sleep(*args):
    return asyncio.sleep(0.001)


def _noop(*args):
    return None


# ── up ───────────────────────────────────────────────────────────────────


class TestUp:
    @pytest.mark.asyncio
    async def test_same_stage_concurrent_in_definition_order(self, track):
        await up([{"up": track("first", _sleep)}, {"up": track("second", _noop)}])()
        assert track.calls == ["first", "second", "second:DONE", "first:DONE"]

    @pytest.mark.asyncio
    async def test_async_action_starts_before_later_sync_action(self):
        calls = []

        async def f0(state):
            calls.append("f0")
            await asyncio.sleep(0.005)
            calls.append("f0:DONE")

        def f1(state):
            calls.append("f1")
            calls.append("f1:DONE")

        await up([{"up": f0}, {"up": f1}])()
        assert calls == ["f0", "f1", "f1:DONE", "f0:DONE"]

    @pytest.mark.asyncio
    async def test_stages_run_serially_in_ascending_rc(self, track):
        await up(
            [
                {"rc": 2, "up": track("rc[2][0]", _noop)},
                {"up": track("rc[0][0]", _noop)},
                {"rc": 5, "up": track("rc[5][0]", _noop)},
                {"rc": 5, "up": track("rc[5][1]", _noop)},
            ]
        )()
        assert track.calls == [
            "rc[0][0]", "rc[0][0]:DONE",
            "rc[2][0]", "rc[2][0]:DONE",
            "rc[5][0]",
            "rc[5][1]",
            "rc[5][0]:DONE",
            "rc[5][1]:DONE",
        ]

    @pytest.mark.asyncio
    async def test_passes_arguments_then_state(self):
        params = {}
        received = []

        def action(a, b, state):
            received.append((a, b, dict(state)))

        await up([{"up": action}])("1", params)
        assert received == [("1", params, {})]
        assert received[0][1] is params

    @pytest.mark.asyncio
    async def test_maintains_return_values(self):
        assert await up([{"up": lambda s: {"foo": "1"}}])() == {"foo": "1"}

    @pytest.mark.asyncio
    async def test_aggregates_all_returned_refs(self):
        state = await up(
            [
                {"up": lambda s: {"foo": 0}},
                {"up": lambda s: {"bar": 0}},
                {"rc": 1, "up": lambda s: {"foo": s["foo"] + 1}},
            ]
        )()
        assert state == {"bar": 0, "foo": 1}

    @pytest.mark.asyncio
    async def test_passes_refs_to_next_stages(self):
        state = await up(
            [
                {"up": lambda s: {"foo": 0}},
                {"rc": 1, "up": lambda s: {"foo": s["foo"] + 1}},
            ]
        )()
        assert state == {"foo": 1}

    @pytest.mark.asyncio
    async def test_async_actions_and_ref(self):
        async def start_router(config, state):
            await asyncio.sleep(0)
            return ref("router")(f"router@{config['url']}")

        async def start_ui(config, state):
            return {"component": f"ui({state['router']})"}

        state = await up([{"rc": 0, "up": start_router}, {"rc": 1, "up": start_ui}])({"url": "/"})
        assert state == {"router": "router@/", "component": "ui(router@/)"}

    @pytest.mark.asyncio
    async def test_seed_state(self):
        state = await up([{"up": lambda s: {"seen": s["seed"]}}])(state={"seed": 7})
        assert state == {"seed": 7, "seen": 7}

    @pytest.mark.asyncio
    async def test_ignores_systems_without_up(self, track):
        state = await up([{"down": track("down", _noop)}, {"up": lambda s: {"a": 1}}])()
        assert state == {"a": 1}
        assert track.calls == []

    @pytest.mark.asyncio
    async def test_failure_short_circuits(self, track):
        error = RuntimeError("db unavailable")

        async def fails(state):
            raise error

        with pytest.raises(RuntimeError) as exc_info:
            await up(
                [
                    {"up": fails},
                    {"rc": 1, "up": track("later", _noop)},
                ]
            )()
        assert exc_info.value is error
        assert track.calls == []

    @pytest.mark.asyncio
    async def test_runner_is_reusable(self):
        runner = up([{"up": lambda n, s: {"n": n}}])
        assert await runner(1) == {"n": 1}
        assert await runner(2) == {"n": 2}

    @pytest.mark.asyncio
    async def test_snapshot_of_systems(self):
        systems = [{"up": lambda s: {"a": 1}}]
        runner = up(systems)
        systems.append({"up": lambda s: {"b": 2}})
        assert await runner() == {"a": 1}


# ── down ─────────────────────────────────────────────────────────────────


class TestDown:
    @pytest.mark.asyncio
    async def test_same_stage_concurrent_in_definition_order(self, track):
        await down([{"down": track("first", _sleep)}, {"down": track("second", _noop)}])()
        assert track.calls == ["first", "second", "second:DONE", "first:DONE"]

    @pytest.mark.asyncio
    async def test_async_action_starts_before_later_sync_action(self):
        calls = []

        async def f0(state):
            calls.append("f0")
            await asyncio.sleep(0.005)
            calls.append("f0:DONE")

        def f1(state):
            calls.append("f1")
            calls.append("f1:DONE")

        await down([{"down": f0}, {"down": f1}])()
        assert calls == ["f0", "f1", "f1:DONE", "f0:DONE"]

    @pytest.mark.asyncio
    async def test_stages_run_serially_in_reverse_order(self, track):
        await down(
            [
                {"rc": 2, "down": track("rc[2][0]", _noop)},
                {"rc": -2, "down": track("rc[-2][0]", _noop)},
                {"rc": 5, "down": track("rc[5][0]", _noop)},
                {"rc": 5, "down": track("rc[5][1]", _noop)},
            ]
        )()
        assert track.calls == [
            "rc[5][0]",
            "rc[5][1]",
            "rc[5][0]:DONE",
            "rc[5][1]:DONE",
            "rc[2][0]", "rc[2][0]:DONE",
            "rc[-2][0]", "rc[-2][0]:DONE",
        ]

    @pytest.mark.asyncio
    async def test_passes_arguments_to_hooks(self):
        params = {}
        received = []
        await down([{"down": lambda a, b, s: received.append((a, b))}])("1", params)
        assert received == [("1", params)]

    @pytest.mark.asyncio
    async def test_aggregates_all_returned_refs(self):
        state = await down(
            [
                {"down": lambda s: {"foo": s["foo"] - 2}},
                {"rc": 1, "down": lambda s: {"bar": 0}},
                {"rc": 2, "down": lambda s: {"foo": 2}},
            ]
        )()
        assert state == {"bar": 0, "foo": 0}

    @pytest.mark.asyncio
    async def test_passes_refs_to_previous_stages(self):
        state = await down(
            [
                {"down": lambda s: {"foo": s["foo"] - 2}},
                {"rc": 1, "down": lambda s: {"foo": 1}},
            ]
        )()
        assert state == {"foo": -1}

    @pytest.mark.asyncio
    async def test_failure_in_level_rejects_with_original_error(self, track):
        error = ValueError("E")

        async def f_fail(state):
            raise error

        with pytest.raises(ValueError) as exc_info:
            await down(
                [
                    {"rc": 0, "down": track("rc0", _noop)},
                    {"rc": 1, "down": f_fail},
                    {"rc": 1, "down": track("other", _noop)},
                ]
            )()
        assert exc_info.value is error
        assert track.calls == ["other", "other:DONE"]


# ── Lifecycle ────────────────────────────────────────────────────────────


class TestLifecycle:
    def test_add_is_fluent(self):
        lifecycle = Lifecycle()
        assert lifecycle.add(_noop, name="db") is lifecycle
        assert len(lifecycle) == 1
        assert lifecycle.systems == [System(up=_noop, name="db")]

    def test_systems_returns_copy(self):
        lifecycle = Lifecycle().add(_noop)
        lifecycle.systems.clear()
        assert len(lifecycle) == 1

    def test_add_validates(self):
        with pytest.raises(InvalidSystemError):
            Lifecycle().add(_noop, rc="1")  # type: ignore[arg-type]

    def test_extend_accepts_mappings_and_systems(self):
        lifecycle = Lifecycle([{"up": _noop, "rc": 2, "name": "api"}, System(down=_noop)])
        assert [s.rc for s in lifecycle.systems] == [2, 0]
        assert lifecycle.systems[0].name == "api"

    def test_extend_rejects_other_objects(self):
        with pytest.raises(InvalidSystemError):
            Lifecycle([42])

    def test_plan(self):
        lifecycle = (
            Lifecycle()
            .add(_noop, _noop, name="db")
            .add(_noop, _noop, rc=1, name="api")
            .add(_noop, rc=1, name="worker")
        )
        assert [(lv.rc, lv.labels) for lv in lifecycle.plan("up")] == [
            (0, ("db",)),
            (1, ("api", "worker")),
        ]
        assert [(lv.rc, lv.labels) for lv in lifecycle.plan("down")] == [
            (1, ("api",)),
            (0, ("db",)),
        ]

    def test_repr(self):
        assert repr(Lifecycle().add(_noop)) == "Lifecycle(systems=1)"

    @pytest.mark.asyncio
    async def test_up_then_down(self):
        events = []

        async def start_db(config, state):
            events.append("db up")
            return {"db": f"conn:{config}"}

        async def start_api(config, state):
            events.append(f"api up using {state['db']}")
            return {"api": "server"}

        def stop_api(config, state):
            events.append("api down")

        def stop_db(config, state):
            events.append(f"db down closing {state['db']}")

        lifecycle = (
            Lifecycle()
            .add(start_db, stop_db, name="db")
            .add(start_api, stop_api, rc=1, name="api")
        )
        state = await lifecycle.up("dsn")
        assert state == {"db": "conn:dsn", "api": "server"}

        final = await lifecycle.down("dsn", state=state)
        assert final == state
        assert events == [
            "db up",
            "api up using conn:dsn",
            "api down",
            "db down closing conn:dsn",
        ]

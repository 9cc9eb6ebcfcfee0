"""Tests for the Action Executor."""

import asyncio
from datetime import datetime, timedelta

import pytest

from fleet_autoscaler.errors import ActionError
from fleet_autoscaler.execution.executor import ActionExecutor
from fleet_autoscaler.models.action import NoOp, StartNode, StopNodes
from fleet_autoscaler.models.autoscaler import StopStrategy
from fleet_autoscaler.models.world import WorldView
from fleet_autoscaler.sources.memory import InMemoryNodeManager

T = datetime(2026, 3, 1, 12, 0, 0)


def _make_world(alive=None, pending=None) -> WorldView:
    return WorldView(
        backlog=0,
        agent_count=0,
        managed_nodes=["n1", "n2", "n3"],
        alive=alive or {},
        pending=pending or {},
        time=T,
    )


def _make_manager() -> InMemoryNodeManager:
    return InMemoryNodeManager(["n1", "n2", "n3"], clock=lambda: T)


class TestNoOp:
    def test_returns_view_unchanged(self):
        manager = _make_manager()
        world = _make_world(pending={"n2": T - timedelta(minutes=1)})
        result = asyncio.run(ActionExecutor(manager).act(world, NoOp()))
        assert result is world
        assert manager.started == []
        assert manager.stopped == []


class TestStart:
    def test_start_records_pending(self):
        manager = _make_manager()
        result = asyncio.run(ActionExecutor(manager).act(_make_world(), StartNode(node_id="n1")))
        assert manager.started == ["n1"]
        assert result.pending == {"n1": T}

    def test_start_failure_raises(self):
        manager = _make_manager()
        manager.fail("start_node")
        world = _make_world()
        with pytest.raises(ActionError) as exc_info:
            asyncio.run(ActionExecutor(manager).act(world, StartNode(node_id="n1")))
        assert exc_info.value.world is world
        assert exc_info.value.failed_nodes == ["n1"]


class TestSequentialStop:
    def setup_method(self):
        self.manager = _make_manager()
        self.executor = ActionExecutor(self.manager, StopStrategy.SEQUENTIAL)
        self.world = _make_world(alive={n: T - timedelta(hours=6) for n in ("n1", "n2", "n3")})

    def test_stops_all(self):
        result = asyncio.run(self.executor.act(self.world, StopNodes(node_ids=("n1", "n2", "n3"))))
        assert self.manager.stopped == ["n1", "n2", "n3"]
        assert result.pending == {"n1": T, "n2": T, "n3": T}

    def test_failure_keeps_recorded_entries(self):
        self.manager.fail_node("n2")
        with pytest.raises(ActionError) as exc_info:
            asyncio.run(self.executor.act(self.world, StopNodes(node_ids=("n1", "n2", "n3"))))
        err = exc_info.value
        assert self.manager.stopped == ["n1"]
        assert err.failed_nodes == ["n2"]
        assert err.world.pending == {"n1": T}


class TestParallelStop:
    def setup_method(self):
        self.manager = _make_manager()
        self.executor = ActionExecutor(self.manager, StopStrategy.PARALLEL)
        self.world = _make_world(alive={n: T - timedelta(hours=6) for n in ("n1", "n2", "n3")})

    def test_stops_all(self):
        result = asyncio.run(self.executor.act(self.world, StopNodes(node_ids=("n1", "n2", "n3"))))
        assert sorted(self.manager.stopped) == ["n1", "n2", "n3"]
        assert result.pending == {"n1": T, "n2": T, "n3": T}

    def test_any_failure_records_nothing(self):
        self.manager.fail_node("n2")
        with pytest.raises(ActionError) as exc_info:
            asyncio.run(self.executor.act(self.world, StopNodes(node_ids=("n1", "n2", "n3"))))
        err = exc_info.value
        assert err.world is self.world
        assert err.world.pending == {}
        assert err.failed_nodes == ["n2"]
        # The other requests were still issued
        assert sorted(self.manager.stopped) == ["n1", "n3"]

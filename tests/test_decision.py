"""Tests for the Decision Engine."""

from datetime import datetime, timedelta

import pytest

from fleet_autoscaler.decision.engine import decide, needs_scale_up
from fleet_autoscaler.models.action import NoOp, StartNode, StopNodes
from fleet_autoscaler.models.autoscaler import AutoscalerConfig
from fleet_autoscaler.models.world import WorldView

T = datetime(2026, 3, 1, 12, 0, 0)


def _make_view(backlog=0, agents=0, alive=None, pending=None, managed=None) -> WorldView:
    return WorldView(
        backlog=backlog,
        agent_count=agents,
        managed_nodes=managed or ["n1", "n2"],
        alive=alive or {},
        pending=pending or {},
        time=T,
    )


class TestScaleUp:
    def test_scenario_a_starts_first_managed_node(self):
        action = decide(_make_view(backlog=5))
        assert isinstance(action, StartNode)
        assert action.node_id == "n1"

    def test_uses_managed_order(self):
        action = decide(_make_view(backlog=1, managed=["b", "a"]))
        assert isinstance(action, StartNode)
        assert action.node_id == "b"

    def test_no_scale_up_with_agents(self):
        assert decide(_make_view(backlog=5, agents=1)) == NoOp()

    def test_no_scale_up_without_backlog(self):
        assert decide(_make_view(backlog=0)) == NoOp()

    def test_no_scale_up_with_alive_node(self):
        action = decide(_make_view(backlog=5, alive={"n2": T - timedelta(minutes=1)}))
        assert not isinstance(action, StartNode)

    def test_no_scale_up_with_pending_request(self):
        action = decide(_make_view(backlog=5, pending={"n1": T - timedelta(minutes=1)}))
        assert action == NoOp()

    def test_predicate(self):
        assert needs_scale_up(_make_view(backlog=1))
        assert not needs_scale_up(_make_view(backlog=1, agents=2))


class TestScaleDown:
    @pytest.mark.parametrize("age,expected", [
        (timedelta(minutes=57, seconds=59), False),
        (timedelta(minutes=58), True),
        (timedelta(minutes=59, seconds=59), True),
        (timedelta(minutes=60), False),
        (timedelta(minutes=118), True),
    ])
    def test_billing_boundary_when_idle(self, age, expected):
        action = decide(_make_view(alive={"n1": T - age}))
        assert isinstance(action, StopNodes) is expected

    def test_scenario_b_young_idle_node_kept(self):
        assert decide(_make_view(alive={"n1": T - timedelta(minutes=52)})) == NoOp()

    def test_scenario_c_idle_node_near_boundary_stopped(self):
        action = decide(_make_view(alive={"n1": T - timedelta(minutes=59)}))
        assert isinstance(action, StopNodes)
        assert action.node_ids == ("n1",)

    def test_busy_node_near_boundary_kept(self):
        action = decide(_make_view(backlog=3, alive={"n1": T - timedelta(minutes=59)}))
        assert action == NoOp()

    def test_max_age_boundary_when_busy(self):
        young = decide(_make_view(backlog=7, alive={"n1": T - timedelta(hours=4, minutes=59, seconds=59)}))
        old = decide(_make_view(backlog=7, alive={"n1": T - timedelta(hours=5)}))
        assert young == NoOp()
        assert isinstance(old, StopNodes)

    def test_scenario_d_max_age_ignores_backlog(self):
        action = decide(_make_view(backlog=7, alive={"n1": T - timedelta(hours=5, minutes=1)}))
        assert isinstance(action, StopNodes)
        assert action.node_ids == ("n1",)

    def test_pending_nodes_never_selected(self):
        alive = {
            "n1": T - timedelta(minutes=59),
            "n2": T - timedelta(hours=6),
        }
        action = decide(_make_view(alive=alive, pending={"n1": T - timedelta(minutes=2)}))
        assert isinstance(action, StopNodes)
        assert action.node_ids == ("n2",)

    def test_all_candidates_pending_is_noop(self):
        alive = {"n1": T - timedelta(hours=6)}
        action = decide(_make_view(alive=alive, pending={"n1": T - timedelta(minutes=2)}))
        assert action == NoOp()

    def test_multiple_nodes_in_managed_order(self):
        alive = {
            "n3": T - timedelta(minutes=58),
            "n1": T - timedelta(minutes=59),
            "n2": T - timedelta(minutes=10),
        }
        action = decide(_make_view(alive=alive, managed=["n1", "n2", "n3"]))
        assert action.node_ids == ("n1", "n3")

    def test_custom_thresholds(self):
        config = AutoscalerConfig(billing_period_minutes=30, stop_threshold_minutes=25)
        action = decide(_make_view(alive={"n1": T - timedelta(minutes=56)}), config)
        assert isinstance(action, StopNodes)

    def test_future_start_time_treated_as_fresh(self):
        """Clock skew must not make a brand-new node look like it is at minute 59."""
        action = decide(_make_view(alive={"n1": T + timedelta(seconds=30)}))
        assert action == NoOp()


class TestRuleOrder:
    def test_no_alive_never_stops(self):
        """Scale-down requires alive nodes, so it can never shadow scale-up."""
        action = decide(_make_view(backlog=0))
        assert not isinstance(action, StopNodes)

    def test_scale_up_checked_first(self):
        config = AutoscalerConfig(max_node_age_minutes=1)
        action = decide(_make_view(backlog=2), config)
        assert isinstance(action, StartNode)

    def test_decide_never_selects_pending(self):
        alive = {n: T - timedelta(hours=6) for n in ("n1", "n2", "n3")}
        pending = {"n2": T}
        for backlog in (0, 5):
            action = decide(_make_view(backlog=backlog, alive=alive, pending=pending, managed=["n1", "n2", "n3"]))
            assert "n2" not in getattr(action, "node_ids", ())

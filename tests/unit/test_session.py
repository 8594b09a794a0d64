"""Tests for HudSession, the view-state owner."""

import json

import pytest

from orgpulse.core.edges import build_cross_level_edges
from orgpulse.models.node import OrgTree
from orgpulse.session import HudSession, find_initial_selection
from tests.unit.fakes import make_tree


@pytest.fixture
def session(balanced_org: OrgTree) -> HudSession:
    return HudSession(42, "balanced", tree=balanced_org)


def test_initial_selection_is_weakest_branch(session: HudSession) -> None:
    tree = session.tree
    weakest = min(tree.nodes[b].score for b in tree.branch_ids)
    assert session.selected_id in tree.branch_ids
    assert tree.nodes[session.selected_id].score == weakest
    assert session.zoom.anchor_id == "company"


def test_initial_selection_falls_back_to_root() -> None:
    assert find_initial_selection(make_tree({})) == "root"


def test_tree_without_root_is_rejected() -> None:
    with pytest.raises(ValueError):
        HudSession(tree=OrgTree(root_id="company"))


def test_select_toggles_and_ignores_unknown(session: HudSession) -> None:
    session.select("branch-2")
    assert session.selected_id == "branch-2"
    session.select("ghost")
    assert session.selected_id == "branch-2"
    session.select("branch-2")
    assert session.selected_id is None


def test_hover_unknown_clears(session: HudSession) -> None:
    session.hover("branch-4")
    assert session.hovered_id == "branch-4"
    session.hover("ghost")
    assert session.hovered_id is None


def test_zoom_in_on_selection_then_out(session: HudSession) -> None:
    selected = session.selected_id
    session.zoom_in()
    assert session.zoom.anchor_id == selected
    assert session.zoom.zoom_level == 1
    assert session.selected_id is None
    assert session.can_zoom_out()

    session.zoom_out()
    assert session.zoom.anchor_id == "company"
    assert not session.can_zoom_out()


def test_zoom_in_on_leaf_is_noop(session: HudSession) -> None:
    team_id = session.tree.ids_at_level("team")[0]
    assert not session.can_zoom_in(team_id)
    before = session.zoom
    session.zoom_in(team_id)
    assert session.zoom is before


def test_zoom_to_defaults_to_root_path(session: HudSession) -> None:
    session.zoom_to("division-1-1")
    assert session.zoom.zoom_path == ("company", "branch-1", "division-1-1")
    assert session.zoom.zoom_level == 2
    assert session.visibility().ring_of["division-1-1"] == 0

    session.zoom_to("ghost")
    assert session.zoom.anchor_id == "division-1-1"

    session.reset_zoom()
    assert session.zoom.anchor_id == "company"
    assert session.zoom.zoom_level == 0


def test_views_cover_visible_nodes(session: HudSession) -> None:
    visible = session.visibility().visible_ids
    assert set(session.selection_states()) == visible
    assert set(session.node_lighting()) == visible
    assert set(session.wedge_states()) == visible
    assert set(session.ring_states()) == {0, 1, 2, 3}


def test_branch_selection_uses_function_edges(session: HudSession) -> None:
    session.selected_id = "branch-1"
    edges = session.active_edges()
    assert {e.to_id for e in edges} == {"branch-2", "branch-5", "branch-6"}

    targets = session.dependency_targets()
    assert [t.target_id for t in targets] == ["branch-2", "branch-5", "branch-6"]
    assert all(t.is_visible for t in targets)


def test_cross_level_edges_follow_selection(session: HudSession) -> None:
    edge = build_cross_level_edges(session.tree)[0]
    session.selected_id = edge.from_id
    assert edge in session.active_edges()
    assert all(e.from_id == edge.from_id for e in session.active_edges())


def test_pressure_marks_only_for_visible_targets(session: HudSession) -> None:
    session.selected_id = "branch-1"
    ring_of = session.visibility().ring_of
    marks = session.pressure_marks()

    assert [m.target_id for m in marks] == ["branch-2", "branch-5", "branch-6"]
    assert marks[0].intensity01 == pytest.approx(1.0)
    for mark in marks:
        assert mark.ring == ring_of[mark.target_id]
        assert not mark.cross_ring


def test_no_selection_no_pressure(session: HudSession) -> None:
    session.select(session.selected_id)
    assert session.selected_id is None
    assert session.active_edges() == []
    assert session.dependency_targets() == []
    assert session.pressure_marks() == []


def test_snapshot_is_json_ready(session: HudSession) -> None:
    session.selected_id = "branch-1"
    snapshot = json.loads(json.dumps(session.snapshot()))
    assert snapshot["seed"] == 42
    assert snapshot["zoom"]["zoom_path"] == ["company"]
    assert snapshot["selected_id"] == "branch-1"
    assert snapshot["selection_states"]["branch-1"] == "selected"
    assert snapshot["ring_states"]["1"] == "active"
    assert [p["target_id"] for p in snapshot["pressure"]] == ["branch-2", "branch-5", "branch-6"]


def test_session_on_hand_built_tree(small_tree: OrgTree) -> None:
    session = HudSession(tree=small_tree)
    assert session.selected_id == "b1"
    session.zoom_in()
    assert session.visibility().ring_of == {
        "b1": 0,
        "d1": 1,
        "d2": 1,
        "p1": 2,
        "p2": 2,
        "t1": 3,
        "t2": 3,
    }

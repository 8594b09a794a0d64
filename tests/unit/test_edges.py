"""Tests for function and cross-level dependency edges."""

import pytest

from orgpulse.core.edges import (
    FUNCTION_DEPENDENCIES,
    FunctionDependency,
    build_cross_level_edges,
    collect_dependency_targets,
    derive_function_edges,
    edge_id,
    edges_to_targets,
    hash_id,
)
from orgpulse.core.tree.paths import path_to_node
from orgpulse.models.node import OrgTree
from tests.unit.fakes import make_edge


@pytest.mark.parametrize(
    ("value", "expected"),
    [("", 0), ("a", 97), ("ab", 3105), ("hello", 99162322)],
)
def test_hash_id_matches_known_values(value: str, expected: int) -> None:
    assert hash_id(value) == expected


def test_hash_id_wraps_and_stays_positive() -> None:
    value = "team-1-10-10-10" * 4
    assert 0 <= hash_id(value) <= 2**31


def test_edge_id() -> None:
    assert edge_id("branch-1", "branch-2") == "branch-1__branch-2"


def test_function_edges_for_product() -> None:
    edges = derive_function_edges(FUNCTION_DEPENDENCIES, "branch-1")
    assert [(e.id, e.to_id, e.weight) for e in edges] == [
        ("branch-1__branch-2", "branch-2", 8),
        ("branch-1__branch-5", "branch-5", 6),
        ("branch-1__branch-6", "branch-6", 4),
    ]
    assert all(e.from_id == "branch-1" for e in edges)


def test_every_branch_has_function_edges() -> None:
    for function_id in (f"branch-{i}" for i in range(1, 8)):
        assert derive_function_edges(FUNCTION_DEPENDENCIES, function_id)


def test_function_edges_drop_out_of_range_weights() -> None:
    deps = {"x": FunctionDependency("X", {"a": 0, "b": 11, "c": 1, "d": 10})}
    assert [e.to_id for e in derive_function_edges(deps, "x")] == ["c", "d"]


def test_unknown_function_has_no_edges() -> None:
    assert derive_function_edges(FUNCTION_DEPENDENCIES, "branch-99") == []


def test_cross_level_edges_follow_rules(balanced_org: OrgTree) -> None:
    edges = build_cross_level_edges(balanced_org)
    assert edges

    expected = {
        "division": ("department", 3, 4, 10),
        "department": ("team", 4, 3, 10),
        "team": ("division", 5, 2, 10),
    }
    for edge in edges:
        source = balanced_org.nodes[edge.from_id]
        target = balanced_org.nodes[edge.to_id]
        target_level, modulus, low, high = expected[source.level]
        assert target.level == target_level
        assert source.branch_id != target.branch_id
        assert hash_id(source.id) % modulus == 0
        assert low <= edge.weight <= high
        assert edge.to_path == path_to_node(target.id, balanced_org)
        assert edge.to_path[0] == "company"


def test_cross_level_edges_are_deterministic(balanced_org: OrgTree) -> None:
    assert build_cross_level_edges(balanced_org) == build_cross_level_edges(balanced_org)


def test_targets_keep_heaviest_edge_per_landing(small_tree: OrgTree) -> None:
    edges = [
        make_edge("d1", "d3", 3),
        make_edge("d1", "p3", 7, to_path=("root", "b2", "d3")),
        make_edge("d1", "b2", 5),
        make_edge("d1", "ghost", 9),
        make_edge("d2", "d3", 10),
    ]
    targets = collect_dependency_targets("d1", edges, small_tree, visible_ids={"b2"})

    assert [(t.target_id, t.weight) for t in targets] == [("d3", 7), ("b2", 5)]
    d3 = targets[0]
    assert d3.edge_id == "d1__p3"
    assert d3.landing_path == ("root", "b2", "d3")
    assert d3.path_from_root == ("root", "b2", "d3")
    assert not d3.is_visible
    assert targets[1].is_visible


def test_targets_tie_keeps_first_edge(small_tree: OrgTree) -> None:
    edges = [make_edge("d1", "d3", 4), make_edge("d1", "p3", 4, to_path=("root", "b2", "d3"))]
    (target,) = collect_dependency_targets("d1", edges, small_tree)
    assert target.edge_id == "d1__d3"


def test_targets_without_focus_are_empty(small_tree: OrgTree) -> None:
    assert collect_dependency_targets(None, [make_edge("d1", "d3", 4)], small_tree) == []


def test_edges_to_targets_collapses_routes(small_tree: OrgTree) -> None:
    edges = [make_edge("d1", "p3", 7, to_path=("root", "b2", "d3"))]
    targets = collect_dependency_targets("d1", edges, small_tree)
    (direct,) = edges_to_targets("d1", targets)
    assert (direct.id, direct.from_id, direct.to_id, direct.weight) == ("d1__d3", "d1", "d3", 7)
    assert direct.to_path == ()

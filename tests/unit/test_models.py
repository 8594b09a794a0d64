"""Tests for domain models."""

import pytest

from orgpulse.models.node import (
    DependencyEdge,
    Explanation,
    Kpi,
    OrgNode,
    OrgTree,
    level_index,
    next_level,
)


def test_kpi_is_frozen() -> None:
    kpi = Kpi(key="k", label="Quality", value=80, weight=0.5)
    with pytest.raises(AttributeError):
        kpi.value = 10  # type: ignore[misc]


def test_default_explanation_is_stable() -> None:
    assert Explanation().why == "Performance is stable."
    assert OrgNode(id="x", name="X", level="team").explanation == Explanation()


def test_level_helpers() -> None:
    assert level_index("company") == 0
    assert level_index("team") == 4
    assert next_level("division") == "department"
    assert next_level("team") is None


def test_add_links_child_under_parent() -> None:
    tree = OrgTree(root_id="r")
    tree.add(OrgNode(id="r", name="R", level="company"))
    first = tree.add(OrgNode(id="a", name="A", level="branch", parent_id="r"))
    second = tree.add(OrgNode(id="b", name="B", level="branch", parent_id="r"))

    assert tree.nodes["r"].children_ids == ["a", "b"]
    assert (first.sort_order, second.sort_order) == (0, 1)
    assert tree.ordered_ids == ["r", "a", "b"]
    assert len(tree) == 3
    assert "a" in tree
    assert "zzz" not in tree


def test_get_is_none_safe(small_tree: OrgTree) -> None:
    assert small_tree.get(None) is None
    assert small_tree.get("missing") is None
    assert small_tree.get("b1") is small_tree.nodes["b1"]


def test_children_of_skips_dangling_ids(small_tree: OrgTree) -> None:
    small_tree.nodes["b2"].children_ids.append("ghost")
    assert [c.id for c in small_tree.children_of("b2")] == ["d3"]
    assert small_tree.children_of("missing") == []


def test_ids_at_level_keeps_generation_order(small_tree: OrgTree) -> None:
    assert small_tree.ids_at_level("division") == ["d1", "d2", "d3"]
    assert small_tree.ids_at_level("team") == ["t1", "t2", "t3"]


def test_require_root_raises_on_empty_tree() -> None:
    with pytest.raises(ValueError, match="no root"):
        OrgTree(root_id="company").require_root()


def test_is_leaf(small_tree: OrgTree) -> None:
    assert small_tree.nodes["t1"].is_leaf
    assert small_tree.nodes["d2"].is_leaf
    assert not small_tree.nodes["p1"].is_leaf


def test_edge_landing_prefers_path_end() -> None:
    plain = DependencyEdge(id="a__b", from_id="a", to_id="b", weight=3)
    routed = DependencyEdge(id="a__b", from_id="a", to_id="b", weight=3, to_path=("r", "x", "c"))
    assert plain.landing_id == "b"
    assert routed.landing_id == "c"

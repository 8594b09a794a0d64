"""Tests for dependency pressure marks."""

import pytest

from orgpulse.core.pressure import clamp01, derive_pressure, ease_out
from tests.unit.fakes import make_edge


def test_weights_normalize_within_ring() -> None:
    ring_of = {"f": 1, "a": 2, "b": 2}
    edges = [make_edge("f", "a", 10), make_edge("f", "b", 3)]

    marks = derive_pressure("f", ring_of, edges)

    assert [m.target_id for m in marks] == ["a", "b"]
    assert marks[0].intensity01 == pytest.approx(1.0)
    assert marks[1].intensity01 == pytest.approx(0.3**0.7)
    assert all(m.tier == "primary" for m in marks)
    assert all(m.cross_ring for m in marks)


def test_rings_are_normalized_independently() -> None:
    ring_of = {"f": 1, "a": 1, "b": 2}
    marks = derive_pressure("f", ring_of, [make_edge("f", "a", 9), make_edge("f", "b", 2)])
    assert [(m.target_id, m.ring) for m in marks] == [("a", 1), ("b", 2)]
    assert [m.intensity01 for m in marks] == [pytest.approx(1.0), pytest.approx(1.0)]
    assert [m.cross_ring for m in marks] == [False, True]


def test_at_most_four_primary_per_ring() -> None:
    ring_of = {"f": 0, **{f"a{i}": 1 for i in range(6)}, **{f"b{i}": 2 for i in range(3)}}
    edges = [make_edge("f", f"a{i}", i + 1) for i in range(6)]
    edges += [make_edge("f", f"b{i}", 5) for i in range(3)]

    marks = derive_pressure("f", ring_of, edges)

    ring_one = [m for m in marks if m.ring == 1]
    assert [m.target_id for m in ring_one] == ["a5", "a4", "a3", "a2", "a1", "a0"]
    assert [m.tier for m in ring_one] == ["primary"] * 4 + ["secondary"] * 2
    assert all(m.tier == "primary" for m in marks if m.ring == 2)


def test_groups_come_out_in_ring_order() -> None:
    ring_of = {"f": 0, "near": 1, "far": 3, "mid": 2}
    edges = [make_edge("f", "far", 9), make_edge("f", "near", 1), make_edge("f", "mid", 5)]
    assert [m.ring for m in derive_pressure("f", ring_of, edges)] == [1, 2, 3]


def test_equal_weights_keep_edge_order() -> None:
    ring_of = {"f": 0, "x": 1, "y": 1, "z": 1}
    edges = [make_edge("f", "y", 4), make_edge("f", "x", 4), make_edge("f", "z", 4)]
    assert [m.target_id for m in derive_pressure("f", ring_of, edges)] == ["y", "x", "z"]


def test_out_of_range_and_foreign_edges_are_ignored() -> None:
    ring_of = {"f": 0, "g": 0, "a": 1, "b": 1, "c": 1}
    edges = [
        make_edge("f", "a", 0),
        make_edge("f", "b", 11),
        make_edge("g", "c", 5),
    ]
    assert derive_pressure("f", ring_of, edges) == []


def test_targets_without_ring_are_skipped() -> None:
    ring_of = {"f": 0, "a": 1}
    marks = derive_pressure("f", ring_of, [make_edge("f", "a", 2), make_edge("f", "hidden", 9)])
    assert [m.target_id for m in marks] == ["a"]
    assert marks[0].intensity01 == pytest.approx(1.0)


@pytest.mark.parametrize("focus", [None, "", "unknown"])
def test_missing_focus_gives_no_marks(focus: str | None) -> None:
    assert derive_pressure(focus, {"a": 1}, [make_edge("unknown", "a", 5)]) == []


def test_intensity_is_bounded() -> None:
    ring_of = {"f": 0, **{f"t{w}": 1 for w in range(1, 11)}}
    edges = [make_edge("f", f"t{w}", w) for w in range(1, 11)]
    for mark in derive_pressure("f", ring_of, edges):
        assert 0.0 <= mark.intensity01 <= 1.0


def test_easing_and_clamp() -> None:
    assert ease_out(0.0) == 0.0
    assert ease_out(1.0) == 1.0
    assert ease_out(0.5) > 0.5
    assert clamp01(-0.2) == 0.0
    assert clamp01(1.7) == 1.0

"""Dependency pressure marks, normalized per ring."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

from orgpulse.config import (
    MAX_EDGE_WEIGHT,
    MIN_EDGE_WEIGHT,
    PRESSURE_EASING_EXPONENT,
    PRIMARY_TIER_SIZE,
)
from orgpulse.models.node import DependencyEdge

Tier = Literal["primary", "secondary"]


@dataclass(frozen=True)
class PressureMark:
    """Visual pressure on one dependency target of the focus node."""

    target_id: str
    ring: int
    weight: float
    intensity01: float
    tier: Tier
    cross_ring: bool


def clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def ease_out(t: float) -> float:
    """Concave easing so light edges stay visible."""
    return t**PRESSURE_EASING_EXPONENT


def _in_weight_range(edge: DependencyEdge) -> bool:
    return MIN_EDGE_WEIGHT <= edge.weight <= MAX_EDGE_WEIGHT


def derive_pressure(
    focus_id: str | None,
    ring_of: Mapping[str, int],
    edges: Sequence[DependencyEdge],
) -> list[PressureMark]:
    """Pressure marks for the focus node's outgoing edges.

    Edges are grouped by the ring of their target; intensity and the
    primary/secondary split are computed within each group. Groups come out
    in ascending ring order, members by descending weight with the input
    edge order breaking ties. Targets without a ring are skipped.
    """
    if not focus_id or focus_id not in ring_of:
        return []
    focus_ring = ring_of[focus_id]

    groups: dict[int, list[DependencyEdge]] = {}
    for edge in edges:
        if edge.from_id != focus_id or not _in_weight_range(edge):
            continue
        target_ring = ring_of.get(edge.to_id)
        if target_ring is None:
            continue
        groups.setdefault(target_ring, []).append(edge)

    marks: list[PressureMark] = []
    for ring in sorted(groups):
        ring_edges = groups[ring]
        max_weight = max(edge.weight for edge in ring_edges)
        if max_weight <= 0:
            continue
        # sorted() is stable, so equal weights keep their edge order.
        ranked = sorted(ring_edges, key=lambda e: e.weight, reverse=True)
        for index, edge in enumerate(ranked):
            marks.append(
                PressureMark(
                    target_id=edge.to_id,
                    ring=ring,
                    weight=edge.weight,
                    intensity01=clamp01(ease_out(edge.weight / max_weight)),
                    tier="primary" if index < PRIMARY_TIER_SIZE else "secondary",
                    cross_ring=ring != focus_ring,
                )
            )
    return marks

"""Lift a focus node's dependency targets to drawable levels."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from orgpulse.config import FOCUS_VISIBLE_LEVEL, PRIMARY_TIER_SIZE
from orgpulse.core.pressure import ease_out
from orgpulse.core.tree.paths import ancestor_chain, path_to_node
from orgpulse.models.node import DependencyEdge, OrgNode, OrgTree, level_index

_RING_BY_LEVEL = {"branch": 0, "division": 1, "department": 2}


@dataclass(frozen=True)
class FocusTarget:
    """A dependency target as it will be drawn."""

    id: str
    weight: float
    ring: int
    intensity01: float
    landing_path: tuple[str, ...] = ()


@dataclass(frozen=True)
class FocusExpansion:
    targets: tuple[FocusTarget, ...] = ()
    primary: tuple[FocusTarget, ...] = ()
    secondary: tuple[FocusTarget, ...] = ()
    expanded_ids: frozenset[str] = field(default_factory=frozenset)


def _lift(node: OrgNode, tree: OrgTree, visible_level: int) -> OrgNode:
    """Walk up until the node's level is drawable."""
    current = node
    while level_index(current.level) > visible_level:
        parent = tree.get(current.parent_id)
        if parent is None:
            break
        current = parent
    return current


def _focus_context(focus_id: str, tree: OrgTree) -> set[str]:
    focus = tree.get(focus_id)
    if focus is None:
        return set()
    return {*ancestor_chain(focus_id, tree), *focus.children_ids}


def compute_focus_expansion(
    focus_id: str | None,
    tree: OrgTree,
    edges: Sequence[DependencyEdge],
    visible_level: int = FOCUS_VISIBLE_LEVEL,
) -> FocusExpansion:
    """Targets of the focus node, lifted to ``visible_level`` and ranked.

    Intensity is normalized per ring; the primary/secondary split is global
    across all targets. ``expanded_ids`` lists the nodes a renderer has to
    open to show the focus, its children, the lifted targets and every
    branch.
    """
    if not focus_id:
        return FocusExpansion()

    expanded = _focus_context(focus_id, tree)
    focus_edges = [e for e in edges if e.from_id == focus_id and e.weight > 0]

    lifted: list[tuple[OrgNode, DependencyEdge]] = []
    for edge in focus_edges:
        landing = tree.get(edge.landing_id)
        if landing is None:
            continue
        lifted.append((_lift(landing, tree, visible_level), edge))

    max_by_ring: dict[int, float] = {}
    for node, edge in lifted:
        ring = _RING_BY_LEVEL.get(node.level, 3)
        max_by_ring[ring] = max(max_by_ring.get(ring, 0), edge.weight)

    targets = []
    for node, edge in lifted:
        ring = _RING_BY_LEVEL.get(node.level, 3)
        max_weight = max_by_ring[ring]
        targets.append(
            FocusTarget(
                id=node.id,
                weight=edge.weight,
                ring=ring,
                intensity01=ease_out(edge.weight / max_weight) if max_weight > 0 else 0.0,
                landing_path=edge.to_path or path_to_node(edge.landing_id, tree),
            )
        )
        for ancestor_id in ancestor_chain(node.id, tree):
            if level_index(tree.nodes[ancestor_id].level) <= visible_level:
                expanded.add(ancestor_id)

    expanded.update(tree.branch_ids)
    ranked = sorted(targets, key=lambda t: t.weight, reverse=True)
    return FocusExpansion(
        targets=tuple(targets),
        primary=tuple(ranked[:PRIMARY_TIER_SIZE]),
        secondary=tuple(ranked[PRIMARY_TIER_SIZE:]),
        expanded_ids=frozenset(expanded),
    )

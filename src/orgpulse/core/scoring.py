"""Bottom-up score and status aggregation."""

import math
from dataclasses import dataclass

from loguru import logger

from orgpulse.config import (
    CHILD_WEIGHT,
    DEPENDENCY_PENALTIES,
    DEPENDENCY_WEIGHT,
    GREEN_THRESHOLD,
    MAX_DEPENDENCY_PENALTY,
    SCORE_PASSES,
    SELF_WEIGHT,
    YELLOW_THRESHOLD,
)
from orgpulse.models.node import (
    LEVEL_ORDER,
    STATUS_SEVERITY,
    Explanation,
    Kpi,
    OrgNode,
    OrgTree,
    Status,
)


@dataclass(frozen=True)
class ConvergenceReport:
    """Outcome of an iterate-until-stable aggregation."""

    passes: int
    converged: bool


def round_half_up(value: float) -> int:
    """Round with .5 going up, independent of banker's rounding."""
    return math.floor(value + 0.5)


def status_from_score(score: int) -> Status:
    if score >= GREEN_THRESHOLD:
        return "green"
    if score >= YELLOW_THRESHOLD:
        return "yellow"
    return "red"


def compute_self_score(kpis: tuple[Kpi, ...]) -> int:
    """Weighted mean of KPI values with weights renormalized to 1."""
    if not kpis:
        return 0
    total_weight = sum(kpi.weight for kpi in kpis)
    if total_weight <= 0:
        return 0
    return round_half_up(sum(kpi.value * (kpi.weight / total_weight) for kpi in kpis))


def compute_dependency_penalty(node: OrgNode, tree: OrgTree) -> int:
    penalty = 0
    for dep_id in node.depends_on:
        dep = tree.get(dep_id)
        if dep is None:
            continue
        penalty += DEPENDENCY_PENALTIES[dep.status]
    return min(MAX_DEPENDENCY_PENALTY, penalty)


def composite_score(self_score: int, child_score: int, penalty: int) -> int:
    return round_half_up(
        SELF_WEIGHT * self_score
        + CHILD_WEIGHT * child_score
        + DEPENDENCY_WEIGHT * (100 - penalty)
    )


def worst_status(statuses: list[Status]) -> Status:
    if not statuses:
        return "green"
    return max(statuses, key=lambda s: STATUS_SEVERITY[s])


def _score_node(node: OrgNode, tree: OrgTree) -> None:
    node.self_score = compute_self_score(node.kpis)
    children = tree.children_of(node.id)
    if not node.children_ids:
        node.child_score = node.self_score
    elif children:
        node.child_score = round_half_up(sum(c.score for c in children) / len(children))
    else:
        # Every child id dangles.
        node.child_score = node.self_score
    node.dependency_penalty = compute_dependency_penalty(node, tree)
    node.score = composite_score(node.self_score, node.child_score, node.dependency_penalty)
    if node.children_ids:
        node.status = worst_status([c.status for c in children])
    else:
        node.status = status_from_score(node.score)


def _seed_scores(tree: OrgTree) -> None:
    for node_id in tree.ordered_ids:
        node = tree.nodes[node_id]
        node.self_score = compute_self_score(node.kpis)
        node.child_score = node.self_score
        node.dependency_penalty = 0
        node.score = composite_score(node.self_score, node.child_score, 0)
        node.status = status_from_score(node.score)


def _sweep(tree: OrgTree) -> bool:
    """One bottom-up pass over every level. Returns True if anything changed."""
    changed = False
    for level in reversed(LEVEL_ORDER):
        for node_id in tree.ids_at_level(level):
            node = tree.nodes[node_id]
            before = (node.score, node.status, node.dependency_penalty)
            _score_node(node, tree)
            if (node.score, node.status, node.dependency_penalty) != before:
                changed = True
    return changed


def _penalty_of(node: OrgNode) -> int:
    return DEPENDENCY_PENALTIES[node.status]


def explain_node(node: OrgNode, tree: OrgTree) -> Explanation:
    """Summarize the weakest KPIs, children and dependencies of a node."""
    kpis = sorted(node.kpis, key=lambda k: k.value)[:3]
    children = sorted(tree.children_of(node.id), key=lambda c: c.score)[:3]
    deps = [d for d in (tree.get(i) for i in node.depends_on) if d is not None]
    deps = sorted(deps, key=_penalty_of, reverse=True)[:3]

    parts = []
    if kpis:
        parts.append("KPI drag")
    if children:
        parts.append("weak child units")
    if deps:
        parts.append("dependency hits")
    if parts:
        why = f"Performance is under pressure due to {', '.join(parts)}."
    else:
        why = "Performance is stable."

    return Explanation(
        why=why,
        kpi_drivers=tuple(f"{k.label} {k.value}" for k in kpis),
        child_drivers=tuple(f"{c.name} {c.score}" for c in children),
        dependency_drivers=tuple(f"{d.name} {d.status}" for d in deps),
    )


def _explain_all(tree: OrgTree) -> None:
    for node_id in tree.ordered_ids:
        node = tree.nodes[node_id]
        node.explanation = explain_node(node, tree)


def aggregate_scores(tree: OrgTree, *, passes: int = SCORE_PASSES) -> OrgTree:
    """Populate scores, statuses and explanations in place.

    Dependency penalties read the *current* status of their targets, so the
    full bottom-up sweep runs ``passes`` times. This is a bounded
    approximation of a fixed point, not a guarantee of one; see
    ``aggregate_until_stable`` for the checked variant.
    """
    tree.require_root()
    _seed_scores(tree)
    changed = False
    for _ in range(passes):
        changed = _sweep(tree)
    _explain_all(tree)
    logger.debug(
        "Aggregated {} nodes in {} passes (last pass changed: {})", len(tree), passes, changed
    )
    return tree


def aggregate_until_stable(tree: OrgTree, *, max_passes: int = 10) -> ConvergenceReport:
    """Sweep until no score or status changes, up to ``max_passes``.

    Dependency cycles can make statuses oscillate; that is reported, not
    raised.
    """
    tree.require_root()
    _seed_scores(tree)
    passes = 0
    converged = False
    while passes < max_passes:
        passes += 1
        if not _sweep(tree):
            converged = True
            break
    _explain_all(tree)
    if not converged:
        logger.warning("Scores did not stabilize after {} passes", passes)
    else:
        logger.debug("Scores stabilized after {} passes", passes)
    return ConvergenceReport(passes=passes, converged=converged)

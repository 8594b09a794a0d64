"""Weighted dependency edges between organizational units."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from orgpulse.config import MAX_EDGE_WEIGHT, MIN_EDGE_WEIGHT
from orgpulse.core.tree.paths import path_to_node
from orgpulse.models.node import DependencyEdge, OrgNode, OrgTree


@dataclass(frozen=True)
class FunctionDependency:
    """Which other functions (branches) one function leans on, and how hard."""

    name: str
    line_to: dict[str, int]


FUNCTION_DEPENDENCIES: dict[str, FunctionDependency] = {
    "branch-1": FunctionDependency(
        "Product & Engineering", {"branch-2": 8, "branch-5": 6, "branch-6": 4}
    ),
    "branch-2": FunctionDependency(
        "Sales & Revenue", {"branch-1": 7, "branch-4": 5, "branch-6": 6}
    ),
    "branch-3": FunctionDependency(
        "Customer Success & Support", {"branch-1": 7, "branch-2": 6, "branch-5": 3}
    ),
    "branch-4": FunctionDependency(
        "Marketing & Brand", {"branch-2": 8, "branch-1": 5, "branch-6": 4}
    ),
    "branch-5": FunctionDependency(
        "Operations & Supply Chain", {"branch-1": 7, "branch-6": 5, "branch-3": 4}
    ),
    "branch-6": FunctionDependency(
        "Finance & Legal", {"branch-1": 7, "branch-2": 4, "branch-5": 6}
    ),
    "branch-7": FunctionDependency(
        "People & Culture", {"branch-1": 7, "branch-2": 5, "branch-4": 4}
    ),
}


@dataclass(frozen=True)
class DependencyTarget:
    """Strongest edge from the focus onto one landing node."""

    edge_id: str
    target_id: str
    weight: float
    landing_path: tuple[str, ...]
    path_from_root: tuple[str, ...]
    is_visible: bool


def edge_id(from_id: str, to_id: str) -> str:
    return f"{from_id}__{to_id}"


def derive_function_edges(
    dependencies: Mapping[str, FunctionDependency], function_id: str
) -> list[DependencyEdge]:
    """Edges from one function (branch) to the functions it depends on.

    Weights outside the accepted range are dropped.
    """
    entry = dependencies.get(function_id)
    if entry is None:
        return []
    return [
        DependencyEdge(
            id=edge_id(function_id, to_id), from_id=function_id, to_id=to_id, weight=weight
        )
        for to_id, weight in entry.line_to.items()
        if MIN_EDGE_WEIGHT <= weight <= MAX_EDGE_WEIGHT
    ]


def hash_id(value: str) -> int:
    """Stable 32-bit string hash (h * 31 + code, wrapped to int32), made positive."""
    h = 0
    for char in value:
        h = ((h << 5) - h + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def _cross_branch_edges(
    sources: list[OrgNode],
    pool: list[OrgNode],
    modulus: int,
    base_weight: int,
    weight_span: int,
    tree: OrgTree,
) -> list[DependencyEdge]:
    edges = []
    for source in sources:
        h = hash_id(source.id)
        if h % modulus != 0:
            continue
        candidates = [node for node in pool if node.branch_id != source.branch_id]
        if not candidates:
            continue
        target = candidates[h % len(candidates)]
        edges.append(
            DependencyEdge(
                id=edge_id(source.id, target.id),
                from_id=source.id,
                to_id=target.id,
                weight=base_weight + h % weight_span,
                to_path=path_to_node(target.id, tree),
            )
        )
    return edges


def build_cross_level_edges(tree: OrgTree) -> list[DependencyEdge]:
    """Deterministic edges that cross both branch and level boundaries.

    Divisions point at departments, departments at teams and teams back up
    at divisions, always in another branch. Which sources get an edge, the
    target and the weight all derive from ``hash_id`` of the source id.
    """
    divisions = [tree.nodes[i] for i in tree.ids_at_level("division")]
    departments = [tree.nodes[i] for i in tree.ids_at_level("department")]
    teams = [tree.nodes[i] for i in tree.ids_at_level("team")]
    return [
        *_cross_branch_edges(divisions, departments, 3, 4, 7, tree),
        *_cross_branch_edges(departments, teams, 4, 3, 8, tree),
        *_cross_branch_edges(teams, divisions, 5, 2, 9, tree),
    ]


def collect_dependency_targets(
    focus_id: str | None,
    edges: Iterable[DependencyEdge],
    tree: OrgTree,
    visible_ids: Iterable[str] = (),
) -> list[DependencyTarget]:
    """One target per landing node reached from the focus, strongest first.

    When several edges land on the same node, the heaviest wins (the first
    one on ties). Landings missing from the tree are skipped.
    """
    if not focus_id:
        return []
    visible = frozenset(visible_ids)
    by_landing: dict[str, DependencyTarget] = {}
    for edge in edges:
        if edge.from_id != focus_id:
            continue
        landing_id = edge.landing_id
        if landing_id not in tree:
            continue
        existing = by_landing.get(landing_id)
        if existing is not None and edge.weight <= existing.weight:
            continue
        path_from_root = path_to_node(landing_id, tree)
        by_landing[landing_id] = DependencyTarget(
            edge_id=edge.id,
            target_id=landing_id,
            weight=edge.weight,
            landing_path=edge.to_path or path_from_root,
            path_from_root=path_from_root,
            is_visible=landing_id in visible,
        )
    return sorted(by_landing.values(), key=lambda t: t.weight, reverse=True)


def edges_to_targets(
    focus_id: str, targets: Sequence[DependencyTarget]
) -> list[DependencyEdge]:
    """Collapse dependency targets back into one direct edge per target."""
    return [
        DependencyEdge(
            id=edge_id(focus_id, t.target_id), from_id=focus_id, to_id=t.target_id, weight=t.weight
        )
        for t in targets
    ]

"""Domain models for the synthetic organization."""

from dataclasses import dataclass, field
from typing import Literal

Level = Literal["company", "branch", "division", "department", "team"]
Status = Literal["green", "yellow", "red"]
Profile = Literal["small", "balanced", "large"]

LEVEL_ORDER: tuple[Level, ...] = ("company", "branch", "division", "department", "team")
PROFILES: tuple[Profile, ...] = ("small", "balanced", "large")

# Worst first.
STATUS_SEVERITY: dict[Status, int] = {"red": 2, "yellow": 1, "green": 0}


def level_index(level: Level) -> int:
    """Position of a level in LEVEL_ORDER (company is 0)."""
    return LEVEL_ORDER.index(level)


def next_level(level: Level) -> Level | None:
    """The level directly below ``level``, or None for teams."""
    idx = level_index(level)
    if idx + 1 >= len(LEVEL_ORDER):
        return None
    return LEVEL_ORDER[idx + 1]


@dataclass(frozen=True)
class Kpi:
    """One weighted key performance indicator."""

    key: str
    label: str
    value: int
    weight: float
    trend: int = 0


@dataclass(frozen=True)
class Explanation:
    """Why a node scored the way it did."""

    why: str = "Performance is stable."
    kpi_drivers: tuple[str, ...] = ()
    child_drivers: tuple[str, ...] = ()
    dependency_drivers: tuple[str, ...] = ()


@dataclass
class OrgNode:
    """A single organizational unit.

    Tree links are stored as ids only; the owning OrgTree is the index.
    Score fields are overwritten by every aggregation pass.
    """

    id: str
    name: str
    level: Level
    parent_id: str | None = None
    sort_order: int = 0
    depth: int = 0
    branch_id: str | None = None
    children_ids: list[str] = field(default_factory=list)
    depends_on: list[str] = field(default_factory=list)
    depended_on_by: list[str] = field(default_factory=list)
    kpis: tuple[Kpi, ...] = ()
    self_score: int = 0
    child_score: int = 0
    dependency_penalty: int = 0
    score: int = 0
    status: Status = "green"
    explanation: Explanation = field(default_factory=Explanation)

    @property
    def is_leaf(self) -> bool:
        return not self.children_ids


@dataclass
class OrgTree:
    """Flat id -> node arena with the generation order preserved."""

    root_id: str
    nodes: dict[str, OrgNode] = field(default_factory=dict)
    ordered_ids: list[str] = field(default_factory=list)
    branch_ids: list[str] = field(default_factory=list)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: str | None) -> OrgNode | None:
        if node_id is None:
            return None
        return self.nodes.get(node_id)

    def add(self, node: OrgNode) -> OrgNode:
        """Register a node and link it under its parent, if any."""
        self.nodes[node.id] = node
        self.ordered_ids.append(node.id)
        parent = self.get(node.parent_id)
        if parent is not None:
            node.sort_order = len(parent.children_ids)
            parent.children_ids.append(node.id)
        return node

    def children_of(self, node_id: str) -> list[OrgNode]:
        """Present children of a node, in sort order."""
        node = self.get(node_id)
        if node is None:
            return []
        return [self.nodes[cid] for cid in node.children_ids if cid in self.nodes]

    def ids_at_level(self, level: Level) -> list[str]:
        return [nid for nid in self.ordered_ids if self.nodes[nid].level == level]

    def require_root(self) -> OrgNode:
        """Return the root node, raising if the tree has none."""
        root = self.get(self.root_id)
        if root is None:
            msg = f"Tree has no root node {self.root_id!r}"
            raise ValueError(msg)
        return root


@dataclass(frozen=True)
class DependencyEdge:
    """Directed weighted dependency between two nodes."""

    id: str
    from_id: str
    to_id: str
    weight: float
    to_path: tuple[str, ...] = ()

    @property
    def landing_id(self) -> str:
        """Node the edge lands on: the end of ``to_path`` when given."""
        return self.to_path[-1] if self.to_path else self.to_id

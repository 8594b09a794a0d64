"""A single scored organization plus the transient view state around it."""

from typing import Any

from loguru import logger

from orgpulse.config import DEFAULT_SEED
from orgpulse.core.edges import (
    FUNCTION_DEPENDENCIES,
    DependencyTarget,
    build_cross_level_edges,
    collect_dependency_targets,
    derive_function_edges,
    edges_to_targets,
)
from orgpulse.core.generator import build_hierarchy
from orgpulse.core.pressure import PressureMark, derive_pressure
from orgpulse.core.scoring import aggregate_scores
from orgpulse.core.selection import (
    NodeLighting,
    SelectionState,
    WedgeState,
    derive_node_lighting,
    derive_selection_states,
    derive_wedge_states,
)
from orgpulse.core.tree.paths import path_to_node
from orgpulse.core.zoom import (
    RingState,
    VisibilityResult,
    ZoomState,
    derive_ring_states,
    derive_visibility,
    initial_zoom_state,
    reset_zoom,
    zoom_in,
    zoom_out,
    zoom_to,
)
from orgpulse.models.node import DependencyEdge, OrgTree, Profile


def build_org(seed: int = DEFAULT_SEED, profile: Profile = "balanced") -> OrgTree:
    """Generate and score an organization in one step."""
    return aggregate_scores(build_hierarchy(seed, profile))


def find_initial_selection(tree: OrgTree) -> str:
    """The lowest-scoring branch, or the root when there are no branches."""
    branches = [tree.nodes[b] for b in tree.branch_ids if b in tree]
    if not branches:
        return tree.root_id
    return min(branches, key=lambda n: n.score).id


class HudSession:
    """Owns one scored tree and derives everything the HUD draws.

    Derived views are recomputed on every call; nothing is cached, so the
    session can be mutated freely between reads.
    """

    def __init__(
        self,
        seed: int = DEFAULT_SEED,
        profile: Profile = "balanced",
        *,
        tree: OrgTree | None = None,
    ) -> None:
        self.seed = seed
        self.profile = profile
        self.tree = tree if tree is not None else build_org(seed, profile)
        self.tree.require_root()
        self.zoom: ZoomState = initial_zoom_state(self.tree.root_id)
        self.selected_id: str | None = find_initial_selection(self.tree)
        self.hovered_id: str | None = None
        self._cross_level_edges = build_cross_level_edges(self.tree)
        logger.debug(
            "Session ready: {} nodes, initial selection {}", len(self.tree), self.selected_id
        )

    # -- selection -----------------------------------------------------------

    def select(self, node_id: str | None) -> None:
        """Select a node; selecting the current selection clears it."""
        if node_id is not None and node_id not in self.tree:
            logger.debug("Ignoring selection of unknown node {}", node_id)
            return
        self.selected_id = None if node_id == self.selected_id else node_id

    def hover(self, node_id: str | None) -> None:
        self.hovered_id = node_id if node_id in self.tree else None

    # -- zoom ----------------------------------------------------------------

    def can_zoom_in(self, target_id: str | None = None) -> bool:
        node = self.tree.get(target_id or self.selected_id)
        return node is not None and bool(node.children_ids)

    def can_zoom_out(self) -> bool:
        return self.zoom.zoom_level > 0

    def zoom_in(self, target_id: str | None = None) -> None:
        """Zoom into ``target_id`` (default: the selection) if it has children."""
        target = target_id or self.selected_id
        if not self.can_zoom_in(target):
            return
        self.zoom = zoom_in(self.zoom, target)
        self.selected_id = None
        logger.debug("Zoomed in to {} (level {})", target, self.zoom.zoom_level)

    def zoom_out(self) -> None:
        self.zoom = zoom_out(self.zoom)
        self.selected_id = None
        logger.debug("Zoomed out to {} (level {})", self.zoom.anchor_id, self.zoom.zoom_level)

    def zoom_to(self, target_id: str, path: tuple[str, ...] | list[str] | None = None) -> None:
        """Jump to ``target_id``; the path defaults to its ancestry from the root."""
        if target_id not in self.tree:
            logger.debug("Ignoring zoom to unknown node {}", target_id)
            return
        if path is None:
            path = path_to_node(target_id, self.tree)
        self.zoom = zoom_to(self.zoom, target_id, path)
        self.selected_id = None

    def reset_zoom(self) -> None:
        self.zoom = reset_zoom(self.zoom)
        self.selected_id = None

    # -- derived views -------------------------------------------------------

    def visibility(self) -> VisibilityResult:
        return derive_visibility(self.zoom, self.tree, self.selected_id)

    def selection_states(self) -> dict[str, SelectionState]:
        return derive_selection_states(self.visibility().visible_ids, self.selected_id, self.tree)

    def node_lighting(self) -> dict[str, NodeLighting]:
        return derive_node_lighting(self.visibility().visible_ids, self.selected_id, self.tree)

    def wedge_states(self) -> dict[str, WedgeState]:
        return derive_wedge_states(
            self.visibility().visible_ids, self.selected_id, self.hovered_id, self.tree
        )

    def ring_states(self) -> dict[int, RingState]:
        return derive_ring_states(self.selected_id, self.visibility().ring_of)

    def active_edges(self) -> list[DependencyEdge]:
        """Outgoing edges of the selection: function edges plus cross-level edges."""
        selected = self.tree.get(self.selected_id)
        if selected is None:
            return []
        base: list[DependencyEdge] = []
        if selected.level == "branch":
            base = derive_function_edges(FUNCTION_DEPENDENCIES, selected.id)
        return [e for e in (*base, *self._cross_level_edges) if e.from_id == selected.id]

    def dependency_targets(self) -> list[DependencyTarget]:
        return collect_dependency_targets(
            self.selected_id, self.active_edges(), self.tree, self.visibility().visible_ids
        )

    def pressure_marks(self) -> list[PressureMark]:
        """Pressure on the visible dependency targets of the selection."""
        if self.selected_id is None:
            return []
        visible_targets = [t for t in self.dependency_targets() if t.is_visible]
        edges = edges_to_targets(self.selected_id, visible_targets)
        return derive_pressure(self.selected_id, self.visibility().ring_of, edges)

    def snapshot(self) -> dict[str, Any]:
        """Everything a renderer needs, as plain JSON-ready data."""
        visibility = self.visibility()
        return {
            "seed": self.seed,
            "profile": self.profile,
            "zoom": {
                "anchor_id": self.zoom.anchor_id,
                "zoom_level": self.zoom.zoom_level,
                "visible_depth": self.zoom.visible_depth,
                "zoom_path": list(self.zoom.zoom_path),
            },
            "selected_id": self.selected_id,
            "ring_of": dict(visibility.ring_of),
            "lineage_path": list(visibility.lineage_path),
            "ring_states": {str(k): v for k, v in self.ring_states().items()},
            "selection_states": self.selection_states(),
            "pressure": [
                {
                    "target_id": m.target_id,
                    "ring": m.ring,
                    "weight": m.weight,
                    "intensity01": round(m.intensity01, 4),
                    "tier": m.tier,
                    "cross_ring": m.cross_ring,
                }
                for m in self.pressure_marks()
            ],
        }

"""Zoom state machine and visibility windowing."""

from dataclasses import dataclass, field, replace
from typing import Literal

from orgpulse.config import DEFAULT_VISIBLE_DEPTH, MAX_VISIBLE_DEPTH
from orgpulse.models.node import OrgTree

RingState = Literal["active", "context", "suppressed"]


@dataclass(frozen=True)
class ZoomState:
    """Which node is the zoom root and how we got there."""

    anchor_id: str
    zoom_level: int = 0
    visible_depth: int = DEFAULT_VISIBLE_DEPTH
    zoom_path: tuple[str, ...] = ()


@dataclass(frozen=True)
class ZoomIn:
    target_id: str | None


@dataclass(frozen=True)
class ZoomOut:
    pass


@dataclass(frozen=True)
class ZoomTo:
    target_id: str
    path: tuple[str, ...]


@dataclass(frozen=True)
class Reset:
    pass


ZoomAction = ZoomIn | ZoomOut | ZoomTo | Reset


@dataclass(frozen=True)
class VisibilityResult:
    """Visible ids, their rings (in breadth-first order) and the lineage."""

    visible_ids: frozenset[str] = frozenset()
    ring_of: dict[str, int] = field(default_factory=dict)
    lineage_path: tuple[str, ...] = ()

    def ring_members(self, ring: int) -> list[str]:
        return [node_id for node_id, r in self.ring_of.items() if r == ring]


def initial_zoom_state(root_id: str) -> ZoomState:
    return ZoomState(anchor_id=root_id, zoom_path=(root_id,))


def zoom_in(state: ZoomState, target_id: str | None) -> ZoomState:
    if not target_id:
        return state
    return replace(
        state,
        anchor_id=target_id,
        zoom_level=state.zoom_level + 1,
        zoom_path=(*state.zoom_path, target_id),
    )


def zoom_out(state: ZoomState) -> ZoomState:
    """Step back to the previous anchor; a no-op at the root."""
    if len(state.zoom_path) <= 1:
        return state
    path = state.zoom_path[:-1]
    return replace(
        state,
        anchor_id=path[-1],
        zoom_level=max(0, state.zoom_level - 1),
        zoom_path=path,
    )


def zoom_to(state: ZoomState, target_id: str, path: tuple[str, ...] | list[str]) -> ZoomState:
    """Jump straight to ``target_id`` with an explicit root-first path.

    An empty path is treated as ``(target_id,)`` so the state never ends up
    without a root to reset to.
    """
    new_path = tuple(path) or (target_id,)
    return replace(
        state,
        anchor_id=target_id,
        zoom_level=max(0, len(new_path) - 1),
        zoom_path=new_path,
    )


def reset_zoom(state: ZoomState) -> ZoomState:
    root_id = state.zoom_path[0] if state.zoom_path else state.anchor_id
    return ZoomState(
        anchor_id=root_id,
        zoom_level=0,
        visible_depth=DEFAULT_VISIBLE_DEPTH,
        zoom_path=(root_id,),
    )


def apply_zoom(state: ZoomState, action: ZoomAction) -> ZoomState:
    """Reduce a zoom action onto a state."""
    if isinstance(action, ZoomIn):
        return zoom_in(state, action.target_id)
    if isinstance(action, ZoomOut):
        return zoom_out(state)
    if isinstance(action, ZoomTo):
        return zoom_to(state, action.target_id, action.path)
    if isinstance(action, Reset):
        return reset_zoom(state)
    return state


def lineage_path(selected_id: str, anchor_id: str, tree: OrgTree) -> tuple[str, ...]:
    """Ids from the anchor down to the selection, or () if outside the anchor."""
    path: list[str] = []
    current = tree.get(selected_id)
    while current is not None:
        path.append(current.id)
        if current.id == anchor_id:
            break
        current = tree.get(current.parent_id)
    if not path or path[-1] != anchor_id:
        return ()
    path.reverse()
    return tuple(path)


def derive_visibility(
    state: ZoomState, tree: OrgTree, selected_id: str | None = None
) -> VisibilityResult:
    """Nodes visible under the anchor, banded into rings.

    Ring 0 is the anchor; ring k holds the children of ring k-1, for at most
    MAX_VISIBLE_DEPTH rings.
    """
    anchor = tree.get(state.anchor_id)
    if anchor is None:
        return VisibilityResult()

    ring_of: dict[str, int] = {anchor.id: 0}
    depth_limit = min(MAX_VISIBLE_DEPTH, max(0, state.visible_depth))
    current_ring = [anchor.id]
    for ring in range(1, depth_limit + 1):
        next_ring: list[str] = []
        for parent_id in current_ring:
            parent = tree.get(parent_id)
            if parent is None:
                continue
            for child_id in parent.children_ids:
                if child_id not in tree:
                    continue
                ring_of[child_id] = ring
                next_ring.append(child_id)
        if not next_ring:
            break
        current_ring = next_ring

    lineage = lineage_path(selected_id, anchor.id, tree) if selected_id else ()
    return VisibilityResult(
        visible_ids=frozenset(ring_of),
        ring_of=ring_of,
        lineage_path=lineage,
    )


def derive_ring_states(
    selected_id: str | None, ring_of: dict[str, int]
) -> dict[int, RingState]:
    """Emphasis per ring relative to the ring holding the selection."""
    selected_ring = ring_of.get(selected_id) if selected_id else None
    states: dict[int, RingState] = {}
    for ring in sorted(set(ring_of.values())):
        if selected_ring is None:
            states[ring] = "active" if ring == 0 else "context"
        elif ring == selected_ring:
            states[ring] = "active"
        elif ring == selected_ring + 1:
            states[ring] = "context"
        else:
            states[ring] = "suppressed"
    return states

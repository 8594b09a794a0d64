"""Selection-relative node states for the presentation layer."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from orgpulse.core.tree.paths import ancestor_chain, sibling_ids
from orgpulse.models.node import OrgTree

SelectionState = Literal[
    "default",
    "selected",
    "child",
    "grandchild",
    "parent",
    "ancestor",
    "sibling",
    "dimmed",
]
WedgeState = Literal["sleep", "wake", "alarm", "child", "suppressed"]


@dataclass(frozen=True)
class NodeLighting:
    """Styling hints for one selection state.

    Colours are role names, not concrete values; the renderer maps them.
    """

    state: SelectionState
    opacity: float
    brightness: float
    saturation: float
    glow_role: str | None
    glow_intensity: float
    border_width: float
    border_role: str


def _lighting(
    state: SelectionState,
    opacity: float,
    brightness: float,
    saturation: float,
    border_width: float,
    border_role: str,
    glow_role: str | None = None,
    glow_intensity: float = 0,
) -> NodeLighting:
    return NodeLighting(
        state=state,
        opacity=opacity,
        brightness=brightness,
        saturation=saturation,
        glow_role=glow_role,
        glow_intensity=glow_intensity,
        border_width=border_width,
        border_role=border_role,
    )


LIGHTING_PROFILES: dict[SelectionState, NodeLighting] = {
    "default": _lighting("default", 0.7, 1.0, 0.9, 1, "default"),
    "selected": _lighting("selected", 1.0, 1.1, 1.0, 2.5, "selection", "selection", 12),
    "child": _lighting("child", 0.95, 1.05, 1.0, 2, "children", "children", 6),
    "grandchild": _lighting("grandchild", 0.85, 1.0, 0.95, 1.5, "subtle"),
    "parent": _lighting("parent", 0.85, 1.0, 0.95, 2, "lineage"),
    "ancestor": _lighting("ancestor", 0.75, 0.95, 0.9, 1.5, "subtle"),
    "sibling": _lighting("sibling", 0.45, 0.9, 0.7, 1, "subtle"),
    "dimmed": _lighting("dimmed", 0.35, 0.85, 0.6, 1, "subtle"),
}


def lighting_for(state: SelectionState) -> NodeLighting:
    return LIGHTING_PROFILES[state]


def _valid_selection(
    visible: set[str] | frozenset[str], selected_id: str | None, tree: OrgTree
) -> bool:
    return bool(selected_id) and selected_id in visible and selected_id in tree


def derive_selection_states(
    visible_ids: Iterable[str], selected_id: str | None, tree: OrgTree
) -> dict[str, SelectionState]:
    """Classify every visible node relative to the selection.

    Exactly one state per visible id. Without a valid (known and visible)
    selection everything is ``default``. Otherwise the first matching rule
    wins: selected, child, grandchild, parent, ancestor, sibling; anything
    left is ``dimmed``.
    """
    visible = frozenset(visible_ids)
    ordered = sorted(visible)
    if not _valid_selection(visible, selected_id, tree):
        return {node_id: "default" for node_id in ordered}

    selected = tree.nodes[selected_id]
    child_ids = set(selected.children_ids)
    grandchild_ids: set[str] = set()
    for child in tree.children_of(selected.id):
        grandchild_ids.update(child.children_ids)
    parent_id = selected.parent_id
    # Strict ancestors above the parent.
    ancestor_ids = set(ancestor_chain(selected.id, tree)[2:])
    siblings = set(sibling_ids(selected.id, tree))

    states: dict[str, SelectionState] = {}
    for node_id in ordered:
        if node_id == selected_id:
            state: SelectionState = "selected"
        elif node_id in child_ids:
            state = "child"
        elif node_id in grandchild_ids:
            state = "grandchild"
        elif parent_id is not None and node_id == parent_id:
            state = "parent"
        elif node_id in ancestor_ids:
            state = "ancestor"
        elif node_id in siblings:
            state = "sibling"
        else:
            state = "dimmed"
        states[node_id] = state
    return states


def derive_node_lighting(
    visible_ids: Iterable[str], selected_id: str | None, tree: OrgTree
) -> dict[str, NodeLighting]:
    states = derive_selection_states(visible_ids, selected_id, tree)
    return {node_id: lighting_for(state) for node_id, state in states.items()}


def derive_wedge_states(
    visible_ids: Iterable[str],
    selected_id: str | None,
    hovered_id: str | None,
    tree: OrgTree,
) -> dict[str, WedgeState]:
    """Alarm/wake state of each visible wedge.

    A visible selection raises the alarm: its children light up, siblings
    sleep and everything else is suppressed. With no selection, the hovered
    wedge wakes and the rest sleep.
    """
    visible = frozenset(visible_ids)
    has_alarm = bool(selected_id) and selected_id in visible
    selected = tree.get(selected_id)
    child_ids = set(selected.children_ids) if selected is not None else set()
    siblings = set(sibling_ids(selected_id, tree)) if selected_id else set()

    states: dict[str, WedgeState] = {}
    for node_id in sorted(visible):
        if node_id == selected_id:
            state: WedgeState = "alarm"
        elif not has_alarm and hovered_id and node_id == hovered_id:
            state = "wake"
        elif has_alarm and node_id in child_ids:
            state = "child"
        elif has_alarm and node_id in siblings:
            state = "sleep"
        elif has_alarm:
            state = "suppressed"
        else:
            state = "sleep"
        states[node_id] = state
    return states

"""Synthetic organization health: scoring, zoom windows and dependency pressure."""

from orgpulse.core.generator import build_hierarchy
from orgpulse.core.pressure import PressureMark, derive_pressure
from orgpulse.core.scoring import aggregate_scores, aggregate_until_stable
from orgpulse.core.selection import derive_selection_states
from orgpulse.core.zoom import (
    ZoomState,
    derive_visibility,
    initial_zoom_state,
    reset_zoom,
    zoom_in,
    zoom_out,
    zoom_to,
)
from orgpulse.models.node import DependencyEdge, OrgNode, OrgTree
from orgpulse.session import HudSession, build_org

__all__ = [
    "DependencyEdge",
    "HudSession",
    "OrgNode",
    "OrgTree",
    "PressureMark",
    "ZoomState",
    "aggregate_scores",
    "aggregate_until_stable",
    "build_hierarchy",
    "build_org",
    "derive_pressure",
    "derive_selection_states",
    "derive_visibility",
    "initial_zoom_state",
    "reset_zoom",
    "zoom_in",
    "zoom_out",
    "zoom_to",
]

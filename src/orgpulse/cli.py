"""CLI for orgpulse: generate an organization and inspect derived views."""

import json
from collections import Counter
from dataclasses import asdict, replace
from typing import Annotated

import typer
from loguru import logger

from orgpulse.config import DEFAULT_PROFILE, resolve_default_seed
from orgpulse.logging_config import configure_logging
from orgpulse.models.node import LEVEL_ORDER, PROFILES, OrgTree
from orgpulse.session import HudSession

app = typer.Typer(help="orgpulse: synthetic org health, zoom windows and dependency pressure.")

SeedOption = Annotated[
    int | None,
    typer.Option("--seed", "-s", help="Generator seed (default: $ORGPULSE_SEED or 42)"),
]
ProfileOption = Annotated[
    str,
    typer.Option("--profile", "-p", help=f"Branching profile: {', '.join(PROFILES)}"),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    configure_logging(verbose=verbose, quiet=quiet)


def _open_session(seed: int | None, profile: str) -> HudSession:
    """Build the session, turning caller errors into a clean exit."""
    try:
        resolved = resolve_default_seed() if seed is None else seed
        return HudSession(resolved, profile)  # type: ignore[arg-type]
    except ValueError as exc:
        logger.error("{}", exc)
        raise typer.Exit(1) from None


def _require_node(tree: OrgTree, node_id: str) -> None:
    if node_id not in tree:
        logger.error("Node not found: {}", node_id)
        raise typer.Exit(1)


@app.command()
def summary(
    seed: SeedOption = None,
    profile: ProfileOption = DEFAULT_PROFILE,
    output_json: JsonOption = False,
) -> None:
    """Show branch health and node counts per level."""
    session = _open_session(seed, profile)
    tree = session.tree
    counts = Counter(node.level for node in tree.nodes.values())
    branches = [tree.nodes[b] for b in tree.branch_ids]

    if output_json:
        data = {
            "seed": session.seed,
            "profile": session.profile,
            "counts": {level: counts.get(level, 0) for level in LEVEL_ORDER},
            "branches": [
                {"id": b.id, "name": b.name, "score": b.score, "status": b.status}
                for b in branches
            ],
        }
        typer.echo(json.dumps(data, indent=2))
        return

    root = tree.nodes[tree.root_id]
    typer.echo(f"{root.name}: score {root.score} ({root.status})")
    typer.echo(", ".join(f"{counts.get(level, 0)} {level}" for level in LEVEL_ORDER))
    typer.echo()
    for b in branches:
        typer.echo(f"  {b.id:<9} {b.name:<28} {b.score:>3}  {b.status}")


@app.command()
def explain(
    node_id: str = typer.Argument(..., help="Node ID to explain"),
    seed: SeedOption = None,
    profile: ProfileOption = DEFAULT_PROFILE,
) -> None:
    """Break down one node's score."""
    session = _open_session(seed, profile)
    _require_node(session.tree, node_id)
    node = session.tree.nodes[node_id]
    typer.echo(f"{node.name} [{node.level}] score {node.score} ({node.status})")
    typer.echo(
        f"  self {node.self_score}  children {node.child_score}  "
        f"dependency penalty {node.dependency_penalty}"
    )
    typer.echo(f"  {node.explanation.why}")
    for label, drivers in (
        ("KPIs", node.explanation.kpi_drivers),
        ("Children", node.explanation.child_drivers),
        ("Dependencies", node.explanation.dependency_drivers),
    ):
        if drivers:
            typer.echo(f"  {label}: {'; '.join(drivers)}")


@app.command()
def view(
    anchor: Annotated[
        str | None,
        typer.Option("--anchor", "-a", help="Zoom anchor (default: the root)"),
    ] = None,
    select: Annotated[
        str | None,
        typer.Option("--select", help="Selected node (default: weakest branch)"),
    ] = None,
    depth: Annotated[
        int | None,
        typer.Option("--depth", "-d", help="Number of rings below the anchor (0-3)"),
    ] = None,
    seed: SeedOption = None,
    profile: ProfileOption = DEFAULT_PROFILE,
    output_json: JsonOption = False,
) -> None:
    """Show visible rings, selection states and lineage for a zoom window."""
    session = _open_session(seed, profile)
    if anchor is not None:
        _require_node(session.tree, anchor)
        session.zoom_to(anchor)
    if select is not None:
        _require_node(session.tree, select)
        session.selected_id = select
    if depth is not None:
        session.zoom = replace(session.zoom, visible_depth=depth)

    if output_json:
        typer.echo(json.dumps(session.snapshot(), indent=2))
        return

    visibility = session.visibility()
    states = session.selection_states()
    ring_states = session.ring_states()
    typer.echo(f"Anchor {session.zoom.anchor_id}, selected {session.selected_id or '-'}")
    for ring, ring_state in ring_states.items():
        members = visibility.ring_members(ring)
        typer.echo(f"Ring {ring} ({ring_state}, {len(members)} nodes)")
        for node_id in members[:12]:
            typer.echo(f"    {node_id:<20} {states[node_id]}")
        if len(members) > 12:
            typer.echo(f"    ... {len(members) - 12} more")
    if visibility.lineage_path:
        typer.echo(f"Lineage: {' > '.join(visibility.lineage_path)}")


@app.command()
def pressure(
    focus: str | None = typer.Argument(None, help="Focus node (default: weakest branch)"),
    seed: SeedOption = None,
    profile: ProfileOption = DEFAULT_PROFILE,
    output_json: JsonOption = False,
) -> None:
    """List dependency targets and pressure marks of the focus node."""
    session = _open_session(seed, profile)
    if focus is not None:
        _require_node(session.tree, focus)
        session.selected_id = focus

    targets = session.dependency_targets()
    marks = session.pressure_marks()

    if output_json:
        data = {
            "focus": session.selected_id,
            "targets": [
                {
                    "target_id": t.target_id,
                    "weight": t.weight,
                    "visible": t.is_visible,
                    "path_from_root": list(t.path_from_root),
                }
                for t in targets
            ],
            "marks": [asdict(m) for m in marks],
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"Focus {session.selected_id}: {len(targets)} dependency targets")
    for t in targets:
        flag = "" if t.is_visible else "  (hidden)"
        typer.echo(f"  {t.target_id:<20} weight {t.weight:g}{flag}")
    if marks:
        typer.echo()
        for m in marks:
            ring_note = " cross-ring" if m.cross_ring else ""
            typer.echo(
                f"  ring {m.ring} {m.target_id:<20} {m.intensity01:.2f} {m.tier}{ring_note}"
            )

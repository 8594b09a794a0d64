"""Build a deterministic synthetic organization from a seed."""

from dataclasses import dataclass

from loguru import logger

from orgpulse.config import LEVEL_RANGES
from orgpulse.core.rng import SeededRng
from orgpulse.models.node import (
    LEVEL_ORDER,
    PROFILES,
    Kpi,
    Level,
    OrgNode,
    OrgTree,
    Profile,
    level_index,
)

ROOT_ID = "company"
ROOT_NAME = "Global Holdings"

BRANCHES: tuple[str, ...] = (
    "Product & Engineering",
    "Sales & Revenue",
    "Customer Success & Support",
    "Marketing & Brand",
    "Operations & Supply Chain",
    "Finance & Legal",
    "People & Culture",
)

KPI_LIBRARY: tuple[str, ...] = (
    "Delivery Reliability",
    "Quality Index",
    "Cycle Time",
    "Pipeline Health",
    "Renewal Rate",
    "Escalation Load",
    "Brand Sentiment",
    "Demand Gen",
    "Fulfillment Speed",
    "Cost Control",
    "Compliance Risk",
    "Talent Retention",
)


@dataclass(frozen=True)
class OrgBlueprint:
    """Narrative choices that shape a generated organization.

    Kept apart from the generation mechanics so demo rules (one oversized
    function, one failing branch) can be swapped without touching scoring.
    """

    branches: tuple[str, ...] = BRANCHES
    oversized_branch: str | None = "Product & Engineering"
    oversized_department_count: int = 10
    red_branch_count: int = 1
    yellow_branch_count: int = 2
    borderline_team_count: int = 12
    green_skew: int = 24
    yellow_skew: int = 4
    red_skew: int = -6
    borderline_team_skew: int = -10
    red_team_skew: int = -38
    red_team_jitter: tuple[float, int] = (0.06, -8)
    yellow_team_jitter: tuple[float, int] = (0.04, -4)
    kpis_per_node: int = 4
    team_cross_branch_rate: float = 0.22
    department_cross_branch_rate: float = 0.18


DEFAULT_BLUEPRINT = OrgBlueprint()


@dataclass(frozen=True)
class HealthCohorts:
    """Which branches and teams are pushed towards each status."""

    red_branches: frozenset[str]
    yellow_branches: frozenset[str]
    green_branches: frozenset[str]
    red_team_ids: frozenset[str]
    borderline_team_ids: frozenset[str]


def count_for_level(level: Level, profile: Profile, rng: SeededRng) -> int:
    """Number of children a node at ``level`` gets under ``profile``."""
    low, high, target = LEVEL_RANGES[level]
    if profile == "small":
        return rng.int(low, min(target, low + 2))
    if profile == "large":
        return rng.int(max(target, high - 2), high)
    return rng.int(max(low, target - 1), min(high, target + 1))


def build_kpis(rng: SeededRng, skew: int, *, count: int = 4) -> tuple[Kpi, ...]:
    """Draw ``count`` KPIs whose values are shifted by ``skew``."""
    raw_weights = [rng.int(15, 35) for _ in range(count)]
    total = sum(raw_weights)
    kpis = []
    for index, weight in enumerate(raw_weights):
        base = rng.int(50 + skew, 96 + skew)
        key = f"kpi-{rng.int(1, 9999)}"
        label = KPI_LIBRARY[(index + rng.int(0, len(KPI_LIBRARY) - 1)) % len(KPI_LIBRARY)]
        kpis.append(
            Kpi(
                key=key,
                label=label,
                value=max(20, min(98, base)),
                weight=weight / total,
                trend=rng.pick((-1, 0, 1)),
            )
        )
    return tuple(kpis)


def add_dependency(tree: OrgTree, from_id: str, to_id: str) -> bool:
    """Add a forward dependency edge and its inverse.

    Self edges, duplicates and unknown ids are ignored. Returns True when an
    edge was added.
    """
    if from_id == to_id:
        return False
    source = tree.get(from_id)
    target = tree.get(to_id)
    if source is None or target is None:
        return False
    if to_id in source.depends_on:
        return False
    source.depends_on.append(to_id)
    target.depended_on_by.append(from_id)
    return True


def select_cohorts(
    tree: OrgTree, rng: SeededRng, blueprint: OrgBlueprint = DEFAULT_BLUEPRINT
) -> HealthCohorts:
    """Pick the failing, borderline and healthy parts of the organization."""
    shuffled = rng.shuffle(tree.branch_ids)
    red_end = blueprint.red_branch_count
    yellow_end = red_end + blueprint.yellow_branch_count
    red = frozenset(shuffled[:red_end])
    yellow = frozenset(shuffled[red_end:yellow_end])
    green = frozenset(shuffled[yellow_end:])

    departments = tree.ids_at_level("department")
    teams = tree.ids_at_level("team")

    red_team_ids: frozenset[str] = frozenset()
    if shuffled[:red_end]:
        red_branch = shuffled[0]
        candidates = [d for d in departments if tree.nodes[d].branch_id == red_branch]
        if candidates:
            red_department = rng.pick(candidates)
            red_team_ids = frozenset(tree.nodes[red_department].children_ids)

    borderline = [t for t in rng.shuffle(teams) if tree.nodes[t].branch_id in yellow]
    return HealthCohorts(
        red_branches=red,
        yellow_branches=yellow,
        green_branches=green,
        red_team_ids=red_team_ids,
        borderline_team_ids=frozenset(borderline[: blueprint.borderline_team_count]),
    )


def _skew_for(
    node: OrgNode, cohorts: HealthCohorts, rng: SeededRng, blueprint: OrgBlueprint
) -> int:
    skew = 0
    branch_id = node.branch_id
    if branch_id in cohorts.green_branches:
        skew += blueprint.green_skew
    if branch_id in cohorts.yellow_branches:
        skew += blueprint.yellow_skew
    if branch_id in cohorts.red_branches:
        skew += blueprint.red_skew
    if node.id in cohorts.borderline_team_ids:
        skew += blueprint.borderline_team_skew
    if node.id in cohorts.red_team_ids:
        skew += blueprint.red_team_skew
    # Draws happen only for teams so the sequence is stable across profiles.
    if node.level == "team":
        chance, delta = blueprint.red_team_jitter
        if rng.next() < chance and branch_id in cohorts.red_branches:
            skew += delta
        chance, delta = blueprint.yellow_team_jitter
        if rng.next() < chance and branch_id in cohorts.yellow_branches:
            skew += delta
    return skew


def _add_level_dependencies(tree: OrgTree, ids: list[str], rng: SeededRng) -> None:
    for node_id in ids:
        for _ in range(rng.int(1, 3)):
            add_dependency(tree, node_id, rng.pick(ids))


def _add_cross_branch_dependencies(
    tree: OrgTree, ids: list[str], rate: float, rng: SeededRng
) -> None:
    chosen = [node_id for node_id in ids if rng.next() < rate]
    for node_id in chosen:
        branch_id = tree.nodes[node_id].branch_id
        others = [other for other in ids if tree.nodes[other].branch_id != branch_id]
        if others:
            add_dependency(tree, node_id, rng.pick(others))


def _build_skeleton(
    tree: OrgTree, profile: Profile, rng: SeededRng, blueprint: OrgBlueprint
) -> None:
    for b, branch_name in enumerate(blueprint.branches, start=1):
        branch = tree.add(
            OrgNode(
                id=f"branch-{b}",
                name=branch_name,
                level="branch",
                parent_id=tree.root_id,
                depth=level_index("branch"),
            )
        )
        branch.branch_id = branch.id
        tree.branch_ids.append(branch.id)
        short_name = branch_name.split(" & ")[0]

        for d in range(1, count_for_level("branch", profile, rng) + 1):
            division_id = f"division-{b}-{d}"
            tree.add(
                OrgNode(
                    id=division_id,
                    name=f"{short_name} Division {d}",
                    level="division",
                    parent_id=branch.id,
                    depth=level_index("division"),
                    branch_id=branch.id,
                )
            )
            if branch_name == blueprint.oversized_branch:
                department_count = blueprint.oversized_department_count
            else:
                department_count = count_for_level("division", profile, rng)

            for p in range(1, department_count + 1):
                department_id = f"department-{b}-{d}-{p}"
                tree.add(
                    OrgNode(
                        id=department_id,
                        name=f"Dept {d}.{p}",
                        level="department",
                        parent_id=division_id,
                        depth=level_index("department"),
                        branch_id=branch.id,
                    )
                )
                for t in range(1, count_for_level("department", profile, rng) + 1):
                    tree.add(
                        OrgNode(
                            id=f"team-{b}-{d}-{p}-{t}",
                            name=f"Team {d}.{p}.{t}",
                            level="team",
                            parent_id=department_id,
                            depth=level_index("team"),
                            branch_id=branch.id,
                        )
                    )


def build_hierarchy(
    seed: int,
    profile: Profile = "balanced",
    *,
    blueprint: OrgBlueprint = DEFAULT_BLUEPRINT,
) -> OrgTree:
    """Generate the organization tree, KPIs and dependency edges.

    Identical ``seed`` and ``profile`` always give an identical tree. Scores
    are left at their defaults; run ``aggregate_scores`` afterwards.

    Raises:
        ValueError: If the seed is negative or not an integer, or the
            profile is unknown.
    """
    if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
        msg = f"Seed must be a non-negative integer, got {seed!r}"
        raise ValueError(msg)
    if profile not in PROFILES:
        msg = f"Unknown profile {profile!r}, expected one of {PROFILES!r}"
        raise ValueError(msg)

    rng = SeededRng(seed)
    tree = OrgTree(root_id=ROOT_ID)
    tree.add(OrgNode(id=ROOT_ID, name=ROOT_NAME, level=LEVEL_ORDER[0]))
    _build_skeleton(tree, profile, rng, blueprint)

    cohorts = select_cohorts(tree, rng, blueprint)
    for node_id in tree.ordered_ids:
        node = tree.nodes[node_id]
        node.kpis = build_kpis(
            rng, _skew_for(node, cohorts, rng, blueprint), count=blueprint.kpis_per_node
        )

    for level in ("division", "department", "team"):
        _add_level_dependencies(tree, tree.ids_at_level(level), rng)
    _add_cross_branch_dependencies(
        tree, tree.ids_at_level("team"), blueprint.team_cross_branch_rate, rng
    )
    _add_cross_branch_dependencies(
        tree, tree.ids_at_level("department"), blueprint.department_cross_branch_rate, rng
    )

    logger.debug(
        "Generated org seed={} profile={}: {} nodes, {} branches, red={}",
        seed, profile, len(tree), len(tree.branch_ids), sorted(cohorts.red_branches),
    )
    return tree

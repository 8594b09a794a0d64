"""Tree navigation: ancestor paths and descendant sets."""

from orgpulse.models.node import OrgTree


def path_to_node(node_id: str, tree: OrgTree, root_id: str | None = None) -> tuple[str, ...]:
    """Ids from ``root_id`` (default: the tree root) down to ``node_id``.

    Stops early at the true root if ``root_id`` is not an ancestor, so the
    result always ends with ``node_id`` when that node exists.
    """
    stop_at = tree.root_id if root_id is None else root_id
    path: list[str] = []
    current = tree.get(node_id)
    while current is not None:
        path.append(current.id)
        if current.id == stop_at:
            break
        current = tree.get(current.parent_id)
    path.reverse()
    return tuple(path)


def ancestor_chain(node_id: str, tree: OrgTree) -> tuple[str, ...]:
    """The node itself followed by each ancestor up to the root."""
    chain: list[str] = []
    current = tree.get(node_id)
    while current is not None:
        chain.append(current.id)
        current = tree.get(current.parent_id)
    return tuple(chain)


def is_ancestor(ancestor_id: str, descendant_id: str, tree: OrgTree) -> bool:
    """True if ``ancestor_id`` is on the parent chain of ``descendant_id``.

    A node counts as its own ancestor.
    """
    return ancestor_id in ancestor_chain(descendant_id, tree)


def descendants(node_id: str, tree: OrgTree, max_depth: int) -> set[str]:
    """Ids below ``node_id`` down to ``max_depth`` levels (0 = children only)."""
    found: set[str] = set()
    frontier = [node_id]
    depth = 0
    while frontier and depth <= max_depth:
        next_frontier: list[str] = []
        for current_id in frontier:
            node = tree.get(current_id)
            if node is None:
                continue
            for child_id in node.children_ids:
                found.add(child_id)
                next_frontier.append(child_id)
        frontier = next_frontier
        depth += 1
    return found


def sibling_ids(node_id: str, tree: OrgTree) -> list[str]:
    """Other children of the node's parent, in sort order."""
    node = tree.get(node_id)
    if node is None:
        return []
    parent = tree.get(node.parent_id)
    if parent is None:
        return []
    return [cid for cid in parent.children_ids if cid != node_id]

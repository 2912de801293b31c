"""Reorder planner for the category tree.

Computes what a drag-and-drop move does to a category snapshot: the new
parent and rank of the dragged category, the dense re-ranking of every
sibling group it touches, and the minimal list of updates that brings
stored state in line with the result.

Moves are planned against immutable snapshots, so the same move planned
twice from the same snapshot gives the same result.

Example:
    plan = plan_move(nodes, drag_id="c-2", target_id="c-1", position="inside")
    if not plan.is_noop:
        await gateway.bulk_reorder(plan.updates)
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from storefront.catalog.hierarchy import build_parent_map, is_descendant
from storefront.domain.exceptions import CategoryCycleError, CategoryNotFoundError
from storefront.domain.value_objects import CategoryNode, DropPosition, NodeUpdate


@dataclass(frozen=True)
class MovePlan:
    """Result of planning a move.

    Attributes:
        nodes: Full category snapshot after the move.
        updates: Categories whose stored parent or rank changes.
    """

    nodes: tuple[CategoryNode, ...]
    updates: tuple[NodeUpdate, ...] = ()

    @property
    def is_noop(self) -> bool:
        """Check if the move leaves every category where it was."""
        return not self.updates


def plan_move(
    nodes: Sequence[CategoryNode],
    drag_id: str,
    target_id: str,
    position: DropPosition | str,
) -> MovePlan:
    """Plan dropping one category relative to another.

    Args:
        nodes: Current category snapshot.
        drag_id: Category being moved.
        target_id: Category it is dropped on.
        position: ``before``/``after`` the target, or ``inside`` it as last child.

    Returns:
        The next snapshot and the minimal updates to persist.

    Raises:
        CategoryNotFoundError: If either category is not in the snapshot.
        CategoryCycleError: If the move would place a category under itself.
        CategoryValidationError: If the position is unknown.
    """
    position = DropPosition.parse(position)
    if drag_id == target_id:
        return MovePlan(nodes=tuple(nodes))

    by_id = {node.id: node for node in nodes}
    missing = [node_id for node_id in (drag_id, target_id) if node_id not in by_id]
    if missing:
        raise CategoryNotFoundError(missing)

    dragged = by_id[drag_id]
    target = by_id[target_id]
    parent_map = build_parent_map(nodes)

    old_parent = _effective_parent(dragged, by_id)
    if position is DropPosition.INSIDE:
        new_parent: str | None = target.id
    else:
        new_parent = _effective_parent(target, by_id)

    if new_parent is not None and (
        new_parent == drag_id or is_descendant(parent_map, drag_id, new_parent)
    ):
        raise CategoryCycleError(drag_id, new_parent)

    new_siblings = _siblings(nodes, by_id, new_parent, exclude=drag_id)
    if position is DropPosition.INSIDE:
        insert_at = len(new_siblings)
    else:
        insert_at = next(i for i, node in enumerate(new_siblings) if node.id == target_id)
        if position is DropPosition.AFTER:
            insert_at += 1

    final_order = [*new_siblings[:insert_at], dragged, *new_siblings[insert_at:]]

    ranks: dict[str, tuple[str | None, int]] = {}
    if old_parent != new_parent:
        old_siblings = _siblings(nodes, by_id, old_parent, exclude=drag_id)
        ranks.update(_rank(old_siblings, old_parent))
    ranks.update(_rank(final_order, new_parent))

    # Compared against the rendered placement so untouched orphans keep their stored parent.
    current = {
        node_id: (_effective_parent(by_id[node_id], by_id), by_id[node_id].sort_order)
        for node_id in ranks
    }
    updates = tuple(
        NodeUpdate(id=node_id, parent_id=parent_id, sort_order=sort_order)
        for node_id, (parent_id, sort_order) in ranks.items()
        if current[node_id] != (parent_id, sort_order)
    )
    return MovePlan(nodes=apply_updates(nodes, updates), updates=updates)


def apply_updates(
    nodes: Iterable[CategoryNode],
    updates: Iterable[NodeUpdate],
) -> tuple[CategoryNode, ...]:
    """Overlay parent/rank updates onto a snapshot.

    Categories keep their position in the sequence; those without an
    update are returned unchanged.

    Args:
        nodes: Category snapshot.
        updates: Updates to apply; the last update for an id wins.

    Returns:
        The updated snapshot.
    """
    by_id = {update.id: update for update in updates}
    return tuple(
        replace(node, parent_id=by_id[node.id].parent_id, sort_order=by_id[node.id].sort_order)
        if node.id in by_id
        else node
        for node in nodes
    )


def _effective_parent(node: CategoryNode, by_id: dict[str, CategoryNode]) -> str | None:
    # Dangling parents group with the roots, as in the rendered tree.
    if node.parent_id is None or node.parent_id == node.id or node.parent_id not in by_id:
        return None
    return node.parent_id


def _siblings(
    nodes: Sequence[CategoryNode],
    by_id: dict[str, CategoryNode],
    parent_id: str | None,
    exclude: str,
) -> list[CategoryNode]:
    group = [
        node for node in nodes
        if node.id != exclude and _effective_parent(node, by_id) == parent_id
    ]
    return sorted(group, key=lambda node: node.sort_key)


def _rank(order: Sequence[CategoryNode], parent_id: str | None) -> dict[str, tuple[str | None, int]]:
    return {node.id: (parent_id, index) for index, node in enumerate(order)}

"""Ancestor/descendant queries over a flat category list."""

from collections.abc import Iterable, Mapping

from storefront.domain.value_objects import CategoryNode


def build_parent_map(nodes: Iterable[CategoryNode]) -> dict[str, str | None]:
    """Index categories by id.

    Args:
        nodes: Flat category snapshot.

    Returns:
        Mapping of category id to parent id.
    """
    return {node.id: node.parent_id for node in nodes}


def is_descendant(
    nodes: Iterable[CategoryNode] | Mapping[str, str | None],
    ancestor_id: str,
    descendant_id: str,
) -> bool:
    """Check whether one category sits below another.

    Walks parent links upward from ``descendant_id``. The walk is capped
    at the number of known categories, so a cycle already present in the
    data ends the walk with False instead of looping.

    Args:
        nodes: Flat category snapshot, or a prebuilt parent map.
        ancestor_id: Candidate ancestor.
        descendant_id: Candidate descendant.

    Returns:
        True if ``ancestor_id`` is a proper ancestor of ``descendant_id``.
    """
    parent_map = nodes if isinstance(nodes, Mapping) else build_parent_map(nodes)
    cursor = parent_map.get(descendant_id)
    steps = 0
    while cursor is not None:
        if cursor == ancestor_id:
            return True
        steps += 1
        if steps > len(parent_map):
            return False
        cursor = parent_map.get(cursor)
    return False

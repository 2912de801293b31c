"""Category tree construction.

Turns the flat, parent-referencing category list into the nested view
used by the admin tree manager and the storefront menu. Everything here
is pure: inputs are never mutated and no I/O happens.

Example:
    roots = build_tree(nodes)
    for depth, item in walk(roots):
        print("  " * depth + item.name)
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from storefront.domain.value_objects import CategoryNode


@dataclass
class CategoryTreeNode:
    """A category together with its ordered children.

    Attributes:
        node: The category snapshot.
        children: Child categories in display order.
    """

    node: CategoryNode
    children: list["CategoryTreeNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def slug(self) -> str:
        return self.node.slug


@dataclass(frozen=True)
class CategoryOption:
    """Entry of the indented parent picker."""

    id: str
    label: str
    depth: int


def build_tree(nodes: Iterable[CategoryNode]) -> list[CategoryTreeNode]:
    """Build the nested category tree.

    Categories whose parent is missing from ``nodes`` are shown as roots.
    Siblings are ordered by ``sort_order`` and then by ``name``.

    Args:
        nodes: Flat category snapshot.

    Returns:
        Root categories with children attached.
    """
    tree_nodes = {node.id: CategoryTreeNode(node=node) for node in nodes}
    roots: list[CategoryTreeNode] = []

    for tree_node in tree_nodes.values():
        parent_id = tree_node.node.parent_id
        if parent_id is not None and parent_id != tree_node.id and parent_id in tree_nodes:
            tree_nodes[parent_id].children.append(tree_node)
        else:
            roots.append(tree_node)

    _break_cycles(tree_nodes, roots)
    _sort_siblings(roots)
    return roots


def _break_cycles(
    tree_nodes: dict[str, CategoryTreeNode],
    roots: list[CategoryTreeNode],
) -> None:
    """Promote members of parent cycles so every category is reachable."""
    reached: set[str] = set()

    def mark(start: Iterable[CategoryTreeNode]) -> None:
        pending = list(start)
        while pending:
            current = pending.pop()
            if current.id in reached:
                continue
            reached.add(current.id)
            pending.extend(current.children)

    mark(roots)
    while len(reached) < len(tree_nodes):
        orphan = min(
            (t for t in tree_nodes.values() if t.id not in reached),
            key=lambda t: (t.node.sort_key, t.id),
        )
        parent = tree_nodes[orphan.node.parent_id]
        parent.children = [child for child in parent.children if child is not orphan]
        roots.append(orphan)
        mark([orphan])


def _sort_siblings(roots: list[CategoryTreeNode]) -> None:
    pending = [roots]
    while pending:
        group = pending.pop()
        group.sort(key=lambda t: t.node.sort_key)
        pending.extend(child.children for child in group)


def find_dangling(nodes: Sequence[CategoryNode]) -> list[CategoryNode]:
    """Find categories that reference a parent which does not exist.

    Args:
        nodes: Flat category snapshot.

    Returns:
        Categories with a dangling ``parent_id``, in input order.
    """
    ids = {node.id for node in nodes}
    return [node for node in nodes if node.parent_id is not None and node.parent_id not in ids]


def walk(roots: Iterable[CategoryTreeNode], depth: int = 0) -> Iterator[tuple[int, CategoryTreeNode]]:
    """Iterate the tree depth-first, yielding ``(depth, node)`` pairs."""
    for tree_node in roots:
        yield depth, tree_node
        yield from walk(tree_node.children, depth + 1)


def filter_tree(roots: Sequence[CategoryTreeNode], query: str) -> list[CategoryTreeNode]:
    """Filter the tree by category name.

    Matching is a case-insensitive substring test. Ancestors of a match
    are kept so the match stays in context.

    Args:
        roots: Tree to filter.
        query: Search text; blank text disables filtering.

    Returns:
        Filtered copy of the tree.
    """
    needle = query.strip().lower()
    if not needle:
        return list(roots)
    return _filter(roots, needle)


def _filter(roots: Sequence[CategoryTreeNode], needle: str) -> list[CategoryTreeNode]:
    result = []
    for tree_node in roots:
        children = _filter(tree_node.children, needle)
        if needle in tree_node.name.lower() or children:
            result.append(CategoryTreeNode(node=tree_node.node, children=children))
    return result


def build_option_list(roots: Iterable[CategoryTreeNode]) -> list[CategoryOption]:
    """Flatten the tree into parent picker options.

    Args:
        roots: Tree to flatten.

    Returns:
        Options in depth-first order, labels indented with ``"- "`` per level.
    """
    return [
        CategoryOption(id=tree_node.id, label=f"{'- ' * depth}{tree_node.name}", depth=depth)
        for depth, tree_node in walk(roots)
    ]


def map_tree_to_menu(roots: Iterable[CategoryTreeNode]) -> list[dict[str, Any]]:
    """Shape the tree for the storefront category menu.

    Each root becomes a menu entry with a single column listing its
    direct children.

    Args:
        roots: Category tree.

    Returns:
        Menu entries.
    """
    return [
        {
            "id": root.id,
            "name": root.name,
            "slug": root.slug,
            "has_arrow": len(root.children) > 0,
            "subcategories": [
                {
                    "id": f"{root.id}-list",
                    "name": root.name,
                    "has_arrow": False,
                    "items": [
                        {
                            "id": child.id,
                            "name": child.name,
                            "slug": child.slug,
                            "image": child.node.image_url or "",
                        }
                        for child in root.children
                    ],
                }
            ],
        }
        for root in roots
    ]

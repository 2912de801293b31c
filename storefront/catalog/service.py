"""Category service.

High-level operations behind the category API: listing the canonical
list, creating categories, applying bulk reorder batches atomically,
renaming, building the storefront menu and importing a taxonomy.
"""

import re
from collections.abc import Sequence
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.hierarchy import build_parent_map, is_descendant
from storefront.catalog.models import Category
from storefront.catalog.planner import apply_updates
from storefront.catalog.repository import CategoryRepository
from storefront.catalog.taxonomy import TaxonomyEntry
from storefront.catalog.tree import build_tree, map_tree_to_menu
from storefront.domain.exceptions import (
    CategoryCycleError,
    CategoryNotFoundError,
    CategoryValidationError,
    SlugConflictError,
)
from storefront.domain.value_objects import CategoryNode, NodeUpdate

logger = structlog.get_logger()

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 120
SLUG_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 500

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def build_slug(value: str) -> str:
    """Derive a URL slug.

    Args:
        value: Name or path to derive from.

    Returns:
        Lowercase slug with runs of other characters collapsed to ``-``.
    """
    return _NON_ALPHANUMERIC.sub("-", value.lower()).strip("-")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _validate_name(name: str | None) -> str:
    name = _clean(name)
    if name is None or not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise CategoryValidationError(
            f"Category name must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters",
            details={"field": "name"},
        )
    return name


class CategoryService:
    """Service for category tree operations.

    Example usage:
        async with async_session_factory() as session:
            service = CategoryService(session)
            created = await service.create_category("Shoes", parent_id=apparel_id)
            await service.reorder([NodeUpdate(id=created.id, parent_id=None, sort_order=0)])
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize service with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session
        self.repository = CategoryRepository(session)

    async def list_nodes(self, limit: int, search: str | None = None) -> tuple[list[CategoryNode], int]:
        """List categories as flat nodes.

        Args:
            limit: Maximum categories to return.
            search: Optional name filter.

        Returns:
            Tuple of (nodes, total matching count).
        """
        search = _clean(search)
        categories = await self.repository.list_nodes(limit=limit, search=search)
        total = await self.repository.count(search=search)
        return [category.to_node() for category in categories], total

    async def create_category(
        self,
        name: str,
        slug: str | None = None,
        description: str | None = None,
        parent_id: str | None = None,
    ) -> CategoryNode:
        """Create a category as the last child of its parent.

        Args:
            name: Category name.
            slug: Optional slug; derived from the name when blank.
            description: Optional description.
            parent_id: Parent category, None for a root.

        Returns:
            The created category.

        Raises:
            CategoryValidationError: If a field is out of bounds.
            CategoryNotFoundError: If the parent does not exist.
            SlugConflictError: If the slug is taken.
        """
        name = _validate_name(name)
        description = _clean(description)
        parent_id = _clean(parent_id)

        slug = build_slug(_clean(slug) or name)
        if not slug or len(slug) > SLUG_MAX_LENGTH:
            raise CategoryValidationError(
                f"Category slug must be 1-{SLUG_MAX_LENGTH} characters",
                details={"field": "slug"},
            )
        if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
            raise CategoryValidationError(
                f"Category description must be at most {DESCRIPTION_MAX_LENGTH} characters",
                details={"field": "description"},
            )

        if parent_id is not None and await self.repository.get_by_id(parent_id) is None:
            raise CategoryNotFoundError(parent_id)
        if await self.repository.get_by_slug(slug) is not None:
            raise SlugConflictError(slug)

        category = Category(
            parent_id=parent_id,
            name=name,
            slug=slug,
            description=description,
            sort_order=await self.repository.count_children(parent_id),
            is_active=True,
        )
        await self.repository.save(category)
        await self.session.commit()

        logger.info(
            "Category created",
            category_id=category.id,
            parent_id=parent_id,
            sort_order=category.sort_order,
        )
        return category.to_node()

    async def reorder(self, updates: Sequence[NodeUpdate]) -> int:
        """Apply a batch of parent/rank updates atomically.

        Nothing is written unless every update is valid.

        Args:
            updates: Updates to apply.

        Returns:
            Number of categories updated.

        Raises:
            CategoryValidationError: If an id repeats or a rank is negative.
            CategoryNotFoundError: If an id or parent does not exist.
            CategoryCycleError: If the result would contain a cycle.
        """
        if not updates:
            return 0

        seen: set[str] = set()
        duplicates = []
        for update in updates:
            if update.id in seen:
                duplicates.append(update.id)
            seen.add(update.id)
        if duplicates:
            raise CategoryValidationError(
                "Each category may appear only once per reorder batch",
                details={"category_ids": sorted(set(duplicates))},
            )
        negative = [update.id for update in updates if update.sort_order < 0]
        if negative:
            raise CategoryValidationError(
                "sort_order must be non-negative",
                details={"category_ids": negative},
            )

        categories = await self.repository.list_all()
        by_id = {category.id: category for category in categories}
        referenced = [update.id for update in updates]
        referenced += [update.parent_id for update in updates if update.parent_id is not None]
        missing = sorted({category_id for category_id in referenced if category_id not in by_id})
        if missing:
            raise CategoryNotFoundError(missing)

        next_nodes = apply_updates((category.to_node() for category in categories), updates)
        parent_map = build_parent_map(next_nodes)
        for update in updates:
            if update.parent_id is not None and (
                update.parent_id == update.id or is_descendant(parent_map, update.id, update.parent_id)
            ):
                raise CategoryCycleError(update.id, update.parent_id)

        for update in updates:
            category = by_id[update.id]
            category.parent_id = update.parent_id
            category.sort_order = update.sort_order
        await self.session.flush()
        await self.session.commit()

        logger.info("Category order updated", update_count=len(updates))
        return len(updates)

    async def update_category(
        self,
        category_id: str,
        name: str | None = None,
        is_active: bool | None = None,
    ) -> CategoryNode:
        """Rename or (de)activate a category.

        Args:
            category_id: Category to update.
            name: New name.
            is_active: New visibility flag.

        Returns:
            The updated category.

        Raises:
            CategoryNotFoundError: If the category does not exist.
            CategoryValidationError: If the name is out of bounds.
        """
        category = await self.repository.get_by_id(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)

        if name is not None:
            category.name = _validate_name(name)
        if is_active is not None:
            category.is_active = is_active

        await self.session.flush()
        await self.session.commit()
        return category.to_node()

    async def menu(self, limit: int) -> list[dict[str, Any]]:
        """Build the storefront category menu.

        Inactive categories are hidden together with everything below them.

        Args:
            limit: Maximum number of top-level menu entries.

        Returns:
            Menu entries in display order.
        """
        nodes = [category.to_node() for category in await self.repository.list_all()]
        parent_map = build_parent_map(nodes)
        hidden = {node.id for node in nodes if not node.is_active}
        visible = [
            node for node in nodes
            if node.id not in hidden
            and not any(is_descendant(parent_map, hidden_id, node.id) for hidden_id in hidden)
        ]
        return map_tree_to_menu(build_tree(visible)[:limit])

    async def import_taxonomy(self, entries: Sequence[TaxonomyEntry]) -> dict[str, Any]:
        """Create categories from parsed taxonomy entries.

        Entries whose slug already exists are kept as they are, so an
        import can be re-run. New categories are appended after existing
        siblings.

        Args:
            entries: Entries in parent-first order.

        Returns:
            Import result with counts.
        """
        ids_by_path: dict[str, str] = {}
        created = 0
        skipped = 0

        for entry in entries:
            slug = build_slug(entry.full_path)[:SLUG_MAX_LENGTH]
            existing = await self.repository.get_by_slug(slug)
            if existing is not None:
                ids_by_path[entry.full_path] = existing.id
                skipped += 1
                continue

            parent_id = ids_by_path.get(entry.parent_path) if entry.parent_path else None
            category = Category(
                parent_id=parent_id,
                name=entry.name[:NAME_MAX_LENGTH],
                slug=slug,
                sort_order=await self.repository.count_children(parent_id),
                is_active=True,
            )
            await self.repository.save(category)
            ids_by_path[entry.full_path] = category.id
            created += 1

        await self.session.commit()
        logger.info("Taxonomy imported", created=created, skipped=skipped)

        return {
            "entries": len(entries),
            "created": created,
            "skipped": skipped,
        }

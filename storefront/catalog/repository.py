"""Category repository for database operations.

Provides lookups, listing and persistence for category records.
"""

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import Category


class CategoryRepository:
    """Repository for Category database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = CategoryRepository(session)
            categories = await repo.list_nodes(limit=200, search="shoe")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, category: Category) -> Category:
        """Save a category to database.

        Args:
            category: Category to save.

        Returns:
            Saved category.
        """
        self.session.add(category)
        await self.session.flush()
        return category

    async def get_by_id(self, category_id: str) -> Category | None:
        """Get category by ID.

        Args:
            category_id: Category ID.

        Returns:
            Category if found, None otherwise.
        """
        result = await self.session.execute(select(Category).where(Category.id == category_id))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Category | None:
        """Get category by slug.

        Args:
            slug: Category slug.

        Returns:
            Category if found, None otherwise.
        """
        result = await self.session.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

    async def list_nodes(
        self,
        limit: int,
        search: str | None = None,
    ) -> Sequence[Category]:
        """List categories in display order.

        Args:
            limit: Maximum results.
            search: Case-insensitive substring match on name.

        Returns:
            Categories ordered by rank, then name.
        """
        query = select(Category)

        if search:
            query = query.where(Category.name.ilike(f"%{search}%"))

        query = query.order_by(Category.sort_order.asc(), Category.name.asc()).limit(limit)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def list_all(self) -> Sequence[Category]:
        """List every category.

        Returns:
            All categories in display order.
        """
        result = await self.session.execute(
            select(Category).order_by(Category.sort_order.asc(), Category.name.asc())
        )
        return result.scalars().all()

    async def count(self, search: str | None = None) -> int:
        """Count categories.

        Args:
            search: Optional name filter.

        Returns:
            Count of matching categories.
        """
        query = select(func.count(Category.id))
        if search:
            query = query.where(Category.name.ilike(f"%{search}%"))
        result = await self.session.execute(query)
        return result.scalar_one()

    async def count_children(self, parent_id: str | None) -> int:
        """Count the direct children of a parent.

        Args:
            parent_id: Parent category, None for roots.

        Returns:
            Size of the sibling group.
        """
        if parent_id is None:
            condition = Category.parent_id.is_(None)
        else:
            condition = Category.parent_id == parent_id
        result = await self.session.execute(select(func.count(Category.id)).where(condition))
        return result.scalar_one()

"""Tests for the category service."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.catalog.models import Category
from storefront.catalog.service import CategoryService, build_slug
from storefront.catalog.taxonomy import TaxonomyParser
from storefront.domain.exceptions import (
    CategoryCycleError,
    CategoryNotFoundError,
    CategoryValidationError,
    SlugConflictError,
)
from storefront.domain.value_objects import NodeUpdate


async def stored(session: AsyncSession) -> dict[str, tuple[str | None, int]]:
    """Read (parent_id, sort_order) for every stored category."""
    session.expire_all()
    result = await session.execute(select(Category))
    return {c.id: (c.parent_id, c.sort_order) for c in result.scalars().all()}


class TestBuildSlug:
    """Tests for build_slug."""

    def test_lowercases_and_dashes(self) -> None:
        """Non-alphanumeric runs collapse to a dash."""
        assert build_slug("Home & Garden") == "home-garden"

    def test_strips_edges(self) -> None:
        """Leading and trailing separators are dropped."""
        assert build_slug("  -- Shoes! ") == "shoes"

    def test_path(self) -> None:
        """Paths produce unique slugs."""
        assert build_slug("Electronics > Audio") == "electronics-audio"


class TestListNodes:
    """Tests for listing categories."""

    @pytest.mark.asyncio
    async def test_lists_in_display_order(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """Categories are listed by rank then name with a total."""
        service = CategoryService(session)
        nodes, total = await service.list_nodes(limit=200)

        assert total == 5
        assert [n.id for n in nodes][:3] == ["apparel", "audio", "shirts"]

    @pytest.mark.asyncio
    async def test_limit_and_search(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """Search filters by name, limit caps the page."""
        service = CategoryService(session)
        nodes, total = await service.list_nodes(limit=1, search="sh")

        assert total == 2
        assert len(nodes) == 1


class TestCreateCategory:
    """Tests for creating categories."""

    @pytest.mark.asyncio
    async def test_appends_to_parent(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """New category gets the next rank under its parent."""
        service = CategoryService(session)
        node = await service.create_category("Hats", parent_id="apparel")

        assert node.parent_id == "apparel"
        assert node.sort_order == 2
        assert node.slug == "hats"
        assert node.id

    @pytest.mark.asyncio
    async def test_root_category(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """Root categories are ranked after existing roots."""
        service = CategoryService(session)
        node = await service.create_category("Toys", slug="toys-games", description="  ")

        assert node.parent_id is None
        assert node.sort_order == 2
        assert node.slug == "toys-games"
        assert node.description is None

    @pytest.mark.asyncio
    async def test_blank_parent_treated_as_root(self, session: AsyncSession) -> None:
        """Blank parent id means no parent."""
        service = CategoryService(session)
        node = await service.create_category("Garden", parent_id="")
        assert node.parent_id is None
        assert node.sort_order == 0

    @pytest.mark.asyncio
    async def test_name_too_short(self, session: AsyncSession) -> None:
        """Names shorter than two characters are rejected."""
        service = CategoryService(session)
        with pytest.raises(CategoryValidationError):
            await service.create_category(" x ")

    @pytest.mark.asyncio
    async def test_description_too_long(self, session: AsyncSession) -> None:
        """Descriptions are capped."""
        service = CategoryService(session)
        with pytest.raises(CategoryValidationError):
            await service.create_category("Garden", description="d" * 501)

    @pytest.mark.asyncio
    async def test_unknown_parent(self, session: AsyncSession) -> None:
        """Parent must exist."""
        service = CategoryService(session)
        with pytest.raises(CategoryNotFoundError):
            await service.create_category("Garden", parent_id="missing")

    @pytest.mark.asyncio
    async def test_slug_conflict(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """Slugs are unique across the tree."""
        service = CategoryService(session)
        with pytest.raises(SlugConflictError):
            await service.create_category("Shoes", parent_id="electronics")


class TestReorder:
    """Tests for bulk reorder."""

    @pytest.mark.asyncio
    async def test_applies_updates(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """A valid batch is written."""
        service = CategoryService(session)
        updated = await service.reorder([
            NodeUpdate(id="shoes", parent_id="electronics", sort_order=1),
        ])

        assert updated == 1
        assert (await stored(session))["shoes"] == ("electronics", 1)

    @pytest.mark.asyncio
    async def test_unknown_id_writes_nothing(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """One unknown id rejects the whole batch."""
        service = CategoryService(session)
        before = await stored(session)

        with pytest.raises(CategoryNotFoundError) as exc_info:
            await service.reorder([
                NodeUpdate(id="shirts", parent_id="apparel", sort_order=1),
                NodeUpdate(id="ghost", parent_id=None, sort_order=0),
            ])

        assert exc_info.value.details["category_ids"] == ["ghost"]
        await session.rollback()
        assert await stored(session) == before

    @pytest.mark.asyncio
    async def test_unknown_parent_rejected(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """Parents must exist."""
        service = CategoryService(session)
        with pytest.raises(CategoryNotFoundError):
            await service.reorder([NodeUpdate(id="shirts", parent_id="ghost", sort_order=0)])

    @pytest.mark.asyncio
    async def test_cycle_rejected(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """A batch that would nest a category under its descendant fails."""
        service = CategoryService(session)
        before = await stored(session)

        with pytest.raises(CategoryCycleError):
            await service.reorder([NodeUpdate(id="apparel", parent_id="shoes", sort_order=0)])

        await session.rollback()
        assert await stored(session) == before

    @pytest.mark.asyncio
    async def test_self_parent_rejected(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """A category cannot be its own parent."""
        service = CategoryService(session)
        with pytest.raises(CategoryCycleError):
            await service.reorder([NodeUpdate(id="audio", parent_id="audio", sort_order=0)])

    @pytest.mark.asyncio
    async def test_swap_within_batch_allowed(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """The cycle check runs against the batch result, not the current tree."""
        service = CategoryService(session)
        await service.reorder([
            NodeUpdate(id="audio", parent_id=None, sort_order=1),
            NodeUpdate(id="electronics", parent_id="audio", sort_order=0),
        ])

        rows = await stored(session)
        assert rows["audio"] == (None, 1)
        assert rows["electronics"] == ("audio", 0)

    @pytest.mark.asyncio
    async def test_duplicate_ids_rejected(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """A category may appear once per batch."""
        service = CategoryService(session)
        with pytest.raises(CategoryValidationError):
            await service.reorder([
                NodeUpdate(id="audio", parent_id=None, sort_order=2),
                NodeUpdate(id="audio", parent_id="apparel", sort_order=2),
            ])

    @pytest.mark.asyncio
    async def test_empty_batch(self, session: AsyncSession) -> None:
        """Empty batch updates nothing."""
        assert await CategoryService(session).reorder([]) == 0


class TestUpdateCategory:
    """Tests for rename and visibility."""

    @pytest.mark.asyncio
    async def test_rename(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """Renaming keeps slug and placement."""
        service = CategoryService(session)
        node = await service.update_category("shoes", name="  Footwear ")

        assert node.name == "Footwear"
        assert node.slug == "shoes"
        assert (node.parent_id, node.sort_order) == ("apparel", 1)

    @pytest.mark.asyncio
    async def test_deactivate(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """Visibility can be toggled."""
        node = await CategoryService(session).update_category("audio", is_active=False)
        assert node.is_active is False

    @pytest.mark.asyncio
    async def test_unknown_category(self, session: AsyncSession) -> None:
        """Updating a missing category fails."""
        with pytest.raises(CategoryNotFoundError):
            await CategoryService(session).update_category("ghost", name="Ghost")


class TestMenu:
    """Tests for the storefront menu."""

    @pytest.mark.asyncio
    async def test_menu_lists_roots_with_children(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """Menu entries follow tree order."""
        menu = await CategoryService(session).menu(limit=10)

        assert [entry["id"] for entry in menu] == ["apparel", "electronics"]
        assert [item["id"] for item in menu[0]["subcategories"][0]["items"]] == ["shirts", "shoes"]

    @pytest.mark.asyncio
    async def test_inactive_subtree_hidden(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """An inactive category hides everything below it."""
        service = CategoryService(session)
        await service.update_category("apparel", is_active=False)

        menu = await service.menu(limit=10)

        assert [entry["id"] for entry in menu] == ["electronics"]

    @pytest.mark.asyncio
    async def test_limit(
        self, session: AsyncSession, seeded_categories: dict[str, Category]
    ) -> None:
        """Limit caps the number of top-level entries."""
        menu = await CategoryService(session).menu(limit=1)
        assert len(menu) == 1


class TestImportTaxonomy:
    """Tests for taxonomy import."""

    @pytest.mark.asyncio
    async def test_import_builds_tree(self, session: AsyncSession) -> None:
        """Entries are stored with parents and dense ranks."""
        parser = TaxonomyParser()
        entries = parser.parse_lines([
            "Electronics",
            "Electronics > Audio",
            "Electronics > Computers",
            "Toys",
        ])
        result = await CategoryService(session).import_taxonomy(entries)

        assert result == {"entries": 4, "created": 4, "skipped": 0}
        rows = await session.execute(select(Category))
        by_slug = {c.slug: c for c in rows.scalars().all()}
        assert by_slug["electronics-computers"].parent_id == by_slug["electronics"].id
        assert by_slug["electronics-computers"].sort_order == 1
        assert by_slug["toys"].sort_order == 1

    @pytest.mark.asyncio
    async def test_reimport_skips_existing(self, session: AsyncSession) -> None:
        """Re-running an import creates nothing new."""
        parser = TaxonomyParser()
        entries = parser.parse_lines(["Garden", "Garden > Tools"])
        service = CategoryService(session)

        await service.import_taxonomy(entries)
        result = await service.import_taxonomy(entries)

        assert result["created"] == 0
        assert result["skipped"] == 2

#!/usr/bin/env python3
"""Seed category tree script.

Imports a category tree from a taxonomy text file, or from the embedded
default tree, into the categories table. Existing slugs are kept, so
the script can be re-run.

Usage:
    python scripts/seed_categories.py
    python scripts/seed_categories.py --file categories.txt
    python scripts/seed_categories.py --file taxonomy-with-ids.en-US.txt --max-depth 2
"""

import argparse
import asyncio

from storefront.catalog.service import CategoryService
from storefront.catalog.taxonomy import TaxonomyEntry, TaxonomyParser
from storefront.infrastructure.database import Base, async_session_factory, engine


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def load_entries(path: str | None, max_depth: int | None) -> list[TaxonomyEntry]:
    """Parse taxonomy entries.

    Args:
        path: Taxonomy file, None for the embedded tree.
        max_depth: Drop entries deeper than this level.

    Returns:
        Entries in parent-first order.
    """
    parser = TaxonomyParser()
    entries = parser.parse_file(path) if path else parser.parse_embedded()
    if max_depth is not None:
        entries = [entry for entry in entries if entry.level <= max_depth]
    return entries


async def seed(entries: list[TaxonomyEntry]) -> dict:
    """Import entries in a single session.

    Args:
        entries: Entries to import.

    Returns:
        Import result.
    """
    async with async_session_factory() as session:
        service = CategoryService(session)
        return await service.import_taxonomy(entries)


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the storefront category tree",
    )
    parser.add_argument(
        "--file",
        default=None,
        help="Taxonomy file with one category path per line (default: embedded tree)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Only import categories up to this depth",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("Storefront Category Seeder")
    print("=" * 60)
    print(f"Source: {args.file or 'embedded tree'}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    entries = load_entries(args.file, args.max_depth)
    print(f"Importing {len(entries)} categories...")
    result = await seed(entries)

    print(f"  ✓ Created: {result['created']}")
    print(f"  ✓ Already present: {result['skipped']}")
    print()

    await engine.dispose()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())

#!/usr/bin/env python3
"""Move a category through the storefront API.

Loads the category tree, plans the move locally, and sends only the
changed parent/rank assignments.

Usage:
    python scripts/move_category.py <category-id> <target-id> inside
    python scripts/move_category.py <category-id> <target-id> before --dry-run
    python scripts/move_category.py --tree
"""

import argparse
import asyncio
import sys

from storefront.application.tree_coordinator import DropOutcome, TreeCoordinator
from storefront.catalog.planner import plan_move
from storefront.catalog.tree import build_option_list
from storefront.domain.exceptions import CategoryError
from storefront.infrastructure.category_client import CategoryApiClient
from storefront.infrastructure.logging_config import configure_logging


def print_tree(coordinator: TreeCoordinator) -> None:
    """Print the indented category tree."""
    for option in build_option_list(coordinator.tree):
        print(f"{option.label}  [{option.id}]")


async def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Move a category in the storefront tree")
    parser.add_argument("drag_id", nargs="?", help="Category to move")
    parser.add_argument("target_id", nargs="?", help="Category to move relative to")
    parser.add_argument(
        "position",
        nargs="?",
        choices=["before", "after", "inside"],
        help="Where to place the category relative to the target",
    )
    parser.add_argument("--url", default=None, help="Storefront API base URL")
    parser.add_argument("--tree", action="store_true", help="Print the tree and exit")
    parser.add_argument("--dry-run", action="store_true", help="Show the updates without saving")

    args = parser.parse_args()
    configure_logging("WARNING")

    client = CategoryApiClient(base_url=args.url)
    coordinator = TreeCoordinator(client)
    try:
        await coordinator.load()

        if args.tree:
            print_tree(coordinator)
            return 0

        if not (args.drag_id and args.target_id and args.position):
            parser.error("drag_id, target_id and position are required")

        if args.dry_run:
            try:
                plan = plan_move(coordinator.nodes, args.drag_id, args.target_id, args.position)
            except CategoryError as e:
                print(f"✗ {e.message}")
                return 1
            for update in plan.updates:
                print(f"  {update.id}: parent={update.parent_id} sort_order={update.sort_order}")
            print(f"{len(plan.updates)} update(s)")
            return 0

        result = await coordinator.move(args.drag_id, args.target_id, args.position)
    finally:
        await client.close()

    if result.outcome is DropOutcome.COMMITTED:
        print(f"✓ Saved {len(result.updates)} update(s)")
        print_tree(coordinator)
        return 0
    if result.outcome is DropOutcome.NOOP:
        print("Nothing to change")
        return 0
    print(f"✗ {result.error or result.warning}")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

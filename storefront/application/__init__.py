"""Application layer module.

Contains the tree coordinator that drives category moves between the
admin tree and the category API.
"""

from storefront.application.tree_coordinator import (
    CategoryGateway,
    DropOutcome,
    DropResult,
    TreeCoordinator,
    get_tree_coordinator,
)

__all__ = [
    "CategoryGateway",
    "DropOutcome",
    "DropResult",
    "TreeCoordinator",
    "get_tree_coordinator",
]

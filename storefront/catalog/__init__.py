"""Category Catalog.

Tree building, cycle checks and move planning over flat category
snapshots, plus persistence and taxonomy import for category records.
"""

from storefront.catalog.hierarchy import build_parent_map, is_descendant
from storefront.catalog.models import Category
from storefront.catalog.planner import MovePlan, apply_updates, plan_move
from storefront.catalog.repository import CategoryRepository
from storefront.catalog.service import CategoryService, build_slug
from storefront.catalog.taxonomy import TaxonomyEntry, TaxonomyParser
from storefront.catalog.tree import (
    CategoryOption,
    CategoryTreeNode,
    build_option_list,
    build_tree,
    filter_tree,
    find_dangling,
    map_tree_to_menu,
    walk,
)

__all__ = [
    # Tree
    "CategoryOption",
    "CategoryTreeNode",
    "build_option_list",
    "build_tree",
    "filter_tree",
    "find_dangling",
    "map_tree_to_menu",
    "walk",
    # Hierarchy
    "build_parent_map",
    "is_descendant",
    # Planner
    "MovePlan",
    "apply_updates",
    "plan_move",
    # Taxonomy
    "TaxonomyEntry",
    "TaxonomyParser",
    # Models
    "Category",
    # Repository
    "CategoryRepository",
    # Service
    "CategoryService",
    "build_slug",
]

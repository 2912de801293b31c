"""API schemas for the storefront category API.

Pydantic models for request/response validation and serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from storefront.domain.value_objects import CategoryNode, NodeUpdate


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | list[Any] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Category Schemas
# ============================================================================


class CategoryNodeSchema(BaseModel):
    """A category as a flat tree node."""

    id: str = Field(..., description="Unique category identifier")
    parent_id: str | None = Field(default=None, description="Parent category, null for a root")
    name: str = Field(..., description="Display name")
    slug: str = Field(..., description="URL slug")
    sort_order: int = Field(..., ge=0, description="Rank among siblings (0-based)")
    description: str | None = Field(default=None, description="Category description")
    is_active: bool = Field(default=True, description="Shown in the storefront menu")
    image_url: str | None = Field(default=None, description="Menu image URL")

    @classmethod
    def from_node(cls, node: CategoryNode) -> "CategoryNodeSchema":
        """Build from a category node value object."""
        return cls(**node.to_dict())


class CategoryTreeResponse(BaseModel):
    """Flat category list for the admin tree manager."""

    items: list[CategoryNodeSchema] = Field(..., description="Categories in display order")
    total: int = Field(..., description="Total number of matching categories")


class NodeUpdateSchema(BaseModel):
    """A single parent/rank assignment."""

    id: str = Field(..., min_length=1, description="Category to update")
    parent_id: str | None = Field(default=None, description="New parent, null for a root")
    sort_order: int = Field(..., ge=0, description="New rank among siblings")

    def to_update(self) -> NodeUpdate:
        """Convert to the domain update type."""
        return NodeUpdate(id=self.id, parent_id=self.parent_id, sort_order=self.sort_order)


class CategoryReorderRequest(BaseModel):
    """Batch of parent/rank updates applied all-or-nothing."""

    updates: list[NodeUpdateSchema] = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Updates produced by a tree move",
    )


class CategoryReorderResponse(BaseModel):
    """Result of a bulk reorder."""

    updated: int = Field(..., description="Number of categories updated")


class CategoryCreateRequest(BaseModel):
    """Request to create a category.

    Blank optional fields are treated as absent.
    """

    name: str = Field(..., max_length=200, description="Category name (2-120 characters)")
    slug: str | None = Field(
        default=None, max_length=200, description="URL slug, derived from the name when omitted"
    )
    description: str | None = Field(
        default=None, max_length=1000, description="Description (up to 500 characters)"
    )
    parent_id: str | None = Field(default=None, description="Parent category, omit for a root")


class CategoryUpdateRequest(BaseModel):
    """Request to rename or (de)activate a category."""

    name: str | None = Field(default=None, max_length=200, description="New name")
    is_active: bool | None = Field(default=None, description="New visibility flag")


class CategoryItemResponse(BaseModel):
    """A single category."""

    item: CategoryNodeSchema = Field(..., description="The category")


# ============================================================================
# Storefront Menu Schemas
# ============================================================================


class MenuItemSchema(BaseModel):
    """A leaf link inside a menu group."""

    id: str
    name: str
    slug: str
    image: str = Field(default="", description="Image URL, empty when unset")


class MenuGroupSchema(BaseModel):
    """Group of child links under a top-level menu entry."""

    id: str
    name: str
    has_arrow: bool = False
    items: list[MenuItemSchema] = Field(default_factory=list)


class MenuCategorySchema(BaseModel):
    """Top-level storefront menu entry."""

    id: str
    name: str
    slug: str
    has_arrow: bool = Field(..., description="Whether the entry has children")
    subcategories: list[MenuGroupSchema] = Field(default_factory=list)


class CategoryMenuResponse(BaseModel):
    """Storefront category menu."""

    categories: list[MenuCategorySchema] = Field(..., description="Menu entries in display order")

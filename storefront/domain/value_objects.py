"""Value Objects for the domain layer.

Value objects are immutable objects that are defined by their attributes
rather than identity. They are interchangeable when their values are equal.

The category tree engine works exclusively on snapshots of these objects:
a move never mutates a node, it produces replacements.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Self

from storefront.domain.base import ValueObject
from storefront.domain.exceptions import CategoryValidationError


# ============================================================================
# Drop Position
# ============================================================================


class DropPosition(str, Enum):
    """Where a dragged category lands relative to its drop target."""

    BEFORE = "before"
    AFTER = "after"
    INSIDE = "inside"

    @classmethod
    def parse(cls, value: "DropPosition | str") -> "DropPosition":
        """Coerce a raw drop position.

        Args:
            value: Position enum member or its string value.

        Returns:
            DropPosition member.

        Raises:
            CategoryValidationError: If the value is not a known position.
        """
        try:
            return cls(value)
        except ValueError:
            raise CategoryValidationError(
                f"Unknown drop position '{value}'",
                details={"position": str(value), "allowed": [p.value for p in cls]},
            ) from None


# ============================================================================
# Category Node
# ============================================================================


@dataclass(frozen=True)
class CategoryNode(ValueObject):
    """A category record as seen by the tree engine.

    Attributes:
        id: Unique category identifier.
        parent_id: Identifier of the parent category (None for a root).
        name: Display name.
        slug: URL slug.
        sort_order: Zero-based rank among siblings.
        description: Optional description.
        is_active: Whether the category is visible in the storefront.
        image_url: Optional category image.
    """

    id: str
    parent_id: str | None = None
    name: str = ""
    slug: str = ""
    sort_order: int = 0
    description: str | None = None
    is_active: bool = True
    image_url: str | None = None

    @property
    def sort_key(self) -> tuple[int, str]:
        """Display ordering key among siblings."""
        return (self.sort_order, self.name)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Self:
        """Create from category API response data.

        Args:
            data: API response item.

        Returns:
            CategoryNode instance.
        """
        return cls(
            id=str(data["id"]),
            parent_id=str(data["parent_id"]) if data.get("parent_id") else None,
            name=data.get("name") or "",
            slug=data.get("slug") or "",
            sort_order=int(data.get("sort_order") or 0),
            description=data.get("description"),
            is_active=bool(data.get("is_active", True)),
            image_url=data.get("image_url"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "name": self.name,
            "slug": self.slug,
            "sort_order": self.sort_order,
            "description": self.description,
            "is_active": self.is_active,
            "image_url": self.image_url,
        }


# ============================================================================
# Node Update
# ============================================================================


@dataclass(frozen=True)
class NodeUpdate(ValueObject):
    """Instruction to persist a new parent and rank for one category.

    Produced by the reorder planner, sent to the category API and
    discarded once applied.
    """

    id: str
    parent_id: str | None
    sort_order: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to request payload.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "sort_order": self.sort_order,
        }

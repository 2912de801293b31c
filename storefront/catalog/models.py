"""SQLAlchemy models for the category tree.

Defines the Category table. Each row references its parent by id, so the
table holds a forest; sibling order is stored as a dense rank.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.domain.value_objects import CategoryNode
from storefront.infrastructure.database import Base


class Category(Base):
    """Category record.

    Attributes:
        id: Unique category identifier (UUID string).
        parent_id: Parent category, None for a root.
        name: Display name.
        slug: URL slug, unique across the tree.
        description: Optional description.
        sort_order: Rank among siblings, 0-based.
        is_active: Whether the category is shown in the storefront menu.
        image_url: Optional image shown in the menu.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    parent_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, slug={self.slug}, parent_id={self.parent_id})>"

    def to_node(self) -> CategoryNode:
        """Convert to a tree node value object.

        Returns:
            Immutable node used by the tree builder and planner.
        """
        return CategoryNode(
            id=self.id,
            parent_id=self.parent_id,
            name=self.name,
            slug=self.slug,
            sort_order=self.sort_order,
            description=self.description,
            is_active=self.is_active,
            image_url=self.image_url,
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
            "description": self.description,
            "sort_order": self.sort_order,
            "is_active": self.is_active,
            "image_url": self.image_url,
        }

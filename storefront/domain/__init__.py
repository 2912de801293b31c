"""Domain layer - Value objects, state machines, domain exceptions.

This module exports the core domain building blocks of the category tree:

- **Value Objects**: Immutable snapshots compared by value (CategoryNode, NodeUpdate)
- **State Machines**: Deterministic gesture transitions (GestureStatus)
- **Exceptions**: Domain-specific errors and invariant violations

Example usage:
    from storefront.domain import CategoryNode, DropPosition

    root = CategoryNode(id="c-1", name="Electronics", slug="electronics")
    child = CategoryNode(id="c-2", parent_id="c-1", name="Audio", slug="audio")
"""

# Base classes
from storefront.domain.base import ValueObject

# Exceptions
from storefront.domain.exceptions import (
    CategoryCycleError,
    CategoryError,
    CategoryNetworkError,
    CategoryNotFoundError,
    CategoryValidationError,
    DomainError,
    InvalidStateTransitionError,
    SlugConflictError,
)

# State Machines
from storefront.domain.state_machines import GestureStatus, validate_gesture_transition

# Value Objects
from storefront.domain.value_objects import CategoryNode, DropPosition, NodeUpdate

__all__ = [
    # Base classes
    "ValueObject",
    # Value Objects
    "CategoryNode",
    "DropPosition",
    "NodeUpdate",
    # State Machines
    "GestureStatus",
    "validate_gesture_transition",
    # Exceptions
    "DomainError",
    "InvalidStateTransitionError",
    "CategoryError",
    "CategoryValidationError",
    "CategoryCycleError",
    "CategoryNotFoundError",
    "SlugConflictError",
    "CategoryNetworkError",
]

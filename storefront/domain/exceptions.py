"""Domain exceptions.

All domain-level errors that represent business rule violations.
These exceptions are raised by the tree planner, the gesture state
machine and the category service when invariants are violated or
invalid operations are attempted.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# State Machine Errors
# ============================================================================


class InvalidStateTransitionError(DomainError):
    """Raised when an invalid state transition is attempted.

    This error indicates that the requested operation cannot be performed
    in the current state of the entity.
    """

    error_code = "INVALID_STATE_TRANSITION"

    def __init__(
        self,
        entity_type: str,
        entity_id: str,
        current_state: str,
        target_state: str,
        allowed_transitions: list[str] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            entity_type: Type of entity (e.g., "Gesture").
            entity_id: ID of the entity.
            current_state: Current state of the entity.
            target_state: Attempted target state.
            allowed_transitions: List of allowed target states from current state.
        """
        allowed = allowed_transitions or []
        message = (
            f"Cannot transition {entity_type}({entity_id}) "
            f"from '{current_state}' to '{target_state}'. "
            f"Allowed transitions: {allowed}"
        )
        super().__init__(
            message,
            details={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "current_state": current_state,
                "target_state": target_state,
                "allowed_transitions": allowed,
            },
        )


# ============================================================================
# Category Errors
# ============================================================================


class CategoryError(DomainError):
    """Base class for category-related errors."""

    pass


class CategoryValidationError(CategoryError):
    """Raised when a category operation fails validation."""

    error_code = "VALIDATION_ERROR"


class CategoryCycleError(CategoryValidationError):
    """Raised when a move would make a category its own ancestor."""

    error_code = "INVALID_MOVE"

    def __init__(self, category_id: str, parent_id: str) -> None:
        """Initialize category cycle error.

        Args:
            category_id: ID of the category being moved.
            parent_id: Parent the category would be moved under.
        """
        super().__init__(
            "Cannot move a category inside its own descendant",
            details={"category_id": category_id, "parent_id": parent_id},
        )


class CategoryNotFoundError(CategoryError):
    """Raised when one or more categories are not found."""

    error_code = "CATEGORY_NOT_FOUND"

    def __init__(self, category_ids: list[str] | str) -> None:
        """Initialize category not found error.

        Args:
            category_ids: ID or IDs that could not be resolved.
        """
        ids = [category_ids] if isinstance(category_ids, str) else list(category_ids)
        super().__init__(
            f"Category not found: {', '.join(ids)}",
            details={"category_ids": ids},
        )


class SlugConflictError(CategoryError):
    """Raised when a category slug is already taken."""

    error_code = "SLUG_CONFLICT"

    def __init__(self, slug: str) -> None:
        """Initialize slug conflict error.

        Args:
            slug: The conflicting slug.
        """
        super().__init__(
            f"Category slug '{slug}' is already in use",
            details={"slug": slug},
        )


class CategoryNetworkError(CategoryError):
    """Raised when the category API cannot be reached or rejects a request."""

    error_code = "NETWORK_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        """Initialize category network error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code if a response was received.
            error_code: Error code reported by the remote API, if any.
        """
        super().__init__(
            message,
            details={"status_code": status_code, "remote_error_code": error_code},
        )
        self.status_code = status_code

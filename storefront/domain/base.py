"""Base classes for domain layer.

Provides the foundational value object abstraction used by the
category tree types.
"""

from abc import ABC
from dataclasses import dataclass


# ============================================================================
# Value Object Base
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes,
    not by identity. They have no lifecycle and are interchangeable
    when their values are equal.

    Example:
        @dataclass(frozen=True)
        class NodeUpdate(ValueObject):
            id: str
            parent_id: str | None
            sort_order: int
    """

    pass

"""Category tree coordinator.

Owns the canonical category snapshot behind the admin tree manager and
drives the drag gesture state machine:

- Tracks the dragged category and the current drop target
- Plans the move on drop and applies it optimistically
- Persists the minimal update batch through the category gateway
- Reloads the canonical list when persistence fails
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import Protocol

import structlog

from storefront.catalog.planner import MovePlan, plan_move
from storefront.catalog.tree import (
    CategoryOption,
    CategoryTreeNode,
    build_option_list,
    build_tree,
    filter_tree,
    find_dangling,
)
from storefront.domain.exceptions import (
    CategoryNetworkError,
    CategoryNotFoundError,
    CategoryValidationError,
)
from storefront.domain.state_machines import GestureStatus, validate_gesture_transition
from storefront.domain.value_objects import CategoryNode, DropPosition, NodeUpdate
from storefront.infrastructure.category_client import CategoryApiClient

logger = structlog.get_logger()


# ============================================================================
# Gateway Contract
# ============================================================================


class CategoryGateway(Protocol):
    """Persistence operations the coordinator depends on."""

    async def list_nodes(self, limit: int | None = None, search: str | None = None) -> list[CategoryNode]:
        ...

    async def bulk_reorder(self, updates: Sequence[NodeUpdate]) -> int:
        ...

    async def create_node(
        self,
        name: str,
        slug: str | None = None,
        description: str | None = None,
        parent_id: str | None = None,
    ) -> CategoryNode:
        ...

    async def update_node(
        self,
        node_id: str,
        name: str | None = None,
        is_active: bool | None = None,
    ) -> CategoryNode:
        ...


# ============================================================================
# Result Types
# ============================================================================


class DropOutcome(str, Enum):
    """How a drop gesture ended."""

    CANCELLED = "cancelled"
    NOOP = "noop"
    REJECTED = "rejected"
    COMMITTED = "committed"
    REVERTED = "reverted"


@dataclass
class DropResult:
    """Result of finishing a drag gesture."""

    outcome: DropOutcome
    success: bool = True
    updates: tuple[NodeUpdate, ...] = ()
    error: str | None = None
    error_code: str | None = None
    warning: str | None = None


# ============================================================================
# Coordinator
# ============================================================================


class TreeCoordinator:
    """Coordinates drag-and-drop reordering of the category tree.

    The snapshot is only replaced by this class: optimistically when a
    planned move is committed, and in full when the canonical list is
    (re)loaded. A second gesture cannot start while a commit is in
    flight, and gateway writes are serialized.

    Example usage:
        coordinator = TreeCoordinator(CategoryApiClient())
        await coordinator.load()

        coordinator.begin_drag("c-2")
        coordinator.hover("c-1", "inside")
        result = await coordinator.drop()
    """

    def __init__(self, gateway: CategoryGateway) -> None:
        """Initialize coordinator.

        Args:
            gateway: Category persistence gateway.
        """
        self.gateway = gateway
        self._nodes: tuple[CategoryNode, ...] = ()
        self._status = GestureStatus.IDLE
        self._gesture_seq = 0
        self._drag_id: str | None = None
        self._target_id: str | None = None
        self._position: DropPosition | None = None
        self._write_lock = asyncio.Lock()
        self.last_error: str | None = None
        self.last_warning: str | None = None

    # =========================================================================
    # Snapshot
    # =========================================================================

    @property
    def nodes(self) -> tuple[CategoryNode, ...]:
        """Current category snapshot."""
        return self._nodes

    @property
    def status(self) -> GestureStatus:
        """Current gesture state."""
        return self._status

    @property
    def drag_id(self) -> str | None:
        """Category being dragged, if any."""
        return self._drag_id

    @property
    def hover_target(self) -> tuple[str, DropPosition] | None:
        """Current drop target and position, if any."""
        if self._target_id is None or self._position is None:
            return None
        return self._target_id, self._position

    @property
    def tree(self) -> list[CategoryTreeNode]:
        """Nested view of the current snapshot."""
        return build_tree(self._nodes)

    def search(self, query: str) -> list[CategoryTreeNode]:
        """Tree filtered by category name."""
        return filter_tree(self.tree, query)

    def parent_options(self) -> list[CategoryOption]:
        """Indented options for the parent picker."""
        return build_option_list(self.tree)

    async def load(self) -> tuple[CategoryNode, ...]:
        """Load the canonical category list from the gateway.

        Returns:
            The loaded snapshot.

        Raises:
            CategoryNetworkError: If the list cannot be fetched.
        """
        nodes = await self.gateway.list_nodes()
        self._replace_snapshot(nodes)
        logger.info("Category tree loaded", category_count=len(self._nodes))
        return self._nodes

    def _replace_snapshot(self, nodes: Sequence[CategoryNode]) -> None:
        self._nodes = tuple(nodes)
        for node in find_dangling(self._nodes):
            logger.warning(
                "Category references a missing parent, showing it as a root",
                category_id=node.id,
                parent_id=node.parent_id,
            )

    # =========================================================================
    # Gesture
    # =========================================================================

    @property
    def _gesture_id(self) -> str:
        return f"gesture-{self._gesture_seq}"

    def _transition(self, target: GestureStatus) -> None:
        validate_gesture_transition(self._gesture_id, self._status, target)
        self._status = target

    def _reset(self) -> None:
        self._transition(GestureStatus.IDLE)
        self._drag_id = None
        self._target_id = None
        self._position = None

    def begin_drag(self, node_id: str) -> None:
        """Start dragging a category.

        Args:
            node_id: Category picked up.

        Raises:
            InvalidStateTransitionError: If a gesture or commit is in progress.
        """
        validate_gesture_transition(f"gesture-{self._gesture_seq + 1}", self._status, GestureStatus.DRAGGING)
        self._gesture_seq += 1
        self._transition(GestureStatus.DRAGGING)
        self._drag_id = node_id
        self.last_error = None

    def hover(self, target_id: str, position: DropPosition | str) -> None:
        """Record the drop zone under the pointer.

        Args:
            target_id: Category under the pointer.
            position: Drop position relative to it.

        Raises:
            CategoryValidationError: If the position is unknown.
            InvalidStateTransitionError: If nothing is being dragged.
        """
        drop_position = DropPosition.parse(position)
        self._transition(GestureStatus.HOVER_TARGET)
        self._target_id = target_id
        self._position = drop_position

    def leave_target(self) -> None:
        """Pointer left the current drop zone."""
        self._transition(GestureStatus.DRAGGING)
        self._target_id = None
        self._position = None

    def cancel(self) -> None:
        """Abandon the current gesture without planning anything.

        Has no effect when idle or while a commit is in flight.
        """
        if not self._status.is_cancellable():
            return
        logger.debug("Category drag cancelled", gesture_id=self._gesture_id, drag_id=self._drag_id)
        self._reset()

    async def drop(self) -> DropResult:
        """Release the dragged category on the current target.

        Returns:
            Outcome of the gesture. Rejected moves leave the snapshot
            untouched; failed saves leave the reloaded canonical list.

        Raises:
            InvalidStateTransitionError: If no drag is in progress.
        """
        if self._status is GestureStatus.DRAGGING:
            # Released outside any drop zone.
            self.cancel()
            return DropResult(outcome=DropOutcome.CANCELLED)

        self._transition(GestureStatus.DROPPED)
        drag_id, target_id, position = self._drag_id, self._target_id, self._position

        try:
            plan = plan_move(self._nodes, drag_id, target_id, position)
        except (CategoryNotFoundError, CategoryValidationError) as e:
            logger.info(
                "Category move rejected",
                gesture_id=self._gesture_id,
                drag_id=drag_id,
                target_id=target_id,
                position=position.value,
                error=e.message,
            )
            self.last_error = e.message
            self._reset()
            return DropResult(
                outcome=DropOutcome.REJECTED,
                success=False,
                error=e.message,
                error_code=e.error_code,
            )

        if plan.is_noop:
            self._reset()
            return DropResult(outcome=DropOutcome.NOOP)

        return await self._commit(plan)

    async def move(self, drag_id: str, target_id: str, position: DropPosition | str) -> DropResult:
        """Run a complete move without a pointer.

        Args:
            drag_id: Category to move.
            target_id: Category to move relative to.
            position: Drop position.

        Returns:
            Outcome of the move.
        """
        self.begin_drag(drag_id)
        try:
            self.hover(target_id, position)
        except CategoryValidationError as e:
            self.cancel()
            return DropResult(
                outcome=DropOutcome.REJECTED,
                success=False,
                error=e.message,
                error_code=e.error_code,
            )
        return await self.drop()

    async def _commit(self, plan: MovePlan) -> DropResult:
        async with self._write_lock:
            self._transition(GestureStatus.COMMITTING)
            previous = self._nodes
            self._nodes = plan.nodes

            try:
                await self.gateway.bulk_reorder(plan.updates)
            except CategoryNetworkError as e:
                logger.warning(
                    "Saving category order failed, reloading",
                    gesture_id=self._gesture_id,
                    update_count=len(plan.updates),
                    error=e.message,
                )
                self._transition(GestureStatus.REVERTING)
                self._nodes = previous
                try:
                    await self._reload(previous)
                finally:
                    self._reset()
                self.last_warning = f"Unable to save category structure: {e.message}"
                return DropResult(
                    outcome=DropOutcome.REVERTED,
                    success=False,
                    updates=plan.updates,
                    error_code=e.error_code,
                    warning=self.last_warning,
                )
            except BaseException:
                # Includes task cancellation; the gesture must not stay in COMMITTING.
                self._nodes = previous
                self._reset()
                raise

            logger.info(
                "Category order saved",
                gesture_id=self._gesture_id,
                update_count=len(plan.updates),
            )
            self._reset()
            return DropResult(outcome=DropOutcome.COMMITTED, updates=plan.updates)

    async def _reload(self, fallback: tuple[CategoryNode, ...]) -> None:
        try:
            nodes = await self.gateway.list_nodes()
        except CategoryNetworkError as e:
            logger.error(
                "Reloading categories failed, restoring previous snapshot",
                error=e.message,
            )
            nodes = list(fallback)
        self._replace_snapshot(nodes)

    # =========================================================================
    # Create / Rename
    # =========================================================================

    def sibling_count(self, parent_id: str | None) -> int:
        """Number of categories directly under a parent."""
        return sum(1 for node in self._nodes if node.parent_id == parent_id)

    async def create_node(
        self,
        name: str,
        slug: str | None = None,
        description: str | None = None,
        parent_id: str | None = None,
    ) -> CategoryNode:
        """Create a category as the last child of its parent.

        Args:
            name: Category name.
            slug: Optional slug.
            description: Optional description.
            parent_id: Parent category, None for a root.

        Returns:
            The created category as stored by the server.

        Raises:
            CategoryNotFoundError: If the parent is not in the snapshot.
            CategoryNetworkError: If the server rejects the request.
        """
        if parent_id is not None and all(node.id != parent_id for node in self._nodes):
            raise CategoryNotFoundError(parent_id)

        async with self._write_lock:
            expected_order = self.sibling_count(parent_id)
            created = await self.gateway.create_node(
                name=name,
                slug=slug,
                description=description,
                parent_id=parent_id,
            )
            if created.sort_order != expected_order:
                logger.warning(
                    "Server assigned an unexpected rank to new category",
                    category_id=created.id,
                    expected=expected_order,
                    assigned=created.sort_order,
                )
            self._nodes = (*self._nodes, created)

        logger.info("Category created", category_id=created.id, parent_id=parent_id)
        return created

    async def rename_node(self, node_id: str, name: str) -> CategoryNode:
        """Rename a category.

        Args:
            node_id: Category to rename.
            name: New name.

        Returns:
            The updated category.

        Raises:
            CategoryNotFoundError: If the category is not in the snapshot.
            CategoryValidationError: If the name is blank.
        """
        if all(node.id != node_id for node in self._nodes):
            raise CategoryNotFoundError(node_id)
        if not name.strip():
            raise CategoryValidationError("Category name cannot be blank", details={"category_id": node_id})

        async with self._write_lock:
            updated = await self.gateway.update_node(node_id, name=name.strip())
            # Keep local placement, the server response may lag a pending reorder.
            self._nodes = tuple(
                replace(node, name=updated.name, slug=updated.slug) if node.id == node_id else node
                for node in self._nodes
            )
        return updated


def get_tree_coordinator(request_id: str | None = None) -> TreeCoordinator:
    """Get a coordinator backed by the category API.

    Args:
        request_id: Request ID for correlation.

    Returns:
        TreeCoordinator instance.
    """
    return TreeCoordinator(CategoryApiClient(request_id=request_id))

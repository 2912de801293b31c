"""Category API endpoints.

Admin endpoints back the category tree manager: the canonical flat
list, bulk reorder, create and rename. The public endpoint serves the
storefront category menu.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.schemas import (
    CategoryCreateRequest,
    CategoryItemResponse,
    CategoryMenuResponse,
    CategoryNodeSchema,
    CategoryReorderRequest,
    CategoryReorderResponse,
    CategoryTreeResponse,
    CategoryUpdateRequest,
    ErrorResponse,
)
from storefront.catalog.service import CategoryService
from storefront.domain.exceptions import (
    CategoryError,
    CategoryNotFoundError,
    CategoryValidationError,
    SlugConflictError,
)
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import get_session

admin_router = APIRouter(prefix="/admin/categories", tags=["Categories"])
router = APIRouter(prefix="/categories", tags=["Storefront"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(session: Annotated[AsyncSession, Depends(get_session)]) -> CategoryService:
    """Get category service bound to the request session."""
    return CategoryService(session)


def to_http_error(error: CategoryError) -> HTTPException:
    """Map a category domain error to an HTTP error."""
    if isinstance(error, CategoryNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, SlugConflictError):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(error, CategoryValidationError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        status_code = status.HTTP_400_BAD_REQUEST

    return HTTPException(
        status_code=status_code,
        detail={
            "error_code": error.error_code,
            "message": error.message,
            "details": error.details,
        },
    )


# ============================================================================
# Admin Endpoints
# ============================================================================


@admin_router.get(
    "/tree",
    response_model=CategoryTreeResponse,
    responses={401: {"model": ErrorResponse}},
    summary="List categories",
    description="Get the flat category list used to build the admin tree.",
)
async def list_categories(
    service: Annotated[CategoryService, Depends(get_service)],
    limit: int = Query(
        default=settings.category_tree_default_limit,
        ge=1,
        le=settings.category_tree_max_limit,
        description="Maximum categories to return",
    ),
    search: str | None = Query(default=None, max_length=120, description="Filter by name"),
) -> CategoryTreeResponse:
    """List categories in display order.

    Args:
        service: Category service.
        limit: Maximum categories to return.
        search: Optional name filter.

    Returns:
        Categories and total count.
    """
    nodes, total = await service.list_nodes(limit=limit, search=search)
    return CategoryTreeResponse(
        items=[CategoryNodeSchema.from_node(node) for node in nodes],
        total=total,
    )


@admin_router.patch(
    "/order",
    response_model=CategoryReorderResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Reorder categories",
    description="Apply parent/rank updates from a tree move. The batch is applied all-or-nothing.",
)
async def reorder_categories(
    request: CategoryReorderRequest,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryReorderResponse:
    """Apply a bulk reorder.

    Args:
        request: Update batch.
        service: Category service.

    Returns:
        Number of categories updated.

    Raises:
        HTTPException: If an id is unknown, repeated, or the result has a cycle.
    """
    try:
        updated = await service.reorder([update.to_update() for update in request.updates])
    except CategoryError as e:
        raise to_http_error(e) from e

    return CategoryReorderResponse(updated=updated)


@admin_router.post(
    "",
    response_model=CategoryItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Create category",
    description="Create a category as the last child of its parent.",
)
async def create_category(
    request: CategoryCreateRequest,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryItemResponse:
    """Create a category.

    Args:
        request: Category fields.
        service: Category service.

    Returns:
        The created category.

    Raises:
        HTTPException: If validation fails, the parent is unknown or the slug is taken.
    """
    try:
        node = await service.create_category(
            name=request.name,
            slug=request.slug,
            description=request.description,
            parent_id=request.parent_id,
        )
    except CategoryError as e:
        raise to_http_error(e) from e

    return CategoryItemResponse(item=CategoryNodeSchema.from_node(node))


@admin_router.patch(
    "/{category_id}",
    response_model=CategoryItemResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Update category",
    description="Rename a category or change its visibility.",
)
async def update_category(
    category_id: str,
    request: CategoryUpdateRequest,
    service: Annotated[CategoryService, Depends(get_service)],
) -> CategoryItemResponse:
    """Update a category.

    Args:
        category_id: Category identifier.
        request: Fields to change.
        service: Category service.

    Returns:
        The updated category.

    Raises:
        HTTPException: If the category is unknown or the name is invalid.
    """
    try:
        node = await service.update_category(
            category_id,
            name=request.name,
            is_active=request.is_active,
        )
    except CategoryError as e:
        raise to_http_error(e) from e

    return CategoryItemResponse(item=CategoryNodeSchema.from_node(node))


# ============================================================================
# Storefront Endpoints
# ============================================================================


@router.get(
    "",
    response_model=CategoryMenuResponse,
    summary="Category menu",
    description="Get the active category tree shaped for the storefront menu.",
)
async def get_category_menu(
    service: Annotated[CategoryService, Depends(get_service)],
    limit: int = Query(
        default=settings.category_tree_default_limit,
        ge=1,
        le=settings.category_tree_max_limit,
        description="Maximum top-level entries",
    ),
) -> CategoryMenuResponse:
    """Get the storefront category menu.

    Args:
        service: Category service.
        limit: Maximum top-level entries.

    Returns:
        Menu entries.
    """
    categories = await service.menu(limit=limit)
    return CategoryMenuResponse(categories=categories)

"""Category API HTTP client.

Implements the persistence gateway used by the tree coordinator:
listing the canonical category list, sending bulk reorder batches and
creating or updating single categories over the storefront admin API.
"""

from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from storefront.domain.exceptions import CategoryNetworkError
from storefront.domain.value_objects import CategoryNode, NodeUpdate
from storefront.infrastructure.config import settings

logger = structlog.get_logger()


class CategoryApiClient:
    """HTTP client for the admin category endpoints.

    Every failure, whether transport-level or a non-2xx response,
    surfaces as CategoryNetworkError so callers have one recovery path.

    Example usage:
        client = CategoryApiClient()
        nodes = await client.list_nodes()
        await client.bulk_reorder(plan.updates)
        await client.close()
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize category API client.

        Args:
            base_url: Storefront API base URL.
            api_key: API key for admin endpoints.
            timeout: Request timeout in seconds.
            request_id: Optional request ID for correlation.
        """
        self.base_url = (base_url or settings.category_api_url).rstrip("/")
        self.api_key = api_key or settings.storefront_api_key
        self.timeout = timeout if timeout is not None else settings.category_api_timeout
        self.request_id = request_id
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {
                "Authorization": f"Bearer {self.api_key}",
                "Accept": "application/json",
            }
            if self.request_id:
                headers["X-Request-ID"] = self.request_id
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an API request.

        Args:
            method: HTTP method.
            path: API endpoint path.
            json: Request body as JSON.
            params: Query parameters.

        Returns:
            Decoded JSON body.

        Raises:
            CategoryNetworkError: On transport failure or error response.
        """
        client = await self._get_client()

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = await client.request(method=method, url=path, json=json, params=params)
        except httpx.TimeoutException as e:
            logger.error("Category API request timeout", method=method, path=path, error=str(e))
            raise CategoryNetworkError(f"Request timed out: {path}", status_code=504) from e
        except httpx.RequestError as e:
            logger.error("Category API request failed", method=method, path=path, error=str(e))
            raise CategoryNetworkError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}
            message = error_data.get("message") or response.text or "Unknown error"
            logger.warning(
                "Category API returned error",
                method=method,
                path=path,
                status_code=response.status_code,
                error_code=error_data.get("error_code"),
            )
            raise CategoryNetworkError(
                message,
                status_code=response.status_code,
                error_code=error_data.get("error_code"),
            )

        return response.json()

    async def list_nodes(self, limit: int | None = None, search: str | None = None) -> list[CategoryNode]:
        """Fetch the canonical category list.

        Args:
            limit: Maximum categories to return.
            search: Optional name filter.

        Returns:
            Flat category snapshot.
        """
        data = await self._request(
            "GET",
            "/admin/categories/tree",
            params={"limit": limit or settings.category_tree_max_limit, "search": search},
        )
        return [CategoryNode.from_api_response(item) for item in data.get("items", [])]

    async def bulk_reorder(self, updates: Sequence[NodeUpdate]) -> int:
        """Persist a batch of parent/rank updates.

        The server applies the batch all-or-nothing.

        Args:
            updates: Updates produced by the reorder planner.

        Returns:
            Number of categories updated.
        """
        data = await self._request(
            "PATCH",
            "/admin/categories/order",
            json={"updates": [update.to_dict() for update in updates]},
        )
        return int(data.get("updated", len(updates)))

    async def create_node(
        self,
        name: str,
        slug: str | None = None,
        description: str | None = None,
        parent_id: str | None = None,
    ) -> CategoryNode:
        """Create a category.

        Args:
            name: Category name.
            slug: Optional slug; derived from the name when omitted.
            description: Optional description.
            parent_id: Parent category, None for a root.

        Returns:
            The created category with its assigned id and rank.
        """
        payload: dict[str, Any] = {"name": name}
        if slug:
            payload["slug"] = slug
        if description:
            payload["description"] = description
        if parent_id:
            payload["parent_id"] = parent_id

        data = await self._request("POST", "/admin/categories", json=payload)
        return CategoryNode.from_api_response(data["item"])

    async def update_node(
        self,
        node_id: str,
        name: str | None = None,
        is_active: bool | None = None,
    ) -> CategoryNode:
        """Rename or (de)activate a category.

        Args:
            node_id: Category to update.
            name: New name.
            is_active: New visibility flag.

        Returns:
            The updated category.
        """
        payload: dict[str, Any] = {}
        if name is not None:
            payload["name"] = name
        if is_active is not None:
            payload["is_active"] = is_active

        data = await self._request("PATCH", f"/admin/categories/{node_id}", json=payload)
        return CategoryNode.from_api_response(data["item"])

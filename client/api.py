"""
Taskboard - RPC client
Typed wrapper over the /api/trpc procedures. Error responses are turned back
into the AppError subclasses the server raised. Network failures and
success bodies that do not parse become TransportError.
"""

import os
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from errors import TransportError, error_from_response
from logging_config import get_logger
from schemas.categories import CategoryResponse
from schemas.core import SuccessResponse
from schemas.tasks import CategoryChange, CategoryChangeKind, DeleteResponse, TaskResponse

logger = get_logger(__name__)

API_URL = os.getenv("TASKBOARD_API_URL", "http://localhost:8000")
API_TIMEOUT = float(os.getenv("TASKBOARD_API_TIMEOUT", "10.0"))
RPC_PREFIX = "/api/trpc"

M = TypeVar("M", bound=BaseModel)


class TaskApiClient:
    """Client for the category.* and task.* procedures"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=base_url or API_URL,
            timeout=timeout or API_TIMEOUT,
        )

    async def close(self):
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _call(self, method: str, procedure: str, **kwargs) -> Any:
        try:
            response = await self._http.request(method, f"{RPC_PREFIX}/{procedure}", **kwargs)
        except httpx.HTTPError as e:
            logger.warning(
                f"{procedure} request failed: {e}",
                extra={"extra_fields": {"procedure": procedure}}
            )
            raise TransportError(f"Could not reach the server: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None
            if not response.is_error:
                logger.warning(
                    f"{procedure} returned a non-JSON body",
                    extra={"extra_fields": {"procedure": procedure, "status": response.status_code}}
                )
                raise TransportError(f"Unexpected response from the server for {procedure}")

        if response.is_error:
            raise error_from_response(response.status_code, payload)
        return payload

    @staticmethod
    def _parse(model: Type[M], data: Any, procedure: str) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(
                f"{procedure} returned an unexpected payload: {e.error_count()} errors",
                extra={"extra_fields": {"procedure": procedure}}
            )
            raise TransportError(f"Unexpected response from the server for {procedure}") from e

    def _parse_list(self, model: Type[M], data: Any, procedure: str) -> List[M]:
        if not isinstance(data, list):
            raise TransportError(f"Unexpected response from the server for {procedure}")
        return [self._parse(model, item, procedure) for item in data]

    async def _query(self, procedure: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._call("GET", procedure, params=params)

    async def _mutation(self, procedure: str, payload: Dict[str, Any]) -> Any:
        return await self._call("POST", procedure, json=payload)

    # ============ Categories ============

    async def list_categories(self) -> List[CategoryResponse]:
        data = await self._query("category.getAll")
        return self._parse_list(CategoryResponse, data, "category.getAll")

    async def create_category(self, name: str) -> CategoryResponse:
        data = await self._mutation("category.create", {"name": name})
        return self._parse(CategoryResponse, data, "category.create")

    # ============ Tasks ============

    async def list_tasks(self) -> List[TaskResponse]:
        data = await self._query("task.getAll")
        return self._parse_list(TaskResponse, data, "task.getAll")

    async def get_task(self, task_id: int) -> TaskResponse:
        data = await self._query("task.getById", {"id": task_id})
        return self._parse(TaskResponse, data, "task.getById")

    async def create_task(
        self,
        title: str,
        description: str,
        category_id: Optional[int] = None,
    ) -> TaskResponse:
        payload: Dict[str, Any] = {"title": title, "description": description}
        if category_id is not None:
            payload["categoryId"] = category_id
        data = await self._mutation("task.create", payload)
        return self._parse(TaskResponse, data, "task.create")

    async def update_task(
        self,
        task_id: int,
        title: str,
        description: str,
        category_change: Optional[CategoryChange] = None,
    ) -> TaskResponse:
        """
        `categoryId` is left out for UNCHANGED, sent as null for CLEARED and
        as the id for SET.
        """
        payload: Dict[str, Any] = {"id": task_id, "title": title, "description": description}
        if category_change is not None:
            if category_change.kind == CategoryChangeKind.CLEARED:
                payload["categoryId"] = None
            elif category_change.kind == CategoryChangeKind.SET:
                payload["categoryId"] = category_change.category_id
        data = await self._mutation("task.update", payload)
        return self._parse(TaskResponse, data, "task.update")

    async def toggle_complete(self, task_id: int, completed: bool) -> TaskResponse:
        data = await self._mutation("task.toggleComplete", {"id": task_id, "completed": completed})
        return self._parse(TaskResponse, data, "task.toggleComplete")

    async def delete_task(self, task_id: int) -> DeleteResponse:
        data = await self._mutation("task.delete", {"id": task_id})
        return self._parse(DeleteResponse, data, "task.delete")

    async def update_order(self, ordered_ids: List[int]) -> SuccessResponse:
        data = await self._mutation("task.updateOrder", {"orderedIds": list(ordered_ids)})
        return self._parse(SuccessResponse, data, "task.updateOrder")

"""
Taskboard - Optimistic mutations
Every task mutation goes through the same steps:

    cancel in-flight refreshes -> snapshot -> write the optimistic list
    -> remote call -> (failure: restore snapshot + notify) -> invalidate

The first three steps run under one lock, so two mutations never interleave
their optimistic writes. The remote call runs outside the lock.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, TypeVar

from client.api import TaskApiClient
from client.cache import TaskListCache
from client.notifications import NotificationCenter, Operation
from errors import AppError
from logging_config import get_logger
from schemas.categories import CategoryResponse
from schemas.tasks import CategoryChange, CategoryChangeKind, TaskResponse

logger = get_logger(__name__)

T = TypeVar("T")
Transform = Callable[[List[TaskResponse]], List[TaskResponse]]


# ============ Optimistic transforms ============

def apply_toggle(tasks: List[TaskResponse], task_id: int, completed: bool) -> List[TaskResponse]:
    return [
        task.model_copy(update={"completed": completed}) if task.id == task_id else task
        for task in tasks
    ]


def apply_delete(tasks: List[TaskResponse], task_id: int) -> List[TaskResponse]:
    return [task for task in tasks if task.id != task_id]


def apply_update(
    tasks: List[TaskResponse],
    task_id: int,
    title: str,
    description: str,
    category_change: Optional[CategoryChange] = None,
) -> List[TaskResponse]:
    """
    Merge title/description into the matching task.

    A SET change keeps the embedded category only when it already is the
    target; otherwise it is blanked until the server answers.
    """
    change = category_change or CategoryChange.unchanged()

    def patch(task: TaskResponse) -> TaskResponse:
        update = {"title": title, "description": description}
        if change.kind == CategoryChangeKind.CLEARED:
            update["category_id"] = None
            update["category"] = None
        elif change.kind == CategoryChangeKind.SET:
            update["category_id"] = change.category_id
            if task.category is None or task.category.id != change.category_id:
                update["category"] = None
        return task.model_copy(update=update)

    return [patch(task) if task.id == task_id else task for task in tasks]


def apply_reorder(tasks: List[TaskResponse], ordered_ids: List[int]) -> List[TaskResponse]:
    """Rebuild the list following `ordered_ids`; ids not in the list are skipped"""
    by_id = {task.id: task for task in tasks}
    return [by_id[task_id] for task_id in ordered_ids if task_id in by_id]


# ============ Coordinator ============

class OptimisticMutationCoordinator:
    """
    Runs task mutations against the API with optimistic cache writes.

    Mutation methods return the server result, or None when the call failed.
    Failures never raise: the cache is restored and a notification is pushed.
    """

    def __init__(
        self,
        api: TaskApiClient,
        cache: TaskListCache,
        notifications: Optional[NotificationCenter] = None,
    ):
        self.api = api
        self.cache = cache
        self.notifications = notifications or NotificationCenter()
        self.pending = 0
        self._lock = asyncio.Lock()

    async def _optimistic(
        self,
        operation: Operation,
        transform: Transform,
        call: Callable[[], Awaitable[T]],
    ) -> Optional[T]:
        async with self._lock:
            await self.cache.cancel_in_flight_reads()
            snapshot = self.cache.read()
            self.cache.write(transform(snapshot))
            self.pending += 1

        try:
            return await call()
        except AppError as e:
            self._rollback(operation, snapshot, e)
            return None
        except asyncio.CancelledError:
            self.cache.write(snapshot)
            raise
        finally:
            self.pending -= 1
            self.cache.invalidate()

    def _rollback(self, operation: Operation, snapshot: List[TaskResponse], error: AppError):
        logger.warning(
            f"{operation.value} failed, restoring previous task list: {error.message}",
            extra={"extra_fields": {"code": error.code}}
        )
        self.cache.write(snapshot)
        self.notifications.push(operation, error.message)

    # ============ Task mutations ============

    async def toggle_complete(self, task_id: int, completed: bool) -> Optional[TaskResponse]:
        return await self._optimistic(
            Operation.TOGGLE,
            lambda tasks: apply_toggle(tasks, task_id, completed),
            lambda: self.api.toggle_complete(task_id, completed),
        )

    async def delete(self, task_id: int):
        return await self._optimistic(
            Operation.DELETE,
            lambda tasks: apply_delete(tasks, task_id),
            lambda: self.api.delete_task(task_id),
        )

    async def update(
        self,
        task_id: int,
        title: str,
        description: str,
        category_change: Optional[CategoryChange] = None,
        new_category_name: Optional[str] = None,
    ) -> Optional[TaskResponse]:
        """
        Edit a task. With `new_category_name` the category is created first
        and the task moved into it; if that fails nothing else happens.
        """
        if new_category_name:
            category = await self.create_category(new_category_name)
            if category is None:
                return None
            category_change = CategoryChange.set_to(category.id)

        return await self._optimistic(
            Operation.UPDATE,
            lambda tasks: apply_update(tasks, task_id, title, description, category_change),
            lambda: self.api.update_task(task_id, title, description, category_change),
        )

    async def reorder(self, ordered_ids: List[int]):
        return await self._optimistic(
            Operation.REORDER,
            lambda tasks: apply_reorder(tasks, ordered_ids),
            lambda: self.api.update_order(ordered_ids),
        )

    # ============ Non-optimistic mutations ============

    async def create(
        self,
        title: str,
        description: str,
        category_id: Optional[int] = None,
        new_category_name: Optional[str] = None,
    ) -> Optional[TaskResponse]:
        """Create a task (no id yet, so nothing to show optimistically)"""
        if new_category_name:
            category = await self.create_category(new_category_name)
            if category is None:
                return None
            category_id = category.id

        self.pending += 1
        try:
            task = await self.api.create_task(title, description, category_id=category_id)
        except AppError as e:
            logger.warning(f"create failed: {e.message}", extra={"extra_fields": {"code": e.code}})
            self.notifications.push(Operation.CREATE, e.message)
            return None
        finally:
            self.pending -= 1

        self.cache.invalidate()
        return task

    async def create_category(self, name: str) -> Optional[CategoryResponse]:
        try:
            return await self.api.create_category(name)
        except AppError as e:
            logger.warning(
                f"create_category failed: {e.message}",
                extra={"extra_fields": {"code": e.code}}
            )
            self.notifications.push(Operation.CREATE_CATEGORY, e.message)
            return None

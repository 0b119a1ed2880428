"""
In-memory stand-in for TaskApiClient used by the client-side tests.

Calls can be made to fail once (`fail_next`) or to block until released
(`hold`), which is how the tests observe the optimistic state while a
request is still in flight.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from errors import AppError, ConflictError, InternalError, InvalidInputError, NotFoundError
from schemas.categories import CategoryResponse
from schemas.core import SuccessResponse
from schemas.tasks import CategoryChange, CategoryChangeKind, DeleteResponse, TaskResponse
from utils.sanitization import normalize_category_name

BASE_TIME = datetime(2024, 1, 15, 9, 0, 0)


def make_category(category_id: int, name: str) -> CategoryResponse:
    return CategoryResponse(id=category_id, name=name)


def make_task(
    task_id: int,
    title: Optional[str] = None,
    order: Optional[float] = None,
    completed: bool = False,
    category: Optional[CategoryResponse] = None,
) -> TaskResponse:
    return TaskResponse(
        id=task_id,
        title=title or f"Task {task_id}",
        description=f"Description of task {task_id}",
        completed=completed,
        order=float(task_id if order is None else order),
        category_id=category.id if category else None,
        category=category,
        created_at=BASE_TIME + timedelta(minutes=task_id),
    )


async def settle(predicate, rounds: int = 100):
    """Yield to the event loop until `predicate()` holds"""
    for _ in range(rounds):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


class FakeTaskApi:
    def __init__(self, tasks=(), categories=()):
        self.tasks: Dict[int, TaskResponse] = {task.id: task for task in tasks}
        self.categories: Dict[int, CategoryResponse] = {c.id: c for c in categories}
        for task in tasks:
            if task.category is not None:
                self.categories.setdefault(task.category.id, task.category)
        self.calls: List[tuple] = []
        self._failures: Dict[str, AppError] = {}
        self._gates: Dict[str, asyncio.Event] = {}
        self._next_id = max([0, *self.tasks, *self.categories]) + 1

    # ============ Test controls ============

    def fail_next(self, method: str, error: AppError):
        self._failures[method] = error

    def hold(self, method: str) -> asyncio.Event:
        """Block calls to `method` until the returned event is set"""
        gate = asyncio.Event()
        self._gates[method] = gate
        return gate

    def release(self, method: str):
        gate = self._gates.pop(method, None)
        if gate:
            gate.set()

    def count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    def server_list(self) -> List[TaskResponse]:
        return sorted(self.tasks.values(), key=lambda t: (t.order, t.created_at, t.id))

    async def _enter(self, method: str, *args):
        self.calls.append((method, args))
        gate = self._gates.get(method)
        if gate:
            await gate.wait()
        error = self._failures.pop(method, None)
        if error:
            raise error

    def _new_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def _require(self, task_id: int) -> TaskResponse:
        if task_id not in self.tasks:
            raise NotFoundError(f"Task {task_id} not found")
        return self.tasks[task_id]

    # ============ API surface ============

    async def list_categories(self) -> List[CategoryResponse]:
        await self._enter("list_categories")
        return sorted(self.categories.values(), key=lambda c: (c.name, c.id))

    async def create_category(self, name: str) -> CategoryResponse:
        await self._enter("create_category", name)
        normalized = normalize_category_name(name)
        if not normalized:
            raise InvalidInputError("Category name is empty after normalization", field="name")
        if any(c.name.lower() == normalized.lower() for c in self.categories.values()):
            raise ConflictError(f'Category "{normalized}" already exists', field="name")
        category = make_category(self._new_id(), normalized)
        self.categories[category.id] = category
        return category

    async def list_tasks(self) -> List[TaskResponse]:
        await self._enter("list_tasks")
        return self.server_list()

    async def get_task(self, task_id: int) -> TaskResponse:
        await self._enter("get_task", task_id)
        return self._require(task_id)

    async def create_task(self, title: str, description: str, category_id: Optional[int] = None) -> TaskResponse:
        await self._enter("create_task", title, description, category_id)
        task_id = self._new_id()
        task = TaskResponse(
            id=task_id,
            title=title,
            description=description,
            order=max((t.order for t in self.tasks.values()), default=0.0) + 1.0,
            category_id=category_id,
            category=self.categories.get(category_id) if category_id is not None else None,
            created_at=BASE_TIME + timedelta(minutes=task_id),
        )
        self.tasks[task_id] = task
        return task

    async def update_task(
        self,
        task_id: int,
        title: str,
        description: str,
        category_change: Optional[CategoryChange] = None,
    ) -> TaskResponse:
        await self._enter("update_task", task_id, title, description, category_change)
        task = self._require(task_id)
        update = {"title": title, "description": description}
        change = category_change or CategoryChange.unchanged()
        if change.kind == CategoryChangeKind.CLEARED:
            update.update(category_id=None, category=None)
        elif change.kind == CategoryChangeKind.SET:
            if change.category_id not in self.categories:
                raise NotFoundError(f"Category {change.category_id} not found", field="categoryId")
            update.update(category_id=change.category_id, category=self.categories[change.category_id])
        self.tasks[task_id] = task.model_copy(update=update)
        return self.tasks[task_id]

    async def toggle_complete(self, task_id: int, completed: bool) -> TaskResponse:
        await self._enter("toggle_complete", task_id, completed)
        self.tasks[task_id] = self._require(task_id).model_copy(update={"completed": completed})
        return self.tasks[task_id]

    async def delete_task(self, task_id: int) -> DeleteResponse:
        await self._enter("delete_task", task_id)
        self._require(task_id)
        del self.tasks[task_id]
        return DeleteResponse(deleted_id=task_id)

    async def update_order(self, ordered_ids: List[int]) -> SuccessResponse:
        await self._enter("update_order", list(ordered_ids))
        if any(task_id not in self.tasks for task_id in ordered_ids):
            raise InternalError("Failed to save the new order")
        for position, task_id in enumerate(ordered_ids, start=1):
            self.tasks[task_id] = self.tasks[task_id].model_copy(update={"order": float(position)})
        return SuccessResponse()

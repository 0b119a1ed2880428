"""
Taskboard - Client task list cache
Single-writer store of the ordered task list. Background refreshes pull
task.getAll; optimistic writers cancel them first so a late response can
never overwrite a newer optimistic state.
"""

import asyncio
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from errors import AppError
from logging_config import get_logger
from schemas.tasks import TaskResponse

logger = get_logger(__name__)

Subscriber = Callable[[List[TaskResponse]], None]


class TaskListCache:
    """
    Ordered `task id -> task` map.

    Every write bumps `version`; a refresh whose fetch started before the
    latest write drops its result.
    """

    def __init__(self, fetch: Callable[[], Awaitable[List[TaskResponse]]]):
        self._fetch = fetch
        self._tasks: List[TaskResponse] = []
        self._by_id: Dict[int, TaskResponse] = {}
        self._subscribers: List[Subscriber] = []
        self._refresh_task: Optional[asyncio.Task] = None
        self.version = 0
        self.loaded = False
        self.last_error: Optional[AppError] = None

    # ============ Reads ============

    def read(self) -> List[TaskResponse]:
        return list(self._tasks)

    def get(self, task_id: int) -> Optional[TaskResponse]:
        return self._by_id.get(task_id)

    @property
    def refreshing(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    # ============ Writes ============

    def write(self, tasks: Iterable[TaskResponse]):
        """Replace the whole list. A repeated id keeps its first occurrence."""
        by_id: Dict[int, TaskResponse] = {}
        ordered: List[TaskResponse] = []
        for task in tasks:
            if task.id in by_id:
                continue
            by_id[task.id] = task
            ordered.append(task)

        self._tasks = ordered
        self._by_id = by_id
        self.version += 1
        self.loaded = True

        for callback in list(self._subscribers):
            try:
                callback(list(ordered))
            except Exception as e:
                logger.error(f"Cache subscriber failed: {e}", exc_info=True)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call `callback(tasks)` after every write. Returns the unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # ============ Refresh ============

    async def refresh(self) -> bool:
        """
        Fetch the server list and write it.

        Returns False when the fetch failed (the current content is kept and
        the error is stored in `last_error`) or when the cache was written
        while the fetch was in flight.
        """
        started_at = self.version
        try:
            tasks = await self._fetch()
        except AppError as e:
            self.last_error = e
            logger.warning(
                f"Task list refresh failed: {e.message}",
                extra={"extra_fields": {"code": e.code}}
            )
            return False

        if self.version != started_at:
            logger.debug("Discarding stale task list refresh")
            return False

        self.last_error = None
        self.write(tasks)
        return True

    def invalidate(self) -> asyncio.Task:
        """Schedule a background refresh, replacing any refresh still in flight"""
        previous = self._refresh_task
        if previous is not None and not previous.done():
            previous.cancel()
        self._refresh_task = asyncio.create_task(self.refresh())
        return self._refresh_task

    async def cancel_in_flight_reads(self):
        """Cancel the background refresh, if any, and wait until it has stopped"""
        task = self._refresh_task
        if task is None:
            return
        if not task.done():
            task.cancel()
            await asyncio.wait({task})
        if self._refresh_task is task:
            self._refresh_task = None

    async def wait_for_refresh(self):
        """Wait until no refresh is in flight"""
        while self.refreshing:
            await asyncio.wait({self._refresh_task})

"""
Taskboard - Filtered task list view
"""

from enum import Enum
from typing import Callable, Iterable, List

from client.cache import TaskListCache
from schemas.tasks import TaskResponse


class ListStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    NO_MATCHES = "no_matches"
    READY = "ready"


def filter_tasks(tasks: Iterable[TaskResponse], search: str) -> List[TaskResponse]:
    """Tasks whose title contains `search`, ignoring case. Blank search keeps all."""
    query = (search or "").strip().lower()
    if not query:
        return list(tasks)
    return [task for task in tasks if query in task.title.lower()]


class TaskListView:
    """
    Full ordered list (kept in sync with the cache) plus the search text.

    Reordering always works on the full list; `visible` is only what is shown.
    """

    def __init__(self, cache: TaskListCache):
        self.search = ""
        self.tasks: List[TaskResponse] = cache.read()
        self._loaded = cache.loaded
        self._unsubscribe: Callable[[], None] = cache.subscribe(self._on_cache_write)

    def _on_cache_write(self, tasks: List[TaskResponse]):
        self.tasks = tasks
        self._loaded = True

    def set_search(self, text: str):
        self.search = text

    @property
    def visible(self) -> List[TaskResponse]:
        return filter_tasks(self.tasks, self.search)

    @property
    def status(self) -> ListStatus:
        if not self._loaded:
            return ListStatus.LOADING
        if not self.tasks:
            return ListStatus.EMPTY
        if not self.visible:
            return ListStatus.NO_MATCHES
        return ListStatus.READY

    def close(self):
        self._unsubscribe()

"""
Taskboard - Transient notifications
Short-lived error messages raised when an optimistic mutation is rolled back.
"""

import itertools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from constants.tasks import NOTIFICATION_TTL_SECONDS


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    TOGGLE = "toggle"
    DELETE = "delete"
    REORDER = "reorder"
    CREATE_CATEGORY = "create_category"


FAILURE_MESSAGES = {
    Operation.CREATE: "Failed to create task",
    Operation.UPDATE: "Failed to update task",
    Operation.TOGGLE: "Failed to update task status",
    Operation.DELETE: "Failed to delete task",
    Operation.REORDER: "Failed to save the new order",
    Operation.CREATE_CATEGORY: "Failed to create category",
}

_ids = itertools.count(1)


@dataclass
class Notification:
    operation: Operation
    message: str
    detail: Optional[str] = None
    id: int = field(default_factory=lambda: next(_ids))
    created_at: float = field(default_factory=time.monotonic)

    @property
    def text(self) -> str:
        return f"{self.message}: {self.detail}" if self.detail else self.message


class NotificationCenter:
    """
    Holds the visible notifications.

    At most one notification per operation is visible; a newer failure of
    the same operation replaces the older one.
    """

    def __init__(
        self,
        ttl: float = NOTIFICATION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._clock = clock
        self._items: List[Notification] = []

    def push(self, operation: Operation, detail: Optional[str] = None) -> Notification:
        self._items = [n for n in self._items if n.operation != operation]
        notification = Notification(
            operation=operation,
            message=FAILURE_MESSAGES[operation],
            detail=detail,
            created_at=self._clock(),
        )
        self._items.append(notification)
        return notification

    def dismiss(self, notification_id: int) -> bool:
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        return len(self._items) != before

    def active(self) -> List[Notification]:
        """Notifications younger than the TTL, oldest first"""
        now = self._clock()
        self._items = [n for n in self._items if now - n.created_at < self.ttl]
        return list(self._items)

    def clear(self):
        self._items = []

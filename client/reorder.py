"""
Taskboard - Drag-and-drop reordering

Turns grab/hover/release events into at most one reorder mutation. Only the
drag handle starts a drag, so clicks on the checkbox or the action buttons
never do.
"""

from enum import Enum
from typing import List, Optional, TypeVar

from client.cache import TaskListCache
from client.coordinator import OptimisticMutationCoordinator
from logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class GrabRegion(str, Enum):
    HANDLE = "handle"
    BODY = "body"
    CHECKBOX = "checkbox"
    ACTIONS = "actions"


class GrabSource(str, Enum):
    POINTER = "pointer"
    KEYBOARD = "keyboard"


def array_move(items: List[T], old_index: int, new_index: int) -> List[T]:
    """Copy of `items` with the element at old_index moved to new_index"""
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


class ReorderInteractionHandler:
    def __init__(self, cache: TaskListCache, coordinator: OptimisticMutationCoordinator):
        self.cache = cache
        self.coordinator = coordinator
        self.state = DragState.IDLE
        self.active_id: Optional[int] = None
        self.over_id: Optional[int] = None
        self.source: Optional[GrabSource] = None

    def _reset(self):
        self.state = DragState.IDLE
        self.active_id = None
        self.over_id = None
        self.source = None

    def _ids(self) -> List[int]:
        return [task.id for task in self.cache.read()]

    def grab(
        self,
        task_id: int,
        region: GrabRegion = GrabRegion.HANDLE,
        source: GrabSource = GrabSource.POINTER,
    ) -> bool:
        """Start a drag. Returns False when the grab is ignored."""
        if self.state == DragState.DRAGGING or region != GrabRegion.HANDLE:
            return False
        if self.cache.get(task_id) is None:
            return False

        self.state = DragState.DRAGGING
        self.active_id = task_id
        self.over_id = task_id
        self.source = source
        return True

    def hover(self, over_id: Optional[int]):
        """Pointer is over `over_id` (None: outside the list)"""
        if self.state == DragState.DRAGGING:
            self.over_id = over_id

    def move_by(self, steps: int):
        """Keyboard drag: move the drop target up (negative) or down, clamped to the list"""
        if self.state != DragState.DRAGGING:
            return
        ids = self._ids()
        if not ids:
            return
        current = self.over_id if self.over_id in ids else self.active_id
        if current not in ids:
            return
        index = min(max(ids.index(current) + steps, 0), len(ids) - 1)
        self.over_id = ids[index]

    def cancel(self):
        self._reset()

    async def release(self, over_id: Optional[int] = None) -> bool:
        """
        Drop the dragged task on `over_id` (default: the current hover target).

        Returns True when a reorder was sent. Dropping nowhere or onto the
        task's own position changes nothing.

        The cache is reordered before the request goes out, but the call only
        returns once the server has answered. Event handlers should schedule
        it with `asyncio.create_task` rather than await it inline.
        """
        if self.state != DragState.DRAGGING:
            return False

        active_id = self.active_id
        target = over_id if over_id is not None else self.over_id
        self._reset()

        if target is None or target == active_id:
            return False

        ids = self._ids()
        if active_id not in ids or target not in ids:
            logger.debug(f"Drop ignored, task {active_id} or {target} is gone")
            return False

        ordered_ids = array_move(ids, ids.index(active_id), ids.index(target))
        await self.coordinator.reorder(ordered_ids)
        return True

"""
Taskboard - Task Service
CRUD and ordering over tasks. Every mutation checks that its target exists
before writing and raises NotFoundError otherwise.
"""

from typing import List, Optional, Tuple

from constants.tasks import (
    MAX_TITLE_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    ERROR_TASK_NOT_FOUND,
    ERROR_CATEGORY_NOT_FOUND,
    ERROR_TITLE_REQUIRED,
    ERROR_DESCRIPTION_REQUIRED,
    ERROR_REORDER_FAILED,
)
from errors import InternalError, InvalidInputError, NotFoundError
from logging_config import get_logger
from models import categories as category_store
from models import tasks as task_store
from schemas.tasks import CategoryChange, CategoryChangeKind
from utils.sanitization import clean_text
from utils.timestamps import order_from_timestamp, utcnow_naive

logger = get_logger(__name__)


def validate_task_text(title: str, description: str) -> Tuple[str, str]:
    """
    Clean and validate title/description.

    Returns:
        (title, description) as they will be stored

    Raises:
        InvalidInputError: a field is empty after cleaning or too long
    """
    title = clean_text(title, keep_newlines=False)
    description = clean_text(description)

    if not title:
        raise InvalidInputError(ERROR_TITLE_REQUIRED, field="title")
    if len(title) > MAX_TITLE_LENGTH:
        raise InvalidInputError(f"Title is too long (max {MAX_TITLE_LENGTH} characters)", field="title")
    if not description:
        raise InvalidInputError(ERROR_DESCRIPTION_REQUIRED, field="description")
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidInputError(
            f"Description is too long (max {MAX_DESCRIPTION_LENGTH} characters)",
            field="description"
        )

    return title, description


async def _require_task(task_id: int) -> dict:
    task = await task_store.get_task(task_id)
    if not task:
        raise NotFoundError(ERROR_TASK_NOT_FOUND.format(id=task_id))
    return task


async def _require_category(category_id: int) -> None:
    if not await category_store.get_category(category_id):
        raise NotFoundError(ERROR_CATEGORY_NOT_FOUND.format(id=category_id), field="categoryId")


async def list_tasks() -> List[dict]:
    """All tasks by order ascending, each with its category (or None)"""
    return await task_store.get_tasks()


async def get_task(task_id: int) -> dict:
    return await _require_task(task_id)


async def create_task(title: str, description: str, category_id: Optional[int] = None) -> dict:
    """
    Create a task that sorts after every existing one.

    The sort key is the creation time in epoch seconds, bumped above the
    current maximum when needed.
    """
    title, description = validate_task_text(title, description)

    if category_id is not None:
        await _require_category(category_id)

    created_at = utcnow_naive()
    order = order_from_timestamp(created_at, await task_store.get_max_order())

    task = await task_store.create_task(
        title=title,
        description=description,
        sort_order=order,
        created_at=created_at,
        category_id=category_id,
    )
    logger.info(f"Task created: {task['id']}", extra={"extra_fields": {"order": order}})
    return task


async def toggle_complete(task_id: int, completed: bool) -> dict:
    """Set the completed flag. Setting the current value again is a no-op success."""
    current = await _require_task(task_id)
    if current["completed"] == completed:
        return current

    task = await task_store.set_task_completed(task_id, completed)
    if not task:
        # Deleted between the check and the write
        raise NotFoundError(ERROR_TASK_NOT_FOUND.format(id=task_id))

    logger.info(f"Task {task_id} completed={completed}")
    return task


async def update_task(
    task_id: int,
    title: str,
    description: str,
    category_change: Optional[CategoryChange] = None,
) -> dict:
    """
    Replace title/description and apply a category change.

    UNCHANGED leaves category_id alone, CLEARED writes NULL, SET reassigns
    (the category must exist).
    """
    category_change = category_change or CategoryChange.unchanged()
    title, description = validate_task_text(title, description)

    await _require_task(task_id)

    fields = {"title": title, "description": description}
    if category_change.kind == CategoryChangeKind.CLEARED:
        fields["category_id"] = None
    elif category_change.kind == CategoryChangeKind.SET:
        await _require_category(category_change.category_id)
        fields["category_id"] = category_change.category_id

    task = await task_store.update_task(task_id, fields)
    if not task:
        raise NotFoundError(ERROR_TASK_NOT_FOUND.format(id=task_id))

    logger.info(
        f"Task {task_id} updated",
        extra={"extra_fields": {"category_change": category_change.kind.value}}
    )
    return task


async def delete_task(task_id: int) -> dict:
    """Delete permanently. There is no soft delete."""
    await _require_task(task_id)

    if not await task_store.delete_task(task_id):
        raise NotFoundError(ERROR_TASK_NOT_FOUND.format(id=task_id))

    logger.info(f"Task {task_id} deleted")
    return {"success": True, "deleted_id": task_id}


async def update_order(ordered_ids: List[int]) -> dict:
    """
    Assign order = position (1-based) to each id, all-or-nothing.

    Raises:
        InternalError: any individual update failed; no partial order is kept
    """
    if not ordered_ids:
        return {"success": True}

    try:
        await task_store.update_task_order(ordered_ids)
    except Exception as e:
        logger.error(
            f"Reorder failed, batch rolled back: {e}",
            extra={"extra_fields": {"count": len(ordered_ids)}}
        )
        raise InternalError(ERROR_REORDER_FAILED) from e

    logger.info(f"Reordered {len(ordered_ids)} tasks")
    return {"success": True}

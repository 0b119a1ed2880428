"""
Taskboard - Category Service
Normalizes category names and enforces case-insensitive uniqueness.
"""

from typing import List

from constants.tasks import (
    MAX_CATEGORY_NAME_LENGTH,
    ERROR_CATEGORY_EXISTS,
    ERROR_CATEGORY_INVALID,
    ERROR_CATEGORY_TOO_LONG,
)
from errors import ConflictError, InvalidInputError
from logging_config import get_logger
from models import categories as category_store
from utils.sanitization import normalize_category_name

logger = get_logger(__name__)


async def list_categories() -> List[dict]:
    """All categories, ordered by name ascending"""
    return await category_store.get_categories()


async def create_category(name: str) -> dict:
    """
    Create a category from a user-typed name.

    Raises:
        InvalidInputError: name is empty after normalization or too long
        ConflictError: a category with the same name exists (case-insensitive)
    """
    normalized = normalize_category_name(name)

    if not normalized:
        raise InvalidInputError(ERROR_CATEGORY_INVALID, field="name")

    if len(normalized) > MAX_CATEGORY_NAME_LENGTH:
        raise InvalidInputError(
            ERROR_CATEGORY_TOO_LONG.format(max=MAX_CATEGORY_NAME_LENGTH),
            field="name"
        )

    existing = await category_store.find_category_by_name(normalized)
    if existing:
        raise ConflictError(ERROR_CATEGORY_EXISTS.format(name=normalized), field="name")

    try:
        category = await category_store.create_category(normalized)
    except Exception as e:
        # A concurrent insert won the race for the unique index
        if "unique constraint" in str(e).lower():
            raise ConflictError(ERROR_CATEGORY_EXISTS.format(name=normalized), field="name") from e
        raise

    logger.info(
        f"Category created: {category['name']}",
        extra={"extra_fields": {"category_id": category["id"]}}
    )
    return category

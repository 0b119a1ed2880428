from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import ConfigDict, Field

from constants.tasks import MAX_TITLE_LENGTH, MAX_DESCRIPTION_LENGTH
from schemas.categories import CategoryResponse
from schemas.core import CamelModel


# ============ Category reassignment ============

class CategoryChangeKind(str, Enum):
    UNCHANGED = "unchanged"
    CLEARED = "cleared"
    SET = "set"


@dataclass(frozen=True)
class CategoryChange:
    """
    What an update does to a task's category.

    On the wire this is `categoryId` omitted (UNCHANGED), `null` (CLEARED)
    or an integer (SET).
    """
    kind: CategoryChangeKind
    category_id: Optional[int] = None

    @classmethod
    def unchanged(cls) -> "CategoryChange":
        return cls(CategoryChangeKind.UNCHANGED)

    @classmethod
    def cleared(cls) -> "CategoryChange":
        return cls(CategoryChangeKind.CLEARED)

    @classmethod
    def set_to(cls, category_id: int) -> "CategoryChange":
        return cls(CategoryChangeKind.SET, category_id)

    @classmethod
    def from_optional(cls, category_id: Optional[int]) -> "CategoryChange":
        """Explicit value from a form select: None means "no category"."""
        return cls.cleared() if category_id is None else cls.set_to(category_id)


# ============ Requests ============

class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str = Field(..., min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    category_id: Optional[int] = None


class TaskUpdate(CamelModel):
    id: int
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str = Field(..., min_length=1, max_length=MAX_DESCRIPTION_LENGTH)
    category_id: Optional[int] = None

    def category_change(self) -> CategoryChange:
        # Omitted and explicit null both parse to None; fields_set tells them apart
        if "category_id" not in self.model_fields_set:
            return CategoryChange.unchanged()
        return CategoryChange.from_optional(self.category_id)


class TaskIdInput(CamelModel):
    id: int


class ToggleCompleteInput(CamelModel):
    id: int
    completed: bool


class UpdateOrderInput(CamelModel):
    ordered_ids: List[int]


# ============ Responses ============

class TaskResponse(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    description: str
    completed: bool = False
    order: float
    category_id: Optional[int] = None
    category: Optional[CategoryResponse] = None
    created_at: datetime


class DeleteResponse(CamelModel):
    success: bool = True
    deleted_id: int

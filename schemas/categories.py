from pydantic import ConfigDict, Field

from schemas.core import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, description="Category name, normalized on save")


class CategoryResponse(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str

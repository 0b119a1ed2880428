"""
Taskboard - Category procedures
"""

from typing import List

from fastapi import APIRouter, Request

from rate_limiting import limiter, RateLimits
from schemas.categories import CategoryCreate, CategoryResponse
from services import category_service

router = APIRouter(prefix="/api/trpc", tags=["Categories"])


@router.get("/category.getAll", response_model=List[CategoryResponse])
@limiter.limit(RateLimits.READ)
async def get_all_categories(request: Request):
    """All categories ordered by name"""
    return await category_service.list_categories()


@router.post("/category.create", response_model=CategoryResponse)
@limiter.limit(RateLimits.WRITE)
async def create_category(request: Request, payload: CategoryCreate):
    """
    Create a category. The name is normalized ("  groceries " -> "Groceries")
    and must be unique ignoring case.
    """
    return await category_service.create_category(payload.name)

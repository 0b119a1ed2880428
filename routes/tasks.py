"""
Taskboard - Task procedures

Queries are GET with query parameters, mutations are POST with a JSON body.
"""

from typing import List

from fastapi import APIRouter, Query, Request

from rate_limiting import limiter, RateLimits
from schemas.core import SuccessResponse
from schemas.tasks import (
    DeleteResponse,
    TaskCreate,
    TaskIdInput,
    TaskResponse,
    TaskUpdate,
    ToggleCompleteInput,
    UpdateOrderInput,
)
from services import task_service

router = APIRouter(prefix="/api/trpc", tags=["Tasks"])


@router.get("/task.getAll", response_model=List[TaskResponse])
@limiter.limit(RateLimits.READ)
async def get_all_tasks(request: Request):
    """All tasks by order ascending, each with its category"""
    return await task_service.list_tasks()


@router.get("/task.getById", response_model=TaskResponse)
@limiter.limit(RateLimits.READ)
async def get_task_by_id(request: Request, id: int = Query(...)):
    return await task_service.get_task(id)


@router.post("/task.create", response_model=TaskResponse)
@limiter.limit(RateLimits.WRITE)
async def create_task(request: Request, payload: TaskCreate):
    """Create a task; it sorts after every existing task"""
    return await task_service.create_task(
        payload.title,
        payload.description,
        category_id=payload.category_id,
    )


@router.post("/task.update", response_model=TaskResponse)
@limiter.limit(RateLimits.WRITE)
async def update_task(request: Request, payload: TaskUpdate):
    """
    Update title/description. `categoryId` omitted keeps the category,
    `null` clears it, an integer reassigns it.
    """
    return await task_service.update_task(
        payload.id,
        payload.title,
        payload.description,
        category_change=payload.category_change(),
    )


@router.post("/task.toggleComplete", response_model=TaskResponse)
@limiter.limit(RateLimits.WRITE)
async def toggle_complete(request: Request, payload: ToggleCompleteInput):
    return await task_service.toggle_complete(payload.id, payload.completed)


@router.post("/task.delete", response_model=DeleteResponse)
@limiter.limit(RateLimits.WRITE)
async def delete_task(request: Request, payload: TaskIdInput):
    return await task_service.delete_task(payload.id)


@router.post("/task.updateOrder", response_model=SuccessResponse)
@limiter.limit(RateLimits.WRITE)
async def update_order(request: Request, payload: UpdateOrderInput):
    """Assign order 1..n following `orderedIds`, all-or-nothing"""
    return await task_service.update_order(payload.ordered_ids)

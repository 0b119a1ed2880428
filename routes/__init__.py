"""
Taskboard - API Routes
"""

from .categories import router as categories_router
from .tasks import router as tasks_router

__all__ = [
    'categories_router',
    'tasks_router',
]

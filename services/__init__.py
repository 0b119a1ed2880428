"""Taskboard Services Package"""

from . import category_service
from . import task_service

__all__ = [
    'category_service',
    'task_service',
]

"""
Taskboard client core
API client, task list cache and optimistic mutations for UIs to bind to.
"""

from .api import TaskApiClient
from .cache import TaskListCache
from .coordinator import OptimisticMutationCoordinator
from .notifications import NotificationCenter, Operation
from .reorder import ReorderInteractionHandler, DragState, GrabRegion, GrabSource
from .view import TaskListView, ListStatus, filter_tasks

__all__ = [
    'TaskApiClient',
    'TaskListCache',
    'OptimisticMutationCoordinator',
    'NotificationCenter',
    'Operation',
    'ReorderInteractionHandler',
    'DragState',
    'GrabRegion',
    'GrabSource',
    'TaskListView',
    'ListStatus',
    'filter_tasks',
]

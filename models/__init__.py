"""
Taskboard - Database Models Package
Re-exports model functions for convenience
"""

from .base import (
    DB_TYPE,
    ID_PK,
    TIMESTAMP_NOW,
    init_models,
)

from .categories import (
    init_categories_table,
    get_categories,
    get_category,
    find_category_by_name,
    create_category,
)

from .tasks import (
    init_tasks_table,
    get_tasks,
    get_task,
    get_max_order,
    create_task,
    set_task_completed,
    update_task,
    delete_task,
    update_task_order,
)

__all__ = [
    'DB_TYPE',
    'ID_PK',
    'TIMESTAMP_NOW',
    'init_models',
    'init_categories_table',
    'get_categories',
    'get_category',
    'find_category_by_name',
    'create_category',
    'init_tasks_table',
    'get_tasks',
    'get_task',
    'get_max_order',
    'create_task',
    'set_task_completed',
    'update_task',
    'delete_task',
    'update_task_order',
]

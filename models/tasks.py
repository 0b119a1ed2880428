from typing import Any, Dict, List, Optional
from datetime import datetime

from db_helper import (
    get_db,
    transaction,
    execute_sql,
    rows_affected,
    fetch_all,
    fetch_one,
    commit_db,
)
from constants.tasks import FIRST_ORDER_POSITION, ORDER_STEP
from models.base import ID_PK, TIMESTAMP_NOW, BOOLEAN_FALSE

# Columns a caller may change through update_task
UPDATABLE_FIELDS = ("title", "description", "category_id")

_TASK_SELECT = """
    SELECT t.id, t.title, t.description, t.completed, t.sort_order,
           t.category_id, t.created_at, c.name AS category_name
    FROM tasks t
    LEFT JOIN categories c ON c.id = t.category_id
"""

# Ties on sort_order are broken by insertion time
_TASK_ORDER_BY = " ORDER BY t.sort_order ASC, t.created_at ASC, t.id ASC"


async def init_tasks_table():
    """Initialize tasks table"""
    async with get_db() as db:
        await execute_sql(db, f"""
            CREATE TABLE IF NOT EXISTS tasks (
                id {ID_PK},
                title TEXT NOT NULL,
                description TEXT NOT NULL,
                completed {BOOLEAN_FALSE},
                sort_order REAL NOT NULL DEFAULT 0,
                category_id INTEGER REFERENCES categories(id) ON DELETE SET NULL,
                created_at {TIMESTAMP_NOW}
            )
        """)

        await execute_sql(db, """
            CREATE INDEX IF NOT EXISTS idx_tasks_sort_order
            ON tasks(sort_order, created_at)
        """)

        await execute_sql(db, """
            CREATE INDEX IF NOT EXISTS idx_tasks_category
            ON tasks(category_id)
        """)

        await commit_db(db)


def _parse_task_row(row: dict) -> dict:
    """Normalize types and nest the joined category"""
    category = None
    if row.get("category_id") is not None and row.get("category_name") is not None:
        category = {"id": row["category_id"], "name": row["category_name"]}

    return {
        "id": row["id"],
        "title": row["title"],
        "description": row["description"],
        # SQLite stores booleans as 0/1
        "completed": bool(row.get("completed", False)),
        "order": float(row.get("sort_order") or 0.0),
        "category_id": row.get("category_id"),
        "category": category,
        "created_at": row.get("created_at"),
    }


async def get_tasks() -> List[dict]:
    """All tasks in display order, each with its category"""
    async with get_db() as db:
        rows = await fetch_all(db, _TASK_SELECT + _TASK_ORDER_BY)
        return [_parse_task_row(row) for row in rows]


async def get_task(task_id: int) -> Optional[dict]:
    """Get a specific task with its category"""
    async with get_db() as db:
        row = await fetch_one(db, _TASK_SELECT + " WHERE t.id = ?", [task_id])
        return _parse_task_row(row) if row else None


async def get_max_order() -> Optional[float]:
    """Highest sort key currently stored, None on an empty table"""
    async with get_db() as db:
        row = await fetch_one(db, "SELECT MAX(sort_order) AS max_order FROM tasks")
        if not row or row.get("max_order") is None:
            return None
        return float(row["max_order"])


async def create_task(
    title: str,
    description: str,
    sort_order: float,
    created_at: datetime,
    category_id: Optional[int] = None,
) -> dict:
    """Insert a task and return it with its category"""
    async with get_db() as db:
        rows = await fetch_all(db, """
            INSERT INTO tasks (title, description, completed, sort_order, category_id, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            RETURNING id
        """, [title, description, False, sort_order, category_id, created_at])
        await commit_db(db)
        task_id = rows[0]["id"]

    return await get_task(task_id)


async def set_task_completed(task_id: int, completed: bool) -> Optional[dict]:
    """Set the completed flag; returns None when the task does not exist"""
    async with get_db() as db:
        result = await execute_sql(
            db,
            "UPDATE tasks SET completed = ? WHERE id = ?",
            [completed, task_id]
        )
        await commit_db(db)
        if rows_affected(result) == 0:
            return None

    return await get_task(task_id)


async def update_task(task_id: int, fields: Dict[str, Any]) -> Optional[dict]:
    """
    Update the given columns of a task.

    Only keys listed in UPDATABLE_FIELDS are written; a None value is written
    as NULL, so callers decide which keys to include.
    """
    assignments = []
    values = []
    for key, value in fields.items():
        if key not in UPDATABLE_FIELDS:
            raise ValueError(f"Field '{key}' cannot be updated")
        assignments.append(f"{key} = ?")
        values.append(value)

    if not assignments:
        return await get_task(task_id)

    values.append(task_id)
    query = f"UPDATE tasks SET {', '.join(assignments)} WHERE id = ?"

    async with get_db() as db:
        result = await execute_sql(db, query, values)
        await commit_db(db)
        if rows_affected(result) == 0:
            return None

    return await get_task(task_id)


async def delete_task(task_id: int) -> bool:
    """Delete a task permanently; False when nothing was deleted"""
    async with get_db() as db:
        result = await execute_sql(db, "DELETE FROM tasks WHERE id = ?", [task_id])
        await commit_db(db)
        return rows_affected(result) > 0


async def update_task_order(ordered_ids: List[int]) -> None:
    """
    Assign sort_order = position (1-based) to every id, in one transaction.

    Raises LookupError for an id that does not exist and ValueError for a
    repeated id; either way nothing is written.
    """
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValueError("orderedIds contains duplicates")

    async with get_db() as db:
        async with transaction(db):
            for index, task_id in enumerate(ordered_ids):
                result = await execute_sql(
                    db,
                    "UPDATE tasks SET sort_order = ? WHERE id = ?",
                    [FIRST_ORDER_POSITION + index * ORDER_STEP, task_id]
                )
                if rows_affected(result) == 0:
                    raise LookupError(f"Task {task_id} not found")

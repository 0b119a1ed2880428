from typing import List, Optional

from db_helper import get_db, execute_sql, fetch_all, fetch_one, commit_db
from models.base import ID_PK


async def init_categories_table():
    """Initialize categories table"""
    async with get_db() as db:
        await execute_sql(db, f"""
            CREATE TABLE IF NOT EXISTS categories (
                id {ID_PK},
                name TEXT NOT NULL
            )
        """)

        # Uniqueness is case-insensitive
        await execute_sql(db, """
            CREATE UNIQUE INDEX IF NOT EXISTS idx_categories_name_lower
            ON categories(LOWER(name))
        """)

        await commit_db(db)


async def get_categories() -> List[dict]:
    """All categories, ordered by name ascending"""
    async with get_db() as db:
        return await fetch_all(db, "SELECT id, name FROM categories ORDER BY name ASC, id ASC")


async def get_category(category_id: int) -> Optional[dict]:
    async with get_db() as db:
        return await fetch_one(db, "SELECT id, name FROM categories WHERE id = ?", [category_id])


async def find_category_by_name(name: str) -> Optional[dict]:
    """Case-insensitive lookup by name"""
    async with get_db() as db:
        return await fetch_one(
            db,
            "SELECT id, name FROM categories WHERE LOWER(name) = LOWER(?)",
            [name]
        )


async def create_category(name: str) -> dict:
    """Insert a category and return it with its assigned id"""
    async with get_db() as db:
        rows = await fetch_all(
            db,
            "INSERT INTO categories (name) VALUES (?) RETURNING id, name",
            [name]
        )
        await commit_db(db)
        return rows[0]

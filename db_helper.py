"""
Database Helper - Unified interface for SQLite and PostgreSQL
"""

from contextlib import asynccontextmanager

from db_pool import (
    db_pool,
    DB_TYPE,
    DATABASE_PATH,
    DATABASE_URL,
    POSTGRES_AVAILABLE,
    adapt_sql_for_db,
    _convert_sql_params,
    _normalize_params
)
from logging_config import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def get_db():
    """Get database connection context manager using global pool"""
    conn = await db_pool.acquire()
    try:
        # SQLite specific: foreign keys are off unless enabled per connection
        if DB_TYPE == "sqlite":
            await conn.execute("PRAGMA foreign_keys = ON")
        yield conn
    finally:
        await db_pool.release(conn)


@asynccontextmanager
async def transaction(db):
    """
    Run a block all-or-nothing.

    Commits when the block exits normally, rolls back and re-raises otherwise.
    """
    if DB_TYPE == "postgresql":
        async with db.transaction():
            yield db
        return

    await db.execute("BEGIN")
    try:
        yield db
    except BaseException:
        await db.rollback()
        raise
    else:
        await db.commit()


async def execute_sql(db, sql: str, params=None):
    """Execute SQL with proper parameter handling"""
    sql = adapt_sql_for_db(sql)
    if DB_TYPE == "postgresql":
        if params:
            params = _normalize_params(params)
            sql = _convert_sql_params(sql, params)
            return await db.execute(sql, *params)
        return await db.execute(sql)

    if params:
        return await db.execute(sql, _normalize_params(params))
    return await db.execute(sql)


def rows_affected(result) -> int:
    """Row count of an execute_sql result (asyncpg status string or SQLite cursor)"""
    if isinstance(result, str):
        # asyncpg returns e.g. "UPDATE 1"
        tail = result.rsplit(" ", 1)[-1]
        return int(tail) if tail.isdigit() else 0
    return getattr(result, "rowcount", 0) or 0


async def fetch_all(db, sql: str, params=None):
    """Fetch all rows"""
    sql = adapt_sql_for_db(sql)
    if DB_TYPE == "postgresql":
        if params:
            params = _normalize_params(params)
            sql = _convert_sql_params(sql, params)
            rows = await db.fetch(sql, *params)
        else:
            rows = await db.fetch(sql)
        return [dict(row) for row in rows]

    if params:
        cursor = await db.execute(sql, _normalize_params(params))
    else:
        cursor = await db.execute(sql)
    rows = await cursor.fetchall()
    if cursor.description:
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in rows]
    return []


async def fetch_one(db, sql: str, params=None):
    """Fetch one row"""
    sql = adapt_sql_for_db(sql)
    if DB_TYPE == "postgresql":
        if params:
            params = _normalize_params(params)
            sql = _convert_sql_params(sql, params)
            row = await db.fetchrow(sql, *params)
        else:
            row = await db.fetchrow(sql)
        return dict(row) if row else None

    if params:
        cursor = await db.execute(sql, _normalize_params(params))
    else:
        cursor = await db.execute(sql)
    row = await cursor.fetchone()
    if row and cursor.description:
        columns = [desc[0] for desc in cursor.description]
        return dict(zip(columns, row))
    return None


async def commit_db(db):
    """Commit database transaction"""
    if DB_TYPE != "postgresql":
        await db.commit()


__all__ = [
    "get_db",
    "transaction",
    "execute_sql",
    "rows_affected",
    "fetch_all",
    "fetch_one",
    "commit_db",
    "DB_TYPE",
    "DATABASE_PATH",
    "DATABASE_URL",
    "POSTGRES_AVAILABLE",
]

"""
Database connection pool manager
Supports SQLite (default) and PostgreSQL
"""

import os
import re
from datetime import datetime
from typing import Optional, Any, Iterable, List

import aiosqlite

# Try to import asyncpg for PostgreSQL (optional)
try:
    import asyncpg
    POSTGRES_AVAILABLE = True
except ImportError:
    POSTGRES_AVAILABLE = False
    asyncpg = None


DATABASE_PATH = os.getenv("DATABASE_PATH", "taskboard.db")
DATABASE_URL = os.getenv("DATABASE_URL")

# PostgreSQL is only used when explicitly requested and actually reachable
_requested_type = os.getenv("DB_TYPE", "sqlite").lower()
DB_TYPE = "postgresql" if (_requested_type == "postgresql" and POSTGRES_AVAILABLE and DATABASE_URL) else "sqlite"


def adapt_sql_for_db(sql: str) -> str:
    """Translate the SQLite dialect used in models into PostgreSQL where needed"""
    if DB_TYPE != "postgresql":
        return sql
    sql = re.sub(r"INTEGER PRIMARY KEY AUTOINCREMENT", "SERIAL PRIMARY KEY", sql, flags=re.IGNORECASE)
    sql = re.sub(r"\bREAL\b", "DOUBLE PRECISION", sql)
    return sql


def _convert_sql_params(sql: str, params: List[Any]) -> str:
    """Convert SQLite-style ? placeholders to $1, $2, ... for asyncpg"""
    counter = iter(range(1, len(params) + 1))
    return re.sub(r"\?", lambda _: f"${next(counter)}", sql)


def _normalize_params(params: Iterable[Any]) -> List[Any]:
    """asyncpg wants native types; SQLite wants ISO strings for timestamps"""
    normalized = []
    for value in params:
        if isinstance(value, datetime) and DB_TYPE != "postgresql":
            value = value.isoformat()
        normalized.append(value)
    return normalized


class DatabasePool:
    """Unified database connection pool manager"""

    def __init__(self):
        self.db_type = DB_TYPE
        self.pool: Optional[Any] = None
        self.sqlite_path = DATABASE_PATH
        self.postgres_url = DATABASE_URL

    async def initialize(self):
        """Initialize the appropriate database connection pool"""
        if self.db_type == "postgresql":
            await self._init_postgres()
        else:
            self._init_sqlite()

    def _init_sqlite(self):
        """SQLite opens a connection per acquire, there is nothing to pool"""
        self.pool = None
        self.db_type = "sqlite"

    async def _init_postgres(self):
        """Initialize PostgreSQL connection pool"""
        if not POSTGRES_AVAILABLE:
            raise ImportError("asyncpg is required for PostgreSQL. Install with: pip install asyncpg")

        if not self.postgres_url:
            raise ValueError("DATABASE_URL environment variable required for PostgreSQL")

        query_timeout = int(os.getenv("DB_QUERY_TIMEOUT", "30"))
        self.pool = await asyncpg.create_pool(
            self.postgres_url,
            min_size=1,
            max_size=10,
            command_timeout=query_timeout,
        )
        self.db_type = "postgresql"

    async def acquire(self):
        """Acquire a database connection"""
        if self.db_type == "postgresql":
            if not self.pool:
                raise RuntimeError("Database not initialized")
            return await self.pool.acquire()
        return await aiosqlite.connect(self.sqlite_path)

    async def release(self, conn):
        """Release a database connection"""
        if self.db_type == "postgresql" and self.pool:
            await self.pool.release(conn)
        elif self.db_type == "sqlite":
            await conn.close()

    async def close(self):
        """Close the connection pool"""
        if self.db_type == "postgresql" and self.pool:
            await self.pool.close()
            self.pool = None


# Global database pool instance
db_pool = DatabasePool()

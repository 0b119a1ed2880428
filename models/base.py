"""
Taskboard - Model base utilities
Dialect-dependent column types and schema initialization
"""

from db_helper import DB_TYPE
from logging_config import get_logger

logger = get_logger(__name__)

# Column definitions that differ between SQLite and PostgreSQL
ID_PK = "SERIAL PRIMARY KEY" if DB_TYPE == "postgresql" else "INTEGER PRIMARY KEY AUTOINCREMENT"
TIMESTAMP_NOW = "TIMESTAMP DEFAULT NOW()" if DB_TYPE == "postgresql" else "TIMESTAMP DEFAULT CURRENT_TIMESTAMP"
BOOLEAN_FALSE = "BOOLEAN DEFAULT FALSE" if DB_TYPE == "postgresql" else "BOOLEAN DEFAULT 0"


async def init_models():
    """Create every table the application needs (idempotent)"""
    # Categories first: tasks reference them
    from models.categories import init_categories_table
    from models.tasks import init_tasks_table

    await init_categories_table()
    await init_tasks_table()
    logger.info(f"Database schema verified (DB_TYPE={DB_TYPE})")

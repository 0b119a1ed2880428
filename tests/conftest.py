"""
Taskboard Test Fixtures
Shared pytest fixtures for backend and client testing
"""

import os
import sys
import tempfile

import pytest

# Set test environment
os.environ["TESTING"] = "1"
os.environ["DB_TYPE"] = "sqlite"
os.environ["DATABASE_PATH"] = os.path.join(tempfile.gettempdir(), "test_taskboard.db")
os.environ["RATE_LIMIT_ENABLED"] = "0"

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
async def db_session(tmp_path, monkeypatch):
    """Fresh SQLite database with the schema initialized"""
    from db_pool import db_pool
    from models import init_models

    monkeypatch.setattr(db_pool, "sqlite_path", str(tmp_path / "taskboard.db"))
    await db_pool.initialize()
    await init_models()
    yield db_pool
    await db_pool.close()


@pytest.fixture
async def test_app():
    """Create test FastAPI app instance"""
    from main import app
    yield app


@pytest.fixture
async def test_client(test_app, db_session):
    """Create async test client"""
    from httpx import AsyncClient, ASGITransport

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def api_client(test_client):
    """TaskApiClient talking to the in-process app"""
    from client.api import TaskApiClient

    async with TaskApiClient(http_client=test_client) as api:
        yield api


@pytest.fixture
def sample_tasks():
    """Three tasks in display order 1, 2, 3"""
    from tests.fakes import make_category, make_task

    work = make_category(1, "Work")
    return [
        make_task(1, "Write report", category=work),
        make_task(2, "Buy milk"),
        make_task(3, "Call plumber"),
    ]

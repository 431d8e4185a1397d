import pytest
from fastapi.testclient import TestClient

from task_planner.config import Settings
from task_planner.main import create_app

from .fakes import FakeTaskStore


@pytest.fixture
def settings():
    return Settings(mongodb_uri="mongodb://localhost:27017/test", db_name="test")


@pytest.fixture
def store():
    return FakeTaskStore()


@pytest.fixture
def client(settings, store):
    app = create_app(settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_task(client):
    """POST a task and return the created JSON body."""

    def _create(**payload):
        payload.setdefault("title", "Sample task")
        response = client.post("/api/tasks", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create

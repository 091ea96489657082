
import pytest
from fastapi.testclient import TestClient

from main import create_app
from task_store import TaskStore


@pytest.fixture
def tasks_file(tmp_path):
    """
    Path of a task file that does not exist yet. The parent directory is
    missing as well, so every test also covers directory creation on save.
    """
    return tmp_path / "data" / "tasks.json"


@pytest.fixture
def store(tasks_file):
    return TaskStore(tasks_file)


@pytest.fixture
def frontend_dir(tmp_path):
    directory = tmp_path / "frontend"
    directory.mkdir()
    (directory / "index.html").write_text("<h1>Task Manager</h1>", encoding="utf-8")
    (directory / "app.js").write_text("console.log('ok');", encoding="utf-8")
    return directory


@pytest.fixture
def client(tasks_file, frontend_dir):
    # 'with' runs the lifespan, which hydrates the store.
    with TestClient(create_app(tasks_file=tasks_file, frontend_dir=frontend_dir)) as test_client:
        yield test_client

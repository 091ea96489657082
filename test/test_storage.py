
import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from models import Task
from storage import PersistenceError, read_tasks, write_tasks


def make_task(task_id, **overrides):
    values = {
        "id": task_id,
        "title": f"Task {task_id}",
        "description": "",
        "completed": False,
        "createdAt": "2024-01-15T10:30:00",
        "updatedAt": "2024-01-15T10:30:00",
    }
    values.update(overrides)
    return Task.model_validate(values)


def test_read_missing_file(tmp_path):
    assert read_tasks(tmp_path / "nope.json") == []


@pytest.mark.parametrize("content", ["", "   \n", "null", "[]"])
def test_read_empty_content(tmp_path, content):
    path = tmp_path / "tasks.json"
    path.write_text(content, encoding="utf-8")
    assert read_tasks(path) == []


@pytest.mark.parametrize("content", ["{not json", '{"id": 1}', '[{"id": "x"}]'])
def test_read_corrupt_file_logs_and_returns_empty(tmp_path, caplog, content):
    path = tmp_path / "tasks.json"
    path.write_text(content, encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="storage"):
        assert read_tasks(path) == []
    assert "Error loading tasks" in caplog.text


def test_read_existing_file_format(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{
        "id": 3,
        "title": "Buy milk",
        "description": "2%",
        "completed": True,
        "createdAt": "2024-01-15T10:30:00",
        "updatedAt": "2024-01-15T11:00:00.123",
    }]), encoding="utf-8")

    (task,) = read_tasks(path)
    assert task.id == 3
    assert task.completed is True
    assert task.created_at == datetime(2024, 1, 15, 10, 30)
    assert task.updated_at == datetime(2024, 1, 15, 11, 0, 0, 123000)


def test_offset_timestamps_become_local_time(tmp_path):
    stamp = datetime(2024, 1, 15, 10, 30, tzinfo=timezone(timedelta(hours=2)))
    task = make_task(1, createdAt=stamp.isoformat(), updatedAt=stamp.isoformat())
    assert task.created_at.tzinfo is None
    assert task.created_at == stamp.astimezone().replace(tzinfo=None)


def test_write_creates_parent_directory(tmp_path):
    path = tmp_path / "nested" / "data" / "tasks.json"
    write_tasks([make_task(1)], path)

    records = json.loads(path.read_text(encoding="utf-8"))
    assert records == [{
        "id": 1,
        "title": "Task 1",
        "description": "",
        "completed": False,
        "createdAt": "2024-01-15T10:30:00",
        "updatedAt": "2024-01-15T10:30:00",
    }]


def test_write_replaces_whole_file_and_leaves_no_temp_files(tmp_path):
    path = tmp_path / "tasks.json"
    write_tasks([make_task(1), make_task(2)], path)
    write_tasks([make_task(2)], path)

    assert [r["id"] for r in json.loads(path.read_text(encoding="utf-8"))] == [2]
    assert [p.name for p in tmp_path.iterdir()] == ["tasks.json"]


def test_write_keeps_unicode(tmp_path):
    path = tmp_path / "tasks.json"
    write_tasks([make_task(1, title="買牛奶")], path)
    assert "買牛奶" in path.read_text(encoding="utf-8")


def test_failed_rename_keeps_old_file(tmp_path, monkeypatch):
    path = tmp_path / "tasks.json"
    write_tasks([make_task(1)], path)
    previous = path.read_text(encoding="utf-8")

    def broken_replace(src, dst):
        raise OSError("rename failed")

    monkeypatch.setattr("storage.os.replace", broken_replace)
    with pytest.raises(PersistenceError):
        write_tasks([make_task(1), make_task(2)], path)

    assert path.read_text(encoding="utf-8") == previous
    assert [p.name for p in tmp_path.iterdir()] == ["tasks.json"]


def test_write_failure_is_logged(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="storage"):
        with pytest.raises(PersistenceError):
            write_tasks([make_task(1)], blocker / "tasks.json")
    assert "Error saving tasks" in caplog.text


def test_nanosecond_timestamps_are_cut_to_microseconds(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{
        "id": 1,
        "title": "A",
        "description": "",
        "completed": False,
        "createdAt": "2024-01-15T10:30:00.123456789",
        "updatedAt": "2024-01-15T10:30:00.123456789",
    }]), encoding="utf-8")

    (task,) = read_tasks(path)
    assert task.created_at == datetime(2024, 1, 15, 10, 30, 0, 123456)

    write_tasks([task], path)
    assert json.loads(path.read_text(encoding="utf-8"))[0]["createdAt"] == "2024-01-15T10:30:00.123456"

import json
from unittest.mock import patch

import pytest

from src.tasks import TaskPriority, TaskRepository, TaskStatus, TaskStorageError


def test_task_repository_crud_cycle(tmp_path):
    repo = TaskRepository(data_path=tmp_path / "tasks.json")

    created = repo.create(
        title="Write report",
        description="Quarterly numbers",
        due_date="2099-12-01",
        status=TaskStatus.IN_PROGRESS,
        priority=TaskPriority.HIGH,
        assignee="Alice Johnson",
    )
    assert created.id == 1
    assert created.status is TaskStatus.IN_PROGRESS
    assert created.created_at == created.updated_at

    items = repo.list()
    assert len(items) == 1

    updated = repo.update(
        created.id,
        status=TaskStatus.DONE,
        due_date=None,
        description="Finished and sent",
    )
    assert updated is not None
    assert updated.status is TaskStatus.DONE
    assert updated.due_date is None
    assert updated.assignee == "Alice Johnson"
    assert updated.created_at == created.created_at
    assert "Finished" in updated.description

    assert repo.delete(created.id) is True
    assert repo.list() == []


def test_task_repository_ids_increase(tmp_path):
    repo = TaskRepository(data_path=tmp_path / "tasks.json")
    first, second = repo.bulk_create([{"title": "First task"}, {"title": "Second task"}])
    assert (first.id, second.id) == (1, 2)

    repo.delete(first.id)
    third = repo.create(title="Third task")
    assert third.id == 3


def test_task_repository_missing_items(tmp_path):
    repo = TaskRepository(data_path=tmp_path / "tasks.json")
    assert repo.get(99) is None
    assert repo.update(99, title="Nope") is None
    assert repo.delete(99) is False


def test_task_repository_reads_wrapped_file(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps(
            {
                "tasks": [
                    {"id": 7, "title": "Imported", "status": "completed", "dueDate": "2099-01-01"}
                ]
            }
        ),
        encoding="utf-8",
    )
    repo = TaskRepository(data_path=path)

    tasks = repo.list()
    assert [task.id for task in tasks] == [7]
    assert tasks[0].status is TaskStatus.DONE
    assert repo.degraded is False


def test_task_repository_degrades_on_corrupt_file(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text("{not json", encoding="utf-8")
    repo = TaskRepository(data_path=path)

    assert repo.list() == []
    assert repo.degraded is True
    assert repo.last_error


def test_task_repository_writes_camel_case(tmp_path):
    path = tmp_path / "tasks.json"
    repo = TaskRepository(data_path=path)
    repo.create(title="Persisted", due_date="2099-05-05")

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["tasks"][0]["dueDate"] == "2099-05-05"
    assert "createdAt" in stored["tasks"][0]
    assert not (tmp_path / "tasks.json.tmp").exists()


def test_task_repository_uses_env_path(tmp_path, monkeypatch):
    path = tmp_path / "env_tasks.json"
    monkeypatch.setenv("TASKFLOW_DATA_PATH", str(path))
    repo = TaskRepository()
    assert repo.data_path == path


CORRUPT_PAYLOAD = json.dumps(
    {
        "tasks": [
            {"id": 1, "title": "Keep me", "status": "todo"},
            {"id": 2, "title": "Odd status", "status": "archived"},
        ]
    }
)


def test_task_repository_refuses_writes_on_unreadable_file(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(CORRUPT_PAYLOAD, encoding="utf-8")
    repo = TaskRepository(data_path=path)

    assert repo.list() == []
    assert repo.degraded is True

    with pytest.raises(TaskStorageError) as exc_info:
        repo.create(title="New task")
    assert exc_info.value.code == "STORAGE_UNAVAILABLE"
    assert exc_info.value.status_code == 503

    with pytest.raises(TaskStorageError):
        repo.update(1, title="Renamed")
    with pytest.raises(TaskStorageError):
        repo.delete(1)

    assert path.read_text(encoding="utf-8") == CORRUPT_PAYLOAD


def test_task_repository_keeps_envelope_format(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(
        json.dumps({"tasks": [{"id": 3, "title": "Imported", "status": "todo"}]}),
        encoding="utf-8",
    )
    repo = TaskRepository(data_path=path)
    repo.create(title="Second task")

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert [item["id"] for item in stored["tasks"]] == [3, 4]


def test_task_repository_removes_tmp_file_on_failed_write(tmp_path):
    path = tmp_path / "tasks.json"
    repo = TaskRepository(data_path=path)
    repo.create(title="Existing task")
    before = path.read_text(encoding="utf-8")

    with patch("src.tasks.repository.json.dump", side_effect=TypeError("not serializable")):
        with pytest.raises(TypeError):
            repo.create(title="Broken task")

    assert not (tmp_path / "tasks.json.tmp").exists()
    assert path.read_text(encoding="utf-8") == before

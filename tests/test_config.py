import logging
from pathlib import Path

from src.taskflow.config import PROJECT_ROOT, Config
from src.taskflow.logger import setup_logger


def test_defaults_when_file_missing(tmp_path):
    config = Config.from_yaml(tmp_path / "missing.yaml")
    assert config.server.port == 3000
    assert config.server.read_only is False
    assert config.client.api_url == "http://localhost:3000/api"
    assert config.notifications.max_notifications == 5


def test_from_yaml(tmp_path, monkeypatch):
    monkeypatch.delenv("TASKFLOW_DATA_PATH", raising=False)
    path = tmp_path / "app_config.yaml"
    path.write_text(
        "\n".join(
            [
                "server:",
                "  port: 8080",
                "  read_only: true",
                "client:",
                "  search_debounce_seconds: 0.5",
                "notifications:",
                "  max_notifications: 3",
                "data:",
                f"  tasks_file: {tmp_path / 'tasks.json'}",
                "log:",
                "  level: DEBUG",
            ]
        ),
        encoding="utf-8",
    )

    config = Config.from_yaml(path)
    assert config.server.port == 8080
    assert config.server.read_only is True
    assert config.client.search_debounce_seconds == 0.5
    assert config.notifications.max_notifications == 3
    assert config.log_level == "DEBUG"
    assert config.tasks_path == tmp_path / "tasks.json"


def test_tasks_path_resolution(tmp_path, monkeypatch):
    monkeypatch.delenv("TASKFLOW_DATA_PATH", raising=False)
    config = Config()
    assert config.tasks_path == PROJECT_ROOT / "data" / "tasks.json"

    monkeypatch.setenv("TASKFLOW_DATA_PATH", str(tmp_path / "override.json"))
    assert config.tasks_path == tmp_path / "override.json"


def test_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "4000")
    monkeypatch.setenv("TASKFLOW_READ_ONLY", "yes")
    monkeypatch.setenv("TASKFLOW_API_URL", "http://example.test/api")

    config = Config.from_env()
    assert config.server.port == 4000
    assert config.server.read_only is True
    assert config.client.api_url == "http://example.test/api"
    assert isinstance(config.frontend_path, Path)


def test_setup_logger_creates_log_directory(tmp_path):
    log_file = tmp_path / "logs" / "taskflow.log"
    setup_logger("DEBUG", str(log_file))

    assert log_file.parent.is_dir()
    assert logging.getLogger("urllib3").level == logging.WARNING

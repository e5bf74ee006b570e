"""
設定管理モジュール

関連クラス:
  - src.server.app.create_app: サーバー設定・データファイル設定を使用
  - controller.TaskFlowController: クライアント設定・通知設定を使用
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ServerConfig:
    """HTTPサーバー設定"""

    host: str = "0.0.0.0"
    port: int = 3000
    read_only: bool = False  # Trueの場合はGETのみ公開
    frontend_dir: str = "frontend"


@dataclass
class ClientConfig:
    """APIクライアント設定"""

    api_url: str = "http://localhost:3000/api"
    timeout_seconds: float = 10.0
    search_debounce_seconds: float = 0.3


@dataclass
class NotificationConfig:
    """通知表示設定"""

    duration_seconds: float = 4.0
    max_notifications: int = 5


@dataclass
class Config:
    """アプリケーション設定クラス"""

    server: ServerConfig = None  # type: ignore
    client: ClientConfig = None  # type: ignore
    notifications: NotificationConfig = None  # type: ignore

    # データ設定
    tasks_file: str = "data/tasks.json"

    # ログ設定
    log_level: str = "INFO"
    log_file: str = "logs/taskflow.log"

    def __post_init__(self):
        """デフォルト値の初期化"""
        if self.server is None:
            self.server = ServerConfig()
        if self.client is None:
            self.client = ClientConfig()
        if self.notifications is None:
            self.notifications = NotificationConfig()

    @property
    def tasks_path(self) -> Path:
        """タスクファイルの絶対パス（環境変数 TASKFLOW_DATA_PATH が優先）"""
        env_path = os.getenv("TASKFLOW_DATA_PATH")
        path = Path(env_path) if env_path else Path(self.tasks_file)
        return path if path.is_absolute() else PROJECT_ROOT / path

    @property
    def frontend_path(self) -> Path:
        path = Path(self.server.frontend_dir)
        return path if path.is_absolute() else PROJECT_ROOT / path

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス（省略時はconfig/app_config.yamlを使用）

        Returns:
            Config: 設定インスタンス（ファイルが無い場合はデフォルト値）
        """
        if config_path is None:
            config_path = PROJECT_ROOT / "config" / "app_config.yaml"

        if not Path(config_path).exists():
            logger.warning("Config file not found, using defaults: %s", config_path)
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        # YAML構造から設定を抽出
        server_data = yaml_data.get("server", {})
        client_data = yaml_data.get("client", {})
        notification_data = yaml_data.get("notifications", {})
        data_data = yaml_data.get("data", {})
        log_data = yaml_data.get("log", {})

        return cls(
            server=ServerConfig(
                host=server_data.get("host", "0.0.0.0"),
                port=int(server_data.get("port", 3000)),
                read_only=bool(server_data.get("read_only", False)),
                frontend_dir=server_data.get("frontend_dir", "frontend"),
            ),
            client=ClientConfig(
                api_url=client_data.get("api_url", "http://localhost:3000/api"),
                timeout_seconds=float(client_data.get("timeout_seconds", 10.0)),
                search_debounce_seconds=float(client_data.get("search_debounce_seconds", 0.3)),
            ),
            notifications=NotificationConfig(
                duration_seconds=float(notification_data.get("duration_seconds", 4.0)),
                max_notifications=int(notification_data.get("max_notifications", 5)),
            ),
            tasks_file=data_data.get("tasks_file", "data/tasks.json"),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/taskflow.log"),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """環境変数から設定を読み込む"""
        return cls(
            server=ServerConfig(
                host=os.getenv("TASKFLOW_HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "3000")),
                read_only=_env_flag("TASKFLOW_READ_ONLY", False),
                frontend_dir=os.getenv("TASKFLOW_FRONTEND_DIR", "frontend"),
            ),
            client=ClientConfig(
                api_url=os.getenv("TASKFLOW_API_URL", "http://localhost:3000/api"),
                timeout_seconds=float(os.getenv("TASKFLOW_API_TIMEOUT", "10")),
                search_debounce_seconds=float(os.getenv("TASKFLOW_SEARCH_DEBOUNCE", "0.3")),
            ),
            tasks_file=os.getenv("TASKFLOW_DATA_PATH", "data/tasks.json"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/taskflow.log"),
        )

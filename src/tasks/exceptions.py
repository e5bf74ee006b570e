"""TaskFlowのカスタム例外定義

APIのエラーレスポンス ``{"error": {"code", "message", "details"}}`` と
1対1に対応する。
"""

from typing import Any, Dict, Optional


class TaskError(Exception):
    """TaskFlow基底例外"""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class TaskValidationError(TaskError):
    """入力値の検証エラー"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class TaskNotFoundError(TaskError):
    """指定IDのタスクが存在しない"""

    status_code = 404

    def __init__(self, task_id: int):
        super().__init__("TASK_NOT_FOUND", f"Task {task_id} not found", {"id": task_id})


class TaskStorageError(TaskError):
    """タスクファイルが読めないため書き込みを拒否した"""

    status_code = 503

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("STORAGE_UNAVAILABLE", message, details)

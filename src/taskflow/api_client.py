"""HTTP client for the TaskFlow API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from src.tasks import WILDCARD, Task

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
INVALID_RESPONSE_MESSAGE = "Invalid response from server"


class APIError(Exception):
    """Failed API call.

    ``status`` is 0 and ``code`` is ``NETWORK_ERROR`` when the request never
    produced an HTTP response, and ``code`` is ``INVALID_RESPONSE`` when a
    successful response did not carry the expected JSON.
    """

    def __init__(
        self,
        message: str,
        status: int,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details or {}


class TasksAPI:
    """
    TaskFlow APIクライアント

    タスクのCRUD・統計・ヘルスチェックを提供する。失敗は全て APIError で通知し、
    自動リトライは行わない。
    """

    def __init__(self, base_url: str = "http://localhost:3000/api", timeout: float = 10.0):
        """
        Args:
            base_url: APIのベースURL（末尾の /api を含む）
            timeout: リクエストタイムアウト（秒）
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = requests.request(
                method,
                url,
                params=params,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"API request failed: {method} {url}: {e}")
            raise APIError(
                NETWORK_ERROR_MESSAGE, 0, "NETWORK_ERROR", {"original_error": str(e)}
            ) from e

        if response.status_code == 204:
            return None

        try:
            data = response.json()
            decoded = True
        except ValueError:
            data = None
            decoded = False

        if not response.ok:
            error = (data or {}).get("error") if isinstance(data, dict) else None
            error = error if isinstance(error, dict) else {}
            logger.warning(
                f"API error: {method} {url} -> {response.status_code} {error.get('code')}"
            )
            raise APIError(
                error.get("message") or "Request failed",
                response.status_code,
                error.get("code"),
                error.get("details"),
            )

        if not decoded:
            logger.error(f"Undecodable response body: {method} {url} -> {response.status_code}")
            raise APIError(INVALID_RESPONSE_MESSAGE, response.status_code, "INVALID_RESPONSE")

        return data

    @staticmethod
    def _expect_dict(data: Any) -> Dict[str, Any]:
        if not isinstance(data, dict):
            logger.error(f"Unexpected response shape: {type(data).__name__}")
            raise APIError(INVALID_RESPONSE_MESSAGE, 200, "INVALID_RESPONSE")
        return data

    @classmethod
    def _to_task(cls, data: Any) -> Task:
        try:
            return Task.from_dict(cls._expect_dict(data))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed task record: {e}")
            raise APIError(
                INVALID_RESPONSE_MESSAGE, 200, "INVALID_RESPONSE", {"original_error": str(e)}
            ) from e

    def get_tasks(self, filters: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """Fetch tasks; wildcard and empty filters are left out of the query."""
        params = {
            key: value
            for key, value in (filters or {}).items()
            if value and value != WILDCARD
        }
        data = self._expect_dict(self._request("GET", "/tasks", params=params or None))
        items = data.get("tasks", [])
        if not isinstance(items, list):
            raise APIError(INVALID_RESPONSE_MESSAGE, 200, "INVALID_RESPONSE")
        data["tasks"] = [self._to_task(item) for item in items]
        return data

    def list_tasks(self, filters: Optional[Mapping[str, str]] = None) -> List[Task]:
        return self.get_tasks(filters)["tasks"]

    def get_task(self, task_id: int) -> Task:
        return self._to_task(self._request("GET", f"/tasks/{task_id}"))

    def create_task(self, task_data: Mapping[str, Any]) -> Task:
        return self._to_task(self._request("POST", "/tasks", payload=task_data))

    def update_task(self, task_id: int, updates: Mapping[str, Any]) -> Task:
        return self._to_task(self._request("PUT", f"/tasks/{task_id}", payload=updates))

    def delete_task(self, task_id: int) -> None:
        self._request("DELETE", f"/tasks/{task_id}")

    def get_statistics(self) -> Dict[str, Any]:
        return self._expect_dict(self._request("GET", "/tasks/stats"))

    def check_health(self) -> Dict[str, Any]:
        return self._expect_dict(self._request("GET", "/health"))

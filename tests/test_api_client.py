from unittest.mock import MagicMock, patch

import pytest
import requests

from src.taskflow.api_client import (
    INVALID_RESPONSE_MESSAGE,
    NETWORK_ERROR_MESSAGE,
    APIError,
    TasksAPI,
)


def make_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if payload is None:
        response.json.side_effect = ValueError("no body")
    else:
        response.json.return_value = payload
    return response


TASK = {
    "id": 1,
    "title": "Design landing page",
    "description": "",
    "status": "todo",
    "priority": "high",
    "assignee": None,
    "dueDate": None,
    "createdAt": "2026-10-01T00:00:00+00:00",
    "updatedAt": "2026-10-01T00:00:00+00:00",
}


@patch("src.taskflow.api_client.requests.request")
def test_get_tasks_omits_wildcard_filters(mock_request):
    mock_request.return_value = make_response(200, {"tasks": [TASK], "stats": {}, "meta": {}})
    api = TasksAPI("http://api.test/api/", timeout=5)

    data = api.get_tasks({"status": "all", "priority": "high", "search": ""})

    args, kwargs = mock_request.call_args
    assert args == ("GET", "http://api.test/api/tasks")
    assert kwargs["params"] == {"priority": "high"}
    assert kwargs["timeout"] == 5
    assert data["tasks"][0].title == "Design landing page"


@patch("src.taskflow.api_client.requests.request")
def test_create_and_update_send_json(mock_request):
    mock_request.return_value = make_response(201, TASK)
    api = TasksAPI("http://api.test/api")

    task = api.create_task({"title": "Design landing page"})
    assert task.id == 1
    assert mock_request.call_args.kwargs["json"] == {"title": "Design landing page"}

    mock_request.return_value = make_response(200, dict(TASK, status="done"))
    task = api.update_task(1, {"status": "done"})
    assert task.status.value == "done"
    assert mock_request.call_args.args == ("PUT", "http://api.test/api/tasks/1")


@patch("src.taskflow.api_client.requests.request")
def test_delete_returns_none_on_204(mock_request):
    mock_request.return_value = make_response(204)
    assert TasksAPI().delete_task(1) is None


@patch("src.taskflow.api_client.requests.request")
def test_error_body_becomes_api_error(mock_request):
    mock_request.return_value = make_response(
        404,
        {"error": {"code": "TASK_NOT_FOUND", "message": "Task 9 not found", "details": {"id": 9}}},
    )

    with pytest.raises(APIError) as exc_info:
        TasksAPI().get_task(9)

    error = exc_info.value
    assert error.status == 404
    assert error.code == "TASK_NOT_FOUND"
    assert error.message == "Task 9 not found"
    assert error.details == {"id": 9}


@patch("src.taskflow.api_client.requests.request")
def test_error_without_body_uses_default_message(mock_request):
    mock_request.return_value = make_response(500)

    with pytest.raises(APIError) as exc_info:
        TasksAPI().get_statistics()

    assert exc_info.value.status == 500
    assert exc_info.value.message == "Request failed"


@patch("src.taskflow.api_client.requests.request")
def test_transport_failure_becomes_network_error(mock_request):
    mock_request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(APIError) as exc_info:
        TasksAPI().check_health()

    error = exc_info.value
    assert error.status == 0
    assert error.code == "NETWORK_ERROR"
    assert error.message == NETWORK_ERROR_MESSAGE
    assert "refused" in error.details["original_error"]
    assert mock_request.call_count == 1


@patch("src.taskflow.api_client.requests.request")
def test_undecodable_success_body_becomes_invalid_response(mock_request):
    # e.g. an api_url without /api answered by the frontend's index.html
    mock_request.return_value = make_response(200)

    with pytest.raises(APIError) as exc_info:
        TasksAPI("http://localhost:3000").get_tasks()

    error = exc_info.value
    assert error.code == "INVALID_RESPONSE"
    assert error.status == 200
    assert error.message == INVALID_RESPONSE_MESSAGE


@patch("src.taskflow.api_client.requests.request")
def test_malformed_task_payloads_become_invalid_response(mock_request):
    api = TasksAPI()

    mock_request.return_value = make_response(200, ["not", "a", "dict"])
    with pytest.raises(APIError) as exc_info:
        api.list_tasks()
    assert exc_info.value.code == "INVALID_RESPONSE"

    mock_request.return_value = make_response(200, {"tasks": [{"title": "no id"}]})
    with pytest.raises(APIError) as exc_info:
        api.list_tasks()
    assert exc_info.value.code == "INVALID_RESPONSE"

    mock_request.return_value = make_response(201, dict(TASK, status="archived"))
    with pytest.raises(APIError) as exc_info:
        api.create_task({"title": "Design landing page"})
    assert exc_info.value.code == "INVALID_RESPONSE"

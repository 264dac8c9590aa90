"""Tests for the todo API client against the scripted mock server."""

from __future__ import annotations

import json

import httpx
import pydantic
import pytest

from todoapiclient.client import TodoApiClient, classify_status
from todoapiclient.exceptions import (
    ErrorKind,
    ItemNotFoundError,
    ServerError,
    TodoApiClientError,
    TransportError,
    UnknownError,
)
from todoapiclient.models import RequestConfig, TaskDto


ANY_TASK = TaskDto(id="1", user_id="1", title="Finish this kata", finished=False)
UPDATED_TASK = TaskDto(id="201", user_id="1", title="Finish this kata", finished=True)


def _assert_first_task(task: TaskDto) -> None:
    assert task.id == "1"
    assert task.user_id == "1"
    assert task.title == "delectus aut autem"
    assert task.finished is False


# ---------------------------------------------------------------------------
# Status classification
# ---------------------------------------------------------------------------


class TestClassifyStatus:
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_2xx_is_success(self, status: int) -> None:
        assert classify_status(status) is None

    def test_404_is_not_found(self) -> None:
        assert classify_status(404) is ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("status", [500, 502, 503, 599])
    def test_5xx_is_server_error(self, status: int) -> None:
        assert classify_status(status) is ErrorKind.SERVER_ERROR

    @pytest.mark.parametrize("status", [100, 304, 400, 401, 409, 418, 429])
    def test_everything_else_is_unknown(self, status: int) -> None:
        assert classify_status(status) is ErrorKind.UNKNOWN_ERROR


# ---------------------------------------------------------------------------
# get_all_tasks
# ---------------------------------------------------------------------------


class TestGetAllTasks:
    def test_returns_the_tasks_when_the_response_is_parsed(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, fixture="getTasksResponse.json")

        tasks = api_client.get_all_tasks()

        assert len(tasks) == 200
        _assert_first_task(tasks[0])

    def test_preserves_server_order(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, fixture="getTasksResponse.json")

        tasks = api_client.get_all_tasks()

        assert [t.id for t in tasks] == [str(i) for i in range(1, 201)]
        assert tasks[-1].user_id == "10"

    def test_sends_get_to_todos(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, body=[])

        api_client.get_all_tasks()

        request = mock_server.assert_request_sent("GET", "/todos")
        assert request.headers["accept"] == "application/json"
        assert request.content == b""

    def test_empty_array_gives_empty_list(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, body=[])
        assert api_client.get_all_tasks() == []

    def test_418_is_unknown_error(self, mock_server, api_client) -> None:
        mock_server.enqueue(418)

        with pytest.raises(UnknownError) as exc_info:
            api_client.get_all_tasks()
        assert exc_info.value.status_code == 418
        assert exc_info.value.kind is ErrorKind.UNKNOWN_ERROR

    def test_500_is_server_error(self, mock_server, api_client) -> None:
        mock_server.enqueue(500)

        with pytest.raises(ServerError) as exc_info:
            api_client.get_all_tasks()
        assert exc_info.value.status_code == 500

    def test_object_body_is_malformed(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, fixture="getTaskByIdResponse.json")

        with pytest.raises(TransportError, match="expected a JSON array") as exc_info:
            api_client.get_all_tasks()
        assert exc_info.value.__cause__ is None

    def test_incomplete_item_is_malformed(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, body=[{"id": 1, "userId": 1, "title": "no flag"}])

        with pytest.raises(TransportError) as exc_info:
            api_client.get_all_tasks()
        assert exc_info.value.__cause__ is not None


# ---------------------------------------------------------------------------
# get_task_by_id
# ---------------------------------------------------------------------------


class TestGetTaskById:
    def test_parses_the_task(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, fixture="getTaskByIdResponse.json")

        task = api_client.get_task_by_id("1")

        _assert_first_task(task)

    def test_sends_get_to_task_path(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, fixture="getTaskByIdResponse.json")

        api_client.get_task_by_id("1")

        mock_server.assert_request_sent("GET", "/todos/1")

    def test_same_call_twice_gives_identical_results(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, fixture="getTaskByIdResponse.json")
        mock_server.enqueue(200, fixture="getTaskByIdResponse.json")

        first = api_client.get_task_by_id("1")
        second = api_client.get_task_by_id("1")

        assert first == second
        assert len(mock_server.requests) == 2

    def test_id_is_encoded_as_one_segment(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, fixture="getTaskByIdResponse.json")

        api_client.get_task_by_id("a/b")

        request = mock_server.take_request()
        assert request.url.raw_path == b"/todos/a%2Fb"

    def test_404_is_item_not_found(self, mock_server, api_client) -> None:
        mock_server.enqueue(404)

        with pytest.raises(ItemNotFoundError) as exc_info:
            api_client.get_task_by_id("1")
        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert not isinstance(exc_info.value, ServerError)

    def test_418_is_unknown_error(self, mock_server, api_client) -> None:
        mock_server.enqueue(418)

        with pytest.raises(UnknownError):
            api_client.get_task_by_id("1")

    def test_500_is_server_error(self, mock_server, api_client) -> None:
        mock_server.enqueue(500)

        with pytest.raises(ServerError):
            api_client.get_task_by_id("1")

    def test_error_message_includes_body_detail(self, mock_server, api_client) -> None:
        mock_server.enqueue(500, body={"message": "database unavailable"})

        with pytest.raises(ServerError, match="HTTP 500: database unavailable"):
            api_client.get_task_by_id("1")

    def test_non_json_body_is_malformed(self, base_endpoint) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="<html>oops</html>")
        )

        with TodoApiClient(base_endpoint, transport=transport) as client:
            with pytest.raises(TransportError) as exc_info:
                client.get_task_by_id("1")
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_attribute_names_in_body_are_malformed(self, mock_server, api_client) -> None:
        mock_server.enqueue(
            200, body={"id": 1, "user_id": 1, "title": "t", "finished": True}
        )

        with pytest.raises(TransportError) as exc_info:
            api_client.get_task_by_id("1")
        assert isinstance(exc_info.value.__cause__, pydantic.ValidationError)


# ---------------------------------------------------------------------------
# add_task
# ---------------------------------------------------------------------------


class TestAddTask:
    def test_sends_post_with_task_body(self, mock_server, api_client) -> None:
        mock_server.enqueue(201, fixture="addTaskResponse.json")

        api_client.add_task(ANY_TASK)

        request = mock_server.assert_request_sent(
            "POST", "/todos", body_fixture="addTaskRequest.json"
        )
        assert request.headers["content-type"] == "application/json"

    def test_returns_echoed_task(self, mock_server, api_client) -> None:
        mock_server.enqueue(201, fixture="addTaskResponse.json")

        created = api_client.add_task(ANY_TASK)

        assert created == TaskDto(
            id="201", user_id="1", title="Finish this kata", finished=False
        )

    def test_empty_body_still_succeeds(self, mock_server, api_client) -> None:
        mock_server.enqueue(204)
        assert api_client.add_task(ANY_TASK) is None

    def test_partial_body_still_succeeds(self, mock_server, api_client) -> None:
        mock_server.enqueue(201, body={"id": 201})
        assert api_client.add_task(ANY_TASK) is None

    def test_418_is_unknown_error(self, mock_server, api_client) -> None:
        mock_server.enqueue(418)

        with pytest.raises(UnknownError):
            api_client.add_task(ANY_TASK)

    def test_500_is_server_error(self, mock_server, api_client) -> None:
        mock_server.enqueue(500)

        with pytest.raises(ServerError):
            api_client.add_task(ANY_TASK)


# ---------------------------------------------------------------------------
# update_task
# ---------------------------------------------------------------------------


class TestUpdateTask:
    def test_sends_put_to_task_path_with_body(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, fixture="updateTaskResponse.json")

        api_client.update_task(UPDATED_TASK)

        mock_server.assert_request_sent(
            "PUT", "/todos/201", body_fixture="updateTaskRequest.json"
        )

    def test_returns_echoed_task(self, mock_server, api_client) -> None:
        mock_server.enqueue(200, fixture="updateTaskResponse.json")
        assert api_client.update_task(UPDATED_TASK) == UPDATED_TASK

    def test_404_is_item_not_found(self, mock_server, api_client) -> None:
        mock_server.enqueue(404)

        with pytest.raises(ItemNotFoundError):
            api_client.update_task(UPDATED_TASK)

    def test_418_is_unknown_error(self, mock_server, api_client) -> None:
        mock_server.enqueue(418)

        with pytest.raises(UnknownError):
            api_client.update_task(UPDATED_TASK)

    def test_500_is_server_error(self, mock_server, api_client) -> None:
        mock_server.enqueue(500)

        with pytest.raises(ServerError):
            api_client.update_task(UPDATED_TASK)


# ---------------------------------------------------------------------------
# delete_task_by_id
# ---------------------------------------------------------------------------


class TestDeleteTaskById:
    def test_sends_delete_to_task_path(self, mock_server, api_client) -> None:
        mock_server.enqueue(200)

        assert api_client.delete_task_by_id("2") is None

        request = mock_server.assert_request_sent("DELETE", "/todos/2")
        assert request.content == b""

    def test_404_is_item_not_found(self, mock_server, api_client) -> None:
        mock_server.enqueue(404)

        with pytest.raises(ItemNotFoundError):
            api_client.delete_task_by_id("2")

    def test_500_is_server_error(self, mock_server, api_client) -> None:
        mock_server.enqueue(500)

        with pytest.raises(ServerError) as exc_info:
            api_client.delete_task_by_id("2")
        assert not isinstance(exc_info.value, (ItemNotFoundError, UnknownError))


# ---------------------------------------------------------------------------
# Transport failures and lifecycle
# ---------------------------------------------------------------------------


class TestTransportFailures:
    def test_connection_error_is_wrapped(self, mock_server, api_client) -> None:
        cause = httpx.ConnectError("Connection refused")
        mock_server.enqueue_error(cause)

        with pytest.raises(TransportError) as exc_info:
            api_client.get_all_tasks()
        assert exc_info.value.__cause__ is cause
        assert exc_info.value.kind is ErrorKind.TRANSPORT

    def test_timeout_is_wrapped(self, mock_server, api_client) -> None:
        mock_server.enqueue_error(httpx.ReadTimeout("timed out"))

        with pytest.raises(TransportError):
            api_client.delete_task_by_id("2")

    def test_no_retry_after_failure(self, mock_server, api_client) -> None:
        mock_server.enqueue(503)

        with pytest.raises(ServerError):
            api_client.get_all_tasks()
        assert len(mock_server.requests) == 1

    def test_all_errors_share_base_class(self, mock_server, api_client) -> None:
        mock_server.enqueue(404)

        with pytest.raises(TodoApiClientError):
            api_client.get_task_by_id("1")


class TestClientLifecycle:
    def test_base_path_is_preserved(self, mock_server) -> None:
        mock_server.enqueue(200, body=[])

        with TodoApiClient("http://todo.test/api/", transport=mock_server.transport) as client:
            assert client.base_endpoint == "http://todo.test/api"
            client.get_all_tasks()

        mock_server.assert_request_sent("GET", "/api/todos")

    def test_closed_client_raises_transport_error(self, mock_server) -> None:
        client = TodoApiClient("http://todo.test", transport=mock_server.transport)
        client.close()
        client.close()

        with pytest.raises(TransportError, match="closed") as exc_info:
            client.get_all_tasks()
        assert exc_info.value.__cause__ is None
        assert mock_server.requests == []

    def test_request_config_timeout_is_applied(self) -> None:
        seen: dict[str, object] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.extensions["timeout"])
            return httpx.Response(200, json=[])

        client = TodoApiClient(
            "http://todo.test",
            request=RequestConfig(timeout=2.5),
            transport=httpx.MockTransport(handler),
        )
        client.get_all_tasks()
        client.close()

        assert seen["read"] == 2.5

    def test_body_is_compact_json(self, mock_server, api_client) -> None:
        mock_server.enqueue(201)

        api_client.add_task(ANY_TASK)

        body = mock_server.take_request().content
        assert json.loads(body) == {
            "id": "1",
            "userId": "1",
            "title": "Finish this kata",
            "completed": False,
        }
        assert b" " not in body.replace(b"Finish this kata", b"")

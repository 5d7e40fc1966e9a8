import json
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest
import requests

from models import ChecklistItem, Project, Task
from services.api_client import HttpGateway
from services.gateway import GatewayError, PersistenceGateway, TaskNotFoundError


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None, reason="OK"):
        self.status_code = status_code
        self._body = body
        self.reason = reason
        if text is not None:
            self.text = text
        elif body is None:
            self.text = ""
        else:
            self.text = json.dumps(body)
        self.content = self.text.encode("utf-8")

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body


class FakeSession:
    """Records requests and replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json, timeout))
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


TASK_WIRE = {
    "id": "t1",
    "projectId": "p1",
    "title": "Bake cookies",
    "date": "2024-12-07T00:00:00.000Z",
    "startTime": "09:00",
    "endTime": "11:00",
    "checklist": [{"id": "c1", "text": "flour", "completed": True}],
    "contentIdeas": [{"id": "i1", "type": "video", "text": "timelapse"}],
    "completed": False,
}


def _gateway(*responses):
    session = FakeSession(*responses)
    return HttpGateway("http://api.test/", session=session, timeout=3), session


def test_satisfies_gateway_protocol():
    gateway, _ = _gateway()
    assert isinstance(gateway, PersistenceGateway)


def test_list_tasks_parses_camel_case_and_iso_dates():
    gateway, session = _gateway(FakeResponse(body=[TASK_WIRE]))
    tasks = gateway.list_tasks()
    assert session.calls == [("GET", "http://api.test/tasks", None, 3)]
    assert len(tasks) == 1
    task = tasks[0]
    assert task.project_id == "p1"
    assert task.date.isoformat() == "2024-12-07"
    assert task.checklist[0].completed
    assert task.content_ideas[0].type == "video"


def test_list_skips_invalid_records():
    broken = dict(TASK_WIRE, id="t2", startTime="12:00", endTime="11:00")
    gateway, _ = _gateway(FakeResponse(body=[TASK_WIRE, broken]))
    assert [t.id for t in gateway.list_tasks()] == ["t1"]


def test_create_task_sends_wire_payload():
    task = Task(
        project_id="p1",
        title="Wrap gifts",
        date="2024-12-20",
        start_time="18:00",
        end_time="19:30",
        checklist=[ChecklistItem(text="tape")],
    )
    gateway, session = _gateway(FakeResponse(body=task.to_wire()))
    created = gateway.create_task(task)
    method, url, payload, _ = session.calls[0]
    assert (method, url) == ("POST", "http://api.test/tasks")
    assert payload["projectId"] == "p1"
    assert payload["startTime"] == "18:00"
    assert payload["date"] == "2024-12-20"
    assert payload["checklist"][0]["text"] == "tape"
    assert created.id == task.id


def test_update_missing_task_raises_not_found():
    task = Task.model_validate(TASK_WIRE)
    gateway, session = _gateway(FakeResponse(404, body={"error": "Task not found"}, reason="Not Found"))
    with pytest.raises(TaskNotFoundError):
        gateway.update_task(task)
    assert session.calls[0][:2] == ("PUT", "http://api.test/tasks/t1")


def test_http_errors_carry_server_message():
    gateway, _ = _gateway(FakeResponse(500, body={"error": "disk full"}, reason="Server Error"))
    with pytest.raises(GatewayError, match="disk full"):
        gateway.create_project(Project(name="Decor", color="#eab308"))


def test_transport_errors_become_gateway_errors():
    gateway, _ = _gateway(requests.ConnectionError("refused"))
    with pytest.raises(GatewayError):
        gateway.list_projects()


def test_delete_accepts_success_body_and_empty_body():
    gateway, session = _gateway(FakeResponse(body={"success": True}), FakeResponse(body=None))
    gateway.delete_task("t1")
    gateway.delete_project("p1")
    assert [c[:2] for c in session.calls] == [
        ("DELETE", "http://api.test/tasks/t1"),
        ("DELETE", "http://api.test/projects/p1"),
    ]


def test_non_list_payload_is_an_error():
    gateway, _ = _gateway(FakeResponse(body={"oops": 1}))
    with pytest.raises(GatewayError):
        gateway.list_projects()


@pytest.mark.parametrize(
    "call",
    [
        lambda gw: gw.create_task(Task.model_validate(TASK_WIRE)),
        lambda gw: gw.update_task(Task.model_validate(TASK_WIRE)),
        lambda gw: gw.create_project(Project(name="Decor", color="#eab308")),
    ],
)
def test_invalid_write_reply_becomes_gateway_error(call):
    gateway, _ = _gateway(FakeResponse(body={"ok": True}))
    with pytest.raises(GatewayError, match="invalid"):
        call(gateway)


def test_planner_keeps_task_when_backend_reply_is_invalid():
    from services.planner import PlannerState

    gateway, session = _gateway(FakeResponse(body={"ok": True}))
    state = PlannerState(gateway)
    created = state.create_task(dict(TASK_WIRE, id="t9"))
    assert created is not None
    assert [t.id for t in state.tasks] == ["t9"]
    assert session.calls[0][:2] == ("POST", "http://api.test/tasks")

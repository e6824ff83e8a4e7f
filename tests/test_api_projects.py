"""Tests for project, timer and session endpoints."""

from collections.abc import Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from billtick.api.app import create_app
from billtick.containers import AppContainer
from tests.conftest import FailingRepository, FakeClock


@pytest.fixture
def client(container: AppContainer) -> Iterator[TestClient]:
    with TestClient(create_app(container)) as test_client:
        yield test_client


def _create(
    client: TestClient, name: str = "Website Redesign", **extra: object
) -> dict[str, object]:
    response = client.post("/projects", json={"name": name, **extra})
    assert response.status_code == 201
    return response.json()


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_create_and_list_projects(client: TestClient) -> None:
    created = _create(client, notes="Acme Corp", rate=45)

    response = client.get("/projects")

    assert response.status_code == 200
    (listed,) = response.json()["projects"]
    assert listed["id"] == created["id"]
    assert listed["name"] == "Website Redesign"
    assert listed["rate"] == 45
    assert listed["resolved_rate"] == 45
    assert listed["running"] is False
    assert listed["elapsed"] == "00:00:00"
    assert listed["earnings_display"] == "$0.00"


def test_create_project_with_blank_name_is_422(client: TestClient) -> None:
    response = client.post("/projects", json={"name": "   "})

    assert response.status_code == 422
    assert response.json()["reason"] == "empty_name"


def test_create_project_with_negative_rate_is_422(client: TestClient) -> None:
    response = client.post("/projects", json={"name": "Audit", "rate": -1})

    assert response.status_code == 422
    assert response.json()["reason"] == "negative_rate"


def test_start_stop_records_session(client: TestClient, clock: FakeClock) -> None:
    project_id = _create(client)["id"]

    started = client.post(f"/projects/{project_id}/start").json()
    clock.advance(milliseconds=125000)
    running = client.get(f"/projects/{project_id}").json()
    stopped = client.post(f"/projects/{project_id}/stop").json()

    assert started["running"] is True
    assert running["live_seconds"] == 125
    assert running["completed_seconds"] == 0
    assert stopped["session"]["duration_seconds"] == 125
    assert stopped["session"]["duration"] == "00:02:05"
    assert stopped["project"]["running"] is False
    assert stopped["project"]["completed_seconds"] == 125


def test_stop_when_stopped_returns_no_session(client: TestClient) -> None:
    project_id = _create(client)["id"]

    response = client.post(f"/projects/{project_id}/stop")

    assert response.status_code == 200
    assert response.json()["session"] is None


def test_unknown_project_is_404(client: TestClient) -> None:
    missing = uuid4()

    assert client.get(f"/projects/{missing}").status_code == 404
    assert client.post(f"/projects/{missing}/start").status_code == 404
    assert client.delete(f"/projects/{missing}").status_code == 404
    assert client.get(f"/projects/{missing}/sessions").status_code == 404


def test_edit_and_delete_session(client: TestClient, clock: FakeClock) -> None:
    project_id = _create(client, rate=3600)["id"]
    client.post(f"/projects/{project_id}/start")
    clock.advance(seconds=600)
    session_id = client.post(f"/projects/{project_id}/stop").json()["session"]["id"]

    edited = client.patch(
        f"/projects/{project_id}/sessions/{session_id}",
        json={"duration_seconds": 900, "notes": "  Homepage  "},
    ).json()["session"]
    project = client.get(f"/projects/{project_id}").json()

    assert edited["duration_seconds"] == 900
    assert edited["notes"] == "Homepage"
    assert project["completed_seconds"] == 900
    assert project["earnings"] == 900

    deleted = client.delete(f"/projects/{project_id}/sessions/{session_id}").json()
    sessions = client.get(f"/projects/{project_id}/sessions").json()["sessions"]

    assert deleted == {"deleted": True}
    assert sessions == []


def test_negative_session_duration_is_422(
    client: TestClient, clock: FakeClock
) -> None:
    project_id = _create(client)["id"]
    client.post(f"/projects/{project_id}/start")
    clock.advance(seconds=60)
    session_id = client.post(f"/projects/{project_id}/stop").json()["session"]["id"]

    response = client.patch(
        f"/projects/{project_id}/sessions/{session_id}",
        json={"duration_seconds": -5},
    )

    assert response.status_code == 422
    assert response.json()["reason"] == "negative_duration"


def test_sessions_are_listed_newest_first(
    client: TestClient, clock: FakeClock
) -> None:
    project_id = _create(client)["id"]
    for seconds in (10, 20, 30):
        client.post(f"/projects/{project_id}/start")
        clock.advance(seconds=seconds)
        client.post(f"/projects/{project_id}/stop")

    sessions = client.get(f"/projects/{project_id}/sessions").json()["sessions"]

    assert [session["duration_seconds"] for session in sessions] == [30, 20, 10]


def test_project_rate_override_and_default_rate(client: TestClient) -> None:
    project_id = _create(client)["id"]

    overridden = client.put(f"/projects/{project_id}/rate", json={"rate": 80}).json()
    cleared = client.put(f"/projects/{project_id}/rate", json={"rate": None}).json()
    default = client.put("/settings/rate", json={"rate": 35})

    assert overridden["resolved_rate"] == 80
    assert cleared["rate"] is None
    assert cleared["resolved_rate"] == 20
    assert default.json() == {"default_rate": 35}
    assert client.get("/summary").json()["default_rate"] == 35
    assert client.put("/settings/rate", json={"rate": -1}).status_code == 422


def test_delete_project(client: TestClient) -> None:
    project_id = _create(client)["id"]

    assert client.delete(f"/projects/{project_id}").status_code == 204
    assert client.get("/projects").json() == {"projects": []}


def test_summary_totals_across_projects(client: TestClient, clock: FakeClock) -> None:
    first = _create(client, "First", rate=100)["id"]
    second = _create(client, "Second")["id"]
    for project_id in (first, second):
        client.post(f"/projects/{project_id}/start")
    clock.advance(seconds=3600)
    client.post(f"/projects/{first}/stop")
    client.post(f"/projects/{second}/stop")

    summary = client.get("/summary").json()

    assert summary["tracked_seconds"] == 7200
    assert summary["tracked"] == "02:00:00"
    assert summary["earnings"] == pytest.approx(120.0)
    assert summary["earnings_display"] == "$120.00"


def test_persistence_failure_is_503_and_state_unchanged(
    client: TestClient, repository: FailingRepository
) -> None:
    project_id = _create(client)["id"]
    repository.fail_writes = True

    response = client.post(f"/projects/{project_id}/start")

    assert response.status_code == 503
    assert "start timer" in response.json()["detail"]
    repository.fail_writes = False
    assert client.get(f"/projects/{project_id}").json()["running"] is False


def test_display_board_reports_projects(client: TestClient) -> None:
    _create(client)

    board = client.get("/display").json()

    assert board["ticks"] >= 1
    assert isinstance(board["projects"], list)


def test_startup_loads_persisted_projects(
    container: AppContainer, repository: FailingRepository
) -> None:
    record = repository.create_project("Persisted", "", None)

    with TestClient(create_app(container)) as test_client:
        projects = test_client.get("/projects").json()["projects"]

    assert [project["id"] for project in projects] == [str(record.id)]


def test_failed_session_patch_changes_nothing(
    client: TestClient, clock: FakeClock, repository: FailingRepository
) -> None:
    project_id = _create(client)["id"]
    client.post(f"/projects/{project_id}/start")
    clock.advance(seconds=600)
    session_id = client.post(f"/projects/{project_id}/stop").json()["session"]["id"]
    repository.fail_note_changes = True

    response = client.patch(
        f"/projects/{project_id}/sessions/{session_id}",
        json={"duration_seconds": 900, "notes": "x"},
    )

    assert response.status_code == 503
    project = client.get(f"/projects/{project_id}").json()
    assert project["completed_seconds"] == 600
    (session,) = client.get(f"/projects/{project_id}/sessions").json()["sessions"]
    assert (session["duration_seconds"], session["notes"]) == (600, "")


def test_non_finite_default_rate_is_422(client: TestClient) -> None:
    response = client.put(
        "/settings/rate",
        content='{"rate": NaN}',
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json()["reason"] == "invalid_rate"
    assert client.get("/summary").json()["default_rate"] == 20

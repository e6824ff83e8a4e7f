"""Project, timer and session endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, Response, status

from billtick.api.schemas import (
    ProjectCreate,
    ProjectRateUpdate,
    SessionUpdate,
    serialize_project,
    serialize_session,
)
from billtick.services import earnings

if TYPE_CHECKING:
    from billtick.containers import AppContainer
    from billtick.domain.models import Project
    from billtick.services.timers import TimerService

router = APIRouter(prefix="/projects", tags=["projects"])


def _timer_service(request: Request) -> TimerService:
    container: AppContainer = request.app.state.container
    return container.timer_service


def _require_project(service: TimerService, project_id: UUID) -> Project:
    project = service.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return project


def _project_view(service: TimerService, project: Project) -> dict[str, object]:
    summary = earnings.project_summary(project, service.rates, service.now())
    return serialize_project(project, summary)


@router.get("")
async def list_projects(request: Request) -> dict[str, object]:
    """Return every project with its live values."""
    service = _timer_service(request)
    return {
        "projects": [
            _project_view(service, project) for project in service.list_projects()
        ]
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(payload: ProjectCreate, request: Request) -> dict[str, object]:
    """Create a stopped project."""
    service = _timer_service(request)
    project = service.create_project(payload.name, payload.notes, payload.rate)
    return _project_view(service, project)


@router.get("/{project_id}")
async def get_project(project_id: UUID, request: Request) -> dict[str, object]:
    """Return a single project."""
    service = _timer_service(request)
    return _project_view(service, _require_project(service, project_id))


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: UUID, request: Request) -> Response:
    """Delete a project and its sessions."""
    service = _timer_service(request)
    if not service.delete_project(project_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{project_id}/rate")
async def set_project_rate(
    project_id: UUID, payload: ProjectRateUpdate, request: Request
) -> dict[str, object]:
    """Set or clear the project's rate override."""
    service = _timer_service(request)
    _require_project(service, project_id)
    project = service.set_project_rate(project_id, payload.rate)
    return _project_view(service, project)


@router.post("/{project_id}/start")
async def start_timer(project_id: UUID, request: Request) -> dict[str, object]:
    """Start the project's timer."""
    service = _timer_service(request)
    _require_project(service, project_id)
    project = service.start(project_id)
    return _project_view(service, project)


@router.post("/{project_id}/stop")
async def stop_timer(project_id: UUID, request: Request) -> dict[str, object]:
    """Stop the project's timer and return the recorded session."""
    service = _timer_service(request)
    project = _require_project(service, project_id)
    session = service.stop(project_id)
    return {
        "project": _project_view(service, project),
        "session": serialize_session(session) if session else None,
    }


@router.get("/{project_id}/sessions")
async def list_sessions(project_id: UUID, request: Request) -> dict[str, object]:
    """Return the project's sessions, newest first."""
    service = _timer_service(request)
    _require_project(service, project_id)
    return {
        "sessions": [
            serialize_session(session) for session in service.sessions(project_id)
        ]
    }


@router.patch("/{project_id}/sessions/{session_id}")
async def update_session(
    project_id: UUID, session_id: UUID, payload: SessionUpdate, request: Request
) -> dict[str, object]:
    """Edit a session's duration and/or notes."""
    service = _timer_service(request)
    _require_project(service, project_id)
    session = service.edit_session(
        project_id,
        session_id,
        duration_seconds=payload.duration_seconds,
        notes=payload.notes,
    )
    return {"session": serialize_session(session) if session else None}


@router.delete("/{project_id}/sessions/{session_id}")
async def delete_session(
    project_id: UUID, session_id: UUID, request: Request
) -> dict[str, object]:
    """Delete a session permanently."""
    service = _timer_service(request)
    _require_project(service, project_id)
    deleted = service.delete_session(project_id, session_id)
    return {"deleted": deleted is not None}

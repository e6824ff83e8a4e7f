"""Owned timer and ledger state for all projects.

``TimerService`` is the single entry point for mutating projects and their
sessions. Every change is written to the repositories first and applied to
memory only once the write succeeds, so a failed write leaves the in-memory
state untouched.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from billtick.domain import timekeeper
from billtick.domain.ledger import SessionLedger, edited_session, validate_duration
from billtick.domain.models import (
    ActiveTimer,
    Project,
    ProjectRecord,
    RateConfig,
    SessionRecord,
    validate_name,
    validate_rate,
)
from billtick.services import earnings
from billtick.services.earnings import OverallSummary, ProjectSummary

logger = logging.getLogger(__name__)


class ProjectRepository(Protocol):
    """Persistence interface for projects."""

    def list_projects(self) -> list[ProjectRecord]:
        """Return all projects, oldest first."""

    def create_project(
        self, name: str, notes: str, rate: float | None
    ) -> ProjectRecord:
        """Create a project and return it."""

    def delete_project(self, project_id: UUID) -> None:
        """Delete a project and all of its sessions."""

    def update_project_rate(self, project_id: UUID, rate: float | None) -> None:
        """Set or clear a project's rate override."""


class SessionRepository(Protocol):
    """Persistence interface for timers and completed sessions."""

    def list_sessions(self, project_id: UUID) -> list[SessionRecord]:
        """Return completed sessions for a project, oldest first."""

    def get_active_timer(self, project_id: UUID) -> ActiveTimer | None:
        """Return the open timer for a project, if any."""

    def record_timer_start(self, project_id: UUID, started_at: datetime) -> UUID:
        """Record an open timer and return its id."""

    def record_timer_stop(self, session: SessionRecord) -> SessionRecord:
        """Close the timer as a completed session and return it."""

    def update_session(self, session: SessionRecord) -> None:
        """Persist a session's duration and notes."""

    def delete_session(self, session_id: UUID) -> None:
        """Delete a completed session."""


def utc_now() -> datetime:
    """Return the current aware UTC time."""
    return datetime.now(tz=UTC)


@dataclass
class TimerService:
    """Projects keyed by id, with their timers and ledgers."""

    project_repository: ProjectRepository
    session_repository: SessionRepository
    rates: RateConfig
    clock: Callable[[], datetime] = utc_now
    projects: dict[UUID, Project] = field(default_factory=dict)
    project_deleted_listeners: list[Callable[[UUID], object]] = field(
        default_factory=list
    )

    def load(self) -> list[Project]:
        """Replace in-memory state with the contents of the repositories."""
        loaded: dict[UUID, Project] = {}
        for record in self.project_repository.list_projects():
            project = Project.from_record(record)
            project.ledger = SessionLedger(
                self.session_repository.list_sessions(record.id)
            )
            active = self.session_repository.get_active_timer(record.id)
            if active is not None:
                timekeeper.start(project, active.started_at, active.id)
            loaded[record.id] = project
        self.projects = loaded
        logger.info("Loaded %d projects", len(loaded))
        return self.list_projects()

    def now(self) -> datetime:
        """Return the service clock's current time."""
        return self.clock()

    def list_projects(self) -> list[Project]:
        """Return projects in creation order."""
        return list(self.projects.values())

    def get_project(self, project_id: UUID) -> Project | None:
        """Return a project by id, if present."""
        return self.projects.get(project_id)

    def create_project(
        self, name: str, notes: str = "", rate: float | None = None
    ) -> Project:
        """Validate and create a new stopped project."""
        cleaned = validate_name(name)
        if rate is not None:
            validate_rate(rate)
        record = self.project_repository.create_project(
            name=cleaned, notes=notes.strip(), rate=rate
        )
        project = Project.from_record(record)
        self.projects[project.id] = project
        logger.info("Created project %s", project.id)
        return project

    def delete_project(self, project_id: UUID) -> bool:
        """Delete a project and its sessions; unknown ids are ignored."""
        if project_id not in self.projects:
            return False
        self.project_repository.delete_project(project_id)
        self.projects.pop(project_id)
        for listener in self.project_deleted_listeners:
            listener(project_id)
        logger.info("Deleted project %s", project_id)
        return True

    def set_project_rate(self, project_id: UUID, rate: float | None) -> Project | None:
        """Set or clear a project's rate override."""
        if rate is not None:
            validate_rate(rate)
        project = self.projects.get(project_id)
        if project is None:
            return None
        self.project_repository.update_project_rate(project_id, rate)
        project.rate = rate
        return project

    def set_default_rate(self, rate: float) -> RateConfig:
        """Change the global default rate."""
        self.rates = RateConfig(default_rate=rate)
        return self.rates

    def start(self, project_id: UUID) -> Project | None:
        """Start a project's timer; a running timer keeps its start instant."""
        project = self.projects.get(project_id)
        if project is None or project.running:
            return project
        now = self.now()
        timer_id = self.session_repository.record_timer_start(project_id, now)
        timekeeper.start(project, now, timer_id)
        logger.info("Started timer for project %s", project_id)
        return project

    def stop(self, project_id: UUID) -> SessionRecord | None:
        """Stop a running timer and record the completed session."""
        project = self.projects.get(project_id)
        if project is None:
            return None
        pending = timekeeper.pending_session(project, self.now())
        if pending is None:
            return None
        session = self.session_repository.record_timer_stop(pending)
        timekeeper.mark_stopped(project)
        project.ledger.append(session)
        logger.info(
            "Stopped timer for project %s after %d seconds",
            project_id,
            session.duration_seconds,
        )
        return session

    def live_elapsed(self, project_id: UUID) -> int:
        """Seconds in the project's open interval, 0 when stopped."""
        project = self.projects.get(project_id)
        if project is None:
            return 0
        return timekeeper.live_elapsed(project, self.now())

    def sessions(self, project_id: UUID) -> list[SessionRecord]:
        """Return a project's sessions newest first."""
        project = self.projects.get(project_id)
        if project is None:
            return []
        return project.ledger.most_recent_first()

    def edit_session(
        self,
        project_id: UUID,
        session_id: UUID,
        *,
        duration_seconds: int | None = None,
        notes: str | None = None,
    ) -> SessionRecord | None:
        """Replace a session's duration and/or notes with a single write."""
        if duration_seconds is not None:
            validate_duration(duration_seconds)
        project, current = self._find_session(project_id, session_id)
        if project is None or current is None:
            return None
        if duration_seconds is None and notes is None:
            return current
        self.session_repository.update_session(
            edited_session(current, duration_seconds=duration_seconds, notes=notes)
        )
        return project.ledger.edit(
            session_id, duration_seconds=duration_seconds, notes=notes
        )

    def edit_session_duration(
        self, project_id: UUID, session_id: UUID, seconds: int
    ) -> SessionRecord | None:
        """Replace a session's duration in whole seconds."""
        return self.edit_session(project_id, session_id, duration_seconds=seconds)

    def edit_session_notes(
        self, project_id: UUID, session_id: UUID, text: str
    ) -> SessionRecord | None:
        """Replace a session's notes."""
        return self.edit_session(project_id, session_id, notes=text)

    def delete_session(
        self, project_id: UUID, session_id: UUID
    ) -> SessionRecord | None:
        """Delete a session permanently."""
        project, current = self._find_session(project_id, session_id)
        if project is None or current is None:
            return None
        self.session_repository.delete_session(session_id)
        return project.ledger.delete(session_id)

    def summaries(self) -> list[ProjectSummary]:
        """Return a summary for every project at the current time."""
        now = self.now()
        return [
            earnings.project_summary(project, self.rates, now)
            for project in self.projects.values()
        ]

    def overall(self) -> OverallSummary:
        """Return totals across all projects at the current time."""
        return earnings.overall_summary(self.projects.values(), self.rates, self.now())

    def _find_session(
        self, project_id: UUID, session_id: UUID
    ) -> tuple[Project | None, SessionRecord | None]:
        project = self.projects.get(project_id)
        if project is None:
            return None, None
        return project, project.ledger.get(session_id)

"""In-memory project and session storage used without Supabase."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

from billtick.domain.models import ActiveTimer, ProjectRecord, SessionRecord
from billtick.services.timers import ProjectRepository, SessionRepository


@dataclass
class InMemoryRepository(ProjectRepository, SessionRepository):
    """Process-local storage for projects, timers and sessions."""

    projects: dict[UUID, ProjectRecord] = field(default_factory=dict)
    timers: dict[UUID, ActiveTimer] = field(default_factory=dict)
    sessions: dict[UUID, SessionRecord] = field(default_factory=dict)

    def list_projects(self) -> list[ProjectRecord]:
        return sorted(self.projects.values(), key=lambda record: record.created_at)

    def create_project(
        self, name: str, notes: str, rate: float | None
    ) -> ProjectRecord:
        record = ProjectRecord(
            id=uuid4(),
            name=name,
            notes=notes,
            rate=rate,
            created_at=datetime.now(tz=UTC),
        )
        self.projects[record.id] = record
        return record

    def delete_project(self, project_id: UUID) -> None:
        self.projects.pop(project_id, None)
        self.timers = {
            key: timer
            for key, timer in self.timers.items()
            if timer.project_id != project_id
        }
        self.sessions = {
            key: session
            for key, session in self.sessions.items()
            if session.project_id != project_id
        }

    def update_project_rate(self, project_id: UUID, rate: float | None) -> None:
        current = self.projects.get(project_id)
        if current is not None:
            self.projects[project_id] = replace(current, rate=rate)

    def list_sessions(self, project_id: UUID) -> list[SessionRecord]:
        return [
            session
            for session in self.sessions.values()
            if session.project_id == project_id
        ]

    def get_active_timer(self, project_id: UUID) -> ActiveTimer | None:
        for timer in self.timers.values():
            if timer.project_id == project_id:
                return timer
        return None

    def record_timer_start(self, project_id: UUID, started_at: datetime) -> UUID:
        timer = ActiveTimer(id=uuid4(), project_id=project_id, started_at=started_at)
        self.timers[timer.id] = timer
        return timer.id

    def record_timer_stop(self, session: SessionRecord) -> SessionRecord:
        self.timers.pop(session.id, None)
        self.sessions[session.id] = session
        return session

    def update_session(self, session: SessionRecord) -> None:
        if session.id in self.sessions:
            self.sessions[session.id] = session

    def delete_session(self, session_id: UUID) -> None:
        self.sessions.pop(session_id, None)

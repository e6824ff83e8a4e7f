"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from billtick.adapters.memory_repository import InMemoryRepository
from billtick.config import Settings
from billtick.containers import AppContainer, assemble_container
from billtick.domain.accounts import AuthResult, AuthUser
from billtick.domain.errors import PersistenceError
from billtick.domain.models import (
    ActiveTimer,
    ProjectRecord,
    RateConfig,
    SessionRecord,
)
from billtick.services.accounts import AuthProvider
from billtick.services.timers import TimerService

T0 = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)


@dataclass
class FakeClock:
    """Manually advanced clock."""

    current: datetime = T0

    def __call__(self) -> datetime:
        return self.current

    def advance(self, *, seconds: float = 0, milliseconds: float = 0) -> datetime:
        self.current += timedelta(seconds=seconds, milliseconds=milliseconds)
        return self.current


@dataclass
class FailingRepository(InMemoryRepository):
    """In-memory repository whose writes can be made to fail."""

    fail_writes: bool = False
    fail_note_changes: bool = False

    def _check(self, action: str) -> None:
        if self.fail_writes:
            raise PersistenceError(f"Failed to {action}")

    def create_project(
        self, name: str, notes: str, rate: float | None
    ) -> ProjectRecord:
        self._check("create project")
        return super().create_project(name, notes, rate)

    def delete_project(self, project_id: UUID) -> None:
        self._check("delete project")
        super().delete_project(project_id)

    def update_project_rate(self, project_id: UUID, rate: float | None) -> None:
        self._check("update project rate")
        super().update_project_rate(project_id, rate)

    def record_timer_start(self, project_id: UUID, started_at: datetime) -> UUID:
        self._check("start timer")
        return super().record_timer_start(project_id, started_at)

    def record_timer_stop(self, session: SessionRecord) -> SessionRecord:
        self._check("stop timer")
        return super().record_timer_stop(session)

    def update_session(self, session: SessionRecord) -> None:
        self._check("update session")
        stored = self.sessions.get(session.id)
        if self.fail_note_changes and stored and stored.notes != session.notes:
            raise PersistenceError("Failed to update session notes")
        super().update_session(session)

    def delete_session(self, session_id: UUID) -> None:
        self._check("delete session")
        super().delete_session(session_id)


@dataclass
class FakeAuthProvider(AuthProvider):
    """Auth provider that accepts a single known account."""

    accounts: dict[str, str] = field(
        default_factory=lambda: {"ada@example.com": "secret"}
    )
    user: AuthUser | None = None
    reset_requests: list[str] = field(default_factory=list)

    def current_user(self) -> AuthUser | None:
        return self.user

    def sign_in(self, email: str, password: str) -> AuthResult:
        if self.accounts.get(email) != password:
            return AuthResult(ok=False, error="Invalid login credentials")
        self.user = AuthUser(id=str(uuid4()), email=email)
        return AuthResult(ok=True, user=self.user)

    def sign_up(self, email: str, password: str) -> AuthResult:
        self.accounts[email] = password
        return AuthResult(ok=True, user=AuthUser(id=str(uuid4()), email=email))

    def sign_out(self) -> AuthResult:
        self.user = None
        return AuthResult(ok=True)

    def request_password_reset(self, email: str) -> AuthResult:
        self.reset_requests.append(email)
        return AuthResult(ok=True, message="Password reset link sent to your email!")

    def complete_password_reset(self, new_password: str) -> AuthResult:
        if self.user is None:
            return AuthResult(ok=False, error="Auth session missing!")
        self.accounts[self.user.email or ""] = new_password
        return AuthResult(ok=True, user=self.user)


def make_session(
    duration_seconds: int,
    project_id: UUID | None = None,
    notes: str = "",
    started_at: datetime | None = T0,
) -> SessionRecord:
    """Build a completed session for ledger and invoice tests."""
    return SessionRecord(
        id=uuid4(),
        project_id=project_id or uuid4(),
        duration_seconds=duration_seconds,
        notes=notes,
        started_at=started_at,
        ended_at=started_at + timedelta(seconds=duration_seconds)
        if started_at
        else None,
    )


def make_active_timer(project_id: UUID, started_at: datetime = T0) -> ActiveTimer:
    return ActiveTimer(id=uuid4(), project_id=project_id, started_at=started_at)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        supabase_url=None,
        supabase_key=None,
        default_rate=20.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> FailingRepository:
    return FailingRepository()


@pytest.fixture
def timer_service(repository: FailingRepository, clock: FakeClock) -> TimerService:
    return TimerService(
        project_repository=repository,
        session_repository=repository,
        rates=RateConfig(default_rate=20.0),
        clock=clock,
    )


@pytest.fixture
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture
def container(
    settings: Settings,
    repository: FailingRepository,
    auth_provider: FakeAuthProvider,
    clock: FakeClock,
) -> AppContainer:
    built = assemble_container(settings, repository, repository, auth_provider)
    built.timer_service.clock = clock
    return built

"""Domain models for projects and their work sessions."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from billtick.domain.errors import ValidationError
from billtick.domain.ledger import SessionLedger


@dataclass(frozen=True)
class SessionRecord:
    """A completed, timed work interval belonging to a project."""

    id: UUID
    project_id: UUID
    duration_seconds: int
    notes: str
    started_at: datetime | None
    ended_at: datetime | None


@dataclass(frozen=True)
class ProjectRecord:
    """Represents a project row in the backing store."""

    id: UUID
    name: str
    notes: str
    rate: float | None
    created_at: datetime


@dataclass(frozen=True)
class ActiveTimer:
    """A timer that was started but not yet stopped."""

    id: UUID
    project_id: UUID
    started_at: datetime


@dataclass
class Project:
    """A billable unit of work with its timer state and session ledger.

    ``running_since`` is the only source of the running flag, so a project
    is running exactly when its start instant is set.
    """

    id: UUID
    name: str
    notes: str = ""
    rate: float | None = None
    created_at: datetime | None = None
    running_since: datetime | None = None
    timer_id: UUID | None = None
    ledger: SessionLedger = field(default_factory=SessionLedger)

    @property
    def running(self) -> bool:
        """Return True while a timer interval is open."""
        return self.running_since is not None

    @classmethod
    def from_record(cls, record: ProjectRecord) -> "Project":
        """Build an in-memory project from its stored row."""
        return cls(
            id=record.id,
            name=record.name,
            notes=record.notes,
            rate=record.rate,
            created_at=record.created_at,
        )


@dataclass(frozen=True)
class RateConfig:
    """Global default hourly rate, overridden per project when set."""

    default_rate: float

    def __post_init__(self) -> None:
        validate_rate(self.default_rate)

    def resolve(self, project: Project) -> float:
        """Return the project's own rate, falling back to the default."""
        return project.rate if project.rate is not None else self.default_rate


def validate_rate(rate: float) -> None:
    """Reject hourly rates that are not finite or are negative."""
    if not math.isfinite(rate):
        raise ValidationError("invalid_rate", "Rate must be a finite number.")
    if rate < 0:
        raise ValidationError("negative_rate", "Rate cannot be negative.")


def validate_name(name: str) -> str:
    """Return the trimmed project name, rejecting blanks."""
    cleaned = name.strip()
    if not cleaned:
        raise ValidationError("empty_name", "Project name is required.")
    return cleaned

"""Derived time and earnings values for projects."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from billtick.domain import timekeeper
from billtick.domain.models import Project, RateConfig

SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class ProjectSummary:
    """Point-in-time view of a project's tracked time and earnings."""

    project_id: UUID
    name: str
    running: bool
    completed_seconds: int
    live_seconds: int
    rate: float
    earnings: float

    @property
    def display_seconds(self) -> int:
        """Completed time plus the open interval, for the running clock."""
        return self.completed_seconds + self.live_seconds


@dataclass(frozen=True)
class OverallSummary:
    """Totals across all projects."""

    tracked_seconds: int
    earnings: float


def earnings(project: Project, rates: RateConfig) -> float:
    """Earnings from completed sessions at the project's resolved rate."""
    hours = project.ledger.total_seconds() / SECONDS_PER_HOUR
    return hours * rates.resolve(project)


def total_earnings(projects: Iterable[Project], rates: RateConfig) -> float:
    """Sum of per-project earnings, each priced at its own rate."""
    return sum(earnings(project, rates) for project in projects)


def display_seconds(project: Project, now: datetime) -> int:
    """Completed seconds plus any live interval."""
    return project.ledger.total_seconds() + timekeeper.live_elapsed(project, now)


def total_tracked_seconds(projects: Iterable[Project], now: datetime) -> int:
    """Running clock total across projects."""
    return sum(display_seconds(project, now) for project in projects)


def project_summary(
    project: Project, rates: RateConfig, now: datetime
) -> ProjectSummary:
    """Build the summary shown for a single project."""
    return ProjectSummary(
        project_id=project.id,
        name=project.name,
        running=project.running,
        completed_seconds=project.ledger.total_seconds(),
        live_seconds=timekeeper.live_elapsed(project, now),
        rate=rates.resolve(project),
        earnings=earnings(project, rates),
    )


def overall_summary(
    projects: Iterable[Project], rates: RateConfig, now: datetime
) -> OverallSummary:
    """Build the dashboard totals across every project."""
    materialized = list(projects)
    return OverallSummary(
        tracked_seconds=total_tracked_seconds(materialized, now),
        earnings=total_earnings(materialized, rates),
    )


def format_duration(total_seconds: int) -> str:
    """Format seconds as HH:MM:SS."""
    hours, remainder = divmod(max(int(total_seconds), 0), SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_money(amount: float) -> str:
    """Format an amount with two decimals."""
    return f"${amount:.2f}"

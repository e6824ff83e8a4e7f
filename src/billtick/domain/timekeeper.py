"""Per-project timer state machine.

A project is either stopped or running since a start instant. Stopping
closes the interval into a completed session; until then the interval only
contributes to live display values.
"""

from datetime import datetime, timedelta
from uuid import UUID, uuid4

from billtick.domain.models import Project, SessionRecord

_MILLISECOND = timedelta(milliseconds=1)


def start(project: Project, now: datetime, timer_id: UUID | None = None) -> bool:
    """Move a stopped project to running; return False if already running."""
    if project.running:
        return False
    project.running_since = now
    project.timer_id = timer_id
    return True


def elapsed_seconds(started_at: datetime, now: datetime) -> int:
    """Whole seconds between two instants, rounded half up from milliseconds."""
    millis = (now - started_at) // _MILLISECOND
    if millis <= 0:
        return 0
    return (millis + 500) // 1000


def live_elapsed(project: Project, now: datetime) -> int:
    """Seconds in the open interval, or 0 when stopped."""
    if project.running_since is None:
        return 0
    return elapsed_seconds(project.running_since, now)


def pending_session(project: Project, now: datetime) -> SessionRecord | None:
    """Build the session that stopping at ``now`` would create."""
    if project.running_since is None:
        return None
    return SessionRecord(
        id=project.timer_id or uuid4(),
        project_id=project.id,
        duration_seconds=elapsed_seconds(project.running_since, now),
        notes="",
        started_at=project.running_since,
        ended_at=max(now, project.running_since),
    )


def mark_stopped(project: Project) -> None:
    """Clear the running interval without recording anything."""
    project.running_since = None
    project.timer_id = None


def stop(project: Project, now: datetime) -> SessionRecord | None:
    """Close the running interval and append it to the project's ledger."""
    session = pending_session(project, now)
    if session is None:
        return None
    mark_stopped(project)
    project.ledger.append(session)
    return session

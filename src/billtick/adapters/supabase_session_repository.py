"""Supabase-backed timer and session repository.

Timers and completed sessions share the ``timers`` table: a row is an open
timer while ``is_running`` is true and a completed session afterwards.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from billtick.adapters.supabase_common import execute, first_row, parse_timestamp
from billtick.domain.errors import PersistenceError
from billtick.domain.models import ActiveTimer, SessionRecord
from billtick.services.timers import SessionRepository

_COLUMNS = "id, project_id, start_time, end_time, is_running, duration_seconds, notes"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for timers and sessions."""

    client: Client

    def list_sessions(self, project_id: UUID) -> list[SessionRecord]:
        """Return completed sessions for a project, oldest first."""
        rows = execute(
            self.client.table("timers")
            .select(_COLUMNS)
            .eq("project_id", str(project_id))
            .eq("is_running", False)
            .order("start_time", desc=False),
            "list sessions",
        )
        return [_parse_session(row) for row in rows]

    def get_active_timer(self, project_id: UUID) -> ActiveTimer | None:
        """Return the latest open timer for a project."""
        rows = execute(
            self.client.table("timers")
            .select(_COLUMNS)
            .eq("project_id", str(project_id))
            .eq("is_running", True)
            .order("start_time", desc=True)
            .limit(1),
            "load active timer",
        )
        if not rows:
            return None
        row = rows[0]
        started_at = parse_timestamp(row.get("start_time"))
        if started_at is None:
            raise PersistenceError(f"Timer {row['id']} has no start time")
        return ActiveTimer(
            id=UUID(str(row["id"])),
            project_id=UUID(str(row["project_id"])),
            started_at=started_at,
        )

    def record_timer_start(self, project_id: UUID, started_at: datetime) -> UUID:
        """Insert an open timer row and return its id."""
        rows = execute(
            self.client.table("timers").insert(
                {
                    "project_id": str(project_id),
                    "start_time": started_at.isoformat(),
                    "is_running": True,
                }
            ),
            "start timer",
        )
        return UUID(str(first_row(rows, "start timer")["id"]))

    def record_timer_stop(self, session: SessionRecord) -> SessionRecord:
        """Close the open timer row as a completed session."""
        rows = execute(
            self.client.table("timers")
            .update(
                {
                    "end_time": session.ended_at.isoformat()
                    if session.ended_at
                    else None,
                    "is_running": False,
                    "duration_seconds": session.duration_seconds,
                    "notes": session.notes,
                }
            )
            .eq("id", str(session.id)),
            "stop timer",
        )
        return _parse_session(first_row(rows, "stop timer"))

    def update_session(self, session: SessionRecord) -> None:
        """Persist a session's duration and notes."""
        rows = execute(
            self.client.table("timers")
            .update(
                {
                    "duration_seconds": session.duration_seconds,
                    "notes": session.notes,
                }
            )
            .eq("id", str(session.id)),
            "update session",
        )
        first_row(rows, "update session")

    def delete_session(self, session_id: UUID) -> None:
        """Delete a session row."""
        execute(
            self.client.table("timers").delete().eq("id", str(session_id)),
            "delete session",
        )


def _parse_session(row: dict[str, object]) -> SessionRecord:
    started_at = parse_timestamp(row.get("start_time"))
    ended_at = parse_timestamp(row.get("end_time"))
    duration = row.get("duration_seconds")
    if duration is None and started_at and ended_at:
        duration = round((ended_at - started_at).total_seconds())
    return SessionRecord(
        id=UUID(str(row["id"])),
        project_id=UUID(str(row["project_id"])),
        duration_seconds=max(int(duration or 0), 0),
        notes=str(row.get("notes") or ""),
        started_at=started_at,
        ended_at=ended_at,
    )

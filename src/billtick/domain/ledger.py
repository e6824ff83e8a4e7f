"""Ordered store of a project's completed sessions."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace
from typing import TYPE_CHECKING

from billtick.domain.errors import ValidationError

if TYPE_CHECKING:
    from uuid import UUID

    from billtick.domain.models import SessionRecord


class SessionLedger:
    """Append/edit/delete store of completed sessions.

    Sessions are kept in insertion order. Totals are always summed from the
    current contents; there is no running counter to keep in sync.
    """

    def __init__(self, sessions: list[SessionRecord] | None = None) -> None:
        self._sessions: dict[UUID, SessionRecord] = {}
        for session in sessions or []:
            self.append(session)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __iter__(self) -> Iterator[SessionRecord]:
        return iter(list(self._sessions.values()))

    def append(self, session: SessionRecord) -> None:
        """Add a completed session at the end of the ledger."""
        self._sessions[session.id] = session

    def get(self, session_id: UUID) -> SessionRecord | None:
        """Return a session by id, if present."""
        return self._sessions.get(session_id)

    def sessions(self) -> list[SessionRecord]:
        """Return sessions in insertion order."""
        return list(self._sessions.values())

    def most_recent_first(self) -> list[SessionRecord]:
        """Return sessions newest first, for display."""
        return list(reversed(self._sessions.values()))

    def edit(
        self,
        session_id: UUID,
        *,
        duration_seconds: int | None = None,
        notes: str | None = None,
    ) -> SessionRecord | None:
        """Replace a session's duration and/or notes in one step.

        None leaves a field unchanged. Unknown ids are ignored.
        """
        if duration_seconds is not None:
            validate_duration(duration_seconds)
        current = self._sessions.get(session_id)
        if current is None:
            return None
        updated = edited_session(
            current, duration_seconds=duration_seconds, notes=notes
        )
        self._sessions[session_id] = updated
        return updated

    def edit_duration(self, session_id: UUID, seconds: int) -> SessionRecord | None:
        """Replace a session's duration; unknown ids are ignored."""
        return self.edit(session_id, duration_seconds=seconds)

    def edit_notes(self, session_id: UUID, text: str) -> SessionRecord | None:
        """Replace a session's notes with the trimmed text."""
        return self.edit(session_id, notes=text)

    def delete(self, session_id: UUID) -> SessionRecord | None:
        """Remove a session permanently and return it."""
        return self._sessions.pop(session_id, None)

    def total_seconds(self) -> int:
        """Return the sum of all session durations."""
        return sum(session.duration_seconds for session in self._sessions.values())


def edited_session(
    session: SessionRecord,
    *,
    duration_seconds: int | None = None,
    notes: str | None = None,
) -> SessionRecord:
    """Return a copy of ``session`` with the given fields replaced."""
    changes: dict[str, object] = {}
    if duration_seconds is not None:
        changes["duration_seconds"] = duration_seconds
    if notes is not None:
        changes["notes"] = notes.strip()
    return replace(session, **changes)


def validate_duration(seconds: int) -> None:
    """Reject durations that are negative or not whole seconds."""
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise ValidationError("invalid_duration", "Duration must be whole seconds.")
    if seconds < 0:
        raise ValidationError("negative_duration", "Duration cannot be negative.")

"""Pydantic request models and response serializers for the HTTP API."""

from pydantic import BaseModel

from billtick.domain.accounts import AuthResult
from billtick.domain.models import Project, SessionRecord
from billtick.services.earnings import (
    OverallSummary,
    ProjectSummary,
    format_duration,
    format_money,
)
from billtick.services.invoices import InvoiceDraft


class ProjectCreate(BaseModel):
    """Payload for creating a project."""

    name: str
    notes: str = ""
    rate: float | None = None


class RateUpdate(BaseModel):
    """Payload for changing the global default rate."""

    rate: float


class ProjectRateUpdate(BaseModel):
    """Payload for setting or clearing a project's rate override."""

    rate: float | None = None


class SessionUpdate(BaseModel):
    """Payload for editing a completed session."""

    duration_seconds: int | None = None
    notes: str | None = None


class DraftUpdate(BaseModel):
    """Payload for editing a draft's rate and header fields."""

    rate: float | None = None
    billed_to: str | None = None
    pay_to: str | None = None
    date: str | None = None
    pay_using: str | None = None
    pay_info: str | None = None


class LineOverride(BaseModel):
    """Per-line overrides; null clears an override."""

    hours: float | None = None
    description: str | None = None


class Credentials(BaseModel):
    """Email and password for sign in and sign up."""

    email: str
    password: str


class PasswordResetRequest(BaseModel):
    """Email to send a reset link to."""

    email: str


class PasswordResetComplete(BaseModel):
    """New password chosen from a reset link."""

    password: str


def serialize_session(session: SessionRecord) -> dict[str, object]:
    return {
        "id": str(session.id),
        "project_id": str(session.project_id),
        "duration_seconds": session.duration_seconds,
        "duration": format_duration(session.duration_seconds),
        "notes": session.notes,
        "started_at": session.started_at.isoformat() if session.started_at else None,
        "ended_at": session.ended_at.isoformat() if session.ended_at else None,
    }


def serialize_project(project: Project, summary: ProjectSummary) -> dict[str, object]:
    return {
        "id": str(project.id),
        "name": project.name,
        "notes": project.notes,
        "rate": project.rate,
        "resolved_rate": summary.rate,
        "running": project.running,
        "running_since": project.running_since.isoformat()
        if project.running_since
        else None,
        "completed_seconds": summary.completed_seconds,
        "live_seconds": summary.live_seconds,
        "elapsed": format_duration(summary.display_seconds),
        "earnings": summary.earnings,
        "earnings_display": format_money(summary.earnings),
        "session_count": len(project.ledger),
    }


def serialize_overall(
    overall: OverallSummary, default_rate: float
) -> dict[str, object]:
    return {
        "tracked_seconds": overall.tracked_seconds,
        "tracked": format_duration(overall.tracked_seconds),
        "earnings": overall.earnings,
        "earnings_display": format_money(overall.earnings),
        "default_rate": default_rate,
    }


def serialize_draft(draft: InvoiceDraft) -> dict[str, object]:
    """Return the invoice document plus the editable per-session rows."""
    return {
        "draft_id": str(draft.id),
        "project_id": str(draft.project_id),
        "invoice": draft.document().model_dump(by_alias=True),
        "rows": [
            {
                "session_id": str(session.id),
                "selected": draft.is_selected(session.id),
                "description": draft.description(session),
                "hours": draft.effective_hours(session),
                "amount": draft.line_amount(session),
                "hours_overridden": session.id in draft.hours_override,
                "description_overridden": session.id in draft.description_override,
            }
            for session in draft.sessions
        ],
        "total_amount_display": format_money(draft.total_amount()),
    }


def serialize_auth_result(result: AuthResult) -> dict[str, object]:
    return {
        "ok": result.ok,
        "user": {"id": result.user.id, "email": result.user.email}
        if result.user
        else None,
        "message": result.message,
        "error": result.error,
    }

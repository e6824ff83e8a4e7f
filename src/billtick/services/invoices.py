"""Invoice drafts built over a project's sessions.

A draft snapshots the project's sessions when it is opened and layers a
selection, per-line overrides, a rate and header text on top. Nothing in a
draft writes back to the ledger. Totals are recomputed from the draft state
on every read, and the invoice total is always ``total_hours * rate`` rather
than a sum of independently priced lines.
"""

import logging
import math
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from billtick.domain.errors import ValidationError
from billtick.domain.invoices import InvoiceDocument, InvoiceLineItem
from billtick.domain.models import SessionRecord, validate_rate
from billtick.services.earnings import SECONDS_PER_HOUR
from billtick.services.timers import TimerService

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "Work session"


@dataclass(frozen=True)
class InvoiceDefaults:
    """Header text used when a draft is opened."""

    pay_to: str = "Your Name"
    pay_using: str = "Bank transfer"
    pay_info: str = "Payment due within 30 days"


@dataclass
class InvoiceDraft:
    """Editable pricing view over a snapshot of a project's sessions."""

    id: UUID
    project_id: UUID
    sessions: tuple[SessionRecord, ...]
    rate: float
    billed_to: str
    pay_to: str
    date: str
    pay_using: str
    pay_info: str
    selection: set[UUID] = field(default_factory=set)
    hours_override: dict[UUID, float] = field(default_factory=dict)
    description_override: dict[UUID, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self._session_ids = {session.id for session in self.sessions}

    def is_selected(self, session_id: UUID) -> bool:
        """Return True when the session is billed on this draft."""
        return session_id in self.selection

    def toggle(self, session_id: UUID) -> bool:
        """Flip a session's selection and return the new state."""
        if session_id not in self._session_ids:
            return False
        if session_id in self.selection:
            self.selection.discard(session_id)
            return False
        self.selection.add(session_id)
        return True

    def select_all(self) -> None:
        """Select every session in the snapshot."""
        self.selection = set(self._session_ids)

    def select_none(self) -> None:
        """Clear the selection."""
        self.selection = set()

    def set_rate(self, rate: float) -> None:
        """Change the draft's hourly rate."""
        validate_rate(rate)
        self.rate = rate

    def set_hours(self, session_id: UUID, hours: float | None) -> None:
        """Override a line's hours, or clear the override with None."""
        if hours is not None:
            validate_hours(hours)
        if session_id not in self._session_ids:
            return
        if hours is None:
            self.hours_override.pop(session_id, None)
        else:
            self.hours_override[session_id] = hours

    def set_description(self, session_id: UUID, text: str | None) -> None:
        """Override a line's description; blank text clears the override."""
        if session_id not in self._session_ids:
            return
        cleaned = (text or "").strip()
        if cleaned:
            self.description_override[session_id] = cleaned
        else:
            self.description_override.pop(session_id, None)

    def update_header(self, **fields: str | None) -> None:
        """Replace header fields; None leaves a field unchanged."""
        for name in ("billed_to", "pay_to", "date", "pay_using", "pay_info"):
            value = fields.pop(name, None)
            if value is not None:
                setattr(self, name, value)
        if fields:
            raise TypeError(f"Unknown header fields: {', '.join(sorted(fields))}")

    def effective_hours(self, session: SessionRecord) -> float:
        """Hours billed for a session, override first."""
        override = self.hours_override.get(session.id)
        if override is not None:
            return override
        return round(session.duration_seconds / SECONDS_PER_HOUR, 2)

    def description(self, session: SessionRecord) -> str:
        """Line description, override first."""
        override = self.description_override.get(session.id)
        if override:
            return override
        return _default_description(session)

    def line_amount(self, session: SessionRecord) -> float:
        """Price of a single line, for display."""
        return self.effective_hours(session) * self.rate

    def selected_sessions(self) -> list[SessionRecord]:
        """Selected sessions in ledger order."""
        return [session for session in self.sessions if session.id in self.selection]

    def total_hours(self) -> float:
        """Sum of effective hours over selected sessions."""
        return sum(self.effective_hours(session) for session in self.selected_sessions())

    def total_amount(self) -> float:
        """Invoice total priced from the aggregate hours."""
        return self.total_hours() * self.rate

    def document(self) -> InvoiceDocument:
        """Build the serializable invoice document."""
        selected = self.selected_sessions()
        return InvoiceDocument(
            billed_to=self.billed_to,
            pay_to=self.pay_to,
            date=self.date,
            pay_using=self.pay_using,
            pay_info=self.pay_info,
            rate=self.rate,
            line_items=[
                InvoiceLineItem(
                    description=self.description(session),
                    hours=self.effective_hours(session),
                    amount=self.line_amount(session),
                )
                for session in selected
            ],
            total_hours=self.total_hours(),
            total_amount=self.total_amount(),
        )


@dataclass
class InvoiceService:
    """Opens, holds and discards invoice drafts."""

    timer_service: TimerService
    defaults: InvoiceDefaults = field(default_factory=InvoiceDefaults)
    drafts: dict[UUID, InvoiceDraft] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.timer_service.project_deleted_listeners.append(
            self.discard_project_drafts
        )

    def open_draft(self, project_id: UUID) -> InvoiceDraft | None:
        """Open a draft with every current session selected."""
        project = self.timer_service.get_project(project_id)
        if project is None:
            return None
        sessions = tuple(project.ledger.sessions())
        draft = InvoiceDraft(
            id=uuid4(),
            project_id=project.id,
            sessions=sessions,
            rate=self.timer_service.rates.resolve(project),
            billed_to=project.notes or project.name,
            pay_to=self.defaults.pay_to,
            date=self.timer_service.now().date().isoformat(),
            pay_using=self.defaults.pay_using,
            pay_info=self.defaults.pay_info,
            selection={session.id for session in sessions},
        )
        self.drafts[draft.id] = draft
        logger.info("Opened invoice draft %s for project %s", draft.id, project_id)
        return draft

    def get_draft(self, draft_id: UUID) -> InvoiceDraft | None:
        """Return an open draft, if present."""
        return self.drafts.get(draft_id)

    def discard_draft(self, draft_id: UUID) -> bool:
        """Drop a draft; its sessions are untouched."""
        return self.drafts.pop(draft_id, None) is not None

    def discard_project_drafts(self, project_id: UUID) -> int:
        """Drop every open draft for a project and return how many."""
        stale = [
            draft_id
            for draft_id, draft in self.drafts.items()
            if draft.project_id == project_id
        ]
        for draft_id in stale:
            del self.drafts[draft_id]
        if stale:
            logger.info(
                "Discarded %d invoice drafts of project %s", len(stale), project_id
            )
        return len(stale)


def validate_hours(hours: float) -> None:
    """Reject hours that are not finite or are negative."""
    if not math.isfinite(hours):
        raise ValidationError("invalid_hours", "Hours must be a finite number.")
    if hours < 0:
        raise ValidationError("negative_hours", "Hours cannot be negative.")


def _default_description(session: SessionRecord) -> str:
    if session.notes:
        return session.notes
    if session.started_at is not None:
        return f"{DEFAULT_DESCRIPTION} {session.started_at.date().isoformat()}"
    return DEFAULT_DESCRIPTION

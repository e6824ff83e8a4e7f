"""Invoice draft endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, Response, status

from billtick.api.schemas import DraftUpdate, LineOverride, serialize_draft

if TYPE_CHECKING:
    from billtick.containers import AppContainer
    from billtick.services.invoices import InvoiceDraft, InvoiceService

router = APIRouter(tags=["invoices"])


def _invoice_service(request: Request) -> InvoiceService:
    container: AppContainer = request.app.state.container
    return container.invoice_service


def _require_draft(request: Request, draft_id: UUID) -> InvoiceDraft:
    draft = _invoice_service(request).get_draft(draft_id)
    if draft is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return draft


@router.post("/projects/{project_id}/invoices", status_code=status.HTTP_201_CREATED)
async def open_draft(project_id: UUID, request: Request) -> dict[str, object]:
    """Open a draft over the project's current sessions."""
    draft = _invoice_service(request).open_draft(project_id)
    if draft is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return serialize_draft(draft)


@router.get("/invoices/{draft_id}")
async def get_draft(draft_id: UUID, request: Request) -> dict[str, object]:
    """Return the computed invoice for a draft."""
    return serialize_draft(_require_draft(request, draft_id))


@router.patch("/invoices/{draft_id}")
async def update_draft(
    draft_id: UUID, payload: DraftUpdate, request: Request
) -> dict[str, object]:
    """Change the draft's rate and header fields."""
    draft = _require_draft(request, draft_id)
    if payload.rate is not None:
        draft.set_rate(payload.rate)
    draft.update_header(**payload.model_dump(exclude={"rate"}))
    return serialize_draft(draft)


@router.post("/invoices/{draft_id}/sessions/{session_id}/toggle")
async def toggle_session(
    draft_id: UUID, session_id: UUID, request: Request
) -> dict[str, object]:
    """Flip whether a session is billed."""
    draft = _require_draft(request, draft_id)
    draft.toggle(session_id)
    return serialize_draft(draft)


@router.put("/invoices/{draft_id}/sessions/{session_id}")
async def override_line(
    draft_id: UUID, session_id: UUID, payload: LineOverride, request: Request
) -> dict[str, object]:
    """Set or clear a line's hours and description overrides."""
    draft = _require_draft(request, draft_id)
    draft.set_hours(session_id, payload.hours)
    draft.set_description(session_id, payload.description)
    return serialize_draft(draft)


@router.post("/invoices/{draft_id}/select-all")
async def select_all(draft_id: UUID, request: Request) -> dict[str, object]:
    """Bill every session in the draft."""
    draft = _require_draft(request, draft_id)
    draft.select_all()
    return serialize_draft(draft)


@router.post("/invoices/{draft_id}/select-none")
async def select_none(draft_id: UUID, request: Request) -> dict[str, object]:
    """Bill no sessions."""
    draft = _require_draft(request, draft_id)
    draft.select_none()
    return serialize_draft(draft)


@router.delete("/invoices/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_draft(draft_id: UUID, request: Request) -> Response:
    """Discard a draft."""
    if not _invoice_service(request).discard_draft(draft_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

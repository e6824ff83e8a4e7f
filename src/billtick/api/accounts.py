"""Account endpoints backed by the auth provider."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from billtick.api.schemas import (
    Credentials,
    PasswordResetComplete,
    PasswordResetRequest,
    serialize_auth_result,
)

if TYPE_CHECKING:
    from billtick.containers import AppContainer
    from billtick.domain.accounts import AuthResult
    from billtick.services.accounts import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])


def _account_service(request: Request) -> AccountService:
    container: AppContainer = request.app.state.container
    return container.account_service


def _respond(result: AuthResult) -> JSONResponse:
    return JSONResponse(
        serialize_auth_result(result),
        status_code=status.HTTP_200_OK if result.ok else status.HTTP_400_BAD_REQUEST,
    )


@router.get("/me")
async def current_user(request: Request) -> dict[str, object]:
    """Return the signed-in user, if any."""
    user = _account_service(request).current_user()
    if user is None:
        return {"user": None}
    return {"user": {"id": user.id, "email": user.email}}


@router.post("/sign-in")
async def sign_in(payload: Credentials, request: Request) -> JSONResponse:
    """Sign in with email and password."""
    return _respond(_account_service(request).sign_in(payload.email, payload.password))


@router.post("/sign-up")
async def sign_up(payload: Credentials, request: Request) -> JSONResponse:
    """Create an account."""
    return _respond(_account_service(request).sign_up(payload.email, payload.password))


@router.post("/sign-out")
async def sign_out(request: Request) -> JSONResponse:
    """End the current session."""
    return _respond(_account_service(request).sign_out())


@router.post("/password-reset")
async def request_password_reset(
    payload: PasswordResetRequest, request: Request
) -> JSONResponse:
    """Email a password reset link."""
    return _respond(_account_service(request).request_password_reset(payload.email))


@router.post("/password-reset/complete")
async def complete_password_reset(
    payload: PasswordResetComplete, request: Request
) -> JSONResponse:
    """Set the new password after following a reset link."""
    return _respond(
        _account_service(request).complete_password_reset(payload.password)
    )

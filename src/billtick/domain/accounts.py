"""Account domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthUser:
    """Minimal view of a signed-in user."""

    id: str
    email: str | None


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an account action."""

    ok: bool
    user: AuthUser | None = None
    message: str | None = None
    error: str | None = None

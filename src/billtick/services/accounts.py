"""Account actions forwarded to the auth provider."""

from dataclasses import dataclass
from typing import Protocol

from billtick.domain.accounts import AuthResult, AuthUser
from billtick.domain.errors import ValidationError


class AuthProvider(Protocol):
    """Interface for the external authentication backend."""

    def current_user(self) -> AuthUser | None:
        """Return the signed-in user, if any."""

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password."""

    def sign_up(self, email: str, password: str) -> AuthResult:
        """Register a new account."""

    def sign_out(self) -> AuthResult:
        """End the current session."""

    def request_password_reset(self, email: str) -> AuthResult:
        """Send a password reset link."""

    def complete_password_reset(self, new_password: str) -> AuthResult:
        """Set a new password for the user holding a reset session."""


@dataclass
class AccountService:
    """Validates account input before calling the auth provider."""

    provider: AuthProvider

    def current_user(self) -> AuthUser | None:
        """Return the signed-in user, if any."""
        return self.provider.current_user()

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in after checking the credentials are present."""
        return self.provider.sign_in(_require_email(email), _require_password(password))

    def sign_up(self, email: str, password: str) -> AuthResult:
        """Register after checking the credentials are present."""
        return self.provider.sign_up(_require_email(email), _require_password(password))

    def sign_out(self) -> AuthResult:
        """End the current session."""
        return self.provider.sign_out()

    def request_password_reset(self, email: str) -> AuthResult:
        """Request a reset link for a non-empty email."""
        return self.provider.request_password_reset(_require_email(email))

    def complete_password_reset(self, new_password: str) -> AuthResult:
        """Set the new password chosen from a reset link."""
        return self.provider.complete_password_reset(_require_password(new_password))


def _require_email(email: str) -> str:
    cleaned = email.strip()
    if not cleaned:
        raise ValidationError("empty_email", "Email is required")
    return cleaned


def _require_password(password: str) -> str:
    if not password:
        raise ValidationError("empty_password", "Password is required")
    return password


@dataclass
class UnavailableAuthProvider(AuthProvider):
    """Auth provider used when no backend is configured."""

    reason: str = "Accounts are not available without Supabase."

    def current_user(self) -> AuthUser | None:
        return None

    def sign_in(self, email: str, password: str) -> AuthResult:
        return AuthResult(ok=False, error=self.reason)

    def sign_up(self, email: str, password: str) -> AuthResult:
        return AuthResult(ok=False, error=self.reason)

    def sign_out(self) -> AuthResult:
        return AuthResult(ok=True)

    def request_password_reset(self, email: str) -> AuthResult:
        return AuthResult(ok=False, error=self.reason)

    def complete_password_reset(self, new_password: str) -> AuthResult:
        return AuthResult(ok=False, error=self.reason)

"""Supabase auth adapter."""

import logging
from dataclasses import dataclass

from supabase import AuthError, Client

from billtick.domain.accounts import AuthResult, AuthUser
from billtick.services.accounts import AuthProvider

logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthProvider(AuthProvider):
    """Account actions backed by Supabase Auth."""

    client: Client
    password_reset_redirect_url: str | None = None

    def current_user(self) -> AuthUser | None:
        """Return the user of the current Supabase session."""
        try:
            response = self.client.auth.get_user()
        except AuthError:
            logger.warning("Failed to load the current user", exc_info=True)
            return None
        if response is None:
            return None
        return _to_user(response.user)

    def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            return AuthResult(ok=False, error=str(exc))
        return AuthResult(ok=True, user=_to_user(response.user))

    def sign_up(self, email: str, password: str) -> AuthResult:
        """Register a new account."""
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except AuthError as exc:
            return AuthResult(ok=False, error=str(exc))
        return AuthResult(
            ok=True,
            user=_to_user(response.user),
            message="Check your email to confirm your account.",
        )

    def sign_out(self) -> AuthResult:
        """Sign out of the current session."""
        try:
            self.client.auth.sign_out()
        except AuthError as exc:
            return AuthResult(ok=False, error=str(exc))
        return AuthResult(ok=True)

    def request_password_reset(self, email: str) -> AuthResult:
        """Send a password reset email."""
        options = {}
        if self.password_reset_redirect_url:
            options["redirect_to"] = self.password_reset_redirect_url
        try:
            self.client.auth.reset_password_for_email(email, options)
        except AuthError as exc:
            return AuthResult(ok=False, error=str(exc))
        return AuthResult(ok=True, message="Password reset link sent to your email!")

    def complete_password_reset(self, new_password: str) -> AuthResult:
        """Update the password of the user holding the reset session."""
        try:
            response = self.client.auth.update_user({"password": new_password})
        except AuthError as exc:
            return AuthResult(ok=False, error=str(exc))
        return AuthResult(
            ok=True, user=_to_user(response.user), message="Password updated."
        )


def _to_user(user: object) -> AuthUser | None:
    if user is None:
        return None
    return AuthUser(id=str(user.id), email=getattr(user, "email", None))

"""Domain error types."""


class ValidationError(ValueError):
    """Raised when input is rejected before any state changes."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class PersistenceError(RuntimeError):
    """Raised when the backing store fails to apply a change."""

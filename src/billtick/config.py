"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str | None = None
    supabase_key: str | None = None
    password_reset_redirect_url: str | None = None
    default_rate: float = Field(default=20.0, ge=0.0, allow_inf_nan=False)
    tick_interval_seconds: float = Field(default=1.0, gt=0.0)
    invoice_pay_to: str = "Your Name"
    invoice_pay_using: str = "Bank transfer"
    invoice_pay_info: str = "Payment due within 30 days"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def supabase_enabled(self) -> bool:
        """Return True when both Supabase settings are present."""
        return bool(
            self.supabase_url
            and self.supabase_url.strip()
            and self.supabase_key
            and self.supabase_key.strip()
        )

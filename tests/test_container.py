"""Tests for container wiring and settings."""

from billtick.adapters.memory_repository import InMemoryRepository
from billtick.config import Settings
from billtick.containers import build_container
from billtick.services.accounts import UnavailableAuthProvider


def test_build_container_without_supabase_uses_memory(settings: Settings) -> None:
    container = build_container(settings)

    assert isinstance(container.timer_service.project_repository, InMemoryRepository)
    assert (
        container.timer_service.project_repository
        is container.timer_service.session_repository
    )
    assert isinstance(container.account_service.provider, UnavailableAuthProvider)
    assert container.invoice_service.timer_service is container.timer_service
    assert container.ticker.timer_service is container.timer_service


def test_build_container_applies_settings() -> None:
    settings = Settings(
        _env_file=None,
        supabase_url=None,
        supabase_key=None,
        default_rate=55.0,
        tick_interval_seconds=0.5,
        invoice_pay_to="Ada Lovelace",
    )

    container = build_container(settings)

    assert container.timer_service.rates.default_rate == 55.0
    assert container.ticker.interval_seconds == 0.5
    assert container.invoice_service.defaults.pay_to == "Ada Lovelace"


def test_supabase_enabled_requires_url_and_key() -> None:
    url_only = Settings(
        _env_file=None, supabase_url="https://x.supabase.co", supabase_key=None
    )
    blank_url = Settings(_env_file=None, supabase_url=" ", supabase_key="key")
    both = Settings(
        _env_file=None, supabase_url="https://x.supabase.co", supabase_key="key"
    )

    assert not url_only.supabase_enabled
    assert not blank_url.supabase_enabled
    assert both.supabase_enabled

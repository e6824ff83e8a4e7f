"""Dependency container wiring for the application."""

import logging
from dataclasses import dataclass

from supabase import create_client

from billtick.adapters.memory_repository import InMemoryRepository
from billtick.adapters.supabase_auth_provider import SupabaseAuthProvider
from billtick.adapters.supabase_project_repository import SupabaseProjectRepository
from billtick.adapters.supabase_session_repository import SupabaseSessionRepository
from billtick.config import Settings
from billtick.domain.models import RateConfig
from billtick.services.accounts import (
    AccountService,
    AuthProvider,
    UnavailableAuthProvider,
)
from billtick.services.invoices import InvoiceDefaults, InvoiceService
from billtick.services.ticker import DisplayTicker
from billtick.services.timers import (
    ProjectRepository,
    SessionRepository,
    TimerService,
)

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    timer_service: TimerService
    invoice_service: InvoiceService
    account_service: AccountService
    ticker: DisplayTicker


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    project_repository: ProjectRepository
    session_repository: SessionRepository
    auth_provider: AuthProvider
    if resolved_settings.supabase_enabled:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_key
        )
        project_repository = SupabaseProjectRepository(supabase_client)
        session_repository = SupabaseSessionRepository(supabase_client)
        auth_provider = SupabaseAuthProvider(
            supabase_client,
            password_reset_redirect_url=resolved_settings.password_reset_redirect_url,
        )
    else:
        logger.info("Supabase is not configured, using in-memory storage")
        memory = InMemoryRepository()
        project_repository = memory
        session_repository = memory
        auth_provider = UnavailableAuthProvider()
    return assemble_container(
        resolved_settings, project_repository, session_repository, auth_provider
    )


def assemble_container(
    settings: Settings,
    project_repository: ProjectRepository,
    session_repository: SessionRepository,
    auth_provider: AuthProvider,
) -> AppContainer:
    """Wire services over the given collaborators."""
    timer_service = TimerService(
        project_repository=project_repository,
        session_repository=session_repository,
        rates=RateConfig(default_rate=settings.default_rate),
    )
    invoice_service = InvoiceService(
        timer_service=timer_service,
        defaults=InvoiceDefaults(
            pay_to=settings.invoice_pay_to,
            pay_using=settings.invoice_pay_using,
            pay_info=settings.invoice_pay_info,
        ),
    )
    return AppContainer(
        settings=settings,
        timer_service=timer_service,
        invoice_service=invoice_service,
        account_service=AccountService(auth_provider),
        ticker=DisplayTicker(
            timer_service, interval_seconds=settings.tick_interval_seconds
        ),
    )

"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from billtick.api.accounts import router as accounts_router
from billtick.api.invoices import router as invoices_router
from billtick.api.projects import router as projects_router
from billtick.api.schemas import RateUpdate, serialize_overall
from billtick.app_logging import configure_logging
from billtick.containers import AppContainer
from billtick.domain.errors import PersistenceError, ValidationError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        try:
            state_container.timer_service.load()
        except PersistenceError:
            logger.exception("Failed to load projects")
        stop = asyncio.Event()
        ticker_task = asyncio.create_task(state_container.ticker.run(stop))
        yield
        stop.set()
        await ticker_task

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(projects_router)
    app.include_router(invoices_router)
    app.include_router(accounts_router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            {"reason": exc.reason, "message": exc.message},
            status_code=422,
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        logger.error("Persistence failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            {"detail": str(exc)},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/summary")
    async def summary(request: Request) -> dict[str, object]:
        """Total tracked time and earnings across projects."""
        state_container: AppContainer = request.app.state.container
        service = state_container.timer_service
        return serialize_overall(service.overall(), service.rates.default_rate)

    @app.get("/display")
    async def display(request: Request) -> dict[str, object]:
        """Latest values computed by the display ticker."""
        state_container: AppContainer = request.app.state.container
        board = state_container.ticker.board
        return {
            "ticks": board.ticks,
            "projects": [
                {
                    "project_id": str(entry.project_id),
                    "name": entry.name,
                    "running": entry.running,
                    "display_seconds": entry.display_seconds,
                    "earnings": entry.earnings,
                }
                for entry in board.projects
            ],
        }

    @app.put("/settings/rate")
    async def set_default_rate(
        payload: RateUpdate, request: Request
    ) -> dict[str, object]:
        """Change the global default rate."""
        state_container: AppContainer = request.app.state.container
        rates = state_container.timer_service.set_default_rate(payload.rate)
        return {"default_rate": rates.default_rate}

    return app

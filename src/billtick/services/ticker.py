"""Periodic refresh of live display values."""

import asyncio
import logging
from dataclasses import dataclass, field

from billtick.services.earnings import OverallSummary, ProjectSummary
from billtick.services.timers import TimerService

logger = logging.getLogger(__name__)


@dataclass
class DisplayBoard:
    """Latest computed display values."""

    projects: list[ProjectSummary] = field(default_factory=list)
    overall: OverallSummary | None = None
    ticks: int = 0


@dataclass
class DisplayTicker:
    """Recomputes project summaries on a fixed interval.

    Only reads from the timer service; the board it writes is the sole
    output.
    """

    timer_service: TimerService
    interval_seconds: float = 1.0
    board: DisplayBoard = field(default_factory=DisplayBoard)

    def tick(self) -> DisplayBoard:
        """Recompute the board once."""
        self.board = DisplayBoard(
            projects=self.timer_service.summaries(),
            overall=self.timer_service.overall(),
            ticks=self.board.ticks + 1,
        )
        return self.board

    async def run(self, stop: asyncio.Event) -> None:
        """Tick until ``stop`` is set."""
        logger.info("Display ticker started (%.1fs interval)", self.interval_seconds)
        while not stop.is_set():
            try:
                self.tick()
            except Exception:
                logger.exception("Display tick failed")
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.interval_seconds)
            except TimeoutError:
                continue
        logger.info("Display ticker stopped")

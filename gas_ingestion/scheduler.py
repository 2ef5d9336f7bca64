"""
Gas Ingestion - Scheduler.

============================================================
RESPONSIBILITY
============================================================
Drives ingestion cycles forever at a fixed cadence.

- Cycles never overlap: the wait starts when a cycle ends
- No cycle error escapes the loop
- stop() ends the wait immediately, never mid-cycle

============================================================
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from database.engine import PersistenceError

from gas_ingestion.ingestion_service import GasIngestionService
from gas_ingestion.types import CycleResult


logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Scheduler lifecycle state."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class IngestionScheduler:
    """
    Fixed-interval loop around GasIngestionService.run_collection_cycle().

    Usage:
        scheduler = IngestionScheduler(service, poll_interval_seconds=60)
        await scheduler.run_forever()

        # elsewhere (signal handler)
        scheduler.stop()
    """

    def __init__(
        self,
        service: GasIngestionService,
        poll_interval_seconds: float = 60.0,
    ) -> None:
        if poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be positive")

        self._service = service
        self._interval = poll_interval_seconds
        self._state = SchedulerState.IDLE
        self._stop_event = asyncio.Event()

        self._cycles_run = 0
        self._cycles_failed = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def cycles_run(self) -> int:
        return self._cycles_run

    @property
    def cycles_failed(self) -> int:
        return self._cycles_failed

    def stop(self) -> None:
        """Request shutdown. The current cycle, if any, is allowed to finish."""
        logger.info("Scheduler stop requested")
        self._stop_event.set()

    async def run_single_cycle(self) -> Optional[CycleResult]:
        """
        Run one cycle, containing any error.

        Returns:
            The CycleResult, or None if the cycle failed
        """
        self._state = SchedulerState.RUNNING
        self._cycles_run += 1
        try:
            return await self._service.run_collection_cycle()
        except PersistenceError as e:
            self._cycles_failed += 1
            logger.error(f"Error storing gas prices: {e}")
            return None
        except Exception as e:
            self._cycles_failed += 1
            logger.error(f"Ingestion cycle failed: {e}", exc_info=True)
            return None
        finally:
            self._state = SchedulerState.IDLE

    async def run_forever(self, max_cycles: Optional[int] = None) -> None:
        """
        Run cycles until stop() is called (or max_cycles is reached).

        Args:
            max_cycles: Optional cap on the number of cycles, for tests
                and one-shot runs
        """
        logger.info(f"Starting ingestion loop (interval={self._interval}s)")

        try:
            while not self._stop_event.is_set():
                await self.run_single_cycle()

                if max_cycles is not None and self._cycles_run >= max_cycles:
                    break

                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                except asyncio.TimeoutError:
                    pass
        except asyncio.CancelledError:
            logger.info("Ingestion loop cancelled")
            raise
        finally:
            self._state = SchedulerState.STOPPED
            logger.info(
                f"Ingestion loop stopped | cycles={self._cycles_run} "
                f"failed={self._cycles_failed}"
            )

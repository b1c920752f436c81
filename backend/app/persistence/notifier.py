"""Fire-and-forget persistence of generated itineraries.

``notify`` hands a save to a tracked background task and returns at once.
The caller never observes the outcome: failures are logged and counted,
never retried. ``drain`` lets the process wait for in-flight saves on
shutdown; saves still running when its timeout expires are cancelled.
"""

import asyncio
import logging

from backend.app.db.repositories import TravelPlanStore
from backend.app.models.travel import ItineraryRequest, ItineraryResult, Visibility
from backend.app.utils.metrics import PrometheusPipelineMetrics

logger = logging.getLogger(__name__)


class PersistenceNotifier:
    """Bounded set of background save tasks owned by the process."""

    def __init__(
        self,
        store: TravelPlanStore,
        *,
        max_pending: int = 100,
        visibility: Visibility = Visibility.public,
        metrics: PrometheusPipelineMetrics | None = None,
    ) -> None:
        self._store = store
        self._max_pending = max_pending
        self._visibility = visibility
        self._metrics = metrics or PrometheusPipelineMetrics()
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def pending(self) -> int:
        """Number of saves still in flight."""
        return len(self._tasks)

    def notify(self, request: ItineraryRequest, result: ItineraryResult) -> bool:
        """Schedule a background save without waiting for it.

        Must be called from a running event loop.

        Returns:
            True if the save was scheduled, False if it was dropped
        """
        if self._closed:
            logger.warning(f"Persistence notifier closed, dropping plan for {request.destination}")
            self._metrics.inc_persistence("dropped")
            return False

        if len(self._tasks) >= self._max_pending:
            logger.warning(
                f"Persistence backlog full ({self._max_pending} pending), "
                f"dropping plan for {request.destination}"
            )
            self._metrics.inc_persistence("dropped")
            return False

        task = asyncio.get_running_loop().create_task(self._save(request, result))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def _save(self, request: ItineraryRequest, result: ItineraryResult) -> None:
        try:
            plan_id = await self._store.save(request, result, self._visibility)
        except Exception as e:
            logger.error(f"Error saving travel plan for {request.destination}: {e}")
            self._metrics.inc_persistence("failed")
            return

        logger.info(f"Saved travel plan id={plan_id} destination={request.destination}")
        self._metrics.inc_persistence("saved")

    async def drain(self, timeout: float | None = None) -> int:
        """Stop accepting saves and wait for in-flight ones.

        Args:
            timeout: Seconds to wait; None waits indefinitely

        Returns:
            Number of saves cancelled because the wait timed out
        """
        self._closed = True

        if not self._tasks:
            return 0

        _, still_pending = await asyncio.wait(set(self._tasks), timeout=timeout)

        if still_pending:
            logger.warning(
                f"Persistence drain timed out, cancelling {len(still_pending)} pending saves"
            )
            for task in still_pending:
                task.cancel()
            await asyncio.gather(*still_pending, return_exceptions=True)
            for _ in still_pending:
                self._metrics.inc_persistence("dropped")

        return len(still_pending)

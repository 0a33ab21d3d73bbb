"""Drives the sync queues: on reconnect, on a timer, and on request."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from frontdesk.schemas.sync import SyncCounts, SyncStatusResponse
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.result import SyncResult
from frontdesk.services.sync_queue import SyncQueue

logger = logging.getLogger(__name__)


class SyncCoordinator:
    """Owns every entity sync queue and decides when they drain.

    Drains are not de-duplicated: a drain started while another is still
    awaiting the network may push the same record twice.
    """

    def __init__(self, connectivity: ConnectivityMonitor, queues: Dict[str, SyncQueue]):
        self.connectivity = connectivity
        self.queues = queues
        self.last_drain_at: Optional[datetime] = None
        self.last_result: Optional[Dict[str, SyncResult]] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    def start(self) -> None:
        """Drain every queue whenever connectivity comes back."""
        if self._unsubscribe is None:
            self._unsubscribe = self.connectivity.subscribe(self._on_connectivity_change)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_connectivity_change(self, online: bool) -> None:
        if online:
            logger.info("Back online, draining sync queues")
            await self.drain_all()

    async def drain_all(self) -> Dict[str, SyncResult]:
        results: Dict[str, SyncResult] = {}
        for name, queue in self.queues.items():
            results[name] = await queue.drain()
        if self.connectivity.is_online():
            self.last_drain_at = datetime.now(timezone.utc)
            self.last_result = results
        return results

    def queued_counts(self) -> Dict[str, int]:
        return {name: len(queue) for name, queue in self.queues.items()}

    def status(self) -> SyncStatusResponse:
        queued = self.queued_counts()
        return SyncStatusResponse(
            online=self.connectivity.is_online(),
            queued=queued,
            total_queued=sum(queued.values()),
            last_drain_at=self.last_drain_at,
            last_result=(
                {name: SyncCounts(**result.as_dict()) for name, result in self.last_result.items()}
                if self.last_result is not None
                else None
            ),
        )

    async def run_periodic(self, interval: float, probe: bool = True) -> None:
        """Probe connectivity and drain on a fixed interval until cancelled."""
        logger.info(f"Sync loop started (every {interval}s)")
        while True:
            try:
                await asyncio.sleep(interval)
                if probe:
                    await self.connectivity.probe()
                results = await self.drain_all()
                synced = sum(result.success for result in results.values())
                if synced:
                    logger.info(f"Periodic sync: {synced} record(s) pushed")
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.warning(f"Periodic sync error: {e}")

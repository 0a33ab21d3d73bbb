"""Connectivity oracle.

Answers "are we online right now" synchronously and notifies subscribers
when the state flips.
"""

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[bool], Awaitable[None]]
Probe = Callable[[], Awaitable[bool]]


class ConnectivityMonitor:
    """Tracks online/offline state and emits transition events."""

    def __init__(self, online: bool = True, probe: Optional[Probe] = None):
        self._online = online
        self._probe = probe
        self._listeners: List[Listener] = []
        self.last_changed_at: Optional[datetime] = None

    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register an async listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def set_online(self, online: bool) -> bool:
        """Record the current state; returns True when it changed."""
        if online == self._online:
            return False
        self._online = online
        self.last_changed_at = datetime.now(timezone.utc)
        logger.info(f"Connectivity changed: {'online' if online else 'offline'}")
        for listener in list(self._listeners):
            try:
                await listener(online)
            except Exception as e:
                logger.error(f"Connectivity listener failed: {e}", exc_info=True)
        return True

    async def probe(self) -> bool:
        """Check reachability of the remote service and update state."""
        if self._probe is None:
            return self._online
        try:
            reachable = await self._probe()
        except Exception as e:
            logger.debug(f"Connectivity probe raised: {e!r}")
            reachable = False
        await self.set_online(reachable)
        return reachable

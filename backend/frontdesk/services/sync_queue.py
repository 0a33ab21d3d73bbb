"""Durable sync queue shared by the entity services.

A queue holds the ids of records whose latest local state has not been
confirmed written to the remote store. Queue membership is the only signal
of "needs sync"; each record's ``synced`` flag mirrors it and is flipped by
the queue's callbacks together with every membership change. A record that
changed while its remote write was in flight stays queued, since the state
that reached the remote store is no longer the latest one.
"""

import logging
from typing import Awaitable, Callable, Generic, List, Optional, Protocol, TypeVar

from frontdesk.core.exceptions import RemoteDataError
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.local_store import LocalStore
from frontdesk.services.result import SyncResult

logger = logging.getLogger(__name__)


class Syncable(Protocol):
    id: str
    synced: bool


T = TypeVar("T", bound=Syncable)


def same_state(current: Optional[T], pushed: T) -> bool:
    """True when the local record still matches the snapshot that was pushed."""
    if current is None:
        return False
    return current.model_dump(exclude={"synced"}) == pushed.model_dump(exclude={"synced"})


class SyncQueue(Generic[T]):
    """Queue of unsynced record ids for one entity type."""

    def __init__(
        self,
        name: str,
        store: LocalStore,
        key: str,
        connectivity: ConnectivityMonitor,
        load: Callable[[str], Optional[T]],
        push: Callable[[T], Awaitable[None]],
        mark_synced: Callable[[T], bool],
    ):
        self.name = name
        self.store = store
        self.key = key
        self.connectivity = connectivity
        self._load = load
        self._push = push
        self._mark_synced = mark_synced

    def ids(self) -> List[str]:
        return list(self.store.get(self.key, []))

    def __len__(self) -> int:
        return len(self.ids())

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self.ids()

    def enqueue(self, entity_id: str) -> None:
        queue = self.ids()
        if entity_id in queue:
            return
        queue.append(entity_id)
        self.store.set(self.key, queue)
        logger.debug(f"[{self.name}] queued {entity_id} (size={len(queue)})")

    def dequeue(self, entity_id: str) -> None:
        queue = self.ids()
        if entity_id not in queue:
            return
        queue.remove(entity_id)
        self.store.set(self.key, queue)
        logger.debug(f"[{self.name}] dequeued {entity_id} (size={len(queue)})")

    async def attempt(self, entity: T) -> bool:
        """Try one remote write for an already-queued record.

        On success the record is marked synced and leaves the queue, unless
        it changed locally while the write was in flight. On any remote
        failure it stays queued. Returns False whenever the record is left
        queued.
        """
        if not self.connectivity.is_online():
            return False
        try:
            await self._push(entity)
        except RemoteDataError as e:
            logger.warning(f"[{self.name}] remote write for {entity.id} failed, left queued: {e}")
            return False
        if not self._mark_synced(entity):
            logger.info(f"[{self.name}] {entity.id} changed during its remote write, left queued")
            return False
        self.dequeue(entity.id)
        return True

    async def drain(self) -> SyncResult:
        """Replay the remote write for every queued record.

        Does nothing while offline. Ids whose record vanished or is already
        marked synced are dropped from the queue and counted as skipped.
        """
        result = SyncResult()
        if not self.connectivity.is_online():
            logger.info(f"[{self.name}] drain skipped: offline")
            return result

        queue = self.ids()
        if not queue:
            return result

        logger.info(f"[{self.name}] draining {len(queue)} queued record(s)")
        for entity_id in queue:
            entity = self._load(entity_id)
            if entity is None or entity.synced:
                self.dequeue(entity_id)
                result.skipped += 1
                continue
            if await self.attempt(entity):
                result.success += 1
            else:
                result.failed += 1

        logger.info(
            f"[{self.name}] drain complete: {result.success} synced, "
            f"{result.failed} failed, {result.skipped} skipped"
        )
        return result

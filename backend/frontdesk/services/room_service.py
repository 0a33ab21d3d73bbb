"""
Room Service
Per-branch room status tracking with offline support.

Rooms are cached locally as a map of branch id to room list. Every status
change is written locally first, queued, and pushed to the remote ``rooms``
table with an upsert on the room id.
"""

import datetime as dt
import logging
from typing import Dict, FrozenSet, List, Optional

from frontdesk.core.exceptions import NotFoundError, RemoteDataError, RoomTransitionError, ValidationError
from frontdesk.schemas.common import RoomStatus, now_ms
from frontdesk.schemas.room import Room, RoomStats, room_from_row, room_id, room_sort_key, room_to_row
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.local_store import LocalStore, StorageKeys
from frontdesk.services.locations import get_room_layout
from frontdesk.services.remote.base import Filter, RemoteDataService
from frontdesk.services.result import ServiceResult
from frontdesk.services.sync_queue import SyncQueue, same_state

logger = logging.getLogger(__name__)

ROOMS_TABLE = "rooms"
ROOMS_PER_FLOOR = 10

ALLOWED_TRANSITIONS: Dict[RoomStatus, FrozenSet[RoomStatus]] = {
    RoomStatus.AVAILABLE: frozenset({RoomStatus.OCCUPIED, RoomStatus.MAINTENANCE}),
    RoomStatus.OCCUPIED: frozenset({RoomStatus.AVAILABLE, RoomStatus.MAINTENANCE}),
    RoomStatus.MAINTENANCE: frozenset({RoomStatus.AVAILABLE}),
}


class RoomService:
    """Room state machine backed by the local store and the remote rooms table."""

    def __init__(
        self,
        store: LocalStore,
        remote: RemoteDataService,
        connectivity: ConnectivityMonitor,
        keys: Optional[StorageKeys] = None,
    ):
        self.store = store
        self.remote = remote
        self.connectivity = connectivity
        self.keys = keys or StorageKeys()
        self.queue: SyncQueue[Room] = SyncQueue(
            name="rooms",
            store=store,
            key=self.keys.rooms_sync_queue,
            connectivity=connectivity,
            load=self.get_room_by_id,
            push=self._push,
            mark_synced=self._mark_synced,
        )

    # ==================== LOCAL CACHE ====================

    def _load_all(self) -> Dict[str, List[Room]]:
        raw = self.store.get(self.keys.rooms, {})
        return {location: [Room.model_validate(item) for item in rooms] for location, rooms in raw.items()}

    def _save_location(self, location: str, rooms: List[Room]) -> None:
        raw = self.store.get(self.keys.rooms, {})
        raw[location] = [room.to_local() for room in rooms]
        self.store.set(self.keys.rooms, raw)

    def _replace(self, room: Room) -> None:
        rooms = [room if r.id == room.id else r for r in self.list_rooms(room.location)]
        self._save_location(room.location, rooms)

    def _mark_synced(self, pushed: Room) -> bool:
        room = self.get_room_by_id(pushed.id)
        if not same_state(room, pushed):
            return False
        self._replace(room.model_copy(update={"synced": True}))
        return True

    async def _push(self, room: Room) -> None:
        await self.remote.upsert(ROOMS_TABLE, [room_to_row(room)], on_conflict="id")

    # ==================== QUERIES ====================

    def list_rooms(self, location: str) -> List[Room]:
        """All rooms of a branch, sorted by number."""
        rooms = self._load_all().get(location, [])
        return sorted(rooms, key=lambda r: room_sort_key(r.number))

    def get_room(self, location: str, number: str) -> Optional[Room]:
        return next((r for r in self.list_rooms(location) if r.number == number), None)

    def get_room_by_id(self, identifier: str) -> Optional[Room]:
        for rooms in self._load_all().values():
            for room in rooms:
                if room.id == identifier:
                    return room
        return None

    def require_room(self, location: str, number: str) -> Room:
        room = self.get_room(location, number)
        if room is None:
            raise NotFoundError("Room", room_id(location, number))
        return room

    def available_rooms(self, location: str) -> List[Room]:
        return [
            r for r in self.list_rooms(location)
            if r.status is RoomStatus.AVAILABLE and not r.is_manager_room
        ]

    def occupied_rooms(self, location: str) -> List[Room]:
        return [r for r in self.list_rooms(location) if r.status is RoomStatus.OCCUPIED]

    def maintenance_rooms(self, location: str) -> List[Room]:
        return [r for r in self.list_rooms(location) if r.status is RoomStatus.MAINTENANCE]

    def rooms_by_floor(self, location: str, floor: int) -> List[Room]:
        return [r for r in self.list_rooms(location) if r.floor == floor]

    def stats(self, location: str) -> RoomStats:
        rooms = self.list_rooms(location)
        return RoomStats(
            total=len(rooms),
            available=sum(1 for r in rooms if r.status is RoomStatus.AVAILABLE),
            occupied=sum(1 for r in rooms if r.status is RoomStatus.OCCUPIED),
            maintenance=sum(1 for r in rooms if r.status is RoomStatus.MAINTENANCE),
            unsynced=sum(1 for r in rooms if not r.synced),
        )

    def unsynced_count(self) -> int:
        return len(self.queue)

    # ==================== INITIALIZATION ====================

    def default_rooms(self, location: str) -> List[Room]:
        """Build the seed room set for a branch from its static layout."""
        layout = get_room_layout(location)
        rooms = []
        for index, number in enumerate(layout.rooms):
            special = layout.special_rooms.get(number)
            rooms.append(
                Room(
                    id=room_id(location, number),
                    number=number,
                    floor=index // ROOMS_PER_FLOOR + 1,
                    status=RoomStatus.AVAILABLE,
                    last_updated=now_ms(),
                    is_manager_room=special.is_manager_room if special else False,
                    linked_room=special.linked_room if special else None,
                    location=location,
                    synced=False,
                )
            )
        return rooms

    async def fetch_remote(self, location: str) -> List[Room]:
        rows = await self.remote.select(ROOMS_TABLE, filters=[Filter.eq("location", location)])
        return [room_from_row(row) for row in rows]

    async def initialize(self, location: str) -> List[Room]:
        """Load the branch's rooms, preferring the cloud copy.

        Cloud rows replace the local cache, except rooms still waiting in the
        sync queue whose local state is newer. Defaults are seeded only when
        neither store has rooms for the branch.
        """
        if self.connectivity.is_online():
            try:
                cloud_rooms = await self.fetch_remote(location)
            except RemoteDataError as e:
                logger.warning(f"Could not fetch rooms for {location}, using local cache: {e}")
                cloud_rooms = []
            if cloud_rooms:
                local_by_id = {r.id: r for r in self.list_rooms(location)}
                pending = set(self.queue.ids())
                merged = [
                    local_by_id[r.id] if r.id in pending and r.id in local_by_id else r
                    for r in cloud_rooms
                ]
                merged_ids = {r.id for r in merged}
                merged.extend(r for r in local_by_id.values() if r.id in pending and r.id not in merged_ids)
                self._save_location(location, merged)
                logger.info(f"Loaded {len(cloud_rooms)} rooms for {location} from remote")
                return self.list_rooms(location)

        existing = self.list_rooms(location)
        if existing:
            return existing

        rooms = self.default_rooms(location)
        if not rooms:
            raise ValidationError(f"Unknown location: {location}", field="location")
        self._save_location(location, rooms)
        for room in rooms:
            self.queue.enqueue(room.id)
        logger.info(f"Seeded {len(rooms)} default rooms for {location}")

        for room in rooms:
            await self.queue.attempt(room)
        return self.list_rooms(location)

    # ==================== TRANSITIONS ====================

    async def _transition(
        self,
        location: str,
        number: str,
        target: RoomStatus,
        guest_name: Optional[str] = None,
        check_in: Optional[dt.date] = None,
        check_out: Optional[dt.date] = None,
    ) -> ServiceResult[Room]:
        room = self.require_room(location, number)
        if room.is_manager_room:
            raise RoomTransitionError(room.id, room.status.value, target.value, "manager rooms are locked")
        if target not in ALLOWED_TRANSITIONS[room.status]:
            raise RoomTransitionError(room.id, room.status.value, target.value)

        updated = room.with_status(target, guest_name=guest_name, check_in=check_in, check_out=check_out)
        self._replace(updated)
        self.queue.enqueue(updated.id)
        logger.info(f"Room {updated.id}: {room.status.value} -> {target.value}")

        if await self.queue.attempt(updated):
            return ServiceResult.ok(self.get_room_by_id(updated.id))
        return ServiceResult.failed("Room update saved locally and queued for sync", payload=updated, queued=True)

    async def check_in(
        self,
        location: str,
        number: str,
        guest_name: str,
        check_in: Optional[dt.date],
        check_out: Optional[dt.date] = None,
    ) -> ServiceResult[Room]:
        """Occupy a room; a guest and a check-in date are mandatory."""
        if not guest_name or not guest_name.strip():
            raise ValidationError("Guest name is required to check in", field="guest_name")
        if check_in is None:
            raise ValidationError("Check-in date is required", field="check_in")
        return await self._transition(
            location, number, RoomStatus.OCCUPIED,
            guest_name=guest_name.strip(), check_in=check_in, check_out=check_out,
        )

    async def check_out(
        self, location: str, number: str, check_out: Optional[dt.date] = None
    ) -> ServiceResult[Room]:
        """Release an occupied room; guest fields are cleared afterwards."""
        room = self.require_room(location, number)
        if room.status is not RoomStatus.OCCUPIED and not room.is_manager_room:
            raise RoomTransitionError(room.id, room.status.value, RoomStatus.AVAILABLE.value, "room is not occupied")
        departure = check_out or dt.date.today()
        logger.info(f"Checking out {room.guest_name} from room {room.id} on {departure.isoformat()}")
        return await self._transition(location, number, RoomStatus.AVAILABLE)

    async def set_maintenance(self, location: str, number: str) -> ServiceResult[Room]:
        return await self._transition(location, number, RoomStatus.MAINTENANCE)

    async def release_maintenance(self, location: str, number: str) -> ServiceResult[Room]:
        room = self.require_room(location, number)
        if room.status is not RoomStatus.MAINTENANCE and not room.is_manager_room:
            raise RoomTransitionError(room.id, room.status.value, RoomStatus.AVAILABLE.value, "room is not under maintenance")
        return await self._transition(location, number, RoomStatus.AVAILABLE)

"""Room status routes.

Room numbers such as ``11/13`` contain a slash, so the room is always passed
as the ``number`` query parameter rather than in the path.
"""

from typing import Optional

from fastapi import APIRouter, Query

from frontdesk.container import Container
from frontdesk.core.responses import list_response, result_response
from frontdesk.schemas.common import RoomStatus
from frontdesk.schemas.room import CheckInRequest, CheckOutRequest, Room, RoomStats

router = APIRouter()


@router.post("/{location}/initialize")
async def initialize_rooms(location: str, container: Container):
    """Load the branch's rooms from the cloud, or seed the defaults."""
    return list_response(await container.rooms.initialize(location))


@router.get("/{location}")
def list_rooms(
    location: str,
    container: Container,
    status: Optional[RoomStatus] = Query(None),
    floor: Optional[int] = Query(None, ge=1),
):
    rooms_service = container.rooms
    if status is RoomStatus.AVAILABLE:
        rooms = rooms_service.available_rooms(location)
    elif status is RoomStatus.OCCUPIED:
        rooms = rooms_service.occupied_rooms(location)
    elif status is RoomStatus.MAINTENANCE:
        rooms = rooms_service.maintenance_rooms(location)
    else:
        rooms = rooms_service.list_rooms(location)
    if floor is not None:
        rooms = [room for room in rooms if room.floor == floor]
    return list_response(rooms)


@router.get("/{location}/stats", response_model=RoomStats)
def room_stats(location: str, container: Container):
    return container.rooms.stats(location)


@router.get("/{location}/room", response_model=Room)
def get_room(location: str, container: Container, number: str = Query(...)):
    return container.rooms.require_room(location, number)


@router.post("/{location}/check-in")
async def check_in(location: str, data: CheckInRequest, container: Container, number: str = Query(...)):
    result = await container.rooms.check_in(location, number, data.guest_name, data.check_in, data.check_out)
    return result_response(result, "room")


@router.post("/{location}/check-out")
async def check_out(location: str, data: CheckOutRequest, container: Container, number: str = Query(...)):
    result = await container.rooms.check_out(location, number, data.check_out)
    return result_response(result, "room")


@router.post("/{location}/maintenance")
async def set_maintenance(location: str, container: Container, number: str = Query(...)):
    result = await container.rooms.set_maintenance(location, number)
    return result_response(result, "room")


@router.delete("/{location}/maintenance")
async def release_maintenance(location: str, container: Container, number: str = Query(...)):
    result = await container.rooms.release_maintenance(location, number)
    return result_response(result, "room")

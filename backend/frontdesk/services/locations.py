"""Branch registry and per-branch room numbering."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Location:
    id: str
    name: str
    address: str
    full_address: str


@dataclass(frozen=True)
class SpecialRoom:
    display_name: str
    linked_room: Optional[str] = None
    is_manager_room: bool = False


@dataclass(frozen=True)
class RoomLayout:
    """Static room numbering for one branch."""

    rooms: List[str]
    special_rooms: Dict[str, SpecialRoom] = field(default_factory=dict)


LOCATIONS: List[Location] = [
    Location(
        id="musa-yaradua",
        name="Musa Yar'Adua Branch",
        address="20A, Musa Yar'Adua Street",
        full_address="20A, Musa Yar'Adua Street, Victoria Island, Lagos, Nigeria",
    ),
    Location(
        id="adeleke-adedoyin",
        name="Adeleke Adedoyin Branch",
        address="4A, Adeleke Adedoyin Street",
        full_address="4A, Adeleke Adedoyin Street, Victoria Island, Lagos, Nigeria",
    ),
]

ROOM_LAYOUTS: Dict[str, RoomLayout] = {
    "musa-yaradua": RoomLayout(
        rooms=[
            "1", "2", "3", "4", "5", "6", "7", "8", "9", "10",
            "11/13",  # combined room
            "12", "14", "15", "16", "17", "18", "19", "20",
            "21/23",  # combined room
            "22", "24", "25",
        ],
        special_rooms={
            "11/13": SpecialRoom(display_name="Room 11/13", linked_room="13"),
            "21/23": SpecialRoom(display_name="Room 21/23", linked_room="23"),
        },
    ),
    "adeleke-adedoyin": RoomLayout(
        rooms=[str(n) for n in range(1, 31)],
        special_rooms={
            "2": SpecialRoom(display_name="Manager's Room", is_manager_room=True),
        },
    ),
}


def get_location(location_id: str) -> Optional[Location]:
    return next((loc for loc in LOCATIONS if loc.id == location_id), None)


def get_location_name(location_id: str) -> str:
    location = get_location(location_id)
    return location.name if location else location_id


def get_location_address(location_id: str, full: bool = False) -> str:
    location = get_location(location_id)
    if location is None:
        return "Unknown Location"
    return location.full_address if full else location.address


def get_room_layout(location_id: str) -> RoomLayout:
    """Return the room numbering for a branch (empty for unknown branches)."""
    return ROOM_LAYOUTS.get(location_id, RoomLayout(rooms=[]))

"""Room schemas and remote row mapping."""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator

from frontdesk.schemas.common import CamelModel, RoomStatus, now_ms, or_none, parse_date


def room_id(location: str, number: str) -> str:
    return f"{location}-{number}"


def room_sort_key(number: str) -> tuple:
    """Sort rooms numerically on the first part of combined numbers like '11/13'."""
    head = number.split("/")[0]
    try:
        return (int(head), number)
    except ValueError:
        return (float("inf"), number)


class Room(CamelModel):
    """A physical room at a branch; identity is ``<location>-<number>``."""

    id: str
    number: str
    floor: int = 1
    status: RoomStatus = RoomStatus.AVAILABLE
    guest_name: Optional[str] = None
    check_in: Optional[dt.date] = None
    check_out: Optional[dt.date] = None
    last_updated: int = 0
    is_manager_room: bool = False
    linked_room: Optional[str] = None
    location: str
    synced: bool = False

    @field_validator("check_in", "check_out", mode="before")
    @classmethod
    def validate_dates(cls, v: Any) -> Any:
        return parse_date(or_none(v))

    @property
    def display_name(self) -> str:
        if self.is_manager_room:
            return f"Room {self.number} (Manager)"
        return f"Room {self.number}"

    def with_status(
        self,
        status: RoomStatus,
        guest_name: Optional[str] = None,
        check_in: Optional[dt.date] = None,
        check_out: Optional[dt.date] = None,
    ) -> "Room":
        """Return an unsynced copy with a new status.

        Guest fields are kept only while the room is occupied.
        """
        occupied = status is RoomStatus.OCCUPIED
        return self.model_copy(
            update={
                "status": status,
                "guest_name": guest_name if occupied else None,
                "check_in": check_in if occupied else None,
                "check_out": check_out if occupied else None,
                "last_updated": now_ms(),
                "synced": False,
            }
        )


class RoomStats(BaseModel):
    total: int = 0
    available: int = 0
    occupied: int = 0
    maintenance: int = 0
    unsynced: int = 0


class CheckInRequest(BaseModel):
    guest_name: str
    check_in: dt.date
    check_out: Optional[dt.date] = None


class CheckOutRequest(BaseModel):
    check_out: Optional[dt.date] = None


def room_to_row(room: Room) -> Dict[str, Any]:
    return {
        "id": room.id,
        "location": room.location,
        "room_number": room.number,
        "floor": room.floor,
        "status": room.status.value,
        "guest_name": room.guest_name or None,
        "check_in": room.check_in.isoformat() if room.check_in else None,
        "check_out": room.check_out.isoformat() if room.check_out else None,
        "is_manager_room": room.is_manager_room,
        "linked_room": room.linked_room,
        "last_updated": room.last_updated,
    }


def room_from_row(row: Dict[str, Any]) -> Room:
    return Room(
        id=row["id"],
        number=str(row["room_number"]),
        floor=int(row.get("floor") or 1),
        status=row.get("status") or RoomStatus.AVAILABLE,
        guest_name=or_none(row.get("guest_name")),
        check_in=row.get("check_in"),
        check_out=row.get("check_out"),
        last_updated=int(row.get("last_updated") or 0),
        is_manager_room=bool(row.get("is_manager_room")),
        linked_room=or_none(row.get("linked_room")),
        location=row["location"],
        synced=True,
    )


class GuestCheckoutRequest(BaseModel):
    location: str
    room_number: str
    check_out: Optional[dt.date] = None

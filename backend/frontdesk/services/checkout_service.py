"""Guest checkout: release the room, then close out the guest's receipts."""

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from frontdesk.core.exceptions import ValidationError
from frontdesk.schemas.common import RoomStatus
from frontdesk.schemas.receipt import Receipt
from frontdesk.schemas.room import Room
from frontdesk.services.receipt_service import ReceiptService
from frontdesk.services.room_service import RoomService

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    room: Room
    guest_name: str
    check_out: dt.date
    receipts: List[Receipt] = field(default_factory=list)
    room_synced: bool = False
    receipts_synced: bool = False


class CheckoutService:
    def __init__(self, rooms: RoomService, receipts: ReceiptService):
        self.rooms = rooms
        self.receipts = receipts

    async def check_out(self, location: str, room_number: str, check_out: Optional[dt.date] = None) -> CheckoutResult:
        room = self.rooms.require_room(location, room_number)
        if room.status is not RoomStatus.OCCUPIED or not room.guest_name:
            raise ValidationError(f"Room {room_number} has no guest to check out", field="room_number")

        guest_name = room.guest_name
        departure = check_out or dt.date.today()
        room_result = await self.rooms.check_out(location, room_number, departure)
        receipts_result = await self.receipts.mark_checked_out(room_number, guest_name, location)

        logger.info(f"{guest_name} checked out of {room.id}; {len(receipts_result.payload or [])} receipt(s) closed")
        return CheckoutResult(
            room=room_result.payload,
            guest_name=guest_name,
            check_out=departure,
            receipts=receipts_result.payload or [],
            room_synced=room_result.success,
            receipts_synced=receipts_result.success,
        )

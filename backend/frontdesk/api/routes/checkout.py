"""Guest checkout route."""

from fastapi import APIRouter

from frontdesk.container import Container
from frontdesk.schemas.room import GuestCheckoutRequest

router = APIRouter()


@router.post("/")
async def check_out_guest(data: GuestCheckoutRequest, container: Container):
    """Release the room and mark the guest's receipts checked out."""
    result = await container.checkout.check_out(data.location, data.room_number, data.check_out)
    return {
        "room": result.room,
        "guest_name": result.guest_name,
        "check_out": result.check_out,
        "receipts": result.receipts,
        "room_synced": result.room_synced,
        "receipts_synced": result.receipts_synced,
    }

"""Restaurant bill routes."""

from fastapi import APIRouter, Query, status

from frontdesk.container import Container
from frontdesk.core.responses import list_response, result_response
from frontdesk.schemas.bill import Bill, BillCreate

router = APIRouter()


@router.get("/")
def list_bills(container: Container):
    return list_response(container.bills.list_all())


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_bill(data: BillCreate, container: Container):
    result = await container.bills.create(data)
    return result_response(result, "bill")


@router.get("/room")
async def bills_for_room(
    container: Container,
    room_number: str = Query(...),
    location: str = Query(...),
    guest_name: str = Query(...),
):
    """Bills charged to a room by the current guest."""
    return list_response(await container.bills.fetch_for_room(room_number, location, guest_name))


@router.get("/{bill_id}", response_model=Bill)
def get_bill(bill_id: str, container: Container):
    return container.bills.require(bill_id)

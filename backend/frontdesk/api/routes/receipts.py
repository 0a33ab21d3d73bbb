"""Receipt routes."""

from typing import Optional

from fastapi import APIRouter, Query, status

from frontdesk.container import Container
from frontdesk.core.responses import list_response, result_response
from frontdesk.schemas.receipt import CheckedOutUpdate, Receipt, ReceiptCreate, ReceiptStats

router = APIRouter()


@router.get("/")
def list_receipts(
    container: Container,
    location: Optional[str] = Query(None),
    synced: Optional[bool] = Query(None),
):
    """Local receipts, newest first."""
    return list_response(container.receipts.list_all(location=location, synced=synced))


@router.get("/search")
def search_receipts(container: Container, q: str = Query(..., min_length=1)):
    return list_response(container.receipts.search(q))


@router.get("/stats/{location}", response_model=ReceiptStats)
def receipt_stats(location: str, container: Container):
    return container.receipts.location_stats(location)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_receipt(data: ReceiptCreate, container: Container):
    """Issue a receipt. Saved locally even when the cloud write fails."""
    result = await container.receipts.create(data)
    return result_response(result, "receipt")


@router.post("/pull")
async def pull_receipts(container: Container):
    """Merge receipts issued on other devices into the local cache."""
    result = await container.receipts.pull_remote()
    return {"fetched": result.fetched, "added": result.added, "errors": result.errors}


@router.post("/checked-out")
async def mark_checked_out(data: CheckedOutUpdate, container: Container):
    result = await container.receipts.mark_checked_out(data.room_number, data.guest_name, data.location)
    return result_response(result, "receipts")


@router.get("/{receipt_id}", response_model=Receipt)
def get_receipt(receipt_id: str, container: Container):
    return container.receipts.require(receipt_id)

"""Menu routes: cached catalog reads and online-only management."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from frontdesk.container import Container
from frontdesk.core.exceptions import RemoteDataError
from frontdesk.core.responses import list_response
from frontdesk.schemas.menu import MenuItemCreate, MenuItemUpdate
from frontdesk.services.result import ServiceResult

router = APIRouter()


class AvailabilityUpdate(BaseModel):
    available: bool


def _unwrap(result: ServiceResult):
    if not result.success:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result.error)
    return result.payload


@router.get("/")
def list_menu(container: Container, category: Optional[str] = Query(None)):
    menu = container.menu
    items = menu.by_category(category) if category else menu.list_all()
    last_sync = menu.last_sync_time()
    return {**list_response(items), "last_sync": last_sync}


@router.get("/categories")
def list_categories(container: Container):
    return container.menu.categories()


@router.post("/refresh")
async def refresh_menu(container: Container):
    return list_response(await container.menu.refresh())


@router.get("/manage")
async def list_all_items(container: Container):
    """Every item including unavailable ones, straight from the cloud."""
    try:
        items = await container.menu.list_remote()
    except RemoteDataError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return list_response(items)


@router.post("/items", status_code=status.HTTP_201_CREATED)
async def create_item(data: MenuItemCreate, container: Container):
    return _unwrap(await container.menu.create_item(data))


@router.patch("/items/{item_id}")
async def update_item(item_id: str, data: MenuItemUpdate, container: Container):
    return _unwrap(await container.menu.update_item(item_id, data))


@router.post("/items/{item_id}/availability")
async def set_availability(item_id: str, data: AvailabilityUpdate, container: Container):
    return _unwrap(await container.menu.toggle_availability(item_id, data.available))


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(item_id: str, container: Container):
    _unwrap(await container.menu.delete_item(item_id))

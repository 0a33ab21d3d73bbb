"""Branch registry routes."""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException, status

from frontdesk.core.responses import list_response
from frontdesk.services.locations import LOCATIONS, get_location, get_room_layout

router = APIRouter()


@router.get("/")
def list_locations():
    return list_response([asdict(location) for location in LOCATIONS])


@router.get("/{location_id}")
def get_location_detail(location_id: str):
    location = get_location(location_id)
    if location is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
    layout = get_room_layout(location_id)
    return {**asdict(location), "rooms": layout.rooms}

"""Sync routes for the offline-first write queues."""

from fastapi import APIRouter

from frontdesk.container import Container
from frontdesk.schemas.sync import ConnectivityUpdate, SyncStatusResponse

router = APIRouter()


@router.get("/status", response_model=SyncStatusResponse)
def sync_status(container: Container):
    """Online flag and queued record counts per entity type."""
    return container.sync.status()


@router.post("/drain", response_model=SyncStatusResponse)
async def drain_queues(container: Container):
    """Push every queued record now. Does nothing while offline."""
    await container.sync.drain_all()
    return container.sync.status()


@router.post("/connectivity", response_model=SyncStatusResponse)
async def set_connectivity(data: ConnectivityUpdate, container: Container):
    """Report the connection state; going online drains the queues."""
    await container.connectivity.set_online(data.online)
    return container.sync.status()


@router.post("/probe", response_model=SyncStatusResponse)
async def probe_connectivity(container: Container):
    await container.connectivity.probe()
    return container.sync.status()

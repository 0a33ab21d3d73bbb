"""Sync status schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel


class SyncCounts(BaseModel):
    success: int = 0
    failed: int = 0
    skipped: int = 0


class SyncStatusResponse(BaseModel):
    online: bool
    queued: Dict[str, int]
    total_queued: int
    last_drain_at: Optional[datetime] = None
    last_result: Optional[Dict[str, SyncCounts]] = None


class ConnectivityUpdate(BaseModel):
    online: bool

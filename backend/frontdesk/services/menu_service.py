"""
Menu Service
Read-through cache of the restaurant menu.

The remote ``menu_items`` table is authoritative. Reads are served from a
local cache refreshed on demand; edits go straight to the remote table and
are refused while offline.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from frontdesk.core.exceptions import RemoteDataError, ValidationError
from frontdesk.schemas.common import now_ms
from frontdesk.schemas.menu import MenuItem, MenuItemCreate, MenuItemUpdate, menu_item_from_row, menu_values_to_row
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.local_store import LocalStore, StorageKeys
from frontdesk.services.remote.base import Filter, RemoteDataService
from frontdesk.services.result import ServiceResult

logger = logging.getLogger(__name__)

MENU_TABLE = "menu_items"
ALL_CATEGORIES = "All"


class MenuService:
    def __init__(
        self,
        store: LocalStore,
        remote: RemoteDataService,
        connectivity: ConnectivityMonitor,
        keys: Optional[StorageKeys] = None,
    ):
        self.store = store
        self.remote = remote
        self.connectivity = connectivity
        self.keys = keys or StorageKeys()

    # ==================== CACHE ====================

    def list_all(self) -> List[MenuItem]:
        return [MenuItem.model_validate(item) for item in self.store.get(self.keys.menu_items, [])]

    def list_available(self) -> List[MenuItem]:
        return [item for item in self.list_all() if item.available]

    def by_category(self, category: str) -> List[MenuItem]:
        items = self.list_available()
        if category == ALL_CATEGORIES:
            return items
        return [item for item in items if item.category == category]

    def categories(self) -> List[str]:
        return [ALL_CATEGORIES, *sorted({item.category for item in self.list_all()})]

    def _save_cache(self, items: List[MenuItem]) -> None:
        items = sorted(items, key=lambda item: (item.category, item.name))
        self.store.set(self.keys.menu_items, [item.to_local() for item in items])

    def _patch_cache(self, item: MenuItem) -> None:
        cached = [cached for cached in self.list_all() if cached.id != item.id]
        if item.available:
            cached.append(item)
        self._save_cache(cached)

    def last_sync_time(self) -> Optional[datetime]:
        stamp = self.store.get(self.keys.menu_last_sync)
        if stamp is None:
            return None
        return datetime.fromtimestamp(int(stamp) / 1000, tz=timezone.utc)

    async def refresh(self) -> List[MenuItem]:
        """Reload available items from the remote table into the cache.

        Falls back to the cached items when offline, when the remote call
        fails, or when the remote table is empty.
        """
        if not self.connectivity.is_online():
            logger.info("Offline, serving cached menu")
            return self.list_all()
        try:
            rows = await self.remote.select(
                MENU_TABLE,
                filters=[Filter.eq("available", True)],
                order=[("category", True), ("name", True)],
            )
        except RemoteDataError as e:
            logger.warning(f"Menu refresh failed, serving cache: {e}")
            return self.list_all()

        if not rows:
            logger.warning("Remote menu is empty, keeping cached items")
            return self.list_all()

        items = [menu_item_from_row(row) for row in rows]
        self._save_cache(items)
        self.store.set(self.keys.menu_last_sync, now_ms())
        logger.info(f"Loaded {len(items)} menu items from remote")
        return items

    # ==================== MANAGEMENT ====================

    async def list_remote(self) -> List[MenuItem]:
        """Every item including unavailable ones, for menu management."""
        rows = await self.remote.select(MENU_TABLE, order=[("category", True), ("name", True)])
        return [menu_item_from_row(row) for row in rows]

    def _offline(self) -> Optional[ServiceResult]:
        if self.connectivity.is_online():
            return None
        return ServiceResult.failed("Menu changes need a connection")

    async def create_item(self, data: MenuItemCreate) -> ServiceResult[MenuItem]:
        offline = self._offline()
        if offline:
            return offline
        row = menu_values_to_row({"id": str(uuid.uuid4()), **data.model_dump()})
        try:
            created = await self.remote.insert(MENU_TABLE, [row])
        except RemoteDataError as e:
            logger.warning(f"Could not create menu item {data.name}: {e}")
            return ServiceResult.failed(str(e))
        item = menu_item_from_row(created[0] if created else row)
        self._patch_cache(item)
        return ServiceResult.ok(item)

    async def update_item(self, item_id: str, data: MenuItemUpdate) -> ServiceResult[MenuItem]:
        values = data.model_dump(exclude_unset=True)
        if not values:
            raise ValidationError("No fields to update")
        offline = self._offline()
        if offline:
            return offline
        try:
            rows = await self.remote.update(MENU_TABLE, menu_values_to_row(values), [Filter.eq("id", item_id)])
        except RemoteDataError as e:
            logger.warning(f"Could not update menu item {item_id}: {e}")
            return ServiceResult.failed(str(e))
        if not rows:
            return ServiceResult.failed(f"Menu item {item_id} not found")
        item = menu_item_from_row(rows[0])
        self._patch_cache(item)
        return ServiceResult.ok(item)

    async def toggle_availability(self, item_id: str, available: bool) -> ServiceResult[MenuItem]:
        return await self.update_item(item_id, MenuItemUpdate(available=available))

    async def delete_item(self, item_id: str) -> ServiceResult[None]:
        offline = self._offline()
        if offline:
            return offline
        try:
            await self.remote.delete(MENU_TABLE, [Filter.eq("id", item_id)])
        except RemoteDataError as e:
            logger.warning(f"Could not delete menu item {item_id}: {e}")
            return ServiceResult.failed(str(e))
        self._save_cache([item for item in self.list_all() if item.id != item_id])
        return ServiceResult.ok()

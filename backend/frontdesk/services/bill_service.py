"""
Bill Service
Restaurant point-of-sale bills, optionally charged to a room.

Bills follow the same write-through path as receipts: local first, then a
queued insert into the remote ``restaurant_bills`` table.
"""

import datetime as dt
import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from frontdesk.core.config import settings
from frontdesk.core.exceptions import NotFoundError, RemoteDataError, ValidationError
from frontdesk.schemas.bill import Bill, BillCreate, BillItem, bill_from_row, bill_to_row
from frontdesk.schemas.common import now_ms
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.local_store import LocalStore, StorageKeys
from frontdesk.services.remote.base import Filter, RemoteDataService
from frontdesk.services.result import ServiceResult
from frontdesk.services.sync_queue import SyncQueue, same_state
from frontdesk.services.tax import TaxConfig, compute_tax, round2, to_decimal

logger = logging.getLogger(__name__)

BILLS_TABLE = "restaurant_bills"


def _same_guest(a: Optional[str], b: Optional[str]) -> bool:
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()


class BillService:
    """Restaurant bill issuing and room-charge lookup."""

    def __init__(
        self,
        store: LocalStore,
        remote: RemoteDataService,
        connectivity: ConnectivityMonitor,
        keys: Optional[StorageKeys] = None,
        tax_config: Optional[TaxConfig] = None,
    ):
        self.store = store
        self.remote = remote
        self.connectivity = connectivity
        self.keys = keys or StorageKeys()
        self.tax_config = tax_config or TaxConfig.from_settings()
        self.queue: SyncQueue[Bill] = SyncQueue(
            name="bills",
            store=store,
            key=self.keys.bills_sync_queue,
            connectivity=connectivity,
            load=self.get,
            push=self._push,
            mark_synced=self._mark_synced,
        )

    def _load(self) -> List[Bill]:
        return [Bill.model_validate(item) for item in self.store.get(self.keys.bills, [])]

    def _save(self, bills: List[Bill]) -> None:
        self.store.set(self.keys.bills, [b.to_local() for b in bills])

    def _mark_synced(self, pushed: Bill) -> bool:
        if not same_state(self.get(pushed.id), pushed):
            return False
        self._save([b.model_copy(update={"synced": True}) if b.id == pushed.id else b for b in self._load()])
        return True

    async def _push(self, bill: Bill) -> None:
        await self.remote.upsert(BILLS_TABLE, [bill_to_row(bill)], on_conflict="id")

    def next_bill_number(self, on: Optional[dt.date] = None) -> str:
        """Daily sequence derived from the bills already stored on this install.

        Two devices issuing bills on the same day can produce the same number.
        """
        day = on or dt.date.today()
        prefix = f"{settings.bill_prefix}-{day:%Y%m%d}"
        issued_today = sum(1 for b in self._load() if b.bill_number.startswith(prefix))
        return f"{prefix}-{issued_today + 1:04d}"

    async def create(self, data: BillCreate) -> ServiceResult[Bill]:
        if not data.items:
            raise ValidationError("A bill needs at least one item", field="items")
        if data.room_number and not data.room_location:
            raise ValidationError("Room charges need the room's location", field="room_location")

        items = [
            BillItem(
                id=uuid.uuid4().hex,
                menu_item_id=item.menu_item_id,
                name=item.name,
                quantity=item.quantity,
                price_per_unit=to_decimal(item.price_per_unit),
                subtotal=round2(to_decimal(item.price_per_unit) * item.quantity),
            )
            for item in data.items
        ]
        subtotal = sum((item.subtotal for item in items), Decimal("0"))

        tax_fields: Dict[str, Optional[Decimal]] = {}
        total = subtotal
        if data.include_tax:
            breakdown = compute_tax(subtotal, self.tax_config)
            total = breakdown.total_with_tax
            tax_fields = {
                "subtotal": subtotal,
                "vat_amount": breakdown.vat,
                "consumption_tax_amount": breakdown.consumption_tax,
                "total_with_tax": breakdown.total_with_tax,
            }

        today = dt.date.today()
        bill = Bill(
            id=str(uuid.uuid1()),
            bill_number=self.next_bill_number(today),
            customer_name=data.customer_name,
            room_number=data.room_number,
            room_location=data.room_location,
            guest_name=(data.guest_name or "").strip() or None,
            items=items,
            total=total,
            date=today,
            timestamp=now_ms(),
            staff_name=data.staff_name,
            include_tax=data.include_tax,
            synced=False,
            **tax_fields,
        )

        bills = self._load()
        bills.append(bill)
        self._save(bills)
        self.queue.enqueue(bill.id)
        logger.info(f"Bill {bill.bill_number} saved locally ({len(items)} item(s), total {total})")

        if await self.queue.attempt(bill):
            return ServiceResult.ok(self.get(bill.id))
        return ServiceResult.failed("Bill saved locally and queued for sync", payload=bill, queued=True)

    def list_all(self) -> List[Bill]:
        return sorted(self._load(), key=lambda b: b.timestamp, reverse=True)

    def get(self, bill_id: str) -> Optional[Bill]:
        return next((b for b in self._load() if b.id == bill_id), None)

    def require(self, bill_id: str) -> Bill:
        bill = self.get(bill_id)
        if bill is None:
            raise NotFoundError("Bill", bill_id)
        return bill

    def unsynced_count(self) -> int:
        return len(self.queue)

    def _local_for_room(self, room_number: str, location: str, guest_name: str) -> List[Bill]:
        return [
            b for b in self.list_all()
            if b.room_number == room_number
            and b.room_location == location
            and _same_guest(b.guest_name, guest_name)
        ]

    async def fetch_for_room(self, room_number: str, location: str, guest_name: str) -> List[Bill]:
        """Bills charged to a room by the given guest.

        Queries the remote table and merges local bills that have not synced
        yet. Falls back to the local cache when offline or on remote failure.
        Bills without a guest name are never attributed to anyone.
        """
        local = self._local_for_room(room_number, location, guest_name)
        if not self.connectivity.is_online():
            return local

        try:
            rows = await self.remote.select(
                BILLS_TABLE,
                filters=[Filter.eq("room_number", room_number), Filter.eq("room_location", location)],
                order=[("timestamp", False)],
            )
        except RemoteDataError as e:
            logger.warning(f"Bill lookup for room {room_number} failed, using local bills: {e}")
            return local

        by_id: Dict[str, Bill] = {}
        for row in rows:
            try:
                bill = bill_from_row(row)
            except (KeyError, ValueError, InvalidOperation) as e:
                logger.warning(f"Skipping malformed remote bill {row.get('id')}: {e}")
                continue
            if _same_guest(bill.guest_name, guest_name):
                by_id[bill.id] = bill
        for bill in local:
            if not bill.synced or bill.id not in by_id:
                by_id[bill.id] = bill
        return sorted(by_id.values(), key=lambda b: b.timestamp, reverse=True)

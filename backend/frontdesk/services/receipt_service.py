"""
Receipt Service
Issues front-desk payment receipts and keeps them in sync with the cloud.

Receipts are an append-only ledger: they are written locally first, queued,
and inserted into the remote ``receipts`` table. Checking a guest out is the
only mutation a receipt ever sees after creation.
"""

import datetime as dt
import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from frontdesk.core.config import settings
from frontdesk.core.exceptions import NotFoundError, RemoteDataError, ValidationError
from frontdesk.schemas.common import RoomStatus, now_ms
from frontdesk.schemas.receipt import Receipt, ReceiptCreate, ReceiptStats, RoomDetail, receipt_from_row, receipt_to_row
from frontdesk.services.amount_words import number_to_words
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.local_store import LocalStore, StorageKeys
from frontdesk.services.remote.base import Filter, RemoteDataService
from frontdesk.services.result import PullResult, ServiceResult
from frontdesk.services.room_service import RoomService
from frontdesk.services.sync_queue import SyncQueue, same_state
from frontdesk.services.tax import TaxConfig, compute_service_charge, compute_tax, round2, to_decimal

logger = logging.getLogger(__name__)

RECEIPTS_TABLE = "receipts"


def _normalize(name: Optional[str]) -> str:
    return (name or "").strip().lower()


def receipt_matches_guest(receipt: Receipt, room_number: str, guest_name: str) -> bool:
    """Whether *guest_name* is the guest this receipt covers in *room_number*.

    A per-room guest recorded in ``room_details`` is authoritative for that
    room. Otherwise the customer name or any listed guest name may match.
    Comparison ignores case and surrounding whitespace.
    """
    target = _normalize(guest_name)
    if not target:
        return False
    for detail in receipt.room_details or []:
        if detail.room_number == room_number and detail.guest_name:
            return _normalize(detail.guest_name) == target
    names = [receipt.customer_name, *receipt.guest_names]
    return any(_normalize(name) == target for name in names)


class ReceiptService:
    """Receipt issuing, lookup and cloud reconciliation."""

    def __init__(
        self,
        store: LocalStore,
        remote: RemoteDataService,
        connectivity: ConnectivityMonitor,
        rooms: RoomService,
        keys: Optional[StorageKeys] = None,
        tax_config: Optional[TaxConfig] = None,
    ):
        self.store = store
        self.remote = remote
        self.connectivity = connectivity
        self.rooms = rooms
        self.keys = keys or StorageKeys()
        self.tax_config = tax_config or TaxConfig.from_settings()
        self.queue: SyncQueue[Receipt] = SyncQueue(
            name="receipts",
            store=store,
            key=self.keys.receipts_sync_queue,
            connectivity=connectivity,
            load=self.get,
            push=self._push,
            mark_synced=self._mark_synced,
        )

    # ==================== LOCAL CACHE ====================

    def _load(self) -> List[Receipt]:
        return [Receipt.model_validate(item) for item in self.store.get(self.keys.receipts, [])]

    def _save(self, receipts: List[Receipt]) -> None:
        self.store.set(self.keys.receipts, [r.to_local() for r in receipts])

    def _update(self, receipt: Receipt) -> None:
        self._save([receipt if r.id == receipt.id else r for r in self._load()])

    def _mark_synced(self, pushed: Receipt) -> bool:
        receipt = self.get(pushed.id)
        if not same_state(receipt, pushed):
            return False
        self._update(receipt.model_copy(update={"synced": True}))
        return True

    async def _push(self, receipt: Receipt) -> None:
        # Upsert so a receipt re-queued after checkout overwrites its remote row
        await self.remote.upsert(RECEIPTS_TABLE, [receipt_to_row(receipt)], on_conflict="id")

    def next_serial_number(self) -> str:
        """Advance the per-install counter and format the next serial."""
        counter = int(self.store.get(self.keys.receipt_counter, settings.serial_start))
        counter += 1
        self.store.set(self.keys.receipt_counter, counter)
        return f"{settings.serial_prefix}-{counter}"

    # ==================== CREATE ====================

    def _validate(self, data: ReceiptCreate) -> List[str]:
        if not data.customer_name or not data.customer_name.strip():
            raise ValidationError("Customer name is required", field="customer_name")

        if data.room_details:
            room_numbers = [detail.room_number.strip() for detail in data.room_details]
        else:
            room_numbers = [n.strip() for n in (data.room_number or "").split(",") if n.strip()]
        if not room_numbers:
            raise ValidationError("At least one room is required", field="room_number")
        if len(set(room_numbers)) != len(room_numbers):
            raise ValidationError("A room can only appear once per receipt", field="room_details")

        if data.payment_mode.requires_company and not (data.company_name or "").strip():
            raise ValidationError("Company name is required for Bill to Company", field="company_name")

        if data.is_extension and not data.original_receipt_id:
            raise ValidationError("Extension receipts must reference the original receipt", field="original_receipt_id")

        if data.check_in and not data.is_extension:
            for number in room_numbers:
                room = self.rooms.require_room(data.location, number)
                if room.is_manager_room:
                    raise ValidationError(f"{room.display_name} cannot be booked", field="room_number")
                if room.status is not RoomStatus.AVAILABLE:
                    raise ValidationError(f"Room {number} is {room.status.value}", field="room_number")
        return room_numbers

    @staticmethod
    def _subtotal(data: ReceiptCreate) -> Decimal:
        if data.amount is not None:
            return to_decimal(data.amount)
        if data.room_details:
            return sum((detail.subtotal for detail in data.room_details), Decimal("0"))
        if data.number_of_days and data.daily_rate is not None:
            return to_decimal(data.daily_rate) * data.number_of_days
        return Decimal("0")

    async def create(self, data: ReceiptCreate) -> ServiceResult[Receipt]:
        """Issue a receipt, persist it locally and try to push it.

        Validation errors are raised before anything is written. A check-in
        receipt (not an extension) also occupies each of its rooms.
        """
        room_numbers = self._validate(data)
        subtotal = round2(self._subtotal(data))
        if subtotal <= 0:
            raise ValidationError("Amount must be greater than zero", field="amount")

        vat = consumption = total_with_tax = None
        amount = subtotal
        if data.include_tax:
            breakdown = compute_tax(subtotal, self.tax_config)
            vat, consumption, total_with_tax = breakdown.vat, breakdown.consumption_tax, breakdown.total_with_tax
            amount = total_with_tax

        service_charge = None
        if data.include_service_charge:
            service_charge = compute_service_charge(subtotal, self.tax_config)

        issued_on = data.date or dt.date.today()
        number_of_days = data.number_of_days
        if number_of_days is None and data.room_details:
            number_of_days = max(detail.number_of_days for detail in data.room_details)

        receipt = Receipt(
            id=str(uuid.uuid1()),
            serial_number=self.next_serial_number(),
            customer_name=data.customer_name.strip(),
            room_number=", ".join(room_numbers),
            amount_figures=amount,
            amount_words=number_to_words(amount, settings.currency_name),
            payment_mode=data.payment_mode,
            company_name=(data.company_name or "").strip() or None,
            receptionist_name=data.receptionist_name,
            location=data.location,
            date=issued_on,
            timestamp=now_ms(),
            number_of_days=number_of_days,
            daily_rate=data.daily_rate,
            room_details=data.room_details,
            guest_names=[name.strip() for name in data.guest_names if name.strip()],
            is_extension=data.is_extension,
            original_receipt_id=data.original_receipt_id,
            payment_for_dates=data.payment_for_dates,
            include_tax=data.include_tax,
            vat_amount=vat,
            consumption_tax_amount=consumption,
            total_with_tax=total_with_tax,
            include_service_charge=data.include_service_charge,
            service_charge_amount=service_charge,
            synced=False,
        )

        receipts = self._load()
        receipts.append(receipt)
        self._save(receipts)
        self.queue.enqueue(receipt.id)
        logger.info(f"Receipt {receipt.serial_number} saved locally for {receipt.customer_name}")

        synced = await self.queue.attempt(receipt)

        if data.check_in and not data.is_extension:
            await self._check_in_rooms(receipt, data, issued_on)

        if synced:
            return ServiceResult.ok(self.get(receipt.id))
        return ServiceResult.failed("Receipt saved locally and queued for sync", payload=receipt, queued=True)

    async def _check_in_rooms(self, receipt: Receipt, data: ReceiptCreate, issued_on: dt.date) -> None:
        check_in = data.check_in_date or issued_on
        check_out = data.check_out_date
        details = {detail.room_number: detail for detail in receipt.room_details or []}
        for number in receipt.room_numbers:
            detail: Optional[RoomDetail] = details.get(number)
            guest = (detail.guest_name if detail and detail.guest_name else None) or receipt.customer_name
            departure = check_out
            if departure is None:
                days = detail.number_of_days if detail else receipt.number_of_days
                if days:
                    departure = check_in + dt.timedelta(days=days)
            await self.rooms.check_in(receipt.location, number, guest, check_in, departure)

    # ==================== QUERIES ====================

    def list_all(self, location: Optional[str] = None, synced: Optional[bool] = None) -> List[Receipt]:
        """Local receipts, newest first, one entry per id."""
        by_id = {}
        for receipt in self._load():
            by_id[receipt.id] = receipt
        receipts = sorted(by_id.values(), key=lambda r: r.timestamp, reverse=True)
        if location is not None:
            receipts = [r for r in receipts if r.location == location]
        if synced is not None:
            receipts = [r for r in receipts if r.synced is synced]
        return receipts

    def get(self, receipt_id: str) -> Optional[Receipt]:
        return next((r for r in self._load() if r.id == receipt_id), None)

    def require(self, receipt_id: str) -> Receipt:
        receipt = self.get(receipt_id)
        if receipt is None:
            raise NotFoundError("Receipt", receipt_id)
        return receipt

    def search(self, query: str) -> List[Receipt]:
        needle = query.strip().lower()
        return [
            r for r in self.list_all()
            if needle in r.serial_number.lower()
            or needle in r.room_number.lower()
            or needle in r.customer_name.lower()
            or needle in r.receptionist_name.lower()
        ]

    def unsynced_count(self) -> int:
        return len(self.queue)

    def location_stats(self, location: str) -> ReceiptStats:
        receipts = self.list_all(location=location)
        return ReceiptStats(
            location=location,
            count=len(receipts),
            total_amount=sum((r.amount_figures for r in receipts), Decimal("0")),
            unsynced=sum(1 for r in receipts if not r.synced),
        )

    def for_guest(self, location: str, room_number: str, guest_name: str, include_checked_out: bool = False) -> List[Receipt]:
        """Receipts of one guest's stay in a room at a branch."""
        return [
            r for r in self.list_all(location=location)
            if room_number in r.room_numbers
            and (include_checked_out or not r.checked_out)
            and receipt_matches_guest(r, room_number, guest_name)
        ]

    # ==================== REMOTE RECONCILIATION ====================

    async def pull_remote(self) -> PullResult:
        """Add remote receipts missing from the local cache.

        Local records are never overwritten.
        """
        result = PullResult()
        try:
            rows = await self.remote.select(RECEIPTS_TABLE, order=[("timestamp", False)])
        except RemoteDataError as e:
            logger.warning(f"Receipt pull failed: {e}")
            result.errors.append(str(e))
            return result

        result.fetched = len(rows)
        receipts = self._load()
        known = {r.id for r in receipts}
        for row in rows:
            try:
                receipt = receipt_from_row(row)
            except (KeyError, ValueError, InvalidOperation) as e:
                logger.warning(f"Skipping malformed remote receipt {row.get('id')}: {e}")
                result.errors.append(str(e))
                continue
            if receipt.id in known:
                continue
            receipts.append(receipt)
            known.add(receipt.id)
            result.added += 1

        if result.added:
            self._save(receipts)
        logger.info(f"Receipt pull: {result.fetched} fetched, {result.added} added")
        return result

    async def mark_checked_out(self, room_number: str, guest_name: str, location: str) -> ServiceResult[List[Receipt]]:
        """Flag every receipt of the departing guest in this room as checked out.

        The local flip always happens. Receipts already in the cloud get one
        batched remote update; queued receipts carry the flag when they sync.
        When the batched update cannot run, the cloud receipts are queued
        again so the flag reaches the remote store on the next drain.
        """
        matched = self.for_guest(location, room_number, guest_name)
        if not matched:
            return ServiceResult.ok([])

        matched_ids = {r.id for r in matched}
        self._save([
            r.model_copy(update={"checked_out": True}) if r.id in matched_ids else r
            for r in self._load()
        ])
        updated = [r for r in self.list_all(location=location) if r.id in matched_ids]
        logger.info(f"Marked {len(updated)} receipt(s) checked out for {guest_name} in room {room_number}")

        remote_ids = [r.id for r in updated if r.synced]
        if not remote_ids:
            return ServiceResult.ok(updated)
        if not self.connectivity.is_online():
            return self._requeue_checked_out(remote_ids, updated, "Offline: checkout queued for sync")
        try:
            await self.remote.update(
                RECEIPTS_TABLE, {"checked_out": True}, [Filter.in_("id", remote_ids)]
            )
        except RemoteDataError as e:
            logger.warning(f"Remote checkout update failed for {len(remote_ids)} receipt(s): {e}")
            return self._requeue_checked_out(remote_ids, updated, str(e))
        return ServiceResult.ok(updated)

    def _requeue_checked_out(
        self, receipt_ids: List[str], updated: List[Receipt], error: str
    ) -> ServiceResult[List[Receipt]]:
        pending = set(receipt_ids)
        self._save([
            r.model_copy(update={"synced": False}) if r.id in pending else r
            for r in self._load()
        ])
        for receipt_id in receipt_ids:
            self.queue.enqueue(receipt_id)
        logger.info(f"Queued {len(receipt_ids)} checked-out receipt(s) for sync")
        payload = [r.model_copy(update={"synced": False}) if r.id in pending else r for r in updated]
        return ServiceResult.failed(error, payload=payload, queued=True)

"""Bank account details printed on Bill-to-Company invoices."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from frontdesk.core.exceptions import RemoteDataError, ValidationError
from frontdesk.schemas.bank_account import (
    SHARED_LOCATION,
    BankAccount,
    BankAccountCreate,
    BankAccountUpdate,
    bank_account_from_row,
)
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.local_store import LocalStore, StorageKeys
from frontdesk.services.remote.base import Filter, RemoteDataService
from frontdesk.services.result import ServiceResult

logger = logging.getLogger(__name__)

BANK_ACCOUNTS_TABLE = "bank_accounts"


class BankAccountService:
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

    def _cache(self) -> Dict[str, dict]:
        return self.store.get(self.keys.bank_accounts, {})

    def cached_account(self, location: Optional[str] = None) -> Optional[BankAccount]:
        cache = self._cache()
        raw = cache.get(location or SHARED_LOCATION) or cache.get(SHARED_LOCATION)
        return BankAccount.model_validate(raw) if raw else None

    def _remember(self, location: Optional[str], account: BankAccount) -> None:
        cache = self._cache()
        cache[location or SHARED_LOCATION] = account.to_local()
        self.store.set(self.keys.bank_accounts, cache)

    async def get_account(self, location: Optional[str] = None) -> Optional[BankAccount]:
        """Newest account for the branch, or the account shared by all branches.

        Served from the local cache when offline or when the lookup fails.
        """
        if not self.connectivity.is_online():
            return self.cached_account(location)

        if location:
            filters = [Filter.or_eq("location", [location, SHARED_LOCATION])]
        else:
            filters = [Filter.eq("location", SHARED_LOCATION)]
        try:
            rows = await self.remote.select(
                BANK_ACCOUNTS_TABLE, filters=filters, order=[("created_at", False)], limit=1
            )
        except RemoteDataError as e:
            logger.warning(f"Bank account lookup failed, using cache: {e}")
            return self.cached_account(location)

        if not rows:
            return self.cached_account(location)
        account = bank_account_from_row(rows[0])
        self._remember(location, account)
        return account

    async def create_account(self, data: BankAccountCreate) -> ServiceResult[BankAccount]:
        if not self.connectivity.is_online():
            return ServiceResult.failed("Bank accounts can only be changed online")
        now = datetime.now(timezone.utc).isoformat()
        row = {
            "id": str(uuid.uuid4()),
            **data.model_dump(),
            "location": data.location or SHARED_LOCATION,
            "created_at": now,
            "updated_at": now,
        }
        try:
            created = await self.remote.insert(BANK_ACCOUNTS_TABLE, [row])
        except RemoteDataError as e:
            logger.warning(f"Could not create bank account: {e}")
            return ServiceResult.failed(str(e))
        account = bank_account_from_row(created[0] if created else row)
        self._remember(account.location, account)
        return ServiceResult.ok(account)

    async def update_account(self, account_id: str, data: BankAccountUpdate) -> ServiceResult[BankAccount]:
        values = data.model_dump(exclude_unset=True)
        if not values:
            raise ValidationError("No fields to update")
        if not self.connectivity.is_online():
            return ServiceResult.failed("Bank accounts can only be changed online")
        values["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            rows = await self.remote.update(BANK_ACCOUNTS_TABLE, values, [Filter.eq("id", account_id)])
        except RemoteDataError as e:
            logger.warning(f"Could not update bank account {account_id}: {e}")
            return ServiceResult.failed(str(e))
        if not rows:
            return ServiceResult.failed(f"Bank account {account_id} not found")
        account = bank_account_from_row(rows[0])
        self._remember(account.location, account)
        return ServiceResult.ok(account)
